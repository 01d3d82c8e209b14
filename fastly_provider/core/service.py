from typing import Any, Callable, Mapping

from loguru import logger

from fastly_provider.clients.fastly.client import FastlyClient
from fastly_provider.core.handlers import (
    KafkaServiceAttributeHandler,
    ServiceAttributeDefinition,
)
from fastly_provider.core.models import ServiceDetail, ServiceMetadata, ServiceType
from fastly_provider.core.schema import Resource, ResourceData
from fastly_provider.core.utils.set_diff import DiffResult
from fastly_provider.exceptions.core import ConfigurationException

HandlerFactory = Callable[[ServiceMetadata], ServiceAttributeDefinition]

SERVICE_ATTRIBUTE_HANDLERS: list[HandlerFactory] = [
    KafkaServiceAttributeHandler,
]


class ServiceResource:
    """The service resource, composed of one attribute handler per block.

    Handlers register their schema when the resource is built. Reads and reconciliation passes
    run the handlers one after another, in registration order.
    """

    def __init__(
        self,
        metadata: ServiceMetadata,
        handlers: list[ServiceAttributeDefinition] | None = None,
    ):
        self.metadata = metadata
        self.handlers = (
            handlers
            if handlers is not None
            else [factory(metadata) for factory in SERVICE_ATTRIBUTE_HANDLERS]
        )
        self.resource = Resource()
        for handler in self.handlers:
            handler.register(self.resource)

    @classmethod
    def for_service_type(cls, service_type: ServiceType | str) -> "ServiceResource":
        return cls(ServiceMetadata(service_type=ServiceType(service_type)))

    @property
    def keys(self) -> list[str]:
        return [handler.key for handler in self.handlers]

    def resource_data(
        self,
        service_id: str,
        state: Mapping[str, Any] | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> ResourceData:
        return ResourceData(self.resource, service_id, state=state, config=config)

    async def read(self, d: ResourceData, client: FastlyClient) -> ServiceDetail:
        service = await client.get_service_details(d.id)
        if service.type != self.metadata.service_type:
            raise ConfigurationException(
                f"Service {d.id} is of type {service.type}, expected {self.metadata.service_type}"
            )

        for handler in self.handlers:
            await handler.read(d, service, client)
        return service

    async def refresh(
        self, service_id: str, config: Mapping[str, Any], client: FastlyClient
    ) -> tuple[ResourceData, ServiceDetail]:
        """Reads the remote state and pairs it with the desired config."""
        logger.info(f"Refreshing state of service {service_id}")
        refreshed = self.resource_data(service_id)
        service = await self.read(refreshed, client)
        d = self.resource_data(service_id, state=refreshed.state(), config=config)
        return d, service

    def plan(self, d: ResourceData) -> dict[str, DiffResult]:
        return {handler.key: handler.diff(d) for handler in self.handlers}

    async def process(
        self, d: ResourceData, latest_version: int, client: FastlyClient
    ) -> None:
        for handler in self.handlers:
            logger.info(
                f"Processing {handler.key} of service {d.id} on version {latest_version}"
            )
            await handler.process(d, latest_version, client)

    async def apply(
        self,
        d: ResourceData,
        service: ServiceDetail,
        client: FastlyClient,
        activate: bool = False,
    ) -> int | None:
        """
        Reconciles the desired config on a fresh clone of the base version.

        Returns the cloned version number, or None when there was nothing to change.
        """
        if all(diff.is_empty for diff in self.plan(d).values()):
            logger.info(f"Service {d.id} is up to date, nothing to apply")
            return None

        base_version = service.base_version_number
        if base_version is None:
            raise ConfigurationException(f"Service {d.id} has no version to clone")

        cloned = await client.clone_version(d.id, base_version)
        await self.process(d, cloned.number, client)

        if activate:
            await client.activate_version(d.id, cloned.number)
        return cloned.number
