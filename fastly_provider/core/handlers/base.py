from abc import ABC, abstractmethod
from typing import Any

from fastly_provider.clients.fastly.client import FastlyClient
from fastly_provider.core.models import ServiceDetail, ServiceMetadata, ServiceType
from fastly_provider.core.schema import Resource, ResourceData, SchemaSet
from fastly_provider.core.utils.set_diff import DiffResult, SetDiff


class ServiceAttributeDefinition(ABC):
    """A block of the service resource, backed by its own family of API endpoints.

    Every definition registers its schema on the service resource, reconciles the block
    against a service version and refreshes the block state from the API.
    """

    @property
    @abstractmethod
    def key(self) -> str:
        pass

    @abstractmethod
    def register(self, resource: Resource) -> None:
        """Add the block schema to the service resource."""
        pass

    @abstractmethod
    async def process(
        self, d: ResourceData, latest_version: int, client: FastlyClient
    ) -> None:
        """Apply the difference between the old and new block state to the given version."""
        pass

    @abstractmethod
    async def read(
        self, d: ResourceData, service: ServiceDetail, client: FastlyClient
    ) -> None:
        """Refresh the block state from the service's active version."""
        pass

    @abstractmethod
    def diff(self, d: ResourceData) -> DiffResult:
        pass


def _name_key(resource: Any) -> Any:
    if not isinstance(resource, dict):
        raise TypeError(f"resource failed to be type asserted: {resource!r}")
    return resource.get("name")


class DefaultServiceAttributeHandler(ServiceAttributeDefinition):
    def __init__(self, key: str, service_metadata: ServiceMetadata):
        self._key = key
        self._service_metadata = service_metadata
        # the API offers no immutable identifier, blocks are matched by name
        self.set_diff = SetDiff(_name_key)

    @property
    def key(self) -> str:
        return self._key

    @property
    def service_metadata(self) -> ServiceMetadata:
        return self._service_metadata

    @property
    def is_vcl(self) -> bool:
        return self._service_metadata.service_type == ServiceType.VCL

    def get_change(self, d: ResourceData) -> tuple[SchemaSet, SchemaSet]:
        return d.get_change(self.key)

    def diff(self, d: ResourceData) -> DiffResult:
        old_set, new_set = self.get_change(d)
        return self.set_diff.diff(old_set, new_set)
