from typing import Any

import httpx
from loguru import logger

from fastly_provider.clients.fastly.utils import handle_fastly_status_code
from fastly_provider.core.models import ServiceDetail, ServiceVersion
from fastly_provider.exceptions.clients import MissingInputFieldError


class ServiceClientMixin:
    def __init__(self, api_url: str, client: httpx.AsyncClient):
        self.api_url = api_url
        self.client = client

    def _version_url(self, service_id: str, version: int) -> str:
        if not service_id:
            raise MissingInputFieldError("service_id")
        if not version:
            raise MissingInputFieldError("service_version")
        return f"{self.api_url}/service/{service_id}/version/{version}"

    async def get_service_details(self, service_id: str) -> ServiceDetail:
        if not service_id:
            raise MissingInputFieldError("service_id")
        logger.debug(f"Fetching details of service {service_id}")
        response = await self.client.get(f"{self.api_url}/service/{service_id}/details")
        handle_fastly_status_code(response)
        return ServiceDetail.parse_obj(response.json())

    async def _version_action(
        self, service_id: str, version: int, action: str
    ) -> ServiceVersion:
        response = await self.client.put(
            f"{self._version_url(service_id, version)}/{action}"
        )
        handle_fastly_status_code(response)
        result: dict[str, Any] = response.json()
        return ServiceVersion.parse_obj(result)

    async def clone_version(self, service_id: str, version: int) -> ServiceVersion:
        logger.info(f"Cloning version {version} of service {service_id}")
        return await self._version_action(service_id, version, "clone")

    async def activate_version(self, service_id: str, version: int) -> ServiceVersion:
        logger.info(f"Activating version {version} of service {service_id}")
        return await self._version_action(service_id, version, "activate")
