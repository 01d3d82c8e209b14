from types import TracebackType
from typing import Type

import httpx

from fastly_provider.clients.fastly.mixins.kafka import KafkaClientMixin
from fastly_provider.clients.fastly.mixins.service import ServiceClientMixin
from fastly_provider.clients.fastly.utils import get_http_client
from fastly_provider.config.settings import FASTLY_API_URL, FastlySettings
from fastly_provider.log.sensitive import sensitive_log_filter


class FastlyClient(ServiceClientMixin, KafkaClientMixin):
    def __init__(
        self,
        api_key: str,
        base_url: str = FASTLY_API_URL,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_url = base_url.rstrip("/")
        self.client = client or get_http_client(api_key, timeout)
        sensitive_log_filter.hide_sensitive_strings(api_key)
        ServiceClientMixin.__init__(self, self.api_url, self.client)
        KafkaClientMixin.__init__(self, self.api_url, self.client)

    @classmethod
    def from_settings(cls, settings: FastlySettings) -> "FastlyClient":
        sensitive_log_filter.hide_sensitive_strings(
            *settings.get_sensitive_fields_data()
        )
        return cls(
            api_key=settings.api_key,
            base_url=settings.api_url,
            timeout=settings.client_timeout,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "FastlyClient":
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()
