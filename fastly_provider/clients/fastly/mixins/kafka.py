from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import parse_obj_as

from fastly_provider.clients.fastly.types import (
    CreateKafkaInput,
    DeleteKafkaInput,
    Kafka,
    KafkaPathInput,
    ListKafkasInput,
    NamedKafkaInput,
    UpdateKafkaInput,
)
from fastly_provider.clients.fastly.utils import handle_fastly_status_code


class KafkaClientMixin:
    def __init__(self, api_url: str, client: httpx.AsyncClient):
        self.api_url = api_url
        self.client = client

    def _kafka_url(self, i: KafkaPathInput) -> str:
        i.validate_path()
        url = f"{self.api_url}/service/{i.service_id}/version/{i.service_version}/logging/kafka"
        if isinstance(i, NamedKafkaInput):
            url += f"/{quote(i.name, safe='')}"
        return url

    async def list_kafkas(self, i: ListKafkasInput) -> list[Kafka]:
        response = await self.client.get(self._kafka_url(i))
        handle_fastly_status_code(response)
        return parse_obj_as(list[Kafka], response.json())

    async def create_kafka(self, i: CreateKafkaInput) -> Kafka:
        i.validate_path()
        url = f"{self.api_url}/service/{i.service_id}/version/{i.service_version}/logging/kafka"
        logger.debug(
            f"Creating Kafka logging endpoint {i.name} on service {i.service_id} version {i.service_version}"
        )
        response = await self.client.post(url, data=i.form_data())
        handle_fastly_status_code(response)
        return Kafka.parse_obj(response.json())

    async def update_kafka(self, i: UpdateKafkaInput) -> Kafka:
        logger.debug(
            f"Updating Kafka logging endpoint {i.name} on service {i.service_id} version {i.service_version}"
        )
        response = await self.client.put(self._kafka_url(i), data=i.form_data())
        handle_fastly_status_code(response)
        return Kafka.parse_obj(response.json())

    async def delete_kafka(self, i: DeleteKafkaInput) -> None:
        logger.debug(
            f"Deleting Kafka logging endpoint {i.name} on service {i.service_id} version {i.service_version}"
        )
        response = await self.client.delete(self._kafka_url(i))
        handle_fastly_status_code(
            response, should_log=response.status_code != httpx.codes.NOT_FOUND
        )
