from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from fastly_provider.clients.fastly.types import (
    CreateKafkaInput,
    DeleteKafkaInput,
    Kafka,
    ListKafkasInput,
    UpdateKafkaInput,
)
from fastly_provider.core.handlers import KafkaServiceAttributeHandler
from fastly_provider.core.handlers.logging_kafka import delete_kafka, flatten_kafka
from fastly_provider.core.models import ServiceDetail, ServiceVersion
from fastly_provider.core.schema import Resource, ResourceData, ValueType

VCL_ONLY_FIELDS = {"format", "format_version", "placement", "response_condition"}


def resource_data(
    handler: KafkaServiceAttributeHandler,
    service_id: str,
    state: list[dict[str, Any]] | None = None,
    config: list[dict[str, Any]] | None = None,
) -> ResourceData:
    resource = Resource()
    handler.register(resource)
    return ResourceData(
        resource,
        service_id,
        state={"logging_kafka": state} if state is not None else None,
        config={"logging_kafka": config} if config is not None else None,
    )


def http_status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("DELETE", "https://api.fastly.com/service")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"{status_code} error", request=request, response=response
    )


class TestRegister:
    def test_vcl_service_gets_vcl_fields(
        self, vcl_handler: KafkaServiceAttributeHandler
    ) -> None:
        resource = Resource()
        vcl_handler.register(resource)

        block = resource.schema["logging_kafka"]
        assert block.type == ValueType.SET
        assert block.elem is not None
        assert VCL_ONLY_FIELDS <= set(block.elem.schema)
        assert block.elem.schema["format_version"].default == 2

    def test_compute_service_has_no_vcl_fields(
        self, compute_handler: KafkaServiceAttributeHandler
    ) -> None:
        resource = Resource()
        compute_handler.register(resource)

        block = resource.schema["logging_kafka"]
        assert block.elem is not None
        assert not VCL_ONLY_FIELDS & set(block.elem.schema)

    def test_required_and_sensitive_fields(
        self, vcl_handler: KafkaServiceAttributeHandler
    ) -> None:
        attributes = vcl_handler.block_attributes()

        assert [name for name, s in attributes.items() if s.required] == [
            "name",
            "topic",
            "brokers",
        ]
        assert vcl_handler.sensitive_fields == [
            "tls_ca_cert",
            "tls_client_cert",
            "tls_client_key",
            "password",
        ]


class TestBuilders:
    def test_build_create(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_record: dict[str, Any],
    ) -> None:
        record = Resource(vcl_handler.block_attributes()).normalize(kafka_record)

        opts = vcl_handler.build_create(record, service_id, 4)

        assert isinstance(opts, CreateKafkaInput)
        assert opts.service_id == service_id
        assert opts.service_version == 4
        assert opts.name == "kafka-logger"
        assert opts.use_tls is True
        assert opts.format_version == 2
        assert opts.password == "s3cr3t-pa55"

    def test_build_create_for_compute_ignores_vcl_fields(
        self,
        compute_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_record: dict[str, Any],
    ) -> None:
        record = Resource(compute_handler.block_attributes()).normalize(kafka_record)

        opts = compute_handler.build_create(record, service_id, 4)

        assert opts.format == ""
        assert opts.format_version == 0
        assert "format_version" not in opts.form_data()

    def test_build_update_only_sets_given_fields(
        self, vcl_handler: KafkaServiceAttributeHandler, service_id: str
    ) -> None:
        opts = vcl_handler.build_update(
            {"topic": "new-topic", "use_tls": False, "tls_ca_cert": ""},
            "kafka-logger",
            service_id,
            5,
        )

        assert isinstance(opts, UpdateKafkaInput)
        assert opts.name == "kafka-logger"
        assert opts.dict(exclude_none=True) == {
            "service_id": service_id,
            "service_version": 5,
            "name": "kafka-logger",
            "topic": "new-topic",
            "use_tls": False,
            "tls_ca_cert": "",
        }

    def test_build_update_for_compute_drops_vcl_fields(
        self, compute_handler: KafkaServiceAttributeHandler, service_id: str
    ) -> None:
        opts = compute_handler.build_update(
            {"topic": "new-topic", "format": "%h"}, "kafka-logger", service_id, 5
        )

        assert opts.topic == "new-topic"
        assert opts.format is None

    def test_build_delete(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_record: dict[str, Any],
    ) -> None:
        opts = vcl_handler.build_delete(kafka_record, service_id, 7)

        assert opts == DeleteKafkaInput(
            service_id=service_id, service_version=7, name="kafka-logger"
        )


def test_flatten_kafka_prunes_empty_values(kafka_api_response: dict[str, Any]) -> None:
    flattened = flatten_kafka([Kafka.parse_obj(kafka_api_response)])

    assert flattened == [
        {
            "name": "kafka-logger",
            "topic": "access-logs",
            "brokers": "broker1.example.com:9092,broker2.example.com:9092",
            "compression_codec": "lz4",
            "required_acks": "-1",
            "use_tls": True,
            "tls_hostname": "broker.example.com",
            "format": "%h %l %u %t \"%r\" %>s %b",
            "format_version": 2,
            "parse_log_keyvals": False,
            "request_max_bytes": 0,
            "auth_method": "scram-sha-512",
            "user": "fastly",
            "password": "s3cr3t-pa55",
        }
    ]


class TestDeleteKafka:
    @pytest.mark.asyncio
    async def test_not_found_is_success(self, mock_fastly_client: AsyncMock) -> None:
        mock_fastly_client.delete_kafka.side_effect = http_status_error(404)
        opts = DeleteKafkaInput(service_id="id", service_version=1, name="gone")

        await delete_kafka(mock_fastly_client, opts)

        mock_fastly_client.delete_kafka.assert_awaited_once_with(opts)

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_fastly_client: AsyncMock) -> None:
        error = http_status_error(500)
        mock_fastly_client.delete_kafka.side_effect = error

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await delete_kafka(
                mock_fastly_client,
                DeleteKafkaInput(service_id="id", service_version=1, name="x"),
            )

        assert exc_info.value is error


class TestProcess:
    @pytest.mark.asyncio
    async def test_deletes_creates_and_updates(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_record: dict[str, Any],
        mock_fastly_client: AsyncMock,
    ) -> None:
        removed = {"name": "old-logger", "topic": "t", "brokers": "b:9092"}
        added = {"name": "new-logger", "topic": "t", "brokers": "b:9092"}
        changed = {**kafka_record, "topic": "other-logs", "use_tls": False}
        d = resource_data(
            vcl_handler,
            service_id,
            state=[kafka_record, removed],
            config=[changed, added],
        )
        calls = MagicMock()
        mock_fastly_client.delete_kafka.side_effect = calls.delete
        mock_fastly_client.create_kafka.side_effect = calls.create
        mock_fastly_client.update_kafka.side_effect = calls.update

        await vcl_handler.process(d, 6, mock_fastly_client)

        assert [c[0] for c in calls.mock_calls] == ["delete", "create", "update"]
        mock_fastly_client.delete_kafka.assert_awaited_once_with(
            DeleteKafkaInput(service_id=service_id, service_version=6, name="old-logger")
        )
        create_opts = mock_fastly_client.create_kafka.await_args.args[0]
        assert create_opts.name == "new-logger"
        assert create_opts.service_version == 6
        mock_fastly_client.update_kafka.assert_awaited_once_with(
            UpdateKafkaInput(
                service_id=service_id,
                service_version=6,
                name="kafka-logger",
                topic="other-logs",
                use_tls=False,
            )
        )

    @pytest.mark.asyncio
    async def test_nothing_to_do(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_record: dict[str, Any],
        mock_fastly_client: AsyncMock,
    ) -> None:
        d = resource_data(
            vcl_handler, service_id, state=[kafka_record], config=[kafka_record]
        )

        await vcl_handler.process(d, 6, mock_fastly_client)

        mock_fastly_client.delete_kafka.assert_not_awaited()
        mock_fastly_client.create_kafka.assert_not_awaited()
        mock_fastly_client.update_kafka.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_skips_added_records_without_name(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        mock_fastly_client: AsyncMock,
    ) -> None:
        d = resource_data(
            vcl_handler,
            service_id,
            state=[],
            config=[{"name": "", "topic": "t", "brokers": "b:9092"}],
        )

        with patch(
            "fastly_provider.core.handlers.logging_kafka.logger.warning"
        ) as mock_warning:
            await vcl_handler.process(d, 6, mock_fastly_client)

        mock_fastly_client.create_kafka.assert_not_awaited()
        mock_warning.assert_called_once()

    @pytest.mark.asyncio
    async def test_removed_endpoint_already_gone(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_record: dict[str, Any],
        mock_fastly_client: AsyncMock,
    ) -> None:
        d = resource_data(vcl_handler, service_id, state=[kafka_record], config=[])
        mock_fastly_client.delete_kafka.side_effect = http_status_error(404)

        await vcl_handler.process(d, 6, mock_fastly_client)

        mock_fastly_client.delete_kafka.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_api_errors_stop_the_pass(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        mock_fastly_client: AsyncMock,
    ) -> None:
        d = resource_data(
            vcl_handler,
            service_id,
            state=[],
            config=[
                {"name": "a", "topic": "t", "brokers": "b:9092"},
                {"name": "b", "topic": "t", "brokers": "b:9092"},
            ],
        )
        mock_fastly_client.create_kafka.side_effect = http_status_error(400)

        with pytest.raises(httpx.HTTPStatusError):
            await vcl_handler.process(d, 6, mock_fastly_client)

        assert mock_fastly_client.create_kafka.await_count == 1

    @pytest.mark.asyncio
    async def test_logs_do_not_leak_secrets(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_record: dict[str, Any],
        mock_fastly_client: AsyncMock,
    ) -> None:
        d = resource_data(vcl_handler, service_id, state=[], config=[kafka_record])

        with patch(
            "fastly_provider.core.handlers.logging_kafka.logger.debug"
        ) as mock_debug:
            await vcl_handler.process(d, 6, mock_fastly_client)

        logged = " ".join(str(c.args[0]) for c in mock_debug.call_args_list)
        assert "kafka-logger" in logged
        assert "s3cr3t-pa55" not in logged


class TestRead:
    @pytest.mark.asyncio
    async def test_sets_state_from_active_version(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_api_response: dict[str, Any],
        mock_fastly_client: AsyncMock,
    ) -> None:
        mock_fastly_client.list_kafkas.return_value = [
            Kafka.parse_obj(kafka_api_response)
        ]
        service = ServiceDetail(
            id=service_id,
            active_version=ServiceVersion(number=3, active=True),
            version=ServiceVersion(number=4),
        )
        d = resource_data(vcl_handler, service_id)

        await vcl_handler.read(d, service, mock_fastly_client)

        mock_fastly_client.list_kafkas.assert_awaited_once_with(
            ListKafkasInput(service_id=service_id, service_version=3)
        )
        [state] = d.state()["logging_kafka"]
        assert state["name"] == "kafka-logger"
        assert state["use_tls"] is True
        assert state["placement"] == ""
        assert state["format_version"] == 2

    @pytest.mark.asyncio
    async def test_compute_read_drops_vcl_fields(
        self,
        compute_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_api_response: dict[str, Any],
        mock_fastly_client: AsyncMock,
    ) -> None:
        mock_fastly_client.list_kafkas.return_value = [
            Kafka.parse_obj(kafka_api_response)
        ]
        service = ServiceDetail(
            id=service_id, type="wasm", active_version=ServiceVersion(number=3)
        )
        d = resource_data(compute_handler, service_id)

        await compute_handler.read(d, service, mock_fastly_client)

        [state] = d.state()["logging_kafka"]
        assert not VCL_ONLY_FIELDS & set(state)

    @pytest.mark.asyncio
    async def test_lookup_errors_propagate(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        mock_fastly_client: AsyncMock,
    ) -> None:
        error = http_status_error(403)
        mock_fastly_client.list_kafkas.side_effect = error
        service = ServiceDetail(id=service_id, active_version=ServiceVersion(number=3))

        with (
            patch(
                "fastly_provider.core.handlers.logging_kafka.logger.error"
            ) as mock_error,
            pytest.raises(httpx.HTTPStatusError) as exc_info,
        ):
            await vcl_handler.read(
                resource_data(vcl_handler, service_id), service, mock_fastly_client
            )

        assert exc_info.value is error
        assert "version (3)" in mock_error.call_args.args[0]

    @pytest.mark.asyncio
    async def test_state_errors_are_only_logged(
        self,
        vcl_handler: KafkaServiceAttributeHandler,
        service_id: str,
        kafka_api_response: dict[str, Any],
        mock_fastly_client: AsyncMock,
    ) -> None:
        mock_fastly_client.list_kafkas.return_value = [
            Kafka.parse_obj({**kafka_api_response, "format_version": "7"})
        ]
        service = ServiceDetail(id=service_id, active_version=ServiceVersion(number=3))
        d = resource_data(vcl_handler, service_id)

        with patch(
            "fastly_provider.core.handlers.logging_kafka.logger.warning"
        ) as mock_warning:
            await vcl_handler.read(d, service, mock_fastly_client)

        mock_warning.assert_called_once()
        assert "logging_kafka" not in d.state()
