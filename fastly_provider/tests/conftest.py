from typing import Any
from unittest.mock import AsyncMock

import pytest

from fastly_provider.clients.fastly.client import FastlyClient
from fastly_provider.core.handlers import KafkaServiceAttributeHandler
from fastly_provider.core.models import ServiceMetadata, ServiceType

SERVICE_ID = "7i6HN3TK9wS159v2gPAZ8A"


@pytest.fixture
def service_id() -> str:
    return SERVICE_ID


@pytest.fixture
def vcl_handler() -> KafkaServiceAttributeHandler:
    return KafkaServiceAttributeHandler(ServiceMetadata(service_type=ServiceType.VCL))


@pytest.fixture
def compute_handler() -> KafkaServiceAttributeHandler:
    return KafkaServiceAttributeHandler(
        ServiceMetadata(service_type=ServiceType.COMPUTE)
    )


@pytest.fixture
def kafka_record() -> dict[str, Any]:
    return {
        "name": "kafka-logger",
        "topic": "access-logs",
        "brokers": "broker1.example.com:9092,broker2.example.com:9092",
        "required_acks": "-1",
        "compression_codec": "lz4",
        "use_tls": True,
        "tls_hostname": "broker.example.com",
        "auth_method": "scram-sha-512",
        "user": "fastly",
        "password": "s3cr3t-pa55",
    }


@pytest.fixture
def kafka_api_response(service_id: str) -> dict[str, Any]:
    return {
        "service_id": service_id,
        "version": "3",
        "name": "kafka-logger",
        "topic": "access-logs",
        "brokers": "broker1.example.com:9092,broker2.example.com:9092",
        "required_acks": "-1",
        "compression_codec": "lz4",
        "use_tls": "1",
        "tls_ca_cert": None,
        "tls_client_cert": None,
        "tls_client_key": None,
        "tls_hostname": "broker.example.com",
        "format": "%h %l %u %t \"%r\" %>s %b",
        "format_version": "2",
        "placement": None,
        "response_condition": "",
        "parse_log_keyvals": False,
        "request_max_bytes": 0,
        "auth_method": "scram-sha-512",
        "user": "fastly",
        "password": "s3cr3t-pa55",
        "created_at": "2021-06-01T10:00:00Z",
        "updated_at": "2021-06-01T10:00:00Z",
        "deleted_at": None,
    }


@pytest.fixture
def mock_fastly_client() -> AsyncMock:
    return AsyncMock(spec=FastlyClient)
