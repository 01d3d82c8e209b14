from typing import Any

import httpx
from loguru import logger

from fastly_provider.clients.fastly.client import FastlyClient
from fastly_provider.clients.fastly.types import (
    CreateKafkaInput,
    DeleteKafkaInput,
    Kafka,
    ListKafkasInput,
    UpdateKafkaInput,
)
from fastly_provider.core.handlers.base import DefaultServiceAttributeHandler
from fastly_provider.core.models import ServiceDetail, ServiceMetadata
from fastly_provider.core.schema import (
    Resource,
    ResourceData,
    Schema,
    ValueType,
    trim_space_state_func,
    validate_logging_format_version,
    validate_logging_placement,
)
from fastly_provider.exceptions.clients import FastlyClientError
from fastly_provider.exceptions.core import ResourceDataException
from fastly_provider.log.sensitive import redact_fields

VCL_LOGGING_ATTRIBUTES = ["format", "format_version", "placement", "response_condition"]


class KafkaServiceAttributeHandler(DefaultServiceAttributeHandler):
    def __init__(self, service_metadata: ServiceMetadata):
        super().__init__("logging_kafka", service_metadata)

    def block_attributes(self) -> dict[str, Schema]:
        block_attributes = {
            # Required fields
            "name": Schema(
                type=ValueType.STRING,
                required=True,
                description="The unique name of the Kafka logging endpoint. It is important to note that changing this attribute will delete and recreate the resource",
            ),
            "topic": Schema(
                type=ValueType.STRING,
                required=True,
                description="The Kafka topic to send logs to",
            ),
            "brokers": Schema(
                type=ValueType.STRING,
                required=True,
                description="A comma-separated list of IP addresses or hostnames of Kafka brokers",
            ),
            # Optional
            "compression_codec": Schema(
                type=ValueType.STRING,
                optional=True,
                description="The codec used for compression of your logs. One of: `gzip`, `snappy`, `lz4`",
            ),
            "required_acks": Schema(
                type=ValueType.STRING,
                optional=True,
                description="The Number of acknowledgements a leader must receive before a write is considered successful. One of: `1` (default) One server needs to respond. `0` No servers need to respond. `-1` Wait for all in-sync replicas to respond",
            ),
            "use_tls": Schema(
                type=ValueType.BOOL,
                optional=True,
                default=False,
                description="Whether to use TLS for secure logging. Can be either `true` or `false`",
            ),
            "tls_ca_cert": Schema(
                type=ValueType.STRING,
                optional=True,
                description="A secure certificate to authenticate the server with. Must be in PEM format",
                sensitive=True,
                state_func=trim_space_state_func,
            ),
            "tls_client_cert": Schema(
                type=ValueType.STRING,
                optional=True,
                description="The client certificate used to make authenticated requests. Must be in PEM format",
                sensitive=True,
                state_func=trim_space_state_func,
            ),
            "tls_client_key": Schema(
                type=ValueType.STRING,
                optional=True,
                description="The client private key used to make authenticated requests. Must be in PEM format",
                sensitive=True,
                state_func=trim_space_state_func,
            ),
            "tls_hostname": Schema(
                type=ValueType.STRING,
                optional=True,
                description="The hostname used to verify the server's certificate. It can either be the Common Name or a Subject Alternative Name (SAN)",
            ),
            "parse_log_keyvals": Schema(
                type=ValueType.BOOL,
                optional=True,
                default=False,
                description="Enables parsing of key=value tuples from the beginning of a logline, turning them into record headers",
            ),
            "request_max_bytes": Schema(
                type=ValueType.INT,
                optional=True,
                description="Maximum size of log batch, if non-zero. Defaults to 0 for unbounded",
            ),
            "auth_method": Schema(
                type=ValueType.STRING,
                optional=True,
                description="SASL authentication method. One of: plain, scram-sha-256, scram-sha-512",
            ),
            "user": Schema(
                type=ValueType.STRING,
                optional=True,
                description="SASL User",
            ),
            "password": Schema(
                type=ValueType.STRING,
                optional=True,
                description="SASL Pass",
                sensitive=True,
            ),
        }

        if self.is_vcl:
            block_attributes["format"] = Schema(
                type=ValueType.STRING,
                optional=True,
                description="Apache style log formatting.",
            )
            block_attributes["format_version"] = Schema(
                type=ValueType.INT,
                optional=True,
                default=2,
                description="The version of the custom logging format used for the configured endpoint. Can be either 1 or 2. (default: 2).",
                validate_func=validate_logging_format_version(),
            )
            block_attributes["placement"] = Schema(
                type=ValueType.STRING,
                optional=True,
                description="Where in the generated VCL the logging call should be placed.",
                validate_func=validate_logging_placement(),
            )
            block_attributes["response_condition"] = Schema(
                type=ValueType.STRING,
                optional=True,
                description="The name of an existing condition in the configured endpoint, or leave blank to always execute.",
            )

        return block_attributes

    def register(self, resource: Resource) -> None:
        resource.schema[self.key] = Schema(
            type=ValueType.SET,
            optional=True,
            elem=Resource(self.block_attributes()),
        )

    @property
    def sensitive_fields(self) -> list[str]:
        return Resource(self.block_attributes()).sensitive_fields()

    async def process(
        self, d: ResourceData, latest_version: int, client: FastlyClient
    ) -> None:
        service_id = d.id
        old_set, new_set = self.get_change(d)
        diff_result = self.set_diff.diff(old_set, new_set)

        # DELETE removed resources
        for resource in diff_result.deleted:
            delete_opts = self.build_delete(resource, service_id, latest_version)
            logger.debug(
                f"Fastly Kafka logging endpoint removal opts: {delete_opts.dict()}"
            )
            await delete_kafka(client, delete_opts)

        # CREATE new resources
        for resource in diff_result.added:
            if not resource.get("name"):
                logger.warning(
                    f"Skipping a Kafka logging endpoint without a name on service {service_id}"
                )
                continue

            create_opts = self.build_create(resource, service_id, latest_version)
            logger.debug(
                f"Fastly Kafka logging addition opts: {redact_fields(create_opts.dict(), self.sensitive_fields)}"
            )
            await client.create_kafka(create_opts)

        # UPDATE modified resources
        #
        # the API allows renaming an endpoint, but names are the only key we have, so a rename
        # always shows up as a delete and a create
        for resource in diff_result.modified:
            # only attempt to update attributes that have changed
            modified = self.set_diff.filter(resource, old_set)
            update_opts = self.build_update(
                modified, resource["name"], service_id, latest_version
            )
            logger.debug(
                f"Update Kafka Opts: {redact_fields(update_opts.dict(exclude_none=True), self.sensitive_fields)}"
            )
            await client.update_kafka(update_opts)

    async def read(
        self, d: ResourceData, service: ServiceDetail, client: FastlyClient
    ) -> None:
        version = service.base_version_number
        logger.debug(f"Refreshing Kafka logging endpoints for ({d.id})")
        try:
            kafka_list = await client.list_kafkas(
                ListKafkasInput(service_id=d.id, service_version=version or 0)
            )
        except (httpx.HTTPError, FastlyClientError) as e:
            logger.error(
                f"Error looking up Kafka logging endpoints for ({d.id}), version ({version}): {e}"
            )
            raise

        known_attributes = self.block_attributes()
        kafka_log_list = [
            {key: value for key, value in kafka.items() if key in known_attributes}
            for kafka in flatten_kafka(kafka_list)
        ]

        try:
            d.set(self.key, kafka_log_list)
        except ResourceDataException as e:
            logger.warning(
                f"Error setting Kafka logging endpoints for ({d.id}): {e}"
            )

    def _vcl_logging_attributes(self, df: dict[str, Any]) -> dict[str, Any]:
        if not self.is_vcl:
            return {}
        return {key: df.get(key) for key in VCL_LOGGING_ATTRIBUTES if key in df}

    def build_create(
        self, kafka_map: dict[str, Any], service_id: str, service_version: int
    ) -> CreateKafkaInput:
        df = kafka_map
        vla = self._vcl_logging_attributes(df)
        return CreateKafkaInput(
            service_id=service_id,
            service_version=service_version,
            name=df["name"],
            brokers=df["brokers"],
            topic=df["topic"],
            required_acks=df.get("required_acks", ""),
            use_tls=df.get("use_tls", False),
            compression_codec=df.get("compression_codec", ""),
            tls_ca_cert=df.get("tls_ca_cert", ""),
            tls_client_cert=df.get("tls_client_cert", ""),
            tls_client_key=df.get("tls_client_key", ""),
            tls_hostname=df.get("tls_hostname", ""),
            format=vla.get("format") or "",
            format_version=vla.get("format_version") or 0,
            placement=vla.get("placement") or "",
            response_condition=vla.get("response_condition") or "",
            parse_log_keyvals=df.get("parse_log_keyvals", False),
            request_max_bytes=df.get("request_max_bytes", 0),
            auth_method=df.get("auth_method", ""),
            user=df.get("user", ""),
            password=df.get("password", ""),
        )

    def build_update(
        self,
        modified: dict[str, Any],
        name: str,
        service_id: str,
        service_version: int,
    ) -> UpdateKafkaInput:
        updatable = set(UpdateKafkaInput.__fields__) - {
            "service_id",
            "service_version",
            "name",
            "new_name",
        }
        if not self.is_vcl:
            updatable -= set(VCL_LOGGING_ATTRIBUTES)
        return UpdateKafkaInput(
            service_id=service_id,
            service_version=service_version,
            name=name,
            **{key: value for key, value in modified.items() if key in updatable},
        )

    def build_delete(
        self, kafka_map: dict[str, Any], service_id: str, service_version: int
    ) -> DeleteKafkaInput:
        return DeleteKafkaInput(
            service_id=service_id,
            service_version=service_version,
            name=kafka_map["name"],
        )


async def delete_kafka(client: FastlyClient, i: DeleteKafkaInput) -> None:
    try:
        await client.delete_kafka(i)
    except httpx.HTTPStatusError as e:
        if e.response.status_code != httpx.codes.NOT_FOUND:
            raise
        logger.debug(f"Kafka logging endpoint {i.name} was already removed")


def flatten_kafka(kafka_list: list[Kafka]) -> list[dict[str, Any]]:
    flattened = []
    for s in kafka_list:
        # Convert logging to a map for saving to state.
        flat_kafka = {
            "name": s.name,
            "topic": s.topic,
            "brokers": s.brokers,
            "compression_codec": s.compression_codec,
            "required_acks": s.required_acks,
            "use_tls": s.use_tls,
            "tls_ca_cert": s.tls_ca_cert,
            "tls_client_cert": s.tls_client_cert,
            "tls_client_key": s.tls_client_key,
            "tls_hostname": s.tls_hostname,
            "format": s.format,
            "format_version": s.format_version,
            "placement": s.placement,
            "response_condition": s.response_condition,
            "parse_log_keyvals": s.parse_log_keyvals,
            "request_max_bytes": s.request_max_bytes,
            "auth_method": s.auth_method,
            "user": s.user,
            "password": s.password,
        }

        # prune empty values, the schema fills them back with defaults
        flattened.append(
            {key: value for key, value in flat_kafka.items() if value not in ("", None)}
        )

    return flattened
