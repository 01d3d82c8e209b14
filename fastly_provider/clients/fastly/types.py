from typing import Any

from pydantic import BaseModel, Extra
from pydantic.fields import Field

from fastly_provider.exceptions.clients import MissingInputFieldError


def compatibool(value: bool) -> str:
    return "1" if value else "0"


def to_form(values: dict[str, Any]) -> dict[str, str]:
    return {
        key: compatibool(value) if isinstance(value, bool) else str(value)
        for key, value in values.items()
    }


class Kafka(BaseModel):
    service_id: str | None = None
    service_version: int | None = Field(default=None, alias="version")
    name: str = ""
    brokers: str | None = None
    topic: str | None = None
    required_acks: str | None = None
    use_tls: bool | None = None
    compression_codec: str | None = None
    format: str | None = None
    format_version: int | None = None
    placement: str | None = None
    response_condition: str | None = None
    tls_ca_cert: str | None = None
    tls_client_cert: str | None = None
    tls_client_key: str | None = None
    tls_hostname: str | None = None
    parse_log_keyvals: bool | None = None
    request_max_bytes: int | None = None
    auth_method: str | None = None
    user: str | None = None
    password: str | None = None

    class Config:
        extra = Extra.ignore
        allow_population_by_field_name = True


class KafkaPathInput(BaseModel):
    service_id: str
    service_version: int

    def validate_path(self) -> None:
        if not self.service_id:
            raise MissingInputFieldError("service_id")
        if not self.service_version:
            raise MissingInputFieldError("service_version")


class ListKafkasInput(KafkaPathInput):
    pass


class NamedKafkaInput(KafkaPathInput):
    name: str

    def validate_path(self) -> None:
        super().validate_path()
        if not self.name:
            raise MissingInputFieldError("name")


class DeleteKafkaInput(NamedKafkaInput):
    pass


_PATH_FIELDS = {"service_id", "service_version"}


class CreateKafkaInput(NamedKafkaInput):
    brokers: str = ""
    topic: str = ""
    required_acks: str = ""
    use_tls: bool = False
    compression_codec: str = ""
    format: str = ""
    format_version: int = 0
    placement: str = ""
    response_condition: str = ""
    tls_ca_cert: str = ""
    tls_client_cert: str = ""
    tls_client_key: str = ""
    tls_hostname: str = ""
    parse_log_keyvals: bool = False
    request_max_bytes: int = 0
    auth_method: str = ""
    user: str = ""
    password: str = ""

    def form_data(self) -> dict[str, str]:
        # zero values are left out of the request, the API applies its own defaults
        return to_form(
            {
                key: value
                for key, value in self.dict(exclude=_PATH_FIELDS).items()
                if value not in ("", 0, False, None)
            }
        )


class UpdateKafkaInput(NamedKafkaInput):
    new_name: str | None = None
    brokers: str | None = None
    topic: str | None = None
    required_acks: str | None = None
    use_tls: bool | None = None
    compression_codec: str | None = None
    format: str | None = None
    format_version: int | None = None
    placement: str | None = None
    response_condition: str | None = None
    tls_ca_cert: str | None = None
    tls_client_cert: str | None = None
    tls_client_key: str | None = None
    tls_hostname: str | None = None
    parse_log_keyvals: bool | None = None
    request_max_bytes: int | None = None
    auth_method: str | None = None
    user: str | None = None
    password: str | None = None

    def form_data(self) -> dict[str, str]:
        values = self.dict(exclude=_PATH_FIELDS | {"name"}, exclude_none=True)
        if "new_name" in values:
            values["name"] = values.pop("new_name")
        return to_form(values)
