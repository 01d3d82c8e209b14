from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Extra, ValidationError
from pydantic.fields import Field

from fastly_provider.config.base import load_config
from fastly_provider.core.models import ServiceType
from fastly_provider.exceptions.core import ConfigurationException


class DesiredState(BaseModel, extra=Extra.forbid):
    service_id: str
    service_type: ServiceType = ServiceType.VCL
    logging_kafka: list[dict[str, Any]] = Field(default_factory=list)

    def block(self, key: str) -> list[dict[str, Any]]:
        return getattr(self, key)


def load_desired_state(path: str | Path) -> DesiredState:
    logger.info(f"Loading desired state from {path}")
    config = load_config(path)
    try:
        return DesiredState.parse_obj(config)
    except ValidationError as e:
        raise ConfigurationException(f"Invalid desired state in {path}: {e}") from e
