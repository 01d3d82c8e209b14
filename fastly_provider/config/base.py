import os
import re
from pathlib import Path
from typing import Any

import yaml
from humps import decamelize

from fastly_provider.exceptions.core import ConfigurationException

PROVIDER_WRAPPER_PATTERN = r"{{ from (.*) }}"
PROVIDER_CONFIG_PATTERN = r"^[a-zA-Z0-9]+ .*$"


def read_yaml_config(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ConfigurationException(f"Configuration file not found: {path}")

    data = yaml.safe_load(path.read_text("utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationException(
            f"Expected a mapping at the top of {path}, got {type(data).__name__}"
        )
    return data


def parse_config_provider(value: str) -> tuple[str, str]:
    match = re.match(PROVIDER_CONFIG_PATTERN, value)
    if not match:
        raise ValueError(
            f"Invalid pattern: {value}. Pattern should match: {PROVIDER_CONFIG_PATTERN}"
        )

    provider_type, provider_value = value.split(" ", 1)

    return provider_type, provider_value


def load_from_config_provider(config_provider: str) -> Any:
    provider_type, value = parse_config_provider(config_provider)
    if provider_type == "env":
        result = os.environ.get(value)
        if result is None:
            raise ValueError(f"Environment variable not found: {value}")
        return result
    else:
        raise ValueError(f"Invalid provider type: {provider_type}")


def parse_providers(config: Any) -> Any:
    """
    Resolving every `{{ from <provider> <value> }}` string in the config, recursing into
    nested mappings and lists
    """
    if isinstance(config, dict):
        return {key: parse_providers(value) for key, value in config.items()}
    if isinstance(config, list):
        return [parse_providers(item) for item in config]
    if isinstance(config, str):
        if provider_match := re.match(PROVIDER_WRAPPER_PATTERN, config):
            try:
                return load_from_config_provider(provider_match.group(1))
            except ValueError as e:
                raise ConfigurationException(str(e)) from e
    return config


def decamelize_config(config: Any) -> Any:
    """
    Normalizing the config yaml file to work with snake_case keys. Values are left untouched
    """
    if isinstance(config, dict):
        return {
            decamelize(key): decamelize_config(value) for key, value in config.items()
        }
    if isinstance(config, list):
        return [decamelize_config(item) for item in config]
    return config


def load_config(path: str | Path) -> dict[str, Any]:
    return parse_providers(decamelize_config(read_yaml_config(path)))
