from typing import Any

from fastly_provider.core.schema.resource import StateFunc, ValidateFunc


def _validate_in(allowed: list[Any]) -> ValidateFunc:
    def _validate(value: Any, path: str) -> list[str]:
        if value not in allowed:
            return [f"{path}: expected one of {allowed}, got {value!r}"]
        return []

    return _validate


def validate_logging_format_version() -> ValidateFunc:
    return _validate_in([1, 2])


def validate_logging_placement() -> ValidateFunc:
    return _validate_in(["none", "waf_debug"])


def trim_space(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


trim_space_state_func: StateFunc = trim_space
