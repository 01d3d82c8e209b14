from .resource import Resource, Schema, ValueType, ValidateFunc, StateFunc
from .resource_data import ResourceData
from .set import SchemaSet
from .validators import (
    trim_space_state_func,
    validate_logging_format_version,
    validate_logging_placement,
)

__all__ = [
    "Resource",
    "ResourceData",
    "Schema",
    "SchemaSet",
    "StateFunc",
    "ValidateFunc",
    "ValueType",
    "trim_space_state_func",
    "validate_logging_format_version",
    "validate_logging_placement",
]
