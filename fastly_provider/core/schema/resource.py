from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Mapping

from fastly_provider.core.schema.set import SchemaSet
from fastly_provider.exceptions.core import SchemaValidationException

# Receives the value and its attribute path, returns a list of error messages
ValidateFunc = Callable[[Any, str], list[str]]
StateFunc = Callable[[Any], Any]


class ValueType(StrEnum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    SET = "set"


_ZERO_VALUES: dict[ValueType, Any] = {
    ValueType.STRING: "",
    ValueType.INT: 0,
    ValueType.BOOL: False,
}


@dataclass
class Schema:
    type: ValueType
    required: bool = False
    optional: bool = False
    default: Any = None
    description: str = ""
    sensitive: bool = False
    state_func: StateFunc | None = None
    validate_func: ValidateFunc | None = None
    elem: "Resource | None" = None

    def __post_init__(self) -> None:
        if self.required == self.optional:
            raise SchemaValidationException(
                "Exactly one of required or optional must be set on a schema"
            )
        if self.required and self.default is not None:
            raise SchemaValidationException("A required schema can't have a default")
        if self.type == ValueType.SET and self.elem is None:
            raise SchemaValidationException("A set schema must define its elem")

    def zero_value(self) -> Any:
        if self.type == ValueType.SET:
            return SchemaSet()
        return _ZERO_VALUES[self.type]

    def describe(self) -> dict[str, Any]:
        description: dict[str, Any] = {
            "type": self.type.value,
            "required": self.required,
            "optional": self.optional,
        }
        if self.default is not None:
            description["default"] = self.default
        if self.sensitive:
            description["sensitive"] = True
        if self.description:
            description["description"] = self.description
        if self.elem is not None:
            description["elem"] = self.elem.describe()
        return description

    def normalize_value(self, value: Any, path: str) -> Any:
        """
        Converts a user or API supplied value into its state form.

        Missing values get the default, or the zero value of the type. Supplied values are type
        checked, validated and passed through the state func.
        """
        if value is None:
            if self.required:
                raise SchemaValidationException(f"{path}: required field is missing")
            if self.default is not None:
                return self.default
            return self.zero_value()

        if self.type == ValueType.SET:
            return self._normalize_set(value, path)

        value = self._coerce(value, path)
        # unset values are stored as the zero value and never validated
        if self.validate_func is not None and value != self.zero_value():
            if errors := self.validate_func(value, path):
                raise SchemaValidationException("; ".join(errors))
        if self.state_func is not None:
            value = self.state_func(value)
        return value

    def _normalize_set(self, value: Any, path: str) -> SchemaSet:
        if isinstance(value, SchemaSet):
            value = value.list()
        if not isinstance(value, (list, tuple)):
            raise SchemaValidationException(
                f"{path}: expected a list, got {type(value).__name__}"
            )
        assert self.elem is not None
        return SchemaSet(
            self.elem.normalize(item, f"{path}.{index}")
            for index, item in enumerate(value)
        )

    def _coerce(self, value: Any, path: str) -> Any:
        if self.type == ValueType.STRING:
            if isinstance(value, str):
                return value
            if isinstance(value, int) and not isinstance(value, bool):
                return str(value)
        elif self.type == ValueType.INT:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, str):
                try:
                    return int(value)
                except ValueError:
                    pass
        elif self.type == ValueType.BOOL:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.lower() in ("true", "false"):
                return value.lower() == "true"

        raise SchemaValidationException(
            f"{path}: expected {self.type.value}, got {type(value).__name__}"
        )


@dataclass
class Resource:
    schema: dict[str, Schema] = field(default_factory=dict)

    def normalize(self, record: Any, path: str = "") -> dict[str, Any]:
        if not isinstance(record, Mapping):
            raise SchemaValidationException(
                f"{path or 'record'}: expected a mapping, got {type(record).__name__}"
            )

        prefix = f"{path}." if path else ""
        errors: list[str] = []
        if unknown := sorted(set(record) - set(self.schema)):
            errors.append(f"{path or 'record'}: unknown fields {unknown}")

        normalized: dict[str, Any] = {}
        for name, field_schema in self.schema.items():
            try:
                normalized[name] = field_schema.normalize_value(
                    record.get(name), f"{prefix}{name}"
                )
            except SchemaValidationException as e:
                errors.append(str(e))

        if errors:
            raise SchemaValidationException("; ".join(errors))
        return normalized

    def sensitive_fields(self) -> list[str]:
        return [name for name, field_schema in self.schema.items() if field_schema.sensitive]

    def describe(self) -> dict[str, Any]:
        return {name: field_schema.describe() for name, field_schema in self.schema.items()}
