from typing import Any, Mapping

from fastly_provider.core.schema.resource import Resource, Schema, ValueType
from fastly_provider.core.schema.set import SchemaSet
from fastly_provider.exceptions.core import (
    ResourceDataException,
    SchemaValidationException,
)


class ResourceData:
    """
    The view of a single resource that attribute handlers work against.

    `state` is the last known remote state and `config` is the desired state. Both are
    normalized through the resource schema, so the two sides of a change compare field by field.
    When no config is given the resource is being refreshed and the state is its own config.
    """

    def __init__(
        self,
        resource: Resource,
        id: str,
        state: Mapping[str, Any] | None = None,
        config: Mapping[str, Any] | None = None,
    ):
        self._resource = resource
        self._id = id
        self._state: dict[str, Any] = {}
        self._config: dict[str, Any] | None = None

        for key, value in (state or {}).items():
            self._state[key] = self._normalize(key, value)
        if config is not None:
            self._config = {
                key: self._normalize(key, value) for key, value in config.items()
            }

    @property
    def id(self) -> str:
        return self._id

    def _schema_for(self, key: str) -> Schema:
        try:
            return self._resource.schema[key]
        except KeyError:
            raise ResourceDataException(
                f"Invalid address to set: {key!r} is not part of the resource schema"
            ) from None

    def _normalize(self, key: str, value: Any) -> Any:
        schema = self._schema_for(key)
        try:
            return schema.normalize_value(value, key)
        except SchemaValidationException as e:
            raise ResourceDataException(f"Failed setting {key!r}: {e}") from e

    def _get_state(self, key: str) -> Any:
        if key in self._state:
            return self._state[key]
        return self._schema_for(key).zero_value()

    def get(self, key: str) -> Any:
        if self._config is not None and key in self._config:
            return self._config[key]
        return self._get_state(key)

    def get_change(self, key: str) -> tuple[Any, Any]:
        old = self._get_state(key)
        new = self.get(key) if self._config is not None else old
        if self._schema_for(key).type == ValueType.SET:
            old = old if old is not None else SchemaSet()
            new = new if new is not None else SchemaSet()
        return old, new

    def has_change(self, key: str) -> bool:
        old, new = self.get_change(key)
        return old != new

    def set(self, key: str, value: Any) -> None:
        self._state[key] = self._normalize(key, value)

    def state(self) -> dict[str, Any]:
        return {
            key: value.list() if isinstance(value, SchemaSet) else value
            for key, value in self._state.items()
        }
