import hashlib
import json
from typing import Any, Iterable, Iterator, Mapping


class SchemaSet:
    """
    An insertion ordered set of records.

    Records are identified by the SHA-256 hash of their canonical JSON form, so two records with
    identical content collapse into one.
    """

    def __init__(self, items: Iterable[Mapping[str, Any]] = ()):
        self._items: dict[str, dict[str, Any]] = {}
        for item in items:
            self.add(item)

    @staticmethod
    def hash_code(item: Mapping[str, Any]) -> str:
        serialized = json.dumps(item, sort_keys=True, default=str)
        return hashlib.sha256(serialized.encode()).hexdigest()

    def add(self, item: Mapping[str, Any]) -> None:
        self._items.setdefault(self.hash_code(item), dict(item))

    def list(self) -> list[dict[str, Any]]:
        return [dict(item) for item in self._items.values()]

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, Mapping):
            return False
        return self.hash_code(item) in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaSet):
            return NotImplemented
        return set(self._items) == set(other._items)

    def __repr__(self) -> str:
        return f"SchemaSet({self.list()!r})"
