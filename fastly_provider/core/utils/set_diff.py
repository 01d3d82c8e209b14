from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from fastly_provider.exceptions.core import SetDiffKeyException

Record = Mapping[str, Any]
KeyFunc = Callable[[Any], Any]


@dataclass
class DiffResult:
    """Represents the differences between two keyed sets of records.

    Added records are present only in the new set, deleted records only in the old set and
    modified records are present in both with different content. Unchanged records appear in
    none of the lists.
    """

    added: list[Any] = field(default_factory=list)
    modified: list[Any] = field(default_factory=list)
    deleted: list[Any] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.modified or self.deleted)


class SetDiff:
    def __init__(self, key_func: KeyFunc):
        self.key_func = key_func

    def compute_key(self, record: Any) -> Any:
        try:
            key = self.key_func(record)
        except Exception as e:
            raise SetDiffKeyException(
                f"Failed computing the key of {record!r}: {e}"
            ) from e
        if key is None:
            raise SetDiffKeyException(f"Computed key for {record!r} is None")
        return key

    def _index(self, records: Iterable[Any]) -> dict[Any, Any]:
        indexed: dict[Any, Any] = {}
        for record in records:
            key = self.compute_key(record)
            if key in indexed:
                raise SetDiffKeyException(f"Duplicate key {key!r} in the same set")
            indexed[key] = record
        return indexed

    def diff(self, old: Iterable[Any], new: Iterable[Any]) -> DiffResult:
        old_dict = self._index(old)
        new_dict = self._index(new)
        result = DiffResult()

        for key, record in new_dict.items():
            if key not in old_dict:
                result.added.append(record)
            elif old_dict[key] != record:
                result.modified.append(record)

        for key, record in old_dict.items():
            if key not in new_dict:
                result.deleted.append(record)

        return result

    def filter(self, modified: Record, old: Iterable[Any]) -> dict[str, Any]:
        """
        Returns only the fields of a modified record that differ from the old record sharing its key.
        When no old record shares the key the record is returned as is.
        """
        key = self.compute_key(modified)
        for record in old:
            if self.compute_key(record) != key:
                continue
            return {
                name: value
                for name, value in modified.items()
                if name not in record or record[name] != value
            }
        return dict(modified)
