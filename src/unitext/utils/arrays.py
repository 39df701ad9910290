"""Collection helpers and a nested path accessor."""
from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import Any, Callable, List, Union

from ..exceptions import EntryNotAccessible, EntryUnavailable

Key = Union[str, int]


def contains(items: Iterable[Any], value: Any) -> bool:
    """Strict membership test: ``1`` does not match ``True`` or ``1.0``."""
    return any(type(item) is type(value) and item == value for item in items)


def first(items: Iterable[Any]) -> Any:
    values = items.values() if isinstance(items, Mapping) else items
    return next(iter(values), None)


def last(items: Iterable[Any]) -> Any:
    values = list(items.values() if isinstance(items, Mapping) else items)
    return values[-1] if values else None


def is_accessible(value: Any) -> bool:
    return isinstance(value, (Mapping, Sequence)) and not isinstance(value, (str, bytes, bytearray))


def key_exists(container: Any, key: Key) -> bool:
    if isinstance(container, Mapping):
        return key in container
    if isinstance(key, int) and is_accessible(container):
        return -len(container) <= key < len(container)
    return False


def is_list(items: Iterable[Any]) -> bool:
    """Mappings qualify only when their keys are exactly ``0..n-1`` in order."""
    if not isinstance(items, Mapping):
        return True
    return all(key == index for index, key in enumerate(items))


def is_associative(items: Iterable[Any]) -> bool:
    if not isinstance(items, Mapping) or not items:
        return False
    return all(isinstance(key, str) for key in items)


def _pairs(items: Iterable[Any]):
    return items.items() if isinstance(items, Mapping) else enumerate(items)


def some(items: Iterable[Any], callback: Callable[[Any, Any, Any], bool]) -> bool:
    return any(callback(value, key, items) for key, value in _pairs(items))


def every(items: Iterable[Any], callback: Callable[[Any, Any, Any], bool]) -> bool:
    return all(callback(value, key, items) for key, value in _pairs(items))


@dataclass(frozen=True, slots=True)
class Found:
    value: Any


@dataclass(frozen=True, slots=True)
class NotFound:
    missing: str


@dataclass(frozen=True, slots=True)
class NotAccessible:
    blocked: str


Lookup = Union[Found, NotFound, NotAccessible]


class ArrayEntry:
    """An entry addressed by a key path inside nested mappings and sequences.

    ``lookup()`` reports absence as a value; ``get()`` and ``remove()`` raise
    :class:`EntryUnavailable` or :class:`EntryNotAccessible` instead.
    """

    def __init__(self, container: Any, key: Key | Sequence[Key]) -> None:
        segments: List[Key] = list(key) if isinstance(key, (list, tuple)) else [key]
        if not every(segments, lambda item, _key, _all: isinstance(item, (str, int))):
            raise TypeError("The key must be a string or an integer or a list of strings and/or integers.")
        self._container = container
        self._segments = segments
        self._path = ".".join(str(segment) for segment in segments)

    @classmethod
    def from_path(cls, container: Any, path: str, separator: str = ".") -> "ArrayEntry":
        return cls(container, path.split(separator))

    @property
    def path(self) -> str:
        return self._path

    def lookup(self) -> Lookup:
        value = self._container
        for index, segment in enumerate(self._segments):
            if not is_accessible(value):
                return NotAccessible(self._sub_path(index))
            if not key_exists(value, segment):
                return NotFound(self._sub_path(index + 1))
            value = value[segment]
        return Found(value)

    def exists(self) -> bool:
        return isinstance(self.lookup(), Found)

    def get(self) -> Any:
        result = self.lookup()
        if isinstance(result, NotAccessible):
            raise self._not_accessible("get", result.blocked)
        if isinstance(result, NotFound):
            raise self._unavailable("get", result.missing)
        return result.value

    def set(self, new_value: Any) -> None:
        """Assign ``new_value``, creating intermediate dictionaries as needed."""
        value = self._container
        last = len(self._segments) - 1
        for index, segment in enumerate(self._segments):
            if not isinstance(value, (MutableMapping, MutableSequence)):
                raise self._not_accessible("set", self._sub_path(index))
            if index == last:
                value[segment] = new_value
                return
            if not key_exists(value, segment) or value[segment] is None:
                value[segment] = {}
            value = value[segment]

    def remove(self) -> None:
        value = self._container
        last = len(self._segments) - 1
        for index, segment in enumerate(self._segments):
            if not is_accessible(value):
                raise self._not_accessible("remove", self._sub_path(index))
            if not key_exists(value, segment):
                raise self._unavailable("remove", self._sub_path(index + 1))
            if index == last:
                del value[segment]
            else:
                value = value[segment]

    def _sub_path(self, count: int) -> str:
        return ".".join(str(segment) for segment in self._segments[:count])

    def _not_accessible(self, action: str, blocked: str) -> EntryNotAccessible:
        return EntryNotAccessible(
            f'Cannot {action} entry "{self._path}" because entry "{blocked}" is not accessible.'
        )

    def _unavailable(self, action: str, missing: str) -> EntryUnavailable:
        if missing == self._path:
            return EntryUnavailable(f'Cannot {action} entry "{self._path}" because it does not exist.')
        return EntryUnavailable(
            f'Cannot {action} entry "{self._path}" because entry "{missing}" does not exist.'
        )


__all__ = [
    "contains",
    "first",
    "last",
    "is_accessible",
    "key_exists",
    "is_list",
    "is_associative",
    "some",
    "every",
    "Found",
    "NotFound",
    "NotAccessible",
    "Lookup",
    "ArrayEntry",
]
