"""Value tree containers: ordered named-field objects and ordered arrays."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from typing import TypeAlias

from pydantic.types import JsonValue

from bagcodec.tree.canonical import canonical_json_text

BagLeaf: TypeAlias = str | int | float | bool | None
BagValue: TypeAlias = "BagLeaf | BagObject | BagArray"

_LEAF_TYPES = (str, int, float, bool)


def _coerce(value: object) -> BagValue:
    """Normalize a value for storage inside a tree container.

    Args:
        value: Leaf, container, or plain dict/list/tuple.

    Returns:
        Stored tree value.

    Raises:
        TypeError: If value cannot live in a value tree.
    """
    if value is None or isinstance(value, (BagObject, BagArray)):
        return value
    # numpy scalars subclass python numbers; the tree only holds exact builtins
    if type(value) in _LEAF_TYPES:
        return value  # type: ignore[return-value]
    if isinstance(value, Mapping):
        return BagObject(value)
    if isinstance(value, (list, tuple)):
        return BagArray(value)
    raise TypeError(f"Unsupported value tree leaf: {type(value).__name__}")


def _to_plain(value: BagValue) -> JsonValue:
    if isinstance(value, (BagObject, BagArray)):
        return value.to_plain()
    return value


class BagObject:
    """Ordered named-field container."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, object] | None = None) -> None:
        """Create object, optionally seeded from a mapping.

        Args:
            entries: Initial fields; nested dicts and lists are converted.
        """
        self._entries: dict[str, BagValue] = {}
        if entries is not None:
            for key, value in entries.items():
                self.put(key, value)

    def put(self, key: str, value: object) -> BagObject:
        """Store value under key, replacing any previous entry.

        Args:
            key: Field name.
            value: Value to store.

        Returns:
            This object, for chaining.

        Raises:
            TypeError: If key is not a string or value is not tree-shaped.
        """
        if not isinstance(key, str):
            raise TypeError(f"BagObject keys must be str, got {type(key).__name__}")
        self._entries[key] = _coerce(value)
        return self

    def get(self, key: str) -> BagValue:
        return self._entries.get(key)

    def has(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def items(self) -> list[tuple[str, BagValue]]:
        return list(self._entries.items())

    def get_count(self) -> int:
        return len(self._entries)

    def get_string(self, key: str) -> str | None:
        value = self._entries.get(key)
        return value if isinstance(value, str) else None

    def get_bag_object(self, key: str) -> BagObject | None:
        value = self._entries.get(key)
        return value if isinstance(value, BagObject) else None

    def get_bag_array(self, key: str) -> BagArray | None:
        value = self._entries.get(key)
        return value if isinstance(value, BagArray) else None

    def to_plain(self) -> dict[str, JsonValue]:
        """Return a JSON-compatible dict copy of this object."""
        return {key: _to_plain(value) for key, value in self._entries.items()}

    def copy(self) -> BagObject:
        """Return a deep copy."""
        return BagObject(self.to_plain())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BagObject):
            return NotImplemented
        return self.items() == other.items()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BagObject({self.to_plain()!r})"

    def __str__(self) -> str:
        return canonical_json_text(self.to_plain())


class BagArray:
    """Ordered sequence container."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[object] | None = None) -> None:
        """Create array, optionally seeded from an iterable.

        Args:
            values: Initial elements; nested dicts and lists are converted.
        """
        self._values: list[BagValue] = []
        if values is not None:
            for value in values:
                self.add(value)

    def add(self, value: object) -> BagArray:
        """Append value.

        Args:
            value: Value to append.

        Returns:
            This array, for chaining.
        """
        self._values.append(_coerce(value))
        return self

    def get(self, index: int) -> BagValue:
        """Return element at index, or None when out of range."""
        if 0 <= index < len(self._values):
            return self._values[index]
        return None

    def get_count(self) -> int:
        return len(self._values)

    def get_string(self, index: int) -> str | None:
        value = self.get(index)
        return value if isinstance(value, str) else None

    def get_bag_object(self, index: int) -> BagObject | None:
        value = self.get(index)
        return value if isinstance(value, BagObject) else None

    def get_bag_array(self, index: int) -> BagArray | None:
        value = self.get(index)
        return value if isinstance(value, BagArray) else None

    def to_plain(self) -> list[JsonValue]:
        """Return a JSON-compatible list copy of this array."""
        return [_to_plain(value) for value in self._values]

    def copy(self) -> BagArray:
        """Return a deep copy."""
        return BagArray(self.to_plain())

    def __iter__(self) -> Iterator[BagValue]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BagArray):
            return NotImplemented
        return self._values == other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BagArray({self.to_plain()!r})"

    def __str__(self) -> str:
        return canonical_json_text(self.to_plain())


def bag_from_plain(data: object) -> BagValue:
    """Convert JSON-compatible data into value tree nodes.

    Args:
        data: Plain dict/list/leaf structure.

    Returns:
        Equivalent tree value.
    """
    return _coerce(data)


def bag_from_json(text: str | bytes) -> BagValue:
    """Parse JSON text into value tree nodes.

    Args:
        text: JSON document.

    Returns:
        Equivalent tree value.

    Raises:
        json.JSONDecodeError: If text is not valid JSON.
    """
    return _coerce(json.loads(text))
