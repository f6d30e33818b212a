"""Canonical JSON text for value trees (deterministic, insertion ordered)."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import TypeAlias

# Read-only JSON type: covariant Mapping/Sequence so list[str], dict[str,str]
# etc. work without cast.
JSONReadOnly: TypeAlias = (
    Mapping[str, "JSONReadOnly"]
    | Sequence["JSONReadOnly"]
    | str
    | int
    | float
    | bool
    | None
)


def canonical_json_text(data: JSONReadOnly) -> str:
    """Serialize plain tree data to compact JSON text.

    Field order is the container's insertion order, which is part of the
    value tree contract, so keys are not sorted. NaN/Infinity are rejected.

    Args:
        data: JSON-compatible structure (dict, list, str, int, float, bool, None).

    Returns:
        Compact JSON text.

    Raises:
        TypeError: On unsupported types.
        ValueError: On NaN or Infinity.
    """
    if data is not None and not isinstance(
        data, (dict, list, str, int, float, bool)
    ):
        raise TypeError(f"Unsupported type for canonical JSON: {type(data).__name__}")
    return json.dumps(
        data,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def canonical_json_bytes(data: JSONReadOnly) -> bytes:
    """Serialize plain tree data to UTF-8 encoded canonical JSON bytes.

    Args:
        data: JSON-compatible structure.

    Returns:
        UTF-8 encoded compact JSON.
    """
    return canonical_json_text(data).encode("utf-8")
