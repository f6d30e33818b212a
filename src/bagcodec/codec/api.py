"""Module-level helpers over a shared default codec."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from typing import Any

from bagcodec.codec.core import Codec
from bagcodec.codec.registry import TypeRegistry
from bagcodec.codec.result import CodecResult
from bagcodec.codec.shapes import Shape, classify_type_name
from bagcodec.codec.type_names import is_array_type_name, parse_array_type_name
from bagcodec.tree import BagObject


@cache
def default_codec() -> Codec:
    """Return the shared codec over the builtin registry."""
    return Codec(TypeRegistry.with_builtins())


def encode(value: Any) -> CodecResult:
    """Encode with the default codec."""
    return default_codec().encode(value)


def decode(envelope: BagObject | Mapping[str, Any]) -> CodecResult:
    """Decode with the default codec."""
    return default_codec().decode(envelope)


@dataclass(frozen=True)
class TypeNameDescription:
    """Decode-path classification of a recorded type name."""

    type_name: str
    shape: Shape
    rank: int = 0
    element: str | None = None


def describe_type_name(
    type_name: str, registry: TypeRegistry | None = None
) -> TypeNameDescription:
    """Classify a recorded type name without decoding any value.

    Args:
        type_name: Recorded ``type`` field.
        registry: Registry to resolve against; defaults to the default codec's.

    Returns:
        Shape, plus rank and element code for arrays.

    Raises:
        CodecError: UNKNOWN_TYPE or MALFORMED_ENVELOPE when the name does not
            classify.
    """
    registry = registry if registry is not None else default_codec().registry
    shape = classify_type_name(type_name, registry)
    if not is_array_type_name(type_name):
        return TypeNameDescription(type_name=type_name, shape=shape)
    parsed = parse_array_type_name(type_name)
    return TypeNameDescription(
        type_name=type_name,
        shape=shape,
        rank=parsed.rank,
        element=parsed.element_code,
    )
