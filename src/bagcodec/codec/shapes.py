"""Shape classification for live values (encode) and recorded type names (decode)."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

import numpy as np

from bagcodec.codec.type_names import is_array_type_name, parse_array_type_name

if TYPE_CHECKING:
    from bagcodec.codec.registry import TypeRegistry


class Shape(StrEnum):
    """Closed set of serialization shapes."""

    SCALAR = "scalar"
    VALUE_OBJECT = "value_object"
    VALUE_ARRAY = "value_array"
    ARRAY = "array"
    COLLECTION = "collection"
    MAP = "map"
    RECORD = "record"


def classify_value(value: Any, registry: TypeRegistry) -> Shape:
    """Assign the encode-path shape of a live value.

    Args:
        value: Value about to be encoded.
        registry: Registry used to look up non-array types.

    Returns:
        Shape of the value.

    Raises:
        CodecError: UNKNOWN_TYPE when the value's exact type is not registered.
    """
    if isinstance(value, np.ndarray):
        return Shape.ARRAY
    return registry.descriptor_for_type(type(value)).shape


def classify_type_name(type_name: str, registry: TypeRegistry) -> Shape:
    """Assign the decode-path shape from a recorded type name.

    Array names are checked against the same grammar the array codec writes,
    so no live value is consulted.

    Args:
        type_name: Recorded ``type`` field.
        registry: Registry used to resolve non-array names.

    Returns:
        Shape recorded by the envelope.

    Raises:
        CodecError: UNKNOWN_TYPE or MALFORMED_ENVELOPE when the name does not
            classify.
    """
    if is_array_type_name(type_name):
        parsed = parse_array_type_name(type_name)
        if parsed.element_name is not None:
            registry.resolve_element(parsed.element_name)
        return Shape.ARRAY
    return registry.resolve(type_name).shape
