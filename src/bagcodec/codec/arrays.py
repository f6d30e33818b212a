"""Array encoder for numpy arrays of any rank.

A rank-R array becomes R levels of nested envelopes: every level is an
envelope whose type name carries one ``[`` per remaining dimension and whose
``value`` is the sequence of its sub-array envelopes; the last level holds
one scalar (or record) envelope per element.

Decoding recovers each extent by descending through the first element of
every level, so arrays are assumed rectangular.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from bagcodec.codec.envelope import (
    VALUE_KEY,
    new_envelope,
    read_header,
    require_element,
    require_value_array,
)
from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.kinds import element_accepts, element_dtype, element_kind_for_dtype
from bagcodec.codec.registry import TypeRegistry
from bagcodec.codec.type_names import (
    OBJECT_ELEMENT_NAME,
    ArrayTypeName,
    parse_array_type_name,
)
from bagcodec.tree import BagArray, BagObject

if TYPE_CHECKING:
    from bagcodec.codec.core import Codec


def _common_element_name(registry: TypeRegistry, value: np.ndarray) -> str:
    leaf_types = {type(leaf) for leaf in value.flat}
    if len(leaf_types) != 1:
        return OBJECT_ELEMENT_NAME
    leaf_type = leaf_types.pop()
    if leaf_type is np.ndarray:
        return OBJECT_ELEMENT_NAME
    return registry.name_for_type(leaf_type)


def array_type_name(registry: TypeRegistry, value: np.ndarray) -> ArrayTypeName:
    """Compute the recorded type name of an array.

    Args:
        registry: Registry used to name object-array elements.
        value: Array to describe.

    Returns:
        Rank plus primitive element code, or the shared element type name for
        object arrays.

    Raises:
        CodecError: UNKNOWN_TYPE for rank-0 arrays, unsupported dtypes, or
            unregistered element types.
    """
    if value.ndim == 0:
        raise CodecError(
            CodecErrorCode.UNKNOWN_TYPE,
            "Zero-rank arrays are not supported; encode the scalar instead",
            data={"dtype": str(value.dtype)},
        )
    if value.dtype.kind == "O":
        return ArrayTypeName(
            rank=value.ndim, element_name=_common_element_name(registry, value)
        )
    primitive = element_kind_for_dtype(value.dtype)
    if primitive is None:
        raise CodecError(
            CodecErrorCode.UNKNOWN_TYPE,
            f"Unsupported array dtype: {value.dtype}",
            data={"dtype": str(value.dtype)},
        )
    return ArrayTypeName(rank=value.ndim, primitive=primitive)


def encode_array(codec: Codec, value: np.ndarray, depth: int) -> BagObject:
    """Encode an array as nested envelopes mirroring its shape."""
    return _encode_level(codec, value, array_type_name(codec.registry, value), depth)


def _encode_level(
    codec: Codec, value: np.ndarray, type_name: ArrayTypeName, depth: int
) -> BagObject:
    codec.check_depth(depth)
    payload = BagArray()
    if type_name.rank > 1:
        child = type_name.child()
        for index in range(value.shape[0]):
            payload.add(_encode_level(codec, value[index], child, depth + 1))
    else:
        leaf_type = (
            element_dtype(type_name.primitive).type
            if type_name.primitive is not None
            else None
        )
        for index in range(value.shape[0]):
            leaf = value[index]
            if leaf_type is not None:
                # normalize platform aliases (e.g. longlong) to the canonical scalar
                leaf = leaf_type(leaf)
            payload.add(codec.encode_node(leaf, depth + 1))
    return new_envelope(type_name.format()).put(VALUE_KEY, payload)


def array_extents(envelope: BagObject, rank: int) -> tuple[int, ...]:
    """Recover per-dimension extents from the first element at each level.

    An empty level makes every deeper extent zero.

    Args:
        envelope: Top-level array envelope.
        rank: Rank parsed from the type name.

    Returns:
        Extents, one per dimension.

    Raises:
        CodecError: MALFORMED_ENVELOPE when a level is not an encoded sequence.
    """
    extents: list[int] = []
    node = envelope
    for level in range(rank):
        values = require_value_array(node)
        count = values.get_count()
        extents.append(count)
        if count == 0:
            extents.extend([0] * (rank - level - 1))
            break
        node = require_element(values, 0)
    return tuple(extents)


def decode_array(
    codec: Codec, envelope: BagObject, type_name: str, depth: int
) -> np.ndarray:
    """Allocate an array with the recovered extents and populate it.

    Args:
        codec: Codec used for leaf envelopes.
        envelope: Top-level array envelope.
        type_name: Recorded array type name.
        depth: Nesting depth of the array envelope.

    Returns:
        New array; never a partially populated one.

    Raises:
        CodecError: On type-name parse failure, malformed levels, or any leaf
            failure.
    """
    parsed = parse_array_type_name(type_name)
    dtype = (
        element_dtype(parsed.primitive)
        if parsed.primitive is not None
        else np.dtype(object)
    )
    target = np.empty(array_extents(envelope, parsed.rank), dtype=dtype)
    _populate(codec, target, (), envelope, parsed, depth)
    return target


def _populate(
    codec: Codec,
    target: np.ndarray,
    prefix: tuple[int, ...],
    envelope: BagObject,
    type_name: ArrayTypeName,
    depth: int,
) -> None:
    codec.check_depth(depth)
    values = require_value_array(envelope)
    extent = target.shape[len(prefix)]
    if values.get_count() != extent:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Jagged array: expected {extent} elements at depth {len(prefix)}, "
            f"found {values.get_count()}",
            data={"type": type_name.format(), "index": list(prefix)},
        )
    for index in range(extent):
        element = require_element(values, index)
        position = (*prefix, index)
        if type_name.rank > 1:
            child = type_name.child()
            header = read_header(element)
            if header.type != child.format():
                raise CodecError(
                    CodecErrorCode.MALFORMED_ENVELOPE,
                    f"Sub-array type {header.type!r} does not match {child.format()!r}",
                    data={"type": header.type, "index": list(position)},
                )
            _populate(codec, target, position, element, child, depth + 1)
        else:
            leaf = _decode_leaf(codec, element, type_name, position, depth + 1)
            _assign(target, position, leaf)


def _decode_leaf(
    codec: Codec,
    element: BagObject,
    type_name: ArrayTypeName,
    position: tuple[int, ...],
    depth: int,
) -> Any:
    """Decode one leaf and check it against the array's element."""
    expected = type_name.element_name
    if expected is not None and expected != OBJECT_ELEMENT_NAME:
        header = read_header(element)
        if header.type != expected:
            raise CodecError(
                CodecErrorCode.CONSTRUCTION_FAILURE,
                f"Cannot store {header.type} in {type_name.format()} array",
                data={"type": header.type, "index": list(position)},
            )
    leaf = codec.decode_node(element, depth)
    if type_name.primitive is not None and not element_accepts(
        type_name.primitive, leaf
    ):
        raise CodecError(
            CodecErrorCode.CONSTRUCTION_FAILURE,
            f"Cannot store {type(leaf).__name__} {leaf!r} in "
            f"{type_name.format()} array without loss",
            data={"index": list(position)},
        )
    return leaf


def _assign(target: np.ndarray, position: tuple[int, ...], leaf: Any) -> None:
    try:
        target[position] = leaf
    except (ValueError, TypeError, OverflowError) as exc:
        raise CodecError(
            CodecErrorCode.CONSTRUCTION_FAILURE,
            f"Cannot store {type(leaf).__name__} in {target.dtype} array: {exc}",
            data={"index": list(position)},
        ) from exc
