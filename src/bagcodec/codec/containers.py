"""Collection and map encoders."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bagcodec.codec.envelope import (
    KEY_KEY,
    VALUE_KEY,
    new_envelope,
    require_element,
    require_value_array,
    require_value_object,
)
from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.registry import ContainerDescriptor
from bagcodec.tree import BagArray, BagObject

if TYPE_CHECKING:
    from bagcodec.codec.core import Codec


def _build(descriptor: ContainerDescriptor, items: list[Any]) -> Any:
    try:
        return descriptor.build(items)
    except Exception as exc:  # noqa: BLE001
        raise CodecError(
            CodecErrorCode.CONSTRUCTION_FAILURE,
            f"Cannot construct {descriptor.name}: {exc}",
            data={"type": descriptor.name},
        ) from exc


def encode_collection(
    codec: Codec, descriptor: ContainerDescriptor, value: Any, depth: int
) -> BagObject:
    """Encode a snapshot of the collection, one envelope per element."""
    payload = BagArray()
    for item in list(value):
        payload.add(codec.encode_node(item, depth + 1))
    return new_envelope(descriptor.name).put(VALUE_KEY, payload)


def decode_collection(
    codec: Codec, descriptor: ContainerDescriptor, envelope: BagObject, depth: int
) -> Any:
    """Decode every element in encoded order and build a new collection.

    Raises:
        CodecError: On the first element failure, or CONSTRUCTION_FAILURE if the
            collection cannot be built from the decoded elements.
    """
    values = require_value_array(envelope)
    items = [
        codec.decode_node(require_element(values, index), depth + 1)
        for index in range(values.get_count())
    ]
    return _build(descriptor, items)


def encode_map(
    codec: Codec, descriptor: ContainerDescriptor, value: Any, depth: int
) -> BagObject:
    """Encode a snapshot of the map as ``{key, value}`` pairs of full envelopes."""
    payload = BagArray()
    for key in list(value.keys()):
        pair = (
            BagObject()
            .put(KEY_KEY, codec.encode_node(key, depth + 1))
            .put(VALUE_KEY, codec.encode_node(value[key], depth + 1))
        )
        payload.add(pair)
    return new_envelope(descriptor.name).put(VALUE_KEY, payload)


def decode_map(
    codec: Codec, descriptor: ContainerDescriptor, envelope: BagObject, depth: int
) -> Any:
    """Decode each pair's key and value independently and build a new map.

    Raises:
        CodecError: On the first pair failure, or CONSTRUCTION_FAILURE if the map
            cannot be built (for example an unhashable decoded key).
    """
    values = require_value_array(envelope)
    pairs: list[tuple[Any, Any]] = []
    for index in range(values.get_count()):
        pair = require_element(values, index)
        key = codec.decode_node(require_value_object(pair, KEY_KEY), depth + 1)
        item = codec.decode_node(require_value_object(pair, VALUE_KEY), depth + 1)
        pairs.append((key, item))
    return _build(descriptor, pairs)
