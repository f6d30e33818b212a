"""Scalar and pass-through (value tree) encoders."""

from __future__ import annotations

from typing import Any

from bagcodec.codec.envelope import VALUE_KEY, new_envelope
from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.registry import PassThroughDescriptor, ScalarDescriptor
from bagcodec.codec.shapes import Shape
from bagcodec.tree import BagArray, BagObject


def encode_scalar(descriptor: ScalarDescriptor, value: Any) -> BagObject:
    """Store the scalar's text form under its concrete type name."""
    return new_envelope(descriptor.name).put(VALUE_KEY, descriptor.spec.format(value))


def decode_scalar(descriptor: ScalarDescriptor, envelope: BagObject) -> Any:
    """Parse the stored text back into the recorded scalar type.

    Args:
        descriptor: Resolved scalar descriptor.
        envelope: Scalar envelope.

    Returns:
        Reconstructed scalar.

    Raises:
        CodecError: MALFORMED_ENVELOPE when ``value`` is not text,
            CONSTRUCTION_FAILURE when the text does not parse.
    """
    text = envelope.get_string(VALUE_KEY)
    if text is None:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Scalar envelope for {descriptor.name!r} must hold text in {VALUE_KEY!r}",
            data={"type": descriptor.name},
        )
    try:
        return descriptor.spec.parse(text)
    except (ValueError, OverflowError, TypeError) as exc:
        raise CodecError(
            CodecErrorCode.CONSTRUCTION_FAILURE,
            f"Cannot parse {text!r} as {descriptor.name}: {exc}",
            data={"type": descriptor.name, "text": text},
        ) from exc


def encode_pass_through(
    descriptor: PassThroughDescriptor, value: BagObject | BagArray
) -> BagObject:
    """Embed a value tree as-is (deep copy), without a second envelope."""
    return new_envelope(descriptor.name).put(VALUE_KEY, value.copy())


def decode_pass_through(
    descriptor: PassThroughDescriptor, envelope: BagObject
) -> BagObject | BagArray:
    """Return a copy of the embedded value tree.

    Raises:
        CodecError: MALFORMED_ENVELOPE when the embedded node has the wrong kind.
    """
    expected = BagObject if descriptor.shape == Shape.VALUE_OBJECT else BagArray
    value = envelope.get(VALUE_KEY)
    if not isinstance(value, expected):
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Envelope for {descriptor.name!r} must embed a {expected.__name__}",
            data={"type": descriptor.name},
        )
    return value.copy()
