"""Envelope wire shape: ``{type, version, value}`` and ``{key, value}`` pairs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.tree import BagArray, BagObject

TYPE_KEY = "type"
VERSION_KEY = "version"
KEY_KEY = "key"
VALUE_KEY = "value"

# Two-step version. Changes in the minor part need no new decoder but must
# still reject envelopes written under another minor; changes in the major
# part mean a new decoder. Encoding always targets the current version.
FORMAT_VERSION_1 = "1.0"
FORMAT_VERSION = FORMAT_VERSION_1


class EnvelopeHeader(BaseModel):
    """Validated ``type``/``version`` fields of one envelope."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str = Field(min_length=1)
    version: str = Field(pattern=r"^\d+\.\d+$")


def new_envelope(type_name: str) -> BagObject:
    """Start an envelope for the current format version.

    Args:
        type_name: Canonical recorded type name.

    Returns:
        Envelope holding ``type`` and ``version``; caller adds ``value``.
    """
    return BagObject().put(TYPE_KEY, type_name).put(VERSION_KEY, FORMAT_VERSION)


def read_header(envelope: object) -> EnvelopeHeader:
    """Check version first, then validate the envelope header.

    Args:
        envelope: Candidate envelope node.

    Returns:
        Validated header.

    Raises:
        CodecError: MALFORMED_ENVELOPE when the node or its fields are not
            usable, VERSION_MISMATCH when the version differs from
            ``FORMAT_VERSION``.
    """
    if not isinstance(envelope, BagObject):
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Envelope must be an object, got {type(envelope).__name__}",
        )
    version = envelope.get(VERSION_KEY)
    if version is None:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Envelope is missing a {VERSION_KEY!r} field",
        )
    # any present value other than the exact current string, numbers included
    if version != FORMAT_VERSION:
        shown = (
            version.to_plain() if isinstance(version, BagObject | BagArray) else version
        )
        raise CodecError(
            CodecErrorCode.VERSION_MISMATCH,
            f"Deserialization failed, unknown version ({version}), "
            f"expected ({FORMAT_VERSION})",
            data={"version": shown, "expected": FORMAT_VERSION},
        )
    try:
        return EnvelopeHeader(type=envelope.get_string(TYPE_KEY), version=version)
    except ValidationError as exc:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Envelope is missing a non-empty string {TYPE_KEY!r} field",
        ) from exc


def require_value_object(envelope: BagObject, key: str = VALUE_KEY) -> BagObject:
    """Return the nested object stored under key or fail as malformed."""
    value = envelope.get_bag_object(key)
    if value is None:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Envelope field {key!r} must be an object",
            data={"type": envelope.get_string(TYPE_KEY), "field": key},
        )
    return value


def require_value_array(envelope: BagObject) -> BagArray:
    """Return the nested array stored under ``value`` or fail as malformed."""
    value = envelope.get_bag_array(VALUE_KEY)
    if value is None:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Envelope field {VALUE_KEY!r} must be an array",
            data={"type": envelope.get_string(TYPE_KEY), "field": VALUE_KEY},
        )
    return value


def require_element(values: BagArray, index: int) -> BagObject:
    """Return the envelope at index of an encoded sequence or fail as malformed."""
    element = values.get_bag_object(index)
    if element is None:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Sequence element {index} must be an envelope object",
            data={"index": index},
        )
    return element
