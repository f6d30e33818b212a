"""Record encoder: public members encoded one envelope per member name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from bagcodec.codec.envelope import VALUE_KEY, new_envelope, require_value_object
from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.registry import MemberAccessor, RecordDescriptor
from bagcodec.tree import BagObject

if TYPE_CHECKING:
    from bagcodec.codec.core import Codec

_LOGGER = logging.getLogger(__name__)


def _has_default(member: MemberAccessor, target: Any) -> bool:
    """Whether a freshly constructed record already holds a value for member."""
    try:
        member.get(target)
    except Exception:  # noqa: BLE001
        return False
    return True


def encode_record(
    codec: Codec, descriptor: RecordDescriptor, value: Any, depth: int
) -> BagObject:
    """Encode each public member under its name, in declaration order.

    Args:
        codec: Codec used for member values.
        descriptor: Record descriptor of the value's type.
        value: Record instance.
        depth: Nesting depth of the record envelope.

    Returns:
        Record envelope.

    Raises:
        CodecError: MEMBER_ACCESS_FAILURE if a member cannot be read, or any
            failure raised while encoding a member value.
    """
    members = BagObject()
    for member in descriptor.members:
        try:
            current = member.get(value)
        except Exception as exc:  # noqa: BLE001
            raise CodecError(
                CodecErrorCode.MEMBER_ACCESS_FAILURE,
                f"Cannot read member {member.name!r} of {descriptor.name}: {exc}",
                data={"type": descriptor.name, "member": member.name},
            ) from exc
        _LOGGER.debug("Add %s as %s", member.name, type(current).__qualname__)
        members.put(member.name, codec.encode_node(current, depth + 1))
    return new_envelope(descriptor.name).put(VALUE_KEY, members)


def decode_record(
    codec: Codec, descriptor: RecordDescriptor, envelope: BagObject, depth: int
) -> Any:
    """Allocate a default instance and assign every member present in the envelope.

    Members absent from the envelope keep their default-constructed value
    unless ``strict_members`` is set. A missing member the factory left unset
    (for example a required pydantic field under ``model_construct``) is
    malformed in either mode.

    Args:
        codec: Codec used for member envelopes.
        descriptor: Resolved record descriptor.
        envelope: Record envelope.
        depth: Nesting depth of the record envelope.

    Returns:
        New record instance.

    Raises:
        CodecError: CONSTRUCTION_FAILURE, MEMBER_ACCESS_FAILURE,
            MALFORMED_ENVELOPE, or any nested decode failure.
    """
    members = require_value_object(envelope)
    try:
        target = descriptor.factory()
    except Exception as exc:  # noqa: BLE001
        raise CodecError(
            CodecErrorCode.CONSTRUCTION_FAILURE,
            f"Cannot construct {descriptor.name}: {exc}",
            data={"type": descriptor.name},
        ) from exc

    for member in descriptor.members:
        if member.name not in members:
            if codec.settings.strict_members or not _has_default(member, target):
                raise CodecError(
                    CodecErrorCode.MALFORMED_ENVELOPE,
                    f"Envelope for {descriptor.name} is missing member {member.name!r}",
                    data={"type": descriptor.name, "member": member.name},
                )
            continue
        decoded = codec.decode_node(
            require_value_object(members, member.name), depth + 1
        )
        try:
            member.set(target, decoded)
        except Exception as exc:  # noqa: BLE001
            raise CodecError(
                CodecErrorCode.MEMBER_ACCESS_FAILURE,
                f"Cannot assign member {member.name!r} of {descriptor.name}: {exc}",
                data={"type": descriptor.name, "member": member.name},
            ) from exc
    return target
