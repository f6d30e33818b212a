"""Failure reporting: explicit error results with stable codes."""

from __future__ import annotations

import logging

import pytest

from bagcodec.codec import (
    Codec,
    CodecError,
    CodecErrorCode,
    CodecStatus,
    MemberAccessor,
    TypeRegistry,
)
from bagcodec.config import CodecSettings
from tests.unit.codec.record_fixtures import (
    FrozenPair,
    NeedsArgs,
    SampleRecord,
    sample_registry,
)


def _envelope(type_name: str, value: object, version: object = "1.0") -> dict:
    return {"type": type_name, "version": version, "value": value}


@pytest.fixture
def codec() -> Codec:
    """Codec over the builtin registry plus fixture records."""
    return Codec(sample_registry())


@pytest.mark.unit
@pytest.mark.parametrize("version", ["1.1", "2.0", "0.9", "1", "", 1.0, 1, True])
def test_version_mismatch_fails_regardless_of_payload(
    codec: Codec, version: object
) -> None:
    """Any version other than the current one is rejected before decoding."""
    # Arrange - envelope naming an unknown type under another version
    envelope = _envelope("no.such.Type", 42, version=version)

    # Act - decode
    result = codec.decode(envelope)

    # Assert - version gate wins over the unknown type
    assert result.status is CodecStatus.ERROR
    assert result.error_code is CodecErrorCode.VERSION_MISMATCH
    assert result.value is None


@pytest.mark.unit
def test_numeric_version_is_reported_with_its_value(codec: Codec) -> None:
    """Hand-written JSON numbers in ``version`` are mismatches, not malformed."""
    # Act - decode with a numeric version
    result = codec.decode(_envelope("builtins.int", "1", version=1.0))

    # Assert - mismatch with the offending value in diagnostics
    assert result.error_code is CodecErrorCode.VERSION_MISMATCH
    assert result.data == {"version": 1.0, "expected": "1.0"}


@pytest.mark.unit
def test_nested_version_mismatch_aborts_whole_decode(codec: Codec) -> None:
    """A member envelope from another version fails the record decode."""
    # Arrange - record envelope with one member rewritten to version 0.9
    envelope = codec.encode(SampleRecord(count=5)).unwrap()
    envelope.get_bag_object("value").get_bag_object("count").put("version", "0.9")

    # Act - decode
    result = codec.decode(envelope)

    # Assert - whole decode fails with the nested version
    assert result.error_code is CodecErrorCode.VERSION_MISMATCH
    assert result.data == {"version": "0.9", "expected": "1.0"}


@pytest.mark.unit
@pytest.mark.parametrize(
    "envelope",
    [
        _envelope("com.example.Missing", "x"),
        _envelope("[Lcom.example.Missing;", []),
        _envelope("[Q", []),
    ],
)
def test_unknown_type_names_are_rejected(codec: Codec, envelope: dict) -> None:
    """Unregistered names fail as UNKNOWN_TYPE instead of raising."""
    # Act - decode
    result = codec.decode(envelope)

    # Assert - unknown type
    assert result.error_code is CodecErrorCode.UNKNOWN_TYPE


@pytest.mark.unit
def test_encoding_unregistered_type_fails(codec: Codec) -> None:
    """Values of unregistered types cannot be encoded."""

    # Arrange - list holding an instance of an unregistered class
    class Unregistered:
        pass

    value = [1, Unregistered()]

    # Act - encode
    result = codec.encode(value)

    # Assert - unknown type naming the class
    assert result.error_code is CodecErrorCode.UNKNOWN_TYPE
    assert "Unregistered" in result.message


@pytest.mark.unit
@pytest.mark.parametrize(
    "envelope",
    [
        {},
        {"type": "builtins.int", "value": "1"},
        {"version": "1.0", "value": "1"},
        _envelope("", "1"),
        _envelope("builtins.int", 5),
        _envelope("builtins.list", {"not": "an array"}),
        _envelope("builtins.list", ["not an envelope"]),
        _envelope("builtins.dict", [{"key": _envelope("builtins.str", "a")}]),
        _envelope("fixtures.SampleRecord", ["not", "members"]),
        _envelope("bagcodec.tree.values.BagObject", [1]),
    ],
)
def test_malformed_envelopes_are_rejected(codec: Codec, envelope: dict) -> None:
    """Missing fields or nested values of the wrong kind are malformed."""
    # Act - decode
    result = codec.decode(envelope)

    # Assert - malformed envelope
    assert result.error_code is CodecErrorCode.MALFORMED_ENVELOPE


@pytest.mark.unit
@pytest.mark.parametrize(
    "envelope",
    [
        _envelope("builtins.int", "abc"),
        _envelope("numpy.int8", "300"),
        _envelope("builtins.bool", "maybe"),
        _envelope("fixtures.NeedsArgs", {}),
        _envelope("builtins.set", [_envelope("builtins.list", [])]),
    ],
)
def test_construction_failures(codec: Codec, envelope: dict) -> None:
    """Unparseable text, missing default constructors, and bad builds fail."""
    # Act - decode
    result = codec.decode(envelope)

    # Assert - construction failure
    assert result.error_code is CodecErrorCode.CONSTRUCTION_FAILURE


@pytest.mark.unit
def test_record_without_default_constructor_encodes_but_does_not_decode(
    codec: Codec,
) -> None:
    """Encoding only reads members; decoding needs a no-argument factory."""
    # Arrange - envelope of a record whose type needs constructor arguments
    envelope = codec.encode(NeedsArgs(value=3)).unwrap()

    # Act - decode
    result = codec.decode(envelope)

    # Assert - factory call fails
    assert result.error_code is CodecErrorCode.CONSTRUCTION_FAILURE


@pytest.mark.unit
def test_member_assignment_failure(codec: Codec) -> None:
    """Frozen records cannot have members assigned on decode."""
    # Arrange - envelope of a frozen dataclass
    envelope = codec.encode(FrozenPair(left=1, right=2)).unwrap()

    # Act - decode
    result = codec.decode(envelope)

    # Assert - first member assignment fails
    assert result.error_code is CodecErrorCode.MEMBER_ACCESS_FAILURE
    assert result.data == {"type": "fixtures.FrozenPair", "member": "left"}


@pytest.mark.unit
def test_member_read_failure() -> None:
    """A failing member getter aborts the encode."""

    # Arrange - record registered with a getter that raises
    def _boom(_: object) -> object:
        raise RuntimeError("boom")

    registry = TypeRegistry.with_builtins()
    registry.register_record(
        SampleRecord,
        name="fixtures.Broken",
        members=[MemberAccessor(name="count", get=_boom, set=setattr)],
    )

    # Act - encode
    result = Codec(registry).encode(SampleRecord())

    # Assert - member access failure carrying the getter's message
    assert result.error_code is CodecErrorCode.MEMBER_ACCESS_FAILURE
    assert "boom" in result.message


@pytest.mark.unit
def test_missing_members_keep_defaults_unless_strict() -> None:
    """Absent members stay default-constructed; strict mode rejects them."""
    # Arrange - record envelope without the "ratio" and "label" members
    lenient = Codec(sample_registry())
    strict = Codec(sample_registry(), CodecSettings(strict_members=True))
    envelope = lenient.encode(SampleRecord(count=9, label="gone")).unwrap()
    members = envelope.get_bag_object("value")
    trimmed = envelope.copy().put(
        "value", {key: members.get(key).to_plain() for key in ("count", "active")}
    )

    # Act - decode with both settings
    lenient_result = lenient.decode(trimmed)
    strict_result = strict.decode(trimmed)

    # Assert - lenient keeps defaults, strict reports the missing member
    assert lenient_result.unwrap() == SampleRecord(count=9, label="")
    assert strict_result.error_code is CodecErrorCode.MALFORMED_ENVELOPE
    assert strict_result.data == {"type": "fixtures.SampleRecord", "member": "ratio"}


@pytest.mark.unit
@pytest.mark.parametrize(
    "members",
    [{}, {"retries": {"type": "builtins.int", "version": "1.0", "value": "5"}}],
)
def test_missing_member_without_default_is_malformed(
    codec: Codec, members: dict
) -> None:
    """A required model field absent from the envelope fails even when lenient."""
    # Arrange - pydantic record envelope lacking the required "name" member
    envelope = _envelope("fixtures.ServiceModel", members)

    # Act - decode with lenient settings
    result = codec.decode(envelope)

    # Assert - malformed, naming the member instead of returning a partial model
    assert result.error_code is CodecErrorCode.MALFORMED_ENVELOPE
    assert result.data == {"type": "fixtures.ServiceModel", "member": "name"}
    assert result.value is None


@pytest.mark.unit
def test_depth_limit_is_reported_as_resource_failure() -> None:
    """Nesting past max_depth fails both directions with DEPTH_EXCEEDED."""
    # Arrange - shallow codec and a five-level list
    shallow = Codec(settings=CodecSettings(max_depth=3))
    deep_value = [[[[[1]]]]]
    envelope = Codec().encode(deep_value).unwrap()

    # Act - encode and decode with the shallow codec
    encoded = shallow.encode(deep_value)
    decoded = shallow.decode(envelope)

    # Assert - both exceed the limit; shallower values still pass
    assert encoded.error_code is CodecErrorCode.DEPTH_EXCEEDED
    assert decoded.error_code is CodecErrorCode.DEPTH_EXCEEDED
    assert shallow.encode([[1]]).is_ok


@pytest.mark.unit
def test_unwrap_and_raising_variants_surface_codec_error(codec: Codec) -> None:
    """Collaborators preferring exceptions get CodecError with the same code."""
    # Arrange - failed decode result
    result = codec.decode(_envelope("com.example.Missing", "x"))

    # Act - unwrap it and call the raising variant
    with pytest.raises(CodecError) as unwrapped:
        result.unwrap()
    with pytest.raises(CodecError) as raised:
        codec.from_envelope(_envelope("com.example.Missing", "x"))

    # Assert - same code everywhere
    assert unwrapped.value.code is CodecErrorCode.UNKNOWN_TYPE
    assert raised.value.code is CodecErrorCode.UNKNOWN_TYPE
    assert result.code == "unknown_type"


@pytest.mark.unit
def test_failures_are_logged_as_diagnostics(
    codec: Codec, caplog: pytest.LogCaptureFixture
) -> None:
    """Top-level failures go to the log with their code; quiet mode skips it."""
    # Arrange - capture codec warnings and build a quiet codec
    caplog.set_level(logging.WARNING, logger="bagcodec.codec.core")
    quiet = Codec(settings=CodecSettings(log_failures=False))

    # Act - fail one decode on each codec
    codec.decode(_envelope("com.example.Missing", "x"))
    quiet.decode(_envelope("com.example.Missing", "x"))

    # Assert - exactly one warning, from the logging codec
    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "decode failed [unknown_type]: Unknown type name: 'com.example.Missing'"
    ]
