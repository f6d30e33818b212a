"""Type-tagged, versioned codec between native values and value trees."""

from bagcodec.codec.api import (
    TypeNameDescription,
    decode,
    default_codec,
    describe_type_name,
    encode,
)
from bagcodec.codec.core import Codec
from bagcodec.codec.envelope import (
    FORMAT_VERSION,
    KEY_KEY,
    TYPE_KEY,
    VALUE_KEY,
    VERSION_KEY,
    EnvelopeHeader,
)
from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.kinds import ArrayElementKind, ScalarKind
from bagcodec.codec.registry import (
    ContainerDescriptor,
    MemberAccessor,
    PassThroughDescriptor,
    RecordDescriptor,
    ScalarDescriptor,
    TypeDescriptor,
    TypeRegistry,
    default_type_name,
    register_records,
)
from bagcodec.codec.result import CodecResult, CodecStatus
from bagcodec.codec.shapes import Shape, classify_type_name, classify_value
from bagcodec.codec.type_names import ArrayTypeName, parse_array_type_name

__all__ = [
    "FORMAT_VERSION",
    "KEY_KEY",
    "TYPE_KEY",
    "VALUE_KEY",
    "VERSION_KEY",
    "ArrayElementKind",
    "ArrayTypeName",
    "Codec",
    "CodecError",
    "CodecErrorCode",
    "CodecResult",
    "CodecStatus",
    "ContainerDescriptor",
    "EnvelopeHeader",
    "MemberAccessor",
    "PassThroughDescriptor",
    "RecordDescriptor",
    "ScalarDescriptor",
    "ScalarKind",
    "Shape",
    "TypeDescriptor",
    "TypeNameDescription",
    "TypeRegistry",
    "classify_type_name",
    "classify_value",
    "decode",
    "default_codec",
    "default_type_name",
    "describe_type_name",
    "encode",
    "parse_array_type_name",
    "register_records",
]
