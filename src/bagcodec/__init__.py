"""bagcodec: type-tagged value tree codec."""

from bagcodec.codec import (
    FORMAT_VERSION,
    Codec,
    CodecError,
    CodecErrorCode,
    CodecResult,
    Shape,
    TypeRegistry,
    decode,
    encode,
)
from bagcodec.config import CodecSettings
from bagcodec.tree import BagArray, BagObject

__all__ = [
    "FORMAT_VERSION",
    "BagArray",
    "BagObject",
    "Codec",
    "CodecError",
    "CodecErrorCode",
    "CodecResult",
    "CodecSettings",
    "Shape",
    "TypeRegistry",
    "decode",
    "encode",
]
