"""Value tree: ordered objects and arrays of scalars and nested trees."""

from bagcodec.tree.canonical import canonical_json_bytes, canonical_json_text
from bagcodec.tree.values import (
    BagArray,
    BagLeaf,
    BagObject,
    BagValue,
    bag_from_json,
    bag_from_plain,
)

__all__ = [
    "BagArray",
    "BagLeaf",
    "BagObject",
    "BagValue",
    "bag_from_json",
    "bag_from_plain",
    "canonical_json_bytes",
    "canonical_json_text",
]
