"""Closed scalar and array-element kinds with their text and dtype mappings."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import numpy as np


class ScalarKind(StrEnum):
    """Scalar kinds; the value is the canonical recorded type name."""

    BOOL = "builtins.bool"
    INT = "builtins.int"
    FLOAT = "builtins.float"
    STR = "builtins.str"
    NONE = "builtins.NoneType"
    NP_BOOL = "numpy.bool"
    INT8 = "numpy.int8"
    INT16 = "numpy.int16"
    INT32 = "numpy.int32"
    INT64 = "numpy.int64"
    FLOAT32 = "numpy.float32"
    FLOAT64 = "numpy.float64"


class ArrayElementKind(StrEnum):
    """Primitive array element codes used in array type names."""

    BOOL = "Z"
    INT8 = "B"
    INT16 = "S"
    INT32 = "I"
    INT64 = "J"
    FLOAT32 = "F"
    FLOAT64 = "D"


@dataclass(frozen=True)
class ScalarSpec:
    """Runtime type plus text round-trip functions for one scalar kind."""

    kind: ScalarKind
    py_type: type
    format: Callable[[Any], str]
    parse: Callable[[str], Any]


def _format_bool(value: Any) -> str:
    return "true" if bool(value) else "false"


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"invalid boolean literal: {text!r}")


def _parse_none(text: str) -> None:
    if text != "null":
        raise ValueError(f"invalid null literal: {text!r}")


def _format_float(value: Any) -> str:
    return repr(float(value))


def _int_parser(np_type: type[np.integer]) -> Callable[[str], Any]:
    info = np.iinfo(np_type)

    def parse(text: str) -> Any:
        number = int(text)
        if not info.min <= number <= info.max:
            raise OverflowError(f"{text!r} out of range for {np_type.__name__}")
        return np_type(number)

    return parse


_SCALAR_SPECS: dict[ScalarKind, ScalarSpec] = {
    spec.kind: spec
    for spec in (
        ScalarSpec(ScalarKind.BOOL, bool, _format_bool, _parse_bool),
        ScalarSpec(ScalarKind.INT, int, str, int),
        ScalarSpec(ScalarKind.FLOAT, float, _format_float, float),
        ScalarSpec(ScalarKind.STR, str, str, str),
        ScalarSpec(ScalarKind.NONE, type(None), lambda _: "null", _parse_none),
        ScalarSpec(
            ScalarKind.NP_BOOL,
            np.bool_,
            _format_bool,
            lambda text: np.bool_(_parse_bool(text)),
        ),
        ScalarSpec(ScalarKind.INT8, np.int8, str, _int_parser(np.int8)),
        ScalarSpec(ScalarKind.INT16, np.int16, str, _int_parser(np.int16)),
        ScalarSpec(ScalarKind.INT32, np.int32, str, _int_parser(np.int32)),
        ScalarSpec(ScalarKind.INT64, np.int64, str, _int_parser(np.int64)),
        # numpy prints the shortest float32 text that parses back to the same value
        ScalarSpec(ScalarKind.FLOAT32, np.float32, str, np.float32),
        ScalarSpec(
            ScalarKind.FLOAT64,
            np.float64,
            _format_float,
            lambda text: np.float64(float(text)),
        ),
    )
}

_ELEMENT_DTYPES: dict[ArrayElementKind, np.dtype] = {
    ArrayElementKind.BOOL: np.dtype(np.bool_),
    ArrayElementKind.INT8: np.dtype(np.int8),
    ArrayElementKind.INT16: np.dtype(np.int16),
    ArrayElementKind.INT32: np.dtype(np.int32),
    ArrayElementKind.INT64: np.dtype(np.int64),
    ArrayElementKind.FLOAT32: np.dtype(np.float32),
    ArrayElementKind.FLOAT64: np.dtype(np.float64),
}

# (dtype.kind, itemsize) so byte order never changes the element code
_DTYPE_ELEMENT_KINDS: dict[tuple[str, int], ArrayElementKind] = {
    (dtype.kind, dtype.itemsize): kind for kind, dtype in _ELEMENT_DTYPES.items()
}


def scalar_spec(kind: ScalarKind) -> ScalarSpec:
    return _SCALAR_SPECS[kind]


def scalar_specs() -> tuple[ScalarSpec, ...]:
    """Return every scalar spec in declaration order."""
    return tuple(_SCALAR_SPECS[kind] for kind in ScalarKind)


def element_dtype(kind: ArrayElementKind) -> np.dtype:
    return _ELEMENT_DTYPES[kind]


def element_kind_for_dtype(dtype: np.dtype) -> ArrayElementKind | None:
    """Map a numpy dtype to its primitive element code.

    Args:
        dtype: Array dtype.

    Returns:
        Element kind, or None for object and unsupported dtypes.
    """
    return _DTYPE_ELEMENT_KINDS.get((dtype.kind, dtype.itemsize))


def element_accepts(kind: ArrayElementKind, leaf: Any) -> bool:
    """Whether a decoded leaf widens into a primitive element without loss.

    Booleans only go into boolean arrays. Python ints go into any float
    array and into integer arrays whose range holds them; Python floats only
    into float64. Fixed-width numpy scalars follow numpy's safe casting.

    Args:
        kind: Element kind parsed from the array type name.
        leaf: Decoded leaf value.

    Returns:
        True when the leaf may be stored.
    """
    dtype = _ELEMENT_DTYPES[kind]
    leaf_type = type(leaf)
    if leaf_type is bool or leaf_type is np.bool_:
        return kind is ArrayElementKind.BOOL
    if kind is ArrayElementKind.BOOL:
        return False
    if leaf_type is int:
        if dtype.kind == "f":
            return True
        info = np.iinfo(dtype)
        return info.min <= leaf <= info.max
    if leaf_type is float:
        return kind is ArrayElementKind.FLOAT64
    if isinstance(leaf, np.number):
        return bool(np.can_cast(leaf.dtype, dtype, casting="safe"))
    return False
