"""Array type-name grammar: ``"[" * rank`` followed by an element code.

Element codes are either a primitive code (``Z B S I J F D``) or an object
reference ``L<registered type name>;``. For example ``[[I`` is a rank-2 int32
array and ``[Lbuiltins.int;`` a rank-1 array of python ints.
"""

from __future__ import annotations

from dataclasses import dataclass

from bagcodec.codec.errors import CodecError, CodecErrorCode
from bagcodec.codec.kinds import ArrayElementKind

ARRAY_MARKER = "["
OBJECT_PREFIX = "L"
OBJECT_SUFFIX = ";"
OBJECT_ELEMENT_NAME = "builtins.object"

_PRIMITIVE_CODES = {kind.value: kind for kind in ArrayElementKind}


@dataclass(frozen=True)
class ArrayTypeName:
    """Parsed array type name.

    Exactly one of ``primitive`` / ``element_name`` is set.
    """

    rank: int
    primitive: ArrayElementKind | None = None
    element_name: str | None = None

    @property
    def element_code(self) -> str:
        if self.primitive is not None:
            return self.primitive.value
        return f"{OBJECT_PREFIX}{self.element_name}{OBJECT_SUFFIX}"

    def format(self) -> str:
        return ARRAY_MARKER * self.rank + self.element_code

    def child(self) -> ArrayTypeName:
        """Type name of one sub-array (rank reduced by one)."""
        return ArrayTypeName(
            rank=self.rank - 1,
            primitive=self.primitive,
            element_name=self.element_name,
        )


def is_array_type_name(type_name: str) -> bool:
    return type_name.startswith(ARRAY_MARKER)


def parse_array_type_name(type_name: str) -> ArrayTypeName:
    """Parse rank and element from an array type name.

    Args:
        type_name: Recorded ``type`` field of an array envelope.

    Returns:
        Parsed array type name.

    Raises:
        CodecError: MALFORMED_ENVELOPE for structural problems, UNKNOWN_TYPE for
            an unrecognized primitive code.
    """
    rank = len(type_name) - len(type_name.lstrip(ARRAY_MARKER))
    element = type_name[rank:]
    if rank == 0 or not element:
        raise CodecError(
            CodecErrorCode.MALFORMED_ENVELOPE,
            f"Invalid array type name: {type_name!r}",
            data={"type": type_name},
        )
    primitive = _PRIMITIVE_CODES.get(element)
    if primitive is not None:
        return ArrayTypeName(rank=rank, primitive=primitive)
    if element.startswith(OBJECT_PREFIX):
        if not element.endswith(OBJECT_SUFFIX) or len(element) < 3:
            raise CodecError(
                CodecErrorCode.MALFORMED_ENVELOPE,
                f"Unterminated object element in array type name: {type_name!r}",
                data={"type": type_name},
            )
        return ArrayTypeName(rank=rank, element_name=element[1:-1])
    raise CodecError(
        CodecErrorCode.UNKNOWN_TYPE,
        f"Unknown array element code {element!r} in {type_name!r}",
        data={"type": type_name},
    )
