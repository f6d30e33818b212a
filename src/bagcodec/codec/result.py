"""Explicit result envelope returned by top-level encode/decode calls."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from bagcodec.codec.errors import CodecError, CodecErrorCode


class CodecStatus(StrEnum):
    """Normalized codec call status."""

    OK = "ok"
    ERROR = "error"


class CodecResult(BaseModel):
    """Deterministic encode/decode result."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: CodecStatus
    code: str
    message: str
    value: Any = None
    data: dict[str, Any] | None = None

    @classmethod
    def ok(cls, value: Any, *, message: str = "ok") -> CodecResult:
        """Construct a successful codec result.

        Args:
            value: Envelope (encode) or reconstructed value (decode).
            message: Optional human-readable note.

        Returns:
            Successful codec result.
        """
        return cls(status=CodecStatus.OK, code="ok", message=message, value=value)

    @classmethod
    def error(cls, exc: CodecError) -> CodecResult:
        """Construct an error result from a codec failure.

        Args:
            exc: Failure raised somewhere in the encode/decode recursion.

        Returns:
            Error codec result carrying the failure code and diagnostics.
        """
        return cls(
            status=CodecStatus.ERROR,
            code=exc.code.value,
            message=exc.message,
            data=dict(exc.data) or None,
        )

    @property
    def is_ok(self) -> bool:
        return self.status == CodecStatus.OK

    @property
    def error_code(self) -> CodecErrorCode | None:
        """Failure kind, or None for successful results."""
        if self.is_ok:
            return None
        return CodecErrorCode(self.code)

    def unwrap(self) -> Any:
        """Return the value or raise the recorded failure.

        Returns:
            Result value.

        Raises:
            CodecError: If this result is an error.
        """
        if self.is_ok:
            return self.value
        raise CodecError(CodecErrorCode(self.code), self.message, data=self.data)
