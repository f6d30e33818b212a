"""Deterministic codec error contracts."""

from __future__ import annotations

from enum import StrEnum


class CodecErrorCode(StrEnum):
    """Stable codec failure codes."""

    UNKNOWN_TYPE = "unknown_type"
    VERSION_MISMATCH = "version_mismatch"
    MALFORMED_ENVELOPE = "malformed_envelope"
    CONSTRUCTION_FAILURE = "construction_failure"
    MEMBER_ACCESS_FAILURE = "member_access_failure"
    DEPTH_EXCEEDED = "depth_exceeded"


class CodecError(RuntimeError):
    """Codec failure with stable deterministic code."""

    def __init__(
        self,
        code: CodecErrorCode,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create codec failure.

        Args:
            code: Stable codec error code.
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data or {}
