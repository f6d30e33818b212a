"""Codec settings model and loading helpers."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class CodecSettings(BaseModel):
    """Codec behavior switches."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # When true, record members missing from an envelope are malformed
    # instead of being left at their default-constructed value.
    strict_members: bool = False
    max_depth: int = Field(default=256, ge=1, le=10_000)
    log_failures: bool = True


class CodecSettingsError(RuntimeError):
    """Raised when codec settings cannot be decoded or validated."""


def _decode_settings_payload(path: Path) -> dict[str, object]:
    """Decode settings payload from JSON or YAML.

    Args:
        path: Settings file path.

    Returns:
        Parsed mapping payload.

    Raises:
        CodecSettingsError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CodecSettingsError(f"Invalid codec settings JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise CodecSettingsError(f"Invalid codec settings YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise CodecSettingsError(
            "Invalid codec settings payload: root must be an object"
        )
    return payload


def load_codec_settings(path: Path) -> CodecSettings:
    """Load codec settings from disk, defaulting when missing.

    Args:
        path: Settings file path (``.json``, ``.yaml`` or ``.yml``).

    Returns:
        Parsed settings, or defaults when the file does not exist.

    Raises:
        CodecSettingsError: If payload decode or validation fails.
    """
    if not path.exists():
        return CodecSettings()
    payload = _decode_settings_payload(path)
    try:
        return CodecSettings.model_validate(payload)
    except ValidationError as exc:
        raise CodecSettingsError(f"Invalid codec settings payload: {exc}") from exc
