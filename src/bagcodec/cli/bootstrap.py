"""CLI bootstrap helpers."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from bagcodec.codec import Codec, TypeRegistry
from bagcodec.config import CodecSettings, load_codec_settings

_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    """Configure Rich-backed logging once for CLI commands."""
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    _LOGGING_CONFIGURED = True


def build_codec(config_file: Path | None) -> Codec:
    """Build a builtin-registry codec with settings from an optional file.

    Args:
        config_file: Optional settings YAML/JSON path.

    Returns:
        Codec ready for decoding.

    Raises:
        CodecSettingsError: If the settings file is invalid.
    """
    settings = (
        load_codec_settings(config_file) if config_file is not None else CodecSettings()
    )
    return Codec(TypeRegistry.with_builtins(), settings)
