"""Codec configuration loading."""

from bagcodec.config.settings import (
    CodecSettings,
    CodecSettingsError,
    load_codec_settings,
)

__all__ = [
    "CodecSettings",
    "CodecSettingsError",
    "load_codec_settings",
]
