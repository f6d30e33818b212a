"""Unit tests for codec settings loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from bagcodec.config import CodecSettings, CodecSettingsError, load_codec_settings


@pytest.mark.unit
def test_missing_settings_file_returns_defaults(tmp_path: Path) -> None:
    """Missing settings file should resolve to lenient defaults."""
    # Arrange - path that does not exist
    path = tmp_path / "missing.yaml"

    # Act - load
    settings = load_codec_settings(path)

    # Assert - default values
    assert settings == CodecSettings()
    assert settings.strict_members is False
    assert settings.max_depth == 256
    assert settings.log_failures is True


@pytest.mark.unit
def test_yaml_settings_are_loaded(tmp_path: Path) -> None:
    """YAML settings files override selected fields."""
    # Arrange - yaml with strict members and a shallow depth limit
    path = tmp_path / "codec.yaml"
    path.write_text("strict_members: true\nmax_depth: 16\n", encoding="utf-8")

    # Act - load
    settings = load_codec_settings(path)

    # Assert - overrides applied, untouched field keeps default
    assert settings.strict_members is True
    assert settings.max_depth == 16
    assert settings.log_failures is True


@pytest.mark.unit
def test_json_settings_are_loaded(tmp_path: Path) -> None:
    """JSON settings files are decoded by suffix."""
    path = tmp_path / "codec.json"
    path.write_text('{"log_failures": false}', encoding="utf-8")

    settings = load_codec_settings(path)

    assert settings.log_failures is False


@pytest.mark.unit
def test_empty_yaml_file_returns_defaults(tmp_path: Path) -> None:
    """An empty YAML document means no overrides."""
    path = tmp_path / "codec.yml"
    path.write_text("", encoding="utf-8")

    assert load_codec_settings(path) == CodecSettings()


@pytest.mark.unit
@pytest.mark.parametrize(
    ("filename", "content", "message"),
    [
        ("codec.json", "{not json", "Invalid codec settings JSON"),
        ("codec.yaml", "max_depth: [1, 2\n", "Invalid codec settings YAML"),
        ("codec.yaml", "- strict_members\n", "root must be an object"),
        ("codec.yaml", "unknown_flag: true\n", "Invalid codec settings payload"),
        ("codec.yaml", "max_depth: 0\n", "Invalid codec settings payload"),
        ("codec.json", '{"max_depth": 20000}', "Invalid codec settings payload"),
    ],
)
def test_invalid_settings_raise_settings_error(
    tmp_path: Path, filename: str, content: str, message: str
) -> None:
    """Decode and validation failures surface as CodecSettingsError."""
    # Arrange - invalid settings payload
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")

    # Act / Assert - load raises with a descriptive message
    with pytest.raises(CodecSettingsError, match=message):
        load_codec_settings(path)


@pytest.mark.unit
def test_settings_are_immutable() -> None:
    """Settings captured by a codec cannot be changed afterwards."""
    settings = CodecSettings()

    with pytest.raises(ValueError):
        settings.max_depth = 3  # type: ignore[misc]
