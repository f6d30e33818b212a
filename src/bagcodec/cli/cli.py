"""Typer CLI entrypoint for bagcodec."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

from bagcodec.cli.bootstrap import build_codec, configure_logging
from bagcodec.codec import FORMAT_VERSION, CodecError, CodecResult, describe_type_name
from bagcodec.config import CodecSettingsError
from bagcodec.tree import BagObject, bag_from_json

app = typer.Typer(help="bagcodec CLI")
_CONSOLE = Console()


def _render_error(code: str, message: str) -> None:
    """Render a failure panel.

    Args:
        code: Stable error code.
        message: Human-readable failure description.
    """
    _CONSOLE.print(
        Panel(
            Text(message),
            title=escape(f"Error [{code}]"),
            border_style="bold red",
            expand=True,
        )
    )


def _render_decoded(result: CodecResult) -> None:
    """Render a decode result with Rich styles.

    Args:
        result: Structured decode output.
    """
    if not result.is_ok:
        _render_error(result.code, result.message)
        return
    _CONSOLE.print(
        Panel(
            Pretty(result.value),
            title=escape(f"Decoded [{type(result.value).__qualname__}]"),
            border_style="green",
            expand=True,
        )
    )


@app.command("describe")
def describe_command(
    type_name: Annotated[str, typer.Argument(help="Recorded envelope type name.")],
) -> None:
    """Classify a recorded type name against the builtin registry.

    Args:
        type_name: Type name as stored in an envelope ``type`` field.
    """
    configure_logging()
    try:
        description = describe_type_name(type_name)
    except CodecError as exc:
        _render_error(exc.code.value, exc.message)
        raise typer.Exit(code=1) from exc

    table = Table(title="Type", show_header=True, header_style="bold cyan")
    table.add_column("Type Name", style="bold")
    table.add_column("Shape", style="magenta")
    table.add_column("Rank", no_wrap=True)
    table.add_column("Element")
    table.add_row(
        escape(description.type_name),
        description.shape.value,
        str(description.rank),
        description.element or "-",
    )
    _CONSOLE.print(table)


@app.command("check")
def check_command(
    envelope_file: Annotated[
        Path,
        typer.Argument(
            exists=True, file_okay=True, dir_okay=False, help="Envelope JSON file."
        ),
    ],
    config_file: Annotated[
        Path | None,
        typer.Option(
            file_okay=True,
            dir_okay=False,
            help="Path to codec settings YAML/JSON file.",
        ),
    ] = None,
) -> None:
    """Decode an envelope JSON file with the builtin registry.

    Args:
        envelope_file: File holding one envelope object.
        config_file: Optional codec settings file.
    """
    configure_logging()
    try:
        codec = build_codec(config_file)
    except CodecSettingsError as exc:
        _render_error("invalid_settings", str(exc))
        raise typer.Exit(code=1) from exc
    try:
        tree = bag_from_json(envelope_file.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, TypeError) as exc:
        _render_error("invalid_json", f"Cannot read envelope: {exc}")
        raise typer.Exit(code=1) from exc
    if not isinstance(tree, BagObject):
        _render_error("malformed_envelope", "Envelope root must be a JSON object")
        raise typer.Exit(code=1)

    result = codec.decode(tree)
    _render_decoded(result)
    if not result.is_ok:
        raise typer.Exit(code=1)


@app.command("version")
def version_command() -> None:
    """Print the envelope format version written by this codec."""
    _CONSOLE.print(FORMAT_VERSION)
