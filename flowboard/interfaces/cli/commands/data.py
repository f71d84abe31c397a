"""Backup and restore CLI commands.

Export writes the whole board as JSON or Markdown (the Markdown embeds the
JSON so it can be imported again). Import replaces the whole board and asks
for confirmation first.
"""

from pathlib import Path
from typing import Optional

import typer

from flowboard.domain.shared import Err, Warn
from flowboard.global_config import get_config
from flowboard.infrastructure.codec import ExportFormat, decode_board, export_board
from flowboard.interfaces.cli.common import (
    data_dir_option,
    open_store,
    print_error,
    print_info,
    print_success,
    print_warning,
    report,
)

app = typer.Typer(help="Backup and restore commands")


@app.command("export")
def export(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="File to write (default: print to stdout)"
    ),
    fmt: Optional[ExportFormat] = typer.Option(
        None, "--format", "-f", help="json or md (default: from file extension, then config)"
    ),
    data_dir: data_dir_option = None,
) -> None:
    """Export the board."""
    if fmt is None:
        suffix = output.suffix.lower() if output else ""
        if suffix in (".md", ".markdown"):
            fmt = ExportFormat.MARKDOWN
        elif suffix == ".json":
            fmt = ExportFormat.JSON
        else:
            fmt = ExportFormat(get_config().default_export_format)

    store = open_store(data_dir)
    text = export_board(store.snapshot, fmt, store.now())

    if output is None:
        typer.echo(text)
        return
    try:
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        print_error(f"Could not write {output}: {e}")
        raise typer.Exit(1)
    print_success(f"Exported {len(store.snapshot.tasks)} task(s) to {output}")


@app.command("import")
def import_board(
    source: Path = typer.Argument(..., help="JSON or Markdown file to import"),
    fmt: Optional[ExportFormat] = typer.Option(
        None, "--format", "-f", help="json or md (default: detect)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Replace without asking"),
    data_dir: data_dir_option = None,
) -> None:
    """Replace the board with the contents of a backup file."""
    try:
        text = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        print_error(f"Import failed: {source.name} is not UTF-8 text ({e.reason})")
        raise typer.Exit(1)
    except OSError as e:
        print_error(f"Could not read {source}: {e}")
        raise typer.Exit(1)

    store = open_store(data_dir, sweep=False)
    decoded = store.stage_import(decode_board(text, store.now(), fmt=fmt, filename=source.name))
    if isinstance(decoded, Err):
        print_error(f"Import failed: {decoded.error}")
        raise typer.Exit(1)
    if isinstance(decoded, Warn):
        print_warning(decoded.message)

    incoming = decoded.value
    print_info(
        f"{source.name}: {len(incoming.tasks)} task(s), "
        f"format version {incoming.version}"
    )
    prompt = f"Replace the current board ({len(store.snapshot.tasks)} task(s))?"
    if not yes and not typer.confirm(prompt):
        store.cancel_import()
        typer.echo("Import cancelled")
        raise typer.Exit(0)

    report(store.confirm_import(), success=f"Imported {len(incoming.tasks)} task(s)")
    report(store.sweep())
