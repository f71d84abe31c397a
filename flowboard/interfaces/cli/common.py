"""Shared utilities for FlowBoard CLI commands.

This module provides common utilities used across CLI commands:
- Logging setup
- Opening the board store for the current data directory
- Turning Result values into output and exit codes
- Formatted output helpers (error, success, info, warning)
"""

import logging
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console

from flowboard.application import BoardStore
from flowboard.domain.board import BoardSnapshot, Task
from flowboard.domain.shared import Err, Ok, Result, Warn, to_datetime
from flowboard.global_config import get_config, get_data_dir
from flowboard.infrastructure.storage import BoardRepository

console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Reusable data directory option for CLI commands
# Usage: def my_command(data_dir: data_dir_option = None) -> None:
data_dir_option = Annotated[Optional[str], typer.Option(
    "--data-dir", "-d",
    help="Board data directory (or set FLOWBOARD_DATA_DIR env var)",
    envvar="FLOWBOARD_DATA_DIR",
)]


def setup_logging(level: str | int = logging.WARNING) -> None:
    """Send flowboard logs to stderr at the given level.

    Safe to call more than once; earlier handlers are replaced.
    """
    logger = logging.getLogger("flowboard")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(level)


def open_store(data_dir: str | None = None, sweep: bool = True) -> BoardStore:
    """Load the board for this invocation.

    Runs one archive sweep on startup, the same as the board does when it
    is opened.

    Raises:
        typer.Exit: If the stored board cannot be read. The file is left
            untouched rather than overwritten.
    """
    directory = Path(data_dir).expanduser() if data_dir else get_data_dir(get_config())
    store = BoardStore(BoardRepository(directory))

    result = store.hydrate()
    if isinstance(result, Err):
        print_error(result.error)
        typer.echo("Fix or move the file aside, or restore it with 'flowboard data import'.")
        raise typer.Exit(1)

    if sweep:
        report(store.sweep())
    return store


def report(result: Result[Any, Any], success: str | None = None) -> Any:
    """Print the outcome of a command and return its value.

    Err exits with status 1, Warn prints the warning, Ok prints the
    success message if one is given.
    """
    if isinstance(result, Err):
        print_error(str(result.error))
        raise typer.Exit(1)
    if isinstance(result, Warn):
        print_warning(result.message)
    if success and isinstance(result, (Ok, Warn)):
        print_success(success)
    return result.value


def resolve_task_id(snapshot: BoardSnapshot, ref: str) -> str:
    """Expand a full id or a unique id prefix.

    Raises:
        typer.Exit: If nothing or more than one task matches.
    """
    if ref in snapshot.tasks:
        return ref
    matches = [task_id for task_id in snapshot.tasks if task_id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        print_error(f"No task with id '{ref}'")
    else:
        print_error(f"Id prefix '{ref}' matches {len(matches)} tasks; use more characters")
    raise typer.Exit(1)


def short_id(task_id: str) -> str:
    return task_id[:8]


def format_timestamp(ms: int | None) -> str:
    """Format epoch milliseconds as local time, or '-' when unset."""
    if ms is None:
        return "-"
    return to_datetime(ms).strftime("%Y-%m-%d %H:%M")


def describe_task(task: Task) -> str:
    """One-line summary used in confirmations."""
    return f"{task.title} ({short_id(task.id)})"


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message.

    Args:
        msg: Success message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    """Print a formatted warning message.

    Args:
        msg: Warning message to display
    """
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with separators.

    Args:
        title: Header title text
        width: Width of the separator lines
    """
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


__all__ = [
    "console",
    "data_dir_option",
    "setup_logging",
    "open_store",
    "report",
    "resolve_task_id",
    "short_id",
    "format_timestamp",
    "describe_task",
    "print_error",
    "print_success",
    "print_info",
    "print_warning",
    "print_separator",
    "print_header",
]
