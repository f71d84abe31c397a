"""CLI interface for FlowBoard using Typer.

Usage:
    flowboard add "Write report" -c today   # Add a task
    flowboard show                          # Show the board
    flowboard mv 3f2c done                  # Move a task
    flowboard data export -o backup.md      # Back up the board

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (task, board, archive, ...)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from flowboard import __version__
from flowboard.domain.board import ColumnId, Priority, TaskCategory
from flowboard.global_config import get_config
from flowboard.interfaces.cli.commands import archive, board, config_cmd, data, task, trash
from flowboard.interfaces.cli.common import data_dir_option, setup_logging

# Create the main Typer application
app = typer.Typer(
    name="flowboard",
    help="Personal task board with archive, recycle bin and backups",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"flowboard version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """FlowBoard - a personal task board.

    Tasks move through To Do, In Progress and Done. Done tasks are archived
    a day after completion; deleted tasks wait in the recycle bin.
    """
    setup_logging("DEBUG" if verbose else get_config().log_level)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(task.app, name="task")
app.add_typer(board.app, name="board")
app.add_typer(archive.app, name="archive")
app.add_typer(trash.app, name="trash")
app.add_typer(data.app, name="data")
app.add_typer(config_cmd.app, name="config")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================


@app.command("add")
def add(
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(
        None, "--description", "-D", help="Longer description"
    ),
    priority: Priority = typer.Option(Priority.MEDIUM, "--priority", "-p", help="Priority"),
    category: TaskCategory = typer.Option(
        TaskCategory.GENERAL, "--category", "-c", help="today or general"
    ),
    tags: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable)"),
    data_dir: data_dir_option = None,
) -> None:
    """Add a task (shortcut for 'task add')."""
    task.add(
        title=title,
        description=description,
        priority=priority,
        category=category,
        tags=tags,
        data_dir=data_dir,
    )


@app.command("mv")
def mv(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    column: ColumnId = typer.Argument(..., help="Destination column"),
    index: Optional[int] = typer.Option(
        None, "--index", "-i", help="0-based position in the column (default: bottom)"
    ),
    data_dir: data_dir_option = None,
) -> None:
    """Move a task (shortcut for 'task move')."""
    task.move(task_ref=task_ref, column=column, index=index, data_dir=data_dir)


@app.command("show")
def show(
    column: Optional[ColumnId] = typer.Option(None, "--column", "-c", help="Only this column"),
    data_dir: data_dir_option = None,
) -> None:
    """Show the board (shortcut for 'board show')."""
    board.show(column=column, data_dir=data_dir)


@app.command("stats")
def stats(data_dir: data_dir_option = None) -> None:
    """Show progress (shortcut for 'board stats')."""
    board.stats(data_dir=data_dir)


__all__ = ["app"]
