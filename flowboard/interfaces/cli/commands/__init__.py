"""CLI command groups for FlowBoard.

Each module provides a Typer app registered with the main app using
app.add_typer().

Command groups:
- task: Task lifecycle (add, edit, move, delete, restore, ...)
- board: Board view and settings (show, stats, reorder, filter, ...)
- archive: Archived tasks and the auto-archive sweep
- trash: Recycle bin
- data: Export and import
- config_cmd: User configuration
"""

from flowboard.interfaces.cli.commands import archive, board, config_cmd, data, task, trash

__all__ = ["task", "board", "archive", "trash", "data", "config_cmd"]
