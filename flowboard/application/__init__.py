"""Application service layer for FlowBoard.

Services:
    board_service - Mutation engine (task lifecycle, moves, board layout)
    archive_service - Auto-archive sweep and its scheduler
    query_service - Filtered views and completion statistics
    board_store - Thread-safe state holder that persists every change

Example usage:
    >>> from flowboard.application import BoardStore
    >>> from flowboard.domain.board import TaskInput
    >>>
    >>> store = BoardStore()
    >>> result = store.add_task(TaskInput(title="Write report"))
    >>> result.value.status.value
    'todo'
"""

from flowboard.application.archive_service import (
    ARCHIVE_AFTER_MS,
    AutoArchiveScheduler,
    sweep_archive,
)
from flowboard.application.board_service import (
    add_task,
    delete_task,
    move_task,
    permanently_delete_task,
    rename_column,
    reorder_columns,
    restore_task,
    set_filters,
    set_theme,
    toggle_theme,
    unarchive_task,
    update_task,
)
from flowboard.application.board_store import BoardPersistence, BoardStore
from flowboard.application.query_service import (
    CategoryStats,
    TaskStats,
    all_tags,
    archived_tasks,
    day_completion,
    deleted_tasks,
    filtered_tasks,
    matches_filters,
    task_stats,
    tasks_created_on,
)

__all__ = [
    # Board service
    "add_task",
    "update_task",
    "delete_task",
    "restore_task",
    "unarchive_task",
    "permanently_delete_task",
    "move_task",
    "reorder_columns",
    "rename_column",
    "set_filters",
    "set_theme",
    "toggle_theme",
    # Archive service
    "ARCHIVE_AFTER_MS",
    "sweep_archive",
    "AutoArchiveScheduler",
    # Query service
    "CategoryStats",
    "TaskStats",
    "matches_filters",
    "filtered_tasks",
    "task_stats",
    "archived_tasks",
    "deleted_tasks",
    "tasks_created_on",
    "day_completion",
    "all_tags",
    # Store
    "BoardStore",
    "BoardPersistence",
]
