"""Board domain - tasks, columns and board snapshots.

This module provides the domain layer for FlowBoard. All exports are pure
(no I/O, no side effects).

Key Types:
    Task - A work item
    Column - An ordered list of task ids
    BoardSnapshot - Complete board state at one instant
    ExportDocument - Snapshot stamped with version and export time
    FilterState / ThemePreference - View configuration
    TaskInput / TaskUpdate - Command payloads

Column Functions:
    splice - Move an id between (or within) lists
    append_to / remove_from - Single-column membership edits
    detach - Remove an id from every column
    find_violations - Check task/column consistency
"""

from .columns import (
    Columns,
    append_to,
    detach,
    find_violations,
    remove_from,
    replace_ids,
    splice,
    with_appended,
    without_id,
)
from .models import (
    DEFAULT_COLUMN_ORDER,
    DEFAULT_COLUMN_TITLES,
    FORMAT_VERSION,
    BoardSnapshot,
    CategoryFilter,
    Column,
    ColumnId,
    ExportDocument,
    FilterState,
    Priority,
    Task,
    TaskCategory,
    TaskInput,
    TaskStatus,
    TaskUpdate,
    ThemeMode,
    ThemePreference,
    column_for_status,
    default_columns,
)

__all__ = [
    # Models
    "Task",
    "Column",
    "BoardSnapshot",
    "ExportDocument",
    "FilterState",
    "ThemePreference",
    "TaskInput",
    "TaskUpdate",
    # Enums
    "Priority",
    "TaskStatus",
    "ColumnId",
    "TaskCategory",
    "CategoryFilter",
    "ThemeMode",
    # Constants
    "FORMAT_VERSION",
    "DEFAULT_COLUMN_ORDER",
    "DEFAULT_COLUMN_TITLES",
    "column_for_status",
    "default_columns",
    # Columns
    "Columns",
    "splice",
    "detach",
    "append_to",
    "remove_from",
    "replace_ids",
    "with_appended",
    "without_id",
    "find_violations",
]
