"""Pure column membership helpers.

All functions in this module are pure - no I/O, no side effects.
They take a snapshot (or a list) in and return new data out; columns are
never edited in place.
"""

from .models import BoardSnapshot, Column, ColumnId, TaskStatus, column_for_status

# =============================================================================
# List Operations
# =============================================================================


def without_id(task_ids: list[str], task_id: str) -> list[str]:
    """Return a copy of task_ids with every occurrence of task_id removed."""
    return [tid for tid in task_ids if tid != task_id]


def with_appended(task_ids: list[str], task_id: str) -> list[str]:
    """Return a copy of task_ids with task_id at the end (never duplicated)."""
    return [*without_id(task_ids, task_id), task_id]


def splice(
    source: list[str],
    dest: list[str] | None,
    source_index: int,
    dest_index: int,
) -> tuple[list[str], list[str]]:
    """Remove the item at source_index and insert it at dest_index.

    Standard list splice semantics: the removal happens first, so when
    ``dest`` is None (same list) dest_index is interpreted against the
    list after removal. dest_index is clamped to the valid range.

    Args:
        source: Ids of the source column.
        dest: Ids of the destination column, or None for a same-column move.
        source_index: Position of the item to move.
        dest_index: Position to insert at.

    Returns:
        (new_source, new_dest). For a same-column move both are the same list.
    """
    new_source = list(source)
    item = new_source.pop(source_index)
    new_dest = new_source if dest is None else list(dest)
    dest_index = max(0, min(dest_index, len(new_dest)))
    new_dest.insert(dest_index, item)
    return new_source, new_dest


# =============================================================================
# Column Mapping Operations
# =============================================================================

Columns = dict[ColumnId, Column]


def replace_ids(columns: Columns, column_id: ColumnId, task_ids: list[str]) -> Columns:
    """Build a new columns mapping with one column's ids replaced."""
    updated = dict(columns)
    updated[column_id] = updated[column_id].model_copy(update={"task_ids": task_ids})
    return updated


def append_to(columns: Columns, column_id: ColumnId | None, task_id: str) -> Columns:
    """Build a new columns mapping with task_id at the end of one column.

    A None or unknown column_id leaves the mapping as it is.
    """
    if column_id is None or column_id not in columns:
        return columns
    return replace_ids(columns, column_id, with_appended(columns[column_id].task_ids, task_id))


def remove_from(columns: Columns, column_id: ColumnId | None, task_id: str) -> Columns:
    """Build a new columns mapping with task_id removed from one column."""
    if column_id is None or column_id not in columns:
        return columns
    if task_id not in columns[column_id].task_ids:
        return columns
    return replace_ids(columns, column_id, without_id(columns[column_id].task_ids, task_id))


def detach(columns: Columns, task_id: str) -> Columns:
    """Build a new columns mapping with task_id removed from every column."""
    return {
        column_id: (
            column.model_copy(update={"task_ids": without_id(column.task_ids, task_id)})
            if task_id in column.task_ids
            else column
        )
        for column_id, column in columns.items()
    }


# =============================================================================
# Invariants
# =============================================================================


def find_violations(snapshot: BoardSnapshot) -> list[str]:
    """Check the task/column consistency rules of a snapshot.

    Rules:
        - a task id is listed in at most one column, at most once
        - every listed id refers to an existing task
        - a live task (not archived, not deleted) is listed in the column
          matching its status; archived and deleted tasks are listed nowhere
        - only DONE tasks may be archived
        - completed_at is set exactly for DONE tasks

    Returns:
        Human-readable descriptions of each violation; empty when consistent.
    """
    problems: list[str] = []
    listed: dict[str, ColumnId] = {}

    for column_id, column in snapshot.columns.items():
        if column.id != column_id:
            problems.append(f"column '{column_id.value}' carries id '{column.id.value}'")
        for task_id in column.task_ids:
            if task_id in listed:
                problems.append(
                    f"task {task_id} listed more than once "
                    f"({listed[task_id].value}, {column_id.value})"
                )
                continue
            listed[task_id] = column_id
            if task_id not in snapshot.tasks:
                problems.append(f"column '{column_id.value}' lists unknown task {task_id}")

    for task_id, task in snapshot.tasks.items():
        if task.id != task_id:
            problems.append(f"task stored under '{task_id}' has id '{task.id}'")
        if task.is_archived and task.status != TaskStatus.DONE:
            problems.append(f"task {task_id} is archived with status '{task.status.value}'")
        if task.status == TaskStatus.DONE and task.completed_at is None:
            problems.append(f"task {task_id} is done without a completion time")
        if task.status != TaskStatus.DONE and task.completed_at is not None:
            problems.append(f"task {task_id} has a completion time but is '{task.status.value}'")

        expected = column_for_status(task.status) if task.is_live() else None
        actual = listed.get(task_id)
        if expected != actual:
            where = actual.value if actual else "no column"
            should = expected.value if expected else "no column"
            problems.append(f"task {task_id} is in {where}, expected {should}")

    return problems
