"""Board application service.

The mutation engine: one function per task lifecycle event. Every function
takes the previous snapshot plus a command and returns the next snapshot.
All functions are pure - no I/O, no side effects, no clock reads (the caller
passes ``now`` in epoch milliseconds).

Commands that reference an unknown id, or ask for a transition that makes no
sense (restoring a task that is not deleted, say), return the previous
snapshot object unchanged. Callers can detect a no-op with ``is``.
"""

from collections.abc import Sequence
from typing import Any
from uuid import uuid4

from flowboard.domain.board import (
    DEFAULT_COLUMN_ORDER,
    BoardSnapshot,
    ColumnId,
    FilterState,
    Task,
    TaskInput,
    TaskStatus,
    TaskUpdate,
    ThemeMode,
    ThemePreference,
    append_to,
    column_for_status,
    detach,
    remove_from,
    replace_ids,
    splice,
)
from flowboard.domain.shared import Err, Ok, Result


def _with_status(task: Task, status: TaskStatus, now: int) -> Task:
    """Return task moved to a new status, keeping completion fields honest.

    Entering DONE from another status stamps completed_at; leaving DONE
    clears it along with the archive flag.
    """
    update: dict[str, Any] = {"status": status, "updated_at": now}
    if status == TaskStatus.DONE:
        if task.status != TaskStatus.DONE:
            update["completed_at"] = now
    else:
        update["completed_at"] = None
        update["is_archived"] = False
    return task.model_copy(update=update)


# =============================================================================
# Task Lifecycle
# =============================================================================


def add_task(
    snapshot: BoardSnapshot,
    data: TaskInput,
    now: int,
    task_id: str | None = None,
) -> tuple[BoardSnapshot, Task]:
    """Create a task at the bottom of the todo column.

    Args:
        snapshot: Current board state.
        data: Title, description, priority, category and tags.
        now: Creation time in epoch milliseconds.
        task_id: Id to use instead of a fresh uuid4 (ignored if taken).

    Returns:
        (new_snapshot, created_task).
    """
    if not task_id or task_id in snapshot.tasks:
        task_id = str(uuid4())

    task = Task(
        id=task_id,
        title=data.title,
        description=data.description,
        priority=data.priority,
        status=TaskStatus.TODO,
        category=data.category,
        tags=list(data.tags),
        created_at=now,
        updated_at=now,
        is_archived=False,
    )
    updated = snapshot.model_copy(
        update={
            "tasks": {**snapshot.tasks, task_id: task},
            "columns": append_to(snapshot.columns, ColumnId.TODO, task_id),
        }
    )
    return updated, task


def update_task(
    snapshot: BoardSnapshot,
    task_id: str,
    changes: TaskUpdate,
    now: int,
) -> BoardSnapshot:
    """Merge a partial edit onto a task.

    A status change also relocates the task: it leaves whatever column it
    was in and is appended to the column of its new status (or to none,
    for DELETED). An archived task whose status leaves DONE is un-archived.
    """
    task = snapshot.get_task(task_id)
    if task is None:
        return snapshot

    fields = {
        key: value
        for key, value in changes.model_dump(exclude_unset=True).items()
        if value is not None or key == "description"
    }
    new_status = fields.pop("status", None)

    updated_task = task.model_copy(update={**fields, "updated_at": now})
    columns = snapshot.columns
    if new_status is not None and new_status != task.status:
        updated_task = _with_status(updated_task, new_status, now)
        columns = detach(columns, task_id)
        if updated_task.is_live():
            columns = append_to(columns, column_for_status(new_status), task_id)

    return snapshot.model_copy(
        update={"tasks": {**snapshot.tasks, task_id: updated_task}, "columns": columns}
    )


def delete_task(snapshot: BoardSnapshot, task_id: str, now: int) -> BoardSnapshot:
    """Soft-delete a task, moving it to the recycle bin.

    The task is removed from the column named by its status before the
    status is overwritten.
    """
    task = snapshot.get_task(task_id)
    if task is None or task.status == TaskStatus.DELETED:
        return snapshot

    columns = remove_from(snapshot.columns, column_for_status(task.status), task_id)
    deleted = task.model_copy(
        update={
            "status": TaskStatus.DELETED,
            "updated_at": now,
            "completed_at": None,
            "is_archived": False,
        }
    )
    return snapshot.model_copy(
        update={"tasks": {**snapshot.tasks, task_id: deleted}, "columns": columns}
    )


def restore_task(snapshot: BoardSnapshot, task_id: str, now: int) -> BoardSnapshot:
    """Bring a deleted task back. It always lands at the end of todo."""
    task = snapshot.get_task(task_id)
    if task is None or task.status != TaskStatus.DELETED:
        return snapshot

    restored = task.model_copy(update={"status": TaskStatus.TODO, "updated_at": now})
    return snapshot.model_copy(
        update={
            "tasks": {**snapshot.tasks, task_id: restored},
            "columns": append_to(snapshot.columns, ColumnId.TODO, task_id),
        }
    )


def unarchive_task(snapshot: BoardSnapshot, task_id: str) -> BoardSnapshot:
    """Return an archived task to the end of the done column."""
    task = snapshot.get_task(task_id)
    if task is None or not task.is_archived:
        return snapshot

    return snapshot.model_copy(
        update={
            "tasks": {**snapshot.tasks, task_id: task.model_copy(update={"is_archived": False})},
            "columns": append_to(snapshot.columns, ColumnId.DONE, task_id),
        }
    )


def permanently_delete_task(snapshot: BoardSnapshot, task_id: str) -> BoardSnapshot:
    """Remove a task record for good.

    Meant for tasks already deleted or archived, which no column lists. If a
    column does still list the id it is stripped so no dangling reference
    is left behind.
    """
    if task_id not in snapshot.tasks:
        return snapshot

    remaining = {tid: task for tid, task in snapshot.tasks.items() if tid != task_id}
    columns = snapshot.columns
    if snapshot.column_of(task_id) is not None:
        columns = detach(columns, task_id)
    return snapshot.model_copy(update={"tasks": remaining, "columns": columns})


def move_task(
    snapshot: BoardSnapshot,
    task_id: str,
    source_column_id: ColumnId,
    dest_column_id: ColumnId,
    source_index: int,
    dest_index: int,
    now: int,
) -> BoardSnapshot:
    """Move a task within a column or between columns.

    The id is removed from the source list at source_index and inserted in
    the destination list at dest_index. For a same-column move dest_index
    refers to the list after removal. A cross-column move sets the task's
    status to the destination column and applies the completion rules.

    If the id at source_index is not task_id, the task's actual position in
    the source column is used; a task absent from the source column is a
    no-op. dest_index is clamped to the destination bounds.
    """
    if source_column_id == dest_column_id and source_index == dest_index:
        return snapshot

    task = snapshot.get_task(task_id)
    if task is None:
        return snapshot
    if source_column_id not in snapshot.columns or dest_column_id not in snapshot.columns:
        return snapshot

    source_ids = snapshot.columns[source_column_id].task_ids
    if not (0 <= source_index < len(source_ids)) or source_ids[source_index] != task_id:
        if task_id not in source_ids:
            return snapshot
        source_index = source_ids.index(task_id)
        if source_column_id == dest_column_id and source_index == dest_index:
            return snapshot

    same_column = source_column_id == dest_column_id
    dest_ids = None if same_column else snapshot.columns[dest_column_id].task_ids
    new_source, new_dest = splice(source_ids, dest_ids, source_index, dest_index)

    columns = replace_ids(snapshot.columns, source_column_id, new_source)
    columns = replace_ids(columns, dest_column_id, new_dest)

    tasks = snapshot.tasks
    if not same_column:
        moved = _with_status(task, TaskStatus(dest_column_id.value), now)
        tasks = {**tasks, task_id: moved}

    return snapshot.model_copy(update={"tasks": tasks, "columns": columns})


# =============================================================================
# Board Layout and Preferences
# =============================================================================


def reorder_columns(
    snapshot: BoardSnapshot,
    new_order: Sequence[ColumnId | str],
) -> Result[BoardSnapshot, str]:
    """Replace the left-to-right column order.

    Args:
        snapshot: Current board state.
        new_order: Column ids, each of the fixed columns exactly once.

    Returns:
        Ok(new_snapshot), or Err(str) if new_order is not a permutation of
        the fixed column ids.
    """
    order: list[ColumnId] = []
    for raw in new_order:
        try:
            order.append(ColumnId(raw))
        except ValueError:
            return Err(f"Unknown column: {raw}")

    if len(order) != len(DEFAULT_COLUMN_ORDER) or set(order) != set(DEFAULT_COLUMN_ORDER):
        expected = ", ".join(c.value for c in DEFAULT_COLUMN_ORDER)
        return Err(f"Column order must list each of {expected} exactly once")

    if order == snapshot.column_order:
        return Ok(snapshot)
    return Ok(snapshot.model_copy(update={"column_order": order}))


def rename_column(snapshot: BoardSnapshot, column_id: ColumnId, title: str) -> BoardSnapshot:
    """Change a column's display title. Blank titles are ignored."""
    title = title.strip()
    column = snapshot.columns.get(column_id)
    if column is None or not title or column.title == title:
        return snapshot

    columns = dict(snapshot.columns)
    columns[column_id] = column.model_copy(update={"title": title})
    return snapshot.model_copy(update={"columns": columns})


def set_filters(snapshot: BoardSnapshot, **changes: Any) -> BoardSnapshot:
    """Merge a partial filter update (search, tags, priority, category).

    Raises:
        pydantic.ValidationError: If a value is not valid for its field.
    """
    filters = FilterState.model_validate({**snapshot.filters.model_dump(), **changes})
    if filters == snapshot.filters:
        return snapshot
    return snapshot.model_copy(update={"filters": filters})


def set_theme(snapshot: BoardSnapshot, mode: ThemeMode) -> BoardSnapshot:
    if snapshot.theme.mode == mode:
        return snapshot
    return snapshot.model_copy(update={"theme": ThemePreference(mode=mode)})


def toggle_theme(snapshot: BoardSnapshot) -> BoardSnapshot:
    """Switch between light and dark."""
    mode = ThemeMode.DARK if snapshot.theme.mode == ThemeMode.LIGHT else ThemeMode.LIGHT
    return set_theme(snapshot, mode)
