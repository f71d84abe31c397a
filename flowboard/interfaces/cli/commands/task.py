"""Task lifecycle CLI commands.

Create, edit, move, delete, restore and inspect individual tasks. Task ids
may be given in full or as a unique prefix (the first 8 characters shown in
listings are usually enough).
"""

from typing import Optional

import typer
from pydantic import ValidationError

from flowboard.domain.board import (
    ColumnId,
    Priority,
    TaskCategory,
    TaskInput,
    TaskStatus,
    TaskUpdate,
)
from flowboard.interfaces.cli.common import (
    data_dir_option,
    describe_task,
    format_timestamp,
    open_store,
    print_error,
    print_header,
    print_info,
    report,
    resolve_task_id,
    short_id,
)

app = typer.Typer(help="Task lifecycle commands")


def _validation_message(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error['msg']}" if field else error["msg"]


# =============================================================================
# Commands
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
    """Add a task to the bottom of the To Do column."""
    try:
        data = TaskInput(
            title=title,
            description=description,
            priority=priority,
            category=category,
            tags=tags or [],
        )
    except ValidationError as e:
        print_error(_validation_message(e))
        raise typer.Exit(1)

    store = open_store(data_dir)
    task = report(store.add_task(data))
    typer.echo(f"Added {describe_task(task)}")


@app.command("edit")
def edit(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    description: Optional[str] = typer.Option(
        None, "--description", "-D", help="New description (empty string clears it)"
    ),
    priority: Optional[Priority] = typer.Option(None, "--priority", "-p", help="New priority"),
    status: Optional[TaskStatus] = typer.Option(None, "--status", "-s", help="New status"),
    category: Optional[TaskCategory] = typer.Option(None, "--category", "-c", help="New category"),
    tags: Optional[list[str]] = typer.Option(
        None, "--tag", "-t", help="Replace tags (repeatable)"
    ),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
    data_dir: data_dir_option = None,
) -> None:
    """Edit fields of a task.

    Changing the status moves the task to the matching column.
    """
    changes: dict = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description or None
    if priority is not None:
        changes["priority"] = priority
    if status is not None:
        changes["status"] = status
    if category is not None:
        changes["category"] = category
    if clear_tags:
        changes["tags"] = []
    elif tags:
        changes["tags"] = tags

    if not changes:
        print_error("Nothing to change. Pass at least one option.")
        raise typer.Exit(1)

    try:
        update = TaskUpdate(**changes)
    except ValidationError as e:
        print_error(_validation_message(e))
        raise typer.Exit(1)

    store = open_store(data_dir)
    task_id = resolve_task_id(store.snapshot, task_ref)
    report(store.update_task(task_id, update))
    typer.echo(f"Updated {describe_task(store.snapshot.tasks[task_id])}")


@app.command("move")
def move(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    column: ColumnId = typer.Argument(..., help="Destination column"),
    index: Optional[int] = typer.Option(
        None, "--index", "-i", help="0-based position in the column (default: bottom)"
    ),
    data_dir: data_dir_option = None,
) -> None:
    """Move a task to a column, or to another position in its column."""
    store = open_store(data_dir)
    snapshot = store.snapshot
    task_id = resolve_task_id(snapshot, task_ref)

    source = snapshot.column_of(task_id)
    if source is None:
        print_error("Task is not on the board (archived or deleted); restore it first")
        raise typer.Exit(1)

    source_index = snapshot.columns[source].task_ids.index(task_id)
    dest_size = len(snapshot.columns[column].task_ids)
    if source == column:
        dest_size -= 1
    dest_index = dest_size if index is None else max(0, min(index, dest_size))

    result = store.move_task(task_id, source, column, source_index, dest_index)
    report(result)
    if result.value is snapshot:
        print_info("Task is already there")
        return
    typer.echo(
        f"Moved {describe_task(store.snapshot.tasks[task_id])} to "
        f"{store.snapshot.columns[column].title} at position {dest_index}"
    )


@app.command("delete")
def delete(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    data_dir: data_dir_option = None,
) -> None:
    """Move a task to the recycle bin."""
    store = open_store(data_dir)
    task_id = resolve_task_id(store.snapshot, task_ref)
    before = store.snapshot
    result = store.delete_task(task_id)
    report(result)
    if result.value is before:
        print_info("Task is already in the recycle bin")
        return
    typer.echo(f"Deleted {describe_task(store.snapshot.tasks[task_id])}")


@app.command("restore")
def restore(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    data_dir: data_dir_option = None,
) -> None:
    """Restore a deleted task to the To Do column."""
    store = open_store(data_dir)
    task_id = resolve_task_id(store.snapshot, task_ref)
    before = store.snapshot
    result = store.restore_task(task_id)
    report(result)
    if result.value is before:
        print_error("Only deleted tasks can be restored")
        raise typer.Exit(1)
    typer.echo(f"Restored {describe_task(store.snapshot.tasks[task_id])}")


@app.command("unarchive")
def unarchive(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    data_dir: data_dir_option = None,
) -> None:
    """Put an archived task back in the Done column."""
    store = open_store(data_dir)
    task_id = resolve_task_id(store.snapshot, task_ref)
    before = store.snapshot
    result = store.unarchive_task(task_id)
    report(result)
    if result.value is before:
        print_error("Task is not archived")
        raise typer.Exit(1)
    typer.echo(f"Unarchived {describe_task(store.snapshot.tasks[task_id])}")


@app.command("purge")
def purge(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    data_dir: data_dir_option = None,
) -> None:
    """Delete a task permanently."""
    store = open_store(data_dir)
    task_id = resolve_task_id(store.snapshot, task_ref)
    task = store.snapshot.tasks[task_id]

    if not yes and not typer.confirm(f"Permanently delete '{task.title}'?"):
        raise typer.Abort()

    report(store.permanently_delete_task(task_id))
    typer.echo(f"Permanently deleted {describe_task(task)}")


@app.command("show")
def show(
    task_ref: str = typer.Argument(..., help="Task id or unique prefix"),
    data_dir: data_dir_option = None,
) -> None:
    """Show every field of a task."""
    store = open_store(data_dir)
    task_id = resolve_task_id(store.snapshot, task_ref)
    task = store.snapshot.tasks[task_id]

    print_header(task.title)
    typer.echo(f"ID:          {task.id}")
    typer.echo(f"Status:      {task.status.value}{' (archived)' if task.is_archived else ''}")
    typer.echo(f"Priority:    {task.priority.value}")
    typer.echo(f"Category:    {task.category.value}")
    typer.echo(f"Tags:        {', '.join(task.tags) or '-'}")
    typer.echo(f"Created:     {format_timestamp(task.created_at)}")
    typer.echo(f"Updated:     {format_timestamp(task.updated_at)}")
    typer.echo(f"Completed:   {format_timestamp(task.completed_at)}")
    if task.description:
        typer.echo("")
        typer.echo(task.description)
    column = store.snapshot.column_of(task_id)
    if column is not None:
        position = store.snapshot.columns[column].task_ids.index(task_id)
        typer.echo("")
        title = store.snapshot.columns[column].title
        print_info(f"In column {title} at position {position} ({short_id(task_id)})")
