"""Board CLI commands.

Show the board, completion stats and the calendar day view, and change
board-wide settings: column order and titles, filters and theme.
"""

from datetime import date, datetime
from typing import Optional

import typer
from pydantic import ValidationError
from rich.table import Table

from flowboard.application import (
    all_tags,
    day_completion,
    filtered_tasks,
    task_stats,
    tasks_created_on,
)
from flowboard.domain.board import (
    BoardSnapshot,
    CategoryFilter,
    ColumnId,
    Priority,
    Task,
    ThemeMode,
    find_violations,
)
from flowboard.interfaces.cli.common import (
    console,
    data_dir_option,
    open_store,
    print_error,
    print_info,
    print_success,
    report,
    short_id,
)

app = typer.Typer(help="Board view and settings")

PRIORITY_STYLES = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}


# =============================================================================
# Rendering Helpers
# =============================================================================


def _task_table(title: str, tasks: list[Task]) -> Table:
    table = Table(title=title, title_justify="left", expand=False)
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Priority")
    table.add_column("Category")
    table.add_column("Tags")
    for index, task in enumerate(tasks):
        style = PRIORITY_STYLES[task.priority]
        table.add_row(
            str(index),
            short_id(task.id),
            task.title,
            f"[{style}]{task.priority.value}[/{style}]",
            task.category.value,
            ", ".join(task.tags),
        )
    return table


def _describe_filters(snapshot: BoardSnapshot) -> str | None:
    filters = snapshot.filters
    parts = []
    if filters.search:
        parts.append(f"search '{filters.search}'")
    if filters.priority:
        parts.append("priority " + ", ".join(p.value for p in filters.priority))
    if filters.category != CategoryFilter.ALL:
        parts.append(f"category {filters.category.value}")
    if filters.tags:
        parts.append("tags " + ", ".join(filters.tags))
    return "; ".join(parts) if parts else None


def render_board(snapshot: BoardSnapshot, column: ColumnId | None = None) -> None:
    """Print the board, one table per column in board order."""
    active = _describe_filters(snapshot)
    if active:
        print_info(f"Filters: {active}")
    for col in snapshot.ordered_columns():
        if column is not None and col.id != column:
            continue
        tasks = filtered_tasks(snapshot, col.id)
        console.print(_task_table(f"{col.title} ({len(tasks)})", tasks))


def _parse_day(value: str | None) -> date:
    if value is None:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        print_error(f"Invalid date '{value}', expected YYYY-MM-DD")
        raise typer.Exit(1)


# =============================================================================
# Views
# =============================================================================


@app.command("show")
def show(
    column: Optional[ColumnId] = typer.Option(None, "--column", "-c", help="Only this column"),
    data_dir: data_dir_option = None,
) -> None:
    """Show the board with the saved filters applied."""
    store = open_store(data_dir)
    render_board(store.snapshot, column)


@app.command("stats")
def stats(data_dir: data_dir_option = None) -> None:
    """Show completion progress for today and general tasks."""
    store = open_store(data_dir)
    result = task_stats(store.snapshot)
    for label, counts in (("Today", result.today), ("General", result.general)):
        typer.echo(f"{label + ':':<9}{counts.done}/{counts.total} done ({counts.percent}%)")


@app.command("day")
def day(
    on: Optional[str] = typer.Argument(None, help="Date as YYYY-MM-DD (default: today)"),
    category: CategoryFilter = typer.Option(
        CategoryFilter.ALL, "--category", "-c", help="today, general or all"
    ),
    data_dir: data_dir_option = None,
) -> None:
    """List tasks created on a day and how many are done."""
    target = _parse_day(on)
    store = open_store(data_dir)
    tasks = tasks_created_on(store.snapshot, target, category)
    percent = day_completion(store.snapshot, target, category)
    console.print(_task_table(f"{target.isoformat()} ({percent}% done)", tasks))


@app.command("tags")
def tags(data_dir: data_dir_option = None) -> None:
    """List every tag in use."""
    store = open_store(data_dir)
    found = all_tags(store.snapshot)
    if not found:
        print_info("No tags yet")
        return
    for tag in found:
        typer.echo(tag)


@app.command("check")
def check(data_dir: data_dir_option = None) -> None:
    """Verify that columns and task statuses agree."""
    store = open_store(data_dir, sweep=False)
    problems = find_violations(store.snapshot)
    if problems:
        for problem in problems:
            print_error(problem)
        raise typer.Exit(1)
    print_success("Board is consistent")


# =============================================================================
# Settings
# =============================================================================


@app.command("reorder")
def reorder(
    order: list[str] = typer.Argument(..., help="Column ids, left to right"),
    data_dir: data_dir_option = None,
) -> None:
    """Change the left-to-right order of the columns."""
    store = open_store(data_dir)
    report(store.reorder_columns(order))
    typer.echo("Column order: " + ", ".join(c.value for c in store.snapshot.column_order))


@app.command("rename")
def rename(
    column: ColumnId = typer.Argument(..., help="Column id"),
    title: str = typer.Argument(..., help="New title"),
    data_dir: data_dir_option = None,
) -> None:
    """Rename a column."""
    if not title.strip():
        print_error("Title must not be blank")
        raise typer.Exit(1)
    store = open_store(data_dir)
    report(store.rename_column(column, title))
    typer.echo(f"Column {column.value} is now '{store.snapshot.columns[column].title}'")


@app.command("filter")
def filter_board(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Search text"),
    tags: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable)"),
    priority: Optional[list[Priority]] = typer.Option(
        None, "--priority", "-p", help="Priority (repeatable)"
    ),
    category: Optional[CategoryFilter] = typer.Option(
        None, "--category", "-c", help="today, general or all"
    ),
    clear: bool = typer.Option(False, "--clear", help="Reset all filters first"),
    data_dir: data_dir_option = None,
) -> None:
    """Set the filters used by 'board show'."""
    changes: dict = {}
    if clear:
        changes = {"search": "", "tags": [], "priority": [], "category": CategoryFilter.ALL}
    if search is not None:
        changes["search"] = search
    if tags:
        changes["tags"] = tags
    if priority:
        changes["priority"] = priority
    if category is not None:
        changes["category"] = category

    store = open_store(data_dir)
    try:
        report(store.set_filters(**changes))
    except ValidationError as e:
        print_error(str(e.errors()[0]["msg"]))
        raise typer.Exit(1)
    typer.echo(f"Filters: {_describe_filters(store.snapshot) or 'none'}")


@app.command("theme")
def theme(
    mode: Optional[ThemeMode] = typer.Argument(None, help="light or dark (default: toggle)"),
    data_dir: data_dir_option = None,
) -> None:
    """Set or toggle the theme preference."""
    store = open_store(data_dir)
    if mode is None:
        report(store.toggle_theme())
    else:
        report(store.set_theme(mode))
    typer.echo(f"Theme: {store.snapshot.theme.mode.value}")
