"""Recycle bin CLI commands."""

import typer
from rich.table import Table

from flowboard.application import deleted_tasks
from flowboard.interfaces.cli.common import (
    console,
    data_dir_option,
    format_timestamp,
    open_store,
    print_info,
    report,
    short_id,
)

app = typer.Typer(help="Recycle bin commands")


@app.command("list")
def list_deleted(data_dir: data_dir_option = None) -> None:
    """List deleted tasks, most recently deleted first."""
    store = open_store(data_dir)
    tasks = deleted_tasks(store.snapshot)
    if not tasks:
        print_info("Recycle bin is empty")
        return

    table = Table(title=f"Recycle bin ({len(tasks)})", title_justify="left")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Deleted")
    for task in tasks:
        table.add_row(
            short_id(task.id), task.title, task.category.value, format_timestamp(task.updated_at)
        )
    console.print(table)


@app.command("empty")
def empty(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    data_dir: data_dir_option = None,
) -> None:
    """Permanently delete everything in the recycle bin."""
    store = open_store(data_dir)
    tasks = deleted_tasks(store.snapshot)
    if not tasks:
        print_info("Recycle bin is empty")
        return

    if not yes and not typer.confirm(f"Permanently delete {len(tasks)} task(s)?"):
        raise typer.Abort()

    for task in tasks:
        report(store.permanently_delete_task(task.id))
    typer.echo(f"Permanently deleted {len(tasks)} task(s)")
