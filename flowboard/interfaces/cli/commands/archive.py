"""Archive CLI commands.

Done tasks move to the archive a day after completion. These commands list
the archive, run the sweep on demand, and keep sweeping in the foreground.
"""

import threading

import typer
from rich.table import Table

from flowboard.application import AutoArchiveScheduler, archived_tasks
from flowboard.domain.board import CategoryFilter
from flowboard.global_config import get_config
from flowboard.interfaces.cli.common import (
    console,
    data_dir_option,
    format_timestamp,
    open_store,
    print_info,
    print_success,
    report,
    short_id,
)

app = typer.Typer(help="Archived task commands")


@app.command("list")
def list_archived(
    category: CategoryFilter = typer.Option(
        CategoryFilter.ALL, "--category", "-c", help="today, general or all"
    ),
    data_dir: data_dir_option = None,
) -> None:
    """List archived tasks, most recently completed first."""
    store = open_store(data_dir)
    tasks = archived_tasks(store.snapshot, category)
    if not tasks:
        print_info("Archive is empty")
        return

    table = Table(title=f"Archive ({len(tasks)})", title_justify="left")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Completed")
    for task in tasks:
        table.add_row(
            short_id(task.id), task.title, task.category.value, format_timestamp(task.completed_at)
        )
    console.print(table)


@app.command("sweep")
def sweep(data_dir: data_dir_option = None) -> None:
    """Archive done tasks completed more than 24 hours ago."""
    store = open_store(data_dir, sweep=False)
    before = store.snapshot
    result = store.sweep()
    report(result)
    if result.value is before:
        print_info("Nothing to archive")
        return
    archived = sum(
        1
        for task_id, task in result.value.tasks.items()
        if task.is_archived and not before.tasks[task_id].is_archived
    )
    print_success(f"Archived {archived} task(s)")


@app.command("watch")
def watch(
    interval: int = typer.Option(
        0, "--interval", "-i", min=0, help="Seconds between sweeps (default: from config)"
    ),
    duration: float = typer.Option(
        0, "--duration", help="Stop after this many seconds (default: until Ctrl-C)"
    ),
    data_dir: data_dir_option = None,
) -> None:
    """Keep sweeping in the foreground on a fixed interval."""
    seconds = interval or get_config().sweep_interval_seconds
    store = open_store(data_dir, sweep=False)
    scheduler = AutoArchiveScheduler(store.sweep, interval=seconds)

    print_info(f"Sweeping every {seconds}s. Press Ctrl-C to stop.")
    scheduler.start()
    try:
        threading.Event().wait(duration if duration > 0 else None)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()
    typer.echo(f"Ran {scheduler.runs} sweep(s)")
