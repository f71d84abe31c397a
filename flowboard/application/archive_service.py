"""Auto-archive application service.

Completed tasks stay on the board for a day, then move to the archive.
``sweep_archive`` is the pure transition; ``AutoArchiveScheduler`` runs a
sweep callable once at start and then on a fixed interval.
"""

import logging
import threading
from collections.abc import Callable

from flowboard.domain.board import BoardSnapshot, ColumnId, TaskStatus, remove_from
from flowboard.domain.shared import ONE_DAY_MS

logger = logging.getLogger(__name__)

ARCHIVE_AFTER_MS = ONE_DAY_MS
DEFAULT_SWEEP_INTERVAL_SECONDS = 3600


def is_stale(completed_at: int, now: int) -> bool:
    """Check whether a completion time is more than a day before now."""
    return now - completed_at > ARCHIVE_AFTER_MS


def sweep_archive(snapshot: BoardSnapshot, now: int) -> BoardSnapshot:
    """Archive every done task completed more than 24 hours ago.

    Archived tasks keep their record but leave the done column. All changes
    are batched into one new snapshot; when nothing is stale the input
    snapshot itself is returned so callers can skip persisting.

    Args:
        snapshot: Current board state.
        now: Current time in epoch milliseconds.

    Returns:
        The swept snapshot, or ``snapshot`` unchanged.
    """
    stale = [
        task
        for task in snapshot.tasks.values()
        if task.status == TaskStatus.DONE
        and task.completed_at is not None
        and not task.is_archived
        and is_stale(task.completed_at, now)
    ]
    if not stale:
        return snapshot

    tasks = dict(snapshot.tasks)
    columns = snapshot.columns
    for task in stale:
        tasks[task.id] = task.model_copy(update={"is_archived": True})
        columns = remove_from(columns, ColumnId.DONE, task.id)

    logger.debug(f"Archived {len(stale)} task(s) completed before {now - ARCHIVE_AFTER_MS}")
    return snapshot.model_copy(update={"tasks": tasks, "columns": columns})


class AutoArchiveScheduler:
    """Run a sweep once immediately and then every ``interval`` seconds.

    The sweep callable is expected to serialize itself with user commands
    (``BoardStore.sweep`` does, under the store lock). The worker is a
    daemon thread so it never keeps the process alive on its own.

    Example:
        scheduler = AutoArchiveScheduler(store.sweep, interval=3600)
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        sweep: Callable[[], object],
        interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._sweep = sweep
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background sweeps. Calling twice is harmless."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="flowboard-auto-archive", daemon=True
        )
        self._thread.start()
        logger.info(f"Auto-archive scheduler started (every {self.interval}s)")

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the worker to finish and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Auto-archive scheduler stopped")

    def run_once(self) -> None:
        """Run one sweep, logging rather than propagating failures."""
        try:
            self._sweep()
        except Exception:
            logger.exception("Auto-archive sweep failed")
        self.runs += 1

    def _run(self) -> None:
        self.run_once()
        while not self._stop.wait(self.interval):
            self.run_once()
