"""Board state holder.

``BoardStore`` owns the current snapshot. Every command runs under one
re-entrant lock, goes through the pure board service, and the result is
written through the repository whenever the snapshot actually changed.
Callers get the outcome back as a Result:

- ``Ok(value)`` - the command was applied (or was a no-op) and saved
- ``Warn(value, message)`` - applied in memory, but the write failed
- ``Err(message)`` - rejected, state untouched

Imports are two-step: ``stage_import`` holds a decoded document aside and
only ``confirm_import`` replaces the live board with it.
"""

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from flowboard.application import archive_service, board_service
from flowboard.domain.board import (
    BoardSnapshot,
    ColumnId,
    ExportDocument,
    Task,
    TaskInput,
    TaskUpdate,
    ThemeMode,
)
from flowboard.domain.shared import Clock, Err, Ok, Result, Warn, now_ms

logger = logging.getLogger(__name__)


class BoardPersistence(Protocol):
    """What the store needs from a storage backend."""

    def load(self, now: int) -> Result[BoardSnapshot, str]: ...

    def save(self, snapshot: BoardSnapshot, now: int) -> Result[None, str]: ...


class BoardStore:
    """Thread-safe holder of the live board snapshot.

    Example:
        store = BoardStore(BoardRepository(data_dir))
        store.hydrate()
        result = store.add_task(TaskInput(title="Write report"))
        if isinstance(result, Warn):
            print(result.message)
    """

    def __init__(
        self,
        repository: BoardPersistence | None = None,
        clock: Clock = now_ms,
        snapshot: BoardSnapshot | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            repository: Where snapshots are persisted. None keeps the board
                in memory only.
            clock: Returns the current time in epoch milliseconds.
            snapshot: Initial board state. Defaults to an empty board.
        """
        self._repository = repository
        self._clock = clock
        self._snapshot = snapshot or BoardSnapshot()
        self._pending: ExportDocument | None = None
        self._lock = threading.RLock()

    @property
    def snapshot(self) -> BoardSnapshot:
        return self._snapshot

    @property
    def pending_import(self) -> ExportDocument | None:
        return self._pending

    def now(self) -> int:
        return self._clock()

    def hydrate(self) -> Result[BoardSnapshot, str]:
        """Replace in-memory state with what the repository holds.

        Returns:
            Ok(snapshot), or Err(str) if the stored board could not be read,
            in which case the in-memory state is left as it was.
        """
        with self._lock:
            if self._repository is None:
                return Ok(self._snapshot)
            result = self._repository.load(self.now())
            if isinstance(result, Err):
                logger.error(f"Could not load board: {result.error}")
                return result
            self._snapshot = result.value
            logger.debug(f"Hydrated board with {len(self._snapshot.tasks)} task(s)")
            return Ok(self._snapshot)

    # =========================================================================
    # Task commands
    # =========================================================================

    def add_task(self, data: TaskInput) -> Result[Task, str]:
        """Create a task at the end of the todo column."""
        with self._lock:
            snapshot, task = board_service.add_task(self._snapshot, data, self.now())
            return self._with_value(self._commit(snapshot, "add_task"), task)

    def update_task(self, task_id: str, changes: TaskUpdate) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply(
                "update_task", board_service.update_task, task_id, changes, self.now()
            )

    def delete_task(self, task_id: str) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply("delete_task", board_service.delete_task, task_id, self.now())

    def restore_task(self, task_id: str) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply("restore_task", board_service.restore_task, task_id, self.now())

    def unarchive_task(self, task_id: str) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply("unarchive_task", board_service.unarchive_task, task_id)

    def permanently_delete_task(self, task_id: str) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply(
                "permanently_delete_task", board_service.permanently_delete_task, task_id
            )

    def move_task(
        self,
        task_id: str,
        source_column_id: ColumnId,
        dest_column_id: ColumnId,
        source_index: int,
        dest_index: int,
    ) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply(
                "move_task",
                board_service.move_task,
                task_id,
                source_column_id,
                dest_column_id,
                source_index,
                dest_index,
                self.now(),
            )

    # =========================================================================
    # Board commands
    # =========================================================================

    def reorder_columns(self, new_order: Sequence[ColumnId | str]) -> Result[BoardSnapshot, str]:
        with self._lock:
            result = board_service.reorder_columns(self._snapshot, new_order)
            if isinstance(result, Err):
                return result
            return self._commit(result.value, "reorder_columns")

    def rename_column(self, column_id: ColumnId, title: str) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply("rename_column", board_service.rename_column, column_id, title)

    def set_filters(self, **changes: Any) -> Result[BoardSnapshot, str]:
        """Merge filter changes.

        Raises:
            pydantic.ValidationError: If a value is not valid for its field.
        """
        with self._lock:
            return self._commit(board_service.set_filters(self._snapshot, **changes), "set_filters")

    def set_theme(self, mode: ThemeMode) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply("set_theme", board_service.set_theme, mode)

    def toggle_theme(self) -> Result[BoardSnapshot, str]:
        with self._lock:
            return self._apply("toggle_theme", board_service.toggle_theme)

    def sweep(self) -> Result[BoardSnapshot, str]:
        """Archive stale done tasks. Nothing is written when none are stale."""
        with self._lock:
            return self._apply("sweep_archive", archive_service.sweep_archive, self.now())

    # =========================================================================
    # Import
    # =========================================================================

    def stage_import(
        self, decoded: Result[ExportDocument, Any]
    ) -> Result[ExportDocument, Any]:
        """Hold a decoded import until it is confirmed.

        Args:
            decoded: Output of the codec's decode step.

        Returns:
            The same result. Err results are not staged and clear nothing.
        """
        with self._lock:
            if isinstance(decoded, Err):
                return decoded
            self._pending = decoded.value
            logger.info(f"Staged import of {len(decoded.value.tasks)} task(s)")
            return decoded

    def confirm_import(self) -> Result[BoardSnapshot, str]:
        """Replace the live board with the staged import."""
        with self._lock:
            if self._pending is None:
                return Err("No import is pending")
            document, self._pending = self._pending, None
            return self._commit(document.snapshot(), "import")

    def cancel_import(self) -> bool:
        """Discard the staged import. Returns whether one was pending."""
        with self._lock:
            had_pending = self._pending is not None
            self._pending = None
            return had_pending

    # =========================================================================
    # Internals
    # =========================================================================

    def _apply(
        self, name: str, operation: Callable[..., BoardSnapshot], *args: Any
    ) -> Result[BoardSnapshot, str]:
        return self._commit(operation(self._snapshot, *args), name)

    def _commit(self, snapshot: BoardSnapshot, name: str) -> Result[BoardSnapshot, str]:
        """Adopt a new snapshot and write it through.

        A snapshot identical to the current one is a no-op and skips the write.
        """
        if snapshot is self._snapshot:
            logger.debug(f"{name}: no change")
            return Ok(snapshot)

        self._snapshot = snapshot
        logger.debug(f"{name}: committed")
        if self._repository is None:
            return Ok(snapshot)

        saved = self._repository.save(snapshot, self.now())
        if isinstance(saved, Err):
            logger.warning(f"{name}: change kept in memory but not saved: {saved.error}")
            return Warn(snapshot, f"Change not saved: {saved.error}")
        return Ok(snapshot)

    @staticmethod
    def _with_value(result: Result[BoardSnapshot, str], value: Any) -> Result[Any, str]:
        if isinstance(result, Warn):
            return Warn(value, result.message)
        if isinstance(result, Ok):
            return Ok(value)
        return result
