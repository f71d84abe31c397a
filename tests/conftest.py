# tests/conftest.py

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from flowboard.application import BoardStore, add_task, move_task
from flowboard.domain.board import (
    BoardSnapshot,
    ColumnId,
    Priority,
    TaskCategory,
    TaskInput,
)
from flowboard.infrastructure.storage import BoardRepository

from .helpers import FIXED_NOW, FakeClock


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point config and data lookups at a per-test directory."""
    home = tmp_path / "home"
    monkeypatch.setenv("FLOWBOARD_HOME", str(home))
    monkeypatch.delenv("FLOWBOARD_DATA_DIR", raising=False)
    yield home
    # Drop the stderr handler installed by the CLI callback.
    logger = logging.getLogger("flowboard")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def now() -> int:
    return FIXED_NOW


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def repository(tmp_path: Path) -> BoardRepository:
    return BoardRepository(tmp_path / "data")


@pytest.fixture()
def store(repository: BoardRepository, clock: FakeClock) -> BoardStore:
    return BoardStore(repository, clock=clock)


@pytest.fixture()
def board(now: int) -> BoardSnapshot:
    """Board with one task per column.

    todo=[a], in-progress=[b], done=[c]; "a" is a today task tagged "work",
    "b" is high priority, "c" has a description.
    """
    snapshot = BoardSnapshot()
    snapshot, _ = add_task(
        snapshot,
        TaskInput(title="Alpha", category=TaskCategory.TODAY, tags=["work", "home"]),
        now,
        task_id="a",
    )
    snapshot, _ = add_task(
        snapshot, TaskInput(title="Beta", priority=Priority.HIGH), now, task_id="b"
    )
    snapshot, _ = add_task(
        snapshot, TaskInput(title="Gamma", description="Ship it"), now, task_id="c"
    )
    snapshot = move_task(snapshot, "b", ColumnId.TODO, ColumnId.IN_PROGRESS, 1, 0, now)
    snapshot = move_task(snapshot, "c", ColumnId.TODO, ColumnId.DONE, 1, 0, now)
    return snapshot
