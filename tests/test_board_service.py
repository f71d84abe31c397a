# tests/test_board_service.py

import random

import pytest
from pydantic import ValidationError

from flowboard.application import board_service
from flowboard.application.archive_service import sweep_archive
from flowboard.domain.board import (
    DEFAULT_COLUMN_ORDER,
    BoardSnapshot,
    CategoryFilter,
    ColumnId,
    Priority,
    TaskInput,
    TaskStatus,
    TaskUpdate,
    ThemeMode,
    find_violations,
)
from flowboard.domain.shared import ONE_DAY_MS, Err, Ok

from .helpers import ids


# =============================================================================
# add_task
# =============================================================================


def test_add_task_appends_to_todo(board: BoardSnapshot, now: int) -> None:
    snapshot, task = board_service.add_task(board, TaskInput(title="  Delta  "), now + 5)

    assert task.title == "Delta"
    assert task.status == TaskStatus.TODO
    assert task.created_at == task.updated_at == now + 5
    assert task.completed_at is None
    assert task.is_archived is False
    assert ids(snapshot, ColumnId.TODO) == ["a", task.id]
    assert snapshot.tasks[task.id] == task
    assert find_violations(snapshot) == []


def test_add_task_does_not_touch_previous_snapshot(board: BoardSnapshot, now: int) -> None:
    before = ids(board, ColumnId.TODO)
    board_service.add_task(board, TaskInput(title="Delta"), now)
    assert ids(board, ColumnId.TODO) == before


def test_add_task_replaces_taken_id(board: BoardSnapshot, now: int) -> None:
    snapshot, task = board_service.add_task(board, TaskInput(title="Dup"), now, task_id="a")
    assert task.id != "a"
    assert snapshot.tasks["a"].title == "Alpha"


def test_task_input_rejects_blank_title() -> None:
    with pytest.raises(ValidationError):
        TaskInput(title="   ")


# =============================================================================
# update_task
# =============================================================================


def test_update_unknown_task_is_noop(board: BoardSnapshot, now: int) -> None:
    assert board_service.update_task(board, "nope", TaskUpdate(title="X"), now) is board


def test_update_merges_fields(board: BoardSnapshot, now: int) -> None:
    changes = TaskUpdate(title="Alpha 2", priority=Priority.LOW, tags=["x"])
    snapshot = board_service.update_task(board, "a", changes, now + 10)

    task = snapshot.tasks["a"]
    assert task.title == "Alpha 2"
    assert task.priority == Priority.LOW
    assert task.tags == ["x"]
    assert task.updated_at == now + 10
    assert task.created_at == now
    assert ids(snapshot, ColumnId.TODO) == ["a"]


def test_update_can_clear_description(board: BoardSnapshot, now: int) -> None:
    snapshot = board_service.update_task(board, "c", TaskUpdate(description=None), now)
    assert snapshot.tasks["c"].description is None


def test_update_status_to_done_relocates_and_stamps(board: BoardSnapshot, now: int) -> None:
    snapshot = board_service.update_task(board, "a", TaskUpdate(status=TaskStatus.DONE), now + 1)

    assert snapshot.tasks["a"].completed_at == now + 1
    assert ids(snapshot, ColumnId.TODO) == []
    assert ids(snapshot, ColumnId.DONE) == ["c", "a"]
    assert find_violations(snapshot) == []


def test_update_status_out_of_done_clears_completion(board: BoardSnapshot, now: int) -> None:
    snapshot = board_service.update_task(board, "c", TaskUpdate(status=TaskStatus.TODO), now)

    assert snapshot.tasks["c"].completed_at is None
    assert ids(snapshot, ColumnId.TODO) == ["a", "c"]
    assert ids(snapshot, ColumnId.DONE) == []


def test_update_status_to_deleted_leaves_every_column(board: BoardSnapshot, now: int) -> None:
    snapshot = board_service.update_task(board, "b", TaskUpdate(status=TaskStatus.DELETED), now)

    assert snapshot.tasks["b"].status == TaskStatus.DELETED
    assert snapshot.column_of("b") is None
    assert find_violations(snapshot) == []


def test_update_archived_task_out_of_done_unarchives(board: BoardSnapshot, now: int) -> None:
    archived = sweep_archive(board, now + ONE_DAY_MS + 1)
    assert archived.tasks["c"].is_archived

    snapshot = board_service.update_task(
        archived, "c", TaskUpdate(status=TaskStatus.IN_PROGRESS), now + ONE_DAY_MS + 2
    )

    task = snapshot.tasks["c"]
    assert task.is_archived is False
    assert task.completed_at is None
    assert ids(snapshot, ColumnId.IN_PROGRESS) == ["b", "c"]
    assert find_violations(snapshot) == []


def test_update_same_status_keeps_position(board: BoardSnapshot, now: int) -> None:
    snapshot = board_service.update_task(board, "c", TaskUpdate(status=TaskStatus.DONE), now + 9)
    assert snapshot.tasks["c"].completed_at == now
    assert ids(snapshot, ColumnId.DONE) == ["c"]


# =============================================================================
# delete / restore / unarchive / permanent delete
# =============================================================================


def test_delete_task_moves_to_recycle_bin(board: BoardSnapshot, now: int) -> None:
    snapshot = board_service.delete_task(board, "c", now + 3)

    task = snapshot.tasks["c"]
    assert task.status == TaskStatus.DELETED
    assert task.updated_at == now + 3
    assert task.completed_at is None
    assert ids(snapshot, ColumnId.DONE) == []
    assert find_violations(snapshot) == []


def test_delete_twice_is_noop(board: BoardSnapshot, now: int) -> None:
    once = board_service.delete_task(board, "a", now)
    assert board_service.delete_task(once, "a", now + 1) is once


def test_delete_unknown_is_noop(board: BoardSnapshot, now: int) -> None:
    assert board_service.delete_task(board, "zzz", now) is board


def test_delete_archived_task_clears_archive_flag(board: BoardSnapshot, now: int) -> None:
    archived = sweep_archive(board, now + ONE_DAY_MS + 1)
    snapshot = board_service.delete_task(archived, "c", now + ONE_DAY_MS + 2)
    assert snapshot.tasks["c"].is_archived is False
    assert find_violations(snapshot) == []


def test_restore_returns_task_to_end_of_todo(board: BoardSnapshot, now: int) -> None:
    deleted = board_service.delete_task(board, "b", now)
    snapshot = board_service.restore_task(deleted, "b", now + 7)

    assert snapshot.tasks["b"].status == TaskStatus.TODO
    assert snapshot.tasks["b"].updated_at == now + 7
    assert ids(snapshot, ColumnId.TODO) == ["a", "b"]
    assert find_violations(snapshot) == []


def test_restore_requires_deleted_status(board: BoardSnapshot, now: int) -> None:
    assert board_service.restore_task(board, "a", now) is board
    assert board_service.restore_task(board, "missing", now) is board


def test_unarchive_appends_to_done(board: BoardSnapshot, now: int) -> None:
    later = now + ONE_DAY_MS + 1
    archived = sweep_archive(board, later)
    archived = board_service.move_task(archived, "a", ColumnId.TODO, ColumnId.DONE, 0, 0, later)

    snapshot = board_service.unarchive_task(archived, "c")

    assert snapshot.tasks["c"].is_archived is False
    assert snapshot.tasks["c"].completed_at == now
    assert ids(snapshot, ColumnId.DONE) == ["a", "c"]
    assert find_violations(snapshot) == []


def test_unarchive_requires_archived_task(board: BoardSnapshot) -> None:
    assert board_service.unarchive_task(board, "c") is board


def test_permanent_delete_removes_record(board: BoardSnapshot, now: int) -> None:
    deleted = board_service.delete_task(board, "a", now)
    snapshot = board_service.permanently_delete_task(deleted, "a")

    assert "a" not in snapshot.tasks
    assert snapshot.columns == deleted.columns
    assert board_service.permanently_delete_task(snapshot, "a") is snapshot


def test_permanent_delete_strips_listed_id(board: BoardSnapshot) -> None:
    snapshot = board_service.permanently_delete_task(board, "b")
    assert "b" not in snapshot.tasks
    assert ids(snapshot, ColumnId.IN_PROGRESS) == []
    assert find_violations(snapshot) == []


# =============================================================================
# move_task
# =============================================================================


def _todo_board(now: int, titles: list[str]) -> BoardSnapshot:
    snapshot = BoardSnapshot()
    for title in titles:
        snapshot, _ = board_service.add_task(snapshot, TaskInput(title=title), now, task_id=title)
    return snapshot


def test_move_across_columns(now: int) -> None:
    snapshot = _todo_board(now, ["A", "B"])
    moved = board_service.move_task(snapshot, "A", ColumnId.TODO, ColumnId.DONE, 0, 0, now + 100)

    assert ids(moved, ColumnId.TODO) == ["B"]
    assert ids(moved, ColumnId.DONE) == ["A"]
    assert moved.tasks["A"].status == TaskStatus.DONE
    assert moved.tasks["A"].completed_at == now + 100
    assert moved.tasks["A"].updated_at == now + 100


def test_move_within_column(now: int) -> None:
    snapshot = _todo_board(now, ["A", "B", "C"])
    moved = board_service.move_task(snapshot, "B", ColumnId.TODO, ColumnId.TODO, 1, 0, now)

    assert ids(moved, ColumnId.TODO) == ["B", "A", "C"]
    assert moved.tasks["B"].status == TaskStatus.TODO


def test_move_within_column_downwards(now: int) -> None:
    snapshot = _todo_board(now, ["A", "B", "C"])
    moved = board_service.move_task(snapshot, "A", ColumnId.TODO, ColumnId.TODO, 0, 2, now)
    assert ids(moved, ColumnId.TODO) == ["B", "C", "A"]


def test_move_to_same_place_is_noop(now: int) -> None:
    snapshot = _todo_board(now, ["A", "B"])
    moved = board_service.move_task(snapshot, "A", ColumnId.TODO, ColumnId.TODO, 0, 0, now)
    assert moved is snapshot


def test_move_out_of_done_clears_completion(board: BoardSnapshot, now: int) -> None:
    moved = board_service.move_task(board, "c", ColumnId.DONE, ColumnId.IN_PROGRESS, 0, 5, now)

    assert ids(moved, ColumnId.IN_PROGRESS) == ["b", "c"]
    assert moved.tasks["c"].completed_at is None
    assert moved.tasks["c"].status == TaskStatus.IN_PROGRESS


def test_move_uses_actual_position_for_stale_index(now: int) -> None:
    snapshot = _todo_board(now, ["A", "B", "C"])
    moved = board_service.move_task(snapshot, "C", ColumnId.TODO, ColumnId.DONE, 0, 0, now)

    assert ids(moved, ColumnId.TODO) == ["A", "B"]
    assert ids(moved, ColumnId.DONE) == ["C"]


def test_move_task_absent_from_source_is_noop(board: BoardSnapshot, now: int) -> None:
    assert board_service.move_task(board, "a", ColumnId.DONE, ColumnId.TODO, 0, 0, now) is board
    assert board_service.move_task(board, "zz", ColumnId.TODO, ColumnId.DONE, 0, 0, now) is board


def test_move_clamps_destination_index(now: int) -> None:
    snapshot = _todo_board(now, ["A", "B"])
    moved = board_service.move_task(snapshot, "A", ColumnId.TODO, ColumnId.IN_PROGRESS, 0, 99, now)
    assert ids(moved, ColumnId.IN_PROGRESS) == ["A"]


# =============================================================================
# Board layout and preferences
# =============================================================================


def test_reorder_columns_accepts_permutation(board: BoardSnapshot) -> None:
    result = board_service.reorder_columns(board, ["done", "todo", "in-progress"])

    assert isinstance(result, Ok)
    assert result.value.column_order == [ColumnId.DONE, ColumnId.TODO, ColumnId.IN_PROGRESS]
    assert board.column_order == list(DEFAULT_COLUMN_ORDER)


@pytest.mark.parametrize(
    "order",
    [
        ["todo", "done"],
        ["todo", "todo", "done"],
        ["todo", "in-progress", "done", "done"],
        ["todo", "in-progress", "backlog"],
    ],
)
def test_reorder_columns_rejects_non_permutation(board: BoardSnapshot, order: list[str]) -> None:
    result = board_service.reorder_columns(board, order)
    assert isinstance(result, Err)


def test_reorder_columns_same_order_returns_same_snapshot(board: BoardSnapshot) -> None:
    result = board_service.reorder_columns(board, list(DEFAULT_COLUMN_ORDER))
    assert isinstance(result, Ok)
    assert result.value is board


def test_rename_column(board: BoardSnapshot) -> None:
    snapshot = board_service.rename_column(board, ColumnId.TODO, " Backlog ")
    assert snapshot.columns[ColumnId.TODO].title == "Backlog"
    assert board_service.rename_column(snapshot, ColumnId.TODO, "   ") is snapshot


def test_set_filters_merges(board: BoardSnapshot) -> None:
    snapshot = board_service.set_filters(board, search="alp", priority=["high"])
    snapshot = board_service.set_filters(snapshot, category="today")

    assert snapshot.filters.search == "alp"
    assert snapshot.filters.priority == [Priority.HIGH]
    assert snapshot.filters.category == CategoryFilter.TODAY
    assert snapshot.tasks == board.tasks


def test_set_filters_rejects_bad_value(board: BoardSnapshot) -> None:
    with pytest.raises(ValidationError):
        board_service.set_filters(board, category="someday")


def test_theme_toggle_and_set(board: BoardSnapshot) -> None:
    dark = board_service.toggle_theme(board)
    assert dark.theme.mode == ThemeMode.DARK
    assert board_service.set_theme(dark, ThemeMode.DARK) is dark
    assert board_service.toggle_theme(dark).theme.mode == ThemeMode.LIGHT


# =============================================================================
# Invariant over arbitrary command sequences
# =============================================================================


def test_random_command_sequences_keep_board_consistent(now: int) -> None:
    rng = random.Random(1234)
    snapshot = BoardSnapshot()
    clock = now
    columns = list(DEFAULT_COLUMN_ORDER)
    statuses = list(TaskStatus)

    for step in range(600):
        clock += rng.randint(0, ONE_DAY_MS // 4)
        task_ids = list(snapshot.tasks)
        action = rng.randrange(9)

        if action == 0 or not task_ids:
            snapshot, _ = board_service.add_task(snapshot, TaskInput(title=f"t{step}"), clock)
            continue

        task_id = rng.choice(task_ids)
        if action == 1:
            source = snapshot.column_of(task_id) or rng.choice(columns)
            dest = rng.choice(columns)
            snapshot = board_service.move_task(
                snapshot, task_id, source, dest, rng.randint(0, 4), rng.randint(0, 4), clock
            )
        elif action == 2:
            change = TaskUpdate(status=rng.choice(statuses))
            snapshot = board_service.update_task(snapshot, task_id, change, clock)
        elif action == 3:
            snapshot = board_service.delete_task(snapshot, task_id, clock)
        elif action == 4:
            snapshot = board_service.restore_task(snapshot, task_id, clock)
        elif action == 5:
            snapshot = board_service.unarchive_task(snapshot, task_id)
        elif action == 6:
            snapshot = board_service.permanently_delete_task(snapshot, task_id)
        elif action == 7:
            snapshot = sweep_archive(snapshot, clock)
        else:
            snapshot = board_service.update_task(
                snapshot, task_id, TaskUpdate(title=f"renamed {step}"), clock
            )

        assert find_violations(snapshot) == [], f"after step {step} (action {action})"
