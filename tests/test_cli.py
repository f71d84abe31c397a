# tests/test_cli.py

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from flowboard import __version__
from flowboard.application import add_task, move_task
from flowboard.domain.board import BoardSnapshot, ColumnId, TaskInput, TaskStatus
from flowboard.domain.shared import ONE_DAY_MS, now_ms
from flowboard.infrastructure.storage import BoardRepository
from flowboard.interfaces.cli import app

runner = CliRunner()


def _board(home: Path) -> BoardSnapshot:
    return BoardRepository(home).load(now_ms()).value


def _task_id(home: Path, title: str) -> str:
    return next(t.id for t in _board(home).tasks.values() if t.title == title)


@pytest.fixture()
def seeded(isolated_home: Path) -> Path:
    """Home with Alpha (today, tagged) and Beta (high) in To Do."""
    for args in (
        ["add", "Alpha", "-c", "today", "-t", "work"],
        ["add", "Beta", "-p", "high"],
    ):
        result = runner.invoke(app, args)
        assert result.exit_code == 0, result.output
    return isolated_home


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"flowboard version {__version__}" in result.output


def test_add_persists_task(seeded: Path) -> None:
    board = _board(seeded)
    titles = [board.tasks[i].title for i in board.columns[ColumnId.TODO].task_ids]
    assert titles == ["Alpha", "Beta"]
    assert (seeded / "flowboard-storage.json").exists()


def test_add_rejects_blank_title(isolated_home: Path) -> None:
    result = runner.invoke(app, ["task", "add", "   "])
    assert result.exit_code == 1
    assert "title" in result.output


def test_show_lists_columns(seeded: Path) -> None:
    result = runner.invoke(app, ["show"])
    assert result.exit_code == 0
    assert "To Do (2)" in result.output
    assert "Alpha" in result.output
    assert "Done (0)" in result.output


def test_move_by_id_prefix(seeded: Path) -> None:
    task_id = _task_id(seeded, "Beta")
    result = runner.invoke(app, ["mv", task_id[:8], "done"])

    assert result.exit_code == 0, result.output
    board = _board(seeded)
    assert board.columns[ColumnId.DONE].task_ids == [task_id]
    assert board.tasks[task_id].status == TaskStatus.DONE
    assert board.tasks[task_id].completed_at is not None


def test_reorder_within_column(seeded: Path) -> None:
    beta = _task_id(seeded, "Beta")
    result = runner.invoke(app, ["task", "move", beta, "todo", "--index", "0"])

    assert result.exit_code == 0, result.output
    assert _board(seeded).columns[ColumnId.TODO].task_ids[0] == beta


def test_unknown_task_id(seeded: Path) -> None:
    result = runner.invoke(app, ["task", "delete", "no-such-id"])
    assert result.exit_code == 1
    assert "No task" in result.output


def test_edit_status_relocates(seeded: Path) -> None:
    alpha = _task_id(seeded, "Alpha")
    result = runner.invoke(
        app, ["task", "edit", alpha, "--status", "in-progress", "--title", "Alpha!"]
    )

    assert result.exit_code == 0, result.output
    board = _board(seeded)
    assert board.columns[ColumnId.IN_PROGRESS].task_ids == [alpha]
    assert board.tasks[alpha].title == "Alpha!"


def test_delete_restore_and_purge(seeded: Path) -> None:
    alpha = _task_id(seeded, "Alpha")

    assert runner.invoke(app, ["task", "delete", alpha]).exit_code == 0
    listing = runner.invoke(app, ["trash", "list"])
    assert "Alpha" in listing.output

    assert runner.invoke(app, ["task", "restore", alpha]).exit_code == 0
    assert _board(seeded).tasks[alpha].status == TaskStatus.TODO

    result = runner.invoke(app, ["task", "purge", alpha, "--yes"])
    assert result.exit_code == 0, result.output
    assert alpha not in _board(seeded).tasks


def test_trash_empty_asks_first(seeded: Path) -> None:
    beta = _task_id(seeded, "Beta")
    runner.invoke(app, ["task", "delete", beta])

    declined = runner.invoke(app, ["trash", "empty"], input="n\n")
    assert declined.exit_code != 0
    assert beta in _board(seeded).tasks

    accepted = runner.invoke(app, ["trash", "empty"], input="y\n")
    assert accepted.exit_code == 0
    assert beta not in _board(seeded).tasks


def test_stats(seeded: Path) -> None:
    runner.invoke(app, ["mv", _task_id(seeded, "Beta"), "done"])
    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "Today:   0/1 done (0%)" in result.output
    assert "General: 1/1 done (100%)" in result.output


def test_reorder_columns(seeded: Path) -> None:
    bad = runner.invoke(app, ["board", "reorder", "todo", "done"])
    assert bad.exit_code == 1
    assert "exactly once" in bad.output

    good = runner.invoke(app, ["board", "reorder", "done", "todo", "in-progress"])
    assert good.exit_code == 0
    assert _board(seeded).column_order[0] == ColumnId.DONE


def test_filter_limits_board(seeded: Path) -> None:
    result = runner.invoke(app, ["board", "filter", "--search", "alp"])
    assert result.exit_code == 0
    assert "search 'alp'" in result.output

    shown = runner.invoke(app, ["show"])
    assert "Alpha" in shown.output
    assert "Beta" not in shown.output

    runner.invoke(app, ["board", "filter", "--clear"])
    assert "Beta" in runner.invoke(app, ["show"]).output


def test_rename_theme_and_check(seeded: Path) -> None:
    assert runner.invoke(app, ["board", "rename", "todo", "Inbox"]).exit_code == 0
    assert _board(seeded).columns[ColumnId.TODO].title == "Inbox"

    themed = runner.invoke(app, ["board", "theme"])
    assert "Theme: dark" in themed.output

    check = runner.invoke(app, ["board", "check"])
    assert check.exit_code == 0
    assert "consistent" in check.output


def test_day_view_and_tags(seeded: Path) -> None:
    day = runner.invoke(app, ["board", "day"])
    assert day.exit_code == 0
    assert "Alpha" in day.output
    assert "0% done" in day.output

    tags = runner.invoke(app, ["board", "tags"])
    assert tags.output.strip() == "work"


def test_startup_sweep_archives_old_done_tasks(isolated_home: Path) -> None:
    old = now_ms() - 2 * ONE_DAY_MS
    snapshot, task = add_task(BoardSnapshot(), TaskInput(title="Ancient"), old)
    snapshot = move_task(snapshot, task.id, ColumnId.TODO, ColumnId.DONE, 0, 0, old)
    BoardRepository(isolated_home).save(snapshot, old)

    result = runner.invoke(app, ["archive", "list"])
    assert result.exit_code == 0
    assert "Ancient" in result.output
    assert _board(isolated_home).tasks[task.id].is_archived

    assert runner.invoke(app, ["task", "unarchive", task.id]).exit_code == 0


def test_archive_watch_sweeps_until_duration(seeded: Path) -> None:
    result = runner.invoke(
        app, ["archive", "watch", "--interval", "3600", "--duration", "0.01"]
    )
    assert result.exit_code == 0, result.output
    assert "Ran 1 sweep(s)" in result.output


def test_archive_watch_rejects_negative_interval(seeded: Path) -> None:
    result = runner.invoke(app, ["archive", "watch", "--interval=-5", "--duration", "0.01"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)


def test_corrupt_store_is_not_overwritten(isolated_home: Path) -> None:
    isolated_home.mkdir(parents=True, exist_ok=True)
    store_file = isolated_home / "flowboard-storage.json"
    store_file.write_text("{corrupt", encoding="utf-8")

    result = runner.invoke(app, ["add", "Anything"])
    assert result.exit_code == 1
    assert store_file.read_text(encoding="utf-8") == "{corrupt"


# =============================================================================
# Export / import
# =============================================================================


def test_export_json_to_stdout(seeded: Path) -> None:
    result = runner.invoke(app, ["data", "export", "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["version"] == "1.1.0"
    assert len(data["tasks"]) == 2


def test_export_then_import_markdown(
    seeded: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    backup = tmp_path / "backup.md"
    result = runner.invoke(app, ["data", "export", "-o", str(backup)])
    assert result.exit_code == 0, result.output
    assert backup.read_text(encoding="utf-8").startswith("# FlowBoard Markdown Export")

    other = tmp_path / "other"
    monkeypatch.setenv("FLOWBOARD_DATA_DIR", str(other))
    result = runner.invoke(app, ["data", "import", str(backup), "--yes"])
    assert result.exit_code == 0, result.output
    assert "Imported 2 task(s)" in result.output
    assert _board(other).tasks == _board(seeded).tasks


def test_import_can_be_cancelled(seeded: Path, tmp_path: Path) -> None:
    backup = tmp_path / "empty.json"
    backup.write_text(json.dumps({"tasks": {}}), encoding="utf-8")

    result = runner.invoke(app, ["data", "import", str(backup)], input="n\n")
    assert result.exit_code == 0
    assert "cancelled" in result.output
    assert len(_board(seeded).tasks) == 2


def test_import_legacy_markdown_warns(isolated_home: Path, tmp_path: Path) -> None:
    legacy = tmp_path / "old.md"
    legacy.write_text("### [x] Done thing\n- ID: old-1\n- Status: done\n", encoding="utf-8")

    result = runner.invoke(app, ["data", "import", str(legacy), "-y"])
    assert result.exit_code == 0, result.output
    assert "Warning" in result.output
    assert _board(isolated_home).columns[ColumnId.DONE].task_ids == ["old-1"]


def test_import_rejects_garbage(seeded: Path, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")

    result = runner.invoke(app, ["data", "import", str(bad), "-y"])
    assert result.exit_code == 1
    assert "Import failed" in result.output
    assert len(_board(seeded).tasks) == 2


def test_import_rejects_non_utf8_file(seeded: Path, tmp_path: Path) -> None:
    binary = tmp_path / "backup.json"
    binary.write_bytes(b'{"tasks": {}}\xff\xfe')

    result = runner.invoke(app, ["data", "import", str(binary), "-y"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "not UTF-8" in result.output
    assert len(_board(seeded).tasks) == 2


# =============================================================================
# Config
# =============================================================================


def test_config_set_and_show(isolated_home: Path) -> None:
    result = runner.invoke(app, ["config", "set", "sweep_interval_seconds", "60"])
    assert result.exit_code == 0, result.output

    shown = runner.invoke(app, ["config", "show"])
    assert "sweep_interval_seconds = 60" in shown.output
    assert (isolated_home / "config.json").exists()


def test_config_rejects_unknown_and_invalid(isolated_home: Path) -> None:
    assert runner.invoke(app, ["config", "set", "colour", "blue"]).exit_code == 1
    assert runner.invoke(app, ["config", "set", "sweep_interval_seconds", "0"]).exit_code == 1


def test_config_data_dir_is_used(isolated_home: Path, tmp_path: Path) -> None:
    elsewhere = tmp_path / "elsewhere"
    runner.invoke(app, ["config", "set", "data_dir", str(elsewhere)])
    runner.invoke(app, ["add", "Relocated"])

    assert (elsewhere / "flowboard-storage.json").exists()
    assert not (isolated_home / "flowboard-storage.json").exists()
