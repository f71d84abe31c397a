"""Normalization of decoded board documents.

Anything read from outside (backup files, hand-edited exports, the on-disk
store) passes through ``normalize_document`` before it can replace live
state. Missing sections get defaults, dangling references are dropped and
column membership is reconciled with task status, so the result always
satisfies the board invariants.
"""

import logging
from typing import Any

from pydantic import ValidationError

from flowboard.domain.board import (
    DEFAULT_COLUMN_ORDER,
    DEFAULT_COLUMN_TITLES,
    FORMAT_VERSION,
    Column,
    ColumnId,
    ExportDocument,
    FilterState,
    Task,
    TaskStatus,
    ThemePreference,
    column_for_status,
)
from flowboard.domain.shared import DecodeError, Err, Ok, Result

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"

# (wire name, field name, default) for task fields that old or hand-written
# records may omit. Timestamps are handled separately.
_TASK_DEFAULTS: tuple[tuple[str, str, Any], ...] = (
    ("priority", "priority", "medium"),
    ("status", "status", "todo"),
    ("category", "category", "general"),
    ("tags", "tags", []),
    ("isArchived", "is_archived", False),
)


def _lookup(record: dict[str, Any], alias: str, name: str) -> Any:
    """Read a field by wire name, falling back to the Python name."""
    value = record.get(alias)
    if value is None:
        value = record.get(name)
    return value


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'invalid value')}" if location else error.get("msg", "")


def settle_completion(task: Task) -> Task:
    """Make the completion fields agree with the status.

    A done task without a completion time gets its last update time; any
    other status drops the completion time and the archive flag.
    """
    if task.status == TaskStatus.DONE:
        if task.completed_at is None:
            return task.model_copy(update={"completed_at": task.updated_at})
        return task
    if task.completed_at is not None or task.is_archived:
        return task.model_copy(update={"completed_at": None, "is_archived": False})
    return task


def coerce_task(key: str, record: Any, now: int, fmt: str) -> Result[Task, DecodeError]:
    """Build a Task from a loosely-typed record, backfilling omitted fields.

    Args:
        key: The key the record was stored under (used when it has no id).
        record: Raw mapping from the decoded document.
        now: Time used for missing timestamps, in epoch milliseconds.
        fmt: Format name reported in errors.

    Returns:
        Ok(Task), or Err(DecodeError) naming the task when the record is
        unusable even after defaults are applied.
    """
    if not isinstance(record, dict):
        return Err(DecodeError(f"Task '{key}' is not an object", fmt))

    data = {k: v for k, v in record.items() if v is not None}
    data.setdefault("id", key)
    if not data.get("title"):
        data["title"] = UNTITLED
    for alias, name, default in _TASK_DEFAULTS:
        if _lookup(data, alias, name) is None:
            data[alias] = default

    created = _lookup(data, "createdAt", "created_at")
    if created is None:
        created = now
        data["createdAt"] = created
    if _lookup(data, "updatedAt", "updated_at") is None:
        data["updatedAt"] = created

    try:
        task = Task.model_validate(data)
    except ValidationError as e:
        return Err(DecodeError(f"Invalid task '{key}': {_first_error(e)}", fmt))
    return Ok(settle_completion(task))


def _coerce_view(model: type, raw: Any, label: str) -> Any:
    """Validate filters/theme, falling back to defaults when unusable."""
    if raw is None:
        return model()
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid {label} in imported data: {_first_error(e)}")
        return model()


def reconcile_columns(
    columns: dict[ColumnId, Column],
    tasks: dict[str, Task],
) -> dict[ColumnId, Column]:
    """Make column membership agree with task status.

    Each id stays only in the first column that lists it, and only if the
    task is live and its status matches that column. Live tasks no column
    lists are appended to the column of their status.
    """
    claimed: set[str] = set()
    reconciled: dict[ColumnId, Column] = {}
    dropped = 0

    for column_id, column in columns.items():
        kept: list[str] = []
        for task_id in column.task_ids:
            task = tasks.get(task_id)
            if (
                task is None
                or task_id in claimed
                or not task.is_live()
                or column_for_status(task.status) != column_id
            ):
                dropped += 1
                continue
            kept.append(task_id)
            claimed.add(task_id)
        reconciled[column_id] = column.model_copy(update={"task_ids": kept})

    filed = 0
    for task_id, task in tasks.items():
        if task_id in claimed or not task.is_live():
            continue
        column_id = column_for_status(task.status)
        if column_id in reconciled:
            column = reconciled[column_id]
            reconciled[column_id] = column.model_copy(
                update={"task_ids": [*column.task_ids, task_id]}
            )
            filed += 1

    if dropped or filed:
        logger.info(f"Reconciled columns: dropped {dropped} reference(s), filed {filed} task(s)")
    return reconciled


def normalize_document(
    raw: Any, now: int, fmt: str = "json"
) -> Result[ExportDocument, DecodeError]:
    """Turn a decoded (possibly partial or legacy) document into a board.

    Rules:
        - missing tasks or columns become empty mappings
        - a non-empty columnOrder keeps only ids present in columns;
          otherwise the order is the ids of columns
        - column taskIds keep only ids present in tasks
        - missing filters, theme, version and exportedAt get defaults
        - unknown column ids are dropped; fixed columns that are missing are
          recreated empty and appended to the order

    Args:
        raw: The parsed JSON value.
        now: Time used for backfilled timestamps, in epoch milliseconds.
        fmt: Format name reported in errors.

    Returns:
        Ok(ExportDocument) or Err(DecodeError).
    """
    if not isinstance(raw, dict):
        return Err(DecodeError("Board data must be a JSON object", fmt))

    raw_tasks = raw.get("tasks") or {}
    if not isinstance(raw_tasks, dict):
        return Err(DecodeError("'tasks' must be an object keyed by task id", fmt))

    tasks: dict[str, Task] = {}
    for key, record in raw_tasks.items():
        result = coerce_task(str(key), record, now, fmt)
        if isinstance(result, Err):
            return result
        tasks[result.value.id] = result.value

    raw_columns = raw.get("columns") or {}
    if not isinstance(raw_columns, dict):
        return Err(DecodeError("'columns' must be an object keyed by column id", fmt))

    columns: dict[ColumnId, Column] = {}
    for key, record in raw_columns.items():
        try:
            column_id = ColumnId(key)
        except ValueError:
            logger.warning(f"Dropping unknown column '{key}' from imported data")
            continue
        record = record or {}
        if not isinstance(record, dict):
            return Err(DecodeError(f"Column '{key}' is not an object", fmt))
        task_ids = _lookup(record, "taskIds", "task_ids") or []
        if not isinstance(task_ids, list):
            return Err(DecodeError(f"Column '{key}' taskIds must be a list", fmt))
        title = record.get("title") or DEFAULT_COLUMN_TITLES[column_id]
        columns[column_id] = Column(
            id=column_id,
            title=str(title),
            task_ids=[tid for tid in task_ids if isinstance(tid, str) and tid in tasks],
        )

    raw_order = _lookup(raw, "columnOrder", "column_order")
    order: list[ColumnId] = []
    if isinstance(raw_order, list) and raw_order:
        for value in raw_order:
            try:
                column_id = ColumnId(value)
            except ValueError:
                continue
            if column_id in columns and column_id not in order:
                order.append(column_id)
    else:
        order = list(columns)

    for column_id in DEFAULT_COLUMN_ORDER:
        if column_id not in columns:
            columns[column_id] = Column(id=column_id, title=DEFAULT_COLUMN_TITLES[column_id])
        if column_id not in order:
            order.append(column_id)

    version = raw.get("version")
    exported_at = _lookup(raw, "exportedAt", "exported_at")
    document = ExportDocument(
        tasks=tasks,
        columns=reconcile_columns(columns, tasks),
        column_order=order,
        filters=_coerce_view(FilterState, raw.get("filters"), "filters"),
        theme=_coerce_view(ThemePreference, raw.get("theme"), "theme"),
        version=str(version) if version else FORMAT_VERSION,
        exported_at=exported_at if isinstance(exported_at, int) else now,
    )
    return Ok(document)
