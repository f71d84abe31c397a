"""Best-effort parser for old Markdown exports without an embedded data block.

Old exports list tasks as a header line followed by indented fields::

    ### [x] Write report
    - ID: 3f2c...
    - Status: done
    - Priority: high
    - Category: today
    - Tags: work, q3
    - Created: 2024-05-01
    Free text lines become the description.
    ---

The parser is a small state machine (IDLE / ACCUMULATING_TASK) driven by one
classified token per input line. A task is committed when the next header or
a ``---`` terminator arrives, or at end of input. Unusable field values fall
back to defaults instead of failing the import.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from flowboard.domain.board import (
    DEFAULT_COLUMN_ORDER,
    ColumnId,
    ExportDocument,
    Priority,
    Task,
    TaskCategory,
    TaskStatus,
    column_for_status,
    default_columns,
)
from flowboard.infrastructure.codec.normalize import UNTITLED

LEGACY_WARNING = (
    "No embedded data block found; imported tasks from the legacy Markdown "
    "layout. Board structure may not be fully recovered."
)

_HEADER_RE = re.compile(r"^### \[(?P<mark>[ xX]?)\]\s?(?P<title>.*)$")
_FIELD_RE = re.compile(
    r"^-\s*(?P<key>ID|Status|Priority|Category|Tags|Created)\s*:\s?(?P<value>.*)$",
    re.IGNORECASE,
)


class LineKind(Enum):
    HEADER = "header"
    FIELD = "field"
    CREATED = "created"
    TERMINATOR = "terminator"
    BLANK = "blank"
    TEXT = "text"


class ParserState(Enum):
    IDLE = "idle"
    ACCUMULATING_TASK = "accumulating_task"


@dataclass(frozen=True)
class LineToken:
    """One classified input line.

    For HEADER tokens ``key`` is "x" when the checkbox is ticked and
    ``value`` is the title; for FIELD tokens ``key`` is the lower-cased
    field name.
    """

    kind: LineKind
    raw: str
    key: str = ""
    value: str = ""


def classify_line(line: str) -> LineToken:
    """Turn one line of input into a token."""
    line = line.rstrip("\r\n")
    stripped = line.strip()

    header = _HEADER_RE.match(line)
    if header:
        return LineToken(
            LineKind.HEADER,
            line,
            key=header.group("mark").strip().lower(),
            value=header.group("title").strip(),
        )
    if not stripped:
        return LineToken(LineKind.BLANK, line)
    if stripped == "---":
        return LineToken(LineKind.TERMINATOR, line)

    match = _FIELD_RE.match(stripped)
    if match:
        key = match.group("key").lower()
        kind = LineKind.CREATED if key == "created" else LineKind.FIELD
        return LineToken(kind, line, key=key, value=match.group("value").strip())
    return LineToken(LineKind.TEXT, line)


def parse_status(value: str) -> TaskStatus:
    try:
        return TaskStatus(value.strip().lower())
    except ValueError:
        return TaskStatus.TODO


def parse_priority(value: str) -> Priority:
    try:
        return Priority(value.strip().lower())
    except ValueError:
        return Priority.MEDIUM


def parse_category(value: str) -> TaskCategory:
    if value.strip().lower() == TaskCategory.TODAY.value:
        return TaskCategory.TODAY
    return TaskCategory.GENERAL


def parse_tags(value: str) -> list[str]:
    return [tag.strip() for tag in value.split(",") if tag.strip()]


@dataclass
class TaskDraft:
    """A task being accumulated from header and field lines."""

    id: str
    title: str
    status: TaskStatus
    priority: Priority = Priority.MEDIUM
    category: TaskCategory = TaskCategory.GENERAL
    tags: list[str] = field(default_factory=list)
    description_lines: list[str] = field(default_factory=list)

    def apply_field(self, key: str, value: str) -> None:
        if key == "id":
            if value:
                self.id = value
        elif key == "status":
            self.status = parse_status(value)
        elif key == "priority":
            self.priority = parse_priority(value)
        elif key == "category":
            self.category = parse_category(value)
        elif key == "tags":
            self.tags = parse_tags(value)

    def build(self, now: int) -> Task:
        """Freeze the draft into a Task stamped with the import time.

        A recovered DELETED task is revived as TODO: it is filed into the
        todo column and a listed task cannot carry the deleted status.
        """
        status = TaskStatus.TODO if self.status == TaskStatus.DELETED else self.status
        description = "\n".join(self.description_lines).strip("\n")
        return Task(
            id=self.id,
            title=self.title or UNTITLED,
            description=description or None,
            priority=self.priority,
            status=status,
            category=self.category,
            tags=self.tags,
            created_at=now,
            updated_at=now,
            completed_at=now if status == TaskStatus.DONE else None,
            is_archived=False,
        )


class LegacyMarkdownParser:
    """Line-driven state machine recovering tasks from old exports.

    Example:
        parser = LegacyMarkdownParser(now=now_ms())
        tasks = parser.parse(text)
    """

    def __init__(self, now: int, new_id: Callable[[], str] | None = None) -> None:
        self.now = now
        self._new_id = new_id or (lambda: str(uuid4()))
        self.state = ParserState.IDLE
        self.current: TaskDraft | None = None
        self.tasks: dict[str, Task] = {}
        self.headers_seen = 0

    def feed(self, token: LineToken) -> None:
        """Advance the state machine by one token."""
        if token.kind == LineKind.HEADER:
            self._commit()
            self.headers_seen += 1
            self.current = TaskDraft(
                id=self._new_id(),
                title=token.value,
                status=TaskStatus.DONE if token.key == "x" else TaskStatus.TODO,
            )
            self.state = ParserState.ACCUMULATING_TASK
            return

        if self.state == ParserState.IDLE or self.current is None:
            return

        if token.kind == LineKind.TERMINATOR:
            self._commit()
        elif token.kind == LineKind.FIELD:
            self.current.apply_field(token.key, token.value)
        elif token.kind == LineKind.TEXT:
            self.current.description_lines.append(token.raw)

    def finish(self) -> dict[str, Task]:
        """Commit any open task and return everything recovered."""
        self._commit()
        return self.tasks

    def parse(self, lines: str | Iterable[str]) -> dict[str, Task]:
        """Feed every line of a document and return the recovered tasks."""
        if isinstance(lines, str):
            lines = lines.splitlines()
        for line in lines:
            self.feed(classify_line(line))
        return self.finish()

    def _commit(self) -> None:
        if self.current is not None:
            task = self.current.build(self.now)
            self.tasks[task.id] = task
        self.current = None
        self.state = ParserState.IDLE


def build_legacy_document(tasks: dict[str, Task], now: int) -> ExportDocument:
    """File recovered tasks into a fresh board.

    Each task goes to the column matching its status when that is a live
    column, otherwise to todo.
    """
    columns = default_columns()
    filed: dict[ColumnId, list[str]] = {column_id: [] for column_id in DEFAULT_COLUMN_ORDER}
    for task in tasks.values():
        filed[column_for_status(task.status) or ColumnId.TODO].append(task.id)
    columns = {
        column_id: column.model_copy(update={"task_ids": filed[column_id]})
        for column_id, column in columns.items()
    }
    return ExportDocument(
        tasks=tasks,
        columns=columns,
        column_order=list(DEFAULT_COLUMN_ORDER),
        exported_at=now,
    )
