"""Board domain models.

Pure value objects for the task board. Uses Pydantic for validation and
for the camelCase wire format shared by the on-disk store and backup files.

All models are frozen: operations never edit a snapshot in place, they build
a new one with ``model_copy(update=...)``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

FORMAT_VERSION = "1.1.0"


class Priority(str, Enum):
    """How urgent a task is."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    """Lifecycle status of a task.

    The first three mirror the board columns; DELETED marks a task that is
    in the recycle bin.
    """

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    DELETED = "deleted"


class ColumnId(str, Enum):
    """The fixed set of board columns."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskCategory(str, Enum):
    """Which list a task belongs to."""

    TODAY = "today"
    GENERAL = "general"


class CategoryFilter(str, Enum):
    """Category selector used by views; ALL disables the restriction."""

    TODAY = "today"
    GENERAL = "general"
    ALL = "all"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"


DEFAULT_COLUMN_ORDER: tuple[ColumnId, ...] = (
    ColumnId.TODO,
    ColumnId.IN_PROGRESS,
    ColumnId.DONE,
)

DEFAULT_COLUMN_TITLES: dict[ColumnId, str] = {
    ColumnId.TODO: "To Do",
    ColumnId.IN_PROGRESS: "In Progress",
    ColumnId.DONE: "Done",
}


def column_for_status(status: TaskStatus) -> ColumnId | None:
    """Return the column a task with this status lives in, if any."""
    if status == TaskStatus.DELETED:
        return None
    return ColumnId(status.value)


class BoardModel(BaseModel):
    """Base for board records: frozen, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Task(BoardModel):
    """A single work item.

    ``completed_at`` is set when the task enters DONE and cleared when it
    leaves; ``is_archived`` is only ever true while the status is DONE.
    """

    id: str
    title: str = Field(min_length=1)
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    category: TaskCategory = TaskCategory.GENERAL
    tags: list[str] = Field(default_factory=list)
    created_at: int
    updated_at: int
    completed_at: int | None = None
    is_archived: bool = False

    def is_live(self) -> bool:
        """Check if the task belongs on the active board."""
        return self.status != TaskStatus.DELETED and not self.is_archived


class Column(BoardModel):
    """A board column holding an ordered list of task ids."""

    id: ColumnId
    title: str
    task_ids: list[str] = Field(default_factory=list)


class FilterState(BoardModel):
    """View filters. They never change stored task data."""

    search: str = ""
    tags: list[str] = Field(default_factory=list)
    priority: list[Priority] = Field(default_factory=list)
    category: CategoryFilter = CategoryFilter.ALL


class ThemePreference(BoardModel):
    mode: ThemeMode = ThemeMode.LIGHT


def default_columns() -> dict[ColumnId, Column]:
    """Build the three empty columns a new board starts with."""
    return {
        column_id: Column(id=column_id, title=DEFAULT_COLUMN_TITLES[column_id])
        for column_id in DEFAULT_COLUMN_ORDER
    }


class BoardSnapshot(BoardModel):
    """The complete state of the board at one instant.

    Tasks are keyed by id. A task id is listed in the column matching its
    status unless the task is archived or deleted, in which case it is
    listed nowhere.
    """

    tasks: dict[str, Task] = Field(default_factory=dict)
    columns: dict[ColumnId, Column] = Field(default_factory=default_columns)
    column_order: list[ColumnId] = Field(default_factory=lambda: list(DEFAULT_COLUMN_ORDER))
    filters: FilterState = Field(default_factory=FilterState)
    theme: ThemePreference = Field(default_factory=ThemePreference)

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by its id."""
        return self.tasks.get(task_id)

    def column_of(self, task_id: str) -> ColumnId | None:
        """Find which column currently lists a task id."""
        for column_id, column in self.columns.items():
            if task_id in column.task_ids:
                return column_id
        return None

    def ordered_columns(self) -> list[Column]:
        """Get the columns in presentation order."""
        return [self.columns[c] for c in self.column_order if c in self.columns]


class ExportDocument(BoardSnapshot):
    """A snapshot stamped with a format version and export time.

    This is the unit written to backups and to the on-disk store.
    """

    version: str = FORMAT_VERSION
    exported_at: int

    @classmethod
    def from_snapshot(cls, snapshot: BoardSnapshot, exported_at: int) -> "ExportDocument":
        return cls(
            tasks=snapshot.tasks,
            columns=snapshot.columns,
            column_order=snapshot.column_order,
            filters=snapshot.filters,
            theme=snapshot.theme,
            exported_at=exported_at,
        )

    def snapshot(self) -> BoardSnapshot:
        """Strip the export metadata, leaving the board state."""
        return BoardSnapshot(
            tasks=self.tasks,
            columns=self.columns,
            column_order=self.column_order,
            filters=self.filters,
            theme=self.theme,
        )


class TaskInput(BaseModel):
    """Fields a caller supplies when creating a task."""

    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    category: TaskCategory = TaskCategory.GENERAL
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value


class TaskUpdate(BaseModel):
    """A partial edit of a task. Only fields that were set are applied."""

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    status: TaskStatus | None = None
    category: TaskCategory | None = None
    tags: list[str] | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value
