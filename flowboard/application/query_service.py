"""Query application service.

Read-only views derived from a board snapshot: the filtered column lists
the board shows, completion statistics, and the archive, recycle bin and
calendar listings. All functions are pure - no I/O, no side effects.
"""

from datetime import date

from pydantic import BaseModel

from flowboard.domain.board import (
    BoardSnapshot,
    CategoryFilter,
    ColumnId,
    FilterState,
    Task,
    TaskCategory,
    TaskStatus,
)
from flowboard.domain.shared import local_date


def _percent(done: int, total: int) -> int:
    if total == 0:
        return 0
    # half up, so 1 of 8 reads 13%
    return (done * 200 + total) // (2 * total)


class CategoryStats(BaseModel):
    """Completion counts for one category."""

    total: int = 0
    done: int = 0

    @property
    def percent(self) -> int:
        """Completion percentage, rounded; 0 for an empty category."""
        return _percent(self.done, self.total)


class TaskStats(BaseModel):
    """Completion statistics for the active board.

    Provides the per-category numbers shown as progress bars.
    """

    today: CategoryStats
    general: CategoryStats


def matches_filters(task: Task, filters: FilterState) -> bool:
    """Check a task against the search text, priority and category filters.

    Search is a case-insensitive substring match on title or description.
    An empty priority selection and the ALL category impose no restriction.
    Selected tags do not restrict the board.
    """
    if filters.search:
        keyword = filters.search.lower()
        in_title = keyword in task.title.lower()
        in_description = bool(task.description) and keyword in task.description.lower()
        if not (in_title or in_description):
            return False
    if filters.priority and task.priority not in filters.priority:
        return False
    if filters.category != CategoryFilter.ALL and task.category.value != filters.category.value:
        return False
    return True


def _in_category(task: Task, category: CategoryFilter) -> bool:
    return category == CategoryFilter.ALL or task.category.value == category.value


def filtered_tasks(
    snapshot: BoardSnapshot,
    column_id: ColumnId,
    filters: FilterState | None = None,
) -> list[Task]:
    """Resolve a column's ids to tasks, in column order, keeping matches.

    Args:
        snapshot: Board state to read.
        column_id: Column to list.
        filters: Filters to apply; defaults to the snapshot's own filters.

    Returns:
        Matching tasks. Ids without a task record are skipped.
    """
    if filters is None:
        filters = snapshot.filters
    column = snapshot.columns.get(column_id)
    if column is None:
        return []

    tasks = (snapshot.tasks.get(task_id) for task_id in column.task_ids)
    return [task for task in tasks if task is not None and matches_filters(task, filters)]


def task_stats(snapshot: BoardSnapshot) -> TaskStats:
    """Count active tasks (not deleted, not archived) by category.

    Returns:
        TaskStats with total and done counts for today and general.
    """
    counts = {category: CategoryStats() for category in TaskCategory}
    for task in snapshot.tasks.values():
        if not task.is_live():
            continue
        current = counts[task.category]
        counts[task.category] = CategoryStats(
            total=current.total + 1,
            done=current.done + (1 if task.status == TaskStatus.DONE else 0),
        )
    return TaskStats(today=counts[TaskCategory.TODAY], general=counts[TaskCategory.GENERAL])


def archived_tasks(
    snapshot: BoardSnapshot,
    category: CategoryFilter = CategoryFilter.ALL,
) -> list[Task]:
    """List archived tasks, most recently completed first."""
    archived = [
        task
        for task in snapshot.tasks.values()
        if task.is_archived and _in_category(task, category)
    ]
    return sorted(archived, key=lambda t: t.completed_at or 0, reverse=True)


def deleted_tasks(snapshot: BoardSnapshot) -> list[Task]:
    """List the recycle bin, most recently deleted first."""
    deleted = [t for t in snapshot.tasks.values() if t.status == TaskStatus.DELETED]
    return sorted(deleted, key=lambda t: t.updated_at, reverse=True)


def tasks_created_on(
    snapshot: BoardSnapshot,
    day: date,
    category: CategoryFilter = CategoryFilter.ALL,
) -> list[Task]:
    """List active tasks created on a local calendar day, oldest first."""
    created = [
        task
        for task in snapshot.tasks.values()
        if task.is_live()
        and _in_category(task, category)
        and local_date(task.created_at) == day
    ]
    return sorted(created, key=lambda t: t.created_at)


def day_completion(
    snapshot: BoardSnapshot,
    day: date,
    category: CategoryFilter = CategoryFilter.ALL,
) -> int:
    """Percentage of a day's active tasks that are done (0 if none)."""
    created = tasks_created_on(snapshot, day, category)
    done = sum(1 for task in created if task.status == TaskStatus.DONE)
    return _percent(done, len(created))


def all_tags(snapshot: BoardSnapshot) -> list[str]:
    """Distinct tags across all tasks, in first-seen order."""
    seen: dict[str, None] = {}
    for task in snapshot.tasks.values():
        for tag in task.tags:
            seen.setdefault(tag, None)
    return list(seen)
