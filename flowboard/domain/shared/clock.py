"""Timestamp helpers.

All board timestamps are integer milliseconds since the Unix epoch, which is
what backup files from earlier versions contain.
"""

from collections.abc import Callable
from datetime import UTC, date, datetime

Clock = Callable[[], int]

ONE_DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    """Return the current UTC time in epoch milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)


def to_datetime(ms: int) -> datetime:
    """Convert epoch milliseconds to a local, timezone-aware datetime."""
    return datetime.fromtimestamp(ms / 1000, UTC).astimezone()


def local_date(ms: int) -> date:
    """Return the local calendar date of an epoch-millisecond timestamp."""
    return to_datetime(ms).date()
