# tests/helpers.py

from flowboard.domain.board import BoardSnapshot, ColumnId

# 2023-11-14T22:13:20Z
FIXED_NOW = 1_700_000_000_000


class FakeClock:
    """Deterministic millisecond clock that only moves when told to."""

    def __init__(self, start: int = FIXED_NOW) -> None:
        self.value = start

    def __call__(self) -> int:
        return self.value

    def advance(self, ms: int) -> int:
        self.value += ms
        return self.value


def ids(snapshot: BoardSnapshot, column_id: ColumnId) -> list[str]:
    return list(snapshot.columns[column_id].task_ids)
