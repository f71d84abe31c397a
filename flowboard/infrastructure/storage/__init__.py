"""Storage infrastructure for FlowBoard.

Provides the persistence layer for board snapshots, using Result types for
explicit error handling.
"""

from flowboard.infrastructure.storage.json_storage import JsonStorage
from flowboard.infrastructure.storage.repositories import STORAGE_KEY, BoardRepository

__all__ = [
    "JsonStorage",
    "BoardRepository",
    "STORAGE_KEY",
]
