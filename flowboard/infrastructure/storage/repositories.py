"""Board persistence.

The whole board lives in one JSON document under a fixed storage key. Data
read back from disk goes through the same normalization as imports, so a
stale or hand-edited store still loads into a consistent board.
"""

import logging
from pathlib import Path

from flowboard.domain.board import BoardSnapshot, ExportDocument
from flowboard.domain.shared import Err, Ok, Result
from flowboard.infrastructure.codec import normalize_document
from flowboard.infrastructure.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "flowboard-storage"


class BoardRepository:
    """Repository for the persisted board snapshot.

    Wraps the store file with Result-based error handling.
    """

    def __init__(self, data_dir: Path, storage: JsonStorage | None = None) -> None:
        """Initialize the repository.

        Args:
            data_dir: Directory holding the store file.
            storage: JsonStorage instance to use. Creates new one if not provided.
        """
        self.data_dir = Path(data_dir)
        self._storage = storage or JsonStorage()

    @property
    def path(self) -> Path:
        return self.data_dir / f"{STORAGE_KEY}.json"

    def exists(self) -> bool:
        """Check if a board has been saved yet."""
        return self.path.exists()

    def load(self, now: int) -> Result[BoardSnapshot, str]:
        """Load the persisted board.

        Args:
            now: Time used for backfilled fields, in epoch milliseconds.

        Returns:
            Ok(BoardSnapshot); a fresh board when nothing was saved yet.
            Err(str) when the file exists but cannot be read or understood.
        """
        if not self.exists():
            logger.info(f"No board at {self.path}, starting empty")
            return Ok(BoardSnapshot())

        result = self._storage.load_json(self.path)
        if isinstance(result, Err):
            return result

        decoded = normalize_document(result.value, now, fmt="store")
        if isinstance(decoded, Err):
            return Err(f"Invalid board data in {self.path}: {decoded.error}")
        return Ok(decoded.value.snapshot())

    def save(self, snapshot: BoardSnapshot, now: int) -> Result[None, str]:
        """Persist a snapshot.

        Args:
            snapshot: Board state to write.
            now: Save time in epoch milliseconds.

        Returns:
            Ok(None) if successful, Err(str) with error message if failed.
        """
        document = ExportDocument.from_snapshot(snapshot, exported_at=now)
        data = document.model_dump(mode="json", by_alias=True, exclude_none=True)
        result = self._storage.save_json(self.path, data)
        if isinstance(result, Err):
            logger.error(f"Failed to save board: {result.error}")
        return result
