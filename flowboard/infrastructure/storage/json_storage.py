"""Atomic JSON file access for the board store.

Reads and writes whole documents and reports failures as Err values, so the
store can keep running (and warn) when the disk misbehaves.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from flowboard.domain.shared import Err, Ok, Result

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def _os_failure(action: str, path: Path, exc: OSError) -> str:
    if isinstance(exc, PermissionError):
        return f"Permission denied {action} {path}"
    return f"Error {action} {path}: {exc.strerror or exc}"


class JsonStorage:
    """Whole-document JSON reads and atomic writes.

    A write goes to ``<name>.tmp`` beside the target and is then renamed over
    it, so an interrupted save leaves the previous document intact.
    """

    def __init__(self, indent: int | None = 2, encoding: str = "utf-8") -> None:
        self.indent = indent
        self.encoding = encoding

    def load_json(self, path: Path) -> Result[Any, str]:
        if not path.is_file():
            return Err(f"File not found: {path}")
        try:
            with path.open(encoding=self.encoding) as fh:
                return Ok(json.load(fh))
        except json.JSONDecodeError as exc:
            logger.warning(f"Unreadable JSON in {path}: {exc}")
            return Err(f"Invalid JSON in {path}: line {exc.lineno}, column {exc.colno}")
        except UnicodeDecodeError as exc:
            return Err(f"{path} is not {self.encoding} text: {exc.reason}")
        except OSError as exc:
            return Err(_os_failure("reading", path, exc))

    def save_json(self, path: Path, data: dict[str, Any]) -> Result[None, str]:
        """Serialize ``data`` and swap it in for ``path``.

        Serialization happens before anything touches the disk; a value that
        cannot be encoded is reported without creating the temp file.
        """
        try:
            payload = json.dumps(data, indent=self.indent, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            return Err(f"Data not JSON serializable: {exc}")

        tmp_path = path.with_name(path.name + TMP_SUFFIX)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding=self.encoding) as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.error(f"Write to {path} failed: {exc}")
            if tmp_path.exists():
                tmp_path.unlink()
            return Err(_os_failure("writing", path, exc))
        return Ok(None)
