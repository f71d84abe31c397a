"""Structured (JSON) board representation.

The structured form is the export document serialized field for field, used
for full-fidelity backups and for the on-disk store.
"""

import json

from flowboard.domain.board import ExportDocument
from flowboard.domain.shared import DecodeError, Err, Result

from .normalize import normalize_document

FORMAT_NAME = "json"


def encode_json(document: ExportDocument, indent: int = 2) -> str:
    """Serialize an export document to JSON text (camelCase keys)."""
    return document.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def decode_json(text: str, now: int, fmt: str = FORMAT_NAME) -> Result[ExportDocument, DecodeError]:
    """Parse JSON text into a normalized export document.

    Args:
        text: The JSON document.
        now: Time used for backfilled fields, in epoch milliseconds.
        fmt: Format name reported in errors.

    Returns:
        Ok(ExportDocument), or Err(DecodeError) if the text is not JSON or
        does not describe a board.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(DecodeError(f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}", fmt))
    return normalize_document(raw, now, fmt)
