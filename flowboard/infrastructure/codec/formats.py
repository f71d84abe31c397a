"""Format selection for board import and export."""

import logging
from enum import Enum
from pathlib import PurePath

from flowboard.domain.board import BoardSnapshot, ExportDocument
from flowboard.domain.shared import DecodeError, Err, Result, Warn

from .readable import decode_markdown, encode_markdown
from .structured import decode_json, encode_json

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    """Supported document formats."""

    JSON = "json"
    MARKDOWN = "md"

    @property
    def extension(self) -> str:
        return f".{self.value}"


_EXTENSIONS: dict[str, ExportFormat] = {
    ".json": ExportFormat.JSON,
    ".md": ExportFormat.MARKDOWN,
    ".markdown": ExportFormat.MARKDOWN,
    ".txt": ExportFormat.MARKDOWN,
}


def detect_format(filename: str | None, text: str) -> ExportFormat | None:
    """Pick a format from the file extension, or sniff the content.

    Args:
        filename: Name of the file the text came from, if known.
        text: The document itself.

    Returns:
        The format, or None when a declared extension is not supported.
    """
    if filename:
        suffix = PurePath(filename).suffix.lower()
        if suffix:
            return _EXTENSIONS.get(suffix)
    if text.lstrip().startswith("{"):
        return ExportFormat.JSON
    return ExportFormat.MARKDOWN


def export_board(snapshot: BoardSnapshot, fmt: ExportFormat, now: int) -> str:
    """Render a snapshot as a complete export document.

    Args:
        snapshot: Board state to export.
        fmt: Target format.
        now: Export time in epoch milliseconds.

    Returns:
        The document text.
    """
    document = ExportDocument.from_snapshot(snapshot, exported_at=now)
    if fmt == ExportFormat.MARKDOWN:
        return encode_markdown(document)
    return encode_json(document)


def decode_board(
    text: str,
    now: int,
    fmt: ExportFormat | None = None,
    filename: str | None = None,
) -> Result[ExportDocument, DecodeError]:
    """Decode an import payload into a normalized export document.

    Never raises for bad input: unparseable payloads come back as
    Err(DecodeError), legacy Markdown as Warn(document, message).

    Args:
        text: Raw document text.
        now: Time used for backfilled fields, in epoch milliseconds.
        fmt: Declared format; detected from filename/content when None.
        filename: Source file name used for detection.
    """
    if fmt is None:
        fmt = detect_format(filename, text)
    if fmt is None:
        suffix = PurePath(filename).suffix if filename else ""
        return Err(DecodeError(f"Unsupported file format '{suffix}'", "unknown"))
    if not text.strip():
        return Err(DecodeError("File is empty", fmt.value))

    if fmt == ExportFormat.JSON:
        result = decode_json(text, now)
    else:
        result = decode_markdown(text, now)

    if isinstance(result, Err):
        logger.warning(f"Import failed: {result.error}")
    elif isinstance(result, Warn):
        logger.warning(result.message)
    else:
        logger.info(f"Decoded {len(result.value.tasks)} task(s) from {fmt.value} document")
    return result
