"""Import/export codec for FlowBoard.

Serializes board snapshots to JSON (full fidelity) or Markdown (readable,
with the JSON embedded) and parses them back, including Markdown files from
before the data block existed.
"""

from flowboard.infrastructure.codec.formats import (
    ExportFormat,
    decode_board,
    detect_format,
    export_board,
)
from flowboard.infrastructure.codec.legacy import (
    LEGACY_WARNING,
    LegacyMarkdownParser,
    LineKind,
    ParserState,
    build_legacy_document,
    classify_line,
)
from flowboard.infrastructure.codec.normalize import normalize_document, reconcile_columns
from flowboard.infrastructure.codec.readable import decode_markdown, encode_markdown
from flowboard.infrastructure.codec.structured import decode_json, encode_json

__all__ = [
    # Formats
    "ExportFormat",
    "detect_format",
    "export_board",
    "decode_board",
    # Structured
    "encode_json",
    "decode_json",
    # Readable
    "encode_markdown",
    "decode_markdown",
    # Legacy
    "LEGACY_WARNING",
    "LegacyMarkdownParser",
    "LineKind",
    "ParserState",
    "classify_line",
    "build_legacy_document",
    # Normalization
    "normalize_document",
    "reconcile_columns",
]
