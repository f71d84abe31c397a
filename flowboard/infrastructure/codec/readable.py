"""Human-readable (Markdown) board representation.

The Markdown export lists the board for people to read and embeds the full
structured document in a fenced ``json`` block, so the same file can be
imported again without loss. Files without that block are handed to the
legacy parser.
"""

import json
import re

from flowboard.domain.board import ExportDocument, TaskStatus
from flowboard.domain.shared import DecodeError, Err, Result, Warn, to_datetime

from .legacy import LEGACY_WARNING, LegacyMarkdownParser, build_legacy_document
from .normalize import normalize_document
from .structured import encode_json

FORMAT_NAME = "markdown"

_FENCE_OPEN_RE = re.compile(r"```json[ \t]*\r?\n?", re.IGNORECASE)
_FENCE = "```"


def encode_markdown(document: ExportDocument) -> str:
    """Render an export document as Markdown with an embedded data block."""
    exported = to_datetime(document.exported_at).strftime("%Y-%m-%d %H:%M")
    columns = document.ordered_columns()

    lines = [
        "# FlowBoard Markdown Export",
        "",
        f"- Exported at: {exported}",
        f"- Format version: {document.version}",
        f"- Total tasks: {len(document.tasks)}",
        f"- Columns: {len(document.column_order)}",
        "",
        "## Board Structure",
    ]
    for index, column in enumerate(columns, start=1):
        lines.append(f"{index}. {column.title} ({column.id.value}) - tasks: {len(column.task_ids)}")

    lines.extend(["", "## Tasks by Column"])
    for column in columns:
        lines.extend(["", f"### {column.title} ({column.id.value})"])
        if not column.task_ids:
            lines.append("- (empty)")
            continue
        for task_id in column.task_ids:
            task = document.tasks.get(task_id)
            if task is None:
                continue
            mark = "[x]" if task.status == TaskStatus.DONE else "[ ]"
            tags = f" | tags: {', '.join(task.tags)}" if task.tags else ""
            lines.append(
                f"- {mark} {task.title} (priority: {task.priority.value}, "
                f"category: {task.category.value}{tags})"
            )
            if task.description:
                lines.append(f"  Description: {task.description.replace(chr(10), ' ')}")

    lines.extend(["", "## Data (JSON, importable)", "```json", encode_json(document), "```", ""])
    return "\n".join(lines)


def find_embedded_json(text: str) -> tuple[bool, object | None]:
    """Locate and parse the embedded data block.

    Tries each ```json fence from the top, taking everything up to the last
    closing fence in the document; the first candidate that parses wins.

    Returns:
        (found_fence, parsed_value). parsed_value is None when a fence
        exists but no candidate parses.
    """
    closing = text.rfind(_FENCE)
    found = False
    for match in _FENCE_OPEN_RE.finditer(text):
        found = True
        if closing <= match.end():
            continue
        candidate = text[match.end():closing].strip()
        try:
            return True, json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return found, None


def decode_markdown(text: str, now: int) -> Result[ExportDocument, DecodeError]:
    """Parse a Markdown export.

    Args:
        text: The Markdown document.
        now: Time used for backfilled fields, in epoch milliseconds.

    Returns:
        Ok(document) when an embedded data block was found, Warn(document,
        message) when the legacy layout had to be parsed, or
        Err(DecodeError) when neither yields a board.
    """
    found, raw = find_embedded_json(text)
    if found:
        if raw is None:
            return Err(DecodeError("Embedded JSON block is not valid JSON", FORMAT_NAME))
        return normalize_document(raw, now, FORMAT_NAME)

    parser = LegacyMarkdownParser(now=now)
    tasks = parser.parse(text)
    if parser.headers_seen == 0:
        return Err(DecodeError("No embedded data block and no task entries found", FORMAT_NAME))
    return Warn(build_legacy_document(tasks, now), LEGACY_WARNING)
