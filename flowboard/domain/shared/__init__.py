"""Shared domain utilities for FlowBoard.

This package provides common building blocks used across the board domain:

- Result type for explicit error handling (Ok / Warn / Err)
- Error values carried inside Err
- Millisecond clock helpers

Example usage:
    >>> from flowboard.domain.shared import Ok, Err, Result, is_ok
    >>>
    >>> def find_column(column_id: str) -> Result[str, str]:
    ...     if column_id not in ("todo", "in-progress", "done"):
    ...         return Err(f"Unknown column: {column_id}")
    ...     return Ok(column_id)
"""

from flowboard.domain.shared.clock import ONE_DAY_MS, Clock, local_date, now_ms, to_datetime
from flowboard.domain.shared.errors import DecodeError
from flowboard.domain.shared.result import (
    Err,
    Ok,
    Result,
    Warn,
    is_err,
    is_ok,
    map_result,
    unwrap_or,
    with_warning,
)

__all__ = [
    # Result type
    "Ok",
    "Warn",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "map_result",
    "unwrap_or",
    "with_warning",
    # Errors
    "DecodeError",
    # Clock
    "Clock",
    "ONE_DAY_MS",
    "now_ms",
    "to_datetime",
    "local_date",
]
