"""Result type for explicit error handling in board operations.

A Result is either a success (``Ok``), a success that carries a non-fatal
warning (``Warn``), or a failure (``Err``). Expected failures such as an
unparseable import file or a failed disk write are returned as values so the
caller can inspect every outcome uniformly instead of catching exceptions.

Example usage:
    >>> def parse_priority(raw: str) -> Result[str, str]:
    ...     if raw not in ("high", "medium", "low"):
    ...         return Err(f"Unknown priority: {raw}")
    ...     return Ok(raw)
    ...
    >>> result = parse_priority("high")
    >>> if is_ok(result):
    ...     print(result.value)
    high
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Warn(Generic[T]):
    """Represents a successful result that the caller should be warned about.

    The value is fully usable; the message explains what was degraded
    (e.g. board structure only partially recovered, or a change that could
    not be written to disk).

    Attributes:
        value: The success value of type T.
        message: Human-readable warning text.
    """

    value: T
    message: str


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Warn[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Warn[T] | Err[E]) -> bool:
    """Check if a result carries a usable value (Ok or Warn)."""
    return isinstance(result, (Ok, Warn))


def is_err(result: Ok[T] | Warn[T] | Err[E]) -> bool:
    """Check if a result is an error."""
    return isinstance(result, Err)


def map_result(
    result: Ok[T] | Warn[T] | Err[E], fn: Callable[[T], U]
) -> Ok[U] | Warn[U] | Err[E]:
    """Apply a function to the value inside an Ok or Warn result.

    Warnings are preserved; errors are returned unchanged.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    if isinstance(result, Warn):
        return Warn(fn(result.value), result.message)
    return result


def with_warning(result: Ok[T] | Warn[T] | Err[E], message: str | None) -> Ok[T] | Warn[T] | Err[E]:
    """Attach a warning to a successful result.

    Args:
        result: The result to annotate.
        message: Warning text, or None to leave the result as-is.

    Returns:
        Warn with the message (joined to any existing warning) when the
        result is successful, otherwise the original result.
    """
    if not message or isinstance(result, Err):
        return result
    if isinstance(result, Warn):
        return Warn(result.value, f"{result.message}; {message}")
    return Warn(result.value, message)


def unwrap_or(result: Ok[T] | Warn[T] | Err[E], default: T) -> T:
    """Extract the value from a Result, using a default if it's an error."""
    if isinstance(result, (Ok, Warn)):
        return result.value
    return default
