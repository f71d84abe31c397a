"""Error values carried inside ``Err`` results.

These are plain immutable records, not exceptions. Nothing in the engine
raises them; they describe why an operation at the codec or storage boundary
could not produce a value.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DecodeError:
    """An import payload could not be parsed as any supported format.

    Attributes:
        message: What went wrong, suitable for showing to the user.
        format: The format that was attempted ("json", "markdown"), or
            "unknown" when the format could not be determined.
    """

    message: str
    format: str = "unknown"

    def __str__(self) -> str:
        return f"{self.message} ({self.format})"
