"""Infrastructure layer for FlowBoard.

I/O behind clean interfaces returning Result values.

Exports:
    Storage:
        - JsonStorage: Low-level JSON file I/O
        - BoardRepository: Board snapshot persistence

    Codec:
        - ExportFormat: Supported document formats
        - export_board / decode_board: Import and export entry points
"""

from flowboard.infrastructure.codec import ExportFormat, decode_board, detect_format, export_board
from flowboard.infrastructure.storage import STORAGE_KEY, BoardRepository, JsonStorage

__all__ = [
    # Storage
    "JsonStorage",
    "BoardRepository",
    "STORAGE_KEY",
    # Codec
    "ExportFormat",
    "detect_format",
    "export_board",
    "decode_board",
]
