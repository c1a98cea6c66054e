"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .errors import BufferValidationError
from .state import Cursor


def ensure_cursor(document: BufferDocument, cursor: Cursor) -> Cursor:
    row, col = cursor
    if row < 0 or row >= document.line_count:
        raise BufferValidationError("Row out of range", cursor=cursor)
    line = document.get_line(row)
    if col < 0 or col > len(line):
        raise BufferValidationError("Column out of range", cursor=cursor)
    return cursor


def clamp_cursor(document: BufferDocument, row: int, col: int) -> Cursor:
    max_row = max(0, document.line_count - 1)
    row = max(0, min(row, max_row))
    line = document.get_line(row)
    col = max(0, min(col, len(line)))
    return (row, col)
