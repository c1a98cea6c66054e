"""Text buffers with Vim registers, options and undo history."""

from .buffer import Buffer, BufferView
from .document import BufferDocument
from .errors import BufferNotModifiableError, BufferValidationError
from .options import SELECTION_MODES, BufferOptions
from .registers import BLACK_HOLE, UNNAMED, RegisterBank, RegisterValue
from .state import BufferState, Cursor, Selection
from .undo import UndoEntry, UndoTimeline
from .validation import clamp_cursor, ensure_cursor

__all__ = [
    "BLACK_HOLE",
    "SELECTION_MODES",
    "UNNAMED",
    "Buffer",
    "BufferDocument",
    "BufferNotModifiableError",
    "BufferOptions",
    "BufferState",
    "BufferValidationError",
    "BufferView",
    "Cursor",
    "RegisterBank",
    "RegisterValue",
    "Selection",
    "UndoEntry",
    "UndoTimeline",
    "clamp_cursor",
    "ensure_cursor",
]
