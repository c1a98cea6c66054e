"""Errors raised by the buffer layer."""

from __future__ import annotations

from .state import Cursor


class BufferValidationError(RuntimeError):
    """Raised when adapters or buffers provide out-of-bounds cursor info."""

    def __init__(self, message: str, *, cursor: Cursor | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


class BufferNotModifiableError(RuntimeError):
    """Raised when an edit is attempted on a read-only or unmodifiable buffer."""

    def __init__(self, buffer_name: str, *, reason: str) -> None:
        super().__init__(f"Cannot modify buffer '{buffer_name}': {reason}")
        self.buffer_name = buffer_name
        self.reason = reason


__all__ = ["BufferNotModifiableError", "BufferValidationError"]
