"""Buffer: document, cursor state, registers, options and undo in one place."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from replace_with_register.runtime import telemetry

from .document import BufferDocument
from .errors import BufferNotModifiableError
from .options import BufferOptions
from .registers import UNNAMED, RegisterBank
from .state import BufferState, Cursor, Selection
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor


@dataclass(frozen=True, slots=True)
class BufferView:
    version: int
    text: str
    cursor: Cursor
    selection: Optional[Selection]


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        registers: Optional[RegisterBank] = None,
        undo: Optional[UndoTimeline] = None,
        options: Optional[BufferOptions] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.registers = registers or RegisterBank()
        self.undo = undo or UndoTimeline()
        self.options = options or BufferOptions()

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", options: Optional[BufferOptions] = None
    ) -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text), options=options)

    @property
    def lines(self) -> Sequence[str]:
        return self.document.lines

    def snapshot(self) -> BufferView:
        return BufferView(
            self.document.version,
            self.document.text(),
            self.state.cursor,
            self.state.selection,
        )

    def probe_edit(self) -> None:
        """Raise :class:`BufferNotModifiableError` if an edit would be refused."""

        with telemetry.span("buffer::probe", component=True, metadata={"buffer": self.name}):
            self._require_modifiable()

    def replace_range(self, start: Cursor, end: Cursor, text: str, *, label: str) -> BufferView:
        """Replace ``[start, end)`` with ``text``; the cursor ends after it."""

        start, end = sorted(
            (ensure_cursor(self.document, start), ensure_cursor(self.document, end))
        )
        with self._edit(label, cursor_before=start):
            begin = self.document.offset_of(start)
            stop = self.document.offset_of(end)
            old = self.document.text()
            self.document = self.document.with_text(old[:begin] + text + old[stop:])
            self.state.cursor = self.document.cursor_at(begin + len(text))
        return self.snapshot()

    def replace_lines(
        self, start_row: int, end_row: int, new_lines: Sequence[str], *, label: str
    ) -> BufferView:
        """Replace rows ``[start_row, end_row)`` with ``new_lines``.

        With ``autoindent`` set, non-blank inserted lines take the indentation
        of the first replaced line. The cursor lands on the first non-blank
        of the first new line.
        """

        if not 0 <= start_row < end_row <= self.document.line_count:
            raise IndexError(f"Invalid line range [{start_row}, {end_row})")
        lines = list(new_lines)
        if self.options.autoindent:
            indent = _indent_of(self.document.get_line(start_row))
            lines = [indent + line.lstrip() if line.strip() else line for line in lines]
        with self._edit(label, cursor_before=self.state.cursor):
            self.document = self.document.update_lines(start_row, end_row, lines)
            row = min(start_row, self.document.line_count - 1)
            self.state.cursor = (row, len(_indent_of(self.document.get_line(row))))
        return self.snapshot()

    def insert_text(self, text: str, *, cursor: Optional[Cursor] = None) -> BufferView:
        position = cursor or self.state.cursor
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(
        self,
        start: Cursor,
        end: Cursor,
        *,
        register: str = UNNAMED,
        register_type: str = "character",
    ) -> BufferView:
        """Delete ``[start, end)``, saving the text unless ``register`` is ``_``."""

        text = self.get_text_range(start, end)
        self._require_modifiable()
        self.registers.yank_to(register, text, register_type=register_type)
        return self.replace_range(start, end, "", label="delete_range")

    def get_text_range(self, start: Cursor, end: Cursor) -> str:
        start, end = sorted(
            (ensure_cursor(self.document, start), ensure_cursor(self.document, end))
        )
        return self.document.text()[self.document.offset_of(start) : self.document.offset_of(end)]

    @contextmanager
    def undo_group(self, label: str) -> Iterator[None]:
        """Collapse every edit made inside the block into one undo step."""

        mark = self.undo.mark()
        try:
            yield
        finally:
            self.undo.collapse(mark, label)

    def undo_last(self) -> Optional[UndoEntry]:
        entry = self.undo.undo()
        if entry is not None:
            self.document = self.document.with_text(entry.before_text)
            self.state.cursor = entry.cursor_before
        return entry

    def redo_last(self) -> Optional[UndoEntry]:
        entry = self.undo.redo()
        if entry is not None:
            self.document = self.document.with_text(entry.after_text)
            self.state.cursor = entry.cursor_after
        return entry

    @contextmanager
    def _edit(self, label: str, *, cursor_before: Cursor) -> Iterator[None]:
        with telemetry.span(f"buffer::{label}", component=True, metadata={"buffer": self.name}):
            self._require_modifiable()
            before = self.document.text()
            yield
            self.state.last_change_tick = self.document.version
            self.undo.push(
                UndoEntry(label, before, self.document.text(), cursor_before, self.state.cursor)
            )

    def _require_modifiable(self) -> None:
        if not self.options.modifiable:
            raise BufferNotModifiableError(self.name, reason="'modifiable' is off")
        if self.options.readonly:
            raise BufferNotModifiableError(self.name, reason="'readonly' is set")


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]
