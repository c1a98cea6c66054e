"""Versioned list-of-lines text storage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

from .state import Cursor


@dataclass(frozen=True, slots=True)
class BufferDocument:
    """Immutable lines; every edit returns a new document with ``version + 1``."""

    lines: Tuple[str, ...] = field(default=("",))
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "BufferDocument":
        return cls(tuple(text.split("\n")), version)

    def snapshot(self) -> Sequence[str]:
        return self.lines

    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def get_line(self, index: int) -> str:
        return self.lines[index]

    def with_text(self, text: str) -> "BufferDocument":
        return BufferDocument.from_text(text, version=self.version + 1)

    def update_lines(self, start: int, end: int, new_lines: Iterable[str]) -> "BufferDocument":
        """Replace rows ``[start:end]``; a document always keeps one line."""

        lines = [*self.lines[:start], *new_lines, *self.lines[end:]]
        return BufferDocument(tuple(lines) or ("",), self.version + 1)

    def offset_of(self, cursor: Cursor) -> int:
        row, col = cursor
        return sum(len(line) + 1 for line in self.lines[:row]) + col

    def cursor_at(self, offset: int) -> Cursor:
        for row, line in enumerate(self.lines):
            if offset <= len(line):
                return (row, offset)
            offset -= len(line) + 1
        return (len(self.lines) - 1, len(self.lines[-1]))
