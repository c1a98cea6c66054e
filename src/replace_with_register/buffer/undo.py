"""Undo/redo history for buffer operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .state import Cursor


@dataclass(slots=True)
class UndoEntry:
    label: str
    before_text: str
    after_text: str
    cursor_before: Cursor
    cursor_after: Cursor


class UndoTimeline:
    """Linear undo/redo history.

    ``mark`` and ``collapse`` let a compound command (delete followed by
    insert) land as a single undo step.
    """

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1

    def __len__(self) -> int:
        return self._index + 1

    def push(self, entry: UndoEntry) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        self._entries.append(entry)
        self._index = len(self._entries) - 1

    def mark(self) -> int:
        return self._index

    def collapse(self, mark: int, label: str) -> Optional[UndoEntry]:
        """Merge every entry pushed after ``mark`` into one labelled entry."""

        first = mark + 1
        if self._index < first:
            return None
        group = self._entries[first : self._index + 1]
        merged = UndoEntry(
            label=label,
            before_text=group[0].before_text,
            after_text=group[-1].after_text,
            cursor_before=group[0].cursor_before,
            cursor_after=group[-1].cursor_after,
        )
        self._entries = self._entries[:first] + [merged]
        self._index = first
        return merged

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]
