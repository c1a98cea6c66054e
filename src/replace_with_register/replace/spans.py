"""Replacement targets and their resolution to concrete buffer bounds.

A span is one of three shapes:

* ``VisualSpan`` -- the live visual selection, honouring ``'selection'``.
* ``OperatorSpan`` -- the marks left by an operator motion; both ends are
  always inclusive, whatever ``'selection'`` says.
* ``LineSpan`` -- ``count`` whole lines starting at a row.

``resolve_bounds`` turns any of them into ``SpanBounds``. For ``char`` and
``line`` orientations ``end`` is exclusive (``line`` bounds always sit at
column 0, so ``range(start[0], end[0])`` are the rows). For ``block`` the
end is the inclusive bottom-right corner.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from replace_with_register.buffer import Buffer, BufferState
from replace_with_register.buffer.state import Cursor
from replace_with_register.modes.motions import MotionRange

from .settings import scoped_option

ORIENTATIONS = ("char", "line", "block")


@dataclass(frozen=True, slots=True)
class SpanShape:
    """Size of a replaced area, used to reproduce it at another cursor."""

    orientation: str
    lines: int
    width: int = 0

    def place(self, buffer: Buffer, cursor: Optional[Cursor] = None) -> "OperatorSpan":
        """Return a span of this shape anchored at ``cursor``."""

        row, col = cursor if cursor is not None else buffer.state.cursor
        last_row = min(row + max(self.lines, 1) - 1, buffer.document.line_count - 1)
        width = max(self.width, 1)
        if self.orientation == "line":
            return OperatorSpan((row, 0), (last_row, 0), kind="line")
        if self.orientation == "block":
            return OperatorSpan((row, col), (last_row, col + width - 1), kind="block")
        if last_row == row:
            return OperatorSpan((row, col), (row, col + width - 1))
        return OperatorSpan((row, col), (last_row, width - 1))


@dataclass(frozen=True, slots=True)
class SpanBounds:
    start: Cursor
    end: Cursor
    orientation: str

    @property
    def whole_lines(self) -> bool:
        return self.orientation == "line"

    @property
    def rows(self) -> range:
        if self.orientation == "line":
            return range(self.start[0], self.end[0])
        return range(self.start[0], self.end[0] + 1)

    def shape(self) -> SpanShape:
        if self.orientation == "line":
            return SpanShape("line", lines=len(self.rows))
        if self.orientation == "block":
            width = self.end[1] - self.start[1] + 1
            return SpanShape("block", lines=len(self.rows), width=width)
        lines = self.end[0] - self.start[0] + 1
        if lines == 1:
            return SpanShape("char", lines=1, width=self.end[1] - self.start[1])
        return SpanShape("char", lines=lines, width=self.end[1])


@dataclass(frozen=True, slots=True)
class VisualSpan:
    start: Cursor
    end: Cursor
    kind: str = "char"

    @classmethod
    def from_state(cls, state: BufferState) -> Optional["VisualSpan"]:
        if state.selection is None:
            return None
        anchor, cursor = state.selection
        return cls(anchor, cursor, kind=state.selection_kind)

    def resolve_bounds(self, buffer: Buffer) -> SpanBounds:
        return _resolve(buffer, self.start, self.end, self.kind)


@dataclass(frozen=True, slots=True)
class OperatorSpan:
    start: Cursor
    end: Cursor
    kind: str = "char"

    @classmethod
    def from_motion(cls, motion: MotionRange) -> "OperatorSpan":
        return cls(motion.start, motion.end, kind=motion.kind)

    def resolve_bounds(self, buffer: Buffer) -> SpanBounds:
        with scoped_option(buffer.options, "selection", "inclusive"):
            return _resolve(buffer, self.start, self.end, self.kind)


@dataclass(frozen=True, slots=True)
class LineSpan:
    row: int
    count: int = 1

    def resolve_bounds(self, buffer: Buffer) -> SpanBounds:
        line_count = buffer.document.line_count
        row = min(max(self.row, 0), line_count - 1)
        end_row = min(row + max(self.count, 1), line_count)
        return SpanBounds((row, 0), (end_row, 0), "line")


Span = Union[VisualSpan, OperatorSpan, LineSpan]


def _resolve(buffer: Buffer, start: Cursor, end: Cursor, kind: str) -> SpanBounds:
    if kind not in ORIENTATIONS:
        raise ValueError(f"Unknown span orientation '{kind}'")
    document = buffer.document
    last_row = document.line_count - 1
    start, end = sorted((start, end))
    inclusive = buffer.options.selection == "inclusive"

    if kind == "line":
        top = min(start[0], last_row)
        bottom = min(end[0], last_row)
        return SpanBounds((top, 0), (bottom + 1, 0), "line")

    if kind == "block":
        top, bottom = start[0], min(end[0], last_row)
        left, right = sorted((start[1], end[1]))
        if not inclusive and right > left:
            right -= 1
        return SpanBounds((top, left), (bottom, right), "block")

    end_row = min(end[0], last_row)
    end_line = document.get_line(end_row)
    end_col = end[1] + 1 if inclusive else end[1]
    start_col = min(start[1], len(document.get_line(start[0])))
    return SpanBounds(
        (start[0], start_col), (end_row, min(end_col, len(end_line))), "char"
    )


__all__ = [
    "LineSpan",
    "OperatorSpan",
    "Span",
    "SpanBounds",
    "SpanShape",
    "VisualSpan",
]
