"""Motions and text objects resolved for operator-pending commands.

Every motion resolves to a ``MotionRange`` whose ``end`` is the last
character covered (Vim's ``']`` mark), so exclusive motions such as ``w``
are already narrowed by one character here. Motions that cannot move return
``None`` and the pending operator is cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from replace_with_register.buffer import Buffer
from replace_with_register.buffer.state import Cursor

LINE_MOTION = "line"
TEXT_OBJECT_PREFIXES = ("i", "a")
MOTIONS = frozenset(
    {"h", "l", "w", "e", "b", "0", "^", "$", "j", "k", "iw", "aw", LINE_MOTION}
)


class UnknownMotionError(KeyError):
    """Raised when an operator-pending key sequence names no motion."""

    def __init__(self, motion_id: str) -> None:
        super().__init__(motion_id)
        self.motion_id = motion_id


@dataclass(frozen=True, slots=True)
class MotionRange:
    start: Cursor
    end: Cursor
    linewise: bool = False

    @property
    def kind(self) -> str:
        return "line" if self.linewise else "char"


def resolve_motion(
    buffer: Buffer, motion_id: str, count: Optional[int] = None
) -> Optional[MotionRange]:
    if motion_id not in MOTIONS:
        raise UnknownMotionError(motion_id)
    lines = buffer.lines
    row, col = buffer.state.cursor
    steps = max(1, count or 1)
    last_row = len(lines) - 1

    if motion_id == LINE_MOTION:
        end_row = min(row + steps - 1, last_row)
        return MotionRange((row, 0), (end_row, 0), linewise=True)
    if motion_id == "j":
        if row + steps > last_row:
            return None
        return MotionRange((row, 0), (row + steps, 0), linewise=True)
    if motion_id == "k":
        if row - steps < 0:
            return None
        return MotionRange((row - steps, 0), (row, 0), linewise=True)
    if motion_id in {"iw", "aw"}:
        return _word_object(lines[row], row, col, steps, around=motion_id == "aw")

    line = lines[row]
    if motion_id == "h":
        return _exclusive((row, max(0, col - steps)), (row, col), lines)
    if motion_id == "l":
        return _exclusive((row, col), (row, min(col + steps, len(line))), lines)
    if motion_id == "0":
        return _exclusive((row, 0), (row, col), lines)
    if motion_id == "^":
        first = len(line) - len(line.lstrip())
        if first < col:
            return _exclusive((row, first), (row, col), lines)
        return _exclusive((row, col), (row, first), lines)
    if motion_id == "$":
        end_row = min(row + steps - 1, last_row)
        end_line = lines[end_row]
        if not end_line and end_row == row:
            return None
        return MotionRange((row, col), (end_row, max(len(end_line) - 1, 0)))
    if motion_id == "e":
        target = (row, col)
        for _ in range(steps):
            target = _word_end(lines, *target)
        return MotionRange((row, col), target)
    if motion_id == "b":
        target = (row, col)
        for _ in range(steps):
            target = _word_start_backward(lines, *target)
        return _exclusive(target, (row, col), lines)

    # "w": when the last word moved over ends its line, the operated text
    # stops at that line's end instead of the next line's first word.
    previous = target = (row, col)
    for _ in range(steps):
        previous, target = target, _next_word_start(lines, *target)
    if target[0] > previous[0]:
        stop_row = target[0] - 1
        stop_line = lines[stop_row]
        if stop_line:
            return MotionRange((row, col), (stop_row, len(stop_line) - 1))
    return _exclusive((row, col), target, lines)


def _exclusive(
    start: Cursor, target: Cursor, lines: Sequence[str]
) -> Optional[MotionRange]:
    if target <= start:
        return None
    row, col = target
    if col > 0:
        return MotionRange(start, (row, col - 1))
    # Target at column 0 of a later line: the range ends on the previous line.
    prev = lines[row - 1]
    return MotionRange(start, (row - 1, max(len(prev) - 1, 0)))


def _char_class(ch: str) -> int:
    if ch.isspace():
        return 0
    if ch.isalnum() or ch == "_":
        return 2
    return 1


def _next_word_start(lines: Sequence[str], row: int, col: int) -> Cursor:
    line = lines[row]
    if col < len(line) and not line[col].isspace():
        current = _char_class(line[col])
        while col < len(line) and _char_class(line[col]) == current:
            col += 1
    while True:
        while col < len(line) and line[col].isspace():
            col += 1
        if col < len(line):
            return (row, col)
        if row >= len(lines) - 1:
            return (row, len(line))
        row, col = row + 1, 0
        line = lines[row]
        if not line:
            return (row, 0)


def _word_end(lines: Sequence[str], row: int, col: int) -> Cursor:
    line = lines[row]
    col += 1
    while True:
        while col < len(line) and line[col].isspace():
            col += 1
        if col < len(line):
            break
        if row >= len(lines) - 1:
            return (row, max(len(line) - 1, 0))
        row, col = row + 1, 0
        line = lines[row]
    current = _char_class(line[col])
    while col + 1 < len(line) and _char_class(line[col + 1]) == current:
        col += 1
    return (row, col)


def _word_start_backward(lines: Sequence[str], row: int, col: int) -> Cursor:
    line = lines[row]
    col = min(col, len(line)) - 1
    while True:
        while col >= 0 and line[col].isspace():
            col -= 1
        if col >= 0:
            break
        if row == 0:
            return (0, 0)
        row -= 1
        line = lines[row]
        if not line:
            return (row, 0)
        col = len(line) - 1
    current = _char_class(line[col])
    while col > 0 and _char_class(line[col - 1]) == current:
        col -= 1
    return (row, col)


def _word_object(
    line: str, row: int, col: int, count: int, *, around: bool
) -> Optional[MotionRange]:
    """``iw`` selects ``count`` runs of one character class; ``aw`` adds
    the whitespace following each word (or preceding it at end of line)."""

    if not line:
        return None
    col = min(col, len(line) - 1)
    start = col
    current = _char_class(line[col])
    while start > 0 and _char_class(line[start - 1]) == current:
        start -= 1

    end = col
    for index in range(count):
        if index:
            if end + 1 >= len(line):
                break
            end += 1
            current = _char_class(line[end])
        while end + 1 < len(line) and _char_class(line[end + 1]) == current:
            end += 1
        if around and current != 0:
            trailing = end
            while trailing + 1 < len(line) and line[trailing + 1].isspace():
                trailing += 1
            if trailing == end:
                while start > 0 and line[start - 1].isspace():
                    start -= 1
            end = trailing
    return MotionRange((row, start), (row, end))


__all__ = [
    "LINE_MOTION",
    "MOTIONS",
    "MotionRange",
    "TEXT_OBJECT_PREFIXES",
    "UnknownMotionError",
    "resolve_motion",
]
