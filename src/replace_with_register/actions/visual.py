"""Visual-mode actions that move the selection head or swap its ends."""

from __future__ import annotations

from typing import MutableMapping, cast

from replace_with_register.buffer import clamp_cursor
from replace_with_register.buffer.state import Cursor
from replace_with_register.keymaps import ResolutionMatch
from replace_with_register.modes.base_mode import ModeContext, ModeResult


def _visual_state(context: ModeContext) -> MutableMapping[str, Cursor]:
    state = cast(
        MutableMapping[str, Cursor], context.extras.setdefault("visual_state", {})
    )
    if "anchor" not in state:
        state["anchor"] = context.buffer.state.cursor
    return state


def _apply_selection(context: ModeContext, target: Cursor) -> ModeResult:
    buffer = context.buffer
    target = clamp_cursor(buffer.document, *target)
    buffer.state.set_cursor(*target)
    anchor = _visual_state(context)["anchor"]
    buffer.state.set_selection(anchor, target)
    context.bus.emit(
        "visual.selection",
        {"anchor": anchor, "cursor": target, "kind": buffer.state.selection_kind},
    )
    return ModeResult(consumed=True, status="visual_select")


def _move(context: ModeContext, rows: int, cols: int) -> ModeResult:
    steps = max(1, context.count or 1)
    row, col = context.buffer.state.cursor
    if rows:
        return _apply_selection(context, _vertical(context, row + rows * steps, col))
    last_col = max(len(context.buffer.document.get_line(row)) - 1, 0)
    return _apply_selection(context, (row, max(0, min(col + cols * steps, last_col))))


def extend_left(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    return _move(context, 0, -1)


def extend_right(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    return _move(context, 0, 1)


def extend_up(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    return _move(context, -1, 0)


def extend_down(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    return _move(context, 1, 0)


def swap_anchor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    state = _visual_state(context)
    cursor = context.buffer.state.cursor
    anchor = state["anchor"]
    state["anchor"] = cursor
    context.buffer.state.set_cursor(*anchor)
    context.buffer.state.set_selection(cursor, anchor)
    context.bus.emit(
        "visual.selection",
        {"anchor": cursor, "cursor": anchor, "swap": True},
    )
    return ModeResult(consumed=True, status="visual_swap")


def _vertical(context: ModeContext, row: int, col: int) -> Cursor:
    # Columns stay on a character unless the target line is empty.
    row, _ = clamp_cursor(context.buffer.document, row, 0)
    line = context.buffer.document.get_line(row)
    return (row, min(col, max(len(line) - 1, 0)))


__all__ = [
    "extend_down",
    "extend_left",
    "extend_right",
    "extend_up",
    "swap_anchor",
]
