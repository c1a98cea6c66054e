"""``.`` actions delegating to the installed repeat services."""

from __future__ import annotations

from replace_with_register.keymaps import ResolutionMatch
from replace_with_register.modes.base_mode import ModeContext, ModeResult
from replace_with_register.repeat import NULL_REPEAT


def repeat_last_change(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return context.service("repeat", NULL_REPEAT).replay(context)


def repeat_visual_change(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    result = context.service("visual_repeat", NULL_REPEAT).replay(context)
    if result.switch_to is None:
        result.switch_to = "normal"
    return result


__all__ = ["repeat_last_change", "repeat_visual_change"]
