"""Mode-switching actions."""

from __future__ import annotations

from typing import Callable

from replace_with_register.keymaps import ResolutionMatch
from replace_with_register.modes.base_mode import ModeContext, ModeResult


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    return ModeResult(consumed=True, switch_to="normal", message="exit_visual")


Action = Callable[[ModeContext, ResolutionMatch], ModeResult]


def _enter_visual(kind: str) -> Action:
    def action(context: ModeContext, match: ResolutionMatch) -> ModeResult:
        # VisualMode.on_enter picks the kind up when the switch happens.
        context.extras["visual_kind"] = kind
        return ModeResult(consumed=True, switch_to="visual", message=f"enter_visual_{kind}")

    action.__name__ = f"enter_visual_{kind}"
    return action


enter_visual_mode = _enter_visual("char")
enter_visual_line_mode = _enter_visual("line")
enter_visual_block_mode = _enter_visual("block")


__all__ = [
    "enter_visual_block_mode",
    "enter_visual_line_mode",
    "enter_visual_mode",
    "exit_to_normal_mode",
]
