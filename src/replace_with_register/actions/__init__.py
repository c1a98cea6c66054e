"""Action handlers bound by the default keymaps."""

from .core import (
    enter_visual_block_mode,
    enter_visual_line_mode,
    enter_visual_mode,
    exit_to_normal_mode,
)
from .repeat import repeat_last_change, repeat_visual_change
from .visual import extend_down, extend_left, extend_right, extend_up, swap_anchor

__all__ = [
    "enter_visual_mode",
    "enter_visual_line_mode",
    "enter_visual_block_mode",
    "exit_to_normal_mode",
    "extend_left",
    "extend_right",
    "extend_up",
    "extend_down",
    "swap_anchor",
    "repeat_last_change",
    "repeat_visual_change",
]
