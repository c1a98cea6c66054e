"""Repeat-last-change services driven by ``.``."""

from .base import (
    NULL_REPEAT,
    NullRepeatService,
    RepeatService,
    RepeatToken,
    Repeater,
    ReplayHandler,
    VisualRepeatService,
)
from .change import ChangeRepeater
from .visual import VisualRepeater

__all__ = [
    "ChangeRepeater",
    "NULL_REPEAT",
    "NullRepeatService",
    "RepeatService",
    "RepeatToken",
    "Repeater",
    "ReplayHandler",
    "VisualRepeatService",
    "VisualRepeater",
]
