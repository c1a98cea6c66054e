"""Mode manager, operator pipeline, and dispatch logic."""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .keymap_mode import KeymapMode
from .motions import LINE_MOTION, MotionRange, UnknownMotionError, resolve_motion
from .normal_mode import NormalMode
from .operator_pipeline import (
    ExecutionPlan,
    OperatorDraft,
    OperatorPipeline,
    PendingOperator,
    begin_operator,
)
from .visual_mode import VisualMode

__all__ = [
    "ExecutionPlan",
    "KeyInput",
    "KeymapMode",
    "LINE_MOTION",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "MotionRange",
    "NormalMode",
    "OperatorDraft",
    "OperatorPipeline",
    "PendingOperator",
    "UnknownMotionError",
    "VisualMode",
    "begin_operator",
    "resolve_motion",
]
