"""Replace a span of text with a register, keeping the register intact."""

from .settings import scoped_option, scoped_options
from .spans import LineSpan, OperatorSpan, Span, SpanBounds, SpanShape, VisualSpan
from .capture import ReplaceRequest, capture_register
from .linewise import linewise_adjusted
from .engine import ReplacementEngine
from .bridge import REPLACE_LINE, REPLACE_OPERATOR, REPLACE_VISUAL, RepeatBridge
from .commands import (
    execute,
    install_repeat,
    replace_line,
    replace_operator,
    replace_visual,
    replay_line,
    replay_operator,
    replay_visual,
)

__all__ = [
    "LineSpan",
    "OperatorSpan",
    "REPLACE_LINE",
    "REPLACE_OPERATOR",
    "REPLACE_VISUAL",
    "RepeatBridge",
    "ReplaceRequest",
    "ReplacementEngine",
    "Span",
    "SpanBounds",
    "SpanShape",
    "VisualSpan",
    "capture_register",
    "execute",
    "install_repeat",
    "linewise_adjusted",
    "replace_line",
    "replace_operator",
    "replace_visual",
    "replay_line",
    "replay_operator",
    "replay_visual",
    "scoped_option",
    "scoped_options",
]
