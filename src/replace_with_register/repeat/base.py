"""Repeat tokens and the service interfaces commands record them with."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Dict, Optional, Protocol

from replace_with_register.buffer.registers import UNNAMED
from replace_with_register.modes.base_mode import ModeContext, ModeResult
from replace_with_register.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover - typing only
    from replace_with_register.replace.spans import SpanShape


@dataclass(frozen=True, slots=True)
class RepeatToken:
    """Describes how to redo a change: which action, register, and extent."""

    action_id: str
    register: str = UNNAMED
    count: Optional[int] = None
    motion: Optional[str] = None
    shape: Optional["SpanShape"] = None


ReplayHandler = Callable[[ModeContext, RepeatToken], ModeResult]


class RepeatService(Protocol):
    def set_last_change(self, token: RepeatToken) -> None: ...


class VisualRepeatService(Protocol):
    def set_last_visual_change(self, token: RepeatToken) -> None: ...


class NullRepeatService:
    """Stand-in used when no repeat extension is installed."""

    def set_last_change(self, token: RepeatToken) -> None:
        del token

    def set_last_visual_change(self, token: RepeatToken) -> None:
        del token

    def replay(self, context: ModeContext) -> ModeResult:
        del context
        return ModeResult(consumed=True, status="repeat_unavailable")


NULL_REPEAT = NullRepeatService()


class Repeater:
    """Remembers one token and replays it through a registered handler.

    A register designated for the replay (``"b.``) and a count typed before
    it take precedence over the values stored in the token.
    """

    kind = "change"

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._handlers: Dict[str, ReplayHandler] = {}
        self._logger_name = logger_name
        self.last_token: Optional[RepeatToken] = None

    def register(self, action_id: str, handler: ReplayHandler) -> None:
        self._handlers[action_id] = handler

    def remember(self, token: RepeatToken) -> None:
        self.last_token = token
        telemetry.record_event(
            "repeat.recorded",
            level="debug",
            logger_name=self._logger_name,
            data={"kind": self.kind, "action": token.action_id},
        )

    def replay(self, context: ModeContext) -> ModeResult:
        token = self.last_token
        if token is None:
            return ModeResult(consumed=True, status="repeat_empty")
        handler = self._handlers.get(token.action_id)
        if handler is None:
            telemetry.record_event(
                "repeat.unhandled",
                level="warning",
                logger_name=self._logger_name,
                data={"kind": self.kind, "action": token.action_id},
            )
            return ModeResult(consumed=True, status="repeat_unhandled")

        designated = context.buffer.state.active_register
        if designated and designated != UNNAMED:
            token = replace(token, register=designated)
        if context.count is not None:
            token = replace(token, count=context.count)
        with telemetry.span(
            f"repeat::{self.kind}",
            logger_name=self._logger_name,
            component="repeat",
            metadata={"action": token.action_id, "register": token.register},
        ):
            return handler(context, token)


__all__ = [
    "NULL_REPEAT",
    "NullRepeatService",
    "RepeatService",
    "RepeatToken",
    "Repeater",
    "ReplayHandler",
    "VisualRepeatService",
]
