"""Hands finished replacements to the optional repeat services."""

from __future__ import annotations

from typing import Callable, Optional

from replace_with_register.modes.base_mode import ModeBus, ModeContext
from replace_with_register.repeat import (
    NULL_REPEAT,
    RepeatService,
    RepeatToken,
    VisualRepeatService,
)
from replace_with_register.runtime import telemetry

from .capture import ReplaceRequest
from .spans import SpanShape

REPLACE_OPERATOR = "replace.operator"
REPLACE_LINE = "replace.line"
REPLACE_VISUAL = "replace.visual"

_ACTION_FOR_SOURCE = {
    "operator": REPLACE_OPERATOR,
    "line": REPLACE_LINE,
    "visual": REPLACE_VISUAL,
}


class RepeatBridge:
    """Best-effort recorder for ``.`` in Normal and Visual mode.

    Operator and line replacements register with both services so either
    ``.`` redoes them; visual replacements only with the visual one. A
    service that raises is logged and skipped.
    """

    def __init__(
        self,
        primary: Optional[RepeatService] = None,
        visual: Optional[VisualRepeatService] = None,
        *,
        bus: Optional[ModeBus] = None,
    ) -> None:
        self.primary: RepeatService = primary or NULL_REPEAT
        self.visual: VisualRepeatService = visual or NULL_REPEAT
        self.bus = bus

    @classmethod
    def from_context(cls, context: ModeContext) -> "RepeatBridge":
        return cls(
            context.service("repeat", NULL_REPEAT),
            context.service("visual_repeat", NULL_REPEAT),
            bus=context.bus,
        )

    def record(
        self,
        request: ReplaceRequest,
        shape: SpanShape,
        *,
        motion: Optional[str] = None,
    ) -> None:
        visual_token = RepeatToken(
            action_id=REPLACE_VISUAL,
            register=request.register,
            shape=shape,
        )
        if request.source != "visual":
            token = RepeatToken(
                action_id=_ACTION_FOR_SOURCE[request.source],
                register=request.register,
                count=request.count,
                motion=motion,
                shape=shape,
            )
            self._call("repeat", self.primary.set_last_change, token)
        self._call("visual_repeat", self.visual.set_last_visual_change, visual_token)

    def _call(
        self, service: str, method: Callable[[RepeatToken], None], token: RepeatToken
    ) -> None:
        try:
            method(token)
        except Exception as exc:  # noqa: BLE001 - repeat services are optional
            telemetry.record_event(
                "repeat.unavailable",
                level="warning",
                data={"service": service, "action": token.action_id, "error": repr(exc)},
            )
            return
        if self.bus is not None:
            self.bus.emit("repeat.recorded", {"service": service, "token": token})


__all__ = ["REPLACE_LINE", "REPLACE_OPERATOR", "REPLACE_VISUAL", "RepeatBridge"]
