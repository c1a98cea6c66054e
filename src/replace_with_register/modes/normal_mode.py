"""Normal mode: keymap dispatch plus operator-pending motions."""

from __future__ import annotations

from typing import List, Optional

from replace_with_register.runtime import telemetry

from .base_mode import KeyInput, ModeContext, ModeResult
from .keymap_mode import KeymapMode
from .motions import UnknownMotionError, resolve_motion
from .operator_pipeline import OperatorPipeline, PendingOperator

CANCEL_KEYS = frozenset({"ESC", "<Esc>"})


class NormalMode(KeymapMode):
    name = "normal"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self._operator: Optional[PendingOperator] = None
        self._operator_tokens: List[str] = []

    @property
    def operator_pending(self) -> bool:
        return self._operator is not None

    def on_exit(self, next_mode: str | None) -> None:
        del next_mode
        self.reset_pending()
        self._clear_operator()

    def handle_key(self, key: KeyInput) -> ModeResult:
        if self._operator is not None:
            return self._feed_operator(self._operator, key.token)

        result = super().handle_key(key)
        pending = self.context.extras.pop("pending_operator", None)
        if isinstance(pending, PendingOperator):
            self._operator = pending
            self._operator_tokens.clear()
            return ModeResult(
                consumed=True,
                status="operator_pending",
                message=pending.operator_id,
                timeout_ms=result.timeout_ms,
            )
        return result

    def handle_timeout(self) -> ModeResult:
        if self._operator is not None:
            # Operator-pending mode waits for a motion indefinitely.
            return ModeResult(consumed=False, status="timeout")
        return super().handle_timeout()

    def _feed_operator(self, operator: PendingOperator, token: str) -> ModeResult:
        if token in CANCEL_KEYS:
            self._clear_operator()
            return ModeResult(consumed=True, status="operator_cancel")

        self._operator_tokens.append(token)
        try:
            plan = OperatorPipeline(operator).parse(tuple(self._operator_tokens))
        except UnknownMotionError as exc:
            self._clear_operator()
            telemetry.record_event(
                "operator.unknown_motion",
                level="debug",
                data={"operator": operator.operator_id, "motion": exc.motion_id},
            )
            return ModeResult(
                consumed=True, status="operator_cancel", message=exc.motion_id
            )
        if plan is None:
            return ModeResult(consumed=True, status="operator_pending")

        self._clear_operator()
        motion = resolve_motion(self.context.buffer, plan.motion_id, plan.count)
        with telemetry.span(
            "operator::execute",
            component=True,
            metadata={"operator": plan.operator_id, "motion": plan.motion_id},
        ):
            return operator.func(self.context, motion, plan)

    def _clear_operator(self) -> None:
        self._operator = None
        self._operator_tokens.clear()
