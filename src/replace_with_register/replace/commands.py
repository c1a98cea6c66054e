"""The three replace commands and their repeat handlers.

``replace_operator`` (``gr{motion}``), ``replace_line`` (``grr``) and
``replace_visual`` (``{Visual}gr``) all funnel into ``execute``:

1. probe the buffer so a read-only buffer aborts before anything changes,
2. resolve the span to bounds,
3. adjust a linewise register for narrower targets,
4. run the engine,
5. record repeat tokens.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from replace_with_register.buffer import BufferNotModifiableError
from replace_with_register.keymaps import ResolutionMatch
from replace_with_register.modes.base_mode import ModeContext, ModeResult
from replace_with_register.modes.motions import LINE_MOTION, MotionRange, resolve_motion
from replace_with_register.modes.operator_pipeline import ExecutionPlan, begin_operator
from replace_with_register.repeat import ChangeRepeater, RepeatToken, VisualRepeater
from replace_with_register.runtime import telemetry

from .bridge import REPLACE_LINE, REPLACE_OPERATOR, REPLACE_VISUAL, RepeatBridge
from .capture import ReplaceRequest, capture_register
from .engine import ReplacementEngine
from .linewise import linewise_adjusted
from .spans import LineSpan, OperatorSpan, Span, VisualSpan


def execute(
    context: ModeContext,
    request: ReplaceRequest,
    span: Span,
    *,
    motion: Optional[str] = None,
) -> ModeResult:
    """Replace ``span`` with ``request.register`` and record the change."""

    buffer = context.buffer
    try:
        buffer.probe_edit()
    except BufferNotModifiableError as exc:
        return _aborted(context, request, exc.reason)

    with telemetry.span(
        "replace::execute",
        component="replace",
        metadata={"source": request.source, "register": request.register},
    ):
        bounds = span.resolve_bounds(buffer)
        with linewise_adjusted(
            buffer.registers, request.register, whole_lines=bounds.whole_lines
        ) as value:
            ReplacementEngine(buffer).replace(bounds, value)

    RepeatBridge.from_context(context).record(request, bounds.shape(), motion=motion)
    context.bus.emit("replace.done", {"request": request, "bounds": bounds})
    return ModeResult(consumed=True, status="replaced", message=request.register)


def replace_operator(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``["x][count]gr{motion}``: wait for a motion, then replace its text."""

    request = capture_register(context, source="operator")
    try:
        context.buffer.probe_edit()
    except BufferNotModifiableError as exc:
        return _aborted(context, request, exc.reason)

    def operate(
        ctx: ModeContext, motion: Optional[MotionRange], plan: ExecutionPlan
    ) -> ModeResult:
        if plan.linewise:
            line_request = replace(request, count=plan.count, source="line")
            return execute(
                ctx,
                line_request,
                LineSpan(ctx.buffer.state.cursor[0], line_request.effective_count),
                motion=LINE_MOTION,
            )
        op_request = replace(request, count=plan.count)
        if motion is None:
            return _aborted(ctx, op_request, "motion failed", status="operator_cancel")
        return execute(
            ctx, op_request, OperatorSpan.from_motion(motion), motion=plan.motion_id
        )

    return begin_operator(
        context,
        REPLACE_OPERATOR,
        operate,
        line_key=match.binding.sequence.last_token,
    )


def replace_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``["x][count]grr`` bound directly: replace ``count`` lines."""

    del match
    request = capture_register(context, source="line")
    span = LineSpan(context.buffer.state.cursor[0], request.effective_count)
    return execute(context, request, span, motion=LINE_MOTION)


def replace_visual(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``{Visual}["x]gr``: replace the selection and return to Normal mode."""

    del match
    request = capture_register(context, source="visual")
    span = VisualSpan.from_state(context.buffer.state)
    if span is None:
        return ModeResult(consumed=False, status="no_selection")
    return _leave_visual(execute(context, request, span))


def replay_operator(context: ModeContext, token: RepeatToken) -> ModeResult:
    request = ReplaceRequest(register=token.register, count=token.count)
    motion_id = token.motion or LINE_MOTION
    motion = resolve_motion(context.buffer, motion_id, token.count)
    if motion is None:
        return _aborted(context, request, "motion failed", status="operator_cancel")
    return execute(context, request, OperatorSpan.from_motion(motion), motion=motion_id)


def replay_line(context: ModeContext, token: RepeatToken) -> ModeResult:
    request = ReplaceRequest(register=token.register, count=token.count, source="line")
    span = LineSpan(context.buffer.state.cursor[0], request.effective_count)
    return execute(context, request, span, motion=LINE_MOTION)


def replay_visual(context: ModeContext, token: RepeatToken) -> ModeResult:
    """Redo over the live selection, or over the recorded shape at the cursor."""

    request = ReplaceRequest(register=token.register, source="visual")
    selection = VisualSpan.from_state(context.buffer.state)
    if selection is not None:
        return _leave_visual(execute(context, request, selection))
    if token.shape is None:
        return ModeResult(consumed=True, status="repeat_empty")
    return execute(context, request, token.shape.place(context.buffer))


def install_repeat(
    context: ModeContext,
    *,
    repeat: Optional[ChangeRepeater] = None,
    visual_repeat: Optional[VisualRepeater] = None,
) -> Tuple[ChangeRepeater, VisualRepeater]:
    """Install both repeat services and teach them the replace handlers."""

    repeater = repeat or ChangeRepeater()
    visual = visual_repeat or VisualRepeater()
    repeater.register(REPLACE_OPERATOR, replay_operator)
    repeater.register(REPLACE_LINE, replay_line)
    visual.register(REPLACE_VISUAL, replay_visual)
    context.extras["repeat"] = repeater
    context.extras["visual_repeat"] = visual
    return repeater, visual


def _leave_visual(result: ModeResult) -> ModeResult:
    result.switch_to = "normal"
    return result


def _aborted(
    context: ModeContext,
    request: ReplaceRequest,
    reason: str,
    *,
    status: str = "not_modifiable",
) -> ModeResult:
    telemetry.record_event(
        "replace.aborted",
        level="warning" if status == "not_modifiable" else "debug",
        data={"source": request.source, "register": request.register, "reason": reason},
    )
    context.bus.emit("replace.aborted", {"request": request, "reason": reason})
    return ModeResult(consumed=True, status=status, message=reason)


__all__ = [
    "execute",
    "install_repeat",
    "replace_line",
    "replace_operator",
    "replace_visual",
    "replay_line",
    "replay_operator",
    "replay_visual",
]
