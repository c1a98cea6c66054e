"""Operator-pending parsing: ``[count]{motion}`` after an operator key."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from replace_with_register.runtime import telemetry

from .base_mode import ModeContext, ModeResult
from .motions import (
    LINE_MOTION,
    MOTIONS,
    TEXT_OBJECT_PREFIXES,
    MotionRange,
    UnknownMotionError,
)

OperatorFunc = Callable[[ModeContext, Optional[MotionRange], "ExecutionPlan"], ModeResult]


@dataclass(slots=True)
class PendingOperator:
    """Callback an operator action leaves behind while a motion is typed.

    This is the engine's ``operatorfunc``: actions store one through
    ``begin_operator`` and Normal mode calls it once the motion resolves.
    """

    operator_id: str
    func: OperatorFunc
    line_key: str
    count: Optional[int] = None


@dataclass(slots=True)
class ExecutionPlan:
    operator_id: str
    motion_id: str
    count: Optional[int]
    raw_input: Tuple[str, ...]

    @property
    def linewise(self) -> bool:
        return self.motion_id == LINE_MOTION


@dataclass(slots=True)
class OperatorDraft:
    count: Optional[int] = None
    motion: Optional[str] = None
    raw_keys: List[str] = field(default_factory=list)


class CountParser:
    def parse(self, keys: Sequence[str], draft: OperatorDraft) -> Sequence[str]:
        digits = []
        for key in keys:
            if key.isdigit() and (key != "0" or digits):
                digits.append(key)
                draft.raw_keys.append(key)
            else:
                break
        if digits:
            draft.count = int("".join(digits))
        return keys[len(digits) :]


class MotionParser:
    def __init__(self, line_key: str) -> None:
        self.line_key = line_key

    def parse(self, keys: Sequence[str], draft: OperatorDraft) -> Sequence[str]:
        if not keys:
            return keys
        first = keys[0]
        if first == self.line_key:
            draft.motion = LINE_MOTION
            draft.raw_keys.append(first)
            return keys[1:]
        if first in TEXT_OBJECT_PREFIXES:
            if len(keys) < 2:
                return keys
            draft.motion = first + keys[1]
            draft.raw_keys.extend(keys[:2])
            return keys[2:]
        draft.motion = first
        draft.raw_keys.append(first)
        return keys[1:]


class OperatorPipeline:
    """Parses the keys typed after an operator into an ``ExecutionPlan``.

    ``parse`` returns ``None`` while the motion is incomplete and raises
    ``UnknownMotionError`` once the keys cannot form a motion.
    """

    def __init__(self, pending: PendingOperator) -> None:
        self.pending = pending
        self.count_parser = CountParser()
        self.motion_parser = MotionParser(pending.line_key)

    def parse(self, keys: Sequence[str]) -> Optional[ExecutionPlan]:
        draft = OperatorDraft()
        with telemetry.span(
            "operator::parse",
            component=True,
            metadata={"operator": self.pending.operator_id, "keys": "".join(keys)},
        ):
            remaining = self.count_parser.parse(keys, draft)
            remaining = self.motion_parser.parse(remaining, draft)
            if draft.motion is None:
                return None
            if draft.motion not in MOTIONS or remaining:
                raise UnknownMotionError(draft.motion)
            return ExecutionPlan(
                operator_id=self.pending.operator_id,
                motion_id=draft.motion,
                count=_multiply(self.pending.count, draft.count),
                raw_input=tuple(draft.raw_keys),
            )


def begin_operator(
    context: ModeContext,
    operator_id: str,
    func: OperatorFunc,
    *,
    line_key: str,
) -> ModeResult:
    """Arm ``func`` to run on the next motion and report operator-pending."""

    context.extras["pending_operator"] = PendingOperator(
        operator_id=operator_id,
        func=func,
        line_key=line_key,
        count=context.count,
    )
    context.bus.emit("operator.pending", operator_id)
    return ModeResult(consumed=True, status="operator_pending", message=operator_id)


def _multiply(left: Optional[int], right: Optional[int]) -> Optional[int]:
    if left is None and right is None:
        return None
    return (left or 1) * (right or 1)


__all__ = [
    "CountParser",
    "ExecutionPlan",
    "MotionParser",
    "OperatorDraft",
    "OperatorFunc",
    "OperatorPipeline",
    "PendingOperator",
    "begin_operator",
]
