"""Snapshot of the register designated for the running replace command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from replace_with_register.buffer.registers import UNNAMED, is_valid_register
from replace_with_register.modes.base_mode import ModeContext
from replace_with_register.runtime import telemetry

SOURCES = ("operator", "line", "visual")


@dataclass(frozen=True, slots=True)
class ReplaceRequest:
    """Operation-scoped parameters threaded from capture to repeat recording."""

    register: str = UNNAMED
    count: Optional[int] = None
    source: str = "operator"

    def __post_init__(self) -> None:
        if self.source not in SOURCES:
            raise ValueError(f"Unknown replace source '{self.source}'")

    @property
    def effective_count(self) -> int:
        return max(1, self.count or 1)


def capture_register(
    context: ModeContext, *, source: str, count: Optional[int] = None
) -> ReplaceRequest:
    """Read ``"x`` before Normal mode clears it at the end of the command.

    ``count`` defaults to the count typed before the command.
    """

    name = context.buffer.state.active_register or UNNAMED
    if not is_valid_register(name):
        name = UNNAMED
    request = ReplaceRequest(
        register=name,
        count=context.count if count is None else count,
        source=source,
    )
    telemetry.record_event(
        "replace.capture",
        level="debug",
        data={"register": request.register, "source": source, "count": request.count},
    )
    return request


__all__ = ["ReplaceRequest", "SOURCES", "capture_register"]
