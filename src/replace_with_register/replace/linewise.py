"""Linewise register fix-up for replacements narrower than whole lines."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from replace_with_register.buffer import RegisterBank, RegisterValue
from replace_with_register.runtime import telemetry


@contextmanager
def linewise_adjusted(
    registers: RegisterBank, name: str, *, whole_lines: bool
) -> Iterator[RegisterValue]:
    """Yield the value to insert for register ``name``.

    A linewise value ending in a line break would leave an extra empty line
    behind when pasted into a character or block span. For those targets
    the register is rewritten in place with one trailing ``"\\n"`` removed
    and typed characterwise, then restored verbatim when the block exits.
    The rewrite never touches the unnamed register.
    """

    slot = name.lower()
    original = registers.get(slot)
    if whole_lines or original.type != "line" or not original.text.endswith("\n"):
        yield original
        return

    adjusted = RegisterValue(text=original.text[:-1], type="character")
    registers.set(slot, adjusted, update_unnamed=False)
    telemetry.record_event(
        "replace.linewise_adjusted", level="debug", data={"register": slot}
    )
    try:
        yield adjusted
    finally:
        registers.set(slot, original, update_unnamed=False)


__all__ = ["linewise_adjusted"]
