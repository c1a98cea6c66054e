"""Delete a span through the black-hole register and put a register in its place."""

from __future__ import annotations

from replace_with_register.buffer import BLACK_HOLE, Buffer, BufferView, RegisterValue
from replace_with_register.runtime import telemetry

from .settings import scoped_option
from .spans import SpanBounds

UNDO_LABEL = "replace_with_register"


class ReplacementEngine:
    """Performs the delete+insert of a single replacement.

    The deleted text is sent to ``_`` so neither the unnamed register nor
    the register being pasted can be overwritten by it. ``autoindent`` is
    off for the duration so the inserted text keeps its own indentation,
    and the whole edit lands as one undo step.
    """

    def __init__(self, buffer: Buffer, *, logger_name: str | None = None) -> None:
        self.buffer = buffer
        self._logger_name = logger_name

    def replace(self, bounds: SpanBounds, value: RegisterValue) -> BufferView:
        with telemetry.span(
            "replace::engine",
            logger_name=self._logger_name,
            component="replace",
            metadata={
                "orientation": bounds.orientation,
                "register_type": value.type,
                "start": bounds.start,
                "end": bounds.end,
            },
        ):
            with scoped_option(self.buffer.options, "autoindent", False):
                with self.buffer.undo_group(UNDO_LABEL):
                    if bounds.orientation == "line":
                        self._replace_lines(bounds, value)
                    elif bounds.orientation == "block":
                        self._replace_block(bounds, value)
                    else:
                        self._replace_inline(bounds, value)
        return self.buffer.snapshot()

    def _replace_lines(self, bounds: SpanBounds, value: RegisterValue) -> None:
        rows = bounds.rows
        first, last = rows[0], rows[-1]
        last_line = self.buffer.document.get_line(last)
        # Emptying the rows leaves one blank line to swap for the new ones.
        self.buffer.delete_range(
            (first, 0), (last, len(last_line)), register=BLACK_HOLE, register_type="line"
        )
        text = value.text
        if value.type == "line" and text.endswith("\n"):
            text = text[:-1]
        self.buffer.replace_lines(first, first + 1, text.split("\n"), label=UNDO_LABEL)

    def _replace_inline(self, bounds: SpanBounds, value: RegisterValue) -> None:
        self.buffer.delete_range(bounds.start, bounds.end, register=BLACK_HOLE)
        self._insert_at(bounds.start, value.text)

    def _replace_block(self, bounds: SpanBounds, value: RegisterValue) -> None:
        left, right = bounds.start[1], bounds.end[1]
        for row in bounds.rows:
            line = self.buffer.document.get_line(row)
            if left >= len(line):
                continue
            self.buffer.delete_range(
                (row, left), (row, min(right + 1, len(line))), register=BLACK_HOLE
            )
        top = bounds.start[0]
        column = min(left, len(self.buffer.document.get_line(top)))
        self._insert_at((top, column), value.text)

    def _insert_at(self, position: tuple[int, int], text: str) -> None:
        if not text:
            self.buffer.state.set_cursor(*position)
            return
        self.buffer.insert_text(text, cursor=position)
        row, col = self.buffer.state.cursor
        # Leave the cursor on the last inserted character.
        if col > 0:
            self.buffer.state.set_cursor(row, col - 1)


__all__ = ["ReplacementEngine", "UNDO_LABEL"]
