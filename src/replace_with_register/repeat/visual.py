"""Visual-mode ``.``: redo the last change over the selection.

Replayed from Normal mode, the handler reselects an area of the recorded
shape at the cursor instead.
"""

from __future__ import annotations

from .base import RepeatToken, Repeater


class VisualRepeater(Repeater):
    kind = "visual"

    @property
    def last_visual_change(self) -> RepeatToken | None:
        return self.last_token

    def set_last_visual_change(self, token: RepeatToken) -> None:
        self.remember(token)


__all__ = ["VisualRepeater"]
