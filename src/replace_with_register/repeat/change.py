"""Normal-mode ``.``: redo the last recorded change."""

from __future__ import annotations

from .base import RepeatToken, Repeater


class ChangeRepeater(Repeater):
    kind = "change"

    @property
    def last_change(self) -> RepeatToken | None:
        return self.last_token

    def set_last_change(self, token: RepeatToken) -> None:
        self.remember(token)


__all__ = ["ChangeRepeater"]
