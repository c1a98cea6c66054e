"""Visual mode: characterwise, linewise, and blockwise selections."""

from __future__ import annotations

from typing import MutableMapping, cast

from .base_mode import KeyInput, ModeResult
from .keymap_mode import KeymapMode, update_flag

VISUAL_KINDS = ("char", "line", "block")


class VisualMode(KeymapMode):
    """Keeps ``buffer.state.selection`` as ``(anchor, cursor)`` while active.

    The selection kind is requested through ``extras["visual_kind"]`` by the
    action that switches into this mode.
    """

    name = "visual"

    def on_enter(self, previous: str | None) -> None:
        del previous
        self.reset_pending()
        kind = str(self.context.extras.pop("visual_kind", "char"))
        if kind not in VISUAL_KINDS:
            raise ValueError(f"Unknown visual kind '{kind}'")
        update_flag(self.context, "visual_active", True)
        anchor = self.context.buffer.state.cursor
        self._visual_state()["anchor"] = anchor
        self.context.buffer.state.set_selection(anchor, anchor, kind=kind)

    def on_exit(self, next_mode: str | None) -> None:
        del next_mode
        update_flag(self.context, "visual_active", False)
        self.reset_pending()
        self._visual_state().pop("anchor", None)
        self.context.buffer.state.clear_selection()

    def handle_unmapped(self, key: KeyInput) -> ModeResult:
        del key
        self._finish_command()
        return ModeResult(consumed=False, status="miss", message="unmapped_visual")

    def _visual_state(self) -> MutableMapping[str, object]:
        return cast(
            MutableMapping[str, object],
            self.context.extras.setdefault("visual_state", {}),
        )
