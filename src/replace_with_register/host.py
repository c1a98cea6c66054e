"""Headless editor wiring for embedding hosts and tests."""

from __future__ import annotations

from typing import Optional

from replace_with_register.buffer import Buffer, BufferOptions
from replace_with_register.keymaps import KeymapRegistry
from replace_with_register.modes import ModeBus, ModeContext, NormalMode, VisualMode
from replace_with_register.modes.mode_manager import ModeManager
from replace_with_register.replace import install_repeat


def create_default_manager(
    text: str = "",
    *,
    options: Optional[BufferOptions] = None,
    registry: Optional[KeymapRegistry] = None,
    with_repeat: bool = True,
) -> ModeManager:
    """Editor over ``text`` with Normal and Visual mode active.

    Without ``registry`` the default keymaps are loaded. ``with_repeat=False``
    leaves both repeat services absent, as in an editor without them.
    """

    buffer = Buffer.from_text(text, options=options)
    context = ModeContext(buffer, buffer.registers, ModeBus())
    if with_repeat:
        install_repeat(context)
    manager = ModeManager(context, keymap_registry=registry)
    manager.register_mode(NormalMode)
    manager.register_mode(VisualMode)
    return manager


__all__ = ["create_default_manager"]
