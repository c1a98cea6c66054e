"""Default actions and key bindings for Normal and Visual mode."""

from __future__ import annotations

from dataclasses import replace
from typing import Collection, Iterable, Mapping, Optional

from replace_with_register.actions import core as core_actions
from replace_with_register.actions import repeat as repeat_actions
from replace_with_register.actions import visual as visual_actions
from replace_with_register.replace import commands as replace_actions

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

DEFAULT_ACTIONS: tuple[ActionRef, ...] = tuple(
    ActionRef(action_id, handler, description)
    for action_id, handler, description in (
        ("core.exit_to_normal", core_actions.exit_to_normal_mode, "Return to normal mode"),
        ("core.enter_visual", core_actions.enter_visual_mode, "Start a characterwise selection"),
        ("core.enter_visual_line", core_actions.enter_visual_line_mode, "Start a linewise selection"),
        ("core.enter_visual_block", core_actions.enter_visual_block_mode, "Start a blockwise selection"),
        ("visual.extend_left", visual_actions.extend_left, "Move the selection head left"),
        ("visual.extend_right", visual_actions.extend_right, "Move the selection head right"),
        ("visual.extend_up", visual_actions.extend_up, "Move the selection head up"),
        ("visual.extend_down", visual_actions.extend_down, "Move the selection head down"),
        ("visual.swap_anchor", visual_actions.swap_anchor, "Jump to the other end of the selection"),
        ("replace.operator", replace_actions.replace_operator, "Replace {motion} text with a register"),
        ("replace.line", replace_actions.replace_line, "Replace [count] lines with a register"),
        ("replace.visual", replace_actions.replace_visual, "Replace the selection with a register"),
        ("repeat.last_change", repeat_actions.repeat_last_change, "Repeat the last change"),
        ("repeat.visual_change", repeat_actions.repeat_visual_change, "Repeat the last change over the selection"),
    )
)

# ``grr`` reaches ``replace.line`` through the operator's doubled key, so the
# line action has no keys of its own.
_BINDING_TABLE: tuple[tuple[str, str, tuple[str, ...], str], ...] = (
    ("normal", "replace_operator", ("g", "r"), "replace.operator"),
    ("normal", "repeat", (".",), "repeat.last_change"),
    ("normal", "enter_visual", ("v",), "core.enter_visual"),
    ("normal", "enter_visual_line", ("V",), "core.enter_visual_line"),
    ("normal", "enter_visual_block", ("ctrl+v",), "core.enter_visual_block"),
    ("visual", "replace", ("g", "r"), "replace.visual"),
    ("visual", "repeat", (".",), "repeat.visual_change"),
    ("visual", "exit_escape", ("ESC",), "core.exit_to_normal"),
    ("visual", "exit_escape_alt", ("<Esc>",), "core.exit_to_normal"),
    ("visual", "extend_left", ("h",), "visual.extend_left"),
    ("visual", "extend_right", ("l",), "visual.extend_right"),
    ("visual", "extend_up", ("k",), "visual.extend_up"),
    ("visual", "extend_down", ("j",), "visual.extend_down"),
    ("visual", "swap_anchor", ("o",), "visual.swap_anchor"),
)

_DESCRIPTIONS = {action.id: action.description for action in DEFAULT_ACTIONS}

DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    Binding(
        id=f"{mode}.{name}",
        mode=mode,
        sequence=KeySequence(keys),
        action_id=action_id,
        description=_DESCRIPTIONS[action_id],
    )
    for mode, name, keys, action_id in _BINDING_TABLE
)


def _wanted(
    item_id: str,
    include: Optional[Collection[str]],
    exclude: Optional[Collection[str]],
) -> bool:
    if include is not None and item_id not in include:
        return False
    return not exclude or item_id not in exclude


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace_existing: bool = False,
    extra_bindings: Iterable[Binding] = (),
    default_sequence_timeout_ms: Optional[int] = None,
    include_actions: Optional[Collection[str]] = None,
    exclude_actions: Optional[Collection[str]] = None,
    include_bindings: Optional[Collection[str]] = None,
    exclude_bindings: Optional[Collection[str]] = None,
    per_mode_overrides: Optional[Mapping[str, Iterable[Binding]]] = None,
) -> None:
    """Seed ``registry`` with the built-in actions and bindings.

    ``include_*``/``exclude_*`` filter by id. ``per_mode_overrides`` entries
    replace defaults with the same id or keys and must target their mode.
    """

    for action in DEFAULT_ACTIONS:
        if _wanted(action.id, include_actions, exclude_actions):
            registry.register_action(action, replace=replace_existing)

    for binding in DEFAULT_BINDINGS:
        if not _wanted(binding.id, include_bindings, exclude_bindings):
            continue
        if default_sequence_timeout_ms is not None:
            binding = replace(
                binding,
                sequence=binding.sequence.with_timeout(default_sequence_timeout_ms),
            )
        registry.register_binding(binding, replace=replace_existing)

    for binding in extra_bindings:
        registry.register_binding(binding, replace=replace_existing)

    for mode, bindings in (per_mode_overrides or {}).items():
        for binding in bindings:
            if binding.mode != mode:
                raise ValueError(
                    f"Override binding '{binding.id}' must target mode '{mode}'"
                )
            registry.register_binding(binding, replace=True)


__all__ = ["DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "load_default_keymaps"]
