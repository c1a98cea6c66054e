from __future__ import annotations

import time
from typing import Callable, Optional

import pytest

from replace_with_register.buffer import Buffer
from replace_with_register.keymaps import ActionRef, Binding, KeySequence, KeymapRegistry, KeymapResolver
from replace_with_register.keymaps.defaults import load_default_keymaps
from replace_with_register.modes import (
    KeyInput,
    ModeBus,
    ModeContext,
    NormalMode,
    OperatorPipeline,
    PendingOperator,
    UnknownMotionError,
    VisualMode,
)
from replace_with_register.modes.mode_manager import ModeManager, parse_keys


def make_context(registry: KeymapRegistry, text: str = "") -> ModeContext:
    buffer = Buffer.from_text(text)
    return ModeContext(
        buffer,
        buffer.registers,
        ModeBus(),
        {"keymap_resolver": KeymapResolver(registry), "keymap_flags": {}},
    )


def default_context(text: str = "") -> ModeContext:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    return make_context(registry, text)


def make_manager(text: str = "", clock: Callable[[], float] = time.monotonic) -> ModeManager:
    context = default_context(text)
    resolver = context.extras["keymap_resolver"]
    assert isinstance(resolver, KeymapResolver)
    manager = ModeManager(
        context,
        keymap_registry=resolver.registry,
        keymap_resolver=resolver,
        clock=clock,
    )
    manager.register_mode(NormalMode)
    manager.register_mode(VisualMode)
    return manager


def make_pending(count: Optional[int] = None) -> PendingOperator:
    return PendingOperator(
        operator_id="replace.operator",
        func=lambda context, motion, plan: None,  # type: ignore[arg-type,return-value]
        line_key="r",
        count=count,
    )


def test_normal_mode_uses_keymap_binding() -> None:
    context = default_context()
    mode = NormalMode(context)

    result = mode.handle_key(KeyInput(key="v"))

    assert result.switch_to == "visual"
    assert result.consumed is True
    assert context.extras["visual_kind"] == "char"


def test_register_prefix_is_cleared_after_command() -> None:
    context = default_context()
    mode = NormalMode(context)

    assert mode.handle_key(KeyInput(key='"')).status == "register_prefix"
    assert mode.handle_key(KeyInput(key="a")).status == "register"
    assert context.buffer.state.active_register == "a"

    mode.handle_key(KeyInput(key="v"))

    assert context.buffer.state.active_register == '"'


def test_invalid_register_name_is_ignored() -> None:
    context = default_context()
    mode = NormalMode(context)

    mode.handle_key(KeyInput(key='"'))
    result = mode.handle_key(KeyInput(key="?"))

    assert result.status == "invalid_register"
    assert context.buffer.state.active_register == '"'


def test_register_is_cleared_as_soon_as_operator_key_dispatches() -> None:
    manager = make_manager("alpha beta")

    results = manager.feed('"agr')

    assert results[-1].status == "operator_pending"
    assert manager.context.buffer.state.active_register == '"'
    mode = manager.active_mode
    assert isinstance(mode, NormalMode)
    assert mode.operator_pending is True


def test_count_prefix_is_published_only_while_action_runs() -> None:
    registry = KeymapRegistry()
    seen: list[Optional[int]] = []
    registry.register_action(
        ActionRef(id="test.count", handler=lambda context, match: seen.append(context.count))
    )
    registry.register_binding(
        Binding(
            id="normal.count",
            mode="normal",
            sequence=KeySequence.of("x"),
            action_id="test.count",
        )
    )
    context = make_context(registry)
    mode = NormalMode(context)

    for key in ("1", "2", "x", "x"):
        mode.handle_key(KeyInput(key=key))

    assert seen == [12, None]
    assert "count" not in context.extras


def test_pending_sequence_timeout_via_mode_manager() -> None:
    manager = make_manager()

    pending = manager.handle_key(KeyInput(key="g"))
    assert pending.status == "pending"
    assert pending.timeout_ms is not None

    timeouts = manager.force_timeout("normal")
    assert "normal" in timeouts
    timeout_result = timeouts["normal"]
    assert timeout_result.status == "timeout"
    assert timeout_result.consumed is False


def test_pending_timeout_follows_registry_timeouts() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    registry.set_timeouts(250, mode="normal")
    context = make_context(registry)
    mode = NormalMode(context)

    pending = mode.handle_key(KeyInput(key="g"))

    assert pending.status == "pending"
    assert pending.timeout_ms == 250


def test_process_timeouts_waits_for_the_deadline() -> None:
    now = [100.0]
    manager = make_manager("alpha", clock=lambda: now[0])

    manager.handle_key(KeyInput(key="g"))
    assert manager.pending_deadline("normal") == pytest.approx(101.0)
    assert manager.process_timeouts() == {}

    now[0] = 101.5
    expired = manager.process_timeouts()

    assert expired["normal"].status == "timeout"
    assert manager.pending_deadline("normal") is None


def test_operator_pending_ignores_timeouts() -> None:
    manager = make_manager("alpha")
    manager.feed("gr")

    assert manager.force_timeout("normal") == {}
    mode = manager.active_mode
    assert isinstance(mode, NormalMode)
    assert mode.operator_pending is True


def test_escape_cancels_operator_pending() -> None:
    manager = make_manager("alpha")

    results = manager.feed("gr<Esc>")

    assert results[-1].status == "operator_cancel"
    assert manager.context.buffer.lines == ("alpha",)


def test_unknown_motion_cancels_operator() -> None:
    manager = make_manager("alpha")

    results = manager.feed("grz")

    assert results[-1].status == "operator_cancel"
    assert results[-1].message == "z"
    mode = manager.active_mode
    assert isinstance(mode, NormalMode)
    assert mode.operator_pending is False


def test_mode_manager_switches_to_visual_mode() -> None:
    manager = make_manager("alpha")

    result = manager.handle_key(KeyInput(key="v"))

    assert result.switch_to == "visual"
    assert manager.active_mode and manager.active_mode.name == "visual"
    assert manager.context.buffer.state.selection == ((0, 0), (0, 0))


@pytest.mark.parametrize(
    ("keys", "kind"),
    [("v", "char"), ("V", "line"), ("<C-v>", "block")],
)
def test_visual_entry_keys_pick_selection_kind(keys: str, kind: str) -> None:
    manager = make_manager("alpha")

    manager.feed(keys)

    assert manager.context.buffer.state.selection_kind == kind


def test_escape_leaves_visual_and_clears_selection() -> None:
    manager = make_manager("alpha")

    manager.feed("vl<Esc>")

    assert manager.active_mode and manager.active_mode.name == "normal"
    assert manager.context.buffer.state.selection is None


def test_visual_mode_selection_extends() -> None:
    context = default_context("alpha\nbeta")
    events: list[object] = []
    context.bus.subscribe("visual.selection", events.append)
    mode = VisualMode(context)
    mode.on_enter("normal")

    move = mode.handle_key(KeyInput(key="l"))
    assert move.status == "visual_select"
    assert context.buffer.state.selection == ((0, 0), (0, 1))

    mode.handle_key(KeyInput(key="j"))
    assert context.buffer.state.selection == ((0, 0), (1, 1))
    assert len(events) == 2


def test_visual_mode_extend_right_stops_on_last_character() -> None:
    context = default_context("ab")
    mode = VisualMode(context)
    mode.on_enter("normal")

    for key in ("l", "l", "l"):
        mode.handle_key(KeyInput(key=key))

    assert context.buffer.state.cursor == (0, 1)


def test_visual_mode_swap_anchor() -> None:
    context = default_context("abcd")
    mode = VisualMode(context)
    mode.on_enter("normal")

    mode.handle_key(KeyInput(key="l"))
    swap = mode.handle_key(KeyInput(key="o"))

    assert swap.status == "visual_swap"
    assert context.buffer.state.cursor == (0, 0)
    assert context.buffer.state.selection == ((0, 1), (0, 0))


def test_parse_keys_understands_vim_notation() -> None:
    keys = parse_keys('"a<C-v><Esc>x')

    assert [(key.key, key.modifiers) for key in keys] == [
        ('"', ()),
        ("a", ()),
        ("v", ("ctrl",)),
        ("ESC", ()),
        ("x", ()),
    ]


def test_parse_keys_rejects_unknown_notation() -> None:
    with pytest.raises(ValueError):
        parse_keys("<F13>")


def test_operator_pipeline_waits_for_text_object() -> None:
    pipeline = OperatorPipeline(make_pending())

    assert pipeline.parse(("i",)) is None
    plan = pipeline.parse(("i", "w"))

    assert plan is not None
    assert plan.motion_id == "iw"


def test_operator_pipeline_multiplies_counts() -> None:
    plan = OperatorPipeline(make_pending(count=2)).parse(("3", "w"))

    assert plan is not None
    assert plan.count == 6
    assert plan.raw_input == ("3", "w")


def test_operator_pipeline_doubled_key_means_lines() -> None:
    plan = OperatorPipeline(make_pending()).parse(("r",))

    assert plan is not None
    assert plan.linewise is True
    assert plan.count is None


def test_operator_pipeline_rejects_unknown_motion() -> None:
    with pytest.raises(UnknownMotionError):
        OperatorPipeline(make_pending()).parse(("q",))
