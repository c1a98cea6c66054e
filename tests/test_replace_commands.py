from __future__ import annotations

import pytest

from replace_with_register.buffer import Buffer, BufferOptions, RegisterValue
from replace_with_register.host import create_default_manager
from replace_with_register.modes.mode_manager import ModeManager
from replace_with_register.replace import LineSpan, ReplaceRequest, execute


def make_manager(text: str, **options: object) -> ModeManager:
    return create_default_manager(text, options=BufferOptions(**options))  # type: ignore[arg-type]


def buffer_of(manager: ModeManager) -> Buffer:
    return manager.context.buffer


def set_register(manager: ModeManager, name: str, text: str, kind: str = "character") -> None:
    buffer_of(manager).registers.set(name, RegisterValue(text, kind), update_unnamed=False)


@pytest.mark.parametrize("name", ['"', "a"])
@pytest.mark.parametrize(
    ("text", "kind"),
    [("hello", "character"), ("hello\n", "line"), ("ab\ncd", "block"), ("", "character")],
)
def test_register_is_unchanged_by_inline_replacement(name: str, text: str, kind: str) -> None:
    manager = make_manager("say world")
    buffer_of(manager).state.set_cursor(0, 5)
    set_register(manager, name, text, kind)
    prefix = "" if name == '"' else f'"{name}'

    manager.feed(f"{prefix}griw")

    assert buffer_of(manager).registers.get(name) == RegisterValue(text, kind)


def test_unnamed_register_is_not_clobbered_by_the_delete() -> None:
    manager = make_manager("say world")
    buffer_of(manager).state.set_cursor(0, 5)
    set_register(manager, '"', "keep")
    set_register(manager, "a", "hello")

    manager.feed('"agriw')

    assert buffer_of(manager).lines == ("say hello",)
    assert buffer_of(manager).registers.get('"') == RegisterValue("keep")


def test_replacing_with_unnamed_register_pastes_its_own_content() -> None:
    manager = make_manager("say world")
    buffer_of(manager).state.set_cursor(0, 5)
    set_register(manager, '"', "hello")

    manager.feed("griw")

    assert buffer_of(manager).lines == ("say hello",)
    assert buffer_of(manager).registers.get('"') == RegisterValue("hello")


def test_linewise_register_into_characterwise_span() -> None:
    manager = make_manager("say world")
    buffer_of(manager).state.set_cursor(0, 4)
    set_register(manager, "a", "hello\n", "line")

    results = manager.feed('"agr3l')

    assert results[-1].status == "replaced"
    assert buffer_of(manager).lines == ("say hellold",)
    assert buffer_of(manager).registers.get("a") == RegisterValue("hello\n", "line")


@pytest.mark.parametrize("keys", ['"a2grr', '"agr2r'])
def test_replace_count_lines(keys: str) -> None:
    manager = make_manager("foo\nbar\nbaz")
    set_register(manager, "a", "X\nY\n", "line")

    manager.feed(keys)

    assert buffer_of(manager).lines == ("X", "Y", "baz")
    assert buffer_of(manager).registers.get("a") == RegisterValue("X\nY\n", "line")


def test_replace_line_keeps_register_indentation_with_autoindent() -> None:
    manager = make_manager("    foo\nbar", autoindent=True)
    set_register(manager, "a", "x\n", "line")

    manager.feed('"agrr')

    assert buffer_of(manager).lines == ("x", "bar")
    assert buffer_of(manager).options.autoindent is True


def test_linewise_motion_replaces_whole_lines() -> None:
    manager = make_manager("foo\nbar\nbaz")
    set_register(manager, "a", "X", "character")

    manager.feed('"agrj')

    assert buffer_of(manager).lines == ("X", "baz")


@pytest.mark.parametrize("option", [{"modifiable": False}, {"readonly": True}])
@pytest.mark.parametrize("keys", ['"agriw', '"agrr', 'vl"agr'])
def test_unmodifiable_buffer_is_left_untouched(option: dict, keys: str) -> None:
    manager = make_manager("say world", **option)
    set_register(manager, "a", "hello\n", "line")
    set_register(manager, '"', "keep")
    aborted: list[object] = []
    manager.context.bus.subscribe("replace.aborted", aborted.append)

    results = manager.feed(keys)

    assert "not_modifiable" in [result.status for result in results]
    assert buffer_of(manager).lines == ("say world",)
    assert buffer_of(manager).registers.get("a") == RegisterValue("hello\n", "line")
    assert buffer_of(manager).registers.get('"') == RegisterValue("keep")
    assert len(buffer_of(manager).undo) == 0
    assert len(aborted) == 1
    assert manager.active_mode and manager.active_mode.name == "normal"


def test_execute_aborts_on_readonly_buffer() -> None:
    manager = make_manager("foo", readonly=True)

    result = execute(manager.context, ReplaceRequest("a", source="line"), LineSpan(0))

    assert result.status == "not_modifiable"
    assert buffer_of(manager).lines == ("foo",)


def test_options_are_restored_after_a_failing_replacement(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    manager = make_manager("say world", autoindent=True, selection="exclusive")
    buffer_of(manager).state.set_cursor(0, 5)
    set_register(manager, "a", "hello\n", "line")

    def explode(*args: object, **kwargs: object) -> None:
        raise RuntimeError("insert failed")

    monkeypatch.setattr(Buffer, "insert_text", explode)

    with pytest.raises(RuntimeError):
        manager.feed('"agriw')

    options = buffer_of(manager).options
    assert (options.autoindent, options.selection) == (True, "exclusive")
    assert buffer_of(manager).registers.get("a") == RegisterValue("hello\n", "line")


def test_register_designation_resets_after_replace() -> None:
    manager = make_manager("say world")
    set_register(manager, "a", "hello")

    manager.feed('"agriw')

    assert buffer_of(manager).state.active_register == '"'


def test_replace_done_event_carries_request_and_bounds() -> None:
    manager = make_manager("say world")
    buffer_of(manager).state.set_cursor(0, 5)
    set_register(manager, "a", "hello")
    done: list[dict] = []
    manager.context.bus.subscribe("replace.done", done.append)

    manager.feed('"agriw')

    assert len(done) == 1
    request = done[0]["request"]
    assert (request.register, request.source) == ("a", "operator")
    assert done[0]["bounds"].start == (0, 4)


def test_visual_replace_returns_to_normal_mode() -> None:
    manager = make_manager("say world")
    buffer_of(manager).state.set_cursor(0, 4)
    set_register(manager, "a", "X")

    results = manager.feed('vll"agr')

    assert results[-1].status == "replaced"
    assert buffer_of(manager).lines == ("say Xld",)
    assert manager.active_mode and manager.active_mode.name == "normal"
    assert buffer_of(manager).state.selection is None


def test_visual_replace_honours_exclusive_selection() -> None:
    manager = make_manager("say world", selection="exclusive")
    buffer_of(manager).state.set_cursor(0, 4)
    set_register(manager, "a", "X")

    manager.feed('vll"agr')

    assert buffer_of(manager).lines == ("say Xrld",)


def test_visual_line_replace() -> None:
    manager = make_manager("foo\nbar\nbaz")
    set_register(manager, "a", "X\n", "line")

    manager.feed('Vj"agr')

    assert buffer_of(manager).lines == ("X", "baz")
    assert buffer_of(manager).registers.get("a") == RegisterValue("X\n", "line")


def test_visual_block_replace() -> None:
    manager = make_manager("abcd\nefgh")
    set_register(manager, "a", "X")

    manager.feed('<C-v>lj"agr')

    assert buffer_of(manager).lines == ("Xcd", "gh")
