from __future__ import annotations

import pytest

from replace_with_register.buffer import Buffer, BufferOptions, RegisterBank, RegisterValue
from replace_with_register.replace import (
    LineSpan,
    OperatorSpan,
    ReplacementEngine,
    SpanBounds,
    SpanShape,
    VisualSpan,
    linewise_adjusted,
    scoped_option,
    scoped_options,
)


def make_buffer(text: str, **options: object) -> Buffer:
    return Buffer.from_text(text, options=BufferOptions(**options))  # type: ignore[arg-type]


def test_scoped_option_restores_after_error() -> None:
    options = BufferOptions(autoindent=True)

    with pytest.raises(RuntimeError):
        with scoped_option(options, "autoindent", False) as previous:
            assert previous is True
            assert options.autoindent is False
            raise RuntimeError("boom")

    assert options.autoindent is True


def test_scoped_options_restores_every_override() -> None:
    options = BufferOptions(autoindent=True, selection="exclusive")

    with scoped_options(options, autoindent=False, selection="inclusive"):
        assert (options.autoindent, options.selection) == (False, "inclusive")

    assert (options.autoindent, options.selection) == (True, "exclusive")


def test_visual_span_honours_exclusive_selection() -> None:
    buffer = make_buffer("say world", selection="exclusive")

    bounds = VisualSpan((0, 7), (0, 4)).resolve_bounds(buffer)

    assert bounds == SpanBounds((0, 4), (0, 7), "char")


def test_operator_span_is_inclusive_under_exclusive_selection() -> None:
    buffer = make_buffer("say world", selection="exclusive")

    bounds = OperatorSpan((0, 4), (0, 6)).resolve_bounds(buffer)

    assert bounds == SpanBounds((0, 4), (0, 7), "char")
    assert buffer.options.selection == "exclusive"


def test_char_span_end_is_clamped_to_line() -> None:
    buffer = make_buffer("ab\ncd")

    bounds = VisualSpan((0, 1), (0, 5)).resolve_bounds(buffer)

    assert bounds.end == (0, 2)


def test_line_span_clamps_count_to_buffer() -> None:
    buffer = make_buffer("one\ntwo\nthree")

    bounds = LineSpan(1, 10).resolve_bounds(buffer)

    assert bounds == SpanBounds((1, 0), (3, 0), "line")
    assert list(bounds.rows) == [1, 2]
    assert bounds.whole_lines is True


def test_block_span_orders_corners() -> None:
    buffer = make_buffer("abcd\nefgh")

    bounds = VisualSpan((1, 1), (0, 2), kind="block").resolve_bounds(buffer)

    assert bounds == SpanBounds((0, 1), (1, 2), "block")
    assert bounds.shape() == SpanShape("block", lines=2, width=2)


def test_shapes_reproduce_at_new_cursor() -> None:
    buffer = make_buffer("alpha beta\ngamma delta")
    shape = SpanBounds((0, 0), (0, 5), "char").shape()

    placed = shape.place(buffer, (1, 6))

    assert shape == SpanShape("char", lines=1, width=5)
    assert placed.resolve_bounds(buffer) == SpanBounds((1, 6), (1, 11), "char")


def test_multiline_char_shape_keeps_last_line_width() -> None:
    buffer = make_buffer("abc\ndef\nghi\njkl")
    shape = SpanBounds((0, 1), (1, 2), "char").shape()

    placed = shape.place(buffer, (2, 0))

    assert shape == SpanShape("char", lines=2, width=2)
    assert placed == OperatorSpan((2, 0), (3, 1))


def test_linewise_adjusted_strips_and_restores() -> None:
    registers = RegisterBank()
    registers.yank_to("a", "hello\n", register_type="line")
    registers.yank_to('"', "keep")

    with linewise_adjusted(registers, "a", whole_lines=False) as value:
        assert value == RegisterValue("hello", "character")
        assert registers.get("a") == RegisterValue("hello", "character")
        assert registers.get('"').text == "keep"

    assert registers.get("a") == RegisterValue("hello\n", "line")
    assert registers.get('"').text == "keep"


def test_linewise_adjusted_restores_after_error() -> None:
    registers = RegisterBank()
    registers.yank_to("a", "hello\n", register_type="line")

    with pytest.raises(RuntimeError):
        with linewise_adjusted(registers, "a", whole_lines=False):
            raise RuntimeError("boom")

    assert registers.get("a") == RegisterValue("hello\n", "line")


def test_linewise_adjusted_leaves_whole_line_targets_alone() -> None:
    registers = RegisterBank()
    registers.yank_to("a", "hello\n", register_type="line")

    with linewise_adjusted(registers, "a", whole_lines=True) as value:
        assert value == RegisterValue("hello\n", "line")


def test_linewise_adjusted_uppercase_name_does_not_append() -> None:
    registers = RegisterBank()
    registers.yank_to("a", "hello\n", register_type="line")

    with linewise_adjusted(registers, "A", whole_lines=False) as value:
        assert value.text == "hello"

    assert registers.get("a") == RegisterValue("hello\n", "line")


def test_engine_replaces_inline_span() -> None:
    buffer = make_buffer("say world")

    ReplacementEngine(buffer).replace(
        SpanBounds((0, 4), (0, 7), "char"), RegisterValue("hello")
    )

    assert buffer.lines == ("say hellold",)
    assert buffer.state.cursor == (0, 8)
    assert len(buffer.undo) == 1


def test_engine_replaces_whole_lines_without_autoindent() -> None:
    buffer = make_buffer("    foo\nbar\nbaz", autoindent=True)

    ReplacementEngine(buffer).replace(
        SpanBounds((0, 0), (2, 0), "line"), RegisterValue("X\n  Y\n", "line")
    )

    assert buffer.lines == ("X", "  Y", "baz")
    assert buffer.options.autoindent is True
    assert buffer.state.cursor == (0, 0)


def test_engine_replaces_lines_with_characterwise_text() -> None:
    buffer = make_buffer("foo\nbar")

    ReplacementEngine(buffer).replace(
        SpanBounds((1, 0), (2, 0), "line"), RegisterValue("new")
    )

    assert buffer.lines == ("foo", "new")


def test_engine_replaces_block() -> None:
    buffer = make_buffer("abcd\nefgh\nij")

    ReplacementEngine(buffer).replace(
        SpanBounds((0, 1), (2, 2), "block"), RegisterValue("X")
    )

    assert buffer.lines == ("aXd", "eh", "i")


def test_engine_inserts_blockwise_register_characterwise() -> None:
    buffer = make_buffer("say world")

    ReplacementEngine(buffer).replace(
        SpanBounds((0, 4), (0, 9), "char"), RegisterValue("ab\ncd", "block")
    )

    assert buffer.lines == ("say ab", "cd")


def test_engine_with_empty_register_only_deletes() -> None:
    buffer = make_buffer("say world")

    ReplacementEngine(buffer).replace(SpanBounds((0, 3), (0, 9), "char"), RegisterValue(""))

    assert buffer.lines == ("say",)
    assert buffer.state.cursor == (0, 3)
