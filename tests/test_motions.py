from __future__ import annotations

import pytest

from replace_with_register.buffer import Buffer
from replace_with_register.modes import UnknownMotionError, resolve_motion
from replace_with_register.modes.motions import MotionRange


def make_buffer(text: str, cursor: tuple[int, int] = (0, 0)) -> Buffer:
    buffer = Buffer.from_text(text)
    buffer.state.set_cursor(*cursor)
    return buffer


@pytest.mark.parametrize(
    ("text", "cursor", "motion", "count", "expected"),
    [
        ("alpha beta", (0, 0), "w", None, ((0, 0), (0, 5))),
        ("alpha beta gamma", (0, 0), "w", 2, ((0, 0), (0, 10))),
        ("alpha beta", (0, 0), "e", None, ((0, 0), (0, 4))),
        ("alpha beta", (0, 6), "b", None, ((0, 0), (0, 5))),
        ("alpha beta", (0, 3), "$", None, ((0, 3), (0, 9))),
        ("alpha beta", (0, 3), "0", None, ((0, 0), (0, 2))),
        ("   alpha", (0, 6), "^", None, ((0, 3), (0, 5))),
        ("alpha", (0, 1), "l", 2, ((0, 1), (0, 2))),
        ("alpha", (0, 3), "h", None, ((0, 2), (0, 2))),
        ("say world", (0, 5), "iw", None, ((0, 4), (0, 8))),
        ("say world now", (0, 5), "aw", None, ((0, 4), (0, 9))),
        ("say world", (0, 5), "aw", None, ((0, 3), (0, 8))),
    ],
)
def test_characterwise_motions(text, cursor, motion, count, expected) -> None:
    buffer = make_buffer(text, cursor)

    result = resolve_motion(buffer, motion, count)

    assert result == MotionRange(*expected)
    assert result.kind == "char"


def test_word_motion_stops_at_end_of_line() -> None:
    buffer = make_buffer("alpha\nbeta")

    result = resolve_motion(buffer, "w")

    assert result == MotionRange((0, 0), (0, 4))


def test_linewise_motions() -> None:
    buffer = make_buffer("one\ntwo\nthree", (1, 1))

    down = resolve_motion(buffer, "j")
    up = resolve_motion(buffer, "k")
    lines = resolve_motion(buffer, "line", 5)

    assert down == MotionRange((1, 0), (2, 0), linewise=True)
    assert up == MotionRange((0, 0), (1, 0), linewise=True)
    assert lines == MotionRange((1, 0), (2, 0), linewise=True)
    assert lines.kind == "line"


def test_motion_that_cannot_move_returns_none() -> None:
    buffer = make_buffer("one\ntwo", (1, 0))

    assert resolve_motion(buffer, "j") is None
    assert resolve_motion(buffer, "h") is None


def test_word_object_on_empty_line_returns_none() -> None:
    buffer = make_buffer("")

    assert resolve_motion(buffer, "iw") is None


def test_unknown_motion_raises() -> None:
    with pytest.raises(UnknownMotionError):
        resolve_motion(make_buffer("alpha"), "x")
