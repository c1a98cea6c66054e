"""Temporary editor option overrides restored on every exit path."""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from typing import Iterator

from replace_with_register.buffer import BufferOptions


@contextmanager
def scoped_option(options: BufferOptions, name: str, value: object) -> Iterator[object]:
    """Set ``name`` to ``value`` for the block and yield the previous value."""

    previous = options.get(name)
    options.set(name, value)
    try:
        yield previous
    finally:
        options.set(name, previous)


@contextmanager
def scoped_options(options: BufferOptions, **overrides: object) -> Iterator[None]:
    with ExitStack() as stack:
        for name, value in overrides.items():
            stack.enter_context(scoped_option(options, name, value))
        yield


__all__ = ["scoped_option", "scoped_options"]
