"""Per-buffer editor options consulted by editing commands."""

from __future__ import annotations

from dataclasses import dataclass, fields

SELECTION_MODES = ("inclusive", "exclusive")


@dataclass(slots=True)
class BufferOptions:
    """Subset of Vim's buffer-local options the engine understands.

    ``selection`` decides whether the character under the end of a
    selection is part of it. ``autoindent`` makes line replacements inherit
    the indentation of the first replaced line.
    """

    autoindent: bool = False
    selection: str = "inclusive"
    modifiable: bool = True
    readonly: bool = False

    def __post_init__(self) -> None:
        self._check("selection", self.selection)

    def get(self, name: str) -> object:
        self._require(name)
        return getattr(self, name)

    def set(self, name: str, value: object) -> None:
        self._require(name)
        self._check(name, value)
        setattr(self, name, value)

    @staticmethod
    def _require(name: str) -> None:
        if name not in {f.name for f in fields(BufferOptions)}:
            raise KeyError(f"Unknown option '{name}'")

    @staticmethod
    def _check(name: str, value: object) -> None:
        if name == "selection" and value not in SELECTION_MODES:
            raise ValueError(f"Invalid value for 'selection': {value!r}")


__all__ = ["BufferOptions", "SELECTION_MODES"]
