"""Register storage with Vim's unnamed, append, and black-hole rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

UNNAMED = '"'
BLACK_HOLE = "_"
REGISTER_TYPES = ("character", "line", "block")

_SPECIAL_NAMES = frozenset('"-+*_')


def is_valid_register(name: str) -> bool:
    if len(name) != 1:
        return False
    return name.isascii() and (name.isalnum() or name in _SPECIAL_NAMES)


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    type: str = "character"  # character, line, block

    def __post_init__(self) -> None:
        if self.type not in REGISTER_TYPES:
            raise ValueError(f"Unknown register type '{self.type}'")


class RegisterBank:
    """Tracks unnamed, named, numbered, and special registers."""

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {}
        self._registers[UNNAMED] = RegisterValue(text="")

    def get(self, name: str) -> RegisterValue:
        name = self._normalize(name)
        if name == BLACK_HOLE:
            return RegisterValue(text="")
        return self._registers.get(name, RegisterValue(text=""))

    def set(
        self, name: str, value: RegisterValue, *, update_unnamed: bool = True
    ) -> None:
        """Store ``value``; uppercase names append to their lowercase register.

        ``update_unnamed=False`` writes the slot only, which is how temporary
        rewrites restore a register without touching ``"``.
        """

        if not is_valid_register(name):
            raise ValueError(f"Invalid register name '{name}'")
        if name == BLACK_HOLE:
            return
        if name.isupper():
            existing = self.get(name)
            value = RegisterValue(text=existing.text + value.text, type=existing.type)
        name = self._normalize(name)
        self._registers[name] = value
        if update_unnamed and name != UNNAMED:
            self._registers[UNNAMED] = value

    def yank_to(
        self, name: str, text: str, *, register_type: str = "character"
    ) -> None:
        self.set(name, RegisterValue(text=text, type=register_type))


    @staticmethod
    def _normalize(name: str) -> str:
        if not name:
            return UNNAMED
        return name.lower() if name.isupper() else name


__all__ = [
    "BLACK_HOLE",
    "REGISTER_TYPES",
    "RegisterBank",
    "RegisterValue",
    "UNNAMED",
    "is_valid_register",
]
