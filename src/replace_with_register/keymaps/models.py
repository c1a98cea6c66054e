"""Value types for actions, key sequences and mode bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

DEFAULT_TIMEOUT_MS = 1000


def normalize_key(token: str) -> str:
    """Canonical form of one key: ``"Ctrl+V"`` -> ``"ctrl+V"``.

    Modifiers are lower-cased, de-duplicated and sorted; the key itself keeps
    its case so ``v`` and ``V`` stay distinct. A lone ``"+"`` is a plain key.
    """

    if not token:
        raise ValueError("key cannot be empty")
    if token == "+" or "+" not in token:
        return token
    *modifiers, key = token.split("+")
    if not key:
        raise ValueError(f"missing key in {token!r}")
    mods = sorted({m.strip().lower() for m in modifiers if m.strip()})
    return "+".join([*mods, key])


@dataclass(frozen=True, slots=True)
class KeySequence:
    tokens: tuple[str, ...]
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        if not self.tokens:
            raise ValueError("KeySequence requires at least one key")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        object.__setattr__(self, "tokens", tuple(normalize_key(t) for t in self.tokens))

    @classmethod
    def of(cls, *keys: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> "KeySequence":
        return cls(tuple(keys), timeout_ms)

    @property
    def last_token(self) -> str:
        return self.tokens[-1]

    def with_timeout(self, timeout_ms: int) -> "KeySequence":
        return KeySequence(self.tokens, timeout_ms)

    def __str__(self) -> str:
        return " ".join(self.tokens)


@dataclass(frozen=True, slots=True)
class WhenClause:
    """A flag a binding requires to be set (or, with ``!flag``, unset)."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        return cls(text[1:] if negated else text, not negated)

    def holds(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Keys that trigger ``action_id`` while ``mode`` is active."""

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = field(default=())
    priority: int = 0

    def __post_init__(self) -> None:
        for name in ("id", "mode", "action_id"):
            if not getattr(self, name):
                raise ValueError(f"binding {name} cannot be empty")
        object.__setattr__(
            self,
            "when",
            tuple(
                clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
                for clause in self.when
            ),
        )

    @property
    def tokens(self) -> tuple[str, ...]:
        return self.sequence.tokens

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(clause.holds(flags) for clause in self.when)

    def shadows(self, other: "Binding") -> bool:
        """Same mode, keys and guard: ``priority`` alone cannot tell them apart."""

        return (
            self.mode == other.mode
            and self.tokens == other.tokens
            and frozenset(self.when) == frozenset(other.when)
        )


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "ActionRef",
    "Binding",
    "KeySequence",
    "WhenClause",
    "normalize_key",
]
