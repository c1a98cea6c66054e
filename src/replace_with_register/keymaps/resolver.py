"""Resolve typed keys against a mode's bindings."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Literal, Mapping, Optional, Sequence

from replace_with_register.runtime import telemetry

from .models import ActionRef, Binding
from .registry import KeymapRegistry

Keys = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()
    timeout_ms: Optional[int] = None


@dataclass(slots=True)
class _ModeTable:
    """Bindings of one mode keyed by full sequence and by every proper prefix."""

    exact: Dict[Keys, list[Binding]]
    extending: Dict[Keys, list[Binding]]

    @classmethod
    def build(cls, bindings: Sequence[Binding]) -> "_ModeTable":
        exact: Dict[Keys, list[Binding]] = defaultdict(list)
        extending: Dict[Keys, list[Binding]] = defaultdict(list)
        for binding in bindings:
            exact[binding.tokens].append(binding)
            for size in range(1, len(binding.tokens)):
                extending[binding.tokens[:size]].append(binding)
        return cls(dict(exact), dict(extending))


class KeymapResolver:
    """Turns typed keys into a match, a pending prefix or a miss.

    A complete, allowed binding wins over any longer binding that starts
    with the same keys, so ``gr`` fires without waiting for ``grr``.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self.registry = registry
        self._logger_name = logger_name
        self._tables: Dict[str, tuple[int, _ModeTable]] = {}

    def resolve(
        self,
        mode: str,
        tokens: Sequence[str],
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        keys = tuple(tokens)
        flags = context or {}
        table = self._table(mode)
        with telemetry.span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "keys": " ".join(keys)},
        ) as handle:
            allowed = [b for b in table.exact.get(keys, ()) if b.allows(flags)]
            if allowed:
                binding = min(allowed, key=lambda b: (-b.priority, b.id))
                handle.add_metadata("binding_id", binding.id)
                return ResolutionResult(
                    "match",
                    ResolutionMatch(binding, self.registry.get_action(binding.action_id)),
                    consumed=len(keys),
                )

            longer = table.extending.get(keys, ())
            if longer:
                handle.add_metadata("status", "pending")
                return ResolutionResult(
                    "pending",
                    consumed=len(keys),
                    next_expected=tuple(sorted({b.tokens[len(keys)] for b in longer})),
                    timeout_ms=min(b.sequence.timeout_ms for b in longer),
                )

            handle.add_metadata("status", "miss")
            return ResolutionResult("miss", consumed=len(keys) if keys in table.exact else 0)

    def _table(self, mode: str) -> _ModeTable:
        cached = self._tables.get(mode)
        if cached is None or cached[0] != self.registry.revision:
            cached = (
                self.registry.revision,
                _ModeTable.build(list(self.registry.iter_bindings(mode))),
            )
            self._tables[mode] = cached
        return cached[1]


__all__ = ["KeymapResolver", "ResolutionMatch", "ResolutionResult"]
