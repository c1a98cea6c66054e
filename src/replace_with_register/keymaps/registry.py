"""Action and binding tables shared by every mode."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional

from replace_with_register.runtime import telemetry

from .models import ActionRef, Binding


@dataclass(frozen=True, slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        super().__init__(
            f"Binding '{binding.id}' ({binding.sequence}) shadows "
            f"{', '.join(repr(c.id) for c in self.conflicts)} in mode '{binding.mode}'"
        )


class KeymapRegistry:
    """Owns actions and bindings; ``revision`` changes whenever bindings do."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._logger_name = logger_name
        self.revision = 0

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError:
            raise KeyError(f"Action '{action_id}' is not registered") from None

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError:
            raise KeyError(f"Binding '{binding_id}' is not registered") from None

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts same-id and shadowed entries."""

        with telemetry.span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.action_id not in self._actions:
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )
            shadowed = [
                other
                for other in self._bindings.values()
                if other.id != binding.id and binding.shadows(other)
            ]
            if not replace:
                if shadowed:
                    handle.add_metadata("conflicts", [other.id for other in shadowed])
                    raise KeymapConflictError(binding, shadowed)
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
            for other in shadowed:
                del self._bindings[other.id]
            self._bindings[binding.id] = binding
            self.revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(binding_id, None)
        if binding is not None:
            self.revision += 1
        return binding

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        for binding_id in sorted(self._bindings):
            binding = self._bindings[binding_id]
            if mode is None or binding.mode == mode:
                yield binding

    def bindings_for_action(self, action_id: str) -> list[Binding]:
        return [b for b in self.iter_bindings() if b.action_id == action_id]

    def set_timeouts(
        self,
        timeout_ms: int,
        *,
        mode: Optional[str] = None,
        binding_ids: Optional[Iterable[str]] = None,
    ) -> int:
        """Give matching bindings a new sequence timeout; returns how many changed."""

        if binding_ids is not None:
            targets = [self.get_binding(binding_id) for binding_id in binding_ids]
        else:
            targets = list(self.iter_bindings(mode))
        for binding in targets:
            self._bindings[binding.id] = replace(
                binding, sequence=binding.sequence.with_timeout(timeout_ms)
            )
        if targets:
            self.revision += 1
        return len(targets)

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted({b.mode for b in self._bindings.values()})),
        )


__all__ = ["KeymapConflictError", "KeymapRegistry", "RegistryStats"]
