"""Keymap-driven mode base shared by Normal and Visual mode."""

from __future__ import annotations

from typing import List, Mapping, MutableMapping, Optional, cast

from replace_with_register.buffer.registers import is_valid_register
from replace_with_register.keymaps import KeymapResolver, ResolutionMatch
from replace_with_register.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


def update_flag(context: ModeContext, key: str, value: bool) -> None:
    flags = cast(
        MutableMapping[str, bool], context.extras.setdefault("keymap_flags", {})
    )
    flags[key] = value


class KeymapMode(Mode):
    """Mode driven by the keymap resolver with Vim's ``["x][count]`` prefix.

    The register designation lives on ``buffer.state.active_register`` and
    is cleared once a command finishes dispatching; the count is published
    to actions through ``extras["count"]`` only while the action runs.
    """

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self._resolver = require_keymap_resolver(context)
        self._flags = cast(
            Mapping[str, bool], context.extras.setdefault("keymap_flags", {})
        )
        self._pending: List[str] = []
        self._count_digits: List[str] = []
        self._awaiting_register = False

    @property
    def count(self) -> Optional[int]:
        if not self._count_digits:
            return None
        return int("".join(self._count_digits))

    def handle_key(self, key: KeyInput) -> ModeResult:
        token = key.token

        if self._awaiting_register:
            return self._designate_register(token)

        if not self._pending:
            if token == '"':
                self._awaiting_register = True
                return ModeResult(consumed=True, status="register_prefix")
            if token.isdigit() and (token != "0" or self._count_digits):
                self._count_digits.append(token)
                return ModeResult(consumed=True, status="count")

        self._pending.append(token)
        result = self._resolver.resolve(
            self.name, tuple(self._pending), context=self._flags
        )

        if result.status == "match" and result.match:
            self._pending.clear()
            return self._execute_match(result.match)

        if result.status == "pending":
            return ModeResult(
                consumed=True,
                status="pending",
                message="awaiting_sequence",
                timeout_ms=result.timeout_ms,
            )

        self._pending.clear()
        return self.handle_unmapped(key)

    def handle_unmapped(self, key: KeyInput) -> ModeResult:
        del key
        self._finish_command()
        return ModeResult(consumed=False, status="miss")

    def handle_timeout(self) -> ModeResult:
        if not self._pending:
            return ModeResult(consumed=False, status="timeout")

        tokens = tuple(self._pending)
        self._pending.clear()
        result = self._resolver.resolve(self.name, tokens, context=self._flags)
        if result.status == "match" and result.match:
            return self._execute_match(result.match)
        self._finish_command()
        return ModeResult(consumed=False, status="timeout", message="pending_timeout")

    def reset_pending(self) -> None:
        self._pending.clear()
        self._count_digits.clear()
        self._awaiting_register = False

    def _designate_register(self, token: str) -> ModeResult:
        self._awaiting_register = False
        if not is_valid_register(token):
            self._finish_command()
            return ModeResult(consumed=True, status="invalid_register", message=token)
        self.context.buffer.state.active_register = token
        return ModeResult(consumed=True, status="register", message=token)

    def _execute_match(self, match: ResolutionMatch) -> ModeResult:
        self.context.extras["count"] = self.count
        try:
            with telemetry.span(
                "keymaps::execute",
                component="keymaps",
                metadata={
                    "binding_id": match.binding.id,
                    "action": match.action.id,
                    "register": self.context.buffer.state.active_register,
                },
            ):
                outcome = match.action(self.context, match)
        finally:
            self.context.extras.pop("count", None)
            self._finish_command()

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)

    def _finish_command(self) -> None:
        self._count_digits.clear()
        self._awaiting_register = False
        self.context.buffer.state.reset_register()
