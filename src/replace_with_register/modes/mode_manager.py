"""Mode switching, key dispatch and pending-sequence deadlines."""

from __future__ import annotations

import re
import time
from typing import Callable, Dict, List, Optional, Type

from replace_with_register.keymaps import KeymapRegistry, KeymapResolver
from replace_with_register.keymaps.defaults import load_default_keymaps
from replace_with_register.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult

KEYMAP_LOGGER = "replace_with_register.keymaps"

_KEY_NOTATION = re.compile(r"<([^<>]+)>|(.)", re.DOTALL)
_NAMED_KEYS = {"esc": "ESC", "cr": "ENTER", "enter": "ENTER", "lt": "<"}


def parse_keys(notation: str) -> List[KeyInput]:
    """Split Vim key notation (``"\\"agriw"``, ``"<C-v>jgr"``) into key inputs."""

    keys: List[KeyInput] = []
    for match in _KEY_NOTATION.finditer(notation):
        special, plain = match.groups()
        if plain is not None:
            keys.append(KeyInput(plain))
            continue
        name = special.lower()
        if name.startswith("c-") and len(name) == 3:
            keys.append(KeyInput(name[2], ("ctrl",)))
        elif name in _NAMED_KEYS:
            keys.append(KeyInput(_NAMED_KEYS[name]))
        else:
            raise ValueError(f"Unsupported key notation '<{special}>'")
    return keys


class ModeManager:
    """Routes keys to the active mode and applies its requested switches.

    A result carrying ``timeout_ms`` arms a deadline for that mode; the host
    calls :meth:`process_timeouts` from its event loop so a pending sequence
    such as ``g`` resolves to whatever it already matches once time runs out.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.context = context
        self.clock = clock
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self._deadlines: Dict[str, float] = {}

        if keymap_registry is None:
            keymap_registry = KeymapRegistry(logger_name=KEYMAP_LOGGER)
            if load_defaults:
                load_default_keymaps(keymap_registry)
        self.keymap_registry = keymap_registry
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            keymap_registry, logger_name=KEYMAP_LOGGER
        )
        for name, service in (
            ("keymap_registry", self.keymap_registry),
            ("keymap_resolver", self.keymap_resolver),
            ("keymap_flags", {}),
            ("mode_manager", self),
        ):
            context.extras.setdefault(name, service)

    @property
    def active_mode(self) -> Optional[Mode]:
        return self._modes.get(self._active) if self._active else None

    def register_mode(
        self, mode_cls: Type[Mode], /, *mode_args: object, **mode_kwargs: object
    ) -> Mode:
        """Instantiate and add a mode; the first one registered becomes active."""

        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        target = self._modes.get(name)
        if target is None:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous is target:
            return
        if previous is not None:
            self._deadlines.pop(previous.name, None)
            previous.on_exit(name)
        self._active = name
        self._deadlines.pop(name, None)
        target.on_enter(previous.name if previous else None)
        telemetry.record_event("mode.switch", level="debug", data={"mode": name})

    def handle_key(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with telemetry.span(
            f"mode::{mode.name}",
            component=True,
            metadata={"key": key.token, "mode": mode.name},
        ):
            result = mode.handle_key(key)
        return self._apply(mode, result)

    def feed(self, notation: str) -> List[ModeResult]:
        """Dispatch every key of ``notation`` and return the results in order."""

        return [self.handle_key(key) for key in parse_keys(notation)]

    def pending_deadline(self, mode_name: str) -> Optional[float]:
        return self._deadlines.get(mode_name)

    def process_timeouts(self) -> Dict[str, ModeResult]:
        """Expire every deadline that has passed according to ``clock``."""

        now = self.clock()
        due = [name for name, deadline in self._deadlines.items() if deadline <= now]
        return {name: self._expire(name) for name in due}

    def force_timeout(self, mode_name: Optional[str] = None) -> Dict[str, ModeResult]:
        """Expire pending deadlines now, for one mode or all of them."""

        names = list(self._deadlines) if mode_name is None else [mode_name]
        return {name: self._expire(name) for name in names if name in self._deadlines}

    def _apply(self, mode: Mode, result: ModeResult) -> ModeResult:
        if result.timeout_ms:
            self._deadlines[mode.name] = self.clock() + result.timeout_ms / 1000.0
        else:
            self._deadlines.pop(mode.name, None)
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result

    def _expire(self, mode_name: str) -> ModeResult:
        del self._deadlines[mode_name]
        mode = self._modes[mode_name]
        with telemetry.span(
            f"mode_timeout::{mode_name}", component=True, metadata={"mode": mode_name}
        ):
            result = mode.handle_timeout()
        return self._apply(mode, result)


__all__ = ["KEYMAP_LOGGER", "ModeManager", "parse_keys"]
