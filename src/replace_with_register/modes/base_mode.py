"""Key events, results, and the shared context handed to every mode."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, DefaultDict, Dict, List, Optional, Tuple, TypeVar

from replace_with_register.buffer import Buffer, RegisterBank
from replace_with_register.keymaps import normalize_key

T = TypeVar("T")
Listener = Callable[[object], None]


@dataclass(frozen=True, slots=True)
class KeyInput:
    key: str
    modifiers: Tuple[str, ...] = ()

    @property
    def token(self) -> str:
        """Keymap token for this key, e.g. ``"ctrl+v"``."""

        if not self.modifiers:
            return self.key
        return normalize_key("+".join([*self.modifiers, self.key]))


@dataclass(slots=True)
class ModeResult:
    """What a mode did with a key.

    ``status`` names the outcome (``"replaced"``, ``"pending"``, ``"miss"``,
    ...); ``switch_to`` asks the manager to change mode afterwards.
    """

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    timeout_ms: Optional[int] = None


class ModeBus:
    """Synchronous publish/subscribe between modes, actions and hosts."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, event: str, callback: Listener) -> None:
        self._listeners[event].append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in tuple(self._listeners.get(event, ())):
            callback(payload)


@dataclass(slots=True)
class ModeContext:
    buffer: Buffer
    registers: RegisterBank
    bus: ModeBus
    extras: Dict[str, object] = field(default_factory=dict)

    @property
    def count(self) -> Optional[int]:
        """Count typed before the running command, ``None`` when absent."""

        value = self.extras.get("count")
        return value if isinstance(value, int) else None

    def service(self, name: str, default: T) -> T:
        value = self.extras.get(name)
        return default if value is None else value  # type: ignore[return-value]


class Mode:
    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(self, previous: Optional[str]) -> None:
        pass

    def on_exit(self, next_mode: Optional[str]) -> None:
        pass

    def handle_key(self, key: KeyInput) -> ModeResult:
        raise NotImplementedError(f"{type(self).__name__} must handle keys")

    def handle_timeout(self) -> ModeResult:
        return ModeResult(consumed=False, status="timeout")
