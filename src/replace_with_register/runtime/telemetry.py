"""Logging for the replace engine, backed by telelog.

Everything in the package logs through four calls: ``configure``,
``get_logger``, ``record_event`` and ``span``. Settings come from
``REPLACE_WITH_REGISTER_*`` environment variables unless a preset or an
explicit :class:`TelemetrySettings` is handed to ``configure``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Optional, Union

import telelog  # type: ignore[import]

tl: Any = telelog

ENV_PREFIX = "REPLACE_WITH_REGISTER_"
DEFAULT_LOGGER_NAME = "replace_with_register"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class TelemetrySettings:
    level: str = "WARNING"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: Optional[str] = None
    buffered: bool = False
    buffer_size: int = 2048

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level.upper())
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        config.with_json_format(self.json)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(level="DEBUG"),
    "production": TelemetrySettings(
        level="INFO",
        console=False,
        log_file="replace_with_register.log",
        buffered=True,
    ),
    "performance": TelemetrySettings(
        level="DEBUG",
        console=False,
        json=True,
        log_file="replace_with_register-performance.log",
        buffered=True,
    ),
}


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in _TRUTHY


def settings_from_env() -> TelemetrySettings:
    """Read ``REPLACE_WITH_REGISTER_*`` variables into settings."""

    preset = _env("PRESET")
    base = preset_settings(preset) if preset else TelemetrySettings()
    log_file = _env("LOG_FILE") or base.log_file
    if preset:
        return replace(base, log_file=log_file)
    return replace(
        base,
        level=_env("LOG_LEVEL") or base.level,
        console=not _env_flag("DISABLE_CONSOLE"),
        colored=not _env_flag("NO_COLOR"),
        json=_env_flag("LOG_JSON"),
        log_file=log_file,
        buffered=_env_flag("LOG_BUFFERED"),
        buffer_size=int(_env("LOG_BUFFER_SIZE") or base.buffer_size),
    )


def preset_settings(name: str) -> TelemetrySettings:
    key = name.lower()
    if key == "performance_analysis":
        key = "performance"
    try:
        return PRESETS[key]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'. Expected one of {tuple(PRESETS)}."
        ) from None


class _State:
    settings: Optional[TelemetrySettings] = None
    config: Any = None
    loggers: Dict[str, Any] = {}


def configure(
    *,
    settings: Optional[TelemetrySettings] = None,
    preset: Optional[str] = None,
) -> TelemetrySettings:
    """Replace the active configuration and drop cached loggers."""

    if settings is not None and preset is not None:
        raise ValueError("Provide either `settings` or `preset`, not both.")
    if preset is not None:
        settings = preset_settings(preset)
    elif settings is None:
        settings = settings_from_env()

    _State.settings = settings
    _State.config = settings.to_config()
    _State.loggers.clear()
    return settings


def active_settings() -> TelemetrySettings:
    if _State.settings is None:
        configure()
    assert _State.settings is not None
    return _State.settings


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached telelog logger for ``name``."""

    logger_name = name or _env("LOGGER") or DEFAULT_LOGGER_NAME
    logger = _State.loggers.get(logger_name)
    if logger is None:
        active_settings()
        logger = tl.Logger.with_config(logger_name, _State.config)
        _State.loggers[logger_name] = logger
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _log(logger: Any, level: str, message: str, fields: Dict[str, Any]) -> None:
    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(key, _text(value)) for key, value in fields.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {fields}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` as structured fields."""

    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        fields: Dict[str, Any] = {"span": self.name, **self.metadata, "reason": reason}
        if self.component:
            fields["component"] = self.component
        _log(self.logger, "error", "span::fail", fields)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Union[str, bool, None] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, optionally tracking it as a telelog component.

    ``component=True`` tracks the block under ``name``. ``metadata`` is
    attached as logger context for the duration of the block. Exceptions
    are logged as ``span::fail`` and re-raised.
    """

    logger = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    handle = SpanHandle(logger, name, component_name)

    with ExitStack() as stack:
        for key, value in (metadata or {}).items():
            handle.add_metadata(key, value)
            logger.add_context(key, handle.metadata[key])
            stack.callback(logger.remove_context, key)
        if component_name:
            stack.enter_context(logger.track_component(component_name))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "ENV_PREFIX",
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "active_settings",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "settings_from_env",
    "span",
]
