"""Structured logging and profiling on top of telelog.

Output is described by a :class:`TelemetrySettings` value, read from
``ALIGN_ENGINE_*`` environment variables or picked from :data:`PRESETS`, and
turned into a telelog config once. Engine code only uses ``get_logger``,
``record_event`` and ``span``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "ALIGN_ENGINE_"
ROOT_LOGGER = "align_engine"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """What the telelog backend should emit and where."""

    level: str = "INFO"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TelemetrySettings":
        env = os.environ if environ is None else environ

        def flag(name: str) -> bool:
            return env.get(f"{ENV_PREFIX}{name}", "").strip().lower() in _TRUTHY

        return cls(
            level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
            console=not flag("DISABLE_CONSOLE"),
            colored=not flag("NO_COLOR"),
            json=flag("LOG_JSON"),
            log_file=env.get(f"{ENV_PREFIX}LOG_FILE", ""),
            buffered=flag("LOG_BUFFERED"),
            buffer_size=int(env.get(f"{ENV_PREFIX}LOG_BUFFER_SIZE") or 2048),
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
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
        console=False, log_file="align_engine.log", buffered=True
    ),
    # Hosts that draw on the terminal themselves only want errors, off-screen.
    "quiet": TelemetrySettings(level="ERROR", console=False),
}

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Swap the active backend config; cached loggers are rebuilt lazily.

    ``config`` is a ready ``telelog.Config``; ``preset`` names an entry of
    :data:`PRESETS`. With neither, settings come from the environment.
    """

    global _config
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        try:
            settings = PRESETS[preset.lower()]
        except KeyError as exc:
            raise ValueError(f"Unknown preset '{preset}'.") from exc
        config = settings.to_config()
    elif config is None:
        config = TelemetrySettings.from_env().to_config()
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    key = name or ROOT_LOGGER
    logger = _loggers.get(key)
    if logger is None:
        if _config is None:
            configure()
        logger = _loggers[key] = tl.Logger.with_config(key, _config)
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _emit(logger: Any, level: str, message: str, data: Mapping[str, Any]) -> None:
    """Log ``message`` with ``data`` as pairs when the level has a ``*_with`` form."""

    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(k), _text(v)) for k, v in data.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(data)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Collects metadata for the span it was yielded from."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        if self.component_name:
            payload["component"] = self.component_name
        _emit(self.logger, "error", "span::fail", payload)


def _component_name(name: str, component: Optional[str | bool]) -> Optional[str]:
    if component is True:
        return name
    return component if isinstance(component, str) else None


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block under ``name``.

    ``metadata`` is attached as logger context while the block runs.
    ``component=True`` tracks the block as a component called ``name``; a
    string picks another component name. Exceptions are logged and re-raised.
    """

    logger = get_logger(logger_name)
    handle = SpanHandle(
        logger=logger,
        span_name=name,
        component_name=_component_name(name, component),
        metadata={key: _text(value) for key, value in (metadata or {}).items()},
    )
    pushed: Tuple[str, ...] = tuple(handle.metadata)
    for key in pushed:
        logger.add_context(key, handle.metadata[key])
    try:
        with ExitStack() as stack:
            if handle.component_name:
                stack.enter_context(logger.track_component(handle.component_name))
            stack.enter_context(logger.profile(name))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key in pushed:
            logger.remove_context(key)


configure()
logger = get_logger()

__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "logger",
    "record_event",
    "span",
]
