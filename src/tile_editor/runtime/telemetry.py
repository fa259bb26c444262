"""telelog wiring for the tile editor.

Sessions, storage and settings report through ``record_event``; every
session edit runs inside ``span`` so telelog profiles it per session.
``configure`` swaps the active config (``development`` or ``production``
preset, otherwise ``TILE_EDITOR_LOG_LEVEL`` / ``TILE_EDITOR_LOG_FILE`` /
``TILE_EDITOR_DISABLE_CONSOLE``).
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "TILE_EDITOR_"
DEFAULT_LOGGER_NAME = "tile_editor"
PRESETS = ("development", "production")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), str(value)) for key, value in data.items()]


def _build_config(preset: Optional[str]) -> Any:
    config = tl.Config()
    log_file = _env("LOG_FILE")
    if preset == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
    elif preset == "production":
        config.with_min_level("INFO")
        config.with_console_output(False)
        config.with_buffering(True)
        log_file = log_file or "tile_editor.log"
    elif preset is None:
        config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())
        disabled = (_env("DISABLE_CONSOLE") or "").lower() in {"1", "true", "yes"}
        config.with_console_output(not disabled)
    else:
        raise ValueError(f"Unknown telemetry preset '{preset}'.")

    if log_file:
        config.with_file_output(log_file)
    config.with_profiling(True)
    return config


def configure(preset: Optional[str] = None) -> None:
    """Rebuild the telelog config and drop cached loggers."""

    global _ACTIVE_CONFIG
    _ACTIVE_CONFIG = _build_config(preset)
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = _build_config(None)
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _level_method(logger: Any, level: str) -> Tuple[Any, bool]:
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        return structured, True
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    method, structured = _level_method(logger, level.lower())
    if structured:
        method(message, _pairs(payload))
    else:
        method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    span_name: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = str(value)

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    component: bool = False,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, tracking it as a telelog component when asked.

    ``metadata`` is logger context for the duration of the block. An
    exception escaping the block is reported with ``SpanHandle.fail`` and
    re-raised.
    """

    log = get_logger()
    context = {key: str(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        log.add_context(key, value)

    with ExitStack() as stack:
        if component:
            stack.enter_context(log.track_component(name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(logger=log, span_name=name, metadata=dict(context))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context:
                log.remove_context(key)


__all__ = [
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
