"""
safecall logging - structlog configuration for the library and its callers.

safecall logs its own operational events (``json_saved``, ``json_loaded``)
through structlog. Diagnostics produced by failure policies do NOT go through
here: they are plain text handed to a ``LogSink``. ``safecall.sink.structlog_sink``
bridges the two when an application wants diagnostics in its structured log
stream.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="safecall")
            ↓
        _processors(service, json_format, add_timestamp):
          1. TimeStamper (iso, optional)
          2. merge_contextvars (whatever the application bound)
          3. add_log_level / add_logger_name
          4. StackInfoRenderer / set_exc_info
          5. service.name
          6. ECS field names (JSON only): @timestamp, log.level, file.path
          7. JSONRenderer, or ConsoleRenderer
            ↓
        stdlib LoggerFactory → handlers installed by basicConfig (or the app)

Examples:
    >>> from safecall.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> logger = get_logger(__name__)
    >>> logger.debug("json_saved", path="out/data.json")

Tags:
    logging, structlog, observability, safecall
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from safecall.settings import SafeCallSettings, get_settings

# event key -> ECS field; ``path`` is what json_store attaches to its events
_ECS_FIELDS = {
    "timestamp": "@timestamp",
    "level": "log.level",
    "path": "file.path",
}


def _service_name(service: str) -> Processor:
    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", service)
        return event_dict

    return processor


def _ecs_fields(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key, ecs_key in _ECS_FIELDS.items():
        if key in event_dict:
            event_dict[ecs_key] = event_dict.pop(key)
    return event_dict


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return number


def _processors(service: str, json_format: bool, add_timestamp: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _service_name(service),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors += [_ecs_fields, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(
    level: str | int = "INFO",
    json_format: bool | None = None,
    service: str = "safecall",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for safecall and the application around it.

    Args:
        level: Level name (DEBUG, INFO, ...) or number. Unknown names raise
            ``ValueError``.
        json_format: True for JSON, False for console, None for JSON unless
            stdout is a tty
        service: Value of the ``service.name`` field
        add_timestamp: Include an ISO ``@timestamp`` / ``timestamp``
    """
    number = _level_number(level)
    if json_format is None:
        json_format = not sys.stdout.isatty()

    structlog.configure(
        processors=_processors(service, json_format, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(number),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=number)


def configure_from_settings(settings: SafeCallSettings | None = None) -> None:
    """Configure logging from ``SAFECALL_LOG_LEVEL`` / ``SAFECALL_JSON_LOGS``."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]
