"""Log sinks: where diagnostic text goes.

A ``LogSink`` is a name plus one "accept a line of text" callable. Policies
take a sink as an argument instead of looking one up, so the destination
(console, file, structlog, a test list) is always the caller's decision.

The one piece of global state is ``default_sink()``: a console sink created on
first use and shared for the life of the process. Tests that need isolation
pass their own sink rather than touching the default.

Thread safety belongs to the emit callable; the sink adds no locking.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from safecall.logging import get_logger

Emit = Callable[[str], None]


@dataclass(frozen=True)
class LogSink:
    """Named destination for diagnostic text."""

    name: str
    emit: Emit | None = None

    def log(self, message: str) -> None:
        """Forward ``message`` unchanged. No-op when ``emit`` is unset.

        Exceptions raised by ``emit`` propagate to the caller.
        """
        if self.emit is None:
            return
        self.emit(message)


@lru_cache(maxsize=1)
def default_sink() -> LogSink:
    """Process-wide console sink, created once on first use."""
    return LogSink("Console", print)


def structlog_sink(
    name: str = "structlog",
    logger: Any | None = None,
    level: str = "error",
    event: str = "safecall.diagnostic",
) -> LogSink:
    """Sink that forwards each diagnostic as one structlog event.

    The diagnostic text is passed as the ``diagnostic`` field of ``event``,
    logged at ``level`` on ``logger`` (a ``get_logger("safecall")`` logger when
    omitted).
    """
    log = logger if logger is not None else get_logger("safecall")
    method_name = level.lower()

    def emit(message: str) -> None:
        getattr(log, method_name)(event, diagnostic=message)

    return LogSink(name, emit)


def list_sink(name: str = "memory") -> tuple[LogSink, list[str]]:
    """Sink that appends every message to a list; returns ``(sink, lines)``."""
    lines: list[str] = []
    return LogSink(name, lines.append), lines


__all__ = ["Emit", "LogSink", "default_sink", "structlog_sink", "list_sink"]
