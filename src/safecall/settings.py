"""Environment-driven settings for safecall.

Defaults used when a call does not say otherwise: diagnostic verbosity, the
stack-walk cap of the trace policy, and how JSON files are written. Every
field can be set through a ``SAFECALL_``-prefixed environment variable or a
``.env`` file.

Examples:
    >>> get_settings().json_indent
    2

    With ``SAFECALL_STACK_LIMIT=20`` exported, ``try_or_stack_trace`` logs at
    most 20 frames. Call ``get_settings.cache_clear()`` after changing the
    environment at runtime.

Tags:
    settings, configuration, pydantic, environment, safecall
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SafeCallSettings(BaseSettings):
    """Process-wide defaults for safecall.

    Fields
    ──────
    log_level     : structlog level used by ``configure_logging``
    json_logs     : JSON output (True), console (False), auto-detect (None)
    silent        : default verbosity of policy diagnostics
    stack_limit   : max frames logged by ``try_or_stack_trace`` (None = all)
    json_indent   : indentation of files written by ``save_json``
    atomic_writes : write JSON through a temp file and ``os.replace``
    """

    model_config = SettingsConfigDict(
        env_prefix="SAFECALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Policies ─────────────────────────────────────────────────
    silent: bool = False
    stack_limit: int | None = Field(default=None, ge=1)

    # ── Persistence ──────────────────────────────────────────────
    json_indent: int = Field(default=2, ge=0)
    atomic_writes: bool = True


@lru_cache(maxsize=1)
def get_settings() -> SafeCallSettings:
    """Return a cached SafeCallSettings instance."""
    return SafeCallSettings()


__all__ = ["SafeCallSettings", "get_settings"]
