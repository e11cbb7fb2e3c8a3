"""safecall -- error containment for single calls, plus guarded JSON files.

Manifesto:
    Wrapping every risky call in its own try/except means the same four
    lines of boilerplate, inconsistent log messages, and call sites that are
    hard to find afterwards. safecall puts the decision in one word: return a
    fallback, return a flag, pass, panic, or panic with a stack trace. The
    diagnostic always says what failed, why, and where it was called.

Architecture::

    callsite.py      CallSite (routine, location, line) + frame capture
    diagnostics.py   format_error / format_note / stack walk rendering
    sink.py          LogSink + process-wide default console sink
    policies.py      try_or_return / try_or_false / try_or_pass /
                     try_or_panic / try_or_stack_trace, guard, @guarded
    json_store.py    save_json / load_json with overwrite protection
    errors.py        SafeCallError hierarchy
    settings.py      SafeCallSettings (SAFECALL_* environment)
    logging.py       structlog configuration

Quick start::

    from safecall import try_or_return, try_or_panic, save_json, load_json

    config = try_or_return(lambda: load_json("config.json"), {}, context="Load config")
    save_json("out/data.json", {"a": 1})
    value = try_or_panic(lambda: compute(config), context="Compute", name="Worker")
"""

from safecall.callsite import CallSite
from safecall.diagnostics import (
    STACK_TRACE_HEADER,
    collect_frames,
    format_error,
    format_note,
    format_stack,
)
from safecall.errors import (
    DataError,
    DeserializationError,
    ErrorCategory,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PanicError,
    PermissionDeniedError,
    SafeCallError,
    SerializationError,
    categorize_error,
)
from safecall.json_store import load_json, save_json
from safecall.policies import (
    FailurePolicy,
    guard,
    guarded,
    try_or_false,
    try_or_pass,
    try_or_panic,
    try_or_return,
    try_or_stack_trace,
)
from safecall.settings import SafeCallSettings, get_settings
from safecall.sink import LogSink, default_sink, list_sink, structlog_sink

__version__ = "0.1.0"

__all__ = [
    # Call sites and formatting
    "CallSite",
    "STACK_TRACE_HEADER",
    "format_error",
    "format_note",
    "collect_frames",
    "format_stack",
    # Sinks
    "LogSink",
    "default_sink",
    "structlog_sink",
    "list_sink",
    # Policies
    "FailurePolicy",
    "try_or_return",
    "try_or_false",
    "try_or_pass",
    "try_or_panic",
    "try_or_stack_trace",
    "guard",
    "guarded",
    # Persistence
    "save_json",
    "load_json",
    # Errors
    "ErrorCategory",
    "SafeCallError",
    "InvalidArgumentError",
    "PermissionDeniedError",
    "NotFoundError",
    "DataError",
    "SerializationError",
    "DeserializationError",
    "InternalError",
    "PanicError",
    "categorize_error",
    # Settings
    "SafeCallSettings",
    "get_settings",
]
