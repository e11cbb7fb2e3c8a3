"""
Failure policies - run a zero-argument operation and decide what a failure means.

Each policy runs the operation exactly once on the caller's thread. On success
it returns the operation's result (or ``True`` / ``None`` for the result-less
policies) and emits nothing. On failure it formats a diagnostic with
``format_error`` and resolves the failure according to the policy.

Manifesto:
    - **Degrade gracefully:** ``try_or_return``, ``try_or_false`` and
      ``try_or_pass`` absorb the failure after logging it
    - **Annotate and propagate:** ``try_or_panic`` raises a ``PanicError``
      carrying the diagnostic, chained to the original exception
    - **Diagnose before propagating:** ``try_or_stack_trace`` logs the
      diagnostic and every frame, then re-raises the original exception
    - **No retries:** One attempt per call

Architecture:
    ::

        caller ──► try_or_*(func, sink=..., context=..., name=..., silent=...)
                        │
                        ├─ func() returns ─────────────► result (nothing logged)
                        │
                        └─ func() raises Exception e
                               │
                               ├─ CallSite (explicit, or captured from caller)
                               ├─ format_error(e, context, name, silent, site)
                               └─ policy:
                                    RETURN_FALLBACK     sink.log(msg); return fallback
                                    RETURN_FLAG         sink.log(msg); return False
                                    PASS_THROUGH        sink.log(msg); return None
                                    RERAISE             raise PanicError(msg) from e
                                    RERAISE_WITH_TRACE  sink.log(msg + frames); raise e

Examples:
    >>> from safecall.sink import list_sink
    >>> sink, lines = list_sink()
    >>> try_or_return(lambda: int("x"), 0, sink=sink, context="Parse port")
    0
    >>> lines[0].startswith("Problem: Parse port")
    True

    >>> try_or_false(lambda: None, sink=sink)
    True

Guardrails:
    ❌ DON'T: Use ``try_or_pass`` around code whose failure the caller must know about
    ✅ DO: Use ``try_or_false`` or ``try_or_panic`` there

    ❌ DON'T: Rely on the default sink for test isolation
    ✅ DO: Pass ``sink=`` explicitly

    Settings (``SAFECALL_SILENT``, ``SAFECALL_STACK_LIMIT``) are resolved before
    the operation runs. Invalid values raise pydantic ``ValidationError`` from
    the policy call itself, outside the protected region, and the operation
    is not run.

Tags:
    error-handling, failure-policy, error-containment, safecall
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from safecall.callsite import CallSite
from safecall.diagnostics import STACK_TRACE_HEADER, collect_frames, format_error, format_stack
from safecall.errors import PanicError
from safecall.settings import get_settings
from safecall.sink import LogSink, default_sink

T = TypeVar("T")


class FailurePolicy(str, Enum):
    """How a caught failure is resolved."""

    RETURN_FALLBACK = "return_fallback"
    RETURN_FLAG = "return_flag"
    PASS_THROUGH = "pass_through"
    RERAISE = "reraise"
    RERAISE_WITH_TRACE = "reraise_with_trace"


def _sink(sink: LogSink | None) -> LogSink:
    return sink if sink is not None else default_sink()


def _silent(silent: bool | None) -> bool:
    return get_settings().silent if silent is None else silent


def try_or_return(
    func: Callable[[], T],
    fallback: T,
    *,
    sink: LogSink | None = None,
    context: str = "",
    name: str | None = None,
    silent: bool | None = None,
    call_site: CallSite | None = None,
) -> T:
    """Return ``func()``, or log the failure and return ``fallback``."""
    silent = _silent(silent)
    try:
        return func()
    except Exception as e:
        site = call_site or CallSite.capture(stacklevel=2)
        _sink(sink).log(format_error(e, context, name, silent, site))
        return fallback


def try_or_false(
    action: Callable[[], Any],
    *,
    sink: LogSink | None = None,
    context: str = "",
    name: str | None = None,
    silent: bool | None = None,
    call_site: CallSite | None = None,
) -> bool:
    """Run ``action``; True if it completed, False (after logging) if it raised."""
    silent = _silent(silent)
    try:
        action()
        return True
    except Exception as e:
        site = call_site or CallSite.capture(stacklevel=2)
        _sink(sink).log(format_error(e, context, name, silent, site))
        return False


def try_or_pass(
    action: Callable[[], Any],
    *,
    sink: LogSink | None = None,
    context: str = "",
    name: str | None = None,
    silent: bool | None = None,
    call_site: CallSite | None = None,
) -> None:
    """Run ``action``; a failure is logged and absorbed."""
    silent = _silent(silent)
    try:
        action()
    except Exception as e:
        site = call_site or CallSite.capture(stacklevel=2)
        _sink(sink).log(format_error(e, context, name, silent, site))


def try_or_panic(
    func: Callable[[], T],
    *,
    sink: LogSink | None = None,
    context: str = "",
    name: str | None = None,
    silent: bool | None = None,
    call_site: CallSite | None = None,
) -> T:
    """Return ``func()``, or raise ``PanicError`` wrapping the failure.

    Nothing is logged: the diagnostic becomes the ``PanicError`` message and
    the original exception is its ``cause`` and ``__cause__``. Also covers
    result-less operations, which simply return None.

    ``sink`` is accepted so every policy takes the same options. It is never
    written to.
    """
    silent = _silent(silent)
    try:
        return func()
    except Exception as e:
        site = call_site or CallSite.capture(stacklevel=2)
        message = format_error(e, context, name, silent, site)
        raise PanicError(message, cause=e, call_site=site) from e


def try_or_stack_trace(
    func: Callable[[], T],
    *,
    sink: LogSink | None = None,
    context: str = "",
    name: str | None = None,
    silent: bool | None = None,
    call_site: CallSite | None = None,
    limit: int | None = None,
) -> T:
    """Return ``func()``, or log the failure plus a stack walk and re-raise it.

    The sink receives the diagnostic, ``STACK_TRACE_HEADER``, then one block
    per frame, innermost first with indentation growing outward. ``limit``
    caps the frame count (defaults to ``settings.stack_limit``, uncapped when
    unset). The original exception object is re-raised, not a wrapper.
    """
    silent = _silent(silent)
    frame_limit = limit if limit is not None else get_settings().stack_limit
    try:
        return func()
    except Exception as e:
        site = call_site or CallSite.capture(stacklevel=2)
        target = _sink(sink)
        target.log(format_error(e, context, name, silent, site))
        target.log(STACK_TRACE_HEADER)

        for block in format_stack(collect_frames(e, frame_limit)):
            target.log(block)
        raise


_DISPATCH: dict[FailurePolicy, Callable[..., Any]] = {
    FailurePolicy.RETURN_FLAG: try_or_false,
    FailurePolicy.PASS_THROUGH: try_or_pass,
    FailurePolicy.RERAISE: try_or_panic,
    FailurePolicy.RERAISE_WITH_TRACE: try_or_stack_trace,
}


def guard(
    policy: FailurePolicy | str,
    func: Callable[[], Any],
    *,
    fallback: Any = None,
    **options: Any,
) -> Any:
    """Run ``func`` under ``policy``.

    ``fallback`` only applies to ``RETURN_FALLBACK``; ``options`` are passed
    to the policy function (``sink``, ``context``, ``name``, ``silent``,
    ``call_site``, and ``limit`` for ``RERAISE_WITH_TRACE``).
    """
    policy = FailurePolicy(policy)
    if options.get("call_site") is None:
        options["call_site"] = CallSite.capture(stacklevel=2)

    if policy is FailurePolicy.RETURN_FALLBACK:
        return try_or_return(func, fallback, **options)
    return _DISPATCH[policy](func, **options)


def guarded(
    policy: FailurePolicy | str,
    *,
    fallback: Any = None,
    **options: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator form of ``guard``: every call of the function runs under ``policy``.

    Example:
        @guarded(FailurePolicy.RETURN_FALLBACK, fallback={}, context="Read profile")
        def read_profile(path):
            return load_json(path)
    """
    policy = FailurePolicy(policy)

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            call_options = dict(options)
            if call_options.get("call_site") is None:
                call_options["call_site"] = CallSite.capture(stacklevel=2)
            return guard(policy, lambda: fn(*args, **kwargs), fallback=fallback, **call_options)

        return wrapper

    return decorator


__all__ = [
    "FailurePolicy",
    "try_or_return",
    "try_or_false",
    "try_or_pass",
    "try_or_panic",
    "try_or_stack_trace",
    "guard",
    "guarded",
]
