"""
Diagnostic message formatting.

Builds the human-readable text that failure policies hand to a ``LogSink`` or
embed in a ``PanicError``. Every function here is pure: same inputs, same
string, no side effects.

Message layout::

    Problem: {problem}                      (or "[{name}] had a problem: ...")
    Detail: {str(error) or full traceback}  (omitted by format_note when no error)
    at {routine} in {location} at line {line}

Manifesto:
    - **Explain, then locate:** What went wrong first, where it was called last
    - **Verbosity is the caller's choice:** ``silent`` trims the detail to the
      exception message, it never changes what a policy does
    - **Cause chains included:** Full detail is rendered by ``traceback`` so
      ``__cause__`` / ``__context__`` chains appear as Python prints them

Examples:
    >>> site = CallSite("load_config", "app.py", 12)
    >>> print(format_error(ValueError("bad port"), "Config", silent=True, call_site=site))
    Problem: Config
    Detail: bad port
    at load_config in app.py at line 12
    <BLANKLINE>

Tags:
    diagnostics, formatting, traceback, safecall
"""

from __future__ import annotations

import traceback
from collections.abc import Sequence

from safecall.callsite import CallSite

STACK_TRACE_HEADER = "===== STACK TRACE ====="


def _header(problem: str, name: str | None) -> str:
    if name is None:
        return f"Problem: {problem}"
    return f"[{name}] had a problem: {problem}"


def _short_detail(error: BaseException) -> str:
    return str(error) or type(error).__name__


def _full_detail(error: BaseException) -> str:
    rendered = traceback.format_exception(type(error), error, error.__traceback__)
    return "".join(rendered).rstrip("\n")


def _assemble(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def format_error(
    error: BaseException,
    problem: str = "",
    name: str | None = None,
    silent: bool = False,
    call_site: CallSite | None = None,
) -> str:
    """Format a diagnostic for a failure.

    Args:
        error: The caught exception.
        problem: Context describing what the caller was trying to do.
        name: Optional logical name, rendered as ``[name]``.
        silent: Append only the exception message instead of the traceback.
        call_site: Where the guarded call happened. Captured from the caller
            when omitted.
    """
    site = call_site or CallSite.capture(stacklevel=2)
    detail = _short_detail(error) if silent else _full_detail(error)
    return _assemble([_header(problem, name), f"Detail: {detail}", str(site)])


def format_note(
    problem: str = "",
    name: str | None = None,
    error: BaseException | None = None,
    call_site: CallSite | None = None,
) -> str:
    """Format a diagnostic that may have no underlying failure.

    Same shape as ``format_error``; the detail line is left out entirely when
    ``error`` is None.
    """
    site = call_site or CallSite.capture(stacklevel=2)
    lines = [_header(problem, name)]
    if error is not None:
        lines.append(f"Detail: {_full_detail(error)}")
    lines.append(str(site))
    return _assemble(lines)


def collect_frames(error: BaseException, limit: int | None = None) -> list[CallSite]:
    """Frames involved in a failure, innermost first.

    The failure's own traceback comes first (from the raising frame back to
    the frame that caught it), then the live stack above the catching frame
    walked outward to the interpreter entry point.
    """
    frames: list[CallSite] = []
    tb = error.__traceback__

    if tb is not None:
        frames.extend(CallSite.from_summary(s) for s in reversed(traceback.extract_tb(tb)))
        outer = tb.tb_frame.f_back
    else:
        outer = None

    if outer is not None:
        frames.extend(CallSite.from_summary(s) for s in reversed(traceback.extract_stack(outer)))

    if limit is not None:
        frames = frames[:limit]
    return frames


def format_stack(frames: Sequence[CallSite], indent: str = "   ") -> list[str]:
    """Render one block per frame, each indented one step further out."""
    blocks = []
    for depth, site in enumerate(frames):
        pad = indent * depth
        blocks.append(
            f"{pad}Routine: {site.routine}\n"
            f"{pad}File: {site.location}\n"
            f"{pad}Line number: {site.line}"
        )
    return blocks


__all__ = [
    "STACK_TRACE_HEADER",
    "format_error",
    "format_note",
    "collect_frames",
    "format_stack",
]
