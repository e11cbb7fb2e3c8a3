"""Call-site metadata: which routine, file, and line invoked a guarded call.

``CallSite.capture()`` reads the interpreter frame stack, the same way
``logging`` resolves ``stacklevel``. Any policy also takes an explicit
``call_site=`` which always wins over capture.

Examples:
    >>> def where():
    ...     return CallSite.capture()
    >>> where().routine
    'where'
"""

from __future__ import annotations

import inspect
import traceback
from dataclasses import dataclass
from types import FrameType

UNKNOWN = "<unknown>"


@dataclass(frozen=True)
class CallSite:
    """Immutable record of a routine name, source location and line."""

    routine: str
    location: str
    line: int

    @classmethod
    def capture(cls, stacklevel: int = 1) -> CallSite:
        """Capture the frame ``stacklevel`` levels up.

        ``stacklevel=1`` is the function that calls ``capture``; ``2`` is its
        caller, and so on. Falls back to ``CallSite.unknown()`` when the stack
        is shallower than requested.
        """
        frame = inspect.currentframe()
        try:
            target: FrameType | None = frame.f_back if frame is not None else None
            for _ in range(stacklevel - 1):
                if target is None:
                    break
                target = target.f_back
            if target is None:
                return cls.unknown()
            return cls.from_frame(target)
        finally:
            # frames hold references to locals
            del frame

    @classmethod
    def from_frame(cls, frame: FrameType) -> CallSite:
        code = frame.f_code
        return cls(code.co_name, code.co_filename, frame.f_lineno)

    @classmethod
    def from_summary(cls, summary: traceback.FrameSummary) -> CallSite:
        return cls(summary.name, summary.filename, summary.lineno or 0)

    @classmethod
    def unknown(cls) -> CallSite:
        return cls(UNKNOWN, UNKNOWN, 0)

    def __str__(self) -> str:
        return f"at {self.routine} in {self.location} at line {self.line}"


__all__ = ["CallSite"]
