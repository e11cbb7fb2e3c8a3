"""
Structured error types for safecall.

Every failure raised by safecall itself is a ``SafeCallError`` subclass. Each
one carries a category, the path it concerns (for persistence errors), and the
underlying exception as ``cause`` so the root cause survives the wrap.

Manifesto:
    - **Typed taxonomy:** One subclass per failure kind, never a bare Exception
    - **Error chaining:** The original exception is kept as ``cause`` and
      ``__cause__``
    - **Serializable:** ``to_dict()`` for structured logs

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                      SafeCallError                         │
        │               (category, path, cause)                      │
        ├───────────────────────────────────────────────────────────┤
        │  InvalidArgumentError   PermissionDeniedError  NotFoundError│
        │  DataError              SerializationError                  │
        │  DeserializationError   InternalError          PanicError   │
        └───────────────────────────────────────────────────────────┘

Examples:
    >>> err = NotFoundError("No file at data.json", path="data.json")
    >>> err.category
    <ErrorCategory.NOT_FOUND: 'NOT_FOUND'>

    >>> try:
    ...     raise OSError("disk full")
    ... except OSError as e:
    ...     err = InternalError("Cannot write", cause=e)
    >>> err.__cause__
    OSError('disk full')

Tags:
    error-handling, exception-hierarchy, error-context, safecall
"""

from __future__ import annotations

from enum import Enum
from os import PathLike
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from safecall.callsite import CallSite


class ErrorCategory(str, Enum):
    """
    Categories used to classify safecall failures.

    Persistence failures map one-to-one onto the first seven categories.
    ``GUARDED_CALL`` marks a failure re-raised by the Reraise policy and
    ``UNKNOWN`` covers exceptions raised outside safecall.
    """

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    PERMISSION = "PERMISSION"
    NOT_FOUND = "NOT_FOUND"
    DATA = "DATA"
    SERIALIZATION = "SERIALIZATION"
    DESERIALIZATION = "DESERIALIZATION"
    INTERNAL = "INTERNAL"
    GUARDED_CALL = "GUARDED_CALL"
    UNKNOWN = "UNKNOWN"


class SafeCallError(Exception):
    """
    Base exception for all safecall errors.

    Subclasses set ``default_category``. Passing ``cause=`` chains the
    underlying exception both as ``self.cause`` and ``__cause__`` so the usual
    traceback rendering shows it.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        path: str | PathLike[str] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.path = str(path) if path is not None else None
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.path is not None:
            result["path"] = self.path
        if self.cause is not None:
            result["cause"] = repr(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# PERSISTENCE ERRORS
# =============================================================================


class InvalidArgumentError(SafeCallError):
    """Caller supplied an unusable argument (e.g. a blank path)."""

    default_category = ErrorCategory.INVALID_ARGUMENT


class PermissionDeniedError(SafeCallError):
    """Refused to overwrite an existing file."""

    default_category = ErrorCategory.PERMISSION


class NotFoundError(SafeCallError):
    """No file exists at the requested path."""

    default_category = ErrorCategory.NOT_FOUND


class DataError(SafeCallError):
    """File content is empty or otherwise unusable."""

    default_category = ErrorCategory.DATA


class SerializationError(SafeCallError):
    """Encoding a value to JSON text failed."""

    default_category = ErrorCategory.SERIALIZATION


class DeserializationError(SafeCallError):
    """Decoding JSON text failed or produced no value."""

    default_category = ErrorCategory.DESERIALIZATION


class InternalError(SafeCallError):
    """I/O, directory creation, or any other unexpected failure."""

    default_category = ErrorCategory.INTERNAL


# =============================================================================
# POLICY ERRORS
# =============================================================================


class PanicError(SafeCallError):
    """
    Raised by ``try_or_panic`` when the wrapped operation fails.

    The message is the full diagnostic text; the original failure is kept as
    ``cause`` so callers can still inspect the root exception.
    """

    default_category = ErrorCategory.GUARDED_CALL

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        call_site: CallSite | None = None,
    ):
        super().__init__(message, cause=cause)
        self.call_site = call_site

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.call_site is not None:
            result["call_site"] = str(self.call_site)
        return result


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, SafeCallError):
        return error.category
    return ErrorCategory.UNKNOWN


__all__ = [
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
]
