"""
Guarded JSON persistence - one value per file, never overwritten by accident.

``save_json`` serializes a value to indented UTF-8 JSON and writes it to a
path. It creates missing parent directories and refuses to replace an
existing file unless asked to. ``load_json`` reads the file back, optionally
validating the data into a type. Every failure is raised as a typed
``SafeCallError`` with the underlying exception chained. Nothing is absorbed
here: callers who want graceful degradation wrap these calls in a policy
(``try_or_return(lambda: load_json(p), {})``).

Architecture:
    ::

        save_json(path, value, overwrite=False)
          blank path ................................ InvalidArgumentError
          file exists and not overwrite ............. PermissionDeniedError
          to_jsonable_python + json.dumps raises .... SerializationError
          empty text ................................ InternalError
          no parent directory (root, trailing sep) .. InternalError
          mkdir -p fails ............................ InternalError
          write (temp file + os.replace) fails ...... InternalError

        load_json(path, type_=None)
          blank path ................................ InvalidArgumentError
          no file at path (missing or a directory) .. NotFoundError
          read fails ................................ InternalError
          blank text ................................ DataError
          json.loads fails / null / invalid type_ ... DeserializationError

Persisted layout:
    One file per ``save_json`` call containing the indented JSON of one value.
    No envelope, no header.

Guardrails:
    The existence check and the write are separate steps. Two processes saving
    the same path at once are not coordinated: the last writer wins. Atomic
    writes only guarantee a reader never sees a half-written file.

Tags:
    persistence, json, file-io, safecall
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar, overload

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from safecall.errors import (
    DataError,
    DeserializationError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    SerializationError,
)
from safecall.logging import get_logger
from safecall.settings import get_settings

logger = get_logger(__name__)

T = TypeVar("T")

PathArg = str | os.PathLike[str]


def _checked_path(path: PathArg | None) -> str:
    if path is None:
        raise InvalidArgumentError("Path can't be empty.")
    raw = os.fspath(path)
    if not raw.strip():
        raise InvalidArgumentError("Path can't be empty.", path=raw)
    return raw


def _parent_dir(raw: str) -> Path:
    # A trailing separator or a bare root names a directory, not a file.
    if raw.endswith(("/", os.sep)) or not os.path.basename(os.path.abspath(raw)):
        raise InternalError(f"Can't determine parent directory of {raw}.", path=raw)
    return Path(os.path.dirname(os.path.abspath(raw)))


def _encode(value: Any, indent: int, raw: str) -> str:
    try:
        return json.dumps(to_jsonable_python(value), indent=indent, ensure_ascii=False)
    except Exception as e:
        raise SerializationError(f"Can't serialize: {e}", path=raw, cause=e) from e


def _write_atomic(target: Path, text: str) -> None:
    fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp, target)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def save_json(
    path: PathArg,
    value: Any,
    overwrite: bool = False,
    *,
    indent: int | None = None,
    atomic: bool | None = None,
) -> Path:
    """Serialize ``value`` to indented JSON and write it to ``path``.

    Args:
        path: Destination file. Parent directories are created as needed.
        value: Anything pydantic can turn into JSON data (dicts, lists,
            models, dataclasses, datetimes, ...).
        overwrite: Replace an existing file instead of refusing.
        indent: JSON indentation (defaults to ``settings.json_indent``).
        atomic: Write through a temp file and ``os.replace`` (defaults to
            ``settings.atomic_writes``).

    Returns:
        The path written.
    """
    raw = _checked_path(path)
    target = Path(raw)

    if target.is_file() and not overwrite:
        raise PermissionDeniedError(f"Can't overwrite {raw}.", path=raw)

    settings = get_settings()
    indent = settings.json_indent if indent is None else indent
    atomic = settings.atomic_writes if atomic is None else atomic

    text = _encode(value, indent, raw)
    if not text:
        raise InternalError("Can't make json, serialization produced no text.", path=raw)

    parent = _parent_dir(raw)
    if not parent.is_dir():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InternalError(f"Can't make directory {parent}: {e}", path=raw, cause=e) from e

    try:
        if atomic:
            _write_atomic(target, text)
        else:
            target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise InternalError(f"Can't write json file at {raw}: {e}", path=raw, cause=e) from e

    logger.debug("json_saved", path=raw, chars=len(text), atomic=atomic, overwrite=overwrite)
    return target


@overload
def load_json(path: PathArg) -> Any: ...


@overload
def load_json(path: PathArg, type_: type[T]) -> T: ...


def load_json(path: PathArg, type_: Any = None) -> Any:
    """Read JSON from ``path``; validate it into ``type_`` when given.

    Raises:
        InvalidArgumentError: blank path
        NotFoundError: no regular file at ``path``
        InternalError: the file could not be read
        DataError: the file is empty or whitespace
        DeserializationError: invalid JSON, a ``null`` document, or data
            that does not validate as ``type_``
    """
    raw = _checked_path(path)
    target = Path(raw)

    if not target.is_file():
        raise NotFoundError(f"File does not exist: {raw}", path=raw)

    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InternalError(f"Can't read json at {raw}: {e}", path=raw, cause=e) from e

    if not text.strip():
        raise DataError(f"Can't read json, {raw} is empty.", path=raw)

    try:
        data = json.loads(text)
    except ValueError as e:
        raise DeserializationError(f"Deserialization error: {e}", path=raw, cause=e) from e

    if type_ is not None and data is not None:
        try:
            data = TypeAdapter(type_).validate_python(data)
        except PydanticValidationError as e:
            raise DeserializationError(
                f"Deserialization error: data does not match {type_!r}", path=raw, cause=e
            ) from e

    if data is None:
        raise DeserializationError(f"Can't deserialize {raw}, document is null.", path=raw)

    logger.debug("json_loaded", path=raw, chars=len(text))
    return data


__all__ = ["save_json", "load_json"]
