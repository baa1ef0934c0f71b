"""Utility helpers shared by the decldoc configuration loader."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .models import (
    DOC_FORMATS,
    DocConfigError,
    FileReference,
    FileReferenceMode,
)


def parse_file_reference(value: str | None) -> FileReference:
    """Parse a ``--file-names`` value.

    Accepted forms are ``name``, ``none``, ``absolute`` and ``relative:PREFIX``
    (or ``relative=PREFIX``). Anything else falls back to ``name`` with a
    warning.

    Examples
    --------
    >>> parse_file_reference("relative:src").prefix
    PosixPath('src')
    >>> parse_file_reference(None).mode.value
    'name'
    """
    if value is None or value == FileReferenceMode.NAME:
        return FileReference()
    if value == FileReferenceMode.NONE:
        return FileReference(FileReferenceMode.NONE)
    if value == FileReferenceMode.ABSOLUTE:
        return FileReference(FileReferenceMode.ABSOLUTE)
    mode = FileReferenceMode.RELATIVE.value
    if value.startswith(mode) and value[len(mode) : len(mode) + 1] in {":", "="}:
        prefix = value[len(mode) + 1 :]
        return FileReference(FileReferenceMode.RELATIVE, Path(prefix or "."))
    logger.warning("Unrecognized file name mode '{}'; using 'name'", value)
    return FileReference()


def _validate_doc_format(value: object) -> str:
    text = str(value).strip().lower()
    if text not in DOC_FORMATS:
        msg = f"Unsupported doc format '{value}'; expected one of {DOC_FORMATS}."
        raise DocConfigError(msg)
    return text


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: object, key: str) -> bool:
    if isinstance(value, bool):
        return value
    msg = f"Configuration key '{key}' must be a boolean, got {value!r}."
    raise DocConfigError(msg)


__all__ = ["parse_file_reference"]
