"""Load run configuration YAML into a typed :class:`DocConfig`."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .helpers import (
    _as_bool,
    _optional_str,
    _validate_doc_format,
    parse_file_reference,
)
from .models import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PYGMENTS_STYLE,
    DocConfig,
    DocConfigError,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

KNOWN_KEYS = frozenset(
    {
        "output_dir",
        "file_names",
        "show_modify_time",
        "program_name",
        "doc_format",
        "pygments_style",
        "verbose",
    }
)


def load_doc_config(
    path: Path | None = None, overrides: cabc.Mapping[str, object] | None = None
) -> DocConfig:
    """Build the run configuration from an optional YAML file and overrides.

    Parameters
    ----------
    path : Path or None, optional
        YAML file whose keys mirror :class:`DocConfig` (``file_names`` holds
        the file-reference mode string). ``None`` uses built-in defaults.
    overrides : Mapping[str, object] or None, optional
        Values taking precedence over the file, typically command-line
        options. ``None`` values are ignored.

    Returns
    -------
    DocConfig
        The merged configuration.

    Raises
    ------
    DocConfigError
        If the file is missing or malformed, contains unknown keys, or a
        value has the wrong type.

    Examples
    --------
    >>> load_doc_config(overrides={"file_names": "none"}).file_reference.mode.value
    'none'
    """
    raw: dict[str, typ.Any] = _read_config_file(path) if path is not None else {}
    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value

    unknown = sorted(set(raw) - KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}."
        raise DocConfigError(msg)

    return DocConfig(
        output_dir=Path(raw.get("output_dir") or DEFAULT_OUTPUT_DIR),
        file_reference=parse_file_reference(_optional_str(raw.get("file_names"))),
        show_modify_time=_as_bool(
            raw.get("show_modify_time", False), "show_modify_time"
        ),
        program_name=_optional_str(raw.get("program_name")),
        doc_format=_validate_doc_format(raw.get("doc_format", "markdown")),
        pygments_style=(
            _optional_str(raw.get("pygments_style")) or DEFAULT_PYGMENTS_STYLE
        ),
        verbose=_as_bool(raw.get("verbose", False), "verbose"),
    )


def _read_config_file(path: Path) -> dict[str, typ.Any]:
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise DocConfigError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' could not be parsed: {exc}"
        raise DocConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise DocConfigError(msg)
    return {str(key).replace("-", "_"): value for key, value in loaded.items()}


__all__ = ["KNOWN_KEYS", "load_doc_config"]
