"""Load and validate decldoc run configuration.

This subpackage merges an optional ``decldoc.yaml`` file with command-line
overrides and produces a typed :class:`DocConfig` that the generator consumes.
The primary entry point is :func:`load_doc_config`.

Examples
--------
>>> from pathlib import Path
>>> from decldoc.config import load_doc_config
>>> config = load_doc_config(Path("decldoc.yaml"))  # doctest: +SKIP
>>> config.output_dir  # doctest: +SKIP
PosixPath('docs')
"""

from .helpers import parse_file_reference
from .loader import load_doc_config
from .models import (
    DEFAULT_OUTPUT_DIR,
    DOC_FORMATS,
    DocConfig,
    DocConfigError,
    FileReference,
    FileReferenceMode,
)

__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "DOC_FORMATS",
    "DocConfig",
    "DocConfigError",
    "FileReference",
    "FileReferenceMode",
    "load_doc_config",
    "parse_file_reference",
]
