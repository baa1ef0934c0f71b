"""Typed dataclasses describing decldoc run configuration."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path

DEFAULT_OUTPUT_DIR = Path("docs")
DEFAULT_PYGMENTS_STYLE = "monokai"
DOC_FORMATS = ("markdown", "plain")


class DocConfigError(ValueError):
    """Raised when the run configuration is invalid or incomplete."""


class FileReferenceMode(enum.StrEnum):
    """How source-file names are shown on declaration pages."""

    NAME = "name"
    NONE = "none"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


@dc.dataclass(frozen=True, slots=True)
class FileReference:
    """Source-file display mode; ``prefix`` only applies to ``relative``."""

    mode: FileReferenceMode = FileReferenceMode.NAME
    prefix: Path | None = None


@dc.dataclass(slots=True)
class DocConfig:
    """Options controlling one documentation run.

    Attributes
    ----------
    output_dir : Path
        Directory receiving the generated pages.
    file_reference : FileReference
        How declaration source files are referenced.
    show_modify_time : bool
        Whether "Last modified" lines are emitted next to file references.
    program_name : str or None
        Program display name used in titles; overrides the name recorded in
        the declaration tree.
    doc_format : str
        ``"markdown"`` or ``"plain"``.
    pygments_style : str
        Pygments style for highlighted code in documentation comments.
    verbose : bool
        Enables debug logging.
    """

    output_dir: Path = DEFAULT_OUTPUT_DIR
    file_reference: FileReference = dc.field(default_factory=FileReference)
    show_modify_time: bool = False
    program_name: str | None = None
    doc_format: str = "markdown"
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    verbose: bool = False


__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_PYGMENTS_STYLE",
    "DOC_FORMATS",
    "DocConfig",
    "DocConfigError",
    "FileReference",
    "FileReferenceMode",
]
