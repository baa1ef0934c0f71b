"""Format the "From file" lines shown under declaration headings."""

from __future__ import annotations

import datetime as dt
import os
import typing as typ
from pathlib import Path

from decldoc.config.models import FileReference, FileReferenceMode

from .markup import BR, EOL, escape_text

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class FileInfoFormatter:
    """Render source-file references according to the configured mode."""

    def __init__(
        self, reference: FileReference | None = None, *, show_modify_time: bool = False
    ) -> None:
        self.reference = reference or FileReference()
        self.show_modify_time = show_modify_time

    def file_reference(self, filename: str) -> str | None:
        """Return the text naming ``filename``, or None when hidden.

        Examples
        --------
        >>> FileInfoFormatter().file_reference("/work/src/a.dfy")
        'a.dfy'
        >>> mode = FileReference(FileReferenceMode.RELATIVE, Path("/work"))
        >>> FileInfoFormatter(mode).file_reference("/work/src/a.dfy")
        'src/a.dfy'
        """
        path = Path(filename)
        match self.reference.mode:
            case FileReferenceMode.NONE:
                return None
            case FileReferenceMode.ABSOLUTE:
                return filename
            case FileReferenceMode.RELATIVE:
                prefix = self.reference.prefix or Path()
                return os.path.relpath(path, prefix)
            case _:
                return path.name

    def file_info(self, filename: str | None) -> str:
        """Return the ``From file`` block for ``filename``, or ``""``."""
        if not filename:
            return ""
        reference = self.file_reference(filename)
        if reference is None:
            return ""
        result = f"From file: {escape_text(reference)}{BR}{EOL}"
        if self.show_modify_time:
            modified = self._modify_time(Path(filename))
            if modified is not None:
                result += f"Last modified: {modified}{BR}{EOL}"
        return result

    def files_info(self, filenames: cabc.Sequence[str]) -> str:
        """Return the source line for a module built from ``filenames``."""
        if self.reference.mode is FileReferenceMode.NONE or not filenames:
            return ""
        if len(filenames) > 1:
            return f"From multiple files{BR}{EOL}"
        return self.file_info(filenames[0])

    @staticmethod
    def _modify_time(path: Path) -> str | None:
        try:
            stamp = path.stat().st_mtime
        except OSError:
            return None
        modified = dt.datetime.fromtimestamp(stamp, dt.UTC)
        return modified.strftime("%Y-%m-%d %H:%M:%S UTC")


__all__ = ["FileInfoFormatter"]
