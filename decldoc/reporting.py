"""Diagnostics collected while documentation is generated.

Warnings (for example an unrecognised declaration kind) let generation
continue; errors end the run with a non-zero exit status. Both are logged
through loguru as they happen and kept so callers can inspect them afterwards.
"""

from __future__ import annotations

import dataclasses as dc
import enum

from loguru import logger


class Severity(enum.StrEnum):
    WARNING = "warning"
    ERROR = "error"


@dc.dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reported problem, optionally tied to a declaration."""

    severity: Severity
    message: str
    declaration: str | None = None

    def __str__(self) -> str:
        if self.declaration:
            return f"{self.declaration}: {self.message}"
        return self.message


class DocReporter:
    """Log and record warnings and errors raised during a run."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    @property
    def warnings(self) -> tuple[str, ...]:
        """Return the text of every recorded warning, in report order."""
        return self._messages(Severity.WARNING)

    @property
    def errors(self) -> tuple[str, ...]:
        """Return the text of every recorded error, in report order."""
        return self._messages(Severity.ERROR)

    def warning(self, message: str, *, declaration: str | None = None) -> None:
        diagnostic = Diagnostic(Severity.WARNING, message, declaration)
        self._diagnostics.append(diagnostic)
        logger.warning("{}", diagnostic)

    def error(
        self,
        message: str,
        *,
        declaration: str | None = None,
        exc: BaseException | None = None,
    ) -> None:
        """Record an error; ``exc`` adds its traceback to the log record."""
        diagnostic = Diagnostic(Severity.ERROR, message, declaration)
        self._diagnostics.append(diagnostic)
        logger.opt(exception=exc).error("{}", diagnostic)

    def _messages(self, severity: Severity) -> tuple[str, ...]:
        return tuple(
            str(item) for item in self._diagnostics if item.severity is severity
        )


__all__ = ["Diagnostic", "DocReporter", "Severity"]
