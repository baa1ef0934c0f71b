"""Documentation-comment helpers: trimming, shortening and summary snippets.

A declaration's summary line shows only the first sentence of its comment.
When the comment continues past that sentence a ``(more…)`` link jumps to the
full text in the details section.

Examples
--------
>>> DocstringProcessor.shorten("Adds one. Never overflows.")
'Adds one.'
>>> DocstringProcessor.shorten("No boundary here")
'No boundary here'
"""

from __future__ import annotations

import re
import typing as typ

from .markup import MDASH, indented, link_to_url

if typ.TYPE_CHECKING:
    from .renderer import HtmlContentRenderer

MORE_TEXT = "(more…)"
_SENTENCE_END = re.compile(r"\.(?: |\r?\n)")


class Documented(typ.Protocol):
    """Anything that may carry a documentation comment."""

    @property
    def doc(self) -> str | None: ...


class DocstringProcessor:
    """Turn raw documentation comments into summary and detail markup."""

    def __init__(self, renderer: HtmlContentRenderer) -> None:
        self.renderer = renderer

    @staticmethod
    def docstring(decl: Documented) -> str:
        """Return the trimmed comment of ``decl``, or ``""`` when it has none."""
        return (decl.doc or "").strip()

    @staticmethod
    def shorten(text: str) -> str:
        """Cut ``text`` after its first sentence.

        The boundary is the first period followed by a space or a line break.
        Text without such a boundary is returned unchanged, which also makes
        the operation idempotent.
        """
        match = _SENTENCE_END.search(text)
        if match is None:
            return text
        return text[: match.start() + 1]

    @classmethod
    def has_more(cls, text: str) -> bool:
        return cls.shorten(text) != text

    def short_and_more(self, decl: Documented, more_href: str) -> str:
        """Render the first sentence of ``decl``'s comment plus a more link.

        Parameters
        ----------
        decl : Documented
            Declaration or constructor whose comment is summarised.
        more_href : str
            URL of the full comment, usually ``#<anchor>`` on the same page.

        Returns
        -------
        str
            Inline markup, or ``""`` when there is no comment.
        """
        text = self.docstring(decl)
        if not text:
            return ""
        short = self.renderer.inline(self.shorten(text))
        if self.has_more(text):
            return f"{short} {link_to_url(more_href, MORE_TEXT)}"
        return short

    def dash_short(self, decl: Documented, more_href: str) -> str:
        """Return ``short_and_more`` preceded by a dash, or ``""``."""
        short = self.short_and_more(decl, more_href)
        return f"{MDASH}{short}" if short else ""

    def dash_short_no_more(self, decl: Documented) -> str:
        """Return the dashed first sentence without a more link."""
        text = self.docstring(decl)
        if not text:
            return ""
        return f"{MDASH}{self.renderer.inline(self.shorten(text))}"

    def inline(self, decl: Documented) -> str:
        """Render the whole comment inline, for short table cells."""
        return self.renderer.inline(self.docstring(decl))

    def full(self, decl: Documented) -> str:
        """Render the whole comment as an indented block, or ``""``."""
        text = self.docstring(decl)
        if not text:
            return ""
        return indented(self.renderer.markdown(text))


__all__ = ["MORE_TEXT", "DocstringProcessor", "Documented"]
