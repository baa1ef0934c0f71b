"""Render documentation comments into HTML with consistent code styling."""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
SINGLE_PARAGRAPH = re.compile(r"^<p>(.*)</p>$", re.DOTALL)

DocFormat = typ.Literal["markdown", "plain"]


class HtmlContentRenderer:
    """Render documentation text as block or inline HTML.

    Block rendering is used for the details of a declaration, inline rendering
    for the one-line summaries, where a wrapping paragraph would break the
    surrounding table or list layout.
    """

    def __init__(
        self, pygments_style: str = "monokai", doc_format: DocFormat = "markdown"
    ) -> None:
        """Initialize a renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        doc_format : {"markdown", "plain"}, optional
            How documentation comments are interpreted. ``"plain"`` escapes the
            text and keeps its line breaks.
        """
        self.pygments_style = pygments_style
        self.doc_format = doc_format
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render documentation text into block-level HTML."""
        if self.doc_format == "plain":
            return self._plain(text)
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
        ]
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = md.convert(normalized)
        return self._annotate_codehilite(html, normalized)

    def inline(self, text: str) -> str:
        """Render a short documentation fragment without a paragraph wrapper."""
        if self.doc_format == "plain":
            return self._plain(text)
        html = self.markdown(text)
        match = SINGLE_PARAGRAPH.match(html.strip())
        if match and "<p>" not in match.group(1):
            return match.group(1)
        return html

    @staticmethod
    def _plain(text: str) -> str:
        stripped = text.strip()
        if not stripped:
            return ""
        lines = stripped.splitlines()
        return "<br>\n".join(escape(line, quote=False) for line in lines)

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = ["CODE_BLOCK_PATTERN", "DocFormat", "HtmlContentRenderer"]
