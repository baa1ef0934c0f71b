"""Unit tests for documentation-comment shortening and rendering.

Usage
-----
Run ``pytest tests/test_docstrings.py -v``.
"""

from __future__ import annotations

import dataclasses as dc

import pytest

from decldoc.generator import DocstringProcessor, HtmlContentRenderer
from decldoc.generator.docstrings import MORE_TEXT


@dc.dataclass(frozen=True)
class _Doc:
    doc: str | None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Adds one. Never overflows.", "Adds one."),
        ("Adds one.\nNever overflows.", "Adds one."),
        ("Adds one.\r\nNever overflows.", "Adds one."),
        ("Version 1.2 is supported", "Version 1.2 is supported"),
        ("Ends with a period.", "Ends with a period."),
        ("", ""),
    ],
)
def test_shorten_cuts_after_first_sentence(text: str, expected: str) -> None:
    assert DocstringProcessor.shorten(text) == expected


@pytest.mark.parametrize(
    "text",
    ["Adds one. Never overflows.", "No boundary", "A.\nB. C.", ""],
)
def test_shorten_is_idempotent(text: str) -> None:
    once = DocstringProcessor.shorten(text)
    assert DocstringProcessor.shorten(once) == once


def test_short_and_more_links_to_details() -> None:
    docs = DocstringProcessor(HtmlContentRenderer())
    rendered = docs.short_and_more(_Doc("Adds one. Never overflows."), "#inc")
    assert rendered == f'Adds one. <a href="#inc">{MORE_TEXT}</a>'


def test_short_and_more_without_continuation() -> None:
    docs = DocstringProcessor(HtmlContentRenderer())
    assert docs.short_and_more(_Doc("  Adds one.  "), "#inc") == "Adds one."


def test_missing_comment_renders_nothing() -> None:
    docs = DocstringProcessor(HtmlContentRenderer())
    assert docs.short_and_more(_Doc(None), "#x") == ""
    assert docs.dash_short(_Doc("   "), "#x") == ""
    assert docs.full(_Doc(None)) == ""


def test_dash_short_no_more_omits_link() -> None:
    docs = DocstringProcessor(HtmlContentRenderer())
    assert docs.dash_short_no_more(_Doc("One. Two.")) == " &mdash; One."


def test_full_renders_markdown_block() -> None:
    docs = DocstringProcessor(HtmlContentRenderer())
    html = docs.full(_Doc("Uses *emphasis*.\n\nSecond paragraph."))
    assert html.startswith('<div class="doctext">')
    assert "<em>emphasis</em>" in html
    assert html.count("<p>") == 2


def test_plain_format_escapes_and_keeps_line_breaks() -> None:
    docs = DocstringProcessor(HtmlContentRenderer(doc_format="plain"))
    html = docs.full(_Doc("a < b\n*not emphasis*"))
    assert "a &lt; b<br>\n*not emphasis*" in html


def test_fenced_code_is_highlighted() -> None:
    docs = DocstringProcessor(HtmlContentRenderer())
    html = docs.full(_Doc("Example:\n\n```dafny\nvar x := 1;\n```\n"))
    assert 'class="codehilite"' in html
    assert 'data-language="dafny"' in html
