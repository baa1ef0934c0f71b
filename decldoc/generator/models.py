"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class TextBuffer:
    """Append-only accumulator for one section of a page.

    Writers append markup fragments in order; :meth:`render` joins them once
    when the page is assembled.
    """

    parts: list[str] = dc.field(default_factory=list)

    def append(self, *chunks: str) -> TextBuffer:
        self.parts.extend(chunk for chunk in chunks if chunk)
        return self

    def render(self) -> str:
        return "".join(self.parts)

    def __bool__(self) -> bool:
        return bool(self.parts)


@dc.dataclass(slots=True)
class PageModel:
    """Structured data passed to the declaration page template.

    Attributes
    ----------
    page_name : str
        Page identifier; the output file is ``<page_name>.html``.
    title : str
        Plain-text document title.
    heading : str
        Markup for the page heading (kind, breadcrumb and navigation links).
    intro : str
        Markup shown under the heading: short comment, refinement and
        extension lines, attributes and source-file information.
    summary : str
        Concatenated summary section markup.
    details : str
        Concatenated details section markup.
    summary_heading : str
        Heading label of the summary section.
    details_heading : str
        Heading label of the details section.
    """

    page_name: str
    title: str
    heading: str
    intro: str
    summary: str
    details: str
    summary_heading: str
    details_heading: str


__all__ = ["PageModel", "TextBuffer"]
