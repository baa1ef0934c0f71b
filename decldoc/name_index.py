"""Global alphabetical name index page.

Every declaration registered during the traversal becomes one line of
``nameindex.html``: the name linked to its location, its kind, and the
breadcrumb of the page it lives on.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from loguru import logger

from ._constants import NAME_INDEX_FILENAME, STYLESHEET_FILENAME, TOC_FILENAME
from .generator.link_resolver import Location
from .generator.markup import SPACE4, escape_text, link_to_url, smaller
from .templating import build_environment
from .toc_page import program_header

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from .generator.index_builder import IndexBuilder, IndexEntry
    from .generator.link_resolver import LinkResolver


@dc.dataclass(frozen=True, slots=True)
class IndexRow:
    """Template data for one rendered index entry."""

    href: str
    label: str
    description: str


class NameIndexBuilder:
    """Render ``nameindex.html`` from the entries collected during the traversal."""

    def __init__(
        self,
        index: IndexBuilder,
        resolver: LinkResolver,
        *,
        output_dir: Path,
        program_name: str | None = None,
        env: Environment | None = None,
    ) -> None:
        self.index = index
        self.resolver = resolver
        self.output_dir = output_dir
        self.program_name = program_name
        self.env = env or build_environment()
        self.template = self.env.get_template("name_index.jinja")

    def run(self) -> Path:
        """Build the index, render it and write it; return the output path.

        Notes
        -----
        Building seals the :class:`IndexBuilder`, so this runs once, after
        every page has been composed.
        """
        rows = [self._row(entry) for entry in self.index.build()]
        header = program_header(self.program_name)
        contents_link = smaller(link_to_url(TOC_FILENAME, "[table of contents]"))
        title = "Index"
        if self.program_name:
            title = f"Index for program {self.program_name}"
        html = self.template.render(
            title=title,
            heading=f"Index{escape_text(header)}{SPACE4}{contents_link}",
            stylesheet=STYLESHEET_FILENAME,
            rows=rows,
        )
        output_path = self.output_dir / NAME_INDEX_FILENAME
        logger.debug("Writing {} ({} entries)", output_path, len(rows))
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def _row(self, entry: IndexEntry) -> IndexRow:
        label = escape_text(entry.display_key)
        where = Location(entry.owner_page, entry.anchor)
        crumbs = self.resolver.location_with_links(where, label)
        return IndexRow(
            href=entry.href,
            label=label,
            description=f"{escape_text(entry.kind)} {crumbs}",
        )


__all__ = ["IndexRow", "NameIndexBuilder"]
