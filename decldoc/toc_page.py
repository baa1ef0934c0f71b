"""Table-of-contents page listing every module of the program.

``TocPageBuilder`` renders ``index.html``: one list item per module, nested by
module depth, each with the first sentence of the module's documentation.

>>> from decldoc.generator import TreeWalker
>>> builder = TocPageBuilder(TreeWalker(tree), docs, output_dir=Path("docs"))
>>> builder.run()  # doctest: +SKIP
PosixPath('docs/index.html')
"""

from __future__ import annotations

import typing as typ

from loguru import logger

from ._constants import NAME_INDEX_FILENAME, STYLESHEET_FILENAME, TOC_FILENAME
from .generator.markup import SPACE4, escape_text, link_to_url, smaller
from .templating import build_environment

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from .generator.docstrings import DocstringProcessor
    from .generator.tree_walker import TreeWalker


def program_header(program_name: str | None) -> str:
    """Return the `` for <program>`` suffix used in page headings."""
    return f" for {program_name}" if program_name else ""


class TocPageBuilder:
    """Render the module table of contents."""

    def __init__(
        self,
        walker: TreeWalker,
        docs: DocstringProcessor,
        *,
        output_dir: Path,
        program_name: str | None = None,
        env: Environment | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        walker : TreeWalker
            Traversal supplying the modules in table-of-contents order.
        docs : DocstringProcessor
            Renders the one-sentence module summaries.
        output_dir : Path
            Directory receiving ``index.html``.
        program_name : str, optional
            Program display name appended to the title and heading.
        env : Environment, optional
            Jinja environment; defaults to the package templates.
        """
        self.walker = walker
        self.docs = docs
        self.output_dir = output_dir
        self.program_name = program_name
        self.env = env or build_environment()
        self.template = self.env.get_template("toc_page.jinja")

    def run(self) -> Path:
        """Render and write ``index.html``, returning its path."""
        header = program_header(self.program_name)
        index_link = smaller(link_to_url(NAME_INDEX_FILENAME, "[index]"))
        html = self.template.render(
            title=f"Documentation{header}",
            heading=f"Modules{escape_text(header)}{SPACE4}{index_link}",
            stylesheet=STYLESHEET_FILENAME,
            toc=self.walker.toc_markup(self.walker.modules(), self.docs),
        )
        output_path = self.output_dir / TOC_FILENAME
        logger.debug("Writing {}", output_path)
        output_path.write_text(html, encoding="utf-8")
        return output_path


__all__ = ["TocPageBuilder", "program_header"]
