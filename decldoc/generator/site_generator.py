"""High-level orchestration of a documentation run.

:class:`DocumentationGenerator` consumes a loaded
:class:`~decldoc.model.DeclarationTree` and a :class:`~decldoc.config.DocConfig`
and writes the whole site: the table of contents, one page per module and per
page-owning type, the global name index and the stylesheet.

A run never raises. Problems preparing the output directory end the run with
:attr:`ExitStatus.SETUP_ERROR`; any failure while composing or writing pages is
logged with its traceback and ends the run with
:attr:`ExitStatus.GENERATION_ERROR`.

Example
-------
>>> from pathlib import Path
>>> from decldoc.config import DocConfig
>>> from decldoc.model import load_declaration_tree
>>> tree = load_declaration_tree(Path("program.decls.yaml"))  # doctest: +SKIP
>>> result = DocumentationGenerator(tree, DocConfig()).run()  # doctest: +SKIP
>>> result.status
<ExitStatus.SUCCESS: 0>
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from loguru import logger

from decldoc._constants import PAGE_FILE_TEMPLATE, STYLESHEET_FILENAME, TOC_FILENAME
from decldoc.config.models import DocConfig
from decldoc.name_index import NameIndexBuilder
from decldoc.reporting import DocReporter
from decldoc.templating import STATIC_DIR, build_environment
from decldoc.toc_page import TocPageBuilder

from .docstrings import DocstringProcessor
from .file_info import FileInfoFormatter
from .index_builder import IndexBuilder
from .link_resolver import LinkResolver
from .page_composer import PageComposer
from .renderer import HtmlContentRenderer
from .tree_walker import TreeWalker

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Template

    from decldoc.model import DeclarationTree

    from .models import PageModel


class ExitStatus(enum.IntEnum):
    """Process exit status of a documentation run."""

    SUCCESS = 0
    SETUP_ERROR = 1
    GENERATION_ERROR = 2


class DocSetupError(RuntimeError):
    """Raised when the output directory cannot be created or written."""


@dc.dataclass(slots=True)
class GenerationResult:
    """Outcome of :meth:`DocumentationGenerator.run`."""

    status: ExitStatus
    written: list[Path] = dc.field(default_factory=list)
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is ExitStatus.SUCCESS


class DocumentationGenerator:
    """Write the HTML documentation of one declaration tree."""

    def __init__(
        self,
        tree: DeclarationTree,
        config: DocConfig | None = None,
        *,
        templates_dir: Path | None = None,
        reporter: DocReporter | None = None,
    ) -> None:
        """Initialize the generator.

        Parameters
        ----------
        tree : DeclarationTree
            Resolved declarations of the program being documented.
        config : DocConfig, optional
            Run options; defaults to :class:`DocConfig` defaults.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        reporter : DocReporter, optional
            Collects warnings and errors; a fresh reporter is created when
            omitted.
        """
        self.tree = tree
        self.config = config or DocConfig()
        self.reporter = reporter or DocReporter()
        self.env = build_environment(templates_dir)
        self.renderer = HtmlContentRenderer(
            self.config.pygments_style, self.config.doc_format
        )

    @property
    def program_name(self) -> str | None:
        return self.config.program_name or self.tree.program_name

    def run(self) -> GenerationResult:
        """Generate every page and report the outcome.

        Returns
        -------
        GenerationResult
            Exit status, files written in order, and the diagnostics recorded
            during the run.
        """
        written: list[Path] = []
        try:
            self.prepare_output_dir()
        except DocSetupError as exc:
            self.reporter.error(str(exc))
            return self._result(ExitStatus.SETUP_ERROR, written)
        try:
            self._generate(written)
        except Exception as exc:  # noqa: BLE001 - a run reports, never raises
            self.reporter.error(
                f"Unexpected exception while generating documentation: {exc}",
                exc=exc,
            )
            return self._result(ExitStatus.GENERATION_ERROR, written)
        logger.info(
            "Generated {} files in {}", len(written), self.config.output_dir
        )
        return self._result(ExitStatus.SUCCESS, written)

    def prepare_output_dir(self) -> Path:
        """Create the output directory and check that it accepts files.

        Raises
        ------
        DocSetupError
            Raised when the directory cannot be created or the table of
            contents file cannot be written into it.
        """
        out_dir = self.config.output_dir
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
            (out_dir / TOC_FILENAME).write_text("", encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot write to output directory '{out_dir}': {exc}"
            raise DocSetupError(msg) from exc
        return out_dir

    def _generate(self, written: list[Path]) -> None:
        out_dir = self.config.output_dir
        docs = DocstringProcessor(self.renderer)
        resolver = LinkResolver(self.tree, self.reporter)
        index = IndexBuilder()
        files = FileInfoFormatter(
            self.config.file_reference,
            show_modify_time=self.config.show_modify_time,
        )
        composer = PageComposer(
            self.tree,
            resolver,
            index,
            docs,
            files,
            self.reporter,
            program_name=self.program_name,
        )
        walker = TreeWalker(self.tree)

        toc = TocPageBuilder(
            walker,
            docs,
            output_dir=out_dir,
            program_name=self.program_name,
            env=self.env,
        )
        written.append(toc.run())

        template = self.env.get_template("decl_page.jinja")
        for page in walker.walk(composer):
            written.append(self._write_page(template, page))

        name_index = NameIndexBuilder(
            index,
            resolver,
            output_dir=out_dir,
            program_name=self.program_name,
            env=self.env,
        )
        written.append(name_index.run())
        written.append(self._write_stylesheet())

    def _write_page(self, template: Template, page: PageModel) -> Path:
        html = template.render(
            page=page,
            title=page.title,
            heading=page.heading,
            stylesheet=STYLESHEET_FILENAME,
        )
        output_path = self.config.output_dir / PAGE_FILE_TEMPLATE.format(
            page=page.page_name
        )
        logger.debug("Writing {}", output_path)
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def _write_stylesheet(self) -> Path:
        base = (STATIC_DIR / STYLESHEET_FILENAME).read_text(encoding="utf-8")
        css = f"{base.rstrip()}\n\n{self.renderer.stylesheet}\n"
        output_path = self.config.output_dir / STYLESHEET_FILENAME
        logger.debug("Writing {}", output_path)
        output_path.write_text(css, encoding="utf-8")
        return output_path

    def _result(self, status: ExitStatus, written: list[Path]) -> GenerationResult:
        return GenerationResult(
            status=status,
            written=written,
            warnings=self.reporter.warnings,
            errors=self.reporter.errors,
        )


__all__ = [
    "DocSetupError",
    "DocumentationGenerator",
    "ExitStatus",
    "GenerationResult",
]
