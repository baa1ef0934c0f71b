"""Cyclopts CLI entrypoint for generating declaration documentation.

The ``decldoc`` console script reads a declaration tree exported as YAML and
writes the HTML documentation site into an output directory. Options may also
come from a ``decldoc.yaml`` file in the working directory or from
``DECLDOC_*`` environment variables; command-line values take precedence.

The process exit status is ``0`` on success, ``1`` when the inputs cannot be
loaded or the output directory cannot be prepared, and ``2`` when generation
fails part way through.

Examples
--------
Generate documentation into the default ``docs`` directory:

>>> from decldoc.cli import main
>>> main(["generate", "program.decls.yaml"])  # doctest: +SKIP

Reference source files relative to a checkout and skip markdown:

>>> from decldoc.cli import app
>>> app(
...     [
...         "generate",
...         "program.decls.yaml",
...         "--file-names",
...         "relative=src",
...         "--doc-format",
...         "plain",
...     ]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from loguru import logger

from ._constants import CONFIG_FILENAME
from .config import DocConfig, DocConfigError, load_doc_config
from .generator.site_generator import DocumentationGenerator, ExitStatus
from .model import DeclarationTree, DeclarationTreeError, load_declaration_tree
from .reporting import DocReporter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

DEFAULT_CONFIG = Path(CONFIG_FILENAME)
LOG_FORMAT = "<level>{level: <8}</level> | {message}"

app = App(name="decldoc", config=cyclopts.config.Env("DECLDOC_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def setup_logging(*, verbose: bool = False) -> None:
    """Route loguru output to stderr at WARNING, or DEBUG when ``verbose``."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format=LOG_FORMAT,
        colorize=None,
    )


def _load_inputs(
    tree_path: Path,
    config_path: Path | None,
    overrides: dict[str, object],
    reporter: DocReporter,
) -> tuple[DeclarationTree, DocConfig] | None:
    try:
        config = load_doc_config(config_path, overrides)
        if config.verbose:
            setup_logging(verbose=True)
        tree = load_declaration_tree(tree_path)
    except (DocConfigError, DeclarationTreeError) as exc:
        reporter.error(str(exc))
        return None
    return tree, config


@app.command(help="Generate HTML documentation from a declaration tree.")
def generate(
    tree: typ.Annotated[
        Path, Parameter(help="Declaration tree YAML exported by the compiler")
    ],
    *,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Directory receiving the pages", env_var="DECLDOC_OUTPUT_DIR"),
    ] = None,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to a decldoc.yaml file", env_var="DECLDOC_CONFIG"),
    ] = None,
    file_names: typ.Annotated[
        str | None,
        Parameter(
            help="Source file references: name, none, absolute or relative=<prefix>",
            env_var="DECLDOC_FILE_NAMES",
        ),
    ] = None,
    show_modify_time: typ.Annotated[
        bool | None,
        Parameter(
            help="Show the last-modified time of source files",
            env_var="DECLDOC_SHOW_MODIFY_TIME",
        ),
    ] = None,
    program_name: typ.Annotated[
        str | None,
        Parameter(help="Program name used in titles", env_var="DECLDOC_PROGRAM_NAME"),
    ] = None,
    doc_format: typ.Annotated[
        str | None,
        Parameter(
            help="Documentation comment format: markdown or plain",
            env_var="DECLDOC_DOC_FORMAT",
        ),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Enable debug logging", env_var="DECLDOC_VERBOSE")
    ] = False,
) -> None:
    """Generate the documentation site for one declaration tree.

    Parameters
    ----------
    tree : Path
        YAML file holding the resolved declarations of the program.
    output_dir : Path or None, optional
        Output directory; defaults to the configured value or ``docs``.
    config : Path or None, optional
        Configuration file. When omitted, ``decldoc.yaml`` in the working
        directory is used if it exists.
    file_names : str or None, optional
        How source files are referenced on declaration pages.
    show_modify_time : bool or None, optional
        Emit a "Last modified" line next to each file reference.
    program_name : str or None, optional
        Program name shown in page titles; overrides the tree's own name.
    doc_format : str or None, optional
        ``markdown`` (default) or ``plain`` documentation comments.
    verbose : bool, optional
        Enable debug logging, including one line per written file.

    Raises
    ------
    SystemExit
        With status ``1`` when the inputs or output directory are unusable
        and ``2`` when generation fails.
    """
    setup_logging(verbose=verbose)
    reporter = DocReporter()
    config_path = config
    if config_path is None and DEFAULT_CONFIG.exists():
        config_path = DEFAULT_CONFIG
    overrides: dict[str, object] = {
        "output_dir": output_dir,
        "file_names": file_names,
        "show_modify_time": show_modify_time,
        "program_name": program_name,
        "doc_format": doc_format,
        "verbose": verbose or None,
    }

    loaded = _load_inputs(tree, config_path, overrides, reporter)
    if loaded is None:
        raise SystemExit(ExitStatus.SETUP_ERROR)
    declaration_tree, doc_config = loaded

    result = DocumentationGenerator(
        declaration_tree, doc_config, reporter=reporter
    ).run()
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    if not result.ok:
        raise SystemExit(result.status)


def main(argv: cabc.Sequence[str] | None = None) -> None:
    """Run the decldoc CLI."""
    app(argv)


if __name__ == "__main__":  # pragma: no cover
    main()
