"""Jinja environment shared by the page builders."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"


def build_environment(templates_dir: Path | None = None) -> Environment:
    """Return an autoescaping environment loading from ``templates_dir``.

    Page fragments assembled by the generator are already escaped markup and
    are marked ``|safe`` in the templates; everything else is escaped.
    """
    return Environment(
        loader=FileSystemLoader(str(templates_dir or DEFAULT_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


__all__ = ["DEFAULT_TEMPLATES_DIR", "STATIC_DIR", "build_environment"]
