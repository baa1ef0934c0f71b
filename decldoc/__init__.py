"""Generate cross-linked HTML documentation from a declaration tree.

The ``decldoc`` CLI reads the resolved declarations of a program (exported as
YAML by the compiler front end), and writes one page per module and per
page-owning type together with a table of contents, a global name index and a
stylesheet.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from decldoc import main
>>> main(["generate", "program.decls.yaml"])  # doctest: +SKIP
wrote docs/index.html
>>> from decldoc import app
>>> app.name  # doctest: +SKIP
('decldoc',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
