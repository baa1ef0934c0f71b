"""Shared fixtures for the decldoc test suite.

The sample program below exercises every page-producing path: nested modules,
a class implementing a trait, same-named members in different classes, an
export set sharing its name with a function, an import, and a datatype.
"""

from __future__ import annotations

import typing as typ

import pytest

from decldoc.config import DocConfig
from decldoc.generator import (
    DocstringProcessor,
    HtmlContentRenderer,
    IndexBuilder,
    LinkResolver,
    PageComposer,
)
from decldoc.generator.file_info import FileInfoFormatter
from decldoc.model import load_declaration_tree
from decldoc.reporting import DocReporter

if typ.TYPE_CHECKING:
    from pathlib import Path

    from decldoc.model import DeclarationTree

SAMPLE_TREE = """\
program: Demo
files:
  - src/demo.dfy
root:
  doc: Root of the demo program.
  declarations:
    - name: M
      kind: module
      doc: |
        Geometry helpers. Everything else builds on these.
      file: src/demo.dfy
      declarations:
        - name: helper
          kind: export-set
          doc: Public surface.
          provides: [helper, Shape]
          reveals: [Pair]
        - name: helper
          kind: function
          doc: Returns its argument. Never fails.
          formals:
            - {name: x, type: int}
          result: int
          requires: ["x > 0"]
          decreases: [x]
        - name: Pair
          kind: type-synonym
          doc: Two integers.
          type: {kind: tuple, args: [int, int]}
        - name: Color
          kind: datatype
          constructors:
            - {name: Red, doc: Pure red.}
            - name: Rgb
              formals:
                - {name: r, type: int}
        - name: Shape
          kind: trait
          doc: Anything with an area.
          members:
            - name: area
              kind: function
              result: real
            - name: label
              kind: const
              type: string
        - name: N
          kind: module
          doc: Nested module.
          declarations:
            - name: C
              kind: class
              doc: A counter. It only goes up.
              type_params: [T]
              parents:
                - {kind: named, name: Shape, target: M.Shape}
              members:
                - name: _ctor
                  kind: constructor
                  formals:
                    - {name: start, type: nat}
                - name: count
                  kind: field
                  type: nat
                - name: f
                  kind: method
                  doc: Computes f. Details.
                  requires: ["count >= 0"]
                  modifies: [this]
                  ensures: ["count == old(count) + 1"]
                  outs:
                    - {name: r, type: {kind: named, name: Pair, target: M.Pair}}
                - name: area
                  kind: function
                  result: real
    - name: A
      kind: module
      declarations:
        - name: X
          kind: class
          members:
            - {name: run, kind: method, doc: Runs X.}
    - name: B
      kind: module
      declarations:
        - name: Y
          kind: class
          members:
            - {name: run, kind: method, doc: Runs Y.}
    - name: Client
      kind: module
      declarations:
        - name: MI
          kind: import
          target: M
          opened: true
          names: [M.helper]
        - name: macro
          kind: iterator
          doc: Not understood by the generator.
"""


@pytest.fixture
def tree_file(tmp_path: Path) -> Path:
    """Write the sample declaration tree to a YAML file."""
    path = tmp_path / "demo.decls.yaml"
    path.write_text(SAMPLE_TREE, encoding="utf-8")
    return path


@pytest.fixture
def sample_tree(tree_file: Path) -> DeclarationTree:
    """Return the sample declaration tree loaded from disk."""
    return load_declaration_tree(tree_file)


@pytest.fixture
def reporter() -> DocReporter:
    return DocReporter()


@pytest.fixture
def resolver(sample_tree: DeclarationTree, reporter: DocReporter) -> LinkResolver:
    return LinkResolver(sample_tree, reporter)


@pytest.fixture
def docs() -> DocstringProcessor:
    return DocstringProcessor(HtmlContentRenderer())


@pytest.fixture
def composer(
    sample_tree: DeclarationTree,
    resolver: LinkResolver,
    docs: DocstringProcessor,
    reporter: DocReporter,
) -> PageComposer:
    """Return a composer wired with a fresh index and default file info."""
    config = DocConfig()
    return PageComposer(
        sample_tree,
        resolver,
        IndexBuilder(),
        docs,
        FileInfoFormatter(config.file_reference, show_modify_time=False),
        reporter,
        program_name="Demo",
    )
