"""Unit tests for loading serialized declaration trees.

These tests cover :func:`decldoc.model.load_declaration_tree` and
:func:`decldoc.model.build_declaration_tree`: qualified-name derivation,
the separate namespace of export sets, unknown kinds, and rejection of
malformed documents.

Usage
-----
Run ``pytest tests/test_model_loader.py -v``. The ``tree_file`` and
``sample_tree`` fixtures come from ``tests/conftest.py``.
"""

from __future__ import annotations

import typing as typ

import pytest

from decldoc.model import (
    ROOT_MODULE_NAME,
    DeclarationTreeError,
    DeclKind,
    TypeRefKind,
    build_declaration_tree,
    load_declaration_tree,
    parse_type_ref,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from decldoc.model import DeclarationTree


def test_root_module_has_empty_full_name(sample_tree: DeclarationTree) -> None:
    """The root is stored under the empty name and carries the program info."""
    root = sample_tree.root
    assert root.full_name == ""
    assert root.name == ROOT_MODULE_NAME
    assert root.is_root
    assert sample_tree.get("") is root
    assert sample_tree.program_name == "Demo"
    assert sample_tree.files == ("src/demo.dfy",)


def test_full_names_follow_nesting(sample_tree: DeclarationTree) -> None:
    """Qualified names are derived from the position in the tree."""
    method = sample_tree["M.N.C.f"]
    assert method.kind is DeclKind.METHOD
    assert method.parent == "M.N.C"
    assert sample_tree.parent_of(method) is sample_tree["M.N.C"]
    assert [child.name for child in sample_tree.children(sample_tree["M.N.C"])] == [
        "_ctor",
        "count",
        "f",
        "area",
    ]


def test_export_sets_live_outside_the_arena(sample_tree: DeclarationTree) -> None:
    """An export set may share its name with an ordinary declaration."""
    module = sample_tree["M"]
    assert sample_tree["M.helper"].kind is DeclKind.FUNCTION
    export = sample_tree.export_set(module, "helper")
    assert export is not None
    assert export.kind is DeclKind.EXPORT_SET
    assert export.provides == ("helper", "Shape")
    assert export.full_name == "M.helper"
    assert sample_tree["M.helper"] is not export


def test_unknown_kind_is_preserved(sample_tree: DeclarationTree) -> None:
    """Kinds outside the closed set load as unrecognized with their raw text."""
    decl = sample_tree["Client.macro"]
    assert decl.kind is DeclKind.UNRECOGNIZED
    assert decl.kind_label == "iterator"


def test_kind_labels_are_human_readable() -> None:
    assert DeclKind.FIELD.label == "var"
    assert DeclKind.TYPE_SYNONYM.label == "type synonym"
    assert DeclKind.METHOD.label == "method"


def test_lookup_resolves_relative_to_scope(sample_tree: DeclarationTree) -> None:
    found = sample_tree.lookup(sample_tree["M"], "N.C")
    assert found is sample_tree["M.N.C"]
    assert sample_tree.lookup(sample_tree["M"], "Missing") is None


def test_duplicate_names_are_rejected() -> None:
    payload = {
        "root": {
            "declarations": [
                {"name": "M", "kind": "module"},
                {"name": "M", "kind": "module"},
            ]
        }
    }
    with pytest.raises(DeclarationTreeError, match="Duplicate declaration 'M'"):
        build_declaration_tree(payload)


def test_missing_root_is_rejected() -> None:
    with pytest.raises(DeclarationTreeError, match="root"):
        build_declaration_tree({"program": "Demo"})


def test_declaration_without_kind_is_rejected() -> None:
    payload = {"root": {"declarations": [{"name": "x"}]}}
    with pytest.raises(DeclarationTreeError, match="has no kind"):
        build_declaration_tree(payload)


def test_missing_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(DeclarationTreeError, match="not found"):
        load_declaration_tree(tmp_path / "absent.yaml")


def test_unparseable_file_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("root: [unterminated\n", encoding="utf-8")
    with pytest.raises(DeclarationTreeError, match="could not be parsed"):
        load_declaration_tree(path)


def test_json_documents_load(tmp_path: Path) -> None:
    """JSON is valid YAML 1.2, so resolver output in JSON loads unchanged."""
    path = tmp_path / "tree.json"
    path.write_text(
        '{"root": {"declarations": [{"name": "M", "kind": "module"}]}}',
        encoding="utf-8",
    )
    assert load_declaration_tree(path)["M"].kind is DeclKind.MODULE


@pytest.mark.parametrize(
    ("raw", "kind", "name"),
    [
        ("int", TypeRefKind.BASIC, "int"),
        ({"kind": "param", "name": "T"}, TypeRefKind.PARAM, "T"),
        (
            {"kind": "collection", "name": "seq", "args": ["int"]},
            TypeRefKind.COLLECTION,
            "seq",
        ),
        (
            {"kind": "refinement", "text": "x | x > 0"},
            TypeRefKind.UNRECOGNIZED,
            "x | x > 0",
        ),
    ],
)
def test_parse_type_ref_variants(
    raw: object, kind: TypeRefKind, name: str
) -> None:
    ref = parse_type_ref(raw)
    assert ref.kind is kind
    assert ref.name == name


def test_named_type_requires_target() -> None:
    with pytest.raises(DeclarationTreeError, match="without target"):
        parse_type_ref({"kind": "named", "name": "Shape"})


def test_arrow_type_requires_result() -> None:
    with pytest.raises(DeclarationTreeError, match="without result"):
        parse_type_ref({"kind": "arrow", "args": ["int"]})


def _module_with(*declarations: dict[str, object]) -> dict[str, object]:
    return {
        "root": {
            "declarations": [
                {"name": "M", "kind": "module", "declarations": list(declarations)}
            ]
        }
    }


@pytest.mark.parametrize(
    ("nested", "label"),
    [
        ({"name": "D", "kind": "class"}, "class"),
        ({"name": "T", "kind": "type-synonym", "type": "int"}, "type synonym"),
        ({"name": "Sub", "kind": "module"}, "module"),
    ],
)
def test_types_and_modules_must_be_declared_in_a_module(
    nested: dict[str, object], label: str
) -> None:
    """Only modules get walked for pages, so nothing page-like may nest deeper."""
    payload = _module_with({"name": "C", "kind": "class", "members": [nested]})
    with pytest.raises(DeclarationTreeError, match="directly inside a module") as err:
        build_declaration_tree(payload)
    assert f"({label})" in str(err.value)
    assert "inside a class" in str(err.value)


def test_members_of_types_are_accepted() -> None:
    tree = build_declaration_tree(
        _module_with(
            {
                "name": "T",
                "kind": "type-synonym",
                "type": "int",
                "members": [{"name": "twice", "kind": "function", "result": "int"}],
            }
        )
    )
    assert tree["M.T.twice"].parent == "M.T"


@pytest.mark.parametrize("kind", ["import", "abstract-import"])
def test_imports_require_a_target(kind: str) -> None:
    with pytest.raises(DeclarationTreeError, match="'M.I' has no target"):
        build_declaration_tree(_module_with({"name": "I", "kind": kind}))
