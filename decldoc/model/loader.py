"""Load a serialized, resolved declaration tree into the typed arena.

The resolver that type-checks the source program emits the tree as YAML or
JSON (JSON is a subset of YAML 1.2, so one loader serves both). Qualified
names are derived from the nesting, so the input never has to repeat them.

Examples
--------
>>> from decldoc.model import build_declaration_tree
>>> tree = build_declaration_tree(
...     {"root": {"declarations": [{"name": "M", "kind": "module"}]}}
... )
>>> tree["M"].kind.value
'module'
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

from loguru import logger
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .declarations import (
    TYPE_KINDS,
    Attribute,
    DatatypeCtor,
    Declaration,
    DeclarationTree,
    DeclarationTreeError,
    DeclKind,
    Formal,
    TypeRef,
    TypeRefKind,
    qualify,
)

ROOT_MODULE_NAME = "_module"
_IMPORT_KINDS = frozenset({DeclKind.IMPORT, DeclKind.ABSTRACT_IMPORT})


def load_declaration_tree(path: Path) -> DeclarationTree:
    """Read a declaration tree document from ``path``.

    Parameters
    ----------
    path : Path
        YAML or JSON file produced by the resolver.

    Returns
    -------
    DeclarationTree
        Arena holding every declaration keyed by its qualified name.

    Raises
    ------
    DeclarationTreeError
        If the file is missing, cannot be parsed or describes a malformed
        tree.
    """
    if not path.exists():
        msg = f"Declaration tree '{path}' not found."
        raise DeclarationTreeError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle)
    except YAMLError as exc:
        msg = f"Declaration tree '{path}' could not be parsed: {exc}"
        raise DeclarationTreeError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Declaration tree '{path}' must contain a mapping."
        raise DeclarationTreeError(msg)
    tree = build_declaration_tree(loaded)
    logger.debug("Loaded {} declarations from {}", len(tree), path)
    return tree


def build_declaration_tree(payload: cabc.Mapping[str, typ.Any]) -> DeclarationTree:
    """Build a :class:`DeclarationTree` from an already parsed document.

    Parameters
    ----------
    payload : Mapping[str, Any]
        Document with a ``root`` module mapping and optional ``program`` and
        ``files`` entries.

    Returns
    -------
    DeclarationTree
        The populated arena.

    Raises
    ------
    DeclarationTreeError
        If the root is missing, a declaration lacks a name, or two
        declarations share a qualified name.
    """
    root_raw = payload.get("root")
    if not isinstance(root_raw, cabc.Mapping):
        msg = "Declaration tree must define a 'root' module mapping."
        raise DeclarationTreeError(msg)
    root_raw = {"name": ROOT_MODULE_NAME, **root_raw, "kind": "module"}

    arena: dict[str, Declaration] = {}
    root = _TreeBuilder(arena).add(root_raw, parent=None)
    files = payload.get("files") or ()
    return DeclarationTree(
        root,
        arena,
        program_name=_optional_str(payload.get("program")),
        files=[str(item) for item in _as_list(files, "files")],
    )


class _TreeBuilder:
    """Recursive converter filling the arena in input order."""

    def __init__(self, arena: dict[str, Declaration]) -> None:
        self.arena = arena

    def add(
        self,
        raw: cabc.Mapping[str, typ.Any],
        *,
        parent: str | None,
        parent_kind: DeclKind = DeclKind.MODULE,
    ) -> Declaration:
        name = _require_name(raw)
        full_name = "" if parent is None else qualify(parent, name)
        if full_name in self.arena:
            msg = f"Duplicate declaration '{full_name}'."
            raise DeclarationTreeError(msg)
        kind, raw_kind = _parse_kind(raw.get("kind"), full_name)
        _check_placement(kind, full_name, parent_kind)
        if kind in _IMPORT_KINDS and not _optional_str(raw.get("target")):
            msg = f"Import '{full_name}' has no target."
            raise DeclarationTreeError(msg)

        children: list[str] = []
        export_sets: list[Declaration] = []
        for child in [
            *_as_list(raw.get("declarations"), full_name),
            *_as_list(raw.get("members"), full_name),
        ]:
            child_raw = _mapping(child)
            if child_raw.get("kind") == DeclKind.EXPORT_SET.value:
                export_name = _require_name(child_raw)
                export_sets.append(
                    _build_declaration(
                        child_raw,
                        name=export_name,
                        kind=DeclKind.EXPORT_SET,
                        raw_kind=None,
                        full_name=qualify(full_name, export_name),
                        parent=full_name,
                    )
                )
            else:
                child_decl = self.add(child_raw, parent=full_name, parent_kind=kind)
                children.append(child_decl.full_name)

        decl = _build_declaration(
            raw,
            name=name,
            kind=kind,
            raw_kind=raw_kind,
            full_name=full_name,
            parent=parent,
            children=tuple(children),
            export_sets=tuple(export_sets),
        )
        self.arena[full_name] = decl
        return decl


def _build_declaration(
    raw: cabc.Mapping[str, typ.Any],
    *,
    name: str,
    kind: DeclKind,
    raw_kind: str | None,
    full_name: str,
    parent: str | None,
    children: tuple[str, ...] = (),
    export_sets: tuple[Declaration, ...] = (),
) -> Declaration:
    declared = raw.get("type")
    if declared is None:
        declared = raw.get("base")
    return Declaration(
        name=name,
        kind=kind,
        full_name=full_name,
        parent=parent,
        doc=_optional_str(raw.get("doc")),
        attributes=tuple(
            _parse_attribute(item)
            for item in _as_list(raw.get("attributes"), full_name)
        ),
        raw_kind=raw_kind,
        file=_optional_str(raw.get("file")),
        ghost=bool(raw.get("ghost", False)),
        static=bool(raw.get("static", False)),
        opaque=bool(raw.get("opaque", False)),
        abstract=bool(raw.get("abstract", False)),
        refines=_optional_str(raw.get("refines")),
        type_params=_str_tuple(raw.get("type_params"), full_name),
        formals=_formals(raw.get("formals"), full_name),
        outs=_formals(raw.get("outs"), full_name),
        result=_optional_type(raw.get("result")),
        declared_type=_optional_type(declared),
        rhs=_optional_str(raw.get("rhs")),
        bound_var=_optional_str(raw.get("var")),
        constraint=_optional_str(raw.get("constraint")),
        witness=_optional_str(raw.get("witness")),
        requires=_str_tuple(raw.get("requires"), full_name),
        modifies=_str_tuple(raw.get("modifies"), full_name),
        reads=_str_tuple(raw.get("reads"), full_name),
        ensures=_str_tuple(raw.get("ensures"), full_name),
        decreases=_str_tuple(raw.get("decreases"), full_name),
        parents=tuple(
            parse_type_ref(item) for item in _as_list(raw.get("parents"), full_name)
        ),
        constructors=tuple(
            _parse_ctor(item, full_name)
            for item in _as_list(raw.get("constructors"), full_name)
        ),
        target=_optional_str(raw.get("target")),
        opened=bool(raw.get("opened", False)),
        export_names=_str_tuple(raw.get("exports"), full_name),
        imported_names=_str_tuple(raw.get("names"), full_name),
        extends=_str_tuple(raw.get("extends"), full_name),
        provides=_str_tuple(raw.get("provides"), full_name),
        reveals=_str_tuple(raw.get("reveals"), full_name),
        provide_all=bool(raw.get("provide_all", False)),
        reveal_all=bool(raw.get("reveal_all", False)),
        children=children,
        export_sets=export_sets,
    )


def _parse_kind(value: object, full_name: str) -> tuple[DeclKind, str | None]:
    if not isinstance(value, str) or not value:
        msg = f"Declaration '{full_name or ROOT_MODULE_NAME}' has no kind."
        raise DeclarationTreeError(msg)
    try:
        return DeclKind(value), None
    except ValueError:
        logger.debug("Declaration '{}' has unrecognized kind '{}'", full_name, value)
        return DeclKind.UNRECOGNIZED, value


def _check_placement(kind: DeclKind, full_name: str, parent_kind: DeclKind) -> None:
    if parent_kind is DeclKind.MODULE:
        return
    if kind is DeclKind.MODULE or kind in TYPE_KINDS:
        msg = (
            f"Declaration '{full_name}' ({kind.label}) must be declared "
            f"directly inside a module, not inside a {parent_kind.label}."
        )
        raise DeclarationTreeError(msg)


def parse_type_ref(value: object) -> TypeRef:
    """Convert a serialized type reference into a :class:`TypeRef`.

    Plain strings are basic types. Mappings carry a ``kind`` tag; unknown tags
    are preserved as :attr:`TypeRefKind.UNRECOGNIZED` with their ``text``.
    """
    match value:
        case str():
            return TypeRef(TypeRefKind.BASIC, name=value)
        case cabc.Mapping():
            pass
        case _:
            msg = f"Invalid type reference: {value!r}"
            raise DeclarationTreeError(msg)

    raw_kind = value.get("kind", "basic")
    args = tuple(parse_type_ref(item) for item in _as_list(value.get("args"), "type"))
    try:
        kind = TypeRefKind(raw_kind)
    except ValueError:
        text = value.get("text") or value.get("name") or str(raw_kind)
        return TypeRef(TypeRefKind.UNRECOGNIZED, name=str(text))

    match kind:
        case TypeRefKind.NAMED:
            target = _optional_str(value.get("target"))
            if target is None:
                msg = f"Named type reference without target: {dict(value)!r}"
                raise DeclarationTreeError(msg)
            return TypeRef(
                kind, name=str(value.get("name", "")), target=target, args=args
            )
        case TypeRefKind.ARROW:
            result = value.get("result")
            if result is None:
                msg = f"Arrow type reference without result: {dict(value)!r}"
                raise DeclarationTreeError(msg)
            return TypeRef(
                kind,
                name=str(value.get("arrow", "->")),
                args=args,
                result=parse_type_ref(result),
            )
        case TypeRefKind.TUPLE:
            return TypeRef(kind, args=args)
        case _:
            return TypeRef(kind, name=str(value.get("name", "")), args=args)


def _parse_attribute(value: object) -> Attribute:
    match value:
        case str():
            return Attribute(value)
        case cabc.Mapping():
            name = _require_name(value)
            return Attribute(name, _str_tuple(value.get("args"), name))
        case _:
            msg = f"Invalid attribute: {value!r}"
            raise DeclarationTreeError(msg)


def _parse_ctor(value: object, owner: str) -> DatatypeCtor:
    raw = _mapping(value)
    name = _require_name(raw)
    return DatatypeCtor(
        name=name,
        formals=_formals(raw.get("formals"), qualify(owner, name)),
        doc=_optional_str(raw.get("doc")),
        ghost=bool(raw.get("ghost", False)),
    )


def _formals(value: object, owner: str) -> tuple[Formal, ...]:
    formals: list[Formal] = []
    for item in _as_list(value, owner):
        raw = _mapping(item)
        if "type" not in raw:
            msg = f"Formal '{raw.get('name')}' of '{owner}' has no type."
            raise DeclarationTreeError(msg)
        formals.append(
            Formal(
                name=str(raw.get("name", "")),
                type=parse_type_ref(raw["type"]),
                modifiers=_str_tuple(raw.get("modifiers"), owner),
                default=_optional_str(raw.get("default")),
            )
        )
    return tuple(formals)


def _optional_type(value: object) -> TypeRef | None:
    return None if value is None else parse_type_ref(value)


def _require_name(raw: object) -> str:
    name = _mapping(raw).get("name")
    if not isinstance(name, str) or not name:
        msg = f"Declaration without a name: {raw!r}"
        raise DeclarationTreeError(msg)
    return name


def _mapping(value: object) -> cabc.Mapping[str, typ.Any]:
    if not isinstance(value, cabc.Mapping):
        msg = f"Expected a mapping, got {value!r}"
        raise DeclarationTreeError(msg)
    return value


def _as_list(value: object, owner: str) -> list[typ.Any]:
    match value:
        case None:
            return []
        case list() | tuple():
            return list(value)
        case _:
            msg = f"Expected a list in '{owner}', got {value!r}"
            raise DeclarationTreeError(msg)


def _str_tuple(value: object, owner: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in _as_list(value, owner))


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


__all__ = [
    "ROOT_MODULE_NAME",
    "build_declaration_tree",
    "load_declaration_tree",
    "parse_type_ref",
]
