"""Declaration-tree model consumed by the documentation generator."""

from __future__ import annotations

from .declarations import (
    MEMBER_KINDS,
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
from .loader import (
    ROOT_MODULE_NAME,
    build_declaration_tree,
    load_declaration_tree,
    parse_type_ref,
)

__all__ = [
    "MEMBER_KINDS",
    "ROOT_MODULE_NAME",
    "TYPE_KINDS",
    "Attribute",
    "DatatypeCtor",
    "DeclKind",
    "Declaration",
    "DeclarationTree",
    "DeclarationTreeError",
    "Formal",
    "TypeRef",
    "TypeRefKind",
    "build_declaration_tree",
    "load_declaration_tree",
    "parse_type_ref",
    "qualify",
]
