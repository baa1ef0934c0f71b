"""Typed model of a resolved declaration tree.

The tree is produced once by an external resolver and never mutated while
documentation is generated. Nodes are stored in an arena keyed by their full
qualified name, so cross-references (type usages, parent traits, import
targets) are plain string lookups rather than object pointers.

Examples
--------
>>> from decldoc.model import DeclKind
>>> DeclKind.FIELD.label
'var'
>>> DeclKind("type-synonym").label
'type synonym'
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class DeclarationTreeError(ValueError):
    """Raised when a serialized declaration tree is malformed."""


class DeclKind(enum.StrEnum):
    """Closed set of declaration kinds understood by the generator."""

    MODULE = "module"
    CLASS = "class"
    TRAIT = "trait"
    DATATYPE = "datatype"
    CODATATYPE = "codatatype"
    NEWTYPE = "newtype"
    TYPE_SYNONYM = "type-synonym"
    SUBSET_TYPE = "subset-type"
    OPAQUE_TYPE = "opaque-type"
    CONST = "const"
    FIELD = "field"
    FUNCTION = "function"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    LEMMA = "lemma"
    EXPORT_SET = "export-set"
    IMPORT = "import"
    ABSTRACT_IMPORT = "abstract-import"
    UNRECOGNIZED = "unrecognized"

    @property
    def label(self) -> str:
        """Return the human-readable kind used in headings and the index."""
        return _KIND_LABELS.get(self, self.value)


_KIND_LABELS: dict[DeclKind, str] = {
    DeclKind.TYPE_SYNONYM: "type synonym",
    DeclKind.SUBSET_TYPE: "subset type",
    DeclKind.OPAQUE_TYPE: "opaque type",
    DeclKind.FIELD: "var",
    DeclKind.EXPORT_SET: "export set",
    DeclKind.ABSTRACT_IMPORT: "abstract import",
}

TYPE_KINDS = frozenset(
    {
        DeclKind.CLASS,
        DeclKind.TRAIT,
        DeclKind.DATATYPE,
        DeclKind.CODATATYPE,
        DeclKind.NEWTYPE,
        DeclKind.TYPE_SYNONYM,
        DeclKind.SUBSET_TYPE,
        DeclKind.OPAQUE_TYPE,
    }
)
MEMBER_KINDS = frozenset(
    {
        DeclKind.CONST,
        DeclKind.FIELD,
        DeclKind.FUNCTION,
        DeclKind.METHOD,
        DeclKind.CONSTRUCTOR,
        DeclKind.LEMMA,
    }
)


class TypeRefKind(enum.StrEnum):
    """Variants of a resolved type reference."""

    BASIC = "basic"
    COLLECTION = "collection"
    TUPLE = "tuple"
    ARROW = "arrow"
    NAMED = "named"
    PARAM = "param"
    UNRECOGNIZED = "unrecognized"


@dc.dataclass(frozen=True, slots=True)
class TypeRef:
    """A resolved type expression.

    Attributes
    ----------
    kind : TypeRefKind
        Variant tag.
    name : str
        Basic type text, collection name (``seq``, ``map`` ...), type
        parameter name, arrow token, or the raw text of an unrecognised
        variant.
    target : str or None
        Full qualified name of the declaration a ``named`` type refers to.
    args : tuple[TypeRef, ...]
        Type arguments, tuple components or arrow argument types.
    result : TypeRef or None
        Result type of an arrow type.
    """

    kind: TypeRefKind
    name: str = ""
    target: str | None = None
    args: tuple[TypeRef, ...] = ()
    result: TypeRef | None = None


@dc.dataclass(frozen=True, slots=True)
class Attribute:
    """One ``{:name args}`` attribute attached to a declaration."""

    name: str
    args: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Formal:
    """Formal parameter of a callable or datatype constructor."""

    name: str
    type: TypeRef
    modifiers: tuple[str, ...] = ()
    default: str | None = None


@dc.dataclass(frozen=True, slots=True)
class DatatypeCtor:
    """Constructor of an inductive or coinductive datatype."""

    name: str
    formals: tuple[Formal, ...] = ()
    doc: str | None = None
    ghost: bool = False


@dc.dataclass(frozen=True, slots=True)
class Declaration:
    """A node of the resolved declaration tree.

    Only the fields relevant to a declaration's kind are populated; the rest
    keep their empty defaults. ``children`` holds the qualified names of the
    ordinary child declarations (arena keys), whereas export sets live in
    their own namespace and are stored inline in ``export_sets``.
    """

    name: str
    kind: DeclKind
    full_name: str
    parent: str | None = None
    doc: str | None = None
    attributes: tuple[Attribute, ...] = ()
    raw_kind: str | None = None
    file: str | None = None
    ghost: bool = False
    static: bool = False
    opaque: bool = False
    abstract: bool = False
    refines: str | None = None
    type_params: tuple[str, ...] = ()
    formals: tuple[Formal, ...] = ()
    outs: tuple[Formal, ...] = ()
    result: TypeRef | None = None
    declared_type: TypeRef | None = None
    rhs: str | None = None
    bound_var: str | None = None
    constraint: str | None = None
    witness: str | None = None
    requires: tuple[str, ...] = ()
    modifies: tuple[str, ...] = ()
    reads: tuple[str, ...] = ()
    ensures: tuple[str, ...] = ()
    decreases: tuple[str, ...] = ()
    parents: tuple[TypeRef, ...] = ()
    constructors: tuple[DatatypeCtor, ...] = ()
    target: str | None = None
    opened: bool = False
    export_names: tuple[str, ...] = ()
    imported_names: tuple[str, ...] = ()
    extends: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()
    reveals: tuple[str, ...] = ()
    provide_all: bool = False
    reveal_all: bool = False
    children: tuple[str, ...] = ()
    export_sets: tuple[Declaration, ...] = ()

    @property
    def is_root(self) -> bool:
        """Return True for the root module of the tree."""
        return self.parent is None and self.kind is DeclKind.MODULE

    @property
    def kind_label(self) -> str:
        """Return the display kind, preserving raw text of unknown kinds."""
        if self.kind is DeclKind.UNRECOGNIZED and self.raw_kind:
            return self.raw_kind
        return self.kind.label


class DeclarationTree:
    """Arena of declarations addressed by full qualified name."""

    def __init__(
        self,
        root: Declaration,
        declarations: cabc.Mapping[str, Declaration],
        *,
        program_name: str | None = None,
        files: cabc.Sequence[str] = (),
    ) -> None:
        self._root = root
        self._declarations = dict(declarations)
        self.program_name = program_name
        self.files = tuple(files)

    @property
    def root(self) -> Declaration:
        """Return the root module."""
        return self._root

    def __len__(self) -> int:
        return len(self._declarations)

    def __iter__(self) -> cabc.Iterator[Declaration]:
        return iter(self._declarations.values())

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._declarations

    def __getitem__(self, full_name: str) -> Declaration:
        return self._declarations[full_name]

    def get(self, full_name: str | None) -> Declaration | None:
        """Return the declaration named ``full_name`` or None."""
        if full_name is None:
            return None
        return self._declarations.get(full_name)

    def parent_of(self, decl: Declaration) -> Declaration | None:
        """Return the enclosing declaration, or None for the root."""
        return self.get(decl.parent)

    def children(self, decl: Declaration) -> list[Declaration]:
        """Return the ordinary child declarations of ``decl`` in input order."""
        return [self._declarations[name] for name in decl.children]

    def export_set(self, module: Declaration, name: str) -> Declaration | None:
        """Return the export set ``name`` declared by ``module``, if any."""
        for export in module.export_sets:
            if export.name == name:
                return export
        return None

    def lookup(self, scope: Declaration, name: str) -> Declaration | None:
        """Resolve a possibly dotted ``name`` relative to ``scope``."""
        return self.get(qualify(scope.full_name, name))


def qualify(prefix: str, name: str) -> str:
    """Join a qualified-name prefix and a name; the root prefix is empty."""
    return f"{prefix}.{name}" if prefix else name


__all__ = [
    "MEMBER_KINDS",
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
    "qualify",
]
