"""Map declarations to pages and anchors, and render cross-reference links.

Every declaration has exactly one location: page-owning declarations (modules,
classes, traits and other types that actually have members) live at
the top of their own page; everything else is an anchor on the page of its
nearest page-owning ancestor. The index builder registers entries through
:meth:`LinkResolver.location`, so links and index entries always agree.

Examples
--------
>>> from decldoc.model import build_declaration_tree
>>> from decldoc.reporting import DocReporter
>>> tree = build_declaration_tree({"root": {"declarations": [
...     {"name": "A", "kind": "module", "declarations": [
...         {"name": "X", "kind": "class", "members": [
...             {"name": "run", "kind": "method"}]}]}]}})
>>> resolver = LinkResolver(tree, DocReporter())
>>> resolver.location(tree["A.X.run"])
Location(page='A.X', anchor='run')
>>> resolver.location(tree["A.X"])
Location(page='A.X', anchor=None)
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from decldoc._constants import EXPORT_SET_MARKER, ROOT_DISPLAY_NAME, ROOT_PAGE_NAME
from decldoc.model import (
    TYPE_KINDS,
    Declaration,
    DeclKind,
    TypeRef,
    TypeRefKind,
)

from .markup import escape_text, href, link

if typ.TYPE_CHECKING:
    from decldoc.model import DeclarationTree
    from decldoc.reporting import DocReporter


class DanglingReferenceError(LookupError):
    """Raised when a reference names a declaration missing from the tree."""

    def __init__(self, name: str, context: str | None = None) -> None:
        self.name = name
        self.context = context
        where = f" (referenced from '{context}')" if context else ""
        super().__init__(f"Reference to unknown declaration '{name}'{where}")


@dc.dataclass(frozen=True, slots=True)
class Location:
    """Where a declaration is documented."""

    page: str
    anchor: str | None = None

    @property
    def href(self) -> str:
        return href(self.page, self.anchor)


def owns_page(decl: Declaration) -> bool:
    """Return True when ``decl`` is documented on a page of its own."""
    match decl.kind:
        case DeclKind.MODULE | DeclKind.CLASS | DeclKind.TRAIT:
            return True
        case kind if kind in TYPE_KINDS:
            return bool(decl.children)
        case _:
            return False


class LinkResolver:
    """Resolve declarations and type references into HTML links."""

    def __init__(self, tree: DeclarationTree, reporter: DocReporter) -> None:
        self.tree = tree
        self.reporter = reporter

    def owns_page(self, decl: Declaration) -> bool:
        return owns_page(decl)

    def page_name(self, decl: Declaration) -> str:
        """Return the page name of a page-owning declaration.

        Raises
        ------
        ValueError
            If ``decl`` does not own a page.
        """
        if not owns_page(decl):
            msg = f"'{decl.full_name}' is not documented on its own page."
            raise ValueError(msg)
        return decl.full_name or ROOT_PAGE_NAME

    def display_name(self, decl: Declaration) -> str:
        """Return the unescaped name shown for ``decl`` in headings."""
        if decl.is_root:
            return ROOT_DISPLAY_NAME
        return decl.name

    def owning_page(self, decl: Declaration) -> Declaration:
        """Return the nearest page-owning declaration enclosing ``decl``."""
        current: Declaration | None = decl
        while current is not None:
            if owns_page(current):
                return current
            current = self.tree.parent_of(current)
        return self.tree.root

    def anchor_for(self, decl: Declaration) -> str:
        """Return the in-page anchor of a declaration that does not own a page.

        Export sets live in their own namespace and get the reserved marker
        appended so they never clash with a member of the same name.
        """
        if decl.kind is DeclKind.EXPORT_SET:
            return f"{decl.name}{EXPORT_SET_MARKER}"
        return decl.name

    def location(self, decl: Declaration) -> Location:
        """Return the page and anchor where ``decl`` is documented."""
        if owns_page(decl):
            return Location(self.page_name(decl))
        if decl.kind is DeclKind.EXPORT_SET:
            module = self.tree.get(decl.parent)
            if module is None:
                raise DanglingReferenceError(decl.parent or "", decl.full_name)
            return Location(self.page_name(module), self.anchor_for(decl))
        owner = self.owning_page(decl)
        return Location(self.page_name(owner), self.anchor_for(decl))

    def page_url(self, page: str) -> str:
        return href(page)

    def resolve(self, decl: Declaration, text: str | None = None) -> str:
        """Return a link to wherever ``decl`` is documented.

        Parameters
        ----------
        decl : Declaration
            Link target.
        text : str, optional
            Link markup; defaults to the escaped simple name.

        Returns
        -------
        str
            An ``<a>`` element, or escaped plain text for declarations of an
            unrecognised kind, which have no anchor.
        """
        label = text if text is not None else escape_text(self.display_name(decl))
        if decl.kind is DeclKind.UNRECOGNIZED:
            self.reporter.warning(
                f"Cannot link to declaration of unrecognized kind '{decl.kind_label}'",
                declaration=decl.full_name,
            )
            return label
        target = self.location(decl)
        return link(target.page, label, target.anchor)

    def resolve_name(
        self, full_name: str, text: str | None = None, *, context: str | None = None
    ) -> str:
        """Resolve a qualified name through the arena and link it.

        Raises
        ------
        DanglingReferenceError
            If ``full_name`` is not in the tree.
        """
        decl = self.tree.get(full_name)
        if decl is None:
            raise DanglingReferenceError(full_name, context)
        return self.resolve(decl, text)

    def qualified_name_with_links(
        self, full_name: str, *, also_last: bool = True
    ) -> str:
        """Render ``full_name`` as a breadcrumb of linked path segments.

        Each dotted prefix that names a page-owning declaration links to its
        page; any other prefix renders as plain text. The final segment is left
        unlinked unless ``also_last``.
        """
        if not full_name:
            root = escape_text(ROOT_DISPLAY_NAME)
            return link(ROOT_PAGE_NAME, root) if also_last else root
        segments = full_name.split(".")
        parts: list[str] = []
        for position, segment in enumerate(segments):
            text = escape_text(segment)
            is_last = position == len(segments) - 1
            prefix = ".".join(segments[: position + 1])
            decl = self.tree.get(prefix)
            if decl is None or not owns_page(decl) or (is_last and not also_last):
                parts.append(text)
            else:
                parts.append(self.resolve(decl, text))
        return ".".join(parts)

    def location_with_links(self, target: Location, text: str) -> str:
        """Render the breadcrumb of ``target``'s page followed by ``text``.

        Anchored locations end in ``text`` linked to the anchor; page
        locations simply link every segment of the page name.
        """
        page_path = "" if target.page == ROOT_PAGE_NAME else target.page
        if target.anchor is None:
            return self.qualified_name_with_links(page_path)
        crumbs = self.qualified_name_with_links(page_path)
        return f"{crumbs}.{link(target.page, text, target.anchor)}"

    def type_link(self, ref: TypeRef, *, context: str | None = None) -> str:
        """Render a type reference, linking named types to their declarations.

        Raises
        ------
        DanglingReferenceError
            If a named type refers to a declaration missing from the tree.
        """
        match ref.kind:
            case TypeRefKind.BASIC | TypeRefKind.PARAM:
                return escape_text(ref.name)
            case TypeRefKind.COLLECTION:
                return f"{escape_text(ref.name)}{self._type_args(ref.args, context)}"
            case TypeRefKind.TUPLE:
                return f"({self._type_list(ref.args, context)})"
            case TypeRefKind.ARROW:
                params = self._type_list(ref.args, context)
                arrow = escape_text(ref.name or "->")
                result = (
                    self.type_link(ref.result, context=context) if ref.result else ""
                )
                if len(ref.args) == 1 and ref.args[0].kind is not TypeRefKind.TUPLE:
                    return f"{params} {arrow} {result}"
                return f"({params}) {arrow} {result}"
            case TypeRefKind.NAMED:
                target = self.tree.get(ref.target)
                if target is None:
                    raise DanglingReferenceError(ref.target or ref.name, context)
                name = self.resolve(target, escape_text(target.name))
                return f"{name}{self._type_args(ref.args, context)}"
            case _:
                self.reporter.warning(
                    f"Unrecognized type reference '{ref.name}'", declaration=context
                )
                return escape_text(ref.name)

    def _type_list(self, refs: tuple[TypeRef, ...], context: str | None) -> str:
        return ", ".join(self.type_link(item, context=context) for item in refs)

    def _type_args(self, refs: tuple[TypeRef, ...], context: str | None) -> str:
        if not refs:
            return ""
        return f"&lt;{self._type_list(refs, context)}&gt;"


__all__ = ["DanglingReferenceError", "LinkResolver", "Location", "owns_page"]
