"""Assemble the content of one module or type page.

A page has a summary section (one line or table row per declaration) and a
details section (anchor, divider, modifiers, signature, attributes, full
comment and specification clauses per declaration). Each category writer
appends to both buffers and registers every declaration it emits with the
:class:`~decldoc.generator.index_builder.IndexBuilder`, using the location the
:class:`~decldoc.generator.link_resolver.LinkResolver` reports for it.

Category order on module pages: export sets, imports, submodules, types,
constants, mutable fields, functions, methods, lemmas. Type pages start with
constructors and end with members inherited from parent traits.
"""

from __future__ import annotations

import typing as typ

from loguru import logger

from decldoc._constants import (
    ANONYMOUS_CTOR_NAME,
    DETAIL_ANCHOR,
    NAME_INDEX_FILENAME,
    TOC_FILENAME,
)
from decldoc.model import (
    MEMBER_KINDS,
    TYPE_KINDS,
    Attribute,
    DatatypeCtor,
    Declaration,
    DeclKind,
    Formal,
    TypeRef,
    TypeRefKind,
)

from .link_resolver import DanglingReferenceError, owns_page
from .markup import (
    BR,
    EOL,
    MDASH,
    SPACE4,
    anchor,
    bold,
    escape_text,
    heading3,
    href,
    link_to_anchor,
    link_to_url,
    row,
    rule_with_text,
    smaller,
    table_end,
    table_start,
    type_formals,
)
from .models import PageModel, TextBuffer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from decldoc.model import DeclarationTree
    from decldoc.reporting import DocReporter

    from .docstrings import DocstringProcessor
    from .file_info import FileInfoFormatter
    from .index_builder import IndexBuilder
    from .link_resolver import LinkResolver

INHERITABLE_KINDS = MEMBER_KINDS - {DeclKind.CONSTRUCTOR}


def format_attributes(attributes: cabc.Sequence[Attribute]) -> str:
    """Render an attribute chain as ``{:name arg, arg}`` groups.

    Examples
    --------
    >>> format_attributes([Attribute("opaque"), Attribute("options", ("x",))])
    '{:opaque} {:options x}'
    """
    parts: list[str] = []
    for attribute in attributes:
        args = ", ".join(escape_text(arg) for arg in attribute.args)
        suffix = f" {args}" if args else ""
        parts.append(f"{{:{escape_text(attribute.name)}{suffix}}}")
    return " ".join(parts)


def format_modifiers(decl: Declaration) -> str:
    """Return the ``ghost static opaque`` modifiers present on ``decl``."""
    flags = (("ghost", decl.ghost), ("static", decl.static), ("opaque", decl.opaque))
    return " ".join(word for word, present in flags if present)


class PageComposer:
    """Build :class:`PageModel` instances for page-owning declarations."""

    def __init__(
        self,
        tree: DeclarationTree,
        resolver: LinkResolver,
        index: IndexBuilder,
        docs: DocstringProcessor,
        files: FileInfoFormatter,
        reporter: DocReporter,
        *,
        program_name: str | None = None,
    ) -> None:
        self.tree = tree
        self.resolver = resolver
        self.index = index
        self.docs = docs
        self.files = files
        self.reporter = reporter
        self.program_name = program_name

    def compose_module(self, module: Declaration) -> PageModel:
        """Compose the page of ``module`` and register its declarations."""
        page = self.resolver.page_name(module)
        display = self.resolver.display_name(module)
        self.index.register(display, page, module.kind_label)

        abstract = "abstract " if module.abstract else ""
        crumbs = self.resolver.qualified_name_with_links(
            module.full_name, also_last=False
        )
        heading = f"{abstract}module {crumbs}{SPACE4}{self._navigation()}"

        intro = self._intro_start(module)
        if module.refines:
            refined = self.resolver.qualified_name_with_links(module.refines)
            intro.append("refines ", refined, BR, EOL)
        intro.append(self._attributes_line(module))
        if module.is_root:
            intro.append(self.files.files_info(self.tree.files))
        else:
            intro.append(self.files.file_info(module.file))

        summary, details = TextBuffer(), self._details_start(module)
        self._write_exports(module, summary, details)
        self._write_imports(module, summary, details)
        self._write_submodules(module, summary, details)
        self._write_types(module, summary, details)
        self._write_members(module, summary, details, constructors=False)
        self._write_unrecognized(module, summary)

        title = f"Module {display}"
        if self.program_name:
            title = f"{title} in program {self.program_name}"
        return PageModel(
            page_name=page,
            title=title,
            heading=heading,
            intro=intro.render(),
            summary=summary.render(),
            details=details.render(),
            summary_heading="module summary",
            details_heading="module details",
        )

    def compose_type(self, decl: Declaration) -> PageModel:
        """Compose the page of a class, trait or other type with members."""
        page = self.resolver.page_name(decl)
        kind = decl.kind_label
        self.index.register(decl.name, page, kind)

        crumbs = self.resolver.qualified_name_with_links(
            decl.full_name, also_last=False
        )
        extends_marker = smaller(" extends ...") if decl.parents else ""
        heading = (
            f"{escape_text(kind)} {crumbs}{type_formals(decl.type_params)}"
            f"{extends_marker}{SPACE4}{self._navigation()}"
        )

        intro = self._intro_start(decl)
        if decl.kind not in {DeclKind.CLASS, DeclKind.TRAIT}:
            intro.append(self._type_definition(decl, on_own_page=True), BR, EOL)
        intro.append(self._extends_line(decl))
        intro.append(self._attributes_line(decl))
        intro.append(self.files.file_info(decl.file))

        summary, details = TextBuffer(), self._details_start(decl)
        self._write_members(decl, summary, details, constructors=True)
        self._write_inherited(decl, summary)
        self._write_unrecognized(decl, summary)

        return PageModel(
            page_name=page,
            title=f"{kind} {decl.full_name}",
            heading=heading,
            intro=intro.render(),
            summary=summary.render(),
            details=details.render(),
            summary_heading=f"{kind} summary",
            details_heading=f"{kind} details",
        )

    def _navigation(self) -> str:
        contents = link_to_url(TOC_FILENAME, "[table of contents]")
        return smaller(contents + link_to_url(NAME_INDEX_FILENAME, "[index]"))

    def _intro_start(self, decl: Declaration) -> TextBuffer:
        intro = TextBuffer()
        short = self.docs.short_and_more(decl, href(None, DETAIL_ANCHOR))
        if short:
            intro.append(short, BR, BR, EOL)
        return intro

    def _details_start(self, decl: Declaration) -> TextBuffer:
        details = TextBuffer()
        details.append(self.docs.full(decl))
        details.append(self._attributes_line(decl))
        return details

    def _attributes_line(self, decl: Declaration) -> str:
        attributes = format_attributes(decl.attributes)
        return f"Attributes: {attributes}{BR}{EOL}" if attributes else ""

    def _children(
        self, owner: Declaration, kinds: cabc.Container[DeclKind]
    ) -> list[Declaration]:
        """Return children of ``owner`` of the given kinds, sorted by name."""
        selected = [child for child in self.tree.children(owner) if child.kind in kinds]
        return sorted(selected, key=lambda child: child.name)

    def _register(self, decl: Declaration, display: str | None = None) -> str:
        """Register ``decl`` in the index and return its in-page anchor."""
        where = self.resolver.location(decl)
        self.index.register(
            display or decl.name, where.page, decl.kind_label, where.anchor
        )
        return where.anchor or ""

    def _write_exports(
        self, module: Declaration, summary: TextBuffer, details: TextBuffer
    ) -> None:
        exports = sorted(module.export_sets, key=lambda export: export.name)
        if not exports:
            return
        summary.append(heading3("Export sets"))
        details.append(heading3("Export sets"))
        module_name = escape_text(module.name)
        for export in exports:
            target = self._register(export)
            name = escape_text(export.name)
            text = f"export {module_name}`{link_to_anchor(target, bold(name))}"
            short = self.docs.dash_short(export, href(None, target))
            summary.append(text, short, BR, EOL)

            details.append(anchor(target), EOL, rule_with_text(name))
            extends = ", ".join(
                self._export_set_link(module, parent) for parent in export.extends
            )
            details.append(text, f" extends {extends}" if extends else "", BR, EOL)
            details.append(SPACE4, "provides", " * :" if export.provide_all else "")
            for ident in sorted(export.provides):
                details.append(" ", self._scoped_link(module, ident))
            details.append(BR, EOL)
            details.append(SPACE4, "reveals", " * :" if export.reveal_all else "")
            for ident in sorted(export.reveals):
                details.append(" ", self._scoped_link(module, ident))
            details.append(BR, EOL)
            details.append(self.docs.full(export))

    def _export_set_link(self, module: Declaration, name: str) -> str:
        export = self.tree.export_set(module, name)
        if export is None:
            return escape_text(name)
        return self.resolver.resolve(export, escape_text(name))

    def _scoped_link(self, module: Declaration, ident: str) -> str:
        """Link a name exported by ``module``; unknown names stay unlinked."""
        text = bold(escape_text(ident))
        decl = self.tree.lookup(module, ident)
        if decl is None:
            logger.debug(
                "Export of '{}' names no declaration of '{}'", ident, module.name
            )
            return text
        return self.resolver.resolve(decl, text)

    def _write_imports(
        self, module: Declaration, summary: TextBuffer, details: TextBuffer
    ) -> None:
        imports = self._children(module, {DeclKind.IMPORT})
        abstract_imports = self._children(module, {DeclKind.ABSTRACT_IMPORT})
        if not imports and not abstract_imports:
            return
        summary.append(heading3("Imports"))
        details.append(heading3("Imports"))
        for imp in imports:
            target = self.tree.get(imp.target)
            if target is None:
                raise DanglingReferenceError(imp.target or imp.name, imp.full_name)
            place = self._register(imp)
            name = escape_text(imp.name)
            path = self.resolver.qualified_name_with_links(target.full_name)
            exports = self._import_export_links(imp, target)
            summary.append(
                f"import {link_to_anchor(place, bold(name))} = {path}`{exports}",
                self.docs.dash_short(imp, href(None, place)),
                BR,
                EOL,
            )

            details.append(anchor(place), EOL, rule_with_text(name))
            opened = "IS " if imp.opened else "IS NOT "
            details.append("import ", bold(opened), "opened", BR, EOL)
            details.append("Names imported:")
            for decl in self._imported(imp):
                details.append(" ", self.resolver.resolve(decl))
            details.append(BR, EOL)
            details.append(self._attributes_line(imp), self.docs.full(imp))

        for imp in abstract_imports:
            place = self._register(imp)
            name = escape_text(imp.name)
            path = self.resolver.qualified_name_with_links(imp.target or "")
            summary.append(
                f"import {link_to_anchor(place, bold(name))} : {path}",
                self.docs.dash_short(imp, href(None, place)),
                BR,
                EOL,
            )
            details.append(anchor(place), EOL, rule_with_text(name))
            details.append("abstract import of ", path, BR, EOL)
            details.append(self._attributes_line(imp), self.docs.full(imp))

    def _import_export_links(self, imp: Declaration, target: Declaration) -> str:
        """Link the export sets an import selects, or the target's default one."""
        if imp.export_names:
            links: list[str] = []
            for name in imp.export_names:
                export = self.tree.export_set(target, name)
                text = escape_text(name)
                links.append(self.resolver.resolve(export, text) if export else text)
            return ", ".join(links)
        default = self.tree.export_set(target, target.name)
        if default is not None:
            return self.resolver.resolve(default, escape_text(target.name))
        return self.resolver.resolve(target, escape_text(target.name))

    def _imported(self, imp: Declaration) -> list[Declaration]:
        """Return the declarations an import makes visible, sorted by name."""
        found: list[Declaration] = []
        for full_name in imp.imported_names:
            decl = self.tree.get(full_name)
            if decl is None:
                raise DanglingReferenceError(full_name, imp.full_name)
            found.append(decl)
        return sorted(found, key=lambda decl: (decl.name, decl.full_name))

    def _write_submodules(
        self, module: Declaration, summary: TextBuffer, details: TextBuffer
    ) -> None:
        submodules = self._children(module, {DeclKind.MODULE})
        if not submodules:
            return
        summary.append(heading3("Submodules"))
        for sub in submodules:
            more = href(self.resolver.page_name(sub), DETAIL_ANCHOR)
            summary.append(
                "module ",
                self.resolver.qualified_name_with_links(sub.full_name),
                self.docs.dash_short(sub, more),
                BR,
                EOL,
            )

    def _write_types(
        self, module: Declaration, summary: TextBuffer, details: TextBuffer
    ) -> None:
        types = self._children(module, TYPE_KINDS)
        if not types:
            return
        summary.append(heading3("Types"), table_start())
        details.append(heading3("Types"))
        for decl in types:
            name = escape_text(decl.name)
            if owns_page(decl):
                # Registered once, on its own page.
                more = href(self.resolver.page_name(decl), DETAIL_ANCHOR)
            else:
                more = href(None, self._register(decl))
            summary.append(
                row(
                    escape_text(decl.kind_label),
                    self.resolver.resolve(decl, bold(name))
                    + type_formals(decl.type_params),
                    self.docs.dash_short(decl, more),
                )
            )

            details.append(anchor(decl.name), EOL, rule_with_text(name))
            details.append(self._type_definition(decl), BR, EOL)
            attributes = format_attributes(decl.attributes)
            if attributes:
                details.append(SPACE4, attributes, BR, EOL)
            details.append(self.docs.full(decl))
        summary.append(table_end())

    def _type_definition(self, decl: Declaration, *, on_own_page: bool = False) -> str:
        """Render the defining line of a type declaration."""
        kind = escape_text(decl.kind_label)
        head = f"{kind} {bold(escape_text(decl.name))}{type_formals(decl.type_params)}"
        separate = f"{MDASH}see {self.resolver.resolve(decl, 'separate page here')}"
        match decl.kind:
            case DeclKind.CLASS | DeclKind.TRAIT:
                return f"{head}{separate}"
            case DeclKind.SUBSET_TYPE:
                body = f"{head}{self._constrained(decl)}"
            case DeclKind.NEWTYPE if decl.bound_var:
                body = f"{head}{self._constrained(decl)}"
            case DeclKind.NEWTYPE | DeclKind.TYPE_SYNONYM:
                body = f"{head} = {self._type(decl.declared_type, decl)}"
            case DeclKind.OPAQUE_TYPE:
                body = head
            case DeclKind.DATATYPE | DeclKind.CODATATYPE:
                body = f"{head}{BR}{EOL}{self._constructor_table(decl)}"
            case _:
                self.reporter.warning(
                    f"Kind of type '{decl.kind_label}' not handled",
                    declaration=decl.full_name,
                )
                body = head
        if owns_page(decl) and not on_own_page:
            return f"{body}{separate}"
        return body

    def _constrained(self, decl: Declaration) -> str:
        var = escape_text(decl.bound_var or "x")
        constraint = escape_text(decl.constraint or "true")
        text = f" = {var}: {self._type(decl.declared_type, decl)} | {constraint}"
        if decl.witness:
            text += f" witness {escape_text(decl.witness)}"
        return text

    def _constructor_table(self, decl: Declaration) -> str:
        rows = [table_start()]
        for ctor in decl.constructors:
            signature = escape_text(ctor.name)
            if ctor.formals:
                signature += f"({self._formals(ctor.formals, decl)})"
            rows.append(
                row(
                    SPACE4,
                    "[ghost]" if ctor.ghost else "",
                    signature,
                    MDASH if ctor.doc and ctor.doc.strip() else "",
                    self._constructor_info(ctor),
                )
            )
        rows.append(table_end())
        return "".join(rows)

    def _constructor_info(self, ctor: DatatypeCtor) -> str:
        text = self.docs.docstring(ctor)
        if not text:
            return ""
        if not self.docs.has_more(text):
            return self.docs.inline(ctor)
        return self.docs.full(ctor)

    def _write_members(
        self,
        owner: Declaration,
        summary: TextBuffer,
        details: TextBuffer,
        *,
        constructors: bool,
    ) -> None:
        if constructors:
            self._write_callables(
                "Constructors", owner, DeclKind.CONSTRUCTOR, summary, details
            )
        self._write_constants(owner, summary, details)
        self._write_fields(owner, summary, details)
        self._write_callables("Functions", owner, DeclKind.FUNCTION, summary, details)
        self._write_callables("Methods", owner, DeclKind.METHOD, summary, details)
        self._write_callables("Lemmas", owner, DeclKind.LEMMA, summary, details)

    def _write_constants(
        self, owner: Declaration, summary: TextBuffer, details: TextBuffer
    ) -> None:
        constants = self._children(owner, {DeclKind.CONST})
        if not constants:
            return
        summary.append(heading3("Constants"))
        details.append(heading3("Constants"))
        for const in constants:
            place = self._register(const)
            name = escape_text(const.name)
            declared = self._type(const.declared_type, const)
            summary.append(
                link_to_anchor(place, bold(name)),
                ": ",
                declared,
                self.docs.dash_short(const, href(None, place)),
                BR,
                EOL,
            )

            self._detail_header(const, place, name, details)
            rhs = f" := {escape_text(const.rhs)}" if const.rhs else ""
            details.append(bold(name), ": ", declared, rhs, BR, EOL)
            self._detail_body(const, details)

    def _write_fields(
        self, owner: Declaration, summary: TextBuffer, details: TextBuffer
    ) -> None:
        fields = self._children(owner, {DeclKind.FIELD})
        if not fields:
            return
        summary.append(heading3("Mutable Fields"), table_start())
        details.append(heading3("Mutable Fields"))
        for field in fields:
            place = self._register(field)
            name = escape_text(field.name)
            declared = self._type(field.declared_type, field)
            summary.append(
                row(
                    link_to_anchor(place, bold(name)),
                    ":",
                    declared,
                    self.docs.dash_short(field, href(None, place)),
                )
            )

            self._detail_header(field, place, name, details)
            details.append(bold(name), ": ", declared, BR, EOL)
            self._detail_body(field, details)
        summary.append(table_end())

    def _write_callables(
        self,
        heading: str,
        owner: Declaration,
        kind: DeclKind,
        summary: TextBuffer,
        details: TextBuffer,
    ) -> None:
        members = self._children(owner, {kind})
        if not members:
            return
        summary.append(heading3(heading))
        details.append(heading3(heading))
        for member in members:
            display = self._callable_display(owner, member)
            place = self._register(member, display)
            name = escape_text(display)
            summary.append(self._signature(member, bold(link_to_anchor(place, name))))
            short = self.docs.dash_short(member, href(None, place))
            if short:
                summary.append(SPACE4, short)
            summary.append(BR, EOL)

            self._detail_header(member, place, name, details)
            details.append(escape_text(member.kind_label), BR, EOL)
            details.append(self._signature(member, bold(name)), BR, EOL)
            self._detail_body(member, details)
            details.append(self._specs(member))

    @staticmethod
    def _callable_display(owner: Declaration, member: Declaration) -> str:
        """Return the shown name; constructors are named after their type."""
        if member.kind is not DeclKind.CONSTRUCTOR:
            return member.name
        if member.name == ANONYMOUS_CTOR_NAME:
            return owner.name
        return f"{owner.name}.{member.name}"

    def _detail_header(
        self, decl: Declaration, place: str, name: str, details: TextBuffer
    ) -> None:
        details.append(anchor(place), EOL, rule_with_text(name))
        modifiers = format_modifiers(decl)
        if modifiers:
            details.append(modifiers, BR, EOL)

    def _detail_body(self, decl: Declaration, details: TextBuffer) -> None:
        attributes = format_attributes(decl.attributes)
        if attributes:
            details.append(SPACE4, attributes, BR, EOL)
        details.append(self.docs.full(decl) or f"{BR}{EOL}")

    def _signature(self, member: Declaration, name: str) -> str:
        """Render ``name<T>(formals)`` plus the result type or out-parameters."""
        formals = self._formals(member.formals, member)
        text = f"{name}{type_formals(member.type_params)}({formals})"
        if member.kind is DeclKind.FUNCTION:
            return f"{text}: {self._type(member.result, member)}"
        if member.outs:
            return f"{text} returns ({self._formals(member.outs, member)})"
        return text

    def _formals(self, formals: cabc.Sequence[Formal], owner: Declaration) -> str:
        rendered: list[str] = []
        for formal in formals:
            modifiers = "".join(f"{escape_text(word)} " for word in formal.modifiers)
            declared = self._type(formal.type, owner)
            text = f"{modifiers}{escape_text(formal.name)}: {declared}"
            if formal.default is not None:
                text += f" := {escape_text(formal.default)}"
            rendered.append(text)
        return ", ".join(rendered)

    def _specs(self, member: Declaration) -> str:
        """Render the requires, modifies/reads, ensures and decreases clauses."""
        lines: list[str] = []
        for keyword, clauses in (
            ("requires", member.requires),
            ("modifies", member.modifies),
            ("reads", member.reads),
            ("ensures", member.ensures),
        ):
            lines.extend(
                f"{SPACE4}{bold(keyword)} {escape_text(clause)}{BR}{EOL}"
                for clause in clauses
            )
        if member.decreases:
            terms = ", ".join(escape_text(term) for term in member.decreases)
            lines.append(f"{SPACE4}{bold('decreases')} {terms}{BR}{EOL}")
        return "".join(lines)

    def _type(self, ref: TypeRef | None, owner: Declaration) -> str:
        if ref is None:
            return ""
        return self.resolver.type_link(ref, context=owner.full_name)

    def _extends_line(self, decl: Declaration) -> str:
        """Render direct parent traits plus the rest of the transitive closure."""
        if not decl.parents:
            return ""
        direct = ", ".join(self._type(parent, decl) for parent in decl.parents)
        line = f"Extends traits: {direct}"
        indirect = self._transitive_parents(decl)
        if indirect:
            rest = ", ".join(self._type(parent, decl) for parent in indirect)
            line += f" [Transitively: {rest}]"
        return f"{line}{BR}{EOL}"

    def _transitive_parents(self, decl: Declaration) -> list[TypeRef]:
        """Return ancestors reached only through other parents, by full name."""
        direct = {self._type_key(parent) for parent in decl.parents}
        seen: set[str] = set()
        found: dict[str, TypeRef] = {}
        todo = list(decl.parents)
        while todo:
            ref = todo.pop(0)
            key = self._type_key(ref)
            if key in seen:
                continue
            seen.add(key)
            if key not in direct:
                found[key] = ref
            parent = self._parent_decl(ref, decl)
            if parent is not None:
                todo.extend(parent.parents)
        return [found[key] for key in sorted(found)]

    def _ancestors(self, decl: Declaration) -> list[Declaration]:
        """Return every parent declaration, direct and transitive, by full name."""
        found: dict[str, Declaration] = {}
        todo = list(decl.parents)
        while todo:
            parent = self._parent_decl(todo.pop(0), decl)
            if parent is None or parent.full_name in found:
                continue
            found[parent.full_name] = parent
            todo.extend(parent.parents)
        return [found[key] for key in sorted(found)]

    def _parent_decl(self, ref: TypeRef, decl: Declaration) -> Declaration | None:
        if ref.kind is not TypeRefKind.NAMED:
            return None
        parent = self.tree.get(ref.target)
        if parent is None:
            raise DanglingReferenceError(ref.target or ref.name, decl.full_name)
        return parent

    @staticmethod
    def _type_key(ref: TypeRef) -> str:
        return ref.target if ref.target is not None else ref.name

    def _write_inherited(self, decl: Declaration, summary: TextBuffer) -> None:
        """List members inherited from parent traits and not overridden."""
        defined = {child.name for child in self.tree.children(decl)}
        lines: list[str] = []
        for parent in self._ancestors(decl):
            members = [
                member
                for member in self._children(parent, INHERITABLE_KINDS)
                if member.name not in defined
            ]
            if not members:
                continue
            defined.update(member.name for member in members)
            links = ", ".join(self.resolver.resolve(member) for member in members)
            owner = self.resolver.resolve(parent)
            kind = escape_text(parent.kind_label)
            lines.append(f"From {kind} {owner}: {links}{BR}{EOL}")
        if lines:
            summary.append(heading3("Inherited members"), *lines)

    def _write_unrecognized(self, owner: Declaration, summary: TextBuffer) -> None:
        others = self._children(owner, {DeclKind.UNRECOGNIZED})
        if not others:
            return
        summary.append(heading3("Other declarations"))
        for decl in others:
            self.reporter.warning(
                f"Declaration kind '{decl.kind_label}' not handled; shown as text",
                declaration=decl.full_name,
            )
            summary.append(
                escape_text(decl.kind_label),
                " ",
                escape_text(decl.name),
                self.docs.dash_short_no_more(decl),
                BR,
                EOL,
            )


__all__ = ["PageComposer", "format_attributes", "format_modifiers"]
