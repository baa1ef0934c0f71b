"""Depth-first traversal of the module tree.

Modules are visited in pre-order with siblings sorted by name, so the root
comes first and every module precedes its submodules. The same order drives
page composition, index registration and the table of contents, which keeps
the output deterministic.
"""

from __future__ import annotations

import typing as typ

from decldoc._constants import ROOT_DISPLAY_NAME, ROOT_PAGE_NAME
from decldoc.model import TYPE_KINDS, DeclKind

from .link_resolver import owns_page
from .markup import EOL, escape_text, link, list_end, list_start

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from decldoc.model import Declaration, DeclarationTree

    from .docstrings import DocstringProcessor
    from .models import PageModel
    from .page_composer import PageComposer


def toc_depth(module: Declaration) -> int:
    """Return the nesting depth of ``module`` in the table of contents.

    Examples
    --------
    >>> from decldoc.model import Declaration, DeclKind
    >>> toc_depth(Declaration("_module", DeclKind.MODULE, ""))
    0
    >>> toc_depth(Declaration("N", DeclKind.MODULE, "M.N", parent="M"))
    2
    """
    if not module.full_name:
        return 0
    return module.full_name.count(".") + 1


class TreeWalker:
    """Visit every module and page-owning type of a declaration tree."""

    def __init__(self, tree: DeclarationTree) -> None:
        self.tree = tree

    def modules(self) -> list[Declaration]:
        """Return all modules in pre-order, root first, siblings by name."""
        ordered: list[Declaration] = []
        stack = [self.tree.root]
        while stack:
            module = stack.pop()
            ordered.append(module)
            submodules = [
                child
                for child in self.tree.children(module)
                if child.kind is DeclKind.MODULE
            ]
            stack.extend(sorted(submodules, key=lambda child: child.name, reverse=True))
        return ordered

    def page_types(self, module: Declaration) -> list[Declaration]:
        """Return the types of ``module`` that own a page, sorted by name."""
        types = [
            child
            for child in self.tree.children(module)
            if child.kind in TYPE_KINDS and owns_page(child)
        ]
        return sorted(types, key=lambda child: child.name)

    def walk(self, composer: PageComposer) -> cabc.Iterator[PageModel]:
        """Yield one composed page per module and per page-owning type."""
        for module in self.modules():
            yield composer.compose_module(module)
            for decl in self.page_types(module):
                yield composer.compose_type(decl)

    def toc_markup(
        self, modules: cabc.Sequence[Declaration], docs: DocstringProcessor
    ) -> str:
        """Render the nested module list of the table of contents.

        A deeper module opens a nested ``<ul>`` inside the still-open list item
        of its parent; moving back up closes the nested lists and their items.
        """
        parts = [list_start()]
        depth = 0
        open_item = False
        for module in modules:
            level = toc_depth(module)
            while depth < level:
                if not open_item:
                    parts.append("<li>")
                parts.append(list_start())
                depth += 1
                open_item = False
            while depth > level:
                if open_item:
                    parts.append(f"</li>{EOL}")
                parts.append(list_end())
                depth -= 1
                open_item = True
            if open_item:
                parts.append(f"</li>{EOL}")
            label = escape_text(module.full_name or ROOT_DISPLAY_NAME)
            target = link(module.full_name or ROOT_PAGE_NAME, label)
            parts.append(f"<li>Module {target}{docs.dash_short_no_more(module)}")
            open_item = True
        while depth > 0:
            if open_item:
                parts.append(f"</li>{EOL}")
            parts.append(list_end())
            depth -= 1
            open_item = True
        if open_item:
            parts.append(f"</li>{EOL}")
        parts.append(list_end())
        return "".join(parts)


__all__ = ["TreeWalker", "toc_depth"]
