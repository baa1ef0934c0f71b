"""Page composition and rendering for declaration documentation."""

from .docstrings import DocstringProcessor
from .index_builder import IndexBuilder, IndexEntry
from .link_resolver import DanglingReferenceError, LinkResolver, Location
from .models import PageModel, TextBuffer
from .page_composer import PageComposer
from .renderer import HtmlContentRenderer
from .tree_walker import TreeWalker

__all__ = [
    "DanglingReferenceError",
    "DocstringProcessor",
    "HtmlContentRenderer",
    "IndexBuilder",
    "IndexEntry",
    "LinkResolver",
    "Location",
    "PageComposer",
    "PageModel",
    "TextBuffer",
    "TreeWalker",
]
