"""Small HTML building blocks shared by every page writer.

All helpers take already-safe markup for their ``text`` arguments; callers
escape raw names with :func:`escape_text` first. Attribute values (hrefs and
ids) are escaped here.

Examples
--------
>>> link("A.X", "run", "run")
'<a href="A.X.html#run">run</a>'
>>> link_to_anchor("helper+", "helper")
'<a href="#helper+">helper</a>'
>>> heading3("Types")
'<div>\\n<h3>Types</h3>\\n</div>\\n'
"""

from __future__ import annotations

from html import escape
from urllib.parse import quote

from decldoc._constants import PAGE_FILE_TEMPLATE

EOL = "\n"
BR = "<br>"
MDASH = " &mdash; "
SPACE4 = "&nbsp;" * 4

_URL_SAFE = "._-~+'!$*()"


def escape_text(text: str) -> str:
    """Escape raw text for inclusion in element content."""
    return escape(text, quote=False)


def escape_attr(text: str) -> str:
    return escape(text, quote=True)


def page_file(page: str) -> str:
    """Return the output filename of ``page``."""
    return PAGE_FILE_TEMPLATE.format(page=page)


def href(page: str | None, anchor: str | None = None) -> str:
    """Build a relative URL for a page and/or in-page anchor.

    Parameters
    ----------
    page : str or None
        Target page name; ``None`` for a same-page fragment.
    anchor : str, optional
        Fragment identifier inside the target page.

    Returns
    -------
    str
        Unescaped URL; attribute escaping happens in the link helpers.
    """
    target = quote(page_file(page), safe=_URL_SAFE) if page is not None else ""
    if anchor:
        target = f"{target}#{quote(anchor, safe=_URL_SAFE)}"
    return target


def link(page: str, text: str, anchor: str | None = None) -> str:
    """Link ``text`` to ``page``, optionally to ``anchor`` within it."""
    return f'<a href="{escape_attr(href(page, anchor))}">{text}</a>'


def link_to_anchor(anchor: str, text: str) -> str:
    """Link ``text`` to ``anchor`` on the current page."""
    return f'<a href="{escape_attr(href(None, anchor))}">{text}</a>'


def link_to_url(url: str, text: str) -> str:
    return f'<a href="{escape_attr(url)}">{text}</a>'


def anchor(name: str) -> str:
    """Return an empty element carrying the fragment id ``name``."""
    return f'<a id="{escape_attr(name)}"></a>'


def heading3(text: str) -> str:
    return f"<div>{EOL}<h3>{text}</h3>{EOL}</div>{EOL}"


def bold(text: str) -> str:
    return f"<b>{text}</b>"


def smaller(text: str) -> str:
    return f'<span class="smaller">{text}</span>'


def indented(text: str) -> str:
    """Wrap a documentation block so it is indented under its heading."""
    return f'<div class="doctext">{EOL}{text}{EOL}</div>{EOL}'


def rule_with_text(text: str) -> str:
    """Return a horizontal divider labelled with ``text``."""
    return f'<div class="rule"><span>{text}</span></div>{EOL}'


def table_start() -> str:
    return f"<table>{EOL}"


def table_end() -> str:
    return f"</table>{EOL}"


def row(*cells: str) -> str:
    """Return one table row whose cells are the given markup fragments."""
    body = "".join(f"<td>{cell}</td>" for cell in cells)
    return f"<tr>{body}</tr>{EOL}"


def list_start() -> str:
    return f"<ul>{EOL}"


def list_end() -> str:
    return f"</ul>{EOL}"


def type_formals(params: tuple[str, ...] | list[str]) -> str:
    """Render declared type parameters as ``&lt;T, U&gt;``."""
    if not params:
        return ""
    return f"&lt;{', '.join(escape_text(param) for param in params)}&gt;"


__all__ = [
    "BR",
    "EOL",
    "MDASH",
    "SPACE4",
    "anchor",
    "bold",
    "escape_attr",
    "escape_text",
    "heading3",
    "href",
    "indented",
    "link",
    "link_to_anchor",
    "link_to_url",
    "list_end",
    "list_start",
    "page_file",
    "row",
    "rule_with_text",
    "smaller",
    "table_end",
    "table_start",
    "type_formals",
]
