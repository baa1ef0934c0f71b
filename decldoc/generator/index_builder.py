"""Collect entries for the global alphabetical name index.

Entries are keyed by ``(display_key, ordinal, owner_page)``. The ordinal is the
number of entries registered before, so two declarations that share a name
and a page (overloads across scopes, an export set next to a member of the
same name) still get distinct keys, and nothing is ever dropped or merged.

Examples
--------
>>> builder = IndexBuilder()
>>> _ = builder.register("run", "A.X", "method", "run")
>>> _ = builder.register("run", "B.Y", "method", "run")
>>> _ = builder.register("A", "A", "module")
>>> [(entry.display_key, entry.href) for entry in builder.build()]
[('A', 'A.html'), ('run', 'A.X.html#run'), ('run', 'B.Y.html#run')]
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .markup import href

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dc.dataclass(frozen=True, slots=True)
class IndexEntry:
    """One row of the name index."""

    display_key: str
    ordinal: int
    owner_page: str
    kind: str
    anchor: str | None = None

    @property
    def key(self) -> tuple[str, int, str]:
        """Return the uniqueness and sort key of the entry."""
        return (self.display_key, self.ordinal, self.owner_page)

    @property
    def href(self) -> str:
        return href(self.owner_page, self.anchor)


class IndexBuilder:
    """Append-only registry consumed once, after the traversal, by the index page."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, int, str], IndexEntry] = {}
        self._sealed = False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> cabc.Iterator[IndexEntry]:
        """Iterate over entries in registration order."""
        return iter(self._entries.values())

    def register(
        self,
        display_key: str,
        owner_page: str,
        kind: str,
        anchor: str | None = None,
    ) -> IndexEntry:
        """Record one index entry.

        Parameters
        ----------
        display_key : str
            Text the entry is sorted and shown under.
        owner_page : str
            Page on which the declaration is documented.
        kind : str
            Human-readable declaration kind.
        anchor : str, optional
            In-page anchor; ``None`` for declarations that own their page.

        Returns
        -------
        IndexEntry
            The stored entry.

        Raises
        ------
        RuntimeError
            If the index has already been built.
        """
        if self._sealed:
            msg = "Cannot register index entries after the index has been built."
            raise RuntimeError(msg)
        entry = IndexEntry(display_key, len(self._entries), owner_page, kind, anchor)
        self._entries[entry.key] = entry
        return entry

    def build(self) -> list[IndexEntry]:
        """Seal the builder and return entries sorted by their key."""
        self._sealed = True
        return sorted(self._entries.values(), key=lambda entry: entry.key)


__all__ = ["IndexBuilder", "IndexEntry"]
