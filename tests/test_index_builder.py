"""Unit tests for the global name index registry.

Usage
-----
Run ``pytest tests/test_index_builder.py -v``.
"""

from __future__ import annotations

import pytest

from decldoc.generator import IndexBuilder


def test_entries_sort_by_name_then_registration() -> None:
    index = IndexBuilder()
    index.register("run", "B.Y", "method", "run")
    index.register("M", "M", "module")
    index.register("run", "A.X", "method", "run")

    entries = index.build()

    assert [(entry.display_key, entry.owner_page) for entry in entries] == [
        ("M", "M"),
        ("run", "B.Y"),
        ("run", "A.X"),
    ]


def test_same_name_on_different_pages_is_kept() -> None:
    index = IndexBuilder()
    index.register("helper", "M", "function", "helper")
    index.register("helper", "M", "export set", "helper+")
    hrefs = [entry.href for entry in index.build()]
    assert hrefs == ["M.html#helper", "M.html#helper+"]


def test_iteration_follows_registration_order() -> None:
    index = IndexBuilder()
    index.register("b", "M", "const", "b")
    index.register("a", "M", "const", "a")
    assert [entry.display_key for entry in index] == ["b", "a"]
    assert len(index) == 2


def test_register_after_build_is_rejected() -> None:
    index = IndexBuilder()
    index.build()
    with pytest.raises(RuntimeError, match="after the index has been built"):
        index.register("late", "M", "const")


def test_page_entries_link_without_fragment() -> None:
    index = IndexBuilder()
    entry = index.register("C", "M.N.C", "class")
    assert entry.href == "M.N.C.html"
