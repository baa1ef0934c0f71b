"""Behaviour tests for end-to-end documentation generation.

The scenarios in ``features/site_generation.feature`` generate a small program
into a temporary directory and inspect the resulting HTML: index links for
same-named members in different classes, distinct anchors for an export set
and a function of the same name, and the exit status of a run that meets a
dangling reference.

Usage:
    Run these behaviour tests with pytest, for example:

        pytest tests/bdd/test_site_generation_bdd.py -v

Prerequisites:
    - The test extra (pytest-bdd and BeautifulSoup) installed via
      ``pip install -e .[test]``.
    - Access to the feature file at ``features/site_generation.feature``.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from decldoc.config import DocConfig
from decldoc.generator.site_generator import DocumentationGenerator, ExitStatus
from decldoc.model import build_declaration_tree, load_declaration_tree

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "site_generation.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("the sample declaration tree")
def given_sample_tree(tree_file: Path, scenario_state: dict[str, object]) -> None:
    """Load the tree written by the shared ``tree_file`` fixture."""
    scenario_state["tree"] = load_declaration_tree(tree_file)


@given("a declaration tree with a dangling type reference")
def given_dangling_tree(scenario_state: dict[str, object]) -> None:
    """Build a tree whose only function returns a type that does not exist."""
    scenario_state["tree"] = build_declaration_tree(
        {
            "root": {
                "declarations": [
                    {
                        "name": "M",
                        "kind": "module",
                        "declarations": [
                            {
                                "name": "g",
                                "kind": "function",
                                "result": {
                                    "kind": "named",
                                    "name": "Missing",
                                    "target": "M.Missing",
                                },
                            }
                        ],
                    }
                ]
            }
        }
    )


@when("documentation is generated")
def when_generated(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Run the generator into a fresh output directory."""
    output_dir = tmp_path / "site"
    generator = DocumentationGenerator(
        scenario_state["tree"],  # type: ignore[arg-type]
        DocConfig(output_dir=output_dir),
    )
    scenario_state["result"] = generator.run()
    scenario_state["output_dir"] = output_dir


def _page(scenario_state: dict[str, object], name: str) -> BeautifulSoup:
    output_dir = scenario_state["output_dir"]
    assert isinstance(output_dir, Path)
    html = (output_dir / name).read_text(encoding="utf-8")
    return BeautifulSoup(html, "html.parser")


@then("the run succeeds")
def then_succeeds(scenario_state: dict[str, object]) -> None:
    result = scenario_state["result"]
    assert result.status is ExitStatus.SUCCESS  # type: ignore[attr-defined]


@then("the run fails with a generation error")
def then_generation_error(scenario_state: dict[str, object]) -> None:
    result = scenario_state["result"]
    assert result.status is ExitStatus.GENERATION_ERROR  # type: ignore[attr-defined]
    assert "M.Missing" in result.errors[0]  # type: ignore[attr-defined]


@then(parsers.parse('the name index links "{name}" to "{target}"'))
def then_index_links(
    scenario_state: dict[str, object], name: str, target: str
) -> None:
    soup = _page(scenario_state, "nameindex.html")
    links = [
        str(entry.find("a")["href"])
        for entry in soup.find_all("div", class_="index-entry")
        if entry.find("a").get_text() == name
    ]
    assert target in links, links


@then(parsers.parse('the page "{page}" has anchors "{first}" and "{second}"'))
def then_page_anchors(
    scenario_state: dict[str, object], page: str, first: str, second: str
) -> None:
    soup = _page(scenario_state, page)
    assert soup.find(id=first) is not None
    assert soup.find(id=second) is not None
