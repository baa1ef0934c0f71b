"""Tests for the ``decldoc generate`` command.

The command function is called directly, as Cyclopts leaves decorated
functions callable, so exit statuses surface as ``SystemExit``.

Usage
-----
Run ``pytest tests/test_cli.py -v``.
"""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from decldoc import cli
from decldoc.generator.site_generator import ExitStatus

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each test from an empty directory without DECLDOC_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "DECLDOC_OUTPUT_DIR",
        "DECLDOC_CONFIG",
        "DECLDOC_FILE_NAMES",
        "DECLDOC_PROGRAM_NAME",
        "DECLDOC_DOC_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_generate_writes_site_and_reports_paths(
    tree_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.generate(tree_file, output_dir=tmp_path / "site")

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "wrote site/index.html"
    assert "wrote site/M.N.C.html" in out
    assert out[-1] == "wrote site/styles.css"
    assert (tmp_path / "site" / "nameindex.html").exists()


def test_program_name_option_overrides_tree(tree_file: Path, tmp_path: Path) -> None:
    cli.generate(tree_file, output_dir=tmp_path / "site", program_name="Override")
    toc = (tmp_path / "site" / "index.html").read_text(encoding="utf-8")
    soup = BeautifulSoup(toc, "html.parser")
    assert soup.title.get_text() == "Documentation for Override"


def test_default_config_file_is_used_when_present(
    tree_file: Path, tmp_path: Path
) -> None:
    (tmp_path / "decldoc.yaml").write_text(
        "output_dir: from-config\nfile_names: none\n", encoding="utf-8"
    )
    cli.generate(tree_file)
    page = (tmp_path / "from-config" / "M.html").read_text(encoding="utf-8")
    assert "From file" not in page


def test_missing_tree_is_a_setup_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.generate(tmp_path / "absent.yaml", output_dir=tmp_path / "site")
    assert excinfo.value.code == ExitStatus.SETUP_ERROR
    assert not (tmp_path / "site").exists()


def test_invalid_option_is_a_setup_error(tree_file: Path, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.generate(tree_file, output_dir=tmp_path / "site", doc_format="rst")
    assert excinfo.value.code == ExitStatus.SETUP_ERROR


def test_generation_failure_exit_status(
    tree_file: Path, tmp_path: Path, mocker: typ.Any
) -> None:
    mocker.patch(
        "decldoc.generator.page_composer.PageComposer.compose_module",
        side_effect=RuntimeError("composer exploded"),
    )
    with pytest.raises(SystemExit) as excinfo:
        cli.generate(tree_file, output_dir=tmp_path / "site")
    assert excinfo.value.code == ExitStatus.GENERATION_ERROR


def test_format_path_relative_to_cwd(tmp_path: Path) -> None:
    assert cli._format_path(tmp_path / "docs" / "index.html") == "docs/index.html"
