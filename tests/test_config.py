"""Unit tests for run configuration loading.

Usage
-----
Run ``pytest tests/test_config.py -v``. Only pytest's ``tmp_path`` is needed.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from decldoc.config import (
    DEFAULT_OUTPUT_DIR,
    DocConfigError,
    FileReference,
    FileReferenceMode,
    load_doc_config,
    parse_file_reference,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "decldoc.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_file() -> None:
    config = load_doc_config()
    assert config.output_dir == DEFAULT_OUTPUT_DIR
    assert config.file_reference == FileReference()
    assert config.doc_format == "markdown"
    assert config.pygments_style == "monokai"
    assert not config.show_modify_time
    assert not config.verbose


def test_file_values_are_read(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "output-dir: site\nfile_names: absolute\nshow_modify_time: true\n"
        "program_name: Demo\ndoc_format: plain\n",
    )
    config = load_doc_config(path)
    assert config.output_dir == Path("site")
    assert config.file_reference.mode is FileReferenceMode.ABSOLUTE
    assert config.show_modify_time
    assert config.program_name == "Demo"
    assert config.doc_format == "plain"


def test_overrides_take_precedence_over_file(tmp_path: Path) -> None:
    path = _write(tmp_path, "output_dir: site\nprogram_name: FromFile\n")
    overrides: cabc.Mapping[str, object] = {
        "output_dir": tmp_path / "out",
        "program_name": None,
    }
    config = load_doc_config(path, overrides)
    assert config.output_dir == tmp_path / "out"
    assert config.program_name == "FromFile"


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("colour: red\n", "Unknown configuration keys: colour"),
        ("doc_format: rst\n", "Unsupported doc format"),
        ("verbose: sometimes\n", "must be a boolean"),
        ("- just\n- a list\n", "must be a mapping"),
        ("output_dir: [unterminated\n", "could not be parsed"),
    ],
)
def test_invalid_files_are_rejected(tmp_path: Path, body: str, message: str) -> None:
    path = _write(tmp_path, body)
    with pytest.raises(DocConfigError, match=message):
        load_doc_config(path)


def test_missing_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(DocConfigError, match="not found"):
        load_doc_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, FileReference()),
        ("name", FileReference()),
        ("none", FileReference(FileReferenceMode.NONE)),
        ("absolute", FileReference(FileReferenceMode.ABSOLUTE)),
        ("relative:src", FileReference(FileReferenceMode.RELATIVE, Path("src"))),
        ("relative=/work", FileReference(FileReferenceMode.RELATIVE, Path("/work"))),
        ("sideways", FileReference()),
    ],
)
def test_parse_file_reference(value: str | None, expected: FileReference) -> None:
    assert parse_file_reference(value) == expected
