# tests/test_commands_file.py
"""
Tests for the commands file authority.

ARCHITECTURE RULE (enforced here):
- bsh_cli.commands_file is the *only* module that creates the commands file.
- JSONCommandStore assumes the file exists (see test_store.py).
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bsh_cli import commands_file
from bsh_cli.errors import ConfigIOError, PersistError


@pytest.fixture
def path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "bsh" / "commands.json"


# ----------------------------------------------------------------
# Creation
# ----------------------------------------------------------------


def test_ensure_creates_file_and_parents(path: Path) -> None:
    assert not path.parent.exists()

    result = commands_file.ensure_commands_file(path)

    assert result == path
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == {"categories": {}}


def test_ensure_is_idempotent(path: Path) -> None:
    """An existing file must never be rewritten."""
    path.parent.mkdir(parents=True)
    path.write_text('{"categories": {"git": {"st": "git status"}}}')

    commands_file.ensure_commands_file(path)
    commands_file.ensure_commands_file(path)

    assert commands_file.read_categories(path) == {
        "git": {"st": "git status"}
    }


def test_ensure_failure_raises_config_io_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")

    with pytest.raises(ConfigIOError):
        commands_file.ensure_commands_file(blocker / "commands.json")


# ----------------------------------------------------------------
# Reading
# ----------------------------------------------------------------


def test_read_missing_file_raises(path: Path) -> None:
    with pytest.raises(ConfigIOError, match="Unable to read"):
        commands_file.read_categories(path)


def test_read_invalid_json_raises(tmp_path: Path) -> None:
    bad = tmp_path / "commands.json"
    bad.write_text("{not json")

    with pytest.raises(ConfigIOError, match="Unable to parse"):
        commands_file.read_categories(bad)


@pytest.mark.parametrize(
    "document",
    [
        "[]",
        "{}",
        '{"categories": []}',
        '{"categories": {"git": ["st"]}}',
        '{"categories": {"git": {"st": 3}}}',
    ],
)
def test_read_wrong_shape_raises(tmp_path: Path, document: str) -> None:
    bad = tmp_path / "commands.json"
    bad.write_text(document)

    with pytest.raises(ConfigIOError):
        commands_file.read_categories(bad)


def test_read_empty_category(tmp_path: Path) -> None:
    p = tmp_path / "commands.json"
    p.write_text('{"categories": {"docker": {}}}')

    assert commands_file.read_categories(p) == {"docker": {}}


# ----------------------------------------------------------------
# Writing
# ----------------------------------------------------------------


def test_write_then_read(path: Path) -> None:
    commands_file.ensure_commands_file(path)
    categories = {"git": {"st": "git status", "lg": "git log"}, "k8s": {}}

    commands_file.write_categories(path, categories)

    assert commands_file.read_categories(path) == categories
    assert path.read_text(encoding="utf-8").endswith("\n")


def test_write_failure_raises_persist_error(tmp_path: Path) -> None:
    missing_dir = tmp_path / "gone" / "commands.json"

    with pytest.raises(PersistError, match="Failed to write"):
        commands_file.write_categories(missing_dir, {})


def test_interrupted_write_keeps_previous_document(
    path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    commands_file.ensure_commands_file(path)
    commands_file.write_categories(path, {"git": {"st": "git status"}})

    def fail_replace(src, dst):
        raise OSError("No space left on device")

    monkeypatch.setattr(commands_file.os, "replace", fail_replace)

    with pytest.raises(PersistError, match="No space left"):
        commands_file.write_categories(path, {"git": {}})

    assert commands_file.read_categories(path) == {
        "git": {"st": "git status"}
    }
    assert sorted(p.name for p in path.parent.iterdir()) == ["commands.json"]


def test_persist_error_is_config_io_error() -> None:
    assert issubclass(PersistError, ConfigIOError)
