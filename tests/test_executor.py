"""
Tests for Subprocess implementation of Executor Protocol.
Covers command execution in isolation from the engine.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from bsh_cli.executor import SubprocessExecutor, TTYResult

PY = sys.executable


@pytest.fixture
def executor() -> SubprocessExecutor:
    """Create executor with default settings."""
    return SubprocessExecutor()


# ----------------------------------------------------------------
# Construction
# ----------------------------------------------------------------


def test_executor_rejects_unknown_mode():
    with pytest.raises(ValueError, match="Unknown execution mode"):
        SubprocessExecutor(mode="ssh")


def test_force_color_env():
    env = SubprocessExecutor(force_color=True)._build_env()
    assert env["FORCE_COLOR"] == "1"
    assert env["CLICOLOR_FORCE"] == "1"


# ----------------------------------------------------------------
# Shell mode
# ----------------------------------------------------------------


def test_run_tty_success(executor: SubprocessExecutor):
    result = executor.run_tty("true")

    assert isinstance(result, TTYResult)
    assert result.exit_code == 0
    assert result.spawned
    assert result.error is None


def test_run_tty_passes_exit_code_through(executor: SubprocessExecutor):
    result = executor.run_tty("exit 3")

    assert result.exit_code == 3
    assert result.spawned


def test_run_tty_uses_shell_syntax(
    executor: SubprocessExecutor, tmp_path: Path
):
    target = tmp_path / "out.txt"

    result = executor.run_tty(f"echo one > {target} && echo two >> {target}")

    assert result.exit_code == 0
    assert target.read_text().split() == ["one", "two"]


def test_run_tty_does_not_capture(
    executor: SubprocessExecutor, monkeypatch: pytest.MonkeyPatch
):
    """stdin/stdout/stderr are inherited (None), never PIPE."""
    seen = {}
    real_popen = subprocess.Popen

    def spy(*args, **kwargs):
        seen.update(kwargs)
        return real_popen(*args, **kwargs)

    monkeypatch.setattr(subprocess, "Popen", spy)

    executor.run_tty("true")

    assert seen["stdin"] is None
    assert seen["stdout"] is None
    assert seen["stderr"] is None
    assert seen["shell"] is True


# ----------------------------------------------------------------
# argv mode
# ----------------------------------------------------------------


def test_argv_mode_runs_without_shell(tmp_path: Path):
    executor = SubprocessExecutor(mode="argv")
    target = tmp_path / "a;b"

    result = executor.run_tty(
        f"{PY} -c 'import pathlib,sys; pathlib.Path(sys.argv[1]).touch()' "
        f"'{target}'"
    )

    assert result.exit_code == 0
    # ';' reached the program literally
    assert target.exists()


def test_argv_mode_exit_code():
    executor = SubprocessExecutor(mode="argv")

    result = executor.run_tty(f"{PY} -c 'import sys; sys.exit(42)'")

    assert result.exit_code == 42


def test_argv_mode_missing_program_is_spawn_error():
    executor = SubprocessExecutor(mode="argv")

    result = executor.run_tty("definitely-not-a-real-program-bsh")

    assert not result.spawned
    assert "Failed to start command" in result.error


def test_argv_mode_unbalanced_quotes():
    executor = SubprocessExecutor(mode="argv")

    result = executor.run_tty("echo 'oops")

    assert not result.spawned
    assert "Failed to parse command" in result.error


def test_argv_mode_empty_command():
    executor = SubprocessExecutor(mode="argv")

    result = executor.run_tty("   ")

    assert result.error == "No command provided"
