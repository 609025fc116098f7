# tests/test_engine.py
"""
Tests for ExecutionEngine.

The engine is tested against in-memory doubles: no files, no processes.
"""

from __future__ import annotations

import pytest

from bsh_cli.engine import ExecutionEngine, RunStatus
from bsh_cli.errors import LookupMiss, ValidationReject
from bsh_cli.executor import TTYResult


class FakeStore:
    def __init__(self, categories: dict[str, dict[str, str]] | None = None):
        self.categories = categories or {}

    def has_category(self, name: str) -> bool:
        return name in self.categories

    def has_alias(self, category: str, alias: str) -> bool:
        return alias in self.categories.get(category, {})

    def find_command(self, category: str, alias: str) -> str | None:
        return self.categories.get(category, {}).get(alias)


class FakeExecutor:
    def __init__(self, exit_code: int = 0, error: str | None = None):
        self.exit_code = exit_code
        self.error = error
        self.commands: list[str] = []

    def run_tty(self, command: str) -> TTYResult:
        self.commands.append(command)
        return TTYResult(exit_code=self.exit_code, error=self.error)


class FakePrompter:
    def __init__(self, answers: list[str] | None = None, exc=None):
        self.answers = list(answers or [])
        self.exc = exc
        self.prompts: list[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.exc is not None:
            raise self.exc
        return self.answers.pop(0)


def _engine(store, executor=None, prompter=None):
    out: list[str] = []
    err: list[str] = []
    engine = ExecutionEngine(
        store=store,
        executor=executor or FakeExecutor(),
        prompter=prompter or FakePrompter(),
        output_fn=out.append,
        error_fn=err.append,
    )
    return engine, out, err


@pytest.fixture
def store() -> FakeStore:
    return FakeStore(
        {
            "git": {"st": "git status", "blank": "   "},
            "net": {
                "scp": "scp <[file]> <[host]>:/tmp",
                "echo2": "echo <[x]> <[x]>",
                "broken": "echo <[x",
            },
        }
    )


# ----------------------------------------------------------------
# Lookup / validation
# ----------------------------------------------------------------


def test_lookup_returns_text(store: FakeStore) -> None:
    engine, _, _ = _engine(store)
    assert engine.lookup("git", "st") == "git status"


def test_lookup_unknown_category_raises(store: FakeStore) -> None:
    engine, _, _ = _engine(store)
    with pytest.raises(LookupMiss) as exc:
        engine.lookup("nope", "st")
    assert exc.value.alias is None


def test_lookup_unknown_alias_raises(store: FakeStore) -> None:
    engine, _, _ = _engine(store)
    with pytest.raises(LookupMiss) as exc:
        engine.lookup("git", "nope")
    assert exc.value.alias == "nope"


def test_prepare_rejects_blank_command(store: FakeStore) -> None:
    engine, _, _ = _engine(store)
    with pytest.raises(ValidationReject):
        engine.prepare("git", "blank")


# ----------------------------------------------------------------
# run()
# ----------------------------------------------------------------


def test_run_success(store: FakeStore) -> None:
    executor = FakeExecutor()
    engine, out, err = _engine(store, executor)

    result = engine.run("git", "st")

    assert result.ok
    assert result.status is RunStatus.OK
    assert result.command == "git status"
    assert result.exit_code == 0
    assert executor.commands == ["git status"]
    assert any("[RUN]" in line and "git status" in line for line in out)
    assert err == []


def test_run_show_run_disabled(store: FakeStore) -> None:
    engine, out, _ = _engine(store)
    engine.show_run = False

    engine.run("git", "st")

    assert out == []


def test_run_lookup_miss_spawns_nothing(store: FakeStore) -> None:
    executor = FakeExecutor()
    engine, _, err = _engine(store, executor)

    result = engine.run("git", "nope")

    assert result.status is RunStatus.LOOKUP_MISS
    assert executor.commands == []
    assert "[ERR]" in err[0]
    assert "Command 'nope' does not exist in category 'git'" in err[0]


def test_run_unknown_category(store: FakeStore) -> None:
    engine, _, err = _engine(store)

    result = engine.run("nope", "st")

    assert result.status is RunStatus.LOOKUP_MISS
    assert "Category 'nope' does not exist" in err[0]


def test_run_blank_command_rejected(store: FakeStore) -> None:
    executor = FakeExecutor()
    engine, _, _ = _engine(store, executor)

    result = engine.run("git", "blank")

    assert result.status is RunStatus.VALIDATION_REJECT
    assert executor.commands == []


def test_run_substitutes_placeholders_in_order(store: FakeStore) -> None:
    executor = FakeExecutor()
    prompter = FakePrompter(["report.txt", "srv"])
    engine, _, _ = _engine(store, executor, prompter)

    result = engine.run("net", "scp")

    assert result.ok
    assert executor.commands == ["scp report.txt srv:/tmp"]
    assert prompter.prompts == ["Value for <[file]>: ", "Value for <[host]>: "]
    # stored text untouched
    assert store.find_command("net", "scp") == "scp <[file]> <[host]>:/tmp"


def test_run_repeated_placeholder_asked_twice(store: FakeStore) -> None:
    executor = FakeExecutor()
    engine, _, _ = _engine(store, executor, FakePrompter(["A", "B"]))

    engine.run("net", "echo2")

    assert executor.commands == ["echo A B"]


def test_run_unmatched_placeholder_aborts(store: FakeStore) -> None:
    executor = FakeExecutor()
    engine, _, err = _engine(store, executor)

    result = engine.run("net", "broken")

    assert result.status is RunStatus.PLACEHOLDER_ERROR
    assert executor.commands == []
    assert "Unmatched placeholder" in err[0]
    assert store.find_command("net", "broken") == "echo <[x"


def test_run_value_spliced_unescaped(store: FakeStore) -> None:
    executor = FakeExecutor()
    prompter = FakePrompter(["a; touch pwned", "b"])
    engine, _, _ = _engine(store, executor, prompter)

    engine.run("net", "echo2")

    assert executor.commands == ["echo a; touch pwned b"]


@pytest.mark.parametrize("exc", [EOFError(), KeyboardInterrupt()])
def test_run_cancelled_prompt(store: FakeStore, exc) -> None:
    executor = FakeExecutor()
    engine, _, err = _engine(store, executor, FakePrompter(exc=exc))

    result = engine.run("net", "scp")

    assert result.status is RunStatus.CANCELLED
    assert executor.commands == []
    assert "[WARN]" in err[0]


def test_run_non_zero_exit_is_warning(store: FakeStore) -> None:
    engine, _, err = _engine(store, FakeExecutor(exit_code=3))

    result = engine.run("git", "st")

    assert result.status is RunStatus.NON_ZERO_EXIT
    assert result.exit_code == 3
    assert "[WARN]" in err[0]
    assert "Command failed with status: 3" in err[0]


def test_run_spawn_error_is_warning(store: FakeStore) -> None:
    executor = FakeExecutor(exit_code=1, error="Failed to start command: x")
    engine, _, err = _engine(store, executor)

    result = engine.run("git", "st")

    assert result.status is RunStatus.SPAWN_ERROR
    assert result.command == "git status"
    assert "[WARN]" in err[0]
    assert "Failed to start command" in err[0]
