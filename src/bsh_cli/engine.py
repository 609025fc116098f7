# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Execution engine for bsh.

run(category, alias):
1. look up the command text (LookupMiss → reported, nothing else happens)
2. reject blank commands (ValidationReject)
3. ask for every <[placeholder]> in scan order (PlaceholderSyntaxError on
   an unmatched marker; the stored text is never modified)
4. hand the final text to the executor and wait for it to exit

A non-zero exit or a spawn failure is a warning, not an engine error: the
wrapped command already reported its own diagnostics on the inherited
streams.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .config import tag
from .errors import LookupMiss, PlaceholderSyntaxError, ValidationReject
from .interfaces import CommandStore, Executor, Prompter
from .utils import PLACEHOLDER_CLOSE, PLACEHOLDER_OPEN, resolve_placeholders


class RunStatus(Enum):
    OK = "ok"
    LOOKUP_MISS = "lookup_miss"
    VALIDATION_REJECT = "validation_reject"
    PLACEHOLDER_ERROR = "placeholder_error"
    CANCELLED = "cancelled"
    SPAWN_ERROR = "spawn_error"
    NON_ZERO_EXIT = "non_zero_exit"


@dataclass(frozen=True)
class RunResult:
    status: RunStatus
    # Final command line after placeholder substitution ("" if never built)
    command: str = ""
    exit_code: int | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.OK


class StdIOPrompter:
    """Default prompter for real CLI usage (blocking input())."""

    def ask(self, prompt: str) -> str:
        return input(prompt)


def _write_stderr(text: str) -> None:
    print(text, file=sys.stderr)


@dataclass
class ExecutionEngine:
    """Resolves an alias to a command line and runs it."""

    store: CommandStore
    executor: Executor
    prompter: Prompter = field(default_factory=StdIOPrompter)

    output_fn: Callable[[str], None] = print
    error_fn: Callable[[str], None] = _write_stderr

    # Echo the final command line before running it
    show_run: bool = True

    def lookup(self, category: str, alias: str) -> str:
        """Return the stored command text.

        Raises:
            LookupMiss: unknown category or alias
        """
        if not self.store.has_category(category):
            raise LookupMiss(category)
        text = self.store.find_command(category, alias)
        if text is None:
            raise LookupMiss(category, alias)
        return text

    def _ask_placeholder(self, name: str) -> str:
        return self.prompter.ask(
            f"Value for {PLACEHOLDER_OPEN}{name}{PLACEHOLDER_CLOSE}: "
        )

    def prepare(self, category: str, alias: str) -> str:
        """Look up, validate and resolve placeholders.

        Raises:
            LookupMiss, ValidationReject, PlaceholderSyntaxError
        """
        text = self.lookup(category, alias)
        if not text.strip():
            raise ValidationReject(
                f"Command '{alias}' in category '{category}' is empty"
            )
        return resolve_placeholders(text, self._ask_placeholder)

    def run(self, category: str, alias: str) -> RunResult:
        """Run a stored command. Never raises for recoverable errors."""
        try:
            command = self.prepare(category, alias)
        except LookupMiss as e:
            return self._report(RunStatus.LOOKUP_MISS, str(e))
        except ValidationReject as e:
            return self._report(RunStatus.VALIDATION_REJECT, str(e))
        except PlaceholderSyntaxError as e:
            return self._report(
                RunStatus.PLACEHOLDER_ERROR,
                f"{e}; command '{alias}' was not executed",
            )
        except (EOFError, KeyboardInterrupt):
            return self._report(
                RunStatus.CANCELLED,
                f"Cancelled; command '{alias}' was not executed",
                warning=True,
            )

        if self.show_run:
            self.output_fn(tag("RUN", command))

        result = self.executor.run_tty(command)

        if result.error is not None:
            return self._report(
                RunStatus.SPAWN_ERROR,
                result.error,
                command=command,
                warning=True,
            )

        if result.exit_code != 0:
            return self._report(
                RunStatus.NON_ZERO_EXIT,
                f"Command failed with status: {result.exit_code}",
                command=command,
                exit_code=result.exit_code,
                warning=True,
            )

        return RunResult(
            status=RunStatus.OK, command=command, exit_code=0
        )

    def _report(
        self,
        status: RunStatus,
        message: str,
        command: str = "",
        exit_code: int | None = None,
        warning: bool = False,
    ) -> RunResult:
        self.error_fn(tag("WARN" if warning else "ERR", message))
        return RunResult(
            status=status,
            command=command,
            exit_code=exit_code,
            message=message,
        )
