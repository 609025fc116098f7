# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the session state machine, the execution engine,
persistence and process spawning independently testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .executor import TTYResult  # pragma: no cover


class CommandStore(Protocol):
    """Protocol for the categories → aliases → command text store."""

    def has_category(self, name: str) -> bool:
        ...

    def has_alias(self, category: str, alias: str) -> bool:
        """Unknown categories have no aliases."""
        ...

    def find_command(self, category: str, alias: str) -> str | None:
        """Find a command and return its text, or None if not found."""
        ...

    def list_categories(self) -> list[str]:
        ...

    def list_commands(self, category: str) -> list[dict[str, str]]:
        """List {"alias", "command"} rows for a category, sorted by alias."""
        ...

    def add_category(self, name: str) -> bool:
        """Add a category; returns False (and persists nothing) if present."""
        ...

    def remove_category(self, name: str) -> bool:
        """Remove a category and all its commands."""
        ...

    def add_or_update_command(
        self, category: str, alias: str, command: str
    ) -> None:
        ...

    def remove_command(self, category: str, alias: str) -> bool:
        ...


class Executor(Protocol):
    """Protocol for command execution with inherited terminal streams."""

    def run_tty(self, command: str) -> TTYResult:
        """Run a command line and block until it exits."""
        ...


class Prompter(Protocol):
    """Asks the user for a placeholder value (blocking)."""

    def ask(self, prompt: str) -> str: ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    def get_path(self, path: str, default: Any = None) -> Any:
        """Nested lookup using a dot-separated path."""
        ...
