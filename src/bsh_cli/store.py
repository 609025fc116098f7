# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
JSON-backed command store for bsh.

Holds the authoritative in-memory copy of the commands file and writes it
back after every mutation (write-through, no batching, no rollback).
"""

from __future__ import annotations

from pathlib import Path

from . import commands_file
from .commands_file import Categories


class JSONCommandStore:
    """JSON file implementation of CommandStore protocol."""

    def __init__(self, path: Path):
        """Load the store from an existing commands file.

        Args:
            path: Path to the commands file (must exist)

        Note:
            Store does NOT create the file. It must be created by
            commands_file.ensure_commands_file() before constructing
            JSONCommandStore.
        """
        self.path = path
        self._categories: Categories = commands_file.read_categories(path)

    def _persist(self) -> None:
        # A failed write propagates; the in-memory change stays applied.
        commands_file.write_categories(self.path, self._categories)

    # ----------------------------------------------------------------
    # Queries
    # ----------------------------------------------------------------

    def has_category(self, name: str) -> bool:
        return name in self._categories

    def has_alias(self, category: str, alias: str) -> bool:
        return alias in self._categories.get(category, {})

    def find_command(self, category: str, alias: str) -> str | None:
        """Return the command text, or None if category/alias is unknown."""
        return self._categories.get(category, {}).get(alias)

    def list_categories(self) -> list[str]:
        """List category names, sorted."""
        return sorted(self._categories)

    def list_commands(self, category: str) -> list[dict[str, str]]:
        """List commands of a category, sorted by alias."""
        entries = self._categories.get(category, {})
        return [
            {"alias": alias, "command": entries[alias]}
            for alias in sorted(entries)
        ]

    # ----------------------------------------------------------------
    # Mutations
    # ----------------------------------------------------------------

    def add_category(self, name: str) -> bool:
        """Add an empty category. Existing categories are left untouched."""
        if name in self._categories:
            return False
        self._categories[name] = {}
        self._persist()
        return True

    def remove_category(self, name: str) -> bool:
        """Remove a category together with all of its commands."""
        if self._categories.pop(name, None) is None:
            return False
        self._persist()
        return True

    def add_or_update_command(
        self, category: str, alias: str, command: str
    ) -> None:
        """Insert or overwrite an alias, creating the category if needed."""
        self._categories.setdefault(category, {})[alias] = command
        self._persist()

    def remove_command(self, category: str, alias: str) -> bool:
        entries = self._categories.get(category)
        if entries is None or alias not in entries:
            return False
        del entries[alias]
        self._persist()
        return True
