# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Error taxonomy for bsh.

Fatal:
- ConfigIOError: commands file unreadable/unparsable, home unresolvable
- PersistError: commands file could not be written

Recoverable (reported to the user, operation skipped):
- LookupMiss, ValidationReject, PlaceholderSyntaxError
"""

from __future__ import annotations


class BshError(Exception):
    """Base class for all bsh errors."""


class ConfigIOError(BshError):
    """The commands file or configuration could not be read or resolved."""


class PersistError(ConfigIOError):
    """Writing the commands file failed.

    The in-memory store keeps the mutation that triggered the write.
    """


class LookupMiss(BshError):
    """Unknown category or alias."""

    def __init__(self, category: str, alias: str | None = None):
        self.category = category
        self.alias = alias
        if alias is None:
            msg = f"Category '{category}' does not exist"
        else:
            msg = f"Command '{alias}' does not exist in category '{category}'"
        super().__init__(msg)


class ValidationReject(BshError):
    """Input rejected before any mutation or execution took place."""


class PlaceholderSyntaxError(BshError):
    """An opening '<[' marker has no closing ']>' after it."""

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        super().__init__(
            f"Unmatched placeholder marker '<[' at position {position}"
        )
