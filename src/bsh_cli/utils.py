# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Utility functions for bsh.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .errors import PlaceholderSyntaxError

PLACEHOLDER_OPEN = "<["
PLACEHOLDER_CLOSE = "]>"


def format_table(
    headers: list[str],
    rows: list[list[Any]],
    title: str = ""
) -> str:
    """
    Format data as a simple text table without external dependencies.

    Args:
        headers: List of column header names
        rows: List of rows, where each row is a list of values
        title: Optional title to display above the table

    Returns:
        Formatted table as a string
    """
    if not rows:
        return ""

    str_headers = [str(h) for h in headers]
    str_rows = [[str(val) for val in row] for row in rows]

    # Column width = widest of header and all row values
    col_widths = []
    for i, header in enumerate(str_headers):
        max_width = len(header)
        for row in str_rows:
            if i < len(row):
                max_width = max(max_width, len(row[i]))
        col_widths.append(max_width)

    lines = []

    if title:
        lines.append(title)

    header_parts = []
    for i, header in enumerate(str_headers):
        header_parts.append(header.ljust(col_widths[i]))
    lines.append("  ".join(header_parts).rstrip())

    for row in str_rows:
        row_parts = []
        for i, val in enumerate(row):
            row_parts.append(val.ljust(col_widths[i]))
        lines.append("  ".join(row_parts).rstrip())

    return "\n".join(lines)


@dataclass(frozen=True)
class Placeholder:
    """A <[name]> token located in a command text."""
    name: str
    start: int  # index of '<['
    end: int  # index just past ']>'


def find_placeholder(text: str) -> Placeholder | None:
    """Find the first <[name]> token, scanning left to right.

    The name is everything up to the next ']>' after the opening marker.

    Raises:
        PlaceholderSyntaxError: if '<[' has no ']>' anywhere after it
    """
    start = text.find(PLACEHOLDER_OPEN)
    if start < 0:
        return None

    name_start = start + len(PLACEHOLDER_OPEN)
    close = text.find(PLACEHOLDER_CLOSE, name_start)
    if close < 0:
        raise PlaceholderSyntaxError(text, start)

    return Placeholder(
        name=text[name_start:close],
        start=start,
        end=close + len(PLACEHOLDER_CLOSE),
    )


def resolve_placeholders(text: str, ask: Callable[[str], str]) -> str:
    """Replace every <[name]> token with a value supplied by ``ask``.

    Each round replaces only the first token and rescans the whole string,
    so repeated tokens are asked for once per occurrence. Values are
    spliced in raw (no quoting or escaping).

    Args:
        text: Command text possibly containing placeholders
        ask: Called with the placeholder name, returns the replacement

    Returns:
        The command text with no placeholders left

    Raises:
        PlaceholderSyntaxError: on an unmatched '<[' marker. ``ask`` may
            already have been called for earlier tokens.
    """
    current = text
    while True:
        placeholder = find_placeholder(current)
        if placeholder is None:
            return current
        value = ask(placeholder.name)
        current = (
            current[:placeholder.start] + value + current[placeholder.end:]
        )


def split_alias_command(buffer: str) -> tuple[str, str] | None:
    """Split "<alias><whitespace><command>" on the first whitespace char.

    Returns:
        (alias, command), or None if there is no whitespace or the alias
        would be empty
    """
    for i, ch in enumerate(buffer):
        if ch.isspace():
            if i == 0:
                return None
            return buffer[:i], buffer[i + 1:]
    return None
