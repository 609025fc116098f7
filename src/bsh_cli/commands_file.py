# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Low-level access to the persisted commands file.

Handles:
- Creating the file (and parent directories) when absent
- Reading + validating the JSON document
- Writing the document back

Document shape:
    {"categories": {"<category>": {"<alias>": "<command text>"}}}

This module is the only place that creates the commands file.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from .errors import ConfigIOError, PersistError

Categories = dict[str, dict[str, str]]

EMPTY_DOCUMENT = {"categories": {}}


def ensure_commands_file(path: Path) -> Path:
    """Create the commands file with an empty document if it is missing.

    Idempotent: an existing file is never touched.

    Raises:
        ConfigIOError: if the file or its directory cannot be created
    """
    if path.exists():
        return path

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(EMPTY_DOCUMENT), encoding="utf-8")
    except OSError as e:
        raise ConfigIOError(
            f"Failed to create commands file {path}: {e}"
        ) from e
    return path


def read_categories(path: Path) -> Categories:
    """Read and validate the categories mapping.

    Raises:
        ConfigIOError: unreadable file, invalid JSON or unexpected shape
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigIOError(f"Unable to read {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigIOError(f"Unable to parse {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(
        data.get("categories"), dict
    ):
        raise ConfigIOError(
            f"Unable to parse {path}: expected an object with a "
            f"'categories' mapping"
        )

    categories: Categories = {}
    for name, entries in data["categories"].items():
        if not isinstance(entries, dict):
            raise ConfigIOError(
                f"Unable to parse {path}: category '{name}' must map "
                f"aliases to commands"
            )
        for alias, text in entries.items():
            if not isinstance(text, str):
                raise ConfigIOError(
                    f"Unable to parse {path}: command '{alias}' in "
                    f"category '{name}' must be a string"
                )
        categories[name] = dict(entries)

    return categories


def write_categories(path: Path, categories: Categories) -> None:
    """Write the full document.

    Written to a sibling temp file, then renamed over the target.

    Raises:
        PersistError: if the file cannot be written
    """
    payload = json.dumps({"categories": categories}, indent=2)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(payload + "\n", encoding="utf-8")
        os.replace(tmp, path)
    except OSError as e:
        if tmp.exists():
            tmp.unlink()
        raise PersistError(f"Failed to write to {path}: {e}") from e
