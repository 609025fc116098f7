# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and filesystem resolution for bsh.

Handles:
- Packaged YAML defaults loading (bsh_cli/defaults/system.yaml)
- Commands file resolution (BSH_COMMANDS_FILE, storage.commands_file)
- Data root resolution for crash logs (BSH_DATA_HOME, ~/.local/share)
- ANSI coloring constants for CLI messages
"""

from __future__ import annotations

import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigIOError

# -----------------------
# UI constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "yellow": "\033[38;5;226;1m",
    "reset": "\033[0m",
    "green": "\033[32m",
    "red": "\033[31m",
}

TAG_COLORS: dict[str, str] = {
    "RUN": "green",
    "OK": "green",
    "WARN": "yellow",
    "ERR": "red",
}

DEFAULT_COMMANDS_FILE = "~/.config/bsh/commands.json"


def tag(name: str, text: str) -> str:
    """Prefix text with a colored [NAME] tag."""
    color = ANSI_COLORS.get(TAG_COLORS.get(name, "reset"), "")
    return f"{color}[{name}]{ANSI_COLORS['reset']} {text}"


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Simple config wrapper that implements ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("ui.theme.style", {}) -> dict style mapping
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Path helpers
# -----------------------


def expand_home(raw: str) -> Path:
    """Expand a leading '~' to the resolved home directory.

    Raises:
        ConfigIOError: if the home directory cannot be determined
    """
    try:
        return Path(raw).expanduser()
    except RuntimeError as e:
        raise ConfigIOError(
            f"Cannot resolve home directory for '{raw}': {e}"
        ) from e


def resolve_commands_path(cfg: YAMLConfig | None = None) -> Path:
    """Resolve the commands file path once at startup.

    Resolution order:
    1. BSH_COMMANDS_FILE environment variable (if set)
    2. storage.commands_file from config
    3. ~/.config/bsh/commands.json
    """
    override = os.getenv("BSH_COMMANDS_FILE")
    if override:
        return expand_home(override)

    raw = DEFAULT_COMMANDS_FILE
    if cfg is not None:
        raw = str(cfg.get_path("storage.commands_file", raw) or raw)
    return expand_home(raw)


def get_data_root() -> Path:
    """Get the data root directory for bsh.

    Resolution order:
    1. BSH_DATA_HOME environment variable (if set)
    2. ~/.local/share
    """
    bsh_data_home = os.getenv("BSH_DATA_HOME")
    if bsh_data_home:
        root = Path(bsh_data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def crash_log_path(data_root: Path) -> Path:
    """<data_root>/bsh/logs/crash.log"""
    return data_root / "bsh" / "logs" / "crash.log"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("bsh_cli.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from bsh_cli/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    return data


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))
