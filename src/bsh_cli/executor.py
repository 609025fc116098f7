# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed executor implementation for bsh.

Commands run with full terminal control: stdin/stdout/stderr are inherited
from the parent process and nothing is captured. The call blocks until the
child exits; there is no timeout or cancellation.

Modes:
- "shell": the command line is handed verbatim to /bin/sh (no quoting)
- "argv":  the command line is split with shlex and run without a shell
"""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass

EXECUTION_MODES = ("shell", "argv")


@dataclass(frozen=True)
class TTYResult:
    """Result from TTY/passthrough execution (no output capture)."""

    exit_code: int
    # Set when the process could not be started at all
    error: str | None = None

    @property
    def spawned(self) -> bool:
        return self.error is None


class SubprocessExecutor:
    """Subprocess implementation of Executor protocol."""

    def __init__(self, force_color: bool = False, mode: str = "shell"):
        """Initialize executor with configuration.

        Args:
            force_color: If True, set color-forcing env variables
            mode: "shell" (default) or "argv"
        """
        if mode not in EXECUTION_MODES:
            raise ValueError(
                f"Unknown execution mode '{mode}' "
                f"(expected one of: {', '.join(EXECUTION_MODES)})"
            )
        self.force_color = force_color
        self.mode = mode

    def _build_env(self) -> dict:
        env = os.environ.copy()
        if self.force_color:
            env["PY_COLORS"] = "1"
            env["FORCE_COLOR"] = "1"
            env["CLICOLOR_FORCE"] = "1"
        return env

    def _spawn_failure(self, message: str) -> TTYResult:
        return TTYResult(exit_code=1, error=message)

    def run_tty(self, command: str) -> TTYResult:
        """Run a command with full terminal control (no output capture).

        Args:
            command: command line to execute

        Returns:
            TTYResult (exit_code, error)
        """
        env = self._build_env()

        if self.mode == "argv":
            try:
                args = shlex.split(command)
            except ValueError as e:
                return self._spawn_failure(f"Failed to parse command: {e}")
            if not args:
                return self._spawn_failure("No command provided")
            popen_args: str | list[str] = args
            use_shell = False
        else:
            popen_args = command
            use_shell = True

        try:
            proc = subprocess.Popen(
                popen_args,
                shell=use_shell,
                stdin=None,  # inherit from parent
                stdout=None,  # inherit from parent
                stderr=None,  # inherit from parent
                env=env,
            )
        except OSError as e:
            return self._spawn_failure(f"Failed to start command: {e}")

        return TTYResult(exit_code=proc.wait())
