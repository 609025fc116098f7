# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
bsh core package.

Commands are stored per category in a JSON file and launched either from
the command line (``bsh <category> <alias>``) or from the full-screen
interactive session (``bsh`` with no arguments).
"""
from .session import Session as Session  # noqa: F401 (re-export)
