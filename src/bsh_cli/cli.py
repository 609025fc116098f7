# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
bsh CLI entry point.

Design:
- CLI owns process startup: config, commands file resolution, wiring.
- No arguments: interactive session (ui.InteractiveUI over session.Session).
- Otherwise: argparse subcommands; a first token that is not a known
  subcommand or flag is treated as `run`.
- The wrapped command's exit status is never used as bsh's own.
"""

from __future__ import annotations

import argparse
import sys
import traceback
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from . import commands_file, config
from .config import tag
from .engine import ExecutionEngine, RunResult
from .errors import ConfigIOError, LookupMiss, ValidationReject
from .executor import SubprocessExecutor
from .interfaces import CommandStore, ConfigModel
from .session import Action, Session
from .store import JSONCommandStore
from .utils import format_table

SUBCOMMANDS = {
    "add": ["a"],
    "run": ["r"],
    "delete": ["d"],
    "update": ["u"],
    "list": ["l"],
}

KNOWN_FIRST_TOKENS = (
    set(SUBCOMMANDS)
    | {alias for aliases in SUBCOMMANDS.values() for alias in aliases}
    | {"help", "-h", "--help", "-V", "--version"}
)

LIST_TYPES = ("categories", "commands", "commands_with_aliases", "aliases")


def normalize_argv(argv: list[str]) -> list[str]:
    """Prepend 'run' when the first token is not a subcommand or flag."""
    if argv and argv[0] not in KNOWN_FIRST_TOKENS:
        return ["run", *argv]
    return list(argv)


# -----------------------
# Subcommand handlers
# -----------------------


def _cmd_add(
    args: argparse.Namespace, store: CommandStore, engine: ExecutionEngine
) -> str:
    category = args.category
    command = " ".join(args.command)

    if args.alias is None:
        if not store.add_category(category):
            return f"Category '{category}' already exists"
        return tag("OK", f"Added category '{category}'")

    if not command:
        raise ValidationReject(
            "When specifying an alias, a command must also be provided"
        )
    if not command.strip():
        raise ValidationReject("Command must not be empty")

    lines = []
    if not store.has_category(category):
        lines.append(
            f"Adding category '{category}', because it does not exist"
        )
    elif store.has_alias(category, args.alias):
        raise ValidationReject(
            f"Command '{args.alias}' already exists in category "
            f"'{category}'; use `bsh update {category} {args.alias} "
            f"<command>` to change it"
        )

    store.add_or_update_command(category, args.alias, command)
    lines.append(
        tag("OK", f"Added command '{command}' to category '{category}'")
    )
    return "\n".join(lines)


def _cmd_update(
    args: argparse.Namespace, store: CommandStore, engine: ExecutionEngine
) -> str:
    category = args.category
    command = " ".join(args.command)

    if not store.has_category(category):
        raise LookupMiss(category)
    if not store.has_alias(category, args.alias):
        raise LookupMiss(category, args.alias)
    if not command.strip():
        raise ValidationReject("Command must not be empty")

    store.add_or_update_command(category, args.alias, command)
    return tag(
        "OK", f"Updated command '{args.alias}' in category '{category}'"
    )


def _cmd_delete(
    args: argparse.Namespace, store: CommandStore, engine: ExecutionEngine
) -> str:
    category = args.category

    if not store.has_category(category):
        raise LookupMiss(category)

    if args.alias is None:
        store.remove_category(category)
        return tag("OK", f"Removed category '{category}'")

    if not store.remove_command(category, args.alias):
        raise LookupMiss(category, args.alias)
    return tag(
        "OK", f"Removed command '{args.alias}' from category '{category}'"
    )


def _cmd_run(
    args: argparse.Namespace, store: CommandStore, engine: ExecutionEngine
) -> str:
    # The engine reports its own outcome
    engine.run(args.category, args.alias)
    return ""


def _list_rows(
    store: CommandStore, list_type: str, category: str | None
) -> tuple[list[str], list[list[str]]]:
    if list_type == "categories":
        return ["CATEGORY", "COMMANDS"], [
            [name, str(len(store.list_commands(name)))]
            for name in store.list_categories()
        ]

    categories = [category] if category else store.list_categories()
    with_category = category is None

    columns = {
        "commands": ["COMMAND"],
        "commands_with_aliases": ["COMMAND", "ALIAS"],
        "aliases": ["ALIAS", "COMMAND"],
    }[list_type]

    rows: list[list[str]] = []
    for name in categories:
        for entry in store.list_commands(name):
            values = {"ALIAS": entry["alias"], "COMMAND": entry["command"]}
            row = [values[col] for col in columns]
            rows.append([name, *row] if with_category else row)

    headers = ["CATEGORY", *columns] if with_category else columns
    return headers, rows


def _cmd_list(
    args: argparse.Namespace, store: CommandStore, engine: ExecutionEngine
) -> str:
    category = args.category
    if args.type == "categories":
        category = None
    elif category is not None and not store.has_category(category):
        return tag("ERR", f"Category '{category}' not found")

    headers, rows = _list_rows(store, args.type, category)

    label = args.type.replace("_", " ")
    title = (
        f"{label.capitalize()} in category '{category}':"
        if category
        else f"All {label}:"
    )
    if not rows:
        return f"{title}\n  (none)"
    return format_table(headers, rows, title)


# -----------------------
# Parser
# -----------------------


def build_parser(version: str = "0.1.0") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bsh",
        description=(
            "Organizes and provides quick access to frequently used "
            "shell commands"
        ),
        epilog="Run without arguments for the interactive session",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"bsh {version}"
    )
    sub = parser.add_subparsers(dest="subcommand", metavar="COMMAND")
    sub.required = True

    p_add = sub.add_parser(
        "add",
        aliases=SUBCOMMANDS["add"],
        help="Add a command to a category, or create the category "
        "if no command is given",
    )
    p_add.add_argument("category", metavar="CATEGORY")
    p_add.add_argument("alias", metavar="ALIAS", nargs="?")
    p_add.add_argument("command", metavar="COMMAND", nargs="*")
    p_add.set_defaults(handler=_cmd_add)

    p_run = sub.add_parser(
        "run",
        aliases=SUBCOMMANDS["run"],
        help="Run a command from a category",
    )
    p_run.add_argument("category", metavar="CATEGORY")
    p_run.add_argument("alias", metavar="ALIAS")
    p_run.set_defaults(handler=_cmd_run)

    p_delete = sub.add_parser(
        "delete",
        aliases=SUBCOMMANDS["delete"],
        help="Remove a command from a category, or the whole category "
        "if no alias is given",
    )
    p_delete.add_argument("category", metavar="CATEGORY")
    p_delete.add_argument("alias", metavar="ALIAS", nargs="?")
    p_delete.set_defaults(handler=_cmd_delete)

    p_update = sub.add_parser(
        "update",
        aliases=SUBCOMMANDS["update"],
        help="Replace the text of an existing command",
    )
    p_update.add_argument("category", metavar="CATEGORY")
    p_update.add_argument("alias", metavar="ALIAS")
    p_update.add_argument("command", metavar="COMMAND", nargs="+")
    p_update.set_defaults(handler=_cmd_update)

    p_list = sub.add_parser(
        "list",
        aliases=SUBCOMMANDS["list"],
        help="List categories, commands, commands with aliases, or aliases",
    )
    p_list.add_argument("type", choices=LIST_TYPES)
    p_list.add_argument("category", metavar="CATEGORY", nargs="?")
    p_list.set_defaults(handler=_cmd_list)

    return parser


def dispatch(
    args: argparse.Namespace, store: CommandStore, engine: ExecutionEngine
) -> str:
    """Run a parsed subcommand; recoverable errors become messages."""
    try:
        return args.handler(args, store, engine)
    except (LookupMiss, ValidationReject) as e:
        return tag("ERR", str(e))


# -----------------------
# Interactive session
# -----------------------


def run_interactive(
    store: CommandStore,
    engine: ExecutionEngine,
    cfg: ConfigModel | None = None,
    ui_factory: Callable | None = None,
) -> RunResult | None:
    """Run one interactive session; returns the engine result if a
    command was chosen."""
    if ui_factory is None:
        from .ui import InteractiveUI

        ui_factory = InteractiveUI

    session = Session(store=store)
    ui = ui_factory(session, cfg)
    action = ui.run()

    # Terminal is restored here; placeholder prompts use plain stdin
    if action is Action.RUN and session.run_target is not None:
        return engine.run(*session.run_target)
    return None


# -----------------------
# Entry point
# -----------------------


def write_crash_log(
    error: BaseException,
    mode: str = "",
    raw_command: str = "",
    commands_file: Path | None = None,
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions or critical failures.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        crash_log = config.crash_log_path(config.get_data_root())
        crash_log.parent.mkdir(parents=True, exist_ok=True)

        lines = [datetime.now().isoformat()]
        if mode:
            lines.append(f"mode={mode}")
        if raw_command:
            lines.append(f"raw={raw_command}")
        if commands_file:
            lines.append(f"commands_file={commands_file}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(
                traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            )
        )
        lines.append("----")

        with crash_log.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # Already in an error state; a missing crash log must not mask it
        pass


def _wire(
    cfg: config.YAMLConfig,
) -> tuple[Path, JSONCommandStore, ExecutionEngine]:
    path = config.resolve_commands_path(cfg)
    commands_file.ensure_commands_file(path)
    store = JSONCommandStore(path)

    mode = str(cfg.get_path("execution.mode", "shell"))
    force_color = bool(cfg.get_path("execution.force_color", False))
    try:
        executor = SubprocessExecutor(force_color=force_color, mode=mode)
    except ValueError as e:
        raise ConfigIOError(str(e)) from e

    engine = ExecutionEngine(store=store, executor=executor)
    return path, store, engine


def main(argv: list[str] | None = None) -> int:
    """Main entry point for bsh."""
    argv = sys.argv[1:] if argv is None else argv
    mode = "cli" if argv else "interactive"
    path: Path | None = None

    try:
        cfg = config.load_system_config()
        path, store, engine = _wire(cfg)

        if not argv:
            run_interactive(store, engine, cfg)
            return 0

        parser = build_parser(str(cfg.get_path("system.version", "0.1.0")))
        if argv[0] == "help":
            parser.print_help()
            return 0
        args = parser.parse_args(normalize_argv(argv))
        output = dispatch(args, store, engine)
        if output:
            print(output)
        return 0

    except ConfigIOError as e:
        # Includes PersistError: the write failed, the session is over
        write_crash_log(
            e, mode=mode, raw_command=" ".join(argv), commands_file=path
        )
        print(tag("ERR", str(e)), file=sys.stderr)
        return 1

    except Exception as e:
        write_crash_log(
            e, mode=mode, raw_command=" ".join(argv), commands_file=path
        )
        print(
            tag("ERR", f"Unhandled exception: {type(e).__name__}: {e}"),
            file=sys.stderr,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
