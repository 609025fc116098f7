# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
bsh interactive session.

Core of the interactive mode:
- hierarchical navigation: categories -> commands -> action buttons
- in-place text capture for adding categories/commands and editing commands
- write-through mutation of the injected CommandStore
- RUN / QUIT actions handed back to the UI loop

Important boundary:
- Session never touches the terminal. The UI maps key presses to Key values,
  paints the read-only views and owns the raw-mode/alternate-screen scope.
- Navigation uses an ordered snapshot kept in step with every mutation, never
  the store's own iteration order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum, auto

from .interfaces import CommandStore
from .utils import split_alias_command


# -----------------------
# Keys, actions, modes
# -----------------------


class Key(Enum):
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    CHAR = auto()


class Action(Enum):
    CONTINUE = auto()
    RUN = auto()
    QUIT = auto()


class Mode(Enum):
    CATEGORY_LIST = "category_list"
    COMMAND_LIST = "command_list"
    ACTION_BUTTONS = "action_buttons"


class InputMode(Enum):
    NORMAL = "normal"
    EDITING = "editing"
    ADDING = "adding"


class Button(IntEnum):
    UPDATE = 0
    DELETE = 1


DELETE_CATEGORY_KEY = "d"


# -----------------------
# State variants
# -----------------------


@dataclass(frozen=True)
class BrowsingCategories:
    selected: int | None


@dataclass(frozen=True)
class BrowsingCommands:
    category: int
    selected: int | None


@dataclass(frozen=True)
class BrowsingButtons:
    category: int
    command: int
    button: Button = Button.UPDATE


@dataclass(frozen=True)
class EditingEntry:
    """Text capture for a new command text; Esc returns to ``parent``."""
    parent: BrowsingButtons
    buffer: str = ""


@dataclass(frozen=True)
class AddingEntry:
    """Text capture for a new category or command."""
    parent: BrowsingCategories | BrowsingCommands
    buffer: str = ""


Browsing = BrowsingCategories | BrowsingCommands | BrowsingButtons
State = Browsing | EditingEntry | AddingEntry

_MODES = {
    BrowsingCategories: Mode.CATEGORY_LIST,
    BrowsingCommands: Mode.COMMAND_LIST,
    BrowsingButtons: Mode.ACTION_BUTTONS,
}


# -----------------------
# Ordered snapshot
# -----------------------


@dataclass
class OrderedSnapshot:
    """Positional view of the store used for cursor navigation.

    Built sorted at session start; additions are appended, deletions and
    edits happen in place.
    """

    categories: list[str] = field(default_factory=list)
    commands: dict[str, list[tuple[str, str]]] = field(default_factory=dict)

    @classmethod
    def from_store(cls, store: CommandStore) -> OrderedSnapshot:
        snap = cls()
        for name in store.list_categories():
            snap.categories.append(name)
            snap.commands[name] = [
                (row["alias"], row["command"])
                for row in store.list_commands(name)
            ]
        return snap

    def category_name(self, index: int) -> str:
        return self.categories[index]

    def commands_at(self, index: int) -> list[tuple[str, str]]:
        return self.commands[self.categories[index]]

    def add_category(self, name: str) -> int:
        self.categories.append(name)
        self.commands[name] = []
        return len(self.categories) - 1

    def remove_category(self, index: int) -> None:
        name = self.categories.pop(index)
        del self.commands[name]

    def add_command(self, category: int, alias: str, text: str) -> int:
        entries = self.commands_at(category)
        entries.append((alias, text))
        return len(entries) - 1

    def update_command(self, category: int, command: int, text: str) -> None:
        entries = self.commands_at(category)
        alias, _old = entries[command]
        entries[command] = (alias, text)

    def remove_command(self, category: int, command: int) -> None:
        del self.commands_at(category)[command]


def _clamp(index: int, length: int) -> int | None:
    if length == 0:
        return None
    return max(0, min(index, length - 1))


# -----------------------
# Session
# -----------------------


@dataclass
class Session:
    """Interactive session state machine.

    Feed it one key at a time through handle_key(); it mutates its own
    state and the store and reports whether the UI loop should go on,
    quit, or run ``run_target``.
    """

    store: CommandStore

    snapshot: OrderedSnapshot = field(init=False)
    state: State = field(init=False)

    # (category, alias) chosen by the RUN action
    run_target: tuple[str, str] | None = None

    def __post_init__(self) -> None:
        self.snapshot = OrderedSnapshot.from_store(self.store)
        self.state = BrowsingCategories(
            selected=0 if self.snapshot.categories else None
        )

    # -----------------------
    # Read-only views (renderer)
    # -----------------------

    @property
    def mode(self) -> Mode:
        state = self.state
        if isinstance(state, (EditingEntry, AddingEntry)):
            state = state.parent
        return _MODES[type(state)]

    @property
    def input_mode(self) -> InputMode:
        if isinstance(self.state, EditingEntry):
            return InputMode.EDITING
        if isinstance(self.state, AddingEntry):
            return InputMode.ADDING
        return InputMode.NORMAL

    @property
    def selected_category(self) -> int | None:
        state = self.state
        if isinstance(state, (EditingEntry, AddingEntry)):
            state = state.parent
        if isinstance(state, BrowsingCategories):
            return state.selected
        return state.category

    @property
    def selected_command(self) -> int | None:
        state = self.state
        if isinstance(state, (EditingEntry, AddingEntry)):
            state = state.parent
        if isinstance(state, BrowsingCommands):
            return state.selected
        if isinstance(state, BrowsingButtons):
            return state.command
        return None

    @property
    def selected_button(self) -> Button | None:
        state = self.state
        if isinstance(state, EditingEntry):
            state = state.parent
        if isinstance(state, BrowsingButtons):
            return state.button
        return None

    @property
    def input_buffer(self) -> str:
        if isinstance(self.state, (EditingEntry, AddingEntry)):
            return self.state.buffer
        return ""

    def categories(self) -> list[str]:
        return list(self.snapshot.categories)

    def commands(self) -> list[tuple[str, str]]:
        """Commands of the selected category ([] if none selected)."""
        index = self.selected_category
        if index is None:
            return []
        return list(self.snapshot.commands_at(index))

    # -----------------------
    # Dispatch
    # -----------------------

    def handle_key(self, key: Key, char: str = "") -> Action:
        """Apply one key press."""
        state = self.state

        if isinstance(state, (EditingEntry, AddingEntry)):
            self._handle_input(state, key, char)
            return Action.CONTINUE

        if key is Key.ESCAPE:
            return Action.QUIT

        if isinstance(state, BrowsingCategories):
            return self._handle_categories(state, key, char)
        if isinstance(state, BrowsingCommands):
            return self._handle_commands(state, key)
        return self._handle_buttons(state, key)

    def _handle_categories(
        self, state: BrowsingCategories, key: Key, char: str
    ) -> Action:
        count = len(self.snapshot.categories)
        sel = state.selected

        if key is Key.UP:
            if sel is not None and sel > 0:
                self.state = BrowsingCategories(sel - 1)
        elif key is Key.DOWN:
            if sel is None or sel >= count - 1:
                self.state = AddingEntry(parent=state)
            else:
                self.state = BrowsingCategories(sel + 1)
        elif key in (Key.RIGHT, Key.ENTER):
            if count and sel is not None:
                cmds = self.snapshot.commands_at(sel)
                self.state = BrowsingCommands(
                    category=sel, selected=0 if cmds else None
                )
        elif key is Key.CHAR and char == DELETE_CATEGORY_KEY:
            if sel is not None:
                self._delete_category(sel)

        return Action.CONTINUE

    def _handle_commands(
        self, state: BrowsingCommands, key: Key
    ) -> Action:
        count = len(self.snapshot.commands_at(state.category))
        sel = state.selected

        if key is Key.UP:
            if sel is not None and sel > 0:
                self.state = BrowsingCommands(state.category, sel - 1)
        elif key is Key.DOWN:
            if sel is None or sel >= count - 1:
                self.state = AddingEntry(parent=state)
            else:
                self.state = BrowsingCommands(state.category, sel + 1)
        elif key is Key.RIGHT:
            if count and sel is not None:
                self.state = BrowsingButtons(state.category, sel)
        elif key is Key.LEFT:
            self.state = BrowsingCategories(state.category)
        elif key is Key.ENTER:
            if sel is not None:
                alias, _text = self.snapshot.commands_at(state.category)[sel]
                self.run_target = (
                    self.snapshot.category_name(state.category),
                    alias,
                )
                return Action.RUN

        return Action.CONTINUE

    def _handle_buttons(self, state: BrowsingButtons, key: Key) -> Action:
        if key is Key.LEFT:
            if state.button is Button.DELETE:
                self.state = BrowsingButtons(
                    state.category, state.command, Button.UPDATE
                )
            else:
                self.state = BrowsingCommands(state.category, state.command)
        elif key is Key.RIGHT:
            self.state = BrowsingButtons(
                state.category, state.command, Button.DELETE
            )
        elif key is Key.ENTER:
            if state.button is Button.UPDATE:
                _alias, text = self.snapshot.commands_at(state.category)[
                    state.command
                ]
                self.state = EditingEntry(parent=state, buffer=text)
            else:
                self._delete_command(state.category, state.command)

        return Action.CONTINUE

    # -----------------------
    # Text capture
    # -----------------------

    def _handle_input(
        self, state: EditingEntry | AddingEntry, key: Key, char: str
    ) -> None:
        if key is Key.CHAR:
            if char and char.isprintable():
                self.state = replace(state, buffer=state.buffer + char)
        elif key is Key.BACKSPACE:
            self.state = replace(state, buffer=state.buffer[:-1])
        elif key is Key.ESCAPE:
            self.state = state.parent
        elif key is Key.ENTER:
            if isinstance(state, EditingEntry):
                self._commit_edit(state)
            elif isinstance(state.parent, BrowsingCategories):
                self._commit_new_category(state)
            else:
                self._commit_new_command(state, state.parent)

    def _commit_new_category(self, state: AddingEntry) -> None:
        name = state.buffer
        # Empty or duplicate names leave the buffer open for correction
        if not name or self.store.has_category(name):
            return
        self.store.add_category(name)
        index = self.snapshot.add_category(name)
        self.state = BrowsingCategories(index)

    def _commit_new_command(
        self, state: AddingEntry, parent: BrowsingCommands
    ) -> None:
        parts = split_alias_command(state.buffer)
        if parts is None:
            return
        alias, text = parts
        category = self.snapshot.category_name(parent.category)
        if self.store.has_alias(category, alias):
            return
        self.store.add_or_update_command(category, alias, text)
        index = self.snapshot.add_command(parent.category, alias, text)
        self.state = BrowsingCommands(parent.category, index)

    def _commit_edit(self, state: EditingEntry) -> None:
        target = state.parent
        category = self.snapshot.category_name(target.category)
        alias, _old = self.snapshot.commands_at(target.category)[
            target.command
        ]
        self.store.add_or_update_command(category, alias, state.buffer)
        self.snapshot.update_command(
            target.category, target.command, state.buffer
        )
        self.state = BrowsingCommands(target.category, target.command)

    # -----------------------
    # Deletions
    # -----------------------

    def _delete_category(self, index: int) -> None:
        self.store.remove_category(self.snapshot.category_name(index))
        self.snapshot.remove_category(index)
        remaining = len(self.snapshot.categories)
        self.state = BrowsingCategories(
            None if remaining == 0 else max(index - 1, 0)
        )

    def _delete_command(self, category: int, command: int) -> None:
        alias, _text = self.snapshot.commands_at(category)[command]
        self.store.remove_command(self.snapshot.category_name(category), alias)
        self.snapshot.remove_command(category, command)
        remaining = len(self.snapshot.commands_at(category))
        self.state = BrowsingCommands(category, _clamp(command, remaining))

