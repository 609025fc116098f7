# bsh — Categorized Shell Command Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

from .session import Action, Button, InputMode, Key, Mode, Session

if TYPE_CHECKING:
    from .interfaces import ConfigModel  # pragma: no cover


# ----------------------------
# Config helpers
# ----------------------------


def _cfg_get_path(config: ConfigModel | None, path: str, default: Any):
    if config is None or not hasattr(config, "get_path"):
        return default
    try:
        return config.get_path(path, default)
    except Exception:
        return default


def _cfg_dict(config: ConfigModel | None, path: str, default: dict) -> dict:
    val = _cfg_get_path(config, path, default)
    return val if isinstance(val, dict) else default


def _cfg_str(config: ConfigModel | None, path: str, default: str) -> str:
    val = _cfg_get_path(config, path, default)
    return str(val) if val is not None else default


# ----------------------------
# Theme / Style
# ----------------------------


def _default_style_dict() -> dict[str, str]:
    return {
        "bsh.title": "#5f87ff bold",
        "bsh.item": "#d0d0d0",
        "bsh.item.selected": "bg:#303030 #ffffff bold",
        "bsh.command": "#808080",
        "bsh.button": "bg:#202020 #a0a0a0",
        "bsh.button.active": "bg:#d0d0d0 #0b0b0b bold",
        "bsh.input": "#d75f87",
        "bsh.empty": "#666666 italic",
        "bsh.help": "bg:#0b0b0b #808080",
    }


def _build_style(config: ConfigModel | None) -> Style:
    base = _default_style_dict()
    overrides = _cfg_dict(config, "ui.theme.style", {})
    # only keep string->string
    for k, v in list(overrides.items()):
        if isinstance(k, str) and isinstance(v, str):
            base[k] = v
    return Style.from_dict(base)


DEFAULT_TITLES = {
    "categories": "Categories",
    "commands": "Commands",
    "adding_category": "Add Category",
    "adding_command": "Add Command (<alias> <command>)",
    "editing": "Update Command",
}

DEFAULT_BUTTONS = ("Update", "Delete")

DEFAULT_HELP = (
    "↑/↓ select  → open  ← back  Enter run/confirm  "
    "d delete category  Esc quit"
)


# ----------------------------
# Full-screen session UI
# ----------------------------


class InteractiveUI:
    """
    Full-screen terminal front end for a Session.

      - Application.run() owns raw mode + the alternate screen and restores
        both on every exit path (quit, run, exceptions).
      - Each key press is translated into a session Key; RUN/QUIT end the
        application and are returned from run().
      - Painting only reads the session's public views.
    """

    def __init__(
        self, session: Session, config: ConfigModel | None = None
    ) -> None:
        self.session = session
        self.config = config
        self._style = _build_style(config)

        titles = _cfg_dict(config, "ui.titles", {})
        self._titles = {
            key: str(titles.get(key, default))
            for key, default in DEFAULT_TITLES.items()
        }
        buttons = _cfg_get_path(config, "ui.buttons", None)
        if isinstance(buttons, list) and len(buttons) == 2:
            self._buttons = (str(buttons[0]), str(buttons[1]))
        else:
            self._buttons = DEFAULT_BUTTONS
        self._help = _cfg_str(config, "ui.help", DEFAULT_HELP)

    # ---------- rendering ----------

    def _title(self) -> str:
        session = self.session
        if session.input_mode is InputMode.EDITING:
            return self._titles["editing"]
        if session.input_mode is InputMode.ADDING:
            if session.mode is Mode.CATEGORY_LIST:
                return self._titles["adding_category"]
            return self._titles["adding_command"]
        if session.mode is Mode.CATEGORY_LIST:
            return self._titles["categories"]
        index = session.selected_category
        name = session.categories()[index] if index is not None else ""
        return f"{self._titles['commands']}: {name}"

    def _input_line(self) -> list[tuple[str, str]]:
        return [
            ("class:bsh.input", f"  > {self.session.input_buffer}_\n"),
        ]

    def _category_lines(self) -> list[tuple[str, str]]:
        session = self.session
        out: list[tuple[str, str]] = []
        names = session.categories()
        if not names:
            out.append(("class:bsh.empty", "  (no categories)\n"))
        for i, name in enumerate(names):
            selected = (
                i == session.selected_category
                and session.input_mode is InputMode.NORMAL
            )
            style = "class:bsh.item.selected" if selected else "class:bsh.item"
            out.append((style, f"  {name}\n"))
        if session.input_mode is InputMode.ADDING:
            out.extend(self._input_line())
        return out

    def _command_lines(self) -> list[tuple[str, str]]:
        session = self.session
        out: list[tuple[str, str]] = []
        commands = session.commands()
        if not commands:
            out.append(("class:bsh.empty", "  (no commands)\n"))
        for i, (alias, text) in enumerate(commands):
            selected = i == session.selected_command
            style = "class:bsh.item.selected" if selected else "class:bsh.item"
            out.append((style, f"  {alias}"))
            out.append(("class:bsh.command", f"  {text}\n"))
            if selected and session.mode is Mode.ACTION_BUTTONS:
                out.extend(self._button_line())
        if session.input_mode is not InputMode.NORMAL:
            out.extend(self._input_line())
        return out

    def _button_line(self) -> list[tuple[str, str]]:
        out: list[tuple[str, str]] = [("", "    ")]
        for button in Button:
            active = button is self.session.selected_button
            style = "class:bsh.button.active" if active else "class:bsh.button"
            out.append((style, f" {self._buttons[button]} "))
            out.append(("", " "))
        out.append(("", "\n"))
        return out

    def render(self) -> list[tuple[str, str]]:
        """Formatted text for the current session state."""
        out: list[tuple[str, str]] = [
            ("class:bsh.title", f" {self._title()}\n\n")
        ]
        if self.session.mode is Mode.CATEGORY_LIST:
            out.extend(self._category_lines())
        else:
            out.extend(self._command_lines())
        return out

    # ---------- application ----------

    def build_application(self) -> Application:
        body = Window(
            content=FormattedTextControl(self.render, focusable=True),
            wrap_lines=True,
        )
        help_bar = Window(
            content=FormattedTextControl(self._help),
            height=1,
            style="class:bsh.help",
        )
        return Application(
            layout=Layout(HSplit([body, help_bar]), focused_element=body),
            key_bindings=self.build_key_bindings(),
            style=self._style,
            full_screen=True,
        )

    def run(self) -> Action:
        """Run the session until RUN or QUIT; the terminal is restored on
        return and when an exception propagates."""
        result = self.build_application().run()
        return result if isinstance(result, Action) else Action.QUIT

    # ---------- keybindings ----------

    def build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        session = self.session

        def _dispatch(event, key: Key, char: str = "") -> None:
            try:
                action = session.handle_key(key, char)
            except Exception as e:
                # Leave the alternate screen before the error surfaces
                event.app.exit(exception=e)
                return
            if action is not Action.CONTINUE:
                event.app.exit(result=action)

        named = {
            "up": Key.UP,
            "down": Key.DOWN,
            "left": Key.LEFT,
            "right": Key.RIGHT,
            "enter": Key.ENTER,
            "backspace": Key.BACKSPACE,
        }
        for name, key in named.items():

            @kb.add(name)
            def _(event, key=key):
                _dispatch(event, key)

        # eager: do not wait for a possible Alt/escape sequence
        @kb.add("escape", eager=True)
        def _(event):
            _dispatch(event, Key.ESCAPE)

        @kb.add("c-c")
        def _(event):
            event.app.exit(result=Action.QUIT)

        @kb.add("<any>")
        def _(event):
            _dispatch(event, Key.CHAR, event.data)

        return kb
