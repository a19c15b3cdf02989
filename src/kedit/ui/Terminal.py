# kedit/ui/Terminal.py
"""CursesTerminal: the production implementation of the session's terminal
capability, built from the raw-mode guard, the key binder and the screen
drawer.
"""

from __future__ import annotations

import curses
from typing import Any, Optional

from kedit.core.InputEvent import InputEvent
from kedit.core.RenderPlan import RenderPlan
from kedit.ui.DrawScreen import DrawScreen
from kedit.ui.KeyBinder import KeyBinder
from kedit.ui.TerminalAppMode import TerminalAppMode


class CursesTerminal:
    """Terminal backed by a curses window.

    Use as a context manager around the session so raw mode is left on every
    exit path::

        with CursesTerminal(stdscr, config) as terminal:
            EditorSession(config, buffer, terminal).run()
    """

    def __init__(self, stdscr: "curses.window", config: Optional[dict[str, Any]] = None) -> None:
        self.stdscr = stdscr
        self.mode = TerminalAppMode(stdscr)
        self.keybinder = KeyBinder(stdscr)
        self.drawer = DrawScreen(stdscr, config or {})

    def __enter__(self) -> "CursesTerminal":
        self.enter_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.leave_raw_mode()

    def enter_raw_mode(self) -> None:
        self.mode.enter(self.stdscr)

    def leave_raw_mode(self) -> None:
        self.mode.exit()

    def size(self) -> tuple[int, int]:
        height, width = self.stdscr.getmaxyx()
        return width, height

    def read_event(self) -> InputEvent:
        return self.keybinder.read_event()

    def render(self, plan: RenderPlan) -> None:
        self.drawer.draw(plan)
