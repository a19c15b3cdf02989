# src/kedit/ui/TerminalAppMode.py
from __future__ import annotations

import curses
import logging
from typing import Optional

try:
    from curses import putp, setupterm, tigetstr
except Exception:  # pragma: no cover
    tigetstr = None  # type: ignore[assignment]
    setupterm = None  # type: ignore[assignment]
    putp = None  # type: ignore[assignment]


class TerminalAppMode:
    """
    Scoped raw-mode guard for the editor session:

    - Alternate screen buffer (smcup/rmcup) so the shell prompt is hidden.
    - Application cursor keys (smkx/rmkx) so arrows reach the editor.
    - raw + noecho (+ cbreak fallback), keypad(True), visible cursor.

    Use as a context manager, or pair `enter(stdscr)` with `exit()` in
    try/finally. `exit()` is idempotent, so nested cleanup paths are safe.
    """

    def __init__(self, stdscr: Optional[curses.window] = None) -> None:
        self._entered: bool = False
        self._stdscr: Optional[curses.window] = stdscr

    @property
    def active(self) -> bool:
        return self._entered

    def __enter__(self) -> "TerminalAppMode":
        if self._stdscr is None:
            raise RuntimeError("TerminalAppMode needs a curses window to enter raw mode")
        self.enter(self._stdscr)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exit()

    def enter(self, stdscr: curses.window) -> None:
        if self._entered:
            return
        self._stdscr = stdscr

        try:
            if setupterm:
                setupterm()
        except Exception as e:
            logging.debug("setupterm() failed or not required: %r", e)

        self._tputs("smcup")
        self._tputs("smkx")

        # Input modes: deliver Ctrl-Q / Ctrl-S to the editor instead of the tty.
        try:
            curses.raw()
        except curses.error:
            curses.cbreak()
        curses.noecho()
        stdscr.keypad(True)

        # ESC must not stall the read loop for the default second.
        try:
            curses.set_escdelay(25)
        except (AttributeError, curses.error):
            pass
        try:
            curses.curs_set(1)
        except curses.error:
            pass

        stdscr.scrollok(False)
        stdscr.leaveok(False)
        stdscr.erase()
        stdscr.refresh()

        self._entered = True
        logging.debug("TerminalAppMode: entered raw mode.")

    def exit(self) -> None:
        if not self._entered:
            return

        try:
            if self._stdscr is not None:
                self._stdscr.keypad(False)
        except curses.error:
            pass

        try:
            curses.noraw()
        except curses.error:
            try:
                curses.nocbreak()
            except curses.error:
                pass
        try:
            curses.echo()
        except curses.error:
            pass

        self._tputs("rmkx")
        self._tputs("rmcup")

        self._entered = False
        logging.debug("TerminalAppMode: exited (restored terminal modes).")

    # ── helpers ───────────────────────────────────────────────────────────────

    def _tputs(self, capname: str) -> None:
        try:
            if tigetstr and putp:
                s = tigetstr(capname)
                if s:
                    putp(s)
        except Exception as e:
            # Missing capability (FreeBSD console, dumb terminals).
            logging.debug("tputs(%s) skipped: %r", capname, e)
