# kedit/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Translates raw curses input into the editor's abstract `InputEvent`s.

Key Features:
- Maps curses key codes (arrows, Home/End, PageUp/PageDown, Delete, Backspace,
  Enter, resize) to `Key` members.
- Decodes ESC-prefixed CSI/SS3 sequences for terminals where keypad mode does
  not translate them.
- Reports Ctrl+letter chords as `Key.CTRL` events so the session can match
  them against its configured quit/save bindings.
- Accepts printable characters only when `wcwidth` says they occupy screen cells.
- Converts a failed read into `KeyReadFailure`.

Intended Usage:
---------------
Instantiate KeyBinder with the curses window and call `read_event()` once per
loop iteration.
"""

import curses
import logging
from typing import Union

from wcwidth import wcswidth

from kedit.core.errors import KeyReadFailure
from kedit.core.InputEvent import InputEvent, Key
from kedit.utils.logging_config import KEY_LOGGER

ESC = 27


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Reads key presses from a curses window and translates them into
    `InputEvent`s.

    Attributes:
        stdscr (curses.window): Window keys are read from.
        key_codes (dict[int, Key]): curses / control codes with a fixed meaning.
    """
    # Escape sequences without the leading ESC (read_event() consumes it).
    ESCAPE_SEQUENCE_MAP: dict[str, Key] = {
        # Arrows (CSI and SS3)
        "[A": Key.UP, "[B": Key.DOWN, "[C": Key.RIGHT, "[D": Key.LEFT,
        "OA": Key.UP, "OB": Key.DOWN, "OC": Key.RIGHT, "OD": Key.LEFT,

        # Home/End (CSI/SS3 and tilde variants)
        "[H": Key.HOME, "[F": Key.END, "OH": Key.HOME, "OF": Key.END,
        "[1~": Key.HOME, "[4~": Key.END, "[7~": Key.HOME, "[8~": Key.END,

        # Delete/PageUp/PageDown (~ style)
        "[3~": Key.DELETE, "[5~": Key.PAGE_UP, "[6~": Key.PAGE_DOWN,
    }

    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self.key_codes: dict[int, Key] = self._build_key_codes()
        logging.debug("KeyBinder initialized with %d fixed key codes", len(self.key_codes))

    @staticmethod
    def _build_key_codes() -> dict[int, Key]:
        """Fixed curses and ASCII control codes."""
        return {
            curses.KEY_UP: Key.UP,
            curses.KEY_DOWN: Key.DOWN,
            curses.KEY_LEFT: Key.LEFT,
            curses.KEY_RIGHT: Key.RIGHT,
            curses.KEY_HOME: Key.HOME,
            getattr(curses, "KEY_END", curses.KEY_LL): Key.END,
            curses.KEY_PPAGE: Key.PAGE_UP,
            curses.KEY_NPAGE: Key.PAGE_DOWN,
            curses.KEY_DC: Key.DELETE,
            curses.KEY_BACKSPACE: Key.BACKSPACE,
            curses.KEY_ENTER: Key.ENTER,
            curses.KEY_RESIZE: Key.RESIZE,
            8: Key.BACKSPACE,  # Ctrl+H
            127: Key.BACKSPACE,  # DEL sent by most terminals for Backspace
            10: Key.ENTER,  # LF
            13: Key.ENTER,  # CR
            ESC: Key.ESCAPE,
        }

    def translate(self, key: Union[str, int]) -> InputEvent:
        """Maps one value returned by `get_wch()` to an `InputEvent`."""
        code = ord(key) if isinstance(key, str) and len(key) == 1 else key

        if isinstance(code, int):
            if code in self.key_codes:
                return InputEvent(self.key_codes[code])
            if 1 <= code <= 26:
                return InputEvent(Key.CTRL, chr(code + ord("a") - 1))

        if isinstance(key, str) and len(key) == 1 and wcswidth(key) > 0:
            return InputEvent(Key.CHAR, key)

        return InputEvent(Key.UNKNOWN)

    def _read_escape_sequence(self) -> InputEvent:
        """Consumes the bytes queued after ESC and decodes them."""
        seq = ""
        self.stdscr.nodelay(True)
        try:
            while True:
                try:
                    nx = self.stdscr.get_wch()
                except curses.error:
                    break  # queue drained
                seq += nx if isinstance(nx, str) else f"<{nx}>"
        finally:
            self.stdscr.nodelay(False)

        if not seq:
            return InputEvent(Key.ESCAPE)

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if mapped:
            logging.debug("read_event: ESC %r -> %s", seq, mapped.value)
            return InputEvent(mapped)

        logging.warning("read_event: unknown escape sequence: ESC + %r", seq)
        return InputEvent(Key.UNKNOWN)

    def read_event(self) -> InputEvent:
        """Blocks for one key press and returns it as an `InputEvent`.

        Raises:
            KeyReadFailure: The terminal read failed.
        """
        try:
            key = self.stdscr.get_wch()
        except curses.error as e:
            logging.error("read_event: unable to read keypress: %s", e)
            raise KeyReadFailure("unable to read keypress") from e

        if key == "\x1b" or key == ESC:
            event = self._read_escape_sequence()
        else:
            event = self.translate(key)

        KEY_LOGGER.debug("raw=%r -> %s %r", key, event.key.value, event.char)
        return event
