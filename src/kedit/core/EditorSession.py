# kedit/core/EditorSession.py
"""kedit.core.EditorSession
===========================

EditorSession: the controller of one editing session.

It owns the LineBuffer, the Viewport, the cursor, the status message and the
quit-confirmation counter, and it is the only component that talks to the
terminal. One loop iteration is:

1. `build_render_plan()` recomputes the viewport and describes the frame.
2. The terminal draws the plan.
3. The terminal blocks for one key press.
4. `process_event()` dispatches the key, mutating buffer / cursor / status.

The loop ends when the quit protocol reaches `SessionState.TERMINATED`. A
`KeyReadFailure` raised by the terminal is not handled here: it propagates to
the host, which restores the terminal and exits.
"""

from __future__ import annotations

import logging
import os
import time
from enum import Enum
from typing import Any, Callable, Optional

from kedit import __version__
from kedit.core.CursorController import CursorController
from kedit.core.errors import IoFailure
from kedit.core.InputEvent import MOVEMENT_KEYS, InputEvent, Key
from kedit.core.LineBuffer import LineBuffer
from kedit.core.Position import Position
from kedit.core.RenderPlan import RenderPlan
from kedit.core.Terminal import Terminal
from kedit.core.Viewport import Viewport
from kedit.utils.logging_config import logger
from kedit.utils.utils import get_string_width, truncate_string

DEFAULT_QUIT_TIMES = 3
DEFAULT_STATUS_MESSAGE_TIMEOUT = 5.0
DEFAULT_QUIT_COMBO = "ctrl+q"
DEFAULT_SAVE_COMBO = "ctrl+s"


class SessionState(Enum):
    RUNNING = "running"
    CONFIRMING_QUIT = "confirming_quit"
    TERMINATED = "terminated"


class EditorSession:
    """Class EditorSession
    ========================
    Translates abstract input events into buffer and cursor operations and
    produces one RenderPlan per loop iteration.

    Attributes:
        config (dict): Application configuration (see `kedit.utils.utils.DEFAULT_CONFIG`).
        buffer (LineBuffer): The open document.
        viewport (Viewport): The visible window of the document.
        controller (CursorController): Cursor movement rules.
        cursor (Position): Current cursor in buffer coordinates.
        terminal (Optional[Terminal]): Drawing and input capability; required by
            `run()` and `prompt()` only.
        status_message (str): Transient message shown in the message bar.
        status_message_set_at (float): Clock value when the message was set.
        quit_attempts_remaining (int): Quit requests tolerated while dirty
            before the quit is forced.
        quit_combo / save_combo (InputEvent): Configured key bindings.
    """

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        buffer: Optional[LineBuffer] = None,
        terminal: Optional[Terminal] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config: dict[str, Any] = config or {}
        self.buffer: LineBuffer = buffer if buffer is not None else LineBuffer()
        self.viewport: Viewport = Viewport()
        self.controller: CursorController = CursorController(self.buffer, self.viewport)
        self.cursor: Position = Position()
        self.terminal: Optional[Terminal] = terminal
        self._clock = clock

        editor_cfg = self.config.get("editor", {})
        try:
            self.quit_times: int = int(editor_cfg.get("quit_times", DEFAULT_QUIT_TIMES))
        except (TypeError, ValueError):
            logging.error(f"Invalid editor.quit_times {editor_cfg.get('quit_times')!r}, using {DEFAULT_QUIT_TIMES}")
            self.quit_times = DEFAULT_QUIT_TIMES
        try:
            self.status_message_timeout: float = float(
                editor_cfg.get("status_message_timeout", DEFAULT_STATUS_MESSAGE_TIMEOUT)
            )
        except (TypeError, ValueError):
            self.status_message_timeout = DEFAULT_STATUS_MESSAGE_TIMEOUT

        keybindings = self.config.get("keybindings", {})
        self.quit_combo: InputEvent = self._load_combo(keybindings, "quit", DEFAULT_QUIT_COMBO)
        self.save_combo: InputEvent = self._load_combo(keybindings, "save", DEFAULT_SAVE_COMBO)

        self.status_message: str = ""
        self.status_message_set_at: float = 0.0
        self.quit_attempts_remaining: int = self.quit_times
        self._terminated: bool = False

        if self.terminal is not None:
            self.handle_resize()
        logging.debug(
            f"EditorSession initialized: {len(self.buffer)} lines, file={self.buffer.filename!r}"
        )

    @staticmethod
    def _load_combo(keybindings: dict[str, Any], action: str, default: str) -> InputEvent:
        spec = keybindings.get(action, default)
        try:
            return InputEvent.from_spec(str(spec))
        except ValueError as e:
            logging.error(f"Error parsing keybinding {spec!r} for action {action!r}: {e}. Using {default!r}.")
            return InputEvent.from_spec(default)

    # --- state ---
    @property
    def state(self) -> SessionState:
        if self._terminated:
            return SessionState.TERMINATED
        if self.quit_attempts_remaining < self.quit_times:
            return SessionState.CONFIRMING_QUIT
        return SessionState.RUNNING

    @property
    def running(self) -> bool:
        return not self._terminated

    @property
    def dirty(self) -> int:
        return self.buffer.dirty

    # --- status message ---
    def set_status_message(self, message: str) -> None:
        """Sets the message bar text and restarts its expiry timer."""
        self.status_message = str(message)
        self.status_message_set_at = self._clock()
        logging.debug(f"Status message set to: '{self.status_message}'")

    def current_status_message(self) -> str:
        """The status message, or "" once it is older than the timeout."""
        if not self.status_message:
            return ""
        if self._clock() - self.status_message_set_at >= self.status_message_timeout:
            return ""
        return self.status_message

    def help_message(self) -> str:
        return f"HELP: {self.save_combo.describe()} = save | {self.quit_combo.describe()} = quit"

    # --- dispatch ---
    def process_event(self, event: InputEvent) -> None:
        """Applies one key press to the session."""
        key = event.key

        if event == self.quit_combo:
            self.handle_quit()
        elif event == self.save_combo:
            self.save_file()
        elif key in MOVEMENT_KEYS:
            self.move_cursor(key)
        elif key is Key.ENTER:
            self.handle_enter()
        elif key is Key.BACKSPACE:
            self.handle_backspace()
        elif key is Key.DELETE:
            self.handle_delete()
        elif key is Key.CHAR:
            self.insert_char(event.char)
        elif key is Key.RESIZE:
            self.handle_resize()
        else:
            logging.debug(f"process_event: ignoring {event!r}")

    def handle_quit(self) -> None:
        """Quit protocol: clean buffers quit at once, dirty ones need confirmation."""
        if self.buffer.dirty == 0:
            logger.info("Quit requested on a clean buffer.")
            self._terminated = True
            return
        if self.quit_attempts_remaining <= 0:
            logger.warning(f"Forced quit with {self.buffer.dirty} unsaved changes.")
            self._terminated = True
            return
        self.quit_attempts_remaining -= 1
        self.set_status_message(
            f"WARNING!!! File has unsaved changes. Press {self.quit_combo.describe()} "
            f"{self.quit_attempts_remaining} more times to quit."
        )

    def move_cursor(self, direction: Key) -> None:
        self.cursor = self.controller.move(self.cursor, direction)

    def insert_char(self, ch: str) -> None:
        self.buffer.insert_char(self.cursor.y, self.cursor.x, ch)
        self.cursor = Position(self.cursor.x + 1, self.cursor.y)

    def handle_enter(self) -> None:
        self.buffer.split_line(self.cursor.y, self.cursor.x)
        self.cursor = Position(0, self.cursor.y + 1)

    def handle_backspace(self) -> None:
        new_position = self.buffer.delete_char_before(self.cursor.y, self.cursor.x)
        if new_position is not None:
            self.cursor = new_position

    def handle_delete(self) -> None:
        """Deletes the character under the cursor by stepping over it first."""
        self.move_cursor(Key.RIGHT)
        self.handle_backspace()

    def handle_resize(self) -> None:
        if self.terminal is None:
            return
        width, height = self.terminal.size()
        self.viewport.resize(width, height)

    # --- persistence ---
    def save_file(self) -> None:
        """Writes the buffer to its file, prompting for a name when it has none.

        Failures are reported in the message bar and leave the buffer dirty so
        the user can retry.
        """
        filename = self.buffer.filename
        if not filename:
            filename = self.prompt("Save as: {} (ESC to cancel)")
            if not filename:
                self.set_status_message("Save aborted")
                return

        try:
            written = self.buffer.write(filename)
        except IoFailure as e:
            logger.error(f"Save failed: {e}")
            self.set_status_message(f"Can't save! I/O error: {e.reason}")
            return
        self.quit_attempts_remaining = self.quit_times
        self.set_status_message(f"{os.path.basename(filename)} {written}L written")

    def prompt(self, template: str) -> Optional[str]:
        """Reads a line of input in the message bar.

        Args:
            template: Message with one ``{}`` placeholder for the typed text.

        Returns:
            Optional[str]: The entered text, or None when cancelled with Escape
            or when there is no terminal to read from.
        """
        if self.terminal is None:
            return None

        text = ""
        while True:
            self.set_status_message(template.format(text))
            self.refresh_screen()
            event = self.terminal.read_event()

            if event.key in (Key.BACKSPACE, Key.DELETE):
                text = text[:-1]
            elif event.key is Key.ESCAPE:
                self.set_status_message("")
                return None
            elif event.key is Key.ENTER:
                if text:
                    self.set_status_message("")
                    return text
            elif event.key is Key.CHAR:
                text += event.char
            elif event.key is Key.RESIZE:
                self.handle_resize()

    # --- rendering ---
    def _welcome_row(self) -> str:
        welcome = truncate_string(f"kedit editor -- version {__version__}", self.viewport.width)
        padding = (self.viewport.width - get_string_width(welcome)) // 2
        if padding > 0:
            return "~" + " " * (padding - 1) + welcome
        return welcome

    def _status_bar(self) -> str:
        width = self.viewport.width
        count = len(self.buffer)
        name = self.buffer.filename or "[No Name]"
        left = f"{name} - {count} lines{' (modified)' if self.buffer.dirty else ''}"
        right = f"{self.cursor.y + 1}/{count}"

        right_w = get_string_width(right)
        if right_w >= width:
            return truncate_string(right, width)
        left = truncate_string(left, width - right_w - 1)
        padding = width - get_string_width(left) - right_w
        return left + " " * padding + right

    def build_render_plan(self) -> RenderPlan:
        """Recomputes the viewport and describes the frame to draw."""
        self.cursor = self.controller.clamp(self.cursor)
        self.viewport.recompute(self.cursor)

        rows: list[str] = []
        for screen_row in range(self.viewport.height):
            file_row = self.viewport.row_offset + screen_row
            if file_row < len(self.buffer):
                rows.append(self.viewport.visible_slice(self.buffer, screen_row))
            elif len(self.buffer) == 0 and screen_row == self.viewport.height // 3:
                rows.append(self._welcome_row())
            else:
                rows.append("~")

        return RenderPlan(
            rows=rows,
            status_bar=self._status_bar(),
            message_bar=truncate_string(self.current_status_message(), self.viewport.width),
            cursor=self.viewport.screen_position(self.cursor),
            width=self.viewport.width,
        )

    def refresh_screen(self) -> None:
        if self.terminal is None:
            return
        self.terminal.render(self.build_render_plan())

    def run(self) -> None:
        """The main loop: render, read one key, dispatch, until quit.

        Raises:
            KeyReadFailure: Propagated from the terminal; fatal for the host.
        """
        if self.terminal is None:
            raise RuntimeError("EditorSession.run() needs a terminal")

        logger.info("Editor main loop started.")
        self.handle_resize()
        self.set_status_message(self.help_message())

        while self.running:
            self.refresh_screen()
            event = self.terminal.read_event()
            self.process_event(event)

        logger.info("Editor main loop finished.")
