# kedit/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen: paints a `RenderPlan` onto a curses window.

It is responsible for:
- drawing the text rows of the plan,
- rendering the status bar (reverse video or the configured calm-dark colors),
- rendering the message bar,
- placing the terminal cursor,
- showing a notice instead of the editor when the window is too small.

The plan is already laid out by the session; DrawScreen only clips rows to
the window's cell width with `wcwidth` and never changes editor state. Curses
errors (drawing into the last cell, a shrinking window) are logged and
swallowed so one bad frame never stops the editor.
"""

import curses
import logging
from typing import Any

from kedit.core.RenderPlan import RenderPlan
from kedit.utils.utils import CALM_BG_IDX, WHITE_FG_IDX, display_text, hex_to_xterm, truncate_string


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Renders frames produced by `EditorSession.build_render_plan()`.

    Attributes:
        MIN_WINDOW_WIDTH (int): Minimum usable window width.
        MIN_WINDOW_HEIGHT (int): Minimum usable window height.
        stdscr (curses.window): The window drawn into.
        config (dict[str, Any]): Application configuration (``colors`` section).
        colors (dict[str, int]): Ready-made curses attributes by role.
    """

    MIN_WINDOW_WIDTH = 20
    MIN_WINDOW_HEIGHT = 5
    STATUS_PAIR = 15

    def __init__(self, stdscr: "curses.window", config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config = config
        self.colors: dict[str, int] = {}
        self._init_status_colors()

    def _init_status_colors(self) -> None:
        """Creates the status bar attribute based on terminal capabilities.
        - 256-color: configured fg/bg (default white on xterm-236).
        - fewer colors or no color support: reverse video.
        """
        self.colors["status"] = curses.A_REVERSE
        try:
            if not curses.has_colors() or curses.COLORS < 256:
                return
            curses.use_default_colors()
        except curses.error:
            return

        color_cfg = self.config.get("colors", {})
        fg_idx = hex_to_xterm(color_cfg.get("status_fg")) if color_cfg.get("status_fg") else WHITE_FG_IDX
        bg_idx = hex_to_xterm(color_cfg.get("status_bg")) if color_cfg.get("status_bg") else CALM_BG_IDX
        try:
            curses.init_pair(self.STATUS_PAIR, fg_idx, bg_idx)
        except curses.error as exc:
            logging.warning("init_pair failed (%s), rolling back to A_REVERSE", exc)
            return
        self.colors["status"] = curses.color_pair(self.STATUS_PAIR)

    def draw(self, plan: RenderPlan) -> None:
        """The main screen drawing method."""
        try:
            height, width = self.stdscr.getmaxyx()

            if height < self.MIN_WINDOW_HEIGHT or width < self.MIN_WINDOW_WIDTH:
                self._show_small_window_error(height, width)
                self._update_display()
                return

            self.stdscr.erase()
            text_rows = height - 2
            for screen_row, text in enumerate(plan.rows[:text_rows]):
                self._draw_row(screen_row, text, width)

            self._draw_status_bar(height - 2, plan.status_bar, width)
            self._draw_message_bar(height - 1, plan.message_bar, width)
            self._position_cursor(plan, text_rows, width)
            self._update_display()

        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)

    def _draw_row(self, y: int, text: str, width: int) -> None:
        try:
            self.stdscr.addstr(y, 0, truncate_string(display_text(text), width))
        except curses.error:
            pass  # drawing outside screen

    def _draw_status_bar(self, y: int, text: str, width: int) -> None:
        line = truncate_string(display_text(text), width)
        try:
            self.stdscr.addstr(y, 0, line.ljust(width), self.colors["status"])
        except curses.error:
            pass

    def _draw_message_bar(self, y: int, text: str, width: int) -> None:
        # The bottom-right cell cannot be written without curses reporting an error.
        try:
            self.stdscr.addstr(y, 0, truncate_string(display_text(text), width - 1))
        except curses.error:
            pass

    def _position_cursor(self, plan: RenderPlan, text_rows: int, width: int) -> None:
        screen_y = max(0, min(plan.cursor.y, text_rows - 1))
        screen_x = max(0, min(plan.cursor.x, width - 1))
        try:
            self.stdscr.move(screen_y, screen_x)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({screen_y}, {screen_x}): {e}")

    def _show_small_window_error(self, height: int, width: int) -> None:
        """Displays a message that the window is too small."""
        msg = f"Window too small ({width}x{height}). Minimum is {self.MIN_WINDOW_WIDTH}x{self.MIN_WINDOW_HEIGHT}."
        try:
            self.stdscr.erase()
            start_col = max(0, (width - len(msg)) // 2)
            self.stdscr.addstr(height // 2, start_col, msg[: max(0, width - 1)])
        except curses.error:
            pass

    def _update_display(self) -> None:
        """Applies pending drawing with a single `doupdate()` to avoid flicker."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
