# kedit/core/Viewport.py
"""kedit.core.Viewport
======================

The window of the buffer that is visible in the terminal.

`recompute()` is the only place offsets change: it scrolls just far enough to
bring the cursor back inside `[offset, offset + extent)` on both axes, so
calling it twice with the same cursor is a no-op.
"""

from __future__ import annotations

import logging

from kedit.core.LineBuffer import LineBuffer
from kedit.core.Position import Position

# Rows at the bottom of the terminal taken by the status bar and the message bar.
RESERVED_ROWS = 2


class Viewport:
    """Visible region of the buffer.

    Attributes:
        row_offset (int): First buffer row shown on screen.
        col_offset (int): First buffer column shown on screen.
        width (int): Number of visible columns.
        height (int): Number of visible text rows.
    """

    def __init__(self, width: int = 80, height: int = 24 - RESERVED_ROWS) -> None:
        self.row_offset: int = 0
        self.col_offset: int = 0
        self.width: int = max(1, width)
        self.height: int = max(1, height)

    def resize(self, term_width: int, term_height: int) -> None:
        """Applies new terminal bounds, keeping room for the two bottom bars."""
        self.width = max(1, term_width)
        self.height = max(1, term_height - RESERVED_ROWS)
        logging.debug(f"Viewport resized to {self.width}x{self.height}")

    def recompute(self, cursor: Position) -> None:
        """Scrolls so that `cursor` lies inside the visible window."""
        # --- Vertical ---
        if cursor.y < self.row_offset:
            self.row_offset = cursor.y
        elif cursor.y >= self.row_offset + self.height:
            self.row_offset = cursor.y - self.height + 1

        # --- Horizontal ---
        if cursor.x < self.col_offset:
            self.col_offset = cursor.x
        elif cursor.x >= self.col_offset + self.width:
            self.col_offset = cursor.x - self.width + 1

    def visible_slice(self, buffer: LineBuffer, screen_row: int) -> str:
        """Returns the part of the line shown on `screen_row`.

        A line shorter than `col_offset`, or a row below the end of the buffer,
        renders as an empty string.
        """
        file_row = self.row_offset + screen_row
        if file_row < 0 or file_row >= len(buffer):
            return ""
        line = buffer[file_row]
        if len(line) <= self.col_offset:
            return ""
        return line[self.col_offset : self.col_offset + self.width]

    def screen_position(self, cursor: Position) -> Position:
        """Cursor coordinate relative to the top-left corner of the window."""
        return Position(cursor.x - self.col_offset, cursor.y - self.row_offset)

    def contains(self, cursor: Position) -> bool:
        return (
            self.row_offset <= cursor.y < self.row_offset + self.height
            and self.col_offset <= cursor.x < self.col_offset + self.width
        )
