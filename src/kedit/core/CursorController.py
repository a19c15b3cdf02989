# kedit/core/CursorController.py
"""kedit.core.CursorController
==============================

Maps a movement key plus the current buffer shape to a new cursor position.

Rules, evaluated against the current line length:

- Up / Down move one row and stop at the first / last line.
- Left at column 0 wraps to the end of the previous line; Right at the end of a
  line wraps to the start of the next one.
- Home goes to column 0. End goes to the viewport width, which the clamp pass
  then limits to the line length.
- PageUp / PageDown repeat Up / Down once per visible row.

Every move is followed by `clamp()`, so the cursor always addresses an existing
line (or the single implicit line of an empty buffer) and a column no further
than that line's end.
"""

from __future__ import annotations

import logging

from kedit.core.InputEvent import Key
from kedit.core.LineBuffer import LineBuffer
from kedit.core.Position import Position
from kedit.core.Viewport import Viewport


class CursorController:
    """Cursor movement state machine.

    Attributes:
        buffer (LineBuffer): The document the cursor moves through.
        viewport (Viewport): Supplies the page height and the End column.
    """

    def __init__(self, buffer: LineBuffer, viewport: Viewport) -> None:
        self.buffer = buffer
        self.viewport = viewport

    def _row_len(self, y: int) -> int:
        """Length of row `y`; a row past the end uses the last real line."""
        count = len(self.buffer)
        if count == 0:
            return 0
        return self.buffer.line_length(min(y, count - 1))

    def clamp(self, cursor: Position) -> Position:
        """Returns `cursor` limited to an existing row and column."""
        y = max(0, min(cursor.y, max(len(self.buffer) - 1, 0)))
        x = max(0, min(cursor.x, self.buffer.line_length(y)))
        return Position(x, y)

    def _step(self, cursor: Position, direction: Key) -> Position:
        x, y = cursor.x, cursor.y
        last_row = len(self.buffer) - 1

        if direction is Key.UP:
            y = max(y - 1, 0)
        elif direction is Key.DOWN:
            if y < last_row:
                y += 1
        elif direction is Key.LEFT:
            if x > 0:
                x -= 1
            elif y > 0:
                y -= 1
                x = self._row_len(y)
        elif direction is Key.RIGHT:
            if x < self._row_len(y):
                x += 1
            elif y < last_row:
                y += 1
                x = 0
        elif direction is Key.HOME:
            x = 0
        elif direction is Key.END:
            x = self.viewport.width
        return Position(x, y)

    def move(self, cursor: Position, direction: Key) -> Position:
        """Applies one movement key and the clamp pass.

        Args:
            cursor: Current cursor position (not modified).
            direction: A movement `Key`; any other key returns the clamped cursor.

        Returns:
            Position: The new cursor position.
        """
        if direction is Key.PAGE_UP or direction is Key.PAGE_DOWN:
            step = Key.UP if direction is Key.PAGE_UP else Key.DOWN
            new = cursor
            for _ in range(self.viewport.height):
                new = self.clamp(self._step(new, step))
        else:
            new = self.clamp(self._step(cursor, direction))

        logging.debug(
            "cursor %s (%d,%d) -> (%d,%d)", direction.value, cursor.x, cursor.y, new.x, new.y
        )
        return new
