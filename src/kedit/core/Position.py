# kedit/core/Position.py
"""Plain (column, row) value used for cursor and viewport math."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Position:
    """A zero-based buffer or screen coordinate.

    Attributes:
        x (int): Column.
        y (int): Row.
    """

    x: int = 0
    y: int = 0
