# kedit/core/RenderPlan.py
"""What the terminal should draw for one loop iteration."""

from __future__ import annotations

from dataclasses import dataclass, field

from kedit.core.Position import Position


@dataclass
class RenderPlan:
    """A complete frame, produced by `EditorSession.build_render_plan()`.

    Attributes:
        rows (list[str]): One entry per text-area row, already clipped to the width.
        status_bar (str): Status bar text padded to the full width.
        message_bar (str): Current status message, or "" once it expired.
        cursor (Position): Screen coordinate of the terminal cursor.
        width (int): Terminal width the plan was laid out for.
    """

    rows: list[str] = field(default_factory=list)
    status_bar: str = ""
    message_bar: str = ""
    cursor: Position = field(default_factory=Position)
    width: int = 0
