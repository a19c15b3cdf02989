# kedit/core/Terminal.py
"""The terminal capability consumed by the editor session.

`kedit.ui.Terminal.CursesTerminal` is the production implementation; tests
drive the session with a scripted fake.
"""

from __future__ import annotations

from typing import Protocol

from kedit.core.InputEvent import InputEvent
from kedit.core.RenderPlan import RenderPlan


class Terminal(Protocol):
    def enter_raw_mode(self) -> None: ...

    def leave_raw_mode(self) -> None: ...

    def size(self) -> tuple[int, int]:
        """Current terminal size as (width, height)."""
        ...

    def read_event(self) -> InputEvent:
        """Blocks for one key press.

        Raises:
            KeyReadFailure: The input source failed.
        """
        ...

    def render(self, plan: RenderPlan) -> None: ...
