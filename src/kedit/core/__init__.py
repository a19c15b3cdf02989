# src/kedit/core/__init__.py
"""Public facade for kedit.core: re-export main classes from CamelCase modules."""

from .CursorController import CursorController  # noqa: F401
from .EditorSession import EditorSession, SessionState  # noqa: F401
from .errors import EditorError, IoFailure, KeyReadFailure  # noqa: F401
from .InputEvent import InputEvent, Key  # noqa: F401
from .LineBuffer import LineBuffer  # noqa: F401
from .Position import Position  # noqa: F401
from .RenderPlan import RenderPlan  # noqa: F401
from .Viewport import Viewport  # noqa: F401


__all__ = [
    "CursorController",
    "EditorError",
    "EditorSession",
    "InputEvent",
    "IoFailure",
    "Key",
    "KeyReadFailure",
    "LineBuffer",
    "Position",
    "RenderPlan",
    "SessionState",
    "Viewport",
]
