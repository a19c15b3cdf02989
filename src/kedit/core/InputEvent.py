# kedit/core/InputEvent.py
"""Abstract key events delivered by the terminal to the editor session.

The key set is closed: terminals translate whatever they read into one of the
`Key` members below, and the session dispatches on those members only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Key(Enum):
    CHAR = "char"
    CTRL = "ctrl"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"
    ESCAPE = "escape"
    RESIZE = "resize"
    UNKNOWN = "unknown"


MOVEMENT_KEYS = frozenset(
    {Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT, Key.HOME, Key.END, Key.PAGE_UP, Key.PAGE_DOWN}
)

# Aliases accepted in keybinding specs (see `InputEvent.from_spec`).
_NAMED_KEYS: dict[str, Key] = {
    "up": Key.UP,
    "down": Key.DOWN,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "home": Key.HOME,
    "end": Key.END,
    "pageup": Key.PAGE_UP,
    "pgup": Key.PAGE_UP,
    "pagedown": Key.PAGE_DOWN,
    "pgdn": Key.PAGE_DOWN,
    "enter": Key.ENTER,
    "return": Key.ENTER,
    "backspace": Key.BACKSPACE,
    "delete": Key.DELETE,
    "del": Key.DELETE,
    "esc": Key.ESCAPE,
    "escape": Key.ESCAPE,
}


@dataclass(frozen=True)
class InputEvent:
    """One key press.

    Attributes:
        key (Key): The abstract key symbol.
        char (str): The character for `Key.CHAR`, the lowercase letter for
            `Key.CTRL`, empty otherwise.
    """

    key: Key
    char: str = ""

    @classmethod
    def from_spec(cls, spec: str) -> "InputEvent":
        """Parses a keybinding spec such as ``"ctrl+q"``, ``"pageup"`` or ``"x"``.

        Raises:
            ValueError: The spec names an unknown key or modifier.
        """
        s = spec.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")
        if s in _NAMED_KEYS:
            return cls(_NAMED_KEYS[s])

        parts = [p.strip() for p in s.replace("-", "+").split("+")]
        base = parts[-1]
        modifiers = set(parts[:-1])
        if not modifiers and len(base) == 1:
            return cls(Key.CHAR, base)
        if modifiers == {"ctrl"} and len(base) == 1 and "a" <= base <= "z":
            return cls(Key.CTRL, base)
        raise ValueError(f"Unsupported key spec {spec!r}")

    def describe(self) -> str:
        """Human-readable label, e.g. ``Ctrl-Q``."""
        if self.key is Key.CTRL:
            return f"Ctrl-{self.char.upper()}"
        if self.key is Key.CHAR:
            return self.char
        return self.key.value.capitalize()
