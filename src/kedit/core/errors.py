# kedit/core/errors.py
"""Error kinds raised by the editor core.

Only two conditions can fail: reading a key from the terminal
(`KeyReadFailure`, always fatal) and touching the filesystem (`IoFailure`,
recovered by the session on save and treated as fatal by the host on load).
Buffer and cursor operations clamp their inputs and never raise.
"""

from __future__ import annotations

import os
from typing import Optional


class EditorError(Exception):
    """Base class for all kedit errors."""


class KeyReadFailure(EditorError):
    """The input source failed; the session cannot continue.

    `errno` is optional. `curses.error` carries none, so failures from the
    curses terminal describe as "unknown system error".
    """

    def __init__(self, message: str, errno: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errno = errno

    def describe(self) -> str:
        """Return `message: <system error>` for the fatal report on stderr."""
        if self.errno:
            return f"{self.message}: {os.strerror(self.errno)} (errno {self.errno})"
        return f"{self.message}: unknown system error"


class IoFailure(EditorError):
    """Reading or writing the buffer's file failed."""

    def __init__(self, filename: Optional[str], reason: str) -> None:
        super().__init__(f"{filename or '[No Name]'}: {reason}")
        self.filename = filename
        self.reason = reason

    @classmethod
    def from_os_error(cls, filename: Optional[str], exc: OSError) -> "IoFailure":
        return cls(filename, exc.strerror or str(exc))
