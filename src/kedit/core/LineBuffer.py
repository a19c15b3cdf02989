# kedit/core/LineBuffer.py
"""kedit.core.LineBuffer
========================

The in-memory document: an ordered list of text lines plus the counter of
unsaved mutations.

Every mutation goes through a LineBuffer method, and every method clamps its
row/column arguments instead of raising, so an off-by-one cursor can never
crash the editor. Loading and saving use a byte stream; the file's encoding is
detected with `chardet` on load and reused on save.

Lines are indexed by code point. Display width is only considered by the
renderer.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterator, Optional

import chardet

from kedit.core.errors import IoFailure
from kedit.core.Position import Position
from kedit.utils.logging_config import logger

LINE_TERMINATOR = "\n"
CHARDET_SAMPLE_SIZE = 1024 * 20
CHARDET_MIN_CONFIDENCE = 0.75
ENCODING_ERRORS = "surrogateescape"


class LineBuffer:
    """Class LineBuffer
    ====================
    Owns the ordered sequence of lines of the open document.

    Attributes:
        lines (list[str]): Document lines, none of which contains a line terminator.
        filename (Optional[str]): Path the buffer was loaded from / saves to.
        dirty (int): Number of mutations since the last load or save (0 = clean).
        encoding (str): Encoding used to decode on load and encode on save.
    """

    def __init__(self, lines: Optional[list[str]] = None, filename: Optional[str] = None) -> None:
        self.lines: list[str] = list(lines) if lines else []
        self.filename: Optional[str] = filename
        self.dirty: int = 0
        self.encoding: str = "utf-8"

    # --- read-only accessors ---
    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, row: int) -> str:
        return self.lines[row]

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line_length(self, row: int) -> int:
        """Length of line `row`, or 0 for a row outside the buffer."""
        if 0 <= row < len(self.lines):
            return len(self.lines[row])
        return 0

    # --- mutations ---
    def _ensure_row(self, row: int) -> int:
        """Clamp `row` to `[0, len(lines)]` and materialise the row one past the end."""
        row = max(0, min(row, len(self.lines)))
        if row == len(self.lines):
            self.lines.append("")
        return row

    def insert_char(self, row: int, col: int, ch: str) -> None:
        """Inserts `ch` at (`row`, `col`).

        A `row` equal to the line count appends a new empty line first; a `col`
        past the end of the line is clamped to the line length.
        """
        row = self._ensure_row(row)
        line = self.lines[row]
        col = max(0, min(col, len(line)))
        self.lines[row] = line[:col] + ch + line[col:]
        self.dirty += 1
        logging.debug(f"insert_char: {ch!r} at ({row}, {col}), dirty={self.dirty}")

    def delete_char_before(self, row: int, col: int) -> Optional[Position]:
        """Deletes the character before (`row`, `col`), joining lines at column 0.

        Returns:
            Optional[Position]: Where the cursor belongs after the deletion, or
            None when nothing was deleted (start of buffer, or a row past the end).
        """
        if row >= len(self.lines) or row < 0:
            return None
        if row == 0 and col <= 0:
            return None

        line = self.lines[row]
        col = min(col, len(line))
        if col > 0:
            self.lines[row] = line[: col - 1] + line[col:]
            self.dirty += 1
            logging.debug(f"delete_char_before: removed char at ({row}, {col - 1})")
            return Position(col - 1, row)

        # Column 0 on a later line: join onto the previous line.
        prev_len = len(self.lines[row - 1])
        self.lines[row - 1] += line
        del self.lines[row]
        self.dirty += 1
        logging.debug(f"delete_char_before: joined line {row} onto {row - 1}")
        return Position(prev_len, row - 1)

    def split_line(self, row: int, col: int) -> None:
        """Splits line `row` at `col`; the remainder becomes line `row + 1`."""
        row = self._ensure_row(row)
        line = self.lines[row]
        col = max(0, min(col, len(line)))
        self.lines[row] = line[:col]
        self.lines.insert(row + 1, line[col:])
        self.dirty += 1
        logging.debug(f"split_line: ({row}, {col}) -> {len(self.lines)} lines")

    # --- persistence ---
    def to_text(self) -> str:
        """All lines joined with a line terminator, none after the last line."""
        return LINE_TERMINATOR.join(self.lines)

    def _decode(self, raw: bytes) -> str:
        """Decodes file bytes, remembering the encoding for the next save."""
        guess = chardet.detect(raw[:CHARDET_SAMPLE_SIZE])
        encoding = guess.get("encoding")
        confidence = guess.get("confidence") or 0.0
        logging.debug(f"Chardet detected encoding '{encoding}' with confidence {confidence:.2f}")

        # ASCII files are opened as UTF-8 so non-ASCII input can be saved back.
        if not encoding or encoding.lower() == "ascii":
            encoding = "utf-8"

        if confidence >= CHARDET_MIN_CONFIDENCE:
            try:
                text = raw.decode(encoding)
                self.encoding = encoding
                return text
            except (UnicodeDecodeError, LookupError):
                logging.warning(f"Decoding as '{encoding}' failed, falling back to utf-8")

        # Undecodable bytes survive as lone surrogates and are written back unchanged.
        self.encoding = "utf-8"
        return raw.decode("utf-8", errors=ENCODING_ERRORS)

    def load(self, stream: BinaryIO) -> None:
        """Replaces all lines with the contents of `stream`, split on line terminators.

        Resets `dirty` to 0. The cursor is the caller's business.
        """
        raw = stream.read()
        text = self._decode(raw) if raw else ""
        self.lines = text.split(LINE_TERMINATOR) if text else []
        self.dirty = 0
        logger.info(f"Loaded {len(self.lines)} lines ({self.encoding})")

    def _encode(self) -> bytes:
        """`to_text()` in the buffer's encoding.

        Raises:
            IoFailure: A character cannot be represented in that encoding.
        """
        try:
            return self.to_text().encode(self.encoding, errors=ENCODING_ERRORS)
        except UnicodeEncodeError as e:
            bad = e.object[e.start : e.end]
            logger.error(f"Cannot encode {bad!r} as {self.encoding}")
            raise IoFailure(self.filename, f"cannot encode {bad!r} as {self.encoding}") from e

    def save(self, stream: BinaryIO) -> int:
        """Writes `to_text()` to `stream`.

        Returns:
            int: Number of lines written.

        Raises:
            IoFailure: The text cannot be encoded or the write failed; `dirty`
            is left untouched.
        """
        return self._write_bytes(stream, self._encode())

    def _write_bytes(self, stream: BinaryIO, data: bytes) -> int:
        try:
            stream.write(data)
            stream.flush()
        except OSError as e:
            logger.error(f"Failed to write buffer: {e}", exc_info=True)
            raise IoFailure.from_os_error(self.filename, e) from e
        self.dirty = 0
        return len(self.lines)

    def open(self, path: str) -> None:
        """Loads `path` and adopts it as the buffer's filename.

        A file that does not exist yet leaves the buffer empty and named, so the
        first save creates it.

        Raises:
            IoFailure: The file exists but could not be read.
        """
        self.filename = path
        try:
            with open(path, "rb") as f:
                self.load(f)
        except FileNotFoundError:
            logger.info(f"'{path}' does not exist yet; starting an empty buffer with that name")
            self.lines = []
            self.dirty = 0
        except OSError as e:
            logger.error(f"Failed to open '{path}': {e}")
            raise IoFailure.from_os_error(path, e) from e

    def write(self, path: Optional[str] = None) -> int:
        """Saves the buffer to `path` (default: its filename), overwriting the file.

        Returns:
            int: Number of lines written.

        Raises:
            IoFailure: No filename is known, the text cannot be encoded (the
            file is left untouched), or the file could not be written.
        """
        target = path or self.filename
        if not target:
            raise IoFailure(None, "no filename")
        data = self._encode()
        try:
            with open(target, "wb") as f:
                written = self._write_bytes(f, data)
        except OSError as e:
            logger.error(f"Failed to open '{target}' for writing: {e}")
            raise IoFailure.from_os_error(target, e) from e
        self.filename = target
        logger.info(f"Wrote {written} lines to '{target}'")
        return written
