# tests/conftest.py
"""Pytest configuration with shared fixtures for the kedit editor tests."""

from __future__ import annotations

import copy
import logging
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

from kedit.core.EditorSession import EditorSession
from kedit.core.LineBuffer import LineBuffer
from kedit.utils.utils import DEFAULT_CONFIG
from tests.stubs import FakeClock, StubTerminal


# --- Configuration ---
@pytest.fixture
def config() -> dict[str, Any]:
    """A private copy of the embedded default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch) -> Any:
    """Point `Path.home()` at a temporary directory and run inside it.

    Keeps config templates and log files written by the code under test out of
    the real home directory and the repository.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("KEDIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("KEDIT_KEYTRACE", raising=False)
    return home


@pytest.fixture
def restore_root_logging() -> Generator[None, None, None]:
    """Undo `setup_logging()` side effects on the root and key-trace loggers."""
    root = logging.getLogger()
    key_logger = logging.getLogger("kedit.keyevents")
    saved_root = (list(root.handlers), root.level)
    saved_keys = (list(key_logger.handlers), key_logger.disabled, key_logger.propagate)
    yield
    for handler in root.handlers + key_logger.handlers:
        if handler not in saved_root[0] and handler not in saved_keys[0]:
            handler.close()
    root.handlers, root.level = saved_root
    key_logger.handlers, key_logger.disabled, key_logger.propagate = saved_keys


# --- Buffers ---
@pytest.fixture
def sample_lines() -> list[str]:
    """A short document with lines of different lengths."""
    return [
        "def hello_world():",
        "    print('Hello, world!')",
        "",
        "x",
    ]


@pytest.fixture
def buffer(sample_lines: list[str]) -> LineBuffer:
    return LineBuffer(sample_lines)


# --- Session ---
@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def terminal() -> StubTerminal:
    """An 80x24 scripted terminal (text area 80x22)."""
    return StubTerminal(width=80, height=24)


@pytest.fixture
def session(config, terminal: StubTerminal, clock: FakeClock) -> EditorSession:
    """A session on an empty, unnamed buffer."""
    return EditorSession(config, LineBuffer(), terminal, clock=clock)


@pytest.fixture
def session_with_text(config, buffer: LineBuffer, terminal: StubTerminal, clock: FakeClock) -> EditorSession:
    return EditorSession(config, buffer, terminal, clock=clock)


# --- curses ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """A mocked curses window with a typical 80x24 size."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr
