# src/kedit/main.py
"""
kedit Main Entry Point
======================

1) Environment Loading: reads ~/.config/kedit/.env early.
2) Configuration & Logging: loads config and initializes logging ASAP.
3) Document Loading: opens the CLI file before the terminal switches modes,
   so a load failure is reported on a normal terminal.
4) Curses Wrapper: safely initializes/tears down curses.
5) Application Run: runs an EditorSession inside the raw-mode guard.

Exit status is 0 after a normal quit and 1 after a fatal error, with the
message printed to stderr.
"""

from __future__ import annotations

import curses
import locale
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from kedit.core.EditorSession import EditorSession
from kedit.core.errors import IoFailure, KeyReadFailure
from kedit.core.LineBuffer import LineBuffer
from kedit.ui.Terminal import CursesTerminal
from kedit.utils.logging_config import setup_logging
from kedit.utils.utils import get_config_dir, load_config

logger = logging.getLogger("kedit")


def _resolve_cli_path(argv: list[str]) -> Optional[Path]:
    """
    Resolve the optional CLI path from argv[1], expanded to a user path.
    The file does NOT need to exist on disk; saving creates it.
    """
    if len(argv) <= 1:
        return None
    raw = argv[1].strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def main_app_runner(stdscr: "curses.window", config: dict[str, Any], buffer: LineBuffer) -> None:
    """
    Target for `curses.wrapper`: runs one editor session.

    The terminal guard restores cooked mode on every exit path, including a
    `KeyReadFailure` propagating out of the session.
    """
    # Ignore terminal suspension (Ctrl+Z), typical for full-screen TUIs.
    if hasattr(signal, "SIGTSTP"):
        try:
            signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        except (OSError, ValueError):
            logger.debug("Could not ignore SIGTSTP.", exc_info=True)

    with CursesTerminal(stdscr, config) as terminal:
        session = EditorSession(config, buffer, terminal)
        session.run()


def main(argv: Optional[list[str]] = None) -> int:
    """Runs the editor and returns the process exit status."""
    argv = sys.argv if argv is None else argv

    load_dotenv(dotenv_path=get_config_dir() / ".env")

    try:
        config = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        return 1

    logger.info("kedit starting up...")

    # Locale is important for proper character width/encoding behavior in curses.
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    buffer = LineBuffer()
    path = _resolve_cli_path(argv)
    if path is not None:
        try:
            buffer.open(str(path))
        except IoFailure as e:
            logger.critical(f"Cannot open {path}: {e.reason}")
            print(f"kedit: cannot open {path}: {e.reason}", file=sys.stderr)
            return 1

    try:
        curses.wrapper(main_app_runner, config, buffer)
    except KeyReadFailure as e:
        logger.critical(e.describe())
        print(e.describe(), file=sys.stderr)
        return 1
    except Exception as e:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        print(f"kedit: fatal error: {e}", file=sys.stderr)
        return 1

    logger.info("kedit shut down gracefully.")
    return 0


def start() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    start()
