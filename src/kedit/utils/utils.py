# kedit/utils/utils.py
"""
kedit.utils.utils.py
====================

Core utility functions for the kedit editor.

Key functionalities include:
- Automatic User Configuration: creates `config.toml` and `.env` templates in
  `~/.config/kedit` on first run.
- Robust Configuration Loading: starts from the hardcoded `DEFAULT_CONFIG` and
  recursively merges the user's `~/.config/kedit/config.toml` over it.
- Display-width helpers built on `wcwidth` for clipping status text.
- Color conversion for the status bar.

The editor is always runnable: a missing or corrupted user file falls back to
the embedded defaults.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from wcwidth import wcswidth, wcwidth

logger = logging.getLogger("kedit")

# --- Constants ---
CALM_BG_IDX = 236
WHITE_FG_IDX = 255

ENV_TEMPLATE = """# Environment overrides for kedit
# KEDIT_LOG_LEVEL=DEBUG
# KEDIT_KEYTRACE=1
"""

# Hardcoded defaults; the ultimate fallback so the editor can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "quit_times": 3,
        "status_message_timeout": 5.0,
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save": "ctrl+s",
    },
    "colors": {
        "status_fg": "#ffffff",
        "status_bg": "#303030",
    },
    "logging": {
        "file": "editor.log",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        # stderr is the curses screen while the editor runs.
        "log_to_console": False,
        "separate_error_log": False,
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Directory holding the user's `config.toml` and `.env`."""
    return Path.home() / ".config" / "kedit"


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/kedit` and creates them if missing."""
    try:
        config_dir = get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            with open(user_config_path, "w", encoding="utf-8") as f:
                toml.dump(DEFAULT_CONFIG, f)
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.

    Environment variables win over both files: `KEDIT_LOG_LEVEL` sets the file
    log level.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    env_level = os.environ.get("KEDIT_LOG_LEVEL")
    if env_level:
        final_config["logging"]["file_level"] = env_level.upper()

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_string_width(text: str) -> int:
    """Display width of `text` in terminal cells; unprintable characters count as one."""
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(ch), 1) for ch in text)


def truncate_string(s: str, max_width: int) -> str:
    """Return `s` clipped to visual width `max_width`.

    Wide characters (e.g. CJK) take two cells; non-printable characters are
    treated as one.
    """
    result: list[str] = []
    consumed = 0

    for ch in s:
        w = wcwidth(ch)
        if w < 0:  # Non-printable → treat as single-cell
            w = 1
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w

    return "".join(result)


def hex_to_xterm(hex_color: Optional[str]) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = (hex_color or "").lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8: return 16
        if r > 248: return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )


def display_text(s: str) -> str:
    """Replaces lone surrogates (undecodable file bytes) with U+FFFD for drawing."""
    return "".join("\ufffd" if "\ud800" <= ch <= "\udfff" else ch for ch in s)
