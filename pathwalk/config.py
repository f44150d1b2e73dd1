"""Persistent JSON config helpers.

Stores CLI defaults: recursive traversal, case-sensitive matching and size
labels. Malformed or missing config falls back to built-in defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "pathwalk"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so an unwritable config directory never
    breaks a walk.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _load_flag(key: str) -> bool:
    """Only explicit booleans count; anything else reads as ``False``."""
    value = load_config().get(key)
    return value if isinstance(value, bool) else False


def _save_flag(key: str, value: bool) -> None:
    config = load_config()
    config[key] = bool(value)
    save_config(config)


def load_recursive_default() -> bool:
    return _load_flag("recursive")


def save_recursive_default(recursive: bool) -> None:
    _save_flag("recursive", recursive)


def load_case_sensitive() -> bool:
    return _load_flag("case_sensitive")


def save_case_sensitive(case_sensitive: bool) -> None:
    _save_flag("case_sensitive", case_sensitive)


def load_show_sizes() -> bool:
    return _load_flag("show_sizes")


def save_show_sizes(show_sizes: bool) -> None:
    _save_flag("show_sizes", show_sizes)
