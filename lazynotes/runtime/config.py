"""Persistent JSON config helpers.

Stores the preferred editor command, auto-sync flag, sort mode, theme name,
and color overrides. All access is defensive: malformed or missing config
falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from ..notes.directory_view import DEFAULT_SORT_POLICY, normalize_sort_policy

APP_NAME = "lazynotes"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

COLOR_KEYS: tuple[str, ...] = ("accent", "selection", "header", "dim", "folder", "tag")
_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotesConfig:
    """Resolved user preferences; every field has a default."""

    editor_cmd: str | None = None
    auto_sync: bool = False
    sort_mode: str = DEFAULT_SORT_POLICY
    theme: str | None = None
    colors: dict[str, str] = field(default_factory=dict)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored to keep
    runtime behavior non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("Could not save config %s: %s", CONFIG_PATH, exc)


def _optional_string(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _load_colors(value: object) -> dict[str, str]:
    """Keep only known color keys with ``#rrggbb`` values."""
    if not isinstance(value, dict):
        return {}
    colors: dict[str, str] = {}
    for key, raw in value.items():
        if key not in COLOR_KEYS or not isinstance(raw, str):
            continue
        candidate = raw.strip()
        if _HEX_COLOR_RE.match(candidate):
            colors[key] = candidate.lower()
    return colors


def load_notes_config() -> NotesConfig:
    """Load and validate all user preferences."""
    data = load_config()
    auto_sync = data.get("auto_sync")
    return NotesConfig(
        editor_cmd=_optional_string(data.get("editor_cmd")),
        auto_sync=auto_sync if isinstance(auto_sync, bool) else False,
        sort_mode=normalize_sort_policy(data.get("sort_mode")),
        theme=_optional_string(data.get("theme")),
        colors=_load_colors(data.get("colors")),
    )


def save_sort_mode(sort_mode: str) -> None:
    """Persist the active sort policy."""
    config = load_config()
    config["sort_mode"] = normalize_sort_policy(sort_mode)
    save_config(config)


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


__all__ = [
    "APP_NAME",
    "COLOR_KEYS",
    "CONFIG_PATH",
    "NotesConfig",
    "load_config",
    "load_notes_config",
    "save_config",
    "save_sort_mode",
    "save_theme_name",
]
