"""Application settings with JSON persistence.

Settings are stored at:
    ~/.local/share/MultiTimer/settings.json

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields

from .paths import APP_DATA_DIR

logger = logging.getLogger(__name__)

SETTINGS_PATH = APP_DATA_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True
    do_not_disturb: bool = False

    # ── window ────────────────────────────────────────────────────────
    minimize_to_tray: bool = False
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 560
    window_height: int = 720


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError):
        logger.warning("Could not read %s; using defaults", SETTINGS_PATH, exc_info=True)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
