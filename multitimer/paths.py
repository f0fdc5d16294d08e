"""Where MultiTimer keeps its files on disk.

Defaults to ``~/.local/share/MultiTimer``.  Set ``MULTITIMER_DATA_DIR``
to point somewhere else (handy for portable installs and tests).
"""

from __future__ import annotations

import os
from pathlib import Path


def app_data_dir() -> Path:
    override = os.environ.get("MULTITIMER_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".local" / "share" / "MultiTimer"


APP_DATA_DIR = app_data_dir()
