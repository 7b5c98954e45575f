from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "idlecat"

def app_data_dir() -> Path:
    override = os.environ.get("IDLECAT_HOME")
    if override:
        return Path(override)
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_NAME

def config_path() -> Path:
    return app_data_dir() / "config.json"

def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
