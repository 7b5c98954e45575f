from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from idlecat.core.errors import ConfigError
from idlecat.shared.config import AppConfig
from idlecat.shared.paths import config_path


class ConfigStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else config_path()

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> AppConfig:
        if not self._path.exists():
            return AppConfig()

        try:
            raw = self._path.read_text(encoding="utf-8")
            data: Any = json.loads(raw)
        except (OSError, ValueError) as e:
            raise ConfigError(f"cannot read config file {self._path}: {e}") from e

        try:
            return AppConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"invalid config file {self._path}: {e}") from e

    def path(self) -> str:
        return str(self._path)
