from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, PositiveInt

DEFAULT_IDLE_TIMEOUT = 5
DEFAULT_IDLE_TO_ACTIVE_THRESHOLD = 2 * 60
DEFAULT_ACTIVE_TO_IDLE_THRESHOLD = 3 * 60


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    idle_timeout: PositiveInt = DEFAULT_IDLE_TIMEOUT
    idle_to_active_threshold: PositiveInt = DEFAULT_IDLE_TO_ACTIVE_THRESHOLD
    active_to_idle_threshold: PositiveInt = DEFAULT_ACTIVE_TO_IDLE_THRESHOLD
    idle_to_active_command: Optional[str] = None
    active_to_idle_command: Optional[str] = None
    eof_command: Optional[str] = None
    log_file: Optional[Path] = None

    def merged(self, **overrides) -> "AppConfig":
        """Return a validated copy with every non-None override applied."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return AppConfig.model_validate(data)

    def to_monitor_config(self) -> dict:
        return {
            "idle_timeout": self.idle_timeout,
            "idle_to_active_threshold": self.idle_to_active_threshold,
            "active_to_idle_threshold": self.active_to_idle_threshold,
            "idle_to_active_command": self.idle_to_active_command,
            "active_to_idle_command": self.active_to_idle_command,
            "eof_command": self.eof_command,
        }
