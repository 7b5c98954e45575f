from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

ActivityState = Literal["IDLE", "ACTIVE"]
TransitionKind = Literal["IDLE_TO_ACTIVE", "ACTIVE_TO_IDLE"]


@dataclass(frozen=True)
class MonitorConfig:
    """Durations are in seconds; commands are shell strings, None for no action."""
    idle_timeout: float
    idle_to_active_threshold: float
    active_to_idle_threshold: float
    idle_to_active_command: Optional[str] = None
    active_to_idle_command: Optional[str] = None
    eof_command: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("idle_timeout", "idle_to_active_threshold", "active_to_idle_threshold"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")


@dataclass(frozen=True)
class MonitorState:
    activity_state: ActivityState
    last_data_time: float
    state_entered_time: float
    eof_reached: bool = False

    @classmethod
    def initial(cls, now: float) -> "MonitorState":
        return cls(activity_state="IDLE", last_data_time=now, state_entered_time=now)

    @property
    def is_idle(self) -> bool:
        return self.activity_state == "IDLE"


@dataclass(frozen=True)
class Transition:
    kind: TransitionKind
    at: float
    dwell: float  # seconds spent in the state being left
    significant: bool
