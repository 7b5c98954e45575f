"""
Idle/active classification of a byte stream.

State machine: IDLE -> ACTIVE on any data, ACTIVE -> IDLE once no data has
been seen for idle_timeout. Flips always happen; the significance thresholds
only decide whether the transition's action should run, and they are measured
against the time spent in the state being left.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Tuple

from .types import MonitorConfig, MonitorState, Transition


def advance(
    state: MonitorState,
    cfg: MonitorConfig,
    now: float,
    data_arrived: bool,
) -> Tuple[MonitorState, List[Transition]]:
    """
    Evaluate one loop iteration.

    Args:
        state: State before this iteration.
        cfg: Monitor configuration.
        now: Clock snapshot taken once for the whole iteration.
        data_arrived: True if at least one byte was read this iteration.

    Returns:
        (new_state, transitions) in the order they happened.
    """
    if state.eof_reached:
        return state, []

    transitions: List[Transition] = []

    if data_arrived:
        if state.is_idle:
            dwell = now - state.state_entered_time
            transitions.append(Transition(
                kind="IDLE_TO_ACTIVE",
                at=now,
                dwell=dwell,
                significant=dwell >= cfg.idle_to_active_threshold,
            ))
            state = replace(state, activity_state="ACTIVE", state_entered_time=now)
        state = replace(state, last_data_time=max(state.last_data_time, now))

    if not state.is_idle and now - state.last_data_time >= cfg.idle_timeout:
        dwell = now - state.state_entered_time
        transitions.append(Transition(
            kind="ACTIVE_TO_IDLE",
            at=now,
            dwell=dwell,
            significant=dwell >= cfg.active_to_idle_threshold,
        ))
        state = replace(state, activity_state="IDLE", state_entered_time=now)

    return state, transitions


def mark_eof(state: MonitorState) -> MonitorState:
    return replace(state, eof_reached=True)


def action_for(cfg: MonitorConfig, transition: Transition) -> Optional[str]:
    if not transition.significant:
        return None
    if transition.kind == "IDLE_TO_ACTIVE":
        return cfg.idle_to_active_command
    return cfg.active_to_idle_command
