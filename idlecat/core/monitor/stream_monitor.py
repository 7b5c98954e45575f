"""
Pass-through stream monitor that runs commands when the stream goes
IDLE -> ACTIVE, ACTIVE -> IDLE, and at end-of-stream.

Single-threaded: each iteration waits up to poll_interval for input, forwards
whatever was read, then evaluates the state machine with one clock snapshot.
Actions run synchronously, so no byte read after a transition is forwarded
before that transition's action has returned.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from idlecat.core.actions.runner import ActionRunner
from idlecat.core.errors import MonitorIOError

from .state_machine import action_for, advance, mark_eof
from .streams import InputSource, OutputSink
from .types import MonitorConfig, MonitorState, Transition

log = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0
BUFFER_SIZE = 4096


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


class StreamMonitor:
    def __init__(
        self,
        config: dict,
        source: InputSource,
        sink: OutputSink,
        runner: ActionRunner,
        clock: Callable[[], float] = time.monotonic,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        buffer_size: int = BUFFER_SIZE,
    ) -> None:
        self._cfg = self._parse_config(config)
        self._source = source
        self._sink = sink
        self._runner = runner
        self._clock = clock
        self._poll_interval = poll_interval
        self._buffer_size = buffer_size
        self._state = MonitorState.initial(clock())

        self._event_cb: Optional[Callable[[dict], None]] = None

    @staticmethod
    def _parse_config(config: dict) -> MonitorConfig:
        return MonitorConfig(
            idle_timeout=config.get("idle_timeout", 5),
            idle_to_active_threshold=config.get("idle_to_active_threshold", 120),
            active_to_idle_threshold=config.get("active_to_idle_threshold", 180),
            idle_to_active_command=config.get("idle_to_active_command"),
            active_to_idle_command=config.get("active_to_idle_command"),
            eof_command=config.get("eof_command"),
        )

    def on_event(self, cb: Callable[[dict], None]) -> None:
        self._event_cb = cb

    def get_state(self) -> MonitorState:
        return self._state

    def _emit(self, evt: dict) -> None:
        if self._event_cb:
            self._event_cb(evt)

    def run(self) -> int:
        """Forward input to output until end-of-stream. Returns the exit code."""
        log.info(
            "Monitoring stream (idle timeout %ss, thresholds %ss/%ss)",
            self._cfg.idle_timeout,
            self._cfg.idle_to_active_threshold,
            self._cfg.active_to_idle_threshold,
        )
        while not self._state.eof_reached:
            self.step()
        return 0

    def step(self) -> None:
        if self._state.eof_reached:
            return

        try:
            readable = self._source.wait_readable(self._poll_interval)
        except OSError as e:
            raise MonitorIOError("select", e) from e

        now = self._clock()
        data_arrived = False

        if readable:
            try:
                chunk = self._source.read(self._buffer_size)
            except OSError as e:
                raise MonitorIOError("read", e) from e

            if chunk == b"":
                self._handle_eof(now)
                return

            if chunk:
                try:
                    self._sink.write_all(chunk)
                except OSError as e:
                    raise MonitorIOError("write", e) from e
                data_arrived = True

        self._state, transitions = advance(self._state, self._cfg, now, data_arrived)
        self._dispatch(transitions)

    def _dispatch(self, transitions: List[Transition]) -> None:
        for t in transitions:
            command = action_for(self._cfg, t)
            log.info(
                "%s after %.1fs (%s)",
                t.kind,
                t.dwell,
                "significant" if t.significant else "below threshold",
            )
            self._emit({
                "type": t.kind,
                "at": _now_iso(),
                "clock": t.at,
                "dwell": t.dwell,
                "significant": t.significant,
            })
            if command:
                self._runner.run(command)

    def _handle_eof(self, now: float) -> None:
        self._state = mark_eof(self._state)
        log.info("End of stream")
        self._emit({
            "type": "EOF",
            "at": _now_iso(),
            "clock": now,
            "dwell": now - self._state.state_entered_time,
            "significant": True,
        })
        if self._cfg.eof_command:
            self._runner.run(self._cfg.eof_command)
