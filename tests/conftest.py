from typing import List, Optional, Union

import pytest

from idlecat.core.monitor.stream_monitor import StreamMonitor


def _is_silence(item) -> bool:
    return isinstance(item, (int, float)) and not isinstance(item, bool)


class ManualClock:
    """Clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedSource:
    """
    Input source driven by a script.

    Script items:
        float  -- seconds of silence; wait_readable() burns them in poll-sized slices
        bytes  -- one chunk returned by read(); b"" is end-of-stream
        None   -- one would-block read
    An exhausted script reads as end-of-stream.
    """

    def __init__(self, clock: ManualClock, script: List[Union[float, bytes, None]]) -> None:
        self.clock = clock
        self.script = list(script)
        self.reads = 0
        self.waits = 0

    def wait_readable(self, timeout: float) -> bool:
        self.waits += 1
        if self.script and _is_silence(self.script[0]):
            step = min(self.script[0], timeout)
            self.clock.advance(step)
            remaining = self.script[0] - step
            if remaining > 0:
                self.script[0] = remaining
            else:
                self.script.pop(0)
            return False
        return True

    def read(self, size: int) -> Optional[bytes]:
        self.reads += 1
        if not self.script:
            return b""
        item = self.script.pop(0)
        assert not _is_silence(item)
        return item


class RecordingSink:
    def __init__(self) -> None:
        self.chunks: List[bytes] = []

    def write_all(self, data: bytes) -> None:
        self.chunks.append(bytes(data))

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


class RecordingRunner:
    def __init__(self, sink: Optional[RecordingSink] = None) -> None:
        self.commands: List[str] = []
        self._sink = sink
        self.bytes_forwarded_at_call: List[int] = []

    def run(self, command: str) -> None:
        self.commands.append(command)
        if self._sink is not None:
            self.bytes_forwarded_at_call.append(len(self._sink.data))


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def runner(sink):
    return RecordingRunner(sink)


@pytest.fixture
def monitor_config():
    """Small thresholds matching the command-line scenario -t 1 -i 2 -a 2."""
    return {
        "idle_timeout": 1,
        "idle_to_active_threshold": 2,
        "active_to_idle_threshold": 2,
    }


@pytest.fixture
def make_monitor(clock, sink, runner, monitor_config):
    """Build a StreamMonitor over a ScriptedSource; returns (monitor, source)."""
    def _make(script, **overrides):
        cfg = dict(monitor_config, **overrides)
        source = ScriptedSource(clock, script)
        monitor = StreamMonitor(cfg, source=source, sink=sink, runner=runner, clock=clock)
        return monitor, source
    return _make
