"""
Raw file-descriptor streams used by the monitor.

The input side is switched to non-blocking mode and waited on with select(),
so a bounded wait can expire and let the monitor notice an idle stream even
when no data ever arrives.
"""

from __future__ import annotations

import logging
import os
import select
from abc import ABC, abstractmethod
from typing import Optional

log = logging.getLogger(__name__)


class InputSource(ABC):
    """Interface for the monitored input stream."""

    @abstractmethod
    def wait_readable(self, timeout: float) -> bool:
        """Block until readable or until timeout seconds pass. True if readable."""
        ...

    @abstractmethod
    def read(self, size: int) -> Optional[bytes]:
        """Read up to size bytes. None if the read would block, b"" at end-of-stream."""
        ...


class OutputSink(ABC):
    """Interface for the stream that receives forwarded bytes."""

    @abstractmethod
    def write_all(self, data: bytes) -> None:
        """Write every byte of data, in order, before returning."""
        ...


class FdInputSource(InputSource):
    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._was_blocking = os.get_blocking(fd)
        os.set_blocking(fd, False)
        log.debug("Input fd %d set non-blocking", fd)

    def wait_readable(self, timeout: float) -> bool:
        readable, _, _ = select.select([self._fd], [], [], timeout)
        return bool(readable)

    def read(self, size: int) -> Optional[bytes]:
        try:
            return os.read(self._fd, size)
        except BlockingIOError:
            return None

    def restore(self) -> None:
        """Put the descriptor back in the blocking mode it had before."""
        try:
            os.set_blocking(self._fd, self._was_blocking)
        except OSError as e:
            log.debug("Could not restore blocking mode on fd %d: %s", self._fd, e)


class FdOutputSink(OutputSink):
    """
    Blocking-style writer on a raw descriptor.

    When stdin and stdout are the same terminal they share one file description,
    so making stdin non-blocking also affects stdout. A would-block on write is
    therefore waited out with select() instead of being treated as an error.
    """

    def __init__(self, fd: int) -> None:
        self._fd = fd

    def write_all(self, data: bytes) -> None:
        view = memoryview(data)
        written = 0
        while written < len(view):
            try:
                written += os.write(self._fd, view[written:])
            except InterruptedError:
                continue
            except BlockingIOError:
                select.select([], [self._fd], [])
