from __future__ import annotations


class IdlecatError(Exception):
    """Base class for errors that stop the filter."""


class ConfigError(IdlecatError):
    """Invalid configuration file or values."""


class MonitorIOError(IdlecatError):
    """Fatal failure while waiting on, reading from or writing to a stream."""

    def __init__(self, operation: str, err: OSError) -> None:
        super().__init__(f"{operation}: {err.strerror or err}")
        self.operation = operation
        self.errno = err.errno
