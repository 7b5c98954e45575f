from __future__ import annotations

import logging
import subprocess
from typing import Protocol

log = logging.getLogger(__name__)


class ActionRunner(Protocol):
    def run(self, command: str) -> None:
        ...


class ShellActionRunner:
    """Runs a command through /bin/sh and waits for it, like system(3)."""

    def run(self, command: str) -> None:
        log.info("Running action: %s", command)
        try:
            # stdin is detached so the action cannot eat the monitored stream.
            result = subprocess.run(command, shell=True, stdin=subprocess.DEVNULL, check=False)
        except OSError:
            log.exception("Failed to start action %r", command)
            return

        if result.returncode != 0:
            log.warning("Action %r exited with status %d", command, result.returncode)
        else:
            log.debug("Action %r finished", command)
