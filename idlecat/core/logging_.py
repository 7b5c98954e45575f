from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from idlecat.shared.paths import ensure_parent_dir


def level_for_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0, log_file: Optional[Path] = None) -> None:
    # stdout carries the forwarded stream, so the console handler must use stderr.
    root = logging.getLogger()
    level = level_for_verbosity(verbosity)
    root.setLevel(level)

    if root.handlers:
        return

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_file is not None:
        ensure_parent_dir(log_file)
        fh = RotatingFileHandler(str(log_file), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        fh.setLevel(min(level, logging.INFO))
        fh.setFormatter(fmt)
        root.addHandler(fh)
        root.setLevel(min(level, logging.INFO))
