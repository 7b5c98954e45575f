from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from idlecat.core.actions.runner import ShellActionRunner
from idlecat.core.errors import ConfigError, IdlecatError
from idlecat.core.logging_ import setup_logging
from idlecat.core.monitor.stream_monitor import StreamMonitor
from idlecat.core.monitor.streams import FdInputSource, FdOutputSink
from idlecat.shared.config import (
    DEFAULT_ACTIVE_TO_IDLE_THRESHOLD,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_IDLE_TO_ACTIVE_THRESHOLD,
    AppConfig,
)
from idlecat.shared.store import ConfigStore

log = logging.getLogger(__name__)

EXIT_FAILURE = 1
STDIN_FILENO = 0
STDOUT_FILENO = 1


class _UsageAction(argparse.Action):
    def __init__(self, option_strings, dest, **kwargs) -> None:
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        parser.print_help(sys.stderr)
        parser.exit(EXIT_FAILURE)


def _positive_int(what: str):
    def parse(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"{what} must be a positive integer, got {text!r}")
        if value <= 0:
            raise argparse.ArgumentTypeError(f"{what} must be positive")
        return value
    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idlecat",
        description="Copy stdin to stdout and run commands when the stream goes idle or active.",
        add_help=False,
    )
    parser.add_argument("-t", dest="idle_timeout", metavar="SECONDS",
                        type=_positive_int("Idle timeout"),
                        help=f"Set idle timeout (default: {DEFAULT_IDLE_TIMEOUT} seconds)")
    parser.add_argument("-i", dest="idle_to_active_threshold", metavar="SECONDS",
                        type=_positive_int("Idle to active threshold"),
                        help=f"Set idle to active threshold (default: {DEFAULT_IDLE_TO_ACTIVE_THRESHOLD} seconds)")
    parser.add_argument("-a", dest="active_to_idle_threshold", metavar="SECONDS",
                        type=_positive_int("Active to idle threshold"),
                        help=f"Set active to idle threshold (default: {DEFAULT_ACTIVE_TO_IDLE_THRESHOLD} seconds)")
    parser.add_argument("-I", dest="idle_to_active_command", metavar="COMMAND",
                        help="Command to run on transition from idle to active")
    parser.add_argument("-A", dest="active_to_idle_command", metavar="COMMAND",
                        help="Command to run on transition from active to idle")
    parser.add_argument("-E", dest="eof_command", metavar="COMMAND",
                        help="Command to run on EOF")
    parser.add_argument("-c", dest="config_file", metavar="FILE", type=Path,
                        help="Read defaults from a JSON config file")
    parser.add_argument("-v", dest="verbosity", action="count", default=0,
                        help="Log more to stderr (repeat for debug output)")
    parser.add_argument("-h", action=_UsageAction, help="Show this help message")
    return parser


def load_config(args: argparse.Namespace) -> AppConfig:
    if args.config_file is not None:
        store = ConfigStore(args.config_file)
        if not store.exists():
            raise ConfigError(f"config file not found: {store.path()}")
    else:
        store = ConfigStore()

    try:
        return store.load().merged(
            idle_timeout=args.idle_timeout,
            idle_to_active_threshold=args.idle_to_active_threshold,
            active_to_idle_threshold=args.active_to_idle_threshold,
            idle_to_active_command=args.idle_to_active_command,
            active_to_idle_command=args.active_to_idle_command,
            eof_command=args.eof_command,
        )
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def _log_event(evt: dict) -> None:
    log.debug("event %s", evt)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    try:
        cfg = load_config(args)
    except ConfigError as e:
        print(f"idlecat: {e}", file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(args.verbosity, cfg.log_file)

    # Raw descriptors: sys.stdin is None when the process starts with fd 0 closed.
    try:
        source = FdInputSource(STDIN_FILENO)
    except OSError as e:
        log.error("cannot make stdin non-blocking: %s", e)
        return EXIT_FAILURE

    monitor = StreamMonitor(
        cfg.to_monitor_config(),
        source=source,
        sink=FdOutputSink(STDOUT_FILENO),
        runner=ShellActionRunner(),
    )
    monitor.on_event(_log_event)
    try:
        return monitor.run()
    except IdlecatError as e:
        log.error("%s", e)
        return EXIT_FAILURE
    finally:
        source.restore()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
