"""
Command-line entry point for upt.

Thin wiring around the core: parses flags, builds the components and
maps failures to a message on stderr and a non-zero exit code.
"""

import argparse
import sys

from upt import __version__
from upt.config import get_settings, resolve_reset_path
from upt.core.renderer import DurationRenderer, format_start
from upt.core.resolver import StartResolver
from upt.core.watch import InterruptChannel, SignalInterruptSource, Terminal, WatchLoop
from upt.exceptions import HomeResolutionError, PersistedWriteError, UptError
from upt.services.boot import BootTimeProvider
from upt.services.store import ResetStore
from upt.utils.clock import SystemClock
from upt.utils.logging import LogContext, get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upt",
        description="A simple uptime CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  upt                 time since boot or the last reset
  upt --reset         start a new session now
  upt --watch --iso   live ISO 8601 duration
  upt --start --system
        """,
    )

    parser.add_argument(
        "--reset", "-r",
        action="store_true",
        help="Reset the uptime to now",
    )
    parser.add_argument(
        "--watch", "-w",
        action="store_true",
        help="Watch the uptime",
    )
    parser.add_argument(
        "--start", "-s",
        action="store_true",
        help="Print start date time",
    )
    # No short flag, -s is taken by --start
    parser.add_argument(
        "--system",
        action="store_true",
        help="Show the system uptime, disregarding any resets",
    )
    parser.add_argument(
        "--iso", "-i",
        action="store_true",
        help="Instead of human readable duration print in ISO 8601 format",
    )
    parser.add_argument(
        "--version", "-v",
        action="store_true",
        help="Print version",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (defaults to sys.argv)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"upt {__version__}")
        return EXIT_OK

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    try:
        reset_path = resolve_reset_path(settings)
    except HomeResolutionError as e:
        # Only fatal if a reset is requested, which the store reports
        logger.debug("reset_location_unresolved", error=str(e))
        reset_path = None

    clock = SystemClock()
    resolver = StartResolver(
        boot_provider=BootTimeProvider(clock),
        store=ResetStore(reset_path),
        clock=clock,
    )
    renderer = DurationRenderer(clock)

    mode = "watch" if args.watch else "once"
    with LogContext(mode=mode):
        try:
            start = resolver.resolve(explicit_reset=args.reset, system_override=args.system)

            if args.start:
                print(format_start(start.instant, strict_iso=args.iso))

            if args.watch:
                channel = InterruptChannel()
                loop = WatchLoop(
                    renderer=renderer,
                    terminal=Terminal(sys.stdout),
                    channel=channel,
                    interval=settings.watch_interval_seconds,
                    machine_format=args.iso,
                )
                with SignalInterruptSource(channel):
                    loop.run(start.instant)
            else:
                print(renderer.render(start.instant, machine_format=args.iso))

        except (HomeResolutionError, PersistedWriteError) as e:
            print(f"upt: Could not reset the uptime: {e}", file=sys.stderr)
            return EXIT_FAILURE
        except UptError as e:
            logger.debug("invocation_failed", error_type=type(e).__name__)
            print(f"upt: {e}", file=sys.stderr)
            return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
