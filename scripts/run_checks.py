#!/usr/bin/env python3
"""
scripts/run_checks.py — Check that every service in check_up.yml is up.

Exit status 0 when all services are up, 1 when any is down (or a waiting run
was interrupted between rounds), 2 when the manifest or settings are invalid.
A signal that arrives while checks are running kills the process. No news is
good news: a healthy run prints nothing unless --verbose is given.

Usage:
    python3 scripts/run_checks.py                          # ./check_up.yml
    python3 scripts/run_checks.py --file infra/check_up.yml --wait
    python3 scripts/run_checks.py --verbose db web         # only these services

Importable (used by integration tests):
    from scripts.run_checks import main
    exit_code = main(["--file", "check_up.yml"])
"""

from __future__ import annotations

import argparse
import os
import pathlib
import signal
import sys
import threading

# Add project root to path so check_up and config are importable
_ROOT = pathlib.Path(__file__).parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from pydantic import ValidationError  # noqa: E402

from check_up.manifest import parse_manifest, select_services  # noqa: E402
from check_up.reporter import Reporter  # noqa: E402
from check_up.scheduler import RetryScheduler, State  # noqa: E402
from config.settings import Settings, load_settings  # noqa: E402

EXIT_INTERRUPTED = 1
EXIT_CONFIG_ERROR = 2


def build_parser(cfg: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="check_up",
        description="Run shell health checks for a set of services.",
    )
    parser.add_argument(
        "services",
        nargs="*",
        metavar="SERVICE",
        help="Only check these services (default: all)",
    )
    parser.add_argument(
        "--file",
        default=cfg.CHECK_UP_FILE,
        help=f"Path to the service manifest (default: {cfg.CHECK_UP_FILE})",
    )
    parser.add_argument(
        "--wait",
        action="store_true",
        default=cfg.CHECK_UP_WAIT,
        help="Check services repeatedly until all are up",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=cfg.CHECK_UP_VERBOSE,
        help="Output every step of every check",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between rounds in --wait mode (overrides the manifest)",
    )
    return parser


def _install_stop_handlers(scheduler: RetryScheduler) -> dict[int, object]:
    """Handle SIGINT/SIGTERM for the duration of a run. Returns the previous handlers.

    Between rounds nothing is running, so the run unwinds with exit status 1.
    While a round is in flight the worker threads cannot be interrupted, so
    the process dies by the signal's default action and the commands it
    started are left behind.
    """
    if threading.current_thread() is not threading.main_thread():
        return {}

    def _handler(signum, frame):  # noqa: ARG001
        if scheduler.state is State.RETRYING:
            raise SystemExit(EXIT_INTERRUPTED)
        signal.signal(signum, signal.SIG_DFL)
        os.kill(os.getpid(), signum)

    previous = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.signal(signum, _handler)
    return previous


def _restore_handlers(previous: dict[int, object]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def main(argv: list[str] | None = None) -> int:
    try:
        cfg = load_settings()
    except ValidationError as exc:
        print("ERROR: Invalid check_up settings", file=sys.stderr)
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    args = build_parser(cfg).parse_args(argv)
    if args.interval is not None and args.interval < 0:
        print("ERROR: --interval must be >= 0", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        manifest = parse_manifest(args.file)
        services = select_services(manifest, args.services)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except ValueError as exc:
        print(f"ERROR: Invalid service manifest at {args.file}", file=sys.stderr)
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    interval = (
        args.interval
        if args.interval is not None
        else manifest.round_interval(default=cfg.CHECK_UP_INTERVAL_SECONDS)
    )
    scheduler = RetryScheduler(
        services,
        Reporter(verbose=args.verbose),
        wait=args.wait,
        interval=interval,
        shell=cfg.CHECK_UP_SHELL,
    )

    previous = _install_stop_handlers(scheduler)
    try:
        verdict = scheduler.run()
    finally:
        _restore_handlers(previous)

    return verdict.exit_code


if __name__ == "__main__":
    sys.exit(main())
