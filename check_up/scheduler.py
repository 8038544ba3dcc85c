"""
check_up/scheduler.py — Decide when a run is over.

    CHECKING ──all up──────────────▶ ALL_UP       (success)
    CHECKING ──down, no wait───────▶ ABORTED      (failure)
    CHECKING ──down, wait──────────▶ RETRYING ──interval──▶ CHECKING
    RETRYING ──stop requested──────▶ INTERRUPTED  (failure)

Wait mode has no retry limit: rounds repeat until every service is up or the
process is asked to stop. The interval is the pause between the end of one
failed round and the start of the next.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from enum import Enum

from check_up import RoundResult, RunVerdict
from check_up.manifest import ServiceSpec
from check_up.reporter import ALWAYS, Reporter
from check_up.rounds import run_round
from check_up.runner import DEFAULT_SHELL

RETRY_MESSAGE = "retrying check up"

RoundRunner = Callable[[Sequence[ServiceSpec], Reporter, str], RoundResult]


class State(str, Enum):
    CHECKING = "checking"
    ALL_UP = "all_up"
    RETRYING = "retrying"
    ABORTED = "aborted"
    INTERRUPTED = "interrupted"


class RetryScheduler:
    def __init__(
        self,
        specs: Sequence[ServiceSpec],
        reporter: Reporter,
        wait: bool = False,
        interval: float = 1.0,
        shell: str = DEFAULT_SHELL,
        stop_event: threading.Event | None = None,
        round_runner: RoundRunner = run_round,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.specs = tuple(specs)
        self.reporter = reporter
        self.wait = wait
        self.interval = interval
        self.shell = shell
        self.stop_event = stop_event or threading.Event()
        self._round_runner = round_runner
        self.state: State | None = None

    def stop(self) -> None:
        """Ask a waiting run to finish at the next round boundary.

        Safe to call from another thread, not from a signal handler.
        """
        self.stop_event.set()

    def run(self) -> RunVerdict:
        rounds_executed = 0
        while True:
            self.state = State.CHECKING
            result = self._round_runner(self.specs, self.reporter, self.shell)
            rounds_executed += 1

            if result.all_up:
                self.state = State.ALL_UP
                return RunVerdict(success=True, rounds_executed=rounds_executed)

            if not self.wait:
                self.state = State.ABORTED
                return RunVerdict(success=False, rounds_executed=rounds_executed)

            if self.stop_event.is_set():
                return self._interrupted(rounds_executed)

            self.state = State.RETRYING
            self.reporter.emit(RETRY_MESSAGE, ALWAYS)
            # Returns early (True) as soon as a stop is requested.
            if self.stop_event.wait(self.interval):
                return self._interrupted(rounds_executed)

    def _interrupted(self, rounds_executed: int) -> RunVerdict:
        self.state = State.INTERRUPTED
        return RunVerdict(success=False, rounds_executed=rounds_executed, interrupted=True)
