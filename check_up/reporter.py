"""
check_up/reporter.py — Trace line output.

All trace lines go through one Reporter so that concurrent service checks
never interleave partial lines. Lines are written as they happen.
"""

from __future__ import annotations

import sys
import threading
from typing import TextIO

SEPARATOR = " | "

# Line levels. ALWAYS lines are the minimum needed to explain a failure;
# VERBOSE lines show each step of a check.
ALWAYS = 0
VERBOSE = 1


class Reporter:
    def __init__(self, sink: TextIO | None = None, verbose: bool = False) -> None:
        self._sink = sink
        self.verbose = verbose
        self._lock = threading.Lock()

    @property
    def sink(self) -> TextIO:
        # Resolved lazily so a replaced sys.stdout (pytest capsys) is honoured.
        return self._sink if self._sink is not None else sys.stdout

    def emit(self, message: str, level: int = VERBOSE) -> None:
        if level > ALWAYS and not self.verbose:
            return
        with self._lock:
            self.sink.write(f"{message}\n")
            self.sink.flush()

    def service(self, name: str, message: str, level: int = VERBOSE) -> None:
        self.emit(f"{name}{SEPARATOR}{message}", level)
