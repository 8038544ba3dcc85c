"""
check_up — Concurrent shell-command health checks.

Each service is checked by running its command; exit status 0 means up.
A round checks every service once, and the scheduler repeats rounds in
wait mode until all services are up.

Usage:
    from check_up import CheckOutcome, RoundResult
    from check_up.scheduler import RetryScheduler
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Status(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class CheckOutcome:
    service_name: str
    exit_code: int | None
    status: Status
    raw_output: bytes = b""

    @property
    def is_up(self) -> bool:
        return self.status is Status.UP


@dataclass(frozen=True)
class RoundResult:
    outcomes: tuple[CheckOutcome, ...]

    @property
    def all_up(self) -> bool:
        return all(o.is_up for o in self.outcomes)

    @property
    def down_services(self) -> list[str]:
        return [o.service_name for o in self.outcomes if not o.is_up]


@dataclass(frozen=True)
class RunVerdict:
    success: bool
    rounds_executed: int
    interrupted: bool = False

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1
