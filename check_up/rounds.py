"""
check_up/rounds.py — Check every service once, concurrently.

One worker thread per service. The round returns only after every worker has
finished, and outcomes keep declaration order whatever the completion order.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from check_up import CheckOutcome, RoundResult, Status
from check_up.manifest import ServiceSpec
from check_up.reporter import ALWAYS, Reporter
from check_up.runner import DEFAULT_SHELL
from check_up.service import check_service


def run_round(
    specs: Sequence[ServiceSpec],
    reporter: Reporter,
    shell: str = DEFAULT_SHELL,
) -> RoundResult:
    if not specs:
        return RoundResult(outcomes=())

    with ThreadPoolExecutor(max_workers=len(specs), thread_name_prefix="check_up") as executor:
        futures = [executor.submit(check_service, spec, reporter, shell) for spec in specs]
        outcomes = [_collect(spec, future, reporter) for spec, future in zip(specs, futures)]

    return RoundResult(outcomes=tuple(outcomes))


def _collect(spec: ServiceSpec, future: Future, reporter: Reporter) -> CheckOutcome:
    try:
        return future.result()
    except Exception as e:
        # A broken worker still counts as one outcome for its service.
        reporter.service(spec.name, "down", ALWAYS)
        return CheckOutcome(
            service_name=spec.name,
            exit_code=None,
            status=Status.DOWN,
            raw_output=f"error: {e}".encode(),
        )
