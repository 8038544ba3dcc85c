"""
check_up/service.py — One check of one service.

Trace order for a single check is fixed:

    <name> | trying
    <name> | <command>
    <name> | exit status <code>
    <name> | up            (or: <name> | down)

Only the down line is shown without --verbose.
"""

from __future__ import annotations

from check_up import CheckOutcome, Status
from check_up.manifest import ServiceSpec
from check_up.reporter import ALWAYS, VERBOSE, Reporter
from check_up.runner import DEFAULT_SHELL, run_command


def classify(exit_code: int) -> Status:
    return Status.UP if exit_code == 0 else Status.DOWN


def check_service(spec: ServiceSpec, reporter: Reporter, shell: str = DEFAULT_SHELL) -> CheckOutcome:
    reporter.service(spec.name, "trying", VERBOSE)
    reporter.service(spec.name, spec.command, VERBOSE)

    result = run_command(spec.command, shell=shell, timeout=spec.timeout)
    code = result.reported_exit_code
    reporter.service(spec.name, f"exit status {code}", VERBOSE)

    status = classify(code)
    reporter.service(spec.name, status.value, VERBOSE if status is Status.UP else ALWAYS)

    return CheckOutcome(
        service_name=spec.name,
        exit_code=result.exit_code,
        status=status,
        raw_output=result.output,
    )
