"""Unit tests for concurrent check rounds."""

from __future__ import annotations

import time

from check_up import Status
from check_up import rounds as rounds_mod
from check_up.manifest import ServiceSpec
from check_up.rounds import run_round


def _specs(*commands: str) -> list[ServiceSpec]:
    return [ServiceSpec(name=f"service_{i + 1}", command=c) for i, c in enumerate(commands)]


def test_all_up(quiet_reporter, sink):
    result = run_round(_specs("exit 0", "exit 0"), quiet_reporter)
    assert result.all_up
    assert result.down_services == []
    assert sink.getvalue() == ""


def test_one_down_makes_round_down(quiet_reporter, sink):
    result = run_round(_specs("exit 0", "exit 1"), quiet_reporter)
    assert not result.all_up
    assert result.down_services == ["service_2"]
    assert sink.getvalue().splitlines() == ["service_2 | down"]


def test_one_outcome_per_service_in_declaration_order(quiet_reporter):
    # service_1 finishes last but is still reported first
    result = run_round(_specs("sleep 0.3; exit 1", "exit 0", "exit 0"), quiet_reporter)
    assert [o.service_name for o in result.outcomes] == ["service_1", "service_2", "service_3"]
    assert [o.status for o in result.outcomes] == [Status.DOWN, Status.UP, Status.UP]


def test_checks_run_concurrently(quiet_reporter):
    start = time.monotonic()
    result = run_round(_specs("sleep 1", "sleep 1", "sleep 1"), quiet_reporter)
    elapsed = time.monotonic() - start
    assert result.all_up
    assert elapsed < 2.5


def test_trace_order_per_service_under_concurrency(verbose_reporter, sink):
    specs = _specs("sleep 0.2; exit 0", "exit 1", "sleep 0.1; exit 0")
    run_round(specs, verbose_reporter)

    lines = sink.getvalue().splitlines()
    assert len(lines) == 4 * len(specs)
    for spec in specs:
        own = [line.split(" | ", 1)[1] for line in lines if line.startswith(f"{spec.name} | ")]
        assert own[0] == "trying"
        assert own[1] == spec.command
        assert own[2].startswith("exit status ")
        assert own[3] in ("up", "down")


def test_repeated_rounds_are_identical(quiet_reporter):
    specs = _specs("exit 0", "exit 1")
    first = run_round(specs, quiet_reporter)
    second = run_round(specs, quiet_reporter)
    assert first == second


def test_crashed_worker_counts_as_down(quiet_reporter, sink, monkeypatch):
    real_check = rounds_mod.check_service

    def flaky_check(spec, reporter, shell):  # noqa: ANN001
        if spec.name == "service_2":
            raise RuntimeError("boom")
        return real_check(spec, reporter, shell)

    monkeypatch.setattr(rounds_mod, "check_service", flaky_check)
    result = run_round(_specs("exit 0", "exit 0"), quiet_reporter)
    assert [o.service_name for o in result.outcomes] == ["service_1", "service_2"]
    assert result.down_services == ["service_2"]
    assert result.outcomes[1].exit_code is None
    assert b"boom" in result.outcomes[1].raw_output
    assert "service_2 | down" in sink.getvalue()
