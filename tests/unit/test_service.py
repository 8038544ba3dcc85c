"""Unit tests for single-service checks and their trace lines."""

from __future__ import annotations

import io
import threading

from check_up import Status
from check_up.manifest import ServiceSpec
from check_up.reporter import ALWAYS, Reporter
from check_up.service import check_service, classify


def _lines(sink: io.StringIO) -> list[str]:
    return sink.getvalue().splitlines()


def test_classify():
    assert classify(0) is Status.UP
    assert classify(1) is Status.DOWN
    assert classify(-9) is Status.DOWN


def test_up_trace_in_fixed_order(verbose_reporter, sink):
    outcome = check_service(ServiceSpec(name="serviceName", command="exit 0"), verbose_reporter)
    assert outcome.is_up
    assert outcome.exit_code == 0
    assert _lines(sink) == [
        "serviceName | trying",
        "serviceName | exit 0",
        "serviceName | exit status 0",
        "serviceName | up",
    ]


def test_down_trace_in_fixed_order(verbose_reporter, sink):
    outcome = check_service(ServiceSpec(name="serviceName", command="exit 1"), verbose_reporter)
    assert outcome.status is Status.DOWN
    assert outcome.exit_code == 1
    assert _lines(sink) == [
        "serviceName | trying",
        "serviceName | exit 1",
        "serviceName | exit status 1",
        "serviceName | down",
    ]


def test_up_is_silent_without_verbose(quiet_reporter, sink):
    check_service(ServiceSpec(name="db", command="exit 0"), quiet_reporter)
    assert sink.getvalue() == ""


def test_down_is_shown_without_verbose(quiet_reporter, sink):
    check_service(ServiceSpec(name="db", command="exit 2"), quiet_reporter)
    assert _lines(sink) == ["db | down"]


def test_outcome_keeps_raw_output(quiet_reporter):
    outcome = check_service(
        ServiceSpec(name="db", command="echo connection refused 1>&2; exit 1"), quiet_reporter
    )
    assert b"connection refused" in outcome.raw_output


def test_launch_failure_is_down_with_synthetic_status(verbose_reporter, sink):
    outcome = check_service(
        ServiceSpec(name="db", command="exit 0"),
        verbose_reporter,
        shell="/nonexistent/shell-for-check-up",
    )
    assert outcome.status is Status.DOWN
    assert outcome.exit_code is None
    assert _lines(sink)[2:] == ["db | exit status 127", "db | down"]


def test_timeout_is_down(verbose_reporter, sink):
    outcome = check_service(
        ServiceSpec(name="slow", command="sleep 5", timeout=0.2), verbose_reporter
    )
    assert outcome.status is Status.DOWN
    assert _lines(sink)[2:] == ["slow | exit status 124", "slow | down"]


class TestReporter:
    def test_verbose_lines_hidden_by_default(self, sink):
        reporter = Reporter(sink=sink)
        reporter.service("db", "trying")
        reporter.emit("retrying check up", ALWAYS)
        assert _lines(sink) == ["retrying check up"]

    def test_service_lines_are_prefixed(self, verbose_reporter, sink):
        verbose_reporter.service("db", "trying")
        assert sink.getvalue() == "db | trying\n"

    def test_concurrent_writes_are_whole_lines(self, sink):
        reporter = Reporter(sink=sink, verbose=True)

        def write_many(name: str) -> None:
            for i in range(200):
                reporter.service(name, f"line {i}")

        threads = [threading.Thread(target=write_many, args=(f"s{n}",)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = _lines(sink)
        assert len(lines) == 800
        assert all(line.startswith("s") and " | line " in line for line in lines)
