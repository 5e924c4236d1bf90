from __future__ import annotations

import json
from pathlib import Path
from unittest import mock

import pytest
from jsonschema import ValidationError, validate

from plantest.core import FailureReason, SuiteResult, TimingSettings, TrialOutcome, TrialStatus
from plantest.reporting import CollectingReporter, JsonReporter, ReportManager, TerminalReporter
from plantest.reporting.json_reporter import build_payload
from plantest.reporting.schema import JSON_SCHEMA_V1, SCHEMA_VERSION

from .fakes import IMPROVING_SCRIPT, FakeClock, ScriptedVariant

TIMING = TimingSettings(total=1.0, slice=0.25)


def _outcomes() -> list:
    return [
        TrialOutcome(
            planner="RRTstar",
            query_index=0,
            status=TrialStatus.PASSED,
            duration_s=0.9,
            initial_length=10.0,
            final_length=9.0,
            lengths=(10.0, 9.5, 9.0),
            rounds=2,
        ),
        TrialOutcome(
            planner="RRTstar",
            query_index=1,
            status=TrialStatus.FAILED,
            duration_s=0.4,
            reason=FailureReason.NON_MONOTONIC_REGRESSION,
            initial_length=10.0,
            final_length=9.5,
            lengths=(10.0, 9.5, 9.75),
            rounds=2,
            detail="slice 2 length 9.750000 exceeds previous 9.500000",
        ),
        TrialOutcome(
            planner="PRMstar",
            query_index=0,
            status=TrialStatus.ERROR,
            duration_s=0.0,
            detail="planner construction failed: boom",
        ),
    ]


def _replay(reporter, outcomes) -> SuiteResult:
    clock = FakeClock()
    variants = [ScriptedVariant("RRTstar", IMPROVING_SCRIPT, clock), ScriptedVariant("PRMstar", (), clock)]
    reporter.on_start(variants, range(2), TIMING)
    for index, outcome in enumerate(outcomes, start=1):
        reporter.on_trial_result(outcome, index, len(outcomes))
    result = SuiteResult(outcomes=list(outcomes), duration_s=1.3)
    reporter.on_complete(result)
    return result


def test_terminal_reporter_lines(capsys) -> None:
    _replay(TerminalReporter(use_color=False), _outcomes())
    out = capsys.readouterr().out
    assert "Starting run: 2 planner(s) [RRTstar, PRMstar] x 2 query(ies) budget=1s slice=0.25s" in out
    assert "[1/3] PASS  RRTstar/query0 (900.0 ms)" in out
    assert "lengths: 10.0000 -> 9.5000 -> 9.0000" in out
    assert "[2/3] FAIL  RRTstar/query1" in out
    assert "planner=RRTstar query=1 reason=non-monotonic-regression rounds=2" in out
    assert "[3/3] ERROR PRMstar/query0" in out
    assert "Summary: total=3 passed=1 failed=1 errors=1 duration=1.30s" in out
    assert "Failure details:" in out
    assert "[2] RRTstar/query1 -> non-monotonic-regression" in out
    assert "[3] PRMstar/query0 -> error" in out
    assert "\x1b[" not in out


def test_terminal_reporter_colors_status(capsys) -> None:
    with mock.patch("plantest.reporting.terminal.colorama_init") as init:
        reporter = TerminalReporter(use_color=True)
    init.assert_called_once()
    _replay(reporter, _outcomes()[:1])
    out = capsys.readouterr().out
    assert "\x1b[32mPASS" in out


def test_terminal_reporter_elides_long_trajectories(capsys) -> None:
    outcome = TrialOutcome(
        planner="RRTstar",
        query_index=0,
        status=TrialStatus.PASSED,
        duration_s=1.0,
        lengths=tuple(float(20 - i) for i in range(12)),
    )
    _replay(TerminalReporter(use_color=False), [outcome])
    out = capsys.readouterr().out
    assert "20.0000 -> 19.0000 -> 18.0000 -> 17.0000 -> ... -> 12.0000 -> 11.0000 -> 10.0000 -> 9.0000" in out


def test_json_reporter_writes_file(tmp_path: Path, capsys) -> None:
    report_path = tmp_path / "reports" / "run.json"
    _replay(JsonReporter(str(report_path)), _outcomes())
    assert f"JSON report written to {report_path}" in capsys.readouterr().err
    data = json.loads(report_path.read_text(encoding="utf-8"))
    validate(instance=data, schema=JSON_SCHEMA_V1)
    assert data["schema_version"] == SCHEMA_VERSION
    assert data["generated_at"].endswith("Z")
    assert data["summary"]["total"] == 3
    assert data["summary"]["ok"] is False
    assert data["summary"]["planners"] == ["RRTstar", "PRMstar"]
    assert data["summary"]["timing"] == {"total": 1.0, "slice": 0.25, "grace": None}
    ids = [trial["id"] for trial in data["trials"]]
    assert ids == ["RRTstar/query0", "RRTstar/query1", "PRMstar/query0"]
    failed = data["trials"][1]
    assert failed["reason"] == "non-monotonic-regression"
    assert failed["lengths"] == [10.0, 9.5, 9.75]
    assert data["trials"][2]["status"] == "error"
    assert data["trials"][2]["initial_length"] is None


def test_json_reporter_stdout(capsys) -> None:
    _replay(JsonReporter(), _outcomes()[:1])
    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["ok"] is True
    assert data["trials"][0]["duration_ms"] == pytest.approx(900.0)


def test_payload_is_validated() -> None:
    result = SuiteResult(outcomes=[], duration_s=0.0)
    with pytest.raises(ValidationError):
        build_payload(result, [{"id": "RRTstar/query0"}], ["RRTstar"], TIMING)


def test_report_manager_fans_out() -> None:
    first, second = CollectingReporter(), CollectingReporter()
    manager = ReportManager([first, second])
    result = _replay(manager, _outcomes())
    for reporter in manager.reporters():
        assert reporter.started
        assert reporter.outcomes == _outcomes()
        assert reporter.result is result


def test_json_reporter_writes_non_finite_lengths_as_null(capsys) -> None:
    outcome = TrialOutcome(
        planner="RRTstar",
        query_index=0,
        status=TrialStatus.FAILED,
        duration_s=0.5,
        reason=FailureReason.NON_MONOTONIC_REGRESSION,
        initial_length=10.0,
        final_length=float("nan"),
        lengths=(10.0, float("inf"), float("nan")),
        rounds=2,
    )
    _replay(JsonReporter(), [outcome])

    def reject(constant):
        raise ValueError(f"non-standard JSON constant {constant}")

    data = json.loads(capsys.readouterr().out, parse_constant=reject)
    trial = data["trials"][0]
    assert trial["lengths"] == [10.0, None, None]
    assert trial["final_length"] is None
    assert trial["initial_length"] == 10.0
