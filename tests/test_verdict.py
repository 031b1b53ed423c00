"""Tests for gate verdict assembly."""

import pytest
from pydantic import ValidationError

from conformgate.reporting.verdict import evaluate_gate, validate_snapshot
from conformgate.types import (
    Counters,
    CountVerdict,
    DataError,
    FindingLevel,
    GateVerdict,
    OutcomeStatus,
    ResultSnapshot,
    TestOutcome,
    TolerancePolicy,
)


def _snapshot(failing, passing=(), suite="bfs", counters=None, complete=False):
    outcomes = [TestOutcome(identifier=t, status=OutcomeStatus.FAILED) for t in failing]
    outcomes += [TestOutcome(identifier=t, status=OutcomeStatus.PASSED) for t in passing]
    return ResultSnapshot(suite_name=suite, outcomes=outcomes, counters=counters, complete=complete)


def test_regression_blocks_gate():
    verdict = evaluate_gate(_snapshot(["t1", "t2"]), _snapshot(["t2", "t3"]))
    assert isinstance(verdict, GateVerdict)
    assert verdict.delta.regressed == ("t1",)
    assert verdict.delta.fixed == ("t3",)
    assert not verdict.green
    assert verdict.exit_code == 1


def test_only_fixed_is_green():
    verdict = evaluate_gate(_snapshot([]), _snapshot(["t1"]))
    assert verdict.delta.fixed == ("t1",)
    assert verdict.green
    assert verdict.exit_code == 0
    assert "Congrats! The bfs test t1 is now passing!" in verdict.messages


def test_count_regression_blocks_gate_without_new_ids():
    current = _snapshot(["t1"], counters=Counters(total=10, passed=4, failed=6))
    baseline = _snapshot(["t1"], counters=Counters(total=10, passed=5, failed=5))
    verdict = evaluate_gate(current, baseline, TolerancePolicy(max_new_failures=0))
    assert verdict.delta.regressed == ()
    assert verdict.count_verdict == CountVerdict.REGRESSED
    assert verdict.net_new_failures == 1
    assert not verdict.green
    assert verdict.findings[-1].level == FindingLevel.ERROR


def test_no_baseline_is_red_with_failures():
    verdict = evaluate_gate(_snapshot(["t1", "t2"]), None)
    assert verdict.delta.regressed == ("t1", "t2")
    assert verdict.delta.baseline_available is False
    assert not verdict.green
    assert verdict.findings[0].level == FindingLevel.WARNING
    assert "No baseline available" in verdict.messages[0]


def test_no_baseline_without_failures_is_green_but_warned():
    verdict = evaluate_gate(_snapshot([], passing=["t1"]), None)
    assert verdict.green
    assert any(f.level == FindingLevel.WARNING for f in verdict.findings)


def test_missing_counters_add_warning():
    verdict = evaluate_gate(_snapshot(["t1"]), _snapshot(["t1"]))
    assert verdict.count_verdict == CountVerdict.ACCEPTABLE
    assert verdict.findings[-1].level == FindingLevel.WARNING
    assert "count comparison skipped" in verdict.messages[-1]


def test_message_order_is_deterministic():
    current = _snapshot(["b", "a"], counters=Counters(total=2, failed=2))
    baseline = _snapshot(["d", "c"], counters=Counters(total=2, failed=2))
    first = evaluate_gate(current, baseline)
    second = evaluate_gate(current, baseline)
    assert first.messages == second.messages
    assert first.messages[0].startswith("bfs test failed: a.")
    assert first.messages[1].startswith("bfs test failed: b.")
    assert "c is now passing" in first.messages[2]
    assert "d is now passing" in first.messages[3]
    assert first.messages[4].startswith("Changes from 'main'")
    assert len(first.messages) == 5


def test_removed_test_worded_differently():
    current = _snapshot([], passing=["t1"], complete=True)
    baseline = _snapshot(["t1", "t2"])
    verdict = evaluate_gate(current, baseline)
    assert verdict.delta.fixed == ("t1", "t2")
    assert verdict.delta.removed == ("t2",)
    assert "t1 is now passing" in verdict.messages[0]
    assert "no longer present" in verdict.messages[1]


def test_duplicate_outcomes_are_data_error():
    current = _snapshot(["t1"], passing=["t1"])
    result = evaluate_gate(current, _snapshot([]))
    assert isinstance(result, DataError)
    assert result.identifiers == ("t1",)


def test_baseline_duplicates_are_data_error():
    result = evaluate_gate(_snapshot([]), _snapshot(["t1", "t1"]))
    assert isinstance(result, DataError)
    assert "baseline snapshot" in result.message


def test_suite_mismatch_is_data_error():
    result = evaluate_gate(_snapshot([], suite="gnu"), _snapshot([], suite="bfs"))
    assert isinstance(result, DataError)
    assert "suite mismatch" in result.message


def test_inconsistent_counters_are_data_error():
    snapshot = _snapshot([], counters=Counters(total=10, passed=3, failed=1))
    error = validate_snapshot(snapshot, "current snapshot")
    assert isinstance(error, DataError)
    assert "do not add up" in error.message


def test_complete_snapshot_counters_must_match_outcomes():
    snapshot = _snapshot(
        ["t1"], passing=["t2"], complete=True,
        counters=Counters(total=2, passed=2, failed=0),
    )
    error = validate_snapshot(snapshot, "current snapshot")
    assert isinstance(error, DataError)
    assert "disagree" in error.message

    snapshot = _snapshot(
        ["t1"], passing=["t2"], complete=True,
        counters=Counters(total=2, passed=1, failed=1),
    )
    assert validate_snapshot(snapshot, "current snapshot") is None


def test_verdict_is_immutable():
    verdict = evaluate_gate(_snapshot([]), _snapshot([]))
    with pytest.raises(ValidationError):
        verdict.count_verdict = CountVerdict.REGRESSED
