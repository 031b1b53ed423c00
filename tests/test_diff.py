"""Tests for failing-set diff classification."""

from conformgate.reporting.diff import classify_failures
from conformgate.types import ClassifiedDelta, DataError


def test_mixed_changes():
    delta = classify_failures({"t1", "t2"}, {"t2", "t3"})
    assert delta.regressed == ("t1",)
    assert delta.fixed == ("t3",)
    assert delta.still_failing == ("t2",)


def test_all_fixed():
    delta = classify_failures(set(), {"t1"})
    assert delta.regressed == ()
    assert delta.fixed == ("t1",)
    assert delta.still_failing == ()


def test_both_empty_is_not_an_error():
    delta = classify_failures([], [])
    assert isinstance(delta, ClassifiedDelta)
    assert delta.regressed == delta.fixed == delta.still_failing == ()


def test_no_baseline_marks_every_failure_regressed():
    delta = classify_failures(["t2", "t1"], None)
    assert delta.regressed == ("t1", "t2")
    assert delta.fixed == ()
    assert delta.baseline_available is False


def test_output_is_sorted():
    delta = classify_failures(["z", "a", "m"], ["y", "b"])
    assert delta.regressed == ("a", "m", "z")
    assert delta.fixed == ("b", "y")


def test_partition_laws():
    current = {"a", "b", "c", "d"}
    baseline = {"c", "d", "e"}
    delta = classify_failures(current, baseline)
    regressed, fixed, still = set(delta.regressed), set(delta.fixed), set(delta.still_failing)
    assert not (regressed & fixed) and not (regressed & still) and not (fixed & still)
    assert regressed | still == current
    assert fixed | still == baseline


def test_same_set_is_idempotent():
    s = {"x", "y"}
    delta = classify_failures(s, s)
    assert delta.regressed == () and delta.fixed == ()
    assert delta.still_failing == ("x", "y")


def test_swapping_inputs_swaps_regressed_and_fixed():
    a, b = {"t1", "t2"}, {"t2", "t3", "t4"}
    ab = classify_failures(a, b)
    ba = classify_failures(b, a)
    assert ab.regressed == ba.fixed
    assert ab.fixed == ba.regressed
    assert ab.still_failing == ba.still_failing


def test_new_failure_only_grows_regressed():
    before = classify_failures({"t1", "t2"}, {"t2", "t3"})
    after = classify_failures({"t1", "t2", "t9"}, {"t2", "t3"})
    assert set(after.regressed) == set(before.regressed) | {"t9"}
    assert after.fixed == before.fixed
    assert after.still_failing == before.still_failing


def test_duplicate_identifiers_rejected():
    result = classify_failures(["t1", "t1"], ["t2"])
    assert isinstance(result, DataError)
    assert result.identifiers == ("t1",)

    result = classify_failures(["t1"], ["t2", "t2"])
    assert isinstance(result, DataError)
    assert "baseline" in result.message


def test_empty_identifier_rejected():
    result = classify_failures(["", "t1"], [])
    assert isinstance(result, DataError)


def test_removed_tests_stay_fixed_and_are_flagged():
    # t3 no longer exists in the current run at all
    delta = classify_failures({"t1"}, {"t1", "t3", "t4"}, current_seen={"t1", "t4", "t5"})
    assert delta.fixed == ("t3", "t4")
    assert delta.removed == ("t3",)


def test_removed_empty_without_full_identifier_set():
    delta = classify_failures(set(), {"t3"})
    assert delta.fixed == ("t3",)
    assert delta.removed == ()
