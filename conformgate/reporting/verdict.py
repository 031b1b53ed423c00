"""Gate verdict assembly: validate snapshots, diff failures, judge counts."""

from __future__ import annotations

from collections import Counter
from typing import Optional

from conformgate.reporting.counts import judge_counts
from conformgate.reporting.diff import classify_failures
from conformgate.types import (
    ClassifiedDelta,
    CountJudgement,
    CountVerdict,
    DataError,
    Finding,
    FindingLevel,
    GateVerdict,
    ResultSnapshot,
    TolerancePolicy,
)


def validate_snapshot(snapshot: ResultSnapshot, label: str) -> DataError | None:
    """Return a DataError if the snapshot breaks the data contract."""
    ids = snapshot.identifiers()
    if any(not i.strip() for i in ids):
        return DataError(message=f"{label} '{snapshot.suite_name}': empty test identifier")

    dupes = sorted(i for i, n in Counter(ids).items() if n > 1)
    if dupes:
        return DataError(
            message=(
                f"{label} '{snapshot.suite_name}': duplicate test identifiers: "
                f"{', '.join(dupes)}"
            ),
            identifiers=tuple(dupes),
        )

    counters = snapshot.counters
    if counters is None:
        return None

    if not counters.is_consistent():
        return DataError(
            message=(
                f"{label} '{snapshot.suite_name}': counters do not add up "
                f"(passed+failed+skipped+errored != total {counters.total})"
            )
        )

    if snapshot.complete:
        tallied = counters.tally(snapshot.outcomes)
        if tallied != counters:
            return DataError(
                message=(
                    f"{label} '{snapshot.suite_name}': counters {counters.model_dump()} "
                    f"disagree with outcomes {tallied.model_dump()}"
                )
            )
    return None


def _delta_findings(suite: str, branch: str, delta: ClassifiedDelta) -> list[Finding]:
    findings: list[Finding] = []

    for test_id in delta.regressed:
        if delta.baseline_available:
            text = f"{suite} test failed: {test_id}. It is not failing on '{branch}'."
        else:
            text = f"{suite} test failed: {test_id} (no baseline to compare against)."
        findings.append(Finding(level=FindingLevel.ERROR, text=text))

    removed = set(delta.removed)
    for test_id in delta.fixed:
        if test_id in removed:
            text = (
                f"The {suite} test {test_id} failed on '{branch}' "
                f"and is no longer present in this run."
            )
        else:
            text = f"Congrats! The {suite} test {test_id} is now passing!"
        findings.append(Finding(level=FindingLevel.NOTICE, text=text))

    return findings


def _count_finding(judgement: CountJudgement) -> Finding:
    if judgement.counters_missing:
        level = FindingLevel.WARNING
    elif judgement.verdict == CountVerdict.REGRESSED:
        level = FindingLevel.ERROR
    else:
        level = FindingLevel.NOTICE
    return Finding(level=level, text=judgement.summary)


def evaluate_gate(
    current: ResultSnapshot,
    baseline: Optional[ResultSnapshot],
    policy: TolerancePolicy | None = None,
    branch: str = "main",
) -> GateVerdict | DataError:
    """Compare ``current`` against ``baseline`` and build the gate verdict.

    ``baseline=None`` is the explicit "no baseline available" state. Either a
    complete verdict or a DataError is returned, never both.
    """
    error = validate_snapshot(current, "current snapshot")
    if error is not None:
        return error

    if baseline is not None:
        error = validate_snapshot(baseline, "baseline snapshot")
        if error is not None:
            return error
        if baseline.suite_name != current.suite_name:
            return DataError(
                message=(
                    f"suite mismatch: current is '{current.suite_name}', "
                    f"baseline is '{baseline.suite_name}'"
                )
            )

    delta = classify_failures(
        current.failing_identifiers(),
        baseline.failing_identifiers() if baseline is not None else None,
        current_seen=current.identifiers() if current.complete else None,
    )
    if isinstance(delta, DataError):
        return delta

    judgement = judge_counts(
        current.counters,
        baseline.counters if baseline is not None else None,
        policy,
        branch,
    )

    suite = current.suite_name
    findings: list[Finding] = []
    if baseline is None:
        findings.append(Finding(
            level=FindingLevel.WARNING,
            text=(
                f"No baseline available for '{suite}' on '{branch}'; "
                f"every current failure counts as a regression."
            ),
        ))
    findings.extend(_delta_findings(suite, branch, delta))
    findings.append(_count_finding(judgement))

    return GateVerdict(
        suite_name=suite,
        branch=branch,
        delta=delta,
        count_verdict=judgement.verdict,
        net_new_failures=judgement.net_new_failures,
        findings=tuple(findings),
    )
