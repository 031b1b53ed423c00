"""Judge aggregate pass/fail counters against the baseline's."""

from __future__ import annotations

from typing import Optional

from conformgate.types import CountJudgement, Counters, CountVerdict, TolerancePolicy


def _count_changes(current: Counters, baseline: Counters, branch: str) -> str:
    return (
        f"Changes from '{branch}': "
        f"PASS {current.passed - baseline.passed:+d} / "
        f"FAIL {current.failed - baseline.failed:+d} / "
        f"ERROR {current.errored - baseline.errored:+d} / "
        f"SKIP {current.skipped - baseline.skipped:+d}"
    )


def judge_counts(
    current: Optional[Counters],
    baseline: Optional[Counters],
    policy: TolerancePolicy | None = None,
    branch: str = "main",
) -> CountJudgement:
    """Decide whether the failure count trend is acceptable under ``policy``.

    Without counters on either side no numeric verdict exists: the result is
    acceptable and flagged ``counters_missing`` so the caller can warn.
    """
    policy = policy or TolerancePolicy()

    if current is None or baseline is None:
        side = "current run" if current is None else "baseline"
        if current is None and baseline is None:
            side = "current run and baseline"
        return CountJudgement(
            verdict=CountVerdict.ACCEPTABLE,
            summary=f"No counters for {side}; count comparison skipped",
            counters_missing=True,
        )

    net_new = max(0, current.failing - baseline.failing)
    verdict = CountVerdict.ACCEPTABLE
    reason = ""

    if net_new > policy.max_new_failures:
        verdict = CountVerdict.REGRESSED
        reason = (
            f"{net_new} new failure(s) exceed the tolerance of "
            f"{policy.max_new_failures}"
        )
    elif (
        not policy.allow_equal
        and current.failing == baseline.failing
        and current.failing > 0
    ):
        verdict = CountVerdict.REGRESSED
        reason = f"failure count unchanged at {current.failing}, improvement required"

    summary = f"{_count_changes(current, baseline, branch)}; counts {verdict.value}"
    if reason:
        summary += f" ({reason})"

    return CountJudgement(verdict=verdict, net_new_failures=net_new, summary=summary)
