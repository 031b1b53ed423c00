"""Core data models for test outcomes, snapshots, deltas and gate verdicts."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Snapshot (input contract, produced by suite adapters)
# ---------------------------------------------------------------------------

class OutcomeStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERRORED = "errored"

    @property
    def is_failing(self) -> bool:
        return self in (OutcomeStatus.FAILED, OutcomeStatus.ERRORED)


class TestOutcome(BaseModel):
    __test__ = False

    identifier: str
    status: OutcomeStatus


class Counters(BaseModel):
    total: int = Field(default=0, ge=0)
    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    errored: int = Field(default=0, ge=0)

    @property
    def failing(self) -> int:
        return self.failed + self.errored

    def is_consistent(self) -> bool:
        return self.passed + self.failed + self.skipped + self.errored == self.total

    @classmethod
    def tally(cls, outcomes: list[TestOutcome]) -> "Counters":
        """Count outcomes per status."""
        by_status = Counter(o.status for o in outcomes)
        return cls(
            total=len(outcomes),
            passed=by_status[OutcomeStatus.PASSED],
            failed=by_status[OutcomeStatus.FAILED],
            skipped=by_status[OutcomeStatus.SKIPPED],
            errored=by_status[OutcomeStatus.ERRORED],
        )


class ResultSnapshot(BaseModel):
    """Normalized outcome of one execution of a suite.

    ``complete`` means ``outcomes`` lists every test of the run, not only the
    failing ones. Adapters that only see failures leave it False.
    """

    suite_name: str
    outcomes: list[TestOutcome] = Field(default_factory=list)
    counters: Optional[Counters] = None
    complete: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    def identifiers(self) -> list[str]:
        return [o.identifier for o in self.outcomes]

    def failing_identifiers(self) -> list[str]:
        return [o.identifier for o in self.outcomes if o.status.is_failing]


class BaselineRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    suite_name: str
    branch: str = "main"


# ---------------------------------------------------------------------------
# Verdict (output of the core)
# ---------------------------------------------------------------------------

class ClassifiedDelta(BaseModel):
    """Identifier-level comparison; ``still_passing`` is implicit."""

    model_config = ConfigDict(frozen=True)

    regressed: tuple[str, ...] = ()
    fixed: tuple[str, ...] = ()
    still_failing: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()  # subset of fixed
    baseline_available: bool = True


class CountVerdict(str, Enum):
    ACCEPTABLE = "acceptable"
    REGRESSED = "regressed"


class TolerancePolicy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    allow_equal: bool = True
    max_new_failures: int = Field(default=0, ge=0)


class CountJudgement(BaseModel):
    model_config = ConfigDict(frozen=True)

    verdict: CountVerdict = CountVerdict.ACCEPTABLE
    net_new_failures: Optional[int] = None
    summary: str = ""
    counters_missing: bool = False


class FindingLevel(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


class Finding(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: FindingLevel
    text: str


class GateVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    suite_name: str
    branch: str = "main"
    delta: ClassifiedDelta
    count_verdict: CountVerdict
    net_new_failures: Optional[int] = None
    findings: tuple[Finding, ...] = ()

    @property
    def messages(self) -> list[str]:
        return [f.text for f in self.findings]

    @property
    def green(self) -> bool:
        return self.count_verdict == CountVerdict.ACCEPTABLE and not self.delta.regressed

    @property
    def exit_code(self) -> int:
        return 0 if self.green else 1


class DataError(BaseModel):
    """Malformed input: comparison aborted, no verdict produced."""

    model_config = ConfigDict(frozen=True)

    message: str
    identifiers: tuple[str, ...] = ()
