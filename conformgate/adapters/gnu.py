"""Adapter for GNU testsuite logs (automake test drivers and DejaGnu)."""

from __future__ import annotations

import re

from conformgate.adapters.base import BaseAdapter
from conformgate.errors import SnapshotFormatError
from conformgate.types import Counters, OutcomeStatus, ResultSnapshot, TestOutcome

# XFAIL is an expected failure that happened; XPASS is an unexpected pass.
_RESULT_STATUS = {
    "PASS": OutcomeStatus.PASSED,
    "XFAIL": OutcomeStatus.PASSED,
    "FAIL": OutcomeStatus.FAILED,
    "XPASS": OutcomeStatus.FAILED,
    "ERROR": OutcomeStatus.ERRORED,
    "UNRESOLVED": OutcomeStatus.ERRORED,
    "SKIP": OutcomeStatus.SKIPPED,
    "UNSUPPORTED": OutcomeStatus.SKIPPED,
    "UNTESTED": OutcomeStatus.SKIPPED,
}

_RESULT_LINE = re.compile(
    r"^(" + "|".join(_RESULT_STATUS) + r"): (?P<name>\S.*?)\s*$",
    re.MULTILINE,
)


class GnuTestsuiteAdapter(BaseAdapter):
    """Reads ``RESULT: name`` lines; every executed test reports one."""

    name = "gnu"

    def parse(self, log: str) -> ResultSnapshot:
        outcomes = [
            TestOutcome(identifier=m.group("name"), status=_RESULT_STATUS[m.group(1)])
            for m in _RESULT_LINE.finditer(log)
        ]
        if not outcomes:
            raise SnapshotFormatError(f"No test result lines found in {self.name} log")

        return ResultSnapshot(
            suite_name=self.suite_name,
            outcomes=outcomes,
            counters=Counters.tally(outcomes),
            complete=True,
        )
