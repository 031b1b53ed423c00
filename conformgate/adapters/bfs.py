"""Adapter for the BFS testsuite's tests.log."""

from __future__ import annotations

import re

from conformgate.adapters.base import BaseAdapter
from conformgate.errors import SnapshotFormatError
from conformgate.types import Counters, OutcomeStatus, ResultSnapshot, TestOutcome

_FAILED_LINE = re.compile(r"^(?P<name>\S.*?) failed!\s*$", re.MULTILINE)
_SUMMARY_LINE = re.compile(r"^tests (?P<kind>passed|skipped|failed): (?P<count>\d+)\s*$", re.MULTILINE)


class BfsTestsuiteAdapter(BaseAdapter):
    """Only failures are named in the log, so the snapshot is never complete."""

    name = "bfs"

    def parse(self, log: str) -> ResultSnapshot:
        outcomes = [
            TestOutcome(identifier=m.group("name"), status=OutcomeStatus.FAILED)
            for m in _FAILED_LINE.finditer(log)
        ]
        summary = {m.group("kind"): int(m.group("count")) for m in _SUMMARY_LINE.finditer(log)}

        if not outcomes and not summary:
            raise SnapshotFormatError(f"No failures or summary found in {self.name} log")

        counters = None
        if summary:
            passed = summary.get("passed", 0)
            skipped = summary.get("skipped", 0)
            failed = summary.get("failed", 0)
            counters = Counters(
                total=passed + skipped + failed,
                passed=passed,
                skipped=skipped,
                failed=failed,
            )

        return ResultSnapshot(suite_name=self.suite_name, outcomes=outcomes, counters=counters)
