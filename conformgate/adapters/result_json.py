"""Read aggregate counters from a suite result record (gnu-result.json, bfs-result.json).

The record maps run timestamps to their counts, oldest first; the last entry
is the latest run::

    {"Tue Jun 6 10:00:00 UTC 2023": {"sha": "...", "total": 12, "pass": 9,
                                     "fail": 1, "skip": 2, "xpass": 0,
                                     "xfail": 0, "error": 0}}
"""

from __future__ import annotations

import json
from typing import Any

from conformgate.errors import SnapshotFormatError
from conformgate.types import Counters, ResultSnapshot


def _count(entry: dict[str, Any], key: str) -> int:
    raw = entry.get(key, 0)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise SnapshotFormatError(f"Counter '{key}' is not an integer: {raw!r}") from None


def parse_result_record(text: str) -> tuple[Counters, dict[str, Any]]:
    """Return the counters and metadata (timestamp, sha) of the latest (last) entry."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotFormatError(f"Result record is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict) or not raw:
        raise SnapshotFormatError("Result record must be a non-empty JSON object")

    timestamp, entry = list(raw.items())[-1]
    if not isinstance(entry, dict):
        raise SnapshotFormatError(f"Result record entry '{timestamp}' is not an object")

    passed = _count(entry, "pass") + _count(entry, "xfail")
    failed = _count(entry, "fail") + _count(entry, "xpass")
    skipped = _count(entry, "skip")
    errored = _count(entry, "error")
    total = _count(entry, "total") if "total" in entry else passed + failed + skipped + errored

    counters = Counters(
        total=total,
        passed=passed,
        failed=failed,
        skipped=skipped,
        errored=errored,
    )
    metadata = {"recorded_at": timestamp}
    if entry.get("sha"):
        metadata["sha"] = str(entry["sha"])
    return counters, metadata


def attach_result_record(snapshot: ResultSnapshot, text: str) -> ResultSnapshot:
    """Return a copy of ``snapshot`` carrying the record's counters.

    The record counts every test of the suite, while the log may only name
    some of them. When the counters disagree with the parsed outcomes, the
    copy no longer claims to list every test.
    """
    counters, metadata = parse_result_record(text)
    complete = snapshot.complete and Counters.tally(snapshot.outcomes) == counters
    return snapshot.model_copy(
        update={
            "counters": counters,
            "complete": complete,
            "metadata": {**snapshot.metadata, **metadata},
        }
    )
