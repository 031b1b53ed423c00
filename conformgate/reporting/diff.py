"""Diff the failing tests of a run against the failing tests of a baseline."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from conformgate.types import ClassifiedDelta, DataError


def _as_set(identifiers: Iterable[str], label: str) -> set[str] | DataError:
    """Check set semantics: no duplicates, no empty identifiers."""
    items = list(identifiers)
    empty = [i for i in items if not isinstance(i, str) or not i.strip()]
    if empty:
        return DataError(message=f"{label}: empty or non-string test identifier")

    dupes = sorted(i for i, n in Counter(items).items() if n > 1)
    if dupes:
        return DataError(
            message=f"{label}: duplicate test identifiers: {', '.join(dupes)}",
            identifiers=tuple(dupes),
        )
    return set(items)


def classify_failures(
    current: Iterable[str],
    baseline: Optional[Iterable[str]],
    current_seen: Optional[Iterable[str]] = None,
) -> ClassifiedDelta | DataError:
    """Classify failing identifiers into regressed / fixed / still failing.

    ``baseline=None`` means no baseline is available: every current failure
    is reported as regressed. ``current_seen`` is the full identifier set of
    the current run; when given, fixed tests missing from it are also listed
    as ``removed``.
    """
    curr = _as_set(current, "current failures")
    if isinstance(curr, DataError):
        return curr

    if baseline is None:
        return ClassifiedDelta(regressed=tuple(sorted(curr)), baseline_available=False)

    base = _as_set(baseline, "baseline failures")
    if isinstance(base, DataError):
        return base

    fixed = base - curr
    removed: set[str] = set()
    if current_seen is not None:
        removed = fixed - set(current_seen)

    return ClassifiedDelta(
        regressed=tuple(sorted(curr - base)),
        fixed=tuple(sorted(fixed)),
        still_failing=tuple(sorted(curr & base)),
        removed=tuple(sorted(removed)),
    )
