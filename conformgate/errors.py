"""Exceptions raised by the I/O layers around the gate core."""

from __future__ import annotations


class SnapshotFormatError(ValueError):
    """A suite log, result record or stored snapshot could not be parsed."""


class ComparisonUnavailable(Exception):
    """A snapshot could not be obtained, so the comparison cannot run."""

    def __init__(self, what: str, reason: str = "") -> None:
        self.what = what
        self.reason = reason
        super().__init__(f"{what} unavailable" + (f": {reason}" if reason else ""))


class BaselineNotFound(ComparisonUnavailable):
    """No baseline was ever recorded for this suite and branch."""


class ReadOnlyStoreError(Exception):
    """The baseline store cannot record new baselines."""
