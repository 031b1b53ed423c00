"""Base adapter interface."""

from __future__ import annotations

import abc

from conformgate.types import ResultSnapshot


class BaseAdapter(abc.ABC):
    """All adapters implement parse to produce a ResultSnapshot from a suite log."""

    name: str = "base"

    def __init__(self, suite_name: str | None = None) -> None:
        self.suite_name = suite_name or self.name

    @abc.abstractmethod
    def parse(self, log: str) -> ResultSnapshot:
        """Parse one suite's native log output into a snapshot."""
        ...
