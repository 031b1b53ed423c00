"""Conformance regression gate: diff failing tests and counters against a baseline."""

from conformgate.reporting.verdict import evaluate_gate
from conformgate.types import GateVerdict, ResultSnapshot, TolerancePolicy

__all__ = ["GateVerdict", "ResultSnapshot", "TolerancePolicy", "evaluate_gate"]
