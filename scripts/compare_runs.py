#!/usr/bin/env python3
"""Compare two snapshot files and print the verdict as markdown."""

import sys

from conformgate.reporting.policy import load_policy
from conformgate.reporting.render_md import render_verdict_md
from conformgate.reporting.verdict import evaluate_gate
from conformgate.store import read_snapshot
from conformgate.types import DataError


def main():
    if len(sys.argv) < 3:
        print("Usage: python scripts/compare_runs.py <baseline.json> <current.json> [policy.yaml]")
        sys.exit(2)

    baseline = read_snapshot(sys.argv[1])
    current = read_snapshot(sys.argv[2])
    policy = load_policy(sys.argv[3], current.suite_name) if len(sys.argv) > 3 else None

    verdict = evaluate_gate(current, baseline, policy)
    if isinstance(verdict, DataError):
        print(f"ERROR: {verdict.message}")
        sys.exit(2)

    print(render_verdict_md(verdict))
    sys.exit(verdict.exit_code)


if __name__ == "__main__":
    main()
