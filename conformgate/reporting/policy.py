"""Tolerance policy loading: read policy YAML, resolve per-suite overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml

from conformgate.types import TolerancePolicy


def load_policy(policy_path: str | Path, suite: Optional[str] = None) -> TolerancePolicy:
    """Load the tolerance policy from a YAML file.

    Layout::

        policy:             # defaults for every suite
          allow_equal: true
          max_new_failures: 0
        suites:             # optional per-suite overrides
          bfs:
            max_new_failures: 1
    """
    with open(policy_path, "r") as f:
        raw = yaml.safe_load(f) or {}

    base = raw.get("policy")
    if base is None:
        raise ValueError(f"No 'policy' key found in {policy_path}")

    merged: dict[str, Any] = dict(base)
    if suite:
        merged.update((raw.get("suites") or {}).get(suite) or {})
    return TolerancePolicy(**merged)
