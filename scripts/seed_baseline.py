#!/usr/bin/env python3
"""Seed a baseline by parsing a suite log straight into the baseline store."""

import asyncio
import sys
from pathlib import Path

from conformgate.config import settings
from conformgate.runners.runner import resolve_adapter
from conformgate.store import LocalBaselineStore
from conformgate.types import BaselineRef


async def main():
    if len(sys.argv) < 3:
        print("Usage: python scripts/seed_baseline.py <gnu|bfs> <log> [<log> ...]")
        sys.exit(1)

    adapter = resolve_adapter(sys.argv[1])
    text = "\n".join(Path(p).read_text(encoding="utf-8", errors="replace") for p in sys.argv[2:])
    snapshot = adapter.parse(text)

    store = LocalBaselineStore(settings.baseline_dir)
    ref = BaselineRef(suite_name=snapshot.suite_name, branch=settings.reference_branch)
    await store.save(snapshot, ref)
    print(f"Baseline seeded for {ref.suite_name} -> {store.path_for(ref)}")


if __name__ == "__main__":
    asyncio.run(main())
