"""Comparison runner: resolves both snapshots, gates, writes artifacts, promotes."""

from __future__ import annotations

import asyncio
import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from conformgate.adapters.base import BaseAdapter
from conformgate.errors import BaselineNotFound, ComparisonUnavailable
from conformgate.logging import get_logger
from conformgate.reporting.render_md import render_verdict_md
from conformgate.reporting.verdict import evaluate_gate
from conformgate.store import BaselineStore, read_snapshot, write_snapshot
from conformgate.types import (
    BaselineRef,
    DataError,
    GateVerdict,
    ResultSnapshot,
    TolerancePolicy,
)

logger = get_logger(__name__)


def resolve_adapter(adapter_name: str, suite_name: str | None = None) -> BaseAdapter:
    """Resolve a suite adapter by name: gnu | bfs."""
    if adapter_name == "gnu":
        from conformgate.adapters.gnu import GnuTestsuiteAdapter
        return GnuTestsuiteAdapter(suite_name)

    if adapter_name == "bfs":
        from conformgate.adapters.bfs import BfsTestsuiteAdapter
        return BfsTestsuiteAdapter(suite_name)

    raise ValueError(f"Unknown adapter '{adapter_name}' (expected gnu or bfs)")


def snapshot_digest(snapshot: ResultSnapshot) -> str:
    payload = json.dumps(snapshot.model_dump(mode="json"), sort_keys=True)
    return hashlib.sha256(payload.encode()).hexdigest()


async def _fetch_baseline(store: BaselineStore, ref: BaselineRef) -> Optional[ResultSnapshot]:
    try:
        return await store.fetch(ref)
    except BaselineNotFound as exc:
        logger.warning(f"{exc}; comparing without a baseline")
        return None


async def resolve_snapshots(
    current_path: str | Path,
    store: BaselineStore,
    ref: BaselineRef,
    timeout_s: float = 30.0,
) -> tuple[ResultSnapshot, Optional[ResultSnapshot]]:
    """Load the current snapshot and fetch the baseline in parallel.

    A baseline that was never recorded resolves to None. Anything else that
    keeps either snapshot from loading (missing current snapshot, unreachable
    store, timeout) raises ComparisonUnavailable: the comparison cannot run.
    """
    try:
        current, baseline = await asyncio.wait_for(
            asyncio.gather(
                asyncio.to_thread(read_snapshot, current_path),
                _fetch_baseline(store, ref),
            ),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError as exc:
        raise ComparisonUnavailable("snapshots", f"timed out after {timeout_s}s") from exc
    return current, baseline


def _write_artifacts(
    out_dir: Path,
    current: ResultSnapshot,
    result: GateVerdict | DataError,
    manifest: dict,
) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    write_snapshot(current, out_dir / "snapshot.json")

    if isinstance(result, DataError):
        manifest["error"] = result.message
        manifest["green"] = False
    else:
        manifest["green"] = result.green
        (out_dir / "verdict.json").write_text(
            json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        (out_dir / "verdict.md").write_text(render_verdict_md(result), encoding="utf-8")

    (out_dir / "manifest.json").write_text(
        json.dumps(manifest, indent=2, ensure_ascii=False), encoding="utf-8"
    )


async def execute_compare(
    current_path: str | Path,
    suite_name: str,
    store: BaselineStore,
    branch: str = "main",
    policy: TolerancePolicy | None = None,
    output_dir: str | Path | None = None,
    timeout_s: float = 30.0,
) -> GateVerdict | DataError:
    """Gate one suite's current snapshot against its baseline."""
    ref = BaselineRef(suite_name=suite_name, branch=branch)
    current, baseline = await resolve_snapshots(current_path, store, ref, timeout_s)

    logger.info(
        f"Comparing '{suite_name}': {len(current.outcomes)} outcomes against "
        f"{'no baseline' if baseline is None else f'{store.name} baseline on {branch}'}"
    )
    result = evaluate_gate(current, baseline, policy, branch)

    if output_dir is not None:
        manifest = {
            "suite": suite_name,
            "branch": branch,
            "store": store.name,
            "baseline_available": baseline is not None,
            "snapshot_sha256": snapshot_digest(current),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        out_dir = Path(output_dir) / suite_name
        _write_artifacts(out_dir, current, result, manifest)
        logger.info(f"Artifacts written to {out_dir}")

    return result


async def promote_baseline(
    output_dir: str | Path,
    suite_name: str,
    store: BaselineStore,
    branch: str = "main",
) -> bool:
    """Store a compared snapshot as the new baseline, only if its gate was green."""
    out_dir = Path(output_dir) / suite_name
    manifest_path = out_dir / "manifest.json"
    if not manifest_path.exists():
        raise ComparisonUnavailable(f"gate result for '{suite_name}'", f"{manifest_path} not found")

    manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    if not manifest.get("green"):
        logger.warning(f"Gate for '{suite_name}' was not green; baseline left unchanged")
        return False

    snapshot = read_snapshot(out_dir / "snapshot.json")
    if snapshot_digest(snapshot) != manifest.get("snapshot_sha256"):
        logger.error(f"Snapshot for '{suite_name}' changed after gating; refusing to promote")
        return False

    await store.save(snapshot, BaselineRef(suite_name=suite_name, branch=branch))
    return True
