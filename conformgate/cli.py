"""CLI entrypoint for conformgate."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from conformgate.config import settings
from conformgate.errors import ComparisonUnavailable, SnapshotFormatError
from conformgate.logging import setup_logging
from conformgate.types import DataError, FindingLevel, GateVerdict

app = typer.Typer(name="conformgate", help="Conformance regression gate for external test suites.")
console = Console()

EXIT_GREEN = 0
EXIT_REGRESSED = 1
EXIT_DATA_ERROR = 2
EXIT_UNAVAILABLE = 3

_LEVEL_STYLES = {
    FindingLevel.ERROR: "[red]error[/]",
    FindingLevel.WARNING: "[yellow]warning[/]",
    FindingLevel.NOTICE: "[green]notice[/]",
}


@app.command()
def parse(
    logs: List[Path] = typer.Argument(..., help="Suite log file(s), read in order"),
    adapter: str = typer.Option(..., help="Suite adapter: gnu | bfs"),
    suite: str = typer.Option("", help="Suite name (defaults to the adapter name)"),
    result_json: Optional[Path] = typer.Option(
        None, "--result-json", help="gnu-result.json / bfs-result.json with aggregate counts"
    ),
    out: Optional[Path] = typer.Option(None, help="Write the snapshot here instead of stdout"),
) -> None:
    """Parse suite logs into a snapshot JSON file."""
    setup_logging()
    from conformgate.adapters.result_json import attach_result_record
    from conformgate.runners.runner import resolve_adapter
    from conformgate.store import write_snapshot

    try:
        parser = resolve_adapter(adapter, suite or None)
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=EXIT_DATA_ERROR)

    missing = [p for p in logs if not p.exists()]
    if missing:
        console.print(f"[red]Log not found:[/] {missing[0]}")
        raise typer.Exit(code=EXIT_UNAVAILABLE)
    if result_json is not None and not result_json.exists():
        console.print(f"[red]Result record not found:[/] {result_json}")
        raise typer.Exit(code=EXIT_UNAVAILABLE)

    text = "\n".join(p.read_text(encoding="utf-8", errors="replace") for p in logs)
    try:
        snapshot = parser.parse(text)
        if result_json is not None:
            snapshot = attach_result_record(snapshot, result_json.read_text(encoding="utf-8"))
    except SnapshotFormatError as exc:
        console.print(f"[red]Malformed input:[/] {exc}")
        raise typer.Exit(code=EXIT_DATA_ERROR)

    if out is None:
        typer.echo(snapshot.model_dump_json(indent=2))
        return
    write_snapshot(snapshot, out)
    console.print(
        f"[green]Snapshot written to {out}[/] "
        f"({len(snapshot.outcomes)} outcomes, {len(snapshot.failing_identifiers())} failing)"
    )


def _print_verdict(verdict: GateVerdict) -> None:
    delta = verdict.delta
    table = Table(title=f"Conformance gate: {verdict.suite_name} vs '{verdict.branch}'")
    table.add_column("Bucket", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("regressed", str(len(delta.regressed)))
    table.add_row("fixed", str(len(delta.fixed)))
    table.add_row("still failing", str(len(delta.still_failing)))
    table.add_row(
        "net new failures",
        "n/a" if verdict.net_new_failures is None else str(verdict.net_new_failures),
    )
    table.add_row("counts", verdict.count_verdict.value)
    console.print(table)

    for finding in verdict.findings:
        console.print(f"{_LEVEL_STYLES[finding.level]} {finding.text}", highlight=False)


@app.command()
def compare(
    suite: str = typer.Option(..., help="Suite name, used as the baseline key"),
    current: Path = typer.Option(..., help="Current run's snapshot JSON"),
    baseline_dir: Optional[Path] = typer.Option(None, help="Local baseline store root"),
    baseline_url: str = typer.Option("", help="HTTP baseline store base URL"),
    branch: str = typer.Option("", help="Reference branch (default: REFERENCE_BRANCH)"),
    policy: Optional[Path] = typer.Option(None, help="Tolerance policy YAML"),
    out_dir: Optional[Path] = typer.Option(None, help="Directory for verdict artifacts"),
    timeout: float = typer.Option(0.0, help="Snapshot fetch timeout in seconds"),
) -> None:
    """Gate the current snapshot against the baseline; exit non-zero unless green."""
    setup_logging()
    from conformgate.reporting.policy import load_policy
    from conformgate.runners.runner import execute_compare
    from conformgate.store import resolve_store

    timeout_s = timeout or settings.fetch_timeout_s
    store = resolve_store(
        baseline_dir or settings.baseline_dir,
        baseline_url or settings.baseline_url,
        timeout_s,
    )
    policy_path = policy or settings.policy_path
    try:
        tolerance = load_policy(policy_path, suite)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Cannot load policy {policy_path}:[/] {exc}")
        raise typer.Exit(code=EXIT_DATA_ERROR)

    try:
        result = asyncio.run(
            execute_compare(
                current_path=current,
                suite_name=suite,
                store=store,
                branch=branch or settings.reference_branch,
                policy=tolerance,
                output_dir=out_dir or settings.output_dir,
                timeout_s=timeout_s,
            )
        )
    except ComparisonUnavailable as exc:
        console.print(f"[bold red]Comparison could not run:[/] {exc}")
        raise typer.Exit(code=EXIT_UNAVAILABLE)
    except SnapshotFormatError as exc:
        console.print(f"[bold red]Malformed snapshot:[/] {exc}")
        raise typer.Exit(code=EXIT_DATA_ERROR)

    if isinstance(result, DataError):
        console.print(f"[bold red]Data error:[/] {result.message}")
        raise typer.Exit(code=EXIT_DATA_ERROR)

    _print_verdict(result)
    if result.green:
        console.print("\n[bold green]Gate passed.[/]")
    else:
        console.print("\n[bold red]REGRESSION DETECTED[/]")
        raise typer.Exit(code=EXIT_REGRESSED)


@app.command()
def promote(
    suite: str = typer.Option(..., help="Suite name"),
    out_dir: Optional[Path] = typer.Option(None, help="Directory holding the gate artifacts"),
    baseline_dir: Optional[Path] = typer.Option(None, help="Local baseline store root"),
    branch: str = typer.Option("", help="Reference branch (default: REFERENCE_BRANCH)"),
) -> None:
    """Record the gated snapshot as the new baseline, only if its gate was green."""
    setup_logging()
    from conformgate.runners.runner import promote_baseline
    from conformgate.store import LocalBaselineStore

    store = LocalBaselineStore(baseline_dir or settings.baseline_dir)
    try:
        promoted = asyncio.run(
            promote_baseline(
                out_dir or settings.output_dir,
                suite,
                store,
                branch or settings.reference_branch,
            )
        )
    except ComparisonUnavailable as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=EXIT_UNAVAILABLE)
    except SnapshotFormatError as exc:
        console.print(f"[red]Malformed snapshot:[/] {exc}")
        raise typer.Exit(code=EXIT_DATA_ERROR)

    if not promoted:
        console.print(f"[yellow]Baseline for '{suite}' not updated.[/]")
        raise typer.Exit(code=EXIT_REGRESSED)
    console.print(f"[green]Baseline for '{suite}' updated.[/]")


if __name__ == "__main__":
    app()
