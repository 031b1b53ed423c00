"""Render a human-readable markdown report from a gate verdict."""

from __future__ import annotations

from conformgate.types import FindingLevel, GateVerdict

_LEVEL_LABELS = {
    FindingLevel.ERROR: "ERROR",
    FindingLevel.WARNING: "WARNING",
    FindingLevel.NOTICE: "NOTE",
}


def _id_section(title: str, identifiers: tuple[str, ...]) -> list[str]:
    if not identifiers:
        return []
    lines = [f"## {title} ({len(identifiers)})", ""]
    lines.extend(f"- `{test_id}`" for test_id in identifiers)
    lines.append("")
    return lines


def render_verdict_md(verdict: GateVerdict) -> str:
    """Generate a markdown report for one suite's verdict."""
    delta = verdict.delta
    lines = [
        f"# Conformance Gate: {verdict.suite_name}",
        "",
        f"Baseline branch: `{verdict.branch}`"
        + ("" if delta.baseline_available else " (unavailable)"),
        "",
    ]

    if verdict.green:
        lines.append("**STATUS: PASS**")
    else:
        lines.append("**STATUS: REGRESSION DETECTED**")
    lines.append("")

    net = "n/a" if verdict.net_new_failures is None else str(verdict.net_new_failures)
    lines.append("| Regressed | Fixed | Still failing | Net new failures | Counts |")
    lines.append("|-----------|-------|---------------|------------------|--------|")
    lines.append(
        f"| {len(delta.regressed)} | {len(delta.fixed)} | {len(delta.still_failing)} "
        f"| {net} | {verdict.count_verdict.value} |"
    )
    lines.append("")

    lines.extend(_id_section("Regressed", delta.regressed))
    lines.extend(_id_section("Fixed", delta.fixed))
    lines.extend(_id_section("Still failing", delta.still_failing))

    if verdict.findings:
        lines.append("## Findings")
        lines.append("")
        for finding in verdict.findings:
            lines.append(f"- **{_LEVEL_LABELS[finding.level]}** {finding.text}")
        lines.append("")

    return "\n".join(lines)
