"""Terminal rendering for evaluation verdicts, gap reports and listings.

Human-readable output goes to stderr; ``--json`` payloads go to stdout so
they can be piped.
"""

import json as json_mod
from typing import Any, Dict, List, Sequence

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from hotel_standards.schemas.evaluation import (
    AssessmentSummary,
    ClassificationResult,
    ComplianceResult,
    FailureReason,
    PointsBreakdown,
    StarGap,
)

console = Console(stderr=True)
stdout_console = Console()

_MARKS = {"ok": "[green]✓[/green]", "err": "[red]✗[/red]", "warn": "[yellow]![/yellow]"}


def _mark(kind: str, msg: str) -> None:
    console.print(f"{_MARKS[kind]} {msg}")


def print_ok(msg: str) -> None:
    _mark("ok", msg)


def print_err(msg: str) -> None:
    _mark("err", msg)


def print_warn(msg: str) -> None:
    _mark("warn", msg)


def wants_json(ctx: typer.Context) -> bool:
    return bool(ctx.obj.get("json"))


def emit_json(data: Any) -> None:
    stdout_console.print_json(data=data)


# ── Verdicts ─────────────────────────────────────────────────────────


def render_compliance(result: ComplianceResult, *, list_failures: bool = True) -> None:
    """One status line, plus the failed requirements unless suppressed."""
    if result.compliant:
        print_ok(f"Compliant ({result.facility_type})")
        return
    print_err(
        f"Not compliant ({result.facility_type}): "
        f"{len(result.failed_requirements)} mandatory requirements failed"
    )
    if list_failures:
        for requirement in result.failed_requirements:
            console.print(f"  - {requirement.id} {requirement.title.get()}")


def render_classification(result: ClassificationResult, requested_star: int) -> None:
    if result.achieved:
        print_ok(f"Star {result.star} achieved with {result.points} points")
    elif result.reason == FailureReason.MANDATORY_FAILURE:
        print_err(
            f"Star {result.requested_star} not achieved: mandatory criteria unmet "
            f"({', '.join(result.failed_mandatory)})"
        )
    elif result.reason == FailureReason.INSUFFICIENT_POINTS:
        print_err(
            f"Star {result.requested_star} not achieved: {result.points} of {result.required} points"
        )
    else:
        print_warn(f"Star {requested_star} cannot be evaluated with this dataset")


def render_breakdown(eligible_star: int, breakdown: PointsBreakdown) -> None:
    console.print(f"  Eligible star: {eligible_star or 'none'}")
    console.print(
        f"  Mandatory points: {breakdown.mandatory_points_achieved}/{breakdown.mandatory_points_required}"
    )
    console.print(
        f"  Optional points: {breakdown.optional_points_achieved}/{breakdown.optional_points_required}"
    )


def render_summary(
    summary: AssessmentSummary, requested_star: int, *, ctx: typer.Context
) -> None:
    """Print an assessment summary as JSON or as verdict lines."""
    if wants_json(ctx):
        emit_json(summary.model_dump(mode="json"))
        return
    render_compliance(summary.compliance, list_failures=not ctx.obj.get("quiet"))
    render_classification(summary.classification, requested_star)
    render_breakdown(summary.eligible_star, summary.breakdown)


# ── Tables ───────────────────────────────────────────────────────────


def gap_table(gaps: Sequence[StarGap]) -> Table:
    table = Table(title="Star gap report")
    for column in ("star", "points", "shortfall", "max", "unmet mandatory", "achievable"):
        table.add_column(column)
    for gap in gaps:
        table.add_row(
            "★" * gap.star,
            f"{gap.total_points}/{gap.min_points}",
            str(gap.points_shortfall),
            str(gap.max_points),
            ", ".join(gap.failed_mandatory) or "-",
            "[green]yes[/green]" if gap.achievable else "[red]no[/red]",
        )
    return table


def render_gaps(gaps: Sequence[StarGap], *, ctx: typer.Context) -> None:
    if wants_json(ctx):
        emit_json([gap.model_dump(mode="json") for gap in gaps])
        return
    console.print(gap_table(gaps))


def render_rows(rows: List[Dict[str, Any]], *, ctx: typer.Context, title: str) -> None:
    """Criteria rows as a JSON array or a table keyed by the first row."""
    if wants_json(ctx):
        emit_json(rows)
        return
    if not rows:
        console.print(f"[dim]{title}: nothing to list[/dim]")
        return
    table = Table(title=title)
    for column in rows[0]:
        table.add_column(column)
    for row in rows:
        table.add_row(*[str(value) for value in row.values()])
    console.print(table)


def render_panel(data: Dict[str, Any], *, ctx: typer.Context, title: str) -> None:
    if wants_json(ctx):
        emit_json(data)
        return
    body = json_mod.dumps(data, indent=2, ensure_ascii=False, default=str)
    console.print(Panel(body, title=title, border_style="blue"))
