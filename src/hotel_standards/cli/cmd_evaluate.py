"""Evaluate command: compliance and classification verdicts for a saved assessment."""

from pathlib import Path
from typing import Optional

import typer

from hotel_standards.assessment import build_assessment_summary
from hotel_standards.cli._app import app
from hotel_standards.cli._common import (
    fail,
    init_command,
    load_assessment_or_exit,
    load_classification_or_exit,
    load_compliance_or_exit,
)
from hotel_standards.cli._console import render_summary


@app.command("evaluate", help="Evaluate a saved assessment against both standards.")
def evaluate_cmd(
    ctx: typer.Context,
    compliance: Path = typer.Option(..., "--compliance", help="Compliance dataset JSON"),
    classification: Path = typer.Option(..., "--classification", help="Classification dataset JSON"),
    assessment: Path = typer.Option(..., "--assessment", help="Saved assessment JSON"),
    record_id: Optional[str] = typer.Option(None, "--record-id", help="Record id when the file holds a list"),
    star: Optional[int] = typer.Option(None, "--star", help="Override the assessment's selected star"),
    accommodation_type: Optional[str] = typer.Option(None, "--type", help="Override accommodation type"),
    facility_type: Optional[str] = typer.Option(None, "--facility", help="Override compliance facility type"),
):
    """Print compliance, classification and eligible star for an assessment."""
    config = init_command(ctx)
    compliance_data = load_compliance_or_exit(compliance)
    classification_data = load_classification_or_exit(classification)
    record = load_assessment_or_exit(assessment, config, record_id)

    state = record.to_state()
    if star is not None:
        if not 1 <= star <= 5:
            fail(f"--star must be between 1 and 5, got {star}")
        state.star = star
    if accommodation_type:
        state.accommodation_type = accommodation_type
    if facility_type:
        state.compliance_facility_type = facility_type

    summary = build_assessment_summary(
        compliance_data, classification_data, state, rules=config.build_rule_table()
    )

    render_summary(summary, state.star, ctx=ctx)
