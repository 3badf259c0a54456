"""Gap command: distance from every star level for a saved assessment."""

from pathlib import Path
from typing import Optional

import typer

from hotel_standards.cli._app import app
from hotel_standards.cli._common import (
    init_command,
    load_assessment_or_exit,
    load_classification_or_exit,
)
from hotel_standards.cli._console import render_gaps
from hotel_standards.evaluation.classification import ClassificationEvaluator


@app.command("gap", help="Show points shortfall and unmet mandatory criteria per star.")
def gap_cmd(
    ctx: typer.Context,
    classification: Path = typer.Option(..., "--classification", help="Classification dataset JSON"),
    assessment: Path = typer.Option(..., "--assessment", help="Saved assessment JSON"),
    record_id: Optional[str] = typer.Option(None, "--record-id", help="Record id when the file holds a list"),
    accommodation_type: Optional[str] = typer.Option(None, "--type", help="Override accommodation type"),
):
    """Print one row per star level."""
    config = init_command(ctx)
    dataset = load_classification_or_exit(classification)
    record = load_assessment_or_exit(assessment, config, record_id)

    evaluator = ClassificationEvaluator(dataset, config.build_rule_table())
    gaps = evaluator.get_gap_report(
        accommodation_type or record.accommodation_type,
        record.classification_answers,
        record.classification_quantities,
    )

    render_gaps(gaps, ctx=ctx)
