"""Inspect command: summarize normalized datasets."""

from pathlib import Path
from typing import Any, Dict, Optional

import typer

from hotel_standards.cli._app import app
from hotel_standards.cli._common import (
    fail,
    init_command,
    load_classification_or_exit,
    load_compliance_or_exit,
)
from hotel_standards.cli._console import render_panel
from hotel_standards.rules.resolver import (
    CriterionRuleResolver,
    build_compliance_mandatory_map,
)
from hotel_standards.schemas.classification import ClassificationDataset
from hotel_standards.schemas.compliance import ComplianceDataset
from hotel_standards.scoring.engine import get_max_points_for_star


def summarize_compliance(dataset: ComplianceDataset) -> Dict[str, Any]:
    mandatory_by_type = {
        type_key: sum(build_compliance_mandatory_map(dataset, type_key).values())
        for type_key in dataset.facility_types
    }
    return {
        "standard": dataset.standard,
        "sections": len(dataset.sections),
        "requirements": sum(len(s.requirements) for s in dataset.sections),
        "default_facility_type": dataset.default_facility_type,
        "mandatory_by_facility_type": mandatory_by_type,
    }


def summarize_classification(
    dataset: ClassificationDataset,
    resolver: CriterionRuleResolver,
    accommodation_type: Optional[str],
) -> Dict[str, Any]:
    type_key = resolver.resolve_accommodation_type(accommodation_type)
    return {
        "standard": dataset.standard,
        "sections": len(dataset.sections),
        "criteria": sum(1 for _ in dataset.iter_criteria()),
        "assessable_criteria": len(resolver.assessable_criteria),
        "accommodation_types": list(dataset.accommodation_types),
        "accommodation_type": type_key,
        "stars": [
            {
                "star": level.star,
                "min_points": resolver.get_min_points_for_star(level.star, type_key),
                "max_points": get_max_points_for_star(resolver, level.star, type_key),
                "mandatory": len(resolver.get_mandatory_ids_for_level(level.star, type_key)),
            }
            for level in dataset.star_levels
        ],
        "annotations": [annotation.code for annotation in dataset.annotations],
    }


@app.command("inspect", help="Summarize compliance and classification datasets.")
def inspect_cmd(
    ctx: typer.Context,
    compliance: Optional[Path] = typer.Option(None, "--compliance", help="Compliance dataset JSON"),
    classification: Optional[Path] = typer.Option(
        None, "--classification", help="Classification dataset JSON"
    ),
    accommodation_type: Optional[str] = typer.Option(
        None, "--type", help="Accommodation type for per-star counts"
    ),
):
    """Load datasets and print their shape after normalization."""
    config = init_command(ctx)
    if compliance is None and classification is None:
        fail("At least one of --compliance or --classification is required")

    summary: Dict[str, Any] = {}
    if compliance is not None:
        summary["compliance"] = summarize_compliance(load_compliance_or_exit(compliance))
    if classification is not None:
        dataset = load_classification_or_exit(classification)
        resolver = CriterionRuleResolver(dataset, config.build_rule_table())
        summary["classification"] = summarize_classification(
            dataset, resolver, accommodation_type or config.default_accommodation_type
        )

    render_panel(summary, ctx=ctx, title="Datasets")
