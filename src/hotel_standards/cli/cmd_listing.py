"""Listing command: criteria for one star and accommodation type."""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from hotel_standards.cli._app import app
from hotel_standards.cli._common import fail, init_command, load_classification_or_exit
from hotel_standards.cli._console import render_rows
from hotel_standards.rules.resolver import CriterionRuleResolver
from hotel_standards.scoring.engine import get_criterion_max_points


class ListingKind(str, Enum):
    MANDATORY = "mandatory"
    OPTIONAL = "optional"
    ALL = "all"


@app.command("listing", help="List mandatory or optional criteria for a star.")
def listing_cmd(
    ctx: typer.Context,
    classification: Path = typer.Option(..., "--classification", help="Classification dataset JSON"),
    star: int = typer.Option(..., "--star", help="Star level (1-5)"),
    accommodation_type: Optional[str] = typer.Option(None, "--type", help="Accommodation type key"),
    kind: ListingKind = typer.Option(ListingKind.ALL, "--kind", help="Which bucket to list"),
    lang: str = typer.Option("en", "--lang", help="Title language (uz, ru, en)"),
):
    """Print criteria sorted by id."""
    config = init_command(ctx)
    dataset = load_classification_or_exit(classification)
    resolver = CriterionRuleResolver(dataset, config.build_rule_table())
    if resolver.get_star_level(star) is None:
        fail(f"Star {star} is not defined in {classification}")

    type_key = resolver.resolve_accommodation_type(
        accommodation_type or config.default_accommodation_type
    )
    buckets = resolver.get_star_criteria_buckets(star, type_key)
    mandatory_ids = {criterion.id for criterion in buckets.mandatory}
    criteria = {
        ListingKind.MANDATORY: buckets.mandatory,
        ListingKind.OPTIONAL: buckets.optional,
        ListingKind.ALL: buckets.all,
    }[kind]

    rows = [
        {
            "id": criterion.id,
            "title": criterion.title.get(lang),
            "max_points": get_criterion_max_points(criterion),
            "mandatory": criterion.id in mandatory_ids,
            "codes": ", ".join(criterion.reference_codes),
        }
        for criterion in criteria
    ]
    render_rows(rows, ctx=ctx, title=f"{kind.value.capitalize()} criteria, star {star} ({type_key})")
