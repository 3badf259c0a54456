"""Scoring engine for classification criteria."""

from hotel_standards.scoring.engine import (
    get_criterion_earned_points,
    get_criterion_max_points,
    get_max_points_for_star,
    is_mandatory_criterion_satisfied,
    is_per_unit_criterion,
    normalize_quantity_map,
    normalize_quantity_value,
)

__all__ = [
    "get_criterion_earned_points",
    "get_criterion_max_points",
    "get_max_points_for_star",
    "is_mandatory_criterion_satisfied",
    "is_per_unit_criterion",
    "normalize_quantity_map",
    "normalize_quantity_value",
]
