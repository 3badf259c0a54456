"""Compliance and classification evaluators."""

from hotel_standards.evaluation.classification import (
    ClassificationEvaluator,
    evaluate_3296,
    get_eligible_star,
)
from hotel_standards.evaluation.compliance import evaluate_3220, evaluate_compliance

__all__ = [
    "ClassificationEvaluator",
    "evaluate_3220",
    "evaluate_3296",
    "evaluate_compliance",
    "get_eligible_star",
]
