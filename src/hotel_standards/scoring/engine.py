"""Point arithmetic for classification criteria.

Answers and quantities are passed in explicitly; nothing here reads or
mutates assessment state.
"""

import logging
import math
from typing import Any, Optional

from hotel_standards.normalization.fields import (
    normalize_quantity_map,
    normalize_quantity_value,
)
from hotel_standards.rules.resolver import CriterionRuleResolver
from hotel_standards.schemas.classification import Criterion
from hotel_standards.schemas.common import Points
from hotel_standards.schemas.evaluation import AnswerStatus

logger = logging.getLogger(__name__)

__all__ = [
    "get_criterion_earned_points",
    "get_criterion_max_points",
    "get_max_points_for_star",
    "is_mandatory_criterion_satisfied",
    "is_per_unit_criterion",
    "normalize_quantity_map",
    "normalize_quantity_value",
]


def _answer_value(answer: Any) -> Optional[str]:
    if isinstance(answer, AnswerStatus):
        return answer.value
    return answer if isinstance(answer, str) else None


def is_per_unit_criterion(criterion: Optional[Criterion]) -> bool:
    return criterion is not None and criterion.is_per_unit


def get_criterion_max_points(criterion: Optional[Criterion]) -> Points:
    """Explicit max if finite and >= 0, else the per-unit rule max, else static points."""
    if criterion is None:
        return 0
    explicit = criterion.max_points
    if explicit is not None and math.isfinite(explicit) and explicit >= 0:
        return explicit
    if criterion.scoring_rule is not None:
        return criterion.scoring_rule.max_points
    return criterion.points or 0


def get_criterion_earned_points(
    criterion: Optional[Criterion],
    answer: Any,
    quantity: Any = 0,
) -> Points:
    """Points earned for one criterion.

    Args:
        criterion: The criterion being scored.
        answer: Assessor answer; anything other than 'yes' earns nothing.
        quantity: Raw unit count for per-unit criteria.

    Returns:
        ``min(quantity * points_per_unit, max)`` for per-unit criteria,
        the static points (capped at the criterion max) otherwise.
    """
    if criterion is None or _answer_value(answer) != AnswerStatus.YES.value:
        return 0
    max_points = get_criterion_max_points(criterion)
    if is_per_unit_criterion(criterion):
        units = normalize_quantity_value(quantity)
        return min(units * criterion.scoring_rule.points_per_unit, max_points)
    return min(criterion.points or 0, max_points)


def is_mandatory_criterion_satisfied(
    criterion: Optional[Criterion],
    answer: Any,
    quantity: Any = 0,
) -> bool:
    """'na' satisfies; 'yes' satisfies unless a per-unit criterion has no units."""
    if criterion is None:
        return False
    status = _answer_value(answer)
    if status == AnswerStatus.NA.value:
        return True
    if status != AnswerStatus.YES.value:
        return False
    if is_per_unit_criterion(criterion):
        return normalize_quantity_value(quantity) > 0
    return True


def get_max_points_for_star(
    resolver: CriterionRuleResolver,
    star: Any,
    accommodation_type: Optional[str] = None,
) -> Points:
    """Declared dataset max if positive, else the sum over the star's bucket."""
    declared = resolver.dataset.max_points
    if declared is not None and math.isfinite(declared) and declared > 0:
        return declared
    buckets = resolver.get_star_criteria_buckets(star, accommodation_type)
    return sum(get_criterion_max_points(criterion) for criterion in buckets.all)
