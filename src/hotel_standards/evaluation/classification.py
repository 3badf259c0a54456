"""Star classification evaluator (MST 125 / 3296).

Evaluation for one (star, accommodation type) pair runs in order:
1. Sum earned points over every assessable criterion in the star's bucket
2. Collect mandatory criteria that are not satisfied
3. Any mandatory failure -> mandatory_failure
4. Points below the type's threshold -> insufficient_points
5. Otherwise -> achieved

Stars are evaluated independently: annotation overrides can make a
higher star achievable while a lower one is not.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from hotel_standards.rules.annotations import AnnotationRuleTable
from hotel_standards.rules.resolver import CriterionRuleResolver, strict_star_key
from hotel_standards.schemas.classification import ClassificationDataset, Criterion
from hotel_standards.schemas.common import Points
from hotel_standards.schemas.evaluation import (
    AnswerStatus,
    AssessmentProgress,
    ClassificationResult,
    FailureReason,
    MandatoryChecklistEntry,
    PointsBreakdown,
    StarCriteriaBuckets,
    StarGap,
)
from hotel_standards.scoring.engine import (
    get_criterion_earned_points,
    get_criterion_max_points,
    get_max_points_for_star,
    is_mandatory_criterion_satisfied,
)

logger = logging.getLogger(__name__)

Answers = Mapping[str, Any]
Quantities = Mapping[str, Any]


def _status(answer: Any) -> Optional[str]:
    if isinstance(answer, AnswerStatus):
        return answer.value
    return answer if isinstance(answer, str) else None


class ClassificationEvaluator:
    """Evaluates answers against a classification dataset.

    The evaluator holds only the dataset and the annotation rules; the
    selected star, accommodation type, answers and quantities are passed
    to every call.  Evaluation never raises for an unknown star.
    """

    def __init__(
        self,
        dataset: ClassificationDataset,
        rules: Optional[AnnotationRuleTable] = None,
    ):
        """Initialize the evaluator.

        Args:
            dataset: Normalized classification dataset.
            rules: Annotation override table. Uses the default table if not provided.
        """
        self.dataset = dataset
        self.resolver = CriterionRuleResolver(dataset, rules)

    # ── Building blocks ──────────────────────────────────────────────

    def _buckets(self, star: Any, accommodation_type: Optional[str]) -> Optional[StarCriteriaBuckets]:
        if self.resolver.get_star_level(star) is None:
            return None
        return self.resolver.get_star_criteria_buckets(star, accommodation_type)

    @staticmethod
    def _earned(criterion: Criterion, answers: Answers, quantities: Quantities) -> Points:
        return get_criterion_earned_points(
            criterion, answers.get(criterion.id), quantities.get(criterion.id, 0)
        )

    @staticmethod
    def _satisfied(criterion: Criterion, answers: Answers, quantities: Quantities) -> bool:
        return is_mandatory_criterion_satisfied(
            criterion, answers.get(criterion.id), quantities.get(criterion.id, 0)
        )

    def calculate_total_points(
        self,
        star: Any,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> Points:
        """Sum earned points over the star's assessable criteria."""
        buckets = self._buckets(star, accommodation_type)
        if buckets is None:
            return 0
        answers = answers or {}
        quantities = quantities or {}
        return sum(self._earned(criterion, answers, quantities) for criterion in buckets.all)

    def is_mandatory_criterion_id_satisfied(
        self,
        criterion_id: Any,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> bool:
        """Unknown ids are never satisfied."""
        criterion = self.resolver.get_criterion_by_id(criterion_id)
        if criterion is None:
            return False
        return self._satisfied(criterion, answers or {}, quantities or {})

    def get_failed_mandatory(
        self,
        star: Any,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> List[str]:
        buckets = self._buckets(star, accommodation_type)
        if buckets is None:
            return []
        answers = answers or {}
        quantities = quantities or {}
        return [
            criterion.id
            for criterion in buckets.mandatory
            if not self._satisfied(criterion, answers, quantities)
        ]

    # ── Verdicts ─────────────────────────────────────────────────────

    def evaluate(
        self,
        star: Any,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> ClassificationResult:
        """Evaluate one star for one accommodation type.

        Returns:
            ClassificationResult. ``star`` holds the achieved star, or 0
            when the star was not achieved; ``requested_star`` always holds
            the star that was evaluated.
        """
        type_key = self.resolver.resolve_accommodation_type(accommodation_type)
        buckets = self._buckets(star, type_key)
        if buckets is None:
            logger.debug(f"Cannot evaluate invalid star {star!r}")
            return ClassificationResult(
                achieved=False,
                star=0,
                accommodation_type=type_key,
                points=0,
                required=0,
                reason=FailureReason.INVALID_STAR,
            )

        answers = answers or {}
        quantities = quantities or {}
        requested = int(strict_star_key(star))
        required = self.resolver.get_min_points_for_star(requested, type_key)
        total_points = sum(self._earned(c, answers, quantities) for c in buckets.all)
        failed_mandatory = [
            c.id for c in buckets.mandatory if not self._satisfied(c, answers, quantities)
        ]

        if failed_mandatory:
            logger.debug(
                f"Star {requested} ({type_key}): {len(failed_mandatory)} mandatory criteria unmet"
            )
            return ClassificationResult(
                achieved=False,
                star=0,
                requested_star=requested,
                accommodation_type=type_key,
                points=total_points,
                required=required,
                reason=FailureReason.MANDATORY_FAILURE,
                failed_mandatory=failed_mandatory,
            )

        if total_points < required:
            logger.debug(f"Star {requested} ({type_key}): {total_points}/{required} points")
            return ClassificationResult(
                achieved=False,
                star=0,
                requested_star=requested,
                accommodation_type=type_key,
                points=total_points,
                required=required,
                reason=FailureReason.INSUFFICIENT_POINTS,
            )

        logger.debug(f"Star {requested} ({type_key}) achieved with {total_points} points")
        return ClassificationResult(
            achieved=True,
            star=requested,
            requested_star=requested,
            accommodation_type=type_key,
            points=total_points,
            required=required,
        )

    def is_star_achievable(
        self,
        star: Any,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> bool:
        return self.evaluate(star, accommodation_type, answers, quantities).achieved

    def get_eligible_star(
        self,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> int:
        """Highest achievable star (5 down to 1), or 0 if none."""
        for star in range(5, 0, -1):
            if self.is_star_achievable(star, accommodation_type, answers, quantities):
                return star
        return 0

    # ── Reports ──────────────────────────────────────────────────────

    def get_points_breakdown(
        self,
        star: Any,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> PointsBreakdown:
        """Split earned and required points between mandatory and optional criteria."""
        buckets = self._buckets(star, accommodation_type)
        if buckets is None:
            return PointsBreakdown()
        answers = answers or {}
        quantities = quantities or {}

        mandatory_required = sum(get_criterion_max_points(c) for c in buckets.mandatory)
        min_points = self.resolver.get_min_points_for_star(star, accommodation_type)
        return PointsBreakdown(
            mandatory_points_achieved=sum(
                self._earned(c, answers, quantities) for c in buckets.mandatory
            ),
            optional_points_achieved=sum(
                self._earned(c, answers, quantities) for c in buckets.optional
            ),
            mandatory_points_required=mandatory_required,
            optional_points_required=max(0, min_points - mandatory_required),
        )

    def get_gap_report(
        self,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> List[StarGap]:
        """One row per declared star level, lowest first."""
        gaps: List[StarGap] = []
        for level in sorted(self.dataset.star_levels, key=lambda lvl: lvl.star):
            result = self.evaluate(level.star, accommodation_type, answers, quantities)
            min_points = result.required or 0
            gaps.append(
                StarGap(
                    star=level.star,
                    min_points=min_points,
                    total_points=result.points,
                    max_points=get_max_points_for_star(self.resolver, level.star, accommodation_type),
                    points_shortfall=max(0, min_points - result.points),
                    failed_mandatory=result.failed_mandatory,
                    achievable=result.achieved,
                )
            )
        return gaps

    def get_progress(
        self,
        star: Any,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> AssessmentProgress:
        """Answer counters for the star's criteria plus overall completion."""
        answers = answers or {}
        quantities = quantities or {}
        total_criteria = len(self.resolver.assessable_criteria)
        buckets = self._buckets(star, accommodation_type)
        if buckets is None:
            return AssessmentProgress(total_criteria=total_criteria)

        counts: Dict[str, int] = {status.value: 0 for status in AnswerStatus}
        total_points: Points = 0
        for criterion in buckets.all:
            status = _status(answers.get(criterion.id))
            if status in counts:
                counts[status] += 1
            if status == AnswerStatus.YES.value:
                total_points += self._earned(criterion, answers, quantities)

        assessed = sum(counts.values())
        mandatory_fulfilled = sum(
            1 for c in buckets.mandatory if self._satisfied(c, answers, quantities)
        )
        completion = round(assessed / total_criteria * 100, 1) if total_criteria else 0.0
        return AssessmentProgress(
            total_points=total_points,
            fulfilled=counts[AnswerStatus.YES.value],
            missing=counts[AnswerStatus.NO.value],
            assessed=assessed,
            total_criteria=total_criteria,
            max_points=get_max_points_for_star(self.resolver, star, accommodation_type),
            mandatory_fulfilled=mandatory_fulfilled,
            mandatory_total=len(buckets.mandatory),
            completion_percent=completion,
        )

    def get_mandatory_checklist(
        self,
        star: Any,
        accommodation_type: Optional[str] = None,
        answers: Optional[Answers] = None,
        quantities: Optional[Quantities] = None,
    ) -> List[MandatoryChecklistEntry]:
        buckets = self._buckets(star, accommodation_type)
        if buckets is None:
            return []
        answers = answers or {}
        quantities = quantities or {}
        return [
            MandatoryChecklistEntry(
                criterion=criterion,
                satisfied=self._satisfied(criterion, answers, quantities),
            )
            for criterion in buckets.mandatory
        ]


# ── Module-level entry points ────────────────────────────────────────


def evaluate_3296(
    dataset: ClassificationDataset,
    star: Any,
    accommodation_type: Optional[str] = None,
    answers: Optional[Answers] = None,
    quantities: Optional[Quantities] = None,
    rules: Optional[AnnotationRuleTable] = None,
) -> ClassificationResult:
    return ClassificationEvaluator(dataset, rules).evaluate(
        star, accommodation_type, answers, quantities
    )


def get_eligible_star(
    dataset: ClassificationDataset,
    accommodation_type: Optional[str] = None,
    answers: Optional[Answers] = None,
    quantities: Optional[Quantities] = None,
    rules: Optional[AnnotationRuleTable] = None,
) -> int:
    return ClassificationEvaluator(dataset, rules).get_eligible_star(
        accommodation_type, answers, quantities
    )
