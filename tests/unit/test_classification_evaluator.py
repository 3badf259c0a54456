"""Tests for the star classification evaluator."""

import pytest

from classification_test_helpers import (
    make_classification_dataset,
    make_criterion,
    make_per_unit_criterion,
)
from hotel_standards.evaluation import ClassificationEvaluator, evaluate_3296, get_eligible_star
from hotel_standards.rules import AnnotationRuleTable
from hotel_standards.schemas import FailureReason


@pytest.fixture
def dataset():
    """10-point reception mandatory from 3 stars, a static and a per-unit optional."""
    return make_classification_dataset(
        [
            make_criterion("1.1", points=10, mandatory=[3, 4, 5]),
            make_criterion("1.2", points=5),
            make_per_unit_criterion("2.1", points_per_unit=2, max_points=10),
        ],
        min_points={1: 0, 2: 5, 3: 10, 4: 20, 5: 25},
    )


@pytest.fixture
def evaluator(dataset):
    return ClassificationEvaluator(dataset)


class TestEvaluate:
    """Tests for ClassificationEvaluator.evaluate."""

    def test_insufficient_then_achieved(self):
        """Two optional criteria worth 20 and 35 against a 50-point threshold."""
        dataset = make_classification_dataset(
            [make_criterion("1.1", points=20), make_criterion("1.2", points=35)],
            min_points={3: 50},
        )
        evaluator = ClassificationEvaluator(dataset)

        result = evaluator.evaluate(3, "hotels_and_similar", {"1.1": "yes"})
        assert result.achieved is False
        assert result.reason == FailureReason.INSUFFICIENT_POINTS
        assert result.points == 20
        assert result.required == 50
        assert result.star == 0
        assert result.requested_star == 3

        result = evaluator.evaluate(3, "hotels_and_similar", {"1.1": "yes", "1.2": "yes"})
        assert result.achieved is True
        assert result.star == 3
        assert result.points == 55
        assert result.reason is None

    def test_mandatory_failure_reported_before_points(self, evaluator):
        result = evaluator.evaluate(3, answers={"1.1": "no", "1.2": "yes", "2.1": "yes"}, quantities={"2.1": 5})
        assert result.reason == FailureReason.MANDATORY_FAILURE
        assert result.failed_mandatory == ["1.1"]
        assert result.points == 15
        assert result.required == 10

    def test_na_satisfies_mandatory_without_points(self, evaluator):
        result = evaluator.evaluate(3, answers={"1.1": "na", "2.1": "yes"}, quantities={"2.1": 5})
        assert result.achieved is True
        assert result.points == 10

    def test_unanswered_mandatory_fails(self, evaluator):
        result = evaluator.evaluate(4, answers={"1.2": "yes"})
        assert result.failed_mandatory == ["1.1"]

    @pytest.mark.parametrize("star", [0, 6, "abc", None, 2.5])
    def test_invalid_star(self, evaluator, star):
        """An invalid star never raises and never achieves."""
        result = evaluator.evaluate(star, answers={"1.1": "yes"})
        assert result.achieved is False
        assert result.reason == FailureReason.INVALID_STAR
        assert result.star == 0
        assert result.points == 0
        assert result.required == 0

    def test_achieved_iff_no_failures_and_enough_points(self, evaluator):
        answers = {"1.1": "yes", "1.2": "yes", "2.1": "yes"}
        quantities = {"2.1": 5}
        for star in range(1, 6):
            result = evaluator.evaluate(star, answers=answers, quantities=quantities)
            expected = not result.failed_mandatory and result.points >= result.required
            assert result.achieved is expected
        assert evaluator.evaluate(5, answers=answers, quantities=quantities).achieved

    def test_per_unit_mandatory_needs_quantity(self):
        dataset = make_classification_dataset([make_per_unit_criterion("2.1", mandatory=[1])])
        evaluator = ClassificationEvaluator(dataset)
        assert evaluator.evaluate(1, answers={"2.1": "yes"}).failed_mandatory == ["2.1"]
        assert evaluator.evaluate(1, answers={"2.1": "yes"}, quantities={"2.1": 1}).achieved

    def test_type_threshold_used(self):
        dataset = make_classification_dataset(
            [make_criterion("1.1", points=10)],
            min_points={3: 30},
            accommodation_types={"hotels_and_similar": {3: 30}, "aparthotels": {3: 10}},
        )
        evaluator = ClassificationEvaluator(dataset)
        assert not evaluator.evaluate(3, "hotels_and_similar", {"1.1": "yes"}).achieved
        result = evaluator.evaluate(3, "aparthotels", {"1.1": "yes"})
        assert result.achieved
        assert result.accommodation_type == "aparthotels"

    def test_unknown_type_falls_back_to_default(self, evaluator):
        result = evaluator.evaluate(1, "campsites")
        assert result.accommodation_type == "hotels_and_similar"
        assert result.achieved

    def test_annotation_inclusion(self):
        """A12 makes a criterion mandatory for specialized at every star."""
        dataset = make_classification_dataset(
            [make_criterion("9.1", points=2, mandatory=[5], reference_codes=["A12"])],
            accommodation_types={"hotels_and_similar": {}, "specialized": {}},
        )
        evaluator = ClassificationEvaluator(dataset)
        assert evaluator.evaluate(1, "hotels_and_similar").achieved
        assert evaluator.evaluate(1, "specialized").failed_mandatory == ["9.1"]

    def test_custom_rules(self):
        dataset = make_classification_dataset(
            [make_criterion("9.1", points=2, reference_codes=["A12"])],
            accommodation_types={"hotels_and_similar": {}, "specialized": {}},
        )
        evaluator = ClassificationEvaluator(dataset, rules=AnnotationRuleTable([]))
        assert evaluator.evaluate(1, "specialized").achieved


class TestEligibleStar:
    """Tests for highest achievable star selection."""

    def test_highest_achievable(self, evaluator):
        answers = {"1.1": "yes", "1.2": "yes"}
        assert evaluator.get_eligible_star(answers=answers) == 3
        assert evaluator.is_star_achievable(3, answers=answers)
        assert not evaluator.is_star_achievable(4, answers=answers)

    def test_none_achievable(self):
        dataset = make_classification_dataset(
            [make_criterion("1.1", mandatory=[1, 2, 3, 4, 5])]
        )
        assert ClassificationEvaluator(dataset).get_eligible_star(answers={}) == 0

    def test_stars_are_independent(self):
        """A criterion mandatory only at 4 stars does not block 5 stars."""
        dataset = make_classification_dataset([make_criterion("1.1", mandatory=[4])])
        evaluator = ClassificationEvaluator(dataset)
        answers = {"1.1": "no"}
        assert not evaluator.is_star_achievable(4, answers=answers)
        assert evaluator.is_star_achievable(5, answers=answers)
        assert evaluator.get_eligible_star(answers=answers) == 5

    def test_higher_star_achievable_for_specialized(self):
        """Under 'specialized', 9.1 is forced mandatory and star 4 fails on 4.1 alone."""
        dataset = make_classification_dataset(
            [
                make_criterion("4.1", points=1, mandatory=[4]),
                make_criterion("9.1", points=2, mandatory=[5], reference_codes=["A12"]),
            ],
            accommodation_types={"hotels_and_similar": {}, "specialized": {}},
        )
        evaluator = ClassificationEvaluator(dataset)
        answers = {"4.1": "no", "9.1": "yes"}

        star_4 = evaluator.evaluate(4, "specialized", answers)
        assert star_4.failed_mandatory == ["4.1"]
        assert evaluator.is_star_achievable(5, "specialized", answers)
        assert evaluator.get_eligible_star("specialized", answers) == 5

        # Without 9.1 the forced inclusion blocks every star for specialized only
        assert evaluator.get_eligible_star("specialized", {"4.1": "yes"}) == 0
        assert evaluator.get_eligible_star("hotels_and_similar", {"4.1": "yes"}) == 4

    def test_module_level_helpers(self, dataset):
        answers = {"1.1": "yes"}
        assert evaluate_3296(dataset, 3, "hotels_and_similar", answers).achieved
        assert get_eligible_star(dataset, "hotels_and_similar", answers) == 3


class TestReports:
    """Tests for breakdown, gap report, progress and checklist."""

    def test_calculate_total_points(self, evaluator):
        answers = {"1.1": "yes", "1.2": "no", "2.1": "yes"}
        assert evaluator.calculate_total_points(3, answers=answers, quantities={"2.1": 3}) == 16
        assert evaluator.calculate_total_points(0, answers=answers) == 0

    def test_points_breakdown(self, evaluator):
        answers = {"1.1": "yes", "1.2": "yes", "2.1": "yes"}
        breakdown = evaluator.get_points_breakdown(4, answers=answers, quantities={"2.1": 2})
        assert breakdown.mandatory_points_achieved == 10
        assert breakdown.optional_points_achieved == 9
        assert breakdown.mandatory_points_required == 10
        assert breakdown.optional_points_required == 10

    def test_breakdown_optional_required_not_negative(self, evaluator):
        breakdown = evaluator.get_points_breakdown(3)
        assert breakdown.mandatory_points_required == 10
        assert breakdown.optional_points_required == 0

    def test_gap_report(self, evaluator):
        answers = {"1.1": "yes", "1.2": "no", "2.1": "yes"}
        gaps = evaluator.get_gap_report(answers=answers, quantities={"2.1": 3})
        assert [gap.star for gap in gaps] == [1, 2, 3, 4, 5]
        assert [gap.achievable for gap in gaps] == [True, True, True, False, False]
        assert [gap.points_shortfall for gap in gaps] == [0, 0, 0, 4, 9]
        assert all(gap.total_points == 16 for gap in gaps)
        assert all(gap.max_points == 25 for gap in gaps)

    def test_gap_report_lists_unmet_mandatory(self, evaluator):
        gaps = evaluator.get_gap_report(answers={"1.2": "yes"})
        assert [gap.failed_mandatory for gap in gaps] == [[], [], ["1.1"], ["1.1"], ["1.1"]]

    def test_progress(self, evaluator):
        progress = evaluator.get_progress(3, answers={"1.1": "yes", "1.2": "no", "2.1": "na"})
        assert progress.fulfilled == 1
        assert progress.missing == 1
        assert progress.assessed == 3
        assert progress.total_criteria == 3
        assert progress.total_points == 10
        assert progress.max_points == 25
        assert progress.mandatory_fulfilled == 1
        assert progress.mandatory_total == 1
        assert progress.completion_percent == 100.0

    def test_progress_partial(self, evaluator):
        progress = evaluator.get_progress(3, answers={"1.1": "yes"})
        assert progress.assessed == 1
        assert progress.completion_percent == 33.3

    def test_progress_invalid_star(self, evaluator):
        progress = evaluator.get_progress(9, answers={"1.1": "yes"})
        assert progress.assessed == 0
        assert progress.total_criteria == 3

    def test_mandatory_checklist(self, evaluator):
        checklist = evaluator.get_mandatory_checklist(3, answers={"1.1": "no"})
        assert [(entry.criterion.id, entry.satisfied) for entry in checklist] == [("1.1", False)]
        assert evaluator.get_mandatory_checklist(1) == []

    def test_mandatory_id_satisfied(self, evaluator):
        assert evaluator.is_mandatory_criterion_id_satisfied("1.1", {"1.1": "yes"})
        assert not evaluator.is_mandatory_criterion_id_satisfied("1.1", {"1.1": "no"})
        assert not evaluator.is_mandatory_criterion_id_satisfied("9.9", {"9.9": "yes"})

    def test_failed_mandatory(self, evaluator):
        assert evaluator.get_failed_mandatory(5, answers={}) == ["1.1"]
        assert evaluator.get_failed_mandatory("bad") == []
