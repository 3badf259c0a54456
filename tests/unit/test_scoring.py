"""Tests for the scoring engine."""

import pytest

from classification_test_helpers import (
    make_classification_dataset,
    make_criterion,
    make_per_unit_criterion,
)
from hotel_standards.rules import CriterionRuleResolver
from hotel_standards.schemas import AnswerStatus, ScoringRule
from hotel_standards.scoring import (
    get_criterion_earned_points,
    get_criterion_max_points,
    get_max_points_for_star,
    is_mandatory_criterion_satisfied,
    is_per_unit_criterion,
)


class TestEarnedPoints:
    """Tests for get_criterion_earned_points."""

    def test_static_yes_earns_points(self):
        assert get_criterion_earned_points(make_criterion(points=5), "yes") == 5

    def test_answer_enum_accepted(self):
        assert get_criterion_earned_points(make_criterion(points=5), AnswerStatus.YES) == 5

    @pytest.mark.parametrize("answer", ["no", "na", None, "", "YES"])
    def test_non_yes_earns_nothing(self, answer):
        assert get_criterion_earned_points(make_criterion(points=5), answer) == 0

    def test_per_unit_capped_at_max(self):
        """2 points per unit, 7 units, capped at 10."""
        criterion = make_per_unit_criterion("2.1", points_per_unit=2, max_points=10)
        assert get_criterion_earned_points(criterion, "yes", 7) == 10

    def test_per_unit_below_cap(self):
        criterion = make_per_unit_criterion("2.1", points_per_unit=2, max_points=10)
        assert get_criterion_earned_points(criterion, "yes", 3) == 6

    def test_per_unit_quantity_is_floored(self):
        criterion = make_per_unit_criterion("2.1", points_per_unit=2, max_points=10)
        assert get_criterion_earned_points(criterion, "yes", "2.9") == 4

    @pytest.mark.parametrize("quantity", [0, -3, None, "abc"])
    def test_per_unit_without_units_earns_nothing(self, quantity):
        criterion = make_per_unit_criterion("2.1")
        assert get_criterion_earned_points(criterion, "yes", quantity) == 0

    def test_static_points_capped_at_max(self):
        """Earned points never exceed the criterion max."""
        criterion = make_criterion(points=8, max_points=5)
        assert get_criterion_earned_points(criterion, "yes") == 5

    def test_missing_criterion(self):
        assert get_criterion_earned_points(None, "yes") == 0


class TestMaxPoints:
    """Tests for get_criterion_max_points."""

    def test_defaults_to_static_points(self):
        assert get_criterion_max_points(make_criterion(points=7)) == 7

    def test_defaults_to_rule_max(self):
        criterion = make_criterion(points=0, scoring_rule=ScoringRule(points_per_unit=1, max_points=4))
        assert criterion.max_points == 4
        assert get_criterion_max_points(criterion) == 4

    def test_negative_points_give_zero(self):
        assert get_criterion_max_points(make_criterion(points=-2)) == 0

    def test_missing_criterion(self):
        assert get_criterion_max_points(None) == 0

    def test_is_per_unit(self):
        assert is_per_unit_criterion(make_per_unit_criterion())
        assert not is_per_unit_criterion(make_criterion())
        assert not is_per_unit_criterion(None)


class TestMandatorySatisfied:
    """Tests for is_mandatory_criterion_satisfied."""

    def test_na_satisfies(self):
        assert is_mandatory_criterion_satisfied(make_criterion(), "na")
        assert is_mandatory_criterion_satisfied(make_per_unit_criterion(), "na")

    def test_yes_satisfies_static(self):
        assert is_mandatory_criterion_satisfied(make_criterion(), "yes")

    @pytest.mark.parametrize("answer", ["no", None, "maybe"])
    def test_other_answers_fail(self, answer):
        assert not is_mandatory_criterion_satisfied(make_criterion(), answer)

    def test_per_unit_yes_needs_units(self):
        criterion = make_per_unit_criterion()
        assert not is_mandatory_criterion_satisfied(criterion, "yes", 0)
        assert not is_mandatory_criterion_satisfied(criterion, "yes")
        assert is_mandatory_criterion_satisfied(criterion, "yes", 1)

    def test_missing_criterion(self):
        assert not is_mandatory_criterion_satisfied(None, "yes")


class TestMaxPointsForStar:
    """Tests for get_max_points_for_star."""

    def test_sums_assessable_bucket(self):
        dataset = make_classification_dataset(
            [
                make_criterion("1.1", points=10),
                make_criterion("1.2", points=0, assessable=False, is_group_header=True),
                make_per_unit_criterion("2.1", max_points=6),
            ]
        )
        assert get_max_points_for_star(CriterionRuleResolver(dataset), 3) == 16

    def test_declared_max_wins(self):
        dataset = make_classification_dataset([make_criterion("1.1", points=10)], max_points=120)
        assert get_max_points_for_star(CriterionRuleResolver(dataset), 3) == 120

    def test_invalid_star(self):
        dataset = make_classification_dataset([make_criterion("1.1", points=10)])
        assert get_max_points_for_star(CriterionRuleResolver(dataset), 9) == 0
