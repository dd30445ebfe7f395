"""
Tests for the selection planner.

Covers exact vs estimated contributions, rounding, passing-marks seeding
and bounds rejection.
"""

from decimal import Decimal

import pytest

from cbt_toolkit.builder import (
    DraftRules,
    SelectionBoundsError,
    inconsistent_types,
    plan_marks,
    round_half_up,
    type_contribution,
    validate_plan,
)
from cbt_toolkit.builder.planner import plan_violations
from cbt_toolkit.core.models import QuestionPool, QuestionType, SelectionPlan


OBJ = QuestionType.OBJECTIVE


def _objective_pool(make_question, *marks):
    return QuestionPool(
        objective=tuple(make_question(f"o{i}", m) for i, m in enumerate(marks))
    )


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, 3), (3.5, 4), (2.4999, 2), (4.0, 4), (0.5, 1), (6.6666666, 7)],
    )
    def test_round_when_value_given_then_halves_go_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_round_when_decimal_quotient_exactly_half_then_goes_up(self):
        # 61 / 14 x 7 == 30.5; the float product is 30.499999999999996
        assert round_half_up(Decimal(61 * 7) / Decimal(14)) == 31


class TestTypeContribution:
    """Tests for type_contribution."""

    def test_contribution_when_pool_empty_then_zero(self):
        c = type_contribution(OBJ, (), 0)
        assert c.value == 0
        assert not c.is_estimate

    def test_contribution_when_count_zero_then_zero(self, make_question):
        c = type_contribution(OBJ, (make_question("o1", 4),), 0)
        assert c.value == 0
        assert not c.is_estimate

    def test_contribution_when_uniform_marks_then_exact(self, make_question):
        questions = (make_question("o1", 2), make_question("o2", 2), make_question("o3", 2))
        c = type_contribution(OBJ, questions, 2)
        assert c.value == 4
        assert c.source == "exact"

    def test_contribution_when_mixed_marks_then_estimate_with_average(self, make_question):
        questions = (make_question("o1", 1), make_question("o2", 2), make_question("o3", 4))
        c = type_contribution(OBJ, questions, 2)
        # average 7/3 x 2 = 4.67
        assert c.value == 5
        assert c.is_estimate
        assert c.average == pytest.approx(7 / 3)

    def test_contribution_when_exact_half_then_rounds_up(self, make_question):
        questions = tuple(make_question(f"o{i}", 4) for i in range(13)) + (
            make_question("o13", 9),
        )
        c = type_contribution(OBJ, questions, 7)
        assert c.value == 31
        assert c.is_estimate
        assert c.average == pytest.approx(61 / 14)


class TestPlanMarks:
    """Tests for plan_marks."""

    def test_plan_when_marks_1_1_count_2_then_total_2_passing_1_exact(self, make_question):
        marks = plan_marks(_objective_pool(make_question, 1, 1), SelectionPlan(objective=2))
        assert marks.total_marks == 2
        assert marks.passing_marks == 1
        assert not marks.is_estimate

    def test_plan_when_marks_1_3_count_2_then_total_4_estimate(self, make_question):
        marks = plan_marks(_objective_pool(make_question, 1, 3), SelectionPlan(objective=2))
        assert marks.total_marks == 4
        assert marks.passing_marks == 2
        assert marks.is_estimate

    def test_plan_when_marks_2_3_count_2_then_total_5_estimate(self, make_question):
        marks = plan_marks(_objective_pool(make_question, 2, 3), SelectionPlan(objective=2))
        assert marks.total_marks == 5
        assert marks.passing_marks == 2
        assert marks.is_estimate

    def test_plan_when_both_types_then_sums_contributions(self, mixed_pool):
        marks = plan_marks(mixed_pool, SelectionPlan(objective=1, theory=2))
        # objective average 2 x 1, theory exact 5 x 2
        assert marks.objective.value == 2
        assert marks.theory.value == 10
        assert marks.total_marks == 12
        assert marks.passing_marks == 6
        assert marks.estimated_types == (OBJ,)

    def test_plan_when_empty_pool_then_zero_totals(self):
        marks = plan_marks(QuestionPool.empty(), SelectionPlan())
        assert marks.total_marks == 0
        assert marks.passing_marks == 0

    def test_plan_when_rules_ratio_given_then_seeds_passing_with_it(self, make_question):
        pool = _objective_pool(make_question, 5, 5)
        marks = plan_marks(pool, SelectionPlan(objective=2), DraftRules(passing_ratio=0.75))
        assert marks.passing_marks == 7

    def test_plan_when_count_exceeds_pool_then_rejected_not_clamped(self, make_question):
        with pytest.raises(SelectionBoundsError) as exc_info:
            plan_marks(_objective_pool(make_question, 1, 1), SelectionPlan(objective=3))
        assert exc_info.value.question_type is OBJ
        assert exc_info.value.count == 3
        assert exc_info.value.pool_size == 2
        assert "exceeds the 2 question(s)" in str(exc_info.value)


class TestBounds:
    """Tests for validate_plan / plan_violations."""

    def test_validate_when_within_bounds_then_passes(self, mixed_pool):
        validate_plan(mixed_pool, SelectionPlan(objective=2, theory=0))

    def test_validate_when_nonzero_count_on_empty_type_then_raises(self, make_question):
        with pytest.raises(SelectionBoundsError, match="Theory selection"):
            validate_plan(_objective_pool(make_question, 1), SelectionPlan(theory=1))

    def test_violations_when_both_types_over_then_lists_both(self, mixed_pool):
        violations = plan_violations(mixed_pool, SelectionPlan(objective=3, theory=9))
        assert [v.question_type for v in violations] == [
            QuestionType.OBJECTIVE,
            QuestionType.THEORY,
        ]

    def test_bounds_error_when_caught_as_value_error_then_matches(self, mixed_pool):
        with pytest.raises(ValueError):
            validate_plan(mixed_pool, SelectionPlan(objective=5))


class TestInconsistentTypes:
    """Tests for inconsistent_types."""

    def test_inconsistent_when_mixed_objective_then_reports_it(self, mixed_pool):
        assert inconsistent_types(mixed_pool) == (OBJ,)

    def test_inconsistent_when_empty_pool_then_none(self):
        assert inconsistent_types(QuestionPool.empty()) == ()
