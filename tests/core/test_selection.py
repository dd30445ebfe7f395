"""
Unit Tests for Pool and Selection Models

Tests for QuestionPool, SelectionPlan and PreviewSample.
"""

import pytest

from cbt_toolkit.core.models import PreviewSample, QuestionPool, QuestionType, SelectionPlan


class TestQuestionPool:
    """Tests for QuestionPool dataclass."""

    def test_empty_when_created_then_has_no_questions(self):
        pool = QuestionPool.empty()
        assert pool.is_empty
        assert pool.total_size == 0

    def test_init_when_duplicate_id_then_raises_error(self, make_question):
        q = make_question("o1")
        with pytest.raises(ValueError, match="Duplicate questions in objective pool"):
            QuestionPool(objective=(q, q))

    def test_init_when_wrong_type_list_then_raises_error(self, make_question):
        with pytest.raises(ValueError, match="another type"):
            QuestionPool(objective=(make_question("t1", theory=True),))

    def test_init_when_same_id_in_both_types_then_allowed(self, make_question):
        pool = QuestionPool(
            objective=(make_question("x"),), theory=(make_question("x", theory=True),)
        )
        assert pool.total_size == 2

    def test_queries_when_mixed_pool_then_reports_per_type(self, mixed_pool):
        assert mixed_pool.size(QuestionType.OBJECTIVE) == 2
        assert mixed_pool.ids(QuestionType.THEORY) == ("t1", "t2")
        assert mixed_pool.contains("o2", QuestionType.OBJECTIVE)
        assert not mixed_pool.contains("o2", QuestionType.THEORY)
        assert [q.id for q in mixed_pool] == ["o1", "o2", "t1", "t2"]


class TestSelectionPlan:
    """Tests for SelectionPlan dataclass."""

    def test_init_when_defaults_then_empty(self):
        plan = SelectionPlan()
        assert plan.is_empty
        assert plan.total == 0

    def test_init_when_negative_then_raises_error(self):
        with pytest.raises(ValueError, match="objective count cannot be negative"):
            SelectionPlan(objective=-1)

    def test_init_when_not_integer_then_raises_error(self):
        with pytest.raises(ValueError, match="theory count must be an integer"):
            SelectionPlan(theory=1.5)

    def test_for_pool_when_mixed_pool_then_counts_equal_sizes(self, mixed_pool):
        plan = SelectionPlan.for_pool(mixed_pool)
        assert plan == SelectionPlan(objective=2, theory=2)

    def test_to_dict_when_called_then_nests_counts(self):
        assert SelectionPlan(1, 2).to_dict() == {
            "objective": {"count": 1},
            "theory": {"count": 2},
        }


class TestPreviewSample:
    """Tests for PreviewSample dataclass."""

    def test_total_marks_when_questions_drawn_then_sums_true_marks(self, make_question):
        sample = PreviewSample(
            objective=(make_question("o1", 3),), theory=(make_question("t1", 5, theory=True),)
        )
        assert sample.total_marks == 8
        assert not sample.is_empty

    def test_empty_when_created_then_is_empty(self):
        assert PreviewSample.empty().is_empty
        assert PreviewSample.empty().total_marks == 0
