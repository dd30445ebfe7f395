"""
Tests for the question pool reducers.
"""

import pytest

from cbt_toolkit.builder import add_question, add_questions, remove_question, reset_pool
from cbt_toolkit.core.models import QuestionPool, QuestionType


class TestAddQuestion:
    """Tests for add_question / add_questions."""

    def test_add_when_new_then_appends_to_type_list(self, make_question):
        pool = add_question(QuestionPool.empty(), make_question("o1"))
        pool = add_question(pool, make_question("t1", theory=True))
        assert pool.ids(QuestionType.OBJECTIVE) == ("o1",)
        assert pool.ids(QuestionType.THEORY) == ("t1",)

    def test_add_when_called_then_input_unchanged(self, make_question):
        original = QuestionPool.empty()
        add_question(original, make_question("o1"))
        assert original.is_empty

    def test_add_when_id_already_pooled_then_same_pool_returned(self, make_question):
        q = make_question("o1")
        once = add_question(QuestionPool.empty(), q)
        twice = add_question(once, q)
        assert twice is once

    def test_add_when_same_id_different_marks_then_first_kept(self, make_question):
        pool = add_question(QuestionPool.empty(), make_question("o1", 1))
        pool = add_question(pool, make_question("o1", 5))
        assert [q.marks for q in pool.objective] == [1]

    def test_add_questions_when_mixed_then_keeps_order_and_skips_pooled(self, make_question):
        pool = add_question(QuestionPool.empty(), make_question("o2"))
        pool = add_questions(
            pool,
            [make_question("o1"), make_question("t1", theory=True), make_question("o2")],
        )
        assert pool.ids(QuestionType.OBJECTIVE) == ("o2", "o1")
        assert pool.ids(QuestionType.THEORY) == ("t1",)


class TestRemoveQuestion:
    """Tests for remove_question."""

    def test_remove_when_present_then_drops_only_that_question(self, mixed_pool):
        pool = remove_question(mixed_pool, "o1", QuestionType.OBJECTIVE)
        assert pool.ids(QuestionType.OBJECTIVE) == ("o2",)
        assert pool.theory == mixed_pool.theory
        assert mixed_pool.size(QuestionType.OBJECTIVE) == 2

    def test_remove_when_absent_then_same_pool_returned(self, mixed_pool):
        assert remove_question(mixed_pool, "missing", "objective") is mixed_pool

    def test_remove_when_id_in_other_type_then_no_change(self, mixed_pool):
        assert remove_question(mixed_pool, "o1", "theory") is mixed_pool

    def test_remove_when_type_unknown_then_raises_error(self, mixed_pool):
        with pytest.raises(ValueError, match="Unknown question type"):
            remove_question(mixed_pool, "o1", "essay")


class TestResetPool:
    """Tests for reset_pool."""

    def test_reset_when_called_then_returns_empty_pool(self):
        assert reset_pool() == QuestionPool.empty()
