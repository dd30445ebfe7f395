"""
Tests for ExamDraft reducers, step validation and payload building.
"""

from datetime import datetime, timedelta

import pytest

from cbt_toolkit.builder import (
    DraftValidationError,
    ExamDetails,
    ExamDraft,
    ExamType,
    SelectionBoundsError,
)
from cbt_toolkit.core.models import QuestionType, SelectionPlan


START = datetime(2026, 3, 2, 9, 0)


@pytest.fixture
def ready_draft(make_question):
    """Draft that passes every wizard step."""
    details = ExamDetails(
        title="Biology Mid-term",
        subject="s1",
        class_id="c1",
        exam_type=ExamType.MIXED,
        duration=90,
        start_time=START,
        end_time=START + timedelta(hours=2),
    )
    return ExamDraft(details=details).with_questions(
        [
            make_question("o1", 2),
            make_question("o2", 2),
            make_question("t1", 5, theory=True),
        ]
    )


class TestScopeReducers:
    """Subject / class changes and the pool."""

    def test_with_subject_when_changed_then_pool_and_plan_reset(self, ready_draft):
        draft = ready_draft.with_passing_marks(3).with_subject("s2")
        assert draft.pool.is_empty
        assert draft.plan.is_empty
        assert draft.passing_marks_override is None
        assert draft.details.subject == "s2"
        assert draft.details.title == "Biology Mid-term"

    def test_with_subject_when_unchanged_then_same_draft(self, ready_draft):
        assert ready_draft.with_subject("s1") is ready_draft

    def test_with_class_when_changed_then_pool_reset(self, ready_draft):
        assert ready_draft.with_class("c2").pool.is_empty

    def test_with_details_when_title_only_then_pool_kept(self, ready_draft):
        draft = ready_draft.with_details(title="Biology Final")
        assert draft.details.title == "Biology Final"
        assert draft.pool == ready_draft.pool

    def test_with_details_when_class_given_then_routes_through_reset(self, ready_draft):
        draft = ready_draft.with_details(class_id="c9", duration=45)
        assert draft.pool.is_empty
        assert draft.details.duration == 45


class TestPoolReducers:
    """Adding, removing and counting questions."""

    def test_with_question_when_added_then_counts_seeded_to_pool_size(self, ready_draft):
        assert ready_draft.plan == SelectionPlan(objective=2, theory=1)

    def test_with_question_when_already_pooled_then_same_draft(self, ready_draft, make_question):
        trimmed = ready_draft.with_counts(objective=1)
        assert trimmed.with_question(make_question("o1", 2)) is trimmed

    def test_without_question_when_removed_then_counts_left_alone(self, ready_draft):
        draft = ready_draft.without_question("o1", QuestionType.OBJECTIVE)
        assert draft.pool.size(QuestionType.OBJECTIVE) == 1
        assert draft.plan.objective == 2
        assert "objectiveCount" in draft.validate_questions()

    def test_without_question_when_absent_then_same_draft(self, ready_draft):
        assert ready_draft.without_question("nope", "theory") is ready_draft

    def test_with_counts_when_within_pool_then_updates_plan(self, ready_draft):
        draft = ready_draft.with_counts(objective=1)
        assert draft.plan == SelectionPlan(objective=1, theory=1)

    def test_with_counts_when_over_pool_then_raises_bounds_error(self, ready_draft):
        with pytest.raises(SelectionBoundsError):
            ready_draft.with_counts(theory=2)

    def test_with_passing_marks_when_negative_then_raises_error(self, ready_draft):
        with pytest.raises(ValueError, match="cannot be negative"):
            ready_draft.with_passing_marks(-1)


class TestDerivedMarks:
    """Marks derived from the draft."""

    def test_derive_marks_when_default_then_floor_half(self, ready_draft):
        marks = ready_draft.derive_marks()
        assert marks.total_marks == 9
        assert marks.passing_marks == 4

    def test_derive_marks_when_override_set_then_applied(self, ready_draft):
        assert ready_draft.with_passing_marks(6).derive_marks().passing_marks == 6

    def test_derive_marks_when_override_cleared_then_default_returns(self, ready_draft):
        draft = ready_draft.with_passing_marks(6).with_passing_marks(None)
        assert draft.derive_marks().passing_marks == 4


class TestValidation:
    """Wizard step validation."""

    def test_validate_details_when_blank_then_reports_every_field(self):
        errors = ExamDraft().validate_details()
        assert set(errors) == {"title", "subject", "class", "examType", "startTime", "endTime"}

    def test_validate_details_when_end_before_start_then_reports_end(self, ready_draft):
        draft = ready_draft.with_details(end_time=START - timedelta(minutes=1))
        assert draft.validate_details() == {"endTime": "End time must be after start time"}

    def test_validate_details_when_duration_out_of_range_then_reports_it(self, ready_draft):
        errors = ready_draft.with_details(duration=301).validate_details()
        assert errors["duration"] == "Duration must be between 5 and 300 minutes"

    def test_validate_questions_when_empty_then_reports_pool_and_selection(self):
        errors = ExamDraft().validate_questions()
        assert set(errors) == {"questions", "questionSelection"}

    def test_validate_step_when_all_valid_then_empty(self, ready_draft):
        for step in (1, 2, 3):
            assert ready_draft.validate_step(step) == {}

    def test_validate_step_when_override_exceeds_total_then_reports_passing(self, ready_draft):
        errors = ready_draft.with_passing_marks(50).validate_step(3)
        assert "passingMarks" in errors

    def test_validate_step_when_unknown_then_raises_error(self, ready_draft):
        with pytest.raises(ValueError, match="Unknown wizard step"):
            ready_draft.validate_step(4)


class TestPayload:
    """to_exam_payload."""

    def test_payload_when_valid_then_carries_selection_and_marks(self, ready_draft):
        payload = ready_draft.with_counts(objective=1).to_exam_payload()
        assert payload["useQuestionBank"] is True
        assert payload["questionBankSelection"] == {
            "objective": {"questions": ["o1", "o2"], "count": 1},
            "theory": {"questions": ["t1"], "count": 1},
        }
        assert payload["totalMarks"] == 7
        assert payload["passingMarks"] == 3
        assert payload["examType"] == "Mixed"
        assert payload["class"] == "c1"
        assert payload["startTime"] == "2026-03-02T09:00:00"
        assert payload["settings"]["shuffleQuestions"] is True

    def test_payload_when_exam_type_given_as_string_then_parsed(self, ready_draft):
        draft = ready_draft.with_details(exam_type="Theory")
        assert draft.details.exam_type is ExamType.THEORY
        assert draft.to_exam_payload()["examType"] == "Theory"

    def test_with_details_when_exam_type_unknown_then_raises(self, ready_draft):
        with pytest.raises(ValueError, match="Unknown exam type"):
            ready_draft.with_details(exam_type="Essay")

    def test_payload_when_invalid_then_raises_with_errors(self, ready_draft):
        with pytest.raises(DraftValidationError) as exc_info:
            ready_draft.with_details(title="Bio").to_exam_payload()
        assert "title" in exc_info.value.errors

    def test_payload_when_marks_estimated_then_logs_warning(
        self, ready_draft, make_question, caplog
    ):
        draft = ready_draft.with_question(make_question("o3", 5))
        with caplog.at_level("WARNING", logger="cbt_toolkit.builder.draft"):
            payload = draft.to_exam_payload()
        assert "inconsistent marks" in caplog.text
        assert payload["totalMarks"] == 14
