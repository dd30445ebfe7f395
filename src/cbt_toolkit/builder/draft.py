"""
Module: builder.draft

Purpose:
    The exam creation wizard as one immutable ExamDraft. Reducers return
    new drafts; derived marks are recomputed from the pool and plan on
    every query, never stored.

Key Classes:
    - ExamType: Objective / Theory / Mixed
    - ExamSettings: Attempt behaviour toggles
    - ExamDetails: Step 1 fields (title, schedule, subject, class)
    - ExamDraft: Details + pool + plan + passing-marks override
    - DraftValidationError: Raised when a draft cannot be submitted

Wizard Steps:
    1. Details      -> validate_details()
    2. Questions    -> validate_questions()
    3. Review       -> validate_step(3) then to_exam_payload()

Dependencies:
    - builder.pool, builder.planner, builder.config
    - cbt_toolkit.core.models
    - cbt_toolkit.core.utils.serialization

Used By:
    - api.client.ExamServiceClient (create_exam / update_exam)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from cbt_toolkit.core.models import (
    DerivedMarks,
    Question,
    QuestionPool,
    QuestionType,
    SelectionPlan,
)
from cbt_toolkit.core.utils.serialization import serialize_selection

from .config import DraftRules
from .planner import check_count, inconsistent_types, plan_marks, plan_violations
from .pool import add_question, add_questions, remove_question, reset_pool

logger = logging.getLogger(__name__)


DEFAULT_INSTRUCTIONS = (
    "Read all questions carefully before answering.\n"
    "Answer all questions.\n"
    "Show your working for theory questions."
)


class ExamType(str, Enum):
    OBJECTIVE = "Objective"
    THEORY = "Theory"
    MIXED = "Mixed"

    @classmethod
    def parse(cls, value: str | ExamType) -> ExamType:
        """Parse an exam type from its service name or lowercase key."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.value.lower()):
                return member
        raise ValueError(f"Unknown exam type: {value!r}")


class DraftValidationError(Exception):
    """Raised when a draft fails validation at submit time."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)


@dataclass(frozen=True)
class ExamSettings:
    shuffle_questions: bool = True
    allow_review: bool = True
    prevent_cheating: bool = True
    allow_retakes: bool = False

    def to_dict(self) -> dict:
        return {
            "shuffleQuestions": self.shuffle_questions,
            "allowReview": self.allow_review,
            "preventCheating": self.prevent_cheating,
            "allowRetakes": self.allow_retakes,
        }


@dataclass(frozen=True)
class ExamDetails:
    """
    Step 1 of the wizard.

    Fields are allowed to be empty while the teacher types; emptiness is
    reported by ExamDraft.validate_details() rather than at construction.

    Attributes:
        title: Exam title
        description: Optional description
        subject: Subject id
        class_id: Class id
        exam_type: Objective / Theory / Mixed (None until chosen)
        duration: Length in minutes
        start_time: When the exam opens
        end_time: When the exam closes
        instructions: Instructions shown to students
        settings: Attempt behaviour
    """

    title: str = ""
    description: str = ""
    subject: str = ""
    class_id: str = ""
    exam_type: Optional[ExamType] = None
    duration: int = 60
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    instructions: str = DEFAULT_INSTRUCTIONS
    settings: ExamSettings = field(default_factory=ExamSettings)

    def __post_init__(self):
        if self.exam_type is not None:
            object.__setattr__(self, "exam_type", ExamType.parse(self.exam_type))


@dataclass(frozen=True)
class ExamDraft:
    """
    Complete exam creation state (immutable).

    Attributes:
        details: Step 1 fields
        pool: Candidate questions per type
        plan: Questions drawn per student per type
        passing_marks_override: Teacher-chosen passing marks, or None to
            use the seeded default
        rules: Field limits and passing ratio
        exam_id: Set when editing an existing exam

    Example:
        >>> draft = ExamDraft().with_class("c1").with_subject("s1")
        >>> draft = draft.with_question(q)
        >>> draft.derive_marks().total_marks
        2
    """

    details: ExamDetails = field(default_factory=ExamDetails)
    pool: QuestionPool = field(default_factory=QuestionPool.empty)
    plan: SelectionPlan = field(default_factory=SelectionPlan)
    passing_marks_override: Optional[int] = None
    rules: DraftRules = field(default_factory=DraftRules)
    exam_id: Optional[str] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Detail Reducers
    # ─────────────────────────────────────────────────────────────────────────

    def with_details(self, **changes: Any) -> ExamDraft:
        """
        Update step 1 fields.

        Subject and class changes go through with_subject / with_class so the
        pool is reset with them.
        """
        subject = changes.pop("subject", None)
        class_id = changes.pop("class_id", None)
        draft = replace(self, details=replace(self.details, **changes))
        if subject is not None:
            draft = draft.with_subject(subject)
        if class_id is not None:
            draft = draft.with_class(class_id)
        return draft

    def with_subject(self, subject: str) -> ExamDraft:
        """Select a subject; a different subject empties the pool."""
        if subject == self.details.subject:
            return self
        return self._rescoped(replace(self.details, subject=subject))

    def with_class(self, class_id: str) -> ExamDraft:
        """Select a class; a different class empties the pool."""
        if class_id == self.details.class_id:
            return self
        return self._rescoped(replace(self.details, class_id=class_id))

    def _rescoped(self, details: ExamDetails) -> ExamDraft:
        if not self.pool.is_empty:
            logger.info(
                f"Subject/class changed; discarding {self.pool.total_size} pooled question(s)"
            )
        return replace(
            self,
            details=details,
            pool=reset_pool(),
            plan=SelectionPlan(),
            passing_marks_override=None,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Pool Reducers
    # ─────────────────────────────────────────────────────────────────────────

    def with_question(self, question: Question) -> ExamDraft:
        """
        Pool a question (newly created or picked from the bank).

        Counts are re-seeded to draw every pooled question.
        """
        return self._with_pool(add_question(self.pool, question))

    def with_questions(self, questions: Iterable[Question]) -> ExamDraft:
        """Pool several bank questions at once; counts re-seeded."""
        return self._with_pool(add_questions(self.pool, questions))

    def _with_pool(self, pool: QuestionPool) -> ExamDraft:
        if pool is self.pool:
            return self
        return replace(self, pool=pool, plan=SelectionPlan.for_pool(pool))

    def without_question(self, question_id: str, question_type: QuestionType | str) -> ExamDraft:
        """
        Remove a pooled question.

        Counts are left as they are; a count that now exceeds its pool is
        reported by validate_questions() instead of being clamped.
        """
        pool = remove_question(self.pool, question_id, question_type)
        if pool is self.pool:
            return self
        return replace(self, pool=pool)

    def with_counts(
        self, *, objective: Optional[int] = None, theory: Optional[int] = None
    ) -> ExamDraft:
        """
        Change how many questions of each type a student draws.

        Raises:
            SelectionBoundsError: If a count is outside 0..pool size
        """
        plan = SelectionPlan(
            objective=self.plan.objective if objective is None else objective,
            theory=self.plan.theory if theory is None else theory,
        )
        for question_type in QuestionType:
            check_count(question_type, plan.count(question_type), self.pool.size(question_type))
        return replace(self, plan=plan)

    def with_passing_marks(self, passing_marks: Optional[int]) -> ExamDraft:
        """Override passing marks; None restores the default seed."""
        if passing_marks is not None and passing_marks < 0:
            raise ValueError(f"Passing marks cannot be negative: {passing_marks}")
        return replace(self, passing_marks_override=passing_marks)

    # ─────────────────────────────────────────────────────────────────────────
    # Derived Values (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    def derive_marks(self) -> DerivedMarks:
        """
        Totals for the current pool and plan.

        Returns:
            DerivedMarks, with the passing-marks override applied if set

        Raises:
            SelectionBoundsError: If a count exceeds its pool
            ValueError: If the override exceeds the total
        """
        marks = plan_marks(self.pool, self.plan, self.rules)
        if self.passing_marks_override is not None:
            marks = marks.with_passing_marks(self.passing_marks_override)
        return marks

    def inconsistent_types(self) -> tuple[QuestionType, ...]:
        return inconsistent_types(self.pool)

    # ─────────────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────────────

    def validate_details(self) -> Dict[str, str]:
        """
        Check step 1 fields.

        Returns:
            Mapping of field name to message; empty when valid
        """
        d = self.details
        rules = self.rules
        errors: Dict[str, str] = {}

        if len(d.title.strip()) < rules.min_title_length:
            errors["title"] = f"Exam title must be at least {rules.min_title_length} characters"
        if not d.subject:
            errors["subject"] = "Subject is required"
        if not d.class_id:
            errors["class"] = "Class is required"
        if d.exam_type is None:
            errors["examType"] = "Exam type is required"
        if not rules.is_valid_duration(d.duration):
            low, high = rules.duration_range
            errors["duration"] = f"Duration must be between {low} and {high} minutes"
        if d.start_time is None:
            errors["startTime"] = "Start time is required"
        if d.end_time is None:
            errors["endTime"] = "End time is required"
        elif d.start_time is not None and d.end_time <= d.start_time:
            errors["endTime"] = "End time must be after start time"
        return errors

    def validate_questions(self) -> Dict[str, str]:
        """
        Check step 2: pool and selection counts.

        Returns:
            Mapping of field name to message; empty when valid
        """
        errors: Dict[str, str] = {}
        if self.pool.is_empty:
            errors["questions"] = "At least one question is required"
        if self.plan.is_empty:
            errors["questionSelection"] = (
                "Please select at least one question for students to answer"
            )
        for violation in plan_violations(self.pool, self.plan):
            errors[f"{violation.question_type.key}Count"] = str(violation)
        return errors

    def validate_step(self, step: int) -> Dict[str, str]:
        """
        Validate the fields a wizard step owns.

        Args:
            step: 1 (details), 2 (questions) or 3 (review, everything)

        Returns:
            Mapping of field name to message; empty when the step may advance
        """
        if step == 1:
            return self.validate_details()
        if step == 2:
            return self.validate_questions()
        if step != 3:
            raise ValueError(f"Unknown wizard step: {step}")

        errors = {**self.validate_details(), **self.validate_questions()}
        if not errors:
            try:
                marks = self.derive_marks()
            except ValueError as e:
                errors["passingMarks"] = str(e)
            else:
                if marks.total_marks < 1:
                    errors["totalMarks"] = "Total marks must be at least 1"
        return errors

    # ─────────────────────────────────────────────────────────────────────────
    # Submission
    # ─────────────────────────────────────────────────────────────────────────

    def to_exam_payload(self) -> dict:
        """
        Build the create/update request body.

        Returns:
            JSON-ready dict including questionBankSelection and computed
            totalMarks / passingMarks

        Raises:
            DraftValidationError: If any step is invalid
        """
        errors = self.validate_step(3)
        if errors:
            raise DraftValidationError(errors)

        marks = self.derive_marks()
        if marks.is_estimate:
            types = ", ".join(t.value for t in marks.estimated_types)
            logger.warning(
                f"{types} questions have inconsistent marks; "
                f"total {marks.total_marks} is an estimate"
            )

        d = self.details
        return {
            "title": d.title.strip(),
            "description": d.description,
            "subject": d.subject,
            "class": d.class_id,
            "examType": d.exam_type.value,
            "duration": d.duration,
            "startTime": d.start_time.isoformat(),
            "endTime": d.end_time.isoformat(),
            "instructions": d.instructions,
            "settings": d.settings.to_dict(),
            "allowRetakes": d.settings.allow_retakes,
            "totalMarks": marks.total_marks,
            "passingMarks": marks.passing_marks,
            "useQuestionBank": True,
            "questionBankSelection": serialize_selection(self.pool, self.plan),
        }
