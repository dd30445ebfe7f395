"""
Module: selection

Purpose:
    Provides the SelectionPlan dataclass (how many questions of each type
    every student draws at random) and PreviewSample (one advisory draw
    returned by the exam service).

Key Functions:
    - SelectionPlan.count(type): Requested draw size for a type
    - SelectionPlan.for_pool(pool): Draw every pooled question
    - PreviewSample.empty(): Sample with no questions

Dependencies:
    - dataclasses (std)
    - .questions, .pool

Used By:
    - builder.planner
    - builder.draft.ExamDraft
    - builder.preview.PreviewRequester
"""

from __future__ import annotations

from dataclasses import dataclass

from .pool import QuestionPool
from .questions import Question, QuestionType


@dataclass(frozen=True)
class SelectionPlan:
    """
    Random-draw size per question type.

    Bounds against a pool are checked by the planner, not here, since the
    same plan is kept while the pool is edited.

    Attributes:
        objective: Objective questions drawn per student
        theory: Theory questions drawn per student

    Invariants:
        - counts are non-negative integers
    """

    objective: int = 0
    theory: int = 0

    def __post_init__(self) -> None:
        """Validate counts on construction."""
        for question_type in QuestionType:
            value = self.count(question_type)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{question_type.key} count must be an integer: {value!r}")
            if value < 0:
                raise ValueError(f"{question_type.key} count cannot be negative: {value}")

    @classmethod
    def for_pool(cls, pool: QuestionPool) -> SelectionPlan:
        """
        Plan that draws every pooled question.

        Args:
            pool: Pool to size the plan from

        Returns:
            SelectionPlan with counts equal to pool sizes
        """
        return cls(objective=len(pool.objective), theory=len(pool.theory))

    def count(self, question_type: QuestionType) -> int:
        if question_type is QuestionType.OBJECTIVE:
            return self.objective
        return self.theory

    @property
    def total(self) -> int:
        return self.objective + self.theory

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def to_dict(self) -> dict:
        return {
            "objective": {"count": self.objective},
            "theory": {"count": self.theory},
        }


@dataclass(frozen=True)
class PreviewSample:
    """
    One random draw shown to the teacher for review.

    Advisory only: each student attempt gets its own independent draw on
    the service, so two samples for the same input need not match.

    Attributes:
        objective: Drawn objective questions
        theory: Drawn theory questions
    """

    objective: tuple[Question, ...] = ()
    theory: tuple[Question, ...] = ()

    @classmethod
    def empty(cls) -> PreviewSample:
        return cls()

    def for_type(self, question_type: QuestionType) -> tuple[Question, ...]:
        if question_type is QuestionType.OBJECTIVE:
            return self.objective
        return self.theory

    @property
    def is_empty(self) -> bool:
        return not self.objective and not self.theory

    @property
    def total_marks(self) -> int:
        """True marks of this particular draw."""
        return sum(q.marks for q in self.objective) + sum(q.marks for q in self.theory)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"PreviewSample(objective={len(self.objective)}, "
            f"theory={len(self.theory)}, marks={self.total_marks})"
        )
