"""
Module: marks

Purpose:
    Provides MarksContribution - the marks one question type adds to an
    exam draft - and DerivedMarks, the totals shown to the teacher.
    Tracks whether each figure is exact or an estimate.

Key Functions:
    - MarksContribution.exact(type, value): Uniform marks in the pool
    - MarksContribution.estimate(type, value, average): Mixed marks in the pool
    - MarksContribution.zero(type): Empty pool or nothing selected
    - DerivedMarks.total_marks: Sum of both contributions

Dependencies:
    - dataclasses (std)
    - typing (std)
    - .questions.QuestionType

Used By:
    - builder.planner
    - builder.draft.ExamDraft
    - cli (plan command)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from .questions import QuestionType


MarkSource = Literal["exact", "estimate"]

DEFAULT_PASSING_RATIO = 0.5


@dataclass(frozen=True, slots=True)
class MarksContribution:
    """
    Marks one question type contributes to the exam total.

    Attributes:
        question_type: Type this contribution belongs to
        value: Non-negative integer marks
        source: "exact" when every pooled question of the type carries the
            same marks, "estimate" when marks differ (different students
            drawing different subsets may see different true totals)
        average: Mean marks per pooled question (estimates only)

    Invariants:
        - value >= 0
        - average is set only for estimates

    Example:
        >>> c = MarksContribution.estimate(QuestionType.OBJECTIVE, 4, average=2.0)
        >>> c.is_estimate
        True
    """

    question_type: QuestionType
    value: int
    source: MarkSource
    average: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate contribution on construction."""
        if self.value < 0:
            raise ValueError(f"Marks cannot be negative: {self.value}")
        if self.source not in ("exact", "estimate"):
            raise ValueError(f"Invalid mark source: {self.source}")
        if self.source == "exact" and self.average is not None:
            raise ValueError("Exact contributions carry no average")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def exact(cls, question_type: QuestionType, value: int) -> MarksContribution:
        return cls(question_type=question_type, value=value, source="exact")

    @classmethod
    def estimate(
        cls, question_type: QuestionType, value: int, *, average: float
    ) -> MarksContribution:
        """
        Create an estimated contribution.

        Args:
            question_type: Type of the pooled questions
            value: Rounded average x count
            average: Mean marks per pooled question

        Returns:
            MarksContribution with source="estimate"
        """
        return cls(question_type=question_type, value=value, source="estimate", average=average)

    @classmethod
    def zero(cls, question_type: QuestionType) -> MarksContribution:
        """Nothing selected for this type."""
        return cls(question_type=question_type, value=0, source="exact")

    @property
    def is_estimate(self) -> bool:
        return self.source == "estimate"

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"MarksContribution({self.question_type.key}, {self.value}, {self.source!r})"


@dataclass(frozen=True)
class DerivedMarks:
    """
    Exam totals derived from the pool and selection plan.

    Attributes:
        objective: Objective contribution
        theory: Theory contribution
        passing_marks: Passing marks (defaults to floor(total x 0.5))

    Invariants:
        - total_marks == objective.value + theory.value (never stored)
        - 0 <= passing_marks <= total_marks
    """

    objective: MarksContribution
    theory: MarksContribution
    passing_marks: int

    def __post_init__(self) -> None:
        """Validate totals on construction."""
        if self.objective.question_type is not QuestionType.OBJECTIVE:
            raise ValueError("objective contribution has the wrong type")
        if self.theory.question_type is not QuestionType.THEORY:
            raise ValueError("theory contribution has the wrong type")
        if self.passing_marks < 0:
            raise ValueError(f"Passing marks cannot be negative: {self.passing_marks}")
        if self.passing_marks > self.total_marks:
            raise ValueError(
                f"Passing marks ({self.passing_marks}) cannot exceed "
                f"total marks ({self.total_marks})"
            )

    @classmethod
    def from_contributions(
        cls,
        objective: MarksContribution,
        theory: MarksContribution,
        passing_ratio: float = DEFAULT_PASSING_RATIO,
    ) -> DerivedMarks:
        """
        Build totals with the default passing-marks seed.

        Args:
            objective: Objective contribution
            theory: Theory contribution
            passing_ratio: Fraction of the total needed to pass

        Returns:
            DerivedMarks with passing_marks = floor(total x passing_ratio)
        """
        total = objective.value + theory.value
        return cls(objective=objective, theory=theory, passing_marks=int(total * passing_ratio))

    @property
    def total_marks(self) -> int:
        return self.objective.value + self.theory.value

    @property
    def is_estimate(self) -> bool:
        """True if either type's contribution is an estimate."""
        return self.objective.is_estimate or self.theory.is_estimate

    @property
    def estimated_types(self) -> tuple[QuestionType, ...]:
        return tuple(c.question_type for c in (self.objective, self.theory) if c.is_estimate)

    def contribution(self, question_type: QuestionType) -> MarksContribution:
        if question_type is QuestionType.OBJECTIVE:
            return self.objective
        return self.theory

    def with_passing_marks(self, passing_marks: int) -> DerivedMarks:
        """Return a copy with a caller-chosen passing mark."""
        return DerivedMarks(self.objective, self.theory, passing_marks)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        flag = "~" if self.is_estimate else ""
        return f"DerivedMarks(total={flag}{self.total_marks}, passing={self.passing_marks})"
