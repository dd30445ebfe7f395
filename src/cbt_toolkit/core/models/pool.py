"""
Module: pool

Purpose:
    Provides the QuestionPool dataclass - the per-draft working set of
    candidate questions, split by type. Pools are frozen; the builder.pool
    reducers return new pools instead of editing one in place.

Dependencies:
    - dataclasses (std)
    - .questions.Question, QuestionType

Used By:
    - builder.pool (reducers)
    - builder.planner
    - builder.draft.ExamDraft
    - builder.preview.PreviewRequester
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .questions import Question, QuestionType


@dataclass(frozen=True)
class QuestionPool:
    """
    Candidate questions for one exam draft (immutable).

    Attributes:
        objective: Ordered objective questions
        theory: Ordered theory questions

    Invariants:
        - No duplicate id within a type list
        - Each list only holds questions of its own type

    Example:
        >>> pool = QuestionPool.empty()
        >>> pool.is_empty
        True
    """

    objective: tuple[Question, ...] = ()
    theory: tuple[Question, ...] = ()

    def __post_init__(self) -> None:
        """Validate pool on construction."""
        for question_type in QuestionType:
            questions = self.for_type(question_type)
            wrong = [q.id for q in questions if q.question_type is not question_type]
            if wrong:
                raise ValueError(
                    f"{question_type.key} pool holds questions of another type: {wrong}"
                )
            ids = [q.id for q in questions]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate questions in {question_type.key} pool")

    @classmethod
    def empty(cls) -> QuestionPool:
        return cls()

    def for_type(self, question_type: QuestionType) -> tuple[Question, ...]:
        """Questions of one type, in insertion order."""
        if question_type is QuestionType.OBJECTIVE:
            return self.objective
        return self.theory

    def ids(self, question_type: QuestionType) -> tuple[str, ...]:
        return tuple(q.id for q in self.for_type(question_type))

    def contains(self, question_id: str, question_type: QuestionType) -> bool:
        return question_id in self.ids(question_type)

    def size(self, question_type: QuestionType) -> int:
        return len(self.for_type(question_type))

    @property
    def total_size(self) -> int:
        return len(self.objective) + len(self.theory)

    @property
    def is_empty(self) -> bool:
        return self.total_size == 0

    def __iter__(self) -> Iterator[Question]:
        yield from self.objective
        yield from self.theory

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"QuestionPool(objective={len(self.objective)}, theory={len(self.theory)})"
