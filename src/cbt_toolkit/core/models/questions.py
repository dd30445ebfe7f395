"""
Module: questions

Purpose:
    Provides the Question and QuestionDraft dataclasses. A Question is an
    assessable item that already exists in the exam service (it has an id);
    a QuestionDraft is a question being authored by a teacher that has not
    been sent to the service yet.

Key Classes:
    - QuestionType: Objective / Theory
    - QuestionOption: One answer option of an objective question
    - Question: Immutable question reference held by a pool
    - QuestionDraft: Locally validated question awaiting creation

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.pool.QuestionPool
    - core.utils.serialization
    - builder.planner
    - api.client.ExamServiceClient.create_question

Invariants:
    Questions fetched from the bank may arrive with the correct-answer flags
    stripped by the service, so option rules are only enforced on drafts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


MIN_MARKS = 1
MAX_MARKS = 20
MIN_TEXT_LENGTH = 3


class QuestionType(str, Enum):
    """Question type as named by the exam service."""

    OBJECTIVE = "Objective"
    THEORY = "Theory"

    @property
    def key(self) -> str:
        """Lower-case key used for pool lists and request bodies."""
        return self.value.lower()

    @classmethod
    def parse(cls, value: str | QuestionType) -> QuestionType:
        """
        Parse a type from either the service name or the pool key.

        Args:
            value: "Objective", "objective", "Theory", "theory" or a member

        Returns:
            Matching QuestionType

        Raises:
            ValueError: If the value names no known type
        """
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.key):
                return member
        raise ValueError(f"Unknown question type: {value!r}")


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


@dataclass(frozen=True)
class QuestionOption:
    """
    A single answer option of an objective question.

    Attributes:
        text: Option text shown to students
        is_correct: Whether this is the correct answer (may be unknown/False
            for bank questions returned without answers)
    """

    text: str
    is_correct: bool = False

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def to_dict(self) -> dict:
        return {"text": self.text, "isCorrect": self.is_correct}

    @classmethod
    def from_dict(cls, data: dict) -> QuestionOption:
        return cls(text=data.get("text", ""), is_correct=bool(data.get("isCorrect", False)))


def _validate_marks(marks: Any) -> None:
    if isinstance(marks, bool) or not isinstance(marks, int):
        raise ValueError(f"marks must be an integer: {marks!r}")
    if not (MIN_MARKS <= marks <= MAX_MARKS):
        raise ValueError(f"marks must be {MIN_MARKS}-{MAX_MARKS}: {marks}")


@dataclass(frozen=True)
class Question:
    """
    Question reference held by an exam draft (immutable).

    Attributes:
        id: Identifier assigned by the exam service
        question_type: Objective or Theory
        text: Question text
        marks: Marks awarded for this question (1-20)
        options: Answer options (objective questions only)
        subject: Subject id the question belongs to
        class_id: Class id the question belongs to
        difficulty: Easy / Medium / Hard
        topic: Optional topic label

    Invariants:
        - id is non-empty
        - MIN_MARKS <= marks <= MAX_MARKS
        - theory questions carry no options

    Example:
        >>> q = Question("q1", QuestionType.THEORY, "Explain osmosis", marks=5)
        >>> q.question_type.key
        'theory'
    """

    id: str
    question_type: QuestionType
    text: str
    marks: int
    options: tuple[QuestionOption, ...] = ()
    subject: Optional[str] = None
    class_id: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    topic: str = ""

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not self.id:
            raise ValueError("Question id must be non-empty")
        if not isinstance(self.question_type, QuestionType):
            raise ValueError(f"Invalid question type: {self.question_type!r}")
        _validate_marks(self.marks)
        if self.question_type is QuestionType.THEORY and self.options:
            raise ValueError(f"Theory question {self.id} cannot have options")

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the exam service JSON shape.

        Returns:
            Dict with camelCase keys and "_id" as the identifier
        """
        d: dict[str, Any] = {
            "_id": self.id,
            "questionType": self.question_type.value,
            "questionText": self.text,
            "marks": self.marks,
            "difficulty": self.difficulty.value,
        }
        if self.options:
            d["options"] = [o.to_dict() for o in self.options]
        if self.subject is not None:
            d["subject"] = self.subject
        if self.class_id is not None:
            d["class"] = self.class_id
        if self.topic:
            d["topic"] = self.topic
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        """
        Deserialize from the exam service JSON shape.

        Populated references ({"_id": ..., "name": ...}) are reduced to ids.

        Args:
            data: Dict representation

        Returns:
            Question instance
        """
        return cls(
            id=str(data["_id"]),
            question_type=QuestionType.parse(data["questionType"]),
            text=data.get("questionText", ""),
            marks=data["marks"],
            options=tuple(
                QuestionOption.from_dict(o) for o in data.get("options") or ()
            ),
            subject=_reference_id(data.get("subject")),
            class_id=_reference_id(data.get("class")),
            difficulty=Difficulty(data.get("difficulty", Difficulty.MEDIUM.value)),
            topic=data.get("topic") or "",
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Question({self.id!r}, type={self.question_type.value}, "
            f"marks={self.marks})"
        )


def _reference_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        ref = value.get("_id")
        return str(ref) if ref is not None else None
    return str(value)


@dataclass(frozen=True)
class QuestionDraft:
    """
    A question authored in the exam wizard, not yet created on the service.

    All checks run locally so that an invalid question is reported to the
    teacher without a network round trip.

    Attributes:
        text: Question text (at least 3 characters after trimming)
        question_type: Objective or Theory
        marks: Marks for the question (1-20)
        options: Objective options; blank entries are dropped on submit
        difficulty: Easy / Medium / Hard
        explanation: Optional explanation of the answer
        expected_answer: Model answer for theory questions
        keywords: Marking keywords for theory questions
        topic: Optional topic label
        tags: Free-form tags

    Invariants:
        - Objective: at least 2 non-blank options, exactly one correct
        - Theory: no options
    """

    text: str
    question_type: QuestionType
    marks: int = 1
    options: tuple[QuestionOption, ...] = ()
    difficulty: Difficulty = Difficulty.MEDIUM
    explanation: str = ""
    expected_answer: str = ""
    keywords: tuple[str, ...] = ()
    topic: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate draft on construction."""
        if len(self.text.strip()) < MIN_TEXT_LENGTH:
            raise ValueError(
                f"Question text must be at least {MIN_TEXT_LENGTH} characters"
            )
        _validate_marks(self.marks)

        if self.question_type is QuestionType.OBJECTIVE:
            filled = self.filled_options
            if len(filled) < 2:
                raise ValueError("Objective questions need at least 2 options")
            correct = [o for o in filled if o.is_correct]
            if len(correct) != 1:
                raise ValueError(
                    f"Objective questions need exactly one correct option, got {len(correct)}"
                )
        elif self.options:
            raise ValueError("Theory questions cannot have options")

    @property
    def filled_options(self) -> tuple[QuestionOption, ...]:
        """Options with non-blank text."""
        return tuple(o for o in self.options if not o.is_blank)

    @property
    def correct_answer(self) -> Optional[str]:
        """Text of the correct option (objective only)."""
        for option in self.filled_options:
            if option.is_correct:
                return option.text
        return None

    def to_payload(self, subject: str, class_id: str) -> dict:
        """
        Build the request body for question creation.

        Args:
            subject: Subject id of the exam draft
            class_id: Class id of the exam draft

        Returns:
            JSON-ready dict
        """
        payload: dict[str, Any] = {
            "questionText": self.text.strip(),
            "questionType": self.question_type.value,
            "subject": subject,
            "class": class_id,
            "marks": self.marks,
            "difficulty": self.difficulty.value,
            "keywords": [k.strip() for k in self.keywords if k.strip()],
            "tags": [t.strip() for t in self.tags if t.strip()],
        }
        if self.question_type is QuestionType.OBJECTIVE:
            payload["options"] = [o.to_dict() for o in self.filled_options]
        if self.explanation:
            payload["explanation"] = self.explanation
        if self.expected_answer:
            payload["expectedAnswer"] = self.expected_answer
        if self.topic:
            payload["topic"] = self.topic
        return payload
