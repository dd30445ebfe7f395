"""
Core Models Package

Immutable, validated data models shared by the builder, the API client
and the student flow.

All models in this package are frozen dataclasses. Reducers in
`cbt_toolkit.builder` return new instances; nothing is edited in place,
so a changed pool or plan can be detected by identity.
"""

from .questions import Difficulty, Question, QuestionDraft, QuestionOption, QuestionType
from .marks import DerivedMarks, MarksContribution
from .pool import QuestionPool
from .selection import PreviewSample, SelectionPlan

__all__ = [
    "Difficulty",
    "Question",
    "QuestionDraft",
    "QuestionOption",
    "QuestionType",
    "DerivedMarks",
    "MarksContribution",
    "QuestionPool",
    "PreviewSample",
    "SelectionPlan",
]
