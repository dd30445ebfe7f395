"""
CBT Exam Toolkit Core Package

Shared data models, payload validation and serialization helpers. These
models are the single source of truth for everything built on top of them.

1. **Immutable Data Models**
   Frozen dataclasses; any change produces a new instance.

2. **Calculated Marks (Never Stored)**
   Exam totals are always derived from the pool and selection plan.

3. **Validated Boundaries**
   JSON coming from the exam service is checked before it becomes a model.
"""

from .models import (
    DerivedMarks,
    MarksContribution,
    PreviewSample,
    Question,
    QuestionDraft,
    QuestionPool,
    QuestionType,
    SelectionPlan,
)

__all__ = [
    "DerivedMarks",
    "MarksContribution",
    "PreviewSample",
    "Question",
    "QuestionDraft",
    "QuestionPool",
    "QuestionType",
    "SelectionPlan",
]
