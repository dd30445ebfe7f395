"""
Module: builder

Purpose:
    Exam creation for teachers: keep a pool of candidate questions, choose
    how many of each type every student draws, derive the marks totals, and
    preview one random draw.

Key Functions:
    - add_question() / remove_question() / reset_pool(): Pool reducers
    - plan_marks(): Totals and passing marks for a pool + plan

Key Classes:
    - ExamDraft: Whole wizard state
    - DraftRules: Wizard limits
    - PreviewRequester: Latest random-selection preview

Dependencies:
    - cbt_toolkit.core.models: Question, QuestionPool, SelectionPlan
    - cbt_toolkit.api: Exam service client (preview only)
"""

from .config import DraftRules
from .pool import add_question, add_questions, remove_question, reset_pool
from .planner import (
    SelectionBoundsError,
    inconsistent_types,
    plan_marks,
    round_half_up,
    type_contribution,
    validate_plan,
)
from .draft import DraftValidationError, ExamDetails, ExamDraft, ExamSettings, ExamType
from .preview import PreviewError, PreviewRequester

__all__ = [
    # Config
    "DraftRules",
    # Pool
    "add_question",
    "add_questions",
    "remove_question",
    "reset_pool",
    # Planner
    "SelectionBoundsError",
    "inconsistent_types",
    "plan_marks",
    "round_half_up",
    "type_contribution",
    "validate_plan",
    # Draft
    "DraftValidationError",
    "ExamDetails",
    "ExamDraft",
    "ExamSettings",
    "ExamType",
    # Preview
    "PreviewError",
    "PreviewRequester",
]
