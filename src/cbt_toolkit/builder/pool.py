"""
Module: builder.pool

Purpose:
    Reducers for the question pool of an exam draft. Each function takes a
    pool and returns a new one; the input is never modified, so callers can
    detect a change by identity and recompute derived marks.

Key Functions:
    - add_question(): Append a question unless its id is already pooled
    - add_questions(): Batch add (questions ticked in the bank browser)
    - remove_question(): Drop a question by id
    - reset_pool(): Empty pool (subject or class changed)

Dependencies:
    - cbt_toolkit.core.models: Question, QuestionPool, QuestionType

Used By:
    - builder.draft.ExamDraft
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from cbt_toolkit.core.models import Question, QuestionPool, QuestionType

logger = logging.getLogger(__name__)


def add_question(pool: QuestionPool, question: Question) -> QuestionPool:
    """
    Add a question to the list matching its type.

    Adding a question whose id is already in that list is a silent no-op,
    so add_question(add_question(p, q), q) == add_question(p, q).

    Args:
        pool: Current pool
        question: Question to add

    Returns:
        New pool, or the same pool when the id is already present
    """
    question_type = question.question_type
    if pool.contains(question.id, question_type):
        logger.debug(f"Question {question.id} already pooled; skipping")
        return pool

    questions = pool.for_type(question_type) + (question,)
    return replace(pool, **{question_type.key: questions})


def add_questions(pool: QuestionPool, questions: Iterable[Question]) -> QuestionPool:
    """
    Add several questions, keeping order and skipping pooled ids.

    Args:
        pool: Current pool
        questions: Questions to add (any mix of types)

    Returns:
        New pool
    """
    for question in questions:
        pool = add_question(pool, question)
    return pool


def remove_question(
    pool: QuestionPool, question_id: str, question_type: QuestionType | str
) -> QuestionPool:
    """
    Remove a question from one type's list.

    Args:
        pool: Current pool
        question_id: Id to remove
        question_type: Type list to remove it from

    Returns:
        New pool, or the same pool when the id is absent
    """
    question_type = QuestionType.parse(question_type)
    if not pool.contains(question_id, question_type):
        return pool

    questions = tuple(q for q in pool.for_type(question_type) if q.id != question_id)
    return replace(pool, **{question_type.key: questions})


def reset_pool() -> QuestionPool:
    """
    Empty pool.

    Pooled questions are scoped to one subject + class pair, so the pool is
    discarded whenever either selection changes.
    """
    return QuestionPool.empty()
