"""
Module: builder.planner

Purpose:
    Derive the total and default passing marks an exam draft will show,
    from the question pool and the per-type random-draw counts.

Key Functions:
    - validate_plan(): Reject counts outside 0..pool size
    - type_contribution(): Marks one question type adds
    - plan_marks(): Full DerivedMarks for a pool + plan
    - round_half_up(): Rounding used for estimates

Algorithm:
    1. Collect the distinct marks values in a type's pool
    2. Empty pool or count 0 -> contributes 0 (exact)
    3. One distinct value -> value x count (exact)
    4. Several values -> round(average x count) (estimate)
    5. Total = objective + theory; passing = floor(total x ratio)

Dependencies:
    - decimal (std)
    - cbt_toolkit.core.models: QuestionPool, SelectionPlan, MarksContribution

Used By:
    - builder.draft.ExamDraft
    - cli (plan command)
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from cbt_toolkit.core.models import (
    DerivedMarks,
    MarksContribution,
    Question,
    QuestionPool,
    QuestionType,
    SelectionPlan,
)

from .config import DraftRules

logger = logging.getLogger(__name__)


class SelectionBoundsError(ValueError):
    """A selection count falls outside 0..pool size for its type."""

    def __init__(self, question_type: QuestionType, count: int, pool_size: int):
        super().__init__(
            f"{question_type.value} selection ({count}) exceeds the "
            f"{pool_size} question(s) in the pool"
            if count > pool_size
            else f"{question_type.value} selection cannot be negative: {count}"
        )
        self.question_type = question_type
        self.count = count
        self.pool_size = pool_size


def round_half_up(value: float | Decimal) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding (round(2.5) == 2); estimates
    round 2.5 up to 3. Pass a Decimal when the value comes from a division,
    since a float quotient can land just below the half.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def check_count(question_type: QuestionType, count: int, pool_size: int) -> None:
    """
    Check a single type's count against its pool size.

    Raises:
        SelectionBoundsError: If count < 0 or count > pool_size
    """
    if count < 0 or count > pool_size:
        raise SelectionBoundsError(question_type, count, pool_size)


def validate_plan(pool: QuestionPool, plan: SelectionPlan) -> None:
    """
    Check every type's count against the pool.

    Counts are never clamped; the caller must surface the violation before
    the draft can advance.

    Args:
        pool: Pool the plan draws from
        plan: Requested counts

    Raises:
        SelectionBoundsError: For the first type out of bounds
    """
    for question_type in QuestionType:
        check_count(question_type, plan.count(question_type), pool.size(question_type))


def plan_violations(pool: QuestionPool, plan: SelectionPlan) -> list[SelectionBoundsError]:
    """All bounds violations, one per offending type."""
    violations = []
    for question_type in QuestionType:
        try:
            check_count(question_type, plan.count(question_type), pool.size(question_type))
        except SelectionBoundsError as e:
            violations.append(e)
    return violations


def distinct_marks(questions: Sequence[Question]) -> set[int]:
    return {q.marks for q in questions}


def type_contribution(
    question_type: QuestionType,
    questions: Sequence[Question],
    count: int,
) -> MarksContribution:
    """
    Marks one question type contributes for a given draw size.

    Args:
        question_type: Type of the pooled questions
        questions: The pooled questions of that type
        count: Questions drawn per student (already bounds-checked)

    Returns:
        Exact contribution when marks are uniform, estimate otherwise
    """
    if not questions or count == 0:
        return MarksContribution.zero(question_type)

    values = distinct_marks(questions)
    if len(values) == 1:
        (value,) = values
        return MarksContribution.exact(question_type, value * count)

    total = sum(q.marks for q in questions)
    average = total / len(questions)
    estimate = round_half_up(Decimal(total * count) / Decimal(len(questions)))
    logger.debug(
        f"{question_type.value} marks vary ({sorted(values)}); "
        f"estimating {estimate} from average {average:.2f} x {count}"
    )
    return MarksContribution.estimate(question_type, estimate, average=average)


def plan_marks(
    pool: QuestionPool,
    plan: SelectionPlan,
    rules: DraftRules | None = None,
) -> DerivedMarks:
    """
    Derive exam totals from a pool and selection plan.

    Main entry point for the planner.

    Args:
        pool: Question pool
        plan: Per-type draw counts
        rules: Draft rules (passing ratio); defaults to DraftRules()

    Returns:
        DerivedMarks with per-type contributions and seeded passing marks

    Raises:
        SelectionBoundsError: If any count is outside its pool's bounds

    Example:
        >>> marks = plan_marks(pool, SelectionPlan(objective=2))
        >>> marks.total_marks, marks.passing_marks
        (2, 1)
    """
    rules = rules or DraftRules()
    validate_plan(pool, plan)

    objective = type_contribution(
        QuestionType.OBJECTIVE, pool.objective, plan.objective
    )
    theory = type_contribution(QuestionType.THEORY, pool.theory, plan.theory)
    return DerivedMarks.from_contributions(objective, theory, rules.passing_ratio)


def inconsistent_types(pool: QuestionPool) -> tuple[QuestionType, ...]:
    """
    Types whose pooled questions do not all carry the same marks.

    Different students may get different true totals for these types.
    """
    return tuple(
        question_type
        for question_type in QuestionType
        if len(distinct_marks(pool.for_type(question_type))) > 1
    )
