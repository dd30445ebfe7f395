"""
Module: builder.preview

Purpose:
    Ask the exam service for one random draw matching the current pool and
    selection plan, so the teacher can see what a student might get. Holds
    the latest sample and a loading flag for the caller to render.

Key Classes:
    - PreviewRequester: Stateful holder of the latest advisory sample
    - PreviewError: Preview could not be produced

Behaviour:
    - Empty pool or nothing selected -> empty sample, no network call
    - Out-of-bounds counts -> SelectionBoundsError, no network call
    - Overlapping requests -> last request wins; older responses are dropped
    - Service failure -> PreviewError, held sample cleared

Dependencies:
    - builder.planner (bounds check)
    - api.client.ExamServiceClient (preview_random_selection)

Used By:
    - cli (preview command)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cbt_toolkit.api.errors import ServiceError
from cbt_toolkit.core.models import PreviewSample, QuestionPool, QuestionType, SelectionPlan

from .planner import validate_plan

if TYPE_CHECKING:
    from cbt_toolkit.api.client import ExamServiceClient

logger = logging.getLogger(__name__)


class PreviewError(Exception):
    """Random selection preview failed."""
    pass


def check_sample(sample: PreviewSample, pool: QuestionPool, plan: SelectionPlan) -> None:
    """
    Check a sample is a plausible draw from the pool.

    Only size and membership are checked; which questions were drawn is
    random by design.

    Raises:
        PreviewError: If a type has more questions than requested, repeats
            a question, or holds a question that is not pooled
    """
    for question_type in QuestionType:
        drawn = sample.for_type(question_type)
        requested = plan.count(question_type)
        if len(drawn) > requested:
            raise PreviewError(
                f"{question_type.value} preview returned {len(drawn)} question(s), "
                f"{requested} requested"
            )
        ids = [q.id for q in drawn]
        if len(ids) != len(set(ids)):
            raise PreviewError(f"{question_type.value} preview repeats a question")
        pooled = set(pool.ids(question_type))
        foreign = [i for i in ids if i not in pooled]
        if foreign:
            raise PreviewError(
                f"{question_type.value} preview holds questions outside the pool: {foreign}"
            )


class PreviewRequester:
    """
    Holder of the latest random-selection preview.

    Attributes:
        client: Exam service client used for the network call

    Example:
        >>> requester = PreviewRequester(client)
        >>> sample = await requester.request_preview(pool, plan)
        >>> requester.sample is sample
        True
    """

    def __init__(self, client: ExamServiceClient) -> None:
        self.client = client
        self._sample = PreviewSample.empty()
        self._in_flight = 0
        self._generation = 0

    @property
    def loading(self) -> bool:
        """True while any preview request is awaiting the service."""
        return self._in_flight > 0

    @property
    def sample(self) -> PreviewSample:
        """Latest applied sample (empty until a preview succeeds)."""
        return self._sample

    def clear(self) -> None:
        """Drop the held sample and ignore responses still in flight."""
        self._generation += 1
        self._sample = PreviewSample.empty()

    async def request_preview(
        self, pool: QuestionPool, plan: SelectionPlan
    ) -> PreviewSample:
        """
        Request one random draw for teacher review.

        Args:
            pool: Current question pool
            plan: Current per-type draw counts

        Returns:
            The drawn sample (not guaranteed to match earlier calls)

        Raises:
            SelectionBoundsError: If a count exceeds its pool
            PreviewError: If the service call fails or returns an
                implausible sample
        """
        validate_plan(pool, plan)

        self._generation += 1
        generation = self._generation

        if pool.is_empty or plan.is_empty:
            logger.debug("Nothing to preview; returning empty sample")
            self._sample = PreviewSample.empty()
            return self._sample

        self._in_flight += 1
        try:
            sample = await self.client.preview_random_selection(pool, plan)
            check_sample(sample, pool, plan)
        except ServiceError as e:
            logger.warning(f"Failed to fetch random preview: {e}")
            if generation == self._generation:
                self._sample = PreviewSample.empty()
            raise PreviewError(f"Failed to fetch random preview: {e}") from e
        except PreviewError:
            if generation == self._generation:
                self._sample = PreviewSample.empty()
            raise
        finally:
            self._in_flight -= 1

        if generation == self._generation:
            self._sample = sample
        else:
            logger.debug(f"Discarding stale preview (request {generation})")
        return sample
