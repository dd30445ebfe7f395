"""
Module: api.client

Purpose:
    Async client for the exam service REST API. Every call returns decoded
    models or raises ServiceError; nothing is retried automatically.

Key Classes:
    - BankFilters: Query for the question bank browser
    - ExamServiceClient: httpx.AsyncClient wrapper

Endpoints (relative to ClientConfig.api_root):
    - POST   /teacher/questions
    - GET    /teacher/questions/for-selection
    - POST   /teacher/preview-random-selection
    - POST   /teacher/exams
    - PUT    /teacher/exams/{id}
    - GET    /exam/code/{code}
    - POST   /student/join-exam
    - DELETE /student/exams/{id}/reset

Dependencies:
    - httpx: async HTTP
    - api.config, api.errors
    - cbt_toolkit.core: models, validation, serialization

Used By:
    - builder.preview.PreviewRequester
    - student.join
    - cli
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import httpx

from cbt_toolkit.core.models import (
    PreviewSample,
    Question,
    QuestionDraft,
    QuestionPool,
    QuestionType,
    SelectionPlan,
)
from cbt_toolkit.core.schemas.validator import (
    ValidationError,
    validate_envelope,
    validate_question,
    validate_question_list,
)
from cbt_toolkit.core.utils.serialization import (
    deserialize_preview,
    serialize_preview_request,
)

from .config import ClientConfig
from .errors import ErrorType, ServiceError

if TYPE_CHECKING:
    from cbt_toolkit.builder.draft import ExamDraft

logger = logging.getLogger(__name__)

DEFAULT_BANK_LIMIT = 100


@dataclass(frozen=True)
class BankFilters:
    """
    Filters for the question bank browser.

    Attributes:
        subject: Subject id
        class_id: Class id
        question_type: Restrict to one type, or None for both
        search: Free-text search over text, topic and tags
        limit: Maximum questions returned
    """

    subject: str = ""
    class_id: str = ""
    question_type: Optional[QuestionType] = None
    search: str = ""
    limit: int = DEFAULT_BANK_LIMIT

    def __post_init__(self) -> None:
        """Validate filters on construction."""
        if self.limit < 1:
            raise ValueError(f"limit must be positive: {self.limit}")

    def to_params(self) -> dict[str, str]:
        """Query parameters; unset filters are omitted."""
        params = {"limit": str(self.limit)}
        if self.subject:
            params["subject"] = self.subject
        if self.class_id:
            params["class"] = self.class_id
        if self.question_type is not None:
            params["questionType"] = self.question_type.value
        if self.search.strip():
            params["search"] = self.search.strip()
        return params


def _request_id() -> str:
    return f"{int(time.time() * 1000):x}{secrets.token_hex(4)}"


class ExamServiceClient:
    """
    Async exam service client.

    Use as an async context manager so the underlying connection pool is
    closed:

    Example:
        >>> async with ExamServiceClient(ClientConfig.from_env()) as client:
        ...     questions = await client.list_questions_for_selection(BankFilters())
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._http = httpx.AsyncClient(
            base_url=config.api_root,
            headers=headers,
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> ExamServiceClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ─────────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """
        Send a request and return the whole decoded envelope.

        Raises:
            ServiceError: On transport failure, non-2xx status, a body that
                is not the {success, data} envelope, or success == false
        """
        headers = {"X-Request-ID": _request_id()}
        logger.debug(f"API request: {method} {path}")
        try:
            response = await self._http.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TransportError as e:
            logger.warning(f"API {method} {path} failed: {e}")
            raise ServiceError.from_transport(e) from e

        if response.is_error:
            error = ServiceError.from_response(response)
            logger.warning(f"API {method} {path} -> {response.status_code}: {error.message}")
            raise error

        try:
            body = response.json()
            validate_envelope(body)
        except (ValueError, ValidationError) as e:
            raise ServiceError(
                f"Unexpected response from server: {e}",
                ErrorType.UNKNOWN,
                status_code=response.status_code,
            ) from e

        if not body["success"]:
            raise ServiceError(
                body.get("message") or "Request failed",
                ErrorType.UNKNOWN,
                status_code=response.status_code,
                details=body,
            )
        logger.debug(f"API response: {method} {path} -> {response.status_code}")
        return body

    async def _data(self, method: str, path: str, **kwargs: Any) -> Any:
        body = await self._request(method, path, **kwargs)
        return body.get("data")

    @staticmethod
    def _malformed(what: str, exc: Exception) -> ServiceError:
        return ServiceError(f"Malformed {what} from server: {exc}", ErrorType.UNKNOWN)

    # ─────────────────────────────────────────────────────────────────────────
    # Questions
    # ─────────────────────────────────────────────────────────────────────────

    async def create_question(
        self, draft: QuestionDraft, *, subject: str, class_id: str
    ) -> Question:
        """
        Create a question in the teacher's bank.

        Args:
            draft: Locally validated question
            subject: Subject id of the exam being built
            class_id: Class id of the exam being built

        Returns:
            The created Question with its service-assigned id
        """
        data = await self._data(
            "POST", "/teacher/questions", json=draft.to_payload(subject, class_id)
        )
        try:
            question = data["question"]
            validate_question(question)
            created = Question.from_dict(question)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise self._malformed("question", e) from e
        logger.info(f"Created {created.question_type.value} question {created.id}")
        return created

    async def list_questions_for_selection(self, filters: BankFilters) -> list[Question]:
        """
        List bank questions matching the filters.

        Returns:
            Questions, newest first (service order)
        """
        data = await self._data(
            "GET", "/teacher/questions/for-selection", params=filters.to_params()
        )
        try:
            questions = (data or {}).get("questions") or []
            validate_question_list(questions)
            return [Question.from_dict(q) for q in questions]
        except (AttributeError, TypeError, ValueError, ValidationError) as e:
            raise self._malformed("question list", e) from e

    async def preview_random_selection(
        self, pool: QuestionPool, plan: SelectionPlan
    ) -> PreviewSample:
        """
        Ask the service for one random draw.

        Returns:
            PreviewSample (advisory; independent of what students receive)
        """
        data = await self._data(
            "POST",
            "/teacher/preview-random-selection",
            json=serialize_preview_request(pool, plan),
        )
        try:
            return deserialize_preview(data or {})
        except (TypeError, ValueError, ValidationError) as e:
            raise self._malformed("preview", e) from e

    # ─────────────────────────────────────────────────────────────────────────
    # Exams
    # ─────────────────────────────────────────────────────────────────────────

    async def create_exam(self, draft: ExamDraft) -> dict[str, Any]:
        """
        Persist a new exam.

        Args:
            draft: Exam draft; validated by to_exam_payload()

        Returns:
            Response data (includes the generated "examCode")

        Raises:
            DraftValidationError: If the draft is invalid (no request sent)
            ServiceError: If the service rejects it
        """
        payload = draft.to_exam_payload()
        data = await self._data("POST", "/teacher/exams", json=payload)
        logger.info(f"Created exam {payload['title']!r} (code {(data or {}).get('examCode')})")
        return data or {}

    async def update_exam(self, exam_id: str, draft: ExamDraft) -> dict[str, Any]:
        """
        Replace an existing exam with the draft's content.

        Raises:
            DraftValidationError: If the draft is invalid (no request sent)
            ServiceError: If the service rejects it
        """
        payload = draft.to_exam_payload()
        data = await self._data("PUT", f"/teacher/exams/{exam_id}", json=payload)
        logger.info(f"Updated exam {exam_id}")
        return data or {}

    # ─────────────────────────────────────────────────────────────────────────
    # Student
    # ─────────────────────────────────────────────────────────────────────────

    async def get_exam_by_code(self, exam_code: str) -> dict[str, Any]:
        """Public exam summary for a join code."""
        data = await self._data("GET", f"/exam/code/{exam_code}")
        try:
            return data["exam"]
        except (KeyError, TypeError) as e:
            raise self._malformed("exam", e) from e

    async def join_exam(self, exam_code: str) -> dict[str, Any]:
        """
        Join an exam by code.

        Returns:
            Response data: exam, questions, canResume, resumeData
        """
        return await self._data("POST", "/student/join-exam", json={"examCode": exam_code}) or {}

    async def reset_exam_attempt(self, exam_id: str) -> dict[str, Any]:
        """
        Reset the student's attempts for an exam.

        Returns:
            Whole response body (the service puts allowsRetakes at top level)
        """
        return await self._request("DELETE", f"/student/exams/{exam_id}/reset")
