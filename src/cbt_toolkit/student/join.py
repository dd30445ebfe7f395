"""
Module: student.join

Purpose:
    Student side of starting an exam: verify a join code, join, and handle
    the "already completed" answer by either blocking (no retakes) or
    offering a new attempt.

Key Functions:
    - verify_exam_code(): Look up an exam by its join code
    - join_exam(): Join once and classify the outcome
    - join_with_retake(): Join, and on a retake offer ask the caller and
      rejoin once
    - reset_attempt(): Ask the service to clear this student's attempts

Key Classes:
    - JoinStatus / JoinOutcome: Result of a join
    - ExamInfo: Public summary behind a join code
    - ResetOutcome: Result of a reset

Dependencies:
    - api.client.ExamServiceClient
    - api.errors.ServiceError

Used By:
    - cli (join command)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from cbt_toolkit.api.errors import ErrorType, ServiceError

if TYPE_CHECKING:
    from cbt_toolkit.api.client import ExamServiceClient

logger = logging.getLogger(__name__)

ALREADY_COMPLETED = "already completed"


class JoinStatus(str, Enum):
    JOINED = "joined"
    RESUMABLE = "resumable"
    COMPLETED_BLOCKED = "completed_blocked"
    RETAKE_AVAILABLE = "retake_available"


def _parse_time(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None


def _name(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("name") or value.get("_id") or "")
    return str(value or "")


@dataclass(frozen=True)
class ExamInfo:
    """
    Public summary of the exam behind a join code.

    Attributes:
        id: Exam id
        exam_code: Join code (upper case)
        title: Exam title
        subject: Subject name
        duration: Length in minutes
        total_marks: Total marks
        question_count: Questions each student answers
        start_time: When the exam opens
        end_time: When the exam closes
        is_currently_active: Whether the exam can be joined now
    """

    id: str
    exam_code: str
    title: str
    subject: str = ""
    duration: int = 0
    total_marks: int = 0
    question_count: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_currently_active: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> ExamInfo:
        return cls(
            id=str(data["_id"]),
            exam_code=str(data.get("examCode", "")),
            title=data.get("title", ""),
            subject=_name(data.get("subject")),
            duration=int(data.get("duration") or 0),
            total_marks=int(data.get("totalMarks") or 0),
            question_count=int(data.get("questionCount") or 0),
            start_time=_parse_time(data.get("startTime")),
            end_time=_parse_time(data.get("endTime")),
            is_currently_active=bool(data.get("isCurrentlyActive", False)),
        )


@dataclass(frozen=True)
class JoinOutcome:
    """
    Result of a join attempt.

    Attributes:
        status: What happened
        message: Message fit to show the student
        exam: Exam block returned on a successful join
        questions: Questions returned on a successful join
        resume_data: Saved answers and time when resuming
        existing_score: Score of the completed attempt (blocked only)
        submitted_at: When the completed attempt was submitted (blocked only)
    """

    status: JoinStatus
    message: str
    exam: dict = field(default_factory=dict)
    questions: tuple[dict, ...] = ()
    resume_data: Optional[dict] = None
    existing_score: Optional[float] = None
    submitted_at: Optional[datetime] = None

    @property
    def joined(self) -> bool:
        return self.status in (JoinStatus.JOINED, JoinStatus.RESUMABLE)


@dataclass(frozen=True)
class ResetOutcome:
    allows_retakes: bool
    message: str
    removed_attempts: int = 0


def normalize_code(exam_code: str) -> str:
    """
    Trim and upper-case a join code.

    Raises:
        ValueError: If the code is blank
    """
    code = exam_code.strip().upper()
    if not code:
        raise ValueError("Please enter an exam code")
    return code


async def verify_exam_code(client: ExamServiceClient, exam_code: str) -> ExamInfo:
    """
    Look up the exam behind a join code.

    Raises:
        ValueError: If the code is blank (no request sent)
        ServiceError: If the code is unknown or the call fails
    """
    code = normalize_code(exam_code)
    data = await client.get_exam_by_code(code)
    info = ExamInfo.from_dict(data)
    logger.info(f"Exam found: {info.title!r} ({info.exam_code})")
    return info


def _completed_outcome(error: ServiceError) -> JoinOutcome:
    if error.detail("canRetake") is False:
        submitted_at = _parse_time(error.detail("submittedAt"))
        score = error.detail("existingScore")
        when = submitted_at.strftime("%Y-%m-%d %H:%M") if submitted_at else "an earlier date"
        message = (
            f"You have already completed this exam on {when}. "
            f"Your score: {score if score is not None else 'Pending'}. "
            "Contact your teacher if you need to retake this exam."
        )
        return JoinOutcome(
            JoinStatus.COMPLETED_BLOCKED,
            message,
            existing_score=score,
            submitted_at=submitted_at,
        )
    return JoinOutcome(
        JoinStatus.RETAKE_AVAILABLE,
        "You have already completed this exam, but retakes are allowed.",
    )


async def join_exam(client: ExamServiceClient, exam_code: str) -> JoinOutcome:
    """
    Join an exam and classify the outcome.

    Args:
        client: Exam service client
        exam_code: Join code (case-insensitive)

    Returns:
        JoinOutcome: JOINED, RESUMABLE, COMPLETED_BLOCKED or RETAKE_AVAILABLE

    Raises:
        ValueError: If the code is blank
        ServiceError: For failures other than "already completed"
    """
    code = normalize_code(exam_code)
    try:
        data = await client.join_exam(code)
    except ServiceError as e:
        if e.error_type is ErrorType.VALIDATION and ALREADY_COMPLETED in e.message:
            outcome = _completed_outcome(e)
            logger.info(f"Join {code}: {outcome.status.value}")
            return outcome
        raise

    can_resume = bool(data.get("canResume"))
    outcome = JoinOutcome(
        JoinStatus.RESUMABLE if can_resume else JoinStatus.JOINED,
        "Resuming your exam attempt" if can_resume else "Successfully joined exam!",
        exam=data.get("exam") or {},
        questions=tuple(data.get("questions") or ()),
        resume_data=data.get("resumeData") if can_resume else None,
    )
    logger.info(f"Join {code}: {outcome.status.value} ({len(outcome.questions)} questions)")
    return outcome


async def join_with_retake(
    client: ExamServiceClient,
    exam_code: str,
    confirm: Callable[[JoinOutcome], bool],
) -> JoinOutcome:
    """
    Join, offering a new attempt when the exam allows retakes.

    The rejoin happens at most once; a second "already completed" answer
    is returned as-is.

    Args:
        client: Exam service client
        exam_code: Join code
        confirm: Called with the RETAKE_AVAILABLE outcome; return True to
            start a new attempt
    """
    outcome = await join_exam(client, exam_code)
    if outcome.status is JoinStatus.RETAKE_AVAILABLE and confirm(outcome):
        return await join_exam(client, exam_code)
    return outcome


async def reset_attempt(client: ExamServiceClient, exam_id: str) -> ResetOutcome:
    """
    Clear the student's attempts for an exam.

    When the exam already allows retakes the service removes nothing and
    says so; the student can simply join again.
    """
    body = await client.reset_exam_attempt(exam_id)
    outcome = ResetOutcome(
        allows_retakes=bool(body.get("allowsRetakes")),
        message=body.get("message", ""),
        removed_attempts=int(body.get("removedAttempts") or 0),
    )
    logger.info(f"Reset exam {exam_id}: {outcome.message}")
    return outcome
