"""
Student exam entry: join codes, joining, retakes and attempt resets.
"""

from .join import (
    ExamInfo,
    JoinOutcome,
    JoinStatus,
    ResetOutcome,
    join_exam,
    join_with_retake,
    reset_attempt,
    verify_exam_code,
)

__all__ = [
    "ExamInfo",
    "JoinOutcome",
    "JoinStatus",
    "ResetOutcome",
    "join_exam",
    "join_with_retake",
    "reset_attempt",
    "verify_exam_code",
]
