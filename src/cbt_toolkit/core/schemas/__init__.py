"""
Schemas Package

JSON schema definitions and validation utilities for exam service payloads.
"""

from .validator import (
    validate_envelope,
    validate_preview,
    validate_question,
    validate_question_list,
    ValidationError,
)

__all__ = [
    "validate_envelope",
    "validate_preview",
    "validate_question",
    "validate_question_list",
    "ValidationError",
]
