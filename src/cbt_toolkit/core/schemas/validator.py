"""
Schema Validation Utilities

Validates JSON coming back from the exam service before it is turned into
models.

The service is the source of truth, but its payloads are untyped JSON.
Basic checks (required fields, types, mark range) always run; strict mode
additionally validates against the bundled JSON Schema files with
`jsonschema`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from ..models.questions import MAX_MARKS, MIN_MARKS


QUESTION_TYPES = ("Objective", "Theory")

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _run_jsonschema(data: Any, schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e


def validate_question(data: dict[str, Any], *, strict: bool = False, path: str = "") -> None:
    """
    Validate a question returned by the exam service.

    Args:
        data: Question dictionary to validate
        strict: If True, also validate against question.schema.json
        path: Location of this question inside a larger payload

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("question must be an object", path=path)

    prefix = f"{path}." if path else ""
    required = ["_id", "questionType", "marks"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    question_type = data.get("questionType")
    if question_type not in QUESTION_TYPES:
        raise ValidationError(
            f"Invalid questionType: {question_type!r}",
            path=f"{prefix}questionType",
        )

    marks = data.get("marks")
    if isinstance(marks, bool) or not isinstance(marks, int) or not (MIN_MARKS <= marks <= MAX_MARKS):
        raise ValidationError(
            f"Invalid marks: {marks!r} (must be integer {MIN_MARKS}-{MAX_MARKS})",
            path=f"{prefix}marks",
        )

    options = data.get("options")
    if options is not None:
        if not isinstance(options, list):
            raise ValidationError("options must be a list", path=f"{prefix}options")
        for i, option in enumerate(options):
            if not isinstance(option, dict) or not isinstance(option.get("text"), str):
                raise ValidationError(
                    "option must have text",
                    path=f"{prefix}options[{i}]",
                )

    if strict:
        _run_jsonschema(data, "question")


def validate_question_list(
    data: Any, *, strict: bool = False, path: str = "questions"
) -> None:
    """
    Validate a list of questions.

    Raises:
        ValidationError: If the list or any element is invalid
    """
    if not isinstance(data, list):
        raise ValidationError(f"{path} must be a list", path=path)
    for i, item in enumerate(data):
        validate_question(item, strict=strict, path=f"{path}[{i}]")


def validate_preview(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a preview-random-selection response body.

    Args:
        data: {"objective": [...], "theory": [...]}
        strict: If True, also validate against preview.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("preview must be an object")

    for key, expected in (("objective", "Objective"), ("theory", "Theory")):
        items = data.get(key, [])
        validate_question_list(items, path=key)
        for i, item in enumerate(items):
            if item["questionType"] != expected:
                raise ValidationError(
                    f"{key} preview holds a {item['questionType']} question",
                    path=f"{key}[{i}].questionType",
                )

    if strict:
        _run_jsonschema(data, "preview")


def validate_envelope(data: Any) -> None:
    """
    Validate the {success, message, data} envelope used by every endpoint.

    Raises:
        ValidationError: If the envelope shape is wrong
    """
    if not isinstance(data, dict):
        raise ValidationError("response body must be an object")
    if not isinstance(data.get("success"), bool):
        raise ValidationError("response is missing boolean 'success'", path="success")
    if "message" in data and not isinstance(data["message"], str):
        raise ValidationError("message must be a string", path="message")
