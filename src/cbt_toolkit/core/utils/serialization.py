"""
Serialization Utilities

Provides to/from JSON utilities for the core models.

- `serialize_*` / `deserialize_*` pairs for questions, pools and previews
- Validation runs before deserialization of anything that came from the
  exam service
- Derived values (total marks, passing marks) are never stored in a pool
  file; they are recomputed by the planner on load
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.pool import QuestionPool
from ..models.questions import Question, QuestionType
from ..models.selection import PreviewSample, SelectionPlan
from ..schemas.validator import validate_preview, validate_question, ValidationError


POOL_FILE_VERSION = 1


# ─────────────────────────────────────────────────────────────────────────────
# Question Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_question(question: Question) -> dict[str, Any]:
    """
    Serialize a Question to the exam service JSON shape.

    Args:
        question: Question instance to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    return question.to_dict()


def deserialize_question(data: dict[str, Any], *, validate: bool = True) -> Question:
    """
    Deserialize a Question from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate the payload first

    Returns:
        Question instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If data cannot be parsed
    """
    if validate:
        validate_question(data)
    return Question.from_dict(data)


# ─────────────────────────────────────────────────────────────────────────────
# Pool Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_pool(pool: QuestionPool) -> dict[str, Any]:
    """
    Serialize a pool with full question objects.

    Returns:
        {"objective": [...], "theory": [...]}
    """
    return {
        "objective": [q.to_dict() for q in pool.objective],
        "theory": [q.to_dict() for q in pool.theory],
    }


def deserialize_pool(data: dict[str, Any], *, validate: bool = True) -> QuestionPool:
    """
    Deserialize a pool.

    Args:
        data: {"objective": [...], "theory": [...]}
        validate: Whether to validate every question first

    Returns:
        QuestionPool

    Raises:
        ValidationError: If a question is invalid
        ValueError: If the pool breaks a pool invariant
    """
    if not isinstance(data, dict):
        raise ValidationError("pool must be an object", path="pool")
    lists = {}
    for question_type in QuestionType:
        items = data.get(question_type.key, [])
        if not isinstance(items, list):
            raise ValidationError(f"{question_type.key} must be a list", path=question_type.key)
        questions = []
        for i, item in enumerate(items):
            if validate:
                validate_question(item, path=f"{question_type.key}[{i}]")
            questions.append(Question.from_dict(item))
        lists[question_type.key] = tuple(questions)
    return QuestionPool(objective=lists["objective"], theory=lists["theory"])


def serialize_selection(pool: QuestionPool, plan: SelectionPlan) -> dict[str, Any]:
    """
    Build the `questionBankSelection` block persisted with an exam.

    Only question ids are sent; the service owns the question bodies.

    Returns:
        {"objective": {"questions": [ids], "count": n}, "theory": {...}}
    """
    return {
        question_type.key: {
            "questions": list(pool.ids(question_type)),
            "count": plan.count(question_type),
        }
        for question_type in QuestionType
    }


def serialize_preview_request(pool: QuestionPool, plan: SelectionPlan) -> dict[str, Any]:
    """
    Build the preview-random-selection request body.

    Returns:
        Same shape as serialize_selection
    """
    return serialize_selection(pool, plan)


def deserialize_preview(data: dict[str, Any], *, strict: bool = False) -> PreviewSample:
    """
    Deserialize a preview-random-selection response.

    Args:
        data: {"objective": [...], "theory": [...]}
        strict: Validate against the JSON schema as well

    Returns:
        PreviewSample

    Raises:
        ValidationError: If the response is malformed
    """
    validate_preview(data, strict=strict)
    return PreviewSample(
        objective=tuple(Question.from_dict(q) for q in data.get("objective", [])),
        theory=tuple(Question.from_dict(q) for q in data.get("theory", [])),
    )


# ─────────────────────────────────────────────────────────────────────────────
# File I/O
# ─────────────────────────────────────────────────────────────────────────────

def load_pool_json(path: Path) -> tuple[QuestionPool, SelectionPlan]:
    """
    Load a pool file written by save_pool_json.

    A file without a "selection" block gets a plan that draws every
    pooled question.

    Args:
        path: Path to the pool JSON file

    Returns:
        Tuple of (pool, plan)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the content is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Pool file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"{path.name} must contain an object")

    try:
        pool = deserialize_pool(data.get("pool", data))
    except ValueError as e:
        raise ValidationError(f"Invalid pool in {path.name}: {e}", path="pool") from e

    selection = data.get("selection")
    if selection is None:
        return pool, SelectionPlan.for_pool(pool)
    if not isinstance(selection, dict):
        raise ValidationError(f"selection in {path.name} must be an object", path="selection")
    try:
        plan = SelectionPlan(
            objective=selection.get("objective", 0),
            theory=selection.get("theory", 0),
        )
    except ValueError as e:
        raise ValidationError(f"Invalid selection in {path.name}: {e}", path="selection") from e
    return pool, plan


def save_pool_json(pool: QuestionPool, plan: SelectionPlan, path: Path) -> None:
    """
    Save a pool and its selection plan to a JSON file.

    Args:
        pool: Pool to save
        plan: Selection plan to save alongside
        path: Destination path (parent directories are created)
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "version": POOL_FILE_VERSION,
        "pool": serialize_pool(pool),
        "selection": {"objective": plan.objective, "theory": plan.theory},
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
