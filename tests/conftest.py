import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import cbt_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from cbt_toolkit.core.models import (  # noqa: E402
    Question,
    QuestionOption,
    QuestionPool,
    QuestionType,
)


# Common test fixtures
@pytest.fixture
def make_question():
    """Factory for valid questions: make_question("q1", marks=2, theory=False)."""

    def _make(question_id: str, marks: int = 1, theory: bool = False, text: str = "") -> Question:
        if theory:
            return Question(question_id, QuestionType.THEORY, text or f"Explain {question_id}", marks)
        return Question(
            question_id,
            QuestionType.OBJECTIVE,
            text or f"Pick {question_id}",
            marks,
            options=(QuestionOption("A", True), QuestionOption("B")),
        )

    return _make


@pytest.fixture
def mixed_pool(make_question):
    """Objective marks {1, 3} and uniform theory marks of 5."""
    return QuestionPool(
        objective=(make_question("o1", 1), make_question("o2", 3)),
        theory=(make_question("t1", 5, theory=True), make_question("t2", 5, theory=True)),
    )


@pytest.fixture
def question_json():
    """A question as the exam service returns it."""
    return {
        "_id": "q1",
        "questionType": "Objective",
        "questionText": "What is 2 + 2?",
        "marks": 2,
        "difficulty": "Easy",
        "options": [
            {"text": "3", "isCorrect": False},
            {"text": "4", "isCorrect": True},
        ],
        "subject": {"_id": "s1", "name": "Mathematics"},
        "class": "c1",
        "topic": "Arithmetic",
    }
