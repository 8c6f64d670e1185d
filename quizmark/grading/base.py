"""
Base protocol and types for question handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from pydantic import ConfigDict

from quizmark.grading.similarity import SimilarityStrategy, keyword_overlap
from quizmark.models import ChoiceQuestion, QuizModel

NOT_ANSWERED = "Not answered"

DEFAULT_PRECISION = 2


class GradeStatus(str, Enum):
    """How a question was handled by the scorer."""

    GRADED = "graded"
    UNANSWERED = "unanswered"
    UNSUPPORTED_TYPE = "unsupported_type"
    MALFORMED_QUESTION = "malformed_question"


class QuestionResult(QuizModel):
    """
    Outcome of grading one question.

    is_correct means fully correct. A partially credited answer has
    points_earned > 0 and is_correct False.
    """

    model_config = ConfigDict(frozen=True)

    question_index: int = 0
    question_type: str
    status: GradeStatus
    is_correct: bool = False
    points_earned: float = 0.0
    points_possible: int = 0
    selected_answer: Any = None
    selected_text: str = NOT_ANSWERED
    correct_answer: Any = None
    correct_text: str = ""
    similarity: float | None = None  # text_input only
    sub_questions: tuple[QuestionResult, ...] | None = None  # paragraph only
    explanation: str = ""

    @property
    def answered(self) -> bool:
        return self.selected_answer is not None


@dataclass(frozen=True)
class GradingPolicy:
    """Scoring knobs that are not part of the quiz document."""

    similarity: SimilarityStrategy = keyword_overlap
    precision: int = DEFAULT_PRECISION


class QuestionHandler(Protocol):
    """Protocol for question type handlers."""

    def validate(self, question: Any, label: str) -> list[str]:
        """Return every problem with the question's type-specific fields."""
        ...

    def grade(self, question: Any, answer: Any, policy: GradingPolicy) -> QuestionResult:
        """Grade a raw learner answer. Never raises on malformed answers."""
        ...


def is_unanswered(answer: Any) -> bool:
    """Absent, null, blank and empty payloads all mean unanswered."""
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    if isinstance(answer, (list, tuple, set, frozenset, dict)):
        return len(answer) == 0
    return False


def award(points: int, ratio: float, precision: int) -> float:
    """Points for a ratio of credit, clamped to [0, points]."""
    ratio = min(max(ratio, 0.0), 1.0)
    return round(max(points, 0) * ratio, precision)


def option_text(question: ChoiceQuestion, index: int) -> str:
    """Display text of an option, falling back to its number."""
    if 0 <= index < len(question.options):
        return question.options[index].text or f"Option {index + 1}"
    return str(index)


def validate_common(question: Any, label: str) -> list[str]:
    """Checks every question type shares."""
    errors = []
    if not question.text.strip():
        errors.append(f"{label} is missing text")
    if question.points < 1:
        errors.append(f"{label} must be worth at least 1 point")
    return errors


def validate_options(question: ChoiceQuestion, label: str) -> list[str]:
    """At least two options, none of them blank."""
    errors = []
    if len(question.options) < 2:
        errors.append(f"{label} needs at least 2 options")
    for position, option in enumerate(question.options, start=1):
        if not option.text.strip():
            errors.append(f"{label}, Option {position} is missing text")
    return errors


def unscoreable_result(question: Any, status: GradeStatus, answer: Any = None) -> QuestionResult:
    """Zero-credit result for a question that cannot be graded."""
    return QuestionResult(
        question_type=question.type or "unknown",
        status=status,
        points_possible=question.max_points,
        selected_answer=None if is_unanswered(answer) else answer,
        selected_text=NOT_ANSWERED if is_unanswered(answer) else str(answer),
        correct_text="",
        explanation=question.explanation,
    )
