"""
Question type handlers for attempt scoring.

Each question type (mcq, checkbox, etc.) has its own module with:
- validate(): List problems with the question's type-specific fields
- grade(): Score a learner's raw answer against the question
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from quizmark.grading.base import (
    GradeStatus,
    GradingPolicy,
    QuestionResult,
    unscoreable_result,
    validate_common,
)
from quizmark.models import MalformedQuestion, QuestionType, UnsupportedQuestion

if TYPE_CHECKING:
    from .base import QuestionHandler


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "QuestionHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question handler."""
    def decorator(cls):
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: str | QuestionType) -> "QuestionHandler | None":
    """Get the handler for a question type."""
    if isinstance(question_type, str) and not isinstance(question_type, QuestionType):
        try:
            question_type = QuestionType(question_type.lower())
        except ValueError:
            return None
    return HANDLERS.get(question_type)


def grade_question(question: Any, answer: Any, policy: GradingPolicy | None = None) -> QuestionResult:
    """Grade one parsed question, scoring unusable questions as zero."""
    policy = policy or GradingPolicy()

    if isinstance(question, MalformedQuestion):
        logger.warning(
            f"Malformed {question.type or 'untyped'} question scored zero: {question.reason}"
        )
        return unscoreable_result(question, GradeStatus.MALFORMED_QUESTION, answer)

    handler = None if isinstance(question, UnsupportedQuestion) else get_handler(question.type)
    if handler is None:
        logger.warning(f"Unsupported question type {question.type!r} scored zero")
        return unscoreable_result(question, GradeStatus.UNSUPPORTED_TYPE, answer)

    return handler.grade(question, answer, policy)


def validate_question(question: Any, label: str) -> list[str]:
    """Collect every problem with one parsed question."""
    if isinstance(question, MalformedQuestion):
        return [f"{label} is malformed: {question.reason}"]
    if isinstance(question, UnsupportedQuestion):
        if not question.type:
            return [f"{label} is missing a question type"]
        return [f"{label} has unsupported type '{question.type}'"]

    handler = get_handler(question.type)
    return validate_common(question, label) + handler.validate(question, label)


# Import handlers to trigger registration
from . import checkbox  # noqa: E402
from . import choice  # noqa: E402
from . import paragraph  # noqa: E402
from . import text_input  # noqa: E402

_unhandled = set(QuestionType) - set(HANDLERS)
if _unhandled:
    raise RuntimeError(
        f"No grading handler registered for: {', '.join(sorted(t.value for t in _unhandled))}"
    )

__all__ = [
    "GradeStatus",
    "GradingPolicy",
    "HANDLERS",
    "QuestionResult",
    "get_handler",
    "grade_question",
    "register",
    "validate_question",
]
