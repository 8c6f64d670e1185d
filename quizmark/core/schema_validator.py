"""
Quiz Schema Validator - Reject malformed quizzes before they are published.

Philosophy:
- A creator should see every problem at once, so checks accumulate
  instead of stopping at the first failure
- validate_quiz() never raises; ensure_valid() is the fail-fast variant
  for creation paths
- Each question type declares its own rules in its grading handler
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from quizmark.grading import validate_question
from quizmark.models import Quiz, QuizStructureError


@dataclass
class ValidationResult:
    """Outcome of validating one quiz."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary: {"valid": true} or {"valid": false, "errors": [...]}."""
        if self.valid:
            return {"valid": True}
        return {"valid": False, "errors": list(self.errors)}


class QuizValidationError(ValueError):
    """Raised when a quiz fails validation on a fail-fast path."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(
            f"Quiz has {len(self.errors)} problem(s): " + "; ".join(self.errors)
        )


def _settings_errors(quiz: Quiz) -> list[str]:
    errors = []
    if quiz.time_limit < 0:
        errors.append("Time limit cannot be negative")
    if quiz.settings.max_attempts < 0:
        errors.append("Maximum attempts cannot be negative")
    if not 0 <= quiz.settings.passing_score <= 100:
        errors.append("Passing score must be between 0 and 100")
    return errors


def validate_quiz(quiz: Quiz | Mapping[str, Any] | Any) -> ValidationResult:
    """
    Validate a quiz definition.

    Checks, in order: title, presence of questions, then every question
    (text, points and its type's own rules, recursing one level into
    paragraph sub-questions).

    Returns:
        ValidationResult with all problems found
    """
    try:
        parsed = Quiz.from_document(quiz)
    except QuizStructureError as exc:
        logger.debug(f"Quiz rejected before field checks: {exc}")
        return ValidationResult(valid=False, errors=[str(exc)])

    errors: list[str] = []

    if not parsed.title.strip():
        errors.append("Quiz title is required")

    if not parsed.questions:
        errors.append("Please add at least one question")

    for position, question in enumerate(parsed.questions, start=1):
        errors.extend(validate_question(question, f"Question {position}"))

    errors.extend(_settings_errors(parsed))

    if errors:
        logger.debug(f"Quiz {parsed.title!r} failed validation with {len(errors)} error(s)")
    return ValidationResult(valid=not errors, errors=errors)


def ensure_valid(quiz: Quiz | Mapping[str, Any]) -> Quiz:
    """
    Validate and return the parsed quiz.

    Raises:
        QuizValidationError: if any problem was found
    """
    result = validate_quiz(quiz)
    if not result.valid:
        raise QuizValidationError(result.errors)
    return Quiz.from_document(quiz)
