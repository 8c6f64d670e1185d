"""
Core Module - Quiz validation and attempt scoring.

Components:
- schema_validator: Collects every problem in a quiz definition
- scorer: Scores one attempt into an immutable AttemptResult

Design Principle:
Collaborators (storage, submission, leaderboards) import from
quizmark.core rather than grading questions themselves.
"""

from quizmark.core.schema_validator import (
    QuizValidationError,
    ValidationResult,
    ensure_valid,
    validate_quiz,
)
from quizmark.core.scorer import (
    AttemptResult,
    calculate_percentage,
    normalize_answers,
    round_half_up,
    score_attempt,
)

__all__ = [
    # Validation
    "QuizValidationError",
    "ValidationResult",
    "ensure_valid",
    "validate_quiz",
    # Scoring
    "AttemptResult",
    "calculate_percentage",
    "normalize_answers",
    "round_half_up",
    "score_attempt",
]
