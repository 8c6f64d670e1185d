"""
quizmark - quiz validation and attempt scoring.

Creators' quizzes are checked by the schema validator before publishing;
learners' attempts are scored by the attempt scorer. Storage, leaderboards
and analytics live in quizmark.quiz and build on the scored results.
"""

from quizmark.core import AttemptResult, ValidationResult, score_attempt, validate_quiz
from quizmark.models import Quiz, QuestionType, QuizStructureError

__version__ = "1.0.0"

__all__ = [
    "AttemptResult",
    "Quiz",
    "QuestionType",
    "QuizStructureError",
    "ValidationResult",
    "score_attempt",
    "validate_quiz",
]
