"""
Quiz Module - Collaborators around the scorer.

Components:
- attempt_store: Immutable attempt records (memory and JSON file stores)
- submission: Retake rules, idempotent submit, quiz timer
- leaderboard: Ranking and summary statistics
- analytics: Score distribution and per-question statistics
- export: CSV and dict export of a result
"""

from quizmark.quiz.analytics import (
    SCORE_BUCKETS,
    PerformanceLevel,
    QuestionStatistics,
    QuizAnalytics,
    score_bucket,
    summarize_attempts,
)
from quizmark.quiz.attempt_store import (
    AttemptRecord,
    AttemptStore,
    InMemoryAttemptStore,
    JsonAttemptStore,
)
from quizmark.quiz.export import export_csv, export_result
from quizmark.quiz.leaderboard import (
    LeaderboardEntry,
    LeaderboardStatistics,
    leaderboard_statistics,
    rank_attempts,
)
from quizmark.quiz.submission import (
    Learner,
    RetakeNotAllowedError,
    is_time_expired,
    new_attempt_id,
    submit_attempt,
    time_remaining,
)

__all__ = [
    # Storage
    "AttemptRecord",
    "AttemptStore",
    "InMemoryAttemptStore",
    "JsonAttemptStore",
    # Submission
    "Learner",
    "RetakeNotAllowedError",
    "is_time_expired",
    "new_attempt_id",
    "submit_attempt",
    "time_remaining",
    # Leaderboard
    "LeaderboardEntry",
    "LeaderboardStatistics",
    "leaderboard_statistics",
    "rank_attempts",
    # Analytics
    "SCORE_BUCKETS",
    "PerformanceLevel",
    "QuestionStatistics",
    "QuizAnalytics",
    "score_bucket",
    "summarize_attempts",
    # Export
    "export_csv",
    "export_result",
]
