"""
Quiz analytics over stored attempts.

Design:
- PerformanceLevel: label for a percentage score
- SCORE_BUCKETS: ten 10% bands, highest first
- summarize_attempts(): everything a creator's dashboard shows
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from quizmark.core.scorer import round_half_up
from quizmark.quiz.attempt_store import AttemptRecord


class PerformanceLevel(str, Enum):
    """Performance label for a percentage score."""

    EXCELLENT = "excellent"  # 90-100%
    GOOD = "good"  # 80-89%
    AVERAGE = "average"  # 70-79%
    BELOW_AVERAGE = "below_average"  # 60-69%
    POOR = "poor"  # 0-59%

    @classmethod
    def from_percentage(cls, percentage: float) -> PerformanceLevel:
        if percentage >= 90:
            return cls.EXCELLENT
        elif percentage >= 80:
            return cls.GOOD
        elif percentage >= 70:
            return cls.AVERAGE
        elif percentage >= 60:
            return cls.BELOW_AVERAGE
        else:
            return cls.POOR

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.replace("_", " ").title()

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            PerformanceLevel.EXCELLENT: "green",
            PerformanceLevel.GOOD: "cyan",
            PerformanceLevel.AVERAGE: "yellow",
            PerformanceLevel.BELOW_AVERAGE: "magenta",
            PerformanceLevel.POOR: "red",
        }[self]


SCORE_BUCKETS = tuple(
    "90-100%" if low == 90 else f"{low}-{low + 9}%" for low in range(90, -1, -10)
)


def score_bucket(percentage: float) -> str:
    """The distribution band a percentage falls in."""
    clamped = min(max(int(percentage), 0), 100)
    low = min(clamped // 10 * 10, 90)
    return SCORE_BUCKETS[(90 - low) // 10]


@dataclass
class QuestionStatistics:
    """How one question performed across attempts."""

    question_index: int
    question_type: str
    attempts: int = 0
    answered: int = 0
    correct: int = 0
    points_earned: float = 0.0
    points_possible: int = 0

    @property
    def correct_rate(self) -> int:
        """Percent of attempts that got the question fully right."""
        return round_half_up(self.correct / self.attempts * 100) if self.attempts else 0

    @property
    def average_points(self) -> float:
        return round(self.points_earned / self.attempts, 2) if self.attempts else 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["correct_rate"] = self.correct_rate
        data["average_points"] = self.average_points
        return data


@dataclass
class QuizAnalytics:
    """Aggregate view of every attempt at one quiz."""

    total_attempts: int = 0
    unique_users: int = 0
    average_score: int = 0  # mean percentage
    average_time: int = 0  # seconds, over timed attempts
    completion_rate: int = 0  # percent of attempts with a recorded time
    distribution: dict[str, int] = field(default_factory=lambda: dict.fromkeys(SCORE_BUCKETS, 0))
    performance: dict[str, int] = field(
        default_factory=lambda: {level.display_name: 0 for level in PerformanceLevel}
    )
    questions: list[QuestionStatistics] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["questions"] = [q.to_dict() for q in self.questions]
        return data


def summarize_attempts(records: Iterable[AttemptRecord]) -> QuizAnalytics:
    """Aggregate stored attempts for one quiz."""
    records = list(records)
    analytics = QuizAnalytics()
    if not records:
        return analytics

    analytics.total_attempts = len(records)
    analytics.unique_users = len({r.user_id for r in records})

    mean_percentage = sum(r.percentage for r in records) / len(records)
    analytics.average_score = min(max(round_half_up(mean_percentage), 0), 100)

    timed = [r.time_taken for r in records if r.time_taken > 0]
    if timed:
        analytics.average_time = round_half_up(sum(timed) / len(timed))
    analytics.completion_rate = round_half_up(len(timed) / len(records) * 100)

    by_index: dict[int, QuestionStatistics] = {}
    for record in records:
        analytics.distribution[score_bucket(record.percentage)] += 1
        analytics.performance[PerformanceLevel.from_percentage(record.percentage).display_name] += 1

        for question in record.result.questions:
            stats = by_index.setdefault(
                question.question_index,
                QuestionStatistics(question.question_index, question.question_type),
            )
            stats.attempts += 1
            stats.answered += int(question.answered)
            stats.correct += int(question.is_correct)
            stats.points_earned += question.points_earned
            stats.points_possible = max(stats.points_possible, question.points_possible)

    analytics.questions = [by_index[index] for index in sorted(by_index)]
    return analytics
