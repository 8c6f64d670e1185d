"""
Leaderboard ranking over stored attempts.

Ranking: higher score first, then faster time, then earlier completion.
The attempt id breaks any remaining tie so the order is stable.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional

from config import get_settings
from quizmark.core.scorer import round_half_up
from quizmark.quiz.attempt_store import AttemptRecord


@dataclass
class LeaderboardEntry:
    """One ranked row."""

    rank: int
    attempt_id: str
    user_id: str
    user_name: str
    score: float
    total_points: int
    percentage: int
    time_taken: float
    completed_at: datetime
    is_current_user: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["completed_at"] = self.completed_at.isoformat()
        return data


@dataclass
class LeaderboardStatistics:
    """Summary line shown under the leaderboard."""

    total_attempts: int
    average_score: int
    max_possible_score: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _rank_key(record: AttemptRecord) -> tuple:
    return (-record.score, record.time_taken, record.completed_at, record.attempt_id)


def rank_attempts(
    records: Iterable[AttemptRecord],
    *,
    limit: Optional[int] = None,
    current_user_id: Optional[str] = None,
    best_per_user: bool = False,
) -> list[LeaderboardEntry]:
    """
    Rank attempts for display.

    Args:
        records: Attempts for one quiz
        limit: Maximum rows (defaults to the configured leaderboard_limit)
        current_user_id: Flags this user's rows
        best_per_user: Keep only each user's best-ranked attempt

    Returns:
        Entries ranked from 1
    """
    if limit is None:
        limit = get_settings().leaderboard_limit

    ordered = sorted(records, key=_rank_key)
    if best_per_user:
        seen: set[str] = set()
        best = []
        for record in ordered:
            if record.user_id in seen:
                continue
            seen.add(record.user_id)
            best.append(record)
        ordered = best

    return [
        LeaderboardEntry(
            rank=position,
            attempt_id=record.attempt_id,
            user_id=record.user_id,
            user_name=record.user_name,
            score=record.score,
            total_points=record.total_points,
            percentage=record.percentage,
            time_taken=record.time_taken,
            completed_at=record.completed_at,
            is_current_user=current_user_id is not None and record.user_id == current_user_id,
        )
        for position, record in enumerate(ordered[: max(limit, 0)], start=1)
    ]


def leaderboard_statistics(
    records: Iterable[AttemptRecord], max_possible_score: Optional[int] = None
) -> LeaderboardStatistics:
    """Attempt count, rounded mean raw score and the quiz's maximum score."""
    records = list(records)
    if max_possible_score is None:
        max_possible_score = max((r.total_points for r in records), default=0)
    average = round_half_up(sum(r.score for r in records) / len(records)) if records else 0
    return LeaderboardStatistics(
        total_attempts=len(records),
        average_score=average,
        max_possible_score=max_possible_score,
    )
