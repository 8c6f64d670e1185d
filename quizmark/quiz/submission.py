"""
Attempt submission - score, enforce retake rules, store.

The scorer itself ignores quiz settings. This module is where
allowRetakes and maxAttempts are honored and where configured scoring
knobs (similarity strategy, precision) are turned into scorer arguments.
"""

from __future__ import annotations

import math
import threading
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from loguru import logger

from config import Settings, get_settings
from quizmark.core.scorer import score_attempt
from quizmark.grading.similarity import get_strategy
from quizmark.models import Quiz
from quizmark.quiz.attempt_store import AttemptRecord, AttemptStore


class RetakeNotAllowedError(Exception):
    """Raised when a learner may not start another attempt."""

    def __init__(self, quiz_id: str, user_id: str, reason: str):
        self.quiz_id = quiz_id
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"User {user_id} cannot attempt quiz {quiz_id}: {reason}")


@dataclass(frozen=True)
class Learner:
    """The person submitting an attempt."""

    user_id: str
    display_name: str = "Anonymous"


# Serializes the retake check and the save within this process
_submit_lock = threading.Lock()


def new_attempt_id() -> str:
    """Generate an attempt id suitable for every store."""
    return uuid.uuid4().hex


def _check_retakes(quiz_id: str, quiz: Quiz, learner: Learner, store: AttemptStore) -> None:
    previous = [r for r in store.list_for_quiz(quiz_id) if r.user_id == learner.user_id]
    if not previous:
        return
    if not quiz.settings.allow_retakes:
        raise RetakeNotAllowedError(quiz_id, learner.user_id, "retakes are disabled")
    max_attempts = quiz.settings.max_attempts
    if max_attempts > 0 and len(previous) >= max_attempts:
        raise RetakeNotAllowedError(
            quiz_id, learner.user_id, f"maximum of {max_attempts} attempt(s) reached"
        )


def submit_attempt(
    quiz_id: str,
    quiz: Quiz | Mapping[str, Any],
    learner: Learner,
    answers: Any,
    elapsed_seconds: float,
    store: AttemptStore,
    *,
    attempt_id: Optional[str] = None,
    settings: Optional[Settings] = None,
    completed_at: Optional[datetime] = None,
) -> AttemptRecord:
    """
    Score and store one attempt.

    Concurrent submissions in one process are serialized, so two first
    attempts by the same learner cannot both pass a no-retakes check.
    Separate processes sharing a JsonAttemptStore are not coordinated:
    the retake rules hold only when a single process submits.

    Args:
        quiz_id: Identifier of the quiz in the caller's catalog
        quiz: Quiz model or stored quiz document
        learner: Who is submitting
        answers: {question index: answer payload}
        elapsed_seconds: Time taken, as measured by the caller
        store: Where attempts live
        attempt_id: Client-supplied id; resubmitting the same id returns
            the stored record without scoring again
        settings: Scoring settings (defaults to get_settings())
        completed_at: Completion time (defaults to now, UTC)

    Returns:
        The stored AttemptRecord

    Raises:
        RetakeNotAllowedError: retakes are disabled or the attempt limit is reached
        QuizStructureError: the quiz document cannot be read as a quiz
    """
    with _submit_lock:
        if attempt_id is not None:
            existing = store.load(attempt_id)
            if existing is not None:
                logger.info(f"Attempt {attempt_id} was already submitted, returning stored result")
                return existing

        parsed = Quiz.from_document(quiz)
        _check_retakes(quiz_id, parsed, learner, store)

        settings = settings or get_settings()
        result = score_attempt(
            parsed,
            answers,
            elapsed_seconds,
            similarity=get_strategy(settings.text_similarity, settings.fuzzy_threshold),
            precision=settings.points_precision,
        )

        record = AttemptRecord(
            attempt_id=attempt_id or new_attempt_id(),
            quiz_id=quiz_id,
            user_id=learner.user_id,
            user_name=learner.display_name,
            result=result,
            completed_at=completed_at or datetime.now(timezone.utc),
        )
        logger.info(
            f"User {learner.user_id} scored {result.score}/{result.total_points} "
            f"({result.percentage}%) on quiz {quiz_id}"
        )
        return store.save(record)


def time_remaining(time_limit_minutes: float, elapsed_seconds: float) -> Optional[int]:
    """
    Seconds left on the quiz timer.

    Returns None when the quiz has no time limit. Never negative.
    """
    if time_limit_minutes <= 0:
        return None
    remaining = time_limit_minutes * 60 - elapsed_seconds
    return max(0, math.ceil(remaining))


def is_time_expired(time_limit_minutes: float, elapsed_seconds: float) -> bool:
    """True once a timed quiz has run out. Untimed quizzes never expire."""
    remaining = time_remaining(time_limit_minutes, elapsed_seconds)
    return remaining is not None and remaining <= 0
