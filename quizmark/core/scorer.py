"""
Attempt Scorer - Deterministic scoring of one learner attempt.

score_attempt() is a pure function of its arguments: no storage, no clock
and no randomness, so scoring the same attempt twice gives identical
results and concurrent calls need no coordination.

Learner answers are never an error. Missing, null, empty and unparseable
answers all count as unanswered, and answers for question indices that do
not exist are ignored. Only a quiz document that is not a quiz at all
raises (QuizStructureError); a single broken question is scored zero.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from loguru import logger
from pydantic import ConfigDict, field_validator

from quizmark.grading import grade_question
from quizmark.grading.base import DEFAULT_PRECISION, GradingPolicy, QuestionResult
from quizmark.grading.similarity import SimilarityStrategy, keyword_overlap
from quizmark.models import Quiz, QuizModel, parse_index


class AttemptResult(QuizModel):
    """
    Scored attempt. Created once per submission and never mutated.

    `questions` is parallel to the quiz's questions.
    """

    model_config = ConfigDict(frozen=True)

    score: float = 0.0
    total_points: int = 0
    percentage: int = 0
    elapsed_seconds: float = 0.0
    question_count: int = 0
    answered_count: int = 0
    correct_count: int = 0
    passed: bool | None = None
    questions: tuple[QuestionResult, ...] = ()

    @field_validator("elapsed_seconds", mode="before")
    @classmethod
    def default_elapsed(cls, value: Any) -> Any:
        return 0.0 if value is None else value


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(repr(float(value))).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calculate_percentage(score: float, total_points: float) -> int:
    """
    Score as a whole percentage, rounded half-up and clamped to [0, 100].

    Zero total points gives 0 rather than a division error.
    """
    if total_points <= 0 or not math.isfinite(score):
        return 0
    ratio = Decimal(repr(float(score))) / Decimal(repr(float(total_points))) * 100
    percentage = int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return min(max(percentage, 0), 100)


def normalize_answers(answers: Any) -> dict[int, Any]:
    """
    Map question index to raw answer payload.

    Keys may be ints or numeric strings. A list is read positionally.
    Anything else is an empty submission.
    """
    if isinstance(answers, (list, tuple)):
        return dict(enumerate(answers))
    if not isinstance(answers, Mapping):
        if answers is not None:
            logger.debug(f"Ignoring answers of type {type(answers).__name__}")
        return {}
    normalized = {}
    for key, value in answers.items():
        index = parse_index(key)
        if index is None:
            logger.debug(f"Ignoring answer with non-index key {key!r}")
            continue
        normalized[index] = value
    return normalized


def score_attempt(
    quiz: Quiz | Mapping[str, Any],
    answers: Any,
    elapsed_seconds: float | None = 0,
    *,
    similarity: SimilarityStrategy | None = None,
    precision: int = DEFAULT_PRECISION,
) -> AttemptResult:
    """
    Score a learner's answers against a quiz.

    Args:
        quiz: Quiz model or stored quiz document
        answers: {question index: answer payload}
        elapsed_seconds: Time the learner took, copied into the result
            (None when the caller did not measure it, recorded as 0)
        similarity: Partial-credit strategy for text answers
            (keyword overlap by default)
        precision: Decimal places awarded points are rounded to

    Returns:
        AttemptResult

    Raises:
        QuizStructureError: the quiz document cannot be read as a quiz
    """
    parsed = Quiz.from_document(quiz)
    submitted = normalize_answers(answers)
    policy = GradingPolicy(similarity=similarity or keyword_overlap, precision=precision)

    unknown = sorted(index for index in submitted if index >= len(parsed.questions))
    if unknown:
        logger.debug(f"Ignoring answers for unknown question indices {unknown}")

    results = []
    for index, question in enumerate(parsed.questions):
        result = grade_question(question, submitted.get(index), policy)
        result = result.model_copy(update={"question_index": index})
        logger.debug(
            f"Question {index + 1} ({result.question_type}): "
            f"{result.points_earned}/{result.points_possible} [{result.status.value}]"
        )
        results.append(result)

    total_points = sum(result.points_possible for result in results)
    score = round(sum(result.points_earned for result in results), precision)
    percentage = calculate_percentage(score, total_points)

    passing_score = parsed.settings.passing_score
    passed = percentage >= passing_score if passing_score > 0 else None

    return AttemptResult(
        score=score,
        total_points=total_points,
        percentage=percentage,
        elapsed_seconds=elapsed_seconds,
        question_count=len(results),
        answered_count=sum(1 for result in results if result.answered),
        correct_count=sum(1 for result in results if result.is_correct),
        passed=passed,
        questions=tuple(results),
    )
