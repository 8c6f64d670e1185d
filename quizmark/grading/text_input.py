"""
Text input question handler.

Both the learner's answer and every acceptable answer are trimmed, and
lowercased unless the question is case sensitive. Without partial credit
the answer must equal one acceptable answer. With partial credit the
configured similarity strategy decides the fraction of points, while the
correct badge stays reserved for exact matches.
"""

import math
from typing import Any

from loguru import logger

from quizmark.models import MAX_ACCEPTED_ANSWERS, QuestionType, TextInputQuestion

from . import register
from .base import (
    NOT_ANSWERED,
    GradeStatus,
    GradingPolicy,
    QuestionResult,
    award,
    is_unanswered,
)


def _submitted_text(answer: Any) -> str | None:
    """Learner text, or None when nothing usable was submitted."""
    if is_unanswered(answer):
        return None
    if isinstance(answer, str):
        return answer
    if isinstance(answer, (int, float)) and not isinstance(answer, bool):
        return str(answer)
    return None


@register(QuestionType.TEXT_INPUT)
class TextInputHandler:
    """Handler for free-text questions."""

    def validate(self, question: TextInputQuestion, label: str) -> list[str]:
        errors = []
        if not question.accepted_answers:
            errors.append(f"{label} is missing correct answer(s)")
        if len(question.correct) > MAX_ACCEPTED_ANSWERS:
            errors.append(f"{label} accepts at most {MAX_ACCEPTED_ANSWERS} answers")
        return errors

    def grade(self, question: TextInputQuestion, answer: Any, policy: GradingPolicy) -> QuestionResult:
        """Compare normalized text, with optional similarity-based credit."""
        accepted = [self._normalize(text, question.case_sensitive) for text in question.accepted_answers]
        correct_text = " OR ".join(question.accepted_answers)
        submitted = _submitted_text(answer)

        if not accepted:
            logger.warning("text_input question has no acceptable answers, scored zero")
            return QuestionResult(
                question_type=question.type,
                status=GradeStatus.MALFORMED_QUESTION,
                points_possible=question.max_points,
                selected_answer=submitted.strip() if submitted else None,
                selected_text=submitted.strip() if submitted else NOT_ANSWERED,
                correct_answer=list(question.correct),
                explanation=question.explanation,
            )

        if submitted is None:
            return QuestionResult(
                question_type=question.type,
                status=GradeStatus.UNANSWERED,
                points_possible=question.max_points,
                correct_answer=list(question.accepted_answers),
                correct_text=correct_text,
                explanation=question.explanation,
            )

        normalized = self._normalize(submitted, question.case_sensitive)
        is_correct = normalized in accepted

        similarity = None
        if is_correct:
            earned = float(question.max_points)
        elif question.allow_partial_credit:
            similarity = float(policy.similarity(normalized, accepted))
            similarity = min(max(similarity, 0.0), 1.0) if math.isfinite(similarity) else 0.0
            earned = award(question.max_points, similarity, policy.precision)
        else:
            earned = 0.0
        if is_correct and question.allow_partial_credit:
            similarity = 1.0

        return QuestionResult(
            question_type=question.type,
            status=GradeStatus.GRADED,
            is_correct=is_correct,
            points_earned=earned,
            points_possible=question.max_points,
            selected_answer=submitted.strip(),
            selected_text=submitted.strip(),
            correct_answer=list(question.accepted_answers),
            correct_text=correct_text,
            similarity=similarity,
            explanation=question.explanation,
        )

    def _normalize(self, text: str, case_sensitive: bool) -> str:
        text = text.strip()
        return text if case_sensitive else text.lower()
