"""
Single-choice question handlers (MCQ and True/False).

- The answer is one option index, usually sent as a numeric string.
- Correct iff it equals the stored correct index. No partial credit.
"""

from typing import Any

from loguru import logger

from quizmark.models import McqQuestion, QuestionType, TrueFalseQuestion, parse_index

from . import register
from .base import (
    NOT_ANSWERED,
    GradeStatus,
    GradingPolicy,
    QuestionResult,
    is_unanswered,
    option_text,
    validate_options,
)


class SingleChoiceHandler:
    """Shared grading for questions with exactly one correct option."""

    def validate(self, question: McqQuestion | TrueFalseQuestion, label: str) -> list[str]:
        errors = validate_options(question, label)
        if question.correct is None:
            errors.append(f"{label} is missing a correct answer")
        elif question.correct >= len(question.options):
            errors.append(
                f"{label} has correct answer {question.correct} but only "
                f"{len(question.options)} options"
            )
        return errors

    def grade(
        self,
        question: McqQuestion | TrueFalseQuestion,
        answer: Any,
        policy: GradingPolicy,
    ) -> QuestionResult:
        """Check the selected index against the correct one."""
        correct = question.correct
        has_correct = correct is not None and correct < len(question.options)
        correct_text = option_text(question, correct) if has_correct else ""

        selected = None if is_unanswered(answer) else parse_index(answer)
        selected_text = option_text(question, selected) if selected is not None else NOT_ANSWERED

        if not has_correct:
            logger.warning(
                f"{question.type} question has no usable correct answer "
                f"({correct!r} for {len(question.options)} options), scored zero"
            )
            return QuestionResult(
                question_type=question.type,
                status=GradeStatus.MALFORMED_QUESTION,
                points_possible=question.max_points,
                selected_answer=selected,
                selected_text=selected_text,
                correct_answer=correct,
                explanation=question.explanation,
            )

        if selected is None:
            return QuestionResult(
                question_type=question.type,
                status=GradeStatus.UNANSWERED,
                points_possible=question.max_points,
                correct_answer=correct,
                correct_text=correct_text,
                explanation=question.explanation,
            )

        is_correct = selected == correct
        return QuestionResult(
            question_type=question.type,
            status=GradeStatus.GRADED,
            is_correct=is_correct,
            points_earned=float(question.max_points) if is_correct else 0.0,
            points_possible=question.max_points,
            selected_answer=selected,
            selected_text=selected_text,
            correct_answer=correct,
            correct_text=correct_text,
            explanation=question.explanation,
        )


@register(QuestionType.MCQ)
class MCQHandler(SingleChoiceHandler):
    """Handler for multiple choice (single best answer) questions."""

    pass


@register(QuestionType.TRUE_FALSE)
class TrueFalseHandler(SingleChoiceHandler):
    """Handler for true/false questions."""

    def validate(self, question: TrueFalseQuestion, label: str) -> list[str]:
        errors = []
        if len(question.options) != 2:
            errors.append(f"{label} must have exactly 2 options")
        if question.correct is None:
            errors.append(f"{label} is missing a correct answer")
        elif question.correct not in (0, 1):
            errors.append(f"{label} must have True (0) or False (1) as its correct answer")
        return errors
