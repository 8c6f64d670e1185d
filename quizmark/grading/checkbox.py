"""
Checkbox (multi-select) question handler.

Order-independent set comparison of selected option indices. Duplicates in
the submission are ignored. With partial credit enabled the learner earns

    points * (hits - wrong picks) / |correct|

floored at zero, so over-selecting cannot push a question negative.
"""

from typing import Any

from loguru import logger

from quizmark.models import CheckboxQuestion, QuestionType, parse_index

from . import register
from .base import (
    NOT_ANSWERED,
    GradeStatus,
    GradingPolicy,
    QuestionResult,
    award,
    option_text,
    validate_options,
)


def _selection(answer: Any) -> list[int]:
    """Deduplicated, sorted option indices; unparseable entries are dropped."""
    if not isinstance(answer, (list, tuple, set, frozenset)):
        return []
    indices = {parse_index(item) for item in answer}
    indices.discard(None)
    return sorted(indices)


@register(QuestionType.CHECKBOX)
class CheckboxHandler:
    """Handler for select-all-that-apply questions."""

    def validate(self, question: CheckboxQuestion, label: str) -> list[str]:
        errors = validate_options(question, label)
        if not question.correct:
            errors.append(f"{label} needs at least one correct answer")
        else:
            out_of_range = [i for i in question.correct if i >= len(question.options)]
            if out_of_range:
                errors.append(
                    f"{label} has correct answers {out_of_range} but only "
                    f"{len(question.options)} options"
                )
        return errors

    def grade(self, question: CheckboxQuestion, answer: Any, policy: GradingPolicy) -> QuestionResult:
        """Compare the selected set with the correct set."""
        expected = set(question.correct)
        selected = _selection(answer)
        usable = bool(expected) and all(i < len(question.options) for i in expected)

        correct_text = ", ".join(option_text(question, i) for i in question.correct)
        selected_text = ", ".join(option_text(question, i) for i in selected) or NOT_ANSWERED

        if not usable:
            logger.warning(
                f"checkbox question has no usable correct answers "
                f"({question.correct} for {len(question.options)} options), scored zero"
            )
            return QuestionResult(
                question_type=question.type,
                status=GradeStatus.MALFORMED_QUESTION,
                points_possible=question.max_points,
                selected_answer=selected or None,
                selected_text=selected_text,
                correct_answer=list(question.correct),
                explanation=question.explanation,
            )

        if not selected:
            return QuestionResult(
                question_type=question.type,
                status=GradeStatus.UNANSWERED,
                points_possible=question.max_points,
                correct_answer=list(question.correct),
                correct_text=correct_text,
                explanation=question.explanation,
            )

        hits = len(expected.intersection(selected))
        wrong = len(set(selected) - expected)
        is_correct = hits == len(expected) and wrong == 0

        if is_correct:
            earned = float(question.max_points)
        elif question.allow_partial_credit:
            earned = award(question.max_points, (hits - wrong) / len(expected), policy.precision)
        else:
            earned = 0.0

        return QuestionResult(
            question_type=question.type,
            status=GradeStatus.GRADED,
            is_correct=is_correct,
            points_earned=earned,
            points_possible=question.max_points,
            selected_answer=selected,
            selected_text=selected_text,
            correct_answer=list(question.correct),
            correct_text=correct_text,
            explanation=question.explanation,
        )
