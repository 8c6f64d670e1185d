"""
Paragraph question handler.

A paragraph is a passage followed by choice sub-questions. Each
sub-question is graded on its own with its own points; the paragraph earns
the sum and is correct only when every sub-question is.

The answer payload maps sub-question index (int or numeric string) to that
sub-question's answer. A plain list is read positionally.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from quizmark.models import (
    SUB_QUESTION_TYPES,
    ParagraphQuestion,
    QuestionType,
    UnsupportedQuestion,
    parse_index,
)

from . import grade_question, register, validate_question
from .base import NOT_ANSWERED, GradeStatus, GradingPolicy, QuestionResult, is_unanswered


def _sub_answers(answer: Any) -> dict[int, Any]:
    """Normalize the sub-answer payload to {sub-question index: answer}."""
    if isinstance(answer, (list, tuple)):
        return dict(enumerate(answer))
    if not isinstance(answer, Mapping):
        return {}
    answers = {}
    for key, value in answer.items():
        index = parse_index(key)
        if index is not None:
            answers[index] = value
    return answers


@register(QuestionType.PARAGRAPH)
class ParagraphHandler:
    """Handler for passage questions with nested sub-questions."""

    def validate(self, question: ParagraphQuestion, label: str) -> list[str]:
        if not question.sub_questions:
            return [f"{label} (paragraph) needs at least one sub-question"]

        errors = []
        allowed = ", ".join(t.value for t in sorted(SUB_QUESTION_TYPES, key=lambda t: t.value))
        for position, sub in enumerate(question.sub_questions, start=1):
            sub_label = f"{label}, Sub-question {position}"
            if isinstance(sub, UnsupportedQuestion):
                errors.append(
                    f"{sub_label} has type '{sub.type or 'missing'}' "
                    f"but sub-questions must be one of: {allowed}"
                )
                continue
            errors.extend(validate_question(sub, sub_label))
        return errors

    def grade(self, question: ParagraphQuestion, answer: Any, policy: GradingPolicy) -> QuestionResult:
        """Grade each sub-question and add up the points."""
        if not question.sub_questions:
            logger.warning("paragraph question has no sub-questions, scored zero")
            return QuestionResult(
                question_type=question.type,
                status=GradeStatus.MALFORMED_QUESTION,
                points_possible=0,
                selected_answer=None if is_unanswered(answer) else answer,
                correct_text="See sub-questions",
                explanation=question.explanation,
            )

        answers = _sub_answers(answer)
        results = tuple(
            grade_question(sub, answers.get(index), policy).model_copy(update={"question_index": index})
            for index, sub in enumerate(question.sub_questions)
        )

        answered = {r.question_index: r.selected_answer for r in results if r.answered}
        earned = round(sum(r.points_earned for r in results), policy.precision)
        is_correct = all(r.is_correct for r in results)

        return QuestionResult(
            question_type=question.type,
            status=GradeStatus.GRADED if answered else GradeStatus.UNANSWERED,
            is_correct=is_correct,
            points_earned=earned,
            points_possible=question.max_points,
            selected_answer=answered or None,
            selected_text=(
                f"{len(answered)} of {len(results)} sub-questions answered" if answered else NOT_ANSWERED
            ),
            correct_answer={r.question_index: r.correct_answer for r in results},
            correct_text="See sub-questions",
            sub_questions=results,
            explanation=question.explanation,
        )
