"""
Attempt result export (CSV download and JSON-ready dict).
"""

from __future__ import annotations

import csv
import io
from typing import Any

from quizmark.core.scorer import AttemptResult
from quizmark.models import Quiz

CSV_HEADERS = ("Question", "Answer", "Correct", "Points")


def _question_texts(quiz: Quiz | None, count: int) -> list[str]:
    if quiz is None:
        return [f"Question {index + 1}" for index in range(count)]
    texts = [q.text or f"Question {index + 1}" for index, q in enumerate(quiz.questions)]
    return texts + [f"Question {index + 1}" for index in range(len(texts), count)]


def export_csv(result: AttemptResult, quiz: Quiz | None = None) -> str:
    """
    Render a result as CSV: one row per question.

    Question text comes from the quiz when given, otherwise "Question N".
    """
    texts = _question_texts(quiz, len(result.questions))
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for question in result.questions:
        writer.writerow(
            [
                texts[question.question_index],
                question.selected_text,
                "Yes" if question.is_correct else "No",
                f"{question.points_earned:g}/{question.points_possible}",
            ]
        )
    return buffer.getvalue()


def export_result(result: AttemptResult) -> dict[str, Any]:
    """Result as a JSON-ready dict with camelCase keys."""
    return result.model_dump(mode="json", by_alias=True)
