"""
Typer CLI for quizmark.

Commands:
    quizmark validate       - Check a quiz definition and list every problem
    quizmark score          - Score an answers file against a quiz
    quizmark leaderboard    - Show the leaderboard for a quiz from the attempt store

Usage:
    quizmark --help
    quizmark validate quiz.json
    quizmark score quiz.json answers.json --elapsed 312 --similarity fuzzy
    quizmark score quiz.json answers.json --json
    quizmark leaderboard algebra-101 --limit 5
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from quizmark.core import score_attempt, validate_quiz
from quizmark.grading.base import GradeStatus
from quizmark.grading.similarity import STRATEGIES, get_strategy
from quizmark.models import Quiz, QuizStructureError
from quizmark.quiz import JsonAttemptStore, leaderboard_statistics, rank_attempts
from quizmark.quiz.analytics import PerformanceLevel
from quizmark.quiz.export import export_result

app = typer.Typer(
    help="quizmark: validate quizzes and score learner attempts",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{message}</level>")


def _load_json(path: Path, what: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        console.print(f"[red]{what} file not found: {escape(str(path))}[/red]")
        raise typer.Exit(code=1)
    except json.JSONDecodeError as e:
        console.print(f"[red]{what} file is not valid JSON: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Validate quizzes and score learner attempts."""
    _configure_logging("DEBUG" if verbose else get_settings().log_level)


# ========================================
# VALIDATE
# ========================================


@app.command("validate")
def validate_command(
    quiz_file: Path = typer.Argument(..., help="Quiz definition (JSON)"),
):
    """
    Check a quiz definition and print every problem found.
    """
    document = _load_json(quiz_file, "Quiz")
    result = validate_quiz(document)

    if result.valid:
        console.print("[green]Quiz is valid[/green]")
        return

    console.print(f"[red]Quiz has {len(result.errors)} problem(s):[/red]")
    for error in result.errors:
        console.print(f"  [red]-[/red] {escape(error)}")
    raise typer.Exit(code=1)


# ========================================
# SCORE
# ========================================


_STATUS_STYLE = {
    GradeStatus.GRADED: "",
    GradeStatus.UNANSWERED: "dim",
    GradeStatus.UNSUPPORTED_TYPE: "yellow",
    GradeStatus.MALFORMED_QUESTION: "red",
}


@app.command("score")
def score_command(
    quiz_file: Path = typer.Argument(..., help="Quiz definition (JSON)"),
    answers_file: Path = typer.Argument(..., help="Answers keyed by question index (JSON)"),
    elapsed: float = typer.Option(0.0, "--elapsed", "-e", help="Seconds the learner took"),
    similarity: str | None = typer.Option(
        None,
        "--similarity",
        "-s",
        help=f"Text answer strategy: {', '.join(STRATEGIES)} (default: from config)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """
    Score an answers file against a quiz.
    """
    settings = get_settings()
    document = _load_json(quiz_file, "Quiz")
    answers = _load_json(answers_file, "Answers")

    try:
        strategy = get_strategy(similarity or settings.text_similarity, settings.fuzzy_threshold)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    try:
        quiz = Quiz.from_document(document)
    except QuizStructureError as e:
        console.print(f"[red]Cannot score: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    result = score_attempt(
        quiz,
        answers,
        elapsed,
        similarity=strategy,
        precision=settings.points_precision,
    )

    if as_json:
        typer.echo(json.dumps(export_result(result), indent=2))
        return

    table = Table(title=escape(quiz.title) or "Quiz", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Answer")
    table.add_column("Correct answer")
    table.add_column("Points", justify="right")
    table.add_column("Status")

    for question in result.questions:
        mark = "[green]✓[/green]" if question.is_correct else "[red]✗[/red]"
        style = _STATUS_STYLE[question.status]
        status = f"[{style}]{question.status.value}[/{style}]" if style else question.status.value
        table.add_row(
            str(question.question_index + 1),
            question.question_type or "?",
            escape(question.selected_text),
            escape(question.correct_text),
            f"{question.points_earned:g}/{question.points_possible}",
            f"{mark} {status}",
        )

    console.print(table)

    level = PerformanceLevel.from_percentage(result.percentage)
    console.print(
        f"\nScore: [bold]{result.score:g}/{result.total_points}[/bold] "
        f"([{level.color}]{result.percentage}% - {level.display_name}[/{level.color}])"
    )
    console.print(
        f"Answered {result.answered_count} of {result.question_count}, "
        f"{result.correct_count} fully correct"
    )
    if result.passed is not None:
        verdict = "[green]PASSED[/green]" if result.passed else "[red]FAILED[/red]"
        console.print(f"Pass mark {quiz.settings.passing_score:g}%: {verdict}")


# ========================================
# LEADERBOARD
# ========================================


@app.command("leaderboard")
def leaderboard_command(
    quiz_id: str = typer.Argument(..., help="Quiz identifier used when attempts were stored"),
    limit: int | None = typer.Option(None, "--limit", "-l", help="Rows to show (default: from config)"),
    attempts_dir: Path | None = typer.Option(
        None, "--dir", help="Attempt store directory (default: from config)"
    ),
    best: bool = typer.Option(False, "--best", help="Only each user's best attempt"),
):
    """
    Show the leaderboard for a quiz.
    """
    store = JsonAttemptStore(attempts_dir)
    records = store.list_for_quiz(quiz_id)

    if not records:
        console.print(f"[yellow]No attempts found for quiz {quiz_id}[/yellow]")
        return

    entries = rank_attempts(records, limit=limit, best_per_user=best)

    table = Table(title=f"Leaderboard: {quiz_id}", show_header=True)
    table.add_column("Rank", justify="right")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Time", justify="right")

    for entry in entries:
        minutes, seconds = divmod(int(entry.time_taken), 60)
        table.add_row(
            str(entry.rank),
            escape(entry.user_name),
            f"{entry.score:g}/{entry.total_points}",
            f"{entry.percentage}%",
            f"{minutes}:{seconds:02d}",
        )

    console.print(table)

    stats = leaderboard_statistics(records)
    console.print(
        f"\n{stats.total_attempts} attempt(s), average score "
        f"{stats.average_score}/{stats.max_possible_score}"
    )


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
