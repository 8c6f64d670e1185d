"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def mcq_question():
    """Provide a sample multiple choice question."""
    return {
        "type": "mcq",
        "text": "Which planet is known as the Red Planet?",
        "options": ["Venus", "Mars", "Jupiter"],
        "correct": "1",
        "points": 5,
    }


@pytest.fixture
def checkbox_question():
    """Provide a sample select-all question."""
    return {
        "type": "checkbox",
        "text": "Which of these are prime?",
        "options": [{"text": "2"}, {"text": "4"}, {"text": "5"}, {"text": "9"}],
        "correct": ["0", "2"],
        "points": 4,
        "allowPartialCredit": False,
    }


@pytest.fixture
def true_false_question():
    """Provide a sample true/false question."""
    return {
        "type": "true_false",
        "text": "Water boils at 100C at sea level.",
        "correct": "0",
        "points": 1,
    }


@pytest.fixture
def text_input_question():
    """Provide a sample free-text question."""
    return {
        "type": "text_input",
        "text": "What is the capital of France?",
        "correct": ["Paris"],
        "caseSensitive": False,
        "allowPartialCredit": False,
        "points": 2,
    }


@pytest.fixture
def paragraph_question():
    """Provide a sample passage with two sub-questions worth 2 and 3 points."""
    return {
        "type": "paragraph",
        "text": "Read the passage about photosynthesis.",
        "points": 1,
        "subQuestions": [
            {
                "type": "mcq",
                "text": "What gas do plants absorb?",
                "options": ["Oxygen", "Carbon dioxide"],
                "correct": "1",
                "points": 2,
            },
            {
                "type": "true_false",
                "text": "Photosynthesis happens at night only.",
                "correct": "1",
                "points": 3,
            },
        ],
    }


@pytest.fixture
def sample_quiz(mcq_question, checkbox_question, true_false_question, text_input_question, paragraph_question):
    """Provide a valid quiz covering every question type (total 17 points)."""
    return {
        "title": "General Knowledge",
        "description": "A bit of everything",
        "category": "Science",
        "timeLimit": 10,
        "questions": [
            mcq_question,
            checkbox_question,
            true_false_question,
            text_input_question,
            paragraph_question,
        ],
    }


@pytest.fixture
def perfect_answers():
    """Answers that get every question in sample_quiz right."""
    return {
        "0": "1",
        "1": ["2", "0"],
        "2": "0",
        "3": "  PARIS ",
        "4": {"0": "1", "1": "1"},
    }


@pytest.fixture
def make_record():
    """Factory for stored attempts with a chosen score."""
    from quizmark.core import AttemptResult, calculate_percentage
    from quizmark.quiz import AttemptRecord

    base_time = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def _make(
        attempt_id,
        user_id="u1",
        score=5.0,
        total=10,
        time_taken=60.0,
        minutes_after=0,
        quiz_id="quiz-1",
        user_name=None,
        questions=(),
    ):
        result = AttemptResult(
            score=score,
            total_points=total,
            percentage=calculate_percentage(score, total),
            elapsed_seconds=time_taken,
            question_count=len(questions),
            questions=tuple(questions),
        )
        return AttemptRecord(
            attempt_id=attempt_id,
            quiz_id=quiz_id,
            user_id=user_id,
            user_name=user_name or user_id.upper(),
            result=result,
            completed_at=base_time + timedelta(minutes=minutes_after),
        )

    return _make
