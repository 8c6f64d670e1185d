"""
Tests for the quiz schema validator.

The validator accumulates every problem so a creator can fix them all at
once, and never raises for a bad quiz.
"""

import pytest

from quizmark.core import QuizValidationError, ValidationResult, ensure_valid, validate_quiz
from quizmark.models import Quiz


class TestValidQuiz:
    """A well-formed quiz passes."""

    def test_sample_quiz_is_valid(self, sample_quiz):
        result = validate_quiz(sample_quiz)

        assert result.valid is True
        assert result.errors == []
        assert result.to_dict() == {"valid": True}

    def test_accepts_parsed_quiz(self, sample_quiz):
        assert validate_quiz(Quiz.from_document(sample_quiz)).valid


class TestErrorAccumulation:
    """Every defect is reported, not only the first."""

    def test_empty_title_and_one_option_mcq(self, mcq_question):
        mcq_question["options"] = ["Only"]
        mcq_question["correct"] = "0"
        result = validate_quiz({"title": "  ", "questions": [mcq_question]})

        assert result.valid is False
        assert "Quiz title is required" in result.errors
        assert "Question 1 needs at least 2 options" in result.errors
        assert len(result.errors) >= 2

    def test_to_dict_lists_errors(self):
        result = validate_quiz({"title": "", "questions": []})

        assert result.to_dict() == {
            "valid": False,
            "errors": ["Quiz title is required", "Please add at least one question"],
        }

    def test_errors_labelled_by_position(self, mcq_question, true_false_question):
        true_false_question["text"] = ""
        result = validate_quiz({"title": "T", "questions": [mcq_question, true_false_question]})

        assert result.errors == ["Question 2 is missing text"]


class TestQuestionRules:
    """Type-specific rules."""

    def _errors(self, question):
        return validate_quiz({"title": "T", "questions": [question]}).errors

    def test_mcq_correct_out_of_range(self, mcq_question):
        mcq_question["correct"] = "3"
        assert self._errors(mcq_question) == ["Question 1 has correct answer 3 but only 3 options"]

    def test_mcq_missing_correct(self, mcq_question):
        mcq_question["correct"] = ""
        assert self._errors(mcq_question) == ["Question 1 is missing a correct answer"]

    def test_blank_option(self, mcq_question):
        mcq_question["options"] = ["Venus", "", "Jupiter"]
        assert self._errors(mcq_question) == ["Question 1, Option 2 is missing text"]

    def test_zero_points(self, mcq_question):
        mcq_question["points"] = 0
        assert self._errors(mcq_question) == ["Question 1 must be worth at least 1 point"]

    def test_true_false_correct_must_be_zero_or_one(self, true_false_question):
        true_false_question["correct"] = "2"
        assert self._errors(true_false_question) == [
            "Question 1 must have True (0) or False (1) as its correct answer"
        ]

    def test_true_false_needs_two_options(self, true_false_question):
        true_false_question["options"] = ["Yes", "No", "Maybe"]
        assert self._errors(true_false_question) == ["Question 1 must have exactly 2 options"]

    def test_checkbox_needs_correct_answers(self, checkbox_question):
        checkbox_question["correct"] = []
        assert self._errors(checkbox_question) == ["Question 1 needs at least one correct answer"]

    def test_checkbox_out_of_range(self, checkbox_question):
        checkbox_question["correct"] = ["0", "7"]
        assert self._errors(checkbox_question) == [
            "Question 1 has correct answers [7] but only 4 options"
        ]

    def test_text_input_needs_non_blank_answer(self, text_input_question):
        text_input_question["correct"] = ["", "   "]
        assert self._errors(text_input_question) == ["Question 1 is missing correct answer(s)"]

    def test_text_input_answer_limit(self, text_input_question):
        text_input_question["correct"] = [f"answer {i}" for i in range(8)]
        assert self._errors(text_input_question) == ["Question 1 accepts at most 7 answers"]

    def test_unknown_type(self):
        errors = self._errors({"type": "essay", "text": "Discuss.", "points": 1})
        assert errors == ["Question 1 has unsupported type 'essay'"]

    def test_missing_type(self):
        assert self._errors({"text": "Untyped"}) == ["Question 1 is missing a question type"]

    def test_malformed_question(self, mcq_question):
        mcq_question["correct"] = "B"
        errors = self._errors(mcq_question)

        assert len(errors) == 1
        assert errors[0].startswith("Question 1 is malformed:")


class TestParagraphRules:
    """Recursive checks one level deep."""

    def _errors(self, question):
        return validate_quiz({"title": "T", "questions": [question]}).errors

    def test_needs_sub_questions(self, paragraph_question):
        paragraph_question["subQuestions"] = []
        assert self._errors(paragraph_question) == [
            "Question 1 (paragraph) needs at least one sub-question"
        ]

    def test_sub_question_errors_are_labelled(self, paragraph_question):
        paragraph_question["subQuestions"][0]["options"] = ["Oxygen"]
        paragraph_question["subQuestions"][0]["correct"] = "0"
        assert self._errors(paragraph_question) == [
            "Question 1, Sub-question 1 needs at least 2 options"
        ]

    def test_text_input_sub_question_rejected(self, paragraph_question, text_input_question):
        paragraph_question["subQuestions"].append(text_input_question)
        assert self._errors(paragraph_question) == [
            "Question 1, Sub-question 3 has type 'text_input' but sub-questions "
            "must be one of: checkbox, mcq, true_false"
        ]


class TestQuizSettings:
    """Settings sanity checks."""

    def test_negative_time_limit(self, sample_quiz):
        sample_quiz["timeLimit"] = -5
        assert validate_quiz(sample_quiz).errors == ["Time limit cannot be negative"]

    def test_passing_score_range(self, sample_quiz):
        sample_quiz["settings"] = {"passingScore": 120}
        assert validate_quiz(sample_quiz).errors == ["Passing score must be between 0 and 100"]


class TestStructuralFailures:
    """Documents that are not quizzes at all."""

    def test_non_mapping_reports_single_error(self):
        result = validate_quiz("quiz")

        assert result.valid is False
        assert len(result.errors) == 1
        assert "mapping" in result.errors[0]


class TestEnsureValid:
    """Fail-fast variant."""

    def test_returns_parsed_quiz(self, sample_quiz):
        quiz = ensure_valid(sample_quiz)

        assert isinstance(quiz, Quiz)
        assert quiz.title == "General Knowledge"

    def test_raises_with_all_errors(self):
        with pytest.raises(QuizValidationError) as exc_info:
            ensure_valid({"title": "", "questions": []})

        assert exc_info.value.errors == ["Quiz title is required", "Please add at least one question"]
        assert isinstance(exc_info.value, ValueError)

    def test_validation_result_defaults(self):
        assert ValidationResult(valid=True).errors == []
