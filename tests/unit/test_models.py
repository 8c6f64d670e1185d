"""
Tests for quiz document parsing.

Stored documents are loosely typed (numeric strings for indices, plain
strings for options, missing flags). Parsing normalizes them once so the
graders only ever see typed values.
"""

import pytest

from quizmark.models import (
    CheckboxQuestion,
    MalformedQuestion,
    McqQuestion,
    ParagraphQuestion,
    Quiz,
    QuizStructureError,
    TextInputQuestion,
    TrueFalseQuestion,
    UnsupportedQuestion,
    parse_index,
    parse_question,
)


class TestParseIndex:
    """Option index normalization."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0, 0), (3, 3), ("2", 2), (" 1 ", 1), (2.0, 2)],
    )
    def test_accepts_indices(self, value, expected):
        assert parse_index(value) == expected

    @pytest.mark.parametrize("value", [True, False, -1, "-1", "1.5", 1.5, "abc", "", None, [1], "²"])
    def test_rejects_non_indices(self, value):
        assert parse_index(value) is None


class TestParseQuestion:
    """Variant selection from the type tag."""

    def test_mcq_string_options_and_index(self, mcq_question):
        question = parse_question(mcq_question)

        assert isinstance(question, McqQuestion)
        assert [o.text for o in question.options] == ["Venus", "Mars", "Jupiter"]
        assert question.correct == 1
        assert question.points == 5

    def test_type_tag_is_case_insensitive(self, mcq_question):
        mcq_question["type"] = " MCQ "
        assert isinstance(parse_question(mcq_question), McqQuestion)

    def test_checkbox_correct_is_sorted_unique(self, checkbox_question):
        checkbox_question["correct"] = ["2", 0, "2"]
        question = parse_question(checkbox_question)

        assert isinstance(question, CheckboxQuestion)
        assert question.correct == [0, 2]
        assert question.allow_partial_credit is False

    def test_true_false_defaults_options(self, true_false_question):
        question = parse_question(true_false_question)

        assert isinstance(question, TrueFalseQuestion)
        assert [o.text for o in question.options] == ["True", "False"]
        assert question.correct == 0

    @pytest.mark.parametrize("raw,expected", [(True, 0), (False, 1), ("true", 0), ("False", 1), ("1", 1)])
    def test_true_false_correct_forms(self, true_false_question, raw, expected):
        true_false_question["correct"] = raw
        assert parse_question(true_false_question).correct == expected

    def test_text_input_single_string_becomes_list(self, text_input_question):
        text_input_question["correct"] = "Paris"
        question = parse_question(text_input_question)

        assert isinstance(question, TextInputQuestion)
        assert question.correct == ["Paris"]

    def test_text_input_blank_answers_not_accepted(self, text_input_question):
        text_input_question["correct"] = ["Paris", "  ", ""]
        assert parse_question(text_input_question).accepted_answers == ["Paris"]

    def test_missing_points_default_to_one(self, mcq_question):
        del mcq_question["points"]
        assert parse_question(mcq_question).points == 1

    def test_unknown_type_is_unsupported(self):
        question = parse_question({"type": "essay", "text": "Discuss.", "points": 3})

        assert isinstance(question, UnsupportedQuestion)
        assert question.type == "essay"
        assert question.max_points == 3

    def test_missing_type_is_unsupported(self):
        question = parse_question({"text": "No type"})

        assert isinstance(question, UnsupportedQuestion)
        assert question.type == ""

    def test_unknown_type_with_bad_fields_stays_unsupported(self):
        question = parse_question({"type": "essay", "text": "Discuss.", "points": 2.5, "images": 7})

        assert isinstance(question, UnsupportedQuestion)
        assert question.type == "essay"
        assert question.text == "Discuss."
        assert question.points == 2

    def test_non_index_correct_is_malformed(self, mcq_question):
        mcq_question["correct"] = "B"
        question = parse_question(mcq_question)

        assert isinstance(question, MalformedQuestion)
        assert question.type == "mcq"
        assert question.points == 5
        assert "correct" in question.reason

    def test_non_mapping_is_malformed(self):
        question = parse_question("What is 2 + 2?")

        assert isinstance(question, MalformedQuestion)
        assert question.reason == "question must be an object"

    def test_parse_question_never_raises_on_bad_options(self, mcq_question):
        mcq_question["options"] = 42
        assert isinstance(parse_question(mcq_question), MalformedQuestion)


class TestParagraphParsing:
    """Sub-question handling."""

    def test_sub_questions_are_typed(self, paragraph_question):
        question = parse_question(paragraph_question)

        assert isinstance(question, ParagraphQuestion)
        assert isinstance(question.sub_questions[0], McqQuestion)
        assert isinstance(question.sub_questions[1], TrueFalseQuestion)

    def test_worth_sum_of_sub_question_points(self, paragraph_question):
        assert parse_question(paragraph_question).max_points == 5

    def test_text_input_sub_question_is_unsupported(self, paragraph_question, text_input_question):
        paragraph_question["subQuestions"].append(text_input_question)
        question = parse_question(paragraph_question)

        assert isinstance(question.sub_questions[2], UnsupportedQuestion)
        assert question.sub_questions[2].type == "text_input"

    def test_nested_paragraph_is_unsupported(self, paragraph_question):
        nested = dict(paragraph_question)
        paragraph_question["subQuestions"] = [nested]
        question = parse_question(paragraph_question)

        assert isinstance(question.sub_questions[0], UnsupportedQuestion)

    def test_checkbox_sub_question_partial_credit_disabled(self, paragraph_question, checkbox_question):
        checkbox_question["allowPartialCredit"] = True
        paragraph_question["subQuestions"] = [checkbox_question]
        question = parse_question(paragraph_question)

        assert question.sub_questions[0].allow_partial_credit is False


class TestQuiz:
    """Quiz-level parsing."""

    def test_from_document(self, sample_quiz):
        quiz = Quiz.from_document(sample_quiz)

        assert quiz.title == "General Knowledge"
        assert quiz.time_limit == 10
        assert len(quiz.questions) == 5
        assert quiz.total_points == 5 + 4 + 1 + 2 + 5

    def test_from_document_returns_quiz_unchanged(self, sample_quiz):
        quiz = Quiz.from_document(sample_quiz)
        assert Quiz.from_document(quiz) is quiz

    def test_null_fields_take_defaults(self):
        quiz = Quiz.from_document({"title": None, "questions": None, "settings": None, "tags": None})

        assert quiz.title == ""
        assert quiz.questions == []
        assert quiz.tags == []
        assert quiz.settings.allow_retakes is True

    def test_top_level_settings_are_lifted(self):
        quiz = Quiz.from_document({"title": "T", "allowRetakes": False, "maxAttempts": 3})

        assert quiz.settings.allow_retakes is False
        assert quiz.settings.max_attempts == 3

    def test_nested_settings_win(self):
        quiz = Quiz.from_document(
            {"title": "T", "passingScore": 50, "settings": {"passingScore": 70}}
        )
        assert quiz.settings.passing_score == 70

    def test_null_settings_take_defaults(self):
        quiz = Quiz.from_document(
            {
                "title": "T",
                "settings": {"allowRetakes": None, "maxAttempts": None, "passingScore": None, "isPublic": None},
            }
        )

        assert quiz.settings.allow_retakes is True
        assert quiz.settings.max_attempts == 0
        assert quiz.settings.passing_score == 0
        assert quiz.settings.is_public is True

    def test_null_nested_setting_keeps_top_level_value(self):
        quiz = Quiz.from_document({"title": "T", "allowRetakes": False, "settings": {"allowRetakes": None}})
        assert quiz.settings.allow_retakes is False

    def test_fractional_time_limit(self):
        assert Quiz.from_document({"title": "T", "timeLimit": 1.5}).time_limit == 1.5

    def test_unreadable_time_limit_is_untimed(self):
        assert Quiz.from_document({"title": "T", "timeLimit": "soon"}).time_limit == 0

    def test_fractional_max_attempts_truncates(self):
        assert Quiz.from_document({"title": "T", "settings": {"maxAttempts": 2.7}}).settings.max_attempts == 2

    def test_non_mapping_raises(self):
        with pytest.raises(QuizStructureError, match="mapping"):
            Quiz.from_document(["not", "a", "quiz"])

    def test_questions_not_a_list_raises(self):
        with pytest.raises(QuizStructureError, match="questions"):
            Quiz.from_document({"title": "T", "questions": "mcq"})
