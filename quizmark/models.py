"""
Quiz document models.

Stored quizzes arrive as loosely typed documents: camelCase keys, option
indices as numeric strings, options as bare strings or {text, image}
objects. Everything is normalized here, on ingestion, so grading code only
ever sees ints, sorted index lists and one typed variant per question type.

Problems that only affect a single question never raise. They produce an
UnsupportedQuestion (unknown type) or a MalformedQuestion (fields that
cannot be coerced) so one bad question cannot make a whole quiz unusable.
Only a document that is not a quiz at all raises QuizStructureError.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Mapping
from enum import Enum
from typing import Any, Literal, Union

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class QuestionType(str, Enum):
    """Question types a quiz can contain."""

    MCQ = "mcq"
    CHECKBOX = "checkbox"
    TRUE_FALSE = "true_false"
    TEXT_INPUT = "text_input"
    PARAGRAPH = "paragraph"


# Paragraph questions may only nest choice questions
SUB_QUESTION_TYPES = frozenset({QuestionType.MCQ, QuestionType.CHECKBOX, QuestionType.TRUE_FALSE})

# Creators can list at most this many acceptable answers for a text question
MAX_ACCEPTED_ANSWERS = 7


class QuizStructureError(ValueError):
    """Raised when a quiz document cannot be interpreted as a quiz at all."""

    pass


def parse_index(value: Any) -> int | None:
    """
    Normalize an option index.

    Accepts non-negative ints, integral floats and ASCII digit strings
    (surrounding whitespace allowed). Returns None for anything else,
    booleans included.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and value >= 0:
            return int(value)
        return None
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return None


def _as_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _lenient_number(value: Any, default: float) -> float:
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
        return number if math.isfinite(number) else default
    return default


def _lenient_points(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 1
    if isinstance(value, (int, float)) and math.isfinite(value):
        return max(int(value), 0)
    index = parse_index(value)
    return index if index is not None else 1


class QuizModel(BaseModel):
    """Base for stored documents: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Option(QuizModel):
    """One selectable option of a choice question. Images are opaque URLs."""

    text: str = ""
    image: str | None = None

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


# ============================================================================
# QUESTION VARIANTS
# ============================================================================


class BaseQuestion(QuizModel):
    """Fields shared by every question type. Media is never scored."""

    type: str
    text: str = ""
    points: int = 1
    images: list[str] = Field(default_factory=list)
    audio: str | None = None
    explanation: str = ""

    @field_validator("text", "explanation", mode="before")
    @classmethod
    def coerce_text_fields(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("points", mode="before")
    @classmethod
    def default_points(cls, value: Any) -> Any:
        return 1 if value is None else value

    @field_validator("images", mode="before")
    @classmethod
    def default_images(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def max_points(self) -> int:
        """Points this question contributes to the quiz total."""
        return max(self.points, 0)


def _coerce_options(value: Any) -> Any:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        return value
    options = []
    for item in value:
        if isinstance(item, Mapping):
            options.append(item)
        else:
            options.append({"text": _as_text(item)})
    return options


def _single_index(value: Any) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    index = parse_index(value)
    if index is None:
        raise ValueError(f"correct answer {value!r} is not an option index")
    return index


def _flag(value: Any) -> Any:
    return False if value is None else value


class ChoiceQuestion(BaseQuestion):
    """A question answered by picking from its own options."""

    options: list[Option] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> Any:
        return _coerce_options(value)


class McqQuestion(ChoiceQuestion):
    """Single best answer."""

    type: Literal["mcq"] = "mcq"
    correct: int | None = None

    @field_validator("correct", mode="before")
    @classmethod
    def coerce_correct(cls, value: Any) -> int | None:
        return _single_index(value)


def _true_false_options() -> list[Option]:
    return [Option(text="True"), Option(text="False")]


class TrueFalseQuestion(ChoiceQuestion):
    """
    Binary choice. Index 0 is True and index 1 is False.

    Stored true/false questions usually carry no options, so the two
    canonical options are filled in when none are given.
    """

    type: Literal["true_false"] = "true_false"
    options: list[Option] = Field(default_factory=_true_false_options)
    correct: int | None = None

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> Any:
        if not value:
            return _true_false_options()
        return _coerce_options(value)

    @field_validator("correct", mode="before")
    @classmethod
    def coerce_correct(cls, value: Any) -> int | None:
        if isinstance(value, bool):
            return 0 if value else 1
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return 0 if value.strip().lower() == "true" else 1
        return _single_index(value)


class CheckboxQuestion(ChoiceQuestion):
    """Any number of correct options, optionally with partial credit."""

    type: Literal["checkbox"] = "checkbox"
    correct: list[int] = Field(default_factory=list)
    allow_partial_credit: bool = False

    @field_validator("allow_partial_credit", mode="before")
    @classmethod
    def coerce_flags(cls, value: Any) -> Any:
        return _flag(value)

    @field_validator("correct", mode="before")
    @classmethod
    def coerce_correct(cls, value: Any) -> list[int]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return []
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            raise ValueError("correct answers must be a list of option indices")
        indices = set()
        for item in value:
            index = parse_index(item)
            if index is None:
                raise ValueError(f"correct answer {item!r} is not an option index")
            indices.add(index)
        return sorted(indices)


class TextInputQuestion(BaseQuestion):
    """Free text compared against a list of acceptable answers."""

    type: Literal["text_input"] = "text_input"
    correct: list[str] = Field(default_factory=list)
    case_sensitive: bool = False
    allow_partial_credit: bool = False

    @field_validator("case_sensitive", "allow_partial_credit", mode="before")
    @classmethod
    def coerce_flags(cls, value: Any) -> Any:
        return _flag(value)

    @field_validator("correct", mode="before")
    @classmethod
    def coerce_correct(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return [_as_text(value)]
        if isinstance(value, (list, tuple)):
            return [_as_text(item) for item in value]
        return value

    @property
    def accepted_answers(self) -> list[str]:
        """Acceptable answers that are not blank."""
        return [answer for answer in self.correct if answer.strip()]


class UnsupportedQuestion(BaseQuestion):
    """A question whose type is unknown here, or not allowed where it appears."""

    type: str = ""


class MalformedQuestion(QuizModel):
    """A question whose fields could not be interpreted. Always scores zero."""

    type: str = ""
    text: str = ""
    points: int = 1
    explanation: str = ""
    reason: str = ""

    @property
    def max_points(self) -> int:
        return max(self.points, 0)


SubQuestion = Union[
    McqQuestion,
    CheckboxQuestion,
    TrueFalseQuestion,
    UnsupportedQuestion,
    MalformedQuestion,
]


class ParagraphQuestion(BaseQuestion):
    """
    A passage with nested choice sub-questions.

    The paragraph's own points are ignored; it is worth the sum of its
    sub-questions' points.
    """

    type: Literal["paragraph"] = "paragraph"
    sub_questions: list[SubQuestion] = Field(default_factory=list)

    @field_validator("sub_questions", mode="before")
    @classmethod
    def coerce_sub_questions(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("sub-questions must be a list")
        parsed = []
        for item in value:
            sub = parse_question(item, allowed=SUB_QUESTION_TYPES)
            # Partial credit is not offered below the paragraph level
            if isinstance(sub, CheckboxQuestion) and sub.allow_partial_credit:
                sub = sub.model_copy(update={"allow_partial_credit": False})
            parsed.append(sub)
        return parsed

    @property
    def max_points(self) -> int:
        return sum(sub.max_points for sub in self.sub_questions)


Question = Union[
    McqQuestion,
    CheckboxQuestion,
    TrueFalseQuestion,
    TextInputQuestion,
    ParagraphQuestion,
    UnsupportedQuestion,
    MalformedQuestion,
]

QUESTION_MODELS: dict[QuestionType, type[BaseQuestion]] = {
    QuestionType.MCQ: McqQuestion,
    QuestionType.CHECKBOX: CheckboxQuestion,
    QuestionType.TRUE_FALSE: TrueFalseQuestion,
    QuestionType.TEXT_INPUT: TextInputQuestion,
    QuestionType.PARAGRAPH: ParagraphQuestion,
}


def _describe_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "question"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def parse_question(
    raw: Any,
    allowed: Collection[QuestionType] = frozenset(QuestionType),
) -> Question:
    """
    Turn a stored question document into its typed variant.

    Never raises. Unknown types, or types not in `allowed`, become
    UnsupportedQuestion even when their other fields are unusable;
    documents of a known type whose fields cannot be coerced become
    MalformedQuestion carrying a readable reason.
    """
    if isinstance(raw, (BaseQuestion, MalformedQuestion)):
        return raw
    if not isinstance(raw, Mapping):
        return MalformedQuestion(reason="question must be an object")

    raw_type = raw.get("type")
    type_name = raw_type.strip().lower() if isinstance(raw_type, str) else ""
    document = {**raw, "type": type_name}

    try:
        question_type: QuestionType | None = QuestionType(type_name)
    except ValueError:
        question_type = None

    supported = question_type is not None and question_type in allowed
    try:
        if not supported:
            return UnsupportedQuestion.model_validate(document)
        return QUESTION_MODELS[question_type].model_validate(document)
    except ValidationError as exc:
        text = raw.get("text")
        if not supported:
            # shared fields are coerced leniently here, the status stays unsupported_type
            return UnsupportedQuestion(
                type=type_name,
                text=text if isinstance(text, str) else "",
                points=_lenient_points(raw.get("points")),
            )
        reason = _describe_errors(exc)
        logger.debug(f"Question of type {type_name!r} is malformed: {reason}")
        return MalformedQuestion(
            type=type_name,
            text=text if isinstance(text, str) else "",
            points=_lenient_points(raw.get("points")),
            reason=reason,
        )


# ============================================================================
# QUIZ
# ============================================================================


class QuizSettings(QuizModel):
    """
    Behavioral toggles for the app around the scorer.

    Randomization happens before scoring through a mapping the scorer never
    sees; the scorer always works on stored option order and indices.
    """

    allow_retakes: bool = True
    max_attempts: int = 0  # 0 means unlimited
    show_correct_answers: bool = True
    show_score_immediately: bool = True
    randomize_questions: bool = False
    randomize_options: bool = False
    require_login: bool = True
    is_public: bool = True
    passing_score: float = 0  # percent, 0 means no pass mark

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """A null setting means it was never set."""
        if not isinstance(data, Mapping):
            return data
        return {key: value for key, value in data.items() if value is not None}

    @field_validator("max_attempts", mode="before")
    @classmethod
    def coerce_max_attempts(cls, value: Any) -> int:
        return int(_lenient_number(value, 0))

    @field_validator("passing_score", mode="before")
    @classmethod
    def coerce_passing_score(cls, value: Any) -> float:
        return _lenient_number(value, 0)


_SETTINGS_KEYS = frozenset(
    key for name in QuizSettings.model_fields for key in (name, to_camel(name))
)


class Quiz(QuizModel):
    """A quiz definition. Question order is the index space answers use."""

    title: str = ""
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    time_limit: float = 0  # minutes, 0 means unlimited; advisory only
    settings: QuizSettings = Field(default_factory=QuizSettings)
    questions: list[Question] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def lift_settings(cls, data: Any) -> Any:
        """Accept settings flags given at the quiz top level."""
        if not isinstance(data, Mapping):
            return data
        flat = {key: data[key] for key in _SETTINGS_KEYS if key in data}
        if not flat:
            return data
        nested = data.get("settings")
        if isinstance(nested, Mapping):
            flat.update((key, value) for key, value in nested.items() if value is not None)
        return {**data, "settings": flat}

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def coerce_text_fields(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("time_limit", mode="before")
    @classmethod
    def coerce_time_limit(cls, value: Any) -> float:
        return _lenient_number(value, 0)

    @field_validator("settings", mode="before")
    @classmethod
    def default_settings(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("questions", mode="before")
    @classmethod
    def coerce_questions(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("questions must be a list")
        return [parse_question(item) for item in value]

    @classmethod
    def from_document(cls, document: Quiz | Mapping[str, Any]) -> Quiz:
        """
        Build a Quiz from a stored document.

        Raises:
            QuizStructureError: the document is not a mapping or its
                quiz-level fields have the wrong shape.
        """
        if isinstance(document, Quiz):
            return document
        if not isinstance(document, Mapping):
            raise QuizStructureError(
                f"quiz must be a mapping, got {type(document).__name__}"
            )
        try:
            return cls.model_validate(dict(document))
        except ValidationError as exc:
            raise QuizStructureError(f"invalid quiz document: {_describe_errors(exc)}") from exc

    @property
    def total_points(self) -> int:
        """Sum of possible points, counting paragraph sub-questions individually."""
        return sum(question.max_points for question in self.questions)
