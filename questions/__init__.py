"""Question supply exports."""

from .question_source import (
    DEFAULT_QUESTION,
    NUMBERS_API_ATTEMPTS,
    NUMBERS_API_URL,
    NumbersApiQuestionSource,
    QuestionLookup,
    QuestionPolicy,
    QuestionSource,
    RotatingQuestionSource,
    parse_questions,
    question_from_numbers_payload,
)

__all__ = [
    "DEFAULT_QUESTION",
    "NUMBERS_API_ATTEMPTS",
    "NUMBERS_API_URL",
    "NumbersApiQuestionSource",
    "QuestionLookup",
    "QuestionPolicy",
    "QuestionSource",
    "RotatingQuestionSource",
    "parse_questions",
    "question_from_numbers_payload",
]
