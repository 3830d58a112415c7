"""Question records and their validation."""

from .schemas import AnswerResult, QuestionRecord
from .validation import QUESTION_SCHEMA, RecordValidator, parse_question_record

__all__ = [
    "AnswerResult",
    "QuestionRecord",
    "QUESTION_SCHEMA",
    "RecordValidator",
    "parse_question_record",
]
