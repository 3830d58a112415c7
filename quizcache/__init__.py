"""quizcache package.

Generated multiple-choice questions cached per index, with answer checking
against the record issued for that index.
"""

from .config import AppConfig, default_app_config
from .data import AnswerResult, QuestionRecord, parse_question_record
from .errors import GenerationFailure, MalformedResponse, NoActiveQuestion, QuizError
from .evaluator import AnswerEvaluator
from .extract import extract
from .generator import ChatCompletionGenerator
from .session import QuizSession
from .store import QuestionStore
from .utils import setup_logging

__all__ = [
    "__version__",
    "AppConfig",
    "default_app_config",
    "AnswerResult",
    "QuestionRecord",
    "parse_question_record",
    "QuizError",
    "GenerationFailure",
    "MalformedResponse",
    "NoActiveQuestion",
    "AnswerEvaluator",
    "extract",
    "ChatCompletionGenerator",
    "QuizSession",
    "QuestionStore",
    "setup_logging",
]

__version__ = "0.1.0"
