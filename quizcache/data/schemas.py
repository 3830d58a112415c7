"""Data schemas for quizcache."""

from typing import NamedTuple, Tuple


class QuestionRecord(NamedTuple):
    """One committed multiple-choice question."""
    question: str
    options: Tuple[str, ...]
    correct_answer: str
    explanation: str

    def to_dict(self) -> dict:
        """Return the record in its wire (camelCase) shape."""
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


class AnswerResult(NamedTuple):
    is_correct: bool
    explanation: str
