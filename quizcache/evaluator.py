"""Answer checking against committed question records."""

from __future__ import annotations

import logging
from typing import Optional

from .data.schemas import AnswerResult
from .errors import NoActiveQuestion
from .store import QuestionStore

logger = logging.getLogger(__name__)

CORRECT_FALLBACK = "Correct! Well done."
INCORRECT_FALLBACK = "Incorrect. The correct answer is: {correct_answer}"


class AnswerEvaluator:
    """Compares a selected option with the record committed for an index."""

    def __init__(self, store: QuestionStore):
        self.store = store

    def evaluate(
        self,
        index: int,
        selected_option: str,
        correct_answer: Optional[str] = None,
    ) -> AnswerResult:
        """Check ``selected_option`` for question ``index``.

        Comparison is exact string equality. When a record is committed its
        explanation is returned whether or not the answer is right. Without a
        record, ``correct_answer`` (the answer the caller was shown) is used
        with a generic explanation.

        Raises:
            NoActiveQuestion: If there is no record and no correct answer
        """
        record = self.store.peek(index)
        if record is not None:
            return AnswerResult(
                is_correct=selected_option == record.correct_answer,
                explanation=record.explanation,
            )

        if not correct_answer:
            raise NoActiveQuestion(f"No question is available for index {index}")

        logger.warning("Question %d is not cached; using fallback explanation", index, extra={"index": index})
        is_correct = selected_option == correct_answer
        if is_correct:
            explanation = CORRECT_FALLBACK
        else:
            explanation = INCORRECT_FALLBACK.format(correct_answer=correct_answer)
        return AnswerResult(is_correct=is_correct, explanation=explanation)
