"""Caller-facing view of the most recently requested question."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from .data.schemas import AnswerResult
from .errors import GenerationFailure, MalformedResponse, NoActiveQuestion
from .evaluator import AnswerEvaluator
from .store import QuestionStore

logger = logging.getLogger(__name__)


class QuizSession:
    """Tracks question text, options, loading state and last error for one index.

    ``load`` may be called again before an earlier call finishes; only the most
    recent request updates the session. Earlier fetches still complete and
    commit to the shared store.
    """

    def __init__(self, store: QuestionStore, evaluator: Optional[AnswerEvaluator] = None):
        self.store = store
        self.evaluator = evaluator or AnswerEvaluator(store)
        self.index: Optional[int] = None
        self.question: str = ""
        self.options: Tuple[str, ...] = ()
        self.is_loading: bool = False
        self.error: Optional[Exception] = None
        self._correct_answer: str = ""
        self._generation = 0

    async def load(self, index: int) -> None:
        self._generation += 1
        generation = self._generation
        self.index = index
        self.is_loading = True
        self.error = None
        self.question = ""
        self.options = ()
        self._correct_answer = ""

        try:
            record = await self.store.get_or_fetch(index)
        except (GenerationFailure, MalformedResponse) as e:
            if generation == self._generation:
                self.error = e
            return
        finally:
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            logger.debug("Discarding superseded result for question %d", index, extra={"index": index})
            return
        self.question = record.question
        self.options = record.options
        self._correct_answer = record.correct_answer

    def check_answer(self, selected_option: str) -> AnswerResult:
        if self.index is None:
            raise NoActiveQuestion("No question has been requested")
        return self.evaluator.evaluate(self.index, selected_option, correct_answer=self._correct_answer)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "question": self.question,
            "options": list(self.options),
            "is_loading": self.is_loading,
            "error": str(self.error) if self.error else None,
        }
