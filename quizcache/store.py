"""Process-lifetime question cache with fetch-on-miss."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional

from .data.schemas import QuestionRecord
from .data.validation import parse_question_record
from .errors import GenerationFailure, MalformedResponse
from .extract import extract
from .generator import Generator

logger = logging.getLogger(__name__)


def _check_index(index: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValueError(f"Question index must be an int, got {type(index).__name__}")
    if index < 0:
        raise ValueError(f"Question index must be non-negative, got {index}")


def _consume_result(task: asyncio.Task) -> None:
    # Failures are logged in _fetch_and_commit; mark them retrieved for fetches nobody awaits.
    if not task.cancelled():
        task.exception()


class QuestionStore:
    """Maps question index to the committed QuestionRecord.

    Records are never evicted. A miss calls the generator once, and the
    record is committed only after it has been extracted and validated, so a
    failed fetch leaves the mapping as it was.

    Concurrent misses for the same index each call the generator and the last
    commit wins, unless ``coalesce`` is set, in which case they share one
    in-flight fetch. Callers that stop waiting do not cancel the fetch.
    """

    def __init__(self, generator: Generator, coalesce: bool = False):
        self.generator = generator
        self.coalesce = coalesce
        self._records: Dict[int, QuestionRecord] = {}
        self._in_flight: Dict[int, asyncio.Task] = {}

    def __contains__(self, index: object) -> bool:
        return index in self._records

    def __len__(self) -> int:
        return len(self._records)

    def indices(self) -> List[int]:
        return sorted(self._records)

    def peek(self, index: int) -> Optional[QuestionRecord]:
        """Return the committed record for ``index`` or None. Never generates."""
        return self._records.get(index)

    async def get_or_fetch(self, index: int) -> QuestionRecord:
        """Return the record for ``index``, generating and committing it on a miss.

        Raises:
            ValueError: If ``index`` is not a non-negative int
            GenerationFailure: If the generator call did not succeed
            MalformedResponse: If the completion is not a valid question
        """
        _check_index(index)

        record = self._records.get(index)
        if record is not None:
            logger.debug("Cache hit for question %d", index, extra={"index": index})
            return record

        task = self._in_flight.get(index) if self.coalesce else None
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_commit(index))
            task.add_done_callback(_consume_result)
            if self.coalesce:
                self._in_flight[index] = task
                task.add_done_callback(lambda _t, i=index: self._in_flight.pop(i, None))
        else:
            logger.debug("Joining in-flight fetch for question %d", index, extra={"index": index})
        return await asyncio.shield(task)

    async def _fetch_and_commit(self, index: int) -> QuestionRecord:
        logger.info("Cache miss for question %d, requesting generation", index, extra={"index": index})
        start = time.perf_counter()
        try:
            raw = await self.generator.generate()
            record = parse_question_record(extract(raw))
        except (GenerationFailure, MalformedResponse) as e:
            logger.error(
                "Error fetching question %d: %s",
                index,
                e,
                extra={"index": index, "error_type": type(e).__name__},
            )
            raise

        self._commit(index, record)
        logger.info(
            "Committed question %d",
            index,
            extra={"index": index, "duration_ms": (time.perf_counter() - start) * 1000},
        )
        return record

    def _commit(self, index: int, record: QuestionRecord) -> None:
        if index in self._records:
            logger.warning(
                "Question %d was committed by a concurrent fetch; replacing it",
                index,
                extra={"index": index},
            )
        self._records[index] = record
