from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quizcache.errors import GenerationFailure  # noqa: E402


# ====================
# Payload Fixtures
# ====================

def make_payload(
    question: str = "Which structure gives O(1) average lookup by key?",
    options: Optional[List[str]] = None,
    correct: str = "Hash table",
    explanation: str = "Hash tables map keys to buckets directly.",
) -> Dict[str, object]:
    return {
        "question": question,
        "options": options if options is not None else ["Linked list", "Hash table", "Binary heap", "Stack"],
        "correctAnswer": correct,
        "explanation": explanation,
    }


def fenced(payload: Dict[str, object], prose: str = "Here is your question:") -> str:
    return f"{prose}\n```json\n{json.dumps(payload, indent=2)}\n```\nGood luck!"


class ScriptedGenerator:
    """Fake generator that replays queued outcomes and counts calls.

    Each queued item is either raw completion text or an exception to raise.
    When a gate is set, every call waits on it before returning.
    """

    def __init__(self, outcomes: Optional[list] = None):
        self.outcomes = list(outcomes or [])
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None

    def push(self, outcome) -> None:
        self.outcomes.append(outcome)

    async def generate(self) -> str:
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def payload():
    return make_payload()


@pytest.fixture
def scripted_generator():
    return ScriptedGenerator()


@pytest.fixture
def failing_generator():
    return ScriptedGenerator([GenerationFailure("Failed to fetch question", status_code=401, body='{"error": "invalid_api_key"}')])
