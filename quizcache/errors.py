"""Exception types raised by quizcache."""

from __future__ import annotations

from typing import List, Optional


class QuizError(Exception):
    """Base exception for quizcache errors."""
    pass


class GenerationFailure(QuizError):
    """Raised when the question generator does not return a completion."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            base = f"{base} (HTTP {self.status_code})"
        if self.body:
            base = f"{base}: {self.body}"
        return base


class MalformedResponse(QuizError):
    """Raised when a completion cannot be turned into a valid question record."""

    def __init__(self, message: str, errors: Optional[List[str]] = None, raw: str = ""):
        super().__init__(message)
        self.errors = errors or []
        self.raw = raw


class NoActiveQuestion(QuizError):
    """Raised when an answer is checked with no resolvable correct answer."""
    pass
