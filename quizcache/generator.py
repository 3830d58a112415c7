"""Chat-completions client that produces raw question text."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Protocol

import httpx

from .config import GeneratorConfig
from .errors import GenerationFailure

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = """You are a quiz generator for {subject}. Generate a multiple-choice question with exactly 4 options (A, B, C, D). Format your response as a JSON object with these fields:
{{
  "question": "The full question text",
  "options": ["Option A", "Option B", "Option C", "Option D"],
  "correctAnswer": "The correct option text (exactly matching one of the options)",
  "explanation": "A detailed explanation of why the answer is correct"
}}
Make the question challenging but fair. Include code snippets if relevant."""


def build_system_prompt(subject: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(subject=subject)


class Generator(Protocol):
    """Anything that can produce one raw completion for a new question."""

    async def generate(self) -> str: ...


class ChatCompletionGenerator:
    """OpenAI-compatible ``/chat/completions`` generator.

    One POST per call, no retries. Non-2xx responses, transport errors and
    success bodies without message content raise ``GenerationFailure``.
    """

    def __init__(self, config: GeneratorConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    @property
    def url(self) -> str:
        return self.config.base_url.rstrip("/") + "/chat/completions"

    def build_payload(self) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": build_system_prompt(self.config.subject)},
        ]
        return {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    async def generate(self) -> str:
        start = time.perf_counter()
        try:
            response = await self._client.post(self.url, json=self.build_payload(), headers=self._headers())
        except httpx.HTTPError as e:
            logger.error("Question request failed: %s", e, extra={"error_type": type(e).__name__})
            raise GenerationFailure(f"Failed to fetch question: {e}") from e

        duration_ms = (time.perf_counter() - start) * 1000
        if not response.is_success:
            logger.error(
                "Failed to fetch question, API response error: %s",
                response.text,
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            raise GenerationFailure("Failed to fetch question", status_code=response.status_code, body=response.text)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationFailure(
                f"Unexpected API response format: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e
        if not isinstance(content, str):
            raise GenerationFailure(
                "Completion has no message content",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(
            "Completion received (%d chars)",
            len(content),
            extra={"duration_ms": duration_ms, "model": self.config.model},
        )
        return content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ChatCompletionGenerator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
