"""Isolate JSON text from free-form completion output."""

from __future__ import annotations

import re

JSON_FENCE_RE = re.compile(r"```json\s*\n(.*?)```", re.DOTALL)


def extract(raw: str) -> str:
    """Return the candidate JSON text contained in ``raw``.

    The body of the first ```json fenced block is returned with surrounding
    whitespace removed. Without such a block the input is returned unchanged,
    so already-extracted JSON passes through as is.
    """
    match = JSON_FENCE_RE.search(raw)
    if match is None:
        return raw
    return match.group(1).strip()
