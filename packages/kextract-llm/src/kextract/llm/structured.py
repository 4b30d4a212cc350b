from __future__ import annotations

import json
import re
from typing import Any

# Models often wrap JSON answers in a markdown fence despite being told not to.
_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fence(content: str) -> str:
    """Return *content* without a surrounding markdown code fence, if any."""
    match = _FENCE_RE.match(content)
    if match is not None:
        return match.group(1)
    return content


def parse_json_payload(content: str) -> Any:
    """Parse an LLM text answer as a single JSON document.

    Raises ``ValueError`` with a helpful message on failure.
    """
    if not isinstance(content, str):
        raise ValueError(
            f"LLM response must be text, got {type(content).__name__}"
        )

    text = strip_code_fence(content).strip()
    if not text:
        raise ValueError("LLM response is empty")

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"LLM response is not valid JSON: {exc}"
        ) from exc
