from __future__ import annotations

from kextract.core.extract.engine import DEFAULT_TIMEOUT, LLMExtractor, ModelInvoker
from kextract.core.extract.prompts import (
    ADD_QUESTION_PROMPT,
    EXTRACT_PROMPT,
    PROMPTS,
    UnknownPromptError,
    format_fields,
    format_questions,
    render_prompt,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "LLMExtractor",
    "ModelInvoker",
    "ADD_QUESTION_PROMPT",
    "EXTRACT_PROMPT",
    "PROMPTS",
    "UnknownPromptError",
    "format_fields",
    "format_questions",
    "render_prompt",
]
