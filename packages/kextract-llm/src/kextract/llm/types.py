from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


class ModelConfig(BaseModel):
    """Configuration for an LLM provider and model."""

    provider: Literal["anthropic", "openai", "ollama"]
    model_name: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 1024


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""

    role: Literal["system", "user", "assistant"]
    content: str


class Usage(BaseModel):
    """Token usage information from an LLM response."""

    input_tokens: int
    output_tokens: int


class LLMResponse(BaseModel):
    """Unified response from any LLM provider."""

    content: str
    usage: Optional[Usage] = None
    raw: Any = None

    model_config = {"arbitrary_types_allowed": True}
