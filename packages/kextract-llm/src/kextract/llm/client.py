from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .types import ChatMessage, LLMResponse, ModelConfig


@runtime_checkable
class LLMClient(Protocol):
    """Protocol that every LLM provider client must satisfy."""

    async def chat(
        self,
        messages: List[ChatMessage],
        json_output: bool = False,
    ) -> LLMResponse:
        """Send a list of messages and return a response.

        When *json_output* is set the provider is asked to answer with a
        single JSON document where it supports doing so.
        """
        ...


def create_llm_client(config: ModelConfig) -> LLMClient:
    """Factory that returns the appropriate client for *config.provider*.

    Provider SDKs are imported lazily so users only need the SDK they use.
    """
    if config.provider == "anthropic":
        from .anthropic import AnthropicClient

        return AnthropicClient(config)

    if config.provider == "openai":
        from .openai import OpenAIClient

        return OpenAIClient(config)

    if config.provider == "ollama":
        from .ollama import OllamaClient

        return OllamaClient(config)

    raise ValueError(f"Unsupported LLM provider: {config.provider!r}")
