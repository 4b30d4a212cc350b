from __future__ import annotations

from .client import LLMClient, create_llm_client
from .events import InstrumentedLLMClient, LLMEvent, LLMEventCallback
from .structured import parse_json_payload, strip_code_fence
from .types import ChatMessage, LLMResponse, ModelConfig, Usage

# Lazy imports for provider clients to avoid requiring all SDKs
def __getattr__(name: str):  # noqa: N807
    if name == "AnthropicClient":
        from .anthropic import AnthropicClient
        return AnthropicClient
    if name == "OpenAIClient":
        from .openai import OpenAIClient
        return OpenAIClient
    if name == "OllamaClient":
        from .ollama import OllamaClient
        return OllamaClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "LLMClient",
    "AnthropicClient",
    "OpenAIClient",
    "OllamaClient",
    "create_llm_client",
    # Events / observability
    "InstrumentedLLMClient",
    "LLMEvent",
    "LLMEventCallback",
    # Structured output
    "parse_json_payload",
    "strip_code_fence",
    # Types
    "ChatMessage",
    "LLMResponse",
    "ModelConfig",
    "Usage",
]
