from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .types import ChatMessage, LLMResponse, ModelConfig, Usage

# The Messages API has no JSON response mode, so the request is steered
# with an extra system instruction instead.
JSON_ONLY_INSTRUCTION = (
    "Respond with a single JSON document and nothing else. "
    "Do NOT wrap it in markdown or add any commentary."
)


class AnthropicClient:
    """LLM client backed by the Anthropic Messages API."""

    def __init__(self, config: ModelConfig) -> None:
        try:
            import anthropic
        except ImportError as exc:
            raise ImportError(
                "The 'anthropic' package is required for AnthropicClient. "
                "Install it with: pip install anthropic"
            ) from exc

        self._config = config
        kwargs: Dict[str, Any] = {}
        if config.api_key is not None:
            kwargs["api_key"] = config.api_key
        if config.base_url is not None:
            kwargs["base_url"] = config.base_url
        self._client = anthropic.AsyncAnthropic(**kwargs)

    async def chat(
        self,
        messages: List[ChatMessage],
        json_output: bool = False,
    ) -> LLMResponse:
        """Send *messages* to the Anthropic API and return a unified response."""
        system_prompt, api_messages = self._to_anthropic_messages(messages)
        if json_output:
            system_prompt = (
                JSON_ONLY_INSTRUCTION
                if system_prompt is None
                else f"{system_prompt}\n\n{JSON_ONLY_INSTRUCTION}"
            )

        kwargs: Dict[str, Any] = {
            "model": self._config.model_name,
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            "messages": api_messages,
        }
        if system_prompt is not None:
            kwargs["system"] = system_prompt

        try:
            response = await self._client.messages.create(**kwargs)
        except Exception as exc:
            raise RuntimeError(
                f"Anthropic API call failed: {exc}"
            ) from exc

        return self._from_anthropic_response(response)

    @staticmethod
    def _to_anthropic_messages(
        messages: List[ChatMessage],
    ) -> Tuple[Optional[str], List[Dict[str, Any]]]:
        """Split out the system prompt; Anthropic takes it as a parameter."""
        system_parts: List[str] = []
        api_messages: List[Dict[str, Any]] = []

        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
            else:
                api_messages.append({"role": msg.role, "content": msg.content})

        system_prompt = "\n\n".join(system_parts) if system_parts else None
        return system_prompt, api_messages

    @staticmethod
    def _from_anthropic_response(response: Any) -> LLMResponse:
        """Convert an Anthropic ``Message`` object to a unified ``LLMResponse``."""
        text_parts = [
            block.text for block in response.content if block.type == "text"
        ]

        usage = None
        if getattr(response, "usage", None) is not None:
            usage = Usage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )

        return LLMResponse(
            content="\n".join(text_parts),
            usage=usage,
            raw=response,
        )
