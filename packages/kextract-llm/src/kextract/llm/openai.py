from __future__ import annotations

from typing import Any, Dict, List

from .types import ChatMessage, LLMResponse, ModelConfig, Usage


class OpenAIClient:
    """LLM client backed by the OpenAI Chat Completions API."""

    def __init__(self, config: ModelConfig) -> None:
        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "The 'openai' package is required for OpenAIClient. "
                "Install it with: pip install openai"
            ) from exc

        self._config = config
        kwargs: Dict[str, Any] = {}
        if config.api_key is not None:
            kwargs["api_key"] = config.api_key
        if config.base_url is not None:
            kwargs["base_url"] = config.base_url
        self._client = openai.AsyncOpenAI(**kwargs)

    async def chat(
        self,
        messages: List[ChatMessage],
        json_output: bool = False,
    ) -> LLMResponse:
        """Send *messages* to the OpenAI API and return a unified response."""
        kwargs: Dict[str, Any] = {
            "model": self._config.model_name,
            "messages": [
                {"role": msg.role, "content": msg.content} for msg in messages
            ],
            "temperature": self._config.temperature,
            "max_completion_tokens": self._config.max_tokens,
        }
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except Exception as exc:
            raise RuntimeError(
                f"OpenAI API call failed: {exc}"
            ) from exc

        return self._from_openai_response(response)

    @staticmethod
    def _from_openai_response(response: Any) -> LLMResponse:
        """Convert an OpenAI ``ChatCompletion`` object to a unified ``LLMResponse``."""
        message = response.choices[0].message

        usage = None
        if response.usage is not None:
            usage = Usage(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens,
            )

        return LLMResponse(
            content=message.content or "",
            usage=usage,
            raw=response,
        )
