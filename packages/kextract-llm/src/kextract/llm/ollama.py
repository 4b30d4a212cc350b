from __future__ import annotations

from typing import Any, Dict, List

from .types import ChatMessage, LLMResponse, ModelConfig, Usage


class OllamaClient:
    """LLM client backed by a local Ollama instance."""

    def __init__(self, config: ModelConfig) -> None:
        try:
            import ollama
        except ImportError as exc:
            raise ImportError(
                "The 'ollama' package is required for OllamaClient. "
                "Install it with: pip install ollama"
            ) from exc

        self._config = config
        kwargs: Dict[str, Any] = {}
        if config.base_url is not None:
            kwargs["host"] = config.base_url
        self._client = ollama.AsyncClient(**kwargs)

    async def chat(
        self,
        messages: List[ChatMessage],
        json_output: bool = False,
    ) -> LLMResponse:
        """Send *messages* to the Ollama API and return a unified response."""
        kwargs: Dict[str, Any] = {
            "model": self._config.model_name,
            "messages": [
                {"role": msg.role, "content": msg.content} for msg in messages
            ],
            "options": {
                "temperature": self._config.temperature,
                "num_predict": self._config.max_tokens,
            },
        }
        if json_output:
            kwargs["format"] = "json"

        try:
            response = await self._client.chat(**kwargs)
        except Exception as exc:
            raise RuntimeError(
                f"Ollama API call failed: {exc}"
            ) from exc

        return self._from_ollama_response(response)

    @staticmethod
    def _from_ollama_response(response: Any) -> LLMResponse:
        """Convert an Ollama response to a unified ``LLMResponse``."""
        # Ollama responses can be dict-like or object-like depending on version
        if isinstance(response, dict):
            content = response.get("message", {}).get("content", "")
            prompt_eval_count = response.get("prompt_eval_count", 0)
            eval_count = response.get("eval_count", 0)
        else:
            message = getattr(response, "message", None)
            content = (getattr(message, "content", "") or "") if message else ""
            prompt_eval_count = getattr(response, "prompt_eval_count", 0) or 0
            eval_count = getattr(response, "eval_count", 0) or 0

        return LLMResponse(
            content=content,
            usage=Usage(input_tokens=prompt_eval_count, output_tokens=eval_count),
            raw=response,
        )
