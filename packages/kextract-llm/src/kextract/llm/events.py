"""LLM call observability: event hooks around each chat request."""

from __future__ import annotations

import time
from typing import Any, Callable, List, Optional

from .types import ChatMessage, LLMResponse, Usage


class LLMEvent:
    """Lightweight event emitted around LLM calls."""

    __slots__ = ("method", "duration", "usage", "json_output", "error")

    def __init__(
        self,
        method: str,
        duration: float = 0.0,
        usage: Optional[Usage] = None,
        json_output: bool = False,
        error: Optional[str] = None,
    ):
        self.method = method            # always "chat" for now
        self.duration = duration        # seconds
        self.usage = usage              # token counts
        self.json_output = json_output  # JSON answer requested
        self.error = error              # error message if failed


# Callback type: called with (event, is_start)
# is_start=True → request about to be sent
# is_start=False → response received (event has duration/usage)
LLMEventCallback = Callable[[LLMEvent, bool], None]


class InstrumentedLLMClient:
    """Wraps any LLMClient and fires callbacks on each call."""

    def __init__(self, client: Any, callback: LLMEventCallback):
        self._client = client
        self._callback = callback

    async def chat(
        self,
        messages: List[ChatMessage],
        json_output: bool = False,
    ) -> LLMResponse:
        event = LLMEvent(method="chat", json_output=json_output)
        self._callback(event, True)
        start = time.monotonic()

        try:
            response = await self._client.chat(messages, json_output=json_output)
        except Exception as exc:
            event.duration = time.monotonic() - start
            event.error = str(exc)
            self._callback(event, False)
            raise

        event.duration = time.monotonic() - start
        event.usage = response.usage
        self._callback(event, False)
        return response

    def __getattr__(self, name: str) -> Any:
        return getattr(self._client, name)
