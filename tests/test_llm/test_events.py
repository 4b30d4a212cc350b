"""Tests for InstrumentedLLMClient callbacks."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from kextract.llm.events import InstrumentedLLMClient, LLMEvent
from kextract.llm.types import ChatMessage, LLMResponse, Usage


@pytest.fixture()
def calls():
    return []


@pytest.fixture()
def callback(calls):
    def _record(event: LLMEvent, is_start: bool) -> None:
        calls.append((is_start, event.duration, event.usage, event.json_output, event.error))

    return _record


async def test_success_fires_start_and_end(callback, calls):
    inner = AsyncMock()
    inner.chat.return_value = LLMResponse(content="{}", usage=Usage(input_tokens=5, output_tokens=1))
    client = InstrumentedLLMClient(inner, callback)

    response = await client.chat([ChatMessage(role="user", content="hi")], json_output=True)

    assert response.content == "{}"
    inner.chat.assert_awaited_once()
    assert inner.chat.call_args.kwargs == {"json_output": True}
    assert len(calls) == 2
    assert calls[0][0] is True
    is_start, duration, usage, json_output, error = calls[1]
    assert is_start is False
    assert duration >= 0
    assert usage.input_tokens == 5
    assert json_output is True
    assert error is None


async def test_failure_reports_error_and_reraises(callback, calls):
    inner = AsyncMock()
    inner.chat.side_effect = RuntimeError("OpenAI API call failed: boom")
    client = InstrumentedLLMClient(inner, callback)

    with pytest.raises(RuntimeError, match="boom"):
        await client.chat([ChatMessage(role="user", content="hi")])

    assert [c[0] for c in calls] == [True, False]
    assert "boom" in calls[1][4]


def test_attribute_passthrough(callback):
    inner = AsyncMock()
    inner.model_name = "gpt-4o-mini"
    assert InstrumentedLLMClient(inner, callback).model_name == "gpt-4o-mini"
