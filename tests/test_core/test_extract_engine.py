"""Tests for LLMExtractor and the prompt templates."""

from __future__ import annotations

import asyncio

import pytest

from kextract.core.errors import ModelInvocationError
from kextract.core.extract.engine import LLMExtractor
from kextract.core.extract.prompts import (
    ADD_QUESTION_PROMPT,
    EXTRACT_PROMPT,
    UnknownPromptError,
    format_fields,
    format_questions,
    render_prompt,
)
from kextract.core.types.knowledge import build_record


class TestPrompts:
    def test_format_fields(self, contact_schema):
        text = format_fields(build_record(contact_schema).values())
        lines = text.splitlines()
        assert lines[0] == "- `email` (string): The user's email address"
        assert lines[2].endswith("Allowed values: [true, false].")

    def test_format_no_fields(self):
        assert format_fields([]) == "(none)"

    def test_format_questions(self):
        assert format_questions(["A?", "B?"]) == "1. A?\n2. B?"

    def test_render_extract(self):
        text = render_prompt(EXTRACT_PROMPT, fields="- `x`", message="hello there")
        assert "- `x`" in text
        assert text.rstrip().endswith("hello there")

    def test_render_add_question(self):
        text = render_prompt(ADD_QUESTION_PROMPT, questions="1. A?")
        assert "1. A?" in text

    def test_unknown_prompt(self):
        with pytest.raises(UnknownPromptError):
            render_prompt("kextract:nope")

    def test_unknown_prompt_is_key_error(self):
        assert issubclass(UnknownPromptError, KeyError)


class TestLLMExtractor:
    @pytest.fixture()
    def fields(self, contact_schema):
        return list(build_record(contact_schema).values())

    async def test_returns_raw_content(self, mock_llm_client, fields):
        extractor = LLMExtractor(mock_llm_client)
        raw = await extractor.extract(fields, "a@b.com", prompt=EXTRACT_PROMPT)
        assert raw == '{"email": "a@b.com"}'

    async def test_sends_system_and_user_messages(self, mock_llm_client, fields):
        extractor = LLMExtractor(mock_llm_client)
        await extractor.extract(fields, "I am 30", prompt=EXTRACT_PROMPT)

        kwargs = mock_llm_client.chat.call_args.kwargs
        messages = kwargs["messages"]
        assert kwargs["json_output"] is True
        assert [m.role for m in messages] == ["system", "user"]
        assert "`age` (number)" in messages[0].content
        assert messages[1].content == "I am 30"

    async def test_custom_prompt_registry(self, mock_llm_client, fields):
        extractor = LLMExtractor(mock_llm_client, prompts={"mine": "Fields: {fields} / {message}"})
        await extractor.extract(fields[:1], "hi", prompt="mine")
        system = mock_llm_client.chat.call_args.kwargs["messages"][0].content
        assert system.startswith("Fields: - `email`")

    async def test_timeout_becomes_invocation_error(self, mock_llm_client, fields):
        async def slow(**kwargs):
            await asyncio.sleep(1)

        mock_llm_client.chat.side_effect = slow
        extractor = LLMExtractor(mock_llm_client)
        with pytest.raises(ModelInvocationError, match="timed out"):
            await extractor.extract(fields, "x", prompt=EXTRACT_PROMPT, timeout=0.01)

    async def test_provider_error_becomes_invocation_error(self, mock_llm_client, fields):
        mock_llm_client.chat.side_effect = RuntimeError("OpenAI API call failed: boom")
        extractor = LLMExtractor(mock_llm_client)
        with pytest.raises(ModelInvocationError, match="boom"):
            await extractor.extract(fields, "x", prompt=EXTRACT_PROMPT)
