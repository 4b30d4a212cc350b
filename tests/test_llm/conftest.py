"""LLM test fixtures: mock SDK responses for each provider."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kextract.llm.types import ChatMessage, ModelConfig


# ---------------------------------------------------------------------------
# Model configs for each provider
# ---------------------------------------------------------------------------

@pytest.fixture()
def anthropic_config():
    return ModelConfig(
        provider="anthropic",
        model_name="claude-sonnet-4-20250514",
        api_key="test-key-anthropic",
        temperature=0.5,
        max_tokens=1024,
    )


@pytest.fixture()
def openai_config():
    return ModelConfig(
        provider="openai",
        model_name="gpt-4o-mini",
        api_key="test-key-openai",
        temperature=0.5,
        max_tokens=1024,
    )


@pytest.fixture()
def ollama_config():
    return ModelConfig(
        provider="ollama",
        model_name="llama3",
        base_url="http://localhost:11434",
        temperature=0.5,
        max_tokens=1024,
    )


# ---------------------------------------------------------------------------
# Common test data
# ---------------------------------------------------------------------------

@pytest.fixture()
def sample_messages():
    return [
        ChatMessage(role="system", content="Extract the email field."),
        ChatMessage(role="user", content="my email is a@b.com"),
    ]


# ---------------------------------------------------------------------------
# Mock Anthropic SDK response
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_anthropic_response():
    """Simulates an anthropic.types.Message object."""
    text_block = MagicMock()
    text_block.type = "text"
    text_block.text = '{"email": "a@b.com"}'

    response = MagicMock()
    response.content = [text_block]

    usage = MagicMock()
    usage.input_tokens = 100
    usage.output_tokens = 50
    response.usage = usage

    return response


# ---------------------------------------------------------------------------
# Mock OpenAI SDK response
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_openai_response():
    """Simulates an openai ChatCompletion object."""
    message = MagicMock()
    message.content = '{"email": "a@b.com"}'

    choice = MagicMock()
    choice.message = message

    usage = MagicMock()
    usage.prompt_tokens = 100
    usage.completion_tokens = 50

    response = MagicMock()
    response.choices = [choice]
    response.usage = usage

    return response


# ---------------------------------------------------------------------------
# Mock Ollama SDK response
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_ollama_response():
    """Simulates an Ollama chat response (dict-like)."""
    return {
        "message": {"role": "assistant", "content": '{"email": "a@b.com"}'},
        "prompt_eval_count": 100,
        "eval_count": 50,
    }
