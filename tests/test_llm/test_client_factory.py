"""Tests for create_llm_client factory."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from kextract.llm.client import LLMClient, create_llm_client
from kextract.llm.types import ModelConfig


class TestCreateLLMClient:
    def test_anthropic_provider(self, anthropic_config):
        with patch.dict(sys.modules, {"anthropic": MagicMock()}):
            client = create_llm_client(anthropic_config)
        assert client.__class__.__name__ == "AnthropicClient"

    def test_openai_provider(self, openai_config):
        with patch.dict(sys.modules, {"openai": MagicMock()}):
            client = create_llm_client(openai_config)
        assert client.__class__.__name__ == "OpenAIClient"

    def test_ollama_provider(self, ollama_config):
        with patch.dict(sys.modules, {"ollama": MagicMock()}):
            client = create_llm_client(ollama_config)
        assert client.__class__.__name__ == "OllamaClient"

    def test_clients_satisfy_protocol(self, openai_config):
        with patch.dict(sys.modules, {"openai": MagicMock()}):
            client = create_llm_client(openai_config)
        assert isinstance(client, LLMClient)

    def test_unsupported_provider(self):
        config = ModelConfig(provider="anthropic", model_name="test")
        # Monkey-patch to test the ValueError path
        object.__setattr__(config, "provider", "unsupported")
        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            create_llm_client(config)

    def test_anthropic_import_error(self, anthropic_config):
        with patch.dict(sys.modules, {"anthropic": None}):
            with pytest.raises(ImportError, match="pip install anthropic"):
                create_llm_client(anthropic_config)

    def test_lazy_attribute(self):
        import kextract.llm as llm

        with pytest.raises(AttributeError):
            llm.NotAClient  # noqa: B018
