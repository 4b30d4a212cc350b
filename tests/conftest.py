"""Root conftest: shared fixtures for the entire test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from kextract.core.extractor import KnowledgeExtractor
from kextract.core.host import ABORTED, HANDLE_COMPLETE, VALIDATION_FAILED, LocalHost
from kextract.core.types.config import ExtractionConfig
from kextract.llm.types import LLMResponse, Usage


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

@pytest.fixture()
def email_schema():
    return {
        "email": {
            "type": "string",
            "description": "The user's email address",
            "question": "What is your email address?",
        },
    }


@pytest.fixture()
def contact_schema():
    return {
        "email": {
            "type": "string",
            "description": "The user's email address",
            "question": "What is your email address?",
        },
        "age": {
            "type": "number",
            "description": "The user's age in years",
            "question": "How old are you?",
        },
        "newsletter": {
            "type": "boolean",
            "description": "Whether the user wants the newsletter",
            "question": "Would you like to receive our newsletter?",
            "enum": [True, False],
        },
    }


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_invoker():
    """AsyncMock implementing the ModelInvoker protocol."""
    invoker = AsyncMock()
    invoker.extract.return_value = "{}"
    return invoker


@pytest.fixture()
def mock_llm_client():
    """AsyncMock implementing the LLMClient protocol."""
    client = AsyncMock()
    client.chat.return_value = LLMResponse(
        content='{"email": "a@b.com"}',
        usage=Usage(input_tokens=100, output_tokens=20),
    )
    return client


class Recorder:
    """Collects payloads of one host notification."""

    def __init__(self):
        self.payloads = []

    def __call__(self, payload):
        self.payloads.append(payload)

    @property
    def count(self):
        return len(self.payloads)


@pytest.fixture()
def host():
    return LocalHost()


@pytest.fixture()
def completions(host):
    recorder = Recorder()
    host.subscribe(HANDLE_COMPLETE, recorder)
    return recorder


@pytest.fixture()
def aborts(host):
    recorder = Recorder()
    host.subscribe(ABORTED, recorder)
    return recorder


@pytest.fixture()
def validation_failures(host):
    recorder = Recorder()
    host.subscribe(VALIDATION_FAILED, recorder)
    return recorder


@pytest.fixture()
def extractor(host, mock_invoker):
    return KnowledgeExtractor(host, mock_invoker, config=ExtractionConfig())
