"""Model invocation for extraction turns."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Sequence

from kextract.core.errors import ModelInvocationError
from kextract.core.extract.prompts import PROMPTS, format_fields, render_prompt

if TYPE_CHECKING:
    from kextract.core.types.knowledge import FieldSpec
    from kextract.llm import LLMClient

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ModelInvoker(Protocol):
    """Calls a language model to pull field values out of a user message."""

    async def extract(
        self,
        fields: Sequence[FieldSpec],
        message: str,
        prompt: str,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> str:
        """Return the model's raw answer text."""
        ...


class LLMExtractor:
    """ModelInvoker backed by a kextract ``LLMClient``.

    Pipeline:
    1. Render the named extraction template with the outstanding fields
    2. Send it as the system message, the user's text as the user message
    3. Ask for a JSON answer, bounded by *timeout*
    4. Hand the raw text back for merging
    """

    def __init__(self, llm_client: LLMClient, prompts: Optional[Dict[str, str]] = None):
        self.llm = llm_client
        self.prompts = prompts if prompts is not None else PROMPTS

    def build_messages(self, fields: Sequence[FieldSpec], message: str, prompt: str) -> List:
        from kextract.llm.types import ChatMessage

        system = render_prompt(
            prompt,
            self.prompts,
            fields=format_fields(fields),
            message=message,
        )
        return [
            ChatMessage(role="system", content=system),
            ChatMessage(role="user", content=message),
        ]

    async def extract(
        self,
        fields: Sequence[FieldSpec],
        message: str,
        prompt: str,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> str:
        messages = self.build_messages(fields, message, prompt)

        try:
            response = await asyncio.wait_for(
                self.llm.chat(messages=messages, json_output=True),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ModelInvocationError(
                f"Extraction model timed out after {timeout:.1f}s"
            ) from exc
        except RuntimeError as exc:
            raise ModelInvocationError(str(exc)) from exc

        logger.debug("Extraction answer: %s", response.content)
        return response.content
