from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, field_validator

from kextract.core.extract.prompts import ADD_QUESTION_PROMPT, EXTRACT_PROMPT


class LLMConfig(BaseModel):
    """LLM provider configuration for the extraction model."""

    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 1024


class ExtractionConfig(BaseModel):
    """Dialogue and extraction tuning."""

    timeout_ms: int = 10000
    """Upper bound for one extraction call to the model."""

    max_rounds: Optional[int] = None
    """Abort after this many processed turns; ``None`` never gives up."""

    extract_prompt: str = EXTRACT_PROMPT
    add_question_prompt: str = ADD_QUESTION_PROMPT

    @field_validator("timeout_ms")
    @classmethod
    def _positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeout_ms must be positive")
        return v

    @field_validator("max_rounds")
    @classmethod
    def _positive_rounds(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("max_rounds must be at least 1")
        return v

    @property
    def timeout(self) -> float:
        """Timeout in seconds."""
        return self.timeout_ms / 1000.0


class KExtractConfig(BaseModel):
    """Top-level kextract configuration."""

    llm: LLMConfig = LLMConfig()
    extraction: ExtractionConfig = ExtractionConfig()
    verbose: bool = False


def load_config(path: Optional[str] = None) -> KExtractConfig:
    """Load configuration from a kextract.toml file, falling back to defaults.

    Uses ``tomllib`` on Python 3.11+ and ``tomli`` on older versions.
    """

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib  # type: ignore[no-redef]

    config_path = Path(path) if path else Path("kextract.toml")

    if not config_path.exists():
        return KExtractConfig()

    with open(config_path, "rb") as f:
        raw = tomllib.load(f)

    return KExtractConfig(**raw)
