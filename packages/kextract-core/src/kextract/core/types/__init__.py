from __future__ import annotations

from kextract.core.types.config import (
    ExtractionConfig,
    KExtractConfig,
    LLMConfig,
    load_config,
)
from kextract.core.types.knowledge import (
    NO_VALUE,
    SUPPORTED_TYPES,
    ExtractionRecord,
    FieldSpec,
    FieldType,
    Mode,
    SchemaIssue,
    SchemaValidation,
    TurnOutcome,
    build_record,
    matches_type,
)

__all__ = [
    # config
    "ExtractionConfig",
    "KExtractConfig",
    "LLMConfig",
    "load_config",
    # knowledge
    "NO_VALUE",
    "SUPPORTED_TYPES",
    "ExtractionRecord",
    "FieldSpec",
    "FieldType",
    "Mode",
    "SchemaIssue",
    "SchemaValidation",
    "TurnOutcome",
    "build_record",
    "matches_type",
]
