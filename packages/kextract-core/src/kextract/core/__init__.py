"""kextract: conversational knowledge extraction. Fill a schema by asking."""

from __future__ import annotations

from kextract.core.controller import (
    BatchController,
    ControllerState,
    DialogueController,
    PerTurnController,
    create_controller,
)
from kextract.core.errors import (
    DuplicateSessionError,
    KExtractError,
    ModelInvocationError,
    ParseError,
    SchemaError,
)
from kextract.core.extract import LLMExtractor, ModelInvoker
from kextract.core.extractor import KnowledgeExtractor
from kextract.core.host import HookBus, HostBridge, LocalHost, Subscription
from kextract.core.merge import ResponseMerger
from kextract.core.schema import SchemaValidator
from kextract.core.state import ExtractionState
from kextract.core.types.config import ExtractionConfig, KExtractConfig, load_config
from kextract.core.types.knowledge import NO_VALUE, FieldSpec, FieldType, Mode

__all__ = [
    "KnowledgeExtractor",
    "DialogueController",
    "PerTurnController",
    "BatchController",
    "ControllerState",
    "create_controller",
    "SchemaValidator",
    "ExtractionState",
    "ResponseMerger",
    "LLMExtractor",
    "ModelInvoker",
    "HookBus",
    "HostBridge",
    "LocalHost",
    "Subscription",
    "FieldSpec",
    "FieldType",
    "Mode",
    "NO_VALUE",
    "ExtractionConfig",
    "KExtractConfig",
    "load_config",
    # errors
    "KExtractError",
    "SchemaError",
    "DuplicateSessionError",
    "ParseError",
    "ModelInvocationError",
]
