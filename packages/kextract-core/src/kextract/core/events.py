"""Extraction event system for observable dialogue sessions."""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class ExtractionEventType(Enum):
    """Types of events emitted while a session runs."""

    SESSION_START = "session_start"
    TURN_START = "turn_start"
    TURN_END = "turn_end"
    PARSE_ERROR = "parse_error"
    QUESTION_ASKED = "question_asked"
    SESSION_COMPLETE = "session_complete"
    SESSION_ABORTED = "session_aborted"
    SESSION_STOPPED = "session_stopped"


class ExtractionEvent:
    """Lightweight event emitted around dialogue turns."""

    __slots__ = (
        "event_type",
        "message",
        "merged",
        "outstanding",
        "duration",
        "timestamp",
        "metadata",
    )

    def __init__(
        self,
        event_type: ExtractionEventType,
        message: str = "",
        merged: Optional[List[str]] = None,
        outstanding: Optional[List[str]] = None,
        duration: float = 0.0,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.event_type = event_type
        self.message = message
        self.merged = merged or []
        self.outstanding = outstanding or []
        self.duration = duration
        self.timestamp = time.time()
        self.metadata = metadata or {}


ExtractionEventCallback = Callable[[ExtractionEvent], None]
