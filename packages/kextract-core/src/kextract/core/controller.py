"""DialogueController: drives question/extraction turns until the record is full."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from kextract.core.errors import ParseError
from kextract.core.events import (
    ExtractionEvent,
    ExtractionEventCallback,
    ExtractionEventType,
)
from kextract.core.extract.engine import ModelInvoker
from kextract.core.host import (
    ABORTED,
    CHAT,
    FORCE_QUESTIONS_AND_CHAT,
    HANDLE_COMPLETE,
    SET_PROMPTS,
    USER_MESSAGE,
    HostBridge,
    Subscription,
)
from kextract.core.merge import ResponseMerger
from kextract.core.state import ExtractionState
from kextract.core.types.config import ExtractionConfig
from kextract.core.types.knowledge import FieldSpec, Mode, TurnOutcome

logger = logging.getLogger(__name__)


class ControllerState(Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    PROCESSING = "processing"
    COMPLETE = "complete"
    STOPPED = "stopped"
    ABORTED = "aborted"


_FINISHED = (ControllerState.COMPLETE, ControllerState.STOPPED, ControllerState.ABORTED)


class DialogueController(ABC):
    """Turn-processing contract shared by both questioning modes.

    Lifecycle: attach() → handle_trigger() per host turn → complete/stop.
    The controller subscribes to exactly one host trigger and revokes that
    subscription when the session ends.
    """

    mode: Mode
    trigger: str

    def __init__(
        self,
        state: ExtractionState,
        host: HostBridge,
        invoker: ModelInvoker,
        config: Optional[ExtractionConfig] = None,
        merger: Optional[ResponseMerger] = None,
        on_release: Optional[Callable[[], None]] = None,
        event_callback: Optional[ExtractionEventCallback] = None,
    ):
        self.state = state
        self.host = host
        self.invoker = invoker
        self.config = config or ExtractionConfig()
        self.merger = merger or ResponseMerger()
        self.status = ControllerState.IDLE
        self._on_release = on_release
        self._event_callback = event_callback
        self._subscription: Optional[Subscription] = None

    @property
    def finished(self) -> bool:
        return self.status in _FINISHED

    @property
    def subscription(self) -> Optional[Subscription]:
        return self._subscription

    async def attach(self) -> None:
        """Subscribe to the mode's host trigger.

        A record that arrives already complete finishes immediately.
        """
        if self.status is not ControllerState.IDLE:
            raise RuntimeError(f"Controller already attached ({self.status.value})")

        self._subscription = self.host.subscribe(self.trigger, self.handle_trigger)
        self.status = ControllerState.AWAITING_INPUT
        self._fire(
            ExtractionEventType.SESSION_START,
            outstanding=self._outstanding_names(),
            metadata={"mode": self.mode.value},
        )
        logger.info(
            "Knowledge extraction started (%s, %d fields)", self.mode.value, len(self.state)
        )

        if self.state.is_complete():
            await self._complete()

    async def handle_trigger(self, payload: Dict[str, Any]) -> bool:
        """Host hook entry point; True asks the host to skip its default reply."""
        if self.status is not ControllerState.AWAITING_INPUT:
            return False
        message = self.message_from(payload)
        if message is None:
            return False
        outcome = await self.process_turn(message, payload)
        return outcome.handled

    async def process_turn(
        self, message: str, payload: Optional[Dict[str, Any]] = None
    ) -> TurnOutcome:
        """Extract from *message*, then complete, abort or ask again."""
        self.status = ControllerState.PROCESSING
        self.state.rounds += 1
        self._fire(ExtractionEventType.TURN_START, message=message)
        start = time.monotonic()

        try:
            merged, error = await self._extract(message)
            if self.status is not ControllerState.PROCESSING:
                # Stopped while the model was answering.
                return TurnOutcome(merged=merged, parse_error=error)
            outstanding = self.state.outstanding_fields()

            if not outstanding:
                await self._complete()
                outcome = TurnOutcome(merged=merged, complete=True, parse_error=error)
            elif self._rounds_exhausted():
                await self._abort()
                outcome = TurnOutcome(
                    merged=merged,
                    outstanding=[f.name for f in outstanding],
                    parse_error=error,
                )
            else:
                outcome = await self.follow_up(payload or {}, merged, outstanding, error)
        finally:
            if self.status is ControllerState.PROCESSING:
                self.status = ControllerState.AWAITING_INPUT

        self._fire(
            ExtractionEventType.TURN_END,
            message=message,
            merged=outcome.merged,
            outstanding=outcome.outstanding,
            duration=time.monotonic() - start,
            metadata={"round": self.state.rounds, "complete": outcome.complete},
        )
        return outcome

    def stop(self) -> None:
        """Explicit cancellation: detach and release without notifying completion."""
        if self.finished:
            return
        self._detach()
        self.status = ControllerState.STOPPED
        self._fire(ExtractionEventType.SESSION_STOPPED, outstanding=self._outstanding_names())
        logger.info("Knowledge extraction stopped")
        self._release()

    # -- mode specific -----------------------------------------------------

    @abstractmethod
    def message_from(self, payload: Dict[str, Any]) -> Optional[str]:
        """Pull the latest user-authored text out of a trigger payload."""

    @abstractmethod
    async def follow_up(
        self,
        payload: Dict[str, Any],
        merged: List[str],
        outstanding: List[FieldSpec],
        error: Optional[str],
    ) -> TurnOutcome:
        """Ask for whatever is still outstanding."""

    # -- internals ---------------------------------------------------------

    async def _extract(self, message: str) -> Tuple[List[str], Optional[str]]:
        fields = self.state.outstanding_fields()
        try:
            raw = await self.invoker.extract(
                fields,
                message,
                prompt=self.config.extract_prompt,
                timeout=self.config.timeout,
            )
        except Exception as exc:
            logger.warning("Extraction call failed, keeping fields outstanding: %s", exc)
            self._fire(ExtractionEventType.PARSE_ERROR, message=message, metadata={"error": str(exc)})
            return [], str(exc)

        if self.status is not ControllerState.PROCESSING:
            logger.debug("Session ended during extraction, discarding answer")
            return [], None

        try:
            merged = self.merger.merge(self.state, raw)
        except ParseError as exc:
            logger.warning("Could not parse extraction answer: %s", exc)
            self._fire(ExtractionEventType.PARSE_ERROR, message=raw, metadata={"error": str(exc)})
            return [], str(exc)

        if merged:
            logger.debug("Merged fields: %s", ", ".join(merged))
        return merged, None

    def _rounds_exhausted(self) -> bool:
        limit = self.config.max_rounds
        return limit is not None and self.state.rounds >= limit

    async def _complete(self) -> None:
        if self.finished:
            return
        self._detach()
        self.status = ControllerState.COMPLETE
        values = self.state.values()
        logger.info("Extracted all values: %s", values)
        self._fire(ExtractionEventType.SESSION_COMPLETE, metadata={"knowledge": values})
        self._release()
        await self.host.emit(
            HANDLE_COMPLETE,
            {"knowledge": values, "record": self.state.snapshot()},
        )

    async def _abort(self) -> None:
        if self.finished:
            return
        self._detach()
        self.status = ControllerState.ABORTED
        missing = self._outstanding_names()
        logger.warning(
            "Giving up after %d rounds, still missing: %s",
            self.state.rounds,
            ", ".join(missing),
        )
        self._fire(ExtractionEventType.SESSION_ABORTED, outstanding=missing)
        self._release()
        await self.host.emit(
            ABORTED,
            {
                "knowledge": self.state.values(),
                "outstanding": missing,
                "rounds": self.state.rounds,
            },
        )

    def _detach(self) -> None:
        if self._subscription is not None:
            self._subscription.revoke()
            self._subscription = None

    def _release(self) -> None:
        if self._on_release is not None:
            callback, self._on_release = self._on_release, None
            callback()

    def _outstanding_names(self) -> List[str]:
        return [f.name for f in self.state.outstanding_fields()]

    def _fire(self, event_type: ExtractionEventType, **kwargs: Any) -> None:
        if self._event_callback is not None:
            self._event_callback(ExtractionEvent(event_type, **kwargs))


class PerTurnController(DialogueController):
    """Answers each user message with the single next unanswered question."""

    mode = Mode.PER_TURN
    trigger = USER_MESSAGE

    def message_from(self, payload: Dict[str, Any]) -> Optional[str]:
        value = payload.get("value")
        if not isinstance(value, str) or not value:
            return None
        return value

    async def follow_up(self, payload, merged, outstanding, error) -> TurnOutcome:
        question = outstanding[0].question
        await self.host.ask(question)
        self._fire(ExtractionEventType.QUESTION_ASKED, message=question)
        return TurnOutcome(
            merged=merged,
            outstanding=[f.name for f in outstanding],
            question=question,
            handled=True,
            parse_error=error,
        )


class BatchController(DialogueController):
    """Folds every outstanding question into the prompt the host is assembling."""

    mode = Mode.BATCH
    trigger = SET_PROMPTS
    subtypes = (CHAT, FORCE_QUESTIONS_AND_CHAT)

    def message_from(self, payload: Dict[str, Any]) -> Optional[str]:
        if payload.get("type") not in self.subtypes:
            return None
        conversation = self.host.recent_conversation(payload.get("model"))
        if not conversation:
            return None
        last = conversation[-1]
        if isinstance(last, Mapping):
            last = last.get("content")
        return last if isinstance(last, str) and last else None

    async def follow_up(self, payload, merged, outstanding, error) -> TurnOutcome:
        handle = payload.get("model")
        questions = [f.question for f in outstanding]
        self.host.add_context(handle, questions=questions)
        self.host.set_prompt(handle, self.config.add_question_prompt)
        self._fire(
            ExtractionEventType.QUESTION_ASKED,
            message="\n".join(questions),
            outstanding=[f.name for f in outstanding],
        )
        return TurnOutcome(
            merged=merged,
            outstanding=[f.name for f in outstanding],
            parse_error=error,
        )


CONTROLLERS = {
    Mode.PER_TURN: PerTurnController,
    Mode.BATCH: BatchController,
}


def create_controller(mode: Mode, *args: Any, **kwargs: Any) -> DialogueController:
    """Instantiate the controller variant for *mode*."""
    return CONTROLLERS[Mode(mode)](*args, **kwargs)
