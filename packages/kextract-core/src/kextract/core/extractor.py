"""KnowledgeExtractor: accepts start requests and owns the active session."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from kextract.core.controller import DialogueController, create_controller
from kextract.core.errors import DuplicateSessionError, KExtractError, SchemaError
from kextract.core.events import ExtractionEventCallback
from kextract.core.extract.engine import ModelInvoker
from kextract.core.host import HANDLE_START, VALIDATION_FAILED, HostBridge, Subscription
from kextract.core.schema import SchemaValidator
from kextract.core.state import ExtractionState
from kextract.core.types.config import ExtractionConfig
from kextract.core.types.knowledge import Mode

logger = logging.getLogger(__name__)


class SessionGuard:
    """The single "extraction active" flag for one embedding context."""

    def __init__(self) -> None:
        self.active = False


class KnowledgeExtractor:
    """Entry point a host embeds: one active extraction session at a time.

    Separate instances share nothing, so a host that needs several parallel
    sessions creates one extractor per conversation.
    """

    def __init__(
        self,
        host: HostBridge,
        invoker: ModelInvoker,
        config: Optional[ExtractionConfig] = None,
        event_callback: Optional[ExtractionEventCallback] = None,
    ):
        self.host = host
        self.invoker = invoker
        self.config = config or ExtractionConfig()
        self.guard = SessionGuard()
        self.validator = SchemaValidator(self.guard)
        self._event_callback = event_callback
        self._controller: Optional[DialogueController] = None
        self._start_subscription: Optional[Subscription] = None

    @property
    def active(self) -> bool:
        return self.guard.active

    @property
    def controller(self) -> Optional[DialogueController]:
        """Controller of the current (or most recent) session."""
        return self._controller

    async def start(self, requested_knowledge: Any, force: Any) -> DialogueController:
        """Validate *requested_knowledge* and begin a session.

        Raises DuplicateSessionError while another session is active and
        SchemaError (after emitting VALIDATION_FAILED) for a bad schema.
        """
        validation = self.validator.validate(requested_knowledge, force)

        if not validation.ok:
            if validation.issues[0].code == "in_use":
                logger.error("Knowledge extraction pipeline already in use")
                raise DuplicateSessionError(validation.issues[0].message)

            logger.error(
                "Errors in requested knowledge: %s",
                "; ".join(issue.message for issue in validation.issues),
            )
            await self.host.emit(
                VALIDATION_FAILED,
                {"errors": [issue.model_dump() for issue in validation.issues]},
            )
            raise SchemaError(validation.issues)

        controller = create_controller(
            Mode.from_force(force),
            ExtractionState(validation.record),
            self.host,
            self.invoker,
            config=self.config,
            on_release=self._release,
            event_callback=self._event_callback,
        )
        self.guard.active = True
        self._controller = controller
        await controller.attach()
        return controller

    def stop(self) -> None:
        """Cancel the active session, if any."""
        if self._controller is not None:
            self._controller.stop()
        self.guard.active = False

    def install(self) -> Subscription:
        """Listen for start requests on the host's HANDLE_START hook."""
        if self._start_subscription is None or not self._start_subscription.active:
            self._start_subscription = self.host.subscribe(HANDLE_START, self.handle_start)
        return self._start_subscription

    def uninstall(self) -> None:
        if self._start_subscription is not None:
            self._start_subscription.revoke()
            self._start_subscription = None

    async def handle_start(self, payload: Dict[str, Any]) -> bool:
        """HANDLE_START hook; failures were already logged and notified."""
        try:
            await self.start(payload.get("requested_knowledge"), payload.get("force"))
        except KExtractError as exc:
            logger.debug("Start request rejected: %s", exc)
        return False

    def _release(self) -> None:
        self.guard.active = False
