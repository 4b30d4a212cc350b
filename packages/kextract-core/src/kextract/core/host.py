"""Host bridge: the seam between the extractor and its chat host."""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union

logger = logging.getLogger(__name__)

# Host triggers
USER_MESSAGE = "user_message"
SET_PROMPTS = "set_prompts"

# Extractor notifications
HANDLE_START = "kextract:handle_start"
HANDLE_COMPLETE = "kextract:handle_complete"
VALIDATION_FAILED = "kextract:validation_failed"
ABORTED = "kextract:aborted"

# Prompt-assembly subtypes the batch controller reacts to
CHAT = "chat"
FORCE_QUESTIONS_AND_CHAT = "force questions and chat"

HookHandler = Callable[[Dict[str, Any]], Union[Optional[bool], Awaitable[Optional[bool]]]]


class Subscription:
    """Handle returned by ``subscribe``; revoking it removes the handler."""

    def __init__(self, bus: HookBus, event: str, handler: HookHandler):
        self.event = event
        self.handler = handler
        self._bus = bus
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def revoke(self) -> None:
        if not self._active:
            return
        self._active = False
        self._bus._remove(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "revoked"
        return f"<Subscription {self.event!r} {state}>"


class HookBus:
    """Ordered registry of hook handlers keyed by event name.

    Handlers may be plain callables or coroutine functions. ``emit`` awaits
    each one in subscription order, so a slow handler holds back the next
    trigger for the same bus.
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[str, List[Subscription]] = defaultdict(list)

    def on(self, event: str, handler: HookHandler) -> Subscription:
        subscription = Subscription(self, event, handler)
        self._subscriptions[event].append(subscription)
        return subscription

    def handlers(self, event: str) -> List[HookHandler]:
        return [s.handler for s in self._subscriptions.get(event, [])]

    async def emit(self, event: str, payload: Optional[Dict[str, Any]] = None) -> bool:
        """Dispatch *payload* to every handler of *event*.

        Returns True if any handler asked to suppress the default flow.
        """
        handled = False
        # Copy: handlers may revoke themselves while running.
        for subscription in list(self._subscriptions.get(event, [])):
            if not subscription.active:
                continue
            result = subscription.handler(payload if payload is not None else {})
            if inspect.isawaitable(result):
                result = await result
            handled = handled or result is True
        return handled

    def _remove(self, subscription: Subscription) -> None:
        subs = self._subscriptions.get(subscription.event, [])
        if subscription in subs:
            subs.remove(subscription)


class HostBridge(Protocol):
    """What the extractor needs from the embedding chat host."""

    def subscribe(self, event: str, handler: HookHandler) -> Subscription: ...

    async def emit(self, event: str, payload: Optional[Dict[str, Any]] = None) -> bool: ...

    async def ask(self, question: str) -> None:
        """Deliver *question* as the assistant's next turn."""
        ...

    def recent_conversation(self, handle: Any) -> List[str]: ...

    def add_context(self, handle: Any, **context: Any) -> None: ...

    def set_prompt(self, handle: Any, name: str) -> None: ...


class LocalHost:
    """In-process HostBridge that records everything it is asked to do."""

    def __init__(self, bus: Optional[HookBus] = None):
        self.bus = bus or HookBus()
        self.asked: List[str] = []
        self.conversations: Dict[Any, List[str]] = defaultdict(list)
        self.context: Dict[Any, Dict[str, Any]] = defaultdict(dict)
        self.prompts: Dict[Any, List[str]] = defaultdict(list)

    def subscribe(self, event: str, handler: HookHandler) -> Subscription:
        return self.bus.on(event, handler)

    async def emit(self, event: str, payload: Optional[Dict[str, Any]] = None) -> bool:
        return await self.bus.emit(event, payload)

    async def ask(self, question: str) -> None:
        self.asked.append(question)

    def recent_conversation(self, handle: Any) -> List[str]:
        return list(self.conversations[handle])

    def add_context(self, handle: Any, **context: Any) -> None:
        self.context[handle].update(context)

    def set_prompt(self, handle: Any, name: str) -> None:
        self.prompts[handle].append(name)

    # -- triggers --------------------------------------------------------

    async def user_message(self, text: str) -> bool:
        """Deliver a user turn; True means the default reply was suppressed."""
        return await self.emit(USER_MESSAGE, {"value": text})

    async def set_prompts(self, handle: Any, subtype: str = CHAT) -> bool:
        """Announce that a prompt is being assembled for *handle*."""
        return await self.emit(SET_PROMPTS, {"model": handle, "type": subtype})
