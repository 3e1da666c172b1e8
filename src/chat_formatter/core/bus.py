"""
Chat Formatter Event Bus

The in-process stand-in for the chat host's event dispatch. Chat messages,
service registrations and reloads all flow through this bus.

=============================================================================
PRINCIPLES
=============================================================================

1. EMIT IS SYNCHRONOUS
   - When emit() returns, every handler has run
   - Sequence numbers record global order

2. HANDLERS RUN BY PRIORITY, THEN REGISTRATION ORDER
   - LOWEST runs first, MONITOR runs last
   - Handlers of equal priority run in the order they subscribed
   - This is what lets the formatter install its template first and
     resolve it last, with everyone else in between

3. THE ENVELOPE IS IMMUTABLE, THE PAYLOAD MAY NOT BE
   - BusEvent (type, detail, metadata) is frozen
   - A chat event travels in detail["chat"] and observers edit it in place;
     that is the whole point of the two-pass format

4. A FAILING HANDLER NEVER STOPS DELIVERY
   - Errors are logged with a traceback
   - The remaining handlers still run

=============================================================================
USAGE
=============================================================================

    from chat_formatter.core.bus import ChatBus, Priority
    from chat_formatter.core.events import Events

    bus = ChatBus()

    def shout(event):
        chat = event.detail["chat"]
        chat.message = chat.message.upper()

    unsubscribe = bus.on(Events.PLAYER_CHAT, shout, priority=Priority.NORMAL)
    bus.emit(Events.PLAYER_CHAT, {"chat": chat_event}, source="host")

    # Later: stop listening
    unsubscribe()

=============================================================================
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

EventHandler = Callable[["BusEvent"], None]

# An unsubscribe function takes no args and returns nothing
Unsubscribe = Callable[[], None]


class Priority(IntEnum):
    """Handler priority. Lower values run earlier."""

    LOWEST = 0
    LOW = 1
    NORMAL = 2
    HIGH = 3
    HIGHEST = 4
    MONITOR = 5


# =============================================================================
# EVENT METADATA
# =============================================================================


@dataclass(frozen=True)
class EventMetadata:
    """
    Metadata attached to every event.

    Attributes:
        timestamp: Unix epoch milliseconds (UTC). For display only.
        source: Name of the component that emitted this event.
                Examples: "host", "services", "ChatFormatterPlugin"
        sequence: Monotonically increasing integer. The only reliable
                  ordering between two events.
    """

    timestamp: int
    source: str
    sequence: int

    @staticmethod
    def create(source: str, sequence: int) -> EventMetadata:
        now_ms = int(datetime.now(UTC).timestamp() * 1000)
        return EventMetadata(timestamp=now_ms, source=source, sequence=sequence)


# =============================================================================
# BUS EVENT
# =============================================================================


@dataclass(frozen=True)
class BusEvent:
    """
    A single event on the bus.

    Attributes:
        type: The event type string, "domain:action" format.
              Examples: "player:chat", "service:registered"
        detail: The event payload.
        _meta: Event metadata (timestamp, source, sequence).
    """

    type: str
    detail: dict = field(default_factory=dict)
    _meta: EventMetadata | None = field(default=None)

    def __str__(self) -> str:
        if self._meta:
            return (
                f"BusEvent(type='{self.type}', "
                f"source='{self._meta.source}', "
                f"seq={self._meta.sequence})"
            )
        return f"BusEvent(type='{self.type}')"

    @property
    def meta(self) -> EventMetadata | None:
        return self._meta


@dataclass(frozen=True, eq=False)
class _Subscription:
    priority: Priority
    handler: EventHandler


# =============================================================================
# CHAT BUS (SINGLETON)
# =============================================================================


class ChatBus:
    """
    The event bus - Singleton Pattern.

    There is one bus per process, so the chat host, the service directory
    and the formatter plugin all meet in the same place without passing
    references around.

    Thread Safety:
    - Subscription changes and sequence assignment take an internal lock
    - Handlers run outside the lock, so chat events from different
      players can be dispatched concurrently

    Key Methods:
    - emit(): Dispatch an event (synchronous)
    - on(): Subscribe with a priority (returns unsubscribe function)
    - get_event_log(): Retrieve recent event history
    """

    _instance: ChatBus | None = None
    _initialized: bool = False

    def __new__(cls) -> ChatBus:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if ChatBus._initialized:
            return

        # event_type -> subscriptions, kept sorted by priority. sorted() is
        # stable, so equal priorities keep registration order.
        self._handlers: dict[str, list[_Subscription]] = {}

        # Bounded history for debugging
        self._event_log: deque[BusEvent] = deque(maxlen=1000)

        self._sequence: int = 0
        self._lock = threading.Lock()

        ChatBus._initialized = True
        logger.info("Chat bus initialized")

    # =========================================================================
    # EMIT
    # =========================================================================

    def emit(
        self, event_type: str, detail: dict[str, Any] | None = None, source: str = "host"
    ) -> BusEvent:
        """
        Emit an event and run every subscribed handler.

        Args:
            event_type: The type of event (e.g., "player:chat")
            detail: The event payload. Defaults to an empty dict.
            source: Which component is emitting.

        Returns:
            The dispatched BusEvent. Mutable payloads in ``detail`` reflect
            every handler's changes by the time this returns.
        """
        with self._lock:
            self._sequence += 1
            event = BusEvent(
                type=event_type,
                detail=detail if detail is not None else {},
                _meta=EventMetadata.create(source, self._sequence),
            )
            self._event_log.append(event)
            subscriptions = list(self._handlers.get(event_type, ()))

        logger.debug("EMIT [%d]: %s from %s", event._meta.sequence, event.type, source)

        for subscription in subscriptions:
            try:
                subscription.handler(event)
            except Exception as e:
                logger.error("Handler error for '%s': %s", event.type, e, exc_info=True)

        return event

    # =========================================================================
    # SUBSCRIBE
    # =========================================================================

    def on(
        self, event_type: str, handler: EventHandler, priority: Priority = Priority.NORMAL
    ) -> Unsubscribe:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Called with the BusEvent
            priority: Where in the dispatch order the handler runs

        Returns:
            An unsubscribe function.
        """
        subscription = _Subscription(priority=priority, handler=handler)
        with self._lock:
            current = self._handlers.get(event_type, [])
            self._handlers[event_type] = sorted(
                [*current, subscription], key=lambda s: s.priority
            )
            count = len(self._handlers[event_type])

        logger.debug(
            "SUBSCRIBE: '%s' at %s (total handlers: %d)", event_type, priority.name, count
        )

        def unsubscribe() -> None:
            with self._lock:
                subscriptions = self._handlers.get(event_type)
                if subscriptions is None or subscription not in subscriptions:
                    return
                self._handlers[event_type] = [s for s in subscriptions if s is not subscription]
            logger.debug("UNSUBSCRIBE: '%s'", event_type)

        return unsubscribe

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def get_event_log(self, limit: int | None = None) -> list[BusEvent]:
        """
        Get events from the log, oldest first.

        Args:
            limit: Maximum number of events to return (from the end).
        """
        if limit is not None:
            return list(self._event_log)[-limit:]
        return list(self._event_log)

    def get_sequence(self) -> int:
        return self._sequence

    def get_handler_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, ()))

    # =========================================================================
    # TESTING SUPPORT
    # =========================================================================

    @classmethod
    def reset_for_testing(cls) -> None:
        """
        Reset the singleton for testing.

        *** NOT FOR PRODUCTION USE ***
        """
        cls._instance = None
        cls._initialized = False
