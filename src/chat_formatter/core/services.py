"""Service directory: where optional providers are registered at runtime.

Providers come and go while the server is running (a permissions plugin is
reloaded, an account-linking service starts late).  The directory keeps the
registrations and announces every change on the bus, so consumers can
rebind instead of polling.

The capability key is the protocol class itself::

    services.register(ChatMetaProvider, my_provider)
    services.load(ChatMetaProvider)   # -> my_provider
"""

from __future__ import annotations

import logging
import threading
from typing import Any, TypeVar

from chat_formatter.core.bus import ChatBus
from chat_formatter.core.events import Events

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ServiceDirectory:
    """Registry of providers keyed by capability.

    When several providers are registered for one capability, the most
    recent registration wins.
    """

    def __init__(self, bus: ChatBus | None = None) -> None:
        self._bus = bus if bus is not None else ChatBus()
        self._providers: dict[type, list[Any]] = {}
        self._lock = threading.Lock()

    def register(self, kind: type[T], provider: T) -> None:
        """Register ``provider`` for ``kind`` and announce it."""
        with self._lock:
            self._providers.setdefault(kind, []).append(provider)
        logger.debug("Registered %s provider %r", kind.__name__, provider)
        self._bus.emit(
            Events.SERVICE_REGISTERED, {"kind": kind, "provider": provider}, source="services"
        )

    def unregister(self, kind: type[T], provider: T) -> bool:
        """Remove ``provider`` from ``kind``.

        Returns:
            ``True`` if the provider was registered, ``False`` otherwise (no
            event is emitted in that case).
        """
        with self._lock:
            providers = self._providers.get(kind, [])
            remaining = [p for p in providers if p is not provider]
            if len(remaining) == len(providers):
                return False
            self._providers[kind] = remaining
        logger.debug("Unregistered %s provider %r", kind.__name__, provider)
        self._bus.emit(
            Events.SERVICE_UNREGISTERED, {"kind": kind, "provider": provider}, source="services"
        )
        return True

    def load(self, kind: type[T]) -> T | None:
        """Return the active provider for ``kind``, or ``None``."""
        with self._lock:
            providers = self._providers.get(kind)
            return providers[-1] if providers else None
