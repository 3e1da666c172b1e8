"""Chat formatter plugin: wires the formatter into the bus and services.

``ChatFormatterPlugin`` is the single public entry point for a host.  On
:meth:`~ChatFormatterPlugin.enable` it:

1. writes the default config file if none exists (optional),
2. loads the configured format into its :class:`TemplateStore`,
3. binds whatever providers the :class:`ServiceDirectory` currently has,
4. subscribes to the bus:

   - ``player:chat`` at LOWEST  -> Pass A, install the compiled template
   - ``player:chat`` at HIGHEST -> Pass B, resolve the placeholders
   - ``service:registered`` / ``service:unregistered`` -> rebind providers

Provider bindings are a frozen :class:`ProviderBindings` snapshot replaced
as a whole, so Pass B always works from one consistent set.

The ``reload`` command re-reads the config and republishes the template;
the next chat message uses it.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol

from chat_formatter.config import FormatterConfig, load_config, save_default_config
from chat_formatter.core.bus import BusEvent, ChatBus, Priority, Unsubscribe
from chat_formatter.core.chat import ChatEvent
from chat_formatter.core.events import Events
from chat_formatter.core.services import ServiceDirectory
from chat_formatter.formatting.engine import FormattingEngine
from chat_formatter.formatting.template import CompiledTemplate, TemplateStore
from chat_formatter.providers import (
    ChatMetaProvider,
    LinkedAccountLookup,
    ProviderBindings,
    VerifierPrefixRegistry,
)

logger = logging.getLogger(__name__)

_VERIFIER_KINDS = (LinkedAccountLookup, VerifierPrefixRegistry)


class CommandSender(Protocol):
    """Whoever issued an administrative command."""

    def send_message(self, message: str) -> None: ...


class ChatFormatterPlugin:
    """Formats chat through the two-pass template pipeline.

    Attributes:
        store:  The template store; ``store.current()`` is the live format.
        engine: The formatting engine bound to ``store``.
    """

    def __init__(
        self,
        *,
        config_path: Path | str | None = None,
        bus: ChatBus | None = None,
        services: ServiceDirectory | None = None,
        save_default: bool = True,
    ) -> None:
        self._config_path = config_path
        self._bus = bus if bus is not None else ChatBus()
        self._services = services if services is not None else ServiceDirectory(self._bus)
        self._save_default = save_default
        self._bindings = ProviderBindings()
        self._bindings_lock = threading.Lock()
        self._subscriptions: list[Unsubscribe] = []

        self.store = TemplateStore()
        self.engine = FormattingEngine(self.store)

    @property
    def bindings(self) -> ProviderBindings:
        return self._bindings

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def enable(self, config: FormatterConfig | None = None) -> None:
        """Load configuration, bind providers and start observing chat.

        Args:
            config: Configuration the host has already loaded.  Read from
                    ``config_path`` when omitted.
        """
        if self._save_default:
            save_default_config(self._config_path)
        self.reload_config_values(config)

        self.refresh_chat_meta()
        self.refresh_verifier_services()

        self._subscriptions = [
            self._bus.on(Events.PLAYER_CHAT, self._on_chat_low, Priority.LOWEST),
            self._bus.on(Events.PLAYER_CHAT, self._on_chat_high, Priority.HIGHEST),
            self._bus.on(Events.SERVICE_REGISTERED, self._on_service_change),
            self._bus.on(Events.SERVICE_UNREGISTERED, self._on_service_change),
        ]

    def disable(self) -> None:
        """Stop observing the bus."""
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []

    def reload_config_values(self, config: FormatterConfig | None = None) -> CompiledTemplate:
        """Publish the compiled format from ``config``, re-reading the file if omitted."""
        cfg = config if config is not None else load_config(self._config_path)
        template = self.store.reload(cfg.format)
        self._bus.emit(
            Events.FORMAT_RELOADED, {"template": template}, source="ChatFormatterPlugin"
        )
        return template

    # ── Commands ──────────────────────────────────────────────────────────────

    def on_command(self, sender: CommandSender, args: list[str]) -> bool:
        """Handle the plugin's command.

        Args:
            sender: Receives the acknowledgement.
            args:   Command arguments; only ``reload`` is recognized.

        Returns:
            ``True`` if the command was handled, ``False`` to let the host
            show usage.
        """
        if args and args[0].lower() == "reload":
            self.reload_config_values()
            sender.send_message("Reloaded successfully.")
            return True

        return False

    # ── Provider binding ──────────────────────────────────────────────────────

    def refresh_chat_meta(self) -> None:
        provider = self._services.load(ChatMetaProvider)

        with self._bindings_lock:
            current = self._bindings
            if provider is not current.chat_meta:
                logger.info(
                    "New chat meta provider registered: %s",
                    "null" if provider is None else provider.name,
                )
            self._bindings = ProviderBindings(
                chat_meta=provider,
                accounts=current.accounts,
                verifier_prefixes=current.verifier_prefixes,
            )

    def refresh_verifier_services(self) -> None:
        accounts = self._services.load(LinkedAccountLookup)
        registry = self._services.load(VerifierPrefixRegistry)

        with self._bindings_lock:
            current = self._bindings
            if accounts is not current.accounts:
                logger.info("Linked account lookup changed")
            if registry is not current.verifier_prefixes:
                logger.info("Verifier prefix registry changed")
            self._bindings = ProviderBindings(
                chat_meta=current.chat_meta,
                accounts=accounts,
                verifier_prefixes=registry,
            )

    def _on_service_change(self, event: BusEvent) -> None:
        kind = event.detail.get("kind")
        if kind is ChatMetaProvider:
            self.refresh_chat_meta()
        if kind in _VERIFIER_KINDS:
            self.refresh_verifier_services()

    # ── Chat observers ────────────────────────────────────────────────────────

    def _on_chat_low(self, event: BusEvent) -> None:
        chat: ChatEvent = event.detail["chat"]
        # Lowest priority: other observers may override or extend the format.
        self.engine.install_template(chat)

    def _on_chat_high(self, event: BusEvent) -> None:
        chat: ChatEvent = event.detail["chat"]
        self.engine.format_event(chat, self._bindings)
