"""Two-pass chat formatting.

Pass A (:meth:`FormattingEngine.install_template`) runs first, at the lowest
observer priority.  It only copies the compiled template onto the event so
that every other observer sees, and may edit, the format before it is
resolved.

Pass B (:meth:`FormattingEngine.resolve`) runs last, at the highest
priority, on whatever format is on the event by then.  It substitutes, in
this order:

1. ``{prefix}``          colorized prefix from the chat meta provider
2. ``{suffix}``          colorized suffix from the chat meta provider
3. ``{verifier-badge}``  colorized verifier prefix plus one space
4. ``{name}``            the player's name, as plain text

Each value is computed at most once per message and only when its
placeholder is present.  Anything that cannot be resolved (no provider, no
linked account, empty badge) stays in the output literally.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from chat_formatter.core.chat import ChatEvent
from chat_formatter.formatting.colors import colorize
from chat_formatter.formatting.placeholders import Placeholder, replace_lazy
from chat_formatter.formatting.template import TemplateStore
from chat_formatter.providers import (
    LinkedAccountLookup,
    ProviderBindings,
    VerifierPrefixRegistry,
)

logger = logging.getLogger(__name__)

Lookup = Callable[[UUID], str | None]


@dataclass(frozen=True)
class FormatContext:
    """Everything Pass B needs for one message.

    Attributes:
        identity:      Player identity passed to every lookup.
        name:          Player name substituted for ``{name}``.
        message:       Raw message text.
        prefix_lookup: Prefix by identity, or ``None`` when unavailable.
        suffix_lookup: Suffix by identity, or ``None`` when unavailable.
        badge_lookup:  Raw verifier badge by identity, or ``None`` when
                       unavailable.
    """

    identity: UUID
    name: str
    message: str
    prefix_lookup: Lookup | None = None
    suffix_lookup: Lookup | None = None
    badge_lookup: Lookup | None = None


def verifier_badge_lookup(
    accounts: LinkedAccountLookup, registry: VerifierPrefixRegistry
) -> Lookup:
    """Chain the linked-account lookup into the verifier prefix registry.

    The returned callable yields ``None`` when the player has no linked
    account or the verifier has no (or an empty) prefix.
    """

    def _lookup(identity: UUID) -> str | None:
        account = accounts.account_for(identity)
        if account is None:
            return None
        return registry.prefix_for_verifier(account.verifier) or None

    return _lookup


def build_context(event: ChatEvent, bindings: ProviderBindings) -> FormatContext:
    """Build the Pass B context from an event and the bound providers."""
    meta = bindings.chat_meta
    badge = None
    if bindings.accounts is not None and bindings.verifier_prefixes is not None:
        badge = verifier_badge_lookup(bindings.accounts, bindings.verifier_prefixes)

    return FormatContext(
        identity=event.player.unique_id,
        name=event.player.name,
        message=event.message,
        prefix_lookup=meta.prefix_for if meta is not None else None,
        suffix_lookup=meta.suffix_for if meta is not None else None,
        badge_lookup=badge,
    )


class FormattingEngine:
    """Applies the compiled template and resolves per-player placeholders.

    The engine holds no per-message state; one instance serves every chat
    event concurrently.
    """

    def __init__(self, store: TemplateStore) -> None:
        self._store = store

    # ── Pass A ────────────────────────────────────────────────────────────────

    def install_template(self, event: ChatEvent) -> None:
        """Set the event's format to the current compiled template."""
        event.format = self._store.current().text

    # ── Pass B ────────────────────────────────────────────────────────────────

    def resolve(self, fmt: str, context: FormatContext) -> str:
        """Resolve prefix, suffix, verifier badge and name in ``fmt``.

        Args:
            fmt:     The event's current format string.
            context: Per-message lookups and player data.

        Returns:
            The format with every resolvable placeholder substituted.
        """
        identity = context.identity

        if context.prefix_lookup is not None:
            prefix_lookup = context.prefix_lookup
            fmt = replace_lazy(fmt, Placeholder.PREFIX, lambda: colorize(prefix_lookup(identity)))

        if context.suffix_lookup is not None:
            suffix_lookup = context.suffix_lookup
            fmt = replace_lazy(fmt, Placeholder.SUFFIX, lambda: colorize(suffix_lookup(identity)))

        if context.badge_lookup is not None:
            badge_lookup = context.badge_lookup

            def _badge() -> str | None:
                badge = badge_lookup(identity)
                if not badge:
                    return None
                return colorize(badge) + " "

            fmt = replace_lazy(fmt, Placeholder.VERIFIER_BADGE, _badge)

        return replace_lazy(fmt, Placeholder.NAME, lambda: context.name)

    def format_event(self, event: ChatEvent, bindings: ProviderBindings) -> None:
        """Run Pass B against ``event`` and write the result back."""
        event.format = self.resolve(event.format, build_context(event, bindings))
        logger.debug("Formatted chat from %s: %r", event.player.name, event.format)
