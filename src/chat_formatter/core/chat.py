"""In-flight chat messages.

A :class:`ChatEvent` is the one mutable object in the pipeline.  It is
created for a single message, passed through every chat observer on the
bus, and discarded once rendered.  Observers edit ``format`` and
``message``; the formatter never sends anything itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from uuid import NAMESPACE_OID, UUID, uuid3

from chat_formatter.core.bus import ChatBus
from chat_formatter.core.events import Events

# %1$s, %2$s and the %% escape, matched in a single pass so that substituted
# values are never re-scanned.
_SLOT_PATTERN = re.compile(r"%(?:([12])\$s|%)")


@dataclass(frozen=True)
class Player:
    """A chatting player.

    Attributes:
        unique_id:    Stable identity used for provider lookups.
        name:         Account name, substituted for ``{name}``.
        display_name: Name shown in the ``{displayname}`` slot.  Defaults to
                      ``name``.
    """

    unique_id: UUID
    name: str
    display_name: str | None = None

    @classmethod
    def offline(cls, name: str, display_name: str | None = None) -> Player:
        """Build a player whose identity is derived from the name alone."""
        return cls(uuid3(NAMESPACE_OID, f"OfflinePlayer:{name}"), name, display_name)

    @property
    def shown_name(self) -> str:
        return self.display_name if self.display_name is not None else self.name


@dataclass
class ChatEvent:
    """A chat message on its way to the sink.

    Attributes:
        player:  The sender.
        message: Message body; fills the ``%2$s`` slot on render.
        format:  Working format string.  Starts as the host's plain default
                 and is replaced by observers.
    """

    player: Player
    message: str
    format: str = "<%1$s> %2$s"

    def render(self) -> str:
        """Fill the positional slots and return the final chat line."""

        def _fill(match: re.Match[str]) -> str:
            slot = match.group(1)
            if slot == "1":
                return self.player.shown_name
            if slot == "2":
                return self.message
            return "%"

        return _SLOT_PATTERN.sub(_fill, self.format)


def publish_chat(bus: ChatBus, player: Player, message: str) -> ChatEvent:
    """Send a chat message through every observer on ``bus``.

    Returns:
        The event after all observers ran.  Call :meth:`ChatEvent.render`
        for the line to deliver.
    """
    event = ChatEvent(player=player, message=message)
    bus.emit(Events.PLAYER_CHAT, {"chat": event}, source="host")
    return event
