"""Optional collaborators that supply prefix, suffix and verifier data.

None of these are required.  Whatever is bound when a chat message is
formatted is used; a missing collaborator leaves its placeholder visible
in the output.

Capabilities
------------
ChatMetaProvider        prefix and suffix per player.
LinkedAccountLookup     linked external account per player.
VerifierPrefixRegistry  display prefix per verifier (e.g. ``"discord"``).

The ``InMemory*`` classes are simple dict-backed implementations used by the
command-line interface and the test suite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable
from uuid import UUID


@dataclass(frozen=True)
class LinkedAccount:
    """An external account linked to a player.

    Attributes:
        verifier: Identifier of the service that verified the link.
    """

    verifier: str


@runtime_checkable
class ChatMetaProvider(Protocol):
    """Source of per-player chat prefixes and suffixes."""

    name: str

    def prefix_for(self, identity: UUID) -> str | None: ...

    def suffix_for(self, identity: UUID) -> str | None: ...


@runtime_checkable
class LinkedAccountLookup(Protocol):
    """Looks up the account a player has linked, if any."""

    def account_for(self, identity: UUID) -> LinkedAccount | None: ...


@runtime_checkable
class VerifierPrefixRegistry(Protocol):
    """Maps a verifier identifier to the badge shown in chat."""

    def prefix_for_verifier(self, verifier: str) -> str | None: ...


@dataclass(frozen=True)
class ProviderBindings:
    """Snapshot of the collaborators bound at one point in time.

    The plugin replaces the whole snapshot when a service changes, so a
    chat event reading it once sees a consistent set.
    """

    chat_meta: ChatMetaProvider | None = None
    accounts: LinkedAccountLookup | None = None
    verifier_prefixes: VerifierPrefixRegistry | None = None


# ── In-memory implementations ─────────────────────────────────────────────────


@dataclass
class InMemoryChatMeta:
    name: str = "in-memory"
    prefixes: dict[UUID, str] = field(default_factory=dict)
    suffixes: dict[UUID, str] = field(default_factory=dict)

    def prefix_for(self, identity: UUID) -> str | None:
        return self.prefixes.get(identity)

    def suffix_for(self, identity: UUID) -> str | None:
        return self.suffixes.get(identity)


@dataclass
class InMemoryLinkedAccounts:
    accounts: dict[UUID, LinkedAccount] = field(default_factory=dict)

    def account_for(self, identity: UUID) -> LinkedAccount | None:
        return self.accounts.get(identity)


@dataclass
class InMemoryVerifierPrefixes:
    prefixes: dict[str, str] = field(default_factory=dict)

    def prefix_for_verifier(self, verifier: str) -> str | None:
        return self.prefixes.get(verifier)
