"""
Recording providers shared across tests.

Each provider appends a tag to ``calls`` whenever it is consulted, so tests
can assert both how often and in what order lookups happen. Pass the same
list to several providers to record a combined order.
"""

from uuid import UUID

from chat_formatter.providers import LinkedAccount

RAY_ID = UUID("0f6b2a4c-1d3e-4f50-8a9b-0c1d2e3f4a5b")


class RecordingChatMeta:
    """Chat meta provider that records every call."""

    def __init__(self, prefix: str | None = None, suffix: str | None = None, calls=None):
        self.name = "recording"
        self.prefix = prefix
        self.suffix = suffix
        self.calls: list[str] = calls if calls is not None else []

    def prefix_for(self, identity: UUID) -> str | None:
        self.calls.append("prefix")
        return self.prefix

    def suffix_for(self, identity: UUID) -> str | None:
        self.calls.append("suffix")
        return self.suffix


class RecordingAccounts:
    def __init__(self, accounts: dict[UUID, LinkedAccount], calls=None):
        self.accounts = accounts
        self.calls: list[str] = calls if calls is not None else []

    def account_for(self, identity: UUID) -> LinkedAccount | None:
        self.calls.append("account")
        return self.accounts.get(identity)


class RecordingVerifierPrefixes:
    def __init__(self, prefixes: dict[str, str], calls=None):
        self.prefixes = prefixes
        self.calls: list[str] = calls if calls is not None else []

    def prefix_for_verifier(self, verifier: str) -> str | None:
        self.calls.append("verifier")
        return self.prefixes.get(verifier)
