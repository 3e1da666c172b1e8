"""
Event Type Constants

Events use "domain:action" format. Using the constants instead of string
literals keeps emitters and subscribers in agreement.

    from chat_formatter.core.bus import ChatBus
    from chat_formatter.core.events import Events

    ChatBus().on(Events.SERVICE_REGISTERED, handle_service_change)
"""


class Events:
    """All event types emitted on the chat bus."""

    # =========================================================================
    # CHAT
    # =========================================================================

    PLAYER_CHAT = "player:chat"
    """
    Emitted by the host for every chat message before it is delivered.
    Observers edit the ChatEvent in place; the host renders it afterwards.

    Detail: {"chat": ChatEvent}
    """

    # =========================================================================
    # SERVICE DIRECTORY
    # =========================================================================

    SERVICE_REGISTERED = "service:registered"
    """
    Emitted after a provider is registered for a capability.

    Detail: {
        "kind": type,      # The capability (e.g. ChatMetaProvider)
        "provider": object
    }
    """

    SERVICE_UNREGISTERED = "service:unregistered"
    """
    Emitted after a provider is removed.

    Detail: {"kind": type, "provider": object}
    """

    # =========================================================================
    # FORMATTER
    # =========================================================================

    FORMAT_RELOADED = "format:reloaded"
    """
    Emitted after the format template has been (re)loaded.

    Detail: {"template": CompiledTemplate}
    """
