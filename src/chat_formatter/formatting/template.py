"""Template store: compiles the configured format and publishes it.

Compilation
-----------
1. A missing format falls back to :data:`DEFAULT_FORMAT`.
2. ``{displayname}`` becomes ``%1$s`` and ``{message}`` becomes ``%2$s``.
   Those slots are filled by the chat host when the line is finally
   rendered (see :meth:`chat_formatter.core.chat.ChatEvent.render`).
3. Color codes are normalized over the whole result.

Compiling an already-compiled template is a no-op.

Publishing
----------
The compiled template is a frozen value and :meth:`TemplateStore.reload`
swaps it in with a single attribute assignment.  A chat event that reads
:meth:`TemplateStore.current` sees either the previous template or the new
one, never a half-built string.  Reloads compile and publish under one
lock, so concurrent reloads publish in the order they acquire it; reads
take no lock at all.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from chat_formatter.formatting.colors import colorize
from chat_formatter.formatting.placeholders import Placeholder

logger = logging.getLogger(__name__)

DISPLAYNAME_SLOT = "%1$s"
MESSAGE_SLOT = "%2$s"

_SLOTS = {Placeholder.DISPLAYNAME: DISPLAYNAME_SLOT, Placeholder.MESSAGE: MESSAGE_SLOT}

DEFAULT_FORMAT = (
    "<"
    + Placeholder.PREFIX.spelling
    + Placeholder.NAME.spelling
    + Placeholder.SUFFIX.spelling
    + "> "
    + Placeholder.MESSAGE.spelling
)


@dataclass(frozen=True)
class CompiledTemplate:
    """A format template ready to be installed on chat events.

    Attributes:
        raw:  The configured text the template was compiled from (after the
              default substitution).
        text: Compiled text with positional slots and client color codes.
    """

    raw: str
    text: str


def compile_template(raw: str | None) -> CompiledTemplate:
    """Compile configured format text.

    Args:
        raw: Format text from configuration, or ``None`` for the default.

    Returns:
        The compiled template.  Unknown placeholders and malformed color
        codes pass through as literal text.
    """
    source = DEFAULT_FORMAT if raw is None else raw
    text = source
    for placeholder in Placeholder:
        if placeholder.compiled_on_load:
            text = text.replace(placeholder.spelling, _SLOTS[placeholder])
    return CompiledTemplate(raw=source, text=colorize(text))


class TemplateStore:
    """Owns the current compiled template."""

    def __init__(self, raw: str | None = None) -> None:
        self._reload_lock = threading.Lock()
        self._current: CompiledTemplate = compile_template(raw)

    def current(self) -> CompiledTemplate:
        """Return the published template."""
        return self._current

    def reload(self, raw: str | None) -> CompiledTemplate:
        """Compile ``raw`` and publish it for subsequent chat events.

        Args:
            raw: New format text, or ``None`` for the default format.

        Returns:
            The newly published template.
        """
        with self._reload_lock:
            compiled = compile_template(raw)
            self._current = compiled
        logger.info("Chat format loaded: %r", compiled.text)
        return compiled
