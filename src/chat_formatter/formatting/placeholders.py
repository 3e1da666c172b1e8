"""Placeholder grammar and lazy literal replacement.

Every placeholder is a fixed literal spelling.  Matching is exact, never a
pattern, so player-controlled text such as ``$1`` or ``\\`` in a prefix is
inserted verbatim.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum


class Placeholder(str, Enum):
    """Placeholders recognized in a format template.

    ``DISPLAYNAME`` and ``MESSAGE`` are compiled into positional slots when
    the template is loaded.  The remaining four are resolved per message.
    """

    NAME = "{name}"
    DISPLAYNAME = "{displayname}"
    MESSAGE = "{message}"
    PREFIX = "{prefix}"
    SUFFIX = "{suffix}"
    VERIFIER_BADGE = "{verifier-badge}"

    @property
    def spelling(self) -> str:
        return self.value

    @property
    def compiled_on_load(self) -> bool:
        """Whether the template store resolves this placeholder."""
        return self in (Placeholder.DISPLAYNAME, Placeholder.MESSAGE)


def replace_lazy(
    text: str,
    placeholder: Placeholder,
    supplier: Callable[[], str | None],
) -> str:
    """Replace every occurrence of ``placeholder`` with one computed value.

    ``supplier`` is called at most once, and only when the placeholder is
    present.  A ``None`` result leaves the text unchanged.

    Args:
        text:        String to scan.
        placeholder: Placeholder whose literal spelling is replaced.
        supplier:    Zero-argument callable producing the replacement.

    Returns:
        ``text`` with all occurrences replaced, or ``text`` itself.
    """
    token = placeholder.spelling
    if token not in text:
        return text

    replacement = supplier()
    if replacement is None:
        return text
    return text.replace(token, replacement)
