"""Color-code normalization for chat text.

Configured text spells colors with the ``&`` marker (``&a``, ``&l``) and
hex colors as ``&#rrggbb``.  Clients expect the section sign (``§``) as the
escape character and hex colors in the per-digit ``§x§r§r§g§g§b§b`` form.

Ordering
--------
Hex expansion runs first.  Its output reuses the ``&`` marker
(``&#1a2b3c`` -> ``&x&1&a&2&b&3&c``), and the generic translation pass then
turns every one of those markers into ``§``.  Running the passes the other
way round would leave ``&#`` untouched, since ``#`` is not a color code.

Code case is preserved: ``&A`` becomes ``§A``.
"""

from __future__ import annotations

import re

#: Marker used in configuration text.
ALT_COLOR_CHAR = "&"

#: Escape character understood by chat clients.
COLOR_CHAR = "§"

#: Single-character color and style codes (either case).
COLOR_CODES = "0123456789AaBbCcDdEeFfKkLlMmNnOoRrXx"

# &#rrggbb, six hex digits, case-insensitive.
_HEX_COLOR_PATTERN = re.compile(r"&#([0-9a-fA-F]{6})")

# Any client color sequence, used by strip_colors.
_STRIP_PATTERN = re.compile(COLOR_CHAR + "[" + re.escape(COLOR_CODES) + "]")


def _expand_hex_match(match: re.Match[str]) -> str:
    return ALT_COLOR_CHAR + "x" + "".join(ALT_COLOR_CHAR + digit for digit in match.group(1))


def expand_hex_colors(text: str) -> str:
    """Rewrite every ``&#rrggbb`` as ``&x&r&r&g&g&b&b``.

    Matches never overlap; scanning resumes right after each six-digit run,
    so ``&#1A2B3Cabc`` expands only ``1A2B3C`` and keeps ``abc`` literal.
    """
    return _HEX_COLOR_PATTERN.sub(_expand_hex_match, text)


def translate_color_codes(text: str, marker: str = ALT_COLOR_CHAR) -> str:
    """Replace ``marker`` + code with ``§`` + code.

    A marker not followed by a recognized code is left as literal text.
    """
    chars = list(text)
    for i in range(len(chars) - 1):
        if chars[i] == marker and chars[i + 1] in COLOR_CODES:
            chars[i] = COLOR_CHAR
    return "".join(chars)


def colorize(text: str | None) -> str:
    """Normalize color codes in configured text.

    Args:
        text: Raw text, or ``None``.

    Returns:
        The translated string.  ``None`` renders as the literal ``"null"``
        so a missing value shows up in chat instead of failing the message.
    """
    if text is None:
        return "null"

    return translate_color_codes(expand_hex_colors(text))


def strip_colors(text: str) -> str:
    """Remove client color sequences, leaving plain text."""
    return _STRIP_PATTERN.sub("", text)
