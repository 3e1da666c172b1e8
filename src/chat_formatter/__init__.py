"""Chat Formatter: two-pass chat formatting with prefixes, suffixes and badges.

Formats chat lines from a configurable template.  The template is installed
on each message early, so other chat observers can edit it, and resolved
late against per-player prefix, suffix and verifier-badge providers.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("chat-formatter")
except PackageNotFoundError:
    __version__ = "1.0.0"
