"""Placeholder substitution and color translation for chat lines.

This package is the formatter proper.  It knows nothing about where the
format text comes from or how chat events are dispatched; it turns a
configured template plus per-player lookups into a chat format string.

Package structure
-----------------
colors.py        colorize()          : ``&`` codes and ``&#rrggbb`` hex colors
                                       to client ``§`` codes.
placeholders.py  Placeholder         : the placeholder grammar, plus the
                                       lazy literal replace used everywhere.
template.py      TemplateStore       : compiles and publishes the configured
                                       format.
engine.py        FormattingEngine    : Pass A (install the template) and
                                       Pass B (resolve placeholders).

Typical call flow (inside ChatFormatterPlugin)
----------------------------------------------
1. ``store.reload(config.format)`` on enable and on ``reload``
2. lowest-priority chat observer: ``engine.install_template(event)``
3. other observers edit ``event.format``
4. highest-priority chat observer: ``engine.format_event(event, bindings)``
"""

from chat_formatter.formatting.colors import colorize
from chat_formatter.formatting.engine import FormatContext, FormattingEngine
from chat_formatter.formatting.placeholders import Placeholder
from chat_formatter.formatting.template import (
    DEFAULT_FORMAT,
    CompiledTemplate,
    TemplateStore,
    compile_template,
)

__all__ = [
    "DEFAULT_FORMAT",
    "CompiledTemplate",
    "FormatContext",
    "FormattingEngine",
    "Placeholder",
    "TemplateStore",
    "colorize",
    "compile_template",
]
