"""
Formatter configuration management.

Configuration is loaded from multiple sources with a clear priority order:

    1. Environment variables (highest priority) - for containerized deployments
    2. Config file (config/config.yml) - the format template lives here
    3. Built-in defaults (lowest priority)

Unlike a server config, this one is not cached at import time: the plugin
calls load_config() on enable and again on every ``reload`` command.

A config file that is missing, cannot be read, is not valid YAML, or holds
a non-string ``format`` never stops the formatter. The problem is logged and
the built-in default format is used instead.

Usage:
    from chat_formatter.config import load_config

    cfg = load_config()
    store.reload(cfg.format)

Environment Variable Mapping:
    CHAT_FORMATTER_CONFIG     -> path of the YAML file
    CHAT_FORMAT               -> format
    CHAT_FORMATTER_LOG_LEVEL  -> logging.level
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

logger = logging.getLogger(__name__)

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "config.yml"

# Written by save_default_config() when no config file exists yet.
DEFAULT_CONFIG_TEXT = """\
# Chat format.
#
# Placeholders:
#   {name}            player name
#   {displayname}     player display name
#   {message}         the chat message
#   {prefix}          prefix from the chat meta provider
#   {suffix}          suffix from the chat meta provider
#   {verifier-badge}  badge of the service the player's account is linked to
#
# Colors use '&' codes (&a, &l, ...) and hex colors as &#rrggbb.
format: "<{prefix}{name}{suffix}> {message}"

logging:
  level: INFO
  format: detailed
"""

_LOG_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
}


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["simple", "detailed"] = "detailed"


@dataclass
class FormatterConfig:
    """
    Complete formatter configuration.

    Attributes:
        format: Raw format template, or None to use the built-in default.
        logging: Logging settings applied by the command-line interface.
        source: File the settings were read from, if any.
    """

    format: str | None = None
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source: Path | None = None


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Pick the config file: explicit path, then CHAT_FORMATTER_CONFIG, then default."""
    if path is not None:
        return Path(path)
    if env_path := os.getenv("CHAT_FORMATTER_CONFIG"):
        return Path(env_path)
    return CONFIG_FILE


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, returning {} for anything unusable."""
    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError:
        logger.warning("Config file %s not found, using the default format", path)
        return {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Could not read config file %s (%s), using the default format", path, exc)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using the default format", path)
        return {}
    return data


def _load_from_yaml(data: dict[str, Any], cfg: FormatterConfig) -> None:
    """Load a parsed YAML mapping into FormatterConfig."""
    if "format" in data:
        value = data["format"]
        if isinstance(value, str):
            cfg.format = value
        elif value is not None:
            logger.warning(
                "Config 'format' must be a string, got %s; using the default format",
                type(value).__name__,
            )

    section = data.get("logging")
    if isinstance(section, dict):
        if "level" in section:
            cfg.logging.level = str(section["level"]).upper()
        if "format" in section:
            val = str(section["format"]).lower()
            if val in ("simple", "detailed"):
                cfg.logging.format = val  # type: ignore[assignment]


def _apply_env_overrides(cfg: FormatterConfig) -> None:
    """Apply environment variable overrides to configuration."""
    if env_format := os.getenv("CHAT_FORMAT"):
        cfg.format = env_format
    if env_log := os.getenv("CHAT_FORMATTER_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()


def load_config(path: Path | str | None = None) -> FormatterConfig:
    """
    Load configuration from all sources with proper priority.

    Args:
        path: Config file to read. Defaults to CHAT_FORMATTER_CONFIG or
              config/config.yml.

    Returns:
        FormatterConfig: Fully populated configuration object.
    """
    config_path = resolve_config_path(path)
    cfg = FormatterConfig(source=config_path)

    _load_from_yaml(_read_yaml(config_path), cfg)
    _apply_env_overrides(cfg)

    return cfg


def save_default_config(path: Path | str | None = None) -> bool:
    """
    Write the default config file unless one already exists.

    Returns:
        True if a file was written, False if one was already present.
    """
    config_path = resolve_config_path(path)
    if config_path.exists():
        return False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    logger.info("Wrote default config to %s", config_path)
    return True


def configure_logging(settings: LoggingSettings) -> None:
    """Configure the root logger from LoggingSettings."""
    level = logging.getLevelName(settings.level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=_LOG_FORMATS[settings.format], force=True)
