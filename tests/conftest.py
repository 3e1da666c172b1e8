"""
Shared pytest fixtures for the chat formatter test suite.

- Bus singleton reset around every test
- Environment overrides cleared around every test
- A player, chat event and config-file factory
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from chat_formatter.core.bus import ChatBus
from chat_formatter.core.chat import ChatEvent, Player
from tests.fakes import RAY_ID

# ============================================================================
# ISOLATION FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def reset_bus() -> Generator[None, None, None]:
    """
    Reset the bus singleton before and after each test.

    Plugins subscribe on enable, so a shared bus would leak handlers
    between tests.
    """
    ChatBus.reset_for_testing()
    yield
    ChatBus.reset_for_testing()


@pytest.fixture(autouse=True)
def clear_formatter_env(monkeypatch):
    """Keep host environment overrides out of the tests."""
    for name in ("CHAT_FORMAT", "CHAT_FORMATTER_CONFIG", "CHAT_FORMATTER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def bus() -> ChatBus:
    return ChatBus()


# ============================================================================
# CHAT FIXTURES
# ============================================================================


@pytest.fixture
def player() -> Player:
    return Player(unique_id=RAY_ID, name="Ray", display_name="Sir Ray")


@pytest.fixture
def chat_event(player: Player) -> ChatEvent:
    return ChatEvent(player=player, message="hello there")


@pytest.fixture
def config_file(tmp_path: Path):
    """Return a function that writes config.yml into tmp_path."""

    def _write(text: str) -> Path:
        path = tmp_path / "config.yml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
