"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Barkeep test suite.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from barkeep.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point storage settings at a temporary directory.

    Returns:
        The temporary data directory.
    """
    data_dir = tmp_path / "data"
    monkeypatch.setenv("BARKEEP_STATE_PATH", str(data_dir / "state.json"))
    monkeypatch.setenv("BARKEEP_EXPORT_DIR", str(data_dir / "exports"))
    return data_dir


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "BARKEEP_API_URL": "http://localhost:1234/v1/chat/completions",
        "BARKEEP_API_KEY": "test-key",
        "BARKEEP_MODEL": "llama-3-8b-instruct",
        "BARKEEP_DEBUG": "true",
        "BARKEEP_LOG_LEVEL": "DEBUG",
        "BARKEEP_CONTEXT_MAX_PREVIOUS_MESSAGES": "6",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_character_data() -> dict[str, Any]:
    """Provide a character document in the persisted camelCase shape.

    Returns:
        Dictionary of character data.
    """
    return {
        "name": "Mirela",
        "class": "Rogue",
        "race": "Halfling",
        "level": "5",
        "background": "Raised above a dockside tavern.",
        "stats": {
            "strength": 8,
            "dexterity": 16,
            "constitution": 14,
            "intelligence": 12,
            "wisdom": 13,
            "charisma": 10,
        },
        "combatStats": {"armorClass": 14, "currentHp": 27, "maxHp": 33},
        "savingThrows": {"dexterity": True, "intelligence": True},
        "inventory": [
            {"name": "Thieves' Tools", "description": "", "quantity": 1, "rarity": "common"},
            {"name": "Potion of Healing", "description": "Heals 2d4+2", "quantity": 3, "rarity": "uncommon"},
        ],
        "equipment": [
            {"name": "Rapier", "description": "", "equipped": True, "rarity": "common"},
            {"name": "Cloak of Elvenkind", "description": "", "equipped": False, "rarity": "uncommon"},
        ],
        "spellSlots": {
            "cantrips": {"known": 2},
            "level1": {"total": 3, "used": [True, False, False], "known": 3},
        },
    }


@pytest.fixture
def sample_character(sample_character_data: dict[str, Any]) -> Any:
    """Create a sample CharacterData with Stealth expertise.

    Args:
        sample_character_data: Character data dictionary.

    Returns:
        CharacterData instance.
    """
    from barkeep.models import CharacterData

    character = CharacterData.model_validate(sample_character_data)
    for skill in character.skills:
        if skill.name == "Stealth":
            skill.proficient = True
            skill.expertise = True
        elif skill.name == "Perception":
            skill.proficient = True
    return character


@pytest.fixture
def app_state(sample_character: Any) -> Any:
    """Create an AppState around the sample character.

    Returns:
        AppState instance.
    """
    from barkeep.models import AppState

    return AppState(
        character=sample_character,
        api_url="http://localhost:1234/v1/chat/completions",
        model="test-model",
    )


# =============================================================================
# Completion Fixtures
# =============================================================================


def make_completion(
    content: str | None = None,
    tool_calls: list[Any] | None = None,
    finish_reason: str = "stop",
) -> SimpleNamespace:
    """Build an object shaped like an SDK ChatCompletion."""
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message, finish_reason=finish_reason)]
    )


def make_tool_call(
    name: str = "get_character_sheet",
    arguments: dict[str, Any] | None = None,
    call_id: str = "call_1",
) -> SimpleNamespace:
    """Build an object shaped like an SDK tool call."""
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=json.dumps(arguments or {})),
    )


class FakeCompletionsAPI:
    """Stands in for ``AsyncOpenAI``: replays scripted replies in order.

    Each scripted entry is either a completion object or an exception to
    raise. Every request's keyword arguments are recorded.
    """

    def __init__(self, replies: list[Any] | None = None) -> None:
        self.replies = list(replies or [])
        self.requests: list[dict[str, Any]] = []
        self.closed = False
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def queue(self, *replies: Any) -> None:
        self.replies.extend(replies)

    async def close(self) -> None:
        self.closed = True

    async def _create(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        if not self.replies:
            raise RuntimeError("No scripted completion left")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def completion() -> Any:
    """Factory for SDK-shaped completion replies."""
    return make_completion


@pytest.fixture
def tool_call() -> Any:
    """Factory for SDK-shaped tool calls."""
    return make_tool_call


@pytest.fixture
def fake_api() -> FakeCompletionsAPI:
    """A scripted stand-in for the SDK client."""
    return FakeCompletionsAPI()


@pytest.fixture
def completion_client(fake_api: FakeCompletionsAPI) -> Any:
    """A CompletionClient wired to the scripted fake, without retries."""
    from barkeep.dm.client import CompletionClient

    return CompletionClient(
        "http://localhost:1234/v1/chat/completions",
        model="test-model",
        max_retries=0,
        sdk_client=fake_api,
    )
