"""Barkeep - D&D 5E character sheet and AI game master.

A single character document, a rules engine deriving its numbers, and a
chat with an OpenAI-compatible model whose context stays bounded through a
rolling campaign summary.

Example:
    >>> from barkeep import AppState, ChatSession, StateStore
    >>>
    >>> store = StateStore()
    >>> state = store.load()
    >>> state.character.set_stat(Ability.WIS, "16")
    >>>
    >>> session = ChatSession(state)
    >>> reply = await session.submit("I search the room for traps")
    >>> store.save(state)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for the character and application state.
    engine: 5E rules arithmetic.
    dm: Context management, the completions client and the chat session.
    storage: JSON import/export and the local state file.
"""

from __future__ import annotations

# Core
from barkeep.core.config import Settings, get_settings
from barkeep.core.exceptions import BarkeepError
from barkeep.core.logging import configure_logging, get_logger

# Models
from barkeep.models import (
    Ability,
    AppState,
    CampaignSummary,
    CharacterData,
    ChatMessage,
    create_default_character,
)

# Rules
from barkeep.engine import (
    ability_modifier,
    format_modifier,
    proficiency_bonus,
    saving_throw_bonus,
    skill_bonus,
)

# Game master
from barkeep.dm import ChatSession, CompletionClient, format_character_sheet

# Storage
from barkeep.storage import StateStore, load_from_file, save_to_file


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "BarkeepError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "AppState",
    "CampaignSummary",
    "CharacterData",
    "ChatMessage",
    "create_default_character",
    # Rules
    "ability_modifier",
    "format_modifier",
    "proficiency_bonus",
    "saving_throw_bonus",
    "skill_bonus",
    # Game master
    "ChatSession",
    "CompletionClient",
    "format_character_sheet",
    # Storage
    "StateStore",
    "load_from_file",
    "save_to_file",
]
