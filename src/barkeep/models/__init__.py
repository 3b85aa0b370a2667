"""Pydantic V2 schemas for Barkeep.

Submodules:
    enums: Ability, ItemRarity, SpellSchool, ProficiencyType, MessageRole.
    character: The character document and its sheet operations.
    chat: Chat messages and the campaign summary.
    app_state: The explicit application-state object.

Example:
    >>> from barkeep.models import CharacterData, Ability
    >>> character = CharacterData(name="Thorin", level="5")
    >>> character.set_stat(Ability.STR, "16")
    16
"""

from __future__ import annotations

from barkeep.models.enums import (
    STANDARD_SKILLS,
    Ability,
    ItemRarity,
    MessageRole,
    ProficiencyType,
    SpellSchool,
)
from barkeep.models.character import (
    AbilityScores,
    CantripSlots,
    CharacterData,
    CombatStats,
    Equipment,
    Feat,
    InventoryItem,
    Proficiency,
    SavingThrows,
    SheetModel,
    Skill,
    Spell,
    SpellSlotLevel,
    SpellSlots,
    Trait,
    create_default_character,
    default_skills,
)
from barkeep.models.chat import (
    SUMMARY_FIELDS,
    SUMMARY_LABELS,
    CampaignSummary,
    ChatMessage,
    new_message_id,
    utc_timestamp,
)
from barkeep.models.app_state import AppState


__all__ = [
    # Enums
    "Ability",
    "ItemRarity",
    "MessageRole",
    "ProficiencyType",
    "SpellSchool",
    "STANDARD_SKILLS",
    # Character
    "SheetModel",
    "AbilityScores",
    "CombatStats",
    "SavingThrows",
    "Skill",
    "InventoryItem",
    "Equipment",
    "Proficiency",
    "Trait",
    "Feat",
    "Spell",
    "SpellSlotLevel",
    "CantripSlots",
    "SpellSlots",
    "CharacterData",
    "default_skills",
    "create_default_character",
    # Chat
    "ChatMessage",
    "CampaignSummary",
    "SUMMARY_FIELDS",
    "SUMMARY_LABELS",
    "new_message_id",
    "utc_timestamp",
    # State
    "AppState",
]
