"""Enumeration types for Barkeep.

This module defines the enumeration types of the character document and
the chat history. Values match the strings stored in exported files.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """D&D 5E ability scores.

    The six core abilities that define a character's physical
    and mental characteristics.
    """

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Three-letter abbreviation, e.g. 'STR'."""
        return self.name


class ItemRarity(StrEnum):
    """Magic item rarity, plus 'unknown' for unidentified items."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    VERY_RARE = "very rare"
    LEGENDARY = "legendary"
    ARTIFACT = "artifact"
    UNKNOWN = "unknown"


class SpellSchool(StrEnum):
    """The eight schools of magic."""

    ABJURATION = "abjuration"
    CONJURATION = "conjuration"
    DIVINATION = "divination"
    ENCHANTMENT = "enchantment"
    EVOCATION = "evocation"
    ILLUSION = "illusion"
    NECROMANCY = "necromancy"
    TRANSMUTATION = "transmutation"


class ProficiencyType(StrEnum):
    """Kinds of non-skill proficiency."""

    ARMOR = "armor"
    WEAPON = "weapon"
    TOOL = "tool"
    LANGUAGE = "language"
    OTHER = "other"


class MessageRole(StrEnum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


# Standard 5E skills in sheet order, with their governing ability
STANDARD_SKILLS: tuple[tuple[str, Ability], ...] = (
    ("Acrobatics", Ability.DEX),
    ("Animal Handling", Ability.WIS),
    ("Arcana", Ability.INT),
    ("Athletics", Ability.STR),
    ("Deception", Ability.CHA),
    ("History", Ability.INT),
    ("Insight", Ability.WIS),
    ("Intimidation", Ability.CHA),
    ("Investigation", Ability.INT),
    ("Medicine", Ability.WIS),
    ("Nature", Ability.INT),
    ("Perception", Ability.WIS),
    ("Performance", Ability.CHA),
    ("Persuasion", Ability.CHA),
    ("Religion", Ability.INT),
    ("Sleight of Hand", Ability.DEX),
    ("Stealth", Ability.DEX),
    ("Survival", Ability.WIS),
)


__all__ = [
    "Ability",
    "ItemRarity",
    "SpellSchool",
    "ProficiencyType",
    "MessageRole",
    "STANDARD_SKILLS",
]
