"""D&D 5E rule arithmetic over the character document.

Every function here is pure and total: malformed input degrades to a
fallback value instead of raising, since the sheet recomputes these on
every keystroke.

Example:
    >>> ability_modifier(15)
    2
    >>> proficiency_bonus("5")
    3
    >>> format_modifier(-1)
    '-1'
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any

from barkeep.core.constants import MIN_CHARACTER_LEVEL


if TYPE_CHECKING:
    from barkeep.models.character import CharacterData, Skill, SpellSlotLevel
    from barkeep.models.enums import Ability


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# =============================================================================
# Parsing
# =============================================================================


def parse_int(value: Any, default: int = 0) -> int:
    """Best-effort integer parse of a form value.

    Reads the leading integer of a string (``"12abc"`` gives 12), accepts
    ints and floats, and returns ``default`` for anything else.

    Args:
        value: Raw form value.
        default: Value returned when nothing numeric can be read.

    Returns:
        The parsed integer or the default.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return math.trunc(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return default


def parse_level(value: Any) -> int:
    """Parse the character's level field.

    The level is stored as free text. Missing, non-numeric and zero values
    fall back to level 1 (the sheet default). Negative levels are clamped
    to 1 as well, so "0" and "-4" give a proficiency bonus of +2 where the
    bare ``ceil(1 + level / 4)`` formula would give +1 and +0.

    Args:
        value: The raw level field.

    Returns:
        The character level, never below 1.
    """
    level = parse_int(value, MIN_CHARACTER_LEVEL)
    return level if level >= MIN_CHARACTER_LEVEL else MIN_CHARACTER_LEVEL


# =============================================================================
# Core Formulas
# =============================================================================


def ability_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    No clamping is applied, so out-of-range scores still produce a value.

    Args:
        score: The ability score.

    Returns:
        ``floor((score - 10) / 2)``.
    """
    return (score - 10) // 2


def proficiency_bonus(level: int | str | None) -> int:
    """Calculate the proficiency bonus for a character level.

    Args:
        level: The level, as an int or the raw level field.

    Returns:
        ``ceil(1 + level / 4)``: 2 at levels 1-4, 6 at level 17-20.
    """
    return math.ceil(1 + parse_level(level) / 4)


def format_modifier(modifier: int) -> str:
    """Render a modifier with an explicit sign.

    Args:
        modifier: The numeric modifier.

    Returns:
        ``+N`` for zero and positives, ``-N`` for negatives.
    """
    return f"+{modifier}" if modifier >= 0 else str(modifier)


# =============================================================================
# Character Bonuses
# =============================================================================


def character_proficiency_bonus(character: CharacterData) -> int:
    """Proficiency bonus derived from the character's level field."""
    return proficiency_bonus(character.level)


def saving_throw_bonus(character: CharacterData, ability: Ability) -> int:
    """Calculate the saving-throw bonus for one ability.

    Args:
        character: The character document.
        ability: The saving throw's ability.

    Returns:
        Ability modifier plus the proficiency bonus when proficient.
    """
    bonus = ability_modifier(character.stats.score(ability))
    if character.saving_throws.is_proficient(ability):
        bonus += character_proficiency_bonus(character)
    return bonus


def skill_bonus(character: CharacterData, skill: Skill) -> int:
    """Calculate a skill's total bonus.

    Proficiency and expertise each add the proficiency bonus, so expertise
    counts even when ``proficient`` is unset on the stored skill.

    Args:
        character: The character document.
        skill: The skill entry.

    Returns:
        The skill's total bonus.
    """
    prof = character_proficiency_bonus(character)
    bonus = ability_modifier(character.stats.score(skill.ability))
    if skill.proficient:
        bonus += prof
    if skill.expertise:
        bonus += prof
    return bonus


# =============================================================================
# Spell Slots
# =============================================================================


def resize_used_slots(used: list[bool], total: int) -> list[bool]:
    """Resize a slot-usage sequence to a new total.

    Indices that still exist keep their recorded usage; new indices are
    unused. A negative total is treated as zero.

    Args:
        used: Current usage flags.
        total: New number of slots.

    Returns:
        A new list of length ``max(total, 0)``.
    """
    total = max(total, 0)
    return [bool(flag) for flag in used[:total]] + [False] * max(total - len(used), 0)


def slots_used(slot_level: SpellSlotLevel) -> int:
    """Count expended slots at one level."""
    return sum(1 for flag in slot_level.used if flag)


def slots_remaining(slot_level: SpellSlotLevel) -> int:
    """Count slots still available at one level."""
    return slot_level.total - slots_used(slot_level)


def format_spell_level(level: int) -> str:
    """Human label for a spell level.

    Args:
        level: Spell level, 0 for cantrips.

    Returns:
        'Cantrip', '1st Level', '2nd Level', '3rd Level' or 'Nth Level'.
    """
    if level == 0:
        return "Cantrip"
    if level == 1:
        return "1st Level"
    if level == 2:
        return "2nd Level"
    if level == 3:
        return "3rd Level"
    return f"{level}th Level"


__all__ = [
    "parse_int",
    "parse_level",
    "ability_modifier",
    "proficiency_bonus",
    "format_modifier",
    "character_proficiency_bonus",
    "saving_throw_bonus",
    "skill_bonus",
    "resize_used_slots",
    "slots_used",
    "slots_remaining",
    "format_spell_level",
]
