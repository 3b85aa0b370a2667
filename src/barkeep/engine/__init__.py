"""Rules engine for Barkeep.

Pure functions computing ability modifiers, proficiency bonus, saving-throw
and skill bonuses, and spell-slot bookkeeping from the character document.

Example:
    >>> from barkeep.engine import ability_modifier, format_modifier
    >>> format_modifier(ability_modifier(16))
    '+3'
"""

from __future__ import annotations

from barkeep.engine.rules import (
    ability_modifier,
    character_proficiency_bonus,
    format_modifier,
    format_spell_level,
    parse_int,
    parse_level,
    proficiency_bonus,
    resize_used_slots,
    saving_throw_bonus,
    skill_bonus,
    slots_remaining,
    slots_used,
)


__all__ = [
    "ability_modifier",
    "character_proficiency_bonus",
    "format_modifier",
    "format_spell_level",
    "parse_int",
    "parse_level",
    "proficiency_bonus",
    "resize_used_slots",
    "saving_throw_bonus",
    "skill_bonus",
    "slots_remaining",
    "slots_used",
]
