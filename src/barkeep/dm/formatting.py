"""Compact plain-text rendering of the character document.

The character-sheet tool returns this text to the model. Sections whose
list is empty are left out so the block stays short.
"""

from __future__ import annotations

from barkeep.engine.rules import (
    ability_modifier,
    format_modifier,
    skill_bonus,
    slots_remaining,
)
from barkeep.models.character import CharacterData
from barkeep.models.enums import Ability, ItemRarity


def _section(title: str, body: str) -> str:
    return f"{title}:\n{body}"


def format_character_sheet(character: CharacterData) -> str:
    """Format a character sheet for the model.

    Args:
        character: The character document.

    Returns:
        Multi-line text: identity line, abilities, combat stats, then the
        non-empty skill, spell, slot, item, proficiency, trait, feat and
        background sections.
    """
    header = (
        f"CHARACTER SHEET: {character.name or 'Unnamed Character'}\n"
        f"Class: {character.character_class or 'Unknown'} | "
        f"Race: {character.race or 'Unknown'} | "
        f"Level: {character.level or '1'}"
    )

    abilities = " | ".join(
        f"{ability.full_name}: {character.stats.score(ability)} "
        f"({format_modifier(ability_modifier(character.stats.score(ability)))})"
        for ability in Ability
    )

    combat = (
        f"HP: {character.combat_stats.current_hp}/{character.combat_stats.max_hp} | "
        f"AC: {character.combat_stats.armor_class}"
    )

    sections = [
        header,
        _section("ABILITY SCORES", abilities),
        _section("COMBAT STATS", combat),
    ]

    skills = [
        f"{skill.name}: {format_modifier(skill_bonus(character, skill))}"
        + (" (expertise)" if skill.expertise else "")
        for skill in character.skills
        if skill.proficient or skill.expertise
    ]
    if skills:
        sections.append(_section("SKILLS", " | ".join(skills)))

    spell_lines = []
    for level, spells in sorted(character.spells_by_level().items()):
        label = "Cantrips" if level == 0 else f"Level {level}"
        names = ", ".join(
            spell.name + (" (prepared)" if spell.prepared and level > 0 else "")
            for spell in spells
        )
        spell_lines.append(f"{label}: {names}")
    if spell_lines:
        sections.append(_section("SPELLS", "\n".join(spell_lines)))

    slots = [
        f"Level {level}: {slots_remaining(slot_level)}/{slot_level.total}"
        for level, slot_level in character.spell_slots.levels()
        if slot_level.total > 0
    ]
    if slots:
        sections.append(_section("SPELL SLOTS", " | ".join(slots)))

    inventory = [
        f"{item.name} ({item.quantity})"
        + (f" - {item.rarity.value}" if item.rarity != ItemRarity.COMMON else "")
        for item in character.inventory
    ]
    if inventory:
        sections.append(_section("INVENTORY", ", ".join(inventory)))

    equipment = [
        item.name
        + (" (equipped)" if item.equipped else "")
        + (f" - {item.rarity.value}" if item.rarity != ItemRarity.COMMON else "")
        for item in character.equipment
    ]
    if equipment:
        sections.append(_section("EQUIPMENT", ", ".join(equipment)))

    proficiencies = [f"{p.name} ({p.type.value})" for p in character.proficiencies]
    if proficiencies:
        sections.append(_section("PROFICIENCIES", ", ".join(proficiencies)))

    traits = [t.name + (f" ({t.source})" if t.source else "") for t in character.traits]
    if traits:
        sections.append(_section("TRAITS", ", ".join(traits)))

    feats = [f.name for f in character.feats]
    if feats:
        sections.append(_section("FEATS", ", ".join(feats)))

    if character.background.strip():
        sections.append(_section("BACKGROUND", character.background.strip()))

    return "\n\n".join(sections)


__all__ = ["format_character_sheet"]
