"""Pydantic V2 schemas for the character document.

The character sheet is a single JSON document. Python attributes are
snake_case; the persisted shape keeps the camelCase keys used by exported
files (``combatStats``, ``spellSlots``, ``materialComponents``...), so every
model validates either spelling and dumps by alias.

Sheet edits go through the methods on :class:`CharacterData`. They mutate
the document in place and never raise on malformed form input.
"""

from __future__ import annotations

from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from barkeep.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_ARMOR_CLASS,
    MAX_SPELL_LEVEL,
    MIN_CHARACTER_LEVEL,
)
from barkeep.core.exceptions import ValidationError
from barkeep.core.logging import get_logger
from barkeep.engine.rules import (
    parse_int,
    proficiency_bonus,
    resize_used_slots,
)
from barkeep.models.enums import (
    STANDARD_SKILLS,
    Ability,
    ItemRarity,
    ProficiencyType,
    SpellSchool,
)


logger = get_logger(__name__)


def _new_id() -> str:
    return uuid4().hex


class SheetModel(BaseModel):
    """Base for every persisted model: camelCase aliases, lenient input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=False,
    )

    def to_document(self) -> dict[str, Any]:
        """Dump to the persisted JSON shape."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Ability Scores, Combat Stats, Saving Throws
# =============================================================================


class AbilityScores(SheetModel):
    """The six ability scores. Unbounded: the rules engine never clamps."""

    strength: int = DEFAULT_ABILITY_SCORE
    dexterity: int = DEFAULT_ABILITY_SCORE
    constitution: int = DEFAULT_ABILITY_SCORE
    intelligence: int = DEFAULT_ABILITY_SCORE
    wisdom: int = DEFAULT_ABILITY_SCORE
    charisma: int = DEFAULT_ABILITY_SCORE

    def score(self, ability: Ability) -> int:
        """Get the score for an ability."""
        return getattr(self, Ability(ability).value)


class CombatStats(SheetModel):
    """Armor class and hit points."""

    armor_class: int = DEFAULT_ARMOR_CLASS
    current_hp: int = 0
    max_hp: int = 0


class SavingThrows(SheetModel):
    """Saving-throw proficiency flags, one per ability."""

    strength: bool = False
    dexterity: bool = False
    constitution: bool = False
    intelligence: bool = False
    wisdom: bool = False
    charisma: bool = False

    def is_proficient(self, ability: Ability) -> bool:
        """Check the proficiency flag for an ability."""
        return getattr(self, Ability(ability).value)


# =============================================================================
# Sheet Entries
# =============================================================================


class Skill(SheetModel):
    """A skill with its governing ability.

    Attributes:
        name: Display name, e.g. 'Sleight of Hand'.
        ability: Governing ability.
        proficient: Proficiency flag.
        expertise: Expertise flag; adds the proficiency bonus a second time.
    """

    name: str
    ability: Ability
    proficient: bool = False
    expertise: bool = False


class InventoryItem(SheetModel):
    """A carried item with a quantity."""

    name: str
    description: str = ""
    quantity: int = 1
    rarity: ItemRarity = ItemRarity.COMMON


class Equipment(SheetModel):
    """A wearable or wieldable item."""

    name: str
    description: str = ""
    equipped: bool = False
    rarity: ItemRarity = ItemRarity.COMMON


class Proficiency(SheetModel):
    """A non-skill proficiency (armor, weapon, tool, language)."""

    id: str = Field(default_factory=_new_id)
    name: str
    type: ProficiencyType = ProficiencyType.OTHER


class Trait(SheetModel):
    """A racial, class or background trait."""

    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    source: str = ""


class Feat(SheetModel):
    """A feat."""

    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""


class Spell(SheetModel):
    """A known spell.

    ``prepared`` only matters for levelled spells; cantrips are always ready.
    """

    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    level: int = Field(default=0, ge=0, le=MAX_SPELL_LEVEL)
    school: SpellSchool = SpellSchool.EVOCATION
    range: str = ""
    target: str = ""
    duration: str = ""
    casting_time: str = ""
    verbal: bool = False
    somatic: bool = False
    material: bool = False
    material_components: str = ""
    prepared: bool = False

    @property
    def is_cantrip(self) -> bool:
        return self.level == 0


# =============================================================================
# Spell Slots
# =============================================================================


class SpellSlotLevel(SheetModel):
    """Slots for one spell level.

    ``used`` always has exactly ``total`` entries; documents that disagree
    are repaired on load by truncating or padding with unused slots.
    """

    total: int = Field(default=0, ge=0)
    known: int = Field(default=0, ge=0)
    used: list[bool] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def align_used_with_total(cls, data: Any) -> Any:
        """Resize ``used`` to ``total`` before field validation."""
        if not isinstance(data, dict):
            return data
        total = max(parse_int(data.get("total", 0), 0), 0)
        used = data.get("used") or []
        if not isinstance(used, list):
            used = []
        return {**data, "total": total, "used": resize_used_slots(used, total)}

    def resize(self, total: int) -> None:
        """Change the slot count, keeping usage for surviving indices."""
        self.total = max(total, 0)
        self.used = resize_used_slots(self.used, self.total)

    def restore(self) -> None:
        """Mark every slot unused."""
        self.used = [False] * self.total


class CantripSlots(SheetModel):
    """Cantrips have no slots, only a known count."""

    known: int = Field(default=0, ge=0)


class SpellSlots(SheetModel):
    """Slot tables for spell levels 1-9 plus the cantrip count."""

    cantrips: CantripSlots = Field(default_factory=CantripSlots)
    level1: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level2: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level3: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level4: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level5: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level6: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level7: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level8: SpellSlotLevel = Field(default_factory=SpellSlotLevel)
    level9: SpellSlotLevel = Field(default_factory=SpellSlotLevel)

    def level(self, spell_level: int) -> SpellSlotLevel:
        """Get the slot table for a spell level.

        Args:
            spell_level: 1 through 9.

        Returns:
            The level's slot table.

        Raises:
            ValidationError: If the level is outside 1-9.
        """
        if not 1 <= spell_level <= MAX_SPELL_LEVEL:
            raise ValidationError(
                "Spell slot level must be between 1 and 9",
                field_name="spell_level",
                invalid_value=spell_level,
            )
        return getattr(self, f"level{spell_level}")

    def levels(self) -> list[tuple[int, SpellSlotLevel]]:
        """All slot tables in level order."""
        return [(n, self.level(n)) for n in range(1, MAX_SPELL_LEVEL + 1)]


def default_skills() -> list[Skill]:
    """The 18 standard skills, none proficient."""
    return [Skill(name=name, ability=ability) for name, ability in STANDARD_SKILLS]


# =============================================================================
# Character Document
# =============================================================================


SkillFlag = Literal["proficient", "expertise"]


class CharacterData(SheetModel):
    """The character sheet document.

    Attributes:
        name: Character name.
        character_class: Class, persisted as ``class``.
        race: Race.
        level: Level as free text; the rules engine parses it leniently.
        background: Background paragraph.
        stats: Ability scores.
        combat_stats: AC and hit points.
        saving_throws: Saving-throw proficiencies.
        skills: Ordered skill list.
        inventory: Carried items.
        equipment: Worn or wielded items.
        proficiencies: Armor, weapon, tool and language proficiencies.
        traits: Traits.
        feats: Feats.
        spells: Known spells.
        spell_slots: Slot tables.
    """

    name: str = ""
    character_class: str = Field(default="", alias="class")
    race: str = ""
    level: str = "1"
    background: str = ""
    stats: AbilityScores = Field(default_factory=AbilityScores)
    combat_stats: CombatStats = Field(default_factory=CombatStats)
    saving_throws: SavingThrows = Field(default_factory=SavingThrows)
    skills: list[Skill] = Field(default_factory=default_skills)
    inventory: list[InventoryItem] = Field(default_factory=list)
    equipment: list[Equipment] = Field(default_factory=list)
    proficiencies: list[Proficiency] = Field(default_factory=list)
    traits: list[Trait] = Field(default_factory=list)
    feats: list[Feat] = Field(default_factory=list)
    spells: list[Spell] = Field(default_factory=list)
    spell_slots: SpellSlots = Field(default_factory=SpellSlots)

    @model_validator(mode="before")
    @classmethod
    def coerce_level(cls, data: Any) -> Any:
        """Older files store the level as a number; NaN and infinity read as 1."""
        if isinstance(data, dict) and isinstance(data.get("level"), (int, float)):
            return {**data, "level": str(parse_int(data["level"], MIN_CHARACTER_LEVEL))}
        return data

    @property
    def proficiency_bonus(self) -> int:
        """Proficiency bonus for the current level field."""
        return proficiency_bonus(self.level)

    # -------------------------------------------------------------------------
    # Basic info, stats, saves, skills
    # -------------------------------------------------------------------------

    def set_stat(self, ability: Ability, value: Any) -> int:
        """Set an ability score from form input; unparseable input gives 0."""
        score = parse_int(value, 0)
        setattr(self.stats, Ability(ability).value, score)
        return score

    def set_combat_stat(self, field: Literal["armor_class", "current_hp", "max_hp"], value: Any) -> int:
        """Set AC or hit points from form input; unparseable input gives 0."""
        number = parse_int(value, 0)
        setattr(self.combat_stats, field, number)
        return number

    def set_saving_throw(self, ability: Ability, proficient: bool) -> None:
        setattr(self.saving_throws, Ability(ability).value, proficient)

    def set_skill_flag(self, index: int, flag: SkillFlag, value: bool) -> bool:
        """Toggle a skill's proficiency or expertise.

        The expertise toggle is only live while the skill is proficient;
        enabling it on a non-proficient skill is ignored. Clearing
        proficiency leaves a stored expertise flag as it was.

        Args:
            index: Position in ``skills``.
            flag: 'proficient' or 'expertise'.
            value: New flag value.

        Returns:
            True if the skill changed.
        """
        if not 0 <= index < len(self.skills):
            return False
        skill = self.skills[index]
        if flag == "expertise" and value and not skill.proficient:
            logger.debug("Expertise toggle ignored for non-proficient skill", skill=skill.name)
            return False
        setattr(skill, flag, value)
        return True

    # -------------------------------------------------------------------------
    # Inventory & equipment (index addressed)
    # -------------------------------------------------------------------------

    def add_inventory_item(self, item: InventoryItem) -> None:
        self.inventory.append(item)

    def update_inventory_item(self, index: int, item: InventoryItem) -> bool:
        if not 0 <= index < len(self.inventory):
            return False
        self.inventory[index] = item
        return True

    def remove_inventory_item(self, index: int) -> InventoryItem | None:
        if not 0 <= index < len(self.inventory):
            return None
        return self.inventory.pop(index)

    def add_equipment(self, item: Equipment) -> None:
        self.equipment.append(item)

    def update_equipment(self, index: int, item: Equipment) -> bool:
        if not 0 <= index < len(self.equipment):
            return False
        self.equipment[index] = item
        return True

    def remove_equipment(self, index: int) -> Equipment | None:
        if not 0 <= index < len(self.equipment):
            return None
        return self.equipment.pop(index)

    def toggle_equipped(self, index: int) -> bool:
        """Flip an equipment item's equipped flag.

        Returns:
            The new flag, or False when the index is out of range.
        """
        if not 0 <= index < len(self.equipment):
            return False
        item = self.equipment[index]
        item.equipped = not item.equipped
        return item.equipped

    # -------------------------------------------------------------------------
    # Proficiencies, traits, feats (id addressed for removal)
    # -------------------------------------------------------------------------

    def add_proficiency(self, proficiency: Proficiency) -> None:
        self.proficiencies.append(proficiency)

    def remove_proficiency(self, proficiency_id: str) -> None:
        self.proficiencies = [p for p in self.proficiencies if p.id != proficiency_id]

    def add_trait(self, trait: Trait) -> None:
        self.traits.append(trait)

    def update_trait(self, index: int, trait: Trait) -> bool:
        if not 0 <= index < len(self.traits):
            return False
        self.traits[index] = trait
        return True

    def remove_trait(self, trait_id: str) -> None:
        self.traits = [t for t in self.traits if t.id != trait_id]

    def add_feat(self, feat: Feat) -> None:
        self.feats.append(feat)

    def update_feat(self, index: int, feat: Feat) -> bool:
        if not 0 <= index < len(self.feats):
            return False
        self.feats[index] = feat
        return True

    def remove_feat(self, feat_id: str) -> None:
        self.feats = [f for f in self.feats if f.id != feat_id]

    # -------------------------------------------------------------------------
    # Spells
    # -------------------------------------------------------------------------

    def save_spell(self, spell: Spell) -> None:
        """Add a spell, or replace the stored spell with the same id."""
        for i, existing in enumerate(self.spells):
            if existing.id == spell.id:
                self.spells[i] = spell
                return
        self.spells.append(spell)

    def remove_spell(self, spell_id: str) -> None:
        self.spells = [s for s in self.spells if s.id != spell_id]

    def toggle_prepared(self, spell_id: str) -> None:
        for spell in self.spells:
            if spell.id == spell_id:
                spell.prepared = not spell.prepared

    def spells_by_level(self) -> dict[int, list[Spell]]:
        """Group spells by level, preserving sheet order within a level."""
        grouped: dict[int, list[Spell]] = {}
        for spell in self.spells:
            grouped.setdefault(spell.level, []).append(spell)
        return grouped

    # -------------------------------------------------------------------------
    # Spell slots
    # -------------------------------------------------------------------------

    def set_slot_total(self, spell_level: int, total: Any) -> SpellSlotLevel:
        """Resize a level's slots from form input; unparseable input gives 0."""
        slot_level = self.spell_slots.level(spell_level)
        slot_level.resize(parse_int(total, 0))
        return slot_level

    def set_spells_known(self, spell_level: int | Literal["cantrips"], known: Any) -> None:
        count = max(parse_int(known, 0), 0)
        if spell_level == "cantrips":
            self.spell_slots.cantrips.known = count
        else:
            self.spell_slots.level(spell_level).known = count

    def set_slot_used(self, spell_level: int, index: int, used: bool) -> bool:
        """Mark one slot used or unused.

        Returns:
            True if the index exists at that level.
        """
        slot_level = self.spell_slots.level(spell_level)
        if not 0 <= index < slot_level.total:
            return False
        slot_level.used[index] = used
        return True

    def restore_spell_slots(self) -> None:
        """Mark every slot at every level unused (long rest)."""
        for _, slot_level in self.spell_slots.levels():
            slot_level.restore()


def create_default_character() -> CharacterData:
    """Create the blank sheet shown on first launch."""
    return CharacterData()


__all__ = [
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
]
