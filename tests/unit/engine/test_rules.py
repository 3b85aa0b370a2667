"""Tests for the rules engine."""

from __future__ import annotations

import math

import pytest

from barkeep.engine.rules import (
    ability_modifier,
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
from barkeep.models import Ability, CharacterData, Skill, SpellSlotLevel


class TestAbilityModifier:
    """Tests for ability_modifier."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [(10, 0), (11, 0), (15, 2), (7, -2), (1, -5), (20, 5), (30, 10), (0, -5)],
    )
    def test_known_values(self, score: int, expected: int) -> None:
        """Test standard modifier table values."""
        assert ability_modifier(score) == expected

    def test_matches_floor_formula(self) -> None:
        """Test modifier is floor((s - 10) / 2) across a wide range."""
        for score in range(-5, 40):
            assert ability_modifier(score) == math.floor((score - 10) / 2)


class TestProficiencyBonus:
    """Tests for proficiency_bonus."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [(1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (13, 5), (17, 6), (20, 6)],
    )
    def test_level_table(self, level: int, expected: int) -> None:
        """Test proficiency bonus by level."""
        assert proficiency_bonus(level) == expected

    def test_matches_ceil_formula(self) -> None:
        """Test bonus is ceil(1 + L / 4) for every level."""
        for level in range(1, 21):
            assert proficiency_bonus(level) == math.ceil(1 + level / 4)

    def test_accepts_level_text(self) -> None:
        """Test that the raw level field is accepted."""
        assert proficiency_bonus("5") == 3
        assert proficiency_bonus("9th") == 4

    @pytest.mark.parametrize("level", ["", "abc", None, "0", "-3"])
    def test_malformed_level_falls_back_to_one(self, level: object) -> None:
        """Test that unusable levels count as level 1."""
        assert parse_level(level) == 1
        assert proficiency_bonus(level) == 2  # type: ignore[arg-type]


class TestParseInt:
    """Tests for lenient form-value parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("12", 12), (" 7 ", 7), ("12abc", 12), ("-3", -3), (4.9, 4), (True, 1), (15, 15)],
    )
    def test_parses_leading_integer(self, value: object, expected: int) -> None:
        """Test numeric input is read."""
        assert parse_int(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", None, [], float("nan")])
    def test_default_for_non_numeric(self, value: object) -> None:
        """Test that non-numeric input yields the default."""
        assert parse_int(value) == 0
        assert parse_int(value, 1) == 1


class TestFormatModifier:
    """Tests for format_modifier."""

    @pytest.mark.parametrize(
        ("modifier", "expected"),
        [(0, "+0"), (3, "+3"), (-1, "-1"), (10, "+10")],
    )
    def test_sign(self, modifier: int, expected: str) -> None:
        """Test the explicit sign."""
        assert format_modifier(modifier) == expected


class TestCharacterBonuses:
    """Tests for saving-throw and skill bonuses."""

    def test_expertise_skill(self) -> None:
        """Test proficient + expertise at 16 / level 5 gives +9."""
        character = CharacterData(level="5")
        character.stats.wisdom = 16
        skill = Skill(name="Perception", ability=Ability.WIS, proficient=True, expertise=True)

        bonus = skill_bonus(character, skill)

        assert bonus == 9
        assert format_modifier(bonus) == "+9"

    def test_proficient_skill(self, sample_character: CharacterData) -> None:
        """Test a proficient skill adds the bonus once."""
        perception = next(s for s in sample_character.skills if s.name == "Perception")
        assert skill_bonus(sample_character, perception) == 1 + 3

    def test_untrained_skill(self, sample_character: CharacterData) -> None:
        """Test an untrained skill uses only the modifier."""
        athletics = next(s for s in sample_character.skills if s.name == "Athletics")
        assert skill_bonus(sample_character, athletics) == -1

    def test_expertise_without_proficiency_still_counts(self) -> None:
        """Test that a stored expertise flag adds the bonus on its own."""
        character = CharacterData(level="1")
        skill = Skill(name="Arcana", ability=Ability.INT, expertise=True)

        assert skill_bonus(character, skill) == 2

    def test_saving_throws(self, sample_character: CharacterData) -> None:
        """Test proficient and non-proficient saves."""
        assert saving_throw_bonus(sample_character, Ability.DEX) == 3 + 3
        assert saving_throw_bonus(sample_character, Ability.STR) == -1


class TestSpellSlots:
    """Tests for slot resizing and counting."""

    def test_shrink_preserves_surviving_indices(self) -> None:
        """Test resizing 4 -> 2 keeps indices 0-1 and drops 2-3."""
        assert resize_used_slots([True, False, True, True], 2) == [True, False]

    def test_grow_pads_with_unused(self) -> None:
        """Test resizing 2 -> 4 keeps indices 0-1 and adds unused slots."""
        assert resize_used_slots([True, True], 4) == [True, True, False, False]

    def test_negative_total_is_empty(self) -> None:
        """Test a negative total yields no slots."""
        assert resize_used_slots([True], -1) == []

    def test_counts(self) -> None:
        """Test used and remaining counts."""
        slot_level = SpellSlotLevel(total=4, used=[True, False, True, False])

        assert slots_used(slot_level) == 2
        assert slots_remaining(slot_level) == 2

    @pytest.mark.parametrize(
        ("level", "expected"),
        [(0, "Cantrip"), (1, "1st Level"), (2, "2nd Level"), (3, "3rd Level"), (4, "4th Level"), (9, "9th Level")],
    )
    def test_format_spell_level(self, level: int, expected: str) -> None:
        """Test spell level labels."""
        assert format_spell_level(level) == expected
