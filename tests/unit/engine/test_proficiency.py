"""Tests for proficiency bonus, skills, saving throws and passive scores."""

from __future__ import annotations

from typing import Any

import pytest

from dnd_rules.core.exceptions import DomainError, UnknownReferenceError
from dnd_rules.engine.proficiency import (
    all_saving_throw_modifiers,
    all_skill_modifiers,
    effective_proficiency_level,
    multiclass_proficiency_bonus,
    passive_score,
    passive_score_from_modifier,
    proficiency_bonus,
    proficiency_level_bonus,
    proficiency_level_name,
    saving_throw_modifier,
    score_for_ability,
    skill_modifier,
    total_level,
)
from dnd_rules.models import Ability, ClassLevel, ProficiencyLevel, Skill


class TestProficiencyBonus:
    """Tests for proficiency_bonus."""

    @pytest.mark.parametrize(
        "level,expected",
        [(1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (12, 4), (13, 5), (16, 5), (17, 6), (20, 6)],
    )
    def test_bonus_by_level(self, level: int, expected: int) -> None:
        """Test the bonus steps every four levels."""
        assert proficiency_bonus(level) == expected

    @pytest.mark.parametrize("level", [0, 21, -1, 5.0, True])
    def test_invalid_level(self, level: Any) -> None:
        """Test levels outside 1-20 raise."""
        with pytest.raises(DomainError):
            proficiency_bonus(level)

    def test_bonus_is_monotonic(self) -> None:
        """Test the bonus never decreases with level."""
        bonuses = [proficiency_bonus(level) for level in range(1, 21)]
        assert bonuses == sorted(bonuses)

    def test_multiclass_uses_total_level(self) -> None:
        """Test multiclass characters use their total level."""
        levels = [ClassLevel(class_key="fighter", level=3), ClassLevel(class_key="wizard", level=2)]
        assert total_level(levels) == 5
        assert multiclass_proficiency_bonus(levels) == 3
        assert multiclass_proficiency_bonus([4, 4]) == 3


class TestProficiencyLevels:
    """Tests for proficiency level helpers."""

    @pytest.mark.parametrize(
        "level,bonus,expected",
        [
            (ProficiencyLevel.NONE, 3, 0),
            (ProficiencyLevel.HALF, 3, 1),
            (ProficiencyLevel.HALF, 2, 1),
            (ProficiencyLevel.PROFICIENT, 3, 3),
            (ProficiencyLevel.EXPERTISE, 3, 6),
        ],
    )
    def test_level_bonus(self, level: ProficiencyLevel, bonus: int, expected: int) -> None:
        """Test multipliers round down."""
        assert proficiency_level_bonus(level, bonus) == expected

    def test_level_name(self) -> None:
        """Test display names by key."""
        assert proficiency_level_name("half") == "Half Proficient"

    def test_effective_level(self) -> None:
        """Test recorded levels win over Jack of All Trades."""
        proficiencies = {"stealth": "expertise"}
        assert effective_proficiency_level("Stealth", proficiencies) is ProficiencyLevel.EXPERTISE
        assert effective_proficiency_level("arcana", proficiencies) is ProficiencyLevel.NONE
        assert (
            effective_proficiency_level("arcana", proficiencies, jack_of_all_trades=True)
            is ProficiencyLevel.HALF
        )


class TestSkillModifiers:
    """Tests for skill modifiers."""

    def test_proficient_skill(self, sample_score_set: Any) -> None:
        """Test ability modifier plus full proficiency."""
        result = skill_modifier(Skill.ATHLETICS, sample_score_set, "proficient", 5)
        assert result.ability is Ability.STR
        assert result.ability_modifier == 2
        assert result.proficiency_bonus == 3
        assert result.total == 5

    def test_expertise(self, sample_score_set: Any) -> None:
        """Test expertise doubles the bonus."""
        result = skill_modifier("stealth", sample_score_set, ProficiencyLevel.EXPERTISE, 1)
        assert result.total == 2 + 4

    def test_jack_of_all_trades(self, sample_score_set: Any) -> None:
        """Test untrained skills get half proficiency, rounded down."""
        result = skill_modifier(
            "history", sample_score_set, ProficiencyLevel.NONE, 5, jack_of_all_trades=True
        )
        assert result.proficiency_level is ProficiencyLevel.HALF
        assert result.total == 1 + 1

    def test_plain_mapping(self, sample_ability_scores: dict[str, int]) -> None:
        """Test a plain score mapping works in place of a score set."""
        result = skill_modifier("persuasion", sample_ability_scores, "none", 1)
        assert result.total == -1

    def test_unknown_skill(self, sample_score_set: Any) -> None:
        """Test unknown skills fail loudly."""
        with pytest.raises(UnknownReferenceError):
            skill_modifier("cooking", sample_score_set, "proficient", 1)

    def test_all_skills(self, sample_score_set: Any) -> None:
        """Test every skill is computed."""
        result = all_skill_modifiers(
            sample_score_set,
            {"perception": "proficient", Skill.STEALTH: ProficiencyLevel.EXPERTISE},
            1,
        )
        assert len(result) == 18
        assert result[Skill.PERCEPTION].total == 0 + 2
        assert result[Skill.STEALTH].total == 2 + 4
        assert result[Skill.ARCANA].total == 1

    def test_missing_score(self) -> None:
        """Test a score mapping without the governing ability raises."""
        with pytest.raises(DomainError):
            score_for_ability({"STR": 10}, Ability.WIS)


class TestSavingThrows:
    """Tests for saving throw modifiers."""

    def test_proficient_save(self) -> None:
        """Test proficiency adds the full bonus."""
        result = saving_throw_modifier("CON", 14, True, 9)
        assert result.total == 2 + 4
        assert result.is_proficient is True

    def test_non_proficient_save(self) -> None:
        """Test no bonus without proficiency."""
        result = saving_throw_modifier(Ability.CHA, 8, False, 9)
        assert result.proficiency_bonus == 0
        assert result.total == -1

    def test_all_saves(self, sample_score_set: Any) -> None:
        """Test all six saves with two proficiencies."""
        result = all_saving_throw_modifiers(sample_score_set, ["STR", Ability.CON], 1)
        assert set(result) == set(Ability)
        assert result[Ability.STR].total == 4
        assert result[Ability.CON].total == 3
        assert result[Ability.DEX].total == 2


class TestPassiveScores:
    """Tests for passive scores."""

    def test_passive_perception(self) -> None:
        """Test 10 + modifier + proficiency."""
        assert passive_score(14, ProficiencyLevel.PROFICIENT, 1).total == 14

    def test_passive_expertise(self) -> None:
        """Test expertise doubles the contribution."""
        assert passive_score(10, "expertise", 17).total == 22

    def test_from_modifier(self) -> None:
        """Test passive score from a computed skill modifier."""
        assert passive_score_from_modifier(5) == 15
