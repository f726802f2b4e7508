"""Tests for ability score generation, modifiers and species bonuses."""

from __future__ import annotations

from pathlib import Path

import pytest

from dnd_rules.core.exceptions import DomainError, UnknownReferenceError
from dnd_rules.engine.abilities import (
    ability_modifier,
    ability_modifier_or_none,
    apply_species_bonuses,
    calculate_ability_scores,
    format_modifier,
    generate_manual,
    generate_point_buy,
    generate_standard_array,
    is_valid_score,
    modifier_string,
    parse_ability,
    parse_skill,
    point_buy_cost,
    point_buy_status,
    skill_ability,
    skills_for_ability,
    total_point_buy_cost,
    validate_point_buy,
    validate_scores,
)
from dnd_rules.models import Ability, FloatingBonus, Skill, SpeciesBonus


class TestParsing:
    """Tests for ability and skill key parsing."""

    @pytest.mark.parametrize("raw", ["DEX", "dex", "dexterity", Ability.DEX])
    def test_parse_ability(self, raw: Ability | str) -> None:
        """Test every accepted ability spelling."""
        assert parse_ability(raw) is Ability.DEX

    def test_unknown_ability(self) -> None:
        """Test unknown abilities fail loudly."""
        with pytest.raises(UnknownReferenceError) as exc_info:
            parse_ability("luck")
        assert exc_info.value.details["kind"] == "ability"

    @pytest.mark.parametrize("raw", ["sleight_of_hand", "Sleight of Hand", "sleight-of-hand"])
    def test_parse_skill(self, raw: str) -> None:
        """Test skill keys normalize spaces and hyphens."""
        assert parse_skill(raw) is Skill.SLEIGHT_OF_HAND

    def test_unknown_skill(self) -> None:
        """Test unknown skills fail loudly."""
        with pytest.raises(UnknownReferenceError) as exc_info:
            parse_skill("basket_weaving")
        assert exc_info.value.details["key"] == "basket_weaving"


class TestAbilityModifier:
    """Tests for ability_modifier."""

    @pytest.mark.parametrize(
        "score,expected",
        [(1, -5), (3, -4), (8, -1), (9, -1), (10, 0), (11, 0), (15, 2), (20, 5), (30, 10)],
    )
    def test_modifier(self, score: int, expected: int) -> None:
        """Test floor((score - 10) / 2) across the range."""
        assert ability_modifier(score) == expected

    @pytest.mark.parametrize("score", range(1, 31))
    def test_modifier_full_range(self, score: int) -> None:
        """Test the floor formula holds for every legal score."""
        assert ability_modifier(score) == (score - 10) // 2
        assert -5 <= ability_modifier(score) <= 10

    def test_modifier_never_decreases(self) -> None:
        """Test a higher score never gives a lower modifier."""
        modifiers = [ability_modifier(score) for score in range(1, 31)]
        assert modifiers == sorted(modifiers)

    @pytest.mark.parametrize("score", [0, 31, -4, 10.5, "10", True])
    def test_out_of_domain(self, score: object) -> None:
        """Test invalid scores raise instead of clamping."""
        with pytest.raises(DomainError):
            ability_modifier(score)  # type: ignore[arg-type]

    def test_modifier_or_none(self) -> None:
        """Test the lenient variant returns None for invalid input."""
        assert ability_modifier_or_none(14) == 2
        assert ability_modifier_or_none(0) is None

    def test_is_valid_score(self) -> None:
        """Test PC and raw score ranges."""
        assert is_valid_score(3) is True
        assert is_valid_score(2) is False
        assert is_valid_score(21) is False
        assert is_valid_score(21, is_pc=False) is True
        assert is_valid_score("12") is False


class TestValidateScores:
    """Tests for validate_scores."""

    def test_valid_list(self) -> None:
        """Test six valid scores map onto abilities in order."""
        result = validate_scores([15, 14, 13, 12, 10, 8])
        assert result.valid is True
        assert result.scores[Ability.STR] == 15
        assert result.scores[Ability.CHA] == 8

    def test_not_a_list(self) -> None:
        """Test non-sequence input is rejected."""
        result = validate_scores("15,14,13")  # type: ignore[arg-type]
        assert result.valid is False
        assert result.error == "Scores must be an array"

    def test_wrong_length(self) -> None:
        """Test the count must be six."""
        result = validate_scores([15, 14, 13])
        assert result.error == "Expected 6 scores, got 3"

    def test_non_integer(self) -> None:
        """Test non-integer entries are rejected."""
        result = validate_scores([15, 14, 13, 12, 10, 8.5])
        assert result.valid is False
        assert "must be an integer" in (result.error or "")

    def test_out_of_range(self) -> None:
        """Test PC scores must be 3-20."""
        result = validate_scores([21, 14, 13, 12, 10, 8])
        assert result.valid is False
        assert "between 3 and 20" in (result.error or "")


class TestStandardArray:
    """Tests for standard array generation."""

    def test_valid_assignment(self, sample_ability_scores: dict[str, int]) -> None:
        """Test a permutation of the standard array is accepted."""
        result = generate_standard_array(sample_ability_scores)
        assert result.valid is True
        assert result.error is None

    def test_missing_ability(self) -> None:
        """Test every ability must be assigned."""
        result = generate_standard_array({"STR": 15, "DEX": 14, "CON": 13, "INT": 12, "WIS": 10})
        assert result.valid is False
        assert result.error == "Missing scores for: CHA (all 6 abilities required)"

    def test_duplicate_value(self) -> None:
        """Test each array value is used exactly once."""
        result = generate_standard_array(
            {"STR": 15, "DEX": 15, "CON": 13, "INT": 12, "WIS": 10, "CHA": 8}
        )
        assert result.valid is False
        assert "exactly once" in (result.error or "")


class TestPointBuy:
    """Tests for the point-buy method."""

    @pytest.mark.parametrize(
        "score,cost",
        [(8, 0), (9, 1), (10, 2), (11, 3), (12, 4), (13, 5), (14, 7), (15, 9)],
    )
    def test_cost_table(self, score: int, cost: int) -> None:
        """Test the PHB cost table."""
        assert point_buy_cost(score) == cost

    @pytest.mark.parametrize("score", [7, 16])
    def test_cost_out_of_range(self, score: int) -> None:
        """Test scores outside 8-15 have no cost."""
        with pytest.raises(DomainError):
            point_buy_cost(score)

    def test_total_cost(self) -> None:
        """Test list and mapping inputs sum the same."""
        assert total_point_buy_cost([15, 15, 15, 8, 8, 8]) == 27
        assert total_point_buy_cost({"STR": 15, "DEX": 14}) == 16

    def test_exact_budget(self) -> None:
        """Test spending all 27 points is valid."""
        result = generate_point_buy(
            {"STR": 15, "DEX": 15, "CON": 15, "INT": 8, "WIS": 8, "CHA": 8}
        )
        assert result.valid is True
        assert result.cost == 27
        assert result.remaining == 0

    def test_over_budget(self) -> None:
        """Test exceeding the budget is reported with the cost."""
        result = validate_point_buy(
            {"STR": 15, "DEX": 15, "CON": 15, "INT": 10, "WIS": 8, "CHA": 8}
        )
        assert result.valid is False
        assert result.error == "Point buy cost 29 exceeds budget of 27"
        assert result.remaining == -2

    def test_out_of_range_score(self) -> None:
        """Test out-of-range scores are named and excluded from the cost."""
        result = validate_point_buy(
            {"STR": 16, "DEX": 14, "CON": 13, "INT": 12, "WIS": 10, "CHA": 8}
        )
        assert result.valid is False
        assert result.error == "Point buy scores must be 8-15: STR=16"
        assert result.cost == 18

    def test_custom_budget(self) -> None:
        """Test an explicit budget overrides the configured one."""
        result = validate_point_buy(
            {"STR": 15, "DEX": 15, "CON": 15, "INT": 10, "WIS": 8, "CHA": 8},
            budget=30,
        )
        assert result.valid is True
        assert result.remaining == 1

    def test_configured_budget(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        house_rule_env: dict[str, str],
    ) -> None:
        """Test the default budget comes from settings."""
        monkeypatch.chdir(tmp_path)
        result = validate_point_buy(
            {"STR": 15, "DEX": 15, "CON": 15, "INT": 10, "WIS": 8, "CHA": 8}
        )
        assert result.valid is True
        assert result.remaining == 1

    @pytest.mark.parametrize(
        "remaining,message",
        [
            (0, "All points spent"),
            (5, "5 points remaining"),
            (1, "1 point remaining"),
            (-3, "3 points over budget"),
        ],
    )
    def test_status(self, remaining: int, message: str) -> None:
        """Test the budget description."""
        assert point_buy_status(remaining) == message


class TestManualEntry:
    """Tests for manual and rolled score entry."""

    def test_valid_rolled_scores(self) -> None:
        """Test scores within 3-20 are accepted."""
        result = generate_manual({"STR": 18, "DEX": 3, "CON": 12, "INT": 9, "WIS": 11, "CHA": 7})
        assert result.valid is True

    def test_pc_score_too_low(self) -> None:
        """Test PC scores below 3 are rejected."""
        result = generate_manual({"STR": 2, "DEX": 10, "CON": 10, "INT": 10, "WIS": 10, "CHA": 10})
        assert result.valid is False
        assert "Strength" in (result.error or "")

    def test_monster_range(self) -> None:
        """Test non-PC scores may use 1-30."""
        result = generate_manual(
            {"STR": 27, "DEX": 1, "CON": 25, "INT": 3, "WIS": 12, "CHA": 10},
            is_pc=False,
        )
        assert result.valid is True


class TestSpeciesBonuses:
    """Tests for apply_species_bonuses."""

    def test_fixed_bonuses(self, sample_ability_scores: dict[str, int]) -> None:
        """Test fixed bonuses apply to their abilities."""
        result = apply_species_bonuses(
            sample_ability_scores,
            [
                SpeciesBonus(ability=Ability.DEX, bonus=2),
                SpeciesBonus(ability=Ability.INT, bonus=1),
            ],
        )
        assert result.is_valid
        assert result.final[Ability.DEX] == 16
        assert result.final[Ability.INT] == 13
        assert result.bonuses[Ability.STR] == 0

    def test_floating_bonus_string_selection(self) -> None:
        """Test a comma-separated selection."""
        result = apply_species_bonuses(
            {},
            [SpeciesBonus(ability=FloatingBonus.ANY_TWO, bonus=1)],
            {"any_two": "STR, CON"},
        )
        assert result.is_valid
        assert result.final[Ability.STR] == 11
        assert result.final[Ability.CON] == 11
        assert result.base[Ability.WIS] == 10

    def test_floating_bonus_not_selected(self) -> None:
        """Test an unselected floating bonus is reported, not raised."""
        result = apply_species_bonuses(
            {}, [{"ability": "any", "bonus": 2}]
        )
        assert result.errors == ("Floating bonus 'any' not selected",)
        assert result.final == result.base

    def test_wrong_selection_count(self) -> None:
        """Test the number of selected abilities is checked."""
        result = apply_species_bonuses(
            {},
            [SpeciesBonus(ability=FloatingBonus.ANY_TWO, bonus=1)],
            {FloatingBonus.ANY_TWO: [Ability.STR]},
        )
        assert "any_two requires 2 ability selection(s), got 1" in result.errors
        assert result.final[Ability.STR] == 11

    def test_duplicate_ability(self) -> None:
        """Test an ability receives at most one species bonus."""
        result = apply_species_bonuses(
            {},
            [
                SpeciesBonus(ability=Ability.STR, bonus=2),
                SpeciesBonus(ability=FloatingBonus.ANY, bonus=1),
            ],
            {"any": "strength"},
        )
        assert "Strength already received a species bonus" in result.errors
        assert result.final[Ability.STR] == 12

    def test_too_many_selections(self) -> None:
        """Test only the allowed number of picks receive the bonus."""
        result = apply_species_bonuses(
            {ability: 10 for ability in Ability},
            [SpeciesBonus(ability=FloatingBonus.ANY, bonus=2)],
            {"any": "STR,DEX,CON"},
        )
        assert result.final[Ability.STR] == 12
        assert result.final[Ability.DEX] == 10
        assert result.final[Ability.CON] == 10
        assert sum(result.bonuses.values()) == 2
        assert "Extra selection DEX ignored for any" in result.errors
        assert "Extra selection CON ignored for any" in result.errors

    def test_unknown_selection_category(self) -> None:
        """Test an unknown selection key is reported, not raised."""
        result = apply_species_bonuses(
            {},
            [SpeciesBonus(ability=Ability.STR, bonus=2)],
            {"any_four": "STR"},
        )
        assert "Unknown floating bonus category 'any_four'" in result.errors
        assert result.final[Ability.STR] == 12

    def test_final_capped(self) -> None:
        """Test PC totals are capped at 20."""
        result = apply_species_bonuses({"STR": 19}, [SpeciesBonus(ability=Ability.STR, bonus=2)])
        assert result.final[Ability.STR] == 20


class TestCalculateAbilityScores:
    """Tests for calculate_ability_scores."""

    def test_breakdown(self) -> None:
        """Test every bonus source is recorded."""
        scores = calculate_ability_scores(
            {"STR": 15},
            racial={"STR": 2},
            asi={"STR": 1},
            other={"DEX": 2},
        )
        strength = scores.scores[Ability.STR]
        assert (strength.base, strength.racial_bonus, strength.asi_bonus) == (15, 2, 1)
        assert strength.total == 18
        assert scores.get_modifier(Ability.STR) == 4
        assert scores.get_total(Ability.DEX) == 12
        assert scores.get_total(Ability.WIS) == 10

    def test_pc_cap(self) -> None:
        """Test PC totals clamp to the cap."""
        scores = calculate_ability_scores({"STR": 18}, asi={"STR": 4})
        assert scores.get_total(Ability.STR) == 20

    def test_monster_no_cap(self) -> None:
        """Test non-PC totals may exceed 20."""
        scores = calculate_ability_scores({"STR": 26}, is_pc=False)
        assert scores.get_total(Ability.STR) == 26

    def test_total_out_of_range(self) -> None:
        """Test totals outside 1-30 raise."""
        with pytest.raises(DomainError):
            calculate_ability_scores({"STR": 29}, other={"STR": 3}, is_pc=False)


class TestSkillHelpers:
    """Tests for skill and display helpers."""

    def test_skill_ability(self) -> None:
        """Test governing ability lookup by key."""
        assert skill_ability("animal_handling") is Ability.WIS

    def test_skills_for_ability(self) -> None:
        """Test every Strength skill is listed."""
        assert skills_for_ability("STR") == [Skill.ATHLETICS]
        assert skills_for_ability(Ability.CON) == []

    @pytest.mark.parametrize("modifier,text", [(3, "+3"), (0, "+0"), (-1, "-1")])
    def test_format_modifier(self, modifier: int, text: str) -> None:
        """Test signed modifier formatting."""
        assert format_modifier(modifier) == text

    def test_modifier_string(self) -> None:
        """Test formatting straight from a score."""
        assert modifier_string(8) == "-1"
