"""Proficiency calculations for D&D 5E.

Proficiency bonus by level, skill and saving throw modifiers, and passive
scores. Jack of All Trades is applied here as a flag; deciding whether a
character has it belongs to the features module.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from dnd_rules.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL, PASSIVE_SCORE_BASE
from dnd_rules.core.exceptions import DomainError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.abilities import ability_modifier, parse_ability, parse_skill
from dnd_rules.models.components import (
    AbilityScoreSet,
    ClassLevel,
    PassiveScore,
    SavingThrowModifier,
    SkillModifier,
)
from dnd_rules.models.enums import Ability, ProficiencyLevel, Skill


logger = get_logger(__name__)

AbilityScores = AbilityScoreSet | Mapping[Ability | str, int]


# =============================================================================
# Proficiency Bonus
# =============================================================================


def check_level(level: int, field_name: str = "level") -> None:
    """Raise DomainError unless level is an integer character level (1-20)."""
    if (
        not isinstance(level, int)
        or isinstance(level, bool)
        or not MIN_CHARACTER_LEVEL <= level <= MAX_CHARACTER_LEVEL
    ):
        raise DomainError(
            f"Level must be an integer between {MIN_CHARACTER_LEVEL} and "
            f"{MAX_CHARACTER_LEVEL}, got {level!r}",
            field_name=field_name,
            invalid_value=level,
        )


def proficiency_bonus(level: int) -> int:
    """Get the proficiency bonus for a character level.

    Formula: floor((level - 1) / 4) + 2, giving +2 at level 1 up to +6 at 17.

    Args:
        level: Total character level (1-20).

    Returns:
        Proficiency bonus.

    Raises:
        DomainError: If level is not an integer in 1-20.
    """
    check_level(level)
    return (level - 1) // 4 + 2


def total_level(class_levels: Iterable[int | ClassLevel]) -> int:
    """Sum the levels of every class a character has."""
    return sum(c.level if isinstance(c, ClassLevel) else c for c in class_levels)


def multiclass_proficiency_bonus(class_levels: Iterable[int | ClassLevel]) -> int:
    """Proficiency bonus based on total character level across all classes."""
    return proficiency_bonus(total_level(class_levels))


def proficiency_level_bonus(level: ProficiencyLevel | str, bonus: int) -> int:
    """Apply a proficiency level's multiplier to the bonus, rounding down.

    Example:
        >>> proficiency_level_bonus(ProficiencyLevel.HALF, 3)
        1
        >>> proficiency_level_bonus(ProficiencyLevel.EXPERTISE, 3)
        6
    """
    return math.floor(ProficiencyLevel(level).multiplier * bonus)


def proficiency_level_name(level: ProficiencyLevel | str) -> str:
    """Get the display name of a proficiency level."""
    return ProficiencyLevel(level).display_name


def effective_proficiency_level(
    skill: Skill | str,
    proficiencies: Mapping[Skill | str, ProficiencyLevel | str],
    jack_of_all_trades: bool = False,
) -> ProficiencyLevel:
    """Get the proficiency level that applies to a skill.

    A skill without proficiency counts as half proficient when the
    character has Jack of All Trades.
    """
    target = parse_skill(skill)
    level = ProficiencyLevel.NONE
    for key, value in proficiencies.items():
        if parse_skill(key) == target:
            level = ProficiencyLevel(value)
            break
    if level == ProficiencyLevel.NONE and jack_of_all_trades:
        return ProficiencyLevel.HALF
    return level


# =============================================================================
# Skills
# =============================================================================


def score_for_ability(ability_scores: AbilityScores, ability: Ability) -> int:
    """Look up one ability score in a score set or a plain mapping.

    Raises:
        DomainError: If the score is missing.
    """
    if isinstance(ability_scores, AbilityScoreSet):
        return ability_scores.get_total(ability)
    for key, value in ability_scores.items():
        if parse_ability(key) == ability:
            return value
    raise DomainError(
        f"Missing {ability.full_name} score",
        field_name="ability_scores",
        invalid_value=ability.value,
    )


def skill_modifier(
    skill: Skill | str,
    ability_scores: AbilityScores,
    proficiency_level: ProficiencyLevel | str,
    character_level: int,
    *,
    jack_of_all_trades: bool = False,
) -> SkillModifier:
    """Calculate the modifier for one skill.

    Args:
        skill: Skill key.
        ability_scores: Final ability scores.
        proficiency_level: Training in this skill.
        character_level: Total character level.
        jack_of_all_trades: Treat an untrained skill as half proficient.

    Returns:
        Skill modifier broken into ability and proficiency parts.

    Raises:
        UnknownReferenceError: If the skill key is unknown.
    """
    resolved = parse_skill(skill)
    level = ProficiencyLevel(proficiency_level)
    if level == ProficiencyLevel.NONE and jack_of_all_trades:
        level = ProficiencyLevel.HALF

    ability = resolved.ability
    return SkillModifier(
        skill=resolved,
        ability=ability,
        ability_modifier=ability_modifier(score_for_ability(ability_scores, ability)),
        proficiency_bonus=proficiency_level_bonus(level, proficiency_bonus(character_level)),
        proficiency_level=level,
    )


def all_skill_modifiers(
    ability_scores: AbilityScores,
    proficiencies: Mapping[Skill | str, ProficiencyLevel | str],
    character_level: int,
    *,
    jack_of_all_trades: bool = False,
) -> dict[Skill, SkillModifier]:
    """Calculate modifiers for all 18 skills."""
    levels = {parse_skill(key): ProficiencyLevel(value) for key, value in proficiencies.items()}
    return {
        skill: skill_modifier(
            skill,
            ability_scores,
            levels.get(skill, ProficiencyLevel.NONE),
            character_level,
            jack_of_all_trades=jack_of_all_trades,
        )
        for skill in Skill
    }


# =============================================================================
# Saving Throws
# =============================================================================


def saving_throw_modifier(
    ability: Ability | str,
    score: int,
    is_proficient: bool,
    character_level: int,
) -> SavingThrowModifier:
    """Calculate the saving throw modifier for one ability."""
    return SavingThrowModifier(
        ability=parse_ability(ability),
        ability_modifier=ability_modifier(score),
        proficiency_bonus=proficiency_bonus(character_level) if is_proficient else 0,
        is_proficient=is_proficient,
    )


def all_saving_throw_modifiers(
    ability_scores: AbilityScores,
    proficient_saves: Iterable[Ability | str],
    character_level: int,
) -> dict[Ability, SavingThrowModifier]:
    """Calculate saving throw modifiers for all six abilities."""
    proficient = {parse_ability(a) for a in proficient_saves}
    return {
        ability: saving_throw_modifier(
            ability,
            score_for_ability(ability_scores, ability),
            ability in proficient,
            character_level,
        )
        for ability in Ability
    }


# =============================================================================
# Passive Scores
# =============================================================================


def passive_score(
    score: int,
    proficiency_level: ProficiencyLevel | str,
    character_level: int,
) -> PassiveScore:
    """Calculate a passive score such as passive Perception.

    Formula: 10 + ability modifier + proficiency contribution.

    Args:
        score: Governing ability score (Wisdom for Perception).
        proficiency_level: Training in the skill.
        character_level: Total character level.

    Example:
        >>> passive_score(14, ProficiencyLevel.PROFICIENT, 1).total
        14
    """
    return PassiveScore(
        base=PASSIVE_SCORE_BASE,
        ability_modifier=ability_modifier(score),
        proficiency_bonus=proficiency_level_bonus(
            proficiency_level, proficiency_bonus(character_level)
        ),
    )


def passive_score_from_modifier(skill_modifier_total: int) -> int:
    """Passive score from an already computed skill modifier."""
    return PASSIVE_SCORE_BASE + skill_modifier_total


__all__ = [
    "check_level",
    "score_for_ability",
    "proficiency_bonus",
    "total_level",
    "multiclass_proficiency_bonus",
    "proficiency_level_bonus",
    "proficiency_level_name",
    "effective_proficiency_level",
    "skill_modifier",
    "all_skill_modifiers",
    "saving_throw_modifier",
    "all_saving_throw_modifiers",
    "passive_score",
    "passive_score_from_modifier",
]
