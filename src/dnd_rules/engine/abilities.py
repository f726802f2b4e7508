"""Ability score calculations for D&D 5E.

Covers the modifier formula, the three score generation methods (standard
array, point buy, manual/rolled entry), species bonuses and the final
per-ability breakdown combining base scores with every bonus source.

Example:
    >>> from dnd_rules.engine.abilities import ability_modifier, generate_point_buy
    >>> ability_modifier(16)
    3
    >>> generate_point_buy({"STR": 15, "DEX": 14, "CON": 13,
    ...                     "INT": 12, "WIS": 10, "CHA": 8}).remaining
    0
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from dnd_rules.core.config import get_settings
from dnd_rules.core.constants import (
    DEFAULT_ABILITY_SCORE,
    MIN_ABILITY_SCORE,
    MIN_PC_ABILITY_SCORE,
    MONSTER_ABILITY_SCORE_CAP,
    POINT_BUY_COSTS,
    POINT_BUY_MAX,
    POINT_BUY_MIN,
    STANDARD_ARRAY,
)
from dnd_rules.core.exceptions import DomainError, UnknownReferenceError
from dnd_rules.core.logging import get_logger
from dnd_rules.models.components import (
    AbilityScoreBreakdown,
    AbilityScoreSet,
    PointBuyResult,
    ScoreGenerationResult,
    SpeciesBonus,
    SpeciesBonusResult,
    calculate_modifier,
)
from dnd_rules.models.enums import SKILL_ABILITIES, Ability, FloatingBonus, Skill


logger = get_logger(__name__)

ScoreInput = Mapping[Ability | str, int]
SelectionInput = Mapping[FloatingBonus | str, Ability | str | Sequence[Ability | str]]


# =============================================================================
# Parsing Helpers
# =============================================================================


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_ability(value: Ability | str) -> Ability:
    """Resolve an ability from an enum member, full name or abbreviation.

    Args:
        value: Ability, 'strength', 'STR' or 'str'.

    Returns:
        The matching Ability.

    Raises:
        UnknownReferenceError: If no ability matches.
    """
    try:
        return Ability(value)
    except ValueError as exc:
        raise UnknownReferenceError(
            f"Unknown ability: {value!r}",
            kind="ability",
            key=str(value),
        ) from exc


def parse_skill(value: Skill | str) -> Skill:
    """Resolve a skill key ('sleight_of_hand', 'Sleight of Hand').

    Raises:
        UnknownReferenceError: If no skill matches.
    """
    if isinstance(value, Skill):
        return value
    normalized = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return Skill(normalized)
    except ValueError as exc:
        raise UnknownReferenceError(
            f"Unknown skill: {value!r}",
            kind="skill",
            key=str(value),
        ) from exc


def _parse_scores(scores: ScoreInput) -> dict[Ability, int]:
    return {parse_ability(key): value for key, value in scores.items()}


def _pc_cap() -> int:
    return get_settings().rules.pc_ability_score_cap


# =============================================================================
# Modifiers and Validation
# =============================================================================


def ability_modifier(score: int) -> int:
    """Calculate the ability modifier for a score.

    Args:
        score: Ability score, an integer from 1 to 30.

    Returns:
        floor((score - 10) / 2).

    Raises:
        DomainError: If the score is not an integer in 1-30.

    Example:
        >>> ability_modifier(8)
        -1
    """
    if not _is_int(score) or not MIN_ABILITY_SCORE <= score <= MONSTER_ABILITY_SCORE_CAP:
        raise DomainError(
            f"Score must be an integer between {MIN_ABILITY_SCORE} and "
            f"{MONSTER_ABILITY_SCORE_CAP}, got {score!r}",
            field_name="score",
            invalid_value=score,
        )
    return calculate_modifier(score)


def ability_modifier_or_none(score: Any) -> int | None:
    """Like ability_modifier, but returns None for an invalid score."""
    try:
        return ability_modifier(score)
    except DomainError:
        return None


def is_valid_score(score: Any, *, is_pc: bool = True) -> bool:
    """Check a score against the PC range (3 to the PC cap) or the raw 1-30 range."""
    if not _is_int(score):
        return False
    if is_pc:
        return MIN_PC_ABILITY_SCORE <= score <= _pc_cap()
    return MIN_ABILITY_SCORE <= score <= MONSTER_ABILITY_SCORE_CAP


def validate_scores(values: Sequence[Any]) -> ScoreGenerationResult:
    """Validate an ordered list of six PC ability scores (STR to CHA).

    Args:
        values: Six scores in Ability order.

    Returns:
        Result with the scores keyed by ability when the length is right.
    """
    if isinstance(values, str | bytes) or not isinstance(values, Sequence):
        return ScoreGenerationResult(scores={}, valid=False, error="Scores must be an array")
    if len(values) != len(Ability):
        return ScoreGenerationResult(
            scores={},
            valid=False,
            error=f"Expected {len(Ability)} scores, got {len(values)}",
        )

    scores = dict(zip(Ability, values, strict=True))
    for ability, value in scores.items():
        if not _is_int(value):
            return ScoreGenerationResult(
                scores={},
                valid=False,
                error=f"{ability.full_name} score must be an integer, got {value!r}",
            )
        if not is_valid_score(value):
            return ScoreGenerationResult(
                scores=scores,
                valid=False,
                error=(
                    f"{ability.full_name} score must be between {MIN_PC_ABILITY_SCORE} "
                    f"and {_pc_cap()}, got {value}"
                ),
            )
    return ScoreGenerationResult(scores=scores, valid=True)


def _missing_abilities_error(scores: Mapping[Ability, int]) -> str | None:
    missing = [ability.abbreviation for ability in Ability if ability not in scores]
    if missing:
        return f"Missing scores for: {', '.join(missing)} (all 6 abilities required)"
    return None


# =============================================================================
# Standard Array
# =============================================================================


def generate_standard_array(assignments: ScoreInput) -> ScoreGenerationResult:
    """Validate a standard array assignment.

    All six abilities must be assigned and the values must be exactly
    15, 14, 13, 12, 10 and 8 in some order.

    Args:
        assignments: Score per ability.

    Returns:
        Generation result; ``error`` explains an invalid assignment.
    """
    scores = _parse_scores(assignments)

    error = _missing_abilities_error(scores)
    if error is None and sorted(scores.values()) != sorted(STANDARD_ARRAY):
        values = ", ".join(str(v) for v in STANDARD_ARRAY)
        error = f"Scores must use each standard array value exactly once: {values}"

    return ScoreGenerationResult(scores=scores, valid=error is None, error=error)


# =============================================================================
# Point Buy
# =============================================================================


def point_buy_cost(score: int) -> int:
    """Get the point-buy cost of a single score.

    Raises:
        DomainError: If the score is outside 8-15.
    """
    if not _is_int(score) or score not in POINT_BUY_COSTS:
        raise DomainError(
            f"Point buy score must be {POINT_BUY_MIN}-{POINT_BUY_MAX}, got {score!r}",
            field_name="score",
            invalid_value=score,
        )
    return POINT_BUY_COSTS[score]


def total_point_buy_cost(scores: Mapping[Any, int] | Iterable[int]) -> int:
    """Sum the point-buy cost of several scores.

    Args:
        scores: Either a score-per-ability mapping or a plain list of scores.

    Returns:
        Total points spent.

    Raises:
        DomainError: If any score is outside 8-15.
    """
    values = scores.values() if isinstance(scores, Mapping) else scores
    return sum(point_buy_cost(value) for value in values)


def validate_point_buy(scores: ScoreInput, budget: int | None = None) -> PointBuyResult:
    """Validate a point-buy assignment against the budget.

    ``cost`` and ``remaining`` are reported even for an invalid assignment;
    out-of-range scores contribute nothing to the cost.

    Args:
        scores: Score per ability.
        budget: Points available. Defaults to the configured budget (27).

    Returns:
        Point-buy result.
    """
    if budget is None:
        budget = get_settings().rules.point_buy_budget
    parsed = _parse_scores(scores)

    out_of_range = {
        ability: value for ability, value in parsed.items() if value not in POINT_BUY_COSTS
    }
    cost = sum(
        POINT_BUY_COSTS[value] for ability, value in parsed.items() if ability not in out_of_range
    )
    remaining = budget - cost

    error = _missing_abilities_error(parsed)
    if error is None and out_of_range:
        bad = ", ".join(f"{a.abbreviation}={v}" for a, v in out_of_range.items())
        error = f"Point buy scores must be {POINT_BUY_MIN}-{POINT_BUY_MAX}: {bad}"
    if error is None and cost > budget:
        error = f"Point buy cost {cost} exceeds budget of {budget}"

    return PointBuyResult(
        scores=parsed,
        valid=error is None,
        error=error,
        cost=cost,
        remaining=remaining,
    )


def generate_point_buy(scores: ScoreInput, budget: int | None = None) -> PointBuyResult:
    """Generate ability scores with the point-buy method.

    Example:
        >>> result = generate_point_buy({"STR": 16, "DEX": 14, "CON": 13,
        ...                              "INT": 12, "WIS": 10, "CHA": 8})
        >>> result.valid
        False
    """
    result = validate_point_buy(scores, budget)
    logger.debug(
        "Point buy evaluated",
        valid=result.valid,
        cost=result.cost,
        remaining=result.remaining,
    )
    return result


def point_buy_status(remaining: int) -> str:
    """Describe the point-buy budget for display."""
    if remaining == 0:
        return "All points spent"
    if remaining > 0:
        return f"{remaining} point{'s' if remaining != 1 else ''} remaining"
    over = -remaining
    return f"{over} point{'s' if over != 1 else ''} over budget"


# =============================================================================
# Manual / Rolled Entry
# =============================================================================


def generate_manual(scores: ScoreInput, *, is_pc: bool = True) -> ScoreGenerationResult:
    """Validate manually entered or rolled scores.

    Args:
        scores: Score per ability.
        is_pc: Check against the PC range (3 to the cap) instead of 1-30.

    Returns:
        Generation result.
    """
    parsed = _parse_scores(scores)

    error = _missing_abilities_error(parsed)
    if error is None:
        low, high = (
            (MIN_PC_ABILITY_SCORE, _pc_cap())
            if is_pc
            else (MIN_ABILITY_SCORE, MONSTER_ABILITY_SCORE_CAP)
        )
        for ability, value in parsed.items():
            if not is_valid_score(value, is_pc=is_pc):
                error = (
                    f"{ability.full_name} score must be between {low} and {high}, got {value!r}"
                )
                break

    return ScoreGenerationResult(scores=parsed, valid=error is None, error=error)


# =============================================================================
# Species Bonuses
# =============================================================================


def _parse_selection(
    category: FloatingBonus,
    raw: Ability | str | Sequence[Ability | str],
    errors: list[str],
) -> list[Ability]:
    if isinstance(raw, str):
        items: Sequence[Ability | str] = [part.strip() for part in raw.split(",") if part.strip()]
    else:
        items = raw

    selected: list[Ability] = []
    for item in items:
        try:
            selected.append(parse_ability(item))
        except UnknownReferenceError:
            errors.append(f"Unknown ability {item!r} selected for {category.value}")

    if len(items) != category.selection_count:
        errors.append(
            f"{category.value} requires {category.selection_count} ability selection(s), "
            f"got {len(items)}"
        )
    # Extra picks are reported, never granted
    for ability in selected[category.selection_count :]:
        errors.append(f"Extra selection {ability.abbreviation} ignored for {category.value}")
    return selected[: category.selection_count]


def apply_species_bonuses(
    base: ScoreInput,
    bonuses: Iterable[SpeciesBonus | Mapping[str, Any]],
    selections: SelectionInput | None = None,
    *,
    is_pc: bool = True,
) -> SpeciesBonusResult:
    """Apply species ability bonuses, including floating bonuses.

    Each ability receives at most one species bonus; a second bonus for the
    same ability is reported and dropped. Picks beyond a category's count
    and unknown selection categories are reported and ignored. Problems
    never raise; they are collected in ``errors`` and the best-effort
    result is returned.

    Args:
        base: Scores before bonuses. Missing abilities default to 10.
        bonuses: Fixed (``Ability``) or floating (``FloatingBonus``) entries.
        selections: Chosen abilities per floating category, as an ability,
            a comma-separated string ('STR,DEX') or a sequence.
        is_pc: Cap final scores at the PC cap.

    Returns:
        Base, applied bonuses, final scores and accumulated errors.

    Example:
        >>> result = apply_species_bonuses(
        ...     {"STR": 10, "DEX": 10, "CON": 10, "INT": 10, "WIS": 10, "CHA": 10},
        ...     [SpeciesBonus(ability=FloatingBonus.ANY_TWO, bonus=1)],
        ...     {"any_two": "STR,DEX"},
        ... )
        >>> result.final[Ability.STR]
        11
    """
    parsed_base = _parse_scores(base)
    base_scores = {
        ability: parsed_base.get(ability, DEFAULT_ABILITY_SCORE) for ability in Ability
    }
    applied: dict[Ability, int] = {}
    errors: list[str] = []

    parsed_selections: dict[FloatingBonus, Any] = {}
    for key, value in (selections or {}).items():
        try:
            parsed_selections[FloatingBonus(key)] = value
        except ValueError:
            errors.append(f"Unknown floating bonus category {key!r}")

    def grant(ability: Ability, amount: int) -> None:
        if ability in applied:
            errors.append(f"{ability.full_name} already received a species bonus")
            return
        applied[ability] = amount

    for entry in bonuses:
        bonus = entry if isinstance(entry, SpeciesBonus) else SpeciesBonus.model_validate(entry)
        if isinstance(bonus.ability, FloatingBonus):
            category = bonus.ability
            if category not in parsed_selections:
                errors.append(f"Floating bonus '{category.value}' not selected")
                continue
            for ability in _parse_selection(category, parsed_selections[category], errors):
                grant(ability, bonus.bonus)
        else:
            grant(bonus.ability, bonus.bonus)

    cap = _pc_cap() if is_pc else MONSTER_ABILITY_SCORE_CAP
    final = {
        ability: min(cap, base_scores[ability] + applied.get(ability, 0)) for ability in Ability
    }

    if errors:
        logger.warning("Species bonuses applied with errors", errors=errors)
    else:
        logger.debug(
            "Species bonuses applied",
            bonuses={a.abbreviation: b for a, b in applied.items()},
        )

    return SpeciesBonusResult(
        base=base_scores,
        bonuses={ability: applied.get(ability, 0) for ability in Ability},
        final=final,
        errors=tuple(errors),
    )


# =============================================================================
# Final Scores
# =============================================================================


def calculate_ability_scores(
    base: ScoreInput,
    racial: ScoreInput | None = None,
    asi: ScoreInput | None = None,
    other: ScoreInput | None = None,
    *,
    is_pc: bool = True,
) -> AbilityScoreSet:
    """Combine base scores with every bonus source.

    Args:
        base: Base scores. Missing abilities default to 10.
        racial: Species bonuses per ability.
        asi: Ability Score Improvement bonuses per ability.
        other: Bonuses from items, feats and so on.
        is_pc: Clamp totals to the PC cap.

    Returns:
        Breakdown and modifier for all six abilities.

    Raises:
        DomainError: If a total falls outside the valid score range.
    """
    parsed_base = _parse_scores(base)
    parsed_racial = _parse_scores(racial or {})
    parsed_asi = _parse_scores(asi or {})
    parsed_other = _parse_scores(other or {})
    cap = _pc_cap()

    breakdowns: dict[Ability, AbilityScoreBreakdown] = {}
    for ability in Ability:
        base_score = parsed_base.get(ability, DEFAULT_ABILITY_SCORE)
        racial_bonus = parsed_racial.get(ability, 0)
        asi_bonus = parsed_asi.get(ability, 0)
        other_bonus = parsed_other.get(ability, 0)

        total = base_score + racial_bonus + asi_bonus + other_bonus
        if is_pc:
            total = min(cap, total)
        if not MIN_ABILITY_SCORE <= total <= MONSTER_ABILITY_SCORE_CAP:
            raise DomainError(
                f"{ability.full_name} total must be between {MIN_ABILITY_SCORE} and "
                f"{MONSTER_ABILITY_SCORE_CAP}, got {total}",
                field_name=ability.value,
                invalid_value=total,
            )

        breakdowns[ability] = AbilityScoreBreakdown(
            base=base_score,
            racial_bonus=racial_bonus,
            asi_bonus=asi_bonus,
            other_bonus=other_bonus,
            total=total,
        )

    result = AbilityScoreSet(scores=breakdowns)
    logger.debug(
        "Ability scores calculated",
        totals={a.abbreviation: t for a, t in result.totals.items()},
    )
    return result


# =============================================================================
# Skills and Display
# =============================================================================


def skill_ability(skill: Skill | str) -> Ability:
    """Get the governing ability for a skill.

    Raises:
        UnknownReferenceError: If the skill key is unknown.
    """
    return parse_skill(skill).ability


def skills_for_ability(ability: Ability | str) -> list[Skill]:
    """List the skills governed by an ability."""
    target = parse_ability(ability)
    return [skill for skill, governing in SKILL_ABILITIES.items() if governing == target]


def format_modifier(modifier: int) -> str:
    """Format a modifier with its sign ('+3', '+0', '-1')."""
    return f"{modifier:+d}"


def modifier_string(score: int) -> str:
    """Format the modifier for a score ('+3' for 16)."""
    return format_modifier(ability_modifier(score))


__all__ = [
    "parse_ability",
    "parse_skill",
    "ability_modifier",
    "ability_modifier_or_none",
    "is_valid_score",
    "validate_scores",
    "generate_standard_array",
    "point_buy_cost",
    "total_point_buy_cost",
    "validate_point_buy",
    "generate_point_buy",
    "point_buy_status",
    "generate_manual",
    "apply_species_bonuses",
    "calculate_ability_scores",
    "skill_ability",
    "skills_for_ability",
    "format_modifier",
    "modifier_string",
]
