"""Combat statistics for D&D 5E.

Armor class, hit points per level, initiative, speeds and weapon attacks.
Damage, healing and death saves live in the health module.

Example:
    >>> from dnd_rules.engine.combat import calculate_armor_class
    >>> from dnd_rules.models.enums import ArmorType
    >>> calculate_armor_class(ArmorType.MEDIUM, 14, 16, has_shield=True).total
    18
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from dnd_rules.core.constants import (
    MEDIUM_ARMOR_DEX_CAP,
    SHIELD_AC_BONUS,
    UNARMORED_BASE_AC,
    VERSATILE_DIE_PROGRESSION,
)
from dnd_rules.core.exceptions import DomainError, InvalidRollError, UnknownReferenceError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.abilities import ability_modifier, format_modifier
from dnd_rules.engine.proficiency import check_level, proficiency_bonus
from dnd_rules.models.components import (
    ArmorClass,
    AttackAbility,
    AttackBonus,
    HitPointLevel,
    Initiative,
    LevelHitPoints,
    MaxHitPoints,
    Speed,
    WeaponDamage,
)
from dnd_rules.models.enums import Ability, ArmorType, MovementType
from dnd_rules.models.progression import CLASS_HIT_DICE, normalize_class_key


logger = get_logger(__name__)

_DIE_PATTERN = re.compile(r"^d(\d+)$")
_DICE_PATTERN = re.compile(r"^(\d*)d(\d+)$")


# =============================================================================
# Armor Class
# =============================================================================


def calculate_armor_class(
    armor_type: ArmorType | str,
    armor_base: int,
    dex_score: int,
    *,
    has_shield: bool = False,
    magic_bonus: int = 0,
    feature_bonus: int = 0,
) -> ArmorClass:
    """Calculate armor class from armor, Dexterity and bonuses.

    Unarmored uses a base of 10 (``armor_base`` is ignored) plus full DEX.
    Light armor adds full DEX, medium armor caps DEX at +2 and heavy armor
    ignores DEX.

    Args:
        armor_type: Armor category worn.
        armor_base: Base AC of the armor.
        dex_score: Dexterity score.
        has_shield: Add the shield bonus (+2).
        magic_bonus: Magic armor or item bonus.
        feature_bonus: Bonus from class features, feats or spells.

    Returns:
        Armor class breakdown.
    """
    kind = ArmorType(armor_type)
    dex = ability_modifier(dex_score)

    if kind == ArmorType.UNARMORED:
        base, dex_bonus = UNARMORED_BASE_AC, dex
    elif kind == ArmorType.LIGHT:
        base, dex_bonus = armor_base, dex
    elif kind == ArmorType.MEDIUM:
        base, dex_bonus = armor_base, min(dex, MEDIUM_ARMOR_DEX_CAP)
    else:
        base, dex_bonus = armor_base, 0

    return ArmorClass(
        base=base,
        dex_bonus=dex_bonus,
        shield_bonus=SHIELD_AC_BONUS if has_shield else 0,
        magic_bonus=magic_bonus,
        feature_bonus=feature_bonus,
    )


def unarmored_defense(dex_score: int, secondary_score: int) -> int:
    """Unarmored Defense: 10 + DEX + CON (Barbarian) or WIS (Monk)."""
    return UNARMORED_BASE_AC + ability_modifier(dex_score) + ability_modifier(secondary_score)


# =============================================================================
# Hit Dice Helpers
# =============================================================================


def hit_die_max(die: str) -> int:
    """Get the number of faces of a hit die string ('d10' -> 10).

    Raises:
        DomainError: If the die string is malformed.
    """
    match = _DIE_PATTERN.match(die.strip().lower())
    if not match or int(match.group(1)) < 1:
        raise DomainError(f"Invalid hit die: {die!r}", field_name="hit_die", invalid_value=die)
    return int(match.group(1))


def class_hit_die(class_key: str) -> str:
    """Get the hit die of a class.

    Raises:
        UnknownReferenceError: If the class key is unknown.
    """
    key = normalize_class_key(class_key)
    try:
        return CLASS_HIT_DICE[key]
    except KeyError as exc:
        raise UnknownReferenceError(
            f"Unknown class: {class_key!r}",
            kind="class",
            key=class_key,
        ) from exc


def fixed_hit_points(die: str) -> int:
    """Fixed hit points per level after first: ceil(max / 2) + 1."""
    return math.ceil(hit_die_max(die) / 2) + 1


def validate_die_roll(die: str, roll: int) -> int:
    """Check that a roll is possible on the die.

    Raises:
        InvalidRollError: If the roll is outside 1 to the die maximum.
    """
    faces = hit_die_max(die)
    if not isinstance(roll, int) or isinstance(roll, bool) or not 1 <= roll <= faces:
        raise InvalidRollError(f"Invalid roll for {die}: {roll!r}", die=die, roll=roll)
    return roll


# =============================================================================
# Hit Points
# =============================================================================


def level_hp(
    level: int,
    hit_die: str,
    con_score: int,
    roll: int | None = None,
    use_fixed: bool = True,
) -> LevelHitPoints:
    """Calculate hit points gained at one level.

    Level 1 always takes the die maximum. Later levels take the fixed
    average when ``use_fixed`` is set (any roll is ignored), otherwise the
    given roll.

    Args:
        level: Character level the hit points are for.
        hit_die: Hit die of the class taken at this level.
        con_score: Constitution score.
        roll: Hit die roll for this level.
        use_fixed: Take the fixed average instead of the roll.

    Returns:
        Hit points gained at this level.

    Raises:
        InvalidRollError: If the roll is impossible for the die.
        DomainError: If the level is outside 1-20, or a roll is required
            but missing.
    """
    check_level(level)
    faces = hit_die_max(hit_die)
    con_modifier = ability_modifier(con_score)

    if level == 1:
        die_value, is_fixed = faces, True
    elif use_fixed:
        die_value, is_fixed = fixed_hit_points(hit_die), True
    elif roll is None:
        raise DomainError(
            f"A {hit_die} roll is required for level {level} when not using fixed hit points",
            field_name="roll",
        )
    else:
        die_value, is_fixed = validate_die_roll(hit_die, roll), False

    return LevelHitPoints(
        level=level,
        hit_die=hit_die,
        die_value=die_value,
        con_modifier=con_modifier,
        is_fixed=is_fixed,
    )


def max_hp(
    levels: Iterable[HitPointLevel | Mapping[str, Any]],
    feature_bonus_per_level: int = 0,
) -> MaxHitPoints:
    """Calculate maximum hit points over every level taken.

    Args:
        levels: One entry per character level, in order.
        feature_bonus_per_level: Per-level bonus (e.g., Tough feat gives 2).

    Returns:
        Maximum hit points with the per-level breakdown.

    Raises:
        UnknownReferenceError: If a class key is unknown.
    """
    entries = [
        entry if isinstance(entry, HitPointLevel) else HitPointLevel.model_validate(entry)
        for entry in levels
    ]
    breakdown = tuple(
        level_hp(
            entry.level,
            class_hit_die(entry.class_key),
            entry.con_score,
            entry.roll,
            entry.use_fixed,
        )
        for entry in entries
    )
    result = MaxHitPoints(levels=breakdown, feature_bonus=feature_bonus_per_level * len(entries))
    logger.debug("Max HP calculated", levels=len(entries), max_hp=result.total)
    return result


def level_up_hp(
    class_key: str,
    con_score: int,
    roll: int | None = None,
    use_fixed: bool = True,
    feature_bonus: int = 0,
) -> int:
    """Hit points gained when levelling up past level 1."""
    gained = level_hp(2, class_hit_die(class_key), con_score, roll, use_fixed)
    return gained.total + feature_bonus


# =============================================================================
# Initiative and Speed
# =============================================================================


def initiative(dex_score: int, feature_bonus: int = 0) -> Initiative:
    """Initiative modifier: DEX modifier plus feature bonuses (e.g., Alert)."""
    return Initiative(dex_modifier=ability_modifier(dex_score), feature_bonus=feature_bonus)


def speed(base: int, modifiers: int = 0) -> Speed:
    """Speed for one movement type; the total never drops below 0."""
    return Speed(base=base, modifiers=modifiers)


def all_speeds(
    base_speeds: int | Mapping[MovementType | str, int],
    modifiers: int = 0,
) -> dict[MovementType, Speed]:
    """Calculate every movement speed a creature has.

    Args:
        base_speeds: Walking speed alone, or base speed per movement type.
        modifiers: Modifier applied to each speed independently.

    Returns:
        Speed per movement type present in the input.

    Example:
        >>> all_speeds({"walk": 30, "fly": 60}, -10)[MovementType.FLY].total
        50
    """
    if isinstance(base_speeds, int):
        base_speeds = {MovementType.WALK: base_speeds}
    return {
        MovementType(kind): speed(value, modifiers) for kind, value in base_speeds.items()
    }


# =============================================================================
# Attacks
# =============================================================================


def attack_ability(
    str_score: int,
    dex_score: int,
    *,
    is_ranged: bool = False,
    is_finesse: bool = False,
) -> AttackAbility:
    """Choose the ability used for a weapon attack.

    Ranged weapons use DEX. Melee weapons use STR, except finesse weapons
    which use the higher of the two (STR on a tie).
    """
    str_mod = ability_modifier(str_score)
    dex_mod = ability_modifier(dex_score)

    if is_ranged or (is_finesse and dex_mod > str_mod):
        return AttackAbility(ability=Ability.DEX, modifier=dex_mod)
    return AttackAbility(ability=Ability.STR, modifier=str_mod)


def attack_bonus(
    str_score: int,
    dex_score: int,
    character_level: int,
    *,
    is_ranged: bool = False,
    is_finesse: bool = False,
    is_proficient: bool = True,
    magic_bonus: int = 0,
) -> AttackBonus:
    """Attack roll bonus: ability modifier + proficiency (if proficient) + magic."""
    chosen = attack_ability(str_score, dex_score, is_ranged=is_ranged, is_finesse=is_finesse)
    return AttackBonus(
        ability_modifier=chosen.modifier,
        proficiency_bonus=proficiency_bonus(character_level) if is_proficient else 0,
        magic_bonus=magic_bonus,
    )


def versatile_dice(dice: str) -> str:
    """Upgrade weapon dice for two-handed versatile use.

    d6 -> d8 -> d10 -> d12, capped at d12; other dice are unchanged.

    Example:
        >>> versatile_dice("1d8")
        '1d10'
    """
    match = _DICE_PATTERN.match(dice.strip().lower())
    if not match:
        raise DomainError(f"Invalid weapon dice: {dice!r}", field_name="dice", invalid_value=dice)
    count, faces = match.group(1), int(match.group(2))
    if faces in VERSATILE_DIE_PROGRESSION:
        index = VERSATILE_DIE_PROGRESSION.index(faces)
        faces = VERSATILE_DIE_PROGRESSION[min(index + 1, len(VERSATILE_DIE_PROGRESSION) - 1)]
    return f"{count}d{faces}"


def weapon_damage(
    dice: str,
    str_score: int,
    dex_score: int,
    *,
    is_ranged: bool = False,
    is_finesse: bool = False,
    magic_bonus: int = 0,
    is_versatile: bool = False,
    two_handed: bool = False,
) -> WeaponDamage:
    """Damage dice and flat bonus for a weapon attack.

    Args:
        dice: Weapon damage dice (e.g., '1d8').
        str_score: Strength score.
        dex_score: Dexterity score.
        is_ranged: Ranged weapon.
        is_finesse: Finesse weapon.
        magic_bonus: Magic weapon bonus.
        is_versatile: Weapon has the versatile property.
        two_handed: Wielded in two hands.

    Returns:
        Damage dice with the ability and magic bonuses.
    """
    chosen = attack_ability(str_score, dex_score, is_ranged=is_ranged, is_finesse=is_finesse)
    upgrade = is_versatile and two_handed
    return WeaponDamage(
        dice=versatile_dice(dice) if upgrade else dice,
        ability_modifier=chosen.modifier,
        magic_bonus=magic_bonus,
        is_two_handed=upgrade,
    )


def format_damage(damage: WeaponDamage) -> str:
    """Format damage for display ('1d8 + 4', '1d8 - 1', '1d8')."""
    bonus = damage.bonus
    if bonus > 0:
        return f"{damage.dice} + {bonus}"
    if bonus < 0:
        return f"{damage.dice} - {-bonus}"
    return damage.dice


def format_combat_value(value: int, show_sign: bool = True) -> str:
    """Format a combat number, signed by default ('+5', '-3')."""
    return format_modifier(value) if show_sign else str(value)


__all__ = [
    "calculate_armor_class",
    "unarmored_defense",
    "hit_die_max",
    "class_hit_die",
    "fixed_hit_points",
    "validate_die_roll",
    "level_hp",
    "max_hp",
    "level_up_hp",
    "initiative",
    "speed",
    "all_speeds",
    "attack_ability",
    "attack_bonus",
    "versatile_dice",
    "weapon_damage",
    "format_damage",
    "format_combat_value",
]
