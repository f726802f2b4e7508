"""Hit point management for D&D 5E.

Damage, healing, temporary hit points, hit dice and the death saving
throw state machine:

    conscious --(HP drops to 0)--> dying --(3 successes / stabilize)--> stabilized
                                     |                                      |
                                     +--(3 failures)--> dead <--------------+
                                     |                        (damage at 0 HP)
                                     +--(natural 20 / healing)--> conscious

Dead is terminal: neither damage, healing nor further rolls change it.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from dnd_rules.core.constants import DEATH_SAVE_DC, MAX_DEATH_SAVES
from dnd_rules.core.exceptions import DomainError, InvalidRollError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.abilities import ability_modifier
from dnd_rules.engine.combat import class_hit_die, validate_die_roll
from dnd_rules.models.components import (
    ClassLevel,
    DeathSaveResult,
    DeathSaveState,
    HitDice,
    HitDicePool,
    HitPointChange,
    HitPointState,
)
from dnd_rules.models.enums import LifeState


logger = get_logger(__name__)


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise DomainError(
            f"{name.replace('_', ' ').capitalize()} cannot be negative",
            field_name=name,
            invalid_value=value,
        )


# =============================================================================
# Damage
# =============================================================================


def apply_damage(
    current_hp: int,
    temp_hp: int,
    max_hp: int,
    damage: int,
    death_saves: DeathSaveState | None = None,
) -> HitPointChange:
    """Apply damage, temporary hit points first.

    Damage that gets through while already at 0 HP adds one death save
    failure, or two when it equals or exceeds maximum HP, and ends any
    stability. Only the damage left after temporary hit points counts
    toward that maximum HP comparison. Dropping from above 0 to 0 HP
    starts death saves fresh.

    Args:
        current_hp: Current hit points.
        temp_hp: Temporary hit points.
        max_hp: Maximum hit points.
        damage: Damage dealt.
        death_saves: Current death save state.

    Returns:
        The resulting hit points, temporary hit points and death saves.

    Raises:
        DomainError: If damage or any hit point value is negative.

    Example:
        >>> result = apply_damage(20, 5, 30, 8)
        >>> (result.current_hp, result.temp_hp)
        (17, 0)
    """
    _require_non_negative("damage", damage)
    _require_non_negative("current_hp", current_hp)
    _require_non_negative("temp_hp", temp_hp)
    saves = death_saves or DeathSaveState()

    if saves.is_dead:
        return HitPointChange(
            previous_hp=current_hp,
            previous_temp_hp=temp_hp,
            current_hp=current_hp,
            temp_hp=temp_hp,
            max_hp=max_hp,
            amount=damage,
            death_saves=saves,
        )

    absorbed = min(temp_hp, damage)
    new_temp = temp_hp - absorbed
    remaining = damage - absorbed

    new_hp = max(0, current_hp - remaining)
    overflow = max(0, remaining - current_hp)

    if current_hp == 0 and remaining > 0:
        start = DeathSaveState() if saves.is_stable else saves
        added = 2 if remaining >= max_hp else 1
        failures = min(MAX_DEATH_SAVES, start.failures + added)
        saves = DeathSaveState(
            successes=start.successes,
            failures=failures,
            is_stable=False,
            is_dead=failures >= MAX_DEATH_SAVES,
        )
        logger.debug(
            "Damage taken at 0 HP",
            damage=remaining,
            failures=saves.failures,
            is_dead=saves.is_dead,
        )
    elif current_hp > 0 and new_hp == 0:
        saves = DeathSaveState()
        logger.debug("Dropped to 0 HP", damage=damage, overflow=overflow)

    return HitPointChange(
        previous_hp=current_hp,
        previous_temp_hp=temp_hp,
        current_hp=new_hp,
        temp_hp=new_temp,
        max_hp=max_hp,
        amount=damage,
        overflow=overflow,
        death_saves=saves,
    )


# =============================================================================
# Healing
# =============================================================================


def apply_healing(
    current_hp: int,
    temp_hp: int,
    max_hp: int,
    healing: int,
    death_saves: DeathSaveState | None = None,
) -> HitPointChange:
    """Apply healing, capped at maximum hit points.

    Any healing that leaves the creature above 0 HP resets death saves.
    Healing does not affect temporary hit points and cannot revive the dead.

    Raises:
        DomainError: If healing is negative.
    """
    _require_non_negative("healing", healing)
    saves = death_saves or DeathSaveState()

    if saves.is_dead:
        return HitPointChange(
            previous_hp=current_hp,
            previous_temp_hp=temp_hp,
            current_hp=current_hp,
            temp_hp=temp_hp,
            max_hp=max_hp,
            amount=healing,
            death_saves=saves,
        )

    new_hp = min(max_hp, current_hp + healing)
    overflow = max(0, current_hp + healing - max_hp)

    if new_hp > 0:
        if current_hp == 0:
            logger.debug("Regained consciousness", healing=healing, current_hp=new_hp)
        saves = DeathSaveState()

    return HitPointChange(
        previous_hp=current_hp,
        previous_temp_hp=temp_hp,
        current_hp=new_hp,
        temp_hp=temp_hp,
        max_hp=max_hp,
        amount=healing,
        overflow=overflow,
        death_saves=saves,
    )


# =============================================================================
# Temporary Hit Points
# =============================================================================


def apply_temp_hp(current_temp_hp: int, new_temp_hp: int) -> int:
    """Grant temporary hit points; they never stack, the higher value is kept."""
    return max(current_temp_hp, new_temp_hp)


def set_temp_hp(value: int) -> int:
    """Force temporary hit points to a value (never below 0)."""
    return max(0, value)


def clear_temp_hp() -> int:
    """Remove all temporary hit points."""
    return 0


# =============================================================================
# Death Saves
# =============================================================================


def roll_death_save(roll: int, state: DeathSaveState | None = None) -> DeathSaveResult:
    """Process one death saving throw.

    - Natural 20: regain 1 HP; counters reset.
    - Natural 1: two failures.
    - 10 or higher: one success.
    - 2-9: one failure.

    Three successes make the creature stable; three failures kill it.
    Rolling while stable or dead changes nothing.

    Args:
        roll: The d20 result (1-20).
        state: Current death save state. Defaults to a fresh state.

    Returns:
        The new state, whether the creature revived, and its hit points.

    Raises:
        InvalidRollError: If the roll is not a d20 face.
    """
    if not isinstance(roll, int) or isinstance(roll, bool) or not 1 <= roll <= 20:
        raise InvalidRollError(f"Invalid roll for d20: {roll!r}", die="d20", roll=roll)

    current = state or DeathSaveState()
    if current.is_dead or current.is_stable:
        logger.debug(
            "Death save ignored",
            roll=roll,
            is_dead=current.is_dead,
            is_stable=current.is_stable,
        )
        return DeathSaveResult(state=current)

    if roll == 20:
        logger.debug("Death save natural 20, revived")
        return DeathSaveResult(state=DeathSaveState(), revived=True, hit_points=1)

    successes, failures = current.successes, current.failures
    if roll == 1:
        failures += 2
    elif roll >= DEATH_SAVE_DC:
        successes += 1
    else:
        failures += 1

    successes = min(MAX_DEATH_SAVES, successes)
    failures = min(MAX_DEATH_SAVES, failures)
    new_state = DeathSaveState(
        successes=successes,
        failures=failures,
        is_stable=successes >= MAX_DEATH_SAVES,
        is_dead=failures >= MAX_DEATH_SAVES,
    )
    logger.debug(
        "Death save rolled",
        roll=roll,
        successes=successes,
        failures=failures,
        is_stable=new_state.is_stable,
        is_dead=new_state.is_dead,
    )
    return DeathSaveResult(state=new_state)


def reset_death_saves() -> DeathSaveState:
    """Fresh death save state (after healing)."""
    return DeathSaveState()


def stabilize() -> DeathSaveState:
    """Stable at 0 HP without healing (e.g., Spare the Dying, a Medicine check)."""
    return DeathSaveState(is_stable=True)


def life_state(current_hp: int, death_saves: DeathSaveState | None = None) -> LifeState:
    """Where a creature sits in the death save state machine."""
    saves = death_saves or DeathSaveState()
    if saves.is_dead:
        return LifeState.DEAD
    if current_hp > 0:
        return LifeState.CONSCIOUS
    if saves.is_stable:
        return LifeState.STABILIZED
    return LifeState.DYING


# =============================================================================
# Combined Update
# =============================================================================


def update_hp(
    current_hp: int,
    temp_hp: int,
    max_hp: int,
    *,
    damage: int = 0,
    healing: int = 0,
    new_temp_hp: int | None = None,
    death_saves: DeathSaveState | None = None,
) -> HitPointState:
    """Apply temporary hit points, then damage, then healing in one call.

    Raises:
        DomainError: If damage or healing is negative.
    """
    _require_non_negative("damage", damage)
    _require_non_negative("healing", healing)
    saves = death_saves or DeathSaveState()

    if new_temp_hp is not None:
        temp_hp = apply_temp_hp(temp_hp, new_temp_hp)

    if damage > 0:
        change = apply_damage(current_hp, temp_hp, max_hp, damage, saves)
        current_hp, temp_hp, saves = change.current_hp, change.temp_hp, change.death_saves

    if healing > 0:
        change = apply_healing(current_hp, temp_hp, max_hp, healing, saves)
        current_hp, temp_hp, saves = change.current_hp, change.temp_hp, change.death_saves

    return HitPointState(
        current_hp=current_hp,
        temp_hp=temp_hp,
        max_hp=max_hp,
        death_saves=saves,
        life_state=life_state(current_hp, saves),
    )


# =============================================================================
# Hit Dice
# =============================================================================


def hit_dice_pool(class_levels: Iterable[ClassLevel | Mapping[str, Any]]) -> HitDicePool:
    """Build a full hit dice pool from class levels.

    Example:
        >>> pool = hit_dice_pool([ClassLevel(class_key="fighter", level=3),
        ...                       ClassLevel(class_key="wizard", level=2)])
        >>> pool["d10"].total, pool["d6"].total
        (3, 2)
    """
    totals: dict[str, int] = {}
    for entry in class_levels:
        class_level = entry if isinstance(entry, ClassLevel) else ClassLevel.model_validate(entry)
        die = class_hit_die(class_level.class_key)
        totals[die] = totals.get(die, 0) + class_level.level
    return {die: HitDice(total=total, remaining=total) for die, total in totals.items()}


def recover_hit_dice(remaining: int, total: int) -> int:
    """Hit dice left after a long rest: regain half the total (rounded up, at least 1)."""
    recovered = max(1, math.ceil(total / 2))
    return min(total, remaining + recovered)


def recover_hit_dice_on_long_rest(pool: HitDicePool) -> HitDicePool:
    """Apply long-rest recovery to every die type in the pool."""
    return {
        die: dice.model_copy(update={"remaining": recover_hit_dice(dice.remaining, dice.total)})
        for die, dice in pool.items()
    }


def spend_hit_die(pool: HitDicePool, die: str) -> HitDicePool | None:
    """Spend one hit die of a type; None when none of that type remain."""
    dice = pool.get(die)
    if dice is None or dice.remaining <= 0:
        return None
    logger.debug("Hit die spent", die=die, remaining=dice.remaining - 1)
    return {**pool, die: dice.model_copy(update={"remaining": dice.remaining - 1})}


def hit_die_heal(die: str, roll: int, con_score: int) -> int:
    """Hit points regained by spending a hit die: roll + CON modifier, at least 1.

    Raises:
        InvalidRollError: If the roll is impossible for the die.
    """
    validate_die_roll(die, roll)
    return max(1, roll + ability_modifier(con_score))


def reset_all_hit_dice(pool: HitDicePool) -> HitDicePool:
    """Restore every hit die in the pool."""
    return {die: dice.model_copy(update={"remaining": dice.total}) for die, dice in pool.items()}


# =============================================================================
# Display Helpers
# =============================================================================


def hp_status(current_hp: int, max_hp: int) -> str:
    """Describe hit points: Unconscious, Critical, Bloodied, Wounded or Healthy."""
    if current_hp <= 0:
        return "Unconscious"
    if current_hp <= max_hp * 0.25:
        return "Critical"
    if current_hp <= max_hp * 0.5:
        return "Bloodied"
    if current_hp <= max_hp * 0.75:
        return "Wounded"
    return "Healthy"


def hp_percentage(current_hp: int, max_hp: int) -> int:
    """Hit points as a whole percentage of maximum, clamped to 0-100."""
    if max_hp <= 0:
        return 0
    return min(100, max(0, math.floor(current_hp * 100 / max_hp + 0.5)))


def is_bloodied(current_hp: int, max_hp: int) -> bool:
    """Above 0 HP but at half or less."""
    return 0 < current_hp <= max_hp * 0.5


def format_hp(current_hp: int, max_hp: int, temp_hp: int = 0) -> str:
    """Format hit points for display ('20 + 5 temp / 30 HP')."""
    if temp_hp > 0:
        return f"{current_hp} + {temp_hp} temp / {max_hp} HP"
    return f"{current_hp} / {max_hp} HP"


__all__ = [
    "apply_damage",
    "apply_healing",
    "apply_temp_hp",
    "set_temp_hp",
    "clear_temp_hp",
    "roll_death_save",
    "reset_death_saves",
    "stabilize",
    "life_state",
    "update_hp",
    "hit_dice_pool",
    "recover_hit_dice",
    "recover_hit_dice_on_long_rest",
    "spend_hit_die",
    "hit_die_heal",
    "reset_all_hit_dice",
    "hp_status",
    "hp_percentage",
    "is_bloodied",
    "format_hp",
]
