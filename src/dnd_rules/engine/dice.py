"""Dice rolling for callers that want the engine to roll.

The rules functions take rolls as plain integers so they stay
deterministic. DiceRoller produces those integers using the d20 library,
with support for advantage and disadvantage on d20 rolls.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import d20

from dnd_rules.core.constants import ABILITY_COUNT
from dnd_rules.core.exceptions import DiceRollError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.combat import hit_die_max


logger = get_logger(__name__)

_DICE_PATTERN = re.compile(r"(\d*)d(\d+)")


class RollType(StrEnum):
    """Types of d20 rolls."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


@dataclass(frozen=True)
class DiceExpression:
    """The result of rolling a dice expression.

    Attributes:
        expression: The original dice expression string.
        total: The total result of the roll.
        dice: Kept die results.
        modifier: Static modifier applied.
        is_critical: Whether the kept d20 came up 20.
        is_fumble: Whether the kept d20 came up 1.
        roll_type: The type of roll performed.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int
    is_critical: bool
    is_fumble: bool
    roll_type: RollType


def _apply_roll_type(expression: str, roll_type: RollType) -> str:
    if roll_type == RollType.ADVANTAGE:
        return re.sub(r"\b1?d20\b", "2d20kh1", expression)
    if roll_type == RollType.DISADVANTAGE:
        return re.sub(r"\b1?d20\b", "2d20kl1", expression)
    return expression


def _kept_dice(expr: Any) -> list[Any]:
    """Collect the kept Die nodes of a d20 expression tree."""
    found: list[Any] = []

    def traverse(node: Any) -> None:
        if isinstance(node, d20.Dice):
            found.extend(die for die in node.values if die.kept)
        else:
            for child in node.children:
                traverse(child)

    traverse(expr)
    return found


class DiceRoller:
    """Dice rolling with D&D 5E conventions.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> result = roller.roll("1d20+5")
        >>> 6 <= result.total <= 25
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(
        self,
        expression: str,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceExpression:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d20+5', '4d6kh3').
            roll_type: Advantage or disadvantage applies to d20 terms only.

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        roll_type = RollType(roll_type)
        try:
            result = d20.roll(_apply_roll_type(expression, roll_type))
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        kept = _kept_dice(result.expr)
        dice_values = [die.number for die in kept]
        d20_values = [die.number for die in kept if die.size == 20]

        rolled = DiceExpression(
            expression=expression,
            total=result.total,
            dice=dice_values,
            modifier=result.total - sum(dice_values),
            is_critical=bool(d20_values) and d20_values[0] == 20,
            is_fumble=bool(d20_values) and d20_values[0] == 1,
            roll_type=roll_type,
        )
        logger.debug(
            "Dice rolled",
            expression=expression,
            roll_type=roll_type.value,
            total=rolled.total,
        )
        return rolled

    def roll_hit_die(self, die: str) -> int:
        """Roll one hit die (e.g., 'd10').

        Raises:
            DomainError: If the die string is malformed.
        """
        return self.roll(f"1d{hit_die_max(die)}").total

    def roll_initiative(
        self,
        dex_modifier: int,
        *,
        roll_type: RollType = RollType.NORMAL,
    ) -> DiceExpression:
        """Roll initiative: 1d20 plus the dexterity modifier."""
        return self.roll(f"1d20{dex_modifier:+d}", roll_type=roll_type)

    def roll_death_save(self, *, roll_type: RollType = RollType.NORMAL) -> int:
        """Roll a natural d20 for a death saving throw."""
        return self.roll("1d20", roll_type=roll_type).total

    def roll_ability_scores(self) -> list[int]:
        """Roll six ability scores, each 4d6 dropping the lowest die."""
        return [self.roll("4d6kh3").total for _ in range(ABILITY_COUNT)]

    def roll_damage(self, expression: str, *, is_critical: bool = False) -> DiceExpression:
        """Roll damage, doubling the number of dice on a critical hit."""
        if is_critical:
            expression = _DICE_PATTERN.sub(
                lambda m: f"{int(m.group(1) or 1) * 2}d{m.group(2)}", expression
            )
        return self.roll(expression)


# Module-level convenience roller
_default_roller: DiceRoller | None = None


def roll(
    expression: str,
    *,
    roll_type: RollType = RollType.NORMAL,
) -> DiceExpression:
    """Convenience function to roll dice with a shared roller.

    Example:
        >>> result = roll("2d6+3")
        >>> 5 <= result.total <= 15
        True
    """
    global _default_roller  # noqa: PLW0603
    if _default_roller is None:
        _default_roller = DiceRoller()
    return _default_roller.roll(expression, roll_type=roll_type)


__all__ = [
    "RollType",
    "DiceExpression",
    "DiceRoller",
    "roll",
]
