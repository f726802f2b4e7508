"""Rules constants for the D&D 5E character rules engine.

Numeric domains and small fixed tables shared by several engine modules.
Larger progression tables live in models/progression.py.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

PC_ABILITY_SCORE_CAP = 20
"""Maximum ability score for player characters (RAW D&D 5E)."""

MIN_PC_ABILITY_SCORE = 3
"""Minimum ability score for player characters (3d6 floor)."""

MONSTER_ABILITY_SCORE_CAP = 30
"""Maximum ability score for monsters (RAW D&D 5E)."""

MIN_ABILITY_SCORE = 1
"""Minimum ability score (1 is barely functioning)."""

DEFAULT_ABILITY_SCORE = 10
"""Score assumed for an ability missing from a base record."""

ABILITY_COUNT = 6
"""Number of ability scores."""

# =============================================================================
# Point Buy Constants (PHB p.13)
# =============================================================================

POINT_BUY_TOTAL = 27
"""Total points available for point buy character creation."""

POINT_BUY_MIN = 8
"""Minimum ability score in point buy."""

POINT_BUY_MAX = 15
"""Maximum ability score in point buy (before racial bonuses)."""

POINT_BUY_COSTS: dict[int, int] = {
    8: 0,
    9: 1,
    10: 2,
    11: 3,
    12: 4,
    13: 5,
    14: 7,
    15: 9,
}

MAX_POINT_BUY_COST = POINT_BUY_COSTS[POINT_BUY_MAX] * ABILITY_COUNT
"""Cost of buying 15 in every ability."""

# =============================================================================
# Standard Array (PHB p.13)
# =============================================================================

STANDARD_ARRAY: tuple[int, ...] = (15, 14, 13, 12, 10, 8)
"""Standard array values for ability scores."""

# =============================================================================
# Proficiency
# =============================================================================

MAX_CHARACTER_LEVEL = 20
"""Maximum character level in D&D 5E."""

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

PASSIVE_SCORE_BASE = 10
"""Base value for passive checks."""

# =============================================================================
# Combat Constants
# =============================================================================

UNARMORED_BASE_AC = 10
"""Armor class before dexterity with no armor worn."""

MEDIUM_ARMOR_DEX_CAP = 2
"""Maximum dexterity bonus allowed in medium armor."""

SHIELD_AC_BONUS = 2
"""Flat armor class bonus from a shield."""

DEFAULT_SPEED = 30
"""Default walking speed in feet (most medium creatures)."""

MAX_DEATH_SAVES = 3
"""Maximum death saving throws (3 successes = stable, 3 failures = dead)."""

DEATH_SAVE_DC = 10
"""A death save of 10 or higher is a success."""

VERSATILE_DIE_PROGRESSION: tuple[int, ...] = (6, 8, 10, 12)
"""Die faces a versatile weapon steps through when wielded two-handed."""

# =============================================================================
# Spellcasting
# =============================================================================

SPELL_SAVE_DC_BASE = 8
"""Base spell save DC before proficiency and ability."""

MAX_SPELL_LEVEL = 9
"""Highest spell level."""


__all__ = [
    # Ability Scores
    "PC_ABILITY_SCORE_CAP",
    "MIN_PC_ABILITY_SCORE",
    "MONSTER_ABILITY_SCORE_CAP",
    "MIN_ABILITY_SCORE",
    "DEFAULT_ABILITY_SCORE",
    "ABILITY_COUNT",
    # Point Buy
    "POINT_BUY_TOTAL",
    "POINT_BUY_MIN",
    "POINT_BUY_MAX",
    "POINT_BUY_COSTS",
    "MAX_POINT_BUY_COST",
    # Standard Array
    "STANDARD_ARRAY",
    # Proficiency
    "MAX_CHARACTER_LEVEL",
    "MIN_CHARACTER_LEVEL",
    "PASSIVE_SCORE_BASE",
    # Combat
    "UNARMORED_BASE_AC",
    "MEDIUM_ARMOR_DEX_CAP",
    "SHIELD_AC_BONUS",
    "DEFAULT_SPEED",
    "MAX_DEATH_SAVES",
    "DEATH_SAVE_DC",
    "VERSATILE_DIE_PROGRESSION",
    # Spellcasting
    "SPELL_SAVE_DC_BASE",
    "MAX_SPELL_LEVEL",
]
