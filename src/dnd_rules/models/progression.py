"""D&D 5E Level Progression Data.

Static tables the engine reads from:
- Hit dice by class
- Spellcasting ability and caster type by class
- Spell slots by effective caster level
- Pact magic slots by warlock level
- Cantrips and spells known by class level
- Experience point thresholds by character level

All data comes from the official 5E rules. Tables are module constants
built once at import; engine functions only read them.
"""

from __future__ import annotations

from typing import NamedTuple

from dnd_rules.models.enums import Ability, CasterType


def normalize_class_key(class_key: str) -> str:
    """Normalize a class key to the table form ('Eldritch Knight' -> 'eldritch-knight')."""
    return class_key.strip().lower().replace("_", "-").replace(" ", "-")


# =============================================================================
# Hit Dice by Class
# =============================================================================

CLASS_HIT_DICE: dict[str, str] = {
    "barbarian": "d12",
    "bard": "d8",
    "cleric": "d8",
    "druid": "d8",
    "fighter": "d10",
    "monk": "d8",
    "paladin": "d10",
    "ranger": "d10",
    "rogue": "d8",
    "sorcerer": "d6",
    "warlock": "d8",
    "wizard": "d6",
    # Third-caster subclasses keep their base class hit die
    "eldritch-knight": "d10",
    "arcane-trickster": "d8",
}


# =============================================================================
# Spellcasting by Class
# =============================================================================


class ClassSpellcasting(NamedTuple):
    """Spellcasting ability and caster type for one class key."""

    ability: Ability
    caster_type: CasterType


CLASS_SPELLCASTING: dict[str, ClassSpellcasting] = {
    # Full casters
    "bard": ClassSpellcasting(Ability.CHA, CasterType.FULL),
    "cleric": ClassSpellcasting(Ability.WIS, CasterType.FULL),
    "druid": ClassSpellcasting(Ability.WIS, CasterType.FULL),
    "sorcerer": ClassSpellcasting(Ability.CHA, CasterType.FULL),
    "wizard": ClassSpellcasting(Ability.INT, CasterType.FULL),
    # Half casters
    "paladin": ClassSpellcasting(Ability.CHA, CasterType.HALF),
    "ranger": ClassSpellcasting(Ability.WIS, CasterType.HALF),
    # Third casters (subclasses)
    "eldritch-knight": ClassSpellcasting(Ability.INT, CasterType.THIRD),
    "arcane-trickster": ClassSpellcasting(Ability.INT, CasterType.THIRD),
    # Pact magic
    "warlock": ClassSpellcasting(Ability.CHA, CasterType.PACT),
    # Non-casters
    "barbarian": ClassSpellcasting(Ability.WIS, CasterType.NONE),
    "fighter": ClassSpellcasting(Ability.INT, CasterType.NONE),
    "monk": ClassSpellcasting(Ability.WIS, CasterType.NONE),
    "rogue": ClassSpellcasting(Ability.INT, CasterType.NONE),
}

# Classes that prepare spells from their full list each day
PREPARATION_CLASSES: frozenset[str] = frozenset({"cleric", "druid", "wizard", "paladin"})

# Preparation classes that halve their level before adding the modifier
HALF_LEVEL_PREPARATION_CLASSES: frozenset[str] = frozenset({"paladin"})

# Classes with a fixed number of spells known
KNOWN_SPELL_CLASSES: frozenset[str] = frozenset({"bard", "sorcerer", "ranger", "warlock"})

# Classes that can cast ritual spells without preparing a slot
RITUAL_CASTING_CLASSES: frozenset[str] = frozenset({"bard", "cleric", "druid", "wizard"})


# =============================================================================
# Spell Slots by Effective Caster Level (PHB p.165)
# =============================================================================

# Row i is effective caster level i+1; column j is spell level j+1.
SPELL_SLOT_TABLE: tuple[tuple[int, ...], ...] = (
    (2, 0, 0, 0, 0, 0, 0, 0, 0),  # 1
    (3, 0, 0, 0, 0, 0, 0, 0, 0),  # 2
    (4, 2, 0, 0, 0, 0, 0, 0, 0),  # 3
    (4, 3, 0, 0, 0, 0, 0, 0, 0),  # 4
    (4, 3, 2, 0, 0, 0, 0, 0, 0),  # 5
    (4, 3, 3, 0, 0, 0, 0, 0, 0),  # 6
    (4, 3, 3, 1, 0, 0, 0, 0, 0),  # 7
    (4, 3, 3, 2, 0, 0, 0, 0, 0),  # 8
    (4, 3, 3, 3, 1, 0, 0, 0, 0),  # 9
    (4, 3, 3, 3, 2, 0, 0, 0, 0),  # 10
    (4, 3, 3, 3, 2, 1, 0, 0, 0),  # 11
    (4, 3, 3, 3, 2, 1, 0, 0, 0),  # 12
    (4, 3, 3, 3, 2, 1, 1, 0, 0),  # 13
    (4, 3, 3, 3, 2, 1, 1, 0, 0),  # 14
    (4, 3, 3, 3, 2, 1, 1, 1, 0),  # 15
    (4, 3, 3, 3, 2, 1, 1, 1, 0),  # 16
    (4, 3, 3, 3, 2, 1, 1, 1, 1),  # 17
    (4, 3, 3, 3, 3, 1, 1, 1, 1),  # 18
    (4, 3, 3, 3, 3, 2, 1, 1, 1),  # 19
    (4, 3, 3, 3, 3, 2, 2, 1, 1),  # 20
)


def slots_for_caster_level(effective_level: int) -> tuple[int, ...]:
    """Get the slot row for an effective caster level.

    Levels below 1 have no slots; levels above 20 use the level 20 row.
    """
    if effective_level < 1:
        return (0,) * 9
    return SPELL_SLOT_TABLE[min(20, effective_level) - 1]


# =============================================================================
# Warlock Pact Magic (PHB p.106)
# =============================================================================

PACT_MAGIC_SLOTS: dict[int, tuple[int, int]] = {
    # level: (num_slots, slot_level)
    1: (1, 1),
    2: (2, 1),
    3: (2, 2),
    4: (2, 2),
    5: (2, 3),
    6: (2, 3),
    7: (2, 4),
    8: (2, 4),
    9: (2, 5),
    10: (2, 5),
    11: (3, 5),
    12: (3, 5),
    13: (3, 5),
    14: (3, 5),
    15: (3, 5),
    16: (3, 5),
    17: (4, 5),
    18: (4, 5),
    19: (4, 5),
    20: (4, 5),
}


# =============================================================================
# Cantrips and Spells Known (index = class level, index 0 unused)
# =============================================================================

CANTRIPS_KNOWN: dict[str, tuple[int, ...]] = {
    "bard": (0, 2, 2, 2, 3, 3, 3, 3, 3, 3, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4),
    "cleric": (0, 3, 3, 3, 4, 4, 4, 4, 4, 4, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5),
    "druid": (0, 2, 2, 2, 3, 3, 3, 3, 3, 3, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4),
    "sorcerer": (0, 4, 4, 4, 5, 5, 5, 5, 5, 5, 6, 6, 6, 6, 6, 6, 6, 6, 6, 6, 6),
    "warlock": (0, 2, 2, 2, 3, 3, 3, 3, 3, 3, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4),
    "wizard": (0, 3, 3, 3, 4, 4, 4, 4, 4, 4, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5),
}

SPELLS_KNOWN: dict[str, tuple[int, ...]] = {
    "bard": (0, 4, 5, 6, 7, 8, 9, 10, 11, 12, 14, 15, 15, 16, 18, 19, 19, 20, 22, 22, 22),
    "sorcerer": (0, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 12, 13, 13, 14, 14, 15, 15, 15, 15),
    "ranger": (0, 0, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8, 9, 9, 10, 10, 11, 11),
    "warlock": (0, 2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 11, 11, 12, 12, 13, 13, 14, 14, 15, 15),
}


# =============================================================================
# Experience Points (PHB p.15)
# =============================================================================

XP_THRESHOLDS: dict[int, int] = {
    # level: total XP needed to reach it
    1: 0,
    2: 300,
    3: 900,
    4: 2700,
    5: 6500,
    6: 14000,
    7: 23000,
    8: 34000,
    9: 48000,
    10: 64000,
    11: 85000,
    12: 100000,
    13: 120000,
    14: 140000,
    15: 165000,
    16: 195000,
    17: 225000,
    18: 265000,
    19: 305000,
    20: 355000,
}


def xp_for_level(level: int) -> int:
    """Total XP needed to reach a character level.

    Levels below 1 need none; levels above 20 use the level 20 threshold.

    Example:
        >>> xp_for_level(5)
        6500
    """
    if level < 1:
        return 0
    return XP_THRESHOLDS[min(20, level)]


def level_for_xp(xp: int) -> int:
    """Highest character level reached with the given XP total."""
    return max((level for level, needed in XP_THRESHOLDS.items() if xp >= needed), default=1)


# =============================================================================
# Feature Thresholds
# =============================================================================

JACK_OF_ALL_TRADES_CLASS = "bard"
JACK_OF_ALL_TRADES_LEVEL = 2


__all__ = [
    "normalize_class_key",
    "CLASS_HIT_DICE",
    "ClassSpellcasting",
    "CLASS_SPELLCASTING",
    "PREPARATION_CLASSES",
    "HALF_LEVEL_PREPARATION_CLASSES",
    "KNOWN_SPELL_CLASSES",
    "RITUAL_CASTING_CLASSES",
    "SPELL_SLOT_TABLE",
    "slots_for_caster_level",
    "PACT_MAGIC_SLOTS",
    "CANTRIPS_KNOWN",
    "SPELLS_KNOWN",
    "JACK_OF_ALL_TRADES_CLASS",
    "JACK_OF_ALL_TRADES_LEVEL",
    "XP_THRESHOLDS",
    "xp_for_level",
    "level_for_xp",
]
