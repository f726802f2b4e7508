"""Enumeration types for the D&D 5E character rules engine.

These enums are the fixed vocabularies the engine tables are keyed on:
abilities, skills, proficiency levels, caster types, armor categories,
movement types and rest/reset categories.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """D&D 5E ability scores.

    Members can be looked up by full name (``Ability("strength")``) or by
    abbreviation in any case (``Ability("STR")``).
    """

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @classmethod
    def _missing_(cls, value: object) -> Ability | None:
        if isinstance(value, str):
            normalized = value.strip()
            for member in cls:
                if normalized.upper() == member.name or normalized.lower() == member.value:
                    return member
        return None

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation.

        Returns:
            Three-letter abbreviation (e.g., 'STR').
        """
        return self.name


class Skill(StrEnum):
    """D&D 5E skills and their associated abilities."""

    # Strength skills
    ATHLETICS = "athletics"

    # Dexterity skills
    ACROBATICS = "acrobatics"
    SLEIGHT_OF_HAND = "sleight_of_hand"
    STEALTH = "stealth"

    # Intelligence skills
    ARCANA = "arcana"
    HISTORY = "history"
    INVESTIGATION = "investigation"
    NATURE = "nature"
    RELIGION = "religion"

    # Wisdom skills
    ANIMAL_HANDLING = "animal_handling"
    INSIGHT = "insight"
    MEDICINE = "medicine"
    PERCEPTION = "perception"
    SURVIVAL = "survival"

    # Charisma skills
    DECEPTION = "deception"
    INTIMIDATION = "intimidation"
    PERFORMANCE = "performance"
    PERSUASION = "persuasion"

    @property
    def ability(self) -> Ability:
        """Get the governing ability for this skill.

        Returns:
            The Ability enum value associated with this skill.
        """
        return SKILL_ABILITIES[self]

    @property
    def display_name(self) -> str:
        """Get human-readable skill name (e.g., 'Sleight Of Hand')."""
        return self.value.replace("_", " ").title()


SKILL_ABILITIES: dict[Skill, Ability] = {
    # Strength
    Skill.ATHLETICS: Ability.STR,
    # Dexterity
    Skill.ACROBATICS: Ability.DEX,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    # Intelligence
    Skill.ARCANA: Ability.INT,
    Skill.HISTORY: Ability.INT,
    Skill.INVESTIGATION: Ability.INT,
    Skill.NATURE: Ability.INT,
    Skill.RELIGION: Ability.INT,
    # Wisdom
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.INSIGHT: Ability.WIS,
    Skill.MEDICINE: Ability.WIS,
    Skill.PERCEPTION: Ability.WIS,
    Skill.SURVIVAL: Ability.WIS,
    # Charisma
    Skill.DECEPTION: Ability.CHA,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
}


class ProficiencyLevel(StrEnum):
    """Degree of training in a skill.

    Levels:
        NONE: Untrained, no bonus.
        HALF: Half the proficiency bonus, rounded down (Jack of All Trades).
        PROFICIENT: Full proficiency bonus.
        EXPERTISE: Double proficiency bonus.
    """

    NONE = "none"
    HALF = "half"
    PROFICIENT = "proficient"
    EXPERTISE = "expertise"

    @property
    def multiplier(self) -> float:
        """Get the multiplier applied to the proficiency bonus."""
        multipliers = {
            ProficiencyLevel.NONE: 0.0,
            ProficiencyLevel.HALF: 0.5,
            ProficiencyLevel.PROFICIENT: 1.0,
            ProficiencyLevel.EXPERTISE: 2.0,
        }
        return multipliers[self]

    @property
    def display_name(self) -> str:
        """Get the display name for this proficiency level."""
        names = {
            ProficiencyLevel.NONE: "Not Proficient",
            ProficiencyLevel.HALF: "Half Proficient",
            ProficiencyLevel.PROFICIENT: "Proficient",
            ProficiencyLevel.EXPERTISE: "Expertise",
        }
        return names[self]


class CasterType(StrEnum):
    """How many spell slots a class grants per level."""

    FULL = "full"
    HALF = "half"
    THIRD = "third"
    PACT = "pact"
    NONE = "none"


class ArmorType(StrEnum):
    """Armor categories for armor class calculation."""

    UNARMORED = "unarmored"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class MovementType(StrEnum):
    """Movement modes with independent speeds."""

    WALK = "walk"
    FLY = "fly"
    SWIM = "swim"
    CLIMB = "climb"
    BURROW = "burrow"


class ResetOn(StrEnum):
    """When a limited-use feature regains its uses."""

    SHORT = "short"
    LONG = "long"
    DAWN = "dawn"
    OTHER = "other"


class RestType(StrEnum):
    """Types of rest in D&D 5E."""

    SHORT = "short"
    LONG = "long"


class FloatingBonus(StrEnum):
    """Species bonus categories the player assigns to abilities of choice."""

    ANY = "any"
    ANY_TWO = "any_two"
    ANY_THREE = "any_three"

    @property
    def selection_count(self) -> int:
        """Number of distinct abilities that must be selected."""
        counts = {
            FloatingBonus.ANY: 1,
            FloatingBonus.ANY_TWO: 2,
            FloatingBonus.ANY_THREE: 3,
        }
        return counts[self]


class LifeState(StrEnum):
    """Where a creature sits in the hit point / death save state machine."""

    CONSCIOUS = "conscious"
    DYING = "dying"
    STABILIZED = "stabilized"
    DEAD = "dead"


__all__ = [
    "Ability",
    "Skill",
    "SKILL_ABILITIES",
    "ProficiencyLevel",
    "CasterType",
    "ArmorType",
    "MovementType",
    "ResetOn",
    "RestType",
    "FloatingBonus",
    "LifeState",
]
