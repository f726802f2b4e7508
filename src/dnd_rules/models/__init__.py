"""Pydantic V2 value types and rule tables for the D&D 5E rules engine.

Submodules:
    enums: Enumeration types (Ability, Skill, ProficiencyLevel, CasterType, etc.)
    components: Frozen value and result models (AbilityScoreSet, SpellSlotCount, etc.)
    progression: Static rule tables (spell slots, pact magic, hit dice, etc.)

Example:
    >>> from dnd_rules.models import Ability, ClassLevel, SpellSlotCount
    >>> ClassLevel(class_key="wizard", level=5)
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from dnd_rules.models.enums import (
    SKILL_ABILITIES,
    Ability,
    ArmorType,
    CasterType,
    FloatingBonus,
    LifeState,
    MovementType,
    ProficiencyLevel,
    ResetOn,
    RestType,
    Skill,
)

# =============================================================================
# Components
# =============================================================================
from dnd_rules.models.components import (
    AbilityScoreBreakdown,
    AbilityScoreSet,
    ArmorClass,
    AttackAbility,
    AttackBonus,
    CharacterFeature,
    ClassFeatures,
    ClassLevel,
    DeathSaveResult,
    DeathSaveState,
    FeatureCollection,
    FeatureUses,
    HitDice,
    HitDicePool,
    HitPointChange,
    HitPointLevel,
    HitPointState,
    Initiative,
    LevelHitPoints,
    MaxHitPoints,
    PactMagicSlots,
    PassiveScore,
    PointBuyResult,
    SavingThrowModifier,
    ScoreGenerationResult,
    SkillModifier,
    SpeciesBonus,
    SpeciesBonusResult,
    Speed,
    SpellcastingStats,
    SpellPreparationLimits,
    SpellSlotCount,
    SpellsKnownLimit,
    WeaponDamage,
    calculate_modifier,
)

# =============================================================================
# Progression Tables
# =============================================================================
from dnd_rules.models.progression import (
    CLASS_HIT_DICE,
    CLASS_SPELLCASTING,
    XP_THRESHOLDS,
    ClassSpellcasting,
    level_for_xp,
    normalize_class_key,
    xp_for_level,
)


__all__ = [
    # Enums
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
    # Components
    "calculate_modifier",
    "AbilityScoreBreakdown",
    "AbilityScoreSet",
    "ScoreGenerationResult",
    "PointBuyResult",
    "SpeciesBonus",
    "SpeciesBonusResult",
    "ClassLevel",
    "SkillModifier",
    "SavingThrowModifier",
    "PassiveScore",
    "ArmorClass",
    "HitPointLevel",
    "LevelHitPoints",
    "MaxHitPoints",
    "Initiative",
    "Speed",
    "AttackAbility",
    "AttackBonus",
    "WeaponDamage",
    "DeathSaveState",
    "DeathSaveResult",
    "HitPointChange",
    "HitPointState",
    "HitDice",
    "HitDicePool",
    "SpellSlotCount",
    "PactMagicSlots",
    "SpellcastingStats",
    "SpellPreparationLimits",
    "SpellsKnownLimit",
    "FeatureUses",
    "CharacterFeature",
    "ClassFeatures",
    "FeatureCollection",
    # Progression
    "ClassSpellcasting",
    "CLASS_SPELLCASTING",
    "CLASS_HIT_DICE",
    "normalize_class_key",
    "XP_THRESHOLDS",
    "xp_for_level",
    "level_for_xp",
]
