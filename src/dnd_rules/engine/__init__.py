"""Rules engine for D&D 5E character statistics.

Pure functions that turn persisted character inputs into derived values.
Nothing here touches storage or the network; callers pass plain data or
frozen models in and get frozen models back.

Submodules:
    abilities: Ability score generation, modifiers and species bonuses
    proficiency: Proficiency bonus, skills, saving throws, passive scores
    combat: Armor class, hit points, initiative, speed, attacks
    health: Damage, healing, temporary HP, death saves, hit dice
    spellcasting: Save DC, attack bonus, spell slots, preparation limits
    features: Feature aggregation and limited-use tracking
    dice: Dice rolling with the d20 library
    sheet: Full character sheet derivation

Example:
    >>> from dnd_rules.engine import ability_modifier, proficiency_bonus
    >>> ability_modifier(16), proficiency_bonus(5)
    (3, 3)
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================
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
    skills_for_ability,
    skill_ability,
    total_point_buy_cost,
    validate_point_buy,
    validate_scores,
)

# =============================================================================
# Proficiency
# =============================================================================
from dnd_rules.engine.proficiency import (
    all_saving_throw_modifiers,
    all_skill_modifiers,
    check_level,
    effective_proficiency_level,
    multiclass_proficiency_bonus,
    passive_score,
    passive_score_from_modifier,
    proficiency_bonus,
    proficiency_level_bonus,
    proficiency_level_name,
    saving_throw_modifier,
    score_for_ability,
    skill_modifier,
    total_level,
)

# =============================================================================
# Combat Statistics
# =============================================================================
from dnd_rules.engine.combat import (
    all_speeds,
    attack_ability,
    attack_bonus,
    calculate_armor_class,
    class_hit_die,
    fixed_hit_points,
    format_combat_value,
    format_damage,
    hit_die_max,
    initiative,
    level_hp,
    level_up_hp,
    max_hp,
    speed,
    unarmored_defense,
    validate_die_roll,
    versatile_dice,
    weapon_damage,
)

# =============================================================================
# Hit Points and Death Saves
# =============================================================================
from dnd_rules.engine.health import (
    apply_damage,
    apply_healing,
    apply_temp_hp,
    clear_temp_hp,
    format_hp,
    hit_dice_pool,
    hit_die_heal,
    hp_percentage,
    hp_status,
    is_bloodied,
    life_state,
    recover_hit_dice,
    recover_hit_dice_on_long_rest,
    reset_all_hit_dice,
    reset_death_saves,
    roll_death_save,
    set_temp_hp,
    spend_hit_die,
    stabilize,
    update_hp,
)

# =============================================================================
# Spellcasting
# =============================================================================
from dnd_rules.engine.spellcasting import (
    can_cast_rituals,
    can_cast_spell_level,
    caster_type,
    effective_caster_level,
    format_spell_slots,
    is_known_spell_caster,
    is_preparation_caster,
    is_spellcaster,
    max_prepared_spells,
    max_spell_level,
    multiclass_spell_slots,
    pact_magic_slots,
    remaining_spell_slots,
    restore_all_spell_slots,
    spellcasting_ability,
    spellcasting_info,
    spellcasting_stats,
    spells_known_limit,
    spell_attack_bonus,
    SPELL_LEVELS,
    spell_preparation_limits,
    spell_save_dc,
    spell_slots,
    total_spell_slots,
    use_spell_slot,
)

# =============================================================================
# Features
# =============================================================================
from dnd_rules.engine.features import (
    active_features,
    aggregate_features,
    count_limited_use_features,
    create_limited_use_feature,
    create_passive_feature,
    feature_count_by_source,
    feature_summary,
    features_at_level,
    features_by_source,
    features_reset_on_rest,
    features_up_to_level,
    find_feature_by_id,
    group_features_by_source,
    has_feature,
    has_jack_of_all_trades,
    has_limited_uses,
    has_uses_remaining,
    passive_features,
    remaining_uses,
    reset_features_on_rest,
    reset_feature_uses,
    search_features,
    sort_features_by_level,
    use_feature,
)

# =============================================================================
# Dice Rolling
# =============================================================================
from dnd_rules.engine.dice import (
    DiceExpression,
    DiceRoller,
    roll,
    RollType,
)

# =============================================================================
# Character Sheet
# =============================================================================
from dnd_rules.engine.sheet import (
    CharacterSnapshot,
    DerivedStats,
    derive_stats,
)


__all__ = [
    # Ability Scores
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
    # Proficiency
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
    # Combat Statistics
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
    # Hit Points and Death Saves
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
    # Spellcasting
    "SPELL_LEVELS",
    "spellcasting_info",
    "spellcasting_ability",
    "caster_type",
    "is_spellcaster",
    "is_preparation_caster",
    "is_known_spell_caster",
    "can_cast_rituals",
    "spell_save_dc",
    "spell_attack_bonus",
    "spellcasting_stats",
    "effective_caster_level",
    "spell_slots",
    "multiclass_spell_slots",
    "pact_magic_slots",
    "max_spell_level",
    "can_cast_spell_level",
    "max_prepared_spells",
    "spell_preparation_limits",
    "spells_known_limit",
    "use_spell_slot",
    "restore_all_spell_slots",
    "total_spell_slots",
    "remaining_spell_slots",
    "format_spell_slots",
    # Features
    "features_up_to_level",
    "features_at_level",
    "aggregate_features",
    "has_limited_uses",
    "remaining_uses",
    "has_uses_remaining",
    "count_limited_use_features",
    "use_feature",
    "reset_feature_uses",
    "reset_features_on_rest",
    "features_reset_on_rest",
    "find_feature_by_id",
    "has_feature",
    "features_by_source",
    "feature_count_by_source",
    "search_features",
    "passive_features",
    "active_features",
    "group_features_by_source",
    "sort_features_by_level",
    "feature_summary",
    "create_limited_use_feature",
    "create_passive_feature",
    "has_jack_of_all_trades",
    # Dice Rolling
    "RollType",
    "DiceExpression",
    "DiceRoller",
    "roll",
    # Character Sheet
    "CharacterSnapshot",
    "DerivedStats",
    "derive_stats",
]
