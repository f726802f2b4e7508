"""Character sheet composition.

Combines the rules modules into one pass: a CharacterSnapshot holds the
persisted inputs of a character, and derive_stats() computes everything a
character sheet displays from it. Nothing here is cached or stored; the
caller decides when to recompute.

Example:
    >>> snapshot = CharacterSnapshot(
    ...     base_scores={Ability.STR: 15, Ability.DEX: 14, Ability.CON: 13,
    ...                  Ability.INT: 12, Ability.WIS: 10, Ability.CHA: 8},
    ...     class_levels=[ClassLevel(class_key="fighter", level=1, is_primary=True)],
    ... )
    >>> derive_stats(snapshot).max_hp.total
    11
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, computed_field

from dnd_rules.core.config import get_settings
from dnd_rules.core.constants import DEFAULT_SPEED
from dnd_rules.core.exceptions import DomainError
from dnd_rules.core.logging import get_logger, log_context
from dnd_rules.engine.abilities import calculate_ability_scores
from dnd_rules.engine.combat import all_speeds, calculate_armor_class, initiative, max_hp
from dnd_rules.engine.features import has_jack_of_all_trades
from dnd_rules.engine.health import hit_dice_pool
from dnd_rules.engine.proficiency import (
    all_saving_throw_modifiers,
    all_skill_modifiers,
    passive_score_from_modifier,
    proficiency_bonus,
    total_level,
)
from dnd_rules.engine.spellcasting import (
    caster_type,
    multiclass_spell_slots,
    pact_magic_slots,
    spellcasting_stats,
)
from dnd_rules.models.components import (
    AbilityScoreSet,
    ArmorClass,
    ClassLevel,
    HitDicePool,
    HitPointLevel,
    Initiative,
    MaxHitPoints,
    PactMagicSlots,
    SavingThrowModifier,
    SkillModifier,
    SpellcastingStats,
    SpellSlotCount,
    Speed,
)
from dnd_rules.models.enums import (
    Ability,
    ArmorType,
    CasterType,
    MovementType,
    ProficiencyLevel,
    Skill,
)


logger = get_logger(__name__)


# =============================================================================
# Snapshot
# =============================================================================


class CharacterSnapshot(BaseModel):
    """Persisted inputs needed to derive a character sheet.

    Attributes:
        base_scores: Ability scores before any bonus.
        racial_bonuses: Species bonuses per ability.
        asi_bonuses: Ability Score Improvement bonuses per ability.
        other_bonuses: Bonuses from items or other sources.
        class_levels: Levels taken in each class.
        skill_proficiencies: Training per skill; missing skills are untrained.
        save_proficiencies: Abilities with saving throw proficiency.
        armor_type: Armor category worn.
        armor_base: Base AC of the armor worn (ignored when unarmored).
        has_shield: Whether a shield is equipped.
        armor_magic_bonus: Magic bonus of armor and shield.
        ac_feature_bonus: AC bonus from features.
        speeds: Base speed per movement type.
        speed_modifier: Modifier applied to every speed.
        hit_point_levels: Per-level hit point entries; derived from
            class_levels when empty. Rolled hit points past level 1 need
            explicit entries carrying their rolls.
        hp_feature_bonus_per_level: Per-level hit point bonus (e.g., Tough).
        initiative_bonus: Initiative bonus from features (e.g., Alert).
        use_fixed_hp: Fixed vs. rolled hit points; defaults to the configured rule.
        spell_slots_used: Slots used per spell level.
        spell_item_bonus: Spell save DC and attack bonus from items.
        is_pc: Player characters are capped at the configured score cap.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_scores: dict[Ability, int]
    racial_bonuses: dict[Ability, int] = Field(default_factory=dict)
    asi_bonuses: dict[Ability, int] = Field(default_factory=dict)
    other_bonuses: dict[Ability, int] = Field(default_factory=dict)
    class_levels: tuple[ClassLevel, ...] = Field(min_length=1)
    skill_proficiencies: dict[Skill, ProficiencyLevel] = Field(default_factory=dict)
    save_proficiencies: frozenset[Ability] = frozenset()
    armor_type: ArmorType = ArmorType.UNARMORED
    armor_base: int = Field(default=0, ge=0)
    has_shield: bool = False
    armor_magic_bonus: int = 0
    ac_feature_bonus: int = 0
    speeds: dict[MovementType, int] = Field(
        default_factory=lambda: {MovementType.WALK: DEFAULT_SPEED}
    )
    speed_modifier: int = 0
    hit_point_levels: tuple[HitPointLevel, ...] = ()
    hp_feature_bonus_per_level: int = 0
    initiative_bonus: int = 0
    use_fixed_hp: bool | None = None
    spell_slots_used: dict[int, int] = Field(default_factory=dict)
    spell_item_bonus: int = 0
    is_pc: bool = True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_level(self) -> int:
        """Total character level across all classes."""
        return total_level(self.class_levels)


class DerivedStats(BaseModel):
    """Everything a character sheet displays, computed from a snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ability_scores: AbilityScoreSet
    total_level: int
    proficiency_bonus: int
    skills: dict[Skill, SkillModifier]
    saving_throws: dict[Ability, SavingThrowModifier]
    passive_perception: int
    armor_class: ArmorClass
    max_hp: MaxHitPoints
    initiative: Initiative
    speeds: dict[MovementType, Speed]
    hit_dice: HitDicePool
    spell_slots: tuple[SpellSlotCount, ...]
    pact_slots: PactMagicSlots | None = None
    spellcasting: tuple[SpellcastingStats, ...] = ()
    jack_of_all_trades: bool = False


# =============================================================================
# Derivation
# =============================================================================


def _hit_point_levels(snapshot: CharacterSnapshot, con_score: int) -> list[HitPointLevel]:
    """Per-level entries in level order, primary class first."""
    if snapshot.hit_point_levels:
        return list(snapshot.hit_point_levels)

    use_fixed = snapshot.use_fixed_hp
    if use_fixed is None:
        use_fixed = get_settings().rules.use_fixed_hp

    ordered = sorted(snapshot.class_levels, key=lambda c: not c.is_primary)
    entries: list[HitPointLevel] = []
    for class_level in ordered:
        for _ in range(class_level.level):
            entries.append(
                HitPointLevel(
                    level=len(entries) + 1,
                    class_key=class_level.class_key,
                    con_score=con_score,
                    use_fixed=use_fixed,
                )
            )
    return entries


def _apply_slot_usage(
    slots: list[SpellSlotCount],
    used: Mapping[int, int],
) -> tuple[SpellSlotCount, ...]:
    result = []
    for slot in slots:
        spent = used.get(slot.level, 0)
        if not 0 <= spent <= slot.max:
            raise DomainError(
                f"Cannot have {spent} level {slot.level} slots used with only {slot.max}",
                field_name="spell_slots_used",
                invalid_value=spent,
            )
        result.append(slot.model_copy(update={"used": spent}))
    return tuple(result)


def derive_stats(snapshot: CharacterSnapshot) -> DerivedStats:
    """Compute the full set of derived statistics for a character.

    Args:
        snapshot: Persisted character inputs.

    Returns:
        Derived statistics for display.

    Raises:
        DomainError: If an input lies outside its rules domain.
        UnknownReferenceError: If a class key is unknown.
    """
    classes = ", ".join(f"{c.display_name} {c.level}" for c in snapshot.class_levels)
    with log_context(classes=classes):
        abilities = calculate_ability_scores(
            snapshot.base_scores,
            snapshot.racial_bonuses,
            snapshot.asi_bonuses,
            snapshot.other_bonuses,
            is_pc=snapshot.is_pc,
        )
        level = snapshot.total_level
        jack = has_jack_of_all_trades(snapshot.class_levels)

        skills = all_skill_modifiers(
            abilities,
            snapshot.skill_proficiencies,
            level,
            jack_of_all_trades=jack,
        )

        warlock = next(
            (c for c in snapshot.class_levels if caster_type(c.class_key) == CasterType.PACT),
            None,
        )
        casting = (
            spellcasting_stats(c.class_key, abilities, level, snapshot.spell_item_bonus)
            for c in snapshot.class_levels
        )
        spellcasting = tuple(entry for entry in casting if entry is not None)

        stats = DerivedStats(
            ability_scores=abilities,
            total_level=level,
            proficiency_bonus=proficiency_bonus(level),
            skills=skills,
            saving_throws=all_saving_throw_modifiers(abilities, snapshot.save_proficiencies, level),
            passive_perception=passive_score_from_modifier(skills[Skill.PERCEPTION].total),
            armor_class=calculate_armor_class(
                snapshot.armor_type,
                snapshot.armor_base,
                abilities.get_total(Ability.DEX),
                has_shield=snapshot.has_shield,
                magic_bonus=snapshot.armor_magic_bonus,
                feature_bonus=snapshot.ac_feature_bonus,
            ),
            max_hp=max_hp(
                _hit_point_levels(snapshot, abilities.get_total(Ability.CON)),
                snapshot.hp_feature_bonus_per_level,
            ),
            initiative=initiative(abilities.get_total(Ability.DEX), snapshot.initiative_bonus),
            speeds=all_speeds(snapshot.speeds, snapshot.speed_modifier),
            hit_dice=hit_dice_pool(snapshot.class_levels),
            spell_slots=_apply_slot_usage(
                multiclass_spell_slots(snapshot.class_levels), snapshot.spell_slots_used
            ),
            pact_slots=pact_magic_slots(warlock.level) if warlock is not None else None,
            spellcasting=spellcasting,
            jack_of_all_trades=jack,
        )
        logger.debug(
            "Character stats derived",
            total_level=level,
            armor_class=stats.armor_class.total,
            max_hp=stats.max_hp.total,
        )
    return stats


__all__ = [
    "CharacterSnapshot",
    "DerivedStats",
    "derive_stats",
]
