"""Spellcasting rules for D&D 5E.

Spellcasting ability and caster type per class, spell save DC and attack
bonus, spell slots (single class, multiclass and pact magic), preparation
and known-spell limits, and slot usage.

Spell slot lists always hold spell levels 1-9; cantrips are never tracked
as slots.

Example:
    >>> from dnd_rules.engine.spellcasting import pact_magic_slots, spell_slots
    >>> [slot.max for slot in spell_slots(5, CasterType.FULL)][:3]
    [4, 3, 2]
    >>> pact_magic_slots(5)
    PactMagicSlots(slots=2, slot_level=3)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from dnd_rules.core.constants import (
    MAX_CHARACTER_LEVEL,
    MAX_SPELL_LEVEL,
    SPELL_SAVE_DC_BASE,
)
from dnd_rules.core.exceptions import UnknownReferenceError
from dnd_rules.core.logging import get_logger
from dnd_rules.engine.abilities import ability_modifier
from dnd_rules.engine.proficiency import (
    AbilityScores,
    check_level,
    proficiency_bonus,
    score_for_ability,
)
from dnd_rules.models.components import (
    ClassLevel,
    PactMagicSlots,
    SpellcastingStats,
    SpellPreparationLimits,
    SpellSlotCount,
    SpellsKnownLimit,
)
from dnd_rules.models.enums import Ability, CasterType
from dnd_rules.models.progression import (
    CANTRIPS_KNOWN,
    CLASS_SPELLCASTING,
    HALF_LEVEL_PREPARATION_CLASSES,
    KNOWN_SPELL_CLASSES,
    PACT_MAGIC_SLOTS,
    PREPARATION_CLASSES,
    RITUAL_CASTING_CLASSES,
    SPELLS_KNOWN,
    ClassSpellcasting,
    normalize_class_key,
    slots_for_caster_level,
)


logger = get_logger(__name__)

SPELL_LEVELS: tuple[int, ...] = tuple(range(1, MAX_SPELL_LEVEL + 1))


# =============================================================================
# Class Lookups
# =============================================================================


def spellcasting_info(class_key: str) -> ClassSpellcasting:
    """Get the spellcasting ability and caster type of a class.

    Raises:
        UnknownReferenceError: If the class key is not in the table.
    """
    key = normalize_class_key(class_key)
    try:
        return CLASS_SPELLCASTING[key]
    except KeyError as exc:
        raise UnknownReferenceError(
            f"Unknown class: {class_key!r}",
            kind="class",
            key=class_key,
        ) from exc


def spellcasting_ability(class_key: str) -> Ability | None:
    """Spellcasting ability of a class, or None for non-casters."""
    info = spellcasting_info(class_key)
    return info.ability if info.caster_type != CasterType.NONE else None


def caster_type(class_key: str) -> CasterType:
    """Caster type of a class."""
    return spellcasting_info(class_key).caster_type


def is_spellcaster(class_key: str) -> bool:
    return caster_type(class_key) != CasterType.NONE


def is_preparation_caster(class_key: str) -> bool:
    return normalize_class_key(class_key) in PREPARATION_CLASSES


def is_known_spell_caster(class_key: str) -> bool:
    return normalize_class_key(class_key) in KNOWN_SPELL_CLASSES


def can_cast_rituals(class_key: str) -> bool:
    """Whether the class has the Ritual Casting feature."""
    return normalize_class_key(class_key) in RITUAL_CASTING_CLASSES


# =============================================================================
# Save DC and Attack Bonus
# =============================================================================


def spell_save_dc(prof_bonus: int, spellcasting_modifier: int, item_bonus: int = 0) -> int:
    """Spell save DC: 8 + proficiency bonus + ability modifier + item bonus."""
    return SPELL_SAVE_DC_BASE + prof_bonus + spellcasting_modifier + item_bonus


def spell_attack_bonus(prof_bonus: int, spellcasting_modifier: int, item_bonus: int = 0) -> int:
    """Spell attack bonus: proficiency bonus + ability modifier + item bonus."""
    return prof_bonus + spellcasting_modifier + item_bonus


def spellcasting_stats(
    class_key: str,
    ability_scores: AbilityScores,
    character_level: int,
    item_bonus: int = 0,
) -> SpellcastingStats | None:
    """Complete spellcasting statistics for a class.

    Args:
        class_key: Spellcasting class.
        ability_scores: Final ability scores.
        character_level: Total character level (sets the proficiency bonus).
        item_bonus: Bonus from magic items (e.g., a +1 wand).

    Returns:
        Spellcasting statistics, or None if the class does not cast spells.
    """
    info = spellcasting_info(class_key)
    if info.caster_type == CasterType.NONE:
        return None

    modifier = ability_modifier(score_for_ability(ability_scores, info.ability))
    prof = proficiency_bonus(character_level)
    return SpellcastingStats(
        class_key=normalize_class_key(class_key),
        ability=info.ability,
        caster_type=info.caster_type,
        ability_modifier=modifier,
        proficiency_bonus=prof,
        item_bonus=item_bonus,
        save_dc=spell_save_dc(prof, modifier, item_bonus),
        attack_bonus=spell_attack_bonus(prof, modifier, item_bonus),
    )


# =============================================================================
# Spell Slots
# =============================================================================


def effective_caster_level(class_level: int, caster: CasterType | str) -> int:
    """Caster level used for the slot table.

    Full casters use their level, half casters half (rounded down), third
    casters a third (rounded down). Pact magic keeps the class level but
    is looked up in its own table; non-casters have 0.
    """
    kind = CasterType(caster)
    if kind in (CasterType.FULL, CasterType.PACT):
        return class_level
    if kind == CasterType.HALF:
        return class_level // 2
    if kind == CasterType.THIRD:
        return class_level // 3
    return 0


def _slots_from_row(row: Sequence[int]) -> list[SpellSlotCount]:
    return [SpellSlotCount(level=level, max=row[level - 1], used=0) for level in SPELL_LEVELS]


def spell_slots(class_level: int, caster: CasterType | str) -> list[SpellSlotCount]:
    """Spell slots for a single class.

    Pact magic and non-casters get all zeros here; see pact_magic_slots.

    Raises:
        DomainError: If the class level is outside 1-20.
    """
    check_level(class_level, "class_level")
    kind = CasterType(caster)
    if kind in (CasterType.NONE, CasterType.PACT):
        return _slots_from_row((0,) * MAX_SPELL_LEVEL)
    return _slots_from_row(slots_for_caster_level(effective_caster_level(class_level, kind)))


def multiclass_spell_slots(
    class_levels: Iterable[ClassLevel | Mapping[str, Any]],
) -> list[SpellSlotCount]:
    """Shared spell slots for a multiclass character.

    Effective caster levels of every non-pact casting class are summed and
    looked up once (capped at 20). Warlock slots stay separate.

    Example:
        >>> slots = multiclass_spell_slots([
        ...     ClassLevel(class_key="wizard", level=5),
        ...     ClassLevel(class_key="paladin", level=6),
        ... ])
        >>> [s.max for s in slots][:5]
        [4, 3, 3, 2, 0]
    """
    total = 0
    for entry in class_levels:
        class_level = entry if isinstance(entry, ClassLevel) else ClassLevel.model_validate(entry)
        kind = caster_type(class_level.class_key)
        if kind == CasterType.PACT:
            continue
        total += effective_caster_level(class_level.level, kind)

    effective = min(MAX_CHARACTER_LEVEL, total)
    logger.debug("Multiclass caster level", effective_caster_level=effective)
    return _slots_from_row(slots_for_caster_level(effective))


def pact_magic_slots(warlock_level: int) -> PactMagicSlots:
    """Warlock pact magic slots.

    Raises:
        DomainError: If the warlock level is outside 1-20.
    """
    check_level(warlock_level, "warlock_level")
    slots, slot_level = PACT_MAGIC_SLOTS[warlock_level]
    return PactMagicSlots(slots=slots, slot_level=slot_level)


def max_spell_level(class_level: int, caster: CasterType | str) -> int | None:
    """Highest spell level castable.

    Returns:
        0 for cantrips only, the pact slot level for warlocks, or None for
        non-casters.
    """
    kind = CasterType(caster)
    if kind == CasterType.NONE:
        return None
    if kind == CasterType.PACT:
        return pact_magic_slots(class_level).slot_level

    check_level(class_level, "class_level")
    row = slots_for_caster_level(effective_caster_level(class_level, kind))
    for level in reversed(SPELL_LEVELS):
        if row[level - 1] > 0:
            return level
    return 0


def can_cast_spell_level(spell_level: int, class_level: int, caster: CasterType | str) -> bool:
    """Whether a caster can cast spells of the given level (cantrips always)."""
    if spell_level == 0:
        return True
    highest = max_spell_level(class_level, caster)
    return highest is not None and spell_level <= highest


# =============================================================================
# Preparation and Known Spells
# =============================================================================


def max_prepared_spells(class_level: int, ability_score: int) -> int:
    """Prepared spell count: class level + ability modifier, at least 1."""
    return max(1, class_level + ability_modifier(ability_score))


def spell_preparation_limits(
    class_key: str,
    class_level: int,
    ability_score: int,
) -> SpellPreparationLimits | None:
    """Daily preparation limits for a preparation caster.

    Paladins halve their level (rounded down) before adding the modifier.

    Returns:
        Preparation limits, or None if the class does not prepare spells.
    """
    key = normalize_class_key(class_key)
    if key not in PREPARATION_CLASSES:
        return None
    check_level(class_level, "class_level")

    effective = class_level // 2 if key in HALF_LEVEL_PREPARATION_CLASSES else class_level
    return SpellPreparationLimits(
        max_prepared=max_prepared_spells(effective, ability_score),
        ability_modifier=ability_modifier(ability_score),
        class_level=effective,
        cantrips_known=CANTRIPS_KNOWN.get(key, (0,) * (MAX_CHARACTER_LEVEL + 1))[class_level],
    )


def spells_known_limit(class_key: str, class_level: int) -> SpellsKnownLimit | None:
    """Spells and cantrips known for a known-spell caster.

    Returns:
        Known limits, or None if the class prepares spells instead.
    """
    key = normalize_class_key(class_key)
    if key not in KNOWN_SPELL_CLASSES:
        return None
    check_level(class_level, "class_level")

    return SpellsKnownLimit(
        spells_known=SPELLS_KNOWN[key][class_level],
        cantrips_known=CANTRIPS_KNOWN[key][class_level] if key in CANTRIPS_KNOWN else 0,
    )


# =============================================================================
# Slot Usage
# =============================================================================


def use_spell_slot(slots: Sequence[SpellSlotCount], level: int) -> list[SpellSlotCount] | None:
    """Expend one slot of the given level.

    Returns:
        New slot list with the slot used, or None if no slot is available.
    """
    slot = next((s for s in slots if s.level == level), None)
    if slot is None or slot.used >= slot.max:
        logger.debug("No spell slot available", spell_level=level)
        return None

    logger.debug("Spell slot used", spell_level=level, remaining=slot.remaining - 1)
    return [
        s.model_copy(update={"used": s.used + 1}) if s.level == level else s for s in slots
    ]


def restore_all_spell_slots(slots: Sequence[SpellSlotCount]) -> list[SpellSlotCount]:
    """Restore every slot (long rest)."""
    return [s.model_copy(update={"used": 0}) for s in slots]


def total_spell_slots(slots: Sequence[SpellSlotCount]) -> int:
    return sum(s.max for s in slots)


def remaining_spell_slots(slots: Sequence[SpellSlotCount]) -> int:
    return sum(s.remaining for s in slots)


def format_spell_slots(slots: Sequence[SpellSlotCount]) -> str:
    """Format slots for display ('4/4 level 1, 1/2 level 2')."""
    available = [s for s in slots if s.level > 0 and s.max > 0]
    if not available:
        return "No spell slots"
    return ", ".join(f"{s.remaining}/{s.max} level {s.level}" for s in available)


__all__ = [
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
]
