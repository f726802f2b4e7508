"""Integration tests for character sheet derivation.

Tests the complete flow: persisted snapshot in, every displayed statistic
out, across single class, multiclass and armored characters, followed by
a round of combat and a long rest on the derived values.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dnd_rules.core.exceptions import DomainError
from dnd_rules.engine.features import reset_features_on_rest, use_feature
from dnd_rules.engine.health import (
    apply_damage,
    apply_healing,
    recover_hit_dice_on_long_rest,
    roll_death_save,
    spend_hit_die,
)
from dnd_rules.engine.sheet import CharacterSnapshot, derive_stats
from dnd_rules.engine.spellcasting import restore_all_spell_slots, use_spell_slot
from dnd_rules.models import (
    Ability,
    ArmorType,
    ClassLevel,
    HitPointLevel,
    MovementType,
    ProficiencyLevel,
    RestType,
    Skill,
)


STANDARD_ARRAY = {
    Ability.STR: 15,
    Ability.DEX: 14,
    Ability.CON: 13,
    Ability.INT: 12,
    Ability.WIS: 10,
    Ability.CHA: 8,
}


@pytest.fixture
def fighter() -> CharacterSnapshot:
    """A level 1 fighter on the standard array."""
    return CharacterSnapshot(
        base_scores=STANDARD_ARRAY,
        class_levels=[ClassLevel(class_key="fighter", level=1, is_primary=True)],
        skill_proficiencies={
            Skill.ATHLETICS: ProficiencyLevel.PROFICIENT,
            Skill.PERCEPTION: ProficiencyLevel.PROFICIENT,
        },
        save_proficiencies=frozenset({Ability.STR, Ability.CON}),
    )


@pytest.fixture
def bard_warlock() -> CharacterSnapshot:
    """A bard 2 / warlock 3 with a species CHA bonus."""
    return CharacterSnapshot(
        base_scores={**STANDARD_ARRAY, Ability.CHA: 16, Ability.STR: 8},
        racial_bonuses={Ability.CHA: 2},
        class_levels=[
            ClassLevel(class_key="warlock", level=3),
            ClassLevel(class_key="bard", level=2, is_primary=True),
        ],
        skill_proficiencies={Skill.PERSUASION: ProficiencyLevel.EXPERTISE},
        save_proficiencies=frozenset({Ability.DEX, Ability.CHA}),
        spell_slots_used={1: 2},
    )


class TestSingleClass:
    """Derive a single class character."""

    def test_core_numbers(self, fighter: CharacterSnapshot) -> None:
        """Test level, proficiency, AC, HP and initiative."""
        stats = derive_stats(fighter)

        assert stats.total_level == 1
        assert stats.proficiency_bonus == 2
        assert stats.armor_class.total == 12
        assert stats.max_hp.total == 11
        assert stats.initiative.total == 2
        assert stats.speeds[MovementType.WALK].total == 30

    def test_skills_and_saves(self, fighter: CharacterSnapshot) -> None:
        """Test trained and untrained modifiers."""
        stats = derive_stats(fighter)

        assert stats.skills[Skill.ATHLETICS].total == 4
        assert stats.skills[Skill.STEALTH].total == 2
        assert stats.passive_perception == 12
        assert stats.saving_throws[Ability.STR].total == 4
        assert stats.saving_throws[Ability.WIS].total == 0

    def test_non_caster(self, fighter: CharacterSnapshot) -> None:
        """Test a fighter has no spellcasting."""
        stats = derive_stats(fighter)

        assert all(slot.max == 0 for slot in stats.spell_slots)
        assert stats.pact_slots is None
        assert stats.spellcasting == ()
        assert stats.jack_of_all_trades is False
        assert stats.hit_dice["d10"].total == 1

    def test_snapshot_total_level_is_serialized(self, fighter: CharacterSnapshot) -> None:
        """Test the computed total level appears in dumps."""
        assert fighter.model_dump()["total_level"] == 1

    def test_snapshot_requires_a_class(self) -> None:
        """Test a snapshot without class levels is rejected."""
        with pytest.raises(ValidationError):
            CharacterSnapshot(base_scores=STANDARD_ARRAY, class_levels=[])


class TestMulticlass:
    """Derive a multiclass caster."""

    def test_level_and_hit_points(self, bard_warlock: CharacterSnapshot) -> None:
        """Test total level and fixed hit points with the primary class first."""
        stats = derive_stats(bard_warlock)

        assert stats.total_level == 5
        assert stats.proficiency_bonus == 3
        assert stats.max_hp.levels[0].die_value == 8
        assert stats.max_hp.total == 9 + 4 * 6
        assert stats.hit_dice["d8"].total == 5

    def test_jack_of_all_trades(self, bard_warlock: CharacterSnapshot) -> None:
        """Test bard 2 adds half proficiency to untrained skills."""
        stats = derive_stats(bard_warlock)

        assert stats.jack_of_all_trades is True
        assert stats.skills[Skill.ARCANA].proficiency_level is ProficiencyLevel.HALF
        assert stats.skills[Skill.ARCANA].total == 1 + 1
        assert stats.skills[Skill.PERSUASION].total == 4 + 6

    def test_slots(self, bard_warlock: CharacterSnapshot) -> None:
        """Test shared slots exclude warlock levels and usage is applied."""
        stats = derive_stats(bard_warlock)

        assert stats.spell_slots[0].max == 3
        assert stats.spell_slots[0].remaining == 1
        assert stats.spell_slots[1].max == 0
        assert stats.pact_slots is not None
        assert (stats.pact_slots.slots, stats.pact_slots.slot_level) == (2, 2)

    def test_spellcasting_per_class(self, bard_warlock: CharacterSnapshot) -> None:
        """Test both classes cast with CHA at the character's proficiency."""
        stats = derive_stats(bard_warlock)

        assert [s.class_key for s in stats.spellcasting] == ["warlock", "bard"]
        assert all(s.save_dc == 15 for s in stats.spellcasting)
        assert all(s.attack_bonus == 7 for s in stats.spellcasting)

    def test_overspent_slots(self, bard_warlock: CharacterSnapshot) -> None:
        """Test more used slots than available is rejected."""
        snapshot = bard_warlock.model_copy(update={"spell_slots_used": {1: 4}})

        with pytest.raises(DomainError):
            derive_stats(snapshot)


class TestArmorAndHitPointRules:
    """Derive armored characters and hit point variants."""

    def test_heavy_armor_and_shield(self) -> None:
        """Test a paladin in plate with a +1 shield."""
        stats = derive_stats(
            CharacterSnapshot(
                base_scores=STANDARD_ARRAY,
                class_levels=[ClassLevel(class_key="paladin", level=5)],
                armor_type=ArmorType.HEAVY,
                armor_base=18,
                has_shield=True,
                armor_magic_bonus=1,
                speeds={MovementType.WALK: 30, MovementType.SWIM: 15},
                speed_modifier=-10,
            )
        )

        assert stats.armor_class.total == 21
        assert stats.speeds[MovementType.WALK].total == 20
        assert stats.speeds[MovementType.SWIM].total == 5
        assert stats.spell_slots[0].max == 3

    def test_explicit_rolled_levels(self) -> None:
        """Test recorded rolls are used as given."""
        stats = derive_stats(
            CharacterSnapshot(
                base_scores=STANDARD_ARRAY,
                class_levels=[ClassLevel(class_key="wizard", level=2)],
                hit_point_levels=[
                    HitPointLevel(level=1, class_key="wizard", con_score=13),
                    HitPointLevel(
                        level=2, class_key="wizard", con_score=13, roll=2, use_fixed=False
                    ),
                ],
                hp_feature_bonus_per_level=2,
            )
        )

        assert stats.max_hp.total == 7 + 3 + 4

    def test_configured_rolled_hit_points(self, house_rule_env: dict[str, str]) -> None:
        """Test rolled mode from settings needs recorded rolls past level 1."""
        snapshot = CharacterSnapshot(
            base_scores=STANDARD_ARRAY,
            class_levels=[ClassLevel(class_key="fighter", level=2)],
        )

        with pytest.raises(DomainError):
            derive_stats(snapshot)

        assert derive_stats(snapshot.model_copy(update={"use_fixed_hp": True})).max_hp.total == 18


class TestAdventuringDay:
    """Use derived values through a fight and a long rest."""

    def test_fight_and_rest(self, fighter: CharacterSnapshot, second_wind: object) -> None:
        """Test damage, death saves, healing, resources and recovery."""
        stats = derive_stats(fighter)
        max_hp = stats.max_hp.total

        hit = apply_damage(max_hp, 0, max_hp, 15)
        assert hit.current_hp == 0
        assert hit.is_dying is True

        saves = roll_death_save(4, hit.death_saves).state
        saves = roll_death_save(14, saves).state
        assert (saves.successes, saves.failures) == (1, 1)

        healed = apply_healing(0, 0, max_hp, 5, saves)
        assert healed.current_hp == 5
        assert healed.death_saves.failures == 0

        pool = spend_hit_die(stats.hit_dice, "d10")
        assert pool is not None
        assert spend_hit_die(pool, "d10") is None
        assert recover_hit_dice_on_long_rest(pool)["d10"].remaining == 1

        spent = use_feature(second_wind)  # type: ignore[arg-type]
        assert spent is not None
        rested = reset_features_on_rest([spent], RestType.LONG)
        assert rested[0].uses is not None
        assert rested[0].uses.remaining == 1

    def test_caster_spends_and_restores(self, bard_warlock: CharacterSnapshot) -> None:
        """Test the last level 1 slot, then a long rest."""
        slots = list(derive_stats(bard_warlock).spell_slots)

        after = use_spell_slot(slots, 1)
        assert after is not None
        assert use_spell_slot(after, 1) is None
        assert restore_all_spell_slots(after)[0].remaining == 3

    def test_massive_damage_while_down(self, fighter: CharacterSnapshot) -> None:
        """Test a big hit at 0 HP kills outright with a prior failure."""
        max_hp = derive_stats(fighter).max_hp.total
        down = apply_damage(3, 0, max_hp, 3)
        failed = roll_death_save(5, down.death_saves).state

        result = apply_damage(0, 0, max_hp, max_hp, failed)
        assert result.is_dead is True
