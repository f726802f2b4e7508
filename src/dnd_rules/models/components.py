"""Value and result models for the D&D 5E character rules engine.

Every model here is a frozen pydantic model. Engine functions never mutate
their inputs; they build new instances (usually via ``model_copy``) and
return them.

Input values:
    ClassLevel: A class key and the levels taken in it.
    SpellSlotCount: Max and used slots for one spell level.
    DeathSaveState: Death saving throw counters.
    HitDice: Total and remaining hit dice of one die type.
    FeatureUses / CharacterFeature: Features and their limited uses.
    SpeciesBonus: One species ability bonus entry.
    HitPointLevel: One level's worth of hit point input.

Results:
    Everything else; each engine operation returns one of these.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from dnd_rules.models.enums import (
    Ability,
    CasterType,
    FloatingBonus,
    LifeState,
    ProficiencyLevel,
    ResetOn,
    Skill,
)


# =============================================================================
# Validators and Type Definitions
# =============================================================================


def calculate_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    The modifier is calculated as: (score - 10) // 2

    Args:
        score: The ability score (1-30).

    Returns:
        The ability modifier (-5 to +10).

    Example:
        >>> calculate_modifier(10)
        0
        >>> calculate_modifier(7)
        -2
    """
    return (score - 10) // 2


# Type alias for validated ability scores
AbilityScore = Annotated[int, Field(ge=1, le=30, description="Ability score (1-30)")]

# Type alias for validated class levels
CharacterLevel = Annotated[int, Field(ge=1, le=20, description="Level (1-20)")]


# =============================================================================
# Ability Scores
# =============================================================================


class AbilityScoreBreakdown(BaseModel):
    """One ability score split into its contributing parts.

    Attributes:
        base: Score from the generation method.
        racial_bonus: Species bonus.
        asi_bonus: Ability Score Improvement bonus.
        other_bonus: Items, feats and anything else.
        total: Sum of the parts, clamped to the PC cap for player characters.

    Example:
        >>> breakdown = AbilityScoreBreakdown(base=15, racial_bonus=2, total=17)
        >>> breakdown.modifier
        3
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    base: int
    racial_bonus: int = 0
    asi_bonus: int = 0
    other_bonus: int = 0
    total: AbilityScore

    @computed_field(description="Modifier: (total - 10) // 2")
    @property
    def modifier(self) -> int:
        """Calculate the modifier for the total score."""
        return calculate_modifier(self.total)


class AbilityScoreSet(BaseModel):
    """Breakdowns for all six abilities.

    Example:
        >>> scores.get_total(Ability.STR)
        17
        >>> scores.modifiers[Ability.STR]
        3
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scores: dict[Ability, AbilityScoreBreakdown]

    @property
    def totals(self) -> dict[Ability, int]:
        """Total score per ability."""
        return {ability: breakdown.total for ability, breakdown in self.scores.items()}

    @property
    def modifiers(self) -> dict[Ability, int]:
        """Modifier per ability."""
        return {ability: breakdown.modifier for ability, breakdown in self.scores.items()}

    def get_total(self, ability: Ability) -> int:
        """Get the total score for a specific ability."""
        return self.scores[ability].total

    def get_modifier(self, ability: Ability) -> int:
        """Get the modifier for a specific ability."""
        return self.scores[ability].modifier


class ScoreGenerationResult(BaseModel):
    """Outcome of a score generation method.

    An invalid result still carries the submitted scores so the caller can
    show them next to the error.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scores: dict[Ability, int]
    valid: bool
    error: str | None = None


class PointBuyResult(ScoreGenerationResult):
    """Point-buy outcome with the spent and remaining budget."""

    cost: int
    remaining: int


class SpeciesBonus(BaseModel):
    """One species bonus entry: a fixed ability or a floating category."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ability: Ability | FloatingBonus
    bonus: int

    @property
    def is_floating(self) -> bool:
        """Whether the player chooses which abilities receive this bonus."""
        return isinstance(self.ability, FloatingBonus)


class SpeciesBonusResult(BaseModel):
    """Species bonus application outcome.

    Attributes:
        base: Scores before bonuses.
        bonuses: Bonus applied per ability (0 where none).
        final: Scores after bonuses, capped for player characters.
        errors: Non-fatal problems found while applying the bonuses.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base: dict[Ability, int]
    bonuses: dict[Ability, int]
    final: dict[Ability, int]
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        """Whether every bonus was applied cleanly."""
        return not self.errors


# =============================================================================
# Class Levels
# =============================================================================


class ClassLevel(BaseModel):
    """Levels taken in one class.

    Attributes:
        class_key: Class identifier (e.g., 'wizard', 'eldritch-knight').
        level: Levels in this class (1-20).
        is_primary: Whether this is the character's starting class.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    class_key: str = Field(min_length=1)
    level: CharacterLevel
    is_primary: bool = False

    @property
    def display_name(self) -> str:
        """Class name for display ('eldritch-knight' -> 'Eldritch Knight')."""
        return self.class_key.replace("-", " ").replace("_", " ").title()


# =============================================================================
# Proficiency Results
# =============================================================================


class SkillModifier(BaseModel):
    """Skill check modifier broken into parts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    skill: Skill
    ability: Ability
    ability_modifier: int
    proficiency_bonus: int
    proficiency_level: ProficiencyLevel

    @computed_field(description="Ability modifier plus proficiency contribution")
    @property
    def total(self) -> int:
        """Calculate the total skill modifier."""
        return self.ability_modifier + self.proficiency_bonus


class SavingThrowModifier(BaseModel):
    """Saving throw modifier broken into parts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ability: Ability
    ability_modifier: int
    proficiency_bonus: int
    is_proficient: bool

    @computed_field(description="Ability modifier plus proficiency bonus if proficient")
    @property
    def total(self) -> int:
        """Calculate the total saving throw modifier."""
        return self.ability_modifier + self.proficiency_bonus


class PassiveScore(BaseModel):
    """Passive check score (10 + modifier + proficiency contribution)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base: int = 10
    ability_modifier: int
    proficiency_bonus: int

    @computed_field(description="Passive score total")
    @property
    def total(self) -> int:
        """Calculate the passive score."""
        return self.base + self.ability_modifier + self.proficiency_bonus


# =============================================================================
# Combat Results
# =============================================================================


class ArmorClass(BaseModel):
    """Armor class broken into its contributing parts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base: int
    dex_bonus: int
    shield_bonus: int = 0
    magic_bonus: int = 0
    feature_bonus: int = 0

    @computed_field(description="Sum of all armor class parts")
    @property
    def total(self) -> int:
        """Calculate the final armor class."""
        return (
            self.base + self.dex_bonus + self.shield_bonus + self.magic_bonus + self.feature_bonus
        )


class HitPointLevel(BaseModel):
    """Hit point input for one character level.

    Attributes:
        level: Character level this entry is for (1 uses the die maximum).
        class_key: Class taken at this level; determines the hit die.
        con_score: Constitution score at this level.
        roll: Hit die roll, when rolling instead of taking the average.
        use_fixed: Take the fixed average instead of the roll.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: CharacterLevel
    class_key: str = Field(min_length=1)
    con_score: AbilityScore
    roll: int | None = None
    use_fixed: bool = True


class LevelHitPoints(BaseModel):
    """Hit points gained at one level."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: int
    hit_die: str
    die_value: int
    con_modifier: int
    is_fixed: bool

    @computed_field(description="Hit die value plus Constitution modifier")
    @property
    def total(self) -> int:
        """Calculate hit points gained at this level."""
        return self.die_value + self.con_modifier


class MaxHitPoints(BaseModel):
    """Maximum hit points with the per-level breakdown."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    levels: tuple[LevelHitPoints, ...]
    feature_bonus: int = 0

    @computed_field(description="Sum of all levels plus feature bonus")
    @property
    def total(self) -> int:
        """Calculate maximum hit points."""
        return sum(level.total for level in self.levels) + self.feature_bonus


class Initiative(BaseModel):
    """Initiative modifier broken into parts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    dex_modifier: int
    feature_bonus: int = 0

    @computed_field(description="Dexterity modifier plus feature bonus")
    @property
    def total(self) -> int:
        """Calculate the initiative modifier."""
        return self.dex_modifier + self.feature_bonus


class Speed(BaseModel):
    """Speed for one movement type, in feet."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base: int
    modifiers: int = 0

    @computed_field(description="Base speed plus modifiers, never below 0")
    @property
    def total(self) -> int:
        """Calculate the effective speed."""
        return max(0, self.base + self.modifiers)


class AttackAbility(BaseModel):
    """Ability used for a weapon attack and its modifier."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ability: Ability
    modifier: int


class AttackBonus(BaseModel):
    """Attack roll bonus broken into parts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ability_modifier: int
    proficiency_bonus: int
    magic_bonus: int = 0

    @computed_field(description="Sum of the attack bonus parts")
    @property
    def total(self) -> int:
        """Calculate the attack bonus."""
        return self.ability_modifier + self.proficiency_bonus + self.magic_bonus


class WeaponDamage(BaseModel):
    """Weapon damage dice and flat bonus."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    dice: str
    ability_modifier: int
    magic_bonus: int = 0
    is_two_handed: bool = False

    @computed_field(description="Flat damage bonus added to the dice")
    @property
    def bonus(self) -> int:
        """Calculate the flat damage bonus."""
        return self.ability_modifier + self.magic_bonus


# =============================================================================
# Hit Points and Death Saves
# =============================================================================


class DeathSaveState(BaseModel):
    """Death saving throw counters.

    Attributes:
        successes: Successful saves (0-3).
        failures: Failed saves (0-3).
        is_stable: Stable at 0 HP; no further saves are rolled.
        is_dead: Three failures reached; terminal.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    successes: Annotated[int, Field(ge=0, le=3)] = 0
    failures: Annotated[int, Field(ge=0, le=3)] = 0
    is_stable: bool = False
    is_dead: bool = False


class DeathSaveResult(BaseModel):
    """Outcome of one death saving throw.

    Attributes:
        state: Death save counters after the roll.
        revived: A natural 20 brought the creature back to consciousness.
        hit_points: Hit points after the roll (1 when revived, else 0).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    state: DeathSaveState
    revived: bool = False
    hit_points: int = 0


class HitPointChange(BaseModel):
    """Outcome of applying damage or healing.

    ``overflow`` is damage beyond the hit points that were left, or healing
    beyond maximum hit points. Both are reported and then discarded.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    previous_hp: int
    previous_temp_hp: int
    current_hp: int
    temp_hp: int
    max_hp: int
    amount: int
    overflow: int = 0
    death_saves: DeathSaveState = Field(default_factory=DeathSaveState)

    @property
    def is_dead(self) -> bool:
        """Whether the creature is dead after the change."""
        return self.death_saves.is_dead

    @property
    def is_dying(self) -> bool:
        """Whether the creature is at 0 HP and still rolling death saves."""
        return self.current_hp == 0 and not (
            self.death_saves.is_dead or self.death_saves.is_stable
        )


class HitPointState(BaseModel):
    """Complete hit point state after a combined update."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    current_hp: int
    temp_hp: int
    max_hp: int
    death_saves: DeathSaveState = Field(default_factory=DeathSaveState)
    life_state: LifeState


class HitDice(BaseModel):
    """Hit dice of one die type."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    total: Annotated[int, Field(ge=0)]
    remaining: Annotated[int, Field(ge=0)]

    @model_validator(mode="after")
    def validate_remaining(self) -> "HitDice":
        """Ensure remaining never exceeds total."""
        if self.remaining > self.total:
            msg = f"remaining ({self.remaining}) cannot exceed total ({self.total})"
            raise ValueError(msg)
        return self


# Keyed by die string, e.g. {"d10": HitDice(total=5, remaining=3)}
HitDicePool = dict[str, HitDice]


# =============================================================================
# Spellcasting
# =============================================================================


class SpellSlotCount(BaseModel):
    """Slots for one spell level."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    level: Annotated[int, Field(ge=0, le=9)]
    max: Annotated[int, Field(ge=0)]
    used: Annotated[int, Field(ge=0)] = 0

    @model_validator(mode="after")
    def validate_used(self) -> "SpellSlotCount":
        """Ensure used never exceeds max."""
        if self.used > self.max:
            msg = f"used ({self.used}) cannot exceed max ({self.max})"
            raise ValueError(msg)
        return self

    @property
    def remaining(self) -> int:
        """Unused slots at this level."""
        return self.max - self.used


class PactMagicSlots(BaseModel):
    """Warlock pact magic slots; all slots share one level."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    slots: int
    slot_level: int


class SpellcastingStats(BaseModel):
    """Spell save DC and attack bonus with their inputs."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    class_key: str
    ability: Ability
    caster_type: CasterType
    ability_modifier: int
    proficiency_bonus: int
    item_bonus: int = 0
    save_dc: int
    attack_bonus: int


class SpellPreparationLimits(BaseModel):
    """Daily preparation limits for a preparation caster."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_prepared: int
    ability_modifier: int
    class_level: int
    cantrips_known: int


class SpellsKnownLimit(BaseModel):
    """Spells and cantrips known for a known-spell caster."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    spells_known: int
    cantrips_known: int


# =============================================================================
# Features
# =============================================================================


class FeatureUses(BaseModel):
    """Limited-use tracking for a feature."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max: Annotated[int, Field(ge=0)]
    used: Annotated[int, Field(ge=0)] = 0
    reset_on: ResetOn = ResetOn.LONG

    @model_validator(mode="after")
    def validate_used(self) -> "FeatureUses":
        """Ensure used never exceeds max."""
        if self.used > self.max:
            msg = f"used ({self.used}) cannot exceed max ({self.max})"
            raise ValueError(msg)
        return self

    @property
    def remaining(self) -> int:
        """Uses left before the next reset."""
        return self.max - self.used


class CharacterFeature(BaseModel):
    """A class feature, species trait, background feature or feat.

    A feature without ``uses`` is passive and always available.

    Example:
        >>> rage = CharacterFeature(
        ...     id="rage", name="Rage", source="Class: Barbarian",
        ...     level_required=1, uses=FeatureUses(max=2, reset_on=ResetOn.LONG),
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    source: str = ""
    level_required: CharacterLevel | None = None
    uses: FeatureUses | None = None

    @property
    def is_passive(self) -> bool:
        """Whether the feature has no limited uses."""
        return self.uses is None


class ClassFeatures(BaseModel):
    """The feature list of one class together with the levels taken in it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    class_key: str = Field(min_length=1)
    level: CharacterLevel
    features: tuple[CharacterFeature, ...] = ()


class FeatureCollection(BaseModel):
    """All features available to a character, grouped by origin."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    class_features: tuple[CharacterFeature, ...] = ()
    species_traits: tuple[CharacterFeature, ...] = ()
    background_feature: CharacterFeature | None = None
    feats: tuple[CharacterFeature, ...] = ()

    @property
    def all_features(self) -> tuple[CharacterFeature, ...]:
        """Class features, species traits, background feature and feats in order."""
        background = (self.background_feature,) if self.background_feature else ()
        return (*self.class_features, *self.species_traits, *background, *self.feats)

    @property
    def count(self) -> int:
        """Number of features in the collection."""
        return len(self.all_features)


__all__ = [
    # Helpers
    "calculate_modifier",
    "AbilityScore",
    "CharacterLevel",
    # Ability scores
    "AbilityScoreBreakdown",
    "AbilityScoreSet",
    "ScoreGenerationResult",
    "PointBuyResult",
    "SpeciesBonus",
    "SpeciesBonusResult",
    # Classes
    "ClassLevel",
    # Proficiency
    "SkillModifier",
    "SavingThrowModifier",
    "PassiveScore",
    # Combat
    "ArmorClass",
    "HitPointLevel",
    "LevelHitPoints",
    "MaxHitPoints",
    "Initiative",
    "Speed",
    "AttackAbility",
    "AttackBonus",
    "WeaponDamage",
    # Hit points
    "DeathSaveState",
    "DeathSaveResult",
    "HitPointChange",
    "HitPointState",
    "HitDice",
    "HitDicePool",
    # Spellcasting
    "SpellSlotCount",
    "PactMagicSlots",
    "SpellcastingStats",
    "SpellPreparationLimits",
    "SpellsKnownLimit",
    # Features
    "FeatureUses",
    "CharacterFeature",
    "ClassFeatures",
    "FeatureCollection",
]
