"""Feature aggregation and limited-use resource tracking for D&D 5E.

Collects class features, species traits, the background feature and feats
into one collection, and tracks limited uses through rests.

Reset rules:
    short rest: resets features that recharge on a short rest.
    long rest: resets short rest, long rest and dawn features.
    ``other`` features are never reset by a rest.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from dnd_rules.core.logging import get_logger
from dnd_rules.models.components import (
    CharacterFeature,
    ClassFeatures,
    ClassLevel,
    FeatureCollection,
    FeatureUses,
)
from dnd_rules.models.enums import ResetOn, RestType
from dnd_rules.models.progression import (
    JACK_OF_ALL_TRADES_CLASS,
    JACK_OF_ALL_TRADES_LEVEL,
    normalize_class_key,
)


logger = get_logger(__name__)

_RESETS_ON_REST: dict[RestType, frozenset[ResetOn]] = {
    RestType.SHORT: frozenset({ResetOn.SHORT}),
    RestType.LONG: frozenset({ResetOn.SHORT, ResetOn.LONG, ResetOn.DAWN}),
}


# =============================================================================
# Aggregation
# =============================================================================


def _with_source(feature: CharacterFeature, source: str) -> CharacterFeature:
    """Tag a feature with its origin unless it already names one.

    An explicit source (e.g. 'Class: Fighter (Champion)') is kept as given.
    """
    if feature.source:
        return feature
    return feature.model_copy(update={"source": source})


def features_up_to_level(
    features: Iterable[CharacterFeature],
    level: int,
) -> list[CharacterFeature]:
    """Features available at a level; a missing requirement counts as level 1."""
    return [f for f in features if (f.level_required or 1) <= level]


def features_at_level(
    features: Iterable[CharacterFeature],
    level: int,
) -> list[CharacterFeature]:
    """Features gained at exactly this level (e.g. to show on level up)."""
    return [f for f in features if (f.level_required or 1) == level]


def aggregate_features(
    class_features: Iterable[ClassFeatures | Mapping[str, Any]],
    species_traits: Iterable[CharacterFeature] = (),
    background_feature: CharacterFeature | None = None,
    feats: Iterable[CharacterFeature] = (),
) -> FeatureCollection:
    """Collect every feature a character has.

    Class features are kept only up to the levels taken in their class.
    Features without a source are tagged with where they came from
    ('Class: Fighter', 'Species', 'Background', 'Feat'). Features that
    already carry a source keep it.

    Args:
        class_features: Feature list and level for each class.
        species_traits: Species traits.
        background_feature: Background feature, if any.
        feats: Feats taken.

    Returns:
        Features grouped by origin, plus ``all_features`` in order.
    """
    collected: list[CharacterFeature] = []
    for entry in class_features:
        group = entry if isinstance(entry, ClassFeatures) else ClassFeatures.model_validate(entry)
        display = ClassLevel(class_key=group.class_key, level=group.level).display_name
        collected.extend(
            _with_source(feature, f"Class: {display}")
            for feature in features_up_to_level(group.features, group.level)
        )

    collection = FeatureCollection(
        class_features=tuple(collected),
        species_traits=tuple(_with_source(f, "Species") for f in species_traits),
        background_feature=(
            _with_source(background_feature, "Background") if background_feature else None
        ),
        feats=tuple(_with_source(f, "Feat") for f in feats),
    )
    logger.debug("Features aggregated", count=collection.count)
    return collection


# =============================================================================
# Limited Uses
# =============================================================================


def has_limited_uses(feature: CharacterFeature) -> bool:
    return feature.uses is not None


def remaining_uses(feature: CharacterFeature) -> int | None:
    """Uses left, or None for a passive feature."""
    return feature.uses.remaining if feature.uses is not None else None


def has_uses_remaining(feature: CharacterFeature) -> bool:
    """Passive features are always available."""
    return feature.uses is None or feature.uses.remaining > 0


def count_limited_use_features(features: Iterable[CharacterFeature]) -> int:
    return sum(1 for f in features if has_limited_uses(f))


def use_feature(feature: CharacterFeature) -> CharacterFeature | None:
    """Spend one use of a feature.

    Returns:
        The feature with one more use spent, the same feature if it is
        passive, or None if no uses remain.
    """
    if feature.uses is None:
        return feature
    if feature.uses.remaining <= 0:
        logger.debug("Feature depleted", feature_id=feature.id)
        return None

    uses = feature.uses.model_copy(update={"used": feature.uses.used + 1})
    logger.debug("Feature used", feature_id=feature.id, remaining=uses.remaining)
    return feature.model_copy(update={"uses": uses})


def reset_feature_uses(feature: CharacterFeature) -> CharacterFeature:
    """Restore all uses of a feature."""
    if feature.uses is None:
        return feature
    return feature.model_copy(update={"uses": feature.uses.model_copy(update={"used": 0})})


def _resets_on(feature: CharacterFeature, rest_type: RestType) -> bool:
    return feature.uses is not None and feature.uses.reset_on in _RESETS_ON_REST[rest_type]


def reset_features_on_rest(
    features: Iterable[CharacterFeature],
    rest_type: RestType | str,
) -> list[CharacterFeature]:
    """Reset every feature that recharges on this kind of rest."""
    rest = RestType(rest_type)
    result = [reset_feature_uses(f) if _resets_on(f, rest) else f for f in features]
    logger.debug(
        "Features reset on rest",
        rest_type=rest.value,
        reset=[f.id for f in result if _resets_on(f, rest)],
    )
    return result


def features_reset_on_rest(
    features: Iterable[CharacterFeature],
    rest_type: RestType | str,
) -> list[CharacterFeature]:
    """List the limited-use features this kind of rest would reset."""
    rest = RestType(rest_type)
    return [f for f in features if _resets_on(f, rest)]


# =============================================================================
# Search and Organization
# =============================================================================


def find_feature_by_id(
    features: Iterable[CharacterFeature],
    feature_id: str,
) -> CharacterFeature | None:
    return next((f for f in features if f.id == feature_id), None)


def has_feature(features: Iterable[CharacterFeature], feature_id: str) -> bool:
    return find_feature_by_id(features, feature_id) is not None


def features_by_source(
    features: Iterable[CharacterFeature],
    source: str,
) -> list[CharacterFeature]:
    """Features whose source contains the given text ('Class' matches 'Class: Bard')."""
    return [f for f in features if source in f.source]


def feature_count_by_source(features: Iterable[CharacterFeature], source: str) -> int:
    """Number of features whose source is exactly the given source."""
    return sum(1 for f in features if f.source == source)


def search_features(features: Iterable[CharacterFeature], query: str) -> list[CharacterFeature]:
    """Case-insensitive search over feature names and descriptions."""
    needle = query.lower()
    return [f for f in features if needle in f.name.lower() or needle in f.description.lower()]


def passive_features(features: Iterable[CharacterFeature]) -> list[CharacterFeature]:
    return [f for f in features if f.uses is None]


def active_features(features: Iterable[CharacterFeature]) -> list[CharacterFeature]:
    return [f for f in features if f.uses is not None]


def group_features_by_source(
    features: Iterable[CharacterFeature],
) -> dict[str, list[CharacterFeature]]:
    groups: dict[str, list[CharacterFeature]] = {}
    for feature in features:
        groups.setdefault(feature.source, []).append(feature)
    return groups


def sort_features_by_level(features: Iterable[CharacterFeature]) -> list[CharacterFeature]:
    """Sort by required level; features without one come first."""
    return sorted(features, key=lambda f: f.level_required or 0)


def feature_summary(feature: CharacterFeature) -> str:
    """One-line summary, e.g. 'Rage (Level 1) [2/3]'."""
    summary = feature.name
    if feature.level_required is not None:
        summary += f" (Level {feature.level_required})"
    if feature.uses is not None:
        summary += f" [{feature.uses.remaining}/{feature.uses.max}]"
    return summary


# =============================================================================
# Construction
# =============================================================================


def create_limited_use_feature(
    feature_id: str,
    name: str,
    description: str,
    source: str,
    max_uses: int,
    reset_on: ResetOn | str,
    level: int | None = None,
) -> CharacterFeature:
    """Build a feature with a fresh pool of limited uses."""
    return CharacterFeature(
        id=feature_id,
        name=name,
        description=description,
        source=source,
        level_required=level,
        uses=FeatureUses(max=max_uses, used=0, reset_on=ResetOn(reset_on)),
    )


def create_passive_feature(
    feature_id: str,
    name: str,
    description: str,
    source: str,
    level: int | None = None,
) -> CharacterFeature:
    return CharacterFeature(
        id=feature_id,
        name=name,
        description=description,
        source=source,
        level_required=level,
    )


def has_jack_of_all_trades(
    class_levels: Iterable[ClassLevel | Mapping[str, Any]] | Mapping[str, int],
) -> bool:
    """Whether the character has Jack of All Trades (bard level 2 or higher).

    Args:
        class_levels: ClassLevel entries, or a mapping of class key to level.
    """
    if isinstance(class_levels, Mapping):
        pairs = [(key, level) for key, level in class_levels.items()]
    else:
        entries = [
            c if isinstance(c, ClassLevel) else ClassLevel.model_validate(c) for c in class_levels
        ]
        pairs = [(c.class_key, c.level) for c in entries]

    return any(
        normalize_class_key(key) == JACK_OF_ALL_TRADES_CLASS and level >= JACK_OF_ALL_TRADES_LEVEL
        for key, level in pairs
    )


__all__ = [
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
]
