"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the D&D 5E rules engine test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd_rules.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def house_rule_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set house-rule environment variables.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "DND_RULES_RULES_POINT_BUY_BUDGET": "30",
        "DND_RULES_RULES_PC_ABILITY_SCORE_CAP": "22",
        "DND_RULES_RULES_USE_FIXED_HP": "false",
        "DND_RULES_LOG_LEVEL": "DEBUG",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Ability Score Fixtures
# =============================================================================


@pytest.fixture
def sample_ability_scores() -> dict[str, int]:
    """Provide a standard array assignment for a fighter.

    Returns:
        Dictionary of ability scores keyed by ability abbreviation.
    """
    return {
        "STR": 15,
        "DEX": 14,
        "CON": 13,
        "INT": 12,
        "WIS": 10,
        "CHA": 8,
    }


@pytest.fixture
def sample_score_set(sample_ability_scores: dict[str, int]) -> Any:
    """Create an AbilityScoreSet from the sample scores.

    Returns:
        AbilityScoreSet with no bonuses applied.
    """
    from dnd_rules.engine.abilities import calculate_ability_scores

    return calculate_ability_scores(sample_ability_scores)


# =============================================================================
# Feature Fixtures
# =============================================================================


@pytest.fixture
def rage() -> Any:
    """A long-rest limited-use feature with three uses."""
    from dnd_rules.engine.features import create_limited_use_feature

    return create_limited_use_feature(
        "rage",
        "Rage",
        "Enter a battle fury for advantage on Strength checks.",
        "",
        max_uses=3,
        reset_on="long",
        level=1,
    )


@pytest.fixture
def second_wind() -> Any:
    """A short-rest limited-use feature with one use."""
    from dnd_rules.engine.features import create_limited_use_feature

    return create_limited_use_feature(
        "second-wind",
        "Second Wind",
        "Regain hit points as a bonus action.",
        "Class: Fighter",
        max_uses=1,
        reset_on="short",
        level=1,
    )


@pytest.fixture
def darkvision() -> Any:
    """A passive species trait."""
    from dnd_rules.engine.features import create_passive_feature

    return create_passive_feature(
        "darkvision",
        "Darkvision",
        "See in dim light within 60 feet as if it were bright light.",
        "",
    )


@pytest.fixture
def sample_features(rage: Any, second_wind: Any, darkvision: Any) -> list[Any]:
    """Provide a mixed list of passive and limited-use features."""
    return [rage, second_wind, darkvision]


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from dnd_rules.engine.dice import DiceRoller

    return DiceRoller(seed=42)
