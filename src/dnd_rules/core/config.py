"""Configuration management for the D&D 5E character rules engine.

Settings are loaded with pydantic-settings from environment variables and
an optional .env file. The engine itself is pure; configuration only
supplies defaults for house-rule values (point-buy budget, ability score
cap, fixed vs. rolled hit points) and for logging.

Example:
    >>> from dnd_rules.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.point_buy_budget
    27

Environment Variables:
    DND_RULES_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DND_RULES_JSON_LOGS: Emit JSON log lines instead of console output
    DND_RULES_RULES_POINT_BUY_BUDGET: Point-buy budget (default 27)
    DND_RULES_RULES_PC_ABILITY_SCORE_CAP: Player character score cap (default 20)
    DND_RULES_RULES_USE_FIXED_HP: Use fixed hit points per level (default true)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd_rules.core.constants import (
    MAX_POINT_BUY_COST,
    MIN_PC_ABILITY_SCORE,
    MONSTER_ABILITY_SCORE_CAP,
    PC_ABILITY_SCORE_CAP,
    POINT_BUY_TOTAL,
)
from dnd_rules.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """House-rule defaults consumed by the engine.

    Attributes:
        pc_ability_score_cap: Maximum ability score total for player characters.
        point_buy_budget: Points available for point-buy generation.
        use_fixed_hp: Use the fixed per-level average instead of rolls.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_RULES_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    pc_ability_score_cap: int = Field(
        default=PC_ABILITY_SCORE_CAP,
        description="Maximum ability score for player characters",
    )
    point_buy_budget: int = Field(
        default=POINT_BUY_TOTAL,
        description="Total points available for point buy",
    )
    use_fixed_hp: bool = Field(
        default=True,
        description="Use fixed average hit points after level 1",
    )

    @model_validator(mode="after")
    def validate_rule_ranges(self) -> "RulesSettings":
        """Ensure house-rule values stay inside the engine's domains.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If a value is outside its allowed range.
        """
        if not MIN_PC_ABILITY_SCORE <= self.pc_ability_score_cap <= MONSTER_ABILITY_SCORE_CAP:
            raise ConfigurationError(
                f"pc_ability_score_cap must be between {MIN_PC_ABILITY_SCORE} and "
                f"{MONSTER_ABILITY_SCORE_CAP}, got {self.pc_ability_score_cap}",
                config_key="pc_ability_score_cap",
            )
        if not 0 <= self.point_buy_budget <= MAX_POINT_BUY_COST:
            raise ConfigurationError(
                f"point_buy_budget must be between 0 and {MAX_POINT_BUY_COST}, "
                f"got {self.point_buy_budget}",
                config_key="point_buy_budget",
            )
        return self


class Settings(BaseSettings):
    """Main settings aggregating all configuration domains.

    Attributes:
        log_level: Logging level.
        json_logs: Render logs as JSON.
        rules: House-rule defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Primarily useful in tests or after environment variables change.
    """
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
