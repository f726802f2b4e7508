"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DndRulesError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        RulesError: Base for rules computation errors.
        DomainError: Input outside its rules domain.
        InvalidRollError: Impossible die result.
        UnknownReferenceError: Unknown skill or class key.
        DiceRollError: Invalid dice expression.

    Configuration:
        Settings: Main settings class.
        RulesSettings: House-rule defaults.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a logger bound to its engine component.
        log_context: Bind fields to log entries within a block.
"""

from __future__ import annotations

from dnd_rules.core.config import (
    RulesSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from dnd_rules.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    DndRulesError,
    DomainError,
    InvalidRollError,
    RulesError,
    UnknownReferenceError,
)
from dnd_rules.core.logging import (
    configure_from_settings,
    configure_logging,
    get_logger,
    log_context,
)


__all__ = [
    # Exceptions
    "DndRulesError",
    "ConfigurationError",
    "RulesError",
    "DomainError",
    "InvalidRollError",
    "UnknownReferenceError",
    "DiceRollError",
    # Configuration
    "Settings",
    "RulesSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "log_context",
]
