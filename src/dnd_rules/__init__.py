"""D&D 5E Character Rules Engine.

Deterministic rules math for D&D 5th Edition characters: ability scores,
proficiency, combat statistics, hit points and death saves, spellcasting
and limited-use features.

RULES ENGINE CONTRACT:
- Every function is pure; inputs in, frozen models out
- Rolls are inputs; only DiceRoller produces random numbers
- Out-of-domain input raises DomainError instead of being clamped
- "Nothing left" (slot, feature use, hit die) is returned as None

Example:
    >>> from dnd_rules import ClassLevel, multiclass_spell_slots, proficiency_bonus
    >>> proficiency_bonus(9)
    4
    >>> slots = multiclass_spell_slots([ClassLevel(class_key="cleric", level=3)])
    >>> [s.max for s in slots][:2]
    [4, 2]

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 value types and rule tables.
    engine: Rules functions, dice rolling and character sheet derivation.
"""

from __future__ import annotations

from dnd_rules import engine, models

# Core
from dnd_rules.core.config import RulesSettings, Settings, get_settings
from dnd_rules.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    DndRulesError,
    DomainError,
    InvalidRollError,
    RulesError,
    UnknownReferenceError,
)
from dnd_rules.core.logging import configure_logging, get_logger

# Rules engine and value types
from dnd_rules.engine import *  # noqa: F403
from dnd_rules.models import *  # noqa: F403


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "DndRulesError",
    "ConfigurationError",
    "RulesError",
    "DomainError",
    "InvalidRollError",
    "UnknownReferenceError",
    "DiceRollError",
    "Settings",
    "RulesSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Value types and rules
    *models.__all__,
    *engine.__all__,
]
