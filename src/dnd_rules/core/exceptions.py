"""Custom exception hierarchy for the D&D 5E character rules engine.

Every exception inherits from DndRulesError, so a caller can catch all
engine errors at its boundary while still telling domain errors (bad
input), lookup failures (reference data out of sync with the engine's
tables) and configuration problems apart.

Example:
    >>> from dnd_rules.core.exceptions import DomainError
    >>> raise DomainError("Level must be 1-20", field_name="level", invalid_value=0)
"""

from __future__ import annotations

from typing import Any


class DndRulesError(Exception):
    """Base exception for all rules engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation including class name, message, and details.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(DndRulesError):
    """Raised when engine configuration is invalid.

    This includes out-of-range house-rule values or settings that cannot
    be loaded from the environment.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesError(DndRulesError):
    """Base exception for all rules engine computation errors."""


class DomainError(RulesError, ValueError):
    """Raised when an input lies outside its numeric rules domain.

    Examples are an ability score outside 1-30, a level outside 1-20 or
    negative damage. The engine never clamps such values silently; the
    caller is expected to validate user input first.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize domain error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the argument that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


class InvalidRollError(DomainError):
    """Raised when a die result is impossible for the die rolled.

    A d10 cannot come up 11, and a d20 cannot come up 0.
    """

    def __init__(
        self,
        message: str,
        *,
        die: str | None = None,
        roll: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid roll error with die context.

        Args:
            message: Human-readable error description.
            die: The die type (e.g., 'd10').
            roll: The rejected roll value.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if die:
            combined_details["die"] = die
        super().__init__(
            message,
            field_name="roll",
            invalid_value=roll,
            details=combined_details,
        )


class UnknownReferenceError(RulesError, LookupError):
    """Raised when a skill or class key is missing from the engine tables.

    This is a data contract violation between the reference data layer
    and the engine, not a user error, so it is never defaulted away.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize unknown reference error with lookup context.

        Args:
            message: Human-readable error description.
            kind: The table that was searched (e.g., 'skill', 'class').
            key: The key that was not found.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if kind:
            combined_details["kind"] = kind
        if key is not None:
            combined_details["key"] = key
        super().__init__(message, details=combined_details)


class DiceRollError(RulesError):
    """Raised when dice rolling operations fail.

    This typically occurs when parsing invalid dice notation.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


__all__ = [
    "DndRulesError",
    "ConfigurationError",
    "RulesError",
    "DomainError",
    "InvalidRollError",
    "UnknownReferenceError",
    "DiceRollError",
]
