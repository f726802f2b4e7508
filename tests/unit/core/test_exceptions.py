"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from dnd_rules.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    DndRulesError,
    DomainError,
    InvalidRollError,
    RulesError,
    UnknownReferenceError,
)


class TestDndRulesError:
    """Tests for the base DndRulesError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = DndRulesError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = DndRulesError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        exc = DndRulesError("Test", details={"x": 1})
        repr_str = repr(exc)
        assert "DndRulesError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestRulesExceptions:
    """Tests for rules computation exceptions."""

    def test_domain_error_context(self) -> None:
        """Test DomainError with field info."""
        exc = DomainError("Level must be 1-20", field_name="level", invalid_value=0)
        assert exc.details["field_name"] == "level"
        assert exc.details["invalid_value"] == 0

    def test_domain_error_is_value_error(self) -> None:
        """Test DomainError can be caught as a ValueError."""
        with pytest.raises(ValueError):
            raise DomainError("Negative damage", field_name="damage", invalid_value=-1)

    def test_invalid_roll_error(self) -> None:
        """Test InvalidRollError carries the die and roll."""
        exc = InvalidRollError("Invalid roll for d10: 11", die="d10", roll=11)
        assert exc.details["die"] == "d10"
        assert exc.details["invalid_value"] == 11
        assert exc.details["field_name"] == "roll"
        assert isinstance(exc, DomainError)

    def test_unknown_reference_error(self) -> None:
        """Test UnknownReferenceError with lookup context."""
        exc = UnknownReferenceError("Unknown class: artificer", kind="class", key="artificer")
        assert exc.details["kind"] == "class"
        assert exc.details["key"] == "artificer"
        assert isinstance(exc, LookupError)
        assert not isinstance(exc, ValueError)

    def test_dice_roll_error(self) -> None:
        """Test DiceRollError with expression."""
        exc = DiceRollError("Invalid dice", expression="1d0+5")
        assert exc.details["expression"] == "1d0+5"

    @pytest.mark.parametrize(
        "exc",
        [
            DomainError("x"),
            InvalidRollError("x"),
            UnknownReferenceError("x"),
            DiceRollError("x"),
        ],
    )
    def test_rules_inheritance(self, exc: DndRulesError) -> None:
        """Test every rules exception shares the engine base classes."""
        assert isinstance(exc, RulesError)
        assert isinstance(exc, DndRulesError)


class TestConfigurationExceptions:
    """Tests for configuration exceptions."""

    def test_configuration_error(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError("Cap out of range", config_key="pc_ability_score_cap")
        assert exc.details["config_key"] == "pc_ability_score_cap"
        assert not isinstance(exc, RulesError)


class TestExceptionChaining:
    """Tests for exception chaining behavior."""

    def test_raise_from(self) -> None:
        """Test that exceptions can be properly chained."""
        original = KeyError("wizard")

        with pytest.raises(UnknownReferenceError) as exc_info:
            try:
                raise original
            except KeyError as e:
                raise UnknownReferenceError("Unknown class", kind="class") from e

        assert exc_info.value.__cause__ is original
