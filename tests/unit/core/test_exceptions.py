"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from encounter_engine.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    EncounterEngineError,
    GameEngineError,
    PreconditionNotMet,
    ValidationError,
)


class TestEncounterEngineError:
    """Tests for the base EncounterEngineError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = EncounterEngineError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = EncounterEngineError("Test error", details={"key": "value", "count": 42})
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(EncounterEngineError("Test", details={"x": 1}))
        assert "EncounterEngineError" in repr_str
        assert "x" in repr_str


class TestGameEngineExceptions:
    """Tests for encounter state exceptions."""

    def test_precondition_context(self) -> None:
        """Test PreconditionNotMet records operation and combat id."""
        exc = PreconditionNotMet("Too few combatants", operation="start", combat_id="c-1")
        assert exc.details == {"operation": "start", "combat_id": "c-1"}

    def test_dice_roll_error_expression(self) -> None:
        """Test DiceRollError records the expression."""
        exc = DiceRollError("Bad roll", expression="1d")
        assert exc.details["expression"] == "1d"

    def test_inheritance(self) -> None:
        """Test engine exceptions share a base."""
        with pytest.raises(GameEngineError):
            raise PreconditionNotMet("x")
        with pytest.raises(EncounterEngineError):
            raise DiceRollError("x")


class TestConfigAndValidationExceptions:
    """Tests for configuration and validation exceptions."""

    def test_configuration_error_key(self) -> None:
        """Test ConfigurationError records the key."""
        exc = ConfigurationError("Bad config", config_key="aggregation")
        assert exc.details["config_key"] == "aggregation"

    def test_validation_error_fields(self) -> None:
        """Test ValidationError records field and value."""
        exc = ValidationError("Bad AC", field_name="armor_class", invalid_value=42)
        assert exc.details == {"field_name": "armor_class", "invalid_value": 42}
        assert isinstance(exc, EncounterEngineError)
