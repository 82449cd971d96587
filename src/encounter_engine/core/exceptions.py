"""Custom exception hierarchy for the encounter engine.

All exceptions inherit from EncounterEngineError, enabling unified error
handling at the application boundary while preserving domain-specific
context in the ``details`` mapping.

Guarded no-ops (pausing a combat that is not active, advancing the turn of a
combat still in setup) are NOT exceptions. They are reported as rejected
results by the engine. The exceptions below are reserved for caller mistakes.

Example:
    >>> from encounter_engine.core.exceptions import PreconditionNotMet
    >>> raise PreconditionNotMet("Not enough combatants", operation="start")
"""

from __future__ import annotations

from typing import Any


class EncounterEngineError(Exception):
    """Base exception for all encounter engine errors.

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
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(EncounterEngineError):
    """Base exception for encounter state and log errors."""


class PreconditionNotMet(GameEngineError):
    """Raised when an operation is invoked without its hard preconditions.

    Starting an encounter with too few combatants, or building a recap for an
    encounter that never started or never ended, are caller mistakes rather
    than UI races.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        combat_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize precondition error with operation context.

        Args:
            message: Human-readable error description.
            operation: Name of the engine operation that was refused.
            combat_id: Identifier of the encounter involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        if combat_id:
            combined_details["combat_id"] = combat_id
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when dice rolling operations fail."""

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


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(EncounterEngineError):
    """Raised when engine configuration is invalid."""

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


class ValidationError(EncounterEngineError):
    """Raised when inbound collaborator data cannot be converted.

    This covers snapshots that are structurally valid but cannot become a
    combat entity (e.g. a record with no hit point maximum).
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    "EncounterEngineError",
    "GameEngineError",
    "PreconditionNotMet",
    "DiceRollError",
    "ConfigurationError",
    "ValidationError",
]
