"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        EncounterEngineError: Base exception for all engine errors.
        PreconditionNotMet: Hard precondition failures (caller mistakes).
        ConfigurationError: Configuration-related errors.
        ValidationError: Inbound data conversion errors.

    Configuration:
        Settings: Main settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from encounter_engine.core.config import (
    EngineSettings,
    RecapSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from encounter_engine.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    EncounterEngineError,
    GameEngineError,
    PreconditionNotMet,
    ValidationError,
)
from encounter_engine.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "EncounterEngineError",
    "GameEngineError",
    "PreconditionNotMet",
    "DiceRollError",
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "EngineSettings",
    "RecapSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
