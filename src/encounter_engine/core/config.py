"""Configuration management for the encounter engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and runtime
configuration overrides.

Example:
    >>> from encounter_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.engine.initiative_strategy
    'scaled'

Environment Variables:
    ENCOUNTER_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ENCOUNTER_ENGINE_JSON_LOGS: Emit JSON log lines instead of console output
    ENCOUNTER_ENGINE_ENGINE_INITIATIVE_STRATEGY: 'standard' or 'scaled'
    ENCOUNTER_ENGINE_ENGINE_MIN_ENTITIES_TO_START: Minimum roster size for start
    ENCOUNTER_ENGINE_RECAP_AGGREGATION: 'weighted' or 'summed'
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from encounter_engine.core.exceptions import ConfigurationError


class EngineSettings(BaseSettings):
    """Configuration for the encounter state machine and initiative roller.

    Attributes:
        initiative_strategy: Named initiative distribution to use.
        min_entities_to_start: Minimum roster size required by ``start``.
        dice_seed: Optional seed for reproducible initiative rolls.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    initiative_strategy: Literal["standard", "scaled"] = Field(
        default="scaled",
        description="Initiative distribution strategy",
    )
    min_entities_to_start: int = Field(
        default=2,
        ge=1,
        le=100,
        description="Minimum number of combatants required to start",
    )
    dice_seed: int | None = Field(
        default=None,
        description="Random seed for reproducible rolls",
    )


class RecapSettings(BaseSettings):
    """Configuration for the recap generator.

    Attributes:
        aggregation: 'weighted' counts events with a fixed weight per event,
            'summed' adds up the logged amounts.
        damage_weight: Value credited per damage event under 'weighted'.
        healing_weight: Value credited per healing event under 'weighted'.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_RECAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    aggregation: Literal["weighted", "summed"] = Field(
        default="weighted",
        description="Recap aggregation strategy",
    )
    damage_weight: int = Field(default=5, ge=0, description="Weight per damage event")
    healing_weight: int = Field(default=3, ge=0, description="Weight per healing event")

    @model_validator(mode="after")
    def validate_weights(self) -> "RecapSettings":
        """Ensure weighted aggregation can produce a non-zero figure.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If both weights are zero under 'weighted'.
        """
        if self.aggregation == "weighted" and self.damage_weight == 0 and self.healing_weight == 0:
            raise ConfigurationError(
                "Weighted recap aggregation needs at least one non-zero weight",
                config_key="damage_weight",
            )
        return self


class Settings(BaseSettings):
    """Main settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines.
        engine: State machine and initiative settings.
        recap: Recap generator settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCOUNTER_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Encounter Engine", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    engine: EngineSettings = Field(default_factory=EngineSettings)
    recap: RecapSettings = Field(default_factory=RecapSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "EngineSettings",
    "RecapSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
