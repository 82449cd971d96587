"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the encounter engine test suite.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Test Doubles
# =============================================================================


class FixedInitiative:
    """Initiative strategy that always rolls ``10 + bonus``."""

    name = "fixed"

    def roll(self, bonus: int) -> int:
        return 10 + bonus


class StepClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from encounter_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "ENCOUNTER_ENGINE_DEBUG": "true",
        "ENCOUNTER_ENGINE_LOG_LEVEL": "DEBUG",
        "ENCOUNTER_ENGINE_ENGINE_INITIATIVE_STRATEGY": "standard",
        "ENCOUNTER_ENGINE_RECAP_AGGREGATION": "summed",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings() -> Any:
    """Default settings, unaffected by the settings cache."""
    from encounter_engine.core.config import Settings

    return Settings()


# =============================================================================
# Snapshot Fixtures
# =============================================================================


@pytest.fixture
def hero_snapshot() -> Any:
    """A level-appropriate fighter record (DEX 14, initiative bonus +2)."""
    from encounter_engine.models.snapshot import EntitySnapshot

    return EntitySnapshot.model_validate(
        {
            "id": "char-thorin",
            "name": "Thorin",
            "kind": "character",
            "armor_class": 16,
            "hit_points": {"current": 30, "maximum": 30},
            "ability_scores": {"strength": 16, "dexterity": 14, "constitution": 15},
            "speed": 25,
        }
    )


@pytest.fixture
def goblin_snapshot() -> Any:
    """A hostile goblin NPC record (DEX 12, initiative bonus +1)."""
    from encounter_engine.models.snapshot import EntitySnapshot

    return EntitySnapshot.model_validate(
        {
            "id": "npc-goblin",
            "name": "Goblin",
            "kind": "npc",
            "npc_role": "enemy",
            "armor_class": 13,
            "hit_points": {"current": 7, "maximum": 7},
            "ability_scores": {"dexterity": 12},
        }
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from encounter_engine.engine.dice import DiceRoller

    return DiceRoller(seed=42)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def engine(settings: Any, clock: StepClock) -> Any:
    """Engine with deterministic initiative (10 + bonus) and clock.

    Returns:
        EncounterEngine instance.
    """
    from encounter_engine.engine.engine import EncounterEngine

    return EncounterEngine(settings, strategy=FixedInitiative(), clock=clock)


@pytest.fixture
def setup_combat(engine: Any, hero_snapshot: Any, goblin_snapshot: Any) -> tuple[Any, Any]:
    """Encounter in setup with Thorin and a goblin on the roster.

    Returns:
        ``(combat, log)`` tuple.
    """
    from encounter_engine.models.combat import GridPosition

    combat, log = engine.create("Goblin Ambush", "Ambush on the forest road").unwrap()
    combat, log = engine.add_entity(combat, log, hero_snapshot, GridPosition(x=1, y=1)).unwrap()
    combat, log = engine.add_entity(combat, log, goblin_snapshot, GridPosition(x=4, y=2)).unwrap()
    return combat, log


@pytest.fixture
def active_combat(engine: Any, setup_combat: tuple[Any, Any]) -> tuple[Any, Any]:
    """Started encounter: round 1, Thorin (12) acts before the goblin (11).

    Returns:
        ``(combat, log)`` tuple.
    """
    return engine.start(*setup_combat).unwrap()
