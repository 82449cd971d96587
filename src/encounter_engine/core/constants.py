"""Engine-wide constants for the encounter engine.

Condition labels are free-form strings on a combat entity; the list below is
the standard set offered to callers, not an enforced vocabulary.
"""

from __future__ import annotations

# =============================================================================
# Combatant Defaults
# =============================================================================

DEFAULT_SPEED = 30
"""Default walking speed in feet (most medium creatures)."""

DEFAULT_ARMOR_CLASS = 10
"""Armor class used when a snapshot does not carry one."""

DEFAULT_ABILITY_SCORE = 10
"""Ability score assumed when a snapshot omits it (modifier +0)."""

MAX_ARMOR_CLASS = 30
"""Highest armor class accepted on a combat entity."""

# =============================================================================
# Initiative
# =============================================================================

INITIATIVE_DIE = 20
"""Base die size for initiative rolls."""

SCALED_RANGE_PER_BONUS = 2
"""Extra die faces granted per point of positive initiative bonus."""

# =============================================================================
# Map Geometry
# =============================================================================

DEFAULT_CELL_SIZE = 30
"""Default map cell size in pixels."""

MAX_GRID_DIMENSION = 100
"""Largest accepted width/height of a combat map, in cells."""

# =============================================================================
# Conditions
# =============================================================================

COMBAT_CONDITIONS = (
    "Blinded",
    "Charmed",
    "Deafened",
    "Frightened",
    "Grappled",
    "Incapacitated",
    "Invisible",
    "Paralyzed",
    "Petrified",
    "Poisoned",
    "Prone",
    "Restrained",
    "Stunned",
    "Unconscious",
    "Exhaustion 1",
    "Exhaustion 2",
    "Exhaustion 3",
    "Exhaustion 4",
    "Exhaustion 5",
    "Exhaustion 6",
)
"""Standard condition labels offered by the roster editor."""


__all__ = [
    "DEFAULT_SPEED",
    "DEFAULT_ARMOR_CLASS",
    "DEFAULT_ABILITY_SCORE",
    "MAX_ARMOR_CLASS",
    "INITIATIVE_DIE",
    "SCALED_RANGE_PER_BONUS",
    "DEFAULT_CELL_SIZE",
    "MAX_GRID_DIMENSION",
    "COMBAT_CONDITIONS",
]
