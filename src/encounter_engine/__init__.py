"""Encounter Engine - turn-based combat encounters for tabletop RPGs.

Tracks a single encounter from setup to its end: the roster, initiative
order, turns and rounds, hit points and conditions, a narrated combat log,
and a recap once the encounter is over.

All state is immutable and passed by value. Every operation takes the
current ``Combat`` and ``CombatLog`` and returns an ``EngineResult``.

Example:
    >>> from encounter_engine import EncounterEngine, EntitySnapshot
    >>> engine = EncounterEngine()
    >>> combat, log = engine.create("Goblin Ambush").unwrap()
    >>> combat, log = engine.add_entity(combat, log, hero).unwrap()
    >>> combat, log = engine.add_entity(combat, log, goblin).unwrap()
    >>> combat, log = engine.start(combat, log).unwrap()
    >>> combat.current_entity_id == combat.initiative_order[0]
    True

Modules:
    core: Configuration, logging, constants and base exceptions.
    models: Pydantic V2 schemas for encounters, logs, recaps and snapshots.
    engine: State machine, roster editor, initiative, recap and registry.
"""

from __future__ import annotations

# Core
from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.exceptions import EncounterEngineError, PreconditionNotMet
from encounter_engine.core.logging import configure_logging, get_logger

# Models
from encounter_engine.models import (
    ActionDraft,
    ActionType,
    Combat,
    CombatEntity,
    CombatEntityType,
    CombatLog,
    CombatLogEntry,
    CombatMap,
    CombatRecap,
    CombatStatus,
    EntitySnapshot,
    GridPosition,
    LogEntryType,
)

# Engine
from encounter_engine.engine import (
    EncounterEngine,
    EncounterRegistry,
    EngineResult,
    Outcome,
    create_map,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "EncounterEngineError",
    "PreconditionNotMet",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "ActionDraft",
    "ActionType",
    "Combat",
    "CombatEntity",
    "CombatEntityType",
    "CombatLog",
    "CombatLogEntry",
    "CombatMap",
    "CombatRecap",
    "CombatStatus",
    "EntitySnapshot",
    "GridPosition",
    "LogEntryType",
    # Engine
    "EncounterEngine",
    "EncounterRegistry",
    "EngineResult",
    "Outcome",
    "create_map",
]
