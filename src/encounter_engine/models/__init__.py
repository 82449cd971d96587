"""Pydantic V2 schemas for the encounter engine.

Submodules:
    enums: Enumeration types (status, entity type, action and log types).
    combat: Encounter aggregate, participants, round and action records.
    log: Narration stream (CombatLogEntry, CombatLog).
    recap: Post-encounter recap.
    snapshot: Inbound character/NPC snapshots.

Example:
    >>> from encounter_engine.models import Combat, CombatStatus
    >>> combat = Combat(name="Goblin Ambush")
    >>> combat.status == CombatStatus.SETUP
    True
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from encounter_engine.models.enums import (
    ActionType,
    CombatEntityType,
    CombatStatus,
    DamageType,
    EventImportance,
    LogEntryType,
    SnapshotKind,
)

# =============================================================================
# Encounter Aggregate
# =============================================================================
from encounter_engine.models.combat import (
    ActionDraft,
    Combat,
    CombatAction,
    CombatEntity,
    CombatMap,
    CombatRound,
    DamagePayload,
    GridPosition,
    GridSize,
    HitPoints,
    MovementPayload,
)

# =============================================================================
# Log, Recap, Snapshots
# =============================================================================
from encounter_engine.models.log import CombatLog, CombatLogEntry
from encounter_engine.models.recap import CombatRecap, MajorEvent, ParticipantSummary
from encounter_engine.models.snapshot import AbilityScores, EntitySnapshot, SnapshotHitPoints


__all__ = [
    # Enums
    "ActionType",
    "CombatEntityType",
    "CombatStatus",
    "DamageType",
    "EventImportance",
    "LogEntryType",
    "SnapshotKind",
    # Aggregate
    "ActionDraft",
    "Combat",
    "CombatAction",
    "CombatEntity",
    "CombatMap",
    "CombatRound",
    "DamagePayload",
    "GridPosition",
    "GridSize",
    "HitPoints",
    "MovementPayload",
    # Log
    "CombatLog",
    "CombatLogEntry",
    # Recap
    "CombatRecap",
    "MajorEvent",
    "ParticipantSummary",
    # Snapshots
    "AbilityScores",
    "EntitySnapshot",
    "SnapshotHitPoints",
]
