"""Enumeration types for the encounter engine.

These enums mirror the plain string vocabularies that cross the engine
boundary, so every value serializes to the same string callers send in.
"""

from __future__ import annotations

from enum import StrEnum


class CombatStatus(StrEnum):
    """Encounter lifecycle states.

    ``setup -> active <-> paused -> ended``; ``ended`` is terminal.
    """

    SETUP = "setup"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


class CombatEntityType(StrEnum):
    """Kinds of combat participants."""

    PLAYER = "player"
    NPC = "npc"
    MONSTER = "monster"


class ActionType(StrEnum):
    """Mechanical action categories recorded in round records."""

    ATTACK = "attack"
    MOVE = "move"
    DASH = "dash"
    DODGE = "dodge"
    HELP = "help"
    HIDE = "hide"
    READY = "ready"
    SEARCH = "search"
    SPELL = "spell"
    ITEM = "item"
    OTHER = "other"


class DamageType(StrEnum):
    """Damage types a resolved damage payload can carry."""

    SLASHING = "slashing"
    PIERCING = "piercing"
    BLUDGEONING = "bludgeoning"
    FIRE = "fire"
    COLD = "cold"
    ACID = "acid"
    POISON = "poison"
    LIGHTNING = "lightning"
    THUNDER = "thunder"
    NECROTIC = "necrotic"
    RADIANT = "radiant"
    PSYCHIC = "psychic"
    FORCE = "force"


class LogEntryType(StrEnum):
    """Narration categories in the combat log stream."""

    ACTION = "action"
    DAMAGE = "damage"
    HEALING = "healing"
    CONDITION = "condition"
    DEATH = "death"
    SYSTEM = "system"
    DM_NOTE = "dm_note"

    @property
    def label(self) -> str:
        """Get the display label used in text exports.

        Returns:
            Title-cased label (e.g., 'DM Note' for DM_NOTE).
        """
        if self is LogEntryType.DM_NOTE:
            return "DM Note"
        return self.value.capitalize()


class EventImportance(StrEnum):
    """Importance tag on recap major events."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SnapshotKind(StrEnum):
    """Which external record collaborator a snapshot came from."""

    CHARACTER = "character"
    NPC = "npc"


__all__ = [
    "CombatStatus",
    "CombatEntityType",
    "ActionType",
    "DamageType",
    "LogEntryType",
    "EventImportance",
    "SnapshotKind",
]
