"""The combat log: human-readable narration of an encounter.

The log is a second append-only stream next to the ``CombatAction`` records
kept inside round records. Round records are the mechanical history of the
encounter; the log narrates every state change (lifecycle transitions, hit
point changes, conditions, deaths, DM notes) and is the data source of the
recap. The log is not stored inside ``Combat``; it is its own value keyed by
``combat_id``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from encounter_engine.models.combat import new_id
from encounter_engine.models.enums import ActionType, LogEntryType


class CombatLogEntry(BaseModel):
    """One narrated event.

    Attributes:
        id: Unique entry identifier.
        combat_id: Encounter this entry belongs to.
        round: Encounter round when the entry was written (0 before start).
        message: Narration text.
        type: Narration category.
        entity_id: Actor or subject of the entry. For damage and healing this
            is the source, when known.
        target_id: Entity on the receiving end, when there is one.
        amount: Hit point amount for damage/healing entries.
        action_type: Mechanical action category for mirrored actions.
        timestamp: When the entry was written.
        is_visible: Whether players may see the entry.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(default_factory=new_id)
    combat_id: str
    round: Annotated[int, Field(ge=0)]
    message: str
    type: LogEntryType
    entity_id: str | None = None
    target_id: str | None = None
    amount: Annotated[int, Field(ge=0)] | None = None
    action_type: ActionType | None = None
    timestamp: datetime
    is_visible: bool = True

    def involves(self, entity_id: str) -> bool:
        return entity_id in (self.entity_id, self.target_id)

    def format_line(self) -> str:
        """Render the entry as one line of a text export."""
        round_tag = f" [R{self.round}]" if self.round > 0 else ""
        return (
            f"{self.timestamp.strftime('%H:%M:%S')}{round_tag} "
            f"[{self.type.label}] {self.message}"
        )


class CombatLog(BaseModel):
    """Append-only narration stream of one encounter.

    ``append`` returns a new log; existing entries are never edited or
    removed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    combat_id: str
    entries: tuple[CombatLogEntry, ...] = ()

    def append(
        self,
        message: str,
        type: LogEntryType,
        *,
        round: int,
        timestamp: datetime,
        entity_id: str | None = None,
        target_id: str | None = None,
        amount: int | None = None,
        action_type: ActionType | None = None,
        is_visible: bool = True,
    ) -> CombatLog:
        """Return a new log with one more entry at the end."""
        entry = CombatLogEntry(
            combat_id=self.combat_id,
            round=round,
            message=message,
            type=type,
            entity_id=entity_id,
            target_id=target_id,
            amount=amount,
            action_type=action_type,
            timestamp=timestamp,
            is_visible=is_visible,
        )
        return self.model_copy(update={"entries": (*self.entries, entry)})

    @property
    def last(self) -> CombatLogEntry | None:
        return self.entries[-1] if self.entries else None

    def filter(
        self,
        *,
        type: LogEntryType | None = None,
        search: str | None = None,
        visible_only: bool = False,
    ) -> list[CombatLogEntry]:
        """Select entries by type and case-insensitive message search.

        Args:
            type: Keep only entries of this type.
            search: Keep only entries whose message contains this text.
            visible_only: Drop entries hidden from players.

        Returns:
            Matching entries in timestamp order.
        """
        needle = search.lower() if search else None
        matches = [
            entry
            for entry in self.entries
            if (type is None or entry.type == type)
            and (needle is None or needle in entry.message.lower())
            and (not visible_only or entry.is_visible)
        ]
        return sorted(matches, key=lambda entry: entry.timestamp)

    def of_type(self, type: LogEntryType) -> list[CombatLogEntry]:
        return [entry for entry in self.entries if entry.type == type]

    def for_entity(self, entity_id: str) -> list[CombatLogEntry]:
        """Entries where the entity is the actor or the target."""
        return [entry for entry in self.entries if entry.involves(entity_id)]

    def export_text(self, *, visible_only: bool = False) -> str:
        """Render the log as plain text, one entry per line."""
        return "\n".join(entry.format_line() for entry in self.filter(visible_only=visible_only))


__all__ = [
    "CombatLogEntry",
    "CombatLog",
]
