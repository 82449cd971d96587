"""Pydantic V2 schemas for the post-encounter recap.

A recap is a read-only projection of an ended encounter and its log. It is
never mutated; ``annotate`` returns a new recap with the DM's additions.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from encounter_engine.models.enums import CombatEntityType, EventImportance


class ParticipantSummary(BaseModel):
    """Aggregated statistics for one participant.

    Attributes:
        id: Entity id.
        name: Entity display name.
        type: Player, NPC or monster.
        survived: Whether the entity ended above zero hit points.
        damage_dealt: Aggregated damage dealt.
        damage_taken: Aggregated damage taken.
        healing_done: Aggregated healing done.
        spells_used: Number of spell actions.
        conditions: Conditions held at the end of the encounter.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: str
    type: CombatEntityType
    survived: bool
    damage_dealt: Annotated[int, Field(ge=0)] = 0
    damage_taken: Annotated[int, Field(ge=0)] = 0
    healing_done: Annotated[int, Field(ge=0)] = 0
    spells_used: Annotated[int, Field(ge=0)] = 0
    conditions: tuple[str, ...] = ()


class MajorEvent(BaseModel):
    """A log entry singled out for the recap."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    round: Annotated[int, Field(ge=0)]
    event: str
    importance: EventImportance


class CombatRecap(BaseModel):
    """Summary of a finished encounter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    combat_id: str
    combat_name: str
    start_time: datetime
    end_time: datetime
    total_rounds: Annotated[int, Field(ge=0)]
    participants: tuple[ParticipantSummary, ...] = ()
    major_events: tuple[MajorEvent, ...] = ()
    loot: tuple[str, ...] | None = None
    experience: Annotated[int, Field(ge=0)] | None = None
    notes: str | None = None

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def survivors(self) -> list[ParticipantSummary]:
        return [p for p in self.participants if p.survived]

    def participant(self, entity_id: str) -> ParticipantSummary | None:
        return next((p for p in self.participants if p.id == entity_id), None)

    def annotate(
        self,
        *,
        loot: list[str] | tuple[str, ...] | None = None,
        experience: int | None = None,
        notes: str | None = None,
    ) -> CombatRecap:
        """Return a copy carrying the DM's loot, experience and notes.

        Arguments left as None keep their current value. Blank loot lines are
        dropped.
        """
        update: dict[str, object] = {}
        if loot is not None:
            update["loot"] = tuple(item.strip() for item in loot if item.strip())
        if experience is not None:
            if experience < 0:
                raise ValueError("experience cannot be negative")
            update["experience"] = experience
        if notes is not None:
            update["notes"] = notes
        return self.model_copy(update=update)

    def export_text(self) -> str:
        """Render the recap as a plain-text report."""
        minutes, seconds = divmod(int(self.duration.total_seconds()), 60)
        lines = [
            f"COMBAT RECAP: {self.combat_name}",
            "=" * 45,
            "",
            f"Duration: {minutes}m {seconds}s",
            f"Total rounds: {self.total_rounds}",
            "",
            "PARTICIPANTS:",
        ]
        for p in self.participants:
            outcome = "SURVIVED" if p.survived else "DEFEATED"
            lines.append(f"- {p.name} ({p.type.value.upper()}) - {outcome}")
            lines.append(f"    Damage dealt: {p.damage_dealt} | Damage taken: {p.damage_taken}")
            lines.append(f"    Healing done: {p.healing_done} | Spells used: {p.spells_used}")

        lines += ["", "MAJOR EVENTS:"]
        lines += [f"- Round {e.round}: {e.event}" for e in self.major_events]

        if self.loot:
            lines += ["", "LOOT:"]
            lines += [f"- {item}" for item in self.loot]
        if self.experience:
            lines += ["", f"EXPERIENCE AWARDED: {self.experience}"]
        if self.notes:
            lines += ["", "NOTES:", self.notes]
        return "\n".join(lines)


__all__ = [
    "ParticipantSummary",
    "MajorEvent",
    "CombatRecap",
]
