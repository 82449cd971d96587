"""Inbound entity snapshots from the character/NPC record collaborators.

A snapshot is a copy of a record's combat-relevant stats taken when the
entity joins an encounter. It is not kept in sync with the source record.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from encounter_engine.core.constants import DEFAULT_ABILITY_SCORE
from encounter_engine.models.enums import SnapshotKind


class SnapshotHitPoints(BaseModel):
    """Hit points as the record collaborator stores them."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    current: int
    maximum: Annotated[int, Field(ge=1)]
    temporary: Annotated[int, Field(ge=0)] = 0


class AbilityScores(BaseModel):
    """The six ability scores; omitted scores default to 10."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    strength: Annotated[int, Field(ge=1, le=30)] = DEFAULT_ABILITY_SCORE
    dexterity: Annotated[int, Field(ge=1, le=30)] = DEFAULT_ABILITY_SCORE
    constitution: Annotated[int, Field(ge=1, le=30)] = DEFAULT_ABILITY_SCORE
    intelligence: Annotated[int, Field(ge=1, le=30)] = DEFAULT_ABILITY_SCORE
    wisdom: Annotated[int, Field(ge=1, le=30)] = DEFAULT_ABILITY_SCORE
    charisma: Annotated[int, Field(ge=1, le=30)] = DEFAULT_ABILITY_SCORE

    @staticmethod
    def modifier(score: int) -> int:
        """Standard ability modifier: floor((score - 10) / 2)."""
        return (score - 10) // 2

    @property
    def dexterity_modifier(self) -> int:
        return self.modifier(self.dexterity)


class EntitySnapshot(BaseModel):
    """A character or NPC record as handed to the engine.

    Attributes:
        id: Id of the source record (kept as a weak back-reference).
        name: Display name.
        kind: Which collaborator the record came from.
        npc_role: NPC disposition; 'enemy' NPCs join as monsters.
        armor_class: Armor class, if the record has one.
        hit_points: Hit point block.
        ability_scores: Ability scores used to derive the initiative bonus.
        speed: Walking speed in feet, if the record has one.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str = Field(min_length=1)
    kind: SnapshotKind = SnapshotKind.CHARACTER
    npc_role: str | None = None
    armor_class: int | None = None
    hit_points: SnapshotHitPoints
    ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    speed: int | None = None


__all__ = [
    "SnapshotHitPoints",
    "AbilityScores",
    "EntitySnapshot",
]
