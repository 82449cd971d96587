"""Pydantic V2 schemas for combat encounters.

This module defines the encounter aggregate (``Combat``), its participants,
round records and the mechanical action record. Every model is frozen:
engine operations never mutate a value in place, they return an updated copy
built with ``model_copy(update=...)``.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from encounter_engine.core.constants import (
    DEFAULT_CELL_SIZE,
    DEFAULT_SPEED,
    MAX_ARMOR_CLASS,
    MAX_GRID_DIMENSION,
)
from encounter_engine.models.enums import (
    ActionType,
    CombatEntityType,
    CombatStatus,
    DamageType,
)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid4())


_VALUE_CONFIG = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Geometry
# =============================================================================


class GridPosition(BaseModel):
    """A cell on the external map grid.

    The engine never validates paths or ranges; positions only feed movement
    narration.
    """

    model_config = _VALUE_CONFIG

    x: Annotated[int, Field(ge=0)]
    y: Annotated[int, Field(ge=0)]

    def distance_to(self, other: GridPosition) -> int:
        """Chebyshev distance in cells (diagonals count as one)."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def is_adjacent(self, other: GridPosition) -> bool:
        """Whether ``other`` is one of the eight neighbouring cells."""
        return self.distance_to(other) == 1

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class GridSize(BaseModel):
    """Map dimensions in cells."""

    model_config = _VALUE_CONFIG

    width: Annotated[int, Field(ge=1, le=MAX_GRID_DIMENSION)]
    height: Annotated[int, Field(ge=1, le=MAX_GRID_DIMENSION)]


class CombatMap(BaseModel):
    """Grid description supplied by the map editor.

    Opaque to the engine: it is stored on the encounter and handed back
    unchanged for rendering.
    """

    model_config = _VALUE_CONFIG

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    description: str = ""
    image_url: str | None = None
    grid_size: GridSize
    cell_size: Annotated[int, Field(ge=5, le=200)] = DEFAULT_CELL_SIZE
    obstacles: tuple[GridPosition, ...] = ()
    difficult_terrain: tuple[GridPosition, ...] = ()
    notes: str | None = None


# =============================================================================
# Participants
# =============================================================================


class HitPoints(BaseModel):
    """Hit point block of a combat entity.

    ``current`` is never negative but may exceed ``maximum`` after an
    overheal.
    """

    model_config = _VALUE_CONFIG

    current: Annotated[int, Field(ge=0)]
    maximum: Annotated[int, Field(ge=1)]
    temporary: Annotated[int, Field(ge=0)] = 0


class CombatEntity(BaseModel):
    """One participant in an encounter.

    Attributes:
        id: Unique identifier within the encounter.
        name: Display name.
        type: Player, NPC or monster.
        character_id: Weak reference to the source character record.
        npc_id: Weak reference to the source NPC record.
        armor_class: Armor class copied from the snapshot.
        hit_points: Current, maximum and temporary hit points.
        initiative: Resolved initiative roll (0 until rolled).
        initiative_bonus: Static modifier used for every roll.
        position: Cell on the external map grid.
        speed: Walking speed in feet.
        conditions: Condition labels, without duplicates.
        notes: Free-form DM notes.
        is_visible: Whether players can see this entity.
        is_player_controlled: Whether a player drives this entity.
    """

    model_config = _VALUE_CONFIG

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    type: CombatEntityType
    character_id: str | None = None
    npc_id: str | None = None
    armor_class: Annotated[int, Field(ge=1, le=MAX_ARMOR_CLASS)]
    hit_points: HitPoints
    initiative: int = 0
    initiative_bonus: int = 0
    position: GridPosition = Field(default_factory=lambda: GridPosition(x=0, y=0))
    speed: Annotated[int, Field(ge=0)] = DEFAULT_SPEED
    conditions: tuple[str, ...] = ()
    notes: str = ""
    is_visible: bool = True
    is_player_controlled: bool = False

    @field_validator("conditions")
    @classmethod
    def reject_duplicate_conditions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError("condition labels must be unique")
        return value

    @property
    def is_down(self) -> bool:
        """True once hit points have reached zero."""
        return self.hit_points.current == 0

    def has_condition(self, label: str) -> bool:
        return label in self.conditions


# =============================================================================
# Mechanical Action Record
# =============================================================================


class DamagePayload(BaseModel):
    """Already-resolved damage carried by an action."""

    model_config = _VALUE_CONFIG

    amount: Annotated[int, Field(ge=0)]
    type: DamageType


class MovementPayload(BaseModel):
    """Start and end cells of a move. Serialized as ``from``/``to``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    from_position: GridPosition = Field(alias="from")
    to_position: GridPosition = Field(alias="to")

    @property
    def distance(self) -> int:
        return self.from_position.distance_to(self.to_position)


class ActionDraft(BaseModel):
    """Caller-supplied action before the engine stamps id and timestamp.

    ``round`` defaults to the encounter's current round when omitted.
    """

    model_config = _VALUE_CONFIG

    entity_id: str
    action_type: ActionType = ActionType.OTHER
    description: str = ""
    round: Annotated[int, Field(ge=0)] | None = None
    target: str | None = None
    damage: DamagePayload | None = None
    healing: Annotated[int, Field(ge=0)] | None = None
    spell_slot: Annotated[int, Field(ge=1, le=9)] | None = None
    movement: MovementPayload | None = None


class CombatAction(BaseModel):
    """One logged mutation or narrative action inside a round record.

    Immutable once created; appended to the current round's action list.
    """

    model_config = _VALUE_CONFIG

    id: str = Field(default_factory=new_id)
    entity_id: str
    round: Annotated[int, Field(ge=0)]
    action_type: ActionType
    description: str
    target: str | None = None
    damage: DamagePayload | None = None
    healing: Annotated[int, Field(ge=0)] | None = None
    spell_slot: Annotated[int, Field(ge=1, le=9)] | None = None
    movement: MovementPayload | None = None
    timestamp: datetime

    @classmethod
    def from_draft(cls, draft: ActionDraft, *, round_number: int, timestamp: datetime) -> CombatAction:
        """Stamp a draft with a fresh id, a round number and a timestamp."""
        return cls(
            entity_id=draft.entity_id,
            round=draft.round if draft.round is not None else round_number,
            action_type=draft.action_type,
            description=draft.description,
            target=draft.target,
            damage=draft.damage,
            healing=draft.healing,
            spell_slot=draft.spell_slot,
            movement=draft.movement,
            timestamp=timestamp,
        )


class CombatRound(BaseModel):
    """A round record: one full pass through the initiative order."""

    model_config = _VALUE_CONFIG

    number: Annotated[int, Field(ge=1)]
    start_time: datetime
    end_time: datetime | None = None
    actions: tuple[CombatAction, ...] = ()
    notes: str | None = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def with_action(self, action: CombatAction) -> CombatRound:
        return self.model_copy(update={"actions": (*self.actions, action)})


# =============================================================================
# Encounter Aggregate
# =============================================================================


class Combat(BaseModel):
    """One encounter.

    Attributes:
        id: Unique encounter identifier.
        name: Encounter name.
        description: Optional description.
        status: Lifecycle state.
        entities: Participants in insertion order, unique by id.
        map: Optional external grid description.
        current_round: 0 before start, then the running round number.
        current_turn_index: Index into ``initiative_order``; meaningful only
            while active. Not compacted when an entity is removed.
        rounds: Round records in order.
        initiative_order: Entity ids in turn order; empty until rolled.
        start_time: When the encounter started.
        end_time: When the encounter ended.
        dm_notes: Free-form DM notes.
        is_visible: Whether players can see the encounter.
        created_at: Creation time.
        updated_at: Time of the last change.
    """

    model_config = _VALUE_CONFIG

    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    description: str | None = None
    status: CombatStatus = CombatStatus.SETUP
    entities: tuple[CombatEntity, ...] = ()
    map: CombatMap | None = None
    current_round: Annotated[int, Field(ge=0)] = 0
    current_turn_index: Annotated[int, Field(ge=0)] = 0
    rounds: tuple[CombatRound, ...] = ()
    initiative_order: tuple[str, ...] = ()
    start_time: datetime | None = None
    end_time: datetime | None = None
    dm_notes: str | None = None
    is_visible: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("entities")
    @classmethod
    def reject_duplicate_entity_ids(
        cls, value: tuple[CombatEntity, ...]
    ) -> tuple[CombatEntity, ...]:
        ids = [entity.id for entity in value]
        if len(set(ids)) != len(ids):
            raise ValueError("entity ids must be unique within an encounter")
        return value

    @property
    def is_ended(self) -> bool:
        return self.status == CombatStatus.ENDED

    @property
    def current_entity_id(self) -> str | None:
        """Id at ``initiative_order[current_turn_index]`` while active.

        Returns:
            The id, or None when not active or the index no longer resolves
            (for example after the last slot's entity was removed).
        """
        if self.status != CombatStatus.ACTIVE:
            return None
        if self.current_turn_index >= len(self.initiative_order):
            return None
        return self.initiative_order[self.current_turn_index]

    @property
    def current_round_record(self) -> CombatRound | None:
        return self.rounds[-1] if self.rounds else None

    def get_entity(self, entity_id: str) -> CombatEntity | None:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    def iter_actions(self) -> Iterator[CombatAction]:
        """Iterate every recorded action across all rounds, in order."""
        for record in self.rounds:
            yield from record.actions

    def with_entity(self, entity: CombatEntity) -> Combat:
        """Return a copy with ``entity`` replacing the entity of the same id."""
        entities = tuple(entity if e.id == entity.id else e for e in self.entities)
        return self.model_copy(update={"entities": entities})


__all__ = [
    "utc_now",
    "new_id",
    "GridPosition",
    "GridSize",
    "CombatMap",
    "HitPoints",
    "CombatEntity",
    "DamagePayload",
    "MovementPayload",
    "ActionDraft",
    "CombatAction",
    "CombatRound",
    "Combat",
]
