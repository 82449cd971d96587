"""Roster mutation API.

Adds and removes participants, changes hit points and conditions, moves
tokens and records actions. There are no turn-ownership checks: any entity
can be changed at any time. Every successful call writes to the combat log.
Calls on an ended encounter, or naming an unknown entity, are REJECTED.
"""

from __future__ import annotations

from encounter_engine.core.logging import get_logger
from encounter_engine.engine.adapter import snapshot_to_entity
from encounter_engine.engine.context import EngineContext
from encounter_engine.engine.results import EngineResult
from encounter_engine.models.combat import (
    ActionDraft,
    Combat,
    CombatAction,
    CombatEntity,
    CombatMap,
    GridPosition,
    GridSize,
    HitPoints,
    MovementPayload,
)
from encounter_engine.models.enums import ActionType, LogEntryType
from encounter_engine.models.log import CombatLog
from encounter_engine.models.snapshot import EntitySnapshot


logger = get_logger(__name__)


def create_map(name: str, width: int, height: int) -> CombatMap:
    """Create an empty grid map of ``width`` x ``height`` cells."""
    return CombatMap(name=name, grid_size=GridSize(width=width, height=height))


class RosterEditor:
    """Mutations of the participants of an encounter."""

    def __init__(self, context: EngineContext) -> None:
        self.context = context

    def _guard(
        self,
        combat: Combat,
        log: CombatLog,
        operation: str,
        *entity_ids: str | None,
    ) -> EngineResult | None:
        if (error := self.context.check_log(combat, log, operation)) is not None:
            return error
        if combat.is_ended:
            return self.context.reject(combat, log, operation, "combat has ended")
        for entity_id in entity_ids:
            if entity_id is not None and combat.get_entity(entity_id) is None:
                return self.context.reject(combat, log, operation, f"unknown entity {entity_id}")
        return None

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    def add_entity(
        self,
        combat: Combat,
        log: CombatLog,
        participant: EntitySnapshot | CombatEntity,
        position: GridPosition | None = None,
    ) -> EngineResult:
        """Add a participant built from a snapshot (or a ready entity).

        The new entity has ``initiative = 0`` until the next roll and is not
        placed in the initiative order until then.
        """
        if (rejected := self._guard(combat, log, "add_entity")) is not None:
            return rejected

        if isinstance(participant, EntitySnapshot):
            entity = snapshot_to_entity(participant, position or GridPosition(x=0, y=0))
        else:
            update: dict[str, object] = {"initiative": 0}
            if position is not None:
                update["position"] = position
            entity = participant.model_copy(update=update)

        if combat.get_entity(entity.id) is not None:
            return self.context.reject(combat, log, "add_entity", f"duplicate entity {entity.id}")

        combat = self.context.touch(combat, entities=(*combat.entities, entity))
        log = self.context.narrate(
            combat,
            log,
            f"{entity.name} joins the encounter",
            LogEntryType.SYSTEM,
            entity_id=entity.id,
        )
        logger.info("Entity added", combat_id=combat.id, entity=entity.name, type=entity.type.value)
        return EngineResult.ok(combat, log)

    def remove_entity(self, combat: Combat, log: CombatLog, entity_id: str) -> EngineResult:
        """Remove an entity from the roster and the initiative order.

        ``current_turn_index`` is left untouched. After removing
        the entity whose turn it is, the index points at whoever slid into
        that slot (or past the end of the order); callers must re-resolve the
        current entity before rendering.
        """
        if (rejected := self._guard(combat, log, "remove_entity", entity_id)) is not None:
            return rejected

        entity = combat.get_entity(entity_id)
        combat = self.context.touch(
            combat,
            entities=tuple(e for e in combat.entities if e.id != entity_id),
            initiative_order=tuple(i for i in combat.initiative_order if i != entity_id),
        )
        log = self.context.narrate(
            combat,
            log,
            f"{entity.name} leaves the encounter",
            LogEntryType.SYSTEM,
            entity_id=entity_id,
        )
        logger.info(
            "Entity removed",
            combat_id=combat.id,
            entity=entity.name,
            turn_index=combat.current_turn_index,
        )
        return EngineResult.ok(combat, log)

    def set_map(self, combat: Combat, log: CombatLog, combat_map: CombatMap) -> EngineResult:
        """Attach an external grid description to the encounter."""
        if (rejected := self._guard(combat, log, "set_map")) is not None:
            return rejected

        combat = self.context.touch(combat, map=combat_map)
        log = self.context.narrate(combat, log, f"Map set to {combat_map.name}", LogEntryType.SYSTEM)
        return EngineResult.ok(combat, log)

    # -------------------------------------------------------------------------
    # Hit points & conditions
    # -------------------------------------------------------------------------

    def update_hp(
        self,
        combat: Combat,
        log: CombatLog,
        entity_id: str,
        new_current: int,
        new_temporary: int = 0,
        *,
        source_id: str | None = None,
    ) -> EngineResult:
        """Set an entity's current and temporary hit points.

        ``new_current`` is clamped to zero from below but not to the maximum,
        so overheal persists. The narration follows the change: a ``damage``
        entry for a loss, a ``death`` entry when the entity drops from above
        zero to zero, a ``healing`` entry for a gain.

        Args:
            combat: The encounter.
            log: Its combat log.
            entity_id: Entity whose hit points change.
            new_current: New current hit points (negative values clamp to 0).
            new_temporary: New temporary hit points (negative values clamp to 0).
            source_id: Entity that caused the change, credited in the recap.
        """
        if (rejected := self._guard(combat, log, "update_hp", entity_id, source_id)) is not None:
            return rejected

        entity = combat.get_entity(entity_id)
        old_current = entity.hit_points.current
        current = max(0, new_current)
        temporary = max(0, new_temporary)
        hit_points = HitPoints(
            current=current,
            maximum=entity.hit_points.maximum,
            temporary=temporary,
        )
        combat = self.context.touch(
            combat.with_entity(entity.model_copy(update={"hit_points": hit_points}))
        )

        delta = current - old_current
        source = combat.get_entity(source_id) if source_id else None
        if delta < 0:
            suffix = f" from {source.name}" if source else ""
            log = self.context.narrate(
                combat,
                log,
                f"{entity.name} takes {-delta} damage{suffix}",
                LogEntryType.DAMAGE,
                entity_id=source_id,
                target_id=entity_id,
                amount=-delta,
            )
            if current == 0 and old_current > 0:
                log = self.context.narrate(
                    combat,
                    log,
                    f"{entity.name} falls unconscious",
                    LogEntryType.DEATH,
                    entity_id=entity_id,
                )
                logger.info("Entity dropped to zero", combat_id=combat.id, entity=entity.name)
        elif delta > 0:
            suffix = f" from {source.name}" if source else ""
            log = self.context.narrate(
                combat,
                log,
                f"{entity.name} recovers {delta} hit points{suffix}",
                LogEntryType.HEALING,
                entity_id=source_id,
                target_id=entity_id,
                amount=delta,
            )
        else:
            log = self.context.narrate(
                combat,
                log,
                f"{entity.name} stays at {current} hit points ({temporary} temporary)",
                LogEntryType.ACTION,
                entity_id=entity_id,
            )
        return EngineResult.ok(combat, log)

    def add_condition(
        self, combat: Combat, log: CombatLog, entity_id: str, label: str
    ) -> EngineResult:
        """Add a condition label; a blank label or one already present is rejected."""
        if (rejected := self._guard(combat, log, "add_condition", entity_id)) is not None:
            return rejected
        if not label.strip():
            return self.context.reject(combat, log, "add_condition", "empty condition")

        label = label.strip()
        entity = combat.get_entity(entity_id)
        if entity.has_condition(label):
            return self.context.reject(combat, log, "add_condition", f"already {label}")

        entity = entity.model_copy(update={"conditions": (*entity.conditions, label)})
        combat = self.context.touch(combat.with_entity(entity))
        log = self.context.narrate(
            combat,
            log,
            f"{entity.name} is affected by {label}",
            LogEntryType.CONDITION,
            entity_id=entity_id,
        )
        return EngineResult.ok(combat, log)

    def remove_condition(
        self, combat: Combat, log: CombatLog, entity_id: str, label: str
    ) -> EngineResult:
        """Remove a condition label; an absent label is rejected."""
        if (rejected := self._guard(combat, log, "remove_condition", entity_id)) is not None:
            return rejected

        entity = combat.get_entity(entity_id)
        if not entity.has_condition(label):
            return self.context.reject(combat, log, "remove_condition", f"not {label}")

        entity = entity.model_copy(
            update={"conditions": tuple(c for c in entity.conditions if c != label)}
        )
        combat = self.context.touch(combat.with_entity(entity))
        log = self.context.narrate(
            combat,
            log,
            f"{entity.name} is no longer affected by {label}",
            LogEntryType.CONDITION,
            entity_id=entity_id,
        )
        return EngineResult.ok(combat, log)

    # -------------------------------------------------------------------------
    # Movement & actions
    # -------------------------------------------------------------------------

    def move_entity(
        self, combat: Combat, log: CombatLog, entity_id: str, position: GridPosition
    ) -> EngineResult:
        """Move a token and record a ``move`` action with both cells."""
        if (rejected := self._guard(combat, log, "move_entity", entity_id)) is not None:
            return rejected

        entity = combat.get_entity(entity_id)
        origin = entity.position
        combat = self.context.touch(combat.with_entity(entity.model_copy(update={"position": position})))

        movement = MovementPayload(from_position=origin, to_position=position)
        draft = ActionDraft(
            entity_id=entity_id,
            action_type=ActionType.MOVE,
            description=f"moves from {origin} to {position}",
            movement=movement,
        )
        logger.debug(
            "Entity moved",
            combat_id=combat.id,
            entity=entity.name,
            cells=movement.distance,
            speed=entity.speed,
        )
        return self.add_action(combat, log, draft)

    def add_action(self, combat: Combat, log: CombatLog, draft: ActionDraft) -> EngineResult:
        """Record an action and mirror a one-line summary into the log.

        The stamped action is appended to the open round record. Before the
        encounter starts there is no round record, so the action is only
        narrated.
        """
        if (rejected := self._guard(combat, log, "add_action", draft.entity_id, draft.target)) is not None:
            return rejected

        actor = combat.get_entity(draft.entity_id)
        action = CombatAction.from_draft(
            draft,
            round_number=combat.current_round,
            timestamp=self.context.now(),
        )

        if combat.rounds:
            rounds = (*combat.rounds[:-1], combat.rounds[-1].with_action(action))
            combat = self.context.touch(combat, rounds=rounds)

        amount = None
        if action.damage is not None:
            amount = action.damage.amount
        elif action.healing is not None:
            amount = action.healing

        log = self.context.narrate(
            combat,
            log,
            f"{actor.name} {action.description}".strip(),
            LogEntryType.ACTION,
            entity_id=action.entity_id,
            target_id=action.target,
            amount=amount,
            action_type=action.action_type,
        )
        logger.debug(
            "Action recorded",
            combat_id=combat.id,
            entity=actor.name,
            action_type=action.action_type.value,
            round=action.round,
        )
        return EngineResult.ok(combat, log)

    def add_dm_note(
        self, combat: Combat, log: CombatLog, message: str, *, visible: bool = False
    ) -> EngineResult:
        """Append a DM note to the log; hidden from players by default.

        Notes are narration only, so they are accepted after the encounter
        ended as well.
        """
        if (error := self.context.check_log(combat, log, "add_dm_note")) is not None:
            return error
        if not message.strip():
            return self.context.reject(combat, log, "add_dm_note", "empty note")

        log = self.context.narrate(
            combat, log, message.strip(), LogEntryType.DM_NOTE, is_visible=visible
        )
        return EngineResult.ok(combat, log)


__all__ = [
    "create_map",
    "RosterEditor",
]
