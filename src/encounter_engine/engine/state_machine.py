"""Encounter lifecycle and turn/round advancement.

States: ``setup -> active <-> paused -> ended``. Every lifecycle transition
and every round boundary writes a ``system`` entry to the combat log.
Transitions requested from the wrong state are guarded no-ops (REJECTED);
starting with too few combatants is a precondition error.
"""

from __future__ import annotations

from encounter_engine.core.exceptions import PreconditionNotMet
from encounter_engine.core.logging import get_logger
from encounter_engine.engine.context import EngineContext
from encounter_engine.engine.initiative import InitiativeRoller
from encounter_engine.engine.results import EngineResult
from encounter_engine.models.combat import Combat, CombatMap, CombatRound
from encounter_engine.models.enums import CombatStatus, LogEntryType
from encounter_engine.models.log import CombatLog


logger = get_logger(__name__)


class EncounterStateMachine:
    """Drive one encounter through its lifecycle.

    Every method takes the current ``Combat`` and ``CombatLog`` and returns an
    ``EngineResult`` with the new values; nothing is mutated in place.
    """

    def __init__(self, context: EngineContext, initiative: InitiativeRoller) -> None:
        self.context = context
        self.initiative = initiative

    # -------------------------------------------------------------------------
    # Creation & initiative
    # -------------------------------------------------------------------------

    def create(
        self,
        name: str,
        description: str | None = None,
        *,
        combat_map: CombatMap | None = None,
    ) -> EngineResult:
        """Allocate a new encounter in ``setup`` with an empty log."""
        now = self.context.now()
        combat = Combat(
            name=name,
            description=description,
            map=combat_map,
            created_at=now,
            updated_at=now,
        )
        logger.info("Combat created", combat_id=combat.id, name=name)
        return EngineResult.ok(combat, CombatLog(combat_id=combat.id))

    def roll_initiative(self, combat: Combat, log: CombatLog) -> EngineResult:
        """Roll initiative for every entity and rebuild the turn order.

        Allowed in any non-ended state. Turn index and round are left as
        they are.
        """
        if (error := self.context.check_log(combat, log, "roll_initiative")) is not None:
            return error
        if combat.is_ended:
            return self.context.reject(combat, log, "roll_initiative", "combat has ended")

        entities, order = self.initiative.roll(combat.entities)
        combat = self.context.touch(combat, entities=entities, initiative_order=order)
        log = self.context.narrate(combat, log, "Initiative rolled", LogEntryType.SYSTEM)
        return EngineResult.ok(combat, log)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, combat: Combat, log: CombatLog) -> EngineResult:
        """Roll initiative, open round 1 and go ``active``.

        Returns:
            REJECTED unless the encounter is in setup; PRECONDITION_ERROR with
            too few entities; otherwise the started encounter.
        """
        if (error := self.context.check_log(combat, log, "start")) is not None:
            return error
        if combat.status != CombatStatus.SETUP:
            return self.context.reject(combat, log, "start", "invalid transition")

        required = self.context.settings.engine.min_entities_to_start
        if len(combat.entities) < required:
            return EngineResult.precondition_error(
                combat,
                log,
                PreconditionNotMet(
                    f"At least {required} combatants are needed to start",
                    operation="start",
                    combat_id=combat.id,
                    details={"entities": len(combat.entities), "required": required},
                ),
            )

        combat, log = self.roll_initiative(combat, log).unwrap()
        now = self.context.now()
        combat = self.context.touch(
            combat,
            status=CombatStatus.ACTIVE,
            current_round=1,
            current_turn_index=0,
            start_time=now,
            rounds=(CombatRound(number=1, start_time=now),),
        )
        log = self.context.narrate(combat, log, "Combat has started", LogEntryType.SYSTEM)
        logger.info("Combat started", combat_id=combat.id, entities=len(combat.entities))
        return EngineResult.ok(combat, log)

    def pause(self, combat: Combat, log: CombatLog) -> EngineResult:
        """``active -> paused``; a no-op from any other state."""
        if (error := self.context.check_log(combat, log, "pause")) is not None:
            return error
        if combat.status != CombatStatus.ACTIVE:
            return self.context.reject(combat, log, "pause", "combat is not active")

        combat = self.context.touch(combat, status=CombatStatus.PAUSED)
        log = self.context.narrate(combat, log, "Combat paused", LogEntryType.SYSTEM)
        logger.info("Combat paused", combat_id=combat.id, round=combat.current_round)
        return EngineResult.ok(combat, log)

    def resume(self, combat: Combat, log: CombatLog) -> EngineResult:
        """``paused -> active``; a no-op from any other state."""
        if (error := self.context.check_log(combat, log, "resume")) is not None:
            return error
        if combat.status != CombatStatus.PAUSED:
            return self.context.reject(combat, log, "resume", "combat is not paused")

        combat = self.context.touch(combat, status=CombatStatus.ACTIVE)
        log = self.context.narrate(combat, log, "Combat resumed", LogEntryType.SYSTEM)
        logger.info("Combat resumed", combat_id=combat.id, round=combat.current_round)
        return EngineResult.ok(combat, log)

    def end(self, combat: Combat, log: CombatLog) -> EngineResult:
        """End an active or paused encounter. Irreversible."""
        if (error := self.context.check_log(combat, log, "end")) is not None:
            return error
        if combat.status not in (CombatStatus.ACTIVE, CombatStatus.PAUSED):
            return self.context.reject(combat, log, "end", "combat is not running")

        now = self.context.now()
        rounds = combat.rounds
        if rounds and rounds[-1].end_time is None:
            rounds = (*rounds[:-1], rounds[-1].model_copy(update={"end_time": now}))

        combat = self.context.touch(
            combat,
            status=CombatStatus.ENDED,
            end_time=now,
            rounds=rounds,
        )
        log = self.context.narrate(combat, log, "Combat has ended", LogEntryType.SYSTEM)
        logger.info("Combat ended", combat_id=combat.id, rounds=combat.current_round)
        return EngineResult.ok(combat, log)

    # -------------------------------------------------------------------------
    # Turns
    # -------------------------------------------------------------------------

    def next_turn(self, combat: Combat, log: CombatLog) -> EngineResult:
        """Advance one turn, opening a new round after the last slot."""
        if (error := self.context.check_log(combat, log, "next_turn")) is not None:
            return error
        if combat.status != CombatStatus.ACTIVE:
            return self.context.reject(combat, log, "next_turn", "combat is not active")
        if not combat.initiative_order:
            return self.context.reject(combat, log, "next_turn", "initiative order is empty")

        turn_index = combat.current_turn_index + 1
        if turn_index < len(combat.initiative_order):
            combat = self.context.touch(combat, current_turn_index=turn_index)
            logger.debug("Turn advanced", combat_id=combat.id, turn_index=turn_index)
            return EngineResult.ok(combat, log)

        now = self.context.now()
        new_round = combat.current_round + 1
        rounds = combat.rounds
        if rounds:
            rounds = (*rounds[:-1], rounds[-1].model_copy(update={"end_time": now}))
        rounds = (*rounds, CombatRound(number=new_round, start_time=now))

        combat = self.context.touch(
            combat,
            current_turn_index=0,
            current_round=new_round,
            rounds=rounds,
        )
        log = self.context.narrate(combat, log, f"Round {new_round} begins", LogEntryType.SYSTEM)
        logger.info("New round started", combat_id=combat.id, round=new_round)
        return EngineResult.ok(combat, log)

    def previous_turn(self, combat: Combat, log: CombatLog) -> EngineResult:
        """Step back one turn.

        Crossing back over a round boundary delegates to ``rollback_round``,
        which discards the newer round record. At round 1, turn 0 this is a
        no-op.
        """
        if (error := self.context.check_log(combat, log, "previous_turn")) is not None:
            return error
        if combat.status != CombatStatus.ACTIVE:
            return self.context.reject(combat, log, "previous_turn", "combat is not active")

        turn_index = combat.current_turn_index - 1
        if turn_index >= 0:
            combat = self.context.touch(combat, current_turn_index=turn_index)
            logger.debug("Turn rewound", combat_id=combat.id, turn_index=turn_index)
            return EngineResult.ok(combat, log)

        if combat.current_round > 1:
            return self.rollback_round(combat, log)
        return self.context.reject(combat, log, "previous_turn", "already at the first turn")

    def rollback_round(self, combat: Combat, log: CombatLog) -> EngineResult:
        """Return to the last turn of the previous round.

        Destructive: the most recent round record is dropped together with
        every action recorded in it, and the previous round is reopened. The
        narration log keeps its entries; it is append-only.
        """
        if (error := self.context.check_log(combat, log, "rollback_round")) is not None:
            return error
        if combat.status != CombatStatus.ACTIVE:
            return self.context.reject(combat, log, "rollback_round", "combat is not active")
        if combat.current_round <= 1:
            return self.context.reject(combat, log, "rollback_round", "no earlier round")

        discarded = combat.current_round
        rounds = combat.rounds[:-1]
        if rounds:
            rounds = (*rounds[:-1], rounds[-1].model_copy(update={"end_time": None}))

        combat = self.context.touch(
            combat,
            current_round=discarded - 1,
            current_turn_index=max(len(combat.initiative_order) - 1, 0),
            rounds=rounds,
        )
        log = self.context.narrate(
            combat, log, f"Round {discarded} rolled back", LogEntryType.SYSTEM
        )
        logger.info("Round rolled back", combat_id=combat.id, discarded_round=discarded)
        return EngineResult.ok(combat, log)


__all__ = [
    "EncounterStateMachine",
]
