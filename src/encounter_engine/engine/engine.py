"""Encounter engine facade.

Bundles the state machine, roster editor, initiative roller and recap
generator behind one object configured from ``Settings``.

Example:
    >>> engine = EncounterEngine()
    >>> combat, log = engine.create("Goblin Ambush").unwrap()
    >>> combat, log = engine.add_entity(combat, log, hero).unwrap()
    >>> combat, log = engine.add_entity(combat, log, goblin).unwrap()
    >>> result = engine.start(combat, log)
    >>> result.combat.status
    <CombatStatus.ACTIVE: 'active'>
"""

from __future__ import annotations

from encounter_engine.core.config import Settings, get_settings
from encounter_engine.engine.context import Clock, EngineContext
from encounter_engine.engine.dice import DiceRoller
from encounter_engine.engine.initiative import InitiativeRoller, InitiativeStrategy, get_strategy
from encounter_engine.engine.recap import (
    AggregationStrategy,
    RecapGenerator,
    aggregation_from_settings,
)
from encounter_engine.engine.results import EngineResult
from encounter_engine.engine.roster import RosterEditor
from encounter_engine.engine.state_machine import EncounterStateMachine
from encounter_engine.models.combat import (
    ActionDraft,
    Combat,
    CombatEntity,
    CombatMap,
    GridPosition,
    utc_now,
)
from encounter_engine.models.log import CombatLog
from encounter_engine.models.recap import CombatRecap
from encounter_engine.models.snapshot import EntitySnapshot


class EncounterEngine:
    """Single entry point for every encounter operation.

    Args:
        settings: Configuration; the cached application settings by default.
        strategy: Initiative strategy; by default the one named in settings.
        aggregation: Recap aggregation; by default the one named in settings.
        clock: Timestamp source.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        strategy: InitiativeStrategy | None = None,
        aggregation: AggregationStrategy | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.context = EngineContext(settings=self.settings, clock=clock or utc_now)

        if strategy is None:
            roller = DiceRoller(seed=self.settings.engine.dice_seed)
            strategy = get_strategy(self.settings.engine.initiative_strategy, roller=roller)
        self.initiative = InitiativeRoller(strategy)

        self.lifecycle = EncounterStateMachine(self.context, self.initiative)
        self.roster = RosterEditor(self.context)
        self.recaps = RecapGenerator(aggregation or aggregation_from_settings(self.settings.recap))

    # Lifecycle ---------------------------------------------------------------

    def create(
        self, name: str, description: str | None = None, *, combat_map: CombatMap | None = None
    ) -> EngineResult:
        return self.lifecycle.create(name, description, combat_map=combat_map)

    def roll_initiative(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.roll_initiative(combat, log)

    def start(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.start(combat, log)

    def pause(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.pause(combat, log)

    def resume(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.resume(combat, log)

    def end(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.end(combat, log)

    def next_turn(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.next_turn(combat, log)

    def previous_turn(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.previous_turn(combat, log)

    def rollback_round(self, combat: Combat, log: CombatLog) -> EngineResult:
        return self.lifecycle.rollback_round(combat, log)

    # Roster ------------------------------------------------------------------

    def add_entity(
        self,
        combat: Combat,
        log: CombatLog,
        participant: EntitySnapshot | CombatEntity,
        position: GridPosition | None = None,
    ) -> EngineResult:
        return self.roster.add_entity(combat, log, participant, position)

    def remove_entity(self, combat: Combat, log: CombatLog, entity_id: str) -> EngineResult:
        return self.roster.remove_entity(combat, log, entity_id)

    def set_map(self, combat: Combat, log: CombatLog, combat_map: CombatMap) -> EngineResult:
        return self.roster.set_map(combat, log, combat_map)

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
        return self.roster.update_hp(
            combat, log, entity_id, new_current, new_temporary, source_id=source_id
        )

    def add_condition(self, combat: Combat, log: CombatLog, entity_id: str, label: str) -> EngineResult:
        return self.roster.add_condition(combat, log, entity_id, label)

    def remove_condition(
        self, combat: Combat, log: CombatLog, entity_id: str, label: str
    ) -> EngineResult:
        return self.roster.remove_condition(combat, log, entity_id, label)

    def move_entity(
        self, combat: Combat, log: CombatLog, entity_id: str, position: GridPosition
    ) -> EngineResult:
        return self.roster.move_entity(combat, log, entity_id, position)

    def add_action(self, combat: Combat, log: CombatLog, draft: ActionDraft) -> EngineResult:
        return self.roster.add_action(combat, log, draft)

    def add_dm_note(
        self, combat: Combat, log: CombatLog, message: str, *, visible: bool = False
    ) -> EngineResult:
        return self.roster.add_dm_note(combat, log, message, visible=visible)

    # Recap -------------------------------------------------------------------

    def generate_recap(self, combat: Combat, log: CombatLog) -> CombatRecap:
        """Build the recap; raises ``PreconditionNotMet`` before the end."""
        return self.recaps.generate(combat, log)


__all__ = [
    "EncounterEngine",
]
