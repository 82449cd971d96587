"""Tests for roster mutations: entities, hit points, conditions, actions."""

from __future__ import annotations

from typing import Any

import pytest

from encounter_engine.engine.engine import EncounterEngine
from encounter_engine.engine.roster import create_map
from encounter_engine.models import (
    ActionDraft,
    ActionType,
    Combat,
    CombatEntity,
    CombatEntityType,
    CombatLog,
    GridPosition,
    HitPoints,
    LogEntryType,
)
from encounter_engine.models.combat import DamagePayload
from encounter_engine.models.enums import DamageType


Encounter = tuple[Combat, CombatLog]


def ids(combat: Combat) -> tuple[str, str]:
    thorin, goblin = combat.entities
    return thorin.id, goblin.id


class TestAddRemoveEntity:
    """Tests for adding and removing participants."""

    def test_add_snapshot(self, engine: EncounterEngine, setup_combat: Encounter) -> None:
        """Test snapshots join with initiative 0 and a log entry."""
        combat, log = setup_combat

        assert [e.name for e in combat.entities] == ["Thorin", "Goblin"]
        assert combat.entities[1].type == CombatEntityType.MONSTER
        assert combat.entities[1].position == GridPosition(x=4, y=2)
        assert all(e.initiative == 0 for e in combat.entities)
        assert [e.message for e in log.entries] == [
            "Thorin joins the encounter",
            "Goblin joins the encounter",
        ]
        assert all(e.round == 0 for e in log.entries)

    def test_add_mid_encounter_waits_for_reroll(
        self, engine: EncounterEngine, active_combat: Encounter, goblin_snapshot: Any
    ) -> None:
        """Test late joiners are not in the order until initiative is re-rolled."""
        combat, log = engine.add_entity(*active_combat, goblin_snapshot).unwrap()
        newcomer = combat.entities[-1]

        assert newcomer.initiative == 0
        assert newcomer.id not in combat.initiative_order

        combat, log = engine.roll_initiative(combat, log).unwrap()
        assert newcomer.id in combat.initiative_order

    def test_add_ready_entity_resets_initiative(
        self, engine: EncounterEngine, setup_combat: Encounter
    ) -> None:
        """Test a prepared entity joins with initiative 0."""
        entity = CombatEntity(
            id="wolf-1",
            name="Wolf",
            type=CombatEntityType.MONSTER,
            armor_class=13,
            hit_points=HitPoints(current=11, maximum=11),
            initiative=18,
        )

        combat, _ = engine.add_entity(*setup_combat, entity).unwrap()

        assert combat.get_entity("wolf-1").initiative == 0

    def test_add_duplicate_id_rejected(
        self, engine: EncounterEngine, setup_combat: Encounter
    ) -> None:
        """Test entity ids stay unique."""
        existing = setup_combat[0].entities[0]

        result = engine.add_entity(*setup_combat, existing)

        assert result.is_rejected
        assert len(result.combat.entities) == 2

    def test_remove_entity(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test removal drops the entity from roster and order."""
        _, goblin_id = ids(active_combat[0])

        combat, log = engine.remove_entity(*active_combat, goblin_id).unwrap()

        assert combat.get_entity(goblin_id) is None
        assert goblin_id not in combat.initiative_order
        assert log.last.message == "Goblin leaves the encounter"

    def test_remove_current_entity_keeps_index(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test removing the acting entity leaves the turn index as it was."""
        combat, log = engine.next_turn(*active_combat).unwrap()
        thorin_id, goblin_id = ids(combat)
        assert combat.current_entity_id == goblin_id

        combat, log = engine.remove_entity(combat, log, goblin_id).unwrap()

        assert combat.current_turn_index == 1
        assert combat.current_entity_id is None

    def test_remove_earlier_entity_shifts_current(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test removing an earlier slot hands the turn to whoever slides in."""
        combat, log = engine.next_turn(*active_combat).unwrap()
        thorin_id, _ = ids(combat)
        wolf = CombatEntity(
            id="wolf-1",
            name="Wolf",
            type=CombatEntityType.MONSTER,
            armor_class=13,
            hit_points=HitPoints(current=11, maximum=11),
        )
        combat, log = engine.add_entity(combat, log, wolf).unwrap()
        combat = combat.model_copy(
            update={"initiative_order": (*combat.initiative_order, "wolf-1")}
        )

        combat, log = engine.remove_entity(combat, log, thorin_id).unwrap()

        assert combat.current_turn_index == 1
        assert combat.current_entity_id == "wolf-1"

    def test_unknown_entity_rejected(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test operations naming an unknown entity are no-ops."""
        result = engine.remove_entity(*active_combat, "ghost")

        assert result.is_rejected
        assert result.reason == "unknown entity ghost"

    def test_ended_encounter_rejects_edits(
        self, engine: EncounterEngine, active_combat: Encounter, goblin_snapshot: Any
    ) -> None:
        """Test the roster is frozen once the encounter ended."""
        combat, log = engine.end(*active_combat).unwrap()
        thorin_id, _ = ids(combat)

        assert engine.add_entity(combat, log, goblin_snapshot).is_rejected
        assert engine.remove_entity(combat, log, thorin_id).is_rejected
        assert engine.update_hp(combat, log, thorin_id, 1).is_rejected
        assert engine.add_condition(combat, log, thorin_id, "Prone").is_rejected


class TestMap:
    """Tests for map attachment."""

    def test_set_map(self, engine: EncounterEngine, setup_combat: Encounter) -> None:
        """Test a map is stored and narrated."""
        combat_map = create_map("Forest Road", 20, 12)

        combat, log = engine.set_map(*setup_combat, combat_map).unwrap()

        assert combat.map == combat_map
        assert combat.map.grid_size.width == 20
        assert log.last.message == "Map set to Forest Road"


class TestUpdateHp:
    """Tests for hit point changes."""

    def test_damage(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test a loss is logged as damage credited to its source."""
        thorin_id, goblin_id = ids(active_combat[0])

        combat, log = engine.update_hp(*active_combat, goblin_id, 3, source_id=thorin_id).unwrap()

        assert combat.get_entity(goblin_id).hit_points.current == 3
        assert log.last.type == LogEntryType.DAMAGE
        assert log.last.message == "Goblin takes 4 damage from Thorin"
        assert log.last.entity_id == thorin_id
        assert log.last.target_id == goblin_id
        assert log.last.amount == 4

    def test_healing(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test a gain is logged as healing."""
        thorin_id, _ = ids(active_combat[0])
        combat, log = engine.update_hp(*active_combat, thorin_id, 10).unwrap()

        combat, log = engine.update_hp(combat, log, thorin_id, 18).unwrap()

        assert log.last.type == LogEntryType.HEALING
        assert log.last.message == "Thorin recovers 8 hit points"
        assert log.last.amount == 8

    def test_negative_clamped_to_zero(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test hit points never go below zero."""
        _, goblin_id = ids(active_combat[0])

        combat, log = engine.update_hp(*active_combat, goblin_id, -12).unwrap()

        assert combat.get_entity(goblin_id).hit_points.current == 0
        assert log.of_type(LogEntryType.DAMAGE)[-1].amount == 7

    def test_negative_temporary_clamped_to_zero(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test temporary hit points never go below zero."""
        _, goblin_id = ids(active_combat[0])

        combat, log = engine.update_hp(*active_combat, goblin_id, 5, -3).unwrap()

        assert combat.get_entity(goblin_id).hit_points.temporary == 0
        assert log.last.type == LogEntryType.DAMAGE
        assert log.last.amount == 2

    def test_overheal_persists(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test current hit points may exceed the maximum."""
        thorin_id, _ = ids(active_combat[0])

        combat, _ = engine.update_hp(*active_combat, thorin_id, 35, 5).unwrap()

        hit_points = combat.get_entity(thorin_id).hit_points
        assert (hit_points.current, hit_points.maximum, hit_points.temporary) == (35, 30, 5)

    def test_death_logged_once(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test dropping to zero logs one death; further blows do not."""
        _, goblin_id = ids(active_combat[0])

        combat, log = engine.update_hp(*active_combat, goblin_id, 0).unwrap()
        assert log.last.type == LogEntryType.DEATH
        assert log.last.message == "Goblin falls unconscious"

        combat, log = engine.update_hp(combat, log, goblin_id, -5).unwrap()
        combat, log = engine.update_hp(combat, log, goblin_id, 0).unwrap()

        assert len(log.of_type(LogEntryType.DEATH)) == 1
        assert combat.get_entity(goblin_id).is_down

    def test_revive_and_drop_again(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test each crossing from above zero to zero is a new death entry."""
        _, goblin_id = ids(active_combat[0])
        combat, log = active_combat
        for current in (0, 4, 0):
            combat, log = engine.update_hp(combat, log, goblin_id, current).unwrap()

        assert len(log.of_type(LogEntryType.DEATH)) == 2

    def test_unchanged_current(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test a change of temporary hit points alone is still narrated."""
        thorin_id, _ = ids(active_combat[0])

        combat, log = engine.update_hp(*active_combat, thorin_id, 30, 6).unwrap()

        assert combat.get_entity(thorin_id).hit_points.temporary == 6
        assert log.last.type == LogEntryType.ACTION
        assert log.last.message == "Thorin stays at 30 hit points (6 temporary)"

    def test_allowed_in_setup(self, engine: EncounterEngine, setup_combat: Encounter) -> None:
        """Test hit points can be adjusted before the encounter starts."""
        thorin_id, _ = ids(setup_combat[0])

        combat, log = engine.update_hp(*setup_combat, thorin_id, 25).unwrap()

        assert log.last.round == 0


class TestConditions:
    """Tests for condition labels."""

    def test_add_and_remove(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test conditions are added and removed with log entries."""
        _, goblin_id = ids(active_combat[0])

        combat, log = engine.add_condition(*active_combat, goblin_id, "Prone").unwrap()
        assert combat.get_entity(goblin_id).conditions == ("Prone",)
        assert log.last.type == LogEntryType.CONDITION
        assert log.last.message == "Goblin is affected by Prone"

        combat, log = engine.remove_condition(combat, log, goblin_id, "Prone").unwrap()
        assert combat.get_entity(goblin_id).conditions == ()
        assert log.last.message == "Goblin is no longer affected by Prone"

    def test_duplicate_condition_rejected(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test a condition cannot be added twice."""
        _, goblin_id = ids(active_combat[0])
        combat, log = engine.add_condition(*active_combat, goblin_id, "Poisoned").unwrap()

        result = engine.add_condition(combat, log, goblin_id, "Poisoned")

        assert result.is_rejected
        assert result.combat.get_entity(goblin_id).conditions == ("Poisoned",)

    @pytest.mark.parametrize("label", ["", "   "])
    def test_blank_condition_rejected(
        self, engine: EncounterEngine, active_combat: Encounter, label: str
    ) -> None:
        """Test a blank label is not a condition."""
        _, goblin_id = ids(active_combat[0])

        result = engine.add_condition(*active_combat, goblin_id, label)

        assert result.is_rejected
        assert result.combat.get_entity(goblin_id).conditions == ()
        assert result.log == active_combat[1]

    def test_remove_absent_condition_rejected(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test removing a condition the entity lacks is a no-op."""
        _, goblin_id = ids(active_combat[0])

        assert engine.remove_condition(*active_combat, goblin_id, "Stunned").is_rejected


class TestActions:
    """Tests for movement and action records."""

    def test_move(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test a move updates the position and records a move action."""
        thorin_id, _ = ids(active_combat[0])

        combat, log = engine.move_entity(*active_combat, thorin_id, GridPosition(x=3, y=2)).unwrap()

        assert combat.get_entity(thorin_id).position == GridPosition(x=3, y=2)
        (action,) = combat.rounds[-1].actions
        assert action.action_type == ActionType.MOVE
        assert action.movement.from_position == GridPosition(x=1, y=1)
        assert action.movement.to_position == GridPosition(x=3, y=2)
        assert log.last.message == "Thorin moves from (1, 1) to (3, 2)"

    def test_add_action(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test an action is stamped into the open round and mirrored."""
        thorin_id, goblin_id = ids(active_combat[0])
        draft = ActionDraft(
            entity_id=thorin_id,
            action_type=ActionType.ATTACK,
            description="swings his axe at the goblin",
            target=goblin_id,
            damage=DamagePayload(amount=6, type=DamageType.SLASHING),
        )

        combat, log = engine.add_action(*active_combat, draft).unwrap()

        action = combat.rounds[-1].actions[-1]
        assert action.round == 1
        assert action.id
        assert log.last.type == LogEntryType.ACTION
        assert log.last.message == "Thorin swings his axe at the goblin"
        assert log.last.target_id == goblin_id
        assert log.last.amount == 6
        assert log.last.action_type == ActionType.ATTACK

    def test_action_in_setup_only_narrated(
        self, engine: EncounterEngine, setup_combat: Encounter
    ) -> None:
        """Test actions before start have no round record to land in."""
        thorin_id, _ = ids(setup_combat[0])

        combat, log = engine.add_action(
            *setup_combat, ActionDraft(entity_id=thorin_id, description="readies a shield")
        ).unwrap()

        assert combat.rounds == ()
        assert log.last.message == "Thorin readies a shield"

    def test_unknown_target_rejected(
        self, engine: EncounterEngine, active_combat: Encounter
    ) -> None:
        """Test an action cannot target an entity outside the encounter."""
        thorin_id, _ = ids(active_combat[0])
        draft = ActionDraft(entity_id=thorin_id, target="ghost")

        assert engine.add_action(*active_combat, draft).is_rejected


class TestDmNotes:
    """Tests for DM notes."""

    def test_hidden_by_default(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test notes are hidden from players unless asked otherwise."""
        _, log = engine.add_dm_note(*active_combat, "  The goblin is bluffing  ").unwrap()

        assert log.last.type == LogEntryType.DM_NOTE
        assert log.last.message == "The goblin is bluffing"
        assert log.last.is_visible is False

    def test_allowed_after_end(self, engine: EncounterEngine, active_combat: Encounter) -> None:
        """Test notes can be added to an ended encounter."""
        combat, log = engine.end(*active_combat).unwrap()

        result = engine.add_dm_note(combat, log, "Award inspiration", visible=True)

        assert result.is_ok
        assert result.log.last.is_visible is True

    @pytest.mark.parametrize("message", ["", "   "])
    def test_empty_note_rejected(
        self, engine: EncounterEngine, active_combat: Encounter, message: str
    ) -> None:
        """Test blank notes are refused."""
        assert engine.add_dm_note(*active_combat, message).is_rejected
