"""Tests for the snapshot adapter."""

from __future__ import annotations

from typing import Any

import pytest

from encounter_engine.core.exceptions import ValidationError
from encounter_engine.engine.adapter import entity_type_for, snapshot_to_entity
from encounter_engine.models import CombatEntityType, EntitySnapshot, GridPosition


ORIGIN = GridPosition(x=0, y=0)


def npc(**overrides: Any) -> EntitySnapshot:
    data = {
        "id": "npc-1",
        "name": "Bandit",
        "kind": "npc",
        "hit_points": {"current": 11, "maximum": 11},
    }
    return EntitySnapshot.model_validate({**data, **overrides})


class TestEntityType:
    """Tests for entity type mapping."""

    def test_character_is_player(self, hero_snapshot: EntitySnapshot) -> None:
        """Test characters join as players."""
        assert entity_type_for(hero_snapshot) == CombatEntityType.PLAYER

    def test_enemy_npc_is_monster(self) -> None:
        """Test enemy NPCs join as monsters."""
        assert entity_type_for(npc(npc_role="Enemy")) == CombatEntityType.MONSTER

    @pytest.mark.parametrize("role", [None, "ally", "neutral"])
    def test_other_npc_is_npc(self, role: str | None) -> None:
        """Test every other NPC joins as an NPC."""
        assert entity_type_for(npc(npc_role=role)) == CombatEntityType.NPC


class TestSnapshotToEntity:
    """Tests for snapshot conversion."""

    def test_character(self, hero_snapshot: EntitySnapshot) -> None:
        """Test a character snapshot converts with a back-reference."""
        entity = snapshot_to_entity(hero_snapshot, GridPosition(x=2, y=3))

        assert entity.name == "Thorin"
        assert entity.character_id == "char-thorin"
        assert entity.npc_id is None
        assert entity.armor_class == 16
        assert entity.initiative == 0
        assert entity.initiative_bonus == 2
        assert entity.speed == 25
        assert entity.position == GridPosition(x=2, y=3)
        assert entity.is_player_controlled is True

    def test_npc_defaults(self) -> None:
        """Test missing AC, speed and ability scores fall back to defaults."""
        entity = snapshot_to_entity(npc(), ORIGIN)

        assert entity.npc_id == "npc-1"
        assert entity.armor_class == 10
        assert entity.speed == 30
        assert entity.initiative_bonus == 0
        assert entity.is_player_controlled is False

    @pytest.mark.parametrize("dexterity,bonus", [(1, -5), (9, -1), (10, 0), (15, 2), (20, 5)])
    def test_initiative_bonus_from_dexterity(self, dexterity: int, bonus: int) -> None:
        """Test the bonus is the floored dexterity modifier."""
        entity = snapshot_to_entity(npc(ability_scores={"dexterity": dexterity}), ORIGIN)

        assert entity.initiative_bonus == bonus

    def test_current_hp_clamped(self) -> None:
        """Test out-of-range current hit points are clamped on entry."""
        dying = snapshot_to_entity(npc(hit_points={"current": -4, "maximum": 11}), ORIGIN)
        overhealed = snapshot_to_entity(npc(hit_points={"current": 15, "maximum": 11}), ORIGIN)

        assert dying.hit_points.current == 0
        assert overhealed.hit_points.current == 11

    def test_armor_class_out_of_range(self) -> None:
        """Test an unusable armor class is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            snapshot_to_entity(npc(armor_class=45), ORIGIN)

        assert exc_info.value.details["field_name"] == "armor_class"

    def test_fresh_ids(self) -> None:
        """Test each conversion gets its own entity id unless one is given."""
        snapshot = npc()

        assert snapshot_to_entity(snapshot, ORIGIN).id != snapshot_to_entity(snapshot, ORIGIN).id
        assert snapshot_to_entity(snapshot, ORIGIN, entity_id="e-1").id == "e-1"
