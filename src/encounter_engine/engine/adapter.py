"""Entity snapshot adapter.

Converts a character or NPC snapshot into a ``CombatEntity``. Only the
combat-relevant stats are copied; the source record is referenced by id and
never touched again.
"""

from __future__ import annotations

from encounter_engine.core.constants import DEFAULT_ARMOR_CLASS, DEFAULT_SPEED, MAX_ARMOR_CLASS
from encounter_engine.core.exceptions import ValidationError
from encounter_engine.models.combat import CombatEntity, GridPosition, HitPoints, new_id
from encounter_engine.models.enums import CombatEntityType, SnapshotKind
from encounter_engine.models.snapshot import EntitySnapshot


def entity_type_for(snapshot: EntitySnapshot) -> CombatEntityType:
    """Characters join as players; enemy NPCs as monsters; other NPCs as NPCs."""
    if snapshot.kind == SnapshotKind.CHARACTER:
        return CombatEntityType.PLAYER
    if (snapshot.npc_role or "").lower() == "enemy":
        return CombatEntityType.MONSTER
    return CombatEntityType.NPC


def snapshot_to_entity(
    snapshot: EntitySnapshot,
    position: GridPosition,
    *,
    entity_id: str | None = None,
) -> CombatEntity:
    """Build a combat entity from an external record snapshot.

    Args:
        snapshot: The character or NPC snapshot.
        position: Starting cell on the map grid.
        entity_id: Id to give the combat entity; a fresh one by default.

    Returns:
        A combat entity with ``initiative = 0``.

    Raises:
        ValidationError: If the armor class is out of range.
    """
    armor_class = snapshot.armor_class or DEFAULT_ARMOR_CLASS
    if not 1 <= armor_class <= MAX_ARMOR_CLASS:
        raise ValidationError(
            "Armor class out of range",
            field_name="armor_class",
            invalid_value=armor_class,
        )

    # Records may carry negative or overhealed current HP; entities start clamped.
    hp = snapshot.hit_points
    hit_points = HitPoints(
        current=min(max(hp.current, 0), hp.maximum),
        maximum=hp.maximum,
        temporary=hp.temporary,
    )

    is_character = snapshot.kind == SnapshotKind.CHARACTER
    return CombatEntity(
        id=entity_id or new_id(),
        name=snapshot.name,
        type=entity_type_for(snapshot),
        character_id=snapshot.id if is_character else None,
        npc_id=None if is_character else snapshot.id,
        armor_class=armor_class,
        hit_points=hit_points,
        initiative=0,
        initiative_bonus=snapshot.ability_scores.dexterity_modifier,
        position=position,
        speed=snapshot.speed if snapshot.speed is not None else DEFAULT_SPEED,
        is_player_controlled=is_character,
    )


__all__ = [
    "entity_type_for",
    "snapshot_to_entity",
]
