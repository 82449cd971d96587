"""Recap generation for ended encounters.

The recap is a pure projection of the encounter and its combat log: the same
inputs always give an equal recap. How damage and healing events turn into
figures is an ``AggregationStrategy``:

- ``weighted`` credits a fixed value per event (5 per damage event, 3 per
  healing event by default) regardless of the amount logged.
- ``summed`` adds up the logged amounts.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from encounter_engine.core.config import RecapSettings
from encounter_engine.core.exceptions import ConfigurationError, PreconditionNotMet
from encounter_engine.core.logging import get_logger
from encounter_engine.models.combat import Combat, CombatEntity
from encounter_engine.models.enums import ActionType, EventImportance, LogEntryType
from encounter_engine.models.log import CombatLog, CombatLogEntry
from encounter_engine.models.recap import CombatRecap, MajorEvent, ParticipantSummary


logger = get_logger(__name__)

_MAJOR_EVENT_IMPORTANCE = {
    LogEntryType.DEATH: EventImportance.HIGH,
    LogEntryType.SYSTEM: EventImportance.MEDIUM,
}


class AggregationStrategy(Protocol):
    """Turns a list of damage or healing entries into one figure."""

    name: str

    def damage(self, entries: Sequence[CombatLogEntry]) -> int: ...

    def healing(self, entries: Sequence[CombatLogEntry]) -> int: ...


class WeightedCountAggregation:
    """Fixed value per event."""

    name = "weighted"

    def __init__(self, damage_weight: int = 5, healing_weight: int = 3) -> None:
        self.damage_weight = damage_weight
        self.healing_weight = healing_weight

    def damage(self, entries: Sequence[CombatLogEntry]) -> int:
        return len(entries) * self.damage_weight

    def healing(self, entries: Sequence[CombatLogEntry]) -> int:
        return len(entries) * self.healing_weight


class SummedAmountAggregation:
    """Sum of the logged amounts."""

    name = "summed"

    def damage(self, entries: Sequence[CombatLogEntry]) -> int:
        return sum(entry.amount or 0 for entry in entries)

    def healing(self, entries: Sequence[CombatLogEntry]) -> int:
        return sum(entry.amount or 0 for entry in entries)


def aggregation_from_settings(settings: RecapSettings) -> AggregationStrategy:
    """Build the aggregation strategy named in the recap settings."""
    if settings.aggregation == "weighted":
        return WeightedCountAggregation(settings.damage_weight, settings.healing_weight)
    if settings.aggregation == "summed":
        return SummedAmountAggregation()
    raise ConfigurationError(
        f"Unknown recap aggregation: {settings.aggregation}",
        config_key="aggregation",
    )


class RecapGenerator:
    """Build a ``CombatRecap`` from an ended encounter and its log."""

    def __init__(self, aggregation: AggregationStrategy | None = None) -> None:
        self.aggregation = aggregation or WeightedCountAggregation()

    def generate(self, combat: Combat, log: CombatLog) -> CombatRecap:
        """Summarize the encounter.

        Args:
            combat: The encounter; must have both a start and an end time.
            log: The encounter's combat log. Entries of other encounters are
                ignored.

        Returns:
            The recap.

        Raises:
            PreconditionNotMet: If the encounter never started or never ended.
        """
        if combat.start_time is None or combat.end_time is None:
            raise PreconditionNotMet(
                "Recap requires an encounter with both start and end times",
                operation="generate_recap",
                combat_id=combat.id,
                details={
                    "has_start_time": combat.start_time is not None,
                    "has_end_time": combat.end_time is not None,
                },
            )

        entries = [entry for entry in log.entries if entry.combat_id == combat.id]
        recap = CombatRecap(
            combat_id=combat.id,
            combat_name=combat.name,
            start_time=combat.start_time,
            end_time=combat.end_time,
            total_rounds=combat.current_round,
            participants=tuple(self._summarize(entity, entries) for entity in combat.entities),
            major_events=tuple(self._major_events(entries)),
        )
        logger.info(
            "Recap generated",
            combat_id=combat.id,
            aggregation=self.aggregation.name,
            participants=len(recap.participants),
            major_events=len(recap.major_events),
        )
        return recap

    def _summarize(
        self, entity: CombatEntity, entries: Sequence[CombatLogEntry]
    ) -> ParticipantSummary:
        dealt = [e for e in entries if e.type == LogEntryType.DAMAGE and e.entity_id == entity.id]
        taken = [e for e in entries if e.type == LogEntryType.DAMAGE and e.target_id == entity.id]
        healed = [e for e in entries if e.type == LogEntryType.HEALING and e.entity_id == entity.id]
        spells = [e for e in entries if e.entity_id == entity.id and e.action_type == ActionType.SPELL]
        return ParticipantSummary(
            id=entity.id,
            name=entity.name,
            type=entity.type,
            survived=entity.hit_points.current > 0,
            damage_dealt=self.aggregation.damage(dealt),
            damage_taken=self.aggregation.damage(taken),
            healing_done=self.aggregation.healing(healed),
            spells_used=len(spells),
            conditions=entity.conditions,
        )

    @staticmethod
    def _major_events(entries: Sequence[CombatLogEntry]) -> list[MajorEvent]:
        return [
            MajorEvent(
                round=entry.round,
                event=entry.message,
                importance=_MAJOR_EVENT_IMPORTANCE[entry.type],
            )
            for entry in entries
            if entry.type in _MAJOR_EVENT_IMPORTANCE
        ]


__all__ = [
    "AggregationStrategy",
    "WeightedCountAggregation",
    "SummedAmountAggregation",
    "aggregation_from_settings",
    "RecapGenerator",
]
