"""In-memory registry of encounters and their logs.

The registry keeps the latest value of each encounter and its combat log,
keyed by combat id, for the lifetime of the process. It does not persist
anything; storing encounters is the caller's job. It is not thread-safe.
"""

from __future__ import annotations

from collections.abc import Callable

from encounter_engine.core.exceptions import GameEngineError
from encounter_engine.core.logging import bind_context, clear_context, get_logger
from encounter_engine.engine.engine import EncounterEngine
from encounter_engine.engine.results import EngineResult
from encounter_engine.models.combat import Combat
from encounter_engine.models.log import CombatLog
from encounter_engine.models.recap import CombatRecap


logger = get_logger(__name__)

Operation = Callable[[Combat, CombatLog], EngineResult]


class EncounterRegistry:
    """Lookup table of running encounters.

    Example:
        >>> registry = EncounterRegistry(engine)
        >>> combat = registry.record(engine.create("Ambush")).combat
        >>> registry.apply(combat.id, engine.pause).is_rejected
        True
    """

    def __init__(self, engine: EncounterEngine | None = None) -> None:
        self.engine = engine or EncounterEngine()
        self._combats: dict[str, Combat] = {}
        self._logs: dict[str, CombatLog] = {}

    def __contains__(self, combat_id: object) -> bool:
        return combat_id in self._combats

    def register(self, result: EngineResult) -> EngineResult:
        """Store a newly created encounter.

        Raises:
            GameEngineError: If an encounter with the same id is already stored.
        """
        if result.combat.id in self._combats:
            raise GameEngineError(
                "Combat already registered", details={"combat_id": result.combat.id}
            )
        logger.info("Combat registered", combat_id=result.combat.id, name=result.combat.name)
        return self.record(result)

    def record(self, result: EngineResult) -> EngineResult:
        """Store the encounter and log carried by ``result``; return it."""
        self._combats[result.combat.id] = result.combat
        self._logs[result.combat.id] = result.log
        return result

    def save(self, combat: Combat) -> None:
        """Store a new value for an encounter, creating its log if needed."""
        self._combats[combat.id] = combat
        self._logs.setdefault(combat.id, CombatLog(combat_id=combat.id))

    def load(self, combat_id: str) -> Combat | None:
        return self._combats.get(combat_id)

    def log_for(self, combat_id: str) -> CombatLog | None:
        return self._logs.get(combat_id)

    def list(self) -> list[Combat]:
        return list(self._combats.values())

    def delete(self, combat_id: str) -> bool:
        """Drop an encounter together with its log.

        Returns:
            True if the encounter was known.
        """
        self._logs.pop(combat_id, None)
        removed = self._combats.pop(combat_id, None) is not None
        if removed:
            logger.info("Combat deleted", combat_id=combat_id)
        return removed

    def apply(self, combat_id: str, operation: Operation) -> EngineResult:
        """Run an engine operation on a stored encounter and store the result.

        Log records emitted while the operation runs carry ``combat_id``.

        Raises:
            GameEngineError: If the encounter is unknown.
        """
        combat = self._combats.get(combat_id)
        if combat is None:
            raise GameEngineError("Unknown combat", details={"combat_id": combat_id})
        bind_context(combat_id=combat_id)
        try:
            return self.record(operation(combat, self._logs[combat_id]))
        finally:
            clear_context("combat_id")

    def generate_recap(self, combat_id: str) -> CombatRecap | None:
        """Recap a stored encounter.

        Returns:
            The recap, or None if the encounter is unknown.

        Raises:
            PreconditionNotMet: If the encounter has not both started and ended.
        """
        combat = self._combats.get(combat_id)
        if combat is None:
            return None
        return self.engine.generate_recap(combat, self._logs[combat_id])


__all__ = [
    "EncounterRegistry",
]
