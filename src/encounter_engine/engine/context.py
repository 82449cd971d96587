"""Shared plumbing for engine operations: clock, narration and guards."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from encounter_engine.core.config import Settings, get_settings
from encounter_engine.core.exceptions import PreconditionNotMet
from encounter_engine.core.logging import get_logger
from encounter_engine.engine.results import EngineResult
from encounter_engine.models.combat import Combat, utc_now
from encounter_engine.models.enums import LogEntryType
from encounter_engine.models.log import CombatLog


logger = get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass
class EngineContext:
    """Settings and clock shared by the state machine and the roster editor.

    Attributes:
        settings: Engine configuration.
        clock: Source of timestamps; injectable for deterministic tests.
    """

    settings: Settings = field(default_factory=get_settings)
    clock: Clock = utc_now

    def now(self) -> datetime:
        return self.clock()

    def touch(self, combat: Combat, **update: Any) -> Combat:
        """Copy ``combat`` with ``update`` applied and ``updated_at`` refreshed."""
        return combat.model_copy(update={**update, "updated_at": self.now()})

    def narrate(
        self,
        combat: Combat,
        log: CombatLog,
        message: str,
        type: LogEntryType,
        **kwargs: Any,
    ) -> CombatLog:
        """Append an entry stamped with the encounter's current round."""
        return log.append(
            message,
            type,
            round=combat.current_round,
            timestamp=self.now(),
            **kwargs,
        )

    def reject(
        self, combat: Combat, log: CombatLog, operation: str, reason: str
    ) -> EngineResult:
        """Build a guarded no-op result and note it at debug level."""
        logger.debug(
            "Operation rejected",
            operation=operation,
            reason=reason,
            combat_id=combat.id,
            status=combat.status.value,
        )
        return EngineResult.rejected(combat, log, reason)

    def check_log(self, combat: Combat, log: CombatLog, operation: str) -> EngineResult | None:
        """Refuse a log that belongs to a different encounter.

        Returns:
            A precondition error result, or None when the log matches.
        """
        if log.combat_id == combat.id:
            return None
        error = PreconditionNotMet(
            "Combat log belongs to a different encounter",
            operation=operation,
            combat_id=combat.id,
            details={"log_combat_id": log.combat_id},
        )
        return EngineResult.precondition_error(combat, log, error)


__all__ = [
    "Clock",
    "EngineContext",
]
