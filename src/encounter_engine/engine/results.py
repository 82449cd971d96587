"""Tagged results returned by every engine operation.

Two failure philosophies coexist. A guarded no-op (pausing an encounter that
is not active, advancing the turn during setup) is ``REJECTED``: the UI should
have disabled the control, so nothing changes and nothing is raised. A hard
precondition failure (starting with too few combatants) is
``PRECONDITION_ERROR`` and carries a ``PreconditionNotMet`` the caller can
raise with ``unwrap``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from encounter_engine.core.exceptions import PreconditionNotMet


if TYPE_CHECKING:
    from encounter_engine.models.combat import Combat
    from encounter_engine.models.log import CombatLog


class Outcome(StrEnum):
    """Result tags."""

    OK = "ok"
    REJECTED = "rejected"
    PRECONDITION_ERROR = "precondition_error"


@dataclass(frozen=True)
class EngineResult:
    """The encounter and its log after an operation.

    For REJECTED and PRECONDITION_ERROR outcomes ``combat`` and ``log`` are
    the values that were passed in, unchanged.

    Attributes:
        outcome: Result tag.
        combat: Encounter after the operation.
        log: Narration stream after the operation.
        reason: Why the operation was rejected, if it was.
        error: The precondition failure, if there was one.
    """

    outcome: Outcome
    combat: Combat
    log: CombatLog
    reason: str | None = None
    error: PreconditionNotMet | None = None

    @classmethod
    def ok(cls, combat: Combat, log: CombatLog) -> EngineResult:
        return cls(Outcome.OK, combat, log)

    @classmethod
    def rejected(cls, combat: Combat, log: CombatLog, reason: str) -> EngineResult:
        return cls(Outcome.REJECTED, combat, log, reason=reason)

    @classmethod
    def precondition_error(
        cls, combat: Combat, log: CombatLog, error: PreconditionNotMet
    ) -> EngineResult:
        return cls(Outcome.PRECONDITION_ERROR, combat, log, reason=error.message, error=error)

    @property
    def is_ok(self) -> bool:
        return self.outcome == Outcome.OK

    @property
    def is_rejected(self) -> bool:
        return self.outcome == Outcome.REJECTED

    @property
    def is_precondition_error(self) -> bool:
        return self.outcome == Outcome.PRECONDITION_ERROR

    def unwrap(self) -> tuple[Combat, CombatLog]:
        """Return ``(combat, log)``, raising the carried precondition error.

        Raises:
            PreconditionNotMet: If the outcome is PRECONDITION_ERROR.
        """
        if self.error is not None:
            raise self.error
        return self.combat, self.log


__all__ = [
    "Outcome",
    "EngineResult",
]
