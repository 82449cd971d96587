"""Initiative rolling and turn order.

The distribution of an initiative roll is a named, swappable strategy. Every
strategy honours the same contract: a higher initiative bonus gives a
statistically higher initiative. The turn order is the entity ids sorted by
initiative, highest first; ties keep roster order and are not re-rolled.
"""

from __future__ import annotations

from typing import Protocol

from encounter_engine.core.constants import INITIATIVE_DIE, SCALED_RANGE_PER_BONUS
from encounter_engine.core.exceptions import ConfigurationError
from encounter_engine.core.logging import get_logger
from encounter_engine.engine.dice import DiceRoller
from encounter_engine.models.combat import CombatEntity


logger = get_logger(__name__)


class InitiativeStrategy(Protocol):
    """Draws one initiative value from an initiative bonus."""

    name: str

    def roll(self, bonus: int) -> int: ...


class StandardInitiative:
    """``1d20 + bonus``."""

    name = "standard"

    def __init__(self, roller: DiceRoller | None = None) -> None:
        self._roller = roller or DiceRoller()

    def roll(self, bonus: int) -> int:
        return self._roller.roll_die(INITIATIVE_DIE, bonus).total

    def bounds(self, bonus: int) -> tuple[int, int]:
        """Lowest and highest possible result for ``bonus``."""
        return 1 + bonus, INITIATIVE_DIE + bonus


class ScaledInitiative:
    """``1d(20 + 2 * max(bonus, 0)) + bonus``.

    A positive bonus raises the floor of the roll and widens its range.
    """

    name = "scaled"

    def __init__(self, roller: DiceRoller | None = None) -> None:
        self._roller = roller or DiceRoller()

    @staticmethod
    def sides_for(bonus: int) -> int:
        return INITIATIVE_DIE + SCALED_RANGE_PER_BONUS * max(bonus, 0)

    def roll(self, bonus: int) -> int:
        return self._roller.roll_die(self.sides_for(bonus), bonus).total

    def bounds(self, bonus: int) -> tuple[int, int]:
        """Lowest and highest possible result for ``bonus``."""
        return 1 + bonus, self.sides_for(bonus) + bonus


STRATEGIES: dict[str, type[StandardInitiative] | type[ScaledInitiative]] = {
    StandardInitiative.name: StandardInitiative,
    ScaledInitiative.name: ScaledInitiative,
}


def get_strategy(name: str, *, roller: DiceRoller | None = None) -> InitiativeStrategy:
    """Instantiate an initiative strategy by name.

    Raises:
        ConfigurationError: If no strategy has that name.
    """
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown initiative strategy: {name}",
            config_key="initiative_strategy",
            details={"available": sorted(STRATEGIES)},
        ) from exc
    return strategy_cls(roller)


def initiative_order(entities: tuple[CombatEntity, ...]) -> tuple[str, ...]:
    """Entity ids by initiative, highest first; ties keep roster order."""
    ranked = sorted(entities, key=lambda entity: entity.initiative, reverse=True)
    return tuple(entity.id for entity in ranked)


class InitiativeRoller:
    """Roll initiative for a roster and derive its turn order."""

    def __init__(self, strategy: InitiativeStrategy) -> None:
        self.strategy = strategy

    def roll(
        self, entities: tuple[CombatEntity, ...]
    ) -> tuple[tuple[CombatEntity, ...], tuple[str, ...]]:
        """Assign a fresh initiative to every entity.

        Args:
            entities: The roster, in insertion order.

        Returns:
            The updated roster (same order) and the turn order.
        """
        rolled = tuple(
            entity.model_copy(update={"initiative": self.strategy.roll(entity.initiative_bonus)})
            for entity in entities
        )
        order = initiative_order(rolled)
        logger.info(
            "Initiative rolled",
            strategy=self.strategy.name,
            order=[f"{e.name}:{e.initiative}" for e in sorted(rolled, key=lambda e: order.index(e.id))],
        )
        return rolled, order


__all__ = [
    "InitiativeStrategy",
    "StandardInitiative",
    "ScaledInitiative",
    "STRATEGIES",
    "get_strategy",
    "initiative_order",
    "InitiativeRoller",
]
