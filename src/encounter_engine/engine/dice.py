"""Dice rolling backed by the d20 library.

The engine does not resolve attacks, saves or damage; the only randomness it
owns is the initiative roll. This module wraps d20 expression rolling for
that purpose.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

import d20

from encounter_engine.core.exceptions import DiceRollError
from encounter_engine.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The expression that was rolled.
        total: The total result of the roll.
        dice: Individual kept dice results.
        modifier: Static modifier applied.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int


def build_expression(sides: int, modifier: int = 0, *, count: int = 1) -> str:
    """Build a d20-notation expression such as ``1d20+2`` or ``1d24-1``."""
    if count < 1 or sides < 1:
        raise DiceRollError(
            "Dice count and sides must be positive",
            details={"count": count, "sides": sides},
        )
    if modifier == 0:
        return f"{count}d{sides}"
    sign = "+" if modifier > 0 else "-"
    return f"{count}d{sides}{sign}{abs(modifier)}"


class DiceRoller:
    """Roll d20-notation dice expressions.

    Example:
        >>> roller = DiceRoller(seed=7)
        >>> result = roller.roll("1d20+2")
        >>> 3 <= result.total <= 22
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls. d20 draws from
                the module-level ``random`` generator, so the seed is global.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> DiceExpression:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d20+5').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        dice_values = self._extract_dice_values(result.expr)
        rolled = DiceExpression(
            expression=expression,
            total=result.total,
            dice=dice_values,
            modifier=result.total - sum(dice_values),
        )
        logger.debug("Dice rolled", expression=expression, total=result.total)
        return rolled

    def roll_die(self, sides: int, modifier: int = 0) -> DiceExpression:
        """Roll a single die of ``sides`` faces plus a flat modifier."""
        return self.roll(build_expression(sides, modifier))

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Extract kept dice values from a d20 expression tree."""
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values


__all__ = [
    "DiceExpression",
    "DiceRoller",
    "build_expression",
]
