"""Encounter engine: lifecycle, roster, initiative and recap.

Submodules:
    dice: Dice rolling (d20 library)
    initiative: Initiative strategies and turn order
    adapter: Character/NPC snapshot to combat entity conversion
    results: Tagged operation results
    context: Shared clock, narration and guards
    state_machine: Encounter lifecycle and turn/round advancement
    roster: Participant, hit point, condition and action mutations
    recap: Recap generation
    engine: Facade over all of the above
    registry: In-memory lookup of encounters and their logs

Example:
    >>> from encounter_engine.engine import EncounterEngine
    >>> engine = EncounterEngine()
    >>> combat, log = engine.create("Goblin Ambush").unwrap()
"""

from __future__ import annotations

# =============================================================================
# Dice & Initiative
# =============================================================================
from encounter_engine.engine.dice import DiceExpression, DiceRoller, build_expression
from encounter_engine.engine.initiative import (
    STRATEGIES,
    InitiativeRoller,
    InitiativeStrategy,
    ScaledInitiative,
    StandardInitiative,
    get_strategy,
    initiative_order,
)

# =============================================================================
# Adapter & Results
# =============================================================================
from encounter_engine.engine.adapter import entity_type_for, snapshot_to_entity
from encounter_engine.engine.results import EngineResult, Outcome

# =============================================================================
# Operations
# =============================================================================
from encounter_engine.engine.context import Clock, EngineContext
from encounter_engine.engine.state_machine import EncounterStateMachine
from encounter_engine.engine.roster import RosterEditor, create_map
from encounter_engine.engine.recap import (
    AggregationStrategy,
    RecapGenerator,
    SummedAmountAggregation,
    WeightedCountAggregation,
    aggregation_from_settings,
)

# =============================================================================
# Facade & Registry
# =============================================================================
from encounter_engine.engine.engine import EncounterEngine
from encounter_engine.engine.registry import EncounterRegistry


__all__ = [
    # Dice
    "DiceExpression",
    "DiceRoller",
    "build_expression",
    # Initiative
    "STRATEGIES",
    "InitiativeRoller",
    "InitiativeStrategy",
    "ScaledInitiative",
    "StandardInitiative",
    "get_strategy",
    "initiative_order",
    # Adapter
    "entity_type_for",
    "snapshot_to_entity",
    # Results
    "EngineResult",
    "Outcome",
    # Operations
    "Clock",
    "EngineContext",
    "EncounterStateMachine",
    "RosterEditor",
    "create_map",
    # Recap
    "AggregationStrategy",
    "RecapGenerator",
    "SummedAmountAggregation",
    "WeightedCountAggregation",
    "aggregation_from_settings",
    # Facade
    "EncounterEngine",
    "EncounterRegistry",
]
