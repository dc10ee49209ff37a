"""
World State Determiners — where the planner's starting conditions come from.

A determiner reports the current world state. It may report expensive
conditions as UNKNOWN and evaluate them only when the planner asks,
because the value would change the plan.
"""

import logging
from typing import Callable, Dict, Mapping, Optional, Protocol

from goap_kernel.models.world import ConditionDetermination, WorldState

logger = logging.getLogger(__name__)

ConditionEvaluator = Callable[[], Optional[bool]]


class WorldStateDeterminer(Protocol):
    """Protocol for world-state sources — pluggable backend."""

    def determine_world_state(self) -> WorldState: ...

    def determine_condition(self, condition: str) -> ConditionDetermination:
        """Evaluate one condition, bypassing any laziness or caching."""
        ...


class MapWorldStateDeterminer:
    """Fixed conditions. Anything not in the map is UNKNOWN."""

    def __init__(self, conditions: Optional[Mapping[str, ConditionDetermination]] = None):
        self._conditions: Dict[str, ConditionDetermination] = dict(conditions or {})

    def determine_world_state(self) -> WorldState:
        return WorldState(state=self._conditions)

    def determine_condition(self, condition: str) -> ConditionDetermination:
        return self._conditions.get(condition, ConditionDetermination.UNKNOWN)


def from_map(
    conditions: Optional[Mapping[str, ConditionDetermination]] = None,
) -> WorldStateDeterminer:
    return MapWorldStateDeterminer(conditions)


class LazyWorldStateDeterminer:
    """
    Conditions computed by registered evaluators.

    Eager evaluators run every time the world state is determined. Lazy
    ones are reported as UNKNOWN there and only run through
    determine_condition().
    """

    def __init__(self):
        self._evaluators: Dict[str, ConditionEvaluator] = {}
        self._lazy: Dict[str, bool] = {}

    def register_condition(
        self, condition: str, evaluator: ConditionEvaluator, lazy: bool = False
    ) -> None:
        """Register an evaluator returning True, False or None (unknown)."""
        self._evaluators[condition] = evaluator
        self._lazy[condition] = lazy

    def determine_world_state(self) -> WorldState:
        state = {}
        for condition in self._evaluators:
            if self._lazy[condition]:
                state[condition] = ConditionDetermination.UNKNOWN
            else:
                state[condition] = self.determine_condition(condition)
        return WorldState(state=state)

    def determine_condition(self, condition: str) -> ConditionDetermination:
        evaluator = self._evaluators.get(condition)
        if evaluator is None:
            return ConditionDetermination.UNKNOWN
        determination = ConditionDetermination.of(evaluator())
        logger.debug("Evaluated condition %s = %s", condition, determination.value)
        return determination
