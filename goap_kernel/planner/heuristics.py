"""Heuristics estimating the remaining cost from a state to a goal."""

from goap_kernel.models.action import Goal
from goap_kernel.models.world import WorldState


class Heuristic:
    """Base class for planning heuristics."""

    def estimate(self, state: WorldState, goal: Goal) -> float:
        """Estimate cost from state to goal."""
        raise NotImplementedError


class UnsatisfiedConditionsHeuristic(Heuristic):
    """Count of goal preconditions the state does not yet meet."""

    def estimate(self, state: WorldState, goal: Goal) -> float:
        return float(len(state.unsatisfied(goal.preconditions)))
