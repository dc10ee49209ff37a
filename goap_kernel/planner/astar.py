"""
A* GOAP Planner — finds the cheapest action sequence from a state to a goal.

The algorithm:
  1. Start from the initial world state with g = 0.
  2. Keep an open list (binary heap) ordered by f = g + h, ties broken
     by lower h and then by insertion order.
  3. Pop the lowest-f node. A goal state becomes the best goal found so
     far; any other state is expanded with every achievable action that
     changes it.
  4. Record the best known g per state. A cheaper path to a state that
     was already expanded reopens it.
  5. Keep searching until the open list is empty, skipping any node no
     cheaper than the best goal found.

Costs lie in [0, 1] while the heuristic counts unmet goal conditions, so
the heuristic may overestimate. Searching on past the first goal, bounded
by the best goal cost, still returns the cheapest plan.
"""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Collection, Dict, List, Optional, Set, Tuple

from goap_kernel.models.action import Action, Goal
from goap_kernel.models.plan import Plan
from goap_kernel.models.planner import PlannerConfig
from goap_kernel.models.world import WorldState
from goap_kernel.planner.base import OptimizingGoapPlanner
from goap_kernel.planner.heuristics import Heuristic, UnsatisfiedConditionsHeuristic
from goap_kernel.planner.optimizer import optimize_plan
from goap_kernel.world_model.determiner import WorldStateDeterminer

logger = logging.getLogger(__name__)


@dataclass
class SearchNode:
    """
    Node in the A* search tree.

    Attributes:
        state: World state at this node
        g_score: Cost from start to this node
        h_score: Heuristic estimate to goal
        parent: Predecessor node
        action: Action that led here from the parent
    """

    state: WorldState
    g_score: float
    h_score: float
    parent: Optional["SearchNode"] = None
    action: Optional[Action] = None

    @property
    def f_score(self) -> float:
        return self.g_score + self.h_score

    def reconstruct_plan(self) -> List[Action]:
        """Action sequence from the root to this node."""
        plan = []
        node: Optional[SearchNode] = self
        while node is not None and node.action is not None:
            plan.append(node.action)
            node = node.parent
        plan.reverse()
        return plan


@dataclass
class SearchResult:
    """Outcome of one raw search, before plan optimization."""

    actions: Optional[List[Action]]
    iterations: int = 0
    expansions: int = 0
    generated: int = 0
    exhausted: bool = False  # Budget ran out before the open list emptied
    stats: Dict[str, float] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.actions is not None


class AStarGoapPlanner(OptimizingGoapPlanner):
    """GOAP planner using A* search followed by plan optimization."""

    def __init__(
        self,
        world_state_determiner: Optional[WorldStateDeterminer] = None,
        config: Optional[PlannerConfig] = None,
        heuristic: Optional[Heuristic] = None,
    ):
        super().__init__(world_state_determiner, config)
        self.heuristic = heuristic or UnsatisfiedConditionsHeuristic()

    def plan_to_goal_from(
        self,
        start_state: WorldState,
        actions: Collection[Action],
        goal: Goal,
    ) -> Optional[Plan]:
        result = self.search(start_state, actions, goal)
        if not result.found:
            return None

        optimized = optimize_plan(result.actions, start_state, goal)
        return Plan(actions=optimized, goal=goal, world_state=start_state)

    def search(
        self,
        start_state: WorldState,
        actions: Collection[Action],
        goal: Goal,
    ) -> SearchResult:
        """Run A* and return the raw, unoptimized action sequence if any."""
        logger.debug(
            "Searching for %s over %d actions from %s",
            goal.name,
            len(actions),
            start_state,
        )
        started = time.monotonic()
        deadline = (
            started + self.config.timeout_seconds
            if self.config.timeout_seconds is not None
            else None
        )

        counter = itertools.count()
        h_start = self.heuristic.estimate(start_state, goal)
        open_list: List[Tuple[float, float, int, SearchNode]] = [
            (h_start, h_start, next(counter), SearchNode(start_state, 0.0, h_start))
        ]
        g_scores: Dict[WorldState, float] = {start_state: 0.0}
        closed_set: Set[WorldState] = set()

        best_goal: Optional[SearchNode] = None
        result = SearchResult(actions=None)

        while open_list:
            if result.iterations >= self.config.max_iterations or (
                deadline is not None and time.monotonic() > deadline
            ):
                result.exhausted = True
                break
            result.iterations += 1

            _, _, _, current = heapq.heappop(open_list)

            if best_goal is not None and current.g_score >= best_goal.g_score:
                continue
            # Stale entry: the state was expanded, or reached more cheaply since
            if current.state in closed_set:
                continue
            if current.g_score > g_scores.get(current.state, float("inf")):
                continue

            closed_set.add(current.state)
            result.expansions += 1

            if goal.is_achievable(current.state):
                best_goal = current
                continue

            for action in actions:
                if not action.is_achievable(current.state):
                    continue

                next_state = current.state.apply(action.effects)
                if next_state == current.state:
                    continue

                tentative_g = current.g_score + action.cost
                if best_goal is not None and tentative_g >= best_goal.g_score:
                    continue
                if tentative_g >= g_scores.get(next_state, float("inf")):
                    continue

                g_scores[next_state] = tentative_g
                closed_set.discard(next_state)
                h_score = self.heuristic.estimate(next_state, goal)
                heapq.heappush(
                    open_list,
                    (
                        tentative_g + h_score,
                        h_score,
                        next(counter),
                        SearchNode(next_state, tentative_g, h_score, current, action),
                    ),
                )
                result.generated += 1

        result.stats["duration_ms"] = (time.monotonic() - started) * 1000

        if result.exhausted:
            logger.warning(
                "Search budget exhausted for goal %s after %d iterations%s",
                goal.name,
                result.iterations,
                "; returning best plan found so far" if best_goal else "",
            )

        if best_goal is None:
            logger.debug(
                "No plan to %s after %d expansions", goal.name, result.expansions
            )
            return result

        result.actions = best_goal.reconstruct_plan()
        logger.debug(
            "Found plan to %s: %s (cost %.2f, %d expansions)",
            goal.name,
            [a.name for a in result.actions],
            best_goal.g_score,
            result.expansions,
        )
        return result
