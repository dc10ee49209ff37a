"""
Optimizing GOAP planner — the planning pipeline shared by all search engines.

Subclasses supply plan_to_goal_from(); this class adds:
  - the starting world state, from a WorldStateDeterminer
  - evaluation of UNKNOWN conditions whose value would change the plan
  - ranking plans across goals by net value
  - pruning a planning system down to the actions some best plan uses
"""

import logging
from abc import ABC, abstractmethod
from typing import Collection, List, Optional

from goap_kernel.models.action import Action, Goal
from goap_kernel.models.plan import Plan, PlanningSystem
from goap_kernel.models.planner import PlannerConfig
from goap_kernel.models.world import WorldState
from goap_kernel.world_model.determiner import WorldStateDeterminer, from_map

logger = logging.getLogger(__name__)


class OptimizingGoapPlanner(ABC):
    """Base GOAP planner. Holds no per-call state, so instances may be shared."""

    def __init__(
        self,
        world_state_determiner: Optional[WorldStateDeterminer] = None,
        config: Optional[PlannerConfig] = None,
    ):
        self.world_state_determiner = world_state_determiner or from_map()
        self.config = config or PlannerConfig()

    def world_state(self) -> WorldState:
        return self.world_state_determiner.determine_world_state()

    @abstractmethod
    def plan_to_goal_from(
        self,
        start_state: WorldState,
        actions: Collection[Action],
        goal: Goal,
    ) -> Optional[Plan]:
        """Find the cheapest plan from the given state, or None if there is none."""

    def plan_to_goal(
        self,
        actions: Collection[Action],
        goal: Goal,
        start_state: Optional[WorldState] = None,
    ) -> Optional[Plan]:
        """
        Plan from the given state, or from the determined world state.

        UNKNOWN conditions are only resolved in a determined world state;
        a caller-supplied state is planned over as given.

        Returns None when the goal is unreachable with these actions.
        """
        actions = list(actions)
        if start_state is not None:
            return self.plan_to_goal_from(start_state, actions, goal)
        return self._plan_from_determined(self.world_state(), actions, goal)

    def _plan_from_determined(
        self, state: WorldState, actions: List[Action], goal: Goal
    ) -> Optional[Plan]:
        if self.config.resolve_unknown_conditions:
            state = self._resolve_unknown_conditions(state, actions, goal)
        return self.plan_to_goal_from(state, actions, goal)

    def _resolve_unknown_conditions(
        self, state: WorldState, actions: List[Action], goal: Goal
    ) -> WorldState:
        """
        Evaluate each UNKNOWN condition whose value would change the plan.

        For each unknown condition, plans are made as if it were TRUE, as
        if it were FALSE, and as it stands. If those plans disagree the
        determiner is asked for the real value.
        """
        for condition in sorted(state.unknown_conditions()):
            candidates = [
                self.plan_to_goal_from(variant, actions, goal)
                for variant in state.variants(condition)
            ]
            candidates.append(self.plan_to_goal_from(state, actions, goal))
            distinct = {tuple(p.action_names()) for p in candidates if p is not None}
            if len(distinct) <= 1:
                continue

            determined = self.world_state_determiner.determine_condition(condition)
            logger.info(
                "Condition %s changes the plan to %s; evaluated as %s",
                condition,
                goal.name,
                determined.value,
            )
            state = state.with_condition(condition, determined)
        return state

    def plans_to_goals(
        self, planning_system: PlanningSystem, start_state: Optional[WorldState] = None
    ) -> List[Plan]:
        """One plan per reachable goal, best net value first."""
        actions = planning_system.ordered_actions()
        determined = self.world_state() if start_state is None else None

        plans = []
        for goal in planning_system.ordered_goals():
            if determined is None:
                plan = self.plan_to_goal_from(start_state, actions, goal)
            else:
                plan = self._plan_from_determined(determined, actions, goal)
            if plan is None:
                logger.debug("No plan to goal %s", goal.name)
                continue
            plans.append(plan)

        # Stable: equal net values keep goal-name order
        return sorted(plans, key=lambda p: p.net_value, reverse=True)

    def best_value_plan_to_any_goal(
        self, planning_system: PlanningSystem, start_state: Optional[WorldState] = None
    ) -> Optional[Plan]:
        plans = self.plans_to_goals(planning_system, start_state)
        return plans[0] if plans else None

    def prune(
        self, planning_system: PlanningSystem, start_state: Optional[WorldState] = None
    ) -> PlanningSystem:
        """
        Drop every action that no best plan to any goal uses.

        Goals are kept as they are; the result never contains an action
        that was not in the input system.
        """
        plans = self.plans_to_goals(planning_system, start_state)
        logger.info(
            "%d plan(s) to consider in pruning%s",
            len(plans),
            "".join("\n\t" + plan.info_string() for plan in plans),
        )

        used = {action for plan in plans for action in plan.actions}
        kept = frozenset(a for a in planning_system.actions if a in used)
        logger.debug(
            "Pruned planning system from %d to %d actions",
            len(planning_system.actions),
            len(kept),
        )
        return planning_system.model_copy(update={"actions": kept})
