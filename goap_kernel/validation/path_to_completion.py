"""
Path-to-Completion Validator — can every goal of a planning system be reached?

No real world state is available when a planning system is defined, so
the validator assumes one:
  - every known condition starts FALSE
  - TRUE effects of starting actions with no TRUE preconditions hold
  - conditions required TRUE but produced TRUE by no action are external
    inputs, assumed TRUE
It then plans to each goal from that state.
"""

import logging
from typing import Callable, Dict, List, Optional

from goap_kernel.models.action import Action
from goap_kernel.models.plan import PlanningSystem
from goap_kernel.models.validation import ValidationIssue, ValidationReport
from goap_kernel.models.world import ConditionDetermination, WorldState
from goap_kernel.planner.astar import AStarGoapPlanner
from goap_kernel.planner.base import OptimizingGoapPlanner

logger = logging.getLogger(__name__)

PlannerFactory = Callable[[], OptimizingGoapPlanner]

TRUE = ConditionDetermination.TRUE
FALSE = ConditionDetermination.FALSE


class PathToCompletionValidator:
    """Checks a planning system has a path from its inputs to each goal."""

    def __init__(self, planner_factory: Optional[PlannerFactory] = None):
        self._planner_factory = planner_factory or AStarGoapPlanner

    def validate(self, system: PlanningSystem) -> ValidationReport:
        if not system.goals:
            return ValidationReport(valid=True)

        if not system.actions:
            return self._invalid(
                "NO_ACTIONS_TO_GOALS",
                "Planning system has no actions.",
                [goal.name for goal in system.ordered_goals()],
            )

        actions = system.ordered_actions()
        starting = self.starting_actions(actions)
        if not starting:
            return self._invalid(
                "NO_STARTING_ACTION",
                "No action can start the chain. "
                "All actions depend on outputs from other actions.",
                [action.name for action in actions],
            )
        logger.debug("Starting actions: %s", [a.name for a in starting])

        initial_state = self.assumed_initial_state(system, starting)
        logger.debug("Assumed initial state: %s", initial_state)

        planner = self._planner_factory()
        failed = []
        for goal in system.ordered_goals():
            plan = planner.plan_to_goal(actions, goal, initial_state)
            if plan is None or plan.is_complete():
                logger.debug("No path to goal %s", goal.name)
                failed.append(goal.name)
            else:
                logger.debug("Path to goal %s: %s", goal.name, plan.action_names())

        if failed:
            return self._invalid(
                "NO_PATH_TO_GOAL",
                f"No valid path found to achieve goals: {', '.join(failed)}. "
                "Either no plan exists or the goals' preconditions cannot be "
                "achieved through available actions.",
                failed,
            )
        return ValidationReport(valid=True)

    @staticmethod
    def starting_actions(actions: List[Action]) -> List[Action]:
        """
        Actions that can run without waiting for another action.

        An action qualifies if each of its preconditions, ignoring ones it
        produces itself, is produced by no action or is required FALSE.
        """
        produced = {key for action in actions for key in action.effects}

        def can_start(action: Action) -> bool:
            return all(
                key not in produced or value == FALSE
                for key, value in action.preconditions.items()
                if key not in action.effects
            )

        return [action for action in actions if can_start(action)]

    @staticmethod
    def assumed_initial_state(
        system: PlanningSystem, starting: List[Action]
    ) -> WorldState:
        conditions = system.known_conditions() | {
            key for goal in system.goals for key in goal.preconditions
        }
        state: Dict[str, ConditionDetermination] = {key: FALSE for key in conditions}

        for action in starting:
            if TRUE in action.preconditions.values():
                continue
            for key, value in action.effects.items():
                if value == TRUE:
                    state[key] = TRUE

        produced_true = {
            key
            for action in system.actions
            for key, value in action.effects.items()
            if value == TRUE
        }
        for action in system.actions:
            for key, value in action.preconditions.items():
                if value == TRUE and key not in produced_true:
                    state[key] = TRUE

        return WorldState(state=state)

    @staticmethod
    def _invalid(code: str, message: str, subjects: List[str]) -> ValidationReport:
        return ValidationReport(
            valid=False,
            issues=[ValidationIssue(code=code, message=message, subjects=subjects)],
        )
