"""
Plan Optimizer — removes actions that do not help reach the goal.

A raw search result can carry steps that were cheap detours rather than
contributions. Two passes trim it:

  1. Backward: walk from the goal to the start, keeping only actions
     that establish a currently needed condition, and propagating each
     kept action's preconditions into the need set.
  2. Forward: simulate from the start state, keeping only actions that
     move a goal condition toward its required value.

The result is replayed against the goal. If it does not reach the goal
the raw search plan, which always does, is used instead.
"""

import logging
from typing import List, Sequence

from goap_kernel.errors import PlanInvariantViolation
from goap_kernel.models.action import Action, Goal
from goap_kernel.models.world import WorldState, format_conditions

logger = logging.getLogger(__name__)


def simulate_plan(start_state: WorldState, actions: Sequence[Action]) -> WorldState:
    """Apply each action achievable at its turn; skip the rest."""
    state = start_state
    for action in actions:
        if action.is_achievable(state):
            state = state.apply(action.effects)
    return state


def validate_plan(start_state: WorldState, actions: Sequence[Action], goal: Goal) -> None:
    """
    Replay a plan strictly.

    Raises:
        PlanInvariantViolation: if an action is not achievable at its
            step, or the final state does not satisfy the goal.
    """
    state = start_state
    for index, action in enumerate(actions):
        missing = state.unsatisfied(action.preconditions)
        if missing:
            raise PlanInvariantViolation(
                f"Action {index} ({action.name}) is not achievable",
                context={"goal": goal.name, "missing": format_conditions(missing)},
            )
        state = state.apply(action.effects)

    missing = state.unsatisfied(goal.preconditions)
    if missing:
        raise PlanInvariantViolation(
            f"Plan does not reach goal {goal.name}",
            context={"missing": format_conditions(missing), "final_state": state},
        )


def backward_planning_optimization(actions: Sequence[Action], goal: Goal) -> List[Action]:
    """Keep only the actions on the dependency chain leading to the goal."""
    if not actions:
        return []

    needed = dict(goal.preconditions)
    kept: List[Action] = []

    for action in reversed(actions):
        necessary = False
        for key, value in action.effects.items():
            if needed.get(key) == value:
                necessary = True
                del needed[key]
                needed.update(action.preconditions)
        if necessary:
            kept.append(action)

    kept.reverse()
    return kept


def forward_planning_optimization(
    actions: Sequence[Action], start_state: WorldState, goal: Goal
) -> List[Action]:
    """
    Keep only the actions that make progress toward the goal.

    An action makes progress when it changes the state and one of its
    effects touches a goal condition that is not yet at the required
    value, either by setting it to that value or by leaving the key
    absent from the resulting state.

    Returns the input unchanged if the trimmed plan no longer reaches
    the goal.
    """
    if not actions:
        return []

    kept: List[Action] = []
    state = start_state
    required = goal.preconditions

    for action in actions:
        if not action.is_achievable(state):
            continue

        next_state = state.apply(action.effects)
        progress = next_state != state and any(
            key in required
            and state.get(key) != required[key]
            and (value == required[key] or key not in next_state)
            for key, value in action.effects.items()
        )
        if progress:
            kept.append(action)
            state = next_state

    if not goal.is_achievable(simulate_plan(start_state, kept)):
        return list(actions)
    return kept


def optimize_plan(
    actions: Sequence[Action], start_state: WorldState, goal: Goal
) -> List[Action]:
    """
    Run both passes over a raw search plan and validate the outcome.

    Falls back to the raw plan when the optimized one fails validation,
    so the result always reaches the goal if the raw plan does.
    """
    if not actions:
        return []

    backward = backward_planning_optimization(actions, goal)
    optimized = forward_planning_optimization(backward, start_state, goal)

    try:
        validate_plan(start_state, optimized, goal)
    except PlanInvariantViolation as e:
        logger.warning(
            "Optimized plan %s rejected, using search result %s: %s",
            [a.name for a in optimized],
            [a.name for a in actions],
            e,
        )
        return list(actions)

    if len(optimized) < len(actions):
        logger.debug(
            "Optimized plan to %s from %d to %d actions",
            goal.name,
            len(actions),
            len(optimized),
        )
    return optimized
