"""Plan and PlanningSystem — what the planner produces and what it plans over."""

from typing import FrozenSet, Iterable, List, Set

from pydantic import BaseModel, ConfigDict, model_validator

from goap_kernel.models.action import Action, Goal
from goap_kernel.models.world import WorldState


class Plan(BaseModel):
    """An ordered sequence of actions that reaches a goal."""

    model_config = ConfigDict(frozen=True)

    actions: List[Action] = []
    goal: Goal
    world_state: WorldState = WorldState()  # State planning started from

    @property
    def cost(self) -> float:
        return sum(action.cost for action in self.actions)

    @property
    def actions_value(self) -> float:
        return sum(action.value for action in self.actions)

    @property
    def net_value(self) -> float:
        """Goal value plus the value of the actions, less their cost."""
        return self.goal.value + self.actions_value - self.cost

    def is_complete(self) -> bool:
        """A plan with nothing left to do: the goal already holds."""
        return not self.actions

    def action_names(self) -> List[str]:
        return [action.name for action in self.actions]

    def info_string(self, verbose: bool = False) -> str:
        if verbose:
            steps = "\n".join(
                "\t" * (i + 1) + action.name for i, action in enumerate(self.actions)
            )
            return (
                f"plan to {self.goal.name}:\n{steps}\n"
                f"cost={self.cost:.2f}; net_value={self.net_value:.2f}"
            )
        steps = " -> ".join(self.action_names()) or "(already satisfied)"
        return f"{steps}; net_value={self.net_value:.2f}"

    def __str__(self) -> str:
        return self.info_string()


class PlanningSystem(BaseModel):
    """The full action library and the goals a planner may pursue."""

    model_config = ConfigDict(frozen=True)

    actions: FrozenSet[Action] = frozenset()
    goals: FrozenSet[Goal] = frozenset()

    @model_validator(mode="after")
    def _unique_action_names(self) -> "PlanningSystem":
        names = [action.name for action in self.actions]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"action names must be unique: {duplicates}")
        return self

    @classmethod
    def for_goal(cls, actions: Iterable[Action], goal: Goal) -> "PlanningSystem":
        return cls(actions=frozenset(actions), goals=frozenset([goal]))

    def ordered_actions(self) -> List[Action]:
        """Actions sorted by name, so planning does not depend on set order."""
        return sorted(self.actions, key=lambda action: action.name)

    def ordered_goals(self) -> List[Goal]:
        return sorted(self.goals, key=lambda goal: goal.name)

    def known_preconditions(self) -> Set[str]:
        return {key for action in self.actions for key in action.preconditions}

    def known_effects(self) -> Set[str]:
        return {key for action in self.actions for key in action.effects}

    def known_conditions(self) -> Set[str]:
        return self.known_preconditions() | self.known_effects()

    def info_string(self) -> str:
        lines = ["GOAP system:", "\tactions:"]
        lines += [action.info_string(indent=2) for action in self.ordered_actions()]
        lines.append("\tgoals:")
        lines += [goal.info_string(indent=2) for goal in self.ordered_goals()]
        lines.append("\tknown_preconditions:")
        lines += ["\t\t" + key for key in sorted(self.known_preconditions())]
        lines.append("\tknown_effects:")
        lines += ["\t\t" + key for key in sorted(self.known_effects())]
        return "\n".join(lines)
