"""World State — the planner's symbolic snapshot of known and unknown facts."""

from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ConditionDetermination(str, Enum):
    """Three-valued truth of a condition. UNKNOWN is not FALSE."""

    TRUE = "TRUE"
    FALSE = "FALSE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def of(cls, value: Optional[bool]) -> "ConditionDetermination":
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    def as_true_or_false(self) -> "ConditionDetermination":
        """Treat UNKNOWN as FALSE."""
        if self is ConditionDetermination.TRUE:
            return ConditionDetermination.TRUE
        return ConditionDetermination.FALSE


# Condition key -> required or resulting determination
EffectSpec = Dict[str, ConditionDetermination]

# Read-only view held by frozen models
Conditions = Mapping[str, ConditionDetermination]


def freeze_conditions(spec: Mapping[str, ConditionDetermination]) -> Conditions:
    return MappingProxyType(dict(spec))


def format_conditions(spec: Mapping[str, ConditionDetermination]) -> str:
    entries = ", ".join(
        f"{key}={ConditionDetermination(value).value}" for key, value in spec.items()
    )
    return "{" + entries + "}"


class WorldState(BaseModel):
    """
    Immutable mapping from condition key to determination.

    States compare and hash by content so they can be used as
    closed-set members during search. A condition absent from the
    state satisfies no requirement, not even UNKNOWN.
    """

    model_config = ConfigDict(frozen=True)

    state: Conditions = Field(default={}, validate_default=True)

    @field_validator("state")
    @classmethod
    def _freeze_state(cls, state: Conditions) -> Conditions:
        return freeze_conditions(state)

    @field_serializer("state")
    def _serialize_state(self, state: Conditions) -> EffectSpec:
        return dict(state)

    def __hash__(self) -> int:
        return hash(frozenset(self.state.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WorldState):
            return NotImplemented
        return self.state == other.state

    def __add__(self, pair: Tuple[str, ConditionDetermination]) -> "WorldState":
        key, value = pair
        return self.with_condition(key, value)

    def __contains__(self, condition: object) -> bool:
        return condition in self.state

    def get(self, condition: str) -> Optional[ConditionDetermination]:
        return self.state.get(condition)

    def satisfies(self, preconditions: Mapping[str, ConditionDetermination]) -> bool:
        """True if every precondition is present with the required value."""
        return all(self.state.get(key) == value for key, value in preconditions.items())

    def unsatisfied(
        self, preconditions: Mapping[str, ConditionDetermination]
    ) -> EffectSpec:
        """The precondition entries this state does not meet."""
        return {
            key: value
            for key, value in preconditions.items()
            if self.state.get(key) != value
        }

    def apply(self, effects: Mapping[str, ConditionDetermination]) -> "WorldState":
        """Return a new state with the effects written over this one."""
        new_state = dict(self.state)
        new_state.update(effects)
        # Values are already ConditionDetermination members; skip revalidation
        return WorldState.model_construct(state=MappingProxyType(new_state))

    def with_condition(
        self, condition: str, value: ConditionDetermination
    ) -> "WorldState":
        return self.apply({condition: ConditionDetermination(value)})

    def unknown_conditions(self) -> List[str]:
        return [
            key
            for key, value in self.state.items()
            if value == ConditionDetermination.UNKNOWN
        ]

    def variants(self, unknown_condition: str) -> List["WorldState"]:
        """The states with a definite value for the given condition."""
        return [
            self.with_condition(unknown_condition, value)
            for value in (ConditionDetermination.TRUE, ConditionDetermination.FALSE)
        ]

    def with_one_change(self) -> List["WorldState"]:
        """Every state that differs from this one in exactly one condition."""
        result = []
        for condition, current in self.state.items():
            for value in ConditionDetermination:
                if value != current:
                    result.append(self.with_condition(condition, value))
        return result

    def info_string(self, verbose: bool = False) -> str:
        if verbose:
            return self.model_dump_json(indent=2)
        return format_conditions(self.state)

    def __str__(self) -> str:
        return self.info_string()
