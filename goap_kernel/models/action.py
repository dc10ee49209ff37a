"""Actions and Goals — the steps a GOAP planner reasons about."""

from typing import Any, Dict, Iterable, Set

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from goap_kernel.models.world import (
    ConditionDetermination,
    Conditions,
    EffectSpec,
    WorldState,
    format_conditions,
    freeze_conditions,
)


def conditions_true(names: Iterable[str]) -> EffectSpec:
    """Shorthand: every named condition required (or made) TRUE."""
    return {name: ConditionDetermination.TRUE for name in names}


def _reject_case_collisions(spec: Conditions) -> Conditions:
    seen: Dict[str, str] = {}
    for key in spec:
        folded = key.casefold()
        if folded in seen:
            raise ValueError(
                f"condition keys {seen[folded]!r} and {key!r} differ only in case"
            )
        seen[folded] = key
    return spec


def _expand(data: Any, short: str, full: str) -> Any:
    """Turn a `pre`/`post` name collection into a TRUE-valued spec."""
    if not isinstance(data, dict) or short not in data:
        return data
    data = dict(data)
    names = data.pop(short)
    if full not in data:
        data[full] = conditions_true(names)
    return data


class Action(BaseModel):
    """
    A named step with preconditions, effects, cost and value.

    Effects are what the action is expected to achieve; the planner
    assumes they hold once it has run.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    preconditions: Conditions = Field(default={}, validate_default=True)
    effects: Conditions = Field(default={}, validate_default=True)
    cost: float = Field(ge=0.0, le=1.0, default=0.0)
    value: float = Field(ge=0.0, le=1.0, default=0.0)

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        return _expand(_expand(data, "pre", "preconditions"), "post", "effects")

    @field_validator("preconditions", "effects")
    @classmethod
    def _check_keys(cls, spec: Conditions) -> Conditions:
        return freeze_conditions(_reject_case_collisions(spec))

    @field_serializer("preconditions", "effects")
    def _serialize_conditions(self, spec: Conditions) -> EffectSpec:
        return dict(spec)

    def _key(self) -> tuple:
        return (
            self.name,
            frozenset(self.preconditions.items()),
            frozenset(self.effects.items()),
            self.cost,
            self.value,
        )

    def __hash__(self) -> int:
        return hash(self._key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self._key() == other._key()

    @property
    def known_conditions(self) -> Set[str]:
        return set(self.preconditions) | set(self.effects)

    def is_achievable(self, state: WorldState) -> bool:
        """Whether the action can run in the given state."""
        return state.satisfies(self.preconditions)

    def info_string(self, indent: int = 0) -> str:
        return "\t" * indent + (
            f"{self.name} - pre={format_conditions(self.preconditions)} "
            f"post={format_conditions(self.effects)} "
            f"cost={self.cost} value={self.value}"
        )

    def __str__(self) -> str:
        return self.name


class Goal(BaseModel):
    """A target condition set. With no preconditions given, the goal's own name must become TRUE."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    preconditions: Conditions
    value: float = Field(ge=0.0, le=1.0, default=0.0)

    @model_validator(mode="before")
    @classmethod
    def _default_preconditions(cls, data: Any) -> Any:
        data = _expand(data, "pre", "preconditions")
        if isinstance(data, dict) and "preconditions" not in data:
            name = data.get("name")
            if isinstance(name, str):
                data = {**data, "preconditions": conditions_true([name])}
        return data

    @field_validator("preconditions")
    @classmethod
    def _check_keys(cls, spec: Conditions) -> Conditions:
        return freeze_conditions(_reject_case_collisions(spec))

    @field_serializer("preconditions")
    def _serialize_conditions(self, spec: Conditions) -> EffectSpec:
        return dict(spec)

    def _key(self) -> tuple:
        return (self.name, frozenset(self.preconditions.items()), self.value)

    def __hash__(self) -> int:
        return hash(self._key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Goal):
            return NotImplemented
        return self._key() == other._key()

    @property
    def known_conditions(self) -> Set[str]:
        return set(self.preconditions)

    def is_achievable(self, state: WorldState) -> bool:
        """Whether the state already satisfies this goal."""
        return state.satisfies(self.preconditions)

    def info_string(self, indent: int = 0) -> str:
        return "\t" * indent + (
            f"{self.name} - pre={format_conditions(self.preconditions)} "
            f"value={self.value}"
        )

    def __str__(self) -> str:
        return self.name
