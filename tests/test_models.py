"""Tests for core data models."""

import pytest
from pydantic import ValidationError

from goap_kernel.models import (
    Action,
    ConditionDetermination,
    Goal,
    Plan,
    PlanningSystem,
    WorldState,
)

T = ConditionDetermination.TRUE
F = ConditionDetermination.FALSE
U = ConditionDetermination.UNKNOWN


class TestConditionDetermination:
    def test_from_optional_bool(self):
        assert ConditionDetermination.of(True) is T
        assert ConditionDetermination.of(False) is F
        assert ConditionDetermination.of(None) is U

    def test_unknown_is_not_false(self):
        assert U != F
        assert U.as_true_or_false() is F
        assert T.as_true_or_false() is T


class TestWorldState:
    def test_empty_by_default(self):
        assert WorldState().state == {}

    def test_equal_states_hash_equal(self):
        a = WorldState(state={"x": T, "y": F})
        b = WorldState(state={"y": F, "x": T})
        assert a == b
        assert len({a, b}) == 1

    def test_satisfies_requires_exact_match(self):
        state = WorldState(state={"x": T, "y": U})
        assert state.satisfies({"x": T})
        assert not state.satisfies({"y": F})
        assert state.satisfies({"y": U})

    def test_absent_condition_satisfies_nothing(self):
        state = WorldState()
        assert not state.satisfies({"x": T})
        assert not state.satisfies({"x": F})
        assert not state.satisfies({"x": U})
        assert state.satisfies({})

    def test_apply_overwrites_and_inherits(self):
        state = WorldState(state={"x": T, "y": F})
        after = state.apply({"y": T, "z": F})
        assert after.state == {"x": T, "y": T, "z": F}
        assert state.state == {"x": T, "y": F}

    def test_plus_operator(self):
        state = WorldState(state={"c1": T, "c2": F}) + ("c1", U)
        assert state.state == {"c1": U, "c2": F}

    def test_unknown_conditions(self):
        state = WorldState(state={"c1": T, "c2": U, "c3": F, "c4": U})
        assert sorted(state.unknown_conditions()) == ["c2", "c4"]

    def test_variants(self):
        state = WorldState(state={"c1": T, "c2": U})
        variants = state.variants("c2")
        assert [v.get("c2") for v in variants] == [T, F]
        assert all(v.get("c1") == T for v in variants)

    def test_with_one_change(self):
        state = WorldState(state={"c1": T, "c2": F, "c3": U})
        changes = state.with_one_change()
        assert len(changes) == 6
        assert WorldState(state={"c1": U, "c2": F, "c3": U}) in changes
        assert WorldState(state={"c1": T, "c2": T, "c3": U}) in changes
        assert WorldState(state={"c1": T, "c2": F, "c3": F}) in changes
        assert state not in changes

    def test_with_one_change_scales_with_conditions(self):
        state = WorldState(state={f"c{i}": T for i in range(40)})
        assert len(state.with_one_change()) == 80

    def test_conditions_read_only(self):
        state = WorldState(state={"x": T})
        seen = {state}
        with pytest.raises(TypeError):
            state.state["y"] = T
        assert state in seen
        assert state.apply({"y": T}).state == {"x": T, "y": T}

    def test_source_mapping_copied(self):
        source = {"x": T}
        state = WorldState(state=source)
        source["x"] = F
        assert state.get("x") is T

    def test_info_string(self):
        state = WorldState(state={"hasGun": T})
        assert state.info_string() == "{hasGun=TRUE}"
        assert '"hasGun": "TRUE"' in state.info_string(verbose=True)


class TestAction:
    def test_create_action(self):
        action = Action(
            name="buy_gun",
            preconditions={"hasMoney": T},
            effects={"hasGun": T, "hasMoney": F},
            cost=0.1,
            value=0.2,
        )
        assert action.known_conditions == {"hasMoney", "hasGun"}
        assert action.is_achievable(WorldState(state={"hasMoney": T}))
        assert not action.is_achievable(WorldState())

    def test_shorthand_conditions(self):
        action = Action(name="merge", pre=["enoughReports"], post=["finalReport"])
        assert action.preconditions == {"enoughReports": T}
        assert action.effects == {"finalReport": T}

    def test_cost_bounds(self):
        with pytest.raises(ValidationError):
            Action(name="bad", cost=1.5)
        with pytest.raises(ValidationError):
            Action(name="bad", cost=-0.1)
        with pytest.raises(ValidationError):
            Action(name="bad", value=2.0)

    def test_rejects_keys_differing_only_in_case(self):
        with pytest.raises(ValidationError):
            Action(name="bad", effects={"hasForm": T, "hasform": F})
        with pytest.raises(ValidationError):
            Action(name="bad", preconditions={"it:Person": T, "IT:PERSON": T})

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            Action(name="")

    def test_immutable_and_hashable(self):
        action = Action(name="a", post=["x"], cost=0.1)
        with pytest.raises(ValidationError):
            action.cost = 0.5
        assert action == Action(name="a", post=["x"], cost=0.1)
        assert len({action, Action(name="a", post=["x"], cost=0.1)}) == 1

    def test_conditions_read_only(self):
        action = Action(name="a", pre=["x"], post=["y"])
        with pytest.raises(TypeError):
            action.effects["z"] = T
        with pytest.raises(TypeError):
            action.preconditions["x"] = F
        with pytest.raises(TypeError):
            Goal(name="g").preconditions["g"] = F
        assert action.model_dump()["effects"] == {"y": T}

    def test_string_values_accepted(self):
        action = Action(name="a", effects={"x": "FALSE"})
        assert action.effects["x"] is F


class TestGoal:
    def test_defaults_to_own_name(self):
        goal = Goal(name="hasGun", value=0.1)
        assert goal.preconditions == {"hasGun": T}

    def test_pre_shorthand(self):
        goal = Goal(name="horoscope", pre=["relevantNewsStories"])
        assert goal.preconditions == {"relevantNewsStories": T}

    def test_is_achievable(self):
        goal = Goal(name="g", preconditions={"enemyDead": T, "legalPeril": F})
        assert goal.is_achievable(WorldState(state={"enemyDead": T, "legalPeril": F}))
        assert not goal.is_achievable(WorldState(state={"enemyDead": T}))

    def test_value_bounds(self):
        with pytest.raises(ValidationError):
            Goal(name="g", value=10.0)


class TestPlan:
    def _goal(self, value: float = 0.0) -> Goal:
        return Goal(name="goal", value=value)

    def test_empty_plan_is_complete(self):
        assert Plan(actions=[], goal=self._goal()).is_complete()
        assert not Plan(actions=[Action(name="a1")], goal=self._goal()).is_complete()

    def test_cost_and_values(self):
        plan = Plan(
            actions=[
                Action(name="a1", cost=0.2, value=0.1),
                Action(name="a2", cost=0.3, value=0.2),
            ],
            goal=self._goal(value=0.5),
        )
        assert plan.cost == pytest.approx(0.5)
        assert plan.actions_value == pytest.approx(0.3)
        # 0.5 + 0.3 - 0.5
        assert plan.net_value == pytest.approx(0.3)

    def test_compact_info_string(self):
        plan = Plan(
            actions=[Action(name="Action1"), Action(name="Action2"), Action(name="Action3")],
            goal=self._goal(),
        )
        info = plan.info_string()
        assert "Action1 -> Action2 -> Action3" in info
        assert "net_value=" in info

    def test_verbose_info_string(self):
        plan = Plan(
            actions=[Action(name="Action1"), Action(name="Action2"), Action(name="Action3")],
            goal=self._goal(),
        )
        info = plan.info_string(verbose=True)
        assert "\tAction1" in info
        assert "\t\tAction2" in info
        assert "\t\t\tAction3" in info
        assert "cost=" in info
        assert "net_value=" in info


class TestPlanningSystem:
    def test_known_conditions(self):
        a1 = Action(name="A1", preconditions={"cond1": T, "cond2": F}, effects={"effect1": T})
        a2 = Action(name="A2", preconditions={"cond2": T, "cond3": U}, effects={"effect2": T})
        system = PlanningSystem.for_goal([a1, a2], Goal(name="Goal1"))

        assert system.known_preconditions() == {"cond1", "cond2", "cond3"}
        assert system.known_effects() == {"effect1", "effect2"}
        assert system.known_conditions() == {"cond1", "cond2", "cond3", "effect1", "effect2"}

    def test_multiple_goals(self):
        system = PlanningSystem(goals={Goal(name="Goal1"), Goal(name="Goal2")})
        assert [g.name for g in system.ordered_goals()] == ["Goal1", "Goal2"]

    def test_ordered_actions(self):
        system = PlanningSystem(actions=[Action(name="b"), Action(name="a"), Action(name="c")])
        assert [a.name for a in system.ordered_actions()] == ["a", "b", "c"]

    def test_rejects_duplicate_action_names(self):
        with pytest.raises(ValidationError):
            PlanningSystem(actions=[Action(name="a", cost=0.1), Action(name="a", cost=0.2)])

    def test_info_string(self):
        system = PlanningSystem.for_goal(
            [Action(name="Action1", pre=["cond1"], post=["effect1"])], Goal(name="Goal1")
        )
        info = system.info_string()
        assert "Action1" in info
        assert "Goal1" in info
        assert "known_preconditions" in info
        assert "known_effects" in info
