"""GOAP Kernel data models."""

from goap_kernel.models.action import Action, Goal, conditions_true
from goap_kernel.models.plan import Plan, PlanningSystem
from goap_kernel.models.planner import PlannerConfig
from goap_kernel.models.validation import ValidationIssue, ValidationReport
from goap_kernel.models.world import (
    ConditionDetermination,
    EffectSpec,
    WorldState,
    format_conditions,
)

__all__ = [
    "Action",
    "ConditionDetermination",
    "EffectSpec",
    "Goal",
    "Plan",
    "PlannerConfig",
    "PlanningSystem",
    "ValidationIssue",
    "ValidationReport",
    "WorldState",
    "conditions_true",
    "format_conditions",
]
