"""Planner configuration."""

from typing import Optional

from pydantic import BaseModel, Field


class PlannerConfig(BaseModel):
    """Search budget and behaviour switches for a planner."""

    max_iterations: int = Field(ge=1, default=10000)       # Open-list pops per search
    timeout_seconds: Optional[float] = Field(gt=0, default=None)
    resolve_unknown_conditions: bool = True
