"""
Exceptions raised by the GOAP kernel.

"No plan" is never an exception: planners return None for an
unreachable goal. Malformed actions and goals are rejected by pydantic
at construction with a ValidationError.
"""

from typing import Any, Dict, Optional


class GoapError(Exception):
    """Base class for GOAP kernel errors, with optional diagnostic context."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} | Context: {context_str}"


class PlanInvariantViolation(GoapError):
    """A candidate plan does not reach its goal when replayed."""
