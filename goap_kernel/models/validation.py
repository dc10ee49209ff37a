"""Validation Report — findings about a planning system before it is used."""

from typing import List

from pydantic import BaseModel


class ValidationIssue(BaseModel):
    """A single finding. Codes are machine-readable, messages human-readable."""

    code: str                               # e.g., "NO_PATH_TO_GOAL"
    message: str
    subjects: List[str] = []                # Goal or action names involved


class ValidationReport(BaseModel):
    valid: bool
    issues: List[ValidationIssue] = []

    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]
