"""Continuity issue models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Severity(StrEnum):
    """How serious a continuity finding is."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class ContinuityIssue(BaseModel):
    """A detected inconsistency between declared facts and derived state.

    Issues carry no identity beyond their content and are produced fresh
    on every evaluation.
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity = Field(description="Finding severity")
    code: str = Field(min_length=1, description="Stable machine-readable code")
    message: str = Field(description="Human-readable description")
    unit_id: str = Field(description="Unit that produced the issue")
    suggestion: str | None = Field(default=None, description="Suggested fix")

    def to_line(self) -> str:
        """Render the issue as a single line for reports and prompts."""
        line = f"[{self.severity}] {self.code}: {self.message}"
        if self.suggestion:
            line += f" Suggestion: {self.suggestion}"
        return line


__all__ = [
    "Severity",
    "ContinuityIssue",
]
