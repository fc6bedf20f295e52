"""Projection and continuity report models.

These are the outbound shapes of the engine: a pre/post snapshot pair for
one unit, and the issues found for it. The report is what authoring tools,
prompt builders and export jobs consume.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from continuity_engine.models.issue import ContinuityIssue, Severity
from continuity_engine.models.narrative import NarrativeUnit
from continuity_engine.models.world_state import WorldState, iter_leaves


@dataclass(frozen=True)
class Projection:
    """World state immediately before and after one unit's deltas.

    Attributes:
        unit: The projected unit.
        pre: State after every earlier unit in the timeline.
        post: ``pre`` with the unit's own deltas applied.
    """

    unit: NarrativeUnit
    pre: WorldState
    post: WorldState


class ContinuityReport(BaseModel):
    """Issues plus the snapshots they were derived from."""

    model_config = ConfigDict(frozen=True)

    unit_id: str = Field(description="Checked unit")
    issues: list[ContinuityIssue] = Field(default_factory=list)
    pre_state: dict[str, Any] = Field(default_factory=dict)
    post_state: dict[str, Any] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_errors(self) -> bool:
        return any(issue.severity == Severity.ERROR for issue in self.issues)

    def issues_by_severity(self) -> dict[Severity, list[ContinuityIssue]]:
        """Group issues by severity, keeping evaluation order within a group."""
        grouped: dict[Severity, list[ContinuityIssue]] = {s: [] for s in Severity}
        for issue in self.issues:
            grouped[issue.severity].append(issue)
        return grouped

    def to_ai_context(self, max_facts: int = 200) -> str:
        """Generate a read-only text summary for prompt construction.

        Args:
            max_facts: Maximum number of world facts to list.

        Returns:
            Markdown-ish text with issues first, then current world facts.
        """
        lines = [f"# Continuity - {self.unit_id}", ""]

        lines.append("## Issues")
        if self.issues:
            for issue in self.issues:
                lines.append(f"- {issue.to_line()}")
        else:
            lines.append("- none")
        lines.append("")

        lines.append("## World State")
        facts = list(iter_leaves(self.post_state))
        for path, value in facts[:max_facts]:
            lines.append(f"- {path} = {json.dumps(value, sort_keys=True, default=str)}")
        if len(facts) > max_facts:
            lines.append(f"- ... {len(facts) - max_facts} more")

        return "\n".join(lines)


__all__ = [
    "Projection",
    "ContinuityReport",
]
