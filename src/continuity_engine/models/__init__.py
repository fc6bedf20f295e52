"""Data models for the continuity engine.

Pydantic v2 models for narrative units, deltas and issues, plus the
type aliases describing world-state snapshots.
"""

from __future__ import annotations

from continuity_engine.models.delta import DeltaOp, WorldStateDelta
from continuity_engine.models.issue import ContinuityIssue, Severity
from continuity_engine.models.narrative import NarrativeUnit, Participant, ParticipantRole
from continuity_engine.models.report import ContinuityReport, Projection
from continuity_engine.models.world_state import (
    WorldState,
    WorldValue,
    clone_world_state,
    empty_world_state,
    flatten_world_state,
    iter_leaves,
)


__all__ = [
    # Deltas
    "DeltaOp",
    "WorldStateDelta",
    # Units
    "NarrativeUnit",
    "Participant",
    "ParticipantRole",
    # Issues
    "Severity",
    "ContinuityIssue",
    # Outputs
    "Projection",
    "ContinuityReport",
    # World state
    "WorldState",
    "WorldValue",
    "empty_world_state",
    "clone_world_state",
    "iter_leaves",
    "flatten_world_state",
]
