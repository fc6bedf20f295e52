"""Continuity Engine - timeline world-state projection and continuity rules.

Derives point-in-time snapshots of a fictional world from an ordered
sequence of narrative units and checks them against continuity rules.

The engine is pure and synchronous: it persists nothing, performs no I/O,
and every call returns freshly owned snapshots.

Example:
    >>> from continuity_engine import NarrativeUnit, check_continuity
    >>> units = [
    ...     NarrativeUnit(id="s1", order=0, deltas=[
    ...         {"key": "character.c1.location", "op": "SET", "value": "loc-B"},
    ...     ]),
    ...     NarrativeUnit(id="s2", order=1, locations=["loc-A"],
    ...                   participants=[{"entity_id": "c1"}]),
    ... ]
    >>> report = check_continuity(units, "s2")
    >>> report.issues[0].code
    'CHAR_LOCATION_MISMATCH'

Modules:
    core: Configuration, logging, and exceptions.
    models: Pydantic V2 models for units, deltas, issues and reports.
    engine: Path access, delta application, projection and rules.
"""

from __future__ import annotations

# Core
from continuity_engine.core.config import Settings, get_settings
from continuity_engine.core.exceptions import (
    ContinuityEngineError,
    NodeNotFound,
    NodeNotFoundError,
)
from continuity_engine.core.logging import configure_logging, get_logger

# Models
from continuity_engine.models import (
    ContinuityIssue,
    ContinuityReport,
    DeltaOp,
    NarrativeUnit,
    Participant,
    Projection,
    Severity,
    WorldState,
    WorldStateDelta,
)

# Engine
from continuity_engine.engine import (
    ContinuityChecker,
    RuleEngine,
    SnapshotArena,
    apply_delta,
    check_continuity,
    evaluate,
    get_path,
    project_pre_and_post,
    replay,
    set_path,
)


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "ContinuityEngineError",
    "NodeNotFoundError",
    "NodeNotFound",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "DeltaOp",
    "WorldStateDelta",
    "NarrativeUnit",
    "Participant",
    "Severity",
    "ContinuityIssue",
    "Projection",
    "ContinuityReport",
    "WorldState",
    # Engine
    "get_path",
    "set_path",
    "apply_delta",
    "replay",
    "project_pre_and_post",
    "evaluate",
    "RuleEngine",
    "SnapshotArena",
    "ContinuityChecker",
    "check_continuity",
]
