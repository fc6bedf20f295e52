"""Projection and continuity engine.

Submodules:
    paths: Dot-path reads and auto-vivifying writes
    deltas: Typed world-state mutations
    timeline: Replay-based pre/post projection
    rules: Continuity rule registry and built-in rules
    cache: Incremental snapshot arena
    continuity: Projection + rule evaluation facade

Example:
    >>> from continuity_engine.engine import check_continuity
    >>> report = check_continuity(units, "scene-4")
    >>> [issue.code for issue in report.issues]
    ['CHAR_LOCATION_MISMATCH']
"""

from __future__ import annotations

# =============================================================================
# Paths & Deltas
# =============================================================================
from continuity_engine.engine.deltas import apply_delta, apply_deltas
from continuity_engine.engine.paths import ABSENT, get_path, has_path, set_path

# =============================================================================
# Timeline
# =============================================================================
from continuity_engine.engine.cache import SnapshotArena
from continuity_engine.engine.timeline import (
    coerce_units,
    iter_projections,
    project_pre_and_post,
    replay,
    sort_units,
)

# =============================================================================
# Rules
# =============================================================================
from continuity_engine.engine.rules import (
    CHAR_LOCATION_MISMATCH,
    ITEM_RESURRECTED,
    ContinuityRule,
    RuleEngine,
    build_rule_engine,
    continuity_rule,
    evaluate,
    get_default_engine,
    get_default_rules,
)

# =============================================================================
# Facade
# =============================================================================
from continuity_engine.engine.continuity import (
    ContinuityChecker,
    check_continuity,
    check_projection,
    check_timeline,
)


__all__ = [
    # Paths & deltas
    "ABSENT",
    "get_path",
    "has_path",
    "set_path",
    "apply_delta",
    "apply_deltas",
    # Timeline
    "coerce_units",
    "sort_units",
    "replay",
    "iter_projections",
    "project_pre_and_post",
    "SnapshotArena",
    # Rules
    "CHAR_LOCATION_MISMATCH",
    "ITEM_RESURRECTED",
    "ContinuityRule",
    "RuleEngine",
    "continuity_rule",
    "get_default_engine",
    "get_default_rules",
    "build_rule_engine",
    "evaluate",
    # Facade
    "ContinuityChecker",
    "check_projection",
    "check_continuity",
    "check_timeline",
]
