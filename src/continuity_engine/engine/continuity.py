"""Continuity check facade.

Combines projection and rule evaluation into the report consumed by
authoring tools, prompt builders and export jobs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from continuity_engine.core.config import Settings, get_settings
from continuity_engine.core.exceptions import ArenaCapacityError
from continuity_engine.core.logging import get_logger
from continuity_engine.engine.cache import SnapshotArena
from continuity_engine.engine.rules import RuleEngine, build_rule_engine, evaluate
from continuity_engine.engine.timeline import (
    coerce_units,
    iter_projections,
    project_pre_and_post,
)
from continuity_engine.models.narrative import NarrativeUnit
from continuity_engine.models.report import ContinuityReport, Projection


logger = get_logger(__name__)

UnitRecord = NarrativeUnit | Mapping[str, Any]


def check_projection(
    projection: Projection,
    *,
    engine: RuleEngine | None = None,
) -> ContinuityReport:
    """Evaluate the rules against an existing projection."""
    issues = evaluate(projection.unit, projection.pre, projection.post, engine=engine)
    return ContinuityReport(
        unit_id=projection.unit.id,
        issues=issues,
        pre_state=projection.pre,
        post_state=projection.post,
    )


def check_continuity(
    units: Iterable[UnitRecord],
    unit_id: str,
    *,
    engine: RuleEngine | None = None,
) -> ContinuityReport:
    """Project one unit and evaluate continuity rules for it.

    Args:
        units: Timeline units, or story-node documents to validate.
        unit_id: Unit to check.
        engine: Rule engine; defaults to every default rule.

    Returns:
        The issues together with the pre- and post-state.

    Raises:
        NodeNotFoundError: If ``unit_id`` is not in ``units``.
        ValidationError: If a document cannot be validated.
    """
    projection = project_pre_and_post(coerce_units(units), unit_id)
    return check_projection(projection, engine=engine)


def check_timeline(
    units: Iterable[UnitRecord],
    *,
    engine: RuleEngine | None = None,
) -> list[ContinuityReport]:
    """Check every unit of a timeline in a single replay pass.

    Returns:
        One report per unit, in timeline order.
    """
    return [
        check_projection(projection, engine=engine)
        for projection in iter_projections(coerce_units(units))
    ]


class ContinuityChecker:
    """Settings-aware continuity checker for one timeline.

    Builds its rule engine from settings and, when the snapshot cache is
    enabled, routes projections through a SnapshotArena instead of a full
    replay per check.

    Example:
        >>> checker = ContinuityChecker(units)
        >>> report = checker.check("scene-4")
        >>> report.has_errors
        False
    """

    def __init__(
        self,
        units: Iterable[UnitRecord] = (),
        *,
        settings: Settings | None = None,
        engine: RuleEngine | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.engine = engine or build_rule_engine(self.settings)
        self._units: list[NarrativeUnit] = coerce_units(units)
        self._arena: SnapshotArena | None = None
        if self.settings.cache.enabled:
            try:
                self._arena = SnapshotArena.from_settings(self.settings, self._units)
            except ArenaCapacityError as exc:
                self._drop_arena(exc)

    @property
    def units(self) -> list[NarrativeUnit]:
        return list(self._units)

    @property
    def uses_arena(self) -> bool:
        return self._arena is not None

    def add_unit(self, unit: UnitRecord) -> NarrativeUnit:
        """Add a unit to the timeline.

        A full snapshot arena is dropped and later checks fall back to
        full replay.
        """
        (validated,) = coerce_units([unit])
        if self._arena is not None:
            try:
                self._arena.append(validated)
            except ArenaCapacityError as exc:
                self._drop_arena(exc)
        self._units.append(validated)
        return validated

    def _drop_arena(self, error: ArenaCapacityError) -> None:
        logger.warning(
            "Snapshot arena full, falling back to replay",
            max_units=error.details.get("max_units"),
            units=len(self._units),
        )
        self._arena = None

    def project(self, unit_id: str) -> Projection:
        if self._arena is not None:
            return self._arena.project(unit_id)
        return project_pre_and_post(self._units, unit_id)

    def check(self, unit_id: str) -> ContinuityReport:
        """Check one unit.

        Raises:
            NodeNotFoundError: If the unit is not in the timeline.
        """
        report = check_projection(self.project(unit_id), engine=self.engine)
        if report.issues:
            logger.info(
                "Continuity issues found",
                unit_id=unit_id,
                issues=len(report.issues),
                has_errors=report.has_errors,
                post_state=report.post_state,
            )
        return report

    def check_all(self) -> list[ContinuityReport]:
        return check_timeline(self._units, engine=self.engine)


__all__ = [
    "check_projection",
    "check_continuity",
    "check_timeline",
    "ContinuityChecker",
]
