"""Incremental snapshot arena.

Keeps one post-state snapshot per unit so that projecting a unit becomes
a lookup instead of a full replay. Units may be appended as authors add
them; a unit inserted before the end of the timeline rebuilds only the
snapshots from its position onwards.

Results are identical to ``project_pre_and_post`` over the same units.
Stored snapshots never leave the arena; callers always receive copies.
"""

from __future__ import annotations

import threading
from bisect import bisect_right
from collections.abc import Iterable
from typing import TYPE_CHECKING

from continuity_engine.core.exceptions import ArenaCapacityError, NodeNotFoundError
from continuity_engine.core.logging import get_logger
from continuity_engine.engine.deltas import apply_deltas
from continuity_engine.models.narrative import NarrativeUnit
from continuity_engine.models.report import Projection
from continuity_engine.models.world_state import (
    WorldState,
    clone_world_state,
    empty_world_state,
)


if TYPE_CHECKING:
    from continuity_engine.core.config import Settings


logger = get_logger(__name__)


class SnapshotArena:
    """Post-state snapshots indexed by timeline position.

    All public methods take an internal re-entrant lock, so one arena can
    be shared between threads.

    Attributes:
        max_units: Capacity limit, or None for unbounded.
    """

    def __init__(
        self,
        units: Iterable[NarrativeUnit] = (),
        *,
        max_units: int | None = None,
    ) -> None:
        self.max_units = max_units
        self._lock = threading.RLock()
        self._units: list[NarrativeUnit] = []
        self._orders: list[int] = []
        self._posts: list[WorldState] = []
        self._positions: dict[str, int] = {}
        self.extend(units)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        units: Iterable[NarrativeUnit] = (),
    ) -> SnapshotArena:
        return cls(units, max_units=settings.cache.max_units)

    def __len__(self) -> int:
        with self._lock:
            return len(self._units)

    def __contains__(self, unit_id: object) -> bool:
        with self._lock:
            return unit_id in self._positions

    @property
    def units(self) -> list[NarrativeUnit]:
        """Units in timeline order."""
        with self._lock:
            return list(self._units)

    def append(self, unit: NarrativeUnit) -> None:
        """Add a unit, rebuilding later snapshots if it lands mid-timeline.

        Units with equal ``order`` keep the order in which they were added.

        Raises:
            ArenaCapacityError: If the arena is full.
        """
        with self._lock:
            if self.max_units is not None and len(self._units) >= self.max_units:
                raise ArenaCapacityError(
                    "Snapshot arena is full",
                    max_units=self.max_units,
                    details={"unit_id": unit.id},
                )

            position = bisect_right(self._orders, unit.order)
            self._units.insert(position, unit)
            self._orders.insert(position, unit.order)

            if position == len(self._posts):
                self._posts.append(apply_deltas(self._post_before(position), unit.deltas))
                # Earlier positions are unchanged; an existing id keeps its slot
                self._positions.setdefault(unit.id, position)
                return

            logger.info(
                "Rebuilding snapshot arena",
                unit_id=unit.id,
                from_position=position,
                units=len(self._units),
            )
            del self._posts[position:]
            for index in range(position, len(self._units)):
                self._posts.append(
                    apply_deltas(self._post_before(index), self._units[index].deltas)
                )
            self._reindex()

    def extend(self, units: Iterable[NarrativeUnit]) -> None:
        for unit in units:
            self.append(unit)

    def clear(self) -> None:
        with self._lock:
            self._units.clear()
            self._orders.clear()
            self._posts.clear()
            self._positions.clear()

    def project(self, unit_id: str) -> Projection:
        """Return the pre- and post-state of a unit.

        Raises:
            NodeNotFoundError: If the unit is not in the arena.
        """
        with self._lock:
            position = self._positions.get(unit_id)
            if position is None:
                raise NodeNotFoundError("Story node not found", unit_id=unit_id)
            return Projection(
                unit=self._units[position],
                pre=clone_world_state(self._post_before(position)),
                post=clone_world_state(self._posts[position]),
            )

    def latest(self) -> WorldState:
        """World state after the last unit."""
        with self._lock:
            return clone_world_state(self._post_before(len(self._posts)))

    def _post_before(self, position: int) -> WorldState:
        # Returns stored state; callers must clone before handing it out
        if position == 0:
            return empty_world_state()
        return self._posts[position - 1]

    def _reindex(self) -> None:
        # First unit in timeline order wins, as in a full replay
        self._positions = {}
        for index, unit in enumerate(self._units):
            self._positions.setdefault(unit.id, index)


__all__ = [
    "SnapshotArena",
]
