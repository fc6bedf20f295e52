"""Timeline projection.

Replays unit deltas from the empty state at timeline start to derive the
world state before and after a target unit. Every call performs a full
replay and returns freshly owned snapshots; nothing is cached here (see
``continuity_engine.engine.cache`` for the incremental variant).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from operator import attrgetter
from typing import Any

import pydantic

from continuity_engine.core.exceptions import NodeNotFoundError, ValidationError
from continuity_engine.core.logging import get_logger
from continuity_engine.engine.deltas import apply_delta, apply_deltas
from continuity_engine.models.narrative import NarrativeUnit
from continuity_engine.models.report import Projection
from continuity_engine.models.world_state import (
    WorldState,
    clone_world_state,
    empty_world_state,
)


logger = get_logger(__name__)


def coerce_units(records: Iterable[NarrativeUnit | Mapping[str, Any]]) -> list[NarrativeUnit]:
    """Validate stored documents into NarrativeUnit records.

    Args:
        records: Units or raw mappings (story-node documents).

    Returns:
        Units in input order.

    Raises:
        ValidationError: If a record cannot be validated.
    """
    units: list[NarrativeUnit] = []
    for index, record in enumerate(records):
        if isinstance(record, NarrativeUnit):
            units.append(record)
            continue
        try:
            units.append(NarrativeUnit.model_validate(record))
        except pydantic.ValidationError as exc:
            raise ValidationError(
                f"Invalid narrative unit at position {index}",
                field_name="units",
                details={"index": index, "errors": exc.errors(include_url=False)},
            ) from exc
    return units


def sort_units(units: Iterable[NarrativeUnit]) -> list[NarrativeUnit]:
    """Order units by ascending ``order``; ties keep input order."""
    return sorted(units, key=attrgetter("order"))


def replay(units: Iterable[NarrativeUnit]) -> WorldState:
    """Replay every unit's deltas in timeline order.

    Args:
        units: Units in any order.

    Returns:
        The world state after the last unit.
    """
    state = empty_world_state()
    for unit in sort_units(units):
        for delta in unit.deltas:
            apply_delta(state, delta)
    return state


def iter_projections(units: Iterable[NarrativeUnit]) -> Iterator[Projection]:
    """Yield the projection of every unit in one replay pass.

    Each yielded snapshot is independently owned, so consumers may keep
    or mutate them freely.
    """
    state = empty_world_state()
    for unit in sort_units(units):
        pre = clone_world_state(state)
        for delta in unit.deltas:
            apply_delta(state, delta)
        yield Projection(unit=unit, pre=pre, post=clone_world_state(state))


def project_pre_and_post(units: Iterable[NarrativeUnit], target_unit_id: str) -> Projection:
    """Project the world state around one unit.

    Units before the target are replayed into a running state. At the
    target, the running state is cloned as ``pre`` and the target's own
    deltas are applied to a further clone to produce ``post``. Later units
    are never read.

    Args:
        units: Timeline units; sorted here by ``order`` (stable).
        target_unit_id: Id of the unit to project.

    Returns:
        The target unit with its pre- and post-state.

    Raises:
        NodeNotFoundError: If no unit has ``target_unit_id``.
    """
    state = empty_world_state()
    replayed = 0
    for unit in sort_units(units):
        if unit.id == target_unit_id:
            pre = clone_world_state(state)
            post = apply_deltas(state, unit.deltas)
            logger.debug(
                "Projected unit",
                unit_id=target_unit_id,
                order=unit.order,
                prior_units=replayed,
                deltas=len(unit.deltas),
            )
            return Projection(unit=unit, pre=pre, post=post)
        for delta in unit.deltas:
            apply_delta(state, delta)
        replayed += 1

    raise NodeNotFoundError("Story node not found", unit_id=target_unit_id)


__all__ = [
    "coerce_units",
    "sort_units",
    "replay",
    "iter_projections",
    "project_pre_and_post",
]
