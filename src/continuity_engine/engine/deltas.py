"""Delta application.

Applies typed world-state mutations. Wrong-typed prior values and
operands fall back to documented defaults; applying a delta never raises.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any

from continuity_engine.core.constants import DEFAULT_NUMBER, DEFAULT_STEP
from continuity_engine.engine.paths import get_path, set_path
from continuity_engine.models.delta import DeltaOp, WorldStateDelta
from continuity_engine.models.world_state import WorldState, clone_world_state


def as_number(value: Any, default: int | float) -> int | float:
    """Return ``value`` when it is a real number, else ``default``.

    Booleans are not numbers here.
    """
    match value:
        case bool():
            return default
        case int() | float():
            return value
        case _:
            return default


def as_list(value: Any) -> list[Any]:
    """Return a shallow copy of ``value`` when it is a list, else ``[]``."""
    match value:
        case list():
            return list(value)
        case _:
            return []


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality that keeps booleans distinct from numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    match left, right:
        case list(), list():
            return len(left) == len(right) and all(
                values_equal(a, b) for a, b in zip(left, right)
            )
        case dict(), dict():
            return left.keys() == right.keys() and all(
                values_equal(left[k], right[k]) for k in left
            )
        case _:
            return left == right


def apply_delta(tree: WorldState, delta: WorldStateDelta) -> None:
    """Apply one delta to ``tree`` in place.

    Only the subtree at ``delta.key`` changes. Lists are rebuilt rather
    than mutated, and the operand is copied, so no container reachable
    from another snapshot or from the delta itself is touched.

    Args:
        tree: World state to mutate.
        delta: The mutation to apply.
    """
    prior = get_path(tree, delta.key)

    match delta.op:
        case DeltaOp.SET:
            result = copy.deepcopy(delta.value)
        case DeltaOp.INCREMENT:
            result = as_number(prior, DEFAULT_NUMBER) + as_number(delta.value, DEFAULT_STEP)
        case DeltaOp.DECREMENT:
            result = as_number(prior, DEFAULT_NUMBER) - as_number(delta.value, DEFAULT_STEP)
        case DeltaOp.APPEND:
            result = [*as_list(prior), copy.deepcopy(delta.value)]
        case DeltaOp.REMOVE:
            result = [x for x in as_list(prior) if not values_equal(x, delta.value)]

    set_path(tree, delta.key, result)


def apply_deltas(base: WorldState, deltas: Iterable[WorldStateDelta]) -> WorldState:
    """Apply deltas in order to a copy of ``base``.

    Args:
        base: Snapshot to start from; left untouched.
        deltas: Mutations, applied strictly left to right.

    Returns:
        A new, independently owned snapshot.
    """
    state = clone_world_state(base)
    for delta in deltas:
        apply_delta(state, delta)
    return state


__all__ = [
    "as_number",
    "as_list",
    "values_equal",
    "apply_delta",
    "apply_deltas",
]
