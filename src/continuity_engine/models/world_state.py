"""World-state value types.

A world state is a schema-less tree: string keys mapping to scalars,
ordered lists, or nested mappings. Keys are opaque paths chosen by
narrative authors (``character.<id>.location``, ``item.<id>.status``).

Snapshots handed to callers are always independently owned. Nothing in
this package returns a container that is shared with another snapshot.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import Any, TypeAlias, Union

from continuity_engine.core.constants import PATH_SEPARATOR


WorldValue: TypeAlias = Union[
    None,
    bool,
    int,
    float,
    str,
    list["WorldValue"],
    dict[str, "WorldValue"],
]
"""A single value stored in a world state."""

WorldState: TypeAlias = dict[str, Any]
"""The aggregate narrative world at one instant."""


def empty_world_state() -> WorldState:
    """Return the state at the start of every timeline."""
    return {}


def clone_world_state(state: WorldState) -> WorldState:
    """Return a deep, independently owned copy of a snapshot."""
    return copy.deepcopy(state)


def iter_leaves(state: WorldState, prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(path, value)`` pairs for every non-mapping value.

    Keys are visited in sorted order so the output is stable across
    snapshots built by different insertion sequences. Empty mappings are
    yielded as leaves so that a vivified but unset branch stays visible.
    """
    for key in sorted(state):
        value = state[key]
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else key
        if isinstance(value, dict) and value:
            yield from iter_leaves(value, path)
        else:
            yield path, value


def flatten_world_state(state: WorldState) -> dict[str, Any]:
    """Flatten a snapshot into a ``{dot.path: value}`` mapping."""
    return dict(iter_leaves(state))


__all__ = [
    "WorldValue",
    "WorldState",
    "empty_world_state",
    "clone_world_state",
    "iter_leaves",
    "flatten_world_state",
]
