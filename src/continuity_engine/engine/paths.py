"""Dot-path access into world-state trees.

Only mappings are traversable containers. Reads never raise; writes
create any missing intermediate mappings on the way down.
"""

from __future__ import annotations

from typing import Any, Final

from continuity_engine.core.constants import PATH_SEPARATOR
from continuity_engine.models.world_state import WorldState


class _Absent:
    """Sentinel type for a path that resolves to nothing.

    Distinct from None, which is a legitimate stored value.
    """

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __copy__(self) -> _Absent:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Absent:
        return self


ABSENT: Final = _Absent()


def split_path(path: str) -> list[str]:
    """Split a key path into its segments."""
    return path.split(PATH_SEPARATOR)


def get_path(tree: WorldState, path: str) -> Any:
    """Read the value at ``path``.

    Args:
        tree: Root mapping to read from.
        path: Dot-delimited key path.

    Returns:
        The stored value, or ``ABSENT`` when a segment is missing or an
        intermediate value is not a mapping.
    """
    current: Any = tree
    for segment in split_path(path):
        if not isinstance(current, dict) or segment not in current:
            return ABSENT
        current = current[segment]
    return current


def has_path(tree: WorldState, path: str) -> bool:
    return get_path(tree, path) is not ABSENT


def set_path(tree: WorldState, path: str, value: Any) -> None:
    """Write ``value`` at ``path``, mutating ``tree`` in place.

    Every intermediate segment whose value is missing or is not a mapping
    is replaced by a fresh empty mapping. The final segment is overwritten
    unconditionally.

    Args:
        tree: Root mapping to write into.
        path: Dot-delimited key path.
        value: Value to store.
    """
    *parents, leaf = split_path(path)
    current = tree
    for segment in parents:
        child = current.get(segment)
        if not isinstance(child, dict):
            child = {}
            current[segment] = child
        current = child
    current[leaf] = value


__all__ = [
    "ABSENT",
    "split_path",
    "get_path",
    "has_path",
    "set_path",
]
