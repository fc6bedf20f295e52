"""Constants shared by the continuity engine.

World-state keys are opaque to the projector, but the continuity rules
read a few well-known path shapes. Those shapes live here.
"""

from __future__ import annotations

# =============================================================================
# World-State Paths
# =============================================================================

PATH_SEPARATOR = "."
"""Separator between segments of a world-state key path."""

CHARACTER_PREFIX = "character"
"""First segment of character-scoped world-state keys."""

LOCATION_FIELD = "location"
"""Last segment holding a character's current location id."""

ITEM_PREFIX = "item."
"""Prefix of item-scoped world-state keys."""

STATUS_SUFFIX = ".status"
"""Suffix of item status keys."""

# =============================================================================
# Item Status Values
# =============================================================================

ITEM_STATUS_DESTROYED = "DESTROYED"
"""Terminal item status; an item may not leave it."""

# =============================================================================
# Delta Defaults
# =============================================================================

DEFAULT_STEP = 1
"""Amount used by INCREMENT/DECREMENT when the delta carries no number."""

DEFAULT_NUMBER = 0
"""Prior value assumed by INCREMENT/DECREMENT when none is numeric."""


def character_location_key(entity_id: str) -> str:
    """Return the world-state key holding a character's location."""
    return PATH_SEPARATOR.join((CHARACTER_PREFIX, entity_id, LOCATION_FIELD))


def is_item_status_key(key: str) -> bool:
    """Return True for keys shaped like ``item.<id>.status``."""
    return key.startswith(ITEM_PREFIX) and key.endswith(STATUS_SUFFIX)


__all__ = [
    "PATH_SEPARATOR",
    "CHARACTER_PREFIX",
    "LOCATION_FIELD",
    "ITEM_PREFIX",
    "STATUS_SUFFIX",
    "ITEM_STATUS_DESTROYED",
    "DEFAULT_STEP",
    "DEFAULT_NUMBER",
    "character_location_key",
    "is_item_status_key",
]
