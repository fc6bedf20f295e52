"""Pytest configuration and shared fixtures.

Provides settings isolation and a small sample timeline used across the
unit and integration suites.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from continuity_engine.models import NarrativeUnit, WorldStateDelta


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from continuity_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty directory with no CONTINUITY_* variables set."""
    import os

    for key in list(os.environ):
        if key.startswith("CONTINUITY_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Timeline Fixtures
# =============================================================================


@pytest.fixture
def timeline() -> list[NarrativeUnit]:
    """Three units: arrive at the tavern, lose the sword, travel.

    Returns:
        Units u0, u1, u2 in ascending order.
    """
    return [
        NarrativeUnit(
            id="u0",
            order=0,
            deltas=[
                WorldStateDelta(key="character.c1.location", op="SET", value="tavern"),
                WorldStateDelta(key="item.sword.status", op="SET", value="INTACT"),
                WorldStateDelta(key="party.gold", op="INCREMENT", value=10),
            ],
            participants=[{"entity_id": "c1"}],
            locations=["tavern"],
        ),
        NarrativeUnit(
            id="u1",
            order=1,
            deltas=[
                WorldStateDelta(key="item.sword.status", op="SET", value="DESTROYED"),
                WorldStateDelta(key="party.gold", op="DECREMENT", value=3),
                WorldStateDelta(key="character.c1.inventory", op="APPEND", value="shield"),
            ],
            participants=[{"entity_id": "c1"}],
            locations=["tavern"],
        ),
        NarrativeUnit(
            id="u2",
            order=2,
            deltas=[
                WorldStateDelta(key="character.c1.location", op="SET", value="forest"),
            ],
            participants=[{"entity_id": "c1"}],
            locations=["forest"],
        ),
    ]
