"""Tests for the incremental snapshot arena."""

from __future__ import annotations

import threading
import time

import pytest

from continuity_engine.core.config import CacheSettings, Settings
from continuity_engine.core.exceptions import ArenaCapacityError, NodeNotFoundError
from continuity_engine.engine.cache import SnapshotArena
from continuity_engine.engine.timeline import project_pre_and_post, replay
from continuity_engine.models import NarrativeUnit, WorldStateDelta


def unit(unit_id: str, order: int, key: str = "counter", amount: int = 1) -> NarrativeUnit:
    return NarrativeUnit(
        id=unit_id,
        order=order,
        deltas=[WorldStateDelta(key=key, op="INCREMENT", value=amount)],
    )


class TestSnapshotArena:
    """Tests for SnapshotArena."""

    def test_matches_full_replay(self, timeline: list[NarrativeUnit]) -> None:
        """Test that arena projections equal full-replay projections."""
        arena = SnapshotArena(timeline)

        for u in timeline:
            cached = arena.project(u.id)
            expected = project_pre_and_post(timeline, u.id)
            assert cached.pre == expected.pre
            assert cached.post == expected.post
            assert cached.unit is u

    def test_returns_independent_copies(self, timeline: list[NarrativeUnit]) -> None:
        """Test that mutating a result does not affect the arena."""
        arena = SnapshotArena(timeline)

        first = arena.project("u1")
        first.post["party"]["gold"] = 999
        first.pre["party"]["gold"] = 999

        second = arena.project("u1")
        assert second.post["party"]["gold"] == 7
        assert second.pre["party"]["gold"] == 10

    def test_out_of_order_append_rebuilds(self) -> None:
        """Test that inserting mid-timeline updates later snapshots."""
        arena = SnapshotArena([unit("a", 0), unit("c", 2)])
        assert arena.project("c").post == {"counter": 2}

        arena.append(unit("b", 1, amount=10))

        assert [u.id for u in arena.units] == ["a", "b", "c"]
        assert arena.project("b").pre == {"counter": 1}
        assert arena.project("c").post == {"counter": 12}
        assert arena.latest() == replay(arena.units)

    def test_equal_orders_keep_append_order(self) -> None:
        """Test tie handling matches stable sorting."""
        units = [
            NarrativeUnit(id="x", order=1, deltas=[WorldStateDelta(key="v", op="SET", value="x")]),
            NarrativeUnit(id="y", order=1, deltas=[WorldStateDelta(key="v", op="SET", value="y")]),
        ]
        arena = SnapshotArena(units)

        assert arena.project("y").pre == {"v": "x"}
        assert arena.project("y").pre == project_pre_and_post(units, "y").pre

    def test_missing_unit(self) -> None:
        """Test that an unknown id raises NodeNotFoundError."""
        arena = SnapshotArena([unit("a", 0)])

        with pytest.raises(NodeNotFoundError):
            arena.project("zzz")

    def test_capacity(self) -> None:
        """Test that a full arena rejects new units."""
        arena = SnapshotArena([unit("a", 0)], max_units=1)

        with pytest.raises(ArenaCapacityError) as exc_info:
            arena.append(unit("b", 1))

        assert exc_info.value.details["max_units"] == 1
        assert len(arena) == 1

    def test_from_settings(self) -> None:
        """Test building an arena from settings."""
        settings = Settings(cache=CacheSettings(enabled=True, max_units=5))

        arena = SnapshotArena.from_settings(settings, [unit("a", 0)])

        assert arena.max_units == 5
        assert "a" in arena

    def test_clear(self) -> None:
        """Test clearing the arena."""
        arena = SnapshotArena([unit("a", 0)])
        arena.clear()

        assert len(arena) == 0
        assert arena.latest() == {}

    def test_concurrent_appends(self) -> None:
        """Test that concurrent appends keep the arena consistent."""
        arena = SnapshotArena()
        units = [unit(f"u{i}", i) for i in range(40)]

        threads = [
            threading.Thread(target=arena.extend, args=(units[i::4],)) for i in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert [u.order for u in arena.units] == list(range(40))
        assert arena.latest() == {"counter": 40}
        assert arena.project("u39").pre == {"counter": 39}

    def test_tail_appends_scale(self) -> None:
        """Test that appending in timeline order stays cheap for long timelines."""
        units = [unit(f"u{i}", i) for i in range(5_000)]

        started = time.perf_counter()
        arena = SnapshotArena(units)
        elapsed = time.perf_counter() - started

        assert elapsed < 2.0
        assert arena.latest() == {"counter": 5_000}
        assert arena.project("u2500").pre == {"counter": 2_500}

    def test_duplicate_id_keeps_first(self) -> None:
        """Test that the earliest unit wins for a repeated id, as in a full replay."""
        arena = SnapshotArena([unit("a", 0), unit("b", 2), unit("b", 3, amount=5)])
        assert arena.project("b").post == {"counter": 2}

        arena.append(unit("b", 1, amount=10))

        assert arena.project("b").post == {"counter": 11}
        assert arena.project("b") == project_pre_and_post(arena.units, "b")
