"""Tests for logistics_dashboard.refresh."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

from logistics_dashboard.refresh import RefreshCoordinator, SnapshotStore


def _clock() -> datetime:
    return datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_refresh_publishes_snapshot(sample_payload) -> None:
    coordinator = RefreshCoordinator(lambda: sample_payload, clock=_clock)
    snap = coordinator.refresh()
    assert snap is not None
    assert coordinator.store.get() is snap
    assert snap.assembled_at == _clock()
    assert snap.stats.helium_fills == 3


def test_store_starts_empty() -> None:
    assert SnapshotStore().get() is None


def test_empty_fetch_still_publishes() -> None:
    """An unreachable source yields an empty snapshot, not an error."""
    coordinator = RefreshCoordinator(lambda: {}, clock=_clock)
    snap = coordinator.refresh()
    assert snap is not None
    assert snap.stats.helium_total_scf == 0
    assert len(snap.monthly_helium) == 12


def test_on_publish_hook_called(sample_payload) -> None:
    published = []
    coordinator = RefreshCoordinator(lambda: sample_payload, on_publish=published.append, clock=_clock)
    snap = coordinator.refresh()
    assert published == [snap]


def test_newer_refresh_supersedes_older(sample_payload) -> None:
    """A slow refresh that finishes after a newer one is discarded."""
    slow_started = threading.Event()
    release_slow = threading.Event()
    calls = {"n": 0}

    def fetch():
        calls["n"] += 1
        if calls["n"] == 1:
            slow_started.set()
            release_slow.wait(timeout=5)
            return {"helium": [{"fillDate": "2024-01-01", "cell": "stale", "scf": 1}]}
        return sample_payload

    published = []
    coordinator = RefreshCoordinator(fetch, on_publish=published.append, clock=_clock)

    results = {}
    worker = threading.Thread(target=lambda: results.setdefault("slow", coordinator.refresh()))
    worker.start()
    assert slow_started.wait(timeout=5)

    fresh = coordinator.refresh()
    release_slow.set()
    worker.join(timeout=5)

    assert results["slow"] is None
    assert fresh is not None
    assert coordinator.store.get() is fresh
    assert published == [fresh]
    assert coordinator.store.get().helium_fills[0].cell == "cellA"


def test_sequential_refreshes_each_publish(sample_payload) -> None:
    coordinator = RefreshCoordinator(lambda: sample_payload, clock=_clock)
    first = coordinator.refresh()
    second = coordinator.refresh()
    assert first is not None and second is not None
    assert coordinator.store.get() is second
