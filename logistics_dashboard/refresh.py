"""
Refresh coordination: fetch → build → publish.

The only shared state in the application is the latest complete snapshot,
held by ``SnapshotStore`` and swapped in one assignment under a lock, so
readers always get a whole snapshot (old or new).

``RefreshCoordinator.refresh()`` may be called from a timer and from a
manual trigger at overlapping moments. Each call takes a generation
number when it starts; when it finishes, its snapshot is published only
if no later refresh has started in the meantime. A newer request
therefore supersedes an older one instead of queueing behind it, and a
slow stale fetch can never overwrite fresher data.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional

from logistics_dashboard.models.snapshot import DashboardSnapshot
from logistics_dashboard.reporting.assembler import build_snapshot
from logistics_dashboard.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

FetchFn = Callable[[], Any]
PublishHook = Callable[[DashboardSnapshot], None]


class SnapshotStore:
    """Holder for the most recently published snapshot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: Optional[DashboardSnapshot] = None

    def get(self) -> Optional[DashboardSnapshot]:
        with self._lock:
            return self._snapshot

    def publish(self, snapshot: DashboardSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot


class RefreshCoordinator:
    """Runs the refresh pipeline and publishes results to a ``SnapshotStore``.

    Args:
        fetch_fn: Zero-argument callable returning a raw JSON payload
            (usually ``SheetsClient.fetch``). It must not raise for transport
            problems; an empty payload is a valid result.
        store: Destination for published snapshots.
        on_publish: Optional hook called after each successful publish
            (the scheduler uses it to write the CSV export).
        clock: Timestamp source, injectable for tests.
    """

    def __init__(
        self,
        fetch_fn: FetchFn,
        store: Optional[SnapshotStore] = None,
        on_publish: Optional[PublishHook] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.fetch_fn = fetch_fn
        self.store = store or SnapshotStore()
        self.on_publish = on_publish
        self.clock = clock
        self._generations = itertools.count(1)
        self._latest_started = 0
        self._lock = threading.Lock()

    def _begin(self) -> int:
        with self._lock:
            generation = next(self._generations)
            self._latest_started = generation
            return generation

    def refresh(self) -> Optional[DashboardSnapshot]:
        """Fetch, build and publish one snapshot.

        Returns:
            The published snapshot, or ``None`` when a newer refresh started
            while this one was running (its result is discarded).
        """
        generation = self._begin()
        logger.info("Refresh #%d starting", generation)

        payload = self.fetch_fn()
        snapshot = build_snapshot(payload, assembled_at=self.clock())

        with self._lock:
            if generation != self._latest_started:
                logger.info(
                    "Refresh #%d superseded by #%d; discarding result",
                    generation, self._latest_started,
                )
                return None
            self.store.publish(snapshot)

        logger.info("Refresh #%d published", generation)
        if self.on_publish is not None:
            self.on_publish(snapshot)
        return snapshot
