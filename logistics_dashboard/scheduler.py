"""Scheduler daemon for periodic dashboard refreshes.

No external scheduler library is required — uses stdlib ``time`` and
``signal`` only.

Typical usage via the CLI::

    logdash start-scheduler --interval-seconds 3600

Or import directly::

    from logistics_dashboard.scheduler import SchedulerDaemon
    daemon = SchedulerDaemon(coordinator, interval_seconds=3600)
    daemon.start()  # blocks until Ctrl-C

Each tick runs the same pipeline as a manual ``logdash refresh``
(``RefreshCoordinator.refresh``). When ``export_path`` is set, every
published snapshot is also written to that CSV file. A failed refresh is
logged but does not stop the daemon.
"""

from __future__ import annotations

import logging
import platform
import signal
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from logistics_dashboard.models.snapshot import DashboardSnapshot
from logistics_dashboard.refresh import RefreshCoordinator
from logistics_dashboard.reporting.export import DEFAULT_TITLE, write_export

log = logging.getLogger(__name__)


class SchedulerDaemon:
    """Runs a refresh immediately and then every ``interval_seconds``.

    Parameters
    ----------
    coordinator:
        The refresh pipeline to invoke.
    interval_seconds:
        Seconds between refreshes. Defaults to one hour.
    export_path:
        When set, the CSV report is rewritten after every published snapshot.
    export_title:
        Banner line for the CSV report.
    skip_initial:
        When *True*, wait one full interval before the first refresh.
    tick_seconds:
        How often the loop wakes up to check the clock.
    """

    def __init__(
        self,
        coordinator: RefreshCoordinator,
        interval_seconds: int = 3600,
        export_path: Optional[Path] = None,
        export_title: str = DEFAULT_TITLE,
        skip_initial: bool = False,
        tick_seconds: int = 30,
    ) -> None:
        self.coordinator = coordinator
        self.interval = timedelta(seconds=interval_seconds)
        self.export_path = export_path
        self.export_title = export_title
        self.skip_initial = skip_initial
        self.tick_seconds = tick_seconds
        self._running = False

    # ── Jobs ──────────────────────────────────────────────────────────────────

    def run_once(self) -> Optional[DashboardSnapshot]:
        """Run one refresh (and export).  Returns the published snapshot or None."""
        log.info(
            "=== Refresh starting at %s ===",
            datetime.now().isoformat(timespec="seconds"),
        )
        try:
            snapshot = self.coordinator.refresh()
        except Exception as exc:
            log.error("Refresh failed: %s", exc, exc_info=True)
            return None

        if snapshot is not None and self.export_path is not None:
            try:
                write_export(snapshot, self.export_path, title=self.export_title)
                log.info("Export written to %s", self.export_path)
            except OSError as exc:
                log.error("Could not write export %s: %s", self.export_path, exc)
        return snapshot

    # ── Main loop ─────────────────────────────────────────────────────────────

    def stop(self) -> None:
        self._running = False

    def start(self) -> None:
        """Start the daemon.  Blocks until Ctrl-C (or SIGTERM on Linux/macOS)."""
        next_run: datetime = (
            datetime.now() + self.interval if self.skip_initial else datetime.now()
        )

        log.info(
            "Scheduler started.  interval=%ss  export=%s",
            int(self.interval.total_seconds()),
            self.export_path or "(none)",
        )
        log.info("Next refresh: %s", next_run.isoformat(timespec="seconds"))

        self._running = True

        def _shutdown(signum, frame):  # noqa: ANN001
            log.info("Signal %d received — stopping scheduler.", signum)
            self._running = False

        signal.signal(signal.SIGINT, _shutdown)
        if platform.system() != "Windows":
            signal.signal(signal.SIGTERM, _shutdown)

        while self._running:
            if datetime.now() >= next_run:
                self.run_once()
                next_run = datetime.now() + self.interval
                log.info("Next refresh scheduled: %s", next_run.isoformat(timespec="seconds"))

            time.sleep(self.tick_seconds)

        log.info("Scheduler stopped.")
