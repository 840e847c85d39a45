"""
Snapshot assembly — parsed records + aggregations → ``DashboardSnapshot``.

``build_snapshot(payload)`` is the one entry point every refresh trigger
calls (manual CLI run, scheduler tick, dashboard button). It is idempotent:
the same payload and timestamp always give an equal snapshot.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from logistics_dashboard.aggregation import aggregator
from logistics_dashboard.models.records import ParsedPayload
from logistics_dashboard.models.snapshot import DashboardSnapshot
from logistics_dashboard.parsing.records import parse_payload
from logistics_dashboard.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def assemble_snapshot(parsed: ParsedPayload, assembled_at: datetime) -> DashboardSnapshot:
    """Compose raw records and their aggregations into one snapshot.

    Per-cell helium totals come from the source when it supplied them and
    are otherwise derived from the fill records.
    """
    helium = parsed.helium_fills
    propane = parsed.propane_replacements
    diesel = parsed.diesel_fills

    if parsed.helium_cell_totals is not None:
        cell_totals = parsed.helium_cell_totals
    else:
        cell_totals = tuple(aggregator.cell_totals(helium))

    return DashboardSnapshot(
        helium_fills=helium,
        helium_cell_totals=cell_totals,
        propane_replacements=propane,
        diesel_fills=diesel,
        monthly_helium=tuple(aggregator.monthly_helium(helium)),
        monthly_diesel=tuple(aggregator.monthly_diesel(diesel)),
        helium_by_cell=tuple(aggregator.helium_by_cell(helium)),
        propane_by_machinery=tuple(aggregator.propane_by_machinery(propane)),
        diesel_by_machinery=tuple(aggregator.diesel_by_machinery(diesel)),
        stats=aggregator.summary_stats(helium, diesel, propane, parsed.propane_totals),
        assembled_at=assembled_at,
    )


def build_snapshot(payload: Any, assembled_at: Optional[datetime] = None) -> DashboardSnapshot:
    """Parse a raw JSON payload and assemble a snapshot from it.

    Args:
        payload: Decoded JSON payload (see ``parsing.records``). Anything
            unusable yields an empty, all-zero snapshot.
        assembled_at: Capture timestamp. Defaults to the current UTC time.
    """
    parsed = parse_payload(payload)
    if parsed.is_empty:
        logger.info("Building snapshot from an empty payload")
    snapshot = assemble_snapshot(parsed, assembled_at or utcnow())
    logger.info(
        "Snapshot assembled | helium=%d propane=%d diesel=%d",
        snapshot.stats.helium_fills,
        snapshot.stats.propane_replacements,
        snapshot.stats.diesel_entries,
    )
    return snapshot
