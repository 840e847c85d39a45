"""
Pure aggregation over consumption records.

Every function here is deterministic for a given input order, performs no
I/O and never raises for bad data. Callers filter records to the current
year before aggregating; nothing here looks at the year component.

Sort contracts
--------------
- ``group_and_sum``: descending by value; ties keep first-seen group order.
- ``cell_totals``:   first-seen cell order (the UI may re-sort).
- ``monthly_bucket``: always the twelve calendar months, January first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Optional, TypeVar

from logistics_dashboard.models.records import (
    DieselFillRecord,
    HeliumCellTotal,
    HeliumFillRecord,
    PropaneReplacementRecord,
    PropaneTotals,
)
from logistics_dashboard.models.snapshot import (
    DashboardStats,
    MonthlySeriesPoint,
    RankedTotal,
)
from logistics_dashboard.utils.time_utils import MONTH_NAMES, parse_record_date

logger = logging.getLogger(__name__)

R = TypeVar("R")

DEFAULT_TOP_N = 10


def group_and_sum(
    records: Iterable[R],
    key_fn: Callable[[R], str],
    measure_fn: Optional[Callable[[R], float]] = None,
) -> list[RankedTotal]:
    """Group ``records`` by ``key_fn`` and total ``measure_fn`` per group.

    With ``measure_fn=None`` each record counts as 1 (presence count).

    Returns:
        One ``RankedTotal`` per distinct key, sorted descending by value.
        Equal values keep the order in which their keys first appeared.
        Empty input gives an empty list.
    """
    totals: dict[str, float] = {}
    for record in records:
        key = key_fn(record)
        amount = 1.0 if measure_fn is None else measure_fn(record)
        totals[key] = totals.get(key, 0.0) + amount

    ranked = [RankedTotal(label=label, value=value) for label, value in totals.items()]
    return sorted(ranked, key=lambda t: -t.value)


def monthly_bucket(
    records: Iterable[R],
    date_fn: Callable[[R], str],
    measure_fn: Callable[[R], float],
) -> list[MonthlySeriesPoint]:
    """Bucket ``records`` into calendar months and accumulate.

    All twelve months start at zero. Records whose date cannot be
    interpreted are left out of the series. The cumulative value of month
    *m* is the running sum of period values for months 1..*m*.

    Returns:
        Exactly twelve points, January through December, even for empty input.
    """
    buckets = [0.0] * 12
    dropped = 0
    for record in records:
        parsed = parse_record_date(date_fn(record))
        if parsed is None:
            dropped += 1
            continue
        buckets[parsed.month - 1] += measure_fn(record)

    if dropped:
        logger.debug("monthly_bucket: %d record(s) without a usable date", dropped)

    points: list[MonthlySeriesPoint] = []
    cumulative = 0.0
    for name, period in zip(MONTH_NAMES, buckets):
        cumulative += period
        points.append(
            MonthlySeriesPoint(month=name, period_value=period, cumulative_value=cumulative)
        )
    return points


def cell_totals(helium_records: Iterable[HeliumFillRecord]) -> list[HeliumCellTotal]:
    """Total SCF and fill count per helium cell, in first-seen cell order."""
    scf: dict[str, float] = {}
    fills: dict[str, int] = {}
    for record in helium_records:
        scf[record.cell] = scf.get(record.cell, 0.0) + record.scf
        fills[record.cell] = fills.get(record.cell, 0) + 1
    return [
        HeliumCellTotal(cell=cell, total_scf=total, fill_count=fills[cell])
        for cell, total in scf.items()
    ]


def summary_stats(
    helium: Sequence[HeliumFillRecord],
    diesel: Sequence[DieselFillRecord],
    propane: Sequence[PropaneReplacementRecord] = (),
    propane_totals: Optional[PropaneTotals] = None,
) -> DashboardStats:
    """Header-card scalars for one snapshot.

    Propane canisters and gallons pumped come from the source's own totals
    object; without one they are 0. All-empty input gives all-zero stats.
    """
    totals = propane_totals or PropaneTotals()
    return DashboardStats(
        helium_total_scf=sum(r.scf for r in helium),
        helium_fills=len(helium),
        propane_canisters=totals.canisters,
        propane_gallons_pumped=totals.gallons_pumped,
        propane_replacements=len(propane),
        diesel_total=sum(r.gallons for r in diesel),
        diesel_entries=len(diesel),
    )


def top_n(ranked: Sequence[RankedTotal], limit: int = DEFAULT_TOP_N) -> list[RankedTotal]:
    """Leading ``limit`` entries of an already-ranked list (pie chart slices)."""
    return list(ranked[: max(limit, 0)])


# ── Category-specific derivations ─────────────────────────────────────────────


def helium_by_cell(records: Iterable[HeliumFillRecord]) -> list[RankedTotal]:
    return group_and_sum(records, lambda r: r.cell, lambda r: r.scf)


def propane_by_machinery(records: Iterable[PropaneReplacementRecord]) -> list[RankedTotal]:
    """Canister replacements counted per machine."""
    return group_and_sum(records, lambda r: r.machinery)


def diesel_by_machinery(records: Iterable[DieselFillRecord]) -> list[RankedTotal]:
    return group_and_sum(records, lambda r: r.machinery, lambda r: r.gallons)


def monthly_helium(records: Iterable[HeliumFillRecord]) -> list[MonthlySeriesPoint]:
    return monthly_bucket(records, lambda r: r.fill_date, lambda r: r.scf)


def monthly_diesel(records: Iterable[DieselFillRecord]) -> list[MonthlySeriesPoint]:
    return monthly_bucket(records, lambda r: r.date, lambda r: r.gallons)
