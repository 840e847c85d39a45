"""
Derived views and the ``DashboardSnapshot`` aggregate root.

A snapshot is built once per refresh cycle from freshly parsed records,
handed to the CLI / dashboard / exporter, and then discarded. Nothing in it
is patched incrementally: every derived collection can be recomputed from
the raw collections it carries.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from logistics_dashboard.models.records import (
    DieselFillRecord,
    HeliumCellTotal,
    HeliumFillRecord,
    PropaneReplacementRecord,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


class MonthlySeriesPoint(BaseModel):
    """One calendar month of a year-to-date series.

    ``period_value`` is what that month alone contributed and
    ``cumulative_value`` the running total through that month. Both keep full
    precision; charts and tables use the rounded ``display_*`` properties.
    """

    model_config = ConfigDict(frozen=True)

    month: str
    period_value: float = 0.0
    cumulative_value: float = 0.0

    @property
    def label(self) -> str:
        """Three-letter axis label, e.g. ``"Jan"``."""
        return self.month[:3]

    @property
    def display_period(self) -> int:
        return round_half_up(self.period_value)

    @property
    def display_cumulative(self) -> int:
        return round_half_up(self.cumulative_value)


class RankedTotal(BaseModel):
    """A grouped total (sum or count) for one label."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: float


class DashboardStats(BaseModel):
    """Year-to-date summary scalars shown on the dashboard header cards."""

    model_config = ConfigDict(frozen=True)

    helium_total_scf: float = 0.0
    helium_fills: int = 0
    propane_canisters: float = 0.0
    propane_gallons_pumped: float = 0.0
    propane_replacements: int = 0
    diesel_total: float = 0.0
    diesel_entries: int = 0


class DashboardSnapshot(BaseModel):
    """Everything one refresh cycle produced, raw and derived."""

    model_config = ConfigDict(frozen=True)

    helium_fills: tuple[HeliumFillRecord, ...] = ()
    helium_cell_totals: tuple[HeliumCellTotal, ...] = ()
    propane_replacements: tuple[PropaneReplacementRecord, ...] = ()
    diesel_fills: tuple[DieselFillRecord, ...] = ()

    monthly_helium: tuple[MonthlySeriesPoint, ...] = ()
    monthly_diesel: tuple[MonthlySeriesPoint, ...] = ()
    helium_by_cell: tuple[RankedTotal, ...] = ()
    propane_by_machinery: tuple[RankedTotal, ...] = ()
    diesel_by_machinery: tuple[RankedTotal, ...] = ()

    stats: DashboardStats = Field(default_factory=DashboardStats)
    assembled_at: datetime

    def as_dict(self) -> dict[str, Any]:
        """JSON-serialisable view using the inbound payload's camelCase keys.

        Raw sections mirror the ``/api/sheets`` contract so a dumped snapshot
        can be fed back through ``parse_payload``.
        """
        return {
            "assembledAt": self.assembled_at.isoformat(),
            "helium": [
                {"fillDate": r.fill_date, "cell": r.cell, "scf": r.scf}
                for r in self.helium_fills
            ],
            "heliumFillTotals": [
                {"cell": t.cell, "totalScf": t.total_scf, "fillCount": t.fill_count}
                for t in self.helium_cell_totals
            ],
            "fuel": {
                "propane": [
                    {"machinery": r.machinery, "date": r.date}
                    for r in self.propane_replacements
                ],
                "diesel": [
                    {"machinery": r.machinery, "date": r.date, "gallons": r.gallons}
                    for r in self.diesel_fills
                ],
                "propaneTotals": {
                    "canisters": self.stats.propane_canisters,
                    "gallonsPumped": self.stats.propane_gallons_pumped,
                },
            },
            "monthlyHelium": [_point_dict(p) for p in self.monthly_helium],
            "monthlyDiesel": [_point_dict(p) for p in self.monthly_diesel],
            "heliumByCell": [_ranked_dict(t) for t in self.helium_by_cell],
            "propaneByMachinery": [_ranked_dict(t) for t in self.propane_by_machinery],
            "dieselByMachinery": [_ranked_dict(t) for t in self.diesel_by_machinery],
            "stats": {
                "heliumTotalSCF": self.stats.helium_total_scf,
                "heliumFills": self.stats.helium_fills,
                "propaneCanisters": self.stats.propane_canisters,
                "propaneGallonsPumped": self.stats.propane_gallons_pumped,
                "propaneReplacements": self.stats.propane_replacements,
                "dieselTotal": self.stats.diesel_total,
                "dieselEntries": self.stats.diesel_entries,
            },
        }


def _point_dict(point: MonthlySeriesPoint) -> dict[str, Any]:
    return {
        "month": point.label,
        "cumulative": point.display_cumulative,
        "period": point.display_period,
    }


def _ranked_dict(total: RankedTotal) -> dict[str, Any]:
    return {"label": total.label, "value": total.value}
