"""
Dashboard data loader.

Turns a ``DashboardSnapshot`` into view-ready rows (lists of plain dicts)
that ``app.py`` hands straight to ``pandas.DataFrame``.  Nothing here
imports streamlit: caching is applied in ``app.py`` so these functions
stay importable and testable on a headless install.

View settings travel as an explicit ``ViewConfig`` value; there is no
module-level mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Sequence

from logistics_dashboard.aggregation.aggregator import DEFAULT_TOP_N, group_and_sum, top_n
from logistics_dashboard.config import AppConfig
from logistics_dashboard.ingestion.sheets_client import SheetsClient
from logistics_dashboard.models.snapshot import (
    DashboardSnapshot,
    DashboardStats,
    MonthlySeriesPoint,
    RankedTotal,
)
from logistics_dashboard.reporting.assembler import build_snapshot
from logistics_dashboard.utils.time_utils import utcnow

TABS = ("Combined", "Helium", "Propane", "Diesel")


@dataclass(frozen=True)
class ViewConfig:
    """Which panels are visible and which tab is active."""

    active_tab: str = "Combined"
    show_graphs: bool = True
    show_tables: bool = True
    top_n: int = DEFAULT_TOP_N

    def __post_init__(self) -> None:
        if self.active_tab not in TABS:
            raise ValueError(f"active_tab must be one of {TABS}, got '{self.active_tab}'")
        if self.top_n < 1:
            raise ValueError(f"top_n must be >= 1, got {self.top_n}")

    def with_tab(self, tab: str) -> "ViewConfig":
        return replace(self, active_tab=tab)


# ── Loading ──────────────────────────────────────────────────────────────────

def load_snapshot(config: AppConfig) -> DashboardSnapshot:
    """Fetch the configured sources and build a fresh snapshot.

    Never raises for unreachable sources; the snapshot is simply empty.
    """
    payload = SheetsClient(config.sources).fetch()
    return build_snapshot(payload)


def snapshot_age_minutes(snapshot: DashboardSnapshot, now: Optional[datetime] = None) -> float:
    """Minutes since *snapshot* was assembled."""
    now = now or utcnow()
    return max(0.0, (now - snapshot.assembled_at).total_seconds() / 60.0)


# ── Summary ──────────────────────────────────────────────────────────────────

def summary_metrics(stats: DashboardStats, tab: str = "Combined") -> list[tuple[str, str]]:
    """(label, value) pairs for the header ``st.metric`` cards of *tab*."""
    helium = [
        ("Helium YTD (SCF)", f"{stats.helium_total_scf:,.0f}"),
        ("Helium fills", f"{stats.helium_fills:,}"),
    ]
    propane = [
        ("Propane canisters", f"{stats.propane_canisters:,.0f}"),
        ("Propane gallons pumped", f"{stats.propane_gallons_pumped:,.0f}"),
        ("Canister replacements", f"{stats.propane_replacements:,}"),
    ]
    diesel = [
        ("Diesel YTD (gal)", f"{stats.diesel_total:,.1f}"),
        ("Diesel entries", f"{stats.diesel_entries:,}"),
    ]
    by_tab = {"Helium": helium, "Propane": propane, "Diesel": diesel}
    return by_tab.get(tab, helium[:1] + propane[:1] + diesel[:1])


# ── Series and rankings ──────────────────────────────────────────────────────

def monthly_rows(
    helium: Sequence[MonthlySeriesPoint],
    diesel: Sequence[MonthlySeriesPoint],
) -> list[dict]:
    """One row per month with both cumulative series, rounded for display.

    Both series always have twelve points, so they zip month for month.
    """
    return [
        {
            "Month": h.label,
            "Helium (SCF)": h.display_cumulative,
            "Diesel (gal)": d.display_cumulative,
        }
        for h, d in zip(helium, diesel)
    ]


def series_rows(points: Sequence[MonthlySeriesPoint], value_header: str) -> list[dict]:
    """Month, monthly amount and running total for one series."""
    return [
        {
            "Month": p.label,
            value_header: p.display_period,
            "Cumulative": p.display_cumulative,
        }
        for p in points
    ]


def ranked_rows(
    ranked: Sequence[RankedTotal],
    label_header: str,
    value_header: str,
    limit: Optional[int] = None,
) -> list[dict]:
    """Ranked totals as table rows, optionally cut to the first *limit*."""
    items = top_n(ranked, limit) if limit is not None else list(ranked)
    return [{label_header: r.label, value_header: r.value} for r in items]


def pie_slices(ranked: Sequence[RankedTotal], limit: int = DEFAULT_TOP_N) -> list[dict]:
    """Top-*limit* slices with their share of the whole ranking.

    Shares are taken against the total of *all* entries, not only the
    slices shown.
    """
    total = sum(r.value for r in ranked)
    return [
        {
            "label": r.label,
            "value": r.value,
            "share": (r.value / total) if total else 0.0,
        }
        for r in top_n(ranked, limit)
    ]


def cell_total_ranking(snapshot: DashboardSnapshot) -> list[RankedTotal]:
    """Cell fill totals as a descending ranking, for the helium pie."""
    return group_and_sum(snapshot.helium_cell_totals, lambda t: t.cell, lambda t: t.total_scf)


# ── Raw record tables ────────────────────────────────────────────────────────

def helium_rows(snapshot: DashboardSnapshot) -> list[dict]:
    return [
        {"Fill Date": r.fill_date, "Cell #": r.cell, "SCF": r.scf}
        for r in snapshot.helium_fills
    ]


def cell_total_rows(snapshot: DashboardSnapshot) -> list[dict]:
    return [
        {"Cell #": t.cell, "Total SCF": t.total_scf, "Fill Count": t.fill_count}
        for t in snapshot.helium_cell_totals
    ]


def propane_rows(snapshot: DashboardSnapshot) -> list[dict]:
    return [
        {"Machinery": r.machinery, "Date of Canister Replacement": r.date}
        for r in snapshot.propane_replacements
    ]


def diesel_rows(snapshot: DashboardSnapshot) -> list[dict]:
    return [
        {"Machinery": r.machinery, "Date Fueled": r.date, "Gallons Pumped": r.gallons}
        for r in snapshot.diesel_fills
    ]
