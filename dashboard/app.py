"""
Logistics H2 Dashboard — Streamlit Dashboard
============================================

Optional local UI over the same snapshot the CLI prints.  It fetches the
configured sources through ``SheetsClient`` and never writes anything to
disk; the CSV report is offered as a browser download.

Why optional?
-------------
- Streamlit and pandas add dependencies not needed for headless runs.
- The CLI and scheduler work without them.
- Every number shown here is also available via ``logistics-dashboard refresh``.

App structure (4 views)
-----------------------
  1. Combined — Headline totals, both cumulative series, all three rankings.
  2. Helium   — Cumulative SCF by month, SCF by cell, fill totals chart and pie, fill log.
  3. Propane  — Canister totals, replacements by machinery and pie, replacement log.
  4. Diesel   — Cumulative gallons by month, gallons by machinery and pie, fuel log.

Snapshots are cached for one refresh interval ([refresh] interval_seconds);
the sidebar "Refresh now" button drops the cache and refetches.

Usage
-----
    pip install -e ".[dashboard]"
    streamlit run dashboard/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# ── Ensure project root is importable ────────────────────────────────────────
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

# ── Must be the first Streamlit call ─────────────────────────────────────────
st.set_page_config(
    page_title="Logistics H2 Dashboard",
    layout="wide",
    initial_sidebar_state="expanded",
)

import altair as alt
import pandas as pd

from dashboard.data_loader import (
    TABS,
    ViewConfig,
    cell_total_ranking,
    cell_total_rows,
    diesel_rows,
    helium_rows,
    load_snapshot,
    monthly_rows,
    pie_slices,
    propane_rows,
    ranked_rows,
    series_rows,
    snapshot_age_minutes,
    summary_metrics,
)
from logistics_dashboard.config import AppConfig, load_config
from logistics_dashboard.models.snapshot import DashboardSnapshot
from logistics_dashboard.reporting.export import (
    EXPORT_FILENAME,
    EXPORT_MIME_TYPE,
    export_snapshot_csv,
)

_CONFIG: AppConfig = load_config()


@st.cache_data(ttl=_CONFIG.refresh.interval_seconds, show_spinner="Fetching sheets…")
def _cached_snapshot() -> DashboardSnapshot:
    return load_snapshot(_CONFIG)


# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("Logistics H2 Dashboard")
    st.caption(f"Source mode: {_CONFIG.sources.mode}")
    st.divider()

    show_graphs = st.toggle("Show graphs", value=True)
    show_tables = st.toggle("Show tables", value=True)
    top_limit = st.number_input(
        "Ranked entries shown",
        min_value=1,
        max_value=50,
        value=10,
        step=1,
        help="Bar charts and ranked tables show at most this many entries.",
    )

    if st.button("Refresh now", help="Drop the cached snapshot and refetch the sheets."):
        st.cache_data.clear()
        st.rerun()


snapshot = _cached_snapshot()
active_tab = st.radio("View", options=list(TABS), horizontal=True, label_visibility="collapsed")
view = ViewConfig(
    active_tab=active_tab,
    show_graphs=show_graphs,
    show_tables=show_tables,
    top_n=int(top_limit),
)


# ── Shared render helpers ─────────────────────────────────────────────────────

def render_header(snapshot: DashboardSnapshot, view: ViewConfig) -> None:
    age = snapshot_age_minutes(snapshot)
    st.caption(
        f"Snapshot assembled {snapshot.assembled_at.isoformat(timespec='seconds')} "
        f"({age:.0f} min ago)"
    )
    metrics = summary_metrics(snapshot.stats, view.active_tab)
    for col, (label, value) in zip(st.columns(len(metrics)), metrics):
        col.metric(label, value)

    st.download_button(
        "Download CSV",
        data=export_snapshot_csv(snapshot, title=_CONFIG.export.title),
        file_name=EXPORT_FILENAME,
        mime=EXPORT_MIME_TYPE,
    )


def render_ranked(title: str, rows: list[dict], label_col: str, value_col: str, view: ViewConfig) -> None:
    st.subheader(title)
    if not rows:
        st.info("No records yet.")
        return
    df = pd.DataFrame(rows)
    if view.show_graphs:
        st.bar_chart(df.set_index(label_col)[value_col])
    if view.show_tables:
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_series(title: str, rows: list[dict], view: ViewConfig) -> None:
    st.subheader(title)
    df = pd.DataFrame(rows).set_index("Month")
    if view.show_graphs:
        st.line_chart(df[["Cumulative"]])
    if view.show_tables:
        st.dataframe(df.reset_index(), use_container_width=True, hide_index=True)


def render_pie(title: str, slices: list[dict], label_col: str, value_col: str, view: ViewConfig) -> None:
    """Top-N share pie, with the same slices as a table underneath."""
    if not slices:
        return
    st.subheader(title)
    df = pd.DataFrame(slices).rename(columns={"label": label_col, "value": value_col})
    df["Share %"] = (df.pop("share") * 100).round(1)
    if view.show_graphs:
        pie = (
            alt.Chart(df)
            .mark_arc()
            .encode(
                theta=alt.Theta(f"{value_col}:Q"),
                color=alt.Color(f"{label_col}:N", sort=None),
                tooltip=[label_col, value_col, "Share %"],
            )
        )
        st.altair_chart(pie, use_container_width=True)
    if view.show_tables:
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_cell_totals(snapshot: DashboardSnapshot, view: ViewConfig) -> None:
    st.subheader("Helium fill totals by cell")
    rows = cell_total_rows(snapshot)
    if not rows:
        st.info("No records yet.")
        return
    df = pd.DataFrame(rows)
    if view.show_graphs:
        c1, c2 = st.columns(2)
        c1.bar_chart(df.set_index("Cell #")[["Total SCF"]])
        c2.bar_chart(df.set_index("Cell #")[["Fill Count"]])
    if view.show_tables:
        st.dataframe(df, use_container_width=True, hide_index=True)


def render_log(title: str, rows: list[dict], view: ViewConfig) -> None:
    if not view.show_tables:
        return
    with st.expander(f"{title} — {len(rows)} row(s)", expanded=False):
        if rows:
            st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
        else:
            st.info("No records yet.")


# ── Views ─────────────────────────────────────────────────────────────────────

def render_combined(snapshot: DashboardSnapshot, view: ViewConfig) -> None:
    st.subheader("Year to date (cumulative)")
    df = pd.DataFrame(monthly_rows(snapshot.monthly_helium, snapshot.monthly_diesel)).set_index("Month")
    if view.show_graphs:
        c1, c2 = st.columns(2)
        c1.line_chart(df[["Helium (SCF)"]])
        c2.line_chart(df[["Diesel (gal)"]])
    if view.show_tables:
        st.dataframe(df.reset_index(), use_container_width=True, hide_index=True)

    c1, c2, c3 = st.columns(3)
    with c1:
        render_ranked(
            "Helium by cell",
            ranked_rows(snapshot.helium_by_cell, "Cell #", "SCF", limit=view.top_n),
            "Cell #", "SCF", view,
        )
    with c2:
        render_ranked(
            "Propane by machinery",
            ranked_rows(snapshot.propane_by_machinery, "Machinery", "Canisters", limit=view.top_n),
            "Machinery", "Canisters", view,
        )
    with c3:
        render_ranked(
            "Diesel by machinery",
            ranked_rows(snapshot.diesel_by_machinery, "Machinery", "Gallons", limit=view.top_n),
            "Machinery", "Gallons", view,
        )


def render_helium(snapshot: DashboardSnapshot, view: ViewConfig) -> None:
    render_series("Helium usage by month", series_rows(snapshot.monthly_helium, "SCF"), view)
    render_ranked(
        "SCF by cell",
        ranked_rows(snapshot.helium_by_cell, "Cell #", "SCF", limit=view.top_n),
        "Cell #", "SCF", view,
    )
    render_cell_totals(snapshot, view)
    render_pie(
        "Top cells by fill total",
        pie_slices(cell_total_ranking(snapshot), limit=view.top_n),
        "Cell #", "Total SCF", view,
    )
    render_log("Helium fill log", helium_rows(snapshot), view)


def render_propane(snapshot: DashboardSnapshot, view: ViewConfig) -> None:
    render_ranked(
        "Canister replacements by machinery",
        ranked_rows(snapshot.propane_by_machinery, "Machinery", "Canisters", limit=view.top_n),
        "Machinery", "Canisters", view,
    )
    render_pie(
        "Share of canister replacements",
        pie_slices(snapshot.propane_by_machinery, limit=view.top_n),
        "Machinery", "Canisters", view,
    )
    render_log("Canister replacement log", propane_rows(snapshot), view)


def render_diesel(snapshot: DashboardSnapshot, view: ViewConfig) -> None:
    render_series("Diesel usage by month", series_rows(snapshot.monthly_diesel, "Gallons"), view)
    render_ranked(
        "Gallons by machinery",
        ranked_rows(snapshot.diesel_by_machinery, "Machinery", "Gallons", limit=view.top_n),
        "Machinery", "Gallons", view,
    )
    render_pie(
        "Share of diesel gallons",
        pie_slices(snapshot.diesel_by_machinery, limit=view.top_n),
        "Machinery", "Gallons", view,
    )
    render_log("Diesel fuel log", diesel_rows(snapshot), view)


_RENDERERS = {
    "Combined": render_combined,
    "Helium": render_helium,
    "Propane": render_propane,
    "Diesel": render_diesel,
}

render_header(snapshot, view)
st.divider()
_RENDERERS[view.active_tab](snapshot, view)
