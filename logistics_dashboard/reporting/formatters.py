"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept snapshot pieces and return plain multi-line strings
suitable for ``typer.echo()``. No third-party dependencies (no ``rich``).

Freshness banners
-----------------
``report`` output starts with a freshness banner so readers can tell at a
glance whether the last export reflects the current sheets::

  [FRESH] Generated 0.4h ago
  [STALE] Generated 26.4h ago -- a refresh may have failed
  [AGE UNKNOWN] generated timestamp not available
"""

from __future__ import annotations

from collections.abc import Sequence

from logistics_dashboard.models.records import HeliumCellTotal
from logistics_dashboard.models.snapshot import (
    DashboardStats,
    MonthlySeriesPoint,
    RankedTotal,
)


def _num(value: float) -> str:
    """Thousands-separated, no decimals for whole numbers."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"


# ── Freshness banner ─────────────────────────────────────────────────────────


def format_freshness_banner(
    is_fresh: bool,
    age_hours: float | None,
    source_file: str = "",
) -> str:
    """Return a one-line freshness indicator (plus the source on a second line)."""
    if age_hours is None:
        tag     = "[AGE UNKNOWN]"
        age_str = "generated timestamp not available"
    elif is_fresh:
        tag     = "[FRESH]"
        age_str = f"Generated {age_hours:.1f}h ago"
    else:
        tag     = "[STALE]"
        age_str = f"Generated {age_hours:.1f}h ago -- a refresh may have failed"

    parts = [f"  {tag} {age_str}"]
    if source_file:
        parts.append(f"  Source: {source_file}")
    return "\n".join(parts)


# ── Summary ───────────────────────────────────────────────────────────────────


def format_summary(stats: DashboardStats, assembled_at: str = "") -> str:
    """Header-card scalars as an aligned two-column block."""
    lines = ["", "=== Year-to-Date Summary ==="]
    if assembled_at:
        lines.append(f"  Assembled at:          {assembled_at}")
    lines += [
        f"  Helium total (SCF):    {_num(stats.helium_total_scf)}",
        f"  Helium fills:          {stats.helium_fills}",
        f"  Propane canisters:     {_num(stats.propane_canisters)}",
        f"  Propane gallons:       {_num(stats.propane_gallons_pumped)}",
        f"  Propane replacements:  {stats.propane_replacements}",
        f"  Diesel total (gal):    {_num(stats.diesel_total)}",
        f"  Diesel entries:        {stats.diesel_entries}",
    ]
    return "\n".join(lines)


# ── Ranked tables ─────────────────────────────────────────────────────────────


def format_ranked_table(
    title: str,
    ranked: Sequence[RankedTotal],
    label_header: str = "Label",
    value_header: str = "Value",
    top_n: int | None = None,
) -> str:
    """Rank / label / value table for a ``group_and_sum`` result."""
    lines = ["", f"=== {title} ==="]
    rows = list(ranked if top_n is None else ranked[:top_n])
    if not rows:
        lines.append("  (no records)")
        return "\n".join(lines)

    header = f"  {'Rank':>4}  {label_header:<28}  {value_header:>12}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, total in enumerate(rows, start=1):
        lines.append(f"  {rank:>4}  {total.label[:28]:<28}  {_num(total.value):>12}")
    return "\n".join(lines)


def format_cell_totals(totals: Sequence[HeliumCellTotal]) -> str:
    """Per-cell helium totals in the order given."""
    lines = ["", "=== Helium Fill Totals by Cell ==="]
    if not totals:
        lines.append("  (no records)")
        return "\n".join(lines)

    header = f"  {'Cell #':<20}  {'Total SCF':>12}  {'Fills':>6}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for t in totals:
        lines.append(f"  {t.cell[:20]:<20}  {_num(t.total_scf):>12}  {t.fill_count:>6}")
    return "\n".join(lines)


# ── Monthly series ────────────────────────────────────────────────────────────


def format_monthly_series(title: str, points: Sequence[MonthlySeriesPoint], unit: str = "") -> str:
    """Month / period / cumulative table with rounded display values."""
    unit_suffix = f" ({unit})" if unit else ""
    lines = ["", f"=== {title}{unit_suffix} ==="]
    header = f"  {'Month':<5}  {'Period':>10}  {'Cumulative':>12}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for p in points:
        lines.append(
            f"  {p.label:<5}  {p.display_period:>10,}  {p.display_cumulative:>12,}"
        )
    return "\n".join(lines)
