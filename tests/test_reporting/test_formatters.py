"""Tests for logistics_dashboard.reporting.formatters."""

from __future__ import annotations

from logistics_dashboard.models.records import HeliumCellTotal
from logistics_dashboard.models.snapshot import DashboardStats, RankedTotal
from logistics_dashboard.reporting.formatters import (
    format_cell_totals,
    format_freshness_banner,
    format_monthly_series,
    format_ranked_table,
    format_summary,
)


# ── Freshness banner ─────────────────────────────────────────────────────────


def test_banner_fresh() -> None:
    banner = format_freshness_banner(True, 0.4)
    assert "[FRESH]" in banner
    assert "0.4h" in banner


def test_banner_stale_with_source() -> None:
    banner = format_freshness_banner(False, 26.4, source_file="data/exports/x.csv")
    assert "[STALE]" in banner
    assert "refresh may have failed" in banner
    assert "Source: data/exports/x.csv" in banner


def test_banner_unknown_age() -> None:
    assert "[AGE UNKNOWN]" in format_freshness_banner(False, None)


# ── Summary / tables ─────────────────────────────────────────────────────────


def test_format_summary_values() -> None:
    stats = DashboardStats(
        helium_total_scf=12500,
        helium_fills=4,
        propane_canisters=12,
        propane_gallons_pumped=48.5,
        propane_replacements=3,
        diesel_total=45,
        diesel_entries=3,
    )
    text = format_summary(stats, assembled_at="2024-06-01T12:00:00+00:00")
    assert "Year-to-Date Summary" in text
    assert "12,500" in text
    assert "48.5" in text
    assert "2024-06-01T12:00:00+00:00" in text


def test_format_ranked_table_rows_and_limit() -> None:
    ranked = [RankedTotal(label=f"m{i}", value=10 - i) for i in range(5)]
    text = format_ranked_table("Diesel by Machinery", ranked, "Machinery", "Gallons", top_n=2)
    assert "=== Diesel by Machinery ===" in text
    assert "m0" in text and "m1" in text
    assert "m2" not in text


def test_format_ranked_table_empty() -> None:
    assert "(no records)" in format_ranked_table("Helium by Cell", [])


def test_format_cell_totals() -> None:
    text = format_cell_totals([HeliumCellTotal(cell="cellA", total_scf=150, fill_count=2)])
    assert "cellA" in text
    assert "150" in text
    assert "(no records)" in format_cell_totals([])


def test_format_monthly_series_all_months(sample_snapshot) -> None:
    text = format_monthly_series("Helium Usage", sample_snapshot.monthly_helium, "SCF")
    assert "=== Helium Usage (SCF) ===" in text
    for label in ("Jan", "Jun", "Dec"):
        assert label in text
    assert "350" in text
