"""
Export helpers for the downloadable dashboard report.

``export_snapshot_csv()`` renders a snapshot as one CSV text blob with a
banner and four titled sections, always in this order::

    Logistics H2 Dashboard Export
    Generated: 2026-03-02T09:00:00+00:00

    HELIUM TRACKER - YEAR TO DATE
    Fill Date,Cell #,SCF
    2024-01-15,cellA,100

    HELIUM FILL TOTALS BY CELL
    Cell #,Total SCF,Fill Count
    ...

    PROPANE CANISTERS - YEAR TO DATE
    Machinery,Date of Canister Replacement
    ...

    DIESEL FUEL - YEAR TO DATE
    Machinery,Date Fueled,Gallons Pumped
    ...

Rows keep snapshot order. Numbers are plain decimals (no exponent, no
thousands separator). The banner timestamp is the snapshot's own
``assembled_at``, so the same snapshot always exports to identical bytes.
"""

from __future__ import annotations

import csv
import io
import json
from decimal import Decimal
from pathlib import Path

from logistics_dashboard.models.snapshot import DashboardSnapshot

EXPORT_FILENAME = "logistics-dashboard.csv"
EXPORT_MIME_TYPE = "text/csv"
DEFAULT_TITLE = "Logistics H2 Dashboard Export"

HELIUM_SECTION = "HELIUM TRACKER - YEAR TO DATE"
CELL_TOTALS_SECTION = "HELIUM FILL TOTALS BY CELL"
PROPANE_SECTION = "PROPANE CANISTERS - YEAR TO DATE"
DIESEL_SECTION = "DIESEL FUEL - YEAR TO DATE"

SECTION_HEADERS: dict[str, list[str]] = {
    HELIUM_SECTION:      ["Fill Date", "Cell #", "SCF"],
    CELL_TOTALS_SECTION: ["Cell #", "Total SCF", "Fill Count"],
    PROPANE_SECTION:     ["Machinery", "Date of Canister Replacement"],
    DIESEL_SECTION:      ["Machinery", "Date Fueled", "Gallons Pumped"],
}


def format_quantity(value: float | int) -> str:
    """Render a number as plain decimal text.

    Whole numbers drop the fractional part (``100.0`` → ``"100"``); other
    values use the shortest round-tripping digits without exponent
    notation (``1e-07`` → ``"0.0000001"``).
    """
    if isinstance(value, int):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def _section_rows(snapshot: DashboardSnapshot) -> list[tuple[str, list[list[str]]]]:
    return [
        (
            HELIUM_SECTION,
            [[r.fill_date, r.cell, format_quantity(r.scf)] for r in snapshot.helium_fills],
        ),
        (
            CELL_TOTALS_SECTION,
            [
                [t.cell, format_quantity(t.total_scf), format_quantity(t.fill_count)]
                for t in snapshot.helium_cell_totals
            ],
        ),
        (
            PROPANE_SECTION,
            [[r.machinery, r.date] for r in snapshot.propane_replacements],
        ),
        (
            DIESEL_SECTION,
            [
                [r.machinery, r.date, format_quantity(r.gallons)]
                for r in snapshot.diesel_fills
            ],
        ),
    ]


def export_snapshot_csv(snapshot: DashboardSnapshot, title: str = DEFAULT_TITLE) -> str:
    """Serialise ``snapshot`` into the sectioned CSV report text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    buf.write(f"{title}\n")
    buf.write(f"Generated: {snapshot.assembled_at.isoformat()}\n")

    for section_title, rows in _section_rows(snapshot):
        buf.write("\n")
        buf.write(f"{section_title}\n")
        writer.writerow(SECTION_HEADERS[section_title])
        writer.writerows(rows)

    return buf.getvalue()


def write_export(
    snapshot: DashboardSnapshot,
    path: Path,
    title: str = DEFAULT_TITLE,
) -> Path:
    """Write the CSV report for ``snapshot`` to ``path``.

    Args:
        snapshot: Snapshot to export.
        path:     Destination file path (parent dirs created if missing).
        title:    Banner line at the top of the report.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_snapshot_csv(snapshot, title=title), encoding="utf-8", newline="")
    return path


def export_to_json(snapshot: DashboardSnapshot, path: Path) -> Path:
    """Write ``snapshot.as_dict()`` as pretty-printed JSON to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(snapshot.as_dict(), indent=2, default=str), encoding="utf-8")
    return path
