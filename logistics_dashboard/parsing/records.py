"""
Record parser: raw payloads → typed consumption records.

Two inbound contracts are supported.

JSON payload (canonical)
------------------------
::

    {
      "helium":           [{"fillDate", "cell", "scf"}, ...],
      "heliumFillTotals": [{"cell", "totalScf", "fillCount"}, ...],
      "fuel": {
        "propane":       [{"machinery", "date"}, ...],
        "diesel":        [{"machinery", "date", "gallons"}, ...],
        "propaneTotals": {"canisters", "gallonsPumped"}
      }
    }

Any missing key defaults to an empty list / zero totals.

Spreadsheet CSV export (alternate)
----------------------------------
Comma-separated text with a header row, fields by position:

  helium → date, location, quantity, cost, supplier, status, notes
  fuel   → date, vehicle, fuelType, quantity, cost, mileage

``helium_rows_to_records`` and ``fuel_rows_to_records`` map these rows onto
the canonical record shapes (location is the cell, quantity is SCF or
gallons, fuelType decides propane vs diesel).

Tolerance rules
---------------
- Numeric fields: leading decimal prefix of the text, else 0. Negative,
  NaN and infinite values also become 0.
- Text fields: trimmed, ``""`` when absent.
- A malformed field never drops its record; a line the CSV tokenizer
  rejects is dropped (and logged) without affecting the rest.
- Output order always equals input order.
"""

from __future__ import annotations

import csv
import logging
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from logistics_dashboard.models.records import (
    DieselFillRecord,
    HeliumCellTotal,
    HeliumFillRecord,
    ParsedPayload,
    PropaneReplacementRecord,
    PropaneTotals,
    SheetFuelRow,
    SheetHeliumRow,
)

logger = logging.getLogger(__name__)

_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

PROPANE_MARKER = "propane"


# ── Field coercion ────────────────────────────────────────────────────────────


def to_quantity(value: Any) -> float:
    """Coerce a raw field to a non-negative float, defaulting to 0.

    ``"12.5"`` → 12.5, ``"40 gal"`` → 40.0, ``"abc"`` → 0.0, ``-3`` → 0.0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        text = value
    else:
        match = _NUMERIC_PREFIX.match(str(value).strip())
        if match is None:
            return 0.0
        text = match.group(0)
    try:
        number = float(text)
    except (OverflowError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def to_count(value: Any) -> int:
    """Coerce a raw field to a non-negative integer count."""
    return int(to_quantity(value))


def to_text(value: Any) -> str:
    """Trimmed text, or ``""`` for ``None``."""
    if value is None:
        return ""
    return str(value).strip()


# ── Delimited text ────────────────────────────────────────────────────────────


def split_rows(text: Optional[str]) -> list[list[str]]:
    """Split CSV text into trimmed field lists, skipping header and blank lines.

    Each physical line is tokenised on its own so one bad line (for example
    an unterminated quote) is dropped without losing its neighbours.
    """
    if not text:
        return []
    lines = text.splitlines()[1:]
    rows: list[list[str]] = []
    for line_no, line in enumerate(lines, start=2):
        if not line.strip():
            continue
        try:
            fields = next(csv.reader([line], strict=True))
        except (csv.Error, StopIteration) as exc:
            logger.warning("Dropping malformed CSV line %d: %s", line_no, exc)
            continue
        rows.append([f.strip() for f in fields])
    return rows


def _field(fields: list[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def parse_helium_csv(text: Optional[str]) -> list[SheetHeliumRow]:
    """Parse the helium sheet CSV export into ``SheetHeliumRow`` values."""
    return [
        SheetHeliumRow(
            date=_field(f, 0),
            location=_field(f, 1),
            quantity=to_quantity(_field(f, 2)),
            cost=to_quantity(_field(f, 3)),
            supplier=_field(f, 4),
            status=_field(f, 5),
            notes=_field(f, 6),
        )
        for f in split_rows(text)
    ]


def parse_fuel_csv(text: Optional[str]) -> list[SheetFuelRow]:
    """Parse the fuel sheet CSV export into ``SheetFuelRow`` values."""
    return [
        SheetFuelRow(
            date=_field(f, 0),
            vehicle=_field(f, 1),
            fuel_type=_field(f, 2),
            quantity=to_quantity(_field(f, 3)),
            cost=to_quantity(_field(f, 4)),
            mileage=to_quantity(_field(f, 5)),
        )
        for f in split_rows(text)
    ]


# ── Sheet rows → canonical records ────────────────────────────────────────────


def helium_rows_to_records(rows: Iterable[SheetHeliumRow]) -> list[HeliumFillRecord]:
    """Map helium sheet rows onto fill records (location is the cell)."""
    return [
        HeliumFillRecord(fill_date=row.date, cell=row.location, scf=row.quantity)
        for row in rows
    ]


def fuel_rows_to_records(
    rows: Iterable[SheetFuelRow],
) -> tuple[list[PropaneReplacementRecord], list[DieselFillRecord]]:
    """Split fuel sheet rows into propane swaps and diesel fills.

    Rows whose fuel type mentions propane count as one canister replacement
    each; every other row is a diesel fill of ``quantity`` gallons.
    """
    propane: list[PropaneReplacementRecord] = []
    diesel: list[DieselFillRecord] = []
    for row in rows:
        if PROPANE_MARKER in row.fuel_type.lower():
            propane.append(PropaneReplacementRecord(machinery=row.vehicle, date=row.date))
        else:
            diesel.append(
                DieselFillRecord(machinery=row.vehicle, date=row.date, gallons=row.quantity)
            )
    return propane, diesel


# ── Decoded objects → canonical records ───────────────────────────────────────


def _mappings(items: Any, label: str) -> list[Mapping[str, Any]]:
    if not isinstance(items, list):
        if items is not None:
            logger.warning("Expected a list for '%s', got %s", label, type(items).__name__)
        return []
    kept = [item for item in items if isinstance(item, Mapping)]
    if len(kept) != len(items):
        logger.warning("Dropped %d non-object entries from '%s'", len(items) - len(kept), label)
    return kept


def parse_helium_records(items: Any) -> list[HeliumFillRecord]:
    """Build ``HeliumFillRecord`` values from ``{fillDate, cell, scf}`` objects."""
    return [
        HeliumFillRecord(
            fill_date=to_text(item.get("fillDate")),
            cell=to_text(item.get("cell")),
            scf=to_quantity(item.get("scf")),
        )
        for item in _mappings(items, "helium")
    ]


def parse_cell_totals(items: Any) -> list[HeliumCellTotal]:
    """Build ``HeliumCellTotal`` values from ``{cell, totalScf, fillCount}`` objects."""
    return [
        HeliumCellTotal(
            cell=to_text(item.get("cell")),
            total_scf=to_quantity(item.get("totalScf")),
            fill_count=to_count(item.get("fillCount")),
        )
        for item in _mappings(items, "heliumFillTotals")
    ]


def parse_propane_records(items: Any) -> list[PropaneReplacementRecord]:
    """Build ``PropaneReplacementRecord`` values from ``{machinery, date}`` objects."""
    return [
        PropaneReplacementRecord(
            machinery=to_text(item.get("machinery")),
            date=to_text(item.get("date")),
        )
        for item in _mappings(items, "fuel.propane")
    ]


def parse_diesel_records(items: Any) -> list[DieselFillRecord]:
    """Build ``DieselFillRecord`` values from ``{machinery, date, gallons}`` objects."""
    return [
        DieselFillRecord(
            machinery=to_text(item.get("machinery")),
            date=to_text(item.get("date")),
            gallons=to_quantity(item.get("gallons")),
        )
        for item in _mappings(items, "fuel.diesel")
    ]


def parse_propane_totals(obj: Any) -> PropaneTotals:
    if not isinstance(obj, Mapping):
        return PropaneTotals()
    return PropaneTotals(
        canisters=to_quantity(obj.get("canisters")),
        gallons_pumped=to_quantity(obj.get("gallonsPumped")),
    )


def parse_payload(payload: Any) -> ParsedPayload:
    """Parse the JSON payload contract into a ``ParsedPayload``.

    Never raises: a payload that is not an object yields an empty result,
    which callers treat as "no data yet".
    """
    if not isinstance(payload, Mapping):
        if payload is not None:
            logger.warning("Ignoring payload of type %s", type(payload).__name__)
        return ParsedPayload()

    fuel = payload.get("fuel")
    if not isinstance(fuel, Mapping):
        fuel = {}

    cell_totals = None
    if "heliumFillTotals" in payload:
        cell_totals = tuple(parse_cell_totals(payload.get("heliumFillTotals")))

    return ParsedPayload(
        helium_fills=tuple(parse_helium_records(payload.get("helium"))),
        helium_cell_totals=cell_totals,
        propane_replacements=tuple(parse_propane_records(fuel.get("propane"))),
        diesel_fills=tuple(parse_diesel_records(fuel.get("diesel"))),
        propane_totals=parse_propane_totals(fuel.get("propaneTotals")),
    )


def sheets_to_payload(helium_csv: Optional[str], fuel_csv: Optional[str]) -> dict[str, Any]:
    """Map the two sheet CSV exports into the canonical JSON payload shape.

    The sheets carry no per-cell totals or propane summary, so those keys are
    left out and the assembler derives / zeroes them.
    """
    helium = helium_rows_to_records(parse_helium_csv(helium_csv))
    propane, diesel = fuel_rows_to_records(parse_fuel_csv(fuel_csv))
    return {
        "helium": [
            {"fillDate": r.fill_date, "cell": r.cell, "scf": r.scf} for r in helium
        ],
        "fuel": {
            "propane": [{"machinery": r.machinery, "date": r.date} for r in propane],
            "diesel": [
                {"machinery": r.machinery, "date": r.date, "gallons": r.gallons}
                for r in diesel
            ],
        },
    }
