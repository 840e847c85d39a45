"""
Raw consumption records — one model per row kind the sources provide.

Canonical record shapes (the JSON payload contract):

  ``HeliumFillRecord``          one helium fill of one storage cell
  ``HeliumCellTotal``           per-cell totals, supplied by the source or derived
  ``PropaneReplacementRecord``  one canister swap on one machine
  ``DieselFillRecord``          one diesel fueling event
  ``PropaneTotals``             the source's own propane summary object

Spreadsheet CSV rows (the alternate raw-text contract) have their own
shapes, ``SheetHeliumRow`` and ``SheetFuelRow``; the parser maps them onto
the canonical records.

All models are frozen. Quantities are coerced to non-negative floats by the
parser before construction; the validators here only guard direct callers.
Dates stay as the source's text so exports reproduce them verbatim; use
``logistics_dashboard.utils.time_utils.parse_record_date`` to interpret them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _non_negative(v: float, name: str) -> float:
    if v < 0:
        raise ValueError(f"{name} must be non-negative, got {v}.")
    return v


class HeliumFillRecord(BaseModel):
    """One helium fill event for one storage cell.

    Attributes:
        fill_date: Date text as provided by the source.
        cell: Storage cell identifier, e.g. ``"cellA"`` or ``"12"``.
        scf: Standard cubic feet delivered.
    """

    model_config = ConfigDict(frozen=True)

    fill_date: str = ""
    cell: str = ""
    scf: float = 0.0

    @field_validator("scf")
    @classmethod
    def validate_scf(cls, v: float) -> float:
        return _non_negative(v, "scf")


class HeliumCellTotal(BaseModel):
    """Helium totals for a single cell."""

    model_config = ConfigDict(frozen=True)

    cell: str = ""
    total_scf: float = 0.0
    fill_count: int = Field(default=0, ge=0)

    @field_validator("total_scf")
    @classmethod
    def validate_total_scf(cls, v: float) -> float:
        return _non_negative(v, "total_scf")


class PropaneReplacementRecord(BaseModel):
    """One propane canister replacement on one piece of machinery."""

    model_config = ConfigDict(frozen=True)

    machinery: str = ""
    date: str = ""


class DieselFillRecord(BaseModel):
    """One diesel fueling event."""

    model_config = ConfigDict(frozen=True)

    machinery: str = ""
    date: str = ""
    gallons: float = 0.0

    @field_validator("gallons")
    @classmethod
    def validate_gallons(cls, v: float) -> float:
        return _non_negative(v, "gallons")


class PropaneTotals(BaseModel):
    """Propane summary figures maintained by the source sheet itself."""

    model_config = ConfigDict(frozen=True)

    canisters: float = 0.0
    gallons_pumped: float = 0.0

    @field_validator("canisters", "gallons_pumped")
    @classmethod
    def validate_totals(cls, v: float) -> float:
        return _non_negative(v, "propane total")


# ── Spreadsheet CSV rows ──────────────────────────────────────────────────────


class SheetHeliumRow(BaseModel):
    """A row of the helium sheet export: date, location, quantity, cost,
    supplier, status, notes."""

    model_config = ConfigDict(frozen=True)

    date: str = ""
    location: str = ""
    quantity: float = 0.0
    cost: float = 0.0
    supplier: str = ""
    status: str = ""
    notes: str = ""


class SheetFuelRow(BaseModel):
    """A row of the fuel sheet export: date, vehicle, fuelType, quantity,
    cost, mileage."""

    model_config = ConfigDict(frozen=True)

    date: str = ""
    vehicle: str = ""
    fuel_type: str = ""
    quantity: float = 0.0
    cost: float = 0.0
    mileage: float = 0.0


# ── Parser output ─────────────────────────────────────────────────────────────


class ParsedPayload(BaseModel):
    """Typed records from one fetch cycle, ready for assembly.

    ``helium_cell_totals`` is ``None`` when the source did not supply its own
    per-cell totals; the assembler then derives them from ``helium_fills``.
    """

    model_config = ConfigDict(frozen=True)

    helium_fills: tuple[HeliumFillRecord, ...] = ()
    helium_cell_totals: Optional[tuple[HeliumCellTotal, ...]] = None
    propane_replacements: tuple[PropaneReplacementRecord, ...] = ()
    diesel_fills: tuple[DieselFillRecord, ...] = ()
    propane_totals: PropaneTotals = PropaneTotals()

    @property
    def is_empty(self) -> bool:
        return not (
            self.helium_fills
            or self.helium_cell_totals
            or self.propane_replacements
            or self.diesel_fills
        )
