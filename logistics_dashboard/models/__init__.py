"""
Domain models for the logistics dashboard.

Submodules:
  records  — raw helium / propane / diesel records and sheet CSV rows
  snapshot — derived views and the DashboardSnapshot aggregate root
"""

from logistics_dashboard.models.records import (  # noqa: F401
    DieselFillRecord,
    HeliumCellTotal,
    HeliumFillRecord,
    ParsedPayload,
    PropaneReplacementRecord,
    PropaneTotals,
    SheetFuelRow,
    SheetHeliumRow,
)
from logistics_dashboard.models.snapshot import (  # noqa: F401
    DashboardSnapshot,
    DashboardStats,
    MonthlySeriesPoint,
    RankedTotal,
)
