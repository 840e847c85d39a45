"""
Logistics dashboard — year-to-date helium, propane and diesel reporting
from spreadsheet-backed sources.

Pipeline: ingestion (fetch) → parsing → aggregation → reporting (snapshot,
CSV export). ``logistics_dashboard.reporting.assembler.build_snapshot`` is
the single compute entry point shared by the CLI, scheduler and dashboard.
"""

__version__ = "0.1.0"
