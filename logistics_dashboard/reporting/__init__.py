"""
logistics_dashboard.reporting — snapshot assembly, export and CLI formatting.

Modules:
  assembler  — parsed records + aggregations → DashboardSnapshot.
  export     — sectioned CSV report and JSON dump of a snapshot.
  reader     — reading written exports back, freshness checks.
  formatters — ASCII terminal tables for Typer CLI commands.
"""
