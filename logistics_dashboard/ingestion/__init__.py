"""
Ingestion layer — HTTP access to the spreadsheet-backed data sources.

Submodules:
  sheets_client — JSON payload endpoint and Google Sheets CSV exports

Endpoint configuration lives under ``[sources]`` in config/default.toml;
``LOGISTICS_DASHBOARD_PAYLOAD_URL`` and ``LOGISTICS_DASHBOARD_SOURCE_MODE``
override it from ``.env``.
"""
