"""
Spreadsheet data source client.

Two fetch modes (``[sources] mode`` in config):

  payload — GET ``payload_url`` returning the canonical JSON document
            (``helium``, ``heliumFillTotals``, ``fuel.{propane,diesel,propaneTotals}``).
  sheets  — GET the Google Sheets CSV exports of the helium and fuel sheets::

              https://docs.google.com/spreadsheets/d/{sheet_id}/export
                  ?format=csv&range=Sheet1!A:H

            Both are requested concurrently and joined before being mapped
            into the canonical payload shape.

Transport failures (connection errors, non-2xx responses, bad JSON) are
logged and turned into empty results here; nothing network-related
propagates into parsing or aggregation. An empty result means "no data
this cycle", and the snapshot is assembled with that category empty.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar, Optional

import httpx

from logistics_dashboard.config import SourcesConfig
from logistics_dashboard.parsing.records import sheets_to_payload

logger = logging.getLogger(__name__)


class SheetsClient:
    """Fetches raw dashboard data over HTTP.

    Usage::

        client = SheetsClient(config.sources)
        payload = client.fetch()          # dispatches on config.mode

    Tests inject ``transport=httpx.MockTransport(handler)`` to avoid the
    network entirely.
    """

    EXPORT_URL_TEMPLATE: ClassVar[str] = (
        "https://docs.google.com/spreadsheets/d/{sheet_id}/export"
    )

    def __init__(
        self,
        config: SourcesConfig,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._async_transport = async_transport

    # ── URL helpers ───────────────────────────────────────────────────────────

    def export_url(self, sheet_id: str) -> str:
        return self.EXPORT_URL_TEMPLATE.format(sheet_id=sheet_id)

    @staticmethod
    def export_params(sheet_range: str) -> dict[str, str]:
        return {"format": "csv", "range": sheet_range}

    # ── Payload mode ──────────────────────────────────────────────────────────

    def fetch_payload(self) -> dict[str, Any]:
        """GET the JSON payload. Returns ``{}`` on any transport or decode failure."""
        try:
            with httpx.Client(
                transport=self._transport,
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
            ) as client:
                resp = client.get(self.config.payload_url)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as exc:
            logger.error("Payload fetch failed: %s", exc, extra={"source": "payload"})
            return {}
        except ValueError as exc:
            logger.error("Payload is not valid JSON: %s", exc, extra={"source": "payload"})
            return {}

        if not isinstance(data, dict):
            logger.error(
                "Payload root must be an object, got %s",
                type(data).__name__,
                extra={"source": "payload"},
            )
            return {}
        return data

    # ── Sheets mode ───────────────────────────────────────────────────────────

    async def _fetch_csv(
        self,
        client: httpx.AsyncClient,
        sheet_id: str,
        sheet_range: str,
        label: str,
    ) -> str:
        """GET one sheet export on the shared client. Returns ``""`` on failure."""
        if not sheet_id:
            logger.warning("No sheet id configured for %s; skipping", label)
            return ""
        try:
            resp = await client.get(
                self.export_url(sheet_id), params=self.export_params(sheet_range)
            )
            resp.raise_for_status()
            return resp.text
        except httpx.HTTPError as exc:
            logger.error("Error fetching %s sheet: %s", label, exc, extra={"source": label})
            return ""

    async def _fetch_sheets_async(self) -> tuple[str, str]:
        async with httpx.AsyncClient(
            transport=self._async_transport,
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        ) as client:
            helium, fuel = await asyncio.gather(
                self._fetch_csv(
                    client, self.config.helium_sheet_id, self.config.helium_range, "helium"
                ),
                self._fetch_csv(
                    client, self.config.fuel_sheet_id, self.config.fuel_range, "fuel"
                ),
            )
        return helium, fuel

    def fetch_sheets_payload(self) -> dict[str, Any]:
        """Fetch both sheet exports concurrently and map them to the JSON shape."""
        helium_csv, fuel_csv = asyncio.run(self._fetch_sheets_async())
        logger.info(
            "Fetched sheet exports | helium=%d bytes fuel=%d bytes",
            len(helium_csv), len(fuel_csv),
        )
        return sheets_to_payload(helium_csv, fuel_csv)

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def fetch(self, mode: Optional[str] = None) -> dict[str, Any]:
        """Fetch a raw payload using ``mode`` (defaults to ``config.mode``)."""
        mode = mode or self.config.mode
        if mode == "sheets":
            return self.fetch_sheets_payload()
        if mode == "payload":
            return self.fetch_payload()
        raise ValueError(f"Unknown source mode '{mode}'. Use 'payload' or 'sheets'.")
