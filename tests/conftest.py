"""
Shared pytest fixtures for the logistics dashboard test suite.

Provides:
  - Sample record lists matching the worked examples used across modules.
  - ``sample_payload``: a complete JSON payload in the canonical shape.
  - ``sample_snapshot``: that payload assembled at a fixed timestamp.
  - ``fixed_now``: the timestamp used by ``sample_snapshot``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import pytest

from logistics_dashboard.models.records import (
    DieselFillRecord,
    HeliumFillRecord,
    PropaneReplacementRecord,
)
from logistics_dashboard.models.snapshot import DashboardSnapshot
from logistics_dashboard.reporting.assembler import build_snapshot


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# ── Sample records ────────────────────────────────────────────────────────────

@pytest.fixture
def helium_records() -> list[HeliumFillRecord]:
    """Three fills over two cells and two months."""
    return [
        HeliumFillRecord(fill_date="2024-01-15", cell="cellA", scf=100),
        HeliumFillRecord(fill_date="2024-02-10", cell="cellA", scf=50),
        HeliumFillRecord(fill_date="2024-01-20", cell="cellB", scf=200),
    ]


@pytest.fixture
def diesel_records() -> list[DieselFillRecord]:
    """Excavator fueled twice, loader once."""
    return [
        DieselFillRecord(machinery="excavator", date="2024-03-01", gallons=20),
        DieselFillRecord(machinery="loader", date="2024-03-05", gallons=15),
        DieselFillRecord(machinery="excavator", date="2024-04-01", gallons=10),
    ]


@pytest.fixture
def propane_records() -> list[PropaneReplacementRecord]:
    return [
        PropaneReplacementRecord(machinery="forklift", date="2024-02-01"),
        PropaneReplacementRecord(machinery="forklift", date="2024-03-01"),
        PropaneReplacementRecord(machinery="scissor lift", date="2024-03-02"),
    ]


# ── Payload / snapshot ────────────────────────────────────────────────────────

@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Canonical JSON payload with every recognised key present."""
    return {
        "helium": [
            {"fillDate": "2024-01-15", "cell": "cellA", "scf": 100},
            {"fillDate": "2024-02-10", "cell": "cellA", "scf": 50},
            {"fillDate": "2024-01-20", "cell": "cellB", "scf": 200},
        ],
        "heliumFillTotals": [
            {"cell": "cellA", "totalScf": 150, "fillCount": 2},
            {"cell": "cellB", "totalScf": 200, "fillCount": 1},
        ],
        "fuel": {
            "propane": [
                {"machinery": "forklift", "date": "2024-02-01"},
                {"machinery": "forklift", "date": "2024-03-01"},
                {"machinery": "scissor lift", "date": "2024-03-02"},
            ],
            "diesel": [
                {"machinery": "excavator", "date": "2024-03-01", "gallons": 20},
                {"machinery": "loader", "date": "2024-03-05", "gallons": 15},
                {"machinery": "excavator", "date": "2024-04-01", "gallons": 10},
            ],
            "propaneTotals": {"canisters": 12, "gallonsPumped": 48.5},
        },
    }


@pytest.fixture
def sample_snapshot(sample_payload: dict[str, Any], fixed_now: datetime) -> DashboardSnapshot:
    return build_snapshot(sample_payload, assembled_at=fixed_now)


# ── Logging isolation ─────────────────────────────────────────────────────────

@pytest.fixture
def restore_root_logger():
    """Undo ``configure_logging`` side effects on the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
