"""Tests for logistics_dashboard.utils.time_utils."""

from __future__ import annotations

from datetime import date, timezone

import pytest

from logistics_dashboard.utils.time_utils import month_name, parse_record_date, utcnow


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-01-15", date(2024, 1, 15)),
        ("2024-01-15T08:30:00Z", date(2024, 1, 15)),
        ("2024-01-15 08:30:00", date(2024, 1, 15)),
        ("1/15/2024", date(2024, 1, 15)),
        ("01/15/24", date(2024, 1, 15)),
        ("January 15, 2024", date(2024, 1, 15)),
        ("Jan 15, 2024", date(2024, 1, 15)),
        ("  2024-03-02  ", date(2024, 3, 2)),
    ],
)
def test_parse_record_date_accepted_formats(text: str, expected: date) -> None:
    assert parse_record_date(text) == expected


@pytest.mark.parametrize("text", [None, "", "   ", "soon", "2024-13-40", "15/15/2024"])
def test_parse_record_date_unrecognised_is_none(text) -> None:
    assert parse_record_date(text) is None


def test_month_name_one_based() -> None:
    assert month_name(1) == "January"
    assert month_name(12) == "December"


def test_utcnow_is_timezone_aware() -> None:
    assert utcnow().tzinfo == timezone.utc
