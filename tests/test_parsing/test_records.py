"""Tests for logistics_dashboard.parsing.records."""

from __future__ import annotations

from logistics_dashboard.models.records import PropaneTotals
from logistics_dashboard.parsing.records import (
    fuel_rows_to_records,
    parse_fuel_csv,
    parse_helium_csv,
    parse_helium_records,
    parse_payload,
    sheets_to_payload,
    split_rows,
    to_count,
    to_quantity,
    to_text,
)

HELIUM_CSV = (
    "Date,Location,Quantity,Cost,Supplier,Status,Notes\n"
    "2024-01-15, cellA ,100,250.00,Airgas,Delivered,\n"
    "\n"
    "2024-02-10,cellB,abc,0,Airgas,Pending,needs recount\n"
)

FUEL_CSV = (
    "Date,Vehicle,Fuel Type,Quantity,Cost,Mileage\n"
    "2024-03-01,excavator,Diesel,20,80,1200\n"
    "2024-03-02,forklift,Propane,1,25,\n"
    "2024-03-05,loader,diesel #2,15.5,60,900\n"
)


# ── Field coercion ────────────────────────────────────────────────────────────


def test_to_quantity_plain_number() -> None:
    assert to_quantity("12.5") == 12.5
    assert to_quantity(7) == 7.0


def test_to_quantity_unparseable_is_zero() -> None:
    """'abc' degrades to 0 instead of raising."""
    assert to_quantity("abc") == 0.0
    assert to_quantity("") == 0.0
    assert to_quantity(None) == 0.0


def test_to_quantity_takes_leading_numeric_prefix() -> None:
    assert to_quantity("40 gal") == 40.0
    assert to_quantity(" 3.25scf") == 3.25


def test_to_quantity_rejects_negative_and_non_finite() -> None:
    assert to_quantity(-3) == 0.0
    assert to_quantity("-3") == 0.0
    assert to_quantity(float("nan")) == 0.0
    assert to_quantity(float("inf")) == 0.0


def test_to_quantity_bool_is_zero() -> None:
    assert to_quantity(True) == 0.0


def test_to_quantity_oversized_integer_is_zero() -> None:
    huge = 10 ** 400
    assert to_quantity(huge) == 0.0
    assert to_count(huge) == 0


def test_parse_payload_oversized_numbers_default_to_zero() -> None:
    huge = 10 ** 400
    parsed = parse_payload({
        "helium": [{"fillDate": "2024-01-01", "cell": "A", "scf": huge}],
        "heliumFillTotals": [{"cell": "A", "totalScf": huge, "fillCount": huge}],
        "fuel": {
            "diesel": [{"machinery": "m", "date": "2024-01-02", "gallons": huge}],
            "propaneTotals": {"canisters": huge, "gallonsPumped": huge},
        },
    })
    assert parsed.helium_fills[0].scf == 0.0
    assert parsed.helium_cell_totals is not None
    cell = parsed.helium_cell_totals[0]
    assert (cell.total_scf, cell.fill_count) == (0.0, 0)
    assert parsed.diesel_fills[0].gallons == 0.0
    assert parsed.propane_totals == PropaneTotals(canisters=0, gallons_pumped=0.0)


def test_to_count_truncates() -> None:
    assert to_count("3.9") == 3
    assert to_count("x") == 0


def test_to_text_trims_and_defaults() -> None:
    assert to_text("  cellA ") == "cellA"
    assert to_text(None) == ""
    assert to_text(12) == "12"


# ── split_rows ────────────────────────────────────────────────────────────────


def test_split_rows_skips_header_and_blank_lines() -> None:
    rows = split_rows("a,b\n1,2\n\n   \n3,4\n")
    assert rows == [["1", "2"], ["3", "4"]]


def test_split_rows_trims_fields() -> None:
    assert split_rows("h\n  x , y  ") == [["x", "y"]]


def test_split_rows_honours_quoted_commas() -> None:
    rows = split_rows('h\n2024-01-01,"Cell 1, bay 2",10\n')
    assert rows == [["2024-01-01", "Cell 1, bay 2", "10"]]


def test_split_rows_drops_only_the_malformed_line() -> None:
    """An unterminated quote loses that line, not its neighbours."""
    text = 'h\n2024-01-01,cellA,10\n2024-01-02,"cellB,20\n2024-01-03,cellC,30\n'
    rows = split_rows(text)
    assert [r[1] for r in rows] == ["cellA", "cellC"]


def test_split_rows_empty_input() -> None:
    assert split_rows("") == []
    assert split_rows(None) == []
    assert split_rows("header only") == []


# ── Sheet CSV parsing ─────────────────────────────────────────────────────────


def test_parse_helium_csv_positional_fields() -> None:
    rows = parse_helium_csv(HELIUM_CSV)
    assert len(rows) == 2
    first = rows[0]
    assert first.date == "2024-01-15"
    assert first.location == "cellA"
    assert first.quantity == 100.0
    assert first.cost == 250.0
    assert first.supplier == "Airgas"
    assert first.notes == ""


def test_parse_helium_csv_malformed_quantity_keeps_record() -> None:
    """quantity='abc' parses to 0 and the row is still present."""
    rows = parse_helium_csv(HELIUM_CSV)
    assert rows[1].location == "cellB"
    assert rows[1].quantity == 0.0
    assert rows[1].notes == "needs recount"


def test_parse_helium_csv_short_row_defaults() -> None:
    rows = parse_helium_csv("h\n2024-01-01,cellA\n")
    assert rows[0].quantity == 0.0
    assert rows[0].status == ""


def test_parse_fuel_csv_preserves_order() -> None:
    rows = parse_fuel_csv(FUEL_CSV)
    assert [r.vehicle for r in rows] == ["excavator", "forklift", "loader"]
    assert rows[2].quantity == 15.5
    assert rows[1].mileage == 0.0


def test_fuel_rows_split_by_fuel_type() -> None:
    propane, diesel = fuel_rows_to_records(parse_fuel_csv(FUEL_CSV))
    assert [p.machinery for p in propane] == ["forklift"]
    assert propane[0].date == "2024-03-02"
    assert [(d.machinery, d.gallons) for d in diesel] == [("excavator", 20.0), ("loader", 15.5)]


def test_sheets_to_payload_canonical_shape() -> None:
    payload = sheets_to_payload(HELIUM_CSV, FUEL_CSV)
    assert payload["helium"][0] == {"fillDate": "2024-01-15", "cell": "cellA", "scf": 100.0}
    assert "heliumFillTotals" not in payload
    assert len(payload["fuel"]["propane"]) == 1
    assert len(payload["fuel"]["diesel"]) == 2


def test_sheets_to_payload_one_source_missing() -> None:
    """A failed fuel fetch ("") still yields the helium records."""
    payload = sheets_to_payload(HELIUM_CSV, "")
    assert len(payload["helium"]) == 2
    assert payload["fuel"] == {"propane": [], "diesel": []}


# ── JSON payload parsing ──────────────────────────────────────────────────────


def test_parse_payload_full(sample_payload) -> None:
    parsed = parse_payload(sample_payload)
    assert len(parsed.helium_fills) == 3
    assert parsed.helium_fills[0].cell == "cellA"
    assert parsed.helium_cell_totals is not None
    assert parsed.helium_cell_totals[1].fill_count == 1
    assert len(parsed.propane_replacements) == 3
    assert parsed.diesel_fills[1].gallons == 15.0
    assert parsed.propane_totals == PropaneTotals(canisters=12, gallons_pumped=48.5)


def test_parse_payload_missing_keys_default_empty() -> None:
    parsed = parse_payload({})
    assert parsed.helium_fills == ()
    assert parsed.helium_cell_totals is None
    assert parsed.propane_replacements == ()
    assert parsed.diesel_fills == ()
    assert parsed.propane_totals == PropaneTotals()
    assert parsed.is_empty


def test_parse_payload_non_object_is_empty() -> None:
    assert parse_payload(None).is_empty
    assert parse_payload([1, 2, 3]).is_empty
    assert parse_payload("oops").is_empty


def test_parse_payload_wrong_section_types_are_ignored() -> None:
    parsed = parse_payload({"helium": "nope", "fuel": ["x"]})
    assert parsed.helium_fills == ()
    assert parsed.diesel_fills == ()


def test_parse_payload_empty_cell_totals_are_kept() -> None:
    """An explicit empty heliumFillTotals list is not replaced by derived totals."""
    parsed = parse_payload({"heliumFillTotals": []})
    assert parsed.helium_cell_totals == ()


def test_parse_helium_records_drops_non_objects_and_defaults_fields() -> None:
    records = parse_helium_records([{"cell": "A"}, 42, {"fillDate": "2024-05-01", "scf": "n/a"}])
    assert len(records) == 2
    assert records[0].fill_date == ""
    assert records[0].scf == 0.0
    assert records[1].cell == ""
    assert records[1].scf == 0.0
