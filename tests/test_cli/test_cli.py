"""Tests for logistics_dashboard.cli (typer CliRunner, local payload files)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from logistics_dashboard.cli import app
from logistics_dashboard.reporting.export import HELIUM_SECTION

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "test.toml"
    path.write_text(
        "[export]\n"
        f'output_dir = "{(tmp_path / "exports").as_posix()}"\n'
        "[logging]\n"
        'level = "WARNING"\n'
        'log_file = ""\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def payload_file(tmp_path: Path, sample_payload) -> Path:
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolate_logging(restore_root_logger):
    yield


# ── validate-config ───────────────────────────────────────────────────────────


def test_validate_config_ok(config_file: Path) -> None:
    result = runner.invoke(app, ["validate-config", "--config", str(config_file), "--full"])
    assert result.exit_code == 0, result.output
    assert "[OK] Config valid." in result.output
    assert '"mode": "payload"' in result.output


def test_validate_config_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "nope.toml")])
    assert result.exit_code == 1


def test_validate_config_invalid_values(tmp_path: Path) -> None:
    bad = tmp_path / "bad.toml"
    bad.write_text("[refresh]\ninterval_seconds = 5\n", encoding="utf-8")
    result = runner.invoke(app, ["validate-config", "--config", str(bad)])
    assert result.exit_code == 1


# ── refresh ───────────────────────────────────────────────────────────────────


def test_refresh_from_payload_file(config_file: Path, payload_file: Path) -> None:
    result = runner.invoke(
        app, ["refresh", "--payload-file", str(payload_file), "--config", str(config_file)]
    )
    assert result.exit_code == 0, result.output
    assert "Year-to-Date Summary" in result.output
    assert "excavator" in result.output
    assert "Helium Usage (cumulative) (SCF)" in result.output
    assert "[OK] Refresh complete." in result.output


def test_refresh_missing_payload_file(config_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["refresh", "--payload-file", str(tmp_path / "none.json"), "--config", str(config_file)]
    )
    assert result.exit_code == 1


def test_refresh_unknown_mode(config_file: Path) -> None:
    result = runner.invoke(app, ["refresh", "--mode", "ftp", "--config", str(config_file)])
    assert result.exit_code == 1


# ── export / report ───────────────────────────────────────────────────────────


def test_export_writes_csv_and_json(config_file: Path, payload_file: Path, tmp_path: Path) -> None:
    json_out = tmp_path / "snap.json"
    result = runner.invoke(
        app,
        [
            "export",
            "--payload-file", str(payload_file),
            "--json", str(json_out),
            "--config", str(config_file),
        ],
    )
    assert result.exit_code == 0, result.output
    csv_path = tmp_path / "exports" / "logistics-dashboard.csv"
    assert HELIUM_SECTION in csv_path.read_text(encoding="utf-8")
    assert json.loads(json_out.read_text(encoding="utf-8"))["stats"]["heliumFills"] == 3
    assert "helium=3" in result.output


def test_report_reads_latest_export(config_file: Path, payload_file: Path) -> None:
    runner.invoke(app, ["export", "--payload-file", str(payload_file), "--config", str(config_file)])
    result = runner.invoke(app, ["report", "--config", str(config_file), "--max-hours", "1"])
    assert result.exit_code == 0, result.output
    assert "[FRESH]" in result.output
    assert "Helium rows: 3" in result.output
    assert "cellA" in result.output


def test_report_without_export(config_file: Path) -> None:
    result = runner.invoke(app, ["report", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "no export found" in result.output


# ── start-scheduler ───────────────────────────────────────────────────────────


def test_start_scheduler_rejects_short_interval(config_file: Path) -> None:
    result = runner.invoke(
        app, ["start-scheduler", "--interval-seconds", "10", "--config", str(config_file)]
    )
    assert result.exit_code == 1
