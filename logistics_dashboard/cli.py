"""
Logistics Dashboard — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (fetch + build snapshot, export, scheduler loop).
  5. Report result to stdout.

Install and run::

    pip install -e .
    logistics-dashboard --help
    logistics-dashboard validate-config
    logistics-dashboard refresh
    logistics-dashboard refresh --payload-file sample.json
    logistics-dashboard export --output data/exports/logistics-dashboard.csv
    logistics-dashboard report
    logistics-dashboard start-scheduler
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="logistics-dashboard",
    help="Year-to-date helium, propane and diesel tracking from spreadsheet sources.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from logistics_dashboard.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from logistics_dashboard.utils.logging import configure_logging
    configure_logging(config.logging)


def _read_payload_file(payload_file: str) -> Any:
    """Read a local JSON payload, exiting with code 1 when it is unusable."""
    path = Path(payload_file)
    if not path.exists():
        typer.echo(f"[ERROR] Payload file not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] JSON parse error: {exc}", err=True)
        raise typer.Exit(code=1)


def _fetch_payload(config, payload_file: Optional[str], mode: Optional[str]) -> Any:
    from logistics_dashboard.ingestion.sheets_client import SheetsClient

    if payload_file:
        return _read_payload_file(payload_file)
    if mode is not None and mode not in ("payload", "sheets"):
        typer.echo(f"[ERROR] Unknown --mode '{mode}'. Use payload or sheets.", err=True)
        raise typer.Exit(code=1)
    return SheetsClient(config.sources).fetch(mode)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Source mode:      {config.sources.mode}")
    typer.echo(f"  Payload URL:      {config.sources.payload_url}")
    typer.echo(f"  Refresh interval: {config.refresh.interval_seconds}s")
    typer.echo(f"  Export path:      {config.export.path}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("refresh")
def refresh(
    payload_file: Optional[str] = typer.Option(
        None,
        "--payload-file",
        "-f",
        help="Read the JSON payload from a local file instead of fetching it.",
    ),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        help="Source mode override: payload or sheets.",
    ),
    top_n: int = typer.Option(
        10,
        "--top",
        help="Rows shown per ranked table.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Fetch the sources, build a snapshot and print the year-to-date summary.

    \b
    Sections printed:
      - summary scalars (helium SCF, propane canisters, diesel gallons)
      - cumulative monthly helium and diesel series
      - helium by cell, propane by machinery, diesel by machinery

    A source that cannot be reached contributes no records; the summary
    still prints with that category at zero.
    """
    from logistics_dashboard.reporting.assembler import build_snapshot
    from logistics_dashboard.reporting.formatters import (
        format_monthly_series,
        format_ranked_table,
        format_summary,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    payload = _fetch_payload(config, payload_file, mode)
    snapshot = build_snapshot(payload)

    typer.echo(format_summary(snapshot.stats, snapshot.assembled_at.isoformat()))
    typer.echo(format_monthly_series("Helium Usage (cumulative)", snapshot.monthly_helium, "SCF"))
    typer.echo(format_monthly_series("Diesel Usage (cumulative)", snapshot.monthly_diesel, "gal"))
    typer.echo(format_ranked_table(
        "Helium by Cell", snapshot.helium_by_cell, "Cell #", "SCF", top_n=top_n,
    ))
    typer.echo(format_ranked_table(
        "Propane by Machinery", snapshot.propane_by_machinery, "Machinery", "Canisters", top_n=top_n,
    ))
    typer.echo(format_ranked_table(
        "Diesel by Machinery", snapshot.diesel_by_machinery, "Machinery", "Gallons", top_n=top_n,
    ))
    typer.echo("")
    typer.echo("[OK] Refresh complete.")


@app.command("export")
def export(
    payload_file: Optional[str] = typer.Option(
        None,
        "--payload-file",
        "-f",
        help="Read the JSON payload from a local file instead of fetching it.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="CSV destination. Defaults to [export] output_dir/filename.",
    ),
    json_output: Optional[str] = typer.Option(
        None,
        "--json",
        help="Also write the full snapshot as JSON to this path.",
    ),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        help="Source mode override: payload or sheets.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Build a snapshot and write the sectioned CSV report."""
    from logistics_dashboard.reporting.assembler import build_snapshot
    from logistics_dashboard.reporting.export import export_to_json, write_export

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    payload = _fetch_payload(config, payload_file, mode)
    snapshot = build_snapshot(payload)

    csv_path = Path(output) if output else config.export.path
    try:
        write_export(snapshot, csv_path, title=config.export.title)
        if json_output:
            export_to_json(snapshot, Path(json_output))
    except OSError as exc:
        typer.echo(f"[ERROR] Could not write export: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"  CSV:  {csv_path}")
    if json_output:
        typer.echo(f"  JSON: {json_output}")
    typer.echo(
        f"  Rows: helium={snapshot.stats.helium_fills} "
        f"cells={len(snapshot.helium_cell_totals)} "
        f"propane={snapshot.stats.propane_replacements} "
        f"diesel={snapshot.stats.diesel_entries}"
    )
    typer.echo("[OK] Export written.")


@app.command("report")
def report(
    export_file: Optional[str] = typer.Option(
        None,
        "--export-file",
        help="CSV export to read. Defaults to the newest CSV in [export] output_dir.",
    ),
    max_hours: float = typer.Option(
        1.0,
        "--max-hours",
        help="Age beyond which the export is flagged as stale.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Show freshness and helium totals of the last written export."""
    from logistics_dashboard.aggregation.aggregator import cell_totals
    from logistics_dashboard.reporting.formatters import (
        format_cell_totals,
        format_freshness_banner,
    )
    from logistics_dashboard.reporting.reader import (
        check_freshness,
        helium_records_from_export,
        load_export_text,
        load_latest_export,
        read_generated_at,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if export_file:
        path = Path(export_file)
        text = load_export_text(path)
    else:
        found = load_latest_export(Path(config.export.output_dir))
        path, text = found if found else (None, None)

    if text is None:
        typer.echo("  (no export found — run 'logistics-dashboard export' first)")
        raise typer.Exit(code=0)

    is_fresh, age = check_freshness(read_generated_at(text), max_hours=max_hours)
    helium = helium_records_from_export(text)

    typer.echo("")
    typer.echo("=== Last Export ===")
    typer.echo(format_freshness_banner(is_fresh, age, source_file=str(path)))
    typer.echo(f"  Helium rows: {len(helium)}")
    typer.echo(format_cell_totals(cell_totals(helium)))


@app.command("start-scheduler")
def start_scheduler(
    interval_seconds: Optional[int] = typer.Option(
        None,
        "--interval-seconds",
        help="Seconds between refreshes. Uses [refresh] interval_seconds if omitted.",
    ),
    skip_initial: bool = typer.Option(
        False,
        "--skip-initial",
        help="Wait one interval before the first refresh.",
    ),
    no_export: bool = typer.Option(
        False,
        "--no-export",
        help="Do not rewrite the CSV export after each refresh.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Refresh on a fixed interval until interrupted (Ctrl-C / SIGTERM)."""
    from logistics_dashboard.ingestion.sheets_client import SheetsClient
    from logistics_dashboard.refresh import RefreshCoordinator
    from logistics_dashboard.scheduler import SchedulerDaemon

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    interval = interval_seconds or config.refresh.interval_seconds
    if interval < 60:
        typer.echo("[ERROR] --interval-seconds must be >= 60.", err=True)
        raise typer.Exit(code=1)

    client = SheetsClient(config.sources)
    daemon = SchedulerDaemon(
        RefreshCoordinator(client.fetch),
        interval_seconds=interval,
        export_path=None if no_export else config.export.path,
        export_title=config.export.title,
        skip_initial=skip_initial,
        tick_seconds=config.refresh.tick_seconds,
    )
    typer.echo(f"Scheduler running every {interval}s (Ctrl-C to stop).")
    daemon.start()


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
