"""
Settings for the logistics dashboard.

Sources are layered, later ones winning:

  config/default.toml    defaults shipped with the repo
  config/local.toml      per-machine tweaks, deep-merged (not committed)
  .env                   read into the process environment if present
  LOGISTICS_DASHBOARD_*  environment overrides for a handful of keys

``load_config()`` returns one frozen ``AppConfig``; the CLI, scheduler and
Streamlit shell take that object instead of reading env vars themselves.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

SourceMode = Literal["payload", "sheets"]

_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ── Sections ──────────────────────────────────────────────────────────────────


class SourcesConfig(BaseModel):
    """Where raw records come from.

    ``payload`` mode reads one JSON document shaped like::

        {"helium": [...], "heliumFillTotals": [...],
         "fuel": {"propane": [...], "diesel": [...], "propaneTotals": {...}}}

    ``sheets`` mode pulls the two spreadsheet CSV exports and maps them
    into the same shape.
    """

    model_config = ConfigDict(frozen=True)

    mode: SourceMode = "payload"
    payload_url: str = "http://localhost:3000/api/sheets"
    helium_sheet_id: str = ""
    fuel_sheet_id: str = ""
    helium_range: str = "Sheet1!A:H"
    fuel_range: str = "Sheet1!A:F"
    timeout_seconds: float = 30.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v


class RefreshConfig(BaseModel):
    """Scheduler cadence."""

    model_config = ConfigDict(frozen=True)

    interval_seconds: int = 3600
    tick_seconds: int = 30

    @field_validator("interval_seconds")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v < 60:
            raise ValueError(f"interval_seconds must be >= 60, got {v}.")
        return v


class ExportConfig(BaseModel):
    """CSV export destination and banner."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/exports"
    filename: str = "logistics-dashboard.csv"
    title: str = "Logistics H2 Dashboard Export"

    @property
    def path(self) -> Path:
        return Path(self.output_dir) / self.filename


class LoggingConfig(BaseModel):
    """Log level and destinations for ``configure_logging``."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/dashboard.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def normalise_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LEVEL_NAMES:
            raise ValueError(f"level must be one of {', '.join(_LEVEL_NAMES)}; got '{v}'.")
        return level


class AppConfig(BaseModel):
    """Every settings section, validated and frozen."""

    model_config = ConfigDict(frozen=True)

    sources: SourcesConfig = SourcesConfig()
    refresh: RefreshConfig = RefreshConfig()
    export: ExportConfig = ExportConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

# env var → (section, key); section None means top level
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "LOGISTICS_DASHBOARD_PAYLOAD_URL": ("sources", "payload_url"),
    "LOGISTICS_DASHBOARD_SOURCE_MODE": ("sources", "mode"),
    "LOGISTICS_DASHBOARD_LOG_LEVEL": ("logging", "level"),
    "LOGISTICS_DASHBOARD_DEBUG": (None, "debug"),
}

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _find_project_root() -> Path:
    """Nearest ancestor of this module that holds ``pyproject.toml``."""
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return here.parent.parent


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build the ``AppConfig`` for this process.

    Args:
        config_path: TOML file to start from. When omitted,
            ``config/default.toml`` under the project root is used. A
            ``local.toml`` next to it is merged on top when present.

    Raises:
        FileNotFoundError: ``config_path`` points nowhere.
        pydantic.ValidationError: a merged value is out of range or mistyped.
    """
    root = _find_project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(path)
    local = path.with_name("local.toml")
    if local.is_file():
        raw = _deep_merge(raw, _read_toml(local))

    return _build_app_config(_apply_env_overrides(raw))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` laid over it, merging nested tables."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Copy any set ``LOGISTICS_DASHBOARD_*`` variables into ``raw``."""
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        if key == "debug":
            coerced: Any = value.strip().lower() in _TRUTHY
        elif key == "mode":
            coerced = value.strip().lower()
        else:
            coerced = value
        target = raw if section is None else raw.setdefault(section, {})
        target[key] = coerced
    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Validate the merged tables; ``[project] debug`` is the TOML spelling of ``debug``."""
    data = {name: raw.get(name, {}) for name in ("sources", "refresh", "export", "logging")}
    data["debug"] = raw.get("debug", raw.get("project", {}).get("debug", False))
    return AppConfig.model_validate(data)
