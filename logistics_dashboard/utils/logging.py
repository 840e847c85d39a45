"""
Logging setup for the logistics dashboard.

Call ``configure_logging(config)`` once at CLI or scheduler entry. Library
modules only ever do ``logger = logging.getLogger(__name__)``.

Diagnostics from the data path (unreachable sources, dropped CSV lines,
undated records) are logged here rather than surfaced to dashboard users.

With ``json_format = true`` under ``[logging]`` each line is one JSON object::

    {"ts": "2026-03-02T09:00:00Z", "level": "WARNING",
     "logger": "logistics_dashboard.ingestion.sheets_client",
     "msg": "Payload fetch failed: ...", "source": "payload"}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from logistics_dashboard.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s | %(message)s"
UTC_TIMESTAMP = "%Y-%m-%dT%H:%M:%SZ"

# Attributes present on every LogRecord; anything else came in via extra=.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "watchdog")


class _UtcFormatter(logging.Formatter):
    converter = time.gmtime


class _JsonLineFormatter(_UtcFormatter):
    """Render each record as a single JSON object, ``extra=`` fields included."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, UTC_TIMESTAMP),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(
            (k, v) for k, v in vars(record).items()
            if k not in _STANDARD_ATTRS and not k.startswith("_")
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonLineFormatter()
    return _UtcFormatter(TEXT_FORMAT, datefmt=UTC_TIMESTAMP)


def configure_logging(config: "LoggingConfig") -> None:
    """Point the root logger at stdout (and ``config.log_file`` when set).

    Replaces whatever handlers were installed before, so calling it twice is
    harmless. HTTP client libraries are capped at WARNING.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    targets: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        targets.append(logging.FileHandler(path, encoding="utf-8"))

    formatter = _make_formatter(config.json_format)
    for handler in targets:
        handler.setFormatter(formatter)
        handler.setLevel(level)

    logging.basicConfig(level=level, handlers=targets, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
