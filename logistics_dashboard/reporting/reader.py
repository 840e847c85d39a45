"""
Reading back written exports.

The CLI ``report`` command and the round-trip tests read CSV reports that
``export.write_export`` produced earlier. Loaders return ``None`` rather
than raising when nothing is found so callers can print a friendly
"no export yet" message.

Section parsing relies on the fixed layout written by ``export``: a title
line, a column-header line, data rows, and a blank line between sections.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from logistics_dashboard.models.records import HeliumFillRecord
from logistics_dashboard.parsing.records import to_quantity
from logistics_dashboard.reporting.export import HELIUM_SECTION, SECTION_HEADERS
from logistics_dashboard.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

GENERATED_PREFIX = "Generated: "


# ── Locating and dating exports ───────────────────────────────────────────────

def find_latest_file(directory: Path, glob_pattern: str) -> Path | None:
    """Newest file (by mtime) in ``directory`` matching ``glob_pattern``, if any."""
    if not directory.is_dir():
        return None
    candidates = [p for p in directory.glob(glob_pattern) if p.is_file()]
    return max(candidates, key=lambda p: p.stat().st_mtime, default=None)


def check_freshness(
    generated_at: str | None,
    max_hours: float = 1.0,
    now: Optional[datetime] = None,
) -> tuple[bool, float | None]:
    """Age of a ``Generated:`` timestamp and whether it is within ``max_hours``.

    Accepts a full ISO timestamp or a bare ``YYYY-MM-DD`` date (taken as
    midnight). Timestamps without an offset count as UTC.

    Returns:
        ``(is_fresh, age_hours)``; ``(False, None)`` when the text is missing
        or not a timestamp.
    """
    if not generated_at:
        return False, None
    try:
        stamp = datetime.fromisoformat(generated_at.strip())
    except ValueError:
        return False, None
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)

    age = ((now or utcnow()) - stamp) / timedelta(hours=1)
    return age <= max_hours, age


# ── Section parsing ───────────────────────────────────────────────────────────

def read_generated_at(text: str) -> Optional[str]:
    """Return the ISO timestamp from the report banner, if present."""
    for line in text.splitlines()[:5]:
        if line.startswith(GENERATED_PREFIX):
            return line[len(GENERATED_PREFIX):].strip()
    return None


def read_export_sections(text: str) -> dict[str, list[list[str]]]:
    """Split an export blob back into ``{section title: data rows}``.

    The whole blob goes through one ``csv.reader`` so quoted fields that
    span lines come back intact. A one-field row naming a known section
    opens it; an empty row closes it. Column-header rows are consumed and
    only data rows are returned. Sections not present in the text are
    absent from the result.
    """
    sections: dict[str, list[list[str]]] = {}
    current: Optional[str] = None
    expect_header = False

    rows = csv.reader(io.StringIO(text))
    try:
        for row in rows:
            if not row or not any(field.strip() for field in row):
                current = None
                continue
            if len(row) == 1 and row[0] in SECTION_HEADERS:
                current = row[0]
                sections[current] = []
                expect_header = True
                continue
            if current is None:
                continue
            if expect_header:
                expect_header = False
                continue
            sections[current].append(row)
    except csv.Error as exc:
        logger.warning("Stopped reading export at line %d: %s", rows.line_num, exc)

    return sections


def helium_records_from_export(text: str) -> list[HeliumFillRecord]:
    """Rebuild helium fill records from an export's helium section."""
    rows = read_export_sections(text).get(HELIUM_SECTION, [])
    return [
        HeliumFillRecord(
            fill_date=row[0] if len(row) > 0 else "",
            cell=row[1] if len(row) > 1 else "",
            scf=to_quantity(row[2] if len(row) > 2 else None),
        )
        for row in rows
    ]


# ── Loaders ───────────────────────────────────────────────────────────────────

def load_export_text(path: Path) -> str | None:
    """Read an export file, or ``None`` when it is missing / unreadable."""
    if not path.exists():
        logger.debug("No export found at %s", path)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to read export %s: %s", path, exc)
        return None


def load_latest_export(output_dir: Path, glob_pattern: str = "*.csv") -> tuple[Path, str] | None:
    """Locate and read the newest export in ``output_dir``."""
    path = find_latest_file(output_dir, glob_pattern)
    if path is None:
        return None
    text = load_export_text(path)
    if text is None:
        return None
    return path, text
