from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..models.bulletin_date import BulletinDate
from ..models.price_record import PriceRecord

"""Dated JSON output and aggregation of weekly files.

Layout::

    <output_dir>/<year>/<month>.<MonthName>/<YYYY-MM-DD>.json
    {"<YYYY-MM-DD>": [{"country": ..., "countryCode": ..., "petrol": ..., "diesel": ...}, ...]}
"""

__all__ = [
    "CombineResult",
    "build_output_path",
    "write_prices",
    "combine_price_files",
    "COMBINED_FILE_NAME",
]

logger = logging.getLogger(__name__)

COMBINED_FILE_NAME = "combined-prices.json"


def build_output_path(output_dir: Path, bulletin_date: BulletinDate) -> Path:
    month_dir = f"{bulletin_date.month}.{bulletin_date.month_name}"
    return output_dir / str(bulletin_date.year) / month_dir / f"{bulletin_date.date_string}.json"


def write_prices(output_dir: Path, bulletin_date: BulletinDate, records: Iterable[PriceRecord]) -> Path:
    """Write one bulletin's records keyed by its date string. Overwrites."""
    path = build_output_path(output_dir, bulletin_date)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {bulletin_date.date_string: [r.to_dict() for r in records]}
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


@dataclass(frozen=True)
class CombineResult:
    destination: Path
    files_read: int
    files_skipped: int
    dates: int


def combine_price_files(output_dir: Path, destination: Path | None = None) -> CombineResult:
    """Merge every weekly JSON file under ``output_dir`` into one object.

    Top-level date keys are merged and sorted; for a date present in several
    files the last file read (path order) wins. Files that cannot be read or
    are not JSON objects are skipped with a WARN line.
    """
    dest = destination if destination is not None else output_dir / COMBINED_FILE_NAME
    merged: dict[str, Any] = {}
    read = skipped = 0
    files = sorted(p for p in output_dir.rglob("*.json") if p.resolve() != dest.resolve())
    for path in files:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"skip {path}: {e}")
            skipped += 1
            continue
        if not isinstance(data, dict):
            logger.warning(f"skip {path}: top-level JSON is not an object")
            skipped += 1
            continue
        merged.update(data)
        read += 1
        logger.debug(f"added {path.name} ({len(data)} date(s))")

    combined = {k: merged[k] for k in sorted(merged)}
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(json.dumps(combined, ensure_ascii=False, indent=2), encoding="utf-8")
    return CombineResult(destination=dest, files_read=read, files_skipped=skipped, dates=len(combined))
