from __future__ import annotations

import logging
import re
import zipfile
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

import pandas as pd

from ..models.bulletin_date import BulletinDate
from ..models.cell import CellKind
from ..models.tabular_document import TabularDocument

"""Bulletin workbook reader.

The EC "prices with taxes" workbook is read header-less (``header=None``) so the
extractor sees the raw grid, title rows included. Only the first sheet is used
unless a sheet name is configured.

The bulletin date sits in cell A2, either as a real date cell, an Excel serial
number or a ``DD/MM/YYYY`` string depending on how the file was exported.
"""

__all__ = [
    "WorkbookReadError",
    "read_workbook",
    "extract_bulletin_date",
]

logger = logging.getLogger(__name__)

# Excel 1900 date system, including the fictitious 1900-02-29.
EXCEL_EPOCH = date(1899, 12, 30)
_DMY = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")

DATE_CELL = (1, 0)  # A2


class WorkbookReadError(Exception):
    """Raised when a workbook or the requested sheet cannot be read."""


def read_workbook(path: Path, sheet: str | None = None) -> TabularDocument:
    """Read one sheet of an .xlsx file into a TabularDocument.

    Parameters
    ----------
    path: workbook path
    sheet: sheet name; None selects the first sheet
    """
    try:
        xls = pd.ExcelFile(path)
    except FileNotFoundError as e:
        raise WorkbookReadError(f"workbook not found: {path}") from e
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise WorkbookReadError(f"cannot open workbook {path}: {e}") from e
    except ImportError as e:
        # legacy .xls needs an engine that is not installed
        raise WorkbookReadError(f"unsupported workbook format {path}: {e}") from e
    with xls:
        names = [str(n) for n in xls.sheet_names]
        if not names:
            raise WorkbookReadError(f"workbook has no sheets: {path}")
        name = sheet if sheet is not None else names[0]
        if name not in names:
            raise WorkbookReadError(f"sheet '{name}' not found in {path.name} (sheets: {names})")
        try:
            # only blank cells are NA; "n/a", "NA" etc. stay text as in the sheet
            df = xls.parse(name, header=None, keep_default_na=False, na_values=[""])
        except ValueError as e:
            raise WorkbookReadError(f"cannot parse sheet '{name}' in {path}: {e}") from e
    document = TabularDocument.from_dataframe(df, sheet_name=name)
    max_row, max_col = document.bounding_range()
    logger.debug(f"read {path.name} sheet={name} rows={max_row + 1} cols={max_col + 1}")
    return document


def _today() -> date:
    return datetime.now(UTC).date()


def _from_excel_serial(serial: float) -> date:
    return EXCEL_EPOCH + timedelta(days=int(serial))


def extract_bulletin_date(document: TabularDocument, today: date | None = None) -> BulletinDate:
    """Read the bulletin date from A2, falling back to today.

    Handles, in order: empty cell (today), ``D/M/YYYY`` text, date cells,
    Excel serial numbers, then any other text pandas can parse (day first).
    """
    fallback = today if today is not None else _today()
    cell = document.cell(*DATE_CELL)
    if not cell.is_truthy():
        logger.info("no bulletin date in A2, using today's date")
        return BulletinDate.from_date(fallback)

    text = cell.as_text()
    m = _DMY.search(text)
    if m:
        day, month, year = (int(g) for g in m.groups())
        try:
            return BulletinDate.from_date(date(year, month, day))
        except ValueError:
            logger.warning(f"invalid date in A2: {text!r}")
            return BulletinDate.from_date(fallback)

    if cell.kind is CellKind.DATE:
        return BulletinDate.from_date(cell.value)

    if cell.kind is CellKind.NUMBER:
        try:
            return BulletinDate.from_date(_from_excel_serial(cell.value))
        except OverflowError:
            logger.warning(f"A2 is not an Excel date serial: {cell.value}")
            return BulletinDate.from_date(fallback)

    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, OverflowError):
        parsed = pd.NaT
    if pd.isna(parsed):
        logger.warning(f"cannot parse bulletin date {text!r}, using today's date")
        return BulletinDate.from_date(fallback)
    return BulletinDate.from_date(parsed.date())
