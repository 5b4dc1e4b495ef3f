from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

"""Typed spreadsheet cell values.

A workbook cell is one of four kinds. Alongside the typed value every
non-empty cell carries a display string (what a spreadsheet would show), and
all header / substring matching works on the lower-cased display projection.
"""

__all__ = [
    "CellKind",
    "CellValue",
    "EMPTY_CELL",
]


class CellKind(Enum):
    """Closed set of cell kinds.

    - EMPTY: blank cell (also NaN / None coming out of pandas)
    - TEXT: string cell
    - NUMBER: numeric cell (stored as float)
    - DATE: date / datetime cell (stored as datetime.date)
    """
    EMPTY = "empty"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


def _format_number(value: float) -> str:
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class CellValue:
    kind: CellKind
    value: Any = None
    display: str | None = None  # formatted form, e.g. "17/11/2025" or "1.75"

    @staticmethod
    def empty() -> CellValue:
        return EMPTY_CELL

    @staticmethod
    def text(value: str) -> CellValue:
        return CellValue(CellKind.TEXT, value, value)

    @staticmethod
    def number(value: float, display: str | None = None) -> CellValue:
        value = float(value)
        return CellValue(CellKind.NUMBER, value, display if display is not None else _format_number(value))

    @staticmethod
    def from_date(value: date, display: str | None = None) -> CellValue:
        if isinstance(value, datetime):
            value = value.date()
        return CellValue(CellKind.DATE, value, display if display is not None else value.isoformat())

    @staticmethod
    def from_raw(raw: Any) -> CellValue:
        """Classify a raw value as produced by pandas / openpyxl."""
        if raw is None or raw is pd.NaT:
            return EMPTY_CELL
        if isinstance(raw, str):
            return CellValue.text(raw)
        # bool before number: bool is an int subclass
        if isinstance(raw, (bool, np.bool_)):
            return CellValue.text("TRUE" if raw else "FALSE")
        if isinstance(raw, (pd.Timestamp, datetime, date)):
            if pd.isna(raw):
                return EMPTY_CELL
            return CellValue.from_date(raw)
        if isinstance(raw, (int, float, np.number)):
            if pd.isna(raw):
                return EMPTY_CELL
            return CellValue.number(raw)
        return CellValue.text(str(raw))

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    def as_text(self) -> str:
        """Display projection ('' for empty cells)."""
        if self.kind is CellKind.EMPTY:
            return ""
        if self.display is not None:
            return self.display
        return str(self.value)

    def as_lower(self) -> str:
        return self.as_text().lower()

    def is_truthy(self) -> bool:
        """Spreadsheet-style truthiness: empty, '' and 0 are falsy."""
        if self.kind is CellKind.EMPTY:
            return False
        if self.kind is CellKind.TEXT:
            return self.value != ""
        if self.kind is CellKind.NUMBER:
            return self.value != 0 and not math.isnan(self.value)
        return True


EMPTY_CELL = CellValue(CellKind.EMPTY)
