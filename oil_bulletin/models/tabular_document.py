from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

import pandas as pd

from .cell import EMPTY_CELL, CellValue

"""TabularDocument: read-only, zero-indexed grid of typed cells.

Built once from a parsed workbook sheet (see oil_bulletin.excel.reader) and
handed to the price extractor. Only non-empty cells are stored; the bounding
range is derived from them.

Keyed-row view
--------------
Row 0 doubles as a list of keys, one per column ``0..max_col``, in column
order. The key is the cell's display text; empty header cells become
``__EMPTY``, ``__EMPTY_1``, ... and repeated labels get ``_1``, ``_2`` suffixes,
so a key's position in the mapping is always its column index.
"""

__all__ = [
    "TabularDocument",
]


@dataclass(frozen=True)
class TabularDocument:
    cells: Mapping[tuple[int, int], CellValue] = field(default_factory=dict)
    sheet_name: str | None = None

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]], sheet_name: str | None = None) -> TabularDocument:
        """Build a document from a list of rows of raw values (None = empty)."""
        cells: dict[tuple[int, int], CellValue] = {}
        for r, row in enumerate(rows):
            for c, raw in enumerate(row):
                cell = raw if isinstance(raw, CellValue) else CellValue.from_raw(raw)
                if not cell.is_empty:
                    cells[(r, c)] = cell
        return cls(cells=cells, sheet_name=sheet_name)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, sheet_name: str | None = None) -> TabularDocument:
        """Build a document from a header-less DataFrame (``header=None`` read)."""
        return cls.from_rows(df.itertuples(index=False, name=None), sheet_name=sheet_name)

    def cell(self, row: int, col: int) -> CellValue:
        return self.cells.get((row, col), EMPTY_CELL)

    @cached_property
    def _bounds(self) -> tuple[int, int]:
        if not self.cells:
            return (-1, -1)
        return (
            max(r for r, _ in self.cells),
            max(c for _, c in self.cells),
        )

    def bounding_range(self) -> tuple[int, int]:
        """(max_row, max_col) over non-empty cells; (-1, -1) when there are none."""
        return self._bounds

    def row(self, row: int) -> list[CellValue]:
        _, max_col = self.bounding_range()
        return [self.cell(row, c) for c in range(max_col + 1)]

    def is_blank_row(self, row: int) -> bool:
        return all(cell.is_empty for cell in self.row(row))

    def header_keys(self) -> list[str]:
        _, max_col = self.bounding_range()
        keys: list[str] = []
        seen: dict[str, int] = {}
        for c in range(max_col + 1):
            label = self.cell(0, c).as_text()
            base = label if label != "" else "__EMPTY"
            key = base
            if base in seen:
                seen[base] += 1
                key = f"{base}_{seen[base]}"
            else:
                seen[base] = 0
            keys.append(key)
        return keys

    def _row_mapping(self, keys: list[str], row: int) -> dict[str, CellValue]:
        return {key: self.cell(row, c) for c, key in enumerate(keys)}

    def rows_as_mappings(self) -> Iterator[dict[str, CellValue]]:
        """Every non-blank row after row 0 as an ordered key -> cell mapping."""
        max_row, _ = self.bounding_range()
        keys = self.header_keys()
        for r in range(1, max_row + 1):
            if self.is_blank_row(r):
                continue
            yield self._row_mapping(keys, r)

    def header_row_as_mapping(self) -> dict[str, CellValue]:
        """First data row keyed by the row-0 labels.

        Empty when the document has no data row below the header, in which case
        there are no keys to match either.
        """
        return next(self.rows_as_mappings(), {})
