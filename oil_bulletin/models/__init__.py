"""Domain models for the Weekly Oil Bulletin scraper.

Cells and the tabular document are what the workbook reader produces; price
records are what the extractor emits; the rest describe a run.
"""

from .bulletin_date import BulletinDate
from .cell import EMPTY_CELL, CellKind, CellValue
from .column_index import ColumnIndex
from .error_record import ErrorRecord
from .price_record import MAX_COUNTRY_LENGTH, PriceRecord
from .run_result import BulletinStat, RunResult, SourceStatus
from .tabular_document import TabularDocument

__all__ = [
    # Grid
    "CellKind",
    "CellValue",
    "EMPTY_CELL",
    "TabularDocument",
    # Extraction
    "ColumnIndex",
    "PriceRecord",
    "MAX_COUNTRY_LENGTH",
    "BulletinDate",
    # Run reporting
    "ErrorRecord",
    "BulletinStat",
    "RunResult",
    "SourceStatus",
]
