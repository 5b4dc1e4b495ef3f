from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from ..models.cell import CellKind, CellValue
from ..models.column_index import ColumnIndex
from ..models.price_record import MAX_COUNTRY_LENGTH, PriceRecord
from ..models.tabular_document import TabularDocument
from .country_codes import get_country_code

"""Heuristic bulletin price extractor.

Turns a TabularDocument into an ordered list of PriceRecord in three phases:

1. ``locate_columns``: find the country / petrol 95 / diesel columns by
   case-insensitive substring match on header text. Keyed pass over the row-0
   labels first, then a raw-grid scan of the first rows if no country column
   was found.
2. ``extract_rows``: walk data rows below the header at the resolved indices,
   or, with no country column, read each row as a label -> value mapping with
   named fallbacks.
3. ``filter_aggregates``: drop EU / weighted-average summary rows.

Best effort throughout: unresolved columns, unparseable prices and odd country
cells are omitted, never raised. An empty result is for the caller to judge.
"""

__all__ = [
    "AggregateMarkers",
    "DEFAULT_AGGREGATE_MARKERS",
    "locate_columns",
    "extract_rows",
    "filter_aggregates",
    "extract_prices",
    "parse_price",
]

logger = logging.getLogger(__name__)

# Rows scanned when looking for a header row in the raw grid / at the country column.
HEADER_SCAN_ROWS = 5
HEADER_ROW_SCAN_ROWS = 10

CountryCodeResolver = Callable[[str], "str | None"]


def _contains_any(*needles: str) -> Callable[[str], bool]:
    def predicate(text: str) -> bool:
        lowered = text.lower()
        return any(n in lowered for n in needles)
    return predicate


is_country_header = _contains_any("country", "member state", "state")
is_petrol_header = _contains_any("95", "eurosuper", "unleaded")
is_diesel_header = _contains_any("diesel", "gasoil")


@dataclass(frozen=True)
class AggregateMarkers:
    """Country-cell markers identifying summary rows.

    ``case_insensitive`` entries are lower-case and matched against the
    lower-cased country; ``exact`` entries are matched as-is.
    """
    case_insensitive: tuple[str, ...]
    exact: tuple[str, ...]

    def extended(self, case_insensitive: Iterable[str] = (), exact: Iterable[str] = ()) -> AggregateMarkers:
        extra_ci = tuple(m.lower() for m in case_insensitive if m.lower() not in self.case_insensitive)
        extra_exact = tuple(m for m in exact if m not in self.exact)
        return AggregateMarkers(self.case_insensitive + extra_ci, self.exact + extra_exact)

    def matches(self, country: str) -> bool:
        lowered = country.lower()
        return any(m in lowered for m in self.case_insensitive) or any(m in country for m in self.exact)


DEFAULT_AGGREGATE_MARKERS = AggregateMarkers(
    case_insensitive=("moyenne", "weighted average", "gewichteter", "average"),
    exact=("CE/EC/EG", "EUR27", "Euro Area"),
)


def _first_index(labels: Iterable[str], predicate: Callable[[str], bool]) -> int | None:
    for i, label in enumerate(labels):
        if label and predicate(label):
            return i
    return None


def _locate_in_keys(keys: list[str]) -> ColumnIndex:
    return ColumnIndex(
        country=_first_index(keys, is_country_header),
        petrol=_first_index(keys, is_petrol_header),
        diesel=_first_index(keys, is_diesel_header),
    )


def _locate_in_grid(document: TabularDocument) -> ColumnIndex | None:
    max_row, _ = document.bounding_range()
    for r in range(min(HEADER_SCAN_ROWS, max_row) + 1):
        labels = [cell.as_text() for cell in document.row(r)]
        joined = " ".join(labels).lower()
        if "country" in joined and ("95" in joined or "diesel" in joined):
            logger.debug(f"header row found in raw grid at row {r}")
            return _locate_in_keys(labels)
    return None


def locate_columns(document: TabularDocument) -> ColumnIndex:
    """Resolve the country / petrol / diesel column indices (each may be None)."""
    mapping = document.header_row_as_mapping()
    columns = _locate_in_keys(list(mapping.keys())) if mapping else ColumnIndex()
    if not columns.is_resolved:
        grid_columns = _locate_in_grid(document)
        if grid_columns is not None:
            columns = grid_columns
    logger.debug(f"resolved columns: {columns}")
    return columns


_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_price(cell: CellValue | None) -> float | None:
    """Parse a price cell, reading the leading numeric part of text cells.

    "1.75" -> 1.75, "1.75 EUR" -> 1.75, "n/a" -> None. Empty and date cells
    and non-finite numbers give None.
    """
    if cell is None:
        return None
    if cell.kind is CellKind.NUMBER:
        value = float(cell.value)
    elif cell.kind is CellKind.TEXT:
        m = _NUMBER_PREFIX.match(cell.value.strip())
        if m is None:
            return None
        value = float(m.group(0))
    else:
        return None
    return value if math.isfinite(value) else None


def _country_name(cell: CellValue) -> str | None:
    name = cell.as_text().strip()
    if not name or len(name) >= MAX_COUNTRY_LENGTH:
        return None
    return name


def _find_header_row(document: TabularDocument, country_col: int) -> int:
    max_row, _ = document.bounding_range()
    for r in range(min(HEADER_ROW_SCAN_ROWS, max_row) + 1):
        if "country" in document.cell(r, country_col).as_lower():
            return r
    return 0


def _extract_indexed(
    document: TabularDocument, country_col: int, columns: ColumnIndex, resolve_code: CountryCodeResolver
) -> list[PriceRecord]:
    max_row, _ = document.bounding_range()
    header_row = _find_header_row(document, country_col)
    records: list[PriceRecord] = []
    for r in range(header_row + 1, max_row + 1):
        country_cell = document.cell(r, country_col)
        if not country_cell.is_truthy():
            continue
        country = _country_name(country_cell)
        if country is None:
            continue
        petrol = parse_price(document.cell(r, columns.petrol)) if columns.petrol is not None else None
        diesel = parse_price(document.cell(r, columns.diesel)) if columns.diesel is not None else None
        if petrol is None and diesel is None:
            continue
        records.append(PriceRecord(country, resolve_code(country), petrol, diesel))
    return records


def _first_truthy(row: Mapping[str, CellValue], keys: Iterable[str | None]) -> CellValue | None:
    for key in keys:
        if key is None:
            continue
        cell = row.get(key)
        if cell is not None and cell.is_truthy():
            return cell
    return None


def _key_at(keys: list[str], index: int | None) -> str | None:
    if index is None or index >= len(keys):
        return None
    return keys[index]


def _extract_keyed(
    document: TabularDocument, columns: ColumnIndex, resolve_code: CountryCodeResolver
) -> list[PriceRecord]:
    keys = document.header_keys()
    petrol_keys = (_key_at(keys, columns.petrol), "Eurosuper 95", "Unleaded 95")
    diesel_keys = (_key_at(keys, columns.diesel), "Diesel", "Gasoil")
    records: list[PriceRecord] = []
    for row in document.rows_as_mappings():
        country_cell = _first_truthy(row, ("Country", "Member State", "MemberState"))
        if country_cell is None:
            # column 0, blank or not
            country_cell = next(iter(row.values()), None)
        if country_cell is None or country_cell.kind is not CellKind.TEXT:
            continue
        country = _country_name(country_cell)
        if country is None:
            continue
        # zero counts as missing here, as in the keyed lookups above
        petrol = parse_price(_first_truthy(row, petrol_keys)) or None
        diesel = parse_price(_first_truthy(row, diesel_keys)) or None
        if petrol is None and diesel is None:
            continue
        records.append(PriceRecord(country, resolve_code(country), petrol, diesel))
    return records


def extract_rows(
    document: TabularDocument,
    columns: ColumnIndex,
    resolve_code: CountryCodeResolver = get_country_code,
) -> list[PriceRecord]:
    """Walk data rows and build records; needs at least one price per row."""
    if columns.country is not None:
        return _extract_indexed(document, columns.country, columns, resolve_code)
    logger.debug("no country column resolved, falling back to keyed row scan")
    return _extract_keyed(document, columns, resolve_code)


def filter_aggregates(
    records: Iterable[PriceRecord], markers: AggregateMarkers = DEFAULT_AGGREGATE_MARKERS
) -> list[PriceRecord]:
    """Drop summary rows; order of the remaining records is kept."""
    return [rec for rec in records if not markers.matches(rec.country)]


def extract_prices(
    document: TabularDocument,
    resolve_code: CountryCodeResolver = get_country_code,
    markers: AggregateMarkers = DEFAULT_AGGREGATE_MARKERS,
) -> list[PriceRecord]:
    """Full extraction: locate columns, read rows, drop aggregate rows."""
    columns = locate_columns(document)
    records = extract_rows(document, columns, resolve_code)
    kept = filter_aggregates(records, markers)
    if len(kept) != len(records):
        logger.debug(f"dropped {len(records) - len(kept)} aggregate row(s)")
    return kept
