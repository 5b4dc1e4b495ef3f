from __future__ import annotations

from datetime import date, datetime

import numpy as np
import pandas as pd

from oil_bulletin.models.cell import CellKind, CellValue
from oil_bulletin.models.tabular_document import TabularDocument

"""Unit tests for typed cells and the TabularDocument grid."""


def test_from_raw_classification():
    assert CellValue.from_raw(None).kind is CellKind.EMPTY
    assert CellValue.from_raw(float("nan")).kind is CellKind.EMPTY
    assert CellValue.from_raw(pd.NaT).kind is CellKind.EMPTY
    assert CellValue.from_raw("Austria") == CellValue(CellKind.TEXT, "Austria", "Austria")
    assert CellValue.from_raw(np.float64(1.5)).value == 1.5
    assert CellValue.from_raw(np.int64(95)).as_text() == "95"
    assert CellValue.from_raw(True).as_text() == "TRUE"
    stamp = CellValue.from_raw(pd.Timestamp("2025-11-17 00:00:00"))
    assert stamp.kind is CellKind.DATE
    assert stamp.value == date(2025, 11, 17)
    assert stamp.as_text() == "2025-11-17"
    assert CellValue.from_raw(datetime(2025, 1, 2, 10, 30)).value == date(2025, 1, 2)


def test_number_display_drops_integral_fraction():
    assert CellValue.number(95.0).as_text() == "95"
    assert CellValue.number(1.75).as_text() == "1.75"
    assert CellValue.number(1.75, display="1,75").as_text() == "1,75"


def test_as_lower_and_truthiness():
    assert CellValue.text("Member State").as_lower() == "member state"
    assert CellValue.empty().as_text() == ""
    assert not CellValue.text("").is_truthy()
    assert not CellValue.number(0).is_truthy()
    assert CellValue.number(0.1).is_truthy()
    assert CellValue.from_date(date(2025, 1, 1)).is_truthy()


def test_cell_and_bounding_range():
    doc = TabularDocument.from_rows([
        ["a", None, None],
        [None, None, 3],
        [],
    ])
    assert doc.bounding_range() == (1, 2)
    assert doc.cell(1, 2).value == 3.0
    assert doc.cell(0, 1).is_empty
    assert doc.cell(50, 50).is_empty
    assert TabularDocument().bounding_range() == (-1, -1)


def test_header_keys_for_empty_and_duplicate_labels():
    doc = TabularDocument.from_rows([
        ["Country", None, "Price", "Price", None, "Price"],
        ["x", 1, 2, 3, 4, 5],
    ])
    assert doc.header_keys() == ["Country", "__EMPTY", "Price", "Price_1", "__EMPTY_1", "Price_2"]


def test_rows_as_mappings_skip_blank_rows_and_keep_column_order():
    doc = TabularDocument.from_rows([
        ["Country", "Diesel"],
        [None, None],
        ["Malta", 1.2],
        ["Spain", None],
    ])
    rows = list(doc.rows_as_mappings())
    assert len(rows) == 2
    assert list(rows[0].keys()) == ["Country", "Diesel"]
    assert rows[0]["Country"].value == "Malta"
    assert rows[1]["Diesel"].is_empty
    assert doc.header_row_as_mapping() == rows[0]


def test_header_row_mapping_empty_without_data_rows():
    doc = TabularDocument.from_rows([["Country", "Diesel"]])
    assert doc.header_row_as_mapping() == {}


def test_from_dataframe_matches_from_rows():
    df = pd.DataFrame([["Country", "Diesel"], ["Malta", 1.2]])
    doc = TabularDocument.from_dataframe(df, sheet_name="S")
    assert doc.sheet_name == "S"
    assert doc.cell(1, 0).as_text() == "Malta"
    assert doc.cell(1, 1).value == 1.2
