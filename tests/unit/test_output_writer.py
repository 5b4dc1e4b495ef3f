from __future__ import annotations

import json
from pathlib import Path

from oil_bulletin.models.bulletin_date import BulletinDate
from oil_bulletin.models.price_record import PriceRecord
from oil_bulletin.services.output_writer import (
    COMBINED_FILE_NAME,
    build_output_path,
    combine_price_files,
    write_prices,
)


def test_build_output_path(tmp_path: Path):
    path = build_output_path(tmp_path, BulletinDate(2025, 11, 20))
    assert path == tmp_path / "2025" / "11.November" / "2025-11-20.json"


def test_single_digit_month_directory(tmp_path: Path):
    path = build_output_path(tmp_path, BulletinDate(2024, 3, 7))
    assert path.parent.name == "3.March"
    assert path.name == "2024-03-07.json"


def test_write_prices_payload(tmp_path: Path):
    records = [
        PriceRecord("Germany", "DE", 1.75, 1.68),
        PriceRecord("Atlantis", None, None, 2.0),
    ]
    path = write_prices(tmp_path, BulletinDate(2025, 11, 20), records)
    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "2025-11-20": [')
    assert json.loads(text) == {"2025-11-20": [
        {"country": "Germany", "countryCode": "DE", "petrol": 1.75, "diesel": 1.68},
        {"country": "Atlantis", "countryCode": None, "petrol": None, "diesel": 2.0},
    ]}


def test_write_prices_overwrites(tmp_path: Path):
    d = BulletinDate(2025, 11, 20)
    write_prices(tmp_path, d, [PriceRecord("Malta", "MT", 1.34, 1.21)])
    path = write_prices(tmp_path, d, [PriceRecord("Malta", "MT", 1.35, 1.22)])
    assert json.loads(path.read_text(encoding="utf-8"))["2025-11-20"][0]["petrol"] == 1.35


def test_combine_merges_sorted_dates(tmp_path: Path):
    write_prices(tmp_path, BulletinDate(2025, 11, 20), [PriceRecord("Malta", "MT", 1.34, 1.21)])
    write_prices(tmp_path, BulletinDate(2025, 1, 9), [PriceRecord("Malta", "MT", 1.30, 1.20)])
    write_prices(tmp_path, BulletinDate(2024, 12, 26), [PriceRecord("Malta", "MT", 1.29, 1.19)])

    result = combine_price_files(tmp_path)
    assert result.destination == tmp_path / COMBINED_FILE_NAME
    assert (result.files_read, result.files_skipped, result.dates) == (3, 0, 3)
    combined = json.loads(result.destination.read_text(encoding="utf-8"))
    assert list(combined) == ["2024-12-26", "2025-01-09", "2025-11-20"]


def test_combine_skips_unreadable_files_and_own_output(tmp_path: Path):
    write_prices(tmp_path, BulletinDate(2025, 11, 20), [PriceRecord("Malta", "MT", 1.34, 1.21)])
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")

    first = combine_price_files(tmp_path)
    assert (first.files_read, first.files_skipped) == (1, 2)
    # a second run must not read the combined file back in
    second = combine_price_files(tmp_path)
    assert (second.files_read, second.files_skipped) == (1, 2)


def test_combine_empty_directory(tmp_path: Path):
    result = combine_price_files(tmp_path)
    assert result.dates == 0
    assert json.loads(result.destination.read_text(encoding="utf-8")) == {}
