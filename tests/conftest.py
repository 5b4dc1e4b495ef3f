# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from oil_bulletin.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        for var in ("OIL_BULLETIN_PAGE_URL", "OIL_BULLETIN_OUTPUT_DIR"):
            monkeypatch.delenv(var, raising=False)
        yield p


@pytest.fixture()
def fresh_logging():
    # handler binds sys.stdout at setup time; rebuild it inside capsys
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """bulletin:
  base_url: https://energy.example.eu
  page_path: /weekly-oil-bulletin
  link_text: prices with taxes
output_directory: ./data
request_timeout: 5
keep_download: false
aggregate_markers:
  case_insensitive: [Durchschnitt]
  exact: [EU-27]
country_codes:
  Czech Rep.: CZ
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "oil_bulletin.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def bulletin_rows() -> list[list[object]]:
    """Layout of the EC export: title, date in A2, header on the third row."""
    return [
        ["Weekly Oil Bulletin - Prices with taxes", None, None],
        ["17/11/2025", None, None],
        ["Country", "Euro-super 95 (I)", "Automotive gas oil Dieselkraftstoff (I)"],
        ["Austria", 1538.0, 1529.0],
        ["Belgium", 1678.5, 1712.3],
        ["France", "n/a", 1660.0],
        ["Germany", 1745.2, 1681.9],
        ["EUR27 Moyenne pondérée Weighted average", 1702.2, 1650.4],
        ["Euro Area", 1710.0, 1655.0],
    ]


@pytest.fixture()
def make_workbook() -> Callable[..., Path]:
    def _make(path: Path, rows: list[list[object]], sheet: str = "Prices with taxes") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make
