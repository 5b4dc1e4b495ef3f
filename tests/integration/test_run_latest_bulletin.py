from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from oil_bulletin.cli import main as cli_main

"""Default run (no --file): discover the workbook link, download, extract.

HTTP is mocked at the requests.Session level.
"""

PAGE = """
<html><body>
  <h2>Weekly Oil Bulletin</h2>
  <a href="/document/download/264c2d0f_en?filename=Oil_Bulletin_Prices_History.xlsx">Price history</a>
  <a href="/document/download/906e60ca_en?filename=Weekly_Oil_Bulletin_Prices_with_taxes.xlsx">
    Weekly Oil Bulletin - Prices with taxes
  </a>
</body></html>
"""


def _fake_session(page_html: str, workbook: Path) -> MagicMock:
    session = MagicMock()

    def get(url, timeout=None, stream=False):
        resp = MagicMock()
        resp.__enter__.return_value = resp
        resp.__exit__.return_value = False
        resp.raise_for_status.return_value = None
        if stream:
            resp.iter_content.return_value = [workbook.read_bytes()]
        else:
            resp.text = page_html
        return resp

    session.get.side_effect = get
    return session


def test_latest_bulletin_run(temp_workdir: Path, fresh_logging, make_workbook, bulletin_rows, capsys, monkeypatch):
    xlsx = make_workbook(temp_workdir / "served.xlsx", bulletin_rows)
    session = _fake_session(PAGE, xlsx)
    monkeypatch.setenv("OIL_BULLETIN_PAGE_URL", "https://energy.example.eu/weekly-oil-bulletin")

    with patch("oil_bulletin.services.bulletin_fetcher.requests.Session", return_value=session):
        code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    page_call, download_call = session.get.call_args_list
    session.close.assert_called_once()
    assert page_call.args[0] == "https://energy.example.eu/weekly-oil-bulletin"
    assert download_call.args[0] == (
        "https://energy.ec.europa.eu/document/download/906e60ca_en"
        "?filename=Weekly_Oil_Bulletin_Prices_with_taxes.xlsx"
    )
    assert "INFO Fetching latest bulletin from: https://energy.example.eu/weekly-oil-bulletin" in out
    out_file = temp_workdir / "data" / "2025" / "11.November" / "2025-11-20.json"
    assert len(json.loads(out_file.read_text(encoding="utf-8"))["2025-11-20"]) == 4


def test_latest_bulletin_page_down(temp_workdir: Path, fresh_logging, capsys):
    import requests

    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("connection refused")
    with patch("oil_bulletin.services.bulletin_fetcher.requests.Session", return_value=session):
        code = cli_main([])
    out = capsys.readouterr().out

    assert code == 2
    assert "ERROR fetch:" in out
    assert "SUMMARY sources=1 success=0 failed=1" in out
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    rec = json.loads(logs[0].read_text(encoding="utf-8"))
    assert rec["error_type"] == "FETCH_FAILED"
