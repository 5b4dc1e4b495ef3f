from __future__ import annotations

from pathlib import Path

from oil_bulletin.cli import main as cli_main

"""Exit code contract: 0 all sources ok, 1 fatal startup error, 2 some source failed."""


def test_exit_code_fatal_missing_config(temp_workdir: Path, fresh_logging, capsys):
    code = cli_main(["--config", str(temp_workdir / "config" / "missing.yml")])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_fatal_invalid_config(temp_workdir: Path, fresh_logging, capsys):
    (temp_workdir / "config" / "oil_bulletin.yml").write_text("request_timeout: -1\n", encoding="utf-8")
    code = cli_main([])
    assert code == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_exit_code_all_success(temp_workdir: Path, write_config, fresh_logging, make_workbook, bulletin_rows):
    xlsx = make_workbook(temp_workdir / "b.xlsx", bulletin_rows)
    assert cli_main(["--file", str(xlsx)]) == 0


def test_exit_code_partial_failure(temp_workdir: Path, write_config, fresh_logging, make_workbook, bulletin_rows, capsys):
    good = make_workbook(temp_workdir / "good.xlsx", bulletin_rows)
    empty = make_workbook(temp_workdir / "empty.xlsx", [["no prices here"]])
    code = cli_main(["--file", str(good), str(empty)])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR extract: no price rows found in empty.xlsx" in out


def test_exit_code_inspect_requires_file(temp_workdir: Path, fresh_logging, capsys):
    assert cli_main(["--inspect-data"]) == 1
    assert "--file is required" in capsys.readouterr().out
