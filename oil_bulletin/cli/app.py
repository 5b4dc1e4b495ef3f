from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import AppConfig, ConfigError, load_config
from ..excel.reader import WorkbookReadError, extract_bulletin_date, read_workbook
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..services.output_writer import combine_price_files
from ..services.orchestrator import process_all
from ..services.price_extractor import locate_columns
from ..services.summary import render_summary_line

"""CLI entrypoint.

Default run: fetch the latest "prices with taxes" workbook from the bulletin
page, extract prices, write the dated JSON file, print a SUMMARY line.

    oil-bulletin                       # latest bulletin from the EC page
    oil-bulletin --file a.xlsx b.xlsx  # local workbooks instead
    oil-bulletin --combine             # merge all weekly JSON files
    oil-bulletin --inspect-data --file a.xlsx
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="oil-bulletin", description="EC Weekly Oil Bulletin price scraper")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: config/oil_bulletin.yml)")
    p.add_argument("--file", dest="files", type=Path, nargs="+", default=None,
                   help="Process local workbook(s) instead of downloading the latest bulletin")
    p.add_argument("--output-dir", type=Path, default=None, help="Override output_directory")
    p.add_argument("--combine", action="store_true", help="Merge all weekly JSON files and exit")
    p.add_argument("--inspect-data", action="store_true", help="Print resolved columns & first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect_data(cfg: AppConfig, files: list[Path]) -> int:
    if not files:
        print("inspect: --file is required with --inspect-data")
        return EXIT_FATAL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            document = read_workbook(f, sheet=cfg.sheet)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        max_row, max_col = document.bounding_range()
        columns = locate_columns(document)
        print(f"  SHEET: {document.sheet_name} rows={max_row + 1} cols={max_col + 1}")
        print(f"  date={extract_bulletin_date(document).date_string} "
              f"country={columns.country} petrol={columns.petrol} diesel={columns.diesel}")
        for r in range(min(5, max_row + 1)):
            print(f"    row {r}: {[c.as_text() for c in document.row(r)]}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # Only read sys.argv when no list is given (tests call main([]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.output_dir is not None:
        cfg = replace(cfg, output_directory=str(args.output_dir))

    if args.inspect_data:
        return _inspect_data(cfg, args.files or [])

    if args.combine:
        out_dir = Path(cfg.output_directory)
        if not out_dir.is_dir():
            logger.error(f"directory not found: {out_dir}")
            return EXIT_FATAL
        result = combine_price_files(out_dir)
        logger.info(f"combined {result.files_read} file(s) into {result.destination}")
        log_summary(f"files={result.files_read} skipped={result.files_skipped} dates={result.dates}")
        return EXIT_PARTIAL_FAILURE if result.files_skipped else EXIT_SUCCESS_ALL

    if args.files:
        logger.info(f"Processing {len(args.files)} local workbook(s)")
    else:
        logger.info(f"Fetching latest bulletin from: {cfg.bulletin.page_url}")

    error_log = ErrorLogBuffer()
    result = process_all(cfg, args.files, error_log=error_log)
    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    # render_summary_line includes the label; log_summary adds it again
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_sources > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
