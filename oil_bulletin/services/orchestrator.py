from __future__ import annotations

import logging
import tempfile
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import requests

from ..config.loader import AppConfig
from ..excel.reader import WorkbookReadError, extract_bulletin_date, read_workbook
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.bulletin_date import BulletinDate
from ..models.price_record import PriceRecord
from ..models.run_result import BulletinStat, RunResult, SourceStatus
from .bulletin_fetcher import FetchError, download_file, get_latest_workbook_url
from .country_codes import get_country_code
from .output_writer import write_prices
from .price_extractor import DEFAULT_AGGREGATE_MARKERS, AggregateMarkers, extract_prices
from .progress import ProgressTracker
from .summary import render_sample_lines

"""Run orchestration.

One bulletin source is processed as: read workbook -> bulletin date (A2) ->
Thursday of that week -> extract prices -> write dated JSON.

``process_all`` runs either the given local workbooks or, with none given,
the latest workbook from the bulletin page (downloaded to a temporary file).
A failing source is logged, recorded in the error log and counted; the run
carries on with the next one.
"""

__all__ = [
    "ProcessingError",
    "BulletinOutcome",
    "process_workbook",
    "process_all",
]

logger = logging.getLogger(__name__)

TEMP_WORKBOOK_NAME = "temp-oil-prices.xlsx"


class ProcessingError(Exception):
    """Raised when one bulletin source cannot be turned into a JSON file."""

    def __init__(self, message: str, *, stage: str, error_type: str) -> None:
        super().__init__(message)
        self.stage = stage
        self.error_type = error_type


@dataclass(frozen=True)
class BulletinOutcome:
    source: str
    bulletin_date: BulletinDate  # normalized to Thursday
    records: list[PriceRecord]
    output_path: Path

    @property
    def with_petrol(self) -> int:
        return sum(1 for r in self.records if r.petrol is not None)

    @property
    def with_diesel(self) -> int:
        return sum(1 for r in self.records if r.diesel is not None)


def _markers(config: AppConfig) -> AggregateMarkers:
    return DEFAULT_AGGREGATE_MARKERS.extended(config.aggregate_markers_ci, config.aggregate_markers_exact)


def process_workbook(path: Path, config: AppConfig, source: str | None = None) -> BulletinOutcome:
    """Turn one workbook into a dated JSON file.

    Raises:
        ProcessingError: unreadable workbook, no price rows, or write failure
    """
    source = source or str(path)
    try:
        document = read_workbook(path, sheet=config.sheet)
    except WorkbookReadError as e:
        raise ProcessingError(str(e), stage="read", error_type="READ_FAILED") from e

    extracted = extract_bulletin_date(document)
    bulletin_date = extracted.thursday_of_same_week()
    logger.info(f"bulletin date {extracted.date_string} -> Thursday {bulletin_date.date_string}")

    extra_codes = config.country_codes or None
    records = extract_prices(
        document,
        resolve_code=lambda name: get_country_code(name, extra_codes),
        markers=_markers(config),
    )
    if not records:
        raise ProcessingError(
            f"no price rows found in {path.name}", stage="extract", error_type="EMPTY_RESULT"
        )
    logger.info(f"extracted prices for {len(records)} countries from {path.name}")

    try:
        out = write_prices(Path(config.output_directory), bulletin_date, records)
    except OSError as e:
        raise ProcessingError(f"cannot write output: {e}", stage="write", error_type="WRITE_FAILED") from e
    logger.info(f"saved {out}")
    for line in render_sample_lines(records):
        logger.info(f"  {line}")
    return BulletinOutcome(source=source, bulletin_date=bulletin_date, records=records, output_path=out)


def _process_latest(config: AppConfig, session: requests.Session | None) -> BulletinOutcome:
    if session is None:
        own_session = requests.Session()
        try:
            return _process_latest(config, own_session)
        finally:
            own_session.close()
    try:
        url = get_latest_workbook_url(config.bulletin, timeout=config.request_timeout, session=session)
    except FetchError as e:
        raise ProcessingError(str(e), stage="fetch", error_type="FETCH_FAILED") from e
    logger.info(f"found workbook URL: {url}")

    tmp_dir = Path(tempfile.mkdtemp(prefix="oil-bulletin-"))
    tmp_file = tmp_dir / TEMP_WORKBOOK_NAME
    try:
        try:
            download_file(url, tmp_file, timeout=config.request_timeout, session=session)
        except FetchError as e:
            raise ProcessingError(str(e), stage="fetch", error_type="FETCH_FAILED") from e
        return process_workbook(tmp_file, config, source=url)
    finally:
        if config.keep_download and tmp_file.exists():
            logger.info(f"kept downloaded workbook: {tmp_file}")
        else:
            tmp_file.unlink(missing_ok=True)
            tmp_dir.rmdir()


def _stat_from_outcome(outcome: BulletinOutcome, elapsed: float) -> BulletinStat:
    return BulletinStat(
        source=outcome.source,
        status=SourceStatus.SUCCESS,
        date_string=outcome.bulletin_date.date_string,
        countries=len(outcome.records),
        with_petrol=outcome.with_petrol,
        with_diesel=outcome.with_diesel,
        elapsed_seconds=elapsed,
        output_path=outcome.output_path,
    )


def process_all(
    config: AppConfig,
    files: list[Path] | None = None,
    *,
    session: requests.Session | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> RunResult:
    """Process the given workbooks, or the latest published one when ``files`` is empty."""
    start = datetime.now(UTC)
    sources: list[Path | None] = list(files) if files else [None]
    stats: list[BulletinStat] = []

    with ProgressTracker(len(sources)) as progress:
        for path in sources:
            name = path.name if path is not None else config.bulletin.page_url
            progress.start_source(name)
            t0 = time.perf_counter()
            try:
                if path is None:
                    outcome = _process_latest(config, session)
                else:
                    outcome = process_workbook(path, config)
            except ProcessingError as e:
                elapsed = time.perf_counter() - t0
                source = str(path) if path is not None else config.bulletin.page_url
                logger.error(f"{e.stage}: {e}")
                if error_log is not None:
                    error_log.append(ErrorRecord.create(source, e.stage, e.error_type, str(e)))
                stats.append(BulletinStat(
                    source=source, status=SourceStatus.FAILED, elapsed_seconds=elapsed, error=str(e)
                ))
                progress.finish_source()
                continue
            stat = _stat_from_outcome(outcome, time.perf_counter() - t0)
            stats.append(stat)
            progress.finish_source(countries=stat.countries)

    end = datetime.now(UTC)
    ok = [s for s in stats if s.status is SourceStatus.SUCCESS]
    return RunResult(
        success_sources=len(ok),
        failed_sources=len(stats) - len(ok),
        total_countries=sum(s.countries for s in ok),
        total_with_petrol=sum(s.with_petrol for s in ok),
        total_with_diesel=sum(s.with_diesel for s in ok),
        start_time=start,
        end_time=end,
        elapsed_seconds=(end - start).total_seconds(),
        source_stats=stats,
    )
