from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

"""Run result models: per-source statistics and the aggregated run summary."""

__all__ = [
    "SourceStatus",
    "BulletinStat",
    "RunResult",
]


class SourceStatus(Enum):
    """Outcome of one bulletin source."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class BulletinStat:
    """Statistics for one processed bulletin source (URL or local workbook)."""
    source: str
    status: SourceStatus
    date_string: str | None = None  # normalized (Thursday) bulletin date
    countries: int = 0
    with_petrol: int = 0
    with_diesel: int = 0
    elapsed_seconds: float = 0.0
    output_path: Path | None = None
    error: str | None = None


@dataclass(frozen=True)
class RunResult:
    """Aggregated results for one CLI run."""
    success_sources: int
    failed_sources: int
    total_countries: int
    total_with_petrol: int
    total_with_diesel: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    source_stats: list[BulletinStat] | None = None

    @property
    def total_sources(self) -> int:
        return self.success_sources + self.failed_sources
