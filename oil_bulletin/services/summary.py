from __future__ import annotations

from collections.abc import Sequence

from ..models.price_record import PriceRecord
from ..models.run_result import RunResult

"""SUMMARY line and sample rendering.

Format::

    SUMMARY sources=2 success=2 failed=0 countries=54 petrol=54 diesel=53 elapsed_sec=1.2
"""

__all__ = [
    "render_summary_line",
    "render_sample_lines",
    "format_seconds",
]


def format_seconds(value: float) -> str:
    """Integral values without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: RunResult) -> str:
    return (
        f"SUMMARY sources={result.total_sources} "
        f"success={result.success_sources} "
        f"failed={result.failed_sources} "
        f"countries={result.total_countries} "
        f"petrol={result.total_with_petrol} "
        f"diesel={result.total_with_diesel} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )


def _fmt_price(value: float | None) -> str:
    return "N/A" if value is None else f"{value:g}"


def render_sample_lines(records: Sequence[PriceRecord], limit: int = 5) -> list[str]:
    """One line per record for the first ``limit`` records."""
    return [
        f"{r.country}: 95 Petrol={_fmt_price(r.petrol)}, Diesel={_fmt_price(r.diesel)}"
        for r in records[:limit]
    ]
