from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""PriceRecord: one country's petrol / diesel price from a bulletin."""

__all__ = [
    "PriceRecord",
    "MAX_COUNTRY_LENGTH",
]

# Longer "country" cells are footnotes / summary text, not country names.
MAX_COUNTRY_LENGTH = 50


@dataclass(frozen=True)
class PriceRecord:
    """Extracted price row.

    Attributes:
        country: trimmed country label as printed in the workbook
        country_code: ISO 3166-1 alpha-2 code, None when the name is unknown
        petrol: Euro-super 95 price, None when the cell is missing / unparseable
        diesel: automotive gas oil price, None when missing / unparseable
    """
    country: str
    country_code: str | None
    petrol: float | None
    diesel: float | None

    def to_dict(self) -> dict[str, Any]:
        """JSON shape consumed by the blog pipeline (camelCase keys)."""
        return {
            "country": self.country,
            "countryCode": self.country_code,
            "petrol": self.petrol,
            "diesel": self.diesel,
        }
