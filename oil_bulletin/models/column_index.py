from __future__ import annotations

from dataclasses import dataclass

"""Resolved column positions for the three logical bulletin fields."""

__all__ = [
    "ColumnIndex",
]


@dataclass(frozen=True)
class ColumnIndex:
    country: int | None = None
    petrol: int | None = None
    diesel: int | None = None

    @property
    def is_resolved(self) -> bool:
        """True when the country column is known (indexed extraction path)."""
        return self.country is not None
