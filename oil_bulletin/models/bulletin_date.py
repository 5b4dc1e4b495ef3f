from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

"""BulletinDate: the reference date of a Weekly Oil Bulletin.

The Commission publishes prices "as of Monday"; the blog files them under the
Thursday of the same week, so the extracted date is normalized with
``thursday_of_same_week()`` before being used as an output key.
"""

__all__ = [
    "BulletinDate",
]


@dataclass(frozen=True)
class BulletinDate:
    year: int
    month: int
    day: int

    @classmethod
    def from_date(cls, value: date) -> BulletinDate:
        return cls(year=value.year, month=value.month, day=value.day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def date_string(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    def thursday_of_same_week(self) -> BulletinDate:
        """Thursday of the Monday-based week containing this date.

        Sunday belongs to the week that started the Monday before, so it maps
        back to the previous Thursday.
        """
        d = self.to_date()
        return BulletinDate.from_date(d + timedelta(days=3 - d.weekday()))
