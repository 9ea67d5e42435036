"""
Candidate date catalog: the weekend dates guests can respond to
"""

import calendar
from datetime import date
from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple, Union

from wedding_dates.core.config import settings
from wedding_dates.schemas.availability import CalendarMonth

# Friday, Saturday, Sunday (date.weekday() numbering)
CANDIDATE_WEEKDAYS = frozenset({4, 5, 6})

DateLike = Union[date, str]


def parse_month(value: str) -> Tuple[int, int]:
    """Parse a YYYY-MM string into (year, month)"""
    year_str, month_str = value.split("-")
    year, month = int(year_str), int(month_str)
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {value}")
    return year, month


def month_key(value: str) -> str:
    """YYYY-MM prefix of an ISO date string"""
    return value[:7]


class DateCatalog:
    """Enumerates and classifies candidate dates over a fixed span of months"""

    def __init__(self, months: Iterable[Tuple[int, int]]):
        self._months: Tuple[Tuple[int, int], ...] = tuple(sorted(set(months)))

    @classmethod
    def from_month_strings(cls, months: Sequence[str]) -> "DateCatalog":
        return cls(parse_month(m) for m in months)

    @property
    def span(self) -> Tuple[Tuple[int, int], ...]:
        return self._months

    def is_candidate_date(self, value: DateLike) -> bool:
        """True iff the date is inside the configured months and falls on Fri/Sat/Sun"""
        if isinstance(value, str):
            try:
                value = date.fromisoformat(value)
            except ValueError:
                return False
        return (value.year, value.month) in self._months and value.weekday() in CANDIDATE_WEEKDAYS

    def _month_dates(self, year: int, month: int) -> List[date]:
        days_in_month = calendar.monthrange(year, month)[1]
        return [
            date(year, month, day)
            for day in range(1, days_in_month + 1)
            if date(year, month, day).weekday() in CANDIDATE_WEEKDAYS
        ]

    def enumerate_candidate_dates(self) -> List[date]:
        """Every candidate date, ascending"""
        dates: List[date] = []
        for year, month in self._months:
            dates.extend(self._month_dates(year, month))
        return dates

    def candidate_iso_dates(self) -> List[str]:
        return [d.isoformat() for d in self.enumerate_candidate_dates()]

    def months(self) -> List[CalendarMonth]:
        """Configured months with display names, for rendering calendars"""
        return [
            CalendarMonth(
                name=f"{calendar.month_name[month]} {year}",
                year=year,
                month=month,
                dates=[d.isoformat() for d in self._month_dates(year, month)],
            )
            for year, month in self._months
        ]


@lru_cache(maxsize=1)
def get_date_catalog() -> DateCatalog:
    """Catalog built from settings.CANDIDATE_MONTHS"""
    return DateCatalog.from_month_strings(settings.CANDIDATE_MONTHS)
