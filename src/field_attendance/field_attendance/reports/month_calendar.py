from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

SUNDAY = 6


@dataclass(frozen=True)
class MonthCalendar:
    """Working days vs. holidays (Sundays plus holiday-table dates) for one month."""

    year: int
    month: int
    working_days: tuple[date, ...]
    holidays: tuple[date, ...]

    @classmethod
    def build(cls, year: int, month: int, holiday_dates: Iterable[date] = ()) -> "MonthCalendar":
        if not 1 <= month <= 12:
            raise ValueError(f"month out of range: {month}")
        extra = set(holiday_dates)
        working: list[date] = []
        off: list[date] = []
        for day in month_days(year, month):
            if day.weekday() == SUNDAY or day in extra:
                off.append(day)
            else:
                working.append(day)
        return cls(year=year, month=month, working_days=tuple(working), holidays=tuple(off))

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, _calendar.monthrange(self.year, self.month)[1])

    @property
    def length(self) -> int:
        return _calendar.monthrange(self.year, self.month)[1]

    def clip(self, start: date, end: date) -> list[date]:
        """Days of [start, end] inside this month, holidays excluded."""
        lo = max(start, self.first_day)
        hi = min(end, self.last_day)
        off = set(self.holidays)
        out: list[date] = []
        day = lo
        while day <= hi:
            if day not in off:
                out.append(day)
            day += timedelta(days=1)
        return out


def month_days(year: int, month: int) -> list[date]:
    last = _calendar.monthrange(year, month)[1]
    return [date(year, month, d) for d in range(1, last + 1)]
