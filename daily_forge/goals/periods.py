from dataclasses import dataclass
from datetime import date, timedelta
from typing import Union

from daily_forge.core.dates import to_calendar_date


@dataclass(frozen=True)
class PeriodWindows:
    """Week (Monday to Sunday) and month windows containing a reference date."""

    week_start: date
    week_end: date
    month_start: date
    month_end: date

    def in_week(self, day: date) -> bool:
        return self.week_start <= day <= self.week_end

    def in_month(self, day: date) -> bool:
        return self.month_start <= day <= self.month_end


def windows_for(reference_date: Union[date, str]) -> PeriodWindows:
    """
    Computes the canonical week and month windows for a reference date.

    Args:
        reference_date (date | str): Calendar date or `YYYY-MM-DD` key.

    Returns:
        PeriodWindows: Inclusive week and month bounds.
    """
    day = to_calendar_date(reference_date)

    week_start = day - timedelta(days=day.weekday())  # weekday(): Monday == 0
    week_end = week_start + timedelta(days=6)

    month_start = day.replace(day=1)
    next_month = (month_start + timedelta(days=32)).replace(day=1)
    month_end = next_month - timedelta(days=1)

    return PeriodWindows(
        week_start=week_start,
        week_end=week_end,
        month_start=month_start,
        month_end=month_end,
    )
