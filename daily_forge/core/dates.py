"""
Calendar-date helpers.

Every period, streak and window computation works on timezone-naive calendar
dates. A datetime is rejected instead of truncated so a timestamp can never
leak across a timezone boundary into the date math.
"""

from datetime import date, datetime
from typing import Union

DATE_KEY_FORMAT = "%Y-%m-%d"


def parse_date_key(value: str) -> date:
    """
    Parses a `YYYY-MM-DD` key into a calendar date.

    Raises:
        ValueError: If the key is not a valid calendar date.
    """
    return datetime.strptime(value.strip(), DATE_KEY_FORMAT).date()


def to_calendar_date(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        raise TypeError("Expected a calendar date, got a datetime")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date_key(value)
    raise TypeError(f"Cannot interpret {value!r} as a calendar date")


def date_key(value: date) -> str:
    return value.strftime(DATE_KEY_FORMAT)
