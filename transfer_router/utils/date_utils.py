"""Date manipulation utilities

Business days are Monday through Friday with no holiday calendar. Functions
accept date or datetime values and evaluate the weekday in the value's own
frame, so callers convert to the working timezone first.
"""

from datetime import date, datetime, timedelta, timezone
from typing import TypeVar

DateLike = TypeVar("DateLike", date, datetime)


def is_business_day(day: date) -> bool:
    """Monday (0) through Friday (4)"""
    return day.weekday() < 5


def add_business_days(from_date: DateLike, days: int) -> DateLike:
    """
    Advance by `days` business days, skipping weekends.

    Time of day is preserved. Adding zero days returns the input unchanged,
    even when it falls on a weekend.
    """
    if days < 0:
        raise ValueError("Number of business days must be non-negative")

    result = from_date
    remaining = days
    while remaining > 0:
        result = result + timedelta(days=1)
        if is_business_day(result):
            remaining -= 1
    return result


def get_next_business_day(day: DateLike) -> DateLike:
    """First business day strictly after `day`"""
    result = day + timedelta(days=1)
    while not is_business_day(result):
        result = result + timedelta(days=1)
    return result


def ensure_aware(moment: datetime) -> datetime:
    """Interpret naive datetimes as UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
