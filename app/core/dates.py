import math
from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def parse_date(value: Union[str, DateLike]) -> date:
    """Accepts a date, a datetime or an ISO string (anything after 'T' is ignored)."""
    if isinstance(value, str):
        return datetime.strptime(value.split('T')[0], "%Y-%m-%d").date()
    return _as_date(value)


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole days from start to end, rounded up. Negative if end is before start."""
    if isinstance(start, datetime) and isinstance(end, datetime):
        return math.ceil((end - start).total_seconds() / 86400)
    return (_as_date(end) - _as_date(start)).days


def calculate_delivery_date(start: DateLike, days_from_start: float) -> date:
    """Start date plus the given number of days, rounded up."""
    return _as_date(start) + timedelta(days=math.ceil(days_from_start))


def calculate_working_days(start: DateLike, end: DateLike) -> int:
    """
    Days between start and end minus the weekend days in the inclusive span.
    Returns 0 when start is after end.
    """
    start, end = _as_date(start), _as_date(end)
    if start > end:
        return 0

    total_days = (end - start).days
    weekends = 0
    current_date = start
    while current_date <= end:
        # Saturday=5, Sunday=6
        if current_date.weekday() >= 5:
            weekends += 1
        current_date += timedelta(days=1)
    return total_days - weekends


def calculate_days_from_now(target: DateLike, today: Optional[date] = None) -> int:
    return days_between(today or date.today(), target)


def format_date(value: DateLike) -> str:
    """Long form, e.g. 'Friday, March 7, 2025'."""
    d = _as_date(value)
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}, {d.year}"
