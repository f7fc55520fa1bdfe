"""
Day-count and date parsing helpers.

Time to expiry is measured Act/365: the elapsed calendar time between the
valuation date and expiry divided by 365 days, floored at zero. Dates may
be plain `date` objects (whole days) or `datetime` objects (intraday
precision, naive or timezone-aware).
"""

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from warrant_pricer.utils.constants import DAYS_PER_YEAR, SECONDS_PER_DAY

DateLike = Union[date, datetime]

_GERMAN_DATE = re.compile(r"(\d{2})\.(\d{2})\.(\d{4})")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def _as_datetime(value: DateLike, reference: DateLike) -> datetime:
    """Promote a date to midnight, borrowing the tzinfo of `reference`."""
    if isinstance(value, datetime):
        return value
    tzinfo = reference.tzinfo if isinstance(reference, datetime) else None
    return datetime.combine(value, time(0, 0), tzinfo=tzinfo)


def _elapsed(start: DateLike, end: DateLike) -> timedelta:
    if isinstance(start, datetime) or isinstance(end, datetime):
        start_dt = _as_datetime(start, end)
        end_dt = _as_datetime(end, start)
        if (start_dt.tzinfo is None) != (end_dt.tzinfo is None):
            # Mixed naive/aware: compare wall-clock times
            start_dt = start_dt.replace(tzinfo=None)
            end_dt = end_dt.replace(tzinfo=None)
        return end_dt - start_dt
    return end - start


def year_fraction(start: DateLike, end: DateLike) -> float:
    """
    Act/365 year fraction between two dates, clamped at zero.

    Args:
        start: Valuation date (or timestamp)
        end: Expiry date (or timestamp)

    Returns:
        max(0, (end - start) / 365 days)

    Examples:
        >>> year_fraction(date(2026, 1, 1), date(2027, 1, 1))
        1.0
        >>> year_fraction(date(2026, 6, 1), date(2026, 1, 1))
        0.0
    """
    seconds = _elapsed(start, end).total_seconds()
    return max(0.0, seconds / (DAYS_PER_YEAR * SECONDS_PER_DAY))


def remaining_days(start: DateLike, end: DateLike) -> int:
    """
    Whole days from `start` until `end`, rounded up, never negative.

    Equivalent to ceil(year_fraction(start, end) * 365) but computed on the
    timedelta itself, so a span of exactly n days always yields n.
    """
    elapsed = _elapsed(start, end)
    if elapsed <= timedelta(0):
        return 0
    return math.ceil(elapsed / timedelta(days=1))


def parse_date(value: object) -> Optional[date]:
    """
    Parse a calendar date from the formats seen at the service boundary.

    Accepts `date`/`datetime` objects, ISO strings ("2026-06-18",
    "2026-06-18T00:00:00Z") and German strings ("18.06.2026", also when
    embedded in longer text).

    Returns:
        The parsed date, or None if the value is empty or unparseable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = _ISO_DATE.match(text)
    if match:
        year, month, day = match.groups()
    else:
        match = _GERMAN_DATE.search(text)
        if not match:
            return None
        day, month, year = match.groups()

    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None
