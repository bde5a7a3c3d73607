"""Business-day arithmetic on calendar dates.

Weekends (Saturday and Sunday) are the only non-working days; holiday
calendars are left to the caller. Every function works on the calendar
components of its input: ``datetime`` values are reduced to their ``date``
and time-of-day or tzinfo never influences the result.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError

DateLike = Union[date, datetime]

_WEEKEND = {5, 6}
_datetime_adapter: TypeAdapter[datetime] = TypeAdapter(datetime)


def as_date(day: DateLike) -> date:
    """Strip time-of-day information, keeping the calendar date."""

    if isinstance(day, datetime):
        return day.date()
    return day


def is_business_day(day: DateLike) -> bool:
    """Return True for Monday through Friday."""

    return as_date(day).weekday() not in _WEEKEND


def snap_to_business_day(day: DateLike) -> date:
    """Move a weekend date forward to the following Monday."""

    current = as_date(day)
    while not is_business_day(current):
        current += timedelta(days=1)
    return current


def add_business_days(day: DateLike, days: int) -> date:
    """Advance by ``days`` business days, skipping weekends.

    ``days == 0`` returns the date unchanged, even when it is a weekend.
    Negative values walk backwards the same way.
    """

    current = as_date(day)
    step = 1 if days >= 0 else -1
    remaining = abs(days)

    while remaining > 0:
        current += timedelta(days=step)
        if is_business_day(current):
            remaining -= 1
    return current


def business_days_between(start: DateLike, end: DateLike) -> int:
    """Signed number of business days in the half-open range ``(start, end]``.

    For business days ``a`` and ``b``,
    ``add_business_days(a, business_days_between(a, b)) == b``.
    """

    first = as_date(start)
    last = as_date(end)
    if last < first:
        return -business_days_between(last, first)

    total_days = (last - first).days
    full_weeks, extra = divmod(total_days, 7)
    count = full_weeks * 5
    current = first + timedelta(days=full_weeks * 7)
    for _ in range(extra):
        current += timedelta(days=1)
        if is_business_day(current):
            count += 1
    return count


def end_date_for(start: DateLike, duration: int) -> date:
    """Inclusive end date of work lasting ``duration`` business days."""

    return add_business_days(start, max(duration, 1) - 1)


def ensure_valid_date(
    value: Any,
    fallback: Optional[DateLike] = None,
    snap: bool = True,
) -> Optional[date]:
    """Coerce user input into a calendar date, never raising.

    Accepts ``date``/``datetime`` objects, ISO 8601 strings and Unix
    timestamps (seconds or milliseconds, following pydantic's lax datetime
    parsing). Anything else yields ``fallback``. With ``snap`` enabled the
    result is moved off weekends.
    """

    result: Optional[date]
    if value is None or isinstance(value, bool):
        result = None
    elif isinstance(value, (date, datetime)):
        result = as_date(value)
    else:
        if isinstance(value, str):
            value = value.strip()
        try:
            result = _datetime_adapter.validate_python(value).date()
        except ValidationError:
            result = None

    if result is None:
        result = as_date(fallback) if fallback is not None else None

    if result is not None and snap:
        result = snap_to_business_day(result)
    return result
