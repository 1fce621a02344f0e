"""
Calendar-date helpers.

A workout date is a plain ``datetime.date`` (year, month, day). Every
conversion here works on those local fields directly; nothing is routed
through a UTC instant or ``.isoformat()`` of a datetime, which can move the
day by one for users east or west of UTC.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime

DATE_FORMAT_HINT = "YYYY-MM-DD"


def format_local(d: date) -> str:
    """Render a calendar date as ``YYYY-MM-DD`` from its own fields."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_local(value: str) -> date:
    """
    Parse ``YYYY-MM-DD`` into a date using the split fields.
    Raise ValueError for anything that is not a real calendar date.
    """
    bad = ValueError(f"date must be a {DATE_FORMAT_HINT} calendar date")
    if not isinstance(value, str):
        raise bad
    parts = value.strip().split("-")
    if len(parts) != 3 or [len(p) for p in parts] != [4, 2, 2]:
        raise bad
    if not all(p.isdigit() for p in parts):
        raise bad
    year, month, day = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError:
        raise bad from None


def to_calendar_date(value: date | datetime | str) -> date:
    """Normalise whatever crossed the boundary into a date-only value."""
    if isinstance(value, datetime):
        # the datetime's own wall-clock fields, whatever its tzinfo
        return date(value.year, value.month, value.day)
    if isinstance(value, date):
        return value
    return parse_local(value)


def month_bounds(year: int, month_index: int) -> tuple[date, date]:
    """First and last day (inclusive) of a month; ``month_index`` is zero-based."""
    if not 0 <= month_index <= 11:
        raise ValueError("month must be between 0 and 11")
    month = month_index + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def today_local() -> date:
    return datetime.now().date()
