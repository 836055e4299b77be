"""
Date utilities for the Retroplan application.

All stored dates are calendar dates (no time component) rendered as YYYY-MM-DD.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from retroplan.constants import (
    DATE_FORMATS,
    EMPTY_PLAN_SPAN_MONTHS,
    RANGE_PAD_AFTER_DAYS,
    RANGE_PAD_BEFORE_DAYS,
)

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """
    Coerce a date, datetime or YYYY-MM-DD string to a calendar date.

    Raises:
        ValueError: If a string value is not a valid ISO date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def parse_date(date_string: str) -> Optional[date]:
    """
    Parse a date string using multiple supported formats.

    Args:
        date_string: The date string to parse.

    Returns:
        A date object if parsing succeeds, None otherwise.

    Examples:
        >>> parse_date("2025-12-31")  # ISO 8601
        >>> parse_date("31/12/2025")  # DD/MM/YYYY
        >>> parse_date("31 December 2025")  # DD Month YYYY
    """
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_string.strip(), fmt).date()
        except ValueError:
            continue
    return None


def format_date(value: DateLike) -> str:
    """
    Format a date to the canonical YYYY-MM-DD representation.

    Args:
        value: The date (or datetime) to format.

    Returns:
        A string in YYYY-MM-DD format.
    """
    return to_date(value).strftime("%Y-%m-%d")


def is_same_day(a: DateLike, b: DateLike) -> bool:
    """Return True if both values fall on the same calendar day."""
    return to_date(a) == to_date(b)


def is_weekend(day: date) -> bool:
    """Return True for Saturday and Sunday."""
    return day.weekday() >= 5


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def add_months(day: date, months: int) -> date:
    """
    Shift a date by whole months, clamping to the last day of the target month.

    Examples:
        >>> add_months(date(2025, 11, 30), 3)
        datetime.date(2026, 2, 28)
    """
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def add_years(day: date, years: int) -> date:
    """Shift a date by whole years; Feb 29 becomes Feb 28 in non-leap years."""
    return add_months(day, years * 12)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end precedes start)."""
    return (end - start).days


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_start(day: date) -> date:
    """Return the Monday on or before the given day."""
    return day - timedelta(days=day.weekday())


def weeks_between(start: date, end: date) -> List[date]:
    """
    Build the ordered Monday-aligned week starts covering [start, end].

    The first week returned is the Monday on or before ``start``; every
    following entry is seven days later, up to and including the last
    Monday not after ``end``.
    """
    weeks = []
    current = week_start(start)
    while current <= end:
        weeks.append(current)
        current += timedelta(days=7)
    return weeks


def iso_week_number(day: date) -> int:
    """
    ISO-8601 week number of a date.

    The date is shifted to the Thursday of its (Monday-based) week; the week
    number is the count of whole weeks between that Thursday's January 1st
    and the Thursday itself, plus one.
    """
    day = to_date(day)
    thursday = day + timedelta(days=3 - day.weekday())
    year_start = date(thursday.year, 1, 1)
    return (thursday - year_start).days // 7 + 1


def plan_range(phases: Sequence, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Infer the padded date range of a plan.

    Args:
        phases: Phases of the plan (anything with start_date/end_date).
        today: Reference day for empty plans. Defaults to date.today().

    Returns:
        (start, end). For an empty plan this is today to today + 3 months;
        otherwise one week before the earliest start to two weeks after the
        latest end.
    """
    if not phases:
        start = today or date.today()
        return start, add_months(start, EMPTY_PLAN_SPAN_MONTHS)

    earliest = min(to_date(p.start_date) for p in phases)
    latest = max(to_date(p.end_date) for p in phases)
    return (
        earliest - timedelta(days=RANGE_PAD_BEFORE_DAYS),
        latest + timedelta(days=RANGE_PAD_AFTER_DAYS),
    )
