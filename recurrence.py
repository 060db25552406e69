"""Recurrence engine for MemoryKeeper.

Pure date arithmetic over origin dates: next occurrence, days until it,
elapsed years and display helpers. No external state.

All dates are naive calendar dates. "today" defaults to the local date.
"""

import calendar
from datetime import date
from typing import Optional

from config import settings
from schemas import Category, Record

_CATEGORY_LABELS = {
    Category.BIRTHDAY: "生日",
    Category.ANNIVERSARY: "纪念日",
    Category.OTHER: "其他",
}


def _resolve_today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def occurrence_in_year(origin_date: date, year: int) -> date:
    """Return the occurrence of ``origin_date``'s month/day in ``year``.

    Feb 29 falls on Mar 1 in non-leap years.
    """
    if origin_date.month == 2 and origin_date.day == 29 and not calendar.isleap(year):
        return date(year, 3, 1)
    return origin_date.replace(year=year)


def next_occurrence(origin_date: date, today: Optional[date] = None) -> date:
    """Return the next date on which ``origin_date`` recurs.

    An occurrence falling on ``today`` counts as the next one.
    """
    today = _resolve_today(today)
    candidate = occurrence_in_year(origin_date, today.year)
    if candidate < today:
        candidate = occurrence_in_year(origin_date, today.year + 1)
    return candidate


def days_until_next_occurrence(origin_date: date, today: Optional[date] = None) -> int:
    """Number of whole days from ``today`` to the next occurrence.

    Args:
        origin_date: Origin date; only month and day matter here
        today: Reference date (default: local date)

    Returns:
        int: 0 when the occurrence is today, otherwise 1..365
    """
    today = _resolve_today(today)
    return (next_occurrence(origin_date, today) - today).days


def elapsed_years(origin_date: date, today: Optional[date] = None) -> int:
    """Return ``today.year - origin_date.year``.

    Not adjusted for whether this year's occurrence has happened yet.
    """
    return _resolve_today(today).year - origin_date.year


def format_month_day(origin_date: date) -> str:
    """Render the recurring part of a date, e.g. ``05月20日``."""
    return f"{origin_date.month:02d}月{origin_date.day:02d}日"


def category_label(category) -> str:
    """Localized label for a category; unknown values render as 事件."""
    try:
        return _CATEGORY_LABELS[Category(category)]
    except (KeyError, ValueError):
        return "事件"


def age_caption(record: Record, today: Optional[date] = None) -> str:
    """Subtitle suffix shown for a record: age for birthdays, years for anniversaries."""
    years = elapsed_years(record.origin_date, today)
    if record.category == Category.BIRTHDAY:
        return f"{years}岁"
    if record.category == Category.ANNIVERSARY:
        return f"{years}周年"
    return ""


def is_urgent(days_until: int) -> bool:
    return days_until <= settings.URGENT_DAYS
