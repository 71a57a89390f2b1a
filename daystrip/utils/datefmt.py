"""Day formatting utilities.

Provides the three-line label used by date items (weekday, day number, month)
plus calendar-day helpers shared by the timeline model and the controller.
"""

from __future__ import annotations

from datetime import date, datetime


def as_day(value: date | datetime) -> date:
    """Truncate a datetime to its calendar day; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def same_day(a: date | datetime | None, b: date | datetime | None) -> bool:
    if a is None or b is None:
        return False
    return as_day(a) == as_day(b)


def format_day_label(value: date | datetime) -> tuple[str, str, str]:
    """Return ``(weekday, day, month)`` e.g. ``("Mon", "19", "Oct")``.

    Day number has no leading zero. Names use fixed English abbreviations so
    labels do not depend on the process locale.
    """
    d = as_day(value)
    weekday = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")[d.weekday()]
    month = (
        "Jan",
        "Feb",
        "Mar",
        "Apr",
        "May",
        "Jun",
        "Jul",
        "Aug",
        "Sep",
        "Oct",
        "Nov",
        "Dec",
    )[d.month - 1]
    return weekday, str(d.day), month


def format_iso_day(value: date | datetime | None) -> str:
    """yyyy-MM-dd for status text; ``--`` when no day is given."""
    if value is None:
        return "--"
    return as_day(value).isoformat()


__all__ = ["as_day", "same_day", "format_day_label", "format_iso_day"]
