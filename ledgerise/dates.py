"""Date utilities for ledgerise.

Pure functions for calendar-month arithmetic and the editable window. Nothing
here reads the clock: callers pass "today" in.
"""

from datetime import date, datetime

from ledgerise.domain.models import Month

# How many calendar months ahead of the current one may still be edited
MAX_FUTURE_MONTHS = 12


def month_index(year: int, month: int) -> int:
    """Comparable key for a calendar month (year * 12 + month)."""
    return year * 12 + month


def current_month(today: date) -> tuple[int, int]:
    """Return (year, month) for the given day."""
    return today.year, today.month


def is_editable_month(year: int, month: int, today: date) -> bool:
    """Check whether a month falls inside the editable window.

    A month is editable when it is not before the current calendar month and
    starts no more than MAX_FUTURE_MONTHS months after it.

    Args:
        year: Four digit year.
        month: Month number (1-12).
        today: The current day.

    Returns:
        True if the month may still be changed.
    """
    offset = month_index(year, month) - month_index(*current_month(today))
    return 0 <= offset <= MAX_FUTURE_MONTHS


def parse_month(month: Month) -> tuple[int, int]:
    """Parse a YYYY-MM string.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (year, month).

    Raises:
        ValueError: If the string is not a valid YYYY-MM month.
    """
    dt = datetime.strptime(month, "%Y-%m")
    return dt.year, dt.month


def format_month(year: int, month: int) -> Month:
    """Format a (year, month) pair as YYYY-MM."""
    return Month(f"{year:04d}-{month:02d}")


def month_label(year: int, month: int) -> str:
    """Human-readable month (e.g., "January 2025")."""
    return date(year, month, 1).strftime("%B %Y")
