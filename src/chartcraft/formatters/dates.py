"""Date-bucket parsing and label formatting.

Date indexes are parsed with a fixed mid-day anchor so that converting to
an instant can never move the bucket across a day boundary.
"""

import logging
from datetime import date, datetime, time

logger = logging.getLogger(__name__)

__all__ = [
    "format_category_date",
    "format_date_label",
    "parse_date_index",
    "to_chart_date",
]

_NOON = time(12, 0, 0)

MONTH_START_FREQUENCIES = frozenset({"monthly", "quarterly"})


def parse_date_index(date_index: str) -> datetime:
    """Parse a date-bucket string anchored at 12:00.

    Args:
        date_index: Date string in YYYY-MM-DD form; a longer ISO datetime
            string is accepted and truncated to its date part.

    Returns:
        Naive datetime at noon on the bucket's calendar day.

    Raises:
        ValueError: If the string does not start with a valid date.
    """
    try:
        day = date.fromisoformat(date_index.strip()[:10])
    except (AttributeError, ValueError) as e:
        msg = f"Invalid date index: {date_index!r}"
        raise ValueError(msg) from e
    return datetime.combine(day, _NOON)


def to_chart_date(date_index: str, frequency: str | None) -> date:
    """Convert a date bucket to the date plotted on a time axis.

    Weekly and daily buckets keep their actual day; monthly and quarterly
    buckets are normalized to the first of the month.
    """
    day = parse_date_index(date_index).date()
    if frequency and frequency.lower() in MONTH_START_FREQUENCIES:
        return day.replace(day=1)
    return day


def format_category_date(date_index: str) -> str:
    """Format a date bucket as an MM-DD-YYYY category label."""
    return parse_date_index(date_index).strftime("%m-%d-%Y")


def format_date_label(date_index: str, frequency: str | None) -> str:
    """Format a date bucket for display according to its frequency.

    Args:
        date_index: Date string in YYYY-MM-DD form.
        frequency: Weekly, Monthly, Quarterly or Daily (case-insensitive).

    Returns:
        "Jan 2024" for monthly, "Q1 2024" for quarterly, "Jan 5, 2024" for
        weekly and "01-05-2024" for anything else.
    """
    parsed = parse_date_index(date_index)
    freq = (frequency or "").lower()

    if freq == "monthly":
        return parsed.strftime("%b %Y")
    if freq == "quarterly":
        quarter = (parsed.month - 1) // 3 + 1
        return f"Q{quarter} {parsed.year}"
    if freq == "weekly":
        return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"

    if freq and freq != "daily":
        logger.debug("Unknown frequency %s, using numeric date label", frequency)
    return parsed.strftime("%m-%d-%Y")
