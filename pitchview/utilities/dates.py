"""Match-date range helpers.

All ranges are computed from the local clock. Pass `today` explicitly to get
deterministic results.
"""

from datetime import date, timedelta

from pitchview.core import DateRange

SUNDAY = 6


def today_range(today: date | None = None) -> DateRange:
    """Range covering only today."""
    return DateRange.single(today or date.today())


def day_range(day: date | str) -> DateRange:
    """Range covering a single day.

    Args:
        day: date or ISO string (YYYY-MM-DD)
    """
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return DateRange.single(day)


def past_weekend_range(today: date | None = None) -> DateRange:
    """Saturday-Sunday range of the most recent weekend.

    On a Sunday this is the current weekend (yesterday and today). On any
    other day it is the last completed weekend. A Saturday therefore
    returns the weekend a week earlier, since the current one is still in
    progress.

    Examples:
        Wednesday 2024-05-15 -> 2024-05-11 .. 2024-05-12
        Sunday    2024-05-12 -> 2024-05-11 .. 2024-05-12
    """
    today = today or date.today()
    sunday = today - timedelta(days=(today.weekday() - SUNDAY) % 7)
    return DateRange(sunday - timedelta(days=1), sunday)
