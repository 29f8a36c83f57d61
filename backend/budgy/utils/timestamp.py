"""Timestamp and calendar-month utilities."""
import calendar
from datetime import date, datetime, time
from typing import Tuple, Union


def to_local(dt: datetime) -> datetime:
    """
    Express a timestamp as a naive local-time datetime.

    Aware timestamps are converted to the machine's local timezone; naive ones
    are assumed to already be local.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def month_start(value: Union[date, datetime]) -> date:
    """Return the first day of the month containing ``value``."""
    return date(value.year, value.month, 1)


def month_bounds(month: date) -> Tuple[datetime, datetime]:
    """
    First instant and last instant (end of day, inclusive) of a calendar month.

    Args:
        month: Any date inside the month

    Returns:
        (start, end) as naive local datetimes
    """
    last_day = calendar.monthrange(month.year, month.month)[1]
    start = datetime.combine(date(month.year, month.month, 1), time.min)
    end = datetime.combine(date(month.year, month.month, last_day), time.max)
    return start, end


def shift_month(month: date, step: int) -> date:
    """Move ``step`` calendar months forward (negative for backward), landing on day 1."""
    index = month.year * 12 + (month.month - 1) + step
    return date(index // 12, index % 12 + 1, 1)


def parse_month(s: str) -> date:
    """
    Parse a "YYYY-MM" (or full ISO date) string into the first day of that month.

    Raises:
        ValueError: If the string is not a month
    """
    s = s.strip()
    try:
        if len(s) == 7:
            year, month = s.split("-")
            return date(int(year), int(month), 1)
        return month_start(date.fromisoformat(s[:10]))
    except ValueError:
        raise ValueError(f"Unable to parse month: {s}. Expected format 'YYYY-MM'")
