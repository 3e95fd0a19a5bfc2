"""Business-day calendar arithmetic.

Working days are Monday through Friday. There is no holiday calendar.
"""

import math
from datetime import date, timedelta

DEFAULT_HOURS_PER_DAY = 8.0
SATURDAY = 5  # date.weekday() value; Sunday is 6


def is_working_day(day: date) -> bool:
    """Return True for Monday through Friday."""
    return day.weekday() < SATURDAY


def hours_to_days(hours: float, hours_per_day: float = DEFAULT_HOURS_PER_DAY) -> int:
    """Convert an effort estimate in hours to whole working days (rounded up).

    Args:
        hours: Effort in hours (0 yields a zero-duration task)
        hours_per_day: Hours of effort in one working day

    Returns:
        ceil(hours / hours_per_day)
    """
    if hours_per_day <= 0:
        raise ValueError(f"hours_per_day must be positive, got {hours_per_day}")
    return math.ceil(hours / hours_per_day)


def working_days_between(start: date, end: date) -> int:
    """Count working days in [start, end], both endpoints included."""
    count = 0
    current = start
    while current <= end:
        if is_working_day(current):
            count += 1
        current += timedelta(days=1)
    return count


def add_working_days(start: date, days: int) -> date:
    """Move ``days`` working days away from ``start``.

    Steps one calendar day at a time and counts only weekdays, so the result
    is always a weekday unless ``days`` is zero, in which case ``start`` is
    returned unchanged. Negative values step backwards.
    """
    step = timedelta(days=1 if days >= 0 else -1)
    remaining = abs(days)
    current = start
    while remaining > 0:
        current += step
        if is_working_day(current):
            remaining -= 1
    return current
