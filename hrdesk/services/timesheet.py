"""
Clock-in / clock-out arithmetic.

Times are ``HH:MM`` 24-hour local strings. Overtime is anything beyond a
standard eight-hour day.
"""

from __future__ import annotations

from datetime import date, datetime

STANDARD_DAY_HOURS = 8
MINUTES_PER_DAY = 24 * 60


def local_now() -> tuple[date, str]:
    """Current local date and ``HH:MM`` time, at minute resolution."""
    now = datetime.now()
    return now.date(), now.strftime("%H:%M")


def minutes_of_day(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def compute_hours(clock_in: str, clock_out: str, break_minutes: int = 0) -> tuple[float, float]:
    """Return ``(total_hours, overtime_hours)`` for one closed entry.

    A clock-out earlier than the clock-in is an overnight shift and rolls
    over into the next day. A break longer than the worked span yields 0.
    """
    elapsed = minutes_of_day(clock_out) - minutes_of_day(clock_in)
    if elapsed < 0:
        elapsed += MINUTES_PER_DAY
    worked = max(0, elapsed - (break_minutes or 0))
    total_hours = round(worked / 60, 2)
    overtime_hours = round(max(0.0, total_hours - STANDARD_DAY_HOURS), 2)
    return total_hours, overtime_hours
