"""
Working-day arithmetic over inclusive date ranges.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator
from datetime import date, timedelta

# date.weekday(): Monday == 0 ... Sunday == 6
_WEEKEND = {5, 6}


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from *start* to *end* inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_working_day(day: date, excluded: Collection[str]) -> bool:
    return day.weekday() not in _WEEKEND and day.isoformat() not in excluded


def count_working_days(start: date, end: date, excluded: Collection[str] = ()) -> int:
    """Count Monday–Friday days in ``[start, end]`` that are not in *excluded*.

    *excluded* holds ISO ``YYYY-MM-DD`` strings (the public-holiday list).
    A range whose start lies after its end is empty and yields 0.
    """
    return sum(1 for day in iter_days(start, end) if is_working_day(day, excluded))
