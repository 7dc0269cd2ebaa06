"""
Leave-request arithmetic: request length and yearly balance.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.models.holiday import Holiday
from hrdesk.services.workdays import count_working_days
from hrdesk.services.public_holidays import get_holiday_dates

ANNUAL_LEAVE = "annual"
APPROVED = "approved"


@dataclass(frozen=True)
class LeaveBalance:
    allowance: int
    used: int
    remaining: int


async def calculate_leave_days(db: AsyncSession, start: date, end: date) -> int:
    """Working days in the request, excluding weekends and public holidays."""
    excluded = await get_holiday_dates(db)
    return count_working_days(start, end, excluded)


def leave_balance(allowance: int, requests: Iterable[Holiday], year: int) -> LeaveBalance:
    """Allowance minus approved annual leave starting in *year*.

    The remainder may go negative; over-booking is reported, not refused.
    """
    used = sum(
        r.days
        for r in requests
        if r.status == APPROVED and r.type == ANNUAL_LEAVE and r.start_date.year == year
    )
    return LeaveBalance(allowance=allowance, used=used, remaining=allowance - used)


def matches_period(request: Holiday, year: str | None = None, month: str | None = None) -> bool:
    """List filter on the request's start date.

    Both values are compared as strings: the year as written, the month
    zero-padded to two digits on each side.
    """
    if year and str(request.start_date.year) != year:
        return False
    if month and f"{request.start_date.month:02d}" != month.zfill(2):
        return False
    return True
