"""
Dashboard counters and the health probe.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_current_user, get_db
from hrdesk.models.employee import Employee
from hrdesk.models.holiday import Holiday
from hrdesk.models.time_entry import TimeEntry
from hrdesk.models.user import User
from hrdesk.schemas.common import HealthResponse
from hrdesk.schemas.settings import DashboardStats
from hrdesk.services import timesheet as timesheet_service
from hrdesk.services.leave import APPROVED

router = APIRouter(tags=["dashboard"])
logger = logging.getLogger(__name__)


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> DashboardStats:
    """Active headcount, people on approved leave today, people clocked in now."""
    today, _ = timesheet_service.local_now()

    total_employees = await db.scalar(
        select(func.count(Employee.id)).where(Employee.status == "active")
    )
    on_holiday_today = await db.scalar(
        select(func.count(func.distinct(Holiday.employee_id))).where(
            Holiday.status == APPROVED,
            Holiday.start_date <= today,
            Holiday.end_date >= today,
        )
    )
    clocked_in_today = await db.scalar(
        select(func.count(func.distinct(TimeEntry.employee_id))).where(
            TimeEntry.date == today,
            TimeEntry.clock_out.is_(None),
        )
    )
    return DashboardStats(
        total_employees=total_employees or 0,
        on_holiday_today=on_holiday_today or 0,
        clocked_in_today=clocked_in_today or 0,
    )


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    try:
        await db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as exc:
        logger.warning("Health check: database unreachable: %s", exc)
        db_ok = False
    return HealthResponse(db=db_ok)
