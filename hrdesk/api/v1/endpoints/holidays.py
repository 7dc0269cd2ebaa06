"""
Leave requests ("holidays") and per-employee leave balances.

Requests are created directly in ``approved`` status. Callers with the
``employee`` role may only create, edit or delete their own requests;
managers and admins may act for anyone.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_current_user, get_db
from hrdesk.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from hrdesk.models.employee import Employee
from hrdesk.models.holiday import Holiday
from hrdesk.models.user import User
from hrdesk.schemas.common import DeleteResponse
from hrdesk.schemas.holiday import HolidayCreate, HolidayRead, HolidayUpdate, LeaveSummary
from hrdesk.services.leave import APPROVED, calculate_leave_days, leave_balance, matches_period

router = APIRouter(prefix="/holidays", tags=["holidays"])
logger = logging.getLogger(__name__)


def _holiday_read(holiday: Holiday, first_name: str | None, last_name: str | None) -> HolidayRead:
    read = HolidayRead.model_validate(holiday)
    if first_name and last_name:
        read.employee_name = f"{first_name} {last_name}"
    return read


def _check_ownership(user: User, employee_id: int, action: str) -> None:
    if not user.is_privileged and employee_id != user.employee_id:
        raise PermissionDeniedError(f"Cannot {action} holidays for others")


async def _get_holiday(db: AsyncSession, holiday_id: int) -> Holiday:
    result = await db.execute(select(Holiday).where(Holiday.id == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise NotFoundError("Holiday not found")
    return holiday


async def _load(db: AsyncSession, holiday_id: int) -> HolidayRead:
    result = await db.execute(
        select(Holiday, Employee.first_name, Employee.last_name)
        .outerjoin(Employee, Holiday.employee_id == Employee.id)
        .where(Holiday.id == holiday_id)
    )
    return _holiday_read(*result.one())


@router.get("", response_model=list[HolidayRead])
async def list_holidays(
    employee_id: int | None = None,
    year: str | None = None,
    month: str | None = None,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[HolidayRead]:
    """List requests, newest first.

    ``employee_id`` narrows the query; ``year`` and ``month`` are matched
    against the start date afterwards.
    """
    query = (
        select(Holiday, Employee.first_name, Employee.last_name)
        .outerjoin(Employee, Holiday.employee_id == Employee.id)
        .order_by(Holiday.start_date.desc())
    )
    if employee_id is not None:
        query = query.where(Holiday.employee_id == employee_id)

    result = await db.execute(query)
    return [
        _holiday_read(holiday, first_name, last_name)
        for holiday, first_name, last_name in result.all()
        if matches_period(holiday, year, month)
    ]


@router.post("", response_model=HolidayRead, status_code=201)
async def create_holiday(
    body: HolidayCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HolidayRead:
    target_id = body.employee_id or current_user.employee_id
    if target_id is None:
        raise ValidationError("Employee, start date, and end date required")
    _check_ownership(current_user, target_id, "book")

    found = await db.execute(select(Employee.id).where(Employee.id == target_id))
    if found.scalar_one_or_none() is None:
        raise NotFoundError("Employee not found")

    holiday = Holiday(
        employee_id=target_id,
        start_date=body.start_date,
        end_date=body.end_date,
        days=await calculate_leave_days(db, body.start_date, body.end_date),
        type=body.type or "annual",
        notes=body.notes,
        status=APPROVED,
    )
    db.add(holiday)
    await db.commit()
    logger.info(
        "Booked holiday %d for employee %d: %s..%s (%d days)",
        holiday.id, target_id, holiday.start_date, holiday.end_date, holiday.days,
    )
    return await _load(db, holiday.id)


@router.put("/{holiday_id}", response_model=HolidayRead)
async def update_holiday(
    holiday_id: int,
    body: HolidayUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HolidayRead:
    holiday = await _get_holiday(db, holiday_id)
    _check_ownership(current_user, holiday.employee_id, "edit")

    changes = body.model_dump(exclude_unset=True)
    new_start = changes.pop("start_date", None) or holiday.start_date
    new_end = changes.pop("end_date", None) or holiday.end_date
    if new_start != holiday.start_date or new_end != holiday.end_date:
        holiday.start_date = new_start
        holiday.end_date = new_end
        holiday.days = await calculate_leave_days(db, new_start, new_end)

    for field, value in changes.items():
        # type and status are required columns; only notes may be cleared
        if value is None and field != "notes":
            continue
        setattr(holiday, field, value)

    await db.commit()
    logger.info("Updated holiday %d", holiday_id)
    return await _load(db, holiday_id)


@router.delete("/{holiday_id}", response_model=DeleteResponse)
async def delete_holiday(
    holiday_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DeleteResponse:
    holiday = await _get_holiday(db, holiday_id)
    _check_ownership(current_user, holiday.employee_id, "delete")

    await db.delete(holiday)
    await db.commit()
    logger.info("Deleted holiday %d", holiday_id)
    return DeleteResponse(success=True, message="Holiday deleted")


@router.get("/summary/{employee_id}", response_model=LeaveSummary)
async def holiday_summary(
    employee_id: int,
    year: int | None = None,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> LeaveSummary:
    """Allowance, approved annual days used and days remaining for a year."""
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")

    year = year or date.today().year
    requests = await db.execute(select(Holiday).where(Holiday.employee_id == employee_id))
    balance = leave_balance(employee.holiday_allowance, requests.scalars().all(), year)
    return LeaveSummary(
        employee_id=employee_id,
        year=year,
        allowance=balance.allowance,
        used=balance.used,
        remaining=balance.remaining,
    )
