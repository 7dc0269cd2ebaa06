"""
Time & attendance endpoints.

Per employee and date an entry goes: no entry → clock-in → open →
clock-out → closed. Self-service clock-in/out act on the caller's linked
employee; manual entries and deletions are for managers and admins.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_current_user, get_db, require_privileged
from hrdesk.core.exceptions import ConflictError, NotFoundError, ValidationError
from hrdesk.models.employee import Employee
from hrdesk.models.time_entry import TimeEntry
from hrdesk.models.user import User
from hrdesk.schemas.common import DeleteResponse
from hrdesk.schemas.timesheet import (
    ClockInResponse,
    ClockOutRequest,
    ClockOutResponse,
    ClosedTimeEntry,
    OpenTimeEntry,
    TimeEntryCreate,
    TimeEntryRead,
)
from hrdesk.services import timesheet as timesheet_service

router = APIRouter(prefix="/timesheet", tags=["timesheet"])
logger = logging.getLogger(__name__)


def _entry_read(
    entry: TimeEntry, first_name: str | None = None, last_name: str | None = None
) -> OpenTimeEntry | ClosedTimeEntry:
    fields = {
        "id": entry.id,
        "employee_id": entry.employee_id,
        "first_name": first_name,
        "last_name": last_name,
        "date": entry.date,
        "clock_in": entry.clock_in,
        "break_minutes": entry.break_minutes,
        "notes": entry.notes,
    }
    if entry.is_open:
        return OpenTimeEntry(**fields)
    return ClosedTimeEntry(
        **fields,
        clock_out=entry.clock_out,
        total_hours=entry.total_hours or 0.0,
        overtime_hours=entry.overtime_hours or 0.0,
    )


def _linked_employee_id(user: User) -> int:
    if user.employee_id is None:
        raise ValidationError("No employee profile linked to your account")
    return user.employee_id


async def _open_entry(db: AsyncSession, employee_id: int, day: date) -> TimeEntry | None:
    result = await db.execute(
        select(TimeEntry)
        .where(
            TimeEntry.employee_id == employee_id,
            TimeEntry.date == day,
            TimeEntry.clock_out.is_(None),
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _commit_open_entry(db: AsyncSession) -> None:
    """Commit, turning a lost race on the open-entry index into a conflict."""
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Already clocked in today")


@router.get("", response_model=list[TimeEntryRead])
async def list_time_entries(
    employee_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[OpenTimeEntry | ClosedTimeEntry]:
    """Entries newest first. Employees only ever see their own."""
    query = (
        select(TimeEntry, Employee.first_name, Employee.last_name)
        .outerjoin(Employee, TimeEntry.employee_id == Employee.id)
        .order_by(TimeEntry.date.desc(), TimeEntry.clock_in.desc())
    )
    if not current_user.is_privileged:
        if current_user.employee_id is None:
            return []
        query = query.where(TimeEntry.employee_id == current_user.employee_id)
    elif employee_id is not None:
        query = query.where(TimeEntry.employee_id == employee_id)

    if start_date is not None:
        query = query.where(TimeEntry.date >= start_date)
    if end_date is not None:
        query = query.where(TimeEntry.date <= end_date)

    result = await db.execute(query)
    return [_entry_read(*row) for row in result.all()]


@router.post("/clock-in", response_model=ClockInResponse, status_code=201)
async def clock_in(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ClockInResponse:
    employee_id = _linked_employee_id(current_user)
    today, now = timesheet_service.local_now()

    if await _open_entry(db, employee_id, today) is not None:
        raise ConflictError("Already clocked in today")

    entry = TimeEntry(employee_id=employee_id, date=today, clock_in=now)
    db.add(entry)
    await _commit_open_entry(db)
    logger.info("Employee %d clocked in at %s", employee_id, now)
    return ClockInResponse(id=entry.id, date=today, clock_in=now)


@router.post("/clock-out", response_model=ClockOutResponse)
async def clock_out(
    body: ClockOutRequest | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ClockOutResponse:
    employee_id = _linked_employee_id(current_user)
    today, now = timesheet_service.local_now()
    break_minutes = body.break_minutes if body else 0

    entry = await _open_entry(db, employee_id, today)
    if entry is None:
        raise ConflictError("No active clock-in found for today")

    total_hours, overtime_hours = timesheet_service.compute_hours(
        entry.clock_in, now, break_minutes
    )
    entry.clock_out = now
    entry.break_minutes = break_minutes
    entry.total_hours = total_hours
    entry.overtime_hours = overtime_hours
    await db.commit()
    logger.info("Employee %d clocked out at %s (%.2fh)", employee_id, now, total_hours)
    return ClockOutResponse(
        id=entry.id,
        clock_out=now,
        break_minutes=break_minutes,
        total_hours=total_hours,
        overtime_hours=overtime_hours,
    )


@router.post("", response_model=TimeEntryRead, status_code=201)
async def create_time_entry(
    body: TimeEntryCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_privileged),
) -> OpenTimeEntry | ClosedTimeEntry:
    """Manual entry; totals are computed when a clock-out is given."""
    result = await db.execute(select(Employee).where(Employee.id == body.employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")

    entry = TimeEntry(
        employee_id=body.employee_id,
        date=body.date,
        clock_in=body.clock_in,
        clock_out=body.clock_out,
        break_minutes=body.break_minutes,
        notes=body.notes,
    )
    if body.clock_out:
        entry.total_hours, entry.overtime_hours = timesheet_service.compute_hours(
            body.clock_in, body.clock_out, body.break_minutes
        )
    elif await _open_entry(db, body.employee_id, body.date) is not None:
        raise ConflictError("Employee already has an open entry for this date")

    db.add(entry)
    await _commit_open_entry(db)
    logger.info("Manual time entry %d for employee %d on %s", entry.id, entry.employee_id, entry.date)
    return _entry_read(entry, employee.first_name, employee.last_name)


@router.delete("/{entry_id}", response_model=DeleteResponse)
async def delete_time_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_privileged),
) -> DeleteResponse:
    result = await db.execute(select(TimeEntry).where(TimeEntry.id == entry_id))
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError("Time entry not found")

    await db.delete(entry)
    await db.commit()
    logger.info("Deleted time entry %d", entry_id)
    return DeleteResponse(success=True, message="Time entry deleted")
