"""
Employee CRUD.

- GET operations require any authenticated user.
- POST / PUT require admin or manager.
- DELETE requires admin and removes the employee's leave requests and
  time entries with it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import delete as sa_delete
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_current_user, get_db, require_admin, require_privileged
from hrdesk.core.exceptions import ConflictError, NotFoundError
from hrdesk.models.department import Department
from hrdesk.models.employee import Employee
from hrdesk.models.holiday import Holiday
from hrdesk.models.time_entry import TimeEntry
from hrdesk.models.user import User
from hrdesk.schemas.common import DeleteResponse
from hrdesk.schemas.employee import EmployeeCreate, EmployeeRead, EmployeeUpdate

router = APIRouter(prefix="/employees", tags=["employees"])
logger = logging.getLogger(__name__)


def _employee_read(employee: Employee, department_name: str | None) -> EmployeeRead:
    read = EmployeeRead.model_validate(employee)
    read.department_name = department_name
    return read


def _employee_query():
    return select(Employee, Department.name).outerjoin(
        Department, Employee.department_id == Department.id
    )


async def _load(db: AsyncSession, employee_id: int) -> EmployeeRead:
    result = await db.execute(_employee_query().where(Employee.id == employee_id))
    row = result.first()
    if row is None:
        raise NotFoundError("Employee not found")
    return _employee_read(*row)


async def _check_unique(
    db: AsyncSession,
    email: str | None,
    employee_number: str | None,
    exclude_id: int | None = None,
) -> None:
    """Friendly duplicate check; the unique indexes stay authoritative."""
    if email:
        query = select(Employee.id).where(Employee.email == email)
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        if (await db.execute(query)).scalar_one_or_none() is not None:
            raise ConflictError("Email already exists")
    if employee_number:
        query = select(Employee.id).where(Employee.employee_number == employee_number)
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        if (await db.execute(query)).scalar_one_or_none() is not None:
            raise ConflictError("Employee number already exists")


async def _ensure_department_exists(db: AsyncSession, department_id: int | None) -> None:
    if department_id is None:
        return
    result = await db.execute(select(Department.id).where(Department.id == department_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Department not found")


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email or employee number already exists")


@router.get("", response_model=list[EmployeeRead])
async def list_employees(
    status: str | None = None,
    department_id: int | None = None,
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[EmployeeRead]:
    query = _employee_query().order_by(Employee.last_name, Employee.first_name)
    if status:
        query = query.where(Employee.status == status)
    if department_id is not None:
        query = query.where(Employee.department_id == department_id)
    if search:
        # Escape SQL LIKE metacharacters to prevent wildcard injection
        safe_search = search.replace("%", r"\%").replace("_", r"\_")
        pattern = f"%{safe_search}%"
        query = query.where(
            Employee.first_name.ilike(pattern, escape="\\")
            | Employee.last_name.ilike(pattern, escape="\\")
        )
    result = await db.execute(query)
    return [_employee_read(emp, dept_name) for emp, dept_name in result.all()]


@router.get("/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> EmployeeRead:
    return await _load(db, employee_id)


@router.post("", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_privileged),
) -> EmployeeRead:
    await _check_unique(db, body.email, body.employee_number)
    await _ensure_department_exists(db, body.department_id)

    employee = Employee(**body.model_dump())
    db.add(employee)
    await _commit(db)
    logger.info("Created employee %d (%s)", employee.id, employee.full_name)
    return await _load(db, employee.id)


@router.put("/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_privileged),
) -> EmployeeRead:
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")

    changes = body.model_dump(exclude_unset=True)
    # Required columns cannot be cleared through a partial update.
    for field in ("first_name", "last_name", "email", "holiday_allowance", "status"):
        if field in changes and changes[field] is None:
            del changes[field]

    await _check_unique(db, changes.get("email"), changes.get("employee_number"), employee_id)
    if "department_id" in changes:
        await _ensure_department_exists(db, changes["department_id"])

    for field, value in changes.items():
        setattr(employee, field, value)

    await _commit(db)
    logger.info("Updated employee %d", employee_id)
    return await _load(db, employee_id)


@router.delete("/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DeleteResponse:
    """Delete an employee together with their leave requests and time entries."""
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")

    await db.execute(sa_delete(Holiday).where(Holiday.employee_id == employee_id))
    await db.execute(sa_delete(TimeEntry).where(TimeEntry.employee_id == employee_id))
    await db.execute(
        update(User).where(User.employee_id == employee_id).values(employee_id=None)
    )
    await db.execute(
        update(Department).where(Department.manager_id == employee_id).values(manager_id=None)
    )
    await db.delete(employee)
    await db.commit()
    logger.info("Deleted employee %d (%s)", employee_id, employee.full_name)
    return DeleteResponse(success=True, message=f"Employee '{employee.full_name}' deleted")
