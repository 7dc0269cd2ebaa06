"""
Department CRUD.

- GET operations require any authenticated user.
- POST / PUT require admin or manager.
- DELETE requires admin and is refused while employees are assigned.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_current_user, get_db, require_admin, require_privileged
from hrdesk.core.exceptions import ConflictError, NotFoundError
from hrdesk.models.department import Department
from hrdesk.models.employee import Employee
from hrdesk.models.user import User
from hrdesk.schemas.common import DeleteResponse
from hrdesk.schemas.employee import DepartmentCreate, DepartmentRead, DepartmentUpdate

router = APIRouter(prefix="/departments", tags=["departments"])
logger = logging.getLogger(__name__)


def _department_query():
    """Departments joined with their manager's name and active headcount."""
    headcount = (
        select(func.count(Employee.id))
        .where(Employee.department_id == Department.id, Employee.status == "active")
        .correlate(Department)
        .scalar_subquery()
    )
    manager = select(Employee).subquery()
    return (
        select(Department, manager.c.first_name, manager.c.last_name, headcount)
        .outerjoin(manager, Department.manager_id == manager.c.id)
        .order_by(Department.name)
    )


def _department_read(row) -> DepartmentRead:
    department, first_name, last_name, employee_count = row
    read = DepartmentRead.model_validate(department)
    if first_name is not None:
        read.manager_name = f"{first_name} {last_name}"
    read.employee_count = employee_count or 0
    return read


async def _load(db: AsyncSession, department_id: int) -> DepartmentRead:
    result = await db.execute(_department_query().where(Department.id == department_id))
    row = result.first()
    if row is None:
        raise NotFoundError("Department not found")
    return _department_read(row)


async def _ensure_manager_exists(db: AsyncSession, manager_id: int | None) -> None:
    if manager_id is None:
        return
    result = await db.execute(select(Employee.id).where(Employee.id == manager_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Manager employee not found")


@router.get("", response_model=list[DepartmentRead])
async def list_departments(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[DepartmentRead]:
    result = await db.execute(_department_query())
    return [_department_read(row) for row in result.all()]


@router.get("/{department_id}", response_model=DepartmentRead)
async def get_department(
    department_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> DepartmentRead:
    return await _load(db, department_id)


@router.post("", response_model=DepartmentRead, status_code=201)
async def create_department(
    body: DepartmentCreate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_privileged),
) -> DepartmentRead:
    await _ensure_manager_exists(db, body.manager_id)
    department = Department(name=body.name, manager_id=body.manager_id)
    db.add(department)
    await db.commit()
    logger.info("Created department %d (%s)", department.id, department.name)
    return await _load(db, department.id)


@router.put("/{department_id}", response_model=DepartmentRead)
async def update_department(
    department_id: int,
    body: DepartmentUpdate,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(require_privileged),
) -> DepartmentRead:
    result = await db.execute(select(Department).where(Department.id == department_id))
    department = result.scalar_one_or_none()
    if department is None:
        raise NotFoundError("Department not found")

    changes = body.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    if "manager_id" in changes:
        await _ensure_manager_exists(db, changes["manager_id"])

    for field, value in changes.items():
        setattr(department, field, value)

    await db.commit()
    logger.info("Updated department %d", department_id)
    return await _load(db, department_id)


@router.delete("/{department_id}", response_model=DeleteResponse)
async def delete_department(
    department_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DeleteResponse:
    result = await db.execute(select(Department).where(Department.id == department_id))
    department = result.scalar_one_or_none()
    if department is None:
        raise NotFoundError("Department not found")

    in_use = await db.execute(
        select(Employee.id).where(Employee.department_id == department_id).limit(1)
    )
    if in_use.scalar_one_or_none() is not None:
        raise ConflictError("Cannot delete department with employees")

    await db.delete(department)
    await db.commit()
    logger.info("Deleted department %d (%s)", department_id, department.name)
    return DeleteResponse(success=True, message="Department deleted")
