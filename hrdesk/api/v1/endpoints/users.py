"""
User account management — admin only.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_db, require_admin
from hrdesk.core.exceptions import ConflictError, NotFoundError
from hrdesk.core.security import get_password_hash
from hrdesk.models.employee import Employee
from hrdesk.models.user import User
from hrdesk.schemas.common import DeleteResponse
from hrdesk.schemas.user import UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


def _user_read(user: User, employee: Employee | None) -> UserRead:
    read = UserRead.model_validate(user)
    if employee is not None:
        read.first_name = employee.first_name
        read.last_name = employee.last_name
    return read


async def _get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _ensure_employee_exists(db: AsyncSession, employee_id: int | None) -> None:
    if employee_id is None:
        return
    result = await db.execute(select(Employee.id).where(Employee.id == employee_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Employee not found")


async def _commit_unique_email(db: AsyncSession) -> None:
    """Commit, turning a lost race on the unique email index into a conflict."""
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already exists")


@router.get("", response_model=list[UserRead])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> list[UserRead]:
    result = await db.execute(
        select(User, Employee)
        .outerjoin(Employee, User.employee_id == Employee.id)
        .order_by(User.email)
    )
    return [_user_read(user, employee) for user, employee in result.all()]


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> User:
    return await _get_user(db, user_id)


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> User:
    """Create a new user account."""
    existing = await db.execute(select(User.id).where(User.email == body.email))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Email already exists")
    await _ensure_employee_exists(db, body.employee_id)

    user = User(
        email=body.email,
        hashed_password=get_password_hash(body.password),
        role=body.role,
        employee_id=body.employee_id,
    )
    db.add(user)
    await _commit_unique_email(db)
    await db.refresh(user)
    logger.info("Created user %d (%s, role=%s)", user.id, user.email, user.role)
    return user


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> User:
    user = await _get_user(db, user_id)
    changes = body.model_dump(exclude_unset=True)

    email = changes.pop("email", None)
    if email is not None and email != user.email:
        clash = await db.execute(select(User.id).where(User.email == email))
        if clash.scalar_one_or_none() is not None:
            raise ConflictError("Email already exists")
        user.email = email

    password = changes.pop("password", None)
    if password:
        user.hashed_password = get_password_hash(password)

    if "employee_id" in changes:
        await _ensure_employee_exists(db, changes["employee_id"])

    for field, value in changes.items():
        if field == "role" and value is None:
            continue
        setattr(user, field, value)

    await _commit_unique_email(db)
    await db.refresh(user)
    logger.info("Updated user %d", user_id)
    return user


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DeleteResponse:
    user = await _get_user(db, user_id)
    await db.delete(user)
    await db.commit()
    logger.info("Deleted user %d", user_id)
    return DeleteResponse(success=True, message="User deleted")
