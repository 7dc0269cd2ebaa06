"""
Auth endpoints — login, logout and the current-user profile.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_current_user, get_db
from hrdesk.core.config import settings
from hrdesk.core.exceptions import AuthenticationError
from hrdesk.core.security import create_access_token, verify_password
from hrdesk.models.department import Department
from hrdesk.models.employee import Employee
from hrdesk.models.user import User
from hrdesk.schemas.common import MessageResponse
from hrdesk.schemas.employee import EmployeeRead
from hrdesk.schemas.token import CurrentUser, LoginRequest, LoginResponse

# Rate limiter keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


async def _linked_employee(db: AsyncSession, employee_id: int | None) -> EmployeeRead | None:
    """Load the user's employee profile together with its department name."""
    if employee_id is None:
        return None
    result = await db.execute(
        select(Employee, Department.name)
        .outerjoin(Department, Employee.department_id == Department.id)
        .where(Employee.id == employee_id)
    )
    row = result.first()
    if row is None:
        return None
    employee, department_name = row
    read = EmployeeRead.model_validate(employee)
    read.department_name = department_name
    return read


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Authenticate with email/password. Sets an HttpOnly session cookie."""
    result = await db.execute(select(User).where(User.email == body.email.lower().strip()))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")

    user.last_login = datetime.now(timezone.utc)
    await db.commit()

    access_token = create_access_token(user)
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,  # Set to True in HTTPS production
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info("User %d logged in", user.id)

    return LoginResponse(
        access_token=access_token,
        user=CurrentUser(
            id=user.id,
            email=user.email,
            role=user.role,
            employee_id=user.employee_id,
            employee=await _linked_employee(db, user.employee_id),
        ),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookie."""
    response.delete_cookie("access_token")
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=CurrentUser)
async def read_current_user(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Return profile of the currently authenticated user."""
    return CurrentUser(
        id=current_user.id,
        email=current_user.email,
        role=current_user.role,
        employee_id=current_user.employee_id,
        employee=await _linked_employee(db, current_user.employee_id),
    )
