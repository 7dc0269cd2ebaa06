"""Pydantic schemas for login and the session token."""

from __future__ import annotations

from pydantic import BaseModel

from hrdesk.schemas.employee import EmployeeRead


class LoginRequest(BaseModel):
    email: str
    password: str


class CurrentUser(BaseModel):
    id: int
    email: str
    role: str
    employee_id: int | None
    employee: EmployeeRead | None = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: CurrentUser
