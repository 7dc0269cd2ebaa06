"""Pydantic schemas for User CRUD."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

VALID_ROLES = ("admin", "manager", "employee")


def _check_role(v: str | None) -> str | None:
    if v is not None and v not in VALID_ROLES:
        raise ValueError(f"Role must be one of: {', '.join(VALID_ROLES)}")
    return v


def _normalise_email(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Invalid email address")
    return v


class UserCreate(BaseModel):
    email: str
    password: str
    role: str = "employee"
    employee_id: int | None = None

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str | None) -> str | None:
        return _check_role(v)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str | None) -> str | None:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password must not be empty")
        return v


class UserUpdate(BaseModel):
    email: str | None = None
    password: str | None = None
    role: str | None = None
    employee_id: int | None = None

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str | None) -> str | None:
        return _check_role(v)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str | None) -> str | None:
        return _normalise_email(v)


class UserRead(BaseModel):
    id: int
    email: str
    role: str
    employee_id: int | None
    last_login: datetime | None
    created_at: datetime | None
    first_name: str | None = None  # joined from employee table
    last_name: str | None = None

    model_config = {"from_attributes": True}
