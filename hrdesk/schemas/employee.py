"""Pydantic schemas for Department and Employee."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator

from hrdesk.models.employee import DEFAULT_HOLIDAY_ALLOWANCE


def _required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


# ── Department ──────────────────────────────────────────────────────
class DepartmentCreate(BaseModel):
    name: str
    manager_id: int | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _required_text(v)


class DepartmentUpdate(BaseModel):
    name: str | None = None
    manager_id: int | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v)


class DepartmentRead(BaseModel):
    id: int
    name: str
    manager_id: int | None
    manager_name: str | None = None
    employee_count: int = 0
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── Employee ────────────────────────────────────────────────────────
class _EmployeeFields(BaseModel):
    employee_number: str | None = None
    phone: str | None = None
    department_id: int | None = None
    job_title: str | None = None
    start_date: date | None = None
    salary: float | None = None
    address: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None

    @field_validator(
        "employee_number",
        "phone",
        "department_id",
        "job_title",
        "start_date",
        "salary",
        "address",
        "emergency_contact_name",
        "emergency_contact_phone",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, v: object) -> object:
        # Forms send "" for fields left empty
        if isinstance(v, str) and not v.strip():
            return None
        return v


class EmployeeCreate(_EmployeeFields):
    first_name: str
    last_name: str
    email: str
    holiday_allowance: int = DEFAULT_HOLIDAY_ALLOWANCE
    status: str = "active"

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class EmployeeUpdate(_EmployeeFields):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    holiday_allowance: int | None = None
    status: str | None = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class EmployeeRead(BaseModel):
    id: int
    employee_number: str | None
    first_name: str
    last_name: str
    email: str
    phone: str | None
    department_id: int | None
    department_name: str | None = None  # joined from departments table
    job_title: str | None
    start_date: date | None
    salary: float | None
    holiday_allowance: int
    address: str | None
    emergency_contact_name: str | None
    emergency_contact_phone: str | None
    status: str
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}
