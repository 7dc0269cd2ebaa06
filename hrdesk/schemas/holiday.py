"""Pydantic schemas for leave requests and balances."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel


class HolidayCreate(BaseModel):
    employee_id: int | None = None  # defaults to the caller's own employee
    start_date: date
    end_date: date
    type: str = "annual"
    notes: str | None = None


class HolidayUpdate(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
    type: str | None = None
    notes: str | None = None
    status: str | None = None


class HolidayRead(BaseModel):
    id: int
    employee_id: int
    employee_name: str = "Unknown"
    start_date: date
    end_date: date
    days: int
    type: str
    notes: str | None
    status: str
    created_at: datetime | None

    model_config = {"from_attributes": True}


class LeaveSummary(BaseModel):
    employee_id: int
    year: int
    allowance: int
    used: int
    remaining: int
