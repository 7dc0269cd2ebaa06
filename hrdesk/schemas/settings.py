"""Pydantic schemas for company settings and the dashboard."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CompanySettingsRead(BaseModel):
    company_name: str
    working_hours_per_day: int

    model_config = {"from_attributes": True}


class CompanySettingsUpdate(BaseModel):
    company_name: str | None = None
    working_hours_per_day: int | None = Field(default=None, ge=1, le=24)


class DashboardStats(BaseModel):
    total_employees: int
    on_holiday_today: int
    clocked_in_today: int
