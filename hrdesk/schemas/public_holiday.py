"""Pydantic schemas for the public holiday directory."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator


class PublicHoliday(BaseModel):
    date: str  # YYYY-MM-DD
    name: str


class PublicHolidayCreate(BaseModel):
    date: date
    name: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class PublicHolidayList(BaseModel):
    country: str
    last_updated: datetime | None = None
    holidays: list[PublicHoliday]


class RefreshRequest(BaseModel):
    country: str | None = None
    years: list[int] | None = None


class RefreshResponse(BaseModel):
    message: str
    count: int
    years: list[int]
