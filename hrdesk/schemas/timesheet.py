"""Pydantic schemas for time entries.

Entries are returned as a tagged union on ``state`` so an open entry can
never carry a clock-out or computed totals.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_hhmm(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not _HHMM_RE.match(v):
        raise ValueError("Time must be HH:MM (24-hour)")
    return v


def _break_or_zero(v: object) -> object:
    # null and "" mean no break
    if v is None or v == "":
        return 0
    return v


class TimeEntryCreate(BaseModel):
    employee_id: int
    date: date
    clock_in: str
    clock_out: str | None = None
    break_minutes: int = Field(default=0, ge=0)
    notes: str | None = None

    @field_validator("clock_in", "clock_out")
    @classmethod
    def _times(cls, v: str | None) -> str | None:
        return _check_hhmm(v)

    @field_validator("break_minutes", mode="before")
    @classmethod
    def _break(cls, v: object) -> object:
        return _break_or_zero(v)


class ClockOutRequest(BaseModel):
    break_minutes: int = Field(default=0, ge=0)

    @field_validator("break_minutes", mode="before")
    @classmethod
    def _break(cls, v: object) -> object:
        return _break_or_zero(v)


class _TimeEntryBase(BaseModel):
    id: int
    employee_id: int
    first_name: str | None = None  # joined from employee table
    last_name: str | None = None
    date: date
    clock_in: str
    break_minutes: int
    notes: str | None = None


class OpenTimeEntry(_TimeEntryBase):
    state: Literal["open"] = "open"


class ClosedTimeEntry(_TimeEntryBase):
    state: Literal["closed"] = "closed"
    clock_out: str
    total_hours: float
    overtime_hours: float


TimeEntryRead = Annotated[Union[OpenTimeEntry, ClosedTimeEntry], Field(discriminator="state")]


class ClockInResponse(BaseModel):
    id: int
    date: date
    clock_in: str


class ClockOutResponse(BaseModel):
    id: int
    clock_out: str
    break_minutes: int
    total_hours: float
    overtime_hours: float
