"""
Employee model — the owner of leave requests and time entries.

Holiday and TimeEntry rows reference ``employees.id`` with ON DELETE CASCADE;
the delete endpoint also removes them explicitly.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String

from hrdesk.db.base import Base

DEFAULT_HOLIDAY_ALLOWANCE = 25


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_number: str | None = Column(String(50), unique=True, nullable=True)  # type: ignore[assignment]
    first_name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    last_name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    department_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("departments.id"), nullable=True, index=True
    )
    job_title: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    start_date: date | None = Column(Date, nullable=True)  # type: ignore[assignment]
    salary: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    holiday_allowance: int = Column(  # type: ignore[assignment]
        Integer,
        nullable=False,
        default=DEFAULT_HOLIDAY_ALLOWANCE,
        server_default=str(DEFAULT_HOLIDAY_ALLOWANCE),
    )
    address: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    emergency_contact_name: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    emergency_contact_phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False, default="active", server_default="active")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
