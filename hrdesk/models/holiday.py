"""
A leave request. Requests are created already approved.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String

from hrdesk.db.base import Base


class Holiday(Base):
    __tablename__ = "holidays"
    __table_args__ = (Index("ix_holidays_employee_start", "employee_id", "start_date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    start_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    end_date: date = Column(Date, nullable=False)  # type: ignore[assignment]  # inclusive
    days: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    type: str = Column(String(30), nullable=False, default="annual", server_default="annual")  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False, default="approved", server_default="approved")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
