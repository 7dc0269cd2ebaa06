"""
TimeEntry model: one clock-in / clock-out pair.

An entry is *open* while ``clock_out`` is NULL. The partial unique index
allows at most one open entry per employee per date.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Column, Date, DateTime, Float, ForeignKey, Index, Integer,
                        String, text)

from hrdesk.db.base import Base


class TimeEntry(Base):
    __tablename__ = "time_entries"
    __table_args__ = (
        Index("ix_time_entries_employee_date", "employee_id", "date"),
        Index(
            "uq_time_entries_open_per_day",
            "employee_id",
            "date",
            unique=True,
            sqlite_where=text("clock_out IS NULL"),
            postgresql_where=text("clock_out IS NULL"),
        ),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    date: date = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    clock_in: str = Column(String(5), nullable=False)  # type: ignore[assignment]  # HH:MM
    clock_out: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]
    break_minutes: int = Column(Integer, nullable=False, default=0, server_default="0")  # type: ignore[assignment]
    total_hours: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    overtime_hours: float = Column(Float, nullable=False, default=0, server_default="0")  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_open(self) -> bool:
        return self.clock_out is None
