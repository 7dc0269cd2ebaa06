"""
Public holiday directory — singleton row holding the whole list.

``holidays`` is a JSON list of ``{"date": "YYYY-MM-DD", "name": str}``
kept sorted by date. It is always replaced wholesale, never mutated in
place, so the ORM sees every change.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String

from hrdesk.db.base import Base


class PublicHolidayDirectory(Base):
    __tablename__ = "public_holidays"

    id: int = Column(Integer, primary_key=True, default=1)  # type: ignore[assignment]
    country: str = Column(String(100), nullable=False, default="Ireland")  # type: ignore[assignment]
    last_updated: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    holidays: list[dict] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
