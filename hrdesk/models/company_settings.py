"""
Company settings model — singleton table.

Only one row should ever exist. The admin updates it via the settings API.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, String

from hrdesk.db.base import Base


class CompanySettings(Base):
    __tablename__ = "settings"

    id: int = Column(Integer, primary_key=True, default=1)  # type: ignore[assignment]
    company_name: str = Column(String(200), nullable=False, default="My Company")  # type: ignore[assignment]
    working_hours_per_day: int = Column(Integer, nullable=False, default=8)  # type: ignore[assignment]
