"""
Public holiday directory endpoints.

Reads are open to any authenticated user; edits and the refresh from the
external source are admin only.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_current_user, get_db, get_holiday_client, require_admin
from hrdesk.core.config import settings
from hrdesk.models.user import User
from hrdesk.schemas.common import MessageResponse
from hrdesk.schemas.public_holiday import (
    PublicHoliday,
    PublicHolidayCreate,
    PublicHolidayList,
    RefreshRequest,
    RefreshResponse,
)
from hrdesk.services import public_holidays as directory_service

router = APIRouter(prefix="/public-holidays", tags=["public-holidays"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PublicHolidayList)
async def get_public_holidays(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> PublicHolidayList:
    directory = await directory_service.get_directory(db)
    if directory is None:
        return PublicHolidayList(country=directory_service.DEFAULT_COUNTRY, holidays=[])
    return PublicHolidayList(
        country=directory.country,
        last_updated=directory.last_updated,
        holidays=directory.holidays or [],
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_public_holidays(
    body: RefreshRequest | None = None,
    db: AsyncSession = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_holiday_client),
    _admin: User = Depends(require_admin),
) -> RefreshResponse:
    """Replace the list with the external source's holidays for the given years."""
    country = (body.country if body and body.country else settings.DEFAULT_COUNTRY_CODE).upper()
    years = body.years if body else None
    holidays, years = await directory_service.refresh(db, client, country, years)
    return RefreshResponse(
        message="Public holidays refreshed successfully",
        count=len(holidays),
        years=years,
    )


@router.get("/{year}", response_model=PublicHolidayList)
async def get_public_holidays_for_year(
    year: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> PublicHolidayList:
    directory = await directory_service.get_directory(db)
    country = directory.country if directory else directory_service.DEFAULT_COUNTRY
    return PublicHolidayList(
        country=country,
        last_updated=directory.last_updated if directory else None,
        holidays=directory_service.holidays_for_year(directory, year),
    )


@router.post("", response_model=PublicHoliday, status_code=201)
async def add_public_holiday(
    body: PublicHolidayCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> PublicHoliday:
    entry = await directory_service.add_holiday(db, body.date.isoformat(), body.name)
    return PublicHoliday(**entry)


@router.delete("/{date_str}", response_model=MessageResponse)
async def delete_public_holiday(
    date_str: str,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> MessageResponse:
    await directory_service.remove_holiday(db, date_str)
    return MessageResponse(message="Public holiday deleted")
