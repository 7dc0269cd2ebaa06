"""
Company settings endpoints — admin only.

Singleton pattern: only one row in ``settings``. GET retrieves it, PUT
updates it. If no row exists, one is created with defaults on first access.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.deps import get_db, require_admin
from hrdesk.models.company_settings import CompanySettings
from hrdesk.models.user import User
from hrdesk.schemas.settings import CompanySettingsRead, CompanySettingsUpdate

router = APIRouter(tags=["settings"])
logger = logging.getLogger(__name__)


async def get_or_create_settings(db: AsyncSession) -> CompanySettings:
    """Fetch the singleton settings row, creating it with defaults if absent."""
    result = await db.execute(select(CompanySettings).limit(1))
    company = result.scalar_one_or_none()
    if company is None:
        company = CompanySettings(id=1, company_name="My Company", working_hours_per_day=8)
        db.add(company)
        await db.commit()
        await db.refresh(company)
        logger.info("Created default company settings")
    return company


@router.get("/settings", response_model=CompanySettingsRead)
async def get_settings(
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> CompanySettings:
    return await get_or_create_settings(db)


@router.put("/settings", response_model=CompanySettingsRead)
async def update_settings(
    body: CompanySettingsUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> CompanySettings:
    """Update company name and/or working hours per day."""
    company = await get_or_create_settings(db)

    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    for field, value in changes.items():
        setattr(company, field, value)

    await db.commit()
    await db.refresh(company)
    logger.info("Company settings updated: %s", changes)
    return company
