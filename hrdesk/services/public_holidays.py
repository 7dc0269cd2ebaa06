"""
Public holiday directory: a single sorted list of ``{date, name}`` pairs.

The list can be edited by hand or replaced wholesale from the Nager.Date
API (https://date.nager.at). A refresh is all-or-nothing: the first failed
year aborts it and the stored list is left untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.core.exceptions import PublicHolidayFetchError
from hrdesk.models.public_holiday import PublicHolidayDirectory

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "Ireland"

COUNTRY_NAMES = {
    "IE": "Ireland",
    "GB": "United Kingdom",
    "US": "United States",
    "DE": "Germany",
    "FR": "France",
}


def _sorted(holidays: Iterable[dict]) -> list[dict]:
    return sorted(holidays, key=lambda h: h["date"])


async def get_directory(db: AsyncSession) -> PublicHolidayDirectory | None:
    result = await db.execute(select(PublicHolidayDirectory).limit(1))
    return result.scalar_one_or_none()


async def get_or_create_directory(db: AsyncSession) -> PublicHolidayDirectory:
    """Fetch the singleton row, adding an empty one to the session if absent."""
    directory = await get_directory(db)
    if directory is None:
        directory = PublicHolidayDirectory(id=1, country=DEFAULT_COUNTRY, holidays=[])
        db.add(directory)
    return directory


async def get_holiday_dates(db: AsyncSession) -> set[str]:
    """Snapshot of every listed date, read once per working-day computation."""
    directory = await get_directory(db)
    if directory is None:
        return set()
    return {h["date"] for h in directory.holidays or []}


def holidays_for_year(directory: PublicHolidayDirectory | None, year: int | str) -> list[dict]:
    if directory is None:
        return []
    prefix = str(year)
    return [h for h in directory.holidays or [] if h["date"].startswith(prefix)]


async def add_holiday(db: AsyncSession, date_str: str, name: str) -> dict:
    directory = await get_or_create_directory(db)
    entry = {"date": date_str, "name": name}
    directory.holidays = _sorted([*(directory.holidays or []), entry])
    await db.commit()
    logger.info("Public holiday added: %s (%s)", date_str, name)
    return entry


async def remove_holiday(db: AsyncSession, date_str: str) -> int:
    """Drop every entry on *date_str*; returns how many were removed."""
    directory = await get_directory(db)
    if directory is None:
        return 0
    current = directory.holidays or []
    kept = [h for h in current if h["date"] != date_str]
    directory.holidays = kept
    await db.commit()
    removed = len(current) - len(kept)
    logger.info("Public holiday %s removed (%d entries)", date_str, removed)
    return removed


async def fetch_public_holidays(
    client: httpx.AsyncClient,
    country: str,
    years: Iterable[int],
) -> list[dict]:
    """Download the holidays for every year, sorted by date.

    Raises :class:`PublicHolidayFetchError` on the first failure.
    """
    collected: list[dict] = []
    for year in years:
        try:
            response = await client.get(f"/PublicHolidays/{year}/{country}")
        except httpx.HTTPError as exc:
            raise PublicHolidayFetchError(f"Failed to fetch public holidays: {exc}") from exc
        if response.status_code != 200:
            raise PublicHolidayFetchError(
                f"Failed to fetch public holidays: API returned status {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise PublicHolidayFetchError(f"Failed to fetch public holidays: {exc}") from exc
        for item in payload:
            collected.append({"date": item["date"], "name": item.get("localName") or item["name"]})
    return _sorted(collected)


async def refresh(
    db: AsyncSession,
    client: httpx.AsyncClient,
    country: str,
    years: list[int] | None = None,
) -> tuple[list[dict], list[int]]:
    """Replace the whole list with the external source's result."""
    if not years:
        current_year = datetime.now().year
        years = [current_year, current_year + 1]

    try:
        holidays = await fetch_public_holidays(client, country, years)
    except PublicHolidayFetchError:
        logger.error("Public holiday refresh failed for %s %s", country, years)
        raise

    directory = await get_or_create_directory(db)
    directory.country = COUNTRY_NAMES.get(country, country)
    directory.last_updated = datetime.now(timezone.utc)
    directory.holidays = holidays
    await db.commit()
    logger.info("Public holidays refreshed: %d entries for %s %s", len(holidays), country, years)
    return holidays, years
