"""Tests for leave requests and the leave summary."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import create_employee
from hrdesk.models.public_holiday import PublicHolidayDirectory


async def _book(client: AsyncClient, headers, **body):
    return await client.post("/api/v1/holidays", json=body, headers=headers)


@pytest.mark.asyncio
async def test_book_working_week_and_summary(async_client: AsyncClient, staff_headers, staff_employee):
    """A Mon–Fri booking is 5 days and shows up in the yearly summary."""
    resp = await _book(async_client, staff_headers, start_date="2025-06-02", end_date="2025-06-06")
    assert resp.status_code == 201
    data = resp.json()
    assert data["employee_id"] == staff_employee.id
    assert data["days"] == 5
    assert data["status"] == "approved"
    assert data["type"] == "annual"
    assert data["employee_name"] == "Grace Hopper"

    summary = await async_client.get(
        f"/api/v1/holidays/summary/{staff_employee.id}?year=2025", headers=staff_headers
    )
    assert summary.status_code == 200
    assert summary.json() == {
        "employee_id": staff_employee.id,
        "year": 2025,
        "allowance": 25,
        "used": 5,
        "remaining": 20,
    }


@pytest.mark.asyncio
async def test_public_holiday_excluded_from_days(
    async_client: AsyncClient, db_session: AsyncSession, staff_headers
):
    db_session.add(
        PublicHolidayDirectory(
            id=1, country="Ireland", holidays=[{"date": "2025-01-01", "name": "New Year"}]
        )
    )
    await db_session.commit()
    resp = await _book(async_client, staff_headers, start_date="2024-12-30", end_date="2025-01-01")
    assert resp.status_code == 201
    assert resp.json()["days"] == 2


@pytest.mark.asyncio
async def test_non_annual_leave_not_counted(async_client: AsyncClient, staff_headers, staff_employee):
    await _book(
        async_client, staff_headers, start_date="2025-03-03", end_date="2025-03-04", type="sick"
    )
    summary = await async_client.get(
        f"/api/v1/holidays/summary/{staff_employee.id}?year=2025", headers=staff_headers
    )
    assert summary.json()["used"] == 0


@pytest.mark.asyncio
async def test_employee_cannot_book_for_others(
    async_client: AsyncClient, db_session: AsyncSession, staff_headers
):
    other = await create_employee(db_session, first_name="Other")
    resp = await _book(
        async_client, staff_headers,
        employee_id=other.id, start_date="2025-06-02", end_date="2025-06-02",
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_manager_books_for_anyone(
    async_client: AsyncClient, db_session: AsyncSession, manager_headers
):
    other = await create_employee(db_session, first_name="Other")
    resp = await _book(
        async_client, manager_headers,
        employee_id=other.id, start_date="2025-06-02", end_date="2025-06-02",
    )
    assert resp.status_code == 201
    assert resp.json()["employee_id"] == other.id


@pytest.mark.asyncio
async def test_missing_employee_or_dates(async_client: AsyncClient, manager_headers):
    """A manager with no linked employee must name one; dates are required."""
    no_target = await _book(async_client, manager_headers, start_date="2025-06-02", end_date="2025-06-02")
    assert no_target.status_code == 400

    no_dates = await _book(async_client, manager_headers, employee_id=1)
    assert no_dates.status_code == 400


@pytest.mark.asyncio
async def test_unknown_employee(async_client: AsyncClient, manager_headers):
    resp = await _book(
        async_client, manager_headers, employee_id=9999, start_date="2025-06-02", end_date="2025-06-02"
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_reversed_range_books_zero_days(async_client: AsyncClient, staff_headers):
    resp = await _book(async_client, staff_headers, start_date="2025-06-06", end_date="2025-06-02")
    assert resp.status_code == 201
    assert resp.json()["days"] == 0


@pytest.mark.asyncio
async def test_update_recomputes_days(async_client: AsyncClient, staff_headers):
    created = await _book(async_client, staff_headers, start_date="2025-06-02", end_date="2025-06-06")
    hid = created.json()["id"]

    resp = await async_client.put(
        f"/api/v1/holidays/{hid}", json={"end_date": "2025-06-03"}, headers=staff_headers
    )
    assert resp.status_code == 200
    assert resp.json()["days"] == 2
    assert resp.json()["start_date"] == "2025-06-02"

    notes_only = await async_client.put(
        f"/api/v1/holidays/{hid}", json={"notes": "dentist"}, headers=staff_headers
    )
    assert notes_only.json()["notes"] == "dentist"
    assert notes_only.json()["days"] == 2


@pytest.mark.asyncio
async def test_employee_cannot_edit_or_delete_others(
    async_client: AsyncClient, db_session: AsyncSession, manager_headers, staff_headers
):
    other = await create_employee(db_session, first_name="Other")
    created = await _book(
        async_client, manager_headers,
        employee_id=other.id, start_date="2025-06-02", end_date="2025-06-02",
    )
    hid = created.json()["id"]

    edit = await async_client.put(
        f"/api/v1/holidays/{hid}", json={"notes": "x"}, headers=staff_headers
    )
    assert edit.status_code == 403
    delete = await async_client.delete(f"/api/v1/holidays/{hid}", headers=staff_headers)
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_delete_own_and_missing(async_client: AsyncClient, staff_headers):
    created = await _book(async_client, staff_headers, start_date="2025-06-02", end_date="2025-06-02")
    hid = created.json()["id"]
    resp = await async_client.delete(f"/api/v1/holidays/{hid}", headers=staff_headers)
    assert resp.status_code == 200
    again = await async_client.delete(f"/api/v1/holidays/{hid}", headers=staff_headers)
    assert again.status_code == 404
    missing_update = await async_client.put(
        f"/api/v1/holidays/{hid}", json={"notes": "x"}, headers=staff_headers
    )
    assert missing_update.status_code == 404


@pytest.mark.asyncio
async def test_list_filters_by_year_and_month(async_client: AsyncClient, staff_headers, staff_employee):
    await _book(async_client, staff_headers, start_date="2025-03-03", end_date="2025-03-04")
    await _book(async_client, staff_headers, start_date="2025-11-03", end_date="2025-11-04")
    await _book(async_client, staff_headers, start_date="2024-03-04", end_date="2024-03-05")

    all_rows = await async_client.get(
        f"/api/v1/holidays?employee_id={staff_employee.id}", headers=staff_headers
    )
    assert [h["start_date"] for h in all_rows.json()] == ["2025-11-03", "2025-03-03", "2024-03-04"]

    year = await async_client.get("/api/v1/holidays?year=2025", headers=staff_headers)
    assert len(year.json()) == 2

    march = await async_client.get("/api/v1/holidays?month=3", headers=staff_headers)
    assert len(march.json()) == 2

    march_2025 = await async_client.get("/api/v1/holidays?year=2025&month=03", headers=staff_headers)
    assert [h["start_date"] for h in march_2025.json()] == ["2025-03-03"]


@pytest.mark.asyncio
async def test_summary_unknown_employee(async_client: AsyncClient, staff_headers):
    resp = await async_client.get("/api/v1/holidays/summary/9999", headers=staff_headers)
    assert resp.status_code == 404
