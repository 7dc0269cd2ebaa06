"""Tests for clock-in / clock-out and manual time entries."""

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import auth_headers, create_employee, create_user
from hrdesk.models.time_entry import TimeEntry
from hrdesk.services import timesheet as timesheet_service

TODAY = date(2025, 6, 2)


@pytest.fixture
def clock(monkeypatch):
    """Pin the local clock; set ``clock.now`` to move time forward."""

    class _Clock:
        now = "08:00"

    def _local_now():
        return TODAY, _Clock.now

    monkeypatch.setattr(timesheet_service, "local_now", _local_now)
    return _Clock


@pytest.mark.asyncio
async def test_clock_in_then_out_nine_hours(async_client: AsyncClient, staff_headers, clock):
    resp = await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    assert resp.status_code == 201
    assert resp.json()["clock_in"] == "08:00"
    assert resp.json()["date"] == TODAY.isoformat()

    clock.now = "17:00"
    out = await async_client.post(
        "/api/v1/timesheet/clock-out", json={"break_minutes": 0}, headers=staff_headers
    )
    assert out.status_code == 200
    assert out.json()["total_hours"] == 9.0
    assert out.json()["overtime_hours"] == 1.0


@pytest.mark.asyncio
async def test_immediate_clock_out_is_zero(async_client: AsyncClient, staff_headers, clock):
    await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    out = await async_client.post("/api/v1/timesheet/clock-out", headers=staff_headers)
    assert out.status_code == 200
    assert out.json()["total_hours"] == 0.0
    assert out.json()["overtime_hours"] == 0.0


@pytest.mark.asyncio
async def test_double_clock_in_conflicts(async_client: AsyncClient, staff_headers, clock):
    await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    again = await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    assert again.status_code == 400
    assert again.json()["detail"] == "Already clocked in today"


@pytest.mark.asyncio
async def test_clock_in_again_after_clock_out(async_client: AsyncClient, staff_headers, clock):
    await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    clock.now = "12:00"
    await async_client.post("/api/v1/timesheet/clock-out", headers=staff_headers)
    clock.now = "13:00"
    resp = await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_clock_out_without_clock_in(async_client: AsyncClient, staff_headers, clock):
    resp = await async_client.post("/api/v1/timesheet/clock-out", headers=staff_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No active clock-in found for today"


@pytest.mark.asyncio
async def test_clock_requires_linked_employee(async_client: AsyncClient, admin_headers, clock):
    resp = await async_client.post("/api/v1/timesheet/clock-in", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No employee profile linked to your account"
    out = await async_client.post("/api/v1/timesheet/clock-out", headers=admin_headers)
    assert out.status_code == 400


@pytest.mark.asyncio
async def test_list_shows_open_and_closed_states(async_client: AsyncClient, staff_headers, clock):
    await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    open_list = await async_client.get("/api/v1/timesheet", headers=staff_headers)
    entry = open_list.json()[0]
    assert entry["state"] == "open"
    assert "clock_out" not in entry
    assert "total_hours" not in entry

    clock.now = "16:30"
    await async_client.post(
        "/api/v1/timesheet/clock-out", json={"break_minutes": 30}, headers=staff_headers
    )
    closed_list = await async_client.get("/api/v1/timesheet", headers=staff_headers)
    entry = closed_list.json()[0]
    assert entry["state"] == "closed"
    assert entry["clock_out"] == "16:30"
    assert entry["break_minutes"] == 30
    assert entry["total_hours"] == 8.0
    assert entry["first_name"] == "Grace"


@pytest.mark.asyncio
async def test_employee_sees_only_own_entries(
    async_client: AsyncClient, db_session: AsyncSession, staff_headers, staff_employee, admin_headers
):
    other = await create_employee(db_session, first_name="Other")
    for employee_id in (staff_employee.id, other.id):
        await async_client.post(
            "/api/v1/timesheet",
            json={"employee_id": employee_id, "date": "2025-06-02", "clock_in": "09:00", "clock_out": "17:00"},
            headers=admin_headers,
        )

    own = await async_client.get(f"/api/v1/timesheet?employee_id={other.id}", headers=staff_headers)
    assert {e["employee_id"] for e in own.json()} == {staff_employee.id}

    filtered = await async_client.get(f"/api/v1/timesheet?employee_id={other.id}", headers=admin_headers)
    assert {e["employee_id"] for e in filtered.json()} == {other.id}


@pytest.mark.asyncio
async def test_employee_without_profile_sees_nothing(async_client: AsyncClient, db_session: AsyncSession):
    user = await create_user(db_session, "loose@example.com")
    resp = await async_client.get("/api/v1/timesheet", headers=auth_headers(user))
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_list_date_range(async_client: AsyncClient, staff_employee, manager_headers):
    for day in ("2025-06-01", "2025-06-05", "2025-06-10"):
        await async_client.post(
            "/api/v1/timesheet",
            json={"employee_id": staff_employee.id, "date": day, "clock_in": "09:00", "clock_out": "10:00"},
            headers=manager_headers,
        )
    resp = await async_client.get(
        "/api/v1/timesheet?start_date=2025-06-02&end_date=2025-06-10", headers=manager_headers
    )
    assert [e["date"] for e in resp.json()] == ["2025-06-10", "2025-06-05"]


@pytest.mark.asyncio
async def test_manual_entry_computes_totals(async_client: AsyncClient, staff_employee, manager_headers):
    resp = await async_client.post(
        "/api/v1/timesheet",
        json={
            "employee_id": staff_employee.id,
            "date": "2025-06-03",
            "clock_in": "08:00",
            "clock_out": "18:00",
            "break_minutes": 30,
            "notes": "release day",
        },
        headers=manager_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["state"] == "closed"
    assert data["total_hours"] == 9.5
    assert data["overtime_hours"] == 1.5


@pytest.mark.asyncio
async def test_manual_open_entry_conflicts_with_open_entry(
    async_client: AsyncClient, staff_employee, manager_headers
):
    body = {"employee_id": staff_employee.id, "date": "2025-06-03", "clock_in": "08:00"}
    first = await async_client.post("/api/v1/timesheet", json=body, headers=manager_headers)
    assert first.status_code == 201
    assert first.json()["state"] == "open"
    second = await async_client.post("/api/v1/timesheet", json=body, headers=manager_headers)
    assert second.status_code == 400


@pytest.mark.asyncio
async def test_manual_entry_validation(async_client: AsyncClient, staff_employee, manager_headers):
    bad_time = await async_client.post(
        "/api/v1/timesheet",
        json={"employee_id": staff_employee.id, "date": "2025-06-03", "clock_in": "25:00"},
        headers=manager_headers,
    )
    assert bad_time.status_code == 400

    unknown = await async_client.post(
        "/api/v1/timesheet",
        json={"employee_id": 9999, "date": "2025-06-03", "clock_in": "08:00"},
        headers=manager_headers,
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_manual_entry_and_delete_are_privileged(async_client: AsyncClient, staff_employee, staff_headers, manager_headers):
    forbidden = await async_client.post(
        "/api/v1/timesheet",
        json={"employee_id": staff_employee.id, "date": "2025-06-03", "clock_in": "08:00"},
        headers=staff_headers,
    )
    assert forbidden.status_code == 403

    created = await async_client.post(
        "/api/v1/timesheet",
        json={"employee_id": staff_employee.id, "date": "2025-06-03", "clock_in": "08:00"},
        headers=manager_headers,
    )
    entry_id = created.json()["id"]
    assert (await async_client.delete(f"/api/v1/timesheet/{entry_id}", headers=staff_headers)).status_code == 403
    assert (await async_client.delete(f"/api/v1/timesheet/{entry_id}", headers=manager_headers)).status_code == 200
    assert (await async_client.delete(f"/api/v1/timesheet/{entry_id}", headers=manager_headers)).status_code == 404


@pytest.mark.asyncio
async def test_null_break_counts_as_zero(
    async_client: AsyncClient, staff_employee, staff_headers, manager_headers, clock
):
    await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    clock.now = "17:00"
    out = await async_client.post(
        "/api/v1/timesheet/clock-out", json={"break_minutes": None}, headers=staff_headers
    )
    assert out.status_code == 200
    assert out.json()["break_minutes"] == 0
    assert out.json()["total_hours"] == 9.0

    manual = await async_client.post(
        "/api/v1/timesheet",
        json={
            "employee_id": staff_employee.id,
            "date": "2025-06-03",
            "clock_in": "09:00",
            "clock_out": "17:00",
            "break_minutes": None,
        },
        headers=manager_headers,
    )
    assert manual.status_code == 201
    assert manual.json()["break_minutes"] == 0
    assert manual.json()["total_hours"] == 8.0


@pytest.mark.asyncio
async def test_open_entry_index_turns_race_into_conflict(
    async_client: AsyncClient, db_session: AsyncSession, staff_employee, staff_headers, clock, monkeypatch
):
    """When the lookup misses a concurrent open entry, the unique index still refuses it."""
    from hrdesk.api.v1.endpoints import timesheet as timesheet_endpoints

    db_session.add(TimeEntry(employee_id=staff_employee.id, date=TODAY, clock_in="07:30"))
    await db_session.commit()

    async def _no_open_entry(*_args):
        return None

    monkeypatch.setattr(timesheet_endpoints, "_open_entry", _no_open_entry)
    resp = await async_client.post("/api/v1/timesheet/clock-in", headers=staff_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Already clocked in today"

    rows = (
        await db_session.execute(select(TimeEntry).where(TimeEntry.employee_id == staff_employee.id))
    ).scalars().all()
    assert [r.clock_in for r in rows] == ["07:30"]
