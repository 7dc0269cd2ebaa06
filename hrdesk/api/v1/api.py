"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from hrdesk.api.v1.endpoints import (
    auth,
    dashboard,
    departments,
    employees,
    holidays,
    public_holidays,
    settings,
    timesheet,
    users,
)

api_router = APIRouter()

# Auth (login, logout, current user)
api_router.include_router(auth.router)

# Administration
api_router.include_router(users.router)
api_router.include_router(settings.router)

# Organisation
api_router.include_router(departments.router)
api_router.include_router(employees.router)

# Leave and attendance
api_router.include_router(holidays.router)
api_router.include_router(public_holidays.router)
api_router.include_router(timesheet.router)

# Dashboard and health
api_router.include_router(dashboard.router)
