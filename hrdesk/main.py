"""
HRDesk — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrdesk.api.v1.api import api_router
from hrdesk.api.v1.endpoints.auth import limiter
from hrdesk.core.config import settings
from hrdesk.core.exceptions import register_exception_handlers
from hrdesk.core.security import get_password_hash
from hrdesk.db.base import Base
from hrdesk.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from hrdesk.models.company_settings import CompanySettings
from hrdesk.models.department import Department
from hrdesk.models.employee import Employee  # noqa: F401
from hrdesk.models.holiday import Holiday  # noqa: F401
from hrdesk.models.public_holiday import PublicHolidayDirectory  # noqa: F401
from hrdesk.models.time_entry import TimeEntry  # noqa: F401
from hrdesk.models.user import User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS = ["Engineering", "Human Resources", "Sales", "Marketing", "Finance"]


async def seed_defaults(session: AsyncSession) -> None:
    """First-run data: admin account, starter departments, settings row."""
    admin_email = settings.FIRST_ADMIN_EMAIL.strip().lower()
    result = await session.execute(select(User).where(User.email == admin_email))
    if result.scalar_one_or_none() is None:
        session.add(
            User(
                email=admin_email,
                hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                role="admin",
            )
        )
        logger.info(
            "Default admin created: %s (password: <redacted>)",
            admin_email,
        )

    department_count = await session.scalar(select(func.count(Department.id)))
    if not department_count:
        session.add_all(Department(name=name) for name in DEFAULT_DEPARTMENTS)
        logger.info("Default departments created")

    company = await session.execute(select(CompanySettings.id).limit(1))
    if company.scalar_one_or_none() is None:
        session.add(CompanySettings(id=1, company_name="My Company", working_hours_per_day=8))
        logger.info("Default settings created")

    await session.commit()


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        await seed_defaults(session)

    logger.info("HRDesk v%s started", settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee records, leave and time & attendance",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Login rate limiting
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Serve the single-page client if one is bundled (catch-all mount, must be last)
    frontend_dir = Path(__file__).resolve().parent.parent / "frontend"
    if frontend_dir.is_dir():
        application.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )
        logger.info("Frontend mounted from %s", frontend_dir)

    return application


app = create_app()
