"""
Shared test fixtures for the HRDesk test suite.

Each test gets a fresh in-memory aiosqlite database; the app's ``get_db``
dependency is pointed at it. Auth goes through real JWTs.
"""

import os
import sys
from collections.abc import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hrdesk.api.v1.deps import get_db
from hrdesk.core.security import create_access_token, get_password_hash
from hrdesk.db.base import Base
from hrdesk.db.session import enable_sqlite_foreign_keys
from hrdesk.main import app
from hrdesk.models.employee import Employee
from hrdesk.models.user import User


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create all tables in a private in-memory database and wire it into the app."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ── Data helpers ────────────────────────────────────────────────────
async def create_employee(db: AsyncSession, **fields) -> Employee:
    defaults = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": f"{fields.get('first_name', 'ada').lower()}@example.com",
    }
    employee = Employee(**{**defaults, **fields})
    db.add(employee)
    await db.commit()
    await db.refresh(employee)
    return employee


async def create_user(
    db: AsyncSession,
    email: str,
    role: str = "employee",
    employee_id: int | None = None,
    password: str = "password123",
) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
        employee_id=employee_id,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
async def admin_headers(db_session: AsyncSession) -> dict[str, str]:
    return auth_headers(await create_user(db_session, "admin@example.com", role="admin"))


@pytest.fixture
async def manager_headers(db_session: AsyncSession) -> dict[str, str]:
    return auth_headers(await create_user(db_session, "manager@example.com", role="manager"))


@pytest.fixture
async def staff_employee(db_session: AsyncSession) -> Employee:
    return await create_employee(db_session, first_name="Grace", last_name="Hopper")


@pytest.fixture
async def staff_headers(db_session: AsyncSession, staff_employee: Employee) -> dict[str, str]:
    user = await create_user(
        db_session, "grace@example.com", role="employee", employee_id=staff_employee.id
    )
    return auth_headers(user)
